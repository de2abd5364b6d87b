"""Tests for reqtree.models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from reqtree.models import (
    AuthType,
    BodyType,
    Collection,
    Folder,
    KeyValue,
    Request,
    RequestAuth,
)


class TestRequestDefaults:
    def test_defaults(self) -> None:
        req = Request()
        assert req.kind == "request"
        assert req.name == "New Request"
        assert req.method == "GET"
        assert req.url == ""
        assert req.params == []
        assert req.headers == []
        assert req.body == ""
        assert req.body_type == BodyType.NONE
        assert req.folder_path == []
        assert req.auth == RequestAuth()
        assert req.auth.type == AuthType.NONE

    def test_ids_are_unique(self) -> None:
        assert Request().id != Request().id

    def test_method_is_upper_cased(self) -> None:
        assert Request(method="patch").method == "PATCH"

    def test_default_lists_are_not_shared(self) -> None:
        a, b = Request(), Request()
        a.params.append(KeyValue(name="x"))
        assert b.params == []


class TestAliases:
    def test_dump_uses_camel_case(self) -> None:
        req = Request(body_type=BodyType.JSON, folder_path=["c"])
        data = req.model_dump(mode="json", by_alias=True)
        assert data["bodyType"] == "json"
        assert data["folderPath"] == ["c"]
        assert "body_type" not in data

    def test_accepts_either_name(self) -> None:
        a = Request.model_validate({"bodyType": "xml", "folderPath": ["c"]})
        b = Request.model_validate({"body_type": "xml", "folder_path": ["c"]})
        assert a.body_type == b.body_type == BodyType.XML
        assert a.folder_path == b.folder_path == ["c"]

    def test_folder_parent_path_alias(self) -> None:
        folder = Folder(parent_path=["c"])
        assert folder.model_dump(by_alias=True)["parentPath"] == ["c"]

    def test_unknown_body_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Request.model_validate({"bodyType": "msgpack"})


class TestTaggedUnion:
    def test_items_discriminated_by_kind(self) -> None:
        data = {
            "id": "c1",
            "name": "C",
            "items": [
                {"kind": "request", "id": "r1", "name": "R"},
                {"kind": "folder", "id": "f1", "name": "F", "items": [
                    {"kind": "request", "id": "r2"},
                ]},
            ],
        }
        collection = Collection.model_validate(data)
        assert isinstance(collection.items[0], Request)
        assert isinstance(collection.items[1], Folder)
        assert isinstance(collection.items[1].items[0], Request)

    def test_collection_cannot_be_an_item(self) -> None:
        with pytest.raises(ValidationError):
            Collection.model_validate({"items": [{"kind": "collection"}]})

    def test_empty_folder_is_still_a_folder(self) -> None:
        collection = Collection.model_validate({"items": [{"kind": "folder"}]})
        assert isinstance(collection.items[0], Folder)
        assert collection.items[0].name == "New Folder"

    def test_round_trip_through_json(self, forest: list[Collection]) -> None:
        data = forest[0].model_dump(mode="json", by_alias=True)
        assert Collection.model_validate(data) == forest[0]


class TestContainerHelpers:
    def test_requests_and_folders(self, forest: list[Collection]) -> None:
        c1 = forest[0]
        assert [r.id for r in c1.requests()] == ["r1"]
        assert [f.id for f in c1.folders()] == ["f1", "f2"]

    def test_iter_requests_is_recursive(self, forest: list[Collection]) -> None:
        assert [r.id for r in forest[0].iter_requests()] == ["r1", "r2"]
