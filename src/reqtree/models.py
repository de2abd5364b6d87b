"""Canonical Pydantic models shared across all reqtree modules.

This is the single source of truth for data shapes in the project. Every
importer converges on these models and the tree repository edits them. The
models fall into three groups:

**Tree models** -- the canonical collection tree:
    :class:`KeyValue`, :class:`BasicCredentials`, :class:`RequestAuth`,
    :class:`Request`, :class:`Folder`, :class:`Collection`, and the
    :data:`Item` tagged union.

**Tags** -- small string enums used for dispatch and addressing:
    :class:`BodyType`, :class:`AuthType`, :class:`ItemType`,
    :class:`SourceFormat`, :class:`HTTPMethod`.

**Configuration and storage results** -- :class:`OutputConfig`,
    :class:`ReqtreeConfig`, :class:`LoadResult`, :class:`SaveResult`.

Tree models serialise with camelCase aliases (``folderPath``,
``parentPath``, ``bodyType``) so that stored snapshots keep the shape used
by the desktop client the collections come from. Python code uses the
snake_case attribute names; ``populate_by_name`` accepts either on input.

Folders and requests are discriminated by an explicit ``kind`` literal
instead of by the presence of an ``items`` field.
"""

from __future__ import annotations

import enum
import uuid
from typing import Annotated, Iterator, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def new_id() -> str:
    """Return a fresh, globally unique node id (a UUID4 string)."""
    return str(uuid.uuid4())


# --- Tags ---


class BodyType(str, enum.Enum):
    """How the ``body`` text of a :class:`Request` is interpreted."""

    NONE = "none"
    JSON = "json"
    FORM_DATA = "form-data"
    FORM_URLENCODED = "form-urlencoded"
    GRAPHQL = "graphql"
    XML = "xml"
    YAML = "yaml"
    EDN = "edn"
    PLAIN_TEXT = "plain-text"
    FILE = "file"


class AuthType(str, enum.Enum):
    """Authentication schemes a request can carry."""

    NONE = "none"
    BEARER = "bearer"
    BASIC = "basic"


class ItemType(str, enum.Enum):
    """Addressing tag passed to the mutation API alongside an id and path."""

    COLLECTION = "collection"
    FOLDER = "folder"
    REQUEST = "request"


class SourceFormat(str, enum.Enum):
    """Result of format detection on an import source.

    ``YAML`` marks a file recognised only by its extension; its content has
    not been inspected yet. ``UNKNOWN`` is never resolved by guessing.
    """

    POSTMAN = "postman"
    INSOMNIA = "insomnia"
    SWAGGER = "swagger"
    HAR = "har"
    YAML = "yaml"
    UNKNOWN = "unknown"


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised as operations in Swagger/OpenAPI path items."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"
    TRACE = "trace"


# --- Tree models ---


class KeyValue(BaseModel):
    """A single query parameter or header row on a :class:`Request`."""

    name: str = ""
    value: str = ""
    enabled: bool = True


class BasicCredentials(BaseModel):
    """Username/password pair used by basic authentication."""

    username: str = ""
    password: str = ""


class RequestAuth(BaseModel):
    """Authentication descriptor attached to every :class:`Request`.

    Only the fields matching ``type`` are meaningful; the others keep their
    empty defaults so the shape is always complete.
    """

    type: AuthType = AuthType.NONE
    bearer: str = ""
    basic: BasicCredentials = Field(default_factory=BasicCredentials)


class Request(BaseModel):
    """One HTTP call definition -- a leaf of the collection tree.

    ``folder_path`` is the ordered chain of ancestor ids from the owning
    collection down to (excluding) the request itself: ``[collection_id]``
    for a request at a collection root and ``[collection_id, folder_id]``
    for a request inside a folder. A request that has not been placed in a
    tree yet (for example a freshly parsed cURL command) has an empty path.
    """

    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["request"] = "request"
    id: str = Field(default_factory=new_id)
    name: str = "New Request"
    method: str = "GET"
    url: str = ""
    params: list[KeyValue] = Field(default_factory=list)
    headers: list[KeyValue] = Field(default_factory=list)
    body: str = ""
    body_type: BodyType = Field(default=BodyType.NONE, alias="bodyType")
    folder_path: list[str] = Field(default_factory=list, alias="folderPath")
    auth: RequestAuth = Field(default_factory=RequestAuth)

    @field_validator("method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        return value.upper()


class _Container(BaseModel):
    """Fields and helpers shared by :class:`Folder` and :class:`Collection`."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=new_id)
    name: str = ""
    items: list[Item] = Field(default_factory=list)
    parent_path: list[str] = Field(default_factory=list, alias="parentPath")

    def requests(self) -> list[Request]:
        """Return the direct request children, in order."""
        return [item for item in self.items if isinstance(item, Request)]

    def folders(self) -> list[Folder]:
        """Return the direct folder children, in order."""
        return [item for item in self.items if isinstance(item, Folder)]

    def iter_requests(self) -> Iterator[Request]:
        """Yield every request below this node in document order."""
        for item in self.items:
            if isinstance(item, Request):
                yield item
            else:
                yield from item.iter_requests()


class Folder(_Container):
    """One level of grouping inside a :class:`Collection`.

    ``parent_path`` is ``[collection_id]`` for a folder placed in a tree.
    """

    kind: Literal["folder"] = "folder"
    name: str = "New Folder"


class Collection(_Container):
    """Top-level named root of a request tree.

    A collection is a root folder: its ``parent_path`` is always empty and it
    can never appear inside another collection's ``items``.
    """

    kind: Literal["collection"] = "collection"
    name: str = "New Collection"


Item = Annotated[Union[Folder, Request], Field(discriminator="kind")]
"""A child of a collection or folder: either a :class:`Folder` or a :class:`Request`."""

_Container.model_rebuild()
Folder.model_rebuild()
Collection.model_rebuild()


# --- Configuration ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`ReqtreeConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class ReqtreeConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/reqtree/config.json``.

    Loaded and saved by :func:`~reqtree.config.load_config` and
    :func:`~reqtree.config.save_config`. See
    :func:`~reqtree.config.resolve_storage_path` for how ``storage_path``
    interacts with the ``REQTREE_STORAGE`` environment variable and the
    ``--storage`` flag.
    """

    storage_path: Optional[str] = Field(
        default=None,
        description="Snapshot file; defaults to collections.json in the data dir",
    )
    default_collection_name: str = "New Collection"
    default_request_name: str = "New Request"
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Storage results ---


class LoadResult(BaseModel):
    """Outcome of :meth:`~reqtree.storage.Storage.load`."""

    success: bool
    collections: Optional[list[Collection]] = None
    error: Optional[str] = None


class SaveResult(BaseModel):
    """Outcome of :meth:`~reqtree.storage.Storage.save`."""

    success: bool
    error: Optional[str] = None
