"""Shared test fixtures for reqtree.

Provides source documents loaded from ``tests/fixtures``, a small
hand-built forest with fixed ids, isolated XDG directories, and a reset of
the global output manager between tests.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from reqtree.models import Collection, Folder, KeyValue, Request
from reqtree.output import reset_output
from reqtree.storage import MemoryStorage
from reqtree.tree.repository import TreeRepository


FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> dict[str, Any]:
    """Load a JSON fixture by file name."""
    with open(FIXTURES_DIR / name, encoding="utf-8") as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; CliRunner swaps those streams per invocation. The
    ``reqtree`` logger is restored too, since the CLI callback reconfigures
    it and caplog relies on propagation.
    """
    yield
    reset_output()
    logger = logging.getLogger("reqtree")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ---------------------------------------------------------------------------
# Source documents
# ---------------------------------------------------------------------------


@pytest.fixture
def postman_raw() -> dict[str, Any]:
    return load_fixture("postman.json")


@pytest.fixture
def insomnia_raw() -> dict[str, Any]:
    return load_fixture("insomnia.json")


@pytest.fixture
def openapi3_raw() -> dict[str, Any]:
    return load_fixture("openapi3.json")


@pytest.fixture
def swagger2_raw() -> dict[str, Any]:
    return load_fixture("swagger2.json")


@pytest.fixture
def har_raw() -> dict[str, Any]:
    return load_fixture("har.json")


# ---------------------------------------------------------------------------
# Hand-built forest with stable ids
# ---------------------------------------------------------------------------


@pytest.fixture
def forest() -> list[Collection]:
    """Two collections with fixed ids.

    ``c1`` holds root request ``r1`` ("Login", one param), the empty folder
    ``f1`` and the folder ``f2`` containing ``r2``. ``c2`` holds ``r3``.
    """
    r1 = Request(
        id="r1",
        name="Login",
        method="POST",
        url="https://api.example.com/login",
        params=[KeyValue(name="x", value="1", enabled=True)],
        folder_path=["c1"],
    )
    r2 = Request(id="r2", name="Profile", folder_path=["c1", "f2"])
    r3 = Request(id="r3", name="Status", folder_path=["c2"])
    f1 = Folder(id="f1", name="Empty", parent_path=["c1"])
    f2 = Folder(id="f2", name="Account", parent_path=["c1"], items=[r2])
    c1 = Collection(id="c1", name="Main", items=[r1, f1, f2])
    c2 = Collection(id="c2", name="Ops", items=[r3])
    return [c1, c2]


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def repo(forest: list[Collection], memory_storage: MemoryStorage) -> TreeRepository:
    """A repository over :func:`forest` that persists to memory."""
    repository = TreeRepository(memory_storage, forest)
    yield repository
    repository.close()


# ---------------------------------------------------------------------------
# Isolated configuration directories
# ---------------------------------------------------------------------------


@pytest.fixture
def xdg_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> dict[str, Path]:
    """Point config and data directories at temporary locations."""
    config_home = tmp_path / "config"
    data_home = tmp_path / "data"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setenv("XDG_DATA_HOME", str(data_home))
    monkeypatch.delenv("REQTREE_STORAGE", raising=False)
    monkeypatch.setattr("reqtree.config._is_xdg_platform", lambda: True)
    return {"config": config_home / "reqtree", "data": data_home / "reqtree"}
