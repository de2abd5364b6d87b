"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for reqtree:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.reqtree/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Config file** -- A single :class:`~reqtree.models.ReqtreeConfig` JSON
  file storing defaults (snapshot location, default names, output format).
* **Precedence resolution** -- :func:`resolve_storage_path` merges the
  ``--storage`` flag, the ``REQTREE_STORAGE`` environment variable, the
  config file, and the built-in default.

All file writes use an atomic temp-file-then-rename strategy
(:func:`atomic_write`); the JSON snapshot storage reuses it so a crash in
the middle of a save never leaves a truncated collection file behind.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from reqtree.exceptions import ConfigError
from reqtree.models import ReqtreeConfig

_APP_NAME = "reqtree"
_CONFIG_FILENAME = "config.json"
_SNAPSHOT_FILENAME = "collections.json"
STORAGE_ENV_VAR = "REQTREE_STORAGE"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/reqtree/`` (default ``~/.config/reqtree/``).
    On macOS/Windows: ``~/.reqtree/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (snapshots, crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/reqtree/`` (default ``~/.local/share/reqtree/``).
    On macOS/Windows: ``~/.reqtree/data/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed and the exception propagates.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Config file ---


def _config_path() -> Path:
    """Path to the config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_config() -> ReqtreeConfig:
    """Load the configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~reqtree.models.ReqtreeConfig`, or a
        default instance when the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _config_path()
    if not path.is_file():
        return ReqtreeConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ReqtreeConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_config(config: ReqtreeConfig) -> None:
    """Persist the configuration atomically to disk."""
    data = config.model_dump(mode="json")
    atomic_write(_config_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def resolve_storage_path(
    cli_storage: Optional[str] = None,
    config: Optional[ReqtreeConfig] = None,
) -> Path:
    """Resolve where the collection snapshot lives.

    Precedence (high to low):
        1. ``cli_storage`` (the ``--storage`` flag)
        2. ``REQTREE_STORAGE`` environment variable
        3. ``storage_path`` in the config file
        4. ``<data_dir>/collections.json``

    Args:
        cli_storage: Explicit path from the command line.
        config: Already-loaded configuration; loaded from disk when omitted.

    Returns:
        The snapshot file path (parent directories are not created here).
    """
    if cli_storage:
        return Path(cli_storage).expanduser()

    env_storage = os.environ.get(STORAGE_ENV_VAR)
    if env_storage:
        return Path(env_storage).expanduser()

    if config is None:
        config = load_config()
    if config.storage_path:
        return Path(config.storage_path).expanduser()

    return get_data_dir() / _SNAPSHOT_FILENAME
