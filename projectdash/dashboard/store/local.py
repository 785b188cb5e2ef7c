"""Local filesystem stores.

Both backends are JSON documents on disk holding many keys, one of which is
the project list::

    {data_root}/state.json          {"projects": [...], "recentColors": [...]}
    {settings_file}                 {"dashboard.projectData": [...], ...}

Uses ``anyio.to_thread.run_sync`` for non-blocking file I/O.

Writes are atomic: data is written to a temporary file in the same directory,
then renamed to the target path.  This prevents corrupt reads if the process
crashes mid-write.
"""

from __future__ import annotations

import contextlib
import json
import os
import tempfile
from functools import partial
from pathlib import Path
from typing import Any

from anyio import to_thread
from loguru import logger

from projectdash.dashboard.constants import PROJECTS_KEY
from projectdash.dashboard.store.base import StoreReadError


class JsonDocumentStore:
    """A JSON object on disk, exposing its keys plus the ProjectStore protocol.

    Subclasses choose the document path and the key the project list lives
    under.  Every other key in the document is preserved on write.
    """

    projects_key: str = PROJECTS_KEY

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    # -- Key / value -----------------------------------------------------------

    async def get(self, key: str, default: Any = None) -> Any:
        document = await to_thread.run_sync(partial(_read_document, self._path))
        return document.get(key, default)

    async def update(self, key: str, value: Any) -> None:
        """Set ``key`` to ``value``; ``None`` removes the key."""
        document = await to_thread.run_sync(partial(_read_document, self._path))
        if value is None:
            document.pop(key, None)
        else:
            document[key] = value
        data = json.dumps(document, indent=2, ensure_ascii=False)
        await to_thread.run_sync(partial(_atomic_write, self._path, data))

    # -- ProjectStore ----------------------------------------------------------

    async def read_groups(self) -> list[Any] | None:
        value = await self.get(self.projects_key)
        if value is None:
            return None
        if not isinstance(value, list):
            logger.warning("Ignoring non-list project data under {!r} in {}", self.projects_key, self._path)
            return None
        return value

    async def write_groups(self, data: list[Any]) -> None:
        await self.update(self.projects_key, data)
        logger.debug("Wrote {} group(s) to {}", len(data), self._path)

    async def has_data(self) -> bool:
        groups = await self.read_groups()
        return bool(groups)


class GlobalStateStore(JsonDocumentStore):
    """The dashboard's own state document: ``{data_root}/state.json``."""

    def __init__(self, data_root: str | Path) -> None:
        super().__init__(Path(data_root) / "state.json")


# -- Sync helpers (run in thread pool) -----------------------------------------


def _read_document(path: Path) -> dict[str, Any]:
    """Read a JSON object.  A missing or empty file reads as ``{}``."""
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    if not raw.strip():
        return {}
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as exc:
        msg = f"{path} is not valid JSON: {exc}"
        raise StoreReadError(msg) from None
    if not isinstance(document, dict):
        msg = f"{path} must contain a JSON object"
        raise StoreReadError(msg)
    return document


def _atomic_write(path: Path, data: str) -> None:
    """Write data atomically: temp file + rename.

    Ensures readers never see a partially-written file.  The temp file is
    created in the same directory so ``os.replace`` is atomic on POSIX.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up temp file on any failure.
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise
