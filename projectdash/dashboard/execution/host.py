"""Editor host interface and its VS Code launcher implementation.

Open-routing never talks to the editor directly; it calls an ``EditorHost``
with one method per editor command.  ``CodeCliHost`` implements those
commands by running the ``code`` launcher; tests substitute a recording fake.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable
from urllib.parse import urlparse
from urllib.request import url2pathname

from anyio import run_process
from loguru import logger

from projectdash.dashboard.constants import WORKSPACE_FILE_SUFFIX
from projectdash.dashboard.execution.files import WorkspaceFileError, get_folders_from_workspace_file


class HostCommandError(RuntimeError):
    """Raised when the editor launcher cannot be run or reports failure."""


@dataclass(frozen=True)
class WorkspaceFolder:
    """A folder to add to the open workspace, with an optional display name."""

    path: str
    name: str | None = None


@runtime_checkable
class EditorHost(Protocol):
    """The editor commands and queries open-routing depends on."""

    async def open_folder(self, uri: str, *, new_window: bool) -> None:
        """Open a folder or workspace URI (``file://`` or ``vscode-remote://``)."""
        ...

    async def new_window(self, remote_authority: str, *, reuse_window: bool) -> None:
        """Open a window connected to a remote authority, without a folder."""
        ...

    async def add_workspace_folders(self, folders: list[WorkspaceFolder]) -> bool:
        """Append folders to the open workspace.  Returns whether the host accepted."""
        ...

    def workspace_file(self) -> str | None:
        """Path of the open ``.code-workspace`` file, if any."""
        ...

    def workspace_folders(self) -> list[str]:
        """Local paths of the folders in the open workspace."""
        ...


def file_uri_to_path(uri: str) -> str:
    """``file:///home/me/a%20b`` -> ``/home/me/a b``."""
    return url2pathname(urlparse(uri).path)


class CodeCliHost:
    """EditorHost backed by the VS Code command-line launcher.

    ``workspace`` stands in for the editor's currently open folder or
    workspace file, since a separate process cannot ask a running window.
    """

    def __init__(self, binary: str = "code", workspace: str | None = None) -> None:
        self._binary = binary
        self._workspace = Path(workspace).expanduser().resolve() if workspace else None

    # -- Queries ---------------------------------------------------------------

    def workspace_file(self) -> str | None:
        if self._workspace is not None and self._workspace.name.endswith(WORKSPACE_FILE_SUFFIX):
            return str(self._workspace)
        return None

    def workspace_folders(self) -> list[str]:
        if self._workspace is None:
            return []
        if self.workspace_file() is None:
            return [str(self._workspace)]
        try:
            return [str(p) for p in get_folders_from_workspace_file(self._workspace)]
        except WorkspaceFileError as exc:
            logger.warning("Open workspace file is unreadable: {}", exc)
            return []

    # -- Commands --------------------------------------------------------------

    async def open_folder(self, uri: str, *, new_window: bool) -> None:
        args = [self._binary, "--new-window" if new_window else "--reuse-window"]
        if uri.startswith("file://"):
            args.append(file_uri_to_path(uri))
        elif "://" not in uri:
            args.append(uri)
        elif uri.endswith(WORKSPACE_FILE_SUFFIX):
            args += ["--file-uri", uri]
        else:
            args += ["--folder-uri", uri]
        await self._run(args)

    async def new_window(self, remote_authority: str, *, reuse_window: bool) -> None:
        args = [self._binary, "--remote", remote_authority, "--reuse-window" if reuse_window else "--new-window"]
        await self._run(args)

    async def add_workspace_folders(self, folders: list[WorkspaceFolder]) -> bool:
        # The launcher has no way to name added folders; names only apply to
        # hosts that manage the workspace themselves.
        args = [self._binary, "--add", *(f.path for f in folders)]
        try:
            await self._run(args)
        except HostCommandError as exc:
            logger.warning("Adding folders to the workspace failed: {}", exc)
            return False
        return True

    async def _run(self, args: list[str]) -> None:
        logger.info("Running {}", shlex.join(args))
        try:
            result = await run_process(args, check=False)
        except OSError as exc:
            msg = f"Could not run {self._binary!r}: {exc}"
            raise HostCommandError(msg) from exc
        if result.returncode != 0:
            stderr = result.stderr.decode(errors="replace").strip()
            msg = f"{self._binary!r} exited with status {result.returncode}: {stderr}"
            raise HostCommandError(msg)
