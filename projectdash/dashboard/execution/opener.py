"""Open-routing: turn a project and an open mode into one editor command.

Routing by remote type:

- **local**      -> ``open_folder(file URI)``, or ``add_to_workspace`` when
  the mode is ``ADD_TO_WORKSPACE``.
- **SSH**        -> ``open_folder(remote URI)`` when a folder is given,
  otherwise ``new_window(remote authority)``.
- **WSL**        -> ``open_folder(remote URI)``; UNC ``\\\\wsl$\\`` paths are
  rewritten to ``vscode-remote://wsl+`` first when enabled.
- **container**  -> like SSH, after the container name in the authority is
  replaced with its hex descriptor.

Remote projects ignore ``ADD_TO_WORKSPACE`` and open in the current window.
"""

from __future__ import annotations

import ntpath
import os
import posixpath
from pathlib import PurePosixPath, PureWindowsPath

from loguru import logger

from projectdash.dashboard.constants import (
    DEFAULT_CONTAINER_CONTEXT,
    DEV_CONTAINER_PREFIX,
    VSCODE_REMOTE_SCHEME,
    WSL_DEFAULT_REGEX,
)
from projectdash.dashboard.execution.files import get_folders_from_workspace_file, get_project_path_type
from projectdash.dashboard.execution.host import EditorHost, WorkspaceFolder, file_uri_to_path
from projectdash.dashboard.execution.remote import (
    get_container_hex,
    get_remote_type,
    parse_container_target,
    parse_ssh_target,
    wsl_unc_to_remote_uri,
)
from projectdash.dashboard.models.enums import OpenMode, ProjectPathType, RemoteType
from projectdash.dashboard.models.project import Project, sanitize_project_name


class NoWorkspaceOpenError(ValueError):
    """Raised when a relative project path has no workspace to resolve against."""


class InvalidRemotePathError(ValueError):
    """Raised when a remote project path cannot be parsed into a target."""


class NotAddableError(ValueError):
    """Raised when a project cannot be added to the workspace (plain files)."""


class AddToWorkspaceError(RuntimeError):
    """Raised when the editor refuses to add folders to the workspace."""


# -- Path helpers --------------------------------------------------------------


def is_absolute_path(path: str) -> bool:
    """Absolute in POSIX or Windows terms (project lists are shared across OSes)."""
    return posixpath.isabs(path) or ntpath.isabs(path)


def local_path_to_uri(path: str) -> str:
    """File URI for a local path.  A path that is already a URI is returned unchanged."""
    if "://" in path:
        return path
    if posixpath.isabs(path):
        return PurePosixPath(path).as_uri()
    return PureWindowsPath(path).as_uri()


def get_workspace_root(host: EditorHost) -> str | None:
    """Directory of the open workspace file, else the first workspace folder."""
    workspace_file = host.workspace_file()
    if workspace_file:
        return os.path.dirname(workspace_file)
    folders = host.workspace_folders()
    return folders[0] if folders else None


def resolve_project_path(path: str, host: EditorHost) -> str:
    """Trim ``path`` and anchor a relative local path at the workspace root.

    ``file://`` URIs are turned into local paths; other URIs are kept as is.

    Raises ``NoWorkspaceOpenError`` if the path is relative and nothing is open.
    """
    path = path.strip()
    if path.startswith("file://"):
        return file_uri_to_path(path)
    if get_remote_type(path) is not RemoteType.NONE or is_absolute_path(path) or "://" in path:
        return path

    root = get_workspace_root(host)
    if root is None:
        msg = f"Cannot open relative path {path!r}: no workspace is open."
        raise NoWorkspaceOpenError(msg)
    return os.path.normpath(os.path.join(root, path))


# -- Routing -------------------------------------------------------------------


async def open_project(
    project: Project,
    mode: OpenMode,
    host: EditorHost,
    *,
    prepend_wsl_url: bool = True,
    container_context: str = DEFAULT_CONTAINER_CONTEXT,
) -> None:
    """Dispatch exactly one editor command that opens ``project``."""
    path = resolve_project_path(project.path, host)
    remote_type = get_remote_type(path)
    new_window = mode is OpenMode.NEW_WINDOW
    logger.info("Opening {} ({}, remote={}, mode={})", project.name, path, remote_type, mode)

    if remote_type is RemoteType.NONE:
        if mode is OpenMode.ADD_TO_WORKSPACE:
            await add_to_workspace(project, path, host)
        else:
            await host.open_folder(local_path_to_uri(path), new_window=new_window)

    elif remote_type is RemoteType.SSH:
        ssh_target = parse_ssh_target(path)
        if ssh_target is None:
            msg = f"Not a valid SSH target: {path!r}"
            raise InvalidRemotePathError(msg)
        await _open_remote(path, has_folder=ssh_target.folder is not None, new_window=new_window, host=host)

    elif remote_type is RemoteType.WSL:
        if prepend_wsl_url and WSL_DEFAULT_REGEX.match(path):
            path = wsl_unc_to_remote_uri(path)
        await host.open_folder(path, new_window=new_window)

    elif remote_type is RemoteType.CONTAINER:
        container_target = parse_container_target(path)
        if container_target is None:
            msg = f"Not a valid container target: {path!r}"
            raise InvalidRemotePathError(msg)
        container_hex = get_container_hex(container_target.container_name, container_context)
        path = f"{DEV_CONTAINER_PREFIX}{container_hex}{container_target.folder or ''}"
        await _open_remote(path, has_folder=container_target.folder is not None, new_window=new_window, host=host)


async def _open_remote(path: str, *, has_folder: bool, new_window: bool, host: EditorHost) -> None:
    if has_folder:
        await host.open_folder(path, new_window=new_window)
    else:
        await host.new_window(path.removeprefix(VSCODE_REMOTE_SCHEME), reuse_window=not new_window)


async def add_to_workspace(project: Project, path: str, host: EditorHost) -> list[WorkspaceFolder]:
    """Append a local folder, or the folders of a workspace file, to the workspace.

    Folders already in the workspace are skipped.  Returns what was added.
    Raises ``NotAddableError`` for plain files, ``WorkspaceFileError`` for
    unreadable workspace files, and ``AddToWorkspaceError`` if the host refuses.
    """
    path_type = get_project_path_type(path)
    if path_type is ProjectPathType.FOLDER:
        candidates = [WorkspaceFolder(path=path, name=sanitize_project_name(project.name))]
    elif path_type is ProjectPathType.WORKSPACE_FILE:
        candidates = [WorkspaceFolder(path=str(p)) for p in get_folders_from_workspace_file(path)]
    else:
        msg = "A file project cannot be added to the workspace."
        raise NotAddableError(msg)

    open_folders = {os.path.normpath(f) for f in host.workspace_folders()}
    to_add = [f for f in candidates if os.path.normpath(f.path) not in open_folders]
    if not to_add:
        logger.info("{} is already part of the workspace", project.name)
        return []

    if not await host.add_workspace_folders(to_add):
        msg = "Could not add project to workspace."
        raise AddToWorkspaceError(msg)
    return to_add
