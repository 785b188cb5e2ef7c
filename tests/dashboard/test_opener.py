"""Unit tests for open-routing against a recording editor host."""

from __future__ import annotations

import json
import sys

import pytest

from projectdash.dashboard.execution.files import WorkspaceFileError
from projectdash.dashboard.execution.host import WorkspaceFolder
from projectdash.dashboard.execution.opener import (
    AddToWorkspaceError,
    InvalidRemotePathError,
    NoWorkspaceOpenError,
    NotAddableError,
    open_project,
    resolve_project_path,
)
from projectdash.dashboard.execution.remote import get_container_hex
from projectdash.dashboard.models.enums import OpenMode
from projectdash.dashboard.models.project import Project


posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX file URIs")


def _project(path: str, name: str = "Proj") -> Project:
    return Project(id="p1", name=name, path=path)


# ---------------------------------------------------------------------------
# Local projects
# ---------------------------------------------------------------------------


async def test_open_local_current_window(host) -> None:
    await open_project(_project("/home/me/proj"), OpenMode.DEFAULT, host)
    assert host.calls == [("open_folder", "file:///home/me/proj", False)]


async def test_open_local_new_window(host) -> None:
    await open_project(_project("  /home/me/proj  "), OpenMode.NEW_WINDOW, host)
    assert host.calls == [("open_folder", "file:///home/me/proj", True)]


async def test_open_windows_path(host) -> None:
    await open_project(_project("C:\\work\\app"), OpenMode.DEFAULT, host)
    assert host.calls == [("open_folder", "file:///C:/work/app", False)]


async def test_relative_path_without_workspace_fails(host) -> None:
    with pytest.raises(NoWorkspaceOpenError):
        await open_project(_project("sub/proj"), OpenMode.DEFAULT, host)
    assert host.calls == []


async def test_relative_path_resolves_against_workspace_folder(host) -> None:
    host.folders = ["/work"]
    await open_project(_project("sub/../proj"), OpenMode.DEFAULT, host)
    assert host.calls == [("open_folder", "file:///work/proj", False)]


async def test_relative_path_prefers_workspace_file_directory(host) -> None:
    host.open_workspace_file = "/ws/all.code-workspace"
    host.folders = ["/elsewhere"]
    assert resolve_project_path("proj", host) == "/ws/proj"


def test_remote_paths_are_not_resolved(host) -> None:
    assert resolve_project_path("\\\\wsl$\\Ubuntu\\x", host) == "\\\\wsl$\\Ubuntu\\x"


@posix_only
async def test_open_file_uri(host) -> None:
    await open_project(_project(" file:///home/me/my%20proj "), OpenMode.DEFAULT, host)
    assert host.calls == [("open_folder", "file:///home/me/my%20proj", False)]


@posix_only
async def test_add_file_uri_folder_to_workspace(host, tmp_path) -> None:
    folder = tmp_path / "proj"
    folder.mkdir()
    await open_project(_project(folder.as_uri()), OpenMode.ADD_TO_WORKSPACE, host)
    assert host.calls == [("add_workspace_folders", [WorkspaceFolder(path=str(folder), name="Proj")])]


async def test_unsupported_uri_is_passed_through(host) -> None:
    path = "vscode-remote://dev-container+abc/workspace"
    await open_project(_project(path), OpenMode.NEW_WINDOW, host)
    assert host.calls == [("open_folder", path, True)]


# ---------------------------------------------------------------------------
# SSH
# ---------------------------------------------------------------------------


async def test_ssh_with_folder_opens_uri(host) -> None:
    path = "vscode-remote://ssh-remote+alice@box/srv/app"
    await open_project(_project(path), OpenMode.NEW_WINDOW, host)
    assert host.calls == [("open_folder", path, True)]


async def test_ssh_without_folder_opens_remote_window(host) -> None:
    await open_project(_project("vscode-remote://ssh-remote+alice@box"), OpenMode.DEFAULT, host)
    assert host.calls == [("new_window", "ssh-remote+alice@box", True)]


async def test_ssh_without_folder_new_window(host) -> None:
    await open_project(_project("vscode-remote://ssh-remote+box"), OpenMode.NEW_WINDOW, host)
    assert host.calls == [("new_window", "ssh-remote+box", False)]


async def test_ssh_add_to_workspace_opens_in_current_window(host) -> None:
    path = "vscode-remote://ssh-remote+box/srv"
    await open_project(_project(path), OpenMode.ADD_TO_WORKSPACE, host)
    assert host.calls == [("open_folder", path, False)]


async def test_invalid_ssh_target(host) -> None:
    with pytest.raises(InvalidRemotePathError):
        await open_project(_project("vscode-remote://ssh-remote+"), OpenMode.DEFAULT, host)
    assert host.calls == []


# ---------------------------------------------------------------------------
# WSL
# ---------------------------------------------------------------------------


async def test_wsl_unc_path_rewritten(host) -> None:
    await open_project(_project("\\\\wsl$\\Ubuntu\\home\\me"), OpenMode.DEFAULT, host)
    assert host.calls == [("open_folder", "vscode-remote://wsl+Ubuntu/home/me", False)]


async def test_wsl_unc_path_kept_when_rewrite_disabled(host) -> None:
    await open_project(_project("\\\\wsl$\\Ubuntu\\home\\me"), OpenMode.DEFAULT, host, prepend_wsl_url=False)
    assert host.calls == [("open_folder", "\\\\wsl$\\Ubuntu\\home\\me", False)]


async def test_wsl_remote_uri_passthrough(host) -> None:
    path = "vscode-remote://wsl+Debian/srv"
    await open_project(_project(path), OpenMode.NEW_WINDOW, host)
    assert host.calls == [("open_folder", path, True)]


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------


async def test_container_with_folder(host) -> None:
    await open_project(_project("vscode-remote://attached-container+web/app"), OpenMode.DEFAULT, host)
    expected = f"vscode-remote://attached-container+{get_container_hex('web')}/app"
    assert host.calls == [("open_folder", expected, False)]


async def test_container_without_folder(host) -> None:
    await open_project(
        _project("vscode-remote://attached-container+web"),
        OpenMode.NEW_WINDOW,
        host,
        container_context="colima",
    )
    expected = f"attached-container+{get_container_hex('web', 'colima')}"
    assert host.calls == [("new_window", expected, False)]


async def test_invalid_container_target(host) -> None:
    with pytest.raises(InvalidRemotePathError):
        await open_project(_project("vscode-remote://attached-container+"), OpenMode.DEFAULT, host)
    assert host.calls == []


# ---------------------------------------------------------------------------
# Add to workspace
# ---------------------------------------------------------------------------


async def test_add_folder_to_workspace(host, tmp_path) -> None:
    folder = tmp_path / "proj"
    folder.mkdir()
    await open_project(_project(str(folder), name="<b>Proj</b>"), OpenMode.ADD_TO_WORKSPACE, host)
    assert host.calls == [("add_workspace_folders", [WorkspaceFolder(path=str(folder), name="Proj")])]


async def test_add_folder_already_in_workspace_is_noop(host, tmp_path) -> None:
    folder = tmp_path / "proj"
    folder.mkdir()
    host.folders = [str(folder) + "/"]
    await open_project(_project(str(folder)), OpenMode.ADD_TO_WORKSPACE, host)
    assert host.calls == []


async def test_add_workspace_file_adds_its_folders(host, tmp_path) -> None:
    (tmp_path / "a").mkdir()
    (tmp_path / "b").mkdir()
    ws = tmp_path / "all.code-workspace"
    ws.write_text(json.dumps({"folders": [{"path": "a"}, {"path": str(tmp_path / "b")}]}))
    host.folders = [str((tmp_path / "a").resolve())]

    await open_project(_project(str(ws)), OpenMode.ADD_TO_WORKSPACE, host)
    assert host.calls == [("add_workspace_folders", [WorkspaceFolder(path=str((tmp_path / "b").resolve()))])]


async def test_add_broken_workspace_file(host, tmp_path) -> None:
    ws = tmp_path / "broken.code-workspace"
    ws.write_text("{not json")
    with pytest.raises(WorkspaceFileError):
        await open_project(_project(str(ws)), OpenMode.ADD_TO_WORKSPACE, host)
    assert host.calls == []


async def test_add_plain_file_is_rejected(host, tmp_path) -> None:
    file = tmp_path / "notes.txt"
    file.write_text("hi")
    with pytest.raises(NotAddableError):
        await open_project(_project(str(file)), OpenMode.ADD_TO_WORKSPACE, host)
    assert host.calls == []


async def test_add_refused_by_host(host, tmp_path) -> None:
    folder = tmp_path / "proj"
    folder.mkdir()
    host.accept_add = False
    with pytest.raises(AddToWorkspaceError):
        await open_project(_project(str(folder)), OpenMode.ADD_TO_WORKSPACE, host)
