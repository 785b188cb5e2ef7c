"""Shared test fixtures: temporary stores, settings and a recording editor host.

Nothing here touches the real user data or config directories: every store
lives under pytest's ``tmp_path``.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from projectdash.dashboard.context import DashboardContext
from projectdash.dashboard.execution.host import WorkspaceFolder
from projectdash.dashboard.managers.projects import ProjectService
from projectdash.dashboard.settings import DashSettings, get_settings
from projectdash.dashboard.store.local import GlobalStateStore
from projectdash.dashboard.store.user_settings import UserSettingsStore


@dataclass
class RecordingHost:
    """EditorHost fake that records every command instead of running an editor."""

    open_workspace_file: str | None = None
    folders: list[str] = field(default_factory=list)
    accept_add: bool = True
    calls: list[tuple] = field(default_factory=list)

    async def open_folder(self, uri: str, *, new_window: bool) -> None:
        self.calls.append(("open_folder", uri, new_window))

    async def new_window(self, remote_authority: str, *, reuse_window: bool) -> None:
        self.calls.append(("new_window", remote_authority, reuse_window))

    async def add_workspace_folders(self, folders: list[WorkspaceFolder]) -> bool:
        self.calls.append(("add_workspace_folders", folders))
        if self.accept_add:
            self.folders.extend(f.path for f in folders)
        return self.accept_add

    def workspace_file(self) -> str | None:
        return self.open_workspace_file

    def workspace_folders(self) -> list[str]:
        return list(self.folders)


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def host() -> RecordingHost:
    return RecordingHost()


@pytest.fixture
def state_store(tmp_path: Path) -> GlobalStateStore:
    return GlobalStateStore(tmp_path / "data")


@pytest.fixture
def settings_store(tmp_path: Path) -> UserSettingsStore:
    return UserSettingsStore(tmp_path / "config" / "settings.json")


@pytest.fixture
def service(state_store: GlobalStateStore) -> ProjectService:
    return ProjectService(state_store)


@pytest.fixture
def settings(tmp_path: Path) -> DashSettings:
    return DashSettings(
        data_root=str(tmp_path / "data"),
        settings_file=str(tmp_path / "config" / "settings.json"),
    )


@pytest.fixture
def dash(settings: DashSettings, host: RecordingHost) -> DashboardContext:
    return DashboardContext.from_settings(settings, host=host)
