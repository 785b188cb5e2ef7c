"""Per-invocation dashboard context.

Bundles the configuration with the objects built from it: both storage
backends, the project service bound to the configured backend, the color
service, and the editor host.  Created once per CLI invocation and passed
to every command.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from projectdash.dashboard.execution.host import CodeCliHost, EditorHost
from projectdash.dashboard.execution.opener import open_project
from projectdash.dashboard.managers.colors import ColorService
from projectdash.dashboard.managers.manual_edit import ManualEditSession
from projectdash.dashboard.managers.migration import migrate_data_if_needed, other_storage_has_data
from projectdash.dashboard.managers.projects import ProjectService
from projectdash.dashboard.models.enums import OpenMode
from projectdash.dashboard.models.project import Project
from projectdash.dashboard.settings import DashSettings
from projectdash.dashboard.store.local import GlobalStateStore
from projectdash.dashboard.store.user_settings import UserSettingsStore


@dataclass
class DashboardContext:
    """Wiring for one session of user actions."""

    settings: DashSettings
    host: EditorHost
    state_store: GlobalStateStore = field(init=False)
    settings_store: UserSettingsStore = field(init=False)
    service: ProjectService = field(init=False)
    colors: ColorService = field(init=False)

    def __post_init__(self) -> None:
        self.state_store = GlobalStateStore(self.settings.data_root)
        self.settings_store = UserSettingsStore(self.settings.settings_file)
        active = self.settings_store if self.settings.store_projects_in_settings else self.state_store
        self.service = ProjectService(active)
        self.colors = ColorService(self.state_store)

    @classmethod
    def from_settings(cls, settings: DashSettings, host: EditorHost | None = None) -> DashboardContext:
        if host is None:
            host = CodeCliHost(binary=settings.code_binary, workspace=settings.workspace)
        return cls(settings=settings, host=host)

    @property
    def use_settings_storage(self) -> bool:
        return self.settings.store_projects_in_settings

    def manual_edit_session(self) -> ManualEditSession:
        return ManualEditSession(self.settings.data_root)

    # -- Actions ---------------------------------------------------------------

    async def check_data_migration(self) -> bool:
        return await migrate_data_if_needed(
            self.state_store, self.settings_store, use_settings=self.use_settings_storage
        )

    async def other_storage_has_data(self) -> bool:
        return await other_storage_has_data(
            self.state_store, self.settings_store, use_settings=self.use_settings_storage
        )

    async def open(self, project: Project, mode: OpenMode) -> None:
        await open_project(
            project,
            mode,
            self.host,
            prepend_wsl_url=self.settings.prepend_vscode_url_to_wsl_remotes,
            container_context=self.settings.container_context,
        )
