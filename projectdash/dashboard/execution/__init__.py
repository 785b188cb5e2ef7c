"""Path classification, file probes, and routing of open requests to the editor."""

from projectdash.dashboard.execution.host import CodeCliHost, EditorHost, HostCommandError, WorkspaceFolder
from projectdash.dashboard.execution.opener import add_to_workspace, open_project
from projectdash.dashboard.execution.remote import get_container_hex, get_remote_type

__all__ = [
    "CodeCliHost",
    "EditorHost",
    "HostCommandError",
    "WorkspaceFolder",
    "add_to_workspace",
    "get_container_hex",
    "get_remote_type",
    "open_project",
]
