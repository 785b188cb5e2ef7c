"""Shared enumerations used across the dashboard."""

from __future__ import annotations

from enum import StrEnum

# -- Paths -------------------------------------------------------------------


class RemoteType(StrEnum):
    """Where a project path lives, derived from the path string alone."""

    NONE = "none"
    SSH = "ssh"
    WSL = "wsl"
    CONTAINER = "container"


class ProjectPathType(StrEnum):
    FOLDER = "folder"
    WORKSPACE_FILE = "workspace_file"
    FILE = "file"


# -- Opening -----------------------------------------------------------------


class OpenMode(StrEnum):
    """How a selected project should be opened."""

    DEFAULT = "default"
    NEW_WINDOW = "new_window"
    ADD_TO_WORKSPACE = "add_to_workspace"


# -- Colors ------------------------------------------------------------------


class FixedColor(StrEnum):
    """Color sentinels that are not literal CSS values."""

    WORKSPACE = "WORKSPACE"
    RANDOM = "RANDOM"
