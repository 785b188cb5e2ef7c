"""Shared constants: remote URI prefixes, path patterns, and the color palette."""

from __future__ import annotations

import re

# -- Remote prefixes -----------------------------------------------------------

VSCODE_REMOTE_SCHEME = "vscode-remote://"

SSH_REMOTE_PREFIX = "vscode-remote://ssh-remote+"
WSL_REMOTE_PREFIX = "vscode-remote://wsl+"
DEV_CONTAINER_PREFIX = "vscode-remote://attached-container+"

# -- Path patterns -------------------------------------------------------------

WSL_DEFAULT_REGEX = re.compile(r"^[\\/]{2}wsl\$[\\/]")
"""UNC path into a WSL distro, e.g. ``\\\\wsl$\\Ubuntu\\home\\me``."""

REMOTE_REGEX = re.compile(r"^vscode-remote://[^+]+\+")
"""Matches ``vscode-remote://<type>+`` so it can be trimmed off."""

SSH_REGEX = re.compile(r"^(?:(?P<user>[^@/\s]+)@)?(?P<hostname>[^/@\s]+)(?P<folder>/.*)?$")
"""``user@host/optional/folder`` (after the SSH prefix is removed)."""

CONTAINER_REGEX = re.compile(r"^(?P<containername>[^/\s]+)(?P<folder>/.*)?$")
"""``container/optional/folder`` (after the container prefix is removed)."""

WORKSPACE_FILE_SUFFIX = ".code-workspace"

DEFAULT_CONTAINER_CONTEXT = "desktop-linux"

# -- Storage -------------------------------------------------------------------

PROJECTS_KEY = "projects"
"""Key holding the group list in the global state document."""

SETTINGS_PROJECTS_KEY = "dashboard.projectData"
"""Key holding the group list in the user settings document."""

RECENT_COLORS_KEY = "recentColors"

MANUAL_EDIT_FILE_NAME = "Dashboard Projects.json"

# -- Colors --------------------------------------------------------------------

RECENT_COLORS_LIMIT = 10

PREDEFINED_COLORS: tuple[tuple[str, str], ...] = (
    ("Red", "#C62828"),
    ("Pink", "#AD1457"),
    ("Purple", "#6A1B9A"),
    ("Indigo", "#283593"),
    ("Blue", "#1565C0"),
    ("Cyan", "#00838F"),
    ("Teal", "#00695C"),
    ("Green", "#2E7D32"),
    ("Lime", "#9E9D24"),
    ("Amber", "#FF8F00"),
    ("Orange", "#EF6C00"),
    ("Brown", "#4E342E"),
    ("Grey", "#424242"),
)
"""(label, value) pairs offered as ready-made project colors."""
