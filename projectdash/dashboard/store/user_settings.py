"""User settings store.

Keeps the project list inside the user's settings document under
``dashboard.projectData`` so it travels with settings sync.  All other keys
in the document are left as they are.
"""

from __future__ import annotations

from pathlib import Path

from projectdash.dashboard.constants import SETTINGS_PROJECTS_KEY
from projectdash.dashboard.store.local import JsonDocumentStore


class UserSettingsStore(JsonDocumentStore):
    """Settings-backed implementation of the ProjectStore protocol."""

    projects_key = SETTINGS_PROJECTS_KEY

    def __init__(self, settings_file: str | Path) -> None:
        super().__init__(settings_file)
