"""Project colors: the predefined palette, random picks, and recent colors.

A project's ``color`` is either a literal CSS value or the ``WORKSPACE``
sentinel, which means "use the title bar color from the project's own
``.vscode/settings.json``".  ``RANDOM`` is accepted as input only and is
replaced by a palette color before it is stored.
"""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING

from projectdash.dashboard.constants import PREDEFINED_COLORS, RECENT_COLORS_KEY, RECENT_COLORS_LIMIT
from projectdash.dashboard.execution.files import get_workspace_color
from projectdash.dashboard.models.enums import FixedColor

if TYPE_CHECKING:
    from projectdash.dashboard.models.project import Project
    from projectdash.dashboard.store.local import JsonDocumentStore


class ColorService:
    """Color helpers; recent colors are remembered in the global state document."""

    def __init__(self, state_store: JsonDocumentStore) -> None:
        self._state_store = state_store

    # -- Palette ---------------------------------------------------------------

    @staticmethod
    def random_color() -> str:
        return secrets.choice(PREDEFINED_COLORS)[1]

    @staticmethod
    def color_name(code: str | None) -> str | None:
        """Label for a palette value or label (case-insensitive), else ``None``."""
        if not code:
            return None
        for label, value in PREDEFINED_COLORS:
            if code.lower() in (value.lower(), label.lower()):
                return label
        return None

    @staticmethod
    def normalize(color: str | None) -> str | None:
        """Map user input to a storable color.

        Palette labels become their values, ``RANDOM`` becomes a palette
        color, and ``;`` / ``"`` are stripped from custom CSS values.  Empty
        input means no color.
        """
        if color is None:
            return None
        color = color.replace(";", "").replace('"', "").strip()
        if not color:
            return None
        if color.upper() == FixedColor.RANDOM:
            return ColorService.random_color()
        if color.upper() == FixedColor.WORKSPACE:
            return FixedColor.WORKSPACE.value
        for label, value in PREDEFINED_COLORS:
            if color.lower() == label.lower():
                return value
        return color

    def effective_color(self, project: Project) -> str | None:
        """The color to display: resolves ``WORKSPACE`` from the project's folder."""
        if project.color == FixedColor.WORKSPACE:
            return get_workspace_color(project.path) or project.last_workspace_color
        return project.color

    # -- Recent colors ---------------------------------------------------------

    async def get_recent_colors(self) -> list[str]:
        recent = await self._state_store.get(RECENT_COLORS_KEY, [])
        return [c for c in recent if isinstance(c, str)] if isinstance(recent, list) else []

    async def add_recent_color(self, color: str | None) -> None:
        """Remember a literal color, most recent first.  Sentinels are ignored."""
        if not color or color == FixedColor.WORKSPACE:
            return
        recent = [c for c in await self.get_recent_colors() if c.lower() != color.lower()]
        recent.insert(0, color)
        await self._state_store.update(RECENT_COLORS_KEY, recent[:RECENT_COLORS_LIMIT])
