"""Storage interface for the project list.

The project list is one JSON document: an ordered array of groups.  It can
live in either of two backends, selected by configuration:

- the **global state** document owned by the dashboard itself, or
- the **user settings** document, so it can be synced with other settings.

Both are read-modify-write with no transactions: the last write wins.  The
interface is async so file I/O can run off the caller's thread.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


class StoreReadError(ValueError):
    """Raised when a backing document exists but is not valid JSON."""


@runtime_checkable
class ProjectStore(Protocol):
    """Async protocol for reading and writing the raw group list."""

    async def read_groups(self) -> list[Any] | None:
        """Return the stored JSON array, or ``None`` if nothing is stored."""
        ...

    async def write_groups(self, data: list[Any]) -> None:
        """Replace the stored JSON array."""
        ...

    async def has_data(self) -> bool:
        """Whether the store holds a non-empty list."""
        ...
