"""Storage migrations.

Two kinds:

- **Schema**: the pre-grouping format stored a flat list of projects.  It is
  wrapped into a single default (unnamed) group the first time it is read.
- **Backend**: when the configured store changes (global state <-> user
  settings), the list is copied into the newly selected store if that store
  is still empty.  The source is never modified, so running the migration
  again is a no-op.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from projectdash.dashboard.models.project import generate_id
from projectdash.dashboard.store.base import ProjectStore

# -- Schema --------------------------------------------------------------------


def _looks_like_project(item: Any) -> bool:
    # Groups may omit "projects"; only project records carry a name or path.
    return (
        isinstance(item, dict)
        and "projects" not in item
        and "groupName" not in item
        and ("path" in item or "name" in item)
    )


def is_legacy_schema(data: list[Any]) -> bool:
    """A non-empty list whose entries are projects rather than groups."""
    return bool(data) and all(_looks_like_project(item) for item in data)


def upgrade_legacy_schema(data: list[Any]) -> list[Any]:
    """Wrap a flat project list into one default group; other input is returned as is."""
    if not is_legacy_schema(data):
        return data
    return [{"id": generate_id(), "groupName": None, "collapsed": False, "projects": data}]


# -- Backend -------------------------------------------------------------------


def _select(state_store: ProjectStore, settings_store: ProjectStore, use_settings: bool) -> tuple[ProjectStore, ProjectStore]:
    """Return ``(active, other)`` for the configured backend."""
    if use_settings:
        return settings_store, state_store
    return state_store, settings_store


async def other_storage_has_data(state_store: ProjectStore, settings_store: ProjectStore, *, use_settings: bool) -> bool:
    """Whether the store that is *not* configured holds projects."""
    _, other = _select(state_store, settings_store, use_settings)
    return await other.has_data()


async def _copy_into_empty(source: ProjectStore, target: ProjectStore) -> bool:
    if await target.has_data():
        return False
    data = await source.read_groups()
    if not data:
        return False
    await target.write_groups(data)
    return True


async def migrate_data_if_needed(state_store: ProjectStore, settings_store: ProjectStore, *, use_settings: bool) -> bool:
    """Copy the project list into the configured store if it is empty.

    Returns ``True`` if a copy happened.
    """
    active, other = _select(state_store, settings_store, use_settings)
    migrated = await _copy_into_empty(other, active)
    if migrated:
        logger.info("Migrated projects into the {} store", "settings" if use_settings else "global state")
    return migrated


async def import_from_other_storage(state_store: ProjectStore, settings_store: ProjectStore, *, use_settings: bool) -> bool:
    """Explicit user import from the inactive store into the (empty) active one."""
    active, other = _select(state_store, settings_store, use_settings)
    imported = await _copy_into_empty(other, active)
    if imported:
        logger.info("Imported projects from the {} store", "global state" if use_settings else "settings")
    return imported
