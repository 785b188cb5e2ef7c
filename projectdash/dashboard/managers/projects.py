"""Project and group CRUD over the stored group list.

Every mutation is a read-modify-write of the whole document, persisted
immediately.  There is one writer at a time (one user action), so no locking.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from projectdash.dashboard.managers.migration import is_legacy_schema, upgrade_legacy_schema
from projectdash.dashboard.models.project import (
    Group,
    GroupOrder,
    Project,
    dump_groups,
    generate_id,
    load_groups,
    new_group,
)

if TYPE_CHECKING:
    from projectdash.dashboard.models.api import GroupUpdate, ProjectCreate, ProjectUpdate
    from projectdash.dashboard.store.base import ProjectStore


class ProjectNotFoundError(LookupError):
    """Raised when a project is not found."""


class GroupNotFoundError(LookupError):
    """Raised when a group is not found."""


def _find_project(groups: list[Group], project_id: str) -> tuple[Project, Group]:
    for group in groups:
        for project in group.projects:
            if project.id == project_id:
                return project, group
    raise ProjectNotFoundError(project_id)


def _find_group(groups: list[Group], group_id: str) -> Group:
    for group in groups:
        if group.id == group_id:
            return group
    raise GroupNotFoundError(group_id)


def _unique_id(taken: set[str], prepend: str | None) -> str:
    new_id = generate_id(prepend)
    while new_id in taken:
        new_id = generate_id(prepend)
    return new_id


class ProjectService:
    """CRUD for groups and projects on top of a ``ProjectStore``."""

    def __init__(self, store: ProjectStore) -> None:
        self._store = store

    @property
    def store(self) -> ProjectStore:
        return self._store

    # -- Read ------------------------------------------------------------------

    async def get_groups(self) -> list[Group]:
        """Load all groups in display order.  Upgrades the legacy flat schema once."""
        raw = await self._store.read_groups()
        if not raw:
            return []
        if not is_legacy_schema(raw):
            return load_groups(raw)

        upgraded = upgrade_legacy_schema(raw)
        groups = load_groups(upgraded)
        await self._store.write_groups(upgraded)
        logger.info("Upgraded legacy project list into a default group")
        return groups

    async def get_group(self, group_id: str) -> Group:
        """Get a group by ID.  Raises ``GroupNotFoundError`` if missing."""
        return _find_group(await self.get_groups(), group_id)

    async def get_project(self, project_id: str) -> Project:
        """Get a project by ID.  Raises ``ProjectNotFoundError`` if missing."""
        project, _ = _find_project(await self.get_groups(), project_id)
        return project

    async def get_project_and_group(self, project_id: str) -> tuple[Project, Group]:
        return _find_project(await self.get_groups(), project_id)

    async def get_projects_flat(self) -> list[Project]:
        return [project for group in await self.get_groups() for project in group.projects]

    # -- Write -----------------------------------------------------------------

    async def save_groups(self, groups: list[Group]) -> None:
        await self._store.write_groups(dump_groups(groups))

    # -- Groups ----------------------------------------------------------------

    async def add_group(self, group_name: str | None) -> Group:
        groups = await self.get_groups()
        group = Group(id=_unique_id({g.id for g in groups}, group_name), group_name=group_name)
        groups.append(group)
        await self.save_groups(groups)
        logger.debug("Added group {} ({})", group_name, group.id)
        return group

    async def update_group(self, group_id: str, body: GroupUpdate) -> Group:
        """Partially update a group.  Raises ``GroupNotFoundError`` if missing."""
        groups = await self.get_groups()
        group = _find_group(groups, group_id)

        changes = body.model_dump(exclude_unset=True)
        if not changes:
            return group

        for key, value in changes.items():
            setattr(group, key, value)
        await self.save_groups(groups)
        return group

    async def toggle_collapsed(self, group_id: str) -> Group:
        groups = await self.get_groups()
        group = _find_group(groups, group_id)
        group.collapsed = not group.collapsed
        await self.save_groups(groups)
        return group

    async def remove_group(self, group_id: str) -> Group:
        """Remove a group and its projects.  Raises ``GroupNotFoundError`` if missing."""
        groups = await self.get_groups()
        group = _find_group(groups, group_id)
        groups.remove(group)
        await self.save_groups(groups)
        logger.debug("Removed group {} with {} project(s)", group_id, len(group.projects))
        return group

    # -- Projects --------------------------------------------------------------

    async def add_project(self, body: ProjectCreate, group_id: str | None = None, *, is_git_repo: bool = False) -> Project:
        """Append a project to a group.

        Without ``group_id`` the project goes into the first group; a default
        group is created when there is none.  Raises ``GroupNotFoundError``
        for an unknown ``group_id``.
        """
        groups = await self.get_groups()
        if group_id is not None:
            group = _find_group(groups, group_id)
        elif groups:
            group = groups[0]
        else:
            group = new_group(None)
            groups.append(group)

        taken = {p.id for g in groups for p in g.projects}
        project = Project(
            id=_unique_id(taken, body.name),
            name=body.name,
            path=body.path,
            color=body.color,
            is_git_repo=is_git_repo,
        )
        group.projects.append(project)
        await self.save_groups(groups)
        logger.debug("Added project {} ({}) to group {}", project.name, project.id, group.id)
        return project

    async def update_project(self, project_id: str, body: ProjectUpdate, *, is_git_repo: bool | None = None) -> Project:
        """Partially update a project.  Raises ``ProjectNotFoundError`` if missing."""
        groups = await self.get_groups()
        project, _ = _find_project(groups, project_id)

        changes = body.model_dump(exclude_unset=True)
        if is_git_repo is not None:
            changes["is_git_repo"] = is_git_repo
        if not changes:
            return project

        for key, value in changes.items():
            setattr(project, key, value)
        await self.save_groups(groups)
        return project

    async def remove_project(self, project_id: str) -> Project:
        """Remove a project.  Raises ``ProjectNotFoundError`` if missing."""
        groups = await self.get_groups()
        project, group = _find_project(groups, project_id)
        group.projects.remove(project)
        await self.save_groups(groups)
        logger.debug("Removed project {} from group {}", project_id, group.id)
        return project

    async def reorder_groups(self, group_orders: list[GroupOrder]) -> list[Group]:
        """Rebuild the group list from the given orders.

        Each listed group gets exactly the listed projects, in order; ids that
        match no project (or repeat one already placed) are dropped.  Unknown
        group ids become new groups; groups that are not listed are dropped.
        """
        groups = await self.get_groups()
        project_map = {p.id: p for g in groups for p in g.projects}
        group_map = {g.id: g for g in groups}

        placed: set[str] = set()
        reordered: list[Group] = []
        for order in group_orders:
            group = group_map.pop(order.group_id, None) or new_group(f"Group #{len(reordered) + 1}")
            projects = []
            for pid in order.project_ids:
                if pid in project_map and pid not in placed:
                    projects.append(project_map[pid])
                    placed.add(pid)
            group.projects = projects
            reordered.append(group)

        await self.save_groups(reordered)
        return reordered
