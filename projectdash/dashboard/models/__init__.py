"""Data models for the project dashboard."""

from projectdash.dashboard.models.api import GroupUpdate, ProjectCreate, ProjectUpdate
from projectdash.dashboard.models.enums import FixedColor, OpenMode, ProjectPathType, RemoteType
from projectdash.dashboard.models.project import (
    GROUP_ORDERS_ADAPTER,
    GROUPS_ADAPTER,
    Group,
    GroupOrder,
    Project,
    dump_groups,
    generate_id,
    load_groups,
    new_group,
    new_project,
    sanitize_project_name,
)

__all__ = [
    "GROUPS_ADAPTER",
    "GROUP_ORDERS_ADAPTER",
    # Enums
    "FixedColor",
    # Entities
    "Group",
    "GroupOrder",
    # Input schemas
    "GroupUpdate",
    "OpenMode",
    "Project",
    "ProjectCreate",
    "ProjectPathType",
    "ProjectUpdate",
    "RemoteType",
    # Helpers
    "dump_groups",
    "generate_id",
    "load_groups",
    "new_group",
    "new_project",
    "sanitize_project_name",
]
