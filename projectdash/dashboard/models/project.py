"""Project and group data models.

The persisted document is an ordered list of groups, each holding an ordered
list of projects.  JSON keys are camelCase (``groupName``, ``isGitRepo``) so
that files written by earlier releases load unchanged; Python attributes are
snake_case and the aliases are applied on dump.
"""

from __future__ import annotations

import re
import secrets
import string
import time

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

_ID_ALPHABET = string.digits + string.ascii_lowercase
_MARKUP_RE = re.compile(r"<[^>]+>")


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ID_ALPHABET[rem])
    return "".join(reversed(digits))


def generate_id(prepend: str | None = None) -> str:
    """Return an opaque id: ``<name prefix><9 random chars><timestamp>``.

    The prefix is the given text reduced to at most 24 lowercase word
    characters, which keeps ids recognisable when the JSON is edited by hand.
    """
    prefix = re.sub(r"\W", "", prepend, flags=re.ASCII).lower()[:24] if prepend else ""
    random_part = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"{prefix}{random_part}{_to_base36(int(time.time() * 1000))}"


def sanitize_project_name(name: str | None) -> str:
    """Strip markup tags and surrounding whitespace from a display name."""
    if not name:
        return ""
    return _MARKUP_RE.sub("", name).strip()


class Project(BaseModel):
    """A single openable location: local folder/file or a remote target."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    path: str = Field(min_length=1)
    color: str | None = None
    last_workspace_color: str | None = Field(default=None, alias="lastWorkspaceColor")
    is_git_repo: bool = Field(default=False, alias="isGitRepo")


class Group(BaseModel):
    """Named, ordered collection of projects.  ``group_name=None`` is the default group."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1)
    group_name: str | None = Field(default=None, alias="groupName")
    collapsed: bool = False
    projects: list[Project] = Field(default_factory=list)


class GroupOrder(BaseModel):
    """Desired project order for one group, as produced by drag-and-drop."""

    model_config = ConfigDict(populate_by_name=True)

    group_id: str = Field(alias="groupId")
    project_ids: list[str] = Field(default_factory=list, alias="projectIds")


GROUPS_ADAPTER: TypeAdapter[list[Group]] = TypeAdapter(list[Group])
GROUP_ORDERS_ADAPTER: TypeAdapter[list[GroupOrder]] = TypeAdapter(list[GroupOrder])


def new_project(name: str, path: str, **kwargs: object) -> Project:
    """Create a project with a freshly generated id."""
    return Project(id=generate_id(name), name=name, path=path, **kwargs)


def new_group(group_name: str | None, projects: list[Project] | None = None) -> Group:
    """Create a group with a freshly generated id."""
    return Group(id=generate_id(group_name), group_name=group_name, projects=projects or [])


def dump_groups(groups: list[Group]) -> list[dict]:
    """Serialize groups to the persisted JSON shape (camelCase keys)."""
    return GROUPS_ADAPTER.dump_python(groups, mode="json", by_alias=True)


def load_groups(data: list[dict]) -> list[Group]:
    """Validate the persisted JSON shape into models."""
    return GROUPS_ADAPTER.validate_python(data)
