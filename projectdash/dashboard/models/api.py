"""Input schemas for create / update operations.

These sit between the CLI and the project service:

- **Create** schemas validate user input and provide defaults.
- **Update** schemas allow partial updates via ``exclude_unset``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from projectdash.dashboard.models.project import sanitize_project_name


class ProjectCreate(BaseModel):
    """Input for adding a project."""

    name: str = Field(min_length=1)
    path: str = Field(min_length=1)
    color: str | None = None

    @field_validator("name")
    @classmethod
    def _sanitize_name(cls, value: str) -> str:
        name = sanitize_project_name(value)
        if not name:
            msg = "A project name must be provided."
            raise ValueError(msg)
        return name

    @field_validator("path")
    @classmethod
    def _strip_path(cls, value: str) -> str:
        path = value.strip()
        if not path:
            msg = "A project path must be provided."
            raise ValueError(msg)
        return path


class ProjectUpdate(BaseModel):
    """Partial update -- only fields explicitly set by the caller are applied.

    Use ``body.model_dump(exclude_unset=True)`` to extract the provided fields.
    """

    name: str | None = None
    path: str | None = None
    color: str | None = None

    @field_validator("name")
    @classmethod
    def _sanitize_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        name = sanitize_project_name(value)
        if not name:
            msg = "A project name must be provided."
            raise ValueError(msg)
        return name

    @field_validator("path")
    @classmethod
    def _strip_path(cls, value: str | None) -> str | None:
        if value is None:
            return None
        path = value.strip()
        if not path:
            msg = "A project path must be provided."
            raise ValueError(msg)
        return path


class GroupUpdate(BaseModel):
    """Partial group update (rename / collapse)."""

    group_name: str | None = None
    collapsed: bool | None = None
