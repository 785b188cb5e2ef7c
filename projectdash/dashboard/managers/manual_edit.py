"""Manual bulk editing of the project list.

The current list is exported to a JSON file, the user edits it in an
editor, and the result is validated before it replaces the stored list.
A document that fails validation leaves the store untouched.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Any

from anyio import to_thread
from loguru import logger
from pydantic import ValidationError

from projectdash.dashboard.constants import MANUAL_EDIT_FILE_NAME
from projectdash.dashboard.models.project import Group, dump_groups, load_groups

if TYPE_CHECKING:
    from projectdash.dashboard.managers.projects import ProjectService

PARSE_ERROR = "Edited projects file can not be parsed."
SCHEMA_ERROR = "Edited projects file does not meet the schema expected by the dashboard."


@dataclass
class ValidationResult:
    """Outcome of validating an edited document."""

    ok: bool
    groups: list[Group] = field(default_factory=list)
    error: str | None = None
    detail: str | None = None


def _invalid(detail: str) -> ValidationResult:
    return ValidationResult(ok=False, error=SCHEMA_ERROR, detail=detail)


def _normalize_group(group: dict[str, Any]) -> None:
    # Older exports could carry the group name under "name".
    if group.get("name") and not group.get("groupName"):
        group["groupName"] = group.pop("name")


def validate_groups_document(text: str) -> ValidationResult:
    """Validate an edited group list.

    Rules: the document is a JSON array (empty text counts as ``[]``); an
    unnamed group without projects is dropped; every other group needs an
    ``id`` and a ``projects`` array; every project needs ``id``, ``name`` and
    ``path``, and project ids must be unique.  Unknown keys are discarded.
    """
    try:
        data = json.loads(text.strip() or "[]")
    except json.JSONDecodeError as exc:
        return ValidationResult(ok=False, error=PARSE_ERROR, detail=str(exc))

    if not isinstance(data, list):
        return _invalid("top level must be an array of groups")

    kept: list[dict[str, Any]] = []
    seen_project_ids: set[str] = set()
    for index, group in enumerate(data):
        if not isinstance(group, dict):
            return _invalid(f"group #{index + 1} is not an object")
        _normalize_group(group)

        if group.get("groupName") is None and not group.get("projects"):
            continue
        if not group.get("id"):
            return _invalid(f"group #{index + 1} has no id")
        if not isinstance(group.get("projects"), list):
            return _invalid(f"group {group['id']!r} has no projects array")

        for project in group["projects"]:
            if not isinstance(project, dict) or not all(project.get(k) for k in ("id", "name", "path")):
                return _invalid(f"group {group['id']!r} contains a project without id, name or path")
            if project["id"] in seen_project_ids:
                return _invalid(f"duplicate project id {project['id']!r}")
            seen_project_ids.add(project["id"])
        kept.append(group)

    try:
        groups = load_groups(kept)
    except ValidationError as exc:
        return _invalid(str(exc))
    return ValidationResult(ok=True, groups=groups)


class ManualEditSession:
    """Export / re-import of the project list through a file on disk."""

    def __init__(self, data_root: str | Path) -> None:
        self._path = Path(data_root) / MANUAL_EDIT_FILE_NAME

    @property
    def path(self) -> Path:
        return self._path

    async def export(self, service: ProjectService) -> Path:
        """Write the current list to the edit file and return its path."""
        groups = await service.get_groups()
        data = json.dumps(dump_groups(groups), indent=4, ensure_ascii=False)
        await to_thread.run_sync(partial(_write_text, self._path, data))
        return self._path

    async def apply(self, service: ProjectService) -> ValidationResult:
        """Validate the edited file and, if valid, store it."""
        text = await to_thread.run_sync(partial(self._path.read_text, encoding="utf-8"))
        result = validate_groups_document(text)
        if not result.ok:
            logger.warning("Rejected manual edit: {} ({})", result.error, result.detail)
            return result
        await service.save_groups(result.groups)
        logger.info("Saved {} group(s) from manual edit", len(result.groups))
        return result


def _write_text(path: Path, data: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(data, encoding="utf-8")
