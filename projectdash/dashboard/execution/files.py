"""Filesystem probes used when adding and opening projects.

Probes that only decorate a project (git detection, workspace color) fail
closed: any error reads as "no" / "none" and is logged at DEBUG.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from anyio import run_process
from loguru import logger

from projectdash.dashboard.constants import WORKSPACE_FILE_SUFFIX
from projectdash.dashboard.models.enums import ProjectPathType

_LINE_COMMENT_RE = re.compile(r"^\s*//.*$", re.MULTILINE)


class WorkspaceFileError(ValueError):
    """Raised when a ``.code-workspace`` file cannot be read or parsed."""


def load_jsonc(text: str) -> Any:
    """Parse JSON that may contain whole-line ``//`` comments."""
    return json.loads(_LINE_COMMENT_RE.sub("", text).strip() or "null")


# -- Path inspection -----------------------------------------------------------


def get_project_path_type(path: str | Path) -> ProjectPathType:
    """Folder, workspace file, or any other file (including missing paths)."""
    p = Path(path)
    if p.is_dir():
        return ProjectPathType.FOLDER
    if p.is_file() and p.name.endswith(WORKSPACE_FILE_SUFFIX):
        return ProjectPathType.WORKSPACE_FILE
    return ProjectPathType.FILE


def get_folders(path: str | Path) -> list[Path]:
    """Immediate, non-hidden sub-directories of ``path``, sorted by name."""
    return sorted(
        (child for child in Path(path).iterdir() if child.is_dir() and not child.name.startswith(".")),
        key=lambda p: p.name.lower(),
    )


def get_folders_from_workspace_file(path: str | Path) -> list[Path]:
    """Resolve the ``folders`` entries of a workspace file to absolute paths.

    Relative entries are relative to the workspace file's directory.  Raises
    ``WorkspaceFileError`` if the file is unreadable or malformed.
    """
    ws_path = Path(path)
    try:
        content = load_jsonc(ws_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        msg = f"Could not read workspace file {ws_path}: {exc}"
        raise WorkspaceFileError(msg) from exc

    if not isinstance(content, dict) or not isinstance(content.get("folders"), list):
        msg = f"Workspace file {ws_path} has no 'folders' list"
        raise WorkspaceFileError(msg)

    folders: list[Path] = []
    for entry in content["folders"]:
        if not isinstance(entry, dict) or not entry.get("path"):
            # uri-only entries point at remote folders; nothing local to add
            continue
        folder = Path(entry["path"])
        if not folder.is_absolute():
            folder = ws_path.parent / folder
        folders.append(folder.resolve())
    return folders


# -- Decorations (fail closed) -------------------------------------------------


async def is_git_repo(path: str | Path) -> bool:
    """Whether ``path`` (or a file's parent directory) is inside a git work tree."""
    p = Path(path)
    try:
        cwd = p if p.is_dir() else p.parent
        result = await run_process(["git", "rev-parse", "--is-inside-work-tree"], cwd=cwd, check=False)
    except OSError as exc:
        logger.debug("Git detection failed for {}: {}", path, exc)
        return False
    return result.returncode == 0 and result.stdout.decode().strip() == "true"


def get_workspace_color(path: str | Path) -> str | None:
    """Title bar (or activity bar) color from the project's ``.vscode/settings.json``."""
    settings_path = Path(path) / ".vscode" / "settings.json"
    try:
        settings = load_jsonc(settings_path.read_text(encoding="utf-8"))
        customizations = settings["workbench.colorCustomizations"]
        return customizations.get("titleBar.activeBackground") or customizations.get("activityBar.background")
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
        logger.debug("Unable to load workspace color from {}: {}", settings_path, exc)
        return None
