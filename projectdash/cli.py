from __future__ import annotations

import json
import os
from collections.abc import Awaitable, Callable
from functools import partial
from pathlib import Path
from typing import IO, TypeVar

import anyio
import click

from projectdash.dashboard.context import DashboardContext
from projectdash.dashboard.execution.files import get_folders, is_git_repo
from projectdash.dashboard.execution.remote import get_last_part_of_path, get_remote_type
from projectdash.dashboard.log import setup_logging
from projectdash.dashboard.managers.colors import ColorService
from projectdash.dashboard.managers.migration import import_from_other_storage
from projectdash.dashboard.managers.projects import GroupNotFoundError, ProjectNotFoundError, ProjectService
from projectdash.dashboard.models.api import GroupUpdate, ProjectCreate, ProjectUpdate
from projectdash.dashboard.models.enums import OpenMode, RemoteType
from projectdash.dashboard.models.project import GROUP_ORDERS_ADAPTER, Group, Project, dump_groups
from projectdash.dashboard.settings import get_settings

T = TypeVar("T")


class UserCancelledError(Exception):
    """The user dismissed a prompt; the command stops without writing anything."""


def _error_message(exc: Exception) -> str:
    if isinstance(exc, ProjectNotFoundError):
        return f"Project not found: {exc.args[0]}"
    if isinstance(exc, GroupNotFoundError):
        return f"Group not found: {exc.args[0]}"
    return str(exc)


def _run(func: Callable[..., Awaitable[T]], *args: object) -> T | None:
    """Run one async action; translate domain errors into CLI errors."""
    try:
        return anyio.run(partial(func, *args))
    except UserCancelledError:
        return None
    except (LookupError, ValueError, RuntimeError, OSError) as exc:
        raise click.ClickException(_error_message(exc)) from exc


def _prompt(text: str, **kwargs: object) -> str:
    try:
        value = click.prompt(text, **kwargs)
    except click.Abort:
        raise UserCancelledError from None
    if not str(value).strip():
        raise UserCancelledError
    return value


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------


async def _resolve_project(service: ProjectService, ref: str) -> Project:
    """Find a project by id, else by unique (case-insensitive) name."""
    projects = await service.get_projects_flat()
    for project in projects:
        if project.id == ref:
            return project
    matches = [p for p in projects if p.name.lower() == ref.lower()]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        msg = f"Project name {ref!r} is ambiguous; use its id."
        raise ValueError(msg)
    raise ProjectNotFoundError(ref)


async def _resolve_group(service: ProjectService, ref: str) -> Group:
    """Find a group by id, else by unique (case-insensitive) name."""
    groups = await service.get_groups()
    for group in groups:
        if group.id == ref:
            return group
    matches = [g for g in groups if g.group_name and g.group_name.lower() == ref.lower()]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        msg = f"Group name {ref!r} is ambiguous; use its id."
        raise ValueError(msg)
    raise GroupNotFoundError(ref)


def _group_labels(groups: list[Group]) -> list[str]:
    labels = []
    default_seen = False
    for group in groups:
        if group.group_name:
            labels.append(group.group_name)
        else:
            labels.append("Unnamed Group" if default_seen else "Default Group")
            default_seen = True
    return labels


async def _detect_git(path: str) -> bool:
    if get_remote_type(path) is not RemoteType.NONE or not os.path.isabs(path):
        return False
    return await is_git_repo(path)


def _parse_color(color: str | None) -> str | None:
    if color is None or color.lower() == "none":
        return None
    return ColorService.normalize(color)


# ---------------------------------------------------------------------------
# Command group
# ---------------------------------------------------------------------------


@click.group()
@click.option("--workspace", default=None, help="Open folder or .code-workspace file (default: PROJECTDASH_WORKSPACE).")
@click.option("--log-level", default=None, help="Log level (default: from PROJECTDASH_LOG_LEVEL or WARNING).")
@click.pass_context
def main(ctx: click.Context, workspace: str | None, log_level: str | None) -> None:
    """Projectdash - grouped local and remote projects, opened in VS Code."""
    if ctx.obj is None:
        settings = get_settings()
        if workspace:
            settings = settings.model_copy(update={"workspace": workspace})
        setup_logging(log_level or settings.log_level, settings.log_file)
        ctx.obj = DashboardContext.from_settings(settings)
    elif log_level:
        setup_logging(log_level)

    dash: DashboardContext = ctx.obj
    # "migrate" runs the same check itself and reports the outcome on stdout.
    if ctx.invoked_subcommand != "migrate" and _run(dash.check_data_migration):
        click.echo("Migrated dashboard projects after changing settings.", err=True)


pass_dash = click.make_pass_decorator(DashboardContext)


# ---------------------------------------------------------------------------
# Listing and opening
# ---------------------------------------------------------------------------


@main.command("list")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the stored JSON document.")
@pass_dash
def list_projects(dash: DashboardContext, as_json: bool) -> None:
    """Show groups and their projects."""
    groups = _run(dash.service.get_groups) or []

    if as_json:
        click.echo(json.dumps(dump_groups(groups), indent=2, ensure_ascii=False))
        return

    if not groups:
        click.echo("No projects yet. Add one with 'projectdash add PATH'.")
        if _run(dash.other_storage_has_data):
            click.echo("Projects exist in the other storage; run 'projectdash import-other-storage'.")
        return

    for group, label in zip(groups, _group_labels(groups), strict=True):
        suffix = " (collapsed)" if group.collapsed else ""
        click.secho(f"{label}  [{group.id}]{suffix}", bold=True)
        if group.collapsed:
            continue
        for project in group.projects:
            remote = get_remote_type(project.path)
            tags = [] if remote is RemoteType.NONE else [remote.value]
            if project.is_git_repo:
                tags.append("git")
            tag_text = f" ({', '.join(tags)})" if tags else ""
            color = dash.colors.effective_color(project)
            color_text = f" {color}" if color else ""
            click.echo(f"  {project.name}{tag_text}  {project.path}  [{project.id}]{color_text}")


@main.command("open")
@click.argument("project")
@click.option("--new-window", is_flag=True, default=False, help="Open in a new window.")
@click.option("--add", "add_to_workspace", is_flag=True, default=False, help="Add to the open workspace.")
@pass_dash
def open_cmd(dash: DashboardContext, project: str, new_window: bool, add_to_workspace: bool) -> None:
    """Open PROJECT (id or name) in the current window."""
    if new_window and add_to_workspace:
        raise click.UsageError("--new-window and --add are mutually exclusive.")
    mode = OpenMode.DEFAULT
    if new_window:
        mode = OpenMode.NEW_WINDOW
    elif add_to_workspace:
        mode = OpenMode.ADD_TO_WORKSPACE

    async def _open() -> None:
        await dash.open(await _resolve_project(dash.service, project), mode)

    _run(_open)


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


@main.command("add")
@click.argument("path")
@click.option("--name", default=None, help="Display name (default: prompt, suggesting the last path segment).")
@click.option("--group", "group_ref", default=None, help="Target group id or name (default: first group).")
@click.option("--new-group", default=None, help="Create a new group with this name for the project.")
@click.option("--color", default=None, help="Palette name, CSS value, RANDOM, WORKSPACE or none.")
@pass_dash
def add_project(
    dash: DashboardContext,
    path: str,
    name: str | None,
    group_ref: str | None,
    new_group: str | None,
    color: str | None,
) -> None:
    """Add PATH (folder, file, or vscode-remote:// target) as a project."""
    if group_ref and new_group:
        raise click.UsageError("--group and --new-group are mutually exclusive.")

    try:
        if name is None:
            name = _prompt("Project name", default=get_last_part_of_path(path) or None)
    except UserCancelledError:
        return

    async def _add() -> Project:
        created = await dash.service.add_group(new_group) if new_group else None
        try:
            group_id = created.id if created else None
            if group_ref:
                group_id = (await _resolve_group(dash.service, group_ref)).id
            body = ProjectCreate(name=name, path=path, color=_parse_color(color))
            is_git = await _detect_git(body.path)
            project = await dash.service.add_project(body, group_id, is_git_repo=is_git)
        except BaseException:
            if created is not None:
                await dash.service.remove_group(created.id)
            raise
        await dash.colors.add_recent_color(project.color)
        return project

    project = _run(_add)
    if project is not None:
        click.echo(f"Added {project.name} [{project.id}]")


@main.command("add-folder")
@click.argument("folder", type=click.Path(exists=True, file_okay=False))
@pass_dash
def add_folder(dash: DashboardContext, folder: str) -> None:
    """Add every sub-folder of FOLDER as a project, in a new group named after it."""

    async def _add_all() -> Group:
        root = Path(folder).resolve()
        group = await dash.service.add_group(root.name)
        for sub in get_folders(root):
            body = ProjectCreate(name=sub.name, path=str(sub), color=dash.colors.random_color())
            await dash.service.add_project(body, group.id, is_git_repo=await is_git_repo(sub))
        return await dash.service.get_group(group.id)

    group = _run(_add_all)
    if group is not None:
        click.echo(f"Added group {group.group_name} with {len(group.projects)} project(s)")


@main.command("remove")
@click.argument("project")
@click.option("--yes", is_flag=True, default=False, help="Do not ask for confirmation.")
@pass_dash
def remove_project(dash: DashboardContext, project: str, yes: bool) -> None:
    """Remove PROJECT (id or name)."""
    target = _run(_resolve_project, dash.service, project)
    if target is None:
        return
    if not yes and not click.confirm(f"Remove {target.name}?", default=False):
        return
    _run(dash.service.remove_project, target.id)
    click.echo(f"Removed {target.name}")


@main.command("edit-project")
@click.argument("project")
@click.option("--name", default=None, help="New display name.")
@click.option("--path", default=None, help="New path.")
@click.option("--color", default=None, help="Palette name, CSS value, RANDOM, WORKSPACE or none.")
@pass_dash
def edit_project(dash: DashboardContext, project: str, name: str | None, path: str | None, color: str | None) -> None:
    """Change the name, path or color of PROJECT."""
    changes: dict[str, str | None] = {}
    if name is not None:
        changes["name"] = name
    if path is not None:
        changes["path"] = path
    if color is not None:
        changes["color"] = _parse_color(color)
    if not changes:
        raise click.UsageError("Nothing to change; pass --name, --path or --color.")

    async def _edit() -> Project:
        target = await _resolve_project(dash.service, project)
        body = ProjectUpdate(**changes)
        is_git = await _detect_git(body.path) if body.path is not None else None
        updated = await dash.service.update_project(target.id, body, is_git_repo=is_git)
        await dash.colors.add_recent_color(updated.color)
        return updated

    updated = _run(_edit)
    if updated is not None:
        click.echo(f"Updated {updated.name}")


@main.command("color")
@click.argument("project")
@click.argument("color")
@pass_dash
def color_project(dash: DashboardContext, project: str, color: str) -> None:
    """Set the color of PROJECT (palette name, CSS value, RANDOM, WORKSPACE or none)."""

    async def _color() -> Project:
        target = await _resolve_project(dash.service, project)
        updated = await dash.service.update_project(target.id, ProjectUpdate(color=_parse_color(color)))
        await dash.colors.add_recent_color(updated.color)
        return updated

    updated = _run(_color)
    if updated is not None:
        click.echo(f"{updated.name}: {updated.color or 'no color'}")


@main.command("recent-colors")
@pass_dash
def recent_colors(dash: DashboardContext) -> None:
    """List recently used colors."""
    colors = _run(dash.colors.get_recent_colors) or []
    if not colors:
        click.echo("No colors have recently been used.")
    for code in colors:
        name = ColorService.color_name(code)
        click.echo(f"{name}    ({code})" if name else code)


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------


@main.command("add-group")
@click.argument("name")
@pass_dash
def add_group(dash: DashboardContext, name: str) -> None:
    """Add an empty group called NAME."""
    group = _run(dash.service.add_group, name)
    if group is not None:
        click.echo(f"Added group {group.group_name} [{group.id}]")


@main.command("rename-group")
@click.argument("group")
@click.argument("name")
@pass_dash
def rename_group(dash: DashboardContext, group: str, name: str) -> None:
    """Rename GROUP (id or name) to NAME."""

    async def _rename() -> Group:
        target = await _resolve_group(dash.service, group)
        return await dash.service.update_group(target.id, GroupUpdate(group_name=name))

    if _run(_rename) is not None:
        click.echo(f"Renamed group to {name}")


@main.command("remove-group")
@click.argument("group")
@click.option("--yes", is_flag=True, default=False, help="Do not ask for confirmation.")
@pass_dash
def remove_group(dash: DashboardContext, group: str, yes: bool) -> None:
    """Remove GROUP (id or name) together with its projects."""
    target = _run(_resolve_group, dash.service, group)
    if target is None:
        return
    label = target.group_name or "the default group"
    if not yes and not click.confirm(f"Remove {label} from dashboard?", default=False):
        return
    _run(dash.service.remove_group, target.id)
    click.echo(f"Removed {label}")


@main.command("collapse")
@click.argument("group")
@pass_dash
def collapse_group(dash: DashboardContext, group: str) -> None:
    """Toggle whether GROUP is shown collapsed."""

    async def _toggle() -> Group:
        target = await _resolve_group(dash.service, group)
        return await dash.service.toggle_collapsed(target.id)

    toggled = _run(_toggle)
    if toggled is not None:
        click.echo("Collapsed" if toggled.collapsed else "Expanded")


@main.command("reorder")
@click.argument("orders", type=click.File("r"))
@pass_dash
def reorder(dash: DashboardContext, orders: IO[str]) -> None:
    """Reorder projects from a JSON list of {groupId, projectIds} ('-' for stdin)."""
    try:
        group_orders = GROUP_ORDERS_ADAPTER.validate_json(orders.read())
    except ValueError as exc:
        raise click.ClickException(f"Invalid argument passed to reordering projects: {exc}") from exc
    groups = _run(dash.service.reorder_groups, group_orders)
    if groups is not None:
        click.echo(f"Reordered {sum(len(g.projects) for g in groups)} project(s) in {len(groups)} group(s)")


# ---------------------------------------------------------------------------
# Bulk editing and storage
# ---------------------------------------------------------------------------


@main.command("edit")
@click.option("--editor", default=None, help="Editor command (default: $VISUAL / $EDITOR).")
@pass_dash
def edit_manually(dash: DashboardContext, editor: str | None) -> None:
    """Edit the whole project list as JSON in an editor."""
    session = dash.manual_edit_session()
    path = _run(session.export, dash.service)
    if path is None:
        return

    while True:
        before = path.stat().st_mtime_ns
        click.edit(filename=str(path), editor=editor)
        if path.stat().st_mtime_ns == before:
            click.echo("No changes saved.")
            return

        result = _run(session.apply, dash.service)
        if result is None:
            return
        if result.ok:
            click.echo(f"Saved {len(result.groups)} group(s).")
            return
        click.echo(f"{result.error} {result.detail or ''}".strip(), err=True)
        if not click.confirm("Edit again?", default=True):
            return


@main.command("migrate")
@pass_dash
def migrate(dash: DashboardContext) -> None:
    """Copy projects into the configured storage if it is empty."""
    if _run(dash.check_data_migration):
        click.echo("Migrated projects.")
    else:
        click.echo("Nothing to migrate.")


@main.command("import-other-storage")
@pass_dash
def import_other_storage(dash: DashboardContext) -> None:
    """Import projects from the storage that is not configured."""
    imported = _run(
        partial(
            import_from_other_storage,
            dash.state_store,
            dash.settings_store,
            use_settings=dash.use_settings_storage,
        )
    )
    click.echo("Imported projects." if imported else "Nothing to import: the active storage already has projects or the other one is empty.")


if __name__ == "__main__":
    main()
