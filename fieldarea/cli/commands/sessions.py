"""
Sessions Commands - Save, load and manage measurements in the object store.

Usage:
    fieldarea --user alice sessions save "North field"
    fieldarea --user alice sessions list
    fieldarea --user alice sessions load 5b1f...
    fieldarea --user alice sessions update
    fieldarea --user alice sessions rename 5b1f... "North field (2024)"
    fieldarea --user alice sessions delete 5b1f...
    fieldarea --user alice sessions repair 5b1f...
    fieldarea --user alice sessions purge --yes
    fieldarea sessions status
"""

import asyncio
import logging
from dataclasses import replace
from typing import Any, Coroutine, TypeVar

import click

from fieldarea.cli.commands.area import format_area
from fieldarea.config import build_object_store
from fieldarea.sessions.errors import SessionValidationError, StorageError, StorageErrorCode
from fieldarea.sessions.state import (
    has_unsaved_changes,
    measured_area,
    state_from_loaded,
    state_from_saved,
)
from fieldarea.sessions.store import SessionStore, StaticIdentity
from fieldarea.workspace import DraftWorkspace

logger = logging.getLogger("fieldarea.cli.sessions")

T = TypeVar("T")


def _store(obj) -> SessionStore:
    settings = obj["settings"]
    return SessionStore(build_object_store(settings), StaticIdentity(settings.user_id))


def _workspace(obj) -> DraftWorkspace:
    return DraftWorkspace(obj["settings"].workspace_path)


def _run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a store coroutine, turning its failures into CLI errors."""
    try:
        return asyncio.run(coro)
    except SessionValidationError as e:
        raise click.UsageError(str(e))
    except StorageError as e:
        logger.debug("Storage operation failed: %r", e)
        click.echo(f"Error: {e.message} [{e.code.value}]", err=True)
        if e.code == StorageErrorCode.NOT_AUTHENTICATED:
            click.echo("Sign in with --user or FIELDAREA_USER_ID.", err=True)
        elif e.retry:
            click.echo("The operation can be retried.", err=True)
        raise SystemExit(1)


@click.group("sessions")
def sessions():
    """Save and manage measurement sessions."""


@sessions.command("list")
@click.pass_obj
def list_sessions(obj):
    """List saved sessions, most recently updated first."""
    metas = _run(_store(obj).list_sessions())
    if not metas:
        click.echo("No saved sessions.")
        return

    current = _workspace(obj).current_session()
    for meta in metas:
        marker = "*" if current is not None and current.id == meta.id else " "
        click.echo(
            f"{marker} {meta.id}  {meta.name:<30}  {format_area(meta.area):>24}  "
            f"{meta.point_count:5d} pts  {meta.updated_at}"
        )


@sessions.command("save")
@click.argument("name")
@click.pass_obj
def save(obj, name: str):
    """Save the draft points as a new session called NAME."""
    workspace = _workspace(obj)
    recorded = workspace.load_points()
    meta = _run(_store(obj).save_new_session(name, recorded, measured_area(recorded)))
    workspace.set_current_session(state_from_saved(meta, recorded))
    click.echo(f"Saved '{meta.name}' as {meta.id} ({meta.point_count} points, {format_area(meta.area)})")


@sessions.command("update")
@click.pass_obj
def update(obj):
    """Overwrite the current session with the draft points."""
    workspace = _workspace(obj)
    current = workspace.current_session()
    if current is None:
        raise click.UsageError("No current session. Use 'sessions save NAME' or 'sessions load ID' first.")

    recorded = workspace.load_points()
    meta = _run(_store(obj).update_session(current.id, recorded, measured_area(recorded)))
    workspace.set_current_session(state_from_saved(meta, recorded))
    click.echo(f"Updated '{meta.name}' ({meta.point_count} points, {format_area(meta.area)})")


@sessions.command("load")
@click.argument("session_id")
@click.option(
    "--force",
    is_flag=True,
    default=False,
    help="Replace the draft even if it has unsaved changes.",
)
@click.pass_obj
def load(obj, session_id: str, force: bool):
    """Replace the draft with the points of session SESSION_ID."""
    workspace = _workspace(obj)
    current = workspace.current_session()
    if not force and has_unsaved_changes(current, workspace.load_points()):
        raise click.UsageError(
            f"'{current.name}' has unsaved changes. Run 'sessions update' or pass --force."
        )

    store = _store(obj)

    async def _load():
        data = await store.load_session(session_id)
        index = await store.fetch_index()
        entry = index.find(session_id) if index is not None else None
        return data, entry.name if entry is not None else None

    try:
        data, name = _run(_load())
    except SystemExit:
        if store.last_error is not None and store.last_error.code == StorageErrorCode.SESSION_NOT_FOUND:
            click.echo(
                f"Run 'fieldarea sessions repair {session_id}' to remove it from the list.",
                err=True,
            )
        raise

    workspace.save_points(data.points)
    state = state_from_loaded(data, name)
    workspace.set_current_session(state)
    click.echo(f"Loaded '{state.name}' ({len(data.points)} points, {format_area(data.area)})")


@sessions.command("rename")
@click.argument("session_id")
@click.argument("new_name")
@click.pass_obj
def rename(obj, session_id: str, new_name: str):
    """Rename session SESSION_ID to NEW_NAME."""
    _run(_store(obj).rename_session(session_id, new_name))

    workspace = _workspace(obj)
    current = workspace.current_session()
    if current is not None and current.id == session_id:
        workspace.set_current_session(replace(current, name=new_name.strip()))
    click.echo(f"Renamed {session_id} to '{new_name.strip()}'")


@sessions.command("delete")
@click.argument("session_id")
@click.pass_obj
def delete(obj, session_id: str):
    """Delete session SESSION_ID."""
    _run(_store(obj).delete_session(session_id))

    workspace = _workspace(obj)
    current = workspace.current_session()
    if current is not None and current.id == session_id:
        workspace.clear_session()
    click.echo(f"Deleted {session_id}")


@sessions.command("repair")
@click.argument("session_id")
@click.pass_obj
def repair(obj, session_id: str):
    """Remove SESSION_ID from the list without touching its file."""
    removed = _run(_store(obj).remove_from_index(session_id))
    if removed:
        click.echo(f"Removed {session_id} from the session list")
    else:
        click.echo(f"{session_id} is not in the session list")


@sessions.command("purge")
@click.confirmation_option(prompt="Delete ALL saved sessions?")
@click.pass_obj
def purge(obj):
    """Delete every saved session and the session list."""
    deleted = _run(_store(obj).delete_all_sessions())
    _workspace(obj).clear_session()
    click.echo(f"Deleted {deleted} session(s)")


@sessions.command("status")
@click.pass_obj
def status(obj):
    """Show the current session and whether the draft has unsaved changes."""
    workspace = _workspace(obj)
    recorded = workspace.load_points()
    current = workspace.current_session()

    click.echo(f"Points: {len(recorded)}")
    click.echo(f"Area: {format_area(measured_area(recorded))}")
    if current is None:
        click.echo("Session: (new, not saved)")
        return

    click.echo(f"Session: {current.name} ({current.id})")
    click.echo(f"Last saved: {current.last_saved_at}")
    if has_unsaved_changes(current, recorded):
        click.echo("Unsaved changes: yes")
    else:
        click.echo("Unsaved changes: no")
