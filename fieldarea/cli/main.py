"""
FieldArea CLI entry point.

Usage:
    fieldarea points add --lat 32.0853 --lng 34.7818
    fieldarea area
    fieldarea --user alice sessions save "North field"
    fieldarea --user alice sessions list
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from fieldarea.cli.commands.area import area
from fieldarea.cli.commands.points import points
from fieldarea.cli.commands.sessions import sessions
from fieldarea.config import LogLevel, get_settings_uncached


@click.group("fieldarea")
@click.option(
    "--user",
    "-u",
    "user_id",
    type=str,
    default=None,
    help="Signed-in user id (overrides FIELDAREA_USER_ID).",
)
@click.option(
    "--workspace",
    "-w",
    "workspace_path",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Draft workspace directory (overrides FIELDAREA_WORKSPACE_PATH).",
)
@click.option(
    "--store-path",
    "store_path",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Root of the local object store (overrides FIELDAREA_STORAGE_LOCAL_PATH).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)
@click.version_option(package_name="fieldarea")
@click.pass_context
def app(
    ctx: click.Context,
    user_id: Optional[str],
    workspace_path: Optional[Path],
    store_path: Optional[Path],
    verbose: bool,
):
    """
    Record GPS points, measure the enclosed area and manage saved sessions.
    """
    settings = get_settings_uncached()

    updates = {}
    if user_id is not None:
        updates["user_id"] = user_id.strip() or None
    if workspace_path is not None:
        updates["workspace_path"] = workspace_path
    if store_path is not None:
        updates["storage"] = settings.storage.model_copy(update={"local_path": store_path})
    if verbose:
        updates["log_level"] = LogLevel.DEBUG
    if updates:
        settings = settings.model_copy(update=updates)

    logging.basicConfig(
        level=settings.log_level.value,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    ctx.obj = {"settings": settings}


app.add_command(points)
app.add_command(area)
app.add_command(sessions)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
