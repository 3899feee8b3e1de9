"""
Points Commands - Record and inspect the draft measurement.

Usage:
    fieldarea points add --lat 32.0853 --lng 34.7818
    fieldarea points add --lat 32.0854 --lng 34.7819 --kind auto
    fieldarea points list
    fieldarea points clear
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import click

from fieldarea.sessions.models import PointKind
from fieldarea.workspace import DraftWorkspace

logger = logging.getLogger("fieldarea.cli.points")


def _workspace(obj) -> DraftWorkspace:
    return DraftWorkspace(obj["settings"].workspace_path)


@click.group("points")
def points():
    """Record and inspect the points of the current measurement."""


@points.command("add")
@click.option("--lat", type=click.FloatRange(-90.0, 90.0), required=True, help="Latitude in degrees.")
@click.option("--lng", type=click.FloatRange(-180.0, 180.0), required=True, help="Longitude in degrees.")
@click.option(
    "--kind",
    type=click.Choice([k.value for k in PointKind], case_sensitive=False),
    default=PointKind.MANUAL.value,
    help="How the point was captured (default: manual).",
)
@click.option(
    "--timestamp",
    "timestamp_ms",
    type=int,
    default=None,
    help="Capture time in epoch milliseconds (default: now).",
)
@click.pass_obj
def add(obj, lat: float, lng: float, kind: str, timestamp_ms: Optional[int]):
    """Append a point to the draft."""
    workspace = _workspace(obj)
    point = workspace.record_point(lat, lng, PointKind(kind.lower()), timestamp_ms)
    count = len(workspace.load_points())
    logger.debug("Recorded %s point at %s,%s", point.kind.value, lat, lng)
    click.echo(f"Recorded {point.kind.value} point #{count}: {lat:.6f}, {lng:.6f}")


@points.command("list")
@click.pass_obj
def list_points(obj):
    """Show the draft points in recorded order."""
    recorded = _workspace(obj).load_points()
    if not recorded:
        click.echo("No points recorded.")
        return

    for i, p in enumerate(recorded, start=1):
        captured = datetime.fromtimestamp(p.captured_at_ms / 1000.0, tz=timezone.utc)
        click.echo(
            f"{i:4d}  {p.kind.value:<6}  {p.lat:11.6f}  {p.lng:11.6f}  "
            f"{captured.strftime('%Y-%m-%d %H:%M:%S')}Z"
        )


@points.command("clear")
@click.pass_obj
def clear(obj):
    """Discard the draft and start a new measurement."""
    _workspace(obj).clear()
    click.echo("Cleared points and current session.")
