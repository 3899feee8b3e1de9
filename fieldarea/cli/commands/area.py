"""
Area Command - Measure the polygon traced by the draft points.

Usage:
    fieldarea area
    fieldarea area --no-auto
    fieldarea area --json
"""

import json

import click

from fieldarea.geometry import compute_bounds_meters, expand_bounds
from fieldarea.sessions.state import measured_area, visible_points
from fieldarea.workspace import DraftWorkspace


def format_area(square_meters: float) -> str:
    """Format an area in m², adding hectares for larger values."""
    text = f"{square_meters:,.2f} m²"
    if square_meters >= 10_000:
        text += f" ({square_meters / 10_000:,.2f} ha)"
    return text


@click.command("area")
@click.option("--manual/--no-manual", default=True, help="Include manually recorded points.")
@click.option("--auto/--no-auto", "auto", default=True, help="Include automatically tracked points.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON.")
@click.pass_obj
def area(obj, manual: bool, auto: bool, as_json: bool):
    """
    Compute the area enclosed by the draft points.

    Points are filtered by kind and ordered by capture time before the
    polygon is closed. Fewer than three points measure 0 m².
    """
    settings = obj["settings"]
    recorded = DraftWorkspace(settings.workspace_path).load_points()
    ring = [p.point for p in visible_points(recorded, manual, auto)]
    square_meters = measured_area(recorded, manual, auto)
    metrics = compute_bounds_meters(ring)
    padded = expand_bounds(metrics, settings.bounds_padding) if metrics else None

    if as_json:
        click.echo(
            json.dumps(
                {
                    "area": square_meters,
                    "pointCount": len(ring),
                    "bounds": metrics.to_dict() if metrics else None,
                    "paddedBounds": padded.to_dict() if padded else None,
                },
                indent=2,
            )
        )
        return

    click.echo(f"Points: {len(ring)}")
    click.echo(f"Area: {format_area(square_meters)}")
    if metrics is None:
        click.echo("At least 3 points are needed to enclose an area.")
        return

    click.echo(
        f"Extent: {metrics.width_meters:,.1f} m x {metrics.height_meters:,.1f} m "
        f"(aspect {metrics.aspect_ratio:.2f})"
    )
    click.echo(
        f"Bounds: {metrics.min_lat:.6f},{metrics.min_lng:.6f} -> "
        f"{metrics.max_lat:.6f},{metrics.max_lng:.6f}"
    )
    click.echo(
        f"Padded: {padded.min_lat:.6f},{padded.min_lng:.6f} -> "
        f"{padded.max_lat:.6f},{padded.max_lng:.6f}"
    )
