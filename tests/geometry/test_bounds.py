"""Tests for bounds metrics and bounds expansion."""

import math

import pytest

from fieldarea.geometry import (
    METERS_PER_DEGREE_LAT,
    MIN_BOUNDS_DIMENSION_M,
    BoundsMetrics,
    Point,
    compute_bounds_meters,
    expand_bounds,
)


def _metrics(min_lat=10.0, max_lat=11.0, min_lng=20.0, max_lng=22.0) -> BoundsMetrics:
    return BoundsMetrics(
        width_meters=100.0,
        height_meters=50.0,
        aspect_ratio=2.0,
        min_lat=min_lat,
        max_lat=max_lat,
        min_lng=min_lng,
        max_lng=max_lng,
    )


class TestComputeBoundsMeters:
    def test_fewer_than_three_points(self):
        assert compute_bounds_meters([]) is None
        assert compute_bounds_meters([Point(0, 0), Point(1, 1)]) is None

    def test_extent_and_edges(self):
        points = [Point(0.0, 0.0), Point(0.0, 0.002), Point(0.001, 0.001)]
        metrics = compute_bounds_meters(points)

        assert metrics.min_lat == 0.0
        assert metrics.max_lat == 0.001
        assert metrics.min_lng == 0.0
        assert metrics.max_lng == 0.002

        center_lat = 0.0005
        expected_width = 0.002 * METERS_PER_DEGREE_LAT * math.cos(math.radians(center_lat))
        assert metrics.width_meters == pytest.approx(expected_width)
        assert metrics.height_meters == pytest.approx(0.001 * METERS_PER_DEGREE_LAT)
        assert metrics.aspect_ratio == pytest.approx(
            metrics.width_meters / metrics.height_meters
        )

    def test_width_uses_center_latitude(self):
        points = [Point(59.9, 10.0), Point(60.1, 10.0), Point(60.0, 10.01)]
        metrics = compute_bounds_meters(points)
        expected = 0.01 * METERS_PER_DEGREE_LAT * math.cos(math.radians(60.0))
        assert metrics.width_meters == pytest.approx(expected)

    def test_coincident_points_clamped(self):
        """Identical points give a 10 m x 10 m box, never zero."""
        points = [Point(5.0, 5.0)] * 3
        metrics = compute_bounds_meters(points)
        assert metrics.width_meters == MIN_BOUNDS_DIMENSION_M
        assert metrics.height_meters == MIN_BOUNDS_DIMENSION_M
        assert metrics.aspect_ratio == 1.0

    def test_collinear_points_clamp_one_axis(self):
        points = [Point(0.0, 0.0), Point(0.0, 0.001), Point(0.0, 0.002)]
        metrics = compute_bounds_meters(points)
        assert metrics.height_meters == MIN_BOUNDS_DIMENSION_M
        assert metrics.width_meters > MIN_BOUNDS_DIMENSION_M
        assert math.isfinite(metrics.aspect_ratio)

    def test_center_and_dict(self):
        metrics = compute_bounds_meters([Point(0, 0), Point(0, 2), Point(2, 2)])
        assert metrics.center == Point(1.0, 1.0)
        data = metrics.to_dict()
        assert set(data) == {
            "widthMeters",
            "heightMeters",
            "aspectRatio",
            "minLat",
            "maxLat",
            "minLng",
            "maxLng",
        }


class TestExpandBounds:
    def test_pads_each_edge_by_fraction_of_span(self):
        bounds = expand_bounds(_metrics(), 0.15)
        assert bounds.min_lat == pytest.approx(10.0 - 0.15)
        assert bounds.max_lat == pytest.approx(11.0 + 0.15)
        assert bounds.min_lng == pytest.approx(20.0 - 0.3)
        assert bounds.max_lng == pytest.approx(22.0 + 0.3)

    def test_zero_fraction_keeps_edges(self):
        bounds = expand_bounds(_metrics(), 0.0)
        assert bounds.bbox == (20.0, 10.0, 22.0, 11.0)

    def test_corners(self):
        bounds = expand_bounds(_metrics(), 0.0)
        assert bounds.south_west == Point(10.0, 20.0)
        assert bounds.north_east == Point(11.0, 22.0)

    def test_negative_fraction_rejected(self):
        with pytest.raises(ValueError):
            expand_bounds(_metrics(), -0.1)
