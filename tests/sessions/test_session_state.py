"""Tests for caller-side session state helpers."""

import pytest

from fieldarea.geometry import Point
from fieldarea.sessions import (
    CurrentSessionState,
    PointKind,
    SessionData,
    SessionMeta,
    TrackedPoint,
    hash_points,
)
from fieldarea.sessions.state import (
    has_unsaved_changes,
    measured_area,
    state_from_loaded,
    state_from_saved,
    visible_points,
)


def _tp(lat, lng, kind=PointKind.MANUAL, ts=0) -> TrackedPoint:
    return TrackedPoint(point=Point(lat, lng), kind=kind, captured_at_ms=ts)


SQUARE = [
    _tp(0.0, 0.0, ts=1),
    _tp(0.0, 0.001, ts=2),
    _tp(0.001, 0.001, ts=3),
    _tp(0.001, 0.0, ts=4),
]


class TestStateConstruction:
    def test_from_saved(self):
        meta = SessionMeta(
            id="s1",
            name="Field A",
            created_at="2024-01-01T00:00:00.000Z",
            updated_at="2024-01-02T00:00:00.000Z",
        )
        state = state_from_saved(meta, SQUARE)
        assert state == CurrentSessionState(
            id="s1",
            name="Field A",
            last_saved_at="2024-01-02T00:00:00.000Z",
            points_hash_at_save=hash_points(SQUARE),
        )

    def test_from_loaded_prefers_index_name(self):
        data = SessionData(
            id="s1",
            name="Old name",
            created_at="2024-01-01T00:00:00.000Z",
            updated_at="2024-01-03T00:00:00.000Z",
            points=list(SQUARE),
        )
        assert state_from_loaded(data, "New name").name == "New name"
        assert state_from_loaded(data).name == "Old name"
        assert state_from_loaded(data).last_saved_at == "2024-01-03T00:00:00.000Z"


class TestHasUnsavedChanges:
    def test_unsaved_measurement_has_no_baseline(self):
        assert has_unsaved_changes(None, SQUARE) is False

    def test_unchanged(self):
        state = CurrentSessionState("s1", "A", "t", hash_points(SQUARE))
        assert has_unsaved_changes(state, list(SQUARE)) is False

    def test_added_point(self):
        state = CurrentSessionState("s1", "A", "t", hash_points(SQUARE))
        assert has_unsaved_changes(state, SQUARE + [_tp(0.002, 0.0, ts=5)]) is True

    def test_removed_point(self):
        state = CurrentSessionState("s1", "A", "t", hash_points(SQUARE))
        assert has_unsaved_changes(state, SQUARE[:-1]) is True


class TestVisiblePoints:
    def test_sorted_by_capture_time(self):
        shuffled = [SQUARE[2], SQUARE[0], SQUARE[3], SQUARE[1]]
        assert visible_points(shuffled) == SQUARE

    def test_stable_for_equal_timestamps(self):
        a = _tp(1.0, 1.0, ts=7)
        b = _tp(2.0, 2.0, ts=7)
        assert visible_points([b, a]) == [b, a]

    def test_filters_by_kind(self):
        mixed = [
            _tp(0.0, 0.0, PointKind.MANUAL, 1),
            _tp(0.0, 0.001, PointKind.AUTO, 2),
            _tp(0.001, 0.001, PointKind.MANUAL, 3),
        ]
        assert [p.kind for p in visible_points(mixed, include_auto=False)] == [
            PointKind.MANUAL,
            PointKind.MANUAL,
        ]
        assert [p.kind for p in visible_points(mixed, include_manual=False)] == [PointKind.AUTO]
        assert visible_points(mixed, include_manual=False, include_auto=False) == []


class TestMeasuredArea:
    def test_area_of_ordered_square(self):
        assert 12_300 <= measured_area(SQUARE) <= 12_400

    def test_out_of_order_recording_is_reordered(self):
        shuffled = [SQUARE[2], SQUARE[0], SQUARE[3], SQUARE[1]]
        assert measured_area(shuffled) == pytest.approx(measured_area(SQUARE))

    def test_filtered_below_three_points(self):
        points = SQUARE[:2] + [_tp(0.001, 0.001, PointKind.AUTO, 3)]
        assert measured_area(points, include_auto=False) == 0.0
