"""Tests for the local draft workspace."""

import json

import pytest

from fieldarea.sessions import CurrentSessionState, PointKind
from fieldarea.workspace import POINTS_FILENAME, SESSION_FILENAME, DraftWorkspace


@pytest.fixture
def workspace(tmp_path):
    return DraftWorkspace(tmp_path / "draft")


class TestPoints:
    def test_empty_until_first_point(self, workspace):
        assert workspace.load_points() == []
        assert not workspace.base_path.exists()

    def test_record_and_reload(self, workspace):
        workspace.record_point(1.0, 2.0, captured_at_ms=100)
        workspace.record_point(1.5, 2.5, PointKind.AUTO, captured_at_ms=200)

        points = DraftWorkspace(workspace.base_path).load_points()

        assert [(p.lat, p.lng, p.kind, p.captured_at_ms) for p in points] == [
            (1.0, 2.0, PointKind.MANUAL, 100),
            (1.5, 2.5, PointKind.AUTO, 200),
        ]

    def test_default_timestamp_is_now(self, workspace):
        point = workspace.record_point(1.0, 2.0)
        assert point.captured_at_ms > 1_600_000_000_000

    def test_legacy_flat_points_file(self, workspace):
        workspace.base_path.mkdir(parents=True)
        (workspace.base_path / POINTS_FILENAME).write_text(
            json.dumps([{"lat": 3.0, "lng": 4.0, "type": "auto", "timestamp": 5}])
        )
        (point,) = workspace.load_points()
        assert (point.lat, point.lng, point.kind) == (3.0, 4.0, PointKind.AUTO)

    @pytest.mark.parametrize("content", ["not json", '{"lat": 1}'])
    def test_corrupt_points_file(self, workspace, content, caplog):
        workspace.base_path.mkdir(parents=True)
        (workspace.base_path / POINTS_FILENAME).write_text(content)

        assert workspace.load_points() == []
        assert POINTS_FILENAME in caplog.text


class TestCurrentSession:
    def test_round_trip(self, workspace):
        state = CurrentSessionState("s1", "Field", "2024-01-01T00:00:00.000Z", "abcd")
        workspace.set_current_session(state)
        assert workspace.current_session() == state

    def test_malformed_file(self, workspace):
        workspace.base_path.mkdir(parents=True)
        (workspace.base_path / SESSION_FILENAME).write_text(json.dumps({"id": 3}))
        assert workspace.current_session() is None

    def test_clear(self, workspace):
        workspace.record_point(1.0, 2.0)
        workspace.set_current_session(CurrentSessionState("s1", "F", "t", "h"))

        workspace.clear()

        assert workspace.load_points() == []
        assert workspace.current_session() is None

    def test_clear_session_keeps_points(self, workspace):
        workspace.record_point(1.0, 2.0)
        workspace.set_current_session(CurrentSessionState("s1", "F", "t", "h"))

        workspace.clear_session()

        assert len(workspace.load_points()) == 1
        assert workspace.current_session() is None
