import numpy as np
import pytest

from mavplan.interactive_markers import (
    POSE_UPDATE,
    InteractionMode,
    InteractiveMarker,
    MarkerServer,
    PlanningInteractiveMarkers,
)
from mavplan.utils import TrajectoryPoint


def _pose(x, y, z, yaw=0.0):
    point = TrajectoryPoint(position=(x, y, z))
    point.set_from_yaw(yaw)
    return point


@pytest.fixture
def markers():
    planning = PlanningInteractiveMarkers(MarkerServer())
    planning.initialize()
    return planning


def test_server_changes_wait_for_apply():
    server = MarkerServer()
    server.insert(InteractiveMarker(name="m"))
    assert "m" not in server.markers
    server.apply_changes()
    assert "m" in server.markers
    server.erase("m")
    server.apply_changes()
    assert "m" not in server.markers


def test_server_set_pose_unknown_name():
    server = MarkerServer()
    assert server.set_pose("missing", _pose(1, 2, 3)) is False


def test_set_pose_marker_controls(markers):
    names = [c.name for c in markers.set_pose_marker.controls]
    assert names == [
        "rotate_yaw", "move z", "move x", "move y", "move x_y", "move y_x", "heli",
    ]
    assert markers.set_pose_marker.controls[0].interaction_mode is InteractionMode.ROTATE_AXIS
    assert markers.set_pose_marker.controls[-1].always_visible is True
    assert markers.initialized is True


def test_enable_marker_before_initialize_raises():
    planning = PlanningInteractiveMarkers(MarkerServer())
    with pytest.raises(RuntimeError):
        planning.enable_marker("start", _pose(0, 0, 0))


def test_enable_marker_labels_with_id(markers):
    markers.enable_marker("start", _pose(1.0, 2.0, 3.0))
    published = markers.server.markers["start"]
    assert published.controls[0].markers[1].text == "start"
    assert np.allclose(published.pose.position, [1.0, 2.0, 3.0])
    assert markers.marker_prototype.controls[0].markers[1].text == "placeholder"


def test_update_and_disable_marker(markers):
    markers.enable_marker("goal", _pose(0.0, 0.0, 0.0))
    markers.update_marker_pose("goal", _pose(4.0, 5.0, 6.0))
    assert np.allclose(markers.server.markers["goal"].pose.position, [4.0, 5.0, 6.0])
    markers.disable_marker("goal")
    assert "goal" not in markers.server.markers
    markers.enable_marker("goal", _pose(7.0, 8.0, 9.0))
    assert np.allclose(markers.server.markers["goal"].pose.position, [7.0, 8.0, 9.0])


def test_update_unknown_marker_is_ignored(markers):
    markers.update_marker_pose("nothing", _pose(1, 1, 1))
    assert markers.server.markers == {}


def test_set_pose_marker_lifecycle(markers):
    markers.enable_set_pose_marker(_pose(1.0, 1.0, 1.0, 0.5))
    assert "set_pose" in markers.server.markers
    markers.set_pose(_pose(2.0, 3.0, 4.0, 0.5))
    published = markers.server.markers["set_pose"]
    assert np.allclose(published.pose.position, [2.0, 3.0, 4.0])
    assert published.pose.yaw() == pytest.approx(0.5)
    markers.disable_set_pose_marker()
    assert "set_pose" not in markers.server.markers


def test_feedback_reaches_callback_only_on_pose_update(markers):
    received = []
    markers.set_pose_updated_callback(received.append)
    markers.process_set_pose_feedback(0, _pose(1.0, 1.0, 1.0))
    assert received == []
    markers.process_set_pose_feedback(POSE_UPDATE, _pose(3.0, 2.0, 1.0, 1.0))
    assert len(received) == 1
    assert np.allclose(received[0].position, [3.0, 2.0, 1.0])
    assert received[0].yaw() == pytest.approx(1.0)


def test_set_frame_id_applies_to_new_markers(markers):
    markers.set_frame_id("map")
    markers.enable_marker("start", _pose(0, 0, 0))
    assert markers.server.markers["start"].frame_id == "map"
    assert markers.set_pose_marker.frame_id == "map"
    assert markers.frame_id == "map"