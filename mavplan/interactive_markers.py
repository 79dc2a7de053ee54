"""Interactive markers for placing start and goal poses."""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable

from mavplan.colors import ColorRGBA
from mavplan.utils import TrajectoryPoint
from mavplan.visualization import Marker, MarkerType

POSE_UPDATE = 1
SET_POSE_NAME = "set_pose"

_HALF_SQRT2 = math.sqrt(2.0) / 2.0
_PURPLE = ColorRGBA(0.5, 0.0, 0.5, 1.0)
_PINK = ColorRGBA(1.0, 0.75, 0.8, 1.0)

PoseCallback = Callable[[TrajectoryPoint], None]


class InteractionMode(IntEnum):
    """How a control reacts to the mouse."""

    NONE = 0
    MENU = 1
    BUTTON = 2
    MOVE_AXIS = 3
    MOVE_PLANE = 4
    ROTATE_AXIS = 5
    MOVE_ROTATE = 6
    MOVE_3D = 7
    ROTATE_3D = 8
    MOVE_ROTATE_3D = 9


def _copy_pose(point: TrajectoryPoint) -> TrajectoryPoint:
    return TrajectoryPoint(position=point.position, orientation=point.orientation)


@dataclass
class MarkerControl:
    """One handle of an interactive marker; orientation is (w, x, y, z)."""

    name: str = ""
    orientation: tuple[float, float, float, float] = (1.0, 0.0, 0.0, 0.0)
    interaction_mode: InteractionMode = InteractionMode.NONE
    markers: list[Marker] = field(default_factory=list)
    always_visible: bool = False


@dataclass
class InteractiveMarker:
    """A named marker with a pose and a set of controls."""

    name: str = ""
    frame_id: str = ""
    scale: float = 1.0
    pose: TrajectoryPoint = field(default_factory=TrajectoryPoint)
    controls: list[MarkerControl] = field(default_factory=list)


class MarkerServer:
    """Holds interactive markers; changes become visible on :meth:`apply_changes`."""

    def __init__(self, topic: str = "planning_markers") -> None:
        self.topic = topic
        self._published: dict[str, InteractiveMarker] = {}
        self._pending: dict[str, InteractiveMarker | None] = {}
        self._callbacks: dict[str, Callable[..., None]] = {}

    @property
    def markers(self) -> dict[str, InteractiveMarker]:
        """Markers visible since the last applied change."""
        return dict(self._published)

    def insert(self, marker: InteractiveMarker) -> None:
        """Add or replace ``marker``."""
        self._pending[marker.name] = copy.deepcopy(marker)

    def erase(self, name: str) -> None:
        """Remove the marker called ``name``."""
        self._pending[name] = None
        self._callbacks.pop(name, None)

    def set_pose(self, name: str, pose: TrajectoryPoint) -> bool:
        """Move a known marker; return False when there is none by that name."""
        if name in self._pending:
            target = self._pending[name]
        else:
            published = self._published.get(name)
            target = copy.deepcopy(published) if published is not None else None
            if target is not None:
                self._pending[name] = target
        if target is None:
            return False
        target.pose = _copy_pose(pose)
        return True

    def apply_changes(self) -> None:
        """Make all pending changes visible."""
        for name, marker in self._pending.items():
            if marker is None:
                self._published.pop(name, None)
            else:
                self._published[name] = marker
        self._pending.clear()

    def _set_callback(self, name: str, function: Callable[..., None]) -> None:
        self._callbacks[name] = function


class PlanningInteractiveMarkers:
    """A movable set-pose marker plus passive markers for named poses."""

    def __init__(self, server: MarkerServer | None = None) -> None:
        self.server = server if server is not None else MarkerServer()
        self.frame_id = "odom"
        self.initialized = False
        self.set_pose_marker = InteractiveMarker(name=SET_POSE_NAME, frame_id=self.frame_id)
        self.marker_prototype = InteractiveMarker(frame_id=self.frame_id)
        self.marker_map: dict[str, InteractiveMarker] = {}
        self._pose_updated: PoseCallback | None = None

    def set_frame_id(self, frame_id: str) -> None:
        """Use ``frame_id`` for the set-pose marker and newly created markers."""
        self.frame_id = frame_id
        self.set_pose_marker.frame_id = frame_id
        self.marker_prototype.frame_id = frame_id

    def set_pose_updated_callback(self, function: PoseCallback | None) -> None:
        """Call ``function`` with the new pose whenever the set-pose marker moves."""
        self._pose_updated = function

    def initialize(self) -> None:
        """Build the marker controls."""
        self._create_markers()
        self.initialized = True

    def _create_markers(self) -> None:
        def control(name, orientation, mode, markers=(), always_visible=False):
            return MarkerControl(
                name=name,
                orientation=orientation,
                interaction_mode=mode,
                markers=list(markers),
                always_visible=always_visible,
            )

        h = _HALF_SQRT2
        move = InteractionMode.MOVE_AXIS
        self.set_pose_marker = InteractiveMarker(
            name=SET_POSE_NAME,
            frame_id=self.frame_id,
            scale=1.0,
            controls=[
                control("rotate_yaw", (h, 0.0, h, 0.0), InteractionMode.ROTATE_AXIS),
                control("move z", (h, 0.0, h, 0.0), move),
                control("move x", (h, h, 0.0, 0.0), move),
                control("move y", (h, 0.0, 0.0, h), move),
                control("move x_y", (0.9239, 0.0, 0.0, 0.3827), move),
                control("move y_x", (0.3827, 0.0, 0.0, 0.9239), move),
                control(
                    "heli", (1.0, 0.0, 0.0, 0.0), InteractionMode.NONE,
                    always_visible=True,
                ),
            ],
        )

        arrow = Marker(type=MarkerType.ARROW, color=_PURPLE, scale=(0.75, 0.25, 0.25))
        label = Marker(
            type=MarkerType.TEXT_VIEW_FACING,
            scale=(0.0, 0.0, 0.5),
            text="placeholder",
            color=_PINK,
            id=1,
        )
        self.marker_prototype = InteractiveMarker(
            frame_id=self.frame_id,
            scale=1.0,
            controls=[
                control(
                    "arrow", (1.0, 0.0, 0.0, 0.0), InteractionMode.NONE,
                    markers=(arrow, label), always_visible=True,
                )
            ],
        )

    def enable_set_pose_marker(self, pose: TrajectoryPoint) -> None:
        """Show the movable marker at ``pose``."""
        self.set_pose_marker.pose = _copy_pose(pose)
        self.server.insert(self.set_pose_marker)
        self.server._set_callback(
            self.set_pose_marker.name, self.process_set_pose_feedback
        )
        self.server.apply_changes()

    def disable_set_pose_marker(self) -> None:
        """Hide the movable marker."""
        self.server.erase(self.set_pose_marker.name)
        self.server.apply_changes()

    def set_pose(self, pose: TrajectoryPoint) -> None:
        """Move the movable marker to ``pose``."""
        self.set_pose_marker.pose = _copy_pose(pose)
        self.server.set_pose(self.set_pose_marker.name, pose)
        self.server.apply_changes()

    def process_set_pose_feedback(self, event_type: int, pose: TrajectoryPoint) -> None:
        """Handle feedback from the movable marker; pose updates reach the callback."""
        if event_type == POSE_UPDATE and self._pose_updated is not None:
            self._pose_updated(_copy_pose(pose))
        self.server.apply_changes()

    def enable_marker(self, id: str, pose: TrajectoryPoint) -> None:
        """Show the passive marker ``id`` at ``pose``, creating it if needed."""
        existing = self.marker_map.get(id)
        if existing is not None:
            existing.pose = _copy_pose(pose)
            self.server.insert(existing)
            self.server.apply_changes()
            return

        if not self.marker_prototype.controls:
            raise RuntimeError("markers are not initialized")
        marker = copy.deepcopy(self.marker_prototype)
        marker.name = id
        marker.controls[0].markers[1].text = id
        marker.pose = _copy_pose(pose)
        self.marker_map[id] = marker
        self.server.insert(marker)
        self.server.apply_changes()

    def update_marker_pose(self, id: str, pose: TrajectoryPoint) -> None:
        """Move the passive marker ``id``; unknown ids are ignored."""
        marker = self.marker_map.get(id)
        if marker is None:
            return
        marker.pose = _copy_pose(pose)
        self.server.set_pose(id, pose)
        self.server.apply_changes()

    def disable_marker(self, id: str) -> None:
        """Hide the passive marker ``id``."""
        self.server.erase(id)
        self.server.apply_changes()