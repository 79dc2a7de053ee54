"""Markers that draw sampled paths and waypoints."""

from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from enum import IntEnum
from itertools import islice
from typing import Sequence

from mavplan.colors import ColorRGBA
from mavplan.utils import TrajectoryPoint

_MAX_SAMPLES = 1000
_MAX_MAGNITUDE = 1.0e4
_MARKER_ALPHA = 0.75


class MarkerType(IntEnum):
    """Shape of a visualisation marker."""

    ARROW = 0
    CUBE = 1
    SPHERE = 2
    CYLINDER = 3
    LINE_STRIP = 4
    LINE_LIST = 5
    CUBE_LIST = 6
    SPHERE_LIST = 7
    POINTS = 8
    TEXT_VIEW_FACING = 9
    MESH_RESOURCE = 10
    TRIANGLE_LIST = 11


@dataclass
class Marker:
    """A drawable marker: a shape, its style and its points."""

    type: MarkerType = MarkerType.ARROW
    frame_id: str = ""
    ns: str = ""
    id: int = 0
    color: ColorRGBA = field(default_factory=ColorRGBA)
    scale: tuple[float, float, float] = (0.0, 0.0, 0.0)
    points: list[tuple[float, float, float]] = field(default_factory=list)
    text: str = ""
    stamp: float = 0.0


def _as_tuple(point: TrajectoryPoint) -> tuple[float, float, float]:
    x, y, z = point.position
    return (float(x), float(y), float(z))


def _styled_marker(
    marker_type: MarkerType,
    frame_id: str,
    color: ColorRGBA,
    name: str,
    scale: float,
) -> Marker:
    return Marker(
        type=marker_type,
        frame_id=frame_id,
        ns=name,
        color=replace(color, a=_MARKER_ALPHA),
        scale=(scale, scale, scale),
        stamp=time.time(),
    )


def _within_bounds(point: TrajectoryPoint) -> bool:
    position = point.position
    return not (
        position.max() > _MAX_MAGNITUDE or position.min() < -_MAX_MAGNITUDE
    )


def create_marker_for_path(
    path: Sequence[TrajectoryPoint],
    frame_id: str,
    color: ColorRGBA,
    name: str,
    scale: float,
) -> Marker:
    """Line strip through the path, subsampled to at most about 1000 points."""
    marker = _styled_marker(MarkerType.LINE_STRIP, frame_id, color, name, scale)
    subsample = 1
    while len(path) // subsample > _MAX_SAMPLES:
        subsample *= 10
    marker.points = [
        _as_tuple(point)
        for point in islice(path, subsample - 1, None, subsample)
        if _within_bounds(point)
    ]
    return marker


def create_marker_for_waypoints(
    path: Sequence[TrajectoryPoint],
    frame_id: str,
    color: ColorRGBA,
    name: str,
    scale: float,
) -> Marker:
    """Sphere list with one sphere per waypoint."""
    marker = _styled_marker(MarkerType.SPHERE_LIST, frame_id, color, name, scale)
    marker.points = [_as_tuple(point) for point in path]
    return marker