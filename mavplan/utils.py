"""Trajectory points and small numeric helpers shared by the planners."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np


def _vector(value, size: int) -> np.ndarray:
    array = np.array(value, dtype=float).reshape(-1)
    if array.shape != (size,):
        raise ValueError(f"expected {size} components, got {array.shape[0]}")
    return array


@dataclass(eq=False)
class TrajectoryPoint:
    """A sampled trajectory state in the world frame.

    The orientation is a unit quaternion stored as (w, x, y, z).
    """

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    acceleration: np.ndarray = field(default_factory=lambda: np.zeros(3))
    orientation: np.ndarray = field(
        default_factory=lambda: np.array([1.0, 0.0, 0.0, 0.0])
    )
    time_from_start_ns: int = 0

    def __post_init__(self) -> None:
        self.position = _vector(self.position, 3)
        self.velocity = _vector(self.velocity, 3)
        self.acceleration = _vector(self.acceleration, 3)
        self.orientation = _vector(self.orientation, 4)
        self.time_from_start_ns = int(self.time_from_start_ns)

    def set_from_yaw(self, yaw: float) -> None:
        """Set the orientation to a pure rotation of ``yaw`` about the z axis."""
        half = 0.5 * yaw
        self.orientation = np.array([math.cos(half), 0.0, 0.0, math.sin(half)])

    def yaw(self) -> float:
        """Return the heading angle of the orientation."""
        w, x, y, z = self.orientation
        return math.atan2(2.0 * (w * z + x * y), 1.0 - 2.0 * (y * y + z * z))


def compute_path_length(path: Sequence[TrajectoryPoint]) -> float:
    """Total length of the polyline through the points of ``path``."""
    positions = [point.position for point in path]
    return float(
        sum(np.linalg.norm(b - a) for a, b in zip(positions, positions[1:]))
    )


def rand_m_to_n(m: float, n: float, rng: random.Random | None = None) -> float:
    """Draw a uniform number between ``m`` and ``n``."""
    generator = rng if rng is not None else random
    return m + generator.random() * (n - m)