"""Synthetic worlds, trial scheduling and result records for local planning trials."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, MutableSequence, Sequence

import numpy as np

from mavplan.utils import TrajectoryPoint, rand_m_to_n

_WORLD_XY = 15.0
_WORLD_Z = 5.0
_FREE_SPACE = np.array([4.0, 4.0, 4.0])
_DISPLAY_PADDING = 1.0

_MIN_HEIGHT = 2.0
_MAX_HEIGHT = 5.0
_MIN_RADIUS = 0.25
_MAX_RADIUS = 1.0

_MIN_VELOCITY_NORM = 1e-6

_MIN_DENSITY = 0.05
_MAX_DENSITY = 0.50
_DENSITY_INCREMENT = 0.05

_LOCAL_HEADER = (
    "#trial,seed,density,robot_radius,v_max,a_max,local_method,planning_"
    "success,is_collision_free,is_feasible,num_replans,distance_from_"
    "goal,computation_time_sec,total_path_time_sec,total_path_length_m,"
    "straight_line_path_length_m\n"
)


class LocalPlanningMethod(IntEnum):
    """Planner used in a local planning trial."""

    STRAIGHT_LINE = 0
    LOCO = 1


@dataclass
class LocalBenchmarkResult:
    """Outcome of one local planning trial."""

    trial_number: int = 0
    seed: int = 0
    density: float = 0.0
    robot_radius_m: float = 0.0
    v_max: float = 0.0
    a_max: float = 0.0
    local_planning_method: LocalPlanningMethod = LocalPlanningMethod.STRAIGHT_LINE
    planning_success: bool = False
    is_collision_free: bool = False
    is_feasible: bool = False
    num_replans: int = 0
    distance_from_goal: float = 0.0
    computation_time_sec: float = 0.0
    total_path_time_sec: float = 0.0
    total_path_length_m: float = 0.0
    straight_line_path_length_m: float = 0.0

    def _csv_row(self) -> str:
        return "%d,%d,%f,%f,%f,%f,%d,%d,%d,%d,%d,%f,%f,%f,%f,%f\n" % (
            self.trial_number,
            self.seed,
            self.density,
            self.robot_radius_m,
            self.v_max,
            self.a_max,
            int(self.local_planning_method),
            int(self.planning_success),
            int(self.is_collision_free),
            int(self.is_feasible),
            self.num_replans,
            self.distance_from_goal,
            self.computation_time_sec,
            self.total_path_time_sec,
            self.total_path_length_m,
            self.straight_line_path_length_m,
        )


@dataclass
class Cylinder:
    """An upright cylindrical obstacle; ``center`` is the middle of its axis."""

    center: np.ndarray
    radius: float
    height: float

    def __post_init__(self) -> None:
        self.center = np.array(self.center, dtype=float).reshape(3)

    def contains(self, point: Sequence[float]) -> bool:
        """True when ``point`` lies inside the cylinder."""
        p = np.asarray(point, dtype=float)
        horizontal = math.hypot(p[0] - self.center[0], p[1] - self.center[1])
        return (
            horizontal <= self.radius
            and abs(p[2] - self.center[2]) <= self.height / 2.0
        )


@dataclass
class SyntheticWorld:
    """A walled box on a ground plane, scattered with cylinders."""

    size: np.ndarray
    density: float
    cylinders: list[Cylinder] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.size = np.array(self.size, dtype=float).reshape(3)

    @property
    def lower_bound(self) -> np.ndarray:
        return np.zeros(3)

    @property
    def upper_bound(self) -> np.ndarray:
        return self.size.copy()

    @property
    def display_bounds(self) -> tuple[np.ndarray, np.ndarray]:
        """The planning bounds widened by a margin on every side."""
        return (
            self.lower_bound - _DISPLAY_PADDING,
            self.upper_bound + _DISPLAY_PADDING,
        )

    def is_occupied(self, point: Sequence[float]) -> bool:
        """True when ``point`` lies inside any obstacle."""
        return any(cylinder.contains(point) for cylinder in self.cylinders)


def generate_custom_world(
    size: Sequence[float], density: float, rng: random.Random | None = None
) -> SyntheticWorld:
    """Place cylinders at ``density`` per square metre, clear of a border strip."""
    world = SyntheticWorld(size=size, density=float(density))
    sx, sy, _ = world.size
    fx, fy, _ = _FREE_SPACE
    usable_area = (sx - 2 * fx) * (sy - 2 * fy)
    num_objects = max(0, math.floor(density * usable_area))

    for _ in range(num_objects):
        height = rand_m_to_n(_MIN_HEIGHT, _MAX_HEIGHT, rng)
        radius = rand_m_to_n(_MIN_RADIUS, _MAX_RADIUS, rng)
        x = rand_m_to_n(fx, sx - fx, rng)
        y = rand_m_to_n(fy, sy - fy, rng)
        world.cylinders.append(
            Cylinder(center=np.array([x, y, height / 2.0]), radius=radius, height=height)
        )
    return world


def generate_world(
    density: float, rng: random.Random | None = None
) -> SyntheticWorld:
    """The standard 15 x 15 x 5 m world at the given obstacle density."""
    return generate_custom_world((_WORLD_XY, _WORLD_XY, _WORLD_Z), density, rng)


def set_yaw_from_velocity(
    default_yaw: float, path: MutableSequence[TrajectoryPoint]
) -> None:
    """Point every sample along its velocity, or at ``default_yaw`` when still."""
    for point in path:
        vx, vy = float(point.velocity[0]), float(point.velocity[1])
        if np.linalg.norm(point.velocity) > _MIN_VELOCITY_NORM:
            point.set_from_yaw(math.atan2(vy, vx))
        else:
            point.set_from_yaw(default_yaw)


def density_schedule(num_trials: int) -> list[tuple[int, float]]:
    """Pairs of (trial number, density), spreading the trials over all densities.

    Trials that do not divide evenly among the densities are dropped.
    """
    num_densities = (
        round((_MAX_DENSITY - _MIN_DENSITY) / _DENSITY_INCREMENT) + 1
    )
    trials_per_density = num_trials // num_densities
    schedule: list[tuple[int, float]] = []
    for i in range(num_densities):
        density = _MIN_DENSITY + i * _DENSITY_INCREMENT
        schedule.extend(
            (len(schedule) + j, density) for j in range(trials_per_density)
        )
    return schedule


def write_local_results(
    results: Iterable[LocalBenchmarkResult], filename: str
) -> None:
    """Write the results as comma-separated lines under a commented header."""
    with open(filename, "w", encoding="utf-8") as stream:
        stream.write(_LOCAL_HEADER)
        for result in results:
            stream.write(result._csv_row())