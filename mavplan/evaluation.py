"""Scoring of planned paths and the record of global planning trials."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Callable, Iterable, Sequence

import numpy as np

from mavplan.constraints import PhysicalConstraints
from mavplan.utils import TrajectoryPoint, compute_path_length, rand_m_to_n

DistanceFunction = Callable[[np.ndarray], float]

_MAX_TRIES = 100000
_FEASIBILITY_MARGIN = 1e-2
_NS_PER_SECOND = 1e9

_GLOBAL_HEADER = (
    "#trial,seed,robot_radius,v_max,a_max,global_method,smoothing_method,"
    "planning_success,is_collision_free,is_feasible,computation_time_sec,"
    "total_path_time_sec,total_path_length_m,straight_line_path_length_m\n"
)


class GlobalPlanningMethod(IntEnum):
    """Planner that produced the waypoints of a trial."""

    STRAIGHT_LINE = 0
    RRT_CONNECT = 1
    RRT_STAR = 2
    SKELETON_GRAPH = 3
    PRM = 4
    BIT_STAR = 5


class PathSmoothingMethod(IntEnum):
    """Smoother that turned the waypoints into a path."""

    NONE = 0
    VELOCITY_RAMP = 1
    POLYNOMIAL = 2
    LOCO = 3
    LOCO2 = 4
    LOCO3 = 5


@dataclass
class GlobalBenchmarkResult:
    """Outcome of one planner and smoother combination in one trial."""

    trial_number: int = 0
    seed: int = 0
    robot_radius_m: float = 0.0
    v_max: float = 0.0
    a_max: float = 0.0
    global_planning_method: GlobalPlanningMethod = GlobalPlanningMethod.STRAIGHT_LINE
    path_smoothing_method: PathSmoothingMethod = PathSmoothingMethod.NONE
    planning_success: bool = False
    is_collision_free: bool = False
    is_feasible: bool = False
    computation_time_sec: float = 0.0
    total_path_time_sec: float = 0.0
    total_path_length_m: float = 0.0
    straight_line_path_length_m: float = 0.0

    def _csv_row(self) -> str:
        return "%d,%d,%f,%f,%f,%d,%d,%d,%d,%d,%f,%f,%f,%f\n" % (
            self.trial_number,
            self.seed,
            self.robot_radius_m,
            self.v_max,
            self.a_max,
            int(self.global_planning_method),
            int(self.path_smoothing_method),
            int(self.planning_success),
            int(self.is_collision_free),
            int(self.is_feasible),
            self.computation_time_sec,
            self.total_path_time_sec,
            self.total_path_length_m,
            self.straight_line_path_length_m,
        )


def is_path_collision_free(
    path: Iterable[TrajectoryPoint],
    distance_function: DistanceFunction,
    robot_radius: float,
) -> bool:
    """True when every point keeps at least ``robot_radius`` from obstacles."""
    return all(
        distance_function(point.position) >= robot_radius for point in path
    )


def is_path_feasible(
    path: Iterable[TrajectoryPoint], constraints: PhysicalConstraints
) -> bool:
    """True when no point exceeds the acceleration or velocity limits."""
    for point in path:
        if np.linalg.norm(point.acceleration) > constraints.a_max + _FEASIBILITY_MARGIN:
            return False
        if np.linalg.norm(point.velocity) > constraints.v_max + _FEASIBILITY_MARGIN:
            return False
    return True


def _random_point(
    lower: Sequence[float], upper: Sequence[float], rng: random.Random | None
) -> np.ndarray:
    return np.array(
        [rand_m_to_n(float(lo), float(hi), rng) for lo, hi in zip(lower, upper)]
    )


def select_random_start_and_goal(
    lower_bound: Sequence[float],
    upper_bound: Sequence[float],
    minimum_distance: float,
    distance_function: DistanceFunction,
    robot_radius: float,
    rng: random.Random | None = None,
) -> tuple[np.ndarray, np.ndarray] | None:
    """Draw a free start and goal more than ``minimum_distance`` apart.

    Returns None when no such pair turns up within the try limit.
    """
    for _ in range(_MAX_TRIES):
        start = _random_point(lower_bound, upper_bound, rng)
        goal = _random_point(lower_bound, upper_bound, rng)
        if math.dist(start, goal) <= minimum_distance:
            continue
        if (
            distance_function(start) > robot_radius
            and distance_function(goal) > robot_radius
        ):
            return start, goal
    return None


def fill_in_path_results(
    path: Sequence[TrajectoryPoint],
    result: GlobalBenchmarkResult,
    distance_function: DistanceFunction,
    constraints: PhysicalConstraints,
) -> GlobalBenchmarkResult:
    """Return ``result`` completed with the scores of ``path``.

    An empty path leaves the result as it was.
    """
    if not path:
        return result
    return replace(
        result,
        is_collision_free=is_path_collision_free(
            path, distance_function, constraints.robot_radius
        ),
        is_feasible=is_path_feasible(path, constraints),
        total_path_time_sec=path[-1].time_from_start_ns / _NS_PER_SECOND,
        total_path_length_m=compute_path_length(path),
    )


def write_global_results(
    results: Iterable[GlobalBenchmarkResult], filename: str
) -> None:
    """Write the results as comma-separated lines under a commented header."""
    with open(filename, "w", encoding="utf-8") as stream:
        stream.write(_GLOBAL_HEADER)
        for result in results:
            stream.write(result._csv_row())