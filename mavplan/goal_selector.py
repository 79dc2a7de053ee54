"""Selection of intermediate goals when the planner cannot reach the real one."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Protocol

import numpy as np

from mavplan.utils import TrajectoryPoint, rand_m_to_n

_CLOSE_ENOUGH = 0.1  # meters
_MIN_WEIGHT = 1e-6


class Strategy(Enum):
    """How an intermediate goal is chosen."""

    NO_INTERMEDIATE_GOAL = 0
    RANDOM = 1
    LOCAL_EXPLORATION = 2


_STRATEGY_NAMES = {
    "none": Strategy.NO_INTERMEDIATE_GOAL,
    "random": Strategy.RANDOM,
    "local": Strategy.LOCAL_EXPLORATION,
    "local_exploration": Strategy.LOCAL_EXPLORATION,
}


class _TsdfVoxel(Protocol):
    distance: float
    weight: float


class _TsdfMap(Protocol):
    def get_voxel(self, position: np.ndarray) -> _TsdfVoxel | None: ...


GainFunction = Callable[[TrajectoryPoint, int], float]


@dataclass
class GoalPointSelectorParameters:
    """Settings of the goal selector."""

    strategy: Strategy = Strategy.NO_INTERMEDIATE_GOAL
    random_sample_range: float = 5.0
    max_random_tries: int = 100
    num_exploration_samples: int = 15
    exp_modulus: int = 20
    w_exploration: float = 1.0
    w_goal: float = 0.5

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "GoalPointSelectorParameters":
        """Read the strategy name and the sampling range from a mapping."""
        name = str(params.get("goal_selector_strategy", "none"))
        try:
            strategy = _STRATEGY_NAMES[name]
        except KeyError:
            raise ValueError(f"invalid goal selector strategy: {name}") from None
        defaults = cls()
        return cls(
            strategy=strategy,
            random_sample_range=float(
                params.get("goal_selector_range", defaults.random_sample_range)
            ),
        )


class GoalPointSelector:
    """Picks the next goal to track, from the global goal or by sampling."""

    def __init__(
        self,
        params: GoalPointSelectorParameters | None = None,
        tsdf_map: _TsdfMap | None = None,
        gain_function: GainFunction | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.params = params if params is not None else GoalPointSelectorParameters()
        self.tsdf_map = tsdf_map
        self.gain_function = gain_function
        self._rng = rng if rng is not None else random.Random()

    def select_next_goal(
        self,
        global_goal: TrajectoryPoint,
        current_goal: TrajectoryPoint,
        current_pose: TrajectoryPoint,
    ) -> TrajectoryPoint | None:
        """Return the next goal to track, or None when there is no new one."""
        strategy = self.params.strategy
        if strategy is Strategy.NO_INTERMEDIATE_GOAL:
            return None

        # Whatever the strategy, go back to the global goal first.
        if np.linalg.norm(current_goal.position - global_goal.position) > _CLOSE_ENOUGH:
            return global_goal

        if strategy is Strategy.RANDOM:
            return self.select_random_pose(
                current_pose, self.params.random_sample_range
            )

        if self.tsdf_map is None:
            return None
        return self.select_local_exploration_goal(
            global_goal, current_goal, current_pose
        )

    def select_random_pose(
        self, input_pose: TrajectoryPoint, range_meters: float
    ) -> TrajectoryPoint:
        """A pose with random yaw, uniformly placed in angle within ``range_meters``."""
        theta = rand_m_to_n(0.0, math.pi * 2.0, self._rng)
        phi = rand_m_to_n(-math.pi / 2.0, math.pi / 2.0, self._rng)
        r = rand_m_to_n(0.0, range_meters, self._rng)
        offset = np.array(
            [
                r * math.cos(theta) * math.cos(phi),
                r * math.sin(phi),
                r * math.sin(theta) * math.cos(phi),
            ]
        )
        yaw = rand_m_to_n(-math.pi, math.pi, self._rng)
        pose = TrajectoryPoint(position=input_pose.position + offset)
        pose.set_from_yaw(yaw)
        return pose

    def _sample_free_pose(
        self, input_pose: TrajectoryPoint, range_meters: float
    ) -> tuple[TrajectoryPoint, bool]:
        pose = TrajectoryPoint()
        if self.tsdf_map is None:
            return pose, False
        for _ in range(self.params.max_random_tries):
            pose = self.select_random_pose(input_pose, range_meters)
            voxel = self.tsdf_map.get_voxel(pose.position)
            if (
                voxel is not None
                and voxel.weight >= _MIN_WEIGHT
                and voxel.distance > 0.0
            ):
                return pose, True
        return pose, False

    def select_random_free_pose(
        self, input_pose: TrajectoryPoint, range_meters: float
    ) -> TrajectoryPoint | None:
        """A random pose in observed free space, or None if none was found."""
        pose, found = self._sample_free_pose(input_pose, range_meters)
        return pose if found else None

    def select_local_exploration_goal(
        self,
        global_goal: TrajectoryPoint,
        current_goal: TrajectoryPoint,
        current_pose: TrajectoryPoint,
    ) -> TrajectoryPoint:
        """Sample nearby poses and keep the best mix of exploration and goal progress."""
        params = self.params
        max_goal_dist = (
            float(np.linalg.norm(global_goal.position - current_pose.position))
            + params.random_sample_range
        )
        best_gain = 0.0
        best_point = TrajectoryPoint()

        for _ in range(params.num_exploration_samples):
            sampled, _found = self._sample_free_pose(
                current_pose, params.random_sample_range
            )
            exploration_gain = self.evaluate_exploration_gain(sampled)

            travel = sampled.position - current_pose.position
            sampled.set_from_yaw(math.atan2(travel[1], travel[0]))

            goal_gain = (
                max_goal_dist
                - float(np.linalg.norm(global_goal.position - sampled.position))
            ) / max_goal_dist
            total_gain = (
                params.w_exploration * exploration_gain + params.w_goal * goal_gain
            )
            if total_gain >= best_gain:
                best_gain = total_gain
                best_point = sampled
        return best_point

    def evaluate_exploration_gain(self, pose: TrajectoryPoint) -> float:
        """Exploration gain of ``pose`` from the configured gain function."""
        if self.gain_function is None:
            raise ValueError("no exploration gain function is set")
        return float(self.gain_function(pose, self.params.exp_modulus))