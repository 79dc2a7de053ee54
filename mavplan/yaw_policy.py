"""Policies that assign a heading to every point of a sampled path."""

from __future__ import annotations

import copy
import math
from enum import Enum
from typing import Iterable, MutableSequence, Sequence

import numpy as np

from mavplan.constraints import PhysicalConstraints
from mavplan.utils import TrajectoryPoint

_MIN_VELOCITY_NORM = 0.1
_FACING_EPSILON = 1e-4


class PolicyType(Enum):
    """How the heading along a path is chosen."""

    FROM_PLAN = 0
    VELOCITY_VECTOR = 1
    ANTICIPATE_VELOCITY_VECTOR = 2
    POINT_FACING = 3
    CONSTANT = 4


def _search_yaw(
    current: tuple[float, float],
    candidates: Iterable[TrajectoryPoint],
    fallback: float,
) -> float:
    """Heading of the first clearly moving velocity, starting from ``current``."""
    vx, vy = current
    for point in candidates:
        if math.hypot(vx, vy) >= _MIN_VELOCITY_NORM:
            break
        vx, vy = float(point.velocity[0]), float(point.velocity[1])
    if math.hypot(vx, vy) > _MIN_VELOCITY_NORM:
        return math.atan2(vy, vx)
    return fallback


class YawPolicy:
    """Sets yaw along a path, optionally limited by a maximum yaw rate."""

    def __init__(
        self,
        policy: PolicyType = PolicyType.FROM_PLAN,
        constant_yaw: float = 0.0,
        facing_point: Sequence[float] = (0.0, 0.0, 0.0),
    ) -> None:
        self.policy = policy
        self.constant_yaw = float(constant_yaw)
        self.facing_point = np.array(facing_point, dtype=float)
        self._sampling_dt = -1.0
        self._yaw_rate_max = -1.0

    @property
    def sampling_dt(self) -> float:
        return self._sampling_dt

    @sampling_dt.setter
    def sampling_dt(self, value: float) -> None:
        if value <= 0.0:
            raise ValueError("sampling dt must be non-zero and positive")
        self._sampling_dt = float(value)

    @property
    def yaw_rate_max(self) -> float:
        return self._yaw_rate_max

    @yaw_rate_max.setter
    def yaw_rate_max(self, value: float) -> None:
        if value <= 0.0:
            raise ValueError("max yaw rate must be positive")
        self._yaw_rate_max = float(value)

    def set_physical_constraints(self, constraints: PhysicalConstraints) -> None:
        """Take the sampling step and yaw-rate limit from ``constraints``."""
        self._sampling_dt = constraints.sampling_dt
        self._yaw_rate_max = constraints.yaw_rate_max

    def deactivate_max_yaw_rate(self) -> None:
        """Stop limiting the yaw rate."""
        self._yaw_rate_max = -1.0

    def apply_policy(
        self, path: Sequence[TrajectoryPoint]
    ) -> list[TrajectoryPoint]:
        """Return a copy of ``path`` with the policy applied."""
        result = copy.deepcopy(list(path))
        self.apply_policy_in_place(result)
        return result

    def apply_policy_in_place(self, path: MutableSequence[TrajectoryPoint]) -> None:
        """Overwrite the yaw of every point of ``path``."""
        if not path:
            return
        last_yaw = path[0].yaw()
        if self.policy is PolicyType.VELOCITY_VECTOR:
            self._apply_velocity_vector(path, last_yaw)
        elif self.policy is PolicyType.ANTICIPATE_VELOCITY_VECTOR:
            self._apply_anticipate(path, last_yaw)
        elif self.policy is PolicyType.POINT_FACING:
            self._apply_point_facing(path, last_yaw)
        elif self.policy is PolicyType.CONSTANT:
            self._apply_constant(path)

    def _set(self, point: TrajectoryPoint, last_yaw: float, desired: float) -> float:
        yaw = self.get_feasible_yaw(last_yaw, desired)
        point.set_from_yaw(yaw)
        return yaw

    def _apply_velocity_vector(
        self, path: Sequence[TrajectoryPoint], last_yaw: float
    ) -> None:
        for i, point in enumerate(path):
            vx, vy = float(point.velocity[0]), float(point.velocity[1])
            if math.hypot(vx, vy) > _MIN_VELOCITY_NORM:
                desired = math.atan2(vy, vx)
            else:
                desired = _search_yaw((vx, vy), path[i + 1 :], last_yaw)
            last_yaw = self._set(point, last_yaw, desired)

    def _apply_anticipate(
        self, path: Sequence[TrajectoryPoint], last_yaw: float
    ) -> None:
        initial_yaw = last_yaw
        valid_last_yaw = False
        for i, point in reversed(list(enumerate(path))):
            vx, vy = float(point.velocity[0]), float(point.velocity[1])
            if math.hypot(vx, vy) > _MIN_VELOCITY_NORM:
                desired = math.atan2(vy, vx)
                if not valid_last_yaw:
                    last_yaw = desired
                valid_last_yaw = True
            else:
                desired = _search_yaw((vx, vy), reversed(path[: i + 1]), last_yaw)
            last_yaw = self._set(point, last_yaw, desired)

        # Bring the start back to the initial heading and enforce the rate forward.
        path[0].set_from_yaw(initial_yaw)
        last_yaw = initial_yaw
        for point in path:
            last_yaw = self._set(point, last_yaw, point.yaw())

    def _apply_point_facing(
        self, path: Sequence[TrajectoryPoint], last_yaw: float
    ) -> None:
        for point in path:
            facing = self.facing_point - point.position
            desired = last_yaw
            if abs(facing[0]) > _FACING_EPSILON or abs(facing[1]) > _FACING_EPSILON:
                desired = math.atan2(facing[1], facing[0])
            last_yaw = self._set(point, last_yaw, desired)

    def _apply_constant(self, path: Sequence[TrajectoryPoint]) -> None:
        last_yaw = self.constant_yaw
        for point in path:
            last_yaw = self._set(point, last_yaw, self.constant_yaw)

    def get_feasible_yaw(self, last_yaw: float, desired_yaw: float) -> float:
        """Step from ``last_yaw`` toward ``desired_yaw`` within the yaw-rate limit."""
        if self._yaw_rate_max < 0:
            return desired_yaw
        if self._sampling_dt < 0:
            raise ValueError("sampling_dt has to be set")
        yaw_mod = math.fmod(desired_yaw - last_yaw, 2 * math.pi)
        if yaw_mod < -math.pi:
            yaw_mod += 2 * math.pi
        elif yaw_mod > math.pi:
            yaw_mod -= 2 * math.pi

        max_step = self._yaw_rate_max * self._sampling_dt
        if abs(yaw_mod) > max_step:
            direction = 1.0 if yaw_mod > 0.0 else -1.0
            return last_yaw + direction * max_step
        return desired_yaw