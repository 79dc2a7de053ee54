"""Particle-based search for an intermediate goal through an ESDF grid."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterator, Mapping, Sequence

import numpy as np

from mavplan.constraints import PhysicalConstraints
from mavplan.utils import rand_m_to_n

GridIndex = tuple[int, int, int]

_COORDINATE_EPSILON = 1e-6
_PATH_STEP = 10

# Face, edge and corner neighbours, in that order.
_NEIGHBOR_OFFSETS: tuple[GridIndex, ...] = tuple(
    zip(
        (-1, 1, 0, 0, 0, 0, -1, -1, 1, 1, 0, 0, 0, 0,
         -1, 1, -1, 1, -1, -1, -1, -1, 1, 1, 1, 1),
        (0, 0, -1, 1, 0, 0, -1, 1, -1, 1, -1, -1, 1, 1,
         0, 0, 0, 0, -1, -1, 1, 1, -1, -1, 1, 1),
        (0, 0, 0, 0, -1, 1, 0, 0, 0, 0, -1, 1, -1, 1,
         -1, -1, 1, 1, -1, 1, -1, 1, -1, 1, -1, 1),
    )
)


@dataclass
class EsdfVoxel:
    """Distance to the nearest obstacle and whether the voxel was observed."""

    distance: float = 0.0
    observed: bool = False


class EsdfGrid:
    """A sparse Euclidean signed distance field on a regular voxel grid."""

    def __init__(self, voxel_size: float) -> None:
        if voxel_size <= 0.0:
            raise ValueError("voxel size must be positive")
        self.voxel_size = float(voxel_size)
        self._voxels: dict[GridIndex, EsdfVoxel] = {}

    def set_voxel(
        self, index: Sequence[int], distance: float, observed: bool = True
    ) -> None:
        """Store the voxel at the integer grid ``index``."""
        self._voxels[_as_index(index)] = EsdfVoxel(float(distance), bool(observed))

    def get_voxel(self, index: Sequence[int]) -> EsdfVoxel | None:
        """Return the voxel at ``index``, or None where the map holds nothing."""
        return self._voxels.get(_as_index(index))

    def __len__(self) -> int:
        return len(self._voxels)


def _as_index(index: Sequence[int]) -> GridIndex:
    x, y, z = (int(value) for value in index)
    return (x, y, z)


def grid_index_from_point(point: Sequence[float], voxel_size: float) -> GridIndex:
    """Integer index of the voxel that contains ``point``."""
    inverse = 1.0 / voxel_size
    x, y, z = (
        int(math.floor(float(value) * inverse + _COORDINATE_EPSILON))
        for value in point
    )
    return (x, y, z)


def center_point_from_grid_index(
    index: Sequence[int], voxel_size: float
) -> np.ndarray:
    """Centre of the voxel at ``index``."""
    return (np.array(index, dtype=float) + 0.5) * voxel_size


class Decision(Enum):
    """What a particle does at one step."""

    FOLLOW_GOAL = 0
    FOLLOW_GRADIENT = 1
    RANDOM = 2


@dataclass
class ShotgunParameters:
    """Tuning of the particle search.

    The two probabilities together must stay below 1; the remainder is the
    probability of a random step.
    """

    max_step_size: float = 1.0
    take_large_steps: bool = False
    probability_follow_goal: float = 0.25
    probability_follow_gradient: float = 0.25
    robot_radius_inflation: float = 0.1

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "ShotgunParameters":
        """Build parameters from a mapping, keeping defaults for absent keys."""
        defaults = cls()
        names = (
            "robot_radius_inflation",
            "probability_follow_goal",
            "probability_follow_gradient",
        )
        return replace(
            defaults,
            **{name: float(params.get(name, getattr(defaults, name))) for name in names},
        )


@dataclass
class ShotgunResult:
    """Outcome of a particle search."""

    success: bool
    best_goal: np.ndarray | None = None
    best_path: list[np.ndarray] = field(default_factory=list)


def _round_half_away(value: float) -> int:
    return int(math.floor(value + 0.5)) if value >= 0 else -int(math.floor(-value + 0.5))


class ShotgunPlanner:
    """Shoots random-walk particles toward a goal and keeps the one that got closest."""

    def __init__(self, params: ShotgunParameters | None = None) -> None:
        self.params = params if params is not None else ShotgunParameters()
        self._constraints = PhysicalConstraints()
        self._esdf_map: EsdfGrid | None = None
        self._rng = random.Random()

    @property
    def constraints(self) -> PhysicalConstraints:
        return self._constraints

    def set_physical_constraints(self, constraints: PhysicalConstraints) -> None:
        """Use ``constraints``, inflating the robot radius by the configured margin."""
        self._constraints = replace(
            constraints,
            robot_radius=constraints.robot_radius + self.params.robot_radius_inflation,
        )

    def set_esdf_map(self, esdf_map: EsdfGrid) -> None:
        """Associate the distance map the particles move through."""
        if esdf_map is None:
            raise ValueError("an ESDF map is required")
        self._esdf_map = esdf_map

    def set_seed(self, seed: int) -> None:
        """Seed the random generator used by the particles."""
        self._rng.seed(seed)

    def select_decision(self, n_particle: int) -> Decision:
        """Choose the action of a particle; the first particle always seeks the goal."""
        if n_particle == 0:
            return Decision.FOLLOW_GOAL
        probability = rand_m_to_n(0.0, 1.0, self._rng)
        if probability < self.params.probability_follow_goal:
            return Decision.FOLLOW_GOAL
        if probability < (
            self.params.probability_follow_goal
            + self.params.probability_follow_gradient
        ):
            return Decision.FOLLOW_GRADIENT
        return Decision.RANDOM

    def _neighbors(self, index: GridIndex) -> Iterator[GridIndex]:
        x, y, z = index
        for dx, dy, dz in _NEIGHBOR_OFFSETS:
            yield (x + dx, y + dy, z + dz)

    def _traversable(self, grid: EsdfGrid, index: GridIndex) -> bool:
        voxel = grid.get_voxel(index)
        return (
            voxel is not None
            and voxel.observed
            and voxel.distance >= self._constraints.robot_radius
        )

    def shoot_particles(
        self,
        num_particles: int,
        max_steps: int,
        start: Sequence[float],
        goal: Sequence[float],
    ) -> ShotgunResult:
        """Search from ``start`` toward ``goal``.

        Fails only when no map is set; otherwise returns the best point any
        particle reached and the coarse path that led there.
        """
        grid = self._esdf_map
        if grid is None:
            return ShotgunResult(success=False)
        voxel_size = grid.voxel_size
        goal_array = np.array(goal, dtype=float)

        start_index = grid_index_from_point(start, voxel_size)
        goal_index = grid_index_from_point(goal_array, voxel_size)

        best_distance = math.inf
        best_index = start_index
        best_path_indices: list[GridIndex] = []
        last_index = start_index

        for n_particle in range(num_particles):
            exit_loop = False
            current = start_index
            current_path = [start_index]
            for step in range(max_steps):
                valid = [
                    neighbor
                    for neighbor in self._neighbors(current)
                    if self._traversable(grid, neighbor)
                    and not (step > 0 and neighbor == last_index)
                ]
                if not valid:
                    break

                last_index = current
                decision = self.select_decision(n_particle)

                if decision is Decision.FOLLOW_GOAL:
                    best_goal_distance = math.inf
                    for neighbor in valid:
                        distance = math.dist(goal_index, neighbor)
                        if distance < best_goal_distance:
                            best_goal_distance = distance
                            current = neighbor
                    # Voxel units: closer than one voxel means the goal voxel.
                    if best_goal_distance < 1.0:
                        exit_loop = True
                        break
                elif decision is Decision.FOLLOW_GRADIENT:
                    highest = 0.0
                    for neighbor in valid:
                        obstacle_distance = grid.get_voxel(neighbor).distance
                        if obstacle_distance > highest:
                            highest = obstacle_distance
                            current = neighbor
                else:
                    choice = _round_half_away(
                        rand_m_to_n(0.0, len(valid) - 1.0, self._rng)
                    )
                    current = valid[choice]

                if step % _PATH_STEP == 0:
                    current_path.append(current)

            current_distance = math.dist(goal_index, current)
            if current_distance < best_distance:
                best_distance = current_distance
                best_index = current
                best_path_indices = current_path + [current]
            if exit_loop:
                break

        if best_index == goal_index:
            best_goal = goal_array
        else:
            best_goal = center_point_from_grid_index(best_index, voxel_size)
        best_path = [
            center_point_from_grid_index(index, voxel_size)
            for index in best_path_indices
        ]
        return ShotgunResult(success=True, best_goal=best_goal, best_path=best_path)