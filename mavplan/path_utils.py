"""Retiming helpers for sampled trajectories."""

from __future__ import annotations

from typing import MutableSequence

from mavplan.utils import TrajectoryPoint


def retime_monotonically_increasing(
    trajectory: MutableSequence[TrajectoryPoint],
) -> None:
    """Make timestamps increase by a constant step, in place.

    The step is the first positive difference found from the first point.
    """
    if not trajectory:
        return
    current_ns = trajectory[0].time_from_start_ns
    dt_ns = 0
    for point in trajectory[1:]:
        if dt_ns <= 0:
            dt_ns = point.time_from_start_ns - current_ns
        current_ns += dt_ns
        point.time_from_start_ns = current_ns


def retime_with_start_time_and_dt(
    start_time_ns: int, dt_ns: int, trajectory: MutableSequence[TrajectoryPoint]
) -> None:
    """Stamp the points ``dt_ns`` apart starting at ``start_time_ns``, in place."""
    for k, point in enumerate(trajectory):
        point.time_from_start_ns = start_time_ns + k * dt_ns