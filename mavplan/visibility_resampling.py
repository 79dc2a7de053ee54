"""Resampling of a waypoint polyline into evenly timed waypoints."""

from __future__ import annotations

import copy
import logging
import math
from typing import Sequence

import numpy as np

from mavplan.constraints import PhysicalConstraints
from mavplan.utils import TrajectoryPoint

logger = logging.getLogger(__name__)


def compute_time_velocity_ramp(start, goal, v_max: float, a_max: float) -> float:
    """Travel time between two points under a trapezoidal velocity profile."""
    distance = float(np.linalg.norm(np.asarray(start, float) - np.asarray(goal, float)))
    acc_time = v_max / a_max
    acc_distance = 0.5 * v_max * acc_time
    if distance < 2.0 * acc_distance:
        return 2.0 * math.sqrt(distance / a_max)
    return 2.0 * acc_time + (distance - 2.0 * acc_distance) / v_max


def resample_waypoints_from_visibility_graph(
    num_segments: int,
    constraints: PhysicalConstraints,
    waypoints: Sequence[TrajectoryPoint],
) -> list[TrajectoryPoint]:
    """Split the path into ``num_segments`` pieces of equal estimated travel time.

    Returns ``num_segments + 1`` waypoints, keeping the original first and last.
    """
    if len(waypoints) < 2:
        raise ValueError("need at least two waypoints")
    if num_segments < 1:
        raise ValueError("num_segments must be at least 1")

    segment_times = [
        compute_time_velocity_ramp(
            a.position, b.position, constraints.v_max, constraints.a_max
        )
        for a, b in zip(waypoints, waypoints[1:])
    ]
    total_time = sum(segment_times)
    if total_time <= 0.0:
        raise ValueError("waypoints do not span any distance")
    time_per_segment = total_time / num_segments
    logger.debug("Total time: %f Time per seg: %f", total_time, time_per_segment)

    result = [copy.deepcopy(waypoints[0])]
    time_so_far = 0.0
    input_index = 0
    output_index = 1
    while output_index < num_segments:
        target = time_per_segment * output_index
        if time_so_far >= target:
            previous = waypoints[input_index - 1].position
            direction = waypoints[input_index].position - previous
            magnitude = 1.0 - (time_so_far - target) / segment_times[input_index - 1]
            result.append(TrajectoryPoint(position=previous + magnitude * direction))
            logger.debug(
                "Waypoint %d from waypoint %d at time: %f offset: %f",
                output_index,
                input_index,
                time_so_far,
                magnitude,
            )
            output_index += 1
        else:
            time_so_far += segment_times[input_index]
            input_index += 1
    result.append(copy.deepcopy(waypoints[-1]))
    return result