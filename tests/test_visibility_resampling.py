import numpy as np
import pytest

from mavplan.constraints import PhysicalConstraints
from mavplan.utils import TrajectoryPoint
from mavplan.visibility_resampling import (
    compute_time_velocity_ramp,
    resample_waypoints_from_visibility_graph,
)


def _points(positions):
    return [TrajectoryPoint(position=p) for p in positions]


def test_ramp_time_of_known_distance():
    assert compute_time_velocity_ramp((0, 0, 0), (1, 0, 0), 1.0, 2.0) == pytest.approx(1.5)


def test_ramp_time_zero_distance():
    assert compute_time_velocity_ramp((2, 2, 2), (2, 2, 2), 1.0, 2.0) == 0.0


def test_ramp_time_symmetric_and_monotonic():
    forward = compute_time_velocity_ramp((0, 0, 0), (3, 1, 0), 1.0, 2.0)
    backward = compute_time_velocity_ramp((3, 1, 0), (0, 0, 0), 1.0, 2.0)
    assert forward == pytest.approx(backward)
    times = [compute_time_velocity_ramp((0, 0, 0), (d, 0, 0), 1.0, 2.0) for d in (0.05, 0.2, 0.5, 2.0, 8.0)]
    assert times == sorted(times)


def test_ramp_time_never_beats_cruise_speed():
    for distance in (0.1, 1.0, 10.0):
        t = compute_time_velocity_ramp((0, 0, 0), (distance, 0, 0), 1.0, 2.0)
        assert t >= distance / 1.0


def test_resample_two_waypoints_evenly():
    waypoints = _points([(0, 0, 0), (10, 0, 0)])
    result = resample_waypoints_from_visibility_graph(5, PhysicalConstraints(), waypoints)
    assert len(result) == 6
    xs = [p.position[0] for p in result]
    gaps = np.diff(xs)
    assert gaps == pytest.approx([gaps[0]] * len(gaps))
    assert np.array_equal(result[0].position, waypoints[0].position)
    assert np.array_equal(result[-1].position, waypoints[-1].position)


def test_resample_collinear_path_stays_on_line():
    waypoints = _points([(0, 0, 0), (5, 0, 0), (10, 0, 0)])
    result = resample_waypoints_from_visibility_graph(4, PhysicalConstraints(), waypoints)
    assert len(result) == 5
    assert all(p.position[1] == 0 and p.position[2] == 0 for p in result)
    xs = [p.position[0] for p in result]
    assert all(b > a for a, b in zip(xs, xs[1:]))


def test_single_segment_returns_endpoints():
    waypoints = _points([(0, 0, 0), (1, 1, 0), (2, 0, 0)])
    result = resample_waypoints_from_visibility_graph(1, PhysicalConstraints(), waypoints)
    assert [p.position.tolist() for p in result] == [[0, 0, 0], [2, 0, 0]]


def test_output_is_a_copy():
    waypoints = _points([(0, 0, 0), (4, 0, 0)])
    result = resample_waypoints_from_visibility_graph(2, PhysicalConstraints(), waypoints)
    result[0].position[0] = 99.0
    assert waypoints[0].position[0] == 0.0


def test_too_few_waypoints_raises():
    with pytest.raises(ValueError):
        resample_waypoints_from_visibility_graph(3, PhysicalConstraints(), _points([(0, 0, 0)]))


def test_zero_segments_raises():
    with pytest.raises(ValueError):
        resample_waypoints_from_visibility_graph(0, PhysicalConstraints(), _points([(0, 0, 0), (1, 0, 0)]))


def test_degenerate_path_raises():
    with pytest.raises(ValueError):
        resample_waypoints_from_visibility_graph(3, PhysicalConstraints(), _points([(1, 1, 1), (1, 1, 1)]))