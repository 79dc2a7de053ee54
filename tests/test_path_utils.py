from mavplan.path_utils import (
    retime_monotonically_increasing,
    retime_with_start_time_and_dt,
)
from mavplan.utils import TrajectoryPoint


def _points(times):
    return [TrajectoryPoint(time_from_start_ns=t) for t in times]


def _times(points):
    return [p.time_from_start_ns for p in points]


def test_retime_with_start_and_dt():
    points = _points([0, 0, 0, 0])
    retime_with_start_time_and_dt(100, 10, points)
    times = _times(points)
    assert times[0] == 100
    assert all(b - a == 10 for a, b in zip(times, times[1:]))


def test_retime_with_start_and_dt_empty():
    points = []
    retime_with_start_time_and_dt(5, 1, points)
    assert points == []


def test_monotonic_retiming_uses_first_step():
    points = _points([0, 10, 10, 35])
    retime_monotonically_increasing(points)
    times = _times(points)
    assert times[0] == 0
    assert all(b - a == times[1] - times[0] for a, b in zip(times, times[1:]))


def test_monotonic_retiming_keeps_consistent_trajectory():
    original = [7, 12, 17, 22]
    points = _points(original)
    retime_monotonically_increasing(points)
    assert _times(points) == original


def test_monotonic_retiming_waits_for_positive_step():
    points = _points([5, 5, 5, 20])
    retime_monotonically_increasing(points)
    assert _times(points) == [5, 5, 5, 20]


def test_monotonic_retiming_empty():
    points = []
    retime_monotonically_increasing(points)
    assert points == []