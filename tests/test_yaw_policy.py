import math

import pytest

from mavplan.constraints import PhysicalConstraints
from mavplan.utils import TrajectoryPoint
from mavplan.yaw_policy import PolicyType, YawPolicy


def _wrap(angle):
    return math.atan2(math.sin(angle), math.cos(angle))


def _path(velocities, initial_yaw=0.0):
    path = [TrajectoryPoint(position=(k * 0.1, 0, 0), velocity=v) for k, v in enumerate(velocities)]
    for point in path:
        point.set_from_yaw(initial_yaw)
    return path


def _limited(policy_type, rate=1.0, dt=0.1):
    policy = YawPolicy(policy_type)
    policy.yaw_rate_max = rate
    policy.sampling_dt = dt
    return policy


def test_from_plan_leaves_yaw():
    path = _path([(0, 1, 0)] * 3, initial_yaw=0.7)
    YawPolicy().apply_policy_in_place(path)
    assert all(p.yaw() == pytest.approx(0.7) for p in path)


def test_feasible_yaw_without_limit_returns_desired():
    assert YawPolicy().get_feasible_yaw(0.0, 2.5) == 2.5


def test_feasible_yaw_is_rate_limited():
    policy = _limited(PolicyType.CONSTANT, rate=1.0, dt=0.1)
    assert policy.get_feasible_yaw(0.0, 1.0) == pytest.approx(policy.yaw_rate_max * policy.sampling_dt)
    assert policy.get_feasible_yaw(0.0, -1.0) == pytest.approx(-policy.yaw_rate_max * policy.sampling_dt)


def test_feasible_yaw_takes_shortest_way_around():
    policy = _limited(PolicyType.CONSTANT, rate=0.1, dt=0.1)
    assert policy.get_feasible_yaw(3.0, -3.0) > 3.0


def test_missing_sampling_dt_raises():
    policy = YawPolicy()
    policy.yaw_rate_max = 1.0
    with pytest.raises(ValueError):
        policy.get_feasible_yaw(0.0, 1.0)


@pytest.mark.parametrize("value", [0.0, -1.0])
def test_invalid_settings_raise(value):
    policy = YawPolicy()
    policy.sampling_dt = 0.2
    policy.yaw_rate_max = 0.5
    with pytest.raises(ValueError):
        policy.sampling_dt = value
    with pytest.raises(ValueError):
        policy.yaw_rate_max = value
    assert policy.sampling_dt == 0.2
    assert policy.yaw_rate_max == 0.5


def test_set_physical_constraints_and_deactivate():
    policy = YawPolicy()
    constraints = PhysicalConstraints()
    policy.set_physical_constraints(constraints)
    assert policy.sampling_dt == constraints.sampling_dt
    assert policy.yaw_rate_max == constraints.yaw_rate_max
    policy.deactivate_max_yaw_rate()
    assert policy.yaw_rate_max < 0


def test_velocity_vector_follows_velocity():
    path = _path([(0, 1, 0)] * 4)
    YawPolicy(PolicyType.VELOCITY_VECTOR).apply_policy_in_place(path)
    assert all(p.yaw() == pytest.approx(math.pi / 2) for p in path)


def test_velocity_vector_looks_ahead_when_stopped():
    path = _path([(0, 0, 0), (0, 0, 0), (-1, 0, 0)])
    YawPolicy(PolicyType.VELOCITY_VECTOR).apply_policy_in_place(path)
    assert all(math.cos(p.yaw()) == pytest.approx(-1.0) for p in path)


def test_velocity_vector_ignores_vertical_motion():
    path = _path([(0, 0, 2)] * 3, initial_yaw=0.4)
    YawPolicy(PolicyType.VELOCITY_VECTOR).apply_policy_in_place(path)
    assert all(p.yaw() == pytest.approx(0.4) for p in path)


def test_velocity_vector_respects_rate_limit():
    policy = _limited(PolicyType.VELOCITY_VECTOR)
    path = _path([(0, 1, 0)] * 30)
    policy.apply_policy_in_place(path)
    step = policy.yaw_rate_max * policy.sampling_dt
    assert path[0].yaw() == pytest.approx(step)
    yaws = [p.yaw() for p in path]
    assert all(abs(_wrap(b - a)) <= step + 1e-9 for a, b in zip(yaws, yaws[1:]))
    assert yaws[-1] == pytest.approx(math.pi / 2)


def test_anticipate_keeps_initial_yaw_and_reaches_target():
    policy = _limited(PolicyType.ANTICIPATE_VELOCITY_VECTOR)
    path = _path([(0, 1, 0)] * 30)
    policy.apply_policy_in_place(path)
    step = policy.yaw_rate_max * policy.sampling_dt
    yaws = [p.yaw() for p in path]
    assert yaws[0] == pytest.approx(0.0)
    assert all(abs(_wrap(b - a)) <= step + 1e-9 for a, b in zip(yaws, yaws[1:]))
    assert yaws[-1] == pytest.approx(math.pi / 2)


def test_point_facing():
    policy = YawPolicy(PolicyType.POINT_FACING, facing_point=(0, 0, 0))
    path = [TrajectoryPoint(position=(1, 0, 0)), TrajectoryPoint(position=(0, 2, 0))]
    policy.apply_policy_in_place(path)
    assert math.cos(path[0].yaw()) == pytest.approx(-1.0)
    assert path[1].yaw() == pytest.approx(-math.pi / 2)


def test_constant_policy():
    policy = YawPolicy(PolicyType.CONSTANT, constant_yaw=1.1)
    path = _path([(1, 0, 0)] * 5)
    policy.apply_policy_in_place(path)
    assert all(p.yaw() == pytest.approx(1.1) for p in path)


def test_apply_policy_returns_copy():
    policy = YawPolicy(PolicyType.CONSTANT, constant_yaw=1.1)
    path = _path([(1, 0, 0)] * 3)
    result = policy.apply_policy(path)
    assert all(p.yaw() == pytest.approx(1.1) for p in result)
    assert all(p.yaw() == pytest.approx(0.0) for p in path)


def test_empty_path_is_left_empty():
    path = []
    YawPolicy(PolicyType.VELOCITY_VECTOR).apply_policy_in_place(path)
    assert path == []