# mavplan

Building blocks for planning paths of micro aerial vehicles (MAVs) in
distance-field maps, and for judging how good those paths are.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## What is inside

- `mavplan.utils`: `TrajectoryPoint` (position, velocity, acceleration,
  orientation as a `(w, x, y, z)` quaternion, `time_from_start_ns`) with
  `set_from_yaw` and `yaw`; `compute_path_length`; and `rand_m_to_n`, a
  uniform draw between two bounds from an optional `random.Random`.
- `mavplan.constraints`: `PhysicalConstraints` holds `v_max`, `a_max`,
  `yaw_rate_max`, `robot_radius` and `sampling_dt`. Build one from a mapping
  with `PhysicalConstraints.from_params`; absent keys keep their defaults.
- `mavplan.path_utils`: retime sampled trajectories in place with
  `retime_monotonically_increasing` and `retime_with_start_time_and_dt`.
- `mavplan.yaw_policy`: `YawPolicy` with the `PolicyType` choices
  (`FROM_PLAN`, `VELOCITY_VECTOR`, `ANTICIPATE_VELOCITY_VECTOR`,
  `POINT_FACING`, `CONSTANT`). `apply_policy_in_place` and `apply_policy` set
  the yaw along a path; once `sampling_dt` and `yaw_rate_max` are set (or
  taken from `set_physical_constraints`), `get_feasible_yaw` limits each step
  to the maximum yaw rate. `deactivate_max_yaw_rate` lifts the limit.
- `mavplan.visibility_resampling`: `resample_waypoints_from_visibility_graph`
  returns `num_segments + 1` waypoints spread evenly in estimated travel time
  along a polyline, using the trapezoidal profile of
  `compute_time_velocity_ramp`.
- `mavplan.colors`: `ColorRGBA` and `percent_to_rainbow_color`, which maps a
  fraction onto a rainbow hue that wraps every 1.0.
- `mavplan.visualization`: `Marker`, `MarkerType`, and
  `create_marker_for_path` (a line strip, subsampled to about 1000 points,
  skipping points beyond ±10⁴) / `create_marker_for_waypoints` (a sphere
  list).
- `mavplan.semaphore`: a counting `Semaphore` with `notify`, a timed
  `wait_for`, and `shutdown`, which wakes every waiter.
- `mavplan.shotgun`: `ShotgunPlanner` sends random-walk particles through an
  `EsdfGrid` (a sparse grid of `EsdfVoxel`) and returns a `ShotgunResult` with
  the free point that got closest to the goal and the coarse path there.
  `ShotgunParameters` tunes the goal-seeking and gradient-following
  probabilities; `grid_index_from_point` and `center_point_from_grid_index`
  convert between positions and voxel indices.
- `mavplan.goal_selector`: `GoalPointSelector` picks the next goal by a
  `Strategy` (no intermediate goal, random, local exploration), configured by
  `GoalPointSelectorParameters`. Local exploration needs a map object with a
  `get_voxel(position)` method returning voxels with `distance` and `weight`,
  and a gain function `gain(pose, modulus)` supplied by the caller.
- `mavplan.recolor`: `TrajectoryRecolor.marker_callback` recolours incoming
  markers in rainbow order and returns every marker collected so far.
- `mavplan.evaluation`: `GlobalBenchmarkResult` with the `GlobalPlanningMethod`
  and `PathSmoothingMethod` enums, `is_path_collision_free`,
  `is_path_feasible`, `select_random_start_and_goal`, `fill_in_path_results`
  and `write_global_results` (CSV with a commented header).
- `mavplan.local_benchmark`: `LocalBenchmarkResult`, `LocalPlanningMethod`,
  synthetic cylinder worlds (`Cylinder`, `SyntheticWorld`,
  `generate_custom_world`, `generate_world`), `set_yaw_from_velocity`,
  `density_schedule` (trial numbers spread over densities 0.05 to 0.50) and
  `write_local_results`.
- `mavplan.edit_button`, `mavplan.pose_widget`,
  `mavplan.interactive_markers`: toolkit-free models of a start/goal pose
  editor. `EditButton` toggles between editing and idle and reports both;
  `PoseWidget` keeps x, y, z and yaw (in degrees) as text cells;
  `PlanningInteractiveMarkers` manages a movable set-pose marker and passive
  named markers on a `MarkerServer`.

## Example

```python
import math
from mavplan.utils import TrajectoryPoint
from mavplan.yaw_policy import YawPolicy, PolicyType

path = [TrajectoryPoint(velocity=(0.0, 1.0, 0.0)) for _ in range(10)]
policy = YawPolicy(PolicyType.VELOCITY_VECTOR)
policy.apply_policy_in_place(path)
assert math.isclose(path[0].yaw(), math.pi / 2)
```

```python
from mavplan.utils import TrajectoryPoint
from mavplan.evaluation import is_path_feasible
from mavplan.constraints import PhysicalConstraints

path = [TrajectoryPoint(velocity=(0.5, 0.0, 0.0))]
print(is_path_feasible(path, PhysicalConstraints()))  # True
```

## What it does not do

- It contains no global planners or trajectory optimisers: paths to score
  come from elsewhere.
- It does not load, build or serve distance maps. `EsdfGrid` is filled by the
  caller, and the goal selector works on whatever map object it is given.
- There is no command-line benchmark runner; the modules provide the pieces
  (worlds, schedules, scoring, CSV output) for one.
- The pose editor classes draw nothing and publish nothing; they model the
  state and callbacks of such an editor.