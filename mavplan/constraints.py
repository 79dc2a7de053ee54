"""Physical limits shared by all planners."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import Any, Mapping


@dataclass
class PhysicalConstraints:
    """Velocity, acceleration, yaw-rate and size limits of the vehicle."""

    v_max: float = 1.0  # m/s
    a_max: float = 2.0  # m/s^2
    yaw_rate_max: float = math.pi / 4.0  # rad/s
    robot_radius: float = 1.0  # m
    sampling_dt: float = 0.01  # s

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "PhysicalConstraints":
        """Build constraints from a parameter mapping, keeping defaults for absent keys."""
        defaults = cls()
        return cls(
            **{
                f.name: float(params.get(f.name, getattr(defaults, f.name)))
                for f in fields(cls)
            }
        )