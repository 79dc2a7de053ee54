"""A one-row table holding x, y, z and yaw of a pose."""

from __future__ import annotations

import math
from typing import Callable

from mavplan.utils import TrajectoryPoint

PoseCallback = Callable[[str, TrajectoryPoint], None]

HEADERS = ("x [m]", "y [m]", "z [m]", "yaw [°]")
_INITIAL_TEXT = "0.00"


def _to_double(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        return 0.0


class PoseWidget:
    """Editable pose cells; yaw is shown in degrees.

    ``on_pose_updated`` is called with the id and the new pose after a cell
    is edited, but not after :meth:`set_pose`.
    """

    def __init__(self, id: str, on_pose_updated: PoseCallback | None = None) -> None:
        self.id = id
        self.on_pose_updated = on_pose_updated
        self._cells = [_INITIAL_TEXT] * len(HEADERS)

    @property
    def headers(self) -> tuple[str, ...]:
        return HEADERS

    @property
    def cells(self) -> tuple[str, ...]:
        """Current text of the x, y, z and yaw cells."""
        return tuple(self._cells)

    def get_pose(self) -> TrajectoryPoint:
        """The pose the cells describe."""
        x, y, z, yaw_deg = (_to_double(text) for text in self._cells)
        point = TrajectoryPoint(position=(x, y, z))
        point.set_from_yaw(math.radians(yaw_deg))
        return point

    def set_pose(self, point: TrajectoryPoint) -> None:
        """Show ``point`` with two decimals, without reporting an update."""
        values = (*point.position, math.degrees(point.yaw()))
        self._cells = [f"{float(value):.2f}" for value in values]

    def set_cell(self, column: int, text: str) -> None:
        """Edit one cell as a user would, then report the new pose."""
        if not 0 <= column < len(self._cells):
            raise IndexError(f"column {column} out of range")
        try:
            float(text)
        except ValueError:
            raise ValueError(f"not a number: {text!r}") from None
        self._cells[column] = text
        if self.on_pose_updated is not None:
            self.on_pose_updated(self.id, self.get_pose())