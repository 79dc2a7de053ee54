"""Recolouring of successive planned paths along a rainbow scale."""

from __future__ import annotations

import copy
import logging
from dataclasses import replace
from typing import Iterable

from mavplan.colors import percent_to_rainbow_color
from mavplan.visualization import Marker

logger = logging.getLogger(__name__)

_ALPHA = 0.5
_SCALE = 0.025


class TrajectoryRecolor:
    """Accumulates path markers, giving each one the next rainbow colour."""

    def __init__(self, max_plans: int = 50) -> None:
        if max_plans <= 0:
            raise ValueError("max_plans must be positive")
        self.max_plans = max_plans
        self.counter = 0
        self._cache: list[Marker] = []

    @property
    def markers(self) -> list[Marker]:
        """All markers recoloured so far."""
        return list(self._cache)

    def marker_callback(self, markers: Iterable[Marker]) -> list[Marker]:
        """Recolour ``markers``, add them to the cache and return the whole cache."""
        for marker in markers:
            recolored = copy.deepcopy(marker)
            color = percent_to_rainbow_color(self.counter / self.max_plans)
            recolored.color = replace(color, a=_ALPHA)
            recolored.scale = (_SCALE, _SCALE, _SCALE)
            recolored.id = self.counter
            self.counter += 1
            self._cache.append(recolored)

        logger.info("Counter: %d", self.counter)
        if self.counter > self.max_plans:
            self.counter %= self.max_plans
        return list(self._cache)