"""Colour helpers for visualisation."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass
class ColorRGBA:
    """An RGBA colour with components in [0, 1]."""

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 0.0


def percent_to_rainbow_color(h: float) -> ColorRGBA:
    """Map a fraction onto a rainbow hue; the scale wraps every 1.0."""
    color = ColorRGBA(a=0.5)
    s = 1.0
    v = 1.0
    if not math.isfinite(h):
        color.r, color.g, color.b = 1.0, 0.5, 0.5
        return color

    h -= math.floor(h)
    h *= 6
    i = math.floor(h)
    f = h - i
    if i % 2 == 0:
        f = 1 - f
    m = v * (1 - s)
    n = v * (1 - s * f)

    if i in (0, 6):
        rgb = (v, n, m)
    elif i == 1:
        rgb = (n, v, m)
    elif i == 2:
        rgb = (m, v, n)
    elif i == 3:
        rgb = (m, n, v)
    elif i == 4:
        rgb = (n, m, v)
    elif i == 5:
        rgb = (v, m, n)
    else:
        rgb = (1.0, 0.5, 0.5)
    color.r, color.g, color.b = rgb
    return color