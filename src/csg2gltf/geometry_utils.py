"""Small vector helpers shared by the triangulator."""

from __future__ import annotations

import math
from typing import Tuple

Vec3 = Tuple[float, float, float]

DEFAULT_NORMAL: Vec3 = (0.0, 0.0, 1.0)


def subtract(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def normalize(v: Vec3) -> Vec3:
    """Return ``v`` scaled to unit length, or +Z if it has no length."""

    length = math.hypot(v[0], v[1], v[2])
    if not length or math.isnan(length):
        return DEFAULT_NORMAL
    return (v[0] / length, v[1] / length, v[2] / length)


def triangle_normal(v0: Vec3, v1: Vec3, v2: Vec3) -> Vec3:
    """Return the unit normal of the triangle ``v0 v1 v2``.

    Winding is counter-clockwise.  Degenerate (collinear or coincident)
    triangles get ``DEFAULT_NORMAL`` rather than being dropped.
    """

    return normalize(cross(subtract(v1, v0), subtract(v2, v0)))


__all__ = ['Vec3', 'DEFAULT_NORMAL', 'subtract', 'cross', 'normalize', 'triangle_normal']
