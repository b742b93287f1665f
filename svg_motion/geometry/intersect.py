"""Parametric line / segment intersection.

Shared by the viewport clipper (segment vs. rectangle edge) and the fill
planner (polygon edge vs. scan line).
"""

from __future__ import annotations

from typing import NamedTuple

from svg_motion.geometry.vector import EPSILON, Point, det


class Intersection(NamedTuple):
    """Crossing of ``p1 + t (p2 - p1)`` with ``q1 + u (q2 - q1)``."""

    point: Point
    t: float
    u: float


def line_intersection(
    p1: Point, p2: Point, q1: Point, q2: Point,
) -> Intersection | None:
    """Intersect the infinite lines through ``p1-p2`` and ``q1-q2``.

    Returns ``None`` for parallel (or degenerate) lines.
    """
    r = p2 - p1
    s = q2 - q1
    denom = det(r, s)
    if denom == 0.0:
        return None
    qp = q1 - p1
    t = det(qp, s) / denom
    u = det(qp, r) / denom
    return Intersection(p1 + r * t, t, u)


def segment_intersection(
    p1: Point,
    p2: Point,
    q1: Point,
    q2: Point,
    eps: float = EPSILON,
) -> Intersection | None:
    """Intersect closed segments ``p1-p2`` and ``q1-q2``.

    Parameters are accepted within ``[-eps, 1 + eps]`` and then clamped to
    ``[0, 1]`` so that vertices lying exactly on the other segment are not
    lost to rounding.  Collinear overlaps return ``None``.
    """
    hit = line_intersection(p1, p2, q1, q2)
    if hit is None:
        return None
    if not (-eps <= hit.t <= 1.0 + eps and -eps <= hit.u <= 1.0 + eps):
        return None
    t = min(max(hit.t, 0.0), 1.0)
    u = min(max(hit.u, 0.0), 1.0)
    return Intersection(p1 + (p2 - p1) * t, t, u)
