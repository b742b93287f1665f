"""Scanline fill planning for closed regions.

The sweep runs in the frame of the region's principal axes: scan lines
are perpendicular to ``e2`` and travel along ``e1``, the direction of
largest vertex variance, so passes are as long and as few as possible.
Lines are spaced ``step`` apart, starting half a step inside the region,
and alternate direction (boustrophedon) so consecutive passes connect
with short moves.

Crossings on one scan line are paired in order along ``e1`` under the
even-odd rule: ``(entry, exit)`` pairs are the pen-down passes.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np

from svg_motion.geometry.curves import InvalidParameterError
from svg_motion.geometry.intersect import line_intersection
from svg_motion.geometry.primitive import Primitive
from svg_motion.geometry.vector import (
    EPSILON,
    Point,
    Vector2,
    symmetric_eigenvalues,
    symmetric_eigenvector,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Basis:
    """Orthonormal sweep frame.

    ``e1`` is the in-line travel direction (largest variance), ``e2`` the
    direction in which successive scan lines advance.
    """

    e1: Vector2
    e2: Vector2


class CoverageSegment(NamedTuple):
    """One pen-down pass of a fill plan."""

    entry: Point
    exit: Point


class _Edge(NamedTuple):
    p: Point
    q: Point
    lo: float
    hi: float


def principal_basis(points: Sequence[Point], eps: float = EPSILON) -> Basis:
    """Principal axes of a point set.

    Covariance is computed with numpy; the eigenpairs of the symmetric 2x2
    matrix are closed-form.  When the off-diagonal term vanishes the
    coordinate axes are used, ``e1`` along the one with larger variance.
    """
    arr = np.array([(p.x, p.y) for p in points], dtype=float)
    if len(arr) < 2:
        return Basis(Vector2(1.0, 0.0), Vector2(0.0, 1.0))
    cov = np.cov(arr, rowvar=False, bias=True)
    a, b, c = float(cov[0, 0]), float(cov[0, 1]), float(cov[1, 1])

    if abs(b) <= eps:
        if a >= c:
            return Basis(Vector2(1.0, 0.0), Vector2(0.0, 1.0))
        return Basis(Vector2(0.0, 1.0), Vector2(1.0, 0.0))

    _, major = symmetric_eigenvalues(a, b, c)
    e1 = symmetric_eigenvector(a, b, major)
    return Basis(e1, e1.perp())


def _edges(primitive: Primitive, closed: bool, e2: Vector2) -> list[_Edge]:
    segs = list(primitive.segments())
    if not closed:
        segs.append((primitive.end, primitive.start))
    edges = []
    for p, q in segs:
        hp, hq = p.dot(e2), q.dot(e2)
        if hp == hq:
            # Parallel to the scan lines, never crossed
            continue
        edges.append(_Edge(p, q, min(hp, hq), max(hp, hq)))
    edges.sort(key=lambda e: e.lo)
    return edges


def plan_fill(
    primitive: Primitive, step: float, eps: float = EPSILON,
) -> list[CoverageSegment]:
    """Plan boustrophedon coverage passes for a closed region.

    Parameters
    ----------
    primitive : Primitive
        Region outline; an open outline is treated as closed.
    step : float
        Distance between scan lines, in the primitive's units.
    eps : float
        Tolerance for closure and degenerate-covariance checks.

    Returns
    -------
    list[CoverageSegment]
        Passes in sweep order.  Empty for outlines with fewer than three
        distinct vertices.

    Raises
    ------
    InvalidParameterError
        If ``step <= 0``.
    """
    if step <= 0:
        raise InvalidParameterError(f"fill step must be > 0, got {step}")
    if len(set(primitive.vertices)) < 3:
        return []

    closed = primitive.is_closed(eps)
    stats = primitive.points if closed else primitive.vertices
    basis = principal_basis(stats, eps)
    e1, e2 = basis.e1, basis.e2

    edges = _edges(primitive, closed, e2)
    heights = np.array([p.dot(e2) for p in primitive.vertices])
    h_min, h_max = float(heights.min()), float(heights.max())

    segments: list[CoverageSegment] = []
    active: list[_Edge] = []
    nxt = 0
    line = 0
    h = h_min + step / 2.0
    while h < h_max:
        while nxt < len(edges) and edges[nxt].lo <= h:
            active.append(edges[nxt])
            nxt += 1
        active = [e for e in active if e.hi > h]

        base = e2 * h
        hits = []
        for edge in active:
            hit = line_intersection(edge.p, edge.q, base, base + e1)
            if hit is not None:
                hits.append(hit.point)
        hits.sort(key=lambda p: p.dot(e1), reverse=line % 2 == 1)

        for i in range(0, len(hits) - 1, 2):
            segments.append(CoverageSegment(hits[i], hits[i + 1]))

        line += 1
        h = h_min + (line + 0.5) * step

    logger.debug(
        "Fill plan: %d scan line(s), %d pass(es), step %.4g",
        line, len(segments), step,
    )
    return segments
