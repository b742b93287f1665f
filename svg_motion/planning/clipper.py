"""Viewport clipping: split primitives at the working-area boundary.

The viewport is the closed rectangle ``[0, width] x [0, height]``.  Each
segment of a primitive is classified by the inside/outside state of its
endpoints:

* in -> in: kept as is (the rectangle is convex).
* in -> out: kept up to the exit crossing; the current piece ends there.
* out -> in: a new piece starts at the entry crossing.
* out -> out: if the segment passes through the rectangle, the chord
  between its two crossings becomes a piece of its own.

A fill primitive that starts and ends inside but leaves the viewport in
between would otherwise come back as a first and a last piece meeting at
its start vertex; those two are joined so the outline stays one run.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from svg_motion.geometry.intersect import segment_intersection
from svg_motion.geometry.primitive import Primitive
from svg_motion.geometry.vector import EPSILON, Point

logger = logging.getLogger(__name__)


def is_inside(p: Point, width: float, height: float, eps: float = EPSILON) -> bool:
    """Inclusive containment test with tolerance *eps*."""
    return -eps <= p.x <= width + eps and -eps <= p.y <= height + eps


def boundary(width: float, height: float) -> list[tuple[Point, Point]]:
    """Rectangle edges as a closed clockwise loop starting at the origin."""
    corners = [
        Point(0.0, 0.0),
        Point(width, 0.0),
        Point(width, height),
        Point(0.0, height),
    ]
    return [(corners[i], corners[(i + 1) % 4]) for i in range(4)]


def crossings(
    a: Point, b: Point, width: float, height: float, eps: float = EPSILON,
) -> list[tuple[float, Point]]:
    """Boundary crossings of segment ``a-b`` as ``(t, point)``, sorted by *t*.

    Crossings closer than *eps* in parameter (a corner hit reported by two
    edges) are merged.
    """
    hits: list[tuple[float, Point]] = []
    for e0, e1 in boundary(width, height):
        hit = segment_intersection(a, b, e0, e1, eps)
        if hit is not None:
            hits.append((hit.t, hit.point))
    hits.sort(key=lambda h: h[0])

    merged: list[tuple[float, Point]] = []
    for t, p in hits:
        if merged and t - merged[-1][0] <= eps:
            continue
        merged.append((t, p))
    return merged


def _dedupe(piece: list[Point], eps: float) -> list[Point]:
    out: list[Point] = []
    for p in piece:
        if not out or not out[-1].close_to(p, eps):
            out.append(p)
    return out


def split(
    primitive: Primitive, width: float, height: float, eps: float = EPSILON,
) -> list[Primitive]:
    """Split *primitive* into the runs lying inside the viewport.

    Parameters
    ----------
    primitive : Primitive
        Source polyline; not modified.
    width, height : float
        Viewport size.
    eps : float
        Tolerance for containment, crossing parameters and coincidence.

    Returns
    -------
    list[Primitive]
        Inside runs in traversal order, each inheriting ``fill``.  Runs
        with fewer than two distinct vertices are dropped.
    """
    def inside(p: Point) -> bool:
        return is_inside(p, width, height, eps)

    pieces: list[list[Point]] = []
    current: list[Point] | None = [primitive.start] if inside(primitive.start) else None

    for a, b in primitive.segments():
        a_in, b_in = inside(a), inside(b)
        if a_in and b_in:
            current.append(b)
        elif a_in:
            hits = crossings(a, b, width, height, eps)
            current.append(hits[-1][1] if hits else a)
            pieces.append(current)
            current = None
        elif b_in:
            hits = crossings(a, b, width, height, eps)
            current = [hits[0][1] if hits else b, b]
        else:
            hits = crossings(a, b, width, height, eps)
            if len(hits) >= 2:
                pieces.append([hits[0][1], hits[-1][1]])

    if current is not None:
        pieces.append(current)

    pieces = [p for p in (_dedupe(piece, eps) for piece in pieces) if len(p) >= 2]

    if (
        primitive.fill
        and len(pieces) > 1
        and inside(primitive.start)
        and inside(primitive.end)
    ):
        first, last = pieces[0], pieces.pop()
        tail = first[1:] if last[-1].close_to(first[0], eps) else first
        pieces[0] = last + tail

    if len(pieces) != 1 or len(pieces[0]) != len(primitive):
        logger.debug(
            "Split primitive of %d vertices into %d piece(s)",
            len(primitive), len(pieces),
        )
    return [Primitive.from_vertices(p, fill=primitive.fill) for p in pieces]


def split_all(
    primitives: Iterable[Primitive], width: float, height: float, eps: float = EPSILON,
) -> list[Primitive]:
    """:func:`split` every primitive, preserving order."""
    out: list[Primitive] = []
    count = 0
    for prim in primitives:
        out.extend(split(prim, width, height, eps))
        count += 1
    logger.info("Clipped %d primitive(s) to %d piece(s)", count, len(out))
    return out
