"""Curve flattening: Bézier curves, SVG elliptical arcs, full ellipses.

Provides:
    - Fixed-N uniform Bézier sampling (de Casteljau evaluation)
    - Accuracy-driven adaptive Bézier flattening (recursive midpoint split)
    - SVG endpoint-arc to center parameterisation and angular bisection
    - Closed-form ellipse / circle sampling by point-count doubling

Every flattener returns the exact curve endpoints as its first and last
points.  Unbounded refinement is prevented by an explicit depth (or point
count) ceiling, so pathological tolerances still terminate.

Callers are expected to skip degenerate control polygons
(:func:`is_degenerate`) before calling a flattener.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import NamedTuple

from svg_motion.geometry.vector import Point, Vector2

MAX_DEPTH = 16
"""Default subdivision ceiling (at most ``2**MAX_DEPTH`` pieces)."""

MAX_ELLIPSE_POINTS = 1 << 16


class InvalidParameterError(ValueError):
    """Raised when a geometric parameter is out of its valid domain."""

    pass


def _check_tolerance(tolerance: float) -> None:
    if not tolerance > 0:
        raise InvalidParameterError(
            f"tolerance must be > 0, got {tolerance}"
        )


# ---------------------------------------------------------------------------
# Bézier curves
# ---------------------------------------------------------------------------


def is_degenerate(control: Sequence[Point]) -> bool:
    """True when all control points coincide (the curve is a point)."""
    return all(
        (control[i + 1] - control[i]).len2() == 0
        for i in range(len(control) - 1)
    )


def evaluate_bezier(control: Sequence[Point], t: float) -> Point:
    """Evaluate a Bézier curve of any degree at parameter *t*.

    Repeated linear interpolation of the control polygon (de Casteljau).
    """
    if not control:
        raise InvalidParameterError("Bézier curve needs at least one point")
    pts = list(control)
    while len(pts) > 1:
        pts = [pts[i].lerp(pts[i + 1], t) for i in range(len(pts) - 1)]
    return pts[0]


def sample_bezier(control: Sequence[Point], n: int) -> list[Point]:
    """Sample a Bézier curve with *n* uniform line segments.

    Parameters
    ----------
    control : Sequence[Point]
        Control polygon (3 points: quadratic, 4 points: cubic).
    n : int
        Number of segments, ``>= 1``.

    Returns
    -------
    list[Point]
        ``n + 1`` points; the first and last are the exact endpoints.
    """
    if n < 1:
        raise InvalidParameterError(f"segment count must be >= 1, got {n}")
    pts = [evaluate_bezier(control, i / n) for i in range(n + 1)]
    pts[0] = control[0]
    pts[-1] = control[-1]
    return pts


def split_bezier(
    control: Sequence[Point], t: float = 0.5,
) -> tuple[list[Point], list[Point]]:
    """Split a control polygon at *t* into left and right halves."""
    left = [control[0]]
    right = [control[-1]]
    pts = list(control)
    while len(pts) > 1:
        pts = [pts[i].lerp(pts[i + 1], t) for i in range(len(pts) - 1)]
        left.append(pts[0])
        right.append(pts[-1])
    right.reverse()
    return left, right


def point_segment_distance(p: Point, a: Point, b: Point) -> float:
    """Euclidean distance from *p* to the closed segment ``a-b``."""
    ab = b - a
    length2 = ab.len2()
    if length2 == 0.0:
        return (p - a).len()
    t = min(max((p - a).dot(ab) / length2, 0.0), 1.0)
    return (p - (a + ab * t)).len()


def _flat_enough(control: Sequence[Point], tolerance: float) -> bool:
    # The curve lies in the convex hull of its control polygon, and the
    # set of points within ``tolerance`` of the chord is convex.
    a, b = control[0], control[-1]
    return all(
        point_segment_distance(p, a, b) <= tolerance for p in control[1:-1]
    )


def flatten_bezier(
    control: Sequence[Point],
    tolerance: float,
    max_depth: int = MAX_DEPTH,
) -> list[Point]:
    """Adaptively flatten a Bézier curve of any degree.

    Parameters
    ----------
    control : Sequence[Point]
        Control polygon.
    tolerance : float
        Maximum allowed distance between the curve and its polyline.
    max_depth : int
        Recursion ceiling.

    Returns
    -------
    list[Point]
        Polyline vertices including both endpoints.

    Raises
    ------
    InvalidParameterError
        If ``tolerance <= 0``.

    Notes
    -----
    Midpoint de Casteljau subdivision; a piece is accepted once every
    inner control point is within *tolerance* of the piece's chord.
    """
    _check_tolerance(tolerance)
    out: list[Point] = [control[0]]

    def subdivide(ctrl: list[Point], depth: int) -> None:
        if depth >= max_depth or _flat_enough(ctrl, tolerance):
            out.append(ctrl[-1])
            return
        left, right = split_bezier(ctrl)
        subdivide(left, depth + 1)
        subdivide(right, depth + 1)

    subdivide(list(control), 0)
    out[-1] = control[-1]
    return out


def flatten_cubic(
    p0: Point,
    p1: Point,
    p2: Point,
    p3: Point,
    tolerance: float,
    max_depth: int = MAX_DEPTH,
) -> list[Point]:
    """Adaptive flattening of a cubic Bézier curve."""
    return flatten_bezier((p0, p1, p2, p3), tolerance, max_depth)


def flatten_quadratic(
    p0: Point,
    p1: Point,
    p2: Point,
    tolerance: float,
    max_depth: int = MAX_DEPTH,
) -> list[Point]:
    """Adaptive flattening of a quadratic Bézier curve."""
    return flatten_bezier((p0, p1, p2), tolerance, max_depth)


# ---------------------------------------------------------------------------
# Elliptical arcs
# ---------------------------------------------------------------------------


class ArcParameters(NamedTuple):
    """Center parameterisation of an elliptical arc.

    ``point(t) = center + R(phi) @ [rx cos(theta + t*delta),
    ry sin(theta + t*delta)]`` for ``t`` in ``[0, 1]``.
    """

    center: Point
    rx: float
    ry: float
    phi: float
    theta: float
    delta: float

    def point(self, t: float) -> Point:
        angle = self.theta + t * self.delta
        x = self.rx * math.cos(angle)
        y = self.ry * math.sin(angle)
        cos_phi, sin_phi = math.cos(self.phi), math.sin(self.phi)
        return Point(
            self.center.x + cos_phi * x - sin_phi * y,
            self.center.y + sin_phi * x + cos_phi * y,
        )


def _angle_between(u: Vector2, v: Vector2) -> float:
    return math.atan2(u.cross(v), u.dot(v))


def arc_center_parameters(
    p1: Point,
    p2: Point,
    rx: float,
    ry: float,
    x_axis_rotation: float,
    large_arc: bool,
    sweep: bool,
) -> ArcParameters:
    """Convert SVG endpoint arc parameters to center form.

    Follows the SVG implementation notes (endpoint to center conversion,
    F.6.5), including the radii correction of F.6.6 when the radii are too
    small to connect the endpoints.

    Parameters
    ----------
    p1, p2 : Point
        Arc start and end.
    rx, ry : float
        Ellipse radii; signs are ignored, both must be non-zero.
    x_axis_rotation : float
        Ellipse x-axis rotation in degrees.
    large_arc, sweep : bool
        SVG ``large-arc-flag`` and ``sweep-flag``.
    """
    rx, ry = abs(rx), abs(ry)
    if rx == 0 or ry == 0:
        raise InvalidParameterError("arc radii must be non-zero")
    phi = math.radians(x_axis_rotation)
    cos_phi, sin_phi = math.cos(phi), math.sin(phi)

    # Step 1: endpoints in the ellipse's unrotated frame
    hx = (p1.x - p2.x) / 2.0
    hy = (p1.y - p2.y) / 2.0
    x1 = cos_phi * hx + sin_phi * hy
    y1 = -sin_phi * hx + cos_phi * hy

    # Radii correction
    lam = (x1 / rx) ** 2 + (y1 / ry) ** 2
    if lam > 1.0:
        s = math.sqrt(lam)
        rx *= s
        ry *= s

    # Step 2: center in the unrotated frame
    num = (rx * ry) ** 2 - (rx * y1) ** 2 - (ry * x1) ** 2
    den = (rx * y1) ** 2 + (ry * x1) ** 2
    coef = math.sqrt(max(0.0, num / den)) if den > 0 else 0.0
    if large_arc == sweep:
        coef = -coef
    cx1 = coef * rx * y1 / ry
    cy1 = -coef * ry * x1 / rx

    # Step 3: back to user space
    center = Point(
        cos_phi * cx1 - sin_phi * cy1 + (p1.x + p2.x) / 2.0,
        sin_phi * cx1 + cos_phi * cy1 + (p1.y + p2.y) / 2.0,
    )

    # Step 4: start angle and sweep extent
    u = Vector2((x1 - cx1) / rx, (y1 - cy1) / ry)
    v = Vector2((-x1 - cx1) / rx, (-y1 - cy1) / ry)
    theta = _angle_between(Vector2(1.0, 0.0), u)
    delta = math.fmod(_angle_between(u, v), 2.0 * math.pi)
    if not sweep and delta > 0:
        delta -= 2.0 * math.pi
    elif sweep and delta < 0:
        delta += 2.0 * math.pi

    return ArcParameters(center, rx, ry, phi, theta, delta)


def flatten_arc(
    p1: Point,
    p2: Point,
    rx: float,
    ry: float,
    large_arc: bool,
    sweep: bool,
    x_axis_rotation: float,
    tolerance: float,
    max_depth: int = MAX_DEPTH,
) -> list[Point]:
    """Flatten an SVG elliptical arc into a polyline.

    Parameters
    ----------
    p1, p2 : Point
        Arc endpoints (current point and target point).
    rx, ry : float
        Radii; negative values are used by absolute value.
    large_arc, sweep : bool
        SVG arc flags.
    x_axis_rotation : float
        Rotation of the ellipse x-axis in degrees.
    tolerance : float
        Maximum distance between adjacent samples.
    max_depth : int
        Bisection ceiling.

    Returns
    -------
    list[Point]
        Samples starting exactly at *p1* and ending exactly at *p2*.
        Zero radius degrades to ``[p1, p2]``; coincident endpoints to
        ``[p1]``.

    Raises
    ------
    InvalidParameterError
        If ``tolerance <= 0``.
    """
    _check_tolerance(tolerance)
    if p1 == p2:
        return [p1]
    if rx == 0 or ry == 0:
        return [p1, p2]

    arc = arc_center_parameters(p1, p2, rx, ry, x_axis_rotation, large_arc, sweep)
    out: list[Point] = [p1]

    def bisect(t0: float, a: Point, t1: float, b: Point, depth: int) -> None:
        if depth >= max_depth or (b - a).len() <= tolerance:
            return
        tm = (t0 + t1) / 2.0
        m = arc.point(tm)
        bisect(t0, a, tm, m, depth + 1)
        out.append(m)
        bisect(tm, m, t1, b, depth + 1)

    mid = arc.point(0.5)
    bisect(0.0, p1, 0.5, mid, 1)
    out.append(mid)
    bisect(0.5, mid, 1.0, p2, 1)
    out.append(p2)
    return out


# ---------------------------------------------------------------------------
# Full ellipses
# ---------------------------------------------------------------------------


def sample_ellipse(
    center: Point,
    rx: float,
    ry: float,
    tolerance: float,
    max_points: int = MAX_ELLIPSE_POINTS,
) -> list[Point]:
    """Sample a whole axis-aligned ellipse.

    The point count starts at 2 and doubles (halving the angular step)
    until the squared chord from the apex on the major axis to its
    neighbour is at most ``tolerance**2``, or until it reaches
    *max_points*; the ellipse is then sampled uniformly in angle.  The
    result is not closed: the first point ``(cx + rx, cy)`` is not
    repeated.

    Returns
    -------
    list[Point]
        A power-of-two number of points, counter-clockwise in a y-up
        frame, starting at angle 0.

    Raises
    ------
    InvalidParameterError
        If a radius or the tolerance is not positive.
    """
    if rx <= 0 or ry <= 0:
        raise InvalidParameterError(
            f"ellipse radii must be > 0, got rx={rx}, ry={ry}"
        )
    _check_tolerance(tolerance)

    tol2 = tolerance * tolerance
    if rx > ry:
        apex, angle0 = Vector2(rx, 0.0), 0.0
    else:
        apex, angle0 = Vector2(0.0, ry), math.pi / 2.0

    step = math.pi
    count = 2
    while count < max_points:
        angle = angle0 + step
        chord2 = (Vector2(rx * math.cos(angle), ry * math.sin(angle)) - apex).len2()
        if chord2 <= tol2:
            break
        step /= 2.0
        count *= 2

    return [
        Point(
            center.x + rx * math.cos(2.0 * math.pi * i / count),
            center.y + ry * math.sin(2.0 * math.pi * i / count),
        )
        for i in range(count)
    ]


def sample_circle(center: Point, r: float, tolerance: float) -> list[Point]:
    """Circle sampling; the symmetric case of :func:`sample_ellipse`."""
    return sample_ellipse(center, r, r, tolerance)
