"""Basic shape elements -> primitives.

Each adapter reads the element's attributes and returns one untransformed
:class:`Primitive` in user units, or ``None`` when the shape has zero size
and so draws nothing.  Closed shapes (``rect``, ``circle``, ``ellipse``,
``polygon``) always end on their start vertex.  Transform and fill flag
are applied by the caller through :meth:`Primitive.finalize`.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping

from svg_motion.geometry.curves import MAX_DEPTH, flatten_arc, sample_ellipse
from svg_motion.geometry.primitive import Primitive
from svg_motion.geometry.vector import Point

logger = logging.getLogger(__name__)

Attributes = Mapping[str, str]
ShapeAdapter = Callable[[Attributes, float, int], "Primitive | None"]


class ShapeError(Exception):
    """Missing or invalid attribute on a shape element."""

    pass


# ---------------------------------------------------------------------------
# Attribute parsing
# ---------------------------------------------------------------------------

# User units per unit, 96 px per inch
UNIT_SCALE: dict[str, float] = {
    "": 1.0,
    "px": 1.0,
    "in": 96.0,
    "cm": 96.0 / 2.54,
    "mm": 96.0 / 25.4,
    "pt": 96.0 / 72.0,
    "pc": 16.0,
}

_LENGTH_RE = re.compile(
    r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*([a-z]*)\s*$"
)
_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


def parse_length(value: str) -> float:
    """Parse an absolute SVG length (``"12"``, ``"3.5mm"``) in user units.

    Raises
    ------
    ShapeError
        On malformed numbers, percentages or unknown units.
    """
    match = _LENGTH_RE.match(value)
    if match is None or match.group(2) not in UNIT_SCALE:
        raise ShapeError(f"invalid length {value!r}")
    return float(match.group(1)) * UNIT_SCALE[match.group(2)]


def _length(attrs: Attributes, name: str, default: float | None = None) -> float:
    raw = attrs.get(name)
    if raw is None:
        if default is None:
            raise ShapeError(f"missing required attribute '{name}'")
        return default
    try:
        return parse_length(raw)
    except ShapeError as exc:
        raise ShapeError(f"attribute '{name}': {exc}") from exc


def _size(attrs: Attributes, name: str) -> float:
    value = _length(attrs, name)
    if value < 0:
        raise ShapeError(f"attribute '{name}' must be >= 0, got {value}")
    return value


def parse_points(value: str) -> list[Point]:
    """Parse a ``points`` list; a trailing odd coordinate is dropped."""
    nums = [float(n) for n in _NUMBER_RE.findall(value)]
    if len(nums) % 2:
        logger.warning("Odd coordinate count in points list, dropping last value")
        nums.pop()
    pts: list[Point] = []
    for x, y in zip(nums[0::2], nums[1::2]):
        p = Point(x, y)
        if not pts or pts[-1] != p:
            pts.append(p)
    return pts


# ---------------------------------------------------------------------------
# Adapters
# ---------------------------------------------------------------------------


def _corner_radii(attrs: Attributes, width: float, height: float) -> tuple[float, float]:
    rx = _length(attrs, "rx") if "rx" in attrs else None
    ry = _length(attrs, "ry") if "ry" in attrs else None
    for name, r in (("rx", rx), ("ry", ry)):
        if r is not None and r < 0:
            raise ShapeError(f"attribute '{name}' must be >= 0, got {r}")
    # One given radius stands for both
    if rx is None:
        rx = ry if ry is not None else 0.0
    if ry is None:
        ry = rx
    return min(rx, width / 2.0), min(ry, height / 2.0)


def rect_to_primitive(
    attrs: Attributes, tolerance: float, max_depth: int = MAX_DEPTH,
) -> Primitive | None:
    """``<rect>``, with optional rounded corners."""
    x = _length(attrs, "x", 0.0)
    y = _length(attrs, "y", 0.0)
    w = _size(attrs, "width")
    h = _size(attrs, "height")
    if w == 0 or h == 0:
        return None

    rx, ry = _corner_radii(attrs, w, h)
    if rx == 0 or ry == 0:
        corners = [Point(x + w, y), Point(x + w, y + h), Point(x, y + h), Point(x, y)]
        return Primitive(Point(x, y), corners)

    # Clockwise (y down): top edge, right edge, bottom edge, left edge,
    # each followed by its corner arc.
    runs = [
        (Point(x + w - rx, y), Point(x + w, y + ry)),
        (Point(x + w, y + h - ry), Point(x + w - rx, y + h)),
        (Point(x + rx, y + h), Point(x, y + h - ry)),
        (Point(x, y + ry), Point(x + rx, y)),
    ]
    prim = Primitive(Point(x + rx, y))
    for edge_end, arc_end in runs:
        if edge_end != prim.end:
            prim.append(edge_end)
        prim.extend(
            flatten_arc(
                edge_end, arc_end, rx, ry, False, True, 0.0, tolerance, max_depth,
            )[1:]
        )
    return prim


def _ellipse(cx: float, cy: float, rx: float, ry: float, tolerance: float) -> Primitive:
    prim = Primitive.from_vertices(sample_ellipse(Point(cx, cy), rx, ry, tolerance))
    prim.close()
    return prim


def circle_to_primitive(
    attrs: Attributes, tolerance: float, max_depth: int = MAX_DEPTH,
) -> Primitive | None:
    """``<circle>``."""
    cx = _length(attrs, "cx", 0.0)
    cy = _length(attrs, "cy", 0.0)
    r = _size(attrs, "r")
    if r == 0:
        return None
    return _ellipse(cx, cy, r, r, tolerance)


def ellipse_to_primitive(
    attrs: Attributes, tolerance: float, max_depth: int = MAX_DEPTH,
) -> Primitive | None:
    """``<ellipse>``."""
    cx = _length(attrs, "cx", 0.0)
    cy = _length(attrs, "cy", 0.0)
    rx = _size(attrs, "rx")
    ry = _size(attrs, "ry")
    if rx == 0 or ry == 0:
        return None
    return _ellipse(cx, cy, rx, ry, tolerance)


def line_to_primitive(
    attrs: Attributes, tolerance: float, max_depth: int = MAX_DEPTH,
) -> Primitive | None:
    """``<line>``; a zero-length line draws nothing."""
    p1 = Point(_length(attrs, "x1", 0.0), _length(attrs, "y1", 0.0))
    p2 = Point(_length(attrs, "x2", 0.0), _length(attrs, "y2", 0.0))
    if p1 == p2:
        return None
    return Primitive(p1, [p2])


def _points_primitive(attrs: Attributes, closed: bool) -> Primitive | None:
    raw = attrs.get("points")
    if raw is None:
        raise ShapeError("missing required attribute 'points'")
    pts = parse_points(raw)
    if len(pts) < 2:
        return None
    prim = Primitive.from_vertices(pts)
    if closed:
        prim.close()
    return prim


def polyline_to_primitive(
    attrs: Attributes, tolerance: float, max_depth: int = MAX_DEPTH,
) -> Primitive | None:
    """``<polyline>``."""
    return _points_primitive(attrs, closed=False)


def polygon_to_primitive(
    attrs: Attributes, tolerance: float, max_depth: int = MAX_DEPTH,
) -> Primitive | None:
    """``<polygon>``: a polyline closed back to its first point."""
    return _points_primitive(attrs, closed=True)


SHAPE_ADAPTERS: dict[str, ShapeAdapter] = {
    "rect": rect_to_primitive,
    "circle": circle_to_primitive,
    "ellipse": ellipse_to_primitive,
    "line": line_to_primitive,
    "polyline": polyline_to_primitive,
    "polygon": polygon_to_primitive,
}


def shape_to_primitive(
    tag: str, attrs: Attributes, tolerance: float, max_depth: int = MAX_DEPTH,
) -> Primitive | None:
    """Dispatch on *tag* to the matching adapter.

    Raises
    ------
    ShapeError
        If *tag* is not a basic shape or its attributes are invalid.
    InvalidParameterError
        If *tolerance* is not positive (curved shapes only).
    """
    adapter = SHAPE_ADAPTERS.get(tag)
    if adapter is None:
        raise ShapeError(f"unsupported shape element <{tag}>")
    return adapter(attrs, tolerance, max_depth)
