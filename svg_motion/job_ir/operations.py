"""Job IR operations -- the vocabulary between geometry and program text.

Every job action is an immutable, slotted dataclass.  Operations use
**semantic** names (``ToolDown``, not ``G1 Z0``) and **viewport**
coordinates (the clipped drawing space, origin at the viewport corner);
mapping onto the robot's board happens only in the code generator.

Grouping
--------
A *Stroke* is the atomic drawing unit: rapid to start, tool down, draw,
tool up.  Outline primitives become one stroke each (``DrawPolyline``);
fill coverage passes become one stroke per pass (``LinearMove``).
"""

from __future__ import annotations

from abc import ABC
from collections.abc import Iterable
from dataclasses import dataclass

from svg_motion.geometry.primitive import Primitive
from svg_motion.planning.fill import CoverageSegment

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

Stroke = list["Operation"]
"""One atomic drawing unit."""

Job = list[Stroke]
"""A complete job is a sequence of strokes."""

# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Operation(ABC):
    """Base class for all job operations."""

    pass


# ---------------------------------------------------------------------------
# Motion operations  (viewport coordinates)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RapidXY(Operation):
    """Travel move at departure height -- tool **must** be up.

    Parameters
    ----------
    x, y : float
        Target position in viewport units.
    """

    x: float
    y: float


@dataclass(frozen=True, slots=True)
class LinearMove(Operation):
    """Single line segment at draw speed.

    Parameters
    ----------
    x, y : float
        End-point in viewport units.
    feed : float | None
        Override feed rate (mm/s).  ``None`` uses the configured default.
    """

    x: float
    y: float
    feed: float | None = None


@dataclass(frozen=True, slots=True)
class DrawPolyline(Operation):
    """Connected line segments (tool down).

    Parameters
    ----------
    points : tuple[tuple[float, float], ...]
        Ordered vertices in viewport units.  Must contain >= 2 points.
    feed : float | None
        Override feed rate (mm/s).  ``None`` uses the configured default.
    """

    points: tuple[tuple[float, float], ...]
    feed: float | None = None

    def __post_init__(self) -> None:
        if len(self.points) < 2:
            raise ValueError(
                f"DrawPolyline requires >= 2 points, got {len(self.points)}"
            )


# ---------------------------------------------------------------------------
# Tool operations
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ToolUp(Operation):
    """Lift the tool off the board by the departure distance."""

    pass


@dataclass(frozen=True, slots=True)
class ToolDown(Operation):
    """Bring the tool onto the board surface."""

    pass


# ---------------------------------------------------------------------------
# Stroke helpers
# ---------------------------------------------------------------------------


def create_stroke(
    points: list[tuple[float, float]] | tuple[tuple[float, float], ...],
    feed: float | None = None,
) -> Stroke:
    """Build a standard stroke: rapid -> tool-down -> polyline -> tool-up.

    Parameters
    ----------
    points : sequence of (x, y)
        Ordered polyline vertices (viewport units).  Must have >= 2 points.
    feed : float | None
        Override drawing feed rate (mm/s).

    Returns
    -------
    Stroke
        ``[RapidXY, ToolDown, DrawPolyline, ToolUp]``
    """
    if len(points) < 2:
        raise ValueError("Stroke requires at least 2 points")

    return [
        RapidXY(x=points[0][0], y=points[0][1]),
        ToolDown(),
        DrawPolyline(points=tuple(points), feed=feed),
        ToolUp(),
    ]


def operations_to_strokes(ops: list[Operation]) -> Job:
    """Split a flat operation list into strokes at ``ToolUp`` boundaries.

    Each stroke runs up to and including a ``ToolUp``; trailing ops with
    no closing ``ToolUp`` form a final partial stroke.
    """
    strokes: Job = []
    current: Stroke = []

    for op in ops:
        current.append(op)
        if isinstance(op, ToolUp):
            strokes.append(current)
            current = []

    if current:
        strokes.append(current)

    return strokes


def primitives_to_operations(
    primitives: Iterable[Primitive], feed: float | None = None,
) -> list[Operation]:
    """One outline stroke per primitive; single-vertex primitives are skipped."""
    ops: list[Operation] = []
    for prim in primitives:
        points = prim.as_tuples()
        if len(points) < 2:
            continue
        ops.extend(create_stroke(points, feed))
    return ops


def coverage_to_operations(
    segments: Iterable[CoverageSegment], feed: float | None = None,
) -> list[Operation]:
    """One stroke per fill pass: rapid, down, straight move, up.

    Zero-length passes (a scan line grazing a vertex) are skipped.
    """
    ops: list[Operation] = []
    for seg in segments:
        if seg.entry == seg.exit:
            continue
        ops.extend([
            RapidXY(x=seg.entry.x, y=seg.entry.y),
            ToolDown(),
            LinearMove(x=seg.exit.x, y=seg.exit.y, feed=feed),
            ToolUp(),
        ])
    return ops
