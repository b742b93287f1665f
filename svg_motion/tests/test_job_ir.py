"""Tests for Job IR operations module.

Validates dataclass creation, immutability, validation, and the helpers
that turn primitives and fill passes into strokes.
"""

from __future__ import annotations

import pytest

from svg_motion.geometry.primitive import Primitive
from svg_motion.geometry.vector import Point
from svg_motion.job_ir.operations import (
    DrawPolyline,
    LinearMove,
    Operation,
    RapidXY,
    ToolDown,
    ToolUp,
    coverage_to_operations,
    create_stroke,
    operations_to_strokes,
    primitives_to_operations,
)
from svg_motion.planning.fill import CoverageSegment


# ---------------------------------------------------------------------------
# Dataclass creation and immutability
# ---------------------------------------------------------------------------


class TestOperationDataclasses:
    def test_tool_up_down(self) -> None:
        assert isinstance(ToolUp(), Operation)
        assert isinstance(ToolDown(), Operation)

    def test_rapid_xy(self) -> None:
        op = RapidXY(x=10.5, y=20.3)
        assert op.x == 10.5
        assert op.y == 20.3

    def test_linear_move_default_feed(self) -> None:
        assert LinearMove(x=5.0, y=6.0).feed is None
        assert LinearMove(x=5.0, y=6.0, feed=30.0).feed == 30.0

    def test_draw_polyline(self) -> None:
        op = DrawPolyline(points=((0.0, 0.0), (10.0, 0.0), (10.0, 10.0)))
        assert len(op.points) == 3

    def test_draw_polyline_too_few_points(self) -> None:
        with pytest.raises(ValueError, match=">=\\s*2 points"):
            DrawPolyline(points=((0.0, 0.0),))

    def test_frozen(self) -> None:
        op = RapidXY(x=1.0, y=2.0)
        with pytest.raises(AttributeError):
            op.x = 99.0  # type: ignore[misc]

    def test_equality(self) -> None:
        assert LinearMove(x=1.0, y=2.0) == LinearMove(x=1.0, y=2.0)
        assert ToolUp() == ToolUp()


# ---------------------------------------------------------------------------
# Stroke helpers
# ---------------------------------------------------------------------------


class TestCreateStroke:
    def test_basic_stroke(self) -> None:
        stroke = create_stroke([(0, 0), (10, 0), (10, 10)])
        assert [type(op) for op in stroke] == [RapidXY, ToolDown, DrawPolyline, ToolUp]
        assert stroke[0] == RapidXY(x=0, y=0)

    def test_stroke_with_feed(self) -> None:
        stroke = create_stroke([(0, 0), (10, 0)], feed=42.0)
        poly = [op for op in stroke if isinstance(op, DrawPolyline)][0]
        assert poly.feed == 42.0

    def test_stroke_too_few_points(self) -> None:
        with pytest.raises(ValueError, match="at least 2"):
            create_stroke([(0, 0)])


class TestOperationsToStrokes:
    def test_split_on_tool_up(self) -> None:
        ops = create_stroke([(0, 0), (10, 0)]) + create_stroke([(20, 0), (30, 0)])
        strokes = operations_to_strokes(ops)
        assert len(strokes) == 2
        assert all(isinstance(s[-1], ToolUp) for s in strokes)

    def test_empty_list(self) -> None:
        assert operations_to_strokes([]) == []

    def test_trailing_ops_without_tool_up(self) -> None:
        ops = [RapidXY(x=0, y=0), ToolDown(), DrawPolyline(points=((0, 0), (10, 0)))]
        assert len(operations_to_strokes(ops)) == 1


# ---------------------------------------------------------------------------
# Geometry -> operations
# ---------------------------------------------------------------------------


class TestPrimitivesToOperations:
    def test_one_stroke_per_primitive(self) -> None:
        prims = [
            Primitive(Point(0.0, 0.0), [Point(1.0, 0.0), Point(1.0, 1.0)]),
            Primitive(Point(5.0, 5.0), [Point(6.0, 5.0)]),
        ]
        ops = primitives_to_operations(prims, feed=10.0)
        assert len(ops) == 8
        poly = ops[2]
        assert isinstance(poly, DrawPolyline)
        assert poly.points == ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0))
        assert poly.feed == 10.0
        assert ops[4] == RapidXY(x=5.0, y=5.0)

    def test_single_vertex_skipped(self) -> None:
        assert primitives_to_operations([Primitive(Point(1.0, 1.0))]) == []


class TestCoverageToOperations:
    def test_pass_becomes_linear_stroke(self) -> None:
        segs = [CoverageSegment(Point(0.0, 0.5), Point(10.0, 0.5))]
        ops = coverage_to_operations(segs, feed=20.0)
        assert ops == [
            RapidXY(x=0.0, y=0.5),
            ToolDown(),
            LinearMove(x=10.0, y=0.5, feed=20.0),
            ToolUp(),
        ]

    def test_zero_length_pass_skipped(self) -> None:
        segs = [
            CoverageSegment(Point(3.0, 3.0), Point(3.0, 3.0)),
            CoverageSegment(Point(0.0, 1.0), Point(2.0, 1.0)),
        ]
        ops = coverage_to_operations(segs)
        assert len(ops) == 4
        assert ops[0] == RapidXY(x=0.0, y=1.0)

    def test_strokes_round_trip(self) -> None:
        segs = [
            CoverageSegment(Point(0.0, 0.5), Point(10.0, 0.5)),
            CoverageSegment(Point(10.0, 1.5), Point(0.0, 1.5)),
        ]
        strokes = operations_to_strokes(coverage_to_operations(segs))
        assert len(strokes) == 2
        assert strokes[1][2] == LinearMove(x=0.0, y=1.5)
