"""Tests for basic shape adapters and length parsing."""

from __future__ import annotations

import logging

import pytest

from svg_motion.geometry.vector import Point
from svg_motion.svg.shapes import (
    ShapeError,
    parse_length,
    parse_points,
    shape_to_primitive,
)

TOL = 0.1


def _shape(tag: str, **attrs: str):
    return shape_to_primitive(tag, attrs, TOL)


# ---------------------------------------------------------------------------
# Lengths and point lists
# ---------------------------------------------------------------------------


class TestParseLength:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("10", 10.0),
            (" -2.5 ", -2.5),
            ("3px", 3.0),
            ("1in", 96.0),
            ("2.54cm", 96.0),
            ("25.4mm", 96.0),
            ("12pt", 16.0),
            ("1pc", 16.0),
            ("1e1", 10.0),
        ],
    )
    def test_valid(self, value: str, expected: float) -> None:
        assert parse_length(value) == pytest.approx(expected)

    @pytest.mark.parametrize("value", ["", "abc", "10%", "5em", "1.2.3"])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(ShapeError, match="invalid length"):
            parse_length(value)


class TestParsePoints:
    def test_separators(self) -> None:
        assert parse_points("0,0 10,0\n10 10") == [
            Point(0.0, 0.0), Point(10.0, 0.0), Point(10.0, 10.0),
        ]

    def test_consecutive_duplicates_removed(self) -> None:
        assert parse_points("0 0 0 0 5 5 0 0") == [
            Point(0.0, 0.0), Point(5.0, 5.0), Point(0.0, 0.0),
        ]

    def test_odd_count_drops_last(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="svg_motion.svg.shapes"):
            pts = parse_points("1 2 3 4 5")
        assert pts == [Point(1.0, 2.0), Point(3.0, 4.0)]
        assert "Odd coordinate count" in caplog.text


# ---------------------------------------------------------------------------
# Rectangles
# ---------------------------------------------------------------------------


class TestRect:
    def test_plain(self) -> None:
        prim = _shape("rect", x="1", y="2", width="3", height="4")
        assert prim.as_tuples() == (
            (1.0, 2.0), (4.0, 2.0), (4.0, 6.0), (1.0, 6.0), (1.0, 2.0),
        )
        assert prim.is_closed()
        assert not prim.fill

    def test_position_defaults_to_origin(self) -> None:
        prim = _shape("rect", width="2", height="2")
        assert prim.start == Point(0.0, 0.0)

    @pytest.mark.parametrize("w,h", [("0", "5"), ("5", "0")])
    def test_zero_size_draws_nothing(self, w: str, h: str) -> None:
        assert _shape("rect", width=w, height=h) is None

    def test_negative_size(self) -> None:
        with pytest.raises(ShapeError, match="'width' must be >= 0"):
            _shape("rect", width="-1", height="5")

    def test_missing_size(self) -> None:
        with pytest.raises(ShapeError, match="missing required attribute 'height'"):
            _shape("rect", width="5")

    def test_bad_unit(self) -> None:
        with pytest.raises(ShapeError, match="attribute 'width'"):
            _shape("rect", width="5qq", height="5")

    def test_units_converted(self) -> None:
        prim = _shape("rect", width="1in", height="1in")
        assert prim.points[1] == Point(96.0, 96.0)

    def test_rounded(self) -> None:
        prim = _shape("rect", width="10", height="10", rx="2")
        assert prim.start == Point(2.0, 0.0)
        assert prim.points[0] == Point(8.0, 0.0)
        assert prim.is_closed()
        for p in prim:
            assert -1e-9 <= p.x <= 10.0 + 1e-9
            assert -1e-9 <= p.y <= 10.0 + 1e-9
        # top-right arc stays on its corner circle
        corner = [p for p in prim if p.x > 8.0 and p.y < 2.0]
        assert corner
        for p in corner:
            assert (p - Point(8.0, 2.0)).len() == pytest.approx(2.0)

    def test_rounded_runs_clockwise(self) -> None:
        prim = _shape("rect", width="10", height="10", rx="2")
        pts = prim.vertices
        area2 = sum(a.cross(b) for a, b in zip(pts, pts[1:]))
        # positive signed area in a y-down frame is clockwise on screen
        assert area2 > 0

    def test_single_radius_used_for_both(self) -> None:
        prim = _shape("rect", width="10", height="10", ry="3")
        assert prim.start == Point(3.0, 0.0)

    def test_radii_clamped(self) -> None:
        prim = _shape("rect", width="10", height="4", rx="20")
        # rx clamps to 5, ry to 2: no straight top edge remains
        assert prim.start == Point(5.0, 0.0)
        assert prim.points[0] != Point(5.0, 0.0)
        assert max(p.y for p in prim) == pytest.approx(4.0)

    def test_negative_radius(self) -> None:
        with pytest.raises(ShapeError, match="'rx' must be >= 0"):
            _shape("rect", width="10", height="10", rx="-1")


# ---------------------------------------------------------------------------
# Circles and ellipses
# ---------------------------------------------------------------------------


class TestCircleEllipse:
    def test_circle(self) -> None:
        prim = _shape("circle", cx="5", cy="5", r="5")
        n = len(prim) - 1
        assert n & (n - 1) == 0
        assert prim.is_closed()
        assert prim.start == Point(10.0, 5.0)
        for p in prim:
            assert (p - Point(5.0, 5.0)).len() == pytest.approx(5.0)

    def test_circle_zero_radius(self) -> None:
        assert _shape("circle", r="0") is None

    def test_circle_negative_radius(self) -> None:
        with pytest.raises(ShapeError, match="'r' must be >= 0"):
            _shape("circle", r="-3")

    def test_circle_missing_radius(self) -> None:
        with pytest.raises(ShapeError, match="missing required attribute 'r'"):
            _shape("circle", cx="1")

    def test_ellipse(self) -> None:
        prim = _shape("ellipse", rx="8", ry="2")
        assert prim.is_closed()
        for p in prim:
            assert (p.x / 8.0) ** 2 + (p.y / 2.0) ** 2 == pytest.approx(1.0)

    def test_ellipse_requires_both_radii(self) -> None:
        with pytest.raises(ShapeError, match="'ry'"):
            _shape("ellipse", rx="4")

    def test_ellipse_zero_radius(self) -> None:
        assert _shape("ellipse", rx="4", ry="0") is None


# ---------------------------------------------------------------------------
# Lines and point lists
# ---------------------------------------------------------------------------


class TestLinePoly:
    def test_line(self) -> None:
        prim = _shape("line", x1="1", y1="2", x2="4", y2="6")
        assert prim.as_tuples() == ((1.0, 2.0), (4.0, 6.0))

    def test_line_defaults(self) -> None:
        prim = _shape("line", x2="3")
        assert prim.as_tuples() == ((0.0, 0.0), (3.0, 0.0))

    def test_zero_length_line(self) -> None:
        assert _shape("line", x1="2", x2="2") is None

    def test_polyline_open(self) -> None:
        prim = _shape("polyline", points="0,0 10,0 10,10")
        assert len(prim) == 3
        assert not prim.is_closed()

    def test_polygon_closed(self) -> None:
        prim = _shape("polygon", points="0,0 10,0 10,10")
        assert prim.as_tuples()[-1] == (0.0, 0.0)
        assert len(prim) == 4

    def test_polygon_already_closed(self) -> None:
        prim = _shape("polygon", points="0,0 10,0 10,10 0,0")
        assert len(prim) == 4

    def test_too_few_points(self) -> None:
        assert _shape("polygon", points="5 5") is None
        assert _shape("polyline", points="") is None

    def test_missing_points(self) -> None:
        with pytest.raises(ShapeError, match="'points'"):
            _shape("polyline")


def test_unsupported_tag() -> None:
    with pytest.raises(ShapeError, match="unsupported shape element"):
        _shape("path", d="M0 0")
