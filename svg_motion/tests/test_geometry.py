"""Tests for the vector kernel, affine transforms and intersections."""

from __future__ import annotations

import math

import pytest

from svg_motion.geometry.affine import AffineTransform, compose
from svg_motion.geometry.intersect import line_intersection, segment_intersection
from svg_motion.geometry.primitive import Primitive
from svg_motion.geometry.vector import (
    Point,
    Vector2,
    Vector3,
    det,
    symmetric_eigenvalues,
    symmetric_eigenvector,
)


# ---------------------------------------------------------------------------
# Vectors
# ---------------------------------------------------------------------------


class TestVector2:
    def test_arithmetic(self) -> None:
        a, b = Vector2(1.0, 2.0), Vector2(3.0, -1.0)
        assert a + b == Vector2(4.0, 1.0)
        assert a - b == Vector2(-2.0, 3.0)
        assert a * 2.0 == Vector2(2.0, 4.0)
        assert 2.0 * a == Vector2(2.0, 4.0)
        assert -a == Vector2(-1.0, -2.0)

    def test_dot_cross(self) -> None:
        a, b = Vector2(1.0, 0.0), Vector2(0.0, 1.0)
        assert a.dot(b) == 0.0
        assert a.cross(b) == 1.0
        assert b.cross(a) == -1.0

    def test_len_and_norm(self) -> None:
        v = Vector2(3.0, 4.0)
        assert v.len2() == 25.0
        assert v.len() == 5.0
        assert v.norm().len() == pytest.approx(1.0)

    def test_norm_of_zero_is_zero(self) -> None:
        assert Vector2(0.0, 0.0).norm() == Vector2(0.0, 0.0)

    def test_close_to(self) -> None:
        assert Vector2(1.0, 1.0).close_to(Vector2(1.0 + 1e-12, 1.0))
        assert not Vector2(1.0, 1.0).close_to(Vector2(1.1, 1.0))

    def test_immutable(self) -> None:
        v = Vector2(1.0, 2.0)
        with pytest.raises(AttributeError):
            v.x = 5.0  # type: ignore[misc]


class TestVector3:
    def test_cross_is_right_handed(self) -> None:
        x, y = Vector3(1.0, 0.0, 0.0), Vector3(0.0, 1.0, 0.0)
        assert x.cross(y) == Vector3(0.0, 0.0, 1.0)

    def test_len_norm(self) -> None:
        v = Vector3(2.0, 3.0, 6.0)
        assert v.len() == pytest.approx(7.0)
        assert v.norm().len() == pytest.approx(1.0)


class TestMatrixHelpers:
    def test_det(self) -> None:
        assert det(Vector2(2.0, 0.0), Vector2(0.0, 3.0)) == 6.0

    def test_symmetric_eigen(self) -> None:
        # [[2, 1], [1, 2]] -> eigenvalues 1, 3 with (1, -1), (1, 1)
        lo, hi = symmetric_eigenvalues(2.0, 1.0, 2.0)
        assert (lo, hi) == pytest.approx((1.0, 3.0))
        v = symmetric_eigenvector(2.0, 1.0, hi)
        assert abs(v.dot(Vector2(1.0, 1.0).norm())) == pytest.approx(1.0)

    def test_eigenvector_degenerate(self) -> None:
        assert symmetric_eigenvector(2.0, 0.0, 2.0) == Vector2(0.0, 0.0)


# ---------------------------------------------------------------------------
# Affine transforms
# ---------------------------------------------------------------------------


class TestAffineTransform:
    def test_identity_default(self) -> None:
        t = AffineTransform()
        assert t.is_identity
        assert t.apply(Point(3.0, 4.0)) == Point(3.0, 4.0)

    def test_translate_scale(self) -> None:
        assert AffineTransform.translate(5.0).apply(Point(1.0, 1.0)) == Point(6.0, 1.0)
        assert AffineTransform.scale(2.0).apply(Point(1.0, 3.0)) == Point(2.0, 6.0)
        assert AffineTransform.scale(2.0, 0.5).apply(Point(1.0, 4.0)) == Point(2.0, 2.0)

    def test_rotate_90(self) -> None:
        p = AffineTransform.rotate(90.0).apply(Point(1.0, 0.0))
        assert p.x == pytest.approx(0.0, abs=1e-12)
        assert p.y == pytest.approx(1.0)

    def test_rotate_about_center_fixes_center(self) -> None:
        t = AffineTransform.rotate(37.0, 4.0, -2.0)
        c = t.apply(Point(4.0, -2.0))
        assert c.x == pytest.approx(4.0)
        assert c.y == pytest.approx(-2.0)

    def test_skew(self) -> None:
        p = AffineTransform.skew_x(45.0).apply(Point(0.0, 1.0))
        assert p.x == pytest.approx(1.0)
        p = AffineTransform.skew_y(45.0).apply(Point(1.0, 0.0))
        assert p.y == pytest.approx(1.0)

    def test_compose_applies_right_first(self) -> None:
        t = AffineTransform.translate(10.0)
        s = AffineTransform.scale(2.0)
        # t∘s: scale, then translate
        assert (t @ s).apply(Point(1.0, 0.0)) == Point(12.0, 0.0)
        # s∘t: translate, then scale
        assert compose(s, t).apply(Point(1.0, 0.0)) == Point(22.0, 0.0)

    def test_not_commutative(self) -> None:
        t = AffineTransform.translate(10.0)
        r = AffineTransform.rotate(90.0)
        assert (t @ r).apply(Point(1.0, 0.0)) != (r @ t).apply(Point(1.0, 0.0))

    def test_associative(self) -> None:
        a = AffineTransform(1.2, 0.3, -0.4, 0.9, 5.0, -2.0)
        b = AffineTransform.rotate(33.0, 1.0, 2.0)
        c = AffineTransform.skew_x(12.0) @ AffineTransform.scale(0.5, 3.0)
        left = (a @ b) @ c
        right = a @ (b @ c)
        for got, want in zip(
            (left.a, left.b, left.c, left.d, left.e, left.f),
            (right.a, right.b, right.c, right.d, right.e, right.f),
        ):
            assert got == pytest.approx(want, abs=1e-12)

    def test_apply_all(self) -> None:
        pts = AffineTransform.translate(1.0, 1.0).apply_all(
            [Point(0.0, 0.0), Point(1.0, 2.0)]
        )
        assert pts == [Point(1.0, 1.0), Point(2.0, 3.0)]

    def test_rows_match_svg_matrix_order(self) -> None:
        t = AffineTransform(1.0, 2.0, 3.0, 4.0, 5.0, 6.0)
        assert t.rows() == ((1.0, 3.0, 5.0), (2.0, 4.0, 6.0))

    @pytest.mark.parametrize(
        "t,expected",
        [
            (AffineTransform(), 1.0),
            (AffineTransform.translate(5.0, -5.0), 1.0),
            (AffineTransform.scale(3.0, 0.5), 3.0),
            (AffineTransform.rotate(30.0) @ AffineTransform.scale(2.0), 2.0),
            (AffineTransform.skew_x(45.0), (1.0 + math.sqrt(5.0)) / 2.0),
            (AffineTransform(0.0, 0.0, 0.0, 0.0, 1.0, 1.0), 0.0),
        ],
    )
    def test_max_scale(self, t: AffineTransform, expected: float) -> None:
        assert t.max_scale() == pytest.approx(expected, abs=1e-12)

    def test_max_scale_bounds_stretch(self) -> None:
        t = AffineTransform.rotate(20.0) @ AffineTransform(2.0, 0.5, -1.0, 1.5)
        for deg in range(0, 360, 5):
            u = Point(math.cos(math.radians(deg)), math.sin(math.radians(deg)))
            stretched = t.apply(u) - t.apply(Point(0.0, 0.0))
            assert stretched.len() <= t.max_scale() + 1e-12


# ---------------------------------------------------------------------------
# Intersections
# ---------------------------------------------------------------------------


class TestIntersection:
    def test_crossing_lines(self) -> None:
        hit = line_intersection(
            Point(0.0, 0.0), Point(2.0, 2.0), Point(0.0, 2.0), Point(2.0, 0.0),
        )
        assert hit is not None
        assert hit.point == Point(1.0, 1.0)
        assert hit.t == pytest.approx(0.5)
        assert hit.u == pytest.approx(0.5)

    def test_parallel_lines(self) -> None:
        assert line_intersection(
            Point(0.0, 0.0), Point(1.0, 0.0), Point(0.0, 1.0), Point(1.0, 1.0),
        ) is None

    def test_segments_missing(self) -> None:
        assert segment_intersection(
            Point(0.0, 0.0), Point(1.0, 0.0), Point(2.0, -1.0), Point(2.0, 1.0),
        ) is None

    def test_segment_touching_endpoint(self) -> None:
        hit = segment_intersection(
            Point(0.0, 0.0), Point(1.0, 0.0), Point(1.0, -1.0), Point(1.0, 1.0),
        )
        assert hit is not None
        assert hit.t == 1.0
        assert hit.point == Point(1.0, 0.0)


# ---------------------------------------------------------------------------
# Primitive
# ---------------------------------------------------------------------------


class TestPrimitive:
    def test_vertices_and_len(self) -> None:
        prim = Primitive(Point(0.0, 0.0), [Point(1.0, 0.0), Point(1.0, 1.0)])
        assert prim.vertices == [Point(0.0, 0.0), Point(1.0, 0.0), Point(1.0, 1.0)]
        assert len(prim) == 3
        assert prim.end == Point(1.0, 1.0)
        assert list(prim.segments())[0] == (Point(0.0, 0.0), Point(1.0, 0.0))

    def test_empty(self) -> None:
        assert Primitive(Point(1.0, 1.0)).is_empty()

    def test_close_appends_start_once(self) -> None:
        prim = Primitive(Point(0.0, 0.0), [Point(1.0, 0.0), Point(1.0, 1.0)])
        prim.close()
        prim.close()
        assert prim.points[-1] == Point(0.0, 0.0)
        assert len(prim) == 4
        assert prim.is_closed()

    def test_finalize_fill_closes_then_transforms(self) -> None:
        prim = Primitive(Point(0.0, 0.0), [Point(1.0, 0.0), Point(1.0, 1.0)])
        prim.finalize(AffineTransform.translate(10.0, 0.0), fill=True)
        assert prim.fill
        assert prim.start == Point(10.0, 0.0)
        assert prim.end == Point(10.0, 0.0)

    def test_transformed_leaves_source(self) -> None:
        prim = Primitive(Point(0.0, 0.0), [Point(1.0, 0.0)])
        moved = prim.transformed(AffineTransform.scale(2.0))
        assert prim.end == Point(1.0, 0.0)
        assert moved.end == Point(2.0, 0.0)

    def test_as_tuples(self) -> None:
        prim = Primitive(Point(0.0, 0.5), [Point(1.0, 2.0)])
        assert prim.as_tuples() == ((0.0, 0.5), (1.0, 2.0))

    def test_rotation_keeps_lengths(self) -> None:
        prim = Primitive(Point(0.0, 0.0), [Point(3.0, 4.0)])
        prim.transform(AffineTransform.rotate(71.0))
        assert (prim.end - prim.start).len() == pytest.approx(5.0)
        assert math.isfinite(prim.end.x)
