"""Tests for viewport clipping."""

from __future__ import annotations

import numpy as np
import pytest

from svg_motion.geometry.primitive import Primitive
from svg_motion.geometry.vector import Point
from svg_motion.planning.clipper import (
    boundary,
    crossings,
    is_inside,
    split,
    split_all,
)


def _prim(coords: list[tuple[float, float]], fill: bool = False) -> Primitive:
    return Primitive.from_vertices([Point(x, y) for x, y in coords], fill=fill)


def _length(prim: Primitive) -> float:
    return sum((b - a).len() for a, b in prim.segments())


SQUARE = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0), (0.0, 0.0)]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    def test_is_inside_inclusive(self) -> None:
        assert is_inside(Point(0.0, 0.0), 10.0, 5.0)
        assert is_inside(Point(10.0, 5.0), 10.0, 5.0)
        assert is_inside(Point(-1e-12, 5.0), 10.0, 5.0)
        assert not is_inside(Point(10.1, 1.0), 10.0, 5.0)

    def test_boundary_clockwise_from_origin(self) -> None:
        edges = boundary(4.0, 3.0)
        assert [e[0] for e in edges] == [
            Point(0.0, 0.0), Point(4.0, 0.0), Point(4.0, 3.0), Point(0.0, 3.0),
        ]
        assert edges[-1][1] == Point(0.0, 0.0)

    def test_crossings_sorted(self) -> None:
        hits = crossings(Point(-5.0, 5.0), Point(15.0, 5.0), 10.0, 10.0)
        assert [t for t, _ in hits] == pytest.approx([0.25, 0.75])
        assert hits[0][1] == Point(0.0, 5.0)
        assert hits[1][1] == Point(10.0, 5.0)

    def test_corner_hit_merged(self) -> None:
        hits = crossings(Point(-5.0, 5.0), Point(5.0, -5.0), 10.0, 10.0)
        assert len(hits) == 1
        assert hits[0][1] == Point(0.0, 0.0)


# ---------------------------------------------------------------------------
# Splitting
# ---------------------------------------------------------------------------


class TestSplit:
    def test_inside_unchanged(self) -> None:
        prim = _prim([(1.0, 1.0), (5.0, 2.0), (3.0, 4.0)])
        [out] = split(prim, 10.0, 10.0)
        assert out.vertices == prim.vertices
        assert out is not prim

    def test_fully_outside(self) -> None:
        assert split(_prim([(20.0, 20.0), (30.0, 30.0)]), 10.0, 10.0) == []

    def test_exit(self) -> None:
        [out] = split(_prim([(5.0, 5.0), (15.0, 5.0)]), 10.0, 10.0)
        assert out.as_tuples() == ((5.0, 5.0), (10.0, 5.0))

    def test_entry(self) -> None:
        [out] = split(_prim([(5.0, -5.0), (5.0, 5.0), (6.0, 5.0)]), 10.0, 10.0)
        assert out.as_tuples() == ((5.0, 0.0), (5.0, 5.0), (6.0, 5.0))

    def test_pass_through_chord(self) -> None:
        [out] = split(_prim([(-5.0, 5.0), (15.0, 5.0)]), 10.0, 10.0)
        assert out.as_tuples() == ((0.0, 5.0), (10.0, 5.0))

    def test_corner_graze_dropped(self) -> None:
        assert split(_prim([(-5.0, 5.0), (5.0, -5.0)]), 10.0, 10.0) == []

    def test_leave_and_return_gives_two_pieces(self) -> None:
        prim = _prim([(2.0, 2.0), (18.0, 2.0), (18.0, 8.0), (2.0, 8.0)])
        pieces = split(prim, 10.0, 10.0)
        assert [p.as_tuples() for p in pieces] == [
            ((2.0, 2.0), (10.0, 2.0)),
            ((10.0, 8.0), (2.0, 8.0)),
        ]

    def test_square_cut_stroke(self) -> None:
        pieces = split(_prim(SQUARE), 5.0, 20.0)
        assert [p.as_tuples() for p in pieces] == [
            ((0.0, 0.0), (5.0, 0.0)),
            ((5.0, 10.0), (0.0, 10.0), (0.0, 0.0)),
        ]
        assert not any(p.fill for p in pieces)

    def test_square_cut_fill_restitched(self) -> None:
        [piece] = split(_prim(SQUARE, fill=True), 5.0, 20.0)
        assert piece.fill
        assert piece.as_tuples() == ((5.0, 10.0), (0.0, 10.0), (0.0, 0.0), (5.0, 0.0))

    def test_fill_starting_outside_not_restitched(self) -> None:
        coords = [(8.0, 5.0), (2.0, 5.0), (2.0, 8.0), (8.0, 8.0), (8.0, 5.0)]
        pieces = split(_prim(coords, fill=True), 5.0, 20.0)
        assert len(pieces) == 1
        assert pieces[0].as_tuples() == ((5.0, 5.0), (2.0, 5.0), (2.0, 8.0), (5.0, 8.0))

    def test_boundary_vertices_kept(self) -> None:
        [out] = split(_prim([(0.0, 0.0), (10.0, 10.0)]), 10.0, 10.0)
        assert out.as_tuples() == ((0.0, 0.0), (10.0, 10.0))

    def test_idempotent(self) -> None:
        prim = _prim([(-3.0, 2.0), (4.0, 12.0), (8.0, -1.0), (12.0, 6.0), (5.0, 5.0)])
        once = split(prim, 10.0, 10.0)
        twice = [q for p in once for q in split(p, 10.0, 10.0)]
        assert [p.as_tuples() for p in twice] == [p.as_tuples() for p in once]

    def test_split_all_preserves_order(self) -> None:
        a = _prim([(1.0, 1.0), (2.0, 2.0)])
        b = _prim([(3.0, 3.0), (4.0, 4.0)])
        out = split_all([a, b], 10.0, 10.0)
        assert [p.start for p in out] == [Point(1.0, 1.0), Point(3.0, 3.0)]


# ---------------------------------------------------------------------------
# Randomized coverage checks
# ---------------------------------------------------------------------------


def _inside_length(coords: np.ndarray, w: float, h: float, samples: int = 20001) -> float:
    total = 0.0
    for a, b in zip(coords[:-1], coords[1:]):
        t = np.linspace(0.0, 1.0, samples)
        pts = a[None, :] + t[:, None] * (b - a)[None, :]
        mask = (
            (pts[:, 0] >= 0) & (pts[:, 0] <= w) & (pts[:, 1] >= 0) & (pts[:, 1] <= h)
        )
        total += np.linalg.norm(b - a) * mask.mean()
    return total


@pytest.mark.parametrize("seed", range(8))
def test_pieces_inside_and_cover_inside_length(seed: int) -> None:
    rng = np.random.default_rng(seed)
    coords = rng.uniform(-10.0, 30.0, size=(12, 2))
    prim = _prim([(float(x), float(y)) for x, y in coords])
    pieces = split(prim, 20.0, 15.0)

    for piece in pieces:
        assert len(piece) >= 2
        for p in piece:
            assert is_inside(p, 20.0, 15.0, 1e-6)

    expected = _inside_length(coords, 20.0, 15.0)
    got = sum(_length(p) for p in pieces)
    assert got == pytest.approx(expected, rel=1e-2, abs=0.1)
