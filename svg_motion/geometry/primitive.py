"""Primitive -- one continuous pen path.

A primitive is an owned, ordered sequence of value-type vertices.  The
start vertex is kept separately from the following ones, mirroring the
moveto/lineto structure of the source format: ``vertices`` is
``[start, *points]``.

Fill-eligible primitives describe closed regions; :meth:`Primitive.close`
appends the start vertex when the path does not already end on it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field

from svg_motion.geometry.affine import AffineTransform
from svg_motion.geometry.vector import EPSILON, Point


@dataclass
class Primitive:
    """Ordered point sequence with a fill flag.

    Parameters
    ----------
    start : Point
        First vertex.
    points : list[Point]
        Vertices after *start*, in traversal order.
    fill : bool
        Whether the primitive is a closed region to be fill-planned.
    """

    start: Point
    points: list[Point] = field(default_factory=list)
    fill: bool = False

    @classmethod
    def from_vertices(
        cls, vertices: Sequence[Point], fill: bool = False,
    ) -> Primitive:
        if not vertices:
            raise ValueError("Primitive requires at least one vertex")
        return cls(start=vertices[0], points=list(vertices[1:]), fill=fill)

    # -- Views ----------------------------------------------------------------

    @property
    def vertices(self) -> list[Point]:
        return [self.start, *self.points]

    @property
    def end(self) -> Point:
        return self.points[-1] if self.points else self.start

    def __len__(self) -> int:
        return len(self.points) + 1

    def __iter__(self) -> Iterator[Point]:
        yield self.start
        yield from self.points

    def is_empty(self) -> bool:
        return not self.points

    def is_closed(self, eps: float = EPSILON) -> bool:
        return bool(self.points) and self.end.close_to(self.start, eps)

    def segments(self) -> Iterator[tuple[Point, Point]]:
        prev = self.start
        for p in self.points:
            yield prev, p
            prev = p

    # -- Mutation -------------------------------------------------------------

    def append(self, p: Point) -> None:
        self.points.append(p)

    def extend(self, pts: Iterable[Point]) -> None:
        self.points.extend(pts)

    def close(self, eps: float = EPSILON) -> None:
        """Append the start vertex unless the path already ends there."""
        if self.points and not self.end.close_to(self.start, eps):
            self.points.append(self.start)

    def transform(self, t: AffineTransform) -> None:
        """Apply *t* to every vertex in place."""
        if t.is_identity:
            return
        self.start = t.apply(self.start)
        self.points = [t.apply(p) for p in self.points]

    def finalize(self, t: AffineTransform, fill: bool) -> None:
        """Set the fill flag, close fill regions, then apply *t*."""
        self.fill = fill
        if fill:
            self.close()
        self.transform(t)

    def transformed(self, t: AffineTransform) -> Primitive:
        out = Primitive(self.start, list(self.points), self.fill)
        out.transform(t)
        return out

    def as_tuples(self) -> tuple[tuple[float, float], ...]:
        """Vertices as plain tuples, the form the Job IR expects."""
        return tuple(p.as_tuple() for p in self)
