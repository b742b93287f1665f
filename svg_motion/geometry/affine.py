"""2x3 affine transforms.

Matrix layout follows the SVG ``matrix(a, b, c, d, e, f)`` convention::

    | a  c  e |
    | b  d  f |
    | 0  0  1 |

``compose(A, B)`` (also ``A @ B``) is ``A∘B``: B is applied first.  An
SVG transform list ``"T1 T2"`` therefore maps to ``T1 @ T2`` -- the
rightmost function acts on the geometry first.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

from svg_motion.geometry.vector import Point


@dataclass(frozen=True, slots=True)
class AffineTransform:
    """Immutable 2D affine map.  Default-constructed as identity."""

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    # -- Constructors -------------------------------------------------------

    @classmethod
    def identity(cls) -> AffineTransform:
        return cls()

    @classmethod
    def translate(cls, tx: float, ty: float = 0.0) -> AffineTransform:
        return cls(e=tx, f=ty)

    @classmethod
    def scale(cls, sx: float, sy: float | None = None) -> AffineTransform:
        return cls(a=sx, d=sx if sy is None else sy)

    @classmethod
    def rotate(
        cls, angle_deg: float, cx: float = 0.0, cy: float = 0.0,
    ) -> AffineTransform:
        """Rotation by *angle_deg* about ``(cx, cy)``."""
        rad = math.radians(angle_deg)
        cos_a, sin_a = math.cos(rad), math.sin(rad)
        rot = cls(a=cos_a, b=sin_a, c=-sin_a, d=cos_a)
        if cx == 0.0 and cy == 0.0:
            return rot
        return cls.translate(cx, cy) @ rot @ cls.translate(-cx, -cy)

    @classmethod
    def skew_x(cls, angle_deg: float) -> AffineTransform:
        return cls(c=math.tan(math.radians(angle_deg)))

    @classmethod
    def skew_y(cls, angle_deg: float) -> AffineTransform:
        return cls(b=math.tan(math.radians(angle_deg)))

    # -- Algebra ------------------------------------------------------------

    def compose(self, other: AffineTransform) -> AffineTransform:
        """Return ``self∘other`` (apply *other* first, then *self*)."""
        return AffineTransform(
            a=self.a * other.a + self.c * other.b,
            b=self.b * other.a + self.d * other.b,
            c=self.a * other.c + self.c * other.d,
            d=self.b * other.c + self.d * other.d,
            e=self.a * other.e + self.c * other.f + self.e,
            f=self.b * other.e + self.d * other.f + self.f,
        )

    def __matmul__(self, other: AffineTransform) -> AffineTransform:
        return self.compose(other)

    @property
    def is_identity(self) -> bool:
        return self == AffineTransform()

    def max_scale(self) -> float:
        """Largest factor by which the linear part stretches a length.

        This is the top singular value of ``[[a, c], [b, d]]``; a deviation
        of ``t`` before the transform is at most ``t * max_scale()`` after.
        """
        s = self.a * self.a + self.b * self.b + self.c * self.c + self.d * self.d
        det = self.a * self.d - self.b * self.c
        return math.sqrt((s + math.sqrt(max(s * s - 4.0 * det * det, 0.0))) / 2.0)

    def rows(self) -> tuple[tuple[float, float, float], tuple[float, float, float]]:
        """``[[m00, m01, m02], [m10, m11, m12]]`` view of the matrix."""
        return ((self.a, self.c, self.e), (self.b, self.d, self.f))

    # -- Application --------------------------------------------------------

    def apply(self, p: Point) -> Point:
        return Point(
            self.a * p.x + self.c * p.y + self.e,
            self.b * p.x + self.d * p.y + self.f,
        )

    def __call__(self, p: Point) -> Point:
        return self.apply(p)

    def apply_all(self, points: Iterable[Point]) -> list[Point]:
        if self.is_identity:
            return list(points)
        return [self.apply(p) for p in points]


def compose(a: AffineTransform, b: AffineTransform) -> AffineTransform:
    """``a∘b`` -- *b*'s effect occurs first."""
    return a.compose(b)
