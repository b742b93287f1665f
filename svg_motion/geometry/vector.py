"""2D/3D vector kernel.

Immutable, slotted value types used by every geometry stage.  ``Point``
is an alias of ``Vector2``: positions and displacements share one type so
that curve evaluation can interpolate points directly.

All comparisons that need a tolerance take it explicitly; ``EPSILON`` is
the single tolerance used by the clipper and the fill planner.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

EPSILON = 1e-9
"""Geometric tolerance shared by all boundary and coincidence checks."""


# ---------------------------------------------------------------------------
# 2D
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Vector2:
    """Plane vector / point."""

    x: float
    y: float

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, k: float) -> Vector2:
        return Vector2(self.x * k, self.y * k)

    __rmul__ = __mul__

    def __truediv__(self, k: float) -> Vector2:
        return Vector2(self.x / k, self.y / k)

    def __neg__(self) -> Vector2:
        return Vector2(-self.x, -self.y)

    def dot(self, other: Vector2) -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: Vector2) -> float:
        """Z component of the 3D cross product (signed parallelogram area)."""
        return self.x * other.y - self.y * other.x

    def len2(self) -> float:
        return self.x * self.x + self.y * self.y

    def len(self) -> float:
        return math.hypot(self.x, self.y)

    def norm(self) -> Vector2:
        """Unit vector in the same direction; the zero vector stays zero."""
        length = self.len()
        if length == 0.0:
            return self
        return Vector2(self.x / length, self.y / length)

    def perp(self) -> Vector2:
        """Counter-clockwise perpendicular."""
        return Vector2(-self.y, self.x)

    def lerp(self, other: Vector2, t: float) -> Vector2:
        return Vector2(
            self.x * (1.0 - t) + other.x * t,
            self.y * (1.0 - t) + other.y * t,
        )

    def close_to(self, other: Vector2, eps: float = EPSILON) -> bool:
        return abs(self.x - other.x) <= eps and abs(self.y - other.y) <= eps

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


Point = Vector2
"""Plane coordinate."""

ORIGIN = Vector2(0.0, 0.0)


# ---------------------------------------------------------------------------
# 3D
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Vector3:
    """Space vector, used by the board coordinate frame."""

    x: float
    y: float
    z: float

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, k: float) -> Vector3:
        return Vector3(self.x * k, self.y * k, self.z * k)

    __rmul__ = __mul__

    def __truediv__(self, k: float) -> Vector3:
        return Vector3(self.x / k, self.y / k, self.z / k)

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def dot(self, other: Vector3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def len2(self) -> float:
        return self.dot(self)

    def len(self) -> float:
        return math.sqrt(self.len2())

    def norm(self) -> Vector3:
        length = self.len()
        if length == 0.0:
            return self
        return self / length

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


# ---------------------------------------------------------------------------
# 2x2 matrix helpers
# ---------------------------------------------------------------------------


def det(a: Vector2, b: Vector2) -> float:
    """Determinant of the 2x2 matrix with columns *a* and *b*."""
    return a.x * b.y - b.x * a.y


def symmetric_eigenvalues(a: float, b: float, c: float) -> tuple[float, float]:
    """Eigenvalues of ``[[a, b], [b, c]]`` in ascending order."""
    mid = (a + c) / 2.0
    delta = math.sqrt((a - c) * (a - c) + 4.0 * b * b) / 2.0
    return mid - delta, mid + delta


def symmetric_eigenvector(a: float, b: float, lam: float) -> Vector2:
    """Unit eigenvector of ``[[a, b], [b, c]]`` for eigenvalue *lam*.

    Solved from the first row ``(a - lam) x + b y = 0``, choosing the
    better-conditioned parametrisation.  Returns the zero vector when the
    row vanishes (``b == 0`` and ``lam == a``).
    """
    a_lam = lam - a
    if a_lam == 0.0 and b == 0.0:
        return ORIGIN
    if abs(b) < abs(a_lam):
        return Vector2(b / a_lam, 1.0).norm()
    return Vector2(1.0, a_lam / b).norm()
