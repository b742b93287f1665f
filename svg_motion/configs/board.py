"""Drawing-board coordinate frame.

The viewport rectangle ``[0, width] x [0, height]`` is mapped linearly onto
a planar board in robot space given by three corner points:

    origin    <- viewport (0, 0)
    corner_x  <- viewport (width, 0)
    corner_y  <- viewport (0, height)

The board edges need not be axis-aligned or orthogonal to the robot's
axes, so the mapping covers tilted and rotated boards.  The board normal
``axis_i x axis_j`` is the tool departure direction; order the corners
so that it points from the board toward the tool.
"""

from __future__ import annotations

from dataclasses import dataclass

from svg_motion.geometry.vector import Point, Vector3


@dataclass(frozen=True, slots=True)
class BoardFrame:
    """Viewport-to-robot mapping.

    Parameters
    ----------
    width, height : float
        Viewport size in viewport units.
    origin : Vector3
        Robot-space position of viewport ``(0, 0)`` (mm).
    axis_i, axis_j : Vector3
        Board edge vectors spanned by the viewport's x and y extents (mm).
    """

    width: float
    height: float
    origin: Vector3
    axis_i: Vector3
    axis_j: Vector3

    @classmethod
    def from_corners(
        cls,
        width: float,
        height: float,
        origin: Vector3,
        corner_x: Vector3,
        corner_y: Vector3,
    ) -> BoardFrame:
        if width <= 0 or height <= 0:
            raise ValueError(f"viewport must be positive, got {width} x {height}")
        return cls(width, height, origin, corner_x - origin, corner_y - origin)

    @property
    def normal(self) -> Vector3:
        """Unit board normal ``axis_i x axis_j``."""
        return self.axis_i.cross(self.axis_j).norm()

    @property
    def x_scale(self) -> float:
        """Board mm per viewport unit along x."""
        return self.axis_i.len() / self.width

    @property
    def y_scale(self) -> float:
        """Board mm per viewport unit along y."""
        return self.axis_j.len() / self.height

    def robot_to_svg_accuracy(self, accuracy: float) -> float:
        """Express a robot-space length in viewport units.

        Uses the finer of the two axis scales so the bound holds in both
        directions.
        """
        return accuracy * min(
            self.width / self.axis_i.len(), self.height / self.axis_j.len(),
        )

    def svg_to_robot_delta(self, p: Point) -> Vector3:
        """Offset of viewport point *p* from the board origin (mm)."""
        return self.axis_i * (p.x / self.width) + self.axis_j * (p.y / self.height)

    def svg_to_robot(self, p: Point) -> Vector3:
        """Robot-space position of viewport point *p* (mm)."""
        return self.origin + self.svg_to_robot_delta(p)

    def depart(self, p: Point, distance: float) -> Vector3:
        """Position *distance* mm above viewport point *p* along the normal."""
        return self.svg_to_robot(p) + self.normal * distance
