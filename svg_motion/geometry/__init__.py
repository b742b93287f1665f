"""Geometry kernel: vectors, affine transforms, curve flattening, primitives."""

from svg_motion.geometry.affine import AffineTransform, compose
from svg_motion.geometry.curves import (
    InvalidParameterError,
    flatten_arc,
    flatten_bezier,
    flatten_cubic,
    flatten_quadratic,
    is_degenerate,
    sample_bezier,
    sample_circle,
    sample_ellipse,
)
from svg_motion.geometry.intersect import line_intersection, segment_intersection
from svg_motion.geometry.primitive import Primitive
from svg_motion.geometry.vector import EPSILON, Point, Vector2, Vector3

__all__ = [
    "AffineTransform",
    "EPSILON",
    "InvalidParameterError",
    "Point",
    "Primitive",
    "Vector2",
    "Vector3",
    "compose",
    "flatten_arc",
    "flatten_bezier",
    "flatten_cubic",
    "flatten_quadratic",
    "is_degenerate",
    "line_intersection",
    "sample_bezier",
    "sample_circle",
    "sample_ellipse",
    "segment_intersection",
]
