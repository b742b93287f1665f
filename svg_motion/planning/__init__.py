"""Planning stages after translation: viewport clipping and fill passes."""

from svg_motion.planning.clipper import is_inside, split, split_all
from svg_motion.planning.fill import (
    Basis,
    CoverageSegment,
    plan_fill,
    principal_basis,
)

__all__ = [
    "Basis",
    "CoverageSegment",
    "is_inside",
    "plan_fill",
    "principal_basis",
    "split",
    "split_all",
]
