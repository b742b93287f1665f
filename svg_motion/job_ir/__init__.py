"""
Job Intermediate Representation module.

Defines the drawing operations as immutable dataclasses. This vocabulary
is the contract between clipped geometry and program generation.

All coordinates are in viewport units.
"""

from svg_motion.job_ir.operations import (
    Operation,
    RapidXY,
    LinearMove,
    DrawPolyline,
    ToolUp,
    ToolDown,
    Stroke,
    Job,
    create_stroke,
    coverage_to_operations,
    operations_to_strokes,
    primitives_to_operations,
)

__all__ = [
    "Operation",
    "RapidXY",
    "LinearMove",
    "DrawPolyline",
    "ToolUp",
    "ToolDown",
    "Stroke",
    "Job",
    "create_stroke",
    "coverage_to_operations",
    "operations_to_strokes",
    "primitives_to_operations",
]
