"""
SVG Motion Package.

Converts SVG drawings into straight-line motion primitives and G-code for a
robot drawing on a planar board. Curves, arcs and ellipses are flattened to
the robot's accuracy, clipped to the working area, and closed filled shapes
are covered with boustrophedon scan passes.

Subpackages:
    geometry: Vectors, affine transforms, curve flattening, primitives
    svg: Transform parsing, path interpreter, shape adapters, document walk
    planning: Viewport clipping and scanline fill planning
    job_ir: Intermediate representation for drawing operations
    codegen: G-code generation from Job IR
    configs: Converter configuration loading and the board frame
"""

__all__ = ["geometry", "svg", "planning", "job_ir", "codegen", "configs"]
