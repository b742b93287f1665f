"""
G-code generation module.

Converts Job IR operations to G-code strings, mapping viewport
coordinates onto the drawing board.
"""

from svg_motion.codegen.generator import CodeGenError, GCodeGenerator

__all__ = ["CodeGenError", "GCodeGenerator"]
