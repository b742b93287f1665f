"""SVG front end: transforms, path data, basic shapes, document walk."""

from svg_motion.svg.document import (
    DocumentError,
    DocumentTranslator,
    SvgDocument,
    Viewport,
    load_svg,
    parse_svg,
    translate_document,
    walk,
)
from svg_motion.svg.path import (
    ParserState,
    PathResult,
    PathSyntaxError,
    interpret_path,
    tokenize,
)
from svg_motion.svg.shapes import ShapeError, shape_to_primitive
from svg_motion.svg.transform import TransformStack, parse_transform

__all__ = [
    "DocumentError",
    "DocumentTranslator",
    "ParserState",
    "PathResult",
    "PathSyntaxError",
    "ShapeError",
    "SvgDocument",
    "TransformStack",
    "Viewport",
    "interpret_path",
    "load_svg",
    "parse_svg",
    "parse_transform",
    "shape_to_primitive",
    "tokenize",
    "translate_document",
    "walk",
]
