"""SVG -> motion program conversion pipeline.

Stages, in order:

1. Load the document and resolve its viewport.
2. Map the viewport onto the configured board; project robot accuracy and
   fill spacing into viewport units.
3. Translate elements into primitives (path interpreter, shape adapters).
4. Clip every primitive to the viewport.
5. Plan scanline coverage for fill-eligible pieces.
6. Emit Job IR and render it as G-code.

Usage::

    from svg_motion.configs import load_config
    from svg_motion.translator import Converter

    converter = Converter(load_config())
    program = converter.convert_file("logo.svg", "logo.gcode")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from svg_motion.codegen.generator import GCodeGenerator
from svg_motion.configs.board import BoardFrame
from svg_motion.configs.loader import ConverterConfig
from svg_motion.geometry.primitive import Primitive
from svg_motion.job_ir.operations import (
    Operation,
    coverage_to_operations,
    primitives_to_operations,
)
from svg_motion.planning.clipper import split_all
from svg_motion.planning.fill import CoverageSegment, plan_fill
from svg_motion.svg.document import (
    DocumentTranslator,
    SvgDocument,
    Viewport,
    load_svg,
    resolve_viewport,
)
from svg_motion.utils.fs import atomic_write_text
from svg_motion.utils.logging_config import pop_context, push_context

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    """Everything produced for one document.

    Parameters
    ----------
    primitives : list[Primitive]
        Clipped primitives in viewport coordinates, document order.
    fills : list[CoverageSegment]
        Coverage passes for the fill-eligible primitives, in order.
    viewport : Viewport
        Resolved working rectangle.
    frame : BoardFrame
        Viewport-to-board mapping.
    tolerance : float
        Flattening tolerance used, in viewport units.
    fill_step : float
        Scan line spacing used, in viewport units.
    """

    primitives: list[Primitive]
    fills: list[CoverageSegment]
    viewport: Viewport
    frame: BoardFrame
    tolerance: float
    fill_step: float


class Converter:
    """Run the conversion pipeline with one configuration.

    Parameters
    ----------
    config : ConverterConfig
        Validated converter configuration.
    """

    def __init__(self, config: ConverterConfig) -> None:
        self.config = config

    def load(self, source: str | Path) -> SvgDocument:
        """Load an SVG file; raises ``DocumentError`` if unreadable."""
        return load_svg(source)

    def convert(self, document: SvgDocument) -> ConversionResult:
        """Translate, clip and fill-plan *document*."""
        cfg = self.config
        viewport = resolve_viewport(
            document.root, cfg.viewport.default_width, cfg.viewport.default_height,
        )
        frame = cfg.board.frame(viewport.width, viewport.height)
        tolerance = frame.robot_to_svg_accuracy(cfg.robot.accuracy_mm)
        fill_step = frame.robot_to_svg_accuracy(cfg.robot.pouring_step_mm)
        logger.info(
            "Viewport %.3f x %.3f, tolerance %.4g, fill step %.4g (viewport units)",
            viewport.width, viewport.height, tolerance, fill_step,
        )

        translator = DocumentTranslator(
            tolerance,
            cfg.viewport.default_width,
            cfg.viewport.default_height,
            cfg.flatten.segments,
            cfg.flatten.max_depth,
        )
        primitives, _ = translator.translate(document, viewport)
        clipped = split_all(primitives, viewport.width, viewport.height)

        fills: list[CoverageSegment] = []
        for prim in clipped:
            if prim.fill:
                fills.extend(plan_fill(prim, fill_step))
        logger.info("Planned %d fill pass(es)", len(fills))

        return ConversionResult(clipped, fills, viewport, frame, tolerance, fill_step)

    def to_operations(self, result: ConversionResult) -> list[Operation]:
        """Outline strokes first, then fill passes."""
        ops = primitives_to_operations(result.primitives)
        ops.extend(coverage_to_operations(result.fills))
        return ops

    def generate_code(self, result: ConversionResult) -> str:
        generator = GCodeGenerator(result.frame, self.config.robot)
        return generator.generate(self.to_operations(result))

    def convert_file(
        self, svg_path: str | Path, out_path: str | Path | None = None,
    ) -> str:
        """Convert an SVG file to a G-code program.

        Parameters
        ----------
        svg_path : str | Path
            Input SVG.
        out_path : str | Path | None
            Program destination, written atomically; ``None`` only
            returns the text.

        Returns
        -------
        str
            The generated program.

        Raises
        ------
        DocumentError
            If the SVG cannot be read or parsed.
        """
        svg_path = Path(svg_path)
        push_context(svg=svg_path.name)
        try:
            result = self.convert(self.load(svg_path))
            program = self.generate_code(result)
            if out_path is not None:
                atomic_write_text(out_path, program)
                logger.info("Wrote %s", out_path)
            return program
        finally:
            pop_context(keys=["svg"])
