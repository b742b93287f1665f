"""G-code generator -- Job IR operations to G-code strings.

Job IR positions are viewport coordinates.  The mapping onto the drawing
board (:class:`~svg_motion.configs.board.BoardFrame`) is applied **here**,
so the program contains absolute robot coordinates (``X Y Z``) only.

Tool states:
    * down -- on the board surface, ``svg_to_robot(p)``
    * up   -- lifted along the board normal by ``robot.departure_mm``

Feed rate convention:
    Python stores feed rates in **mm/s**.  This module converts to the
    G-code ``F`` parameter (mm/min) at the generation boundary::

        F_value = feed_mm_s * 60.0
"""

from __future__ import annotations

import logging
import math
from io import StringIO

from svg_motion.configs.board import BoardFrame
from svg_motion.configs.loader import RobotConfig
from svg_motion.geometry.vector import Point, Vector3
from svg_motion.job_ir.operations import (
    DrawPolyline,
    LinearMove,
    Operation,
    RapidXY,
    Stroke,
    ToolDown,
    ToolUp,
)

logger = logging.getLogger(__name__)


class CodeGenError(Exception):
    """Raised when the operation stream cannot be turned into a program."""

    pass


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _f(feed_mm_s: float) -> str:
    """Convert mm/s feed rate to G-code ``F`` parameter (mm/min)."""
    return f"F{feed_mm_s * 60.0:.1f}"


def _xyz(v: Vector3) -> str:
    return f"X{v.x:.3f} Y{v.y:.3f} Z{v.z:.3f}"


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class GCodeGenerator:
    """Convert Job IR operations to G-code.

    Parameters
    ----------
    frame : BoardFrame
        Viewport-to-board mapping for the current document.
    robot : RobotConfig
        Departure distance and default feeds.
    """

    def __init__(self, frame: BoardFrame, robot: RobotConfig) -> None:
        self._frame = frame
        self._robot = robot
        self._tool_is_up: bool = True
        self._pos: Point | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def generate(self, operations: list[Operation]) -> str:
        """Generate G-code for a flat list of operations.

        Parameters
        ----------
        operations : list[Operation]
            Job IR operations in viewport coordinates.

        Returns
        -------
        str
            Complete G-code program including header and footer.

        Raises
        ------
        CodeGenError
            On non-finite coordinates, drawing with the tool up, or
            travelling with the tool down.
        """
        buf = StringIO()
        self._reset_state()
        self._write_header(buf)

        for op in operations:
            self._generate_op(op, buf)

        self._write_footer(buf)
        logger.info("Generated G-code for %d operation(s)", len(operations))
        return buf.getvalue()

    def generate_stroke(self, stroke: Stroke) -> str:
        """Generate G-code for a single stroke, terminated by ``M400``.

        Tool state carries over between calls, so consecutive strokes
        can be streamed one at a time.
        """
        buf = StringIO()
        for op in stroke:
            self._generate_op(op, buf)
        buf.write("M400\n")
        return buf.getvalue()

    # ------------------------------------------------------------------
    # Internal: per-operation dispatch
    # ------------------------------------------------------------------

    def _reset_state(self) -> None:
        self._tool_is_up = True
        self._pos = None

    def _generate_op(self, op: Operation, buf: StringIO) -> None:
        if isinstance(op, ToolUp):
            self._gen_tool_up(buf)
        elif isinstance(op, ToolDown):
            self._gen_tool_down(buf)
        elif isinstance(op, RapidXY):
            self._gen_rapid(op, buf)
        elif isinstance(op, LinearMove):
            self._gen_linear(op, buf)
        elif isinstance(op, DrawPolyline):
            self._gen_polyline(op, buf)
        else:
            logger.warning("Unsupported operation: %s", type(op).__name__)

    # ------------------------------------------------------------------
    # Individual generators
    # ------------------------------------------------------------------

    def _gen_tool_up(self, buf: StringIO) -> None:
        if self._tool_is_up:
            return
        lifted = self._frame.depart(self._pos, self._robot.departure_mm)
        buf.write(f"G0 {_xyz(lifted)} {_f(self._robot.travel_feed_mm_s)}\n")
        self._tool_is_up = True

    def _gen_tool_down(self, buf: StringIO) -> None:
        if self._pos is None:
            raise CodeGenError("ToolDown before any position was set")
        if not self._tool_is_up:
            return
        surface = self._frame.svg_to_robot(self._pos)
        buf.write(f"G1 {_xyz(surface)} {_f(self._robot.draw_feed_mm_s)}\n")
        self._tool_is_up = False

    def _gen_rapid(self, op: RapidXY, buf: StringIO) -> None:
        if not self._tool_is_up:
            raise CodeGenError(
                f"RapidXY to ({op.x:.3f}, {op.y:.3f}) with the tool down"
            )
        p = self._point(op.x, op.y)
        lifted = self._frame.depart(p, self._robot.departure_mm)
        buf.write(f"G0 {_xyz(lifted)} {_f(self._robot.travel_feed_mm_s)}\n")
        self._pos = p

    def _draw_to(self, p: Point, feed: float, buf: StringIO) -> None:
        buf.write(f"G1 {_xyz(self._frame.svg_to_robot(p))} {_f(feed)}\n")
        self._pos = p

    def _gen_linear(self, op: LinearMove, buf: StringIO) -> None:
        self._require_down(type(op).__name__)
        feed = op.feed if op.feed is not None else self._robot.draw_feed_mm_s
        self._draw_to(self._point(op.x, op.y), feed, buf)

    def _gen_polyline(self, op: DrawPolyline, buf: StringIO) -> None:
        self._require_down(type(op).__name__)
        feed = op.feed if op.feed is not None else self._robot.draw_feed_mm_s
        for px, py in op.points:
            self._draw_to(self._point(px, py), feed, buf)

    # ------------------------------------------------------------------
    # Header / footer
    # ------------------------------------------------------------------

    def _write_header(self, buf: StringIO) -> None:
        buf.write("; Generated by svg_motion G-code generator\n")
        buf.write(
            f"; Viewport {self._frame.width:.3f} x {self._frame.height:.3f}, "
            f"scale {self._frame.x_scale:.4f} x {self._frame.y_scale:.4f} mm/unit\n"
        )
        buf.write("G21 ; mm mode\n")
        buf.write("G90 ; absolute positioning\n")
        buf.write("\n")

    def _write_footer(self, buf: StringIO) -> None:
        buf.write("\n")
        buf.write("; --- End of job ---\n")
        self._gen_tool_up(buf)
        buf.write("M400 ; wait for motion complete\n")

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _point(self, x: float, y: float) -> Point:
        if not (math.isfinite(x) and math.isfinite(y)):
            raise CodeGenError(f"Non-finite coordinate ({x}, {y})")
        return Point(x, y)

    def _require_down(self, name: str) -> None:
        if self._tool_is_up:
            raise CodeGenError(f"{name} issued with the tool up (missing ToolDown)")
