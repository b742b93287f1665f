"""SVG path data (``d`` attribute) interpreter.

Two layers:

Tokenizer
    :class:`PathTokenizer` walks the characters of a ``d`` string through
    the :class:`ParserState` machine (``START -> COMMAND -> NUMBER/COMMA
    -> COMMAND ... -> ERROR | end``) and yields ``(letter, args)`` command
    groups.  The first command must be ``M``/``m``.  A comma is accepted
    only directly after a number; numbers may omit the leading zero and
    may follow each other without separators (``10-5``, ``.5.5``).

Command handlers
    One pure function per command family.  A handler takes the explicit
    :class:`PathState` (current point, subpath start, curve memory), the
    command letter, one argument group and the flattening context, and
    returns the new state plus the vertices to append.  Lower-case letters
    are relative to the current point.

:class:`PathInterpreter` drives both: it re-applies a handler once per
complete argument group, starts a new primitive on every moveto, and
stops at the first error while keeping everything produced so far.
Errors never escape :meth:`PathInterpreter.run`; they are reported in the
returned :class:`PathResult` for the caller to log.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import NamedTuple

from svg_motion.geometry.affine import AffineTransform
from svg_motion.geometry.curves import (
    MAX_DEPTH,
    flatten_arc,
    flatten_bezier,
    is_degenerate,
    sample_bezier,
)
from svg_motion.geometry.primitive import Primitive
from svg_motion.geometry.vector import ORIGIN, Point

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions and states
# ---------------------------------------------------------------------------


class PathSyntaxError(Exception):
    """Malformed path data: bad token, unknown command, wrong arity."""

    pass


class ParserState(Enum):
    """Tokenizer state.  ``ERROR`` is terminal for one ``d`` attribute."""

    START = auto()
    NUMBER = auto()
    COMMA = auto()
    COMMAND = auto()
    ERROR = auto()


COMMAND_LETTERS = frozenset("MmLlHhVvZzCcSsQqTtAa")

_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------


class PathTokenizer:
    """Iterate ``(letter, args)`` command groups of a path string.

    Raises :class:`PathSyntaxError` from the iterator at the first invalid
    character; groups yielded before that point remain valid.  The current
    :class:`ParserState` is exposed as :attr:`state`.
    """

    def __init__(self, data: str) -> None:
        self.data = data
        self.state = ParserState.START
        self.position = 0

    def _fail(self, message: str) -> PathSyntaxError:
        self.state = ParserState.ERROR
        return PathSyntaxError(f"{message} at position {self.position}")

    def __iter__(self) -> Iterator[tuple[str, list[float]]]:
        data = self.data
        letter: str | None = None
        args: list[float] = []

        while self.position < len(data):
            ch = data[self.position]

            if ch.isspace():
                self.position += 1
                continue

            if ch in COMMAND_LETTERS:
                if self.state is ParserState.START and ch not in "Mm":
                    raise self._fail(f"path must start with moveto, got {ch!r}")
                if letter is not None:
                    yield letter, args
                letter, args = ch, []
                self.state = ParserState.COMMAND
                self.position += 1
                continue

            if ch == ",":
                if self.state is not ParserState.NUMBER:
                    raise self._fail("misplaced comma")
                self.state = ParserState.COMMA
                self.position += 1
                continue

            match = _NUMBER_RE.match(data, self.position)
            if match is None or self.state is ParserState.START:
                raise self._fail(f"unexpected character {ch!r}")
            args.append(float(match.group()))
            self.state = ParserState.NUMBER
            self.position = match.end()

        if letter is not None:
            yield letter, args


def tokenize(data: str) -> Iterator[tuple[str, list[float]]]:
    """Yield ``(letter, args)`` groups of *data*; see :class:`PathTokenizer`."""
    return iter(PathTokenizer(data))


# ---------------------------------------------------------------------------
# Explicit interpreter state
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CurveControlMemory:
    """Last control point and last command letter.

    Only consulted by the smooth curve commands (``S/s``, ``T/t``).
    """

    control: Point = ORIGIN
    command: str = ""


@dataclass(frozen=True, slots=True)
class PathState:
    """Pen state threaded through the command handlers."""

    current: Point = ORIGIN
    subpath_start: Point = ORIGIN
    memory: CurveControlMemory = field(default_factory=CurveControlMemory)


@dataclass(frozen=True, slots=True)
class FlattenContext:
    """Curve flattening settings shared by all curve handlers.

    Parameters
    ----------
    tolerance : float
        Maximum chord deviation (adaptive mode) and arc sample spacing.
    segments : int | None
        Fixed number of segments per Bézier curve; ``None`` selects
        adaptive flattening.
    max_depth : int
        Subdivision ceiling.
    """

    tolerance: float
    segments: int | None = None
    max_depth: int = MAX_DEPTH

    def bezier(self, control: Sequence[Point]) -> list[Point]:
        if self.segments is not None:
            return sample_bezier(control, self.segments)
        return flatten_bezier(control, self.tolerance, self.max_depth)


HandlerResult = tuple[PathState, list[Point]]
Handler = Callable[[PathState, str, Sequence[float], FlattenContext], HandlerResult]


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _target(state: PathState, letter: str, x: float, y: float) -> Point:
    if letter.islower():
        return Point(state.current.x + x, state.current.y + y)
    return Point(x, y)


def _advance(
    state: PathState, letter: str, target: Point, control: Point | None = None,
) -> PathState:
    memory = CurveControlMemory(control if control is not None else target, letter)
    return replace(state, current=target, memory=memory)


def _segment_to(state: PathState, letter: str, target: Point) -> HandlerResult:
    # Zero-length segments are suppressed
    new_state = _advance(state, letter, target)
    if (target - state.current).len2() == 0:
        return new_state, []
    return new_state, [target]


def move_to(
    state: PathState, letter: str, args: Sequence[float], ctx: FlattenContext,
) -> HandlerResult:
    """``M``/``m``: start a new subpath."""
    target = _target(state, letter, args[0], args[1])
    return (
        PathState(target, target, CurveControlMemory(target, letter)),
        [],
    )


def line_to(
    state: PathState, letter: str, args: Sequence[float], ctx: FlattenContext,
) -> HandlerResult:
    """``L``/``l``."""
    return _segment_to(state, letter, _target(state, letter, args[0], args[1]))


def horizontal_to(
    state: PathState, letter: str, args: Sequence[float], ctx: FlattenContext,
) -> HandlerResult:
    """``H``/``h``."""
    x = state.current.x + args[0] if letter == "h" else args[0]
    return _segment_to(state, letter, Point(x, state.current.y))


def vertical_to(
    state: PathState, letter: str, args: Sequence[float], ctx: FlattenContext,
) -> HandlerResult:
    """``V``/``v``."""
    y = state.current.y + args[0] if letter == "v" else args[0]
    return _segment_to(state, letter, Point(state.current.x, y))


def close_path(
    state: PathState, letter: str, args: Sequence[float], ctx: FlattenContext,
) -> HandlerResult:
    """``Z``/``z``: line back to the subpath start."""
    return _segment_to(state, letter, state.subpath_start)


def _curve(
    state: PathState,
    letter: str,
    control: tuple[Point, ...],
    memory_control: Point,
    ctx: FlattenContext,
) -> HandlerResult:
    new_state = _advance(state, letter, control[-1], memory_control)
    if is_degenerate(control):
        return new_state, []
    return new_state, ctx.bezier(control)[1:]


def _reflected(state: PathState, family: str) -> Point:
    mem = state.memory
    if mem.command and mem.command in family:
        return state.current * 2.0 - mem.control
    return state.current


def cubic_to(
    state: PathState, letter: str, args: Sequence[float], ctx: FlattenContext,
) -> HandlerResult:
    """``C``/``c``: cubic Bézier with explicit control points."""
    c1 = _target(state, letter, args[0], args[1])
    c2 = _target(state, letter, args[2], args[3])
    end = _target(state, letter, args[4], args[5])
    return _curve(state, letter, (state.current, c1, c2, end), c2, ctx)


def smooth_cubic_to(
    state: PathState, letter: str, args: Sequence[float], ctx: FlattenContext,
) -> HandlerResult:
    """``S``/``s``: first control point reflected from the previous curve."""
    c1 = _reflected(state, "CcSs")
    c2 = _target(state, letter, args[0], args[1])
    end = _target(state, letter, args[2], args[3])
    return _curve(state, letter, (state.current, c1, c2, end), c2, ctx)


def quadratic_to(
    state: PathState, letter: str, args: Sequence[float], ctx: FlattenContext,
) -> HandlerResult:
    """``Q``/``q``."""
    c1 = _target(state, letter, args[0], args[1])
    end = _target(state, letter, args[2], args[3])
    return _curve(state, letter, (state.current, c1, end), c1, ctx)


def smooth_quadratic_to(
    state: PathState, letter: str, args: Sequence[float], ctx: FlattenContext,
) -> HandlerResult:
    """``T``/``t``: control point reflected from the previous quadratic."""
    c1 = _reflected(state, "QqTt")
    end = _target(state, letter, args[0], args[1])
    return _curve(state, letter, (state.current, c1, end), c1, ctx)


def arc_to(
    state: PathState, letter: str, args: Sequence[float], ctx: FlattenContext,
) -> HandlerResult:
    """``A``/``a``: elliptical arc.

    Raises
    ------
    PathSyntaxError
        If either flag is not exactly 0 or 1.
    """
    rx, ry, rotation, large_arc, sweep = args[:5]
    for name, flag in (("large-arc", large_arc), ("sweep", sweep)):
        if flag not in (0.0, 1.0):
            raise PathSyntaxError(f"{name} flag must be 0 or 1, got {flag:g}")
    end = _target(state, letter, args[5], args[6])
    rx, ry = abs(rx), abs(ry)
    if rx == 0 or ry == 0:
        return _segment_to(state, letter, end)

    new_state = _advance(state, letter, end)
    pts = flatten_arc(
        state.current,
        end,
        rx,
        ry,
        large_arc == 1.0,
        sweep == 1.0,
        rotation,
        ctx.tolerance,
        ctx.max_depth,
    )
    return new_state, pts[1:]


class CommandSpec(NamedTuple):
    """Argument group size and handler for one command letter."""

    arity: int
    handler: Handler


COMMANDS: dict[str, CommandSpec] = {
    "M": CommandSpec(2, move_to),
    "L": CommandSpec(2, line_to),
    "H": CommandSpec(1, horizontal_to),
    "V": CommandSpec(1, vertical_to),
    "Z": CommandSpec(0, close_path),
    "C": CommandSpec(6, cubic_to),
    "S": CommandSpec(4, smooth_cubic_to),
    "Q": CommandSpec(4, quadratic_to),
    "T": CommandSpec(2, smooth_quadratic_to),
    "A": CommandSpec(7, arc_to),
}


# ---------------------------------------------------------------------------
# Interpreter
# ---------------------------------------------------------------------------


@dataclass
class PathResult:
    """Outcome of interpreting one ``d`` attribute.

    Parameters
    ----------
    primitives : list[Primitive]
        Finalized primitives, in path order.  Present even on error.
    state : ParserState
        Final tokenizer state (``ERROR`` when parsing stopped early).
    error : str | None
        Diagnostic for the first error, ``None`` on success.
    """

    primitives: list[Primitive]
    state: ParserState
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PathInterpreter:
    """Turn path data into primitives.

    Parameters
    ----------
    tolerance : float
        Curve flattening tolerance in path units.
    transform : AffineTransform | None
        Composition applied to every finalized primitive.
    fill : bool
        Fill eligibility of the owning element; fill primitives are closed
        on finalization.
    segments : int | None
        Fixed Bézier segment count (``None``: adaptive).
    max_depth : int
        Subdivision ceiling for curves and arcs.
    """

    def __init__(
        self,
        tolerance: float,
        transform: AffineTransform | None = None,
        fill: bool = False,
        segments: int | None = None,
        max_depth: int = MAX_DEPTH,
    ) -> None:
        self._ctx = FlattenContext(tolerance, segments, max_depth)
        self._transform = transform if transform is not None else AffineTransform()
        self._fill = fill
        self._reset()

    def _reset(self) -> None:
        self._state = PathState()
        self._primitive: Primitive | None = None
        self._output: list[Primitive] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, data: str) -> PathResult:
        """Interpret *data*, never raising on malformed input."""
        self._reset()
        tokenizer = PathTokenizer(data)
        error: str | None = None
        try:
            for letter, args in tokenizer:
                self._execute(letter, args)
        except PathSyntaxError as exc:
            tokenizer.state = ParserState.ERROR
            error = str(exc)
        self._finalize()
        return PathResult(self._output, tokenizer.state, error)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _execute(self, letter: str, args: list[float]) -> None:
        spec = COMMANDS[letter.upper()]
        if spec.arity == 0:
            self._apply(spec.handler, letter, ())
            if args:
                raise PathSyntaxError(
                    f"'{letter}' takes no arguments, got {len(args)}"
                )
            return
        if not args:
            raise PathSyntaxError(f"'{letter}' requires arguments")

        name = letter
        handler = spec.handler
        groups = len(args) // spec.arity
        for g in range(groups):
            group = args[g * spec.arity:(g + 1) * spec.arity]
            self._apply(handler, letter, group)
            if handler is move_to:
                # Extra coordinate pairs after a moveto are implicit linetos
                handler = line_to
                letter = "l" if letter == "m" else "L"

        if len(args) % spec.arity:
            raise PathSyntaxError(
                f"'{name}' expects groups of {spec.arity} arguments, "
                f"got {len(args)}"
            )

    def _apply(self, handler: Handler, letter: str, group: Sequence[float]) -> None:
        try:
            self._state, pts = handler(self._state, letter, group, self._ctx)
        except PathSyntaxError as exc:
            raise PathSyntaxError(f"'{letter}': {exc}") from exc
        if handler is move_to:
            self._finalize()
            self._primitive = Primitive(start=self._state.current)
        elif self._primitive is not None:
            self._primitive.extend(pts)

    def _finalize(self) -> None:
        prim = self._primitive
        self._primitive = None
        if prim is None or prim.is_empty():
            return
        prim.finalize(self._transform, self._fill)
        self._output.append(prim)


def interpret_path(
    data: str,
    tolerance: float,
    transform: AffineTransform | None = None,
    fill: bool = False,
    segments: int | None = None,
    max_depth: int = MAX_DEPTH,
) -> PathResult:
    """Convenience wrapper around :class:`PathInterpreter`."""
    return PathInterpreter(tolerance, transform, fill, segments, max_depth).run(data)
