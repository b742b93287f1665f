"""SVG ``transform`` attribute parsing and the group transform stack.

Parsing is permissive: a malformed attribute yields the identity transform
and a warning, never an exception, so one bad tag cannot abort a whole
conversion.

Grouping elements nest transforms.  The composition active for a shape is
``ancestor_1 ∘ ... ∘ ancestor_n ∘ own`` -- the shape's own transform acts
first, the outermost group's last.
"""

from __future__ import annotations

import logging
import re

from svg_motion.geometry.affine import AffineTransform

logger = logging.getLogger(__name__)

_FUNCTION_RE = re.compile(
    r"\s*(matrix|translate|scale|rotate|skewX|skewY)\s*\(([^()]*)\)\s*,?"
)
_NUMBER = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"
_NUMBER_RE = re.compile(_NUMBER)
# Numbers separated by a comma and/or whitespace; a sign may also start
# the next number directly
_ARGS_RE = re.compile(
    rf"\s*{_NUMBER}(?:(?:\s*,\s*|\s+|(?=[-+])){_NUMBER})*\s*"
)

# Allowed argument counts per function
_ARITY: dict[str, tuple[int, ...]] = {
    "matrix": (6,),
    "translate": (1, 2),
    "scale": (1, 2),
    "rotate": (1, 3),
    "skewX": (1,),
    "skewY": (1,),
}


class TransformSyntaxError(ValueError):
    """Raised by :func:`parse_transform_strict` on malformed input."""

    pass


def _parse_args(name: str, raw: str) -> list[float]:
    if raw.strip() and not _ARGS_RE.fullmatch(raw):
        raise TransformSyntaxError(f"{name}: invalid arguments {raw!r}")
    nums = _NUMBER_RE.findall(raw)
    if len(nums) not in _ARITY[name]:
        raise TransformSyntaxError(
            f"{name} takes {' or '.join(map(str, _ARITY[name]))} "
            f"arguments, got {len(nums)}"
        )
    return [float(n) for n in nums]


def _function_to_transform(name: str, args: list[float]) -> AffineTransform:
    if name == "matrix":
        a, b, c, d, e, f = args
        return AffineTransform(a, b, c, d, e, f)
    if name == "translate":
        return AffineTransform.translate(args[0], args[1] if len(args) == 2 else 0.0)
    if name == "scale":
        return AffineTransform.scale(args[0], args[1] if len(args) == 2 else None)
    if name == "rotate":
        if len(args) == 3:
            return AffineTransform.rotate(args[0], args[1], args[2])
        return AffineTransform.rotate(args[0])
    if name == "skewX":
        return AffineTransform.skew_x(args[0])
    return AffineTransform.skew_y(args[0])


def parse_transform_strict(value: str | None) -> AffineTransform:
    """Parse a transform list, raising on any malformed function.

    Raises
    ------
    TransformSyntaxError
        On unknown functions, bad separators or wrong argument counts.
    """
    result = AffineTransform()
    if value is None:
        return result
    rest = value.strip()
    while rest:
        match = _FUNCTION_RE.match(rest)
        if match is None:
            raise TransformSyntaxError(f"cannot parse transform at {rest!r}")
        name, raw = match.groups()
        result = result @ _function_to_transform(name, _parse_args(name, raw))
        rest = rest[match.end():].lstrip()
    return result


def parse_transform(value: str | None) -> AffineTransform:
    """Parse an SVG ``transform`` attribute value.

    Parameters
    ----------
    value : str | None
        Attribute text, e.g. ``"translate(10, 5) rotate(45)"``.

    Returns
    -------
    AffineTransform
        Left-to-right composition of the listed functions; identity for
        ``None``, empty, or malformed input.
    """
    try:
        return parse_transform_strict(value)
    except TransformSyntaxError as exc:
        logger.warning("Ignoring malformed transform %r: %s", value, exc)
        return AffineTransform()


class TransformStack:
    """Running transform composition indexed by element nesting depth.

    Usage::

        stack = TransformStack(root_transform)
        for elem, depth in walk(root):
            if is_group(elem):
                stack.enter(depth, parse_transform(elem.get("transform")))
            else:
                t = stack.leaf(depth, parse_transform(elem.get("transform")))
    """

    def __init__(self, base: AffineTransform | None = None) -> None:
        self._base = base if base is not None else AffineTransform()
        self._levels: list[tuple[int, AffineTransform]] = []

    def _unwind(self, depth: int) -> None:
        while self._levels and self._levels[-1][0] >= depth:
            self._levels.pop()

    def _parent(self) -> AffineTransform:
        return self._levels[-1][1] if self._levels else self._base

    @property
    def current(self) -> AffineTransform:
        return self._parent()

    @property
    def depth(self) -> int:
        return len(self._levels)

    def enter(self, depth: int, transform: AffineTransform) -> AffineTransform:
        """Enter a group at *depth*; returns the group's composition."""
        self._unwind(depth)
        composed = self._parent() @ transform
        self._levels.append((depth, composed))
        return composed

    def leaf(self, depth: int, own: AffineTransform) -> AffineTransform:
        """Composition for a non-group element at *depth*."""
        self._unwind(depth)
        return self._parent() @ own
