"""SVG document loading and translation into primitives.

The DOM is ``xml.etree.ElementTree``.  Tags are compared by local name
(namespace stripped), so both namespaced and bare documents work.

Translation walks elements in document order.  Grouping elements push
their ``transform`` onto a :class:`TransformStack`; ``path`` elements go
through the path interpreter; basic shapes through the shape adapters.
Problems local to one element are logged and the element is skipped;
only an unreadable document raises.

Usage::

    doc = load_svg("drawing.svg")
    translator = DocumentTranslator(tolerance=0.1)
    primitives, viewport = translator.translate(doc)
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from svg_motion.geometry.affine import AffineTransform
from svg_motion.geometry.curves import MAX_DEPTH, InvalidParameterError
from svg_motion.geometry.primitive import Primitive
from svg_motion.geometry.vector import EPSILON
from svg_motion.svg.path import interpret_path
from svg_motion.svg.shapes import (
    SHAPE_ADAPTERS,
    ShapeError,
    parse_length,
    shape_to_primitive,
)
from svg_motion.svg.transform import TransformStack, parse_transform

logger = logging.getLogger(__name__)


class DocumentError(Exception):
    """Unreadable, malformed or empty SVG document."""

    pass


# Non-rendered containers; their whole subtree is skipped
SKIP_TAGS = frozenset({
    "defs", "clipPath", "mask", "symbol", "marker", "pattern",
    "title", "desc", "metadata", "style", "script",
})

GROUP_TAGS = frozenset({"svg", "g", "a", "switch"})

_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


@dataclass
class SvgDocument:
    """Parsed document root plus a label for diagnostics."""

    root: ET.Element
    source: str = "<string>"


def local_name(elem: ET.Element) -> str:
    """Tag name without namespace; empty for comments and PIs."""
    tag = elem.tag
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def _checked(root: ET.Element, source: str) -> SvgDocument:
    if local_name(root) != "svg":
        raise DocumentError(
            f"{source}: root element is <{local_name(root)}>, expected <svg>"
        )
    return SvgDocument(root, source)


def parse_svg(text: str | bytes, source: str = "<string>") -> SvgDocument:
    """Parse SVG markup.

    Raises
    ------
    DocumentError
        On empty input, malformed XML or a non-``svg`` root.
    """
    if not text or not text.strip():
        raise DocumentError(f"{source}: empty document")
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise DocumentError(f"{source}: malformed XML: {exc}") from exc
    return _checked(root, source)


def load_svg(path: str | Path) -> SvgDocument:
    """Read and parse an SVG file.

    Raises
    ------
    DocumentError
        If the file cannot be read or parsed.
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise DocumentError(f"Cannot read {path}: {exc}") from exc
    logger.info("Loaded %s (%d bytes)", path, len(data))
    return parse_svg(data, str(path))


def walk(root: ET.Element, depth: int = 0) -> Iterator[tuple[ET.Element, int]]:
    """Yield ``(element, depth)`` in document order.

    Skips comments and the subtrees of non-rendered containers.
    """
    name = local_name(root)
    if not name or name in SKIP_TAGS:
        return
    yield root, depth
    for child in root:
        yield from walk(child, depth + 1)


# ---------------------------------------------------------------------------
# Viewport
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Viewport:
    """Working rectangle ``[0, width] x [0, height]``.

    ``transform`` maps document user units into viewport coordinates
    (viewBox offset and scale).
    """

    width: float
    height: float
    transform: AffineTransform = AffineTransform()


def _parse_viewbox(value: str | None) -> tuple[float, float, float, float] | None:
    if value is None:
        return None
    nums = [float(n) for n in _NUMBER_RE.findall(value)]
    if len(nums) != 4 or nums[2] <= 0 or nums[3] <= 0:
        logger.warning("Ignoring invalid viewBox %r", value)
        return None
    return nums[0], nums[1], nums[2], nums[3]


def _root_length(root: ET.Element, name: str) -> float | None:
    raw = root.get(name)
    if raw is None:
        return None
    try:
        value = parse_length(raw)
    except ShapeError:
        logger.warning("Ignoring root %s=%r", name, raw)
        return None
    return value if value > 0 else None


def resolve_viewport(
    root: ET.Element, default_width: float, default_height: float,
) -> Viewport:
    """Viewport size from root ``width``/``height``, else ``viewBox``,
    else the given defaults.

    With a ``viewBox``, the returned transform shifts its origin to
    ``(0, 0)`` and scales it onto ``width x height`` (non-uniformly,
    ``preserveAspectRatio`` is not honoured).  A missing ``width`` or
    ``height`` is derived from the ``viewBox`` aspect ratio.
    """
    vb = _parse_viewbox(root.get("viewBox"))
    width = _root_length(root, "width")
    height = _root_length(root, "height")

    if vb is None:
        return Viewport(
            width if width is not None else default_width,
            height if height is not None else default_height,
        )

    min_x, min_y, vb_w, vb_h = vb
    if width is None and height is None:
        width, height = vb_w, vb_h
    elif width is None:
        width = height * vb_w / vb_h
    elif height is None:
        height = width * vb_h / vb_w

    transform = AffineTransform.scale(width / vb_w, height / vb_h) @ (
        AffineTransform.translate(-min_x, -min_y)
    )
    return Viewport(width, height, transform)


# ---------------------------------------------------------------------------
# Translation
# ---------------------------------------------------------------------------


def is_fill_eligible(elem: ET.Element) -> bool:
    """``True`` when the element carries a ``fill`` other than ``none``."""
    fill = elem.get("fill")
    return fill is not None and fill.strip().lower() != "none"


def _describe(elem: ET.Element) -> str:
    elem_id = elem.get("id")
    name = local_name(elem)
    return f"<{name} id={elem_id!r}>" if elem_id else f"<{name}>"


class DocumentTranslator:
    """Translate an :class:`SvgDocument` into primitives.

    Parameters
    ----------
    tolerance : float
        Flattening tolerance in viewport units.  Each element is flattened
        in its own user units at this tolerance divided by the largest
        scale of its composed transform (viewBox included).
    default_width, default_height : float
        Viewport size when the document specifies none.
    segments : int | None
        Fixed Bézier segment count (``None``: adaptive).
    max_depth : int
        Subdivision ceiling for curves and arcs.
    """

    def __init__(
        self,
        tolerance: float,
        default_width: float = 100.0,
        default_height: float = 100.0,
        segments: int | None = None,
        max_depth: int = MAX_DEPTH,
    ) -> None:
        if tolerance <= 0:
            raise InvalidParameterError(f"tolerance must be > 0, got {tolerance}")
        self.tolerance = tolerance
        self.default_width = default_width
        self.default_height = default_height
        self.segments = segments
        self.max_depth = max_depth

    def translate(
        self, doc: SvgDocument, viewport: Viewport | None = None,
    ) -> tuple[list[Primitive], Viewport]:
        """Primitives of *doc* in viewport coordinates, in document order.

        *viewport* overrides the one resolved from the document root.
        """
        if viewport is None:
            viewport = resolve_viewport(
                doc.root, self.default_width, self.default_height,
            )
        logger.debug(
            "Viewport %.3f x %.3f for %s", viewport.width, viewport.height, doc.source,
        )
        stack = TransformStack(viewport.transform)
        primitives: list[Primitive] = []
        skipped = 0

        for elem, depth in walk(doc.root):
            name = local_name(elem)
            own = parse_transform(elem.get("transform"))
            if name in GROUP_TAGS:
                stack.enter(depth, own)
                continue
            if name != "path" and name not in SHAPE_ADAPTERS:
                logger.debug("Ignoring unsupported element %s", _describe(elem))
                continue

            transform = stack.leaf(depth, own)
            try:
                produced = self._element(elem, name, transform)
            except (ShapeError, InvalidParameterError) as exc:
                logger.warning("Skipping %s: %s", _describe(elem), exc)
                skipped += 1
                continue
            logger.debug("%s -> %d primitive(s)", _describe(elem), len(produced))
            primitives.extend(produced)

        logger.info(
            "Translated %s: %d primitives, %d elements skipped",
            doc.source, len(primitives), skipped,
        )
        return primitives, viewport

    def local_tolerance(self, transform: AffineTransform) -> float:
        """Tolerance in the units of a leaf drawn under *transform*.

        Flattening at this value keeps the deviation in viewport units
        within ``self.tolerance``.
        """
        scale = transform.max_scale()
        if scale <= EPSILON:
            return self.tolerance
        return self.tolerance / scale

    def _element(
        self, elem: ET.Element, name: str, transform: AffineTransform,
    ) -> list[Primitive]:
        fill = is_fill_eligible(elem)
        tolerance = self.local_tolerance(transform)
        if name == "path":
            result = interpret_path(
                elem.get("d", ""),
                tolerance,
                transform,
                fill,
                self.segments,
                self.max_depth,
            )
            if not result.ok:
                logger.warning(
                    "Path data error in %s: %s (kept %d primitive(s))",
                    _describe(elem), result.error, len(result.primitives),
                )
            return result.primitives

        prim = shape_to_primitive(
            name, elem.attrib, tolerance, self.max_depth,
        )
        if prim is None or prim.is_empty():
            return []
        prim.finalize(transform, fill)
        return [prim]


def translate_document(
    doc: SvgDocument,
    tolerance: float,
    default_width: float = 100.0,
    default_height: float = 100.0,
    segments: int | None = None,
    max_depth: int = MAX_DEPTH,
) -> tuple[list[Primitive], Viewport]:
    """Convenience wrapper around :class:`DocumentTranslator`."""
    translator = DocumentTranslator(
        tolerance, default_width, default_height, segments, max_depth,
    )
    return translator.translate(doc)
