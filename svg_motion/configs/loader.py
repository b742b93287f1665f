"""Configuration loader for the SVG converter.

Loads and validates ``converter.yaml`` into typed, frozen dataclasses.
Robot accuracy, tool departure, fill spacing, feeds and the board
geometry all come from the config -- nothing is hardcoded downstream.

Lengths are in **mm** and feed rates in **mm/s**.  Conversion to the
G-code ``F`` parameter (mm/min) happens only in the G-code generator;
conversion of lengths to viewport units happens through
:class:`~svg_motion.configs.board.BoardFrame`.

Usage::

    from svg_motion.configs.loader import load_config
    cfg = load_config()                          # default path
    cfg = load_config("/custom/converter.yaml")  # explicit path
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from svg_motion.configs.board import BoardFrame
from svg_motion.geometry.vector import Vector3
from svg_motion.utils.fs import load_yaml

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# ---------------------------------------------------------------------------
# Dataclasses -- mirror the YAML structure
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RobotConfig:
    """Robot capabilities.  Lengths in mm, feeds in mm/s."""

    accuracy_mm: float
    departure_mm: float
    pouring_step_mm: float
    draw_feed_mm_s: float
    travel_feed_mm_s: float


@dataclass(frozen=True)
class BoardConfig:
    """Three board corners in robot space (mm).

    ``origin`` receives viewport ``(0, 0)``, ``corner_x`` viewport
    ``(width, 0)`` and ``corner_y`` viewport ``(0, height)``.
    """

    origin: Vector3
    corner_x: Vector3
    corner_y: Vector3

    def frame(self, width: float, height: float) -> BoardFrame:
        """Board frame for a viewport of *width* x *height*."""
        return BoardFrame.from_corners(
            width, height, self.origin, self.corner_x, self.corner_y,
        )


@dataclass(frozen=True)
class ViewportConfig:
    """Viewport used when the document declares no size."""

    default_width: float
    default_height: float


@dataclass(frozen=True)
class FlattenConfig:
    """Curve flattening limits.

    ``segments`` selects fixed-N Bézier sampling; ``None`` means adaptive.
    """

    max_depth: int = 16
    segments: int | None = None


@dataclass(frozen=True)
class ConverterConfig:
    """Complete converter configuration loaded from ``converter.yaml``."""

    robot: RobotConfig
    board: BoardConfig
    viewport: ViewportConfig
    flatten: FlattenConfig


# ---------------------------------------------------------------------------
# Internal parsing helpers
# ---------------------------------------------------------------------------


def _parse_point3(name: str, raw: Any) -> Vector3:
    if not isinstance(raw, (list, tuple)) or len(raw) != 3:
        raise ConfigError(f"board.{name} must be a list of 3 numbers, got {raw!r}")
    return Vector3(float(raw[0]), float(raw[1]), float(raw[2]))


def _parse_board(data: dict[str, Any]) -> BoardConfig:
    return BoardConfig(
        origin=_parse_point3("origin", data["origin"]),
        corner_x=_parse_point3("corner_x", data["corner_x"]),
        corner_y=_parse_point3("corner_y", data["corner_y"]),
    )


def _parse_flatten(data: dict[str, Any] | None) -> FlattenConfig:
    if not data:
        return FlattenConfig()
    segments = data.get("segments")
    return FlattenConfig(
        max_depth=int(data.get("max_depth", 16)),
        segments=int(segments) if segments is not None else None,
    )


def _require_positive(name: str, value: float) -> None:
    if not math.isfinite(value) or value <= 0:
        raise ConfigError(f"{name} must be > 0, got {value}")


def _validate_config(cfg: ConverterConfig) -> None:
    """Validate value ranges and cross-field consistency.

    Raises
    ------
    ConfigError
        On any invalid value or degenerate board.
    """
    r = cfg.robot
    _require_positive("robot.accuracy_mm", r.accuracy_mm)
    _require_positive("robot.pouring_step_mm", r.pouring_step_mm)
    _require_positive("robot.draw_feed_mm_s", r.draw_feed_mm_s)
    _require_positive("robot.travel_feed_mm_s", r.travel_feed_mm_s)
    if not math.isfinite(r.departure_mm) or r.departure_mm < 0:
        raise ConfigError(f"robot.departure_mm must be >= 0, got {r.departure_mm}")

    if r.pouring_step_mm < r.accuracy_mm:
        logger.warning(
            "Pouring step %.3f mm is finer than robot accuracy %.3f mm",
            r.pouring_step_mm,
            r.accuracy_mm,
        )

    _require_positive("viewport.default_width", cfg.viewport.default_width)
    _require_positive("viewport.default_height", cfg.viewport.default_height)

    f = cfg.flatten
    if f.max_depth < 1:
        raise ConfigError(f"flatten.max_depth must be >= 1, got {f.max_depth}")
    if f.segments is not None and f.segments < 1:
        raise ConfigError(f"flatten.segments must be >= 1, got {f.segments}")

    # -- Board edges span a plane -------------------------------------------
    b = cfg.board
    axis_i = b.corner_x - b.origin
    axis_j = b.corner_y - b.origin
    if axis_i.len() == 0 or axis_j.len() == 0:
        raise ConfigError("Board corners must differ from the origin")
    sin_angle = axis_i.cross(axis_j).len() / (axis_i.len() * axis_j.len())
    if sin_angle < 1e-6:
        raise ConfigError("Board edges are parallel; corners must span a plane")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(path: str | Path | None = None) -> ConverterConfig:
    """Load and validate converter configuration from YAML.

    Parameters
    ----------
    path : str | Path | None
        Path to ``converter.yaml``.  ``None`` loads the default shipped
        alongside this module.

    Returns
    -------
    ConverterConfig
        Fully validated, frozen configuration object.

    Raises
    ------
    ConfigError
        If any field is missing or fails validation.
    FileNotFoundError
        If *path* does not exist.
    """
    if path is None:
        path = Path(__file__).parent / "converter.yaml"
    else:
        path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.info("Loading configuration from %s", path)

    data: dict[str, Any] = load_yaml(path)
    if data is None:
        raise ConfigError(f"Empty configuration file: {path}")

    try:
        # -- robot ----------------------------------------------------------
        rd = data["robot"]
        robot = RobotConfig(
            accuracy_mm=float(rd["accuracy_mm"]),
            departure_mm=float(rd["departure_mm"]),
            pouring_step_mm=float(rd["pouring_step_mm"]),
            draw_feed_mm_s=float(rd["draw_feed_mm_s"]),
            travel_feed_mm_s=float(rd["travel_feed_mm_s"]),
        )

        # -- board ----------------------------------------------------------
        board = _parse_board(data["board"])

        # -- viewport -------------------------------------------------------
        vd = data["viewport"]
        viewport = ViewportConfig(
            default_width=float(vd["default_width"]),
            default_height=float(vd["default_height"]),
        )

        # -- flatten (optional) ---------------------------------------------
        flatten = _parse_flatten(data.get("flatten"))

        config = ConverterConfig(
            robot=robot,
            board=board,
            viewport=viewport,
            flatten=flatten,
        )

        _validate_config(config)
        logger.info("Configuration loaded successfully")
        return config

    except KeyError as exc:
        raise ConfigError(
            f"Missing required configuration key: {exc}"
        ) from exc
    except (TypeError, ValueError) as exc:
        raise ConfigError(
            f"Invalid configuration value: {exc}"
        ) from exc
