"""Converter configuration loading, validation and the board frame."""

from svg_motion.configs.board import BoardFrame
from svg_motion.configs.loader import (
    BoardConfig,
    ConfigError,
    ConverterConfig,
    FlattenConfig,
    RobotConfig,
    ViewportConfig,
    load_config,
)

__all__ = [
    "BoardConfig",
    "BoardFrame",
    "ConfigError",
    "ConverterConfig",
    "FlattenConfig",
    "RobotConfig",
    "ViewportConfig",
    "load_config",
]
