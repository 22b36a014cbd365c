"""Combine a folder of PNG or TARGA images into a single grid atlas."""

from tilestitch.config import StitchConfig
from tilestitch.errors import (
    ConfigError,
    ConversionError,
    DecodeError,
    NoInputError,
    RenderError,
    StitchError,
)
from tilestitch.pipeline import RunResult, run

__all__ = [
    "ConfigError",
    "ConversionError",
    "DecodeError",
    "NoInputError",
    "RenderError",
    "RunResult",
    "StitchConfig",
    "StitchError",
    "run",
]
