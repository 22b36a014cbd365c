"""Error types raised by the stitching stages."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class StitchError(RuntimeError):
    """Base class for every failure raised by tilestitch."""

    stage = "stitch"


class ConfigError(StitchError):
    """Raised when the run configuration is invalid."""

    stage = "config"


class NoInputError(StitchError):
    """Raised when no usable input image is left to lay out."""

    stage = "scan"


class DecodeError(StitchError):
    """Raised when a single image cannot be decoded."""

    stage = "scan"

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = Path(path)
        self.reason = reason


class ConversionError(StitchError):
    """Raised when a single file cannot be converted to the intermediate format."""

    stage = "convert"

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = Path(path)
        self.reason = reason


class RenderError(StitchError):
    """Raised when the canvas cannot be allocated, composited or saved."""

    stage = "render"

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(f"{message} ({path})" if path else message)
        self.path = Path(path) if path else None
