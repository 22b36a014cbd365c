"""Run configuration for the stitching pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from PIL import ImageColor

from tilestitch.errors import ConfigError

FIXED_GRID = "fixed-grid"
PACKED_GRID = "packed-grid"
LAYOUTS = (FIXED_GRID, PACKED_GRID)

# Input format -> (matched extensions, default layout)
INPUT_FORMATS = {
    "png": ((".png",), FIXED_GRID),
    "tga": ((".tga",), PACKED_GRID),
}

DEFAULT_COLUMNS = 8
DEFAULT_PADDING = 0
DEFAULT_BACKGROUND = "#000000"
DEFAULT_SCRATCH_DIR = Path("temp_images")


@dataclass(frozen=True)
class StitchConfig:
    source_dir: Path
    output_path: Path
    input_format: str = "png"
    layout: Optional[str] = None
    columns: int = DEFAULT_COLUMNS
    padding: int = DEFAULT_PADDING
    background: str = DEFAULT_BACKGROUND
    scratch_dir: Path = DEFAULT_SCRATCH_DIR
    metadata_path: Optional[Path] = None
    strict: bool = False
    workers: Optional[int] = None
    quiet: bool = False

    @property
    def extensions(self) -> Tuple[str, ...]:
        return INPUT_FORMATS[self.input_format][0]

    @property
    def needs_conversion(self) -> bool:
        return self.input_format == "tga"

    @property
    def layout_strategy(self) -> str:
        """Explicit layout, or the one matching the input format."""
        if self.layout:
            return self.layout
        return INPUT_FORMATS[self.input_format][1]

    def background_rgba(self) -> Tuple[int, int, int, int]:
        try:
            color = ImageColor.getrgb(self.background)
        except ValueError as exc:
            raise ConfigError(f"Invalid background colour: {self.background!r}") from exc
        if len(color) == 3:
            color = color + (255,)
        return color  # type: ignore[return-value]

    def validate(self) -> StitchConfig:
        """Check every field up front; returns self so calls can be chained."""
        if self.input_format not in INPUT_FORMATS:
            raise ConfigError(
                f"Unknown input format {self.input_format!r} (expected one of {', '.join(INPUT_FORMATS)})"
            )
        if self.layout is not None and self.layout not in LAYOUTS:
            raise ConfigError(f"Unknown layout {self.layout!r} (expected one of {', '.join(LAYOUTS)})")
        if self.columns < 1:
            raise ConfigError(f"Column count must be at least 1, got {self.columns}")
        if self.padding < 0:
            raise ConfigError(f"Padding must not be negative, got {self.padding}")
        if self.workers is not None and self.workers < 1:
            raise ConfigError(f"Worker count must be at least 1, got {self.workers}")
        if Path(self.output_path).suffix.lower() != ".png":
            raise ConfigError(f"Output must be a .png file: {self.output_path}")
        if self.metadata_path is not None and Path(self.metadata_path) == Path(self.output_path):
            raise ConfigError("Metadata path must differ from the output image path")
        self.background_rgba()
        return self
