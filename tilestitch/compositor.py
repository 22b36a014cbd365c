"""Paint a LayoutResult onto a canvas and save it as a PNG."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Tuple

from PIL import Image

from tilestitch import console
from tilestitch.errors import RenderError
from tilestitch.layout import LayoutResult


def _allocate_canvas(layout: LayoutResult, background: Tuple[int, int, int, int]) -> Image.Image:
    if layout.canvas_width <= 0 or layout.canvas_height <= 0:
        raise RenderError(f"Refusing to render a {layout.canvas_width}x{layout.canvas_height} canvas")
    try:
        return Image.new("RGBA", layout.size, background)
    except (MemoryError, ValueError) as exc:
        raise RenderError(f"Could not allocate {layout.canvas_width}x{layout.canvas_height} canvas: {exc}") from exc


def composite(
    layout: LayoutResult,
    background: Tuple[int, int, int, int] = (0, 0, 0, 255),
    quiet: bool = False,
) -> Image.Image:
    """Build the atlas in memory; placements are painted strictly in order."""
    atlas = _allocate_canvas(layout, background)

    for placement in layout.placements:
        path = placement.record.path
        try:
            with Image.open(path) as src:
                tile = src.convert("RGBA")
        except (Image.DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
            raise RenderError(f"Could not composite image: {exc}", path) from exc

        # alpha_composite needs the source to fit; fixed-grid tiles may run past the edge.
        visible_w = min(tile.width, atlas.width - placement.left)
        visible_h = min(tile.height, atlas.height - placement.top)
        if visible_w > 0 and visible_h > 0:
            if (visible_w, visible_h) != tile.size:
                tile = tile.crop((0, 0, visible_w, visible_h))
            atlas.alpha_composite(tile, dest=(placement.left, placement.top))
        console.info(f"  {placement.record.name:30s} at ({placement.left}, {placement.top})", quiet)

    return atlas


def save_atomic(image: Image.Image, output_path: Path) -> Path:
    """Write PNG to a sibling temp file, then rename it over output_path."""
    output_path = Path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{output_path.stem}-", suffix=".png.tmp", dir=str(output_path.parent)
        )
    except OSError as exc:
        raise RenderError(f"Could not prepare output location: {exc}", output_path) from exc

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as handle:
            image.save(handle, "PNG")
        os.replace(tmp_path, output_path)
    except (OSError, ValueError) as exc:
        tmp_path.unlink(missing_ok=True)
        raise RenderError(f"Could not save atlas: {exc}", output_path) from exc

    return output_path


def render_atlas(
    layout: LayoutResult,
    output_path: Path,
    background: Tuple[int, int, int, int] = (0, 0, 0, 255),
    quiet: bool = False,
) -> Path:
    """
    Render the layout to output_path, overwriting any existing file.

    Raises RenderError on any failure; the previous output file, if any, is
    left as it was.
    """
    console.info(f"Compositing {len(layout.placements)} image(s)...", quiet)
    atlas = composite(layout, background, quiet)
    saved = save_atomic(atlas, output_path)
    console.info(f"✓ Atlas saved: {saved}", quiet)
    console.info(f"  Size: {layout.canvas_width}x{layout.canvas_height}", quiet)
    return saved
