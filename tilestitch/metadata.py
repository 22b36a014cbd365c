"""Atlas metadata JSON: where each source image ended up."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict

from tilestitch.layout import LayoutResult


def build_metadata(layout: LayoutResult, atlas_path: Path) -> Dict[str, Any]:
    atlas_width = layout.canvas_width
    atlas_height = layout.canvas_height

    metadata: Dict[str, Any] = {
        "image": Path(atlas_path).name,
        "atlas_width": atlas_width,
        "atlas_height": atlas_height,
        "layout": layout.strategy,
        "columns": layout.columns,
        "rows": layout.rows,
        "total_tiles": len(layout.placements),
        "tiles": [],
    }

    for index, placement in enumerate(layout.placements):
        record = placement.record
        metadata["tiles"].append({
            "index": index,
            "name": record.name,
            "source_path": str(record.path),
            "atlas_x": placement.left,
            "atlas_y": placement.top,
            "width": record.width,
            "height": record.height,
            "uv_rect": {
                "x": placement.left / atlas_width,
                "y": placement.top / atlas_height,
                "width": record.width / atlas_width,
                "height": record.height / atlas_height,
            },
        })

    return metadata


def write_metadata(layout: LayoutResult, atlas_path: Path, metadata_path: Path) -> Path:
    """Write the JSON next to a temp name, then rename it into place."""
    metadata_path = Path(metadata_path)
    metadata_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{metadata_path.stem}-", suffix=".json.tmp", dir=str(metadata_path.parent)
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(build_metadata(layout, atlas_path), f, indent=2)
        os.replace(tmp_name, metadata_path)
    except OSError:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return metadata_path
