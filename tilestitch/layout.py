"""
Grid layout planning.

Two strategies place sorted ImageRecords on one canvas:

  fixed-grid   every image gets a cell the size of the first record, laid out
               row-major over a fixed number of columns. Images of a different
               size are NOT resized: larger ones spill into (and get painted
               over by) their neighbours, smaller ones leave background showing.
  packed-grid  ceil(sqrt(n)) columns; images are packed left to right and each
               row is as tall as its tallest image, plus optional padding.

Both return a LayoutResult; nothing here touches pixels.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from tilestitch import console
from tilestitch.config import DEFAULT_COLUMNS, DEFAULT_PADDING, FIXED_GRID, LAYOUTS, PACKED_GRID
from tilestitch.errors import ConfigError, NoInputError
from tilestitch.scanner import ImageRecord


@dataclass(frozen=True)
class Placement:
    record: ImageRecord
    left: int
    top: int

    @property
    def right(self) -> int:
        return self.left + self.record.width

    @property
    def bottom(self) -> int:
        return self.top + self.record.height


@dataclass(frozen=True)
class LayoutResult:
    canvas_width: int
    canvas_height: int
    placements: Tuple[Placement, ...]
    strategy: str
    columns: int
    rows: int

    @property
    def size(self) -> Tuple[int, int]:
        return (self.canvas_width, self.canvas_height)

    def out_of_bounds(self) -> List[Placement]:
        """Placements that extend past the canvas edge (fixed-grid with mixed sizes)."""
        return [
            p for p in self.placements if p.right > self.canvas_width or p.bottom > self.canvas_height
        ]


def plan_fixed_grid(records: Sequence[ImageRecord], columns: int = DEFAULT_COLUMNS) -> LayoutResult:
    if not records:
        raise NoInputError("Cannot lay out zero images")
    if columns < 1:
        raise ConfigError(f"Column count must be at least 1, got {columns}")

    cell_width = records[0].width
    cell_height = records[0].height
    rows = math.ceil(len(records) / columns)

    placements = []
    for index, record in enumerate(records):
        row, col = divmod(index, columns)
        placements.append(Placement(record, left=col * cell_width, top=row * cell_height))

    return LayoutResult(
        canvas_width=columns * cell_width,
        canvas_height=rows * cell_height,
        placements=tuple(placements),
        strategy=FIXED_GRID,
        columns=columns,
        rows=rows,
    )


def plan_packed_grid(records: Sequence[ImageRecord], padding: int = DEFAULT_PADDING) -> LayoutResult:
    if not records:
        raise NoInputError("Cannot lay out zero images")
    if padding < 0:
        raise ConfigError(f"Padding must not be negative, got {padding}")

    columns = math.ceil(math.sqrt(len(records)))
    rows = math.ceil(len(records) / columns)

    current_x = 0
    current_y = 0
    max_height_in_row = 0
    col_index = 0
    final_width = 0
    final_height = 0
    placements = []

    for record in records:
        placements.append(Placement(record, left=current_x, top=current_y))

        # Rightmost covered pixel, measured before the trailing padding is added.
        final_width = max(final_width, current_x + record.width)
        max_height_in_row = max(max_height_in_row, record.height)
        col_index += 1

        if col_index >= columns:
            current_y += max_height_in_row + padding
            current_x = 0
            col_index = 0
            max_height_in_row = 0
        else:
            current_x += record.width + padding

        final_height = current_y + max_height_in_row

    return LayoutResult(
        canvas_width=final_width,
        canvas_height=final_height,
        placements=tuple(placements),
        strategy=PACKED_GRID,
        columns=columns,
        rows=rows,
    )


def plan_layout(
    records: Sequence[ImageRecord],
    strategy: str,
    *,
    columns: int = DEFAULT_COLUMNS,
    padding: int = DEFAULT_PADDING,
    quiet: bool = False,
) -> LayoutResult:
    """Dispatch to the requested strategy and print a short summary."""
    if strategy == FIXED_GRID:
        layout = plan_fixed_grid(records, columns)
        mismatched = [rec for rec in records if rec.size != records[0].size]
        if mismatched:
            cell = f"{records[0].width}x{records[0].height}"
            console.warn(f"{len(mismatched)} image(s) differ from the {cell} cell size and may overlap or clip:")
            for rec in mismatched:
                console.warn(f"  {rec.name} is {rec.width}x{rec.height}")
    elif strategy == PACKED_GRID:
        layout = plan_packed_grid(records, padding)
    else:
        raise ConfigError(f"Unknown layout {strategy!r} (expected one of {', '.join(LAYOUTS)})")

    console.info(
        f"Creating {layout.strategy} layout with {layout.columns} columns and up to {layout.rows} rows",
        quiet,
    )
    console.info(f"Final dimensions: {layout.canvas_width}x{layout.canvas_height}", quiet)
    return layout
