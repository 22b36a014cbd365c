"""
Run one stitch: [convert] -> scan -> plan -> render [-> metadata].

Per-file stages fan out on thread pools; rendering happens once, on the
calling thread, after every per-file task has finished.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from tilestitch import console
from tilestitch.compositor import render_atlas
from tilestitch.config import StitchConfig
from tilestitch.convert import convert_all
from tilestitch.errors import NoInputError, RenderError, StitchError
from tilestitch.layout import LayoutResult, plan_layout
from tilestitch.metadata import write_metadata
from tilestitch.scanner import ImageRecord, find_images, scan_images


@dataclass
class RunResult:
    output_path: Path
    layout: LayoutResult
    excluded: List[StitchError] = field(default_factory=list)
    metadata_path: Optional[Path] = None


def collect_inputs(config: StitchConfig) -> Sequence[Path]:
    """Matching files in the source directory; conversion happens later in plan()."""
    sources = find_images(config.source_dir, config.extensions)
    if not sources:
        pattern = "/".join(f"*{ext}" for ext in config.extensions)
        raise NoInputError(f"No files found matching {pattern} in {config.source_dir}")

    console.info(f"Found {len(sources)} {config.input_format.upper()} file(s) to process", config.quiet)
    return sources


def plan(config: StitchConfig) -> Tuple[LayoutResult, List[ImageRecord], List[StitchError]]:
    """
    Everything up to, but not including, rendering.

    Returns (layout, records, excluded). Safe to call repeatedly: it never
    writes the output file.
    """
    sources = collect_inputs(config)
    excluded: List[StitchError] = []

    if config.needs_conversion:
        sources, conversion_failures = convert_all(
            sources, config.scratch_dir, workers=config.workers, quiet=config.quiet
        )
        excluded.extend(conversion_failures)
        if not sources:
            raise NoInputError("No files were successfully converted. Cannot continue.")

    records, decode_failures = scan_images(
        sources, strict=config.strict, workers=config.workers, quiet=config.quiet
    )
    excluded.extend(decode_failures)

    layout = plan_layout(
        records,
        config.layout_strategy,
        columns=config.columns,
        padding=config.padding,
        quiet=config.quiet,
    )
    return layout, records, excluded


def run(config: StitchConfig) -> RunResult:
    config.validate()
    background = config.background_rgba()

    console.banner(f"tilestitch: {config.source_dir} -> {config.output_path}", config.quiet)

    layout, records, excluded = plan(config)
    output_path = render_atlas(layout, config.output_path, background, quiet=config.quiet)

    metadata_path = None
    if config.metadata_path is not None:
        try:
            metadata_path = write_metadata(layout, output_path, config.metadata_path)
        except OSError as exc:
            # an atlas without its metadata is not a complete output
            output_path.unlink(missing_ok=True)
            raise RenderError(f"Could not write metadata: {exc}", config.metadata_path) from exc
        console.info(f"✓ Metadata saved: {metadata_path}", config.quiet)

    if excluded:
        console.warn(f"{len(excluded)} file(s) excluded:")
        for failure in excluded:
            console.warn(f"  [{failure.stage}] {failure}")

    console.info(f"✓ Combined {len(records)} image(s) into {output_path}", config.quiet)
    return RunResult(output_path=output_path, layout=layout, excluded=excluded, metadata_path=metadata_path)
