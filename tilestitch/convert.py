"""
TARGA -> PNG pre-conversion.

Each source file is converted independently into the scratch directory. The
scratch directory belongs to the run: it is created when missing and never
emptied here, so stale PNGs from earlier runs stay until the caller removes
them.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from PIL import Image, ImageFile, UnidentifiedImageError

from tilestitch import console
from tilestitch.errors import ConversionError


def target_path_for(source: Path, scratch_dir: Path) -> Path:
    return Path(scratch_dir) / f"{Path(source).stem}.png"


def convert_image(source: Path, target: Path) -> Path:
    """Decode source and re-encode it as PNG at target."""
    source = Path(source)
    target = Path(target)
    try:
        with Image.open(source) as img:
            img.load()
            if img.mode not in ("RGB", "RGBA", "L", "LA", "P"):
                img = img.convert("RGBA")
            img.save(target, "PNG")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
        target.unlink(missing_ok=True)
        raise ConversionError(source, str(exc) or exc.__class__.__name__) from exc
    return target


def convert_all(
    sources: Sequence[Path],
    scratch_dir: Path,
    *,
    workers: Optional[int] = None,
    quiet: bool = False,
) -> Tuple[List[Path], List[ConversionError]]:
    """
    Convert every source into scratch_dir concurrently.

    Returns (converted targets in source order, failures). A failing file is
    reported and skipped; it never cancels the other conversions.
    """
    scratch_dir = Path(scratch_dir)
    if not scratch_dir.exists():
        scratch_dir.mkdir(parents=True, exist_ok=True)
        console.info(f"Created temporary directory: {scratch_dir}", quiet)

    console.info(f"Converting {len(sources)} file(s) to PNG...", quiet)

    converted: List[Path] = []
    failures: List[ConversionError] = []

    # Two sources differing only in extension case would write the same PNG.
    jobs: List[Tuple[Path, Path]] = []
    claimed = {}
    for source in sources:
        target = target_path_for(source, scratch_dir)
        if target in claimed:
            failures.append(ConversionError(source, f"same target as {claimed[target]}: {target}"))
            continue
        claimed[target] = source
        jobs.append((source, target))

    # Accept files whose pixel data ends early instead of rejecting them outright.
    # The flag is process-global: any other thread decoding with Pillow while
    # the pool runs is also lenient. Scanning and rendering only start after
    # the pool has finished and the flag is restored.
    previous = ImageFile.LOAD_TRUNCATED_IMAGES
    ImageFile.LOAD_TRUNCATED_IMAGES = True
    try:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="convert") as pool:
            futures = [pool.submit(convert_image, source, target) for source, target in jobs]
            for future in futures:
                try:
                    converted.append(future.result())
                except ConversionError as exc:
                    failures.append(exc)
    finally:
        ImageFile.LOAD_TRUNCATED_IMAGES = previous

    for failure in failures:
        console.warn(f"Error converting {failure.path} to PNG: {failure.reason}")

    console.info(f"✓ Converted {len(converted)} of {len(sources)} file(s) to PNG", quiet)
    return converted, failures
