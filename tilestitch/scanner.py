"""
Metadata scanner.

Lists candidate files in the source directory and reads each image's pixel
dimensions. Files are decoded on a thread pool; one unreadable file never
stops the others. The surviving records are re-sorted by name once every
task has finished, so the layout does not depend on completion order.
"""

from __future__ import annotations

import locale
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from PIL import Image, UnidentifiedImageError

from tilestitch import console
from tilestitch.errors import DecodeError, NoInputError


@dataclass(frozen=True)
class ImageRecord:
    path: Path
    width: int
    height: int
    name: str

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)


def find_images(source_dir: Path, extensions: Iterable[str]) -> List[Path]:
    """Return files directly inside source_dir whose suffix matches, ignoring case."""
    source_dir = Path(source_dir)
    if not source_dir.is_dir():
        raise NoInputError(f"Source directory not found: {source_dir}")

    wanted = {ext.lower() for ext in extensions}
    return sorted(
        entry for entry in source_dir.iterdir() if entry.is_file() and entry.suffix.lower() in wanted
    )


def read_image_record(path: Path) -> ImageRecord:
    """Decode the header of one image and verify its data."""
    path = Path(path)
    try:
        with Image.open(path) as img:
            width, height = img.size
            # verify() catches bad chunks but never decodes pixels
            img.verify()
        with Image.open(path) as img:
            img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
        raise DecodeError(path, str(exc) or exc.__class__.__name__) from exc

    if width <= 0 or height <= 0:
        raise DecodeError(path, f"invalid dimensions {width}x{height}")

    return ImageRecord(path=path, width=width, height=height, name=path.name)


def sort_records(records: Iterable[ImageRecord]) -> List[ImageRecord]:
    """
    Order by name using the active locale's collation, ignoring case first.

    Names equal except for case fall back to a case-sensitive comparison, then
    to the full path.
    """
    return sorted(
        records,
        key=lambda rec: (locale.strxfrm(rec.name.casefold()), locale.strxfrm(rec.name), str(rec.path)),
    )


def scan_images(
    paths: Sequence[Path],
    *,
    strict: bool = False,
    workers: Optional[int] = None,
    quiet: bool = False,
) -> Tuple[List[ImageRecord], List[DecodeError]]:
    """
    Read an ImageRecord for every path.

    Returns (records, failures). Unreadable files are excluded and reported;
    with strict=True the first failure (in input order) is raised instead, once
    all sibling reads have finished. Raises NoInputError when nothing is left.
    """
    if not paths:
        raise NoInputError("No input images to scan")

    console.info(f"Reading metadata for {len(paths)} file(s)...", quiet)

    records: List[ImageRecord] = []
    failures: List[DecodeError] = []

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="scan") as pool:
        futures = [pool.submit(read_image_record, path) for path in paths]
        for future in futures:
            try:
                records.append(future.result())
            except DecodeError as exc:
                failures.append(exc)

    for failure in failures:
        console.warn(f"Excluding {failure.path}: {failure.reason}")

    if strict and failures:
        raise failures[0]

    if not records:
        raise NoInputError(f"None of the {len(paths)} candidate file(s) could be decoded")

    console.info(f"✓ Valid metadata for {len(records)} of {len(paths)} image(s)", quiet)
    return sort_records(records), failures
