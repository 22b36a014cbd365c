import struct
import zlib
from pathlib import Path

import pytest
from PIL import Image

from tilestitch.scanner import ImageRecord


def make_image(path: Path, size=(16, 16), color=(255, 0, 0, 255), fmt=None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGBA", size, color).save(path, fmt)
    return path


def make_record(name: str, width: int, height: int, folder: str = "/tiles") -> ImageRecord:
    return ImageRecord(path=Path(folder) / name, width=width, height=height, name=name)


def make_broken_png(path: Path, size=(16, 16)) -> Path:
    """PNG with a valid header and chunk CRCs but pixel data that is not zlib."""

    def chunk(kind: bytes, data: bytes) -> bytes:
        return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))

    header = struct.pack(">IIBBBBB", size[0], size[1], 8, 6, 0, 0, 0)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", header)
        + chunk(b"IDAT", b"garbage-not-zlib" * 4)
        + chunk(b"IEND", b"")
    )
    return path


@pytest.fixture
def tile_dir(tmp_path):
    """Three 16x16 PNG tiles in distinct colours."""
    folder = tmp_path / "tiles"
    make_image(folder / "tile_01.png", color=(255, 0, 0, 255))
    make_image(folder / "tile_02.png", color=(0, 255, 0, 255))
    make_image(folder / "tile_03.png", color=(0, 0, 255, 255))
    return folder


@pytest.fixture
def corrupt_file(tile_dir):
    path = tile_dir / "tile_04.png"
    path.write_bytes(b"not an image " * 8)
    return path
