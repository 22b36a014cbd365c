from pathlib import Path

import pytest

from tilestitch.errors import DecodeError, NoInputError
from tilestitch.scanner import find_images, read_image_record, scan_images, sort_records

from conftest import make_broken_png, make_image, make_record


def test_find_images_matches_extension_case_insensitively(tmp_path):
    make_image(tmp_path / "a.png")
    make_image(tmp_path / "B.PNG")
    make_image(tmp_path / "c.Png")
    make_image(tmp_path / "skip.tga", fmt="TGA")
    make_image(tmp_path / "nested" / "deep.png")
    (tmp_path / "folder.png").mkdir()

    found = find_images(tmp_path, [".png"])

    assert sorted(p.name for p in found) == ["B.PNG", "a.png", "c.Png"]


def test_find_images_missing_directory(tmp_path):
    with pytest.raises(NoInputError):
        find_images(tmp_path / "nope", [".png"])


def test_read_image_record(tmp_path):
    path = make_image(tmp_path / "wide.png", size=(40, 10))
    record = read_image_record(path)

    assert record.size == (40, 10)
    assert record.name == "wide.png"
    assert record.path == path


def test_read_image_record_corrupt(corrupt_file):
    with pytest.raises(DecodeError) as info:
        read_image_record(corrupt_file)
    assert info.value.path == corrupt_file


def test_sort_records_by_name_then_path():
    records = [
        make_record("tile_10.png", 1, 1),
        make_record("tile_02.png", 1, 1, folder="/b"),
        make_record("tile_01.png", 1, 1),
        make_record("tile_02.png", 1, 1, folder="/a"),
    ]
    ordered = sort_records(records)

    assert [(r.name, str(r.path.parent)) for r in ordered] == [
        ("tile_01.png", "/tiles"),
        ("tile_02.png", "/a"),
        ("tile_02.png", "/b"),
        ("tile_10.png", "/tiles"),
    ]


def test_scan_images_sorts_regardless_of_input_order(tile_dir):
    paths = sorted(tile_dir.glob("*.png"), reverse=True)
    records, failures = scan_images(paths, workers=3, quiet=True)

    assert failures == []
    assert [r.name for r in records] == ["tile_01.png", "tile_02.png", "tile_03.png"]


def test_scan_images_skips_corrupt_file(tile_dir, corrupt_file, capsys):
    paths = sorted(tile_dir.glob("*.png"))
    records, failures = scan_images(paths, quiet=True)

    assert len(records) == 3
    assert [f.path for f in failures] == [corrupt_file]
    assert corrupt_file.name in capsys.readouterr().err


def test_scan_images_strict_raises(tile_dir, corrupt_file):
    with pytest.raises(DecodeError) as info:
        scan_images(sorted(tile_dir.glob("*.png")), strict=True, quiet=True)
    assert info.value.path == corrupt_file


def test_scan_images_nothing_decodable(tmp_path):
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"\x00" * 32)

    with pytest.raises(NoInputError):
        scan_images([bad], quiet=True)
    with pytest.raises(NoInputError):
        scan_images([], quiet=True)


def test_scan_images_missing_file_is_excluded(tile_dir):
    records, failures = scan_images([tile_dir / "tile_01.png", Path(tile_dir / "gone.png")], quiet=True)

    assert [r.name for r in records] == ["tile_01.png"]
    assert failures[0].path.name == "gone.png"


def test_sort_records_ignores_case_first():
    records = [make_record("b.png", 1, 1), make_record("B.png", 1, 1), make_record("a.png", 1, 1)]

    ordered = [r.name for r in sort_records(records)]

    assert ordered[0] == "a.png"
    assert sorted(ordered[1:]) == ["B.png", "b.png"]
    assert sort_records(records) == sort_records(list(reversed(records)))


def test_read_image_record_decodes_pixel_data(tmp_path):
    broken = make_broken_png(tmp_path / "bad_idat.png")

    with pytest.raises(DecodeError) as info:
        read_image_record(broken)
    assert info.value.path == broken
