# tests/test_utils/test_covers.py

import pytest
from pathlib import Path
from lending.exceptions import CoverStorageError, InvalidInputError
from lending.utils.covers import LocalBlobStore, validate_cover


def test_validate_png(png_bytes):
    assert validate_cover(png_bytes, "cover.png") == ".png"


def test_validate_jpeg_extensions(jpeg_bytes):
    assert validate_cover(jpeg_bytes, "cover.JPG") == ".jpg"
    assert validate_cover(jpeg_bytes, "cover.jpeg") == ".jpeg"


@pytest.mark.parametrize("filename", ["cover.gif", "cover.webp", "cover", "cover.png.exe"])
def test_validate_rejects_extension(png_bytes, filename):
    with pytest.raises(InvalidInputError, match="Invalid file type"):
        validate_cover(png_bytes, filename)


def test_validate_rejects_large_file(png_bytes):
    with pytest.raises(InvalidInputError, match="too large"):
        validate_cover(png_bytes, "cover.png", max_bytes=len(png_bytes) - 1)


def test_validate_rejects_non_image():
    with pytest.raises(InvalidInputError, match="could not be read"):
        validate_cover(b"definitely not an image", "cover.png")


def test_validate_rejects_mismatched_content(jpeg_bytes):
    with pytest.raises(InvalidInputError, match="does not match"):
        validate_cover(jpeg_bytes, "cover.png")


def test_local_blob_store_saves(tmp_path, png_bytes):
    store = LocalBlobStore(str(tmp_path / "covers"), "/media/covers/")
    ref = store.save(png_bytes, ".PNG")

    assert ref.startswith("/media/covers/")
    name = ref.rsplit("/", 1)[1]
    assert name.endswith(".png")
    assert (tmp_path / "covers" / name).read_bytes() == png_bytes


def test_local_blob_store_unique_names(tmp_path, png_bytes):
    store = LocalBlobStore(str(tmp_path))
    assert store.save(png_bytes, ".png") != store.save(png_bytes, ".png")


def test_local_blob_store_write_failure(tmp_path, png_bytes):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("file in the way")
    store = LocalBlobStore(str(blocker))

    with pytest.raises(CoverStorageError):
        store.save(png_bytes, ".png")
