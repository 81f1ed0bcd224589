# lending/utils/covers.py
import logging
import uuid
from io import BytesIO
from pathlib import Path
from typing import Iterable, Optional, Protocol

from PIL import Image, UnidentifiedImageError

from lending.exceptions import CoverStorageError, InvalidInputError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = (".png", ".jpeg", ".jpg")
MAX_COVER_BYTES = 5 * 1024 * 1024

# Pillow format names accepted for each extension
_FORMATS = {
    ".png": {"PNG"},
    ".jpg": {"JPEG", "MPO"},
    ".jpeg": {"JPEG", "MPO"},
}


class BlobStore(Protocol):
    """Opaque storage for cover images"""

    def save(self, data: bytes, extension: str) -> str:
        """Persist the bytes and return a reference to them"""
        ...


class LocalBlobStore:
    """Writes covers as uniquely named files under a base directory."""

    def __init__(self, base_dir: str = 'storage/covers', url_prefix: str = '/storage/covers'):
        self.base_dir = Path(base_dir)
        self.url_prefix = url_prefix.rstrip('/')

    def save(self, data: bytes, extension: str) -> str:
        filename = f"{uuid.uuid4()}{extension.lower()}"
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            (self.base_dir / filename).write_bytes(data)
        except OSError as e:
            logger.error("Failed to save cover %s: %s", filename, e)
            raise CoverStorageError("Could not save the cover image.") from e

        logger.info("Saved cover image %s (%d bytes)", filename, len(data))
        return f"{self.url_prefix}/{filename}"


def cover_extension(filename: str) -> str:
    return Path(filename).suffix.lower()


def validate_cover(
    data: bytes,
    filename: str,
    allowed_extensions: Optional[Iterable[str]] = None,
    max_bytes: int = MAX_COVER_BYTES
) -> str:
    """Check an uploaded cover before it is handed to a blob store.

    Args:
        data: Raw image bytes
        filename: Original file name, used for its extension
        allowed_extensions: Extensions to accept (default: png, jpeg, jpg)
        max_bytes: Maximum accepted size in bytes

    Returns:
        The normalized (lower-case) extension

    Raises:
        InvalidInputError: If the extension, size or content is not acceptable
    """
    allowed = tuple(allowed_extensions or ALLOWED_EXTENSIONS)
    ext = cover_extension(filename)

    if ext not in allowed:
        raise InvalidInputError("Invalid file type. Only PNG, JPEG, or JPG are allowed.")
    if len(data) > max_bytes:
        raise InvalidInputError(f"File is too large. Maximum size is {max_bytes // (1024 * 1024)}MB.")

    try:
        img = Image.open(BytesIO(data))
        img_format = img.format
        img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise InvalidInputError("Cover image could not be read.") from e

    if img_format not in _FORMATS.get(ext, set()):
        raise InvalidInputError(f"Cover content is {img_format}, which does not match the {ext} extension.")

    return ext
