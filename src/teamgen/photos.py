"""Validation and storage of uploaded player photos."""

from __future__ import annotations

import logging
from pathlib import Path
from uuid import uuid4

from teamgen.config import Settings
from teamgen.errors import InvalidInputError


logger = logging.getLogger("uvicorn.error")

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif"}


def validate_photo(filename: str | None, content_type: str | None, size: int, settings: Settings) -> str:
    """Check an upload against the type filter and size limit; return its extension."""

    extension = Path(filename or "").suffix.lower()
    if extension not in ALLOWED_EXTENSIONS or (content_type or "").lower() not in ALLOWED_CONTENT_TYPES:
        raise InvalidInputError("Only image files are allowed!")
    if size > settings.max_photo_bytes:
        raise InvalidInputError(f"Photo exceeds the {settings.max_photo_bytes} byte limit")
    return extension


def store_photo(
    contents: bytes,
    *,
    filename: str | None,
    content_type: str | None,
    settings: Settings,
) -> str:
    """Store an uploaded photo and return the reference kept on the player.

    With a photo directory configured the file is written there and the
    reference is its path; otherwise only a ``memory:<bytes>`` marker is kept.
    """

    extension = validate_photo(filename, content_type, len(contents), settings)
    if settings.photo_dir is None:
        return f"memory:{len(contents)}"
    settings.photo_dir.mkdir(parents=True, exist_ok=True)
    target = settings.photo_dir / f"{uuid4().hex}{extension}"
    target.write_bytes(contents)
    logger.info("Stored photo %s (%s bytes)", target, len(contents))
    return str(target)


def discard_photo(reference: str | None, settings: Settings) -> None:
    """Remove a photo written by :func:`store_photo` for a request that failed."""

    if not reference or settings.photo_dir is None or reference.startswith("memory:"):
        return
    path = Path(reference)
    if path.parent.resolve() != settings.photo_dir.resolve():
        return
    path.unlink(missing_ok=True)
    logger.info("Discarded photo %s", path)
