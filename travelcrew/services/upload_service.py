"""
Travel Crew Backend — Image Upload Boundary
=============================================

What:  Checks the `image` part of a multipart request before any controller
       logic runs.
How:   Rejects non-image content types, empty files and payloads above
       MAX_IMAGE_SIZE (5 MiB by default), then reads the bytes into memory.

Validation order (cheapest first):
    1. Content-Type header of the part must be image/*
    2. Declared size (UploadFile.size) against the limit, before reading
    3. Actual byte count against the limit, after reading
"""

import logging
from dataclasses import dataclass
from typing import Optional

from starlette.datastructures import UploadFile

from travelcrew.exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImagePayload:
    content: bytes
    mime_type: str
    filename: str


class ImageUploadValidator:
    """Size and media type gate for uploaded images."""

    def __init__(self, max_size: int):
        self.max_size = max_size

    @property
    def max_size_mb(self) -> float:
        return self.max_size / (1024 * 1024)

    def validate_content_type(self, content_type: Optional[str]) -> str:
        mime_type = (content_type or "").split(";")[0].strip().lower()
        if not mime_type.startswith("image/"):
            raise ValidationError(
                message="Only image files are allowed",
                field="image",
                context={"content_type": content_type},
            )
        return mime_type

    def validate_size(self, content_length: Optional[int], actual_size: Optional[int] = None) -> None:
        """
        Raises ValidationError when either the declared or the actual size
        exceeds the limit, or the file is empty.
        """
        if content_length and content_length > self.max_size:
            raise ValidationError(
                message=f"Image exceeds the maximum size of {self.max_size_mb:g}MB",
                field="image",
                context={"max_size": self.max_size, "reported_size": content_length},
            )
        if actual_size is None:
            return
        if actual_size == 0:
            raise ValidationError(message="Image file is empty", field="image")
        if actual_size > self.max_size:
            raise ValidationError(
                message=f"Image exceeds the maximum size of {self.max_size_mb:g}MB",
                field="image",
                context={"max_size": self.max_size, "actual_size": actual_size},
            )

    async def read(self, upload: UploadFile) -> ImagePayload:
        """Validate and read an uploaded image. The upload is always closed."""
        try:
            mime_type = self.validate_content_type(upload.content_type)
            self.validate_size(upload.size)
            # One byte past the limit is enough to detect an oversized file
            content = await upload.read(self.max_size + 1)
            self.validate_size(None, len(content))
        finally:
            await upload.close()

        logger.debug(
            "Accepted image upload: filename=%s, type=%s, size=%d bytes",
            upload.filename or "unknown",
            mime_type,
            len(content),
        )
        return ImagePayload(
            content=content,
            mime_type=mime_type,
            filename=upload.filename or "upload",
        )
