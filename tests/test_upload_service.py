"""
Travel Crew Backend — Image Upload Boundary Tests
===================================================

What:  Tests for ImageUploadValidator (media type, empty file, size limit).
How:   Starlette UploadFile objects over in-memory buffers.
"""

import io

import pytest
from starlette.datastructures import Headers, UploadFile

from travelcrew.exceptions import ValidationError
from travelcrew.services.upload_service import ImageUploadValidator


def make_upload(content: bytes, content_type: str = "image/jpeg", size=None, filename="photo.jpg"):
    return UploadFile(
        file=io.BytesIO(content),
        size=len(content) if size is None else size,
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


class TestContentType:
    """Only image/* media types pass."""

    def setup_method(self):
        self.validator = ImageUploadValidator(max_size=1024)

    @pytest.mark.parametrize("content_type", ["image/jpeg", "image/png", "image/webp", "IMAGE/GIF"])
    def test_images_accepted(self, content_type):
        assert self.validator.validate_content_type(content_type) == content_type.lower()

    def test_parameters_stripped(self):
        assert self.validator.validate_content_type("image/png; charset=binary") == "image/png"

    @pytest.mark.parametrize("content_type", ["application/pdf", "text/plain", "", None])
    def test_non_images_rejected(self, content_type):
        with pytest.raises(ValidationError, match="Only image files are allowed"):
            self.validator.validate_content_type(content_type)


class TestSize:
    """5 MiB by default; configurable per validator."""

    def test_default_limit_message(self):
        validator = ImageUploadValidator(max_size=5_242_880)
        with pytest.raises(ValidationError, match="maximum size of 5MB"):
            validator.validate_size(5_242_881)

    def test_exact_limit_accepted(self):
        ImageUploadValidator(max_size=1024).validate_size(1024, 1024)

    def test_empty_file_rejected(self):
        with pytest.raises(ValidationError, match="Image file is empty"):
            ImageUploadValidator(max_size=1024).validate_size(0, 0)


class TestRead:
    """Tests for reading an UploadFile through the validator."""

    def setup_method(self):
        self.validator = ImageUploadValidator(max_size=16)

    @pytest.mark.asyncio
    async def test_read_returns_payload(self):
        payload = await self.validator.read(make_upload(b"\xff\xd8tiny\xff\xd9"))

        assert payload.content == b"\xff\xd8tiny\xff\xd9"
        assert payload.mime_type == "image/jpeg"
        assert payload.filename == "photo.jpg"

    @pytest.mark.asyncio
    async def test_declared_size_over_limit(self):
        with pytest.raises(ValidationError, match="maximum size"):
            await self.validator.read(make_upload(b"x" * 17))

    @pytest.mark.asyncio
    async def test_actual_size_over_limit_without_declared_size(self):
        upload = make_upload(b"x" * 40, size=0)
        with pytest.raises(ValidationError, match="maximum size"):
            await self.validator.read(upload)

    @pytest.mark.asyncio
    async def test_wrong_type_is_rejected_before_reading(self):
        upload = make_upload(b"%PDF-1.7", content_type="application/pdf", filename="doc.pdf")
        with pytest.raises(ValidationError, match="Only image files are allowed"):
            await self.validator.read(upload)
        assert upload.file.closed
