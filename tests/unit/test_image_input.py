"""Unit tests for upload validation and data URI handling."""

import io
import base64

import pytest
from PIL import Image

from src.agents.tutor_agent.errors import InvalidInputError
from src.tools.image_input import (
    IMAGE_EXTENSIONS,
    MAX_UPLOAD_BYTES,
    load_image_upload,
    split_data_uri,
    to_data_uri,
)


class TestLoadImageUpload:

    def test_valid_png(self, png_bytes):
        upload = load_image_upload(png_bytes, "image/png")

        assert upload.mime_type == "image/png"
        assert upload.size_bytes == len(png_bytes)
        assert base64.b64decode(upload.payload_b64) == png_bytes
        assert upload.data_uri == f"data:image/png;base64,{upload.payload_b64}"

    def test_mime_inferred_when_missing(self):
        buf = io.BytesIO()
        Image.new("RGB", (2, 2)).save(buf, format="JPEG")

        upload = load_image_upload(buf.getvalue(), None)

        assert upload.mime_type == "image/jpeg"

    @pytest.mark.parametrize("mime", ["application/pdf", "text/plain", "video/mp4"])
    def test_non_image_mime_rejected(self, png_bytes, mime):
        with pytest.raises(InvalidInputError):
            load_image_upload(png_bytes, mime)

    @pytest.mark.parametrize("raw, mime", [
        (b"\x00\x00\x00\x18ftypheic\x00\x00\x00\x00mif1heic", "image/heic"),
        (b'<svg xmlns="http://www.w3.org/2000/svg" width="10" height="10"/>', "image/svg+xml"),
    ])
    def test_declared_image_types_pillow_cannot_read_are_accepted(self, raw, mime):
        upload = load_image_upload(raw, mime)

        assert upload.mime_type == mime
        assert base64.b64decode(upload.payload_b64) == raw

    def test_unrecognizable_bytes_without_mime_rejected(self):
        with pytest.raises(InvalidInputError, match="recognizable"):
            load_image_upload(b"definitely not an image", None)

    def test_heic_offered_by_file_picker(self):
        assert {"heic", "heif"} <= set(IMAGE_EXTENSIONS)

    def test_empty_rejected(self):
        with pytest.raises(InvalidInputError, match="empty"):
            load_image_upload(b"", "image/png")

    def test_oversized_rejected(self):
        with pytest.raises(InvalidInputError, match="too large"):
            load_image_upload(b"\0" * (MAX_UPLOAD_BYTES + 1), "image/png")


class TestDataUri:

    def test_split_returns_mime_and_payload(self, png_b64):
        mime, payload = split_data_uri(to_data_uri("image/webp", png_b64))

        assert mime == "image/webp"
        assert payload == png_b64

    @pytest.mark.parametrize("uri", [
        "",
        "image/png;base64,AAAA",
        "data:image/png,AAAA",
        "data:image/png;base64,",
    ])
    def test_split_rejects_malformed(self, uri):
        with pytest.raises(InvalidInputError):
            split_data_uri(uri)
