# src/tools/image_input.py
"""
Validation and encoding of the problem image uploaded by the student.

The UI keeps a self-describing data URI for display; only the base64
payload and the MIME type are forwarded to the model.
"""

import io
import base64
from dataclasses import dataclass
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from src.agents.tutor_agent.errors import InvalidInputError

MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MB per upload

# extensions offered by the file picker
IMAGE_EXTENSIONS = ["png", "jpg", "jpeg", "gif", "webp", "bmp", "heic", "heif"]


@dataclass(frozen=True)
class ImageUpload:
    raw: bytes
    mime_type: str
    payload_b64: str

    @property
    def size_bytes(self) -> int:
        return len(self.raw)

    @property
    def data_uri(self) -> str:
        return to_data_uri(self.mime_type, self.payload_b64)


def to_data_uri(mime_type: str, payload_b64: str) -> str:
    return f"data:{mime_type};base64,{payload_b64}"


def split_data_uri(uri: str) -> Tuple[str, str]:
    """
    Split "data:<mime>;base64,<payload>" into (mime, payload).

    Raises InvalidInputError for anything that is not a base64 data URI.
    """
    if not uri or not uri.startswith("data:") or "," not in uri:
        raise InvalidInputError("Not a data URI.")
    header, payload = uri[len("data:"):].split(",", 1)
    if not header.endswith(";base64") or not payload:
        raise InvalidInputError("Data URI is not base64 encoded.")
    return header[: -len(";base64")], payload


def load_image_upload(raw: bytes, mime_type: Optional[str] = None) -> ImageUpload:
    """
    Validate uploaded bytes and return an ImageUpload.

    - empty or larger than MAX_UPLOAD_BYTES -> InvalidInputError
    - declared MIME type not image/* -> InvalidInputError
    Any declared image/* type is accepted as is (HEIC, SVG, ... go straight
    to the model). Without a declared type, Pillow sniffs the format; bytes it
    cannot identify -> InvalidInputError.
    """
    if not raw:
        raise InvalidInputError("Uploaded file is empty.")
    if len(raw) > MAX_UPLOAD_BYTES:
        raise InvalidInputError(
            f"Uploaded file too large ({len(raw)} bytes). Max allowed is {MAX_UPLOAD_BYTES} bytes."
        )
    if mime_type and not mime_type.startswith("image/"):
        raise InvalidInputError(f"Unsupported file type: {mime_type}")
    if not mime_type:
        mime_type = _sniff_mime_type(raw)

    return ImageUpload(
        raw=raw,
        mime_type=mime_type,
        payload_b64=base64.b64encode(raw).decode("ascii"),
    )


def _sniff_mime_type(raw: bytes) -> str:
    try:
        with Image.open(io.BytesIO(raw)) as img:
            fmt = img.format
    except UnidentifiedImageError as e:
        raise InvalidInputError("Uploaded file is not a recognizable image.") from e
    mime_type = Image.MIME.get(fmt or "")
    if not mime_type or not mime_type.startswith("image/"):
        raise InvalidInputError(f"Unsupported image format: {fmt}")
    return mime_type
