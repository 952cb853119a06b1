"""
Pre-fetched image payloads.

The fetch layer hands over a mapping from image key (the source URL) to
either raw bytes or a ``data:<mime>;base64,<payload>`` string. Payloads are
decoded and checked with Pillow before any bytes reach the host.
"""

import base64
import binascii
import re
from dataclasses import dataclass
from io import BytesIO
from typing import Mapping, Optional, Union

from PIL import Image

from slidegraph.exceptions import ImagePayloadError

ImagePayload = Union[bytes, bytearray, str]
ImageDataMap = Mapping[str, ImagePayload]

DATA_URI_PATTERN = re.compile(r"^data:([^;]+);base64,(.+)$", re.DOTALL)


@dataclass(frozen=True)
class DecodedImage:
    data: bytes
    mime_type: Optional[str]
    width: int
    height: int


def split_data_uri(uri: str) -> tuple:
    """Return ``(mime_type, base64_payload)`` of a data URI."""
    match = DATA_URI_PATTERN.match(uri.strip())
    if not match:
        raise ImagePayloadError("Invalid base64 data")
    return match.group(1), match.group(2)


def decode_payload(payload: Optional[ImagePayload]) -> DecodedImage:
    """Decode and verify one payload; raises :class:`ImagePayloadError`."""
    if not payload:
        raise ImagePayloadError("Image payload is missing")

    mime_type = None
    if isinstance(payload, (bytes, bytearray)):
        data = bytes(payload)
    elif isinstance(payload, str):
        mime_type, encoded = split_data_uri(payload)
        try:
            data = base64.b64decode("".join(encoded.split()), validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImagePayloadError("Invalid base64 data", cause=e) from e
    else:
        raise ImagePayloadError(f"Unsupported image payload type: {type(payload).__name__}")

    try:
        with Image.open(BytesIO(data)) as image:
            image_format = image.format
            width, height = image.size
            image.verify()
    except Exception as e:
        raise ImagePayloadError("Image bytes could not be decoded", cause=e) from e

    return DecodedImage(
        data=data,
        mime_type=mime_type or Image.MIME.get(image_format or ""),
        width=width,
        height=height
    )


def encode_data_uri(data: bytes, mime_type: str = "image/png") -> str:
    """Inverse of :func:`split_data_uri`, as produced by the fetch layer."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"
