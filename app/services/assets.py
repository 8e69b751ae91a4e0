"""Decoding of signature and image payloads."""

import base64
import binascii
import io
from dataclasses import dataclass
from enum import Enum

from PIL import Image, UnidentifiedImageError

from app.utils.exceptions import InvalidAssetError
from app.utils.logger import logger

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE = b"\xff\xd8\xff"


class ImageFormat(str, Enum):
    """Raster formats that can be embedded into a PDF page."""

    PNG = "png"
    JPEG = "jpeg"


_PIL_FORMATS = {ImageFormat.PNG: "PNG", ImageFormat.JPEG: "JPEG"}


@dataclass(frozen=True)
class DecodedAsset:
    """Raw encoded image bytes plus their detected format and pixel size."""

    data: bytes
    format: ImageFormat
    width: int
    height: int


def split_data_url(payload: str) -> tuple[str | None, str]:
    """Split ``data:<mime>;base64,<data>`` into ``(mime, data)``.

    Strings without a comma are returned unchanged with no MIME type.
    """
    head, sep, data = payload.partition(",")
    if not sep:
        return None, payload
    mime = None
    if head.startswith("data:"):
        mime = head[len("data:"):].split(";", 1)[0].strip().lower() or None
    return mime, data


def sniff_image_format(data: bytes) -> ImageFormat | None:
    """Detect PNG or JPEG from the leading magic bytes."""
    if data.startswith(PNG_SIGNATURE):
        return ImageFormat.PNG
    if data.startswith(JPEG_SIGNATURE):
        return ImageFormat.JPEG
    return None


def _declared_format(mime: str | None) -> ImageFormat:
    if mime in ("image/jpeg", "image/jpg"):
        return ImageFormat.JPEG
    return ImageFormat.PNG


def _decode_payload(payload: bytes | str) -> tuple[bytes, str | None]:
    """Return the binary image bytes and the declared MIME type, if any."""
    if isinstance(payload, bytes):
        if sniff_image_format(payload) is not None:
            return payload, None
        try:
            payload = payload.decode("ascii")
        except UnicodeDecodeError as e:
            raise InvalidAssetError("Image bytes are neither PNG, JPEG nor base64 text") from e

    mime, data = split_data_url(payload.strip())
    try:
        return base64.b64decode("".join(data.split()), validate=True), mime
    except (binascii.Error, ValueError) as e:
        raise InvalidAssetError(f"Image payload is not valid base64: {e}") from e


def decode_asset(payload: bytes | str) -> DecodedAsset:
    """Decode raw bytes, base64 text or a data URL into an embeddable asset.

    The format is taken from the image's magic number; the data-URL MIME type
    is only used when the bytes carry no recognisable signature.

    Raises:
        InvalidAssetError: If the payload cannot be decoded as an image.
    """
    data, mime = _decode_payload(payload)
    if not data:
        raise InvalidAssetError("Image payload is empty")

    image_format = sniff_image_format(data)
    if image_format is None:
        image_format = _declared_format(mime)
        logger.debug(f"No image signature found, using declared format {image_format.value}")

    try:
        with Image.open(io.BytesIO(data), formats=[_PIL_FORMATS[image_format]]) as img:
            width, height = img.size
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise InvalidAssetError(f"Image could not be decoded: {e}") from e

    if width <= 0 or height <= 0:
        raise InvalidAssetError(f"Image has degenerate size {width}x{height}")

    return DecodedAsset(data=data, format=image_format, width=width, height=height)
