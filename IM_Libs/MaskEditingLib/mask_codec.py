"""
PNG and data URL encoding for mask rasters.

The paint layer is published to hosts as a self-contained PNG data URL after
every gesture, and the exported binary mask travels as raw PNG bytes. PNG is
lossless and keeps the alpha channel, so the paint layer round-trips exactly.

Functions:
    encode_png: Encode an image as PNG bytes
    encode_data_url: Encode an image as a ``data:image/png;base64,`` string
    decode_data_url: Decode a base64 image data URL back to an RGBA image
"""

import base64
import binascii
import io
from typing import Any

from PIL import Image

from IM_Libs.constants import DATA_URL_PREFIX, DEFAULT_OUTPUT_FORMAT
from IM_Libs.MaskEditingLib.mask_errors import ImageDecodeError, MaskExportError


def encode_png(image: Any) -> bytes:
    """
    Encode an image as PNG bytes.

    Args:
        image: PIL Image to encode

    Returns:
        Encoded file contents

    Raises:
        TypeError: If image is not a PIL Image
        MaskExportError: If the image is empty or the encoder fails
    """
    if not hasattr(image, "mode"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")

    width, height = image.size
    if width <= 0 or height <= 0:
        raise MaskExportError(f"Cannot encode an empty {width}x{height} raster")

    buffer = io.BytesIO()
    try:
        image.save(buffer, format=DEFAULT_OUTPUT_FORMAT)
    except (OSError, ValueError, KeyError, SystemError) as e:
        raise MaskExportError(f"Failed to encode PNG image: {str(e)}") from e

    data = buffer.getvalue()
    if not data:
        raise MaskExportError("PNG encoder produced no data")
    return data


def encode_data_url(image: Any) -> str:
    """Encode an image as a PNG data URL."""
    payload = base64.b64encode(encode_png(image)).decode("ascii")
    return f"{DATA_URL_PREFIX}{payload}"


def is_data_url(value: Any) -> bool:
    return isinstance(value, str) and value.startswith("data:")


def decode_data_url(data_url: str) -> Any:
    """
    Decode a base64 image data URL.

    Any ``data:image/<type>;base64,`` header is accepted.

    Returns:
        Decoded PIL Image in RGBA mode

    Raises:
        ImageDecodeError: If the URL is malformed or its payload is not an image
    """
    if not is_data_url(data_url):
        raise ImageDecodeError("Not a data URL")

    header, sep, payload = data_url.partition(",")
    if not sep or not header.endswith(";base64"):
        raise ImageDecodeError(f"Unsupported data URL header: {header[:40]}")

    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"Invalid base64 payload: {str(e)}") from e

    try:
        img = Image.open(io.BytesIO(raw))
        img.load()
    except Exception as e:
        raise ImageDecodeError(f"Failed to decode data URL image: {str(e)}") from e

    if img.mode != "RGBA":
        img = img.convert("RGBA")
    return img
