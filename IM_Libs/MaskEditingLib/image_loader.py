"""
Source image loading.

Decodes the image a mask will be painted over and reports its native pixel
dimensions. Painting cannot start until this has succeeded; every failure is
raised as ImageDecodeError so hosts never wait on an image that will not
arrive.

Classes:
    LoadedImage: Decoded RGBA image with its SourceImage dimensions

Functions:
    load_source_image: Decode from a path, raw bytes, or a data URL
    get_supported_image_formats: List of accepted file extensions
    is_supported_format: Check a path's extension
"""

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Union

from PIL import Image

from IM_Libs.constants import SUPPORTED_STANDARD_IMAGES
from IM_Libs.MaskEditingLib.mask_codec import decode_data_url, is_data_url
from IM_Libs.MaskEditingLib.mask_errors import ImageDecodeError
from IM_Libs.MaskEditingLib.mask_models import SourceImage

logger = logging.getLogger(__name__)

ImageResource = Union[str, Path, bytes, bytearray]


@dataclass(frozen=True)
class LoadedImage:
    image: Any
    source: SourceImage


def get_supported_image_formats() -> List[str]:
    """
    Get list of supported standard image formats.

    Returns:
        List of file extensions (e.g., ['.bmp', '.gif', ...])
    """
    return sorted(SUPPORTED_STANDARD_IMAGES)


def is_supported_format(file_path: Path) -> bool:
    return Path(file_path).suffix.lower() in SUPPORTED_STANDARD_IMAGES


def load_source_image(resource: ImageResource) -> LoadedImage:
    """
    Decode an image resource.

    Args:
        resource: File path, encoded image bytes, or a ``data:`` URL

    Returns:
        LoadedImage with an RGBA copy of the image and its dimensions

    Raises:
        ImageDecodeError: If the resource is missing, unsupported, or undecodable
    """
    if isinstance(resource, (bytes, bytearray)):
        img = _decode_bytes(bytes(resource), "<bytes>")
    elif is_data_url(resource):
        img = decode_data_url(resource)
    elif isinstance(resource, (str, Path)):
        img = _load_file(Path(resource))
    else:
        raise ImageDecodeError(f"Unsupported image resource type: {type(resource)}")

    try:
        source = SourceImage(*img.size)
    except ValueError as e:
        raise ImageDecodeError(str(e)) from e

    logger.info("Loaded %dx%d source image", source.width, source.height)
    return LoadedImage(image=img, source=source)


def _load_file(file_path: Path) -> Any:
    if not file_path.exists():
        raise ImageDecodeError(f"Image file not found: {file_path}")

    if not file_path.is_file():
        raise ImageDecodeError(f"Path is not a file: {file_path}")

    if not is_supported_format(file_path):
        raise ImageDecodeError(
            f"Unsupported image format '{file_path.suffix}'. "
            f"Supported: {', '.join(get_supported_image_formats())}"
        )

    try:
        data = file_path.read_bytes()
    except OSError as e:
        raise ImageDecodeError(f"Failed to read {file_path}: {str(e)}") from e

    return _decode_bytes(data, str(file_path))


def _decode_bytes(data: bytes, label: str) -> Any:
    if not data:
        raise ImageDecodeError(f"Image data is empty: {label}")

    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except Exception as e:
        raise ImageDecodeError(f"Failed to load image from {label}: {str(e)}") from e

    if img.mode != "RGBA":
        img = img.convert("RGBA")
    return img
