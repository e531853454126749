"""
Two-level mask binarization.

Converts the paint layer into a strict black/white, fully opaque mask for an
inpainting service. Every pixel whose mean RGB brightness is above the
threshold becomes white, everything else black. The paint layer stores
painted pixels as white and cleared pixels as transparent black, so painted
regions come out white regardless of their partial alpha.

Functions:
    binarize_mask: Threshold a raster into a new black/white image
    is_binary_mask: Check that an image only holds the two mask colors
    export_binary_mask: Binarize and encode for the upload collaborator

Example:
    >>> layer = Image.new("RGBA", (64, 64), (0, 0, 0, 0))
    >>> mask = binarize_mask(layer)
    >>> mask.getpixel((0, 0))
    (0, 0, 0, 255)
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import numpy as np
from PIL import Image

from IM_Libs.constants import (
    BINARIZE_THRESHOLD,
    DEFAULT_MASK_FILENAME,
    MASK_BLACK,
    MASK_MIME_TYPE,
    MASK_WHITE,
)
from IM_Libs.MaskEditingLib.mask_codec import encode_png
from IM_Libs.MaskEditingLib.mask_errors import MaskExportError
from IM_Libs.MaskEditingLib.mask_models import MaskExport

logger = logging.getLogger(__name__)


def binarize_mask(raster: Any, threshold: int = BINARIZE_THRESHOLD) -> Any:
    """
    Threshold a raster into pure black and pure white.

    The source is never modified. Alpha is ignored on input and forced to
    255 on output.

    Args:
        raster: PIL Image (any mode, converted to RGBA for reading)
        threshold: Brightness ``(R + G + B) / 3`` must exceed this to be white

    Returns:
        New RGBA image of the same size

    Raises:
        TypeError: If raster is not a PIL Image
        ValueError: If threshold is outside 0-255
    """
    if not hasattr(raster, "mode"):
        raise TypeError(f"Expected PIL Image, got {type(raster)}")

    if threshold < 0 or threshold > 255:
        raise ValueError(f"threshold must be 0-255, got {threshold}")

    pixels = np.asarray(raster.convert("RGBA"), dtype=np.uint16)

    # (R + G + B) / 3 > t  <=>  R + G + B > 3t, kept in integers
    white = pixels[:, :, :3].sum(axis=2) > 3 * threshold

    height, width = white.shape
    result = np.empty((height, width, 4), dtype=np.uint8)
    result[:] = MASK_BLACK
    result[white] = MASK_WHITE
    return Image.fromarray(result)


def is_binary_mask(image: Any) -> bool:
    """True when every pixel is exactly MASK_BLACK or MASK_WHITE."""
    pixels = np.asarray(image.convert("RGBA"))
    black = np.all(pixels == MASK_BLACK, axis=2)
    white = np.all(pixels == MASK_WHITE, axis=2)
    return bool(np.all(black | white))


@dataclass
class MaskExportConfig:
    """Configuration for mask export.

    Attributes:
        threshold: Brightness threshold (0-255, default: 128)
        filename: Name reported to the upload collaborator
    """
    threshold: int = BINARIZE_THRESHOLD
    filename: str = DEFAULT_MASK_FILENAME

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "threshold": self.threshold,
            "filename": self.filename,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MaskExportConfig":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items()
                    if k in cls.__dataclass_fields__}
        return cls(**filtered)


def export_binary_mask(raster: Any, config: Optional[MaskExportConfig] = None) -> MaskExport:
    """
    Binarize ``raster`` and encode it as a mask file.

    Args:
        raster: Paint layer at source resolution
        config: Export settings (default: MaskExportConfig())

    Returns:
        MaskExport with PNG bytes and the raster's dimensions

    Raises:
        MaskExportError: If the raster is missing, empty, or cannot be encoded
    """
    config = config or MaskExportConfig()

    if raster is None:
        raise MaskExportError("No mask raster to export")

    width, height = raster.size
    if width <= 0 or height <= 0:
        raise MaskExportError(f"Cannot export an empty {width}x{height} mask")

    mask = binarize_mask(raster, config.threshold)
    data = encode_png(mask)
    logger.debug("Exported %dx%d binary mask (%d bytes)", width, height, len(data))

    return MaskExport(
        data=data,
        width=width,
        height=height,
        mime_type=MASK_MIME_TYPE,
        filename=config.filename,
    )
