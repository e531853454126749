"""
On-screen preview of the paint layer over its source image.

The paint layer is white, which disappears over bright photos, so the
preview recolors it with a tint while keeping its alpha.
"""

from typing import Any, Tuple

from PIL import Image

from IM_Libs.constants import PREVIEW_TINT_COLOR


def compose_preview(image: Any, raster: Any, tint: Tuple[int, int, int] = PREVIEW_TINT_COLOR) -> Any:
    """
    Composite ``raster`` over ``image``.

    Args:
        image: Source image (any mode)
        raster: Paint layer, same size as image
        tint: RGB color used to show painted pixels

    Returns:
        New RGBA image

    Raises:
        ValueError: If the sizes differ
    """
    if image.size != raster.size:
        raise ValueError(f"Image size {image.size} does not match mask size {raster.size}")

    overlay = Image.new("RGBA", raster.size, tuple(tint) + (255,))
    overlay.putalpha(raster.convert("RGBA").getchannel("A"))
    return Image.alpha_composite(image.convert("RGBA"), overlay)
