"""
Display-to-image coordinate mapping under "contain" scaling.

The host shows the source image scaled to fit entirely inside its display
element while preserving aspect ratio, which leaves empty bands either above
and below (letterbox) or left and right (pillarbox). Pointer positions arrive
in viewport coordinates and must be converted into native image pixels
before anything is drawn.

Functions:
    compute_contain_transform: Fit parameters for one image/rect pair
    map_to_image: Viewport point to image-space point
    map_to_display: Image-space point back to viewport point
    fitted_display_rect: Viewport box actually covered by the image

Example:
    >>> source = SourceImage(1000, 500)
    >>> rect = DisplayRect(left=0, top=0, width=400, height=400)
    >>> transform = compute_contain_transform(source, rect)
    >>> transform.offset_y, transform.scale_y
    (100.0, 2.5)
"""

from typing import Optional

from IM_Libs.MaskEditingLib.mask_models import ContainTransform, DisplayRect, Point, SourceImage


def compute_contain_transform(source: SourceImage, rect: DisplayRect) -> Optional[ContainTransform]:
    """
    Compute how ``source`` is fitted into ``rect``.

    Aspect ratios are compared by cross-multiplication so that equal ratios
    are detected exactly and produce zero offsets on both axes.

    Args:
        source: Native image dimensions
        rect: Display element bounds

    Returns:
        The ContainTransform, or None while the rect has no area
    """
    if not rect.is_laid_out:
        return None

    image_side = source.width * rect.height
    display_side = rect.width * source.height

    if image_side > display_side:
        # Wider than the box: full width, bands top and bottom
        effective_width = float(rect.width)
        effective_height = rect.width * source.height / source.width
        offset_x = 0.0
        offset_y = (rect.height - effective_height) / 2
    elif image_side < display_side:
        # Taller than the box: full height, bands left and right
        effective_width = rect.height * source.width / source.height
        effective_height = float(rect.height)
        offset_x = (rect.width - effective_width) / 2
        offset_y = 0.0
    else:
        effective_width = float(rect.width)
        effective_height = float(rect.height)
        offset_x = 0.0
        offset_y = 0.0

    return ContainTransform(
        effective_width=effective_width,
        effective_height=effective_height,
        offset_x=offset_x,
        offset_y=offset_y,
        scale_x=source.width / effective_width,
        scale_y=source.height / effective_height,
    )


def map_to_image(
    pointer_x: float,
    pointer_y: float,
    rect: DisplayRect,
    source: SourceImage,
) -> Optional[Point]:
    """
    Convert a viewport point into image-space pixel coordinates.

    Points over the letterbox bands map outside ``[0, width) x [0, height)``;
    callers draw them anyway and the raster clips.

    Returns:
        (image_x, image_y), or None while the rect is not laid out
    """
    transform = compute_contain_transform(source, rect)
    if transform is None:
        return None

    image_x = (pointer_x - rect.left - transform.offset_x) * transform.scale_x
    image_y = (pointer_y - rect.top - transform.offset_y) * transform.scale_y
    return (image_x, image_y)


def map_to_display(
    image_x: float,
    image_y: float,
    rect: DisplayRect,
    source: SourceImage,
) -> Optional[Point]:
    """Inverse of map_to_image."""
    transform = compute_contain_transform(source, rect)
    if transform is None:
        return None

    pointer_x = image_x / transform.scale_x + transform.offset_x + rect.left
    pointer_y = image_y / transform.scale_y + transform.offset_y + rect.top
    return (pointer_x, pointer_y)


def fitted_display_rect(source: SourceImage, rect: DisplayRect) -> Optional[DisplayRect]:
    """Return the part of ``rect`` the image occupies, or None before layout."""
    transform = compute_contain_transform(source, rect)
    if transform is None:
        return None

    return DisplayRect(
        left=rect.left + transform.offset_x,
        top=rect.top + transform.offset_y,
        width=transform.effective_width,
        height=transform.effective_height,
    )
