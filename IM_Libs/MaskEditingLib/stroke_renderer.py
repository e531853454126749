"""
Freehand stroke rendering into a native-resolution paint layer.

Pointer drags are turned into round-capped line segments drawn straight into
an RGBA raster the size of the source image. Brush width is given in nominal
units and scaled by the image resolution so the visible thickness stays the
same whatever the image size, without ever shrinking below the nominal size.

Compositing:
    - paint: source-over with the paint fill color
    - erase: destination-out with the identical geometry, so erasing the same
      path that was painted returns every pixel to fully transparent

Each segment only touches the pixels inside its bounding box, so the cost of
a pointer move is proportional to the brush size, not the image size.

Example:
    >>> renderer = StrokeRenderer(SourceImage(1600, 1200), BrushState(diameter=20))
    >>> renderer.stroke_width()
    35.0
    >>> rect = DisplayRect(0, 0, 400, 300)
    >>> renderer.pointer_down(50, 50, rect)
    True
    >>> renderer.pointer_move(150, 50, rect)
    True
    >>> renderer.pointer_up()
    True
"""

import logging
import math
from typing import Any, Callable, Dict, Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw

from IM_Libs.constants import PAINT_FILL_COLOR, REFERENCE_DISPLAY_SIZE, TRANSPARENT_COLOR
from IM_Libs.MaskEditingLib.coordinate_mapper import map_to_image
from IM_Libs.MaskEditingLib.mask_codec import encode_data_url
from IM_Libs.MaskEditingLib.mask_models import (
    BrushMode,
    BrushState,
    DisplayRect,
    Point,
    RgbaColor,
    SourceImage,
    StrokeSession,
)

logger = logging.getLogger(__name__)

# Receives the paint layer as a PNG data URL after every gesture
MaskChangeSink = Callable[[str], None]

Box = Tuple[int, int, int, int]


def resolution_scale(source: SourceImage, reference_size: float = REFERENCE_DISPLAY_SIZE) -> float:
    """Average image side divided by the reference display size."""
    return ((source.width + source.height) / 2) / reference_size


def compute_stroke_width(
    diameter: float,
    source: SourceImage,
    reference_size: float = REFERENCE_DISPLAY_SIZE,
) -> float:
    """
    Convert a nominal brush diameter into image-space pixels.

    Args:
        diameter: Nominal brush diameter
        source: Image being painted
        reference_size: Average side length at which one unit is one pixel

    Returns:
        ``diameter * max(resolution_scale, 1)``
    """
    return diameter * max(resolution_scale(source, reference_size), 1.0)


def _segment_bounds(start: Point, end: Point, line_width: float, size: Tuple[int, int]) -> Optional[Box]:
    radius = line_width / 2
    left = max(0, int(math.floor(min(start[0], end[0]) - radius)) - 1)
    top = max(0, int(math.floor(min(start[1], end[1]) - radius)) - 1)
    right = min(size[0], int(math.ceil(max(start[0], end[0]) + radius)) + 2)
    bottom = min(size[1], int(math.ceil(max(start[1], end[1]) + radius)) + 2)

    if right <= left or bottom <= top:
        return None
    return (left, top, right, bottom)


def _union_box(first: Optional[Box], second: Box) -> Box:
    if first is None:
        return second
    return (
        min(first[0], second[0]),
        min(first[1], second[1]),
        max(first[2], second[2]),
        max(first[3], second[3]),
    )


def _segment_coverage(start: Point, end: Point, line_width: float, box: Box) -> Any:
    """Rasterize one round-capped segment into an 'L' image covering ``box``."""
    left, top, right, bottom = box
    coverage = Image.new("L", (right - left, bottom - top), 0)
    draw = ImageDraw.Draw(coverage)

    x0, y0 = start[0] - left, start[1] - top
    x1, y1 = end[0] - left, end[1] - top
    radius = line_width / 2

    if (x0, y0) != (x1, y1):
        draw.line([(x0, y0), (x1, y1)], fill=255, width=max(1, int(round(line_width))))

    # Round caps; consecutive segments share an end point, which also rounds the joins
    for cx, cy in ((x0, y0), (x1, y1)):
        draw.ellipse([cx - radius, cy - radius, cx + radius, cy + radius], fill=255)

    return coverage


def _composite_paint(region: np.ndarray, coverage: np.ndarray, color: RgbaColor) -> np.ndarray:
    """Source-over of ``color`` through ``coverage`` (straight alpha)."""
    result = region.copy()
    covered = coverage > 0
    if not covered.any():
        return result

    src_alpha = coverage[covered] * (color[3] / 255.0)
    dst = region[covered].astype(np.float32)
    dst_alpha = dst[:, 3] / 255.0

    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    src_rgb = np.array(color[:3], dtype=np.float32)
    weighted = (
        src_rgb[None, :] * src_alpha[:, None]
        + dst[:, :3] * (dst_alpha * (1.0 - src_alpha))[:, None]
    )
    out_rgb = np.where(
        out_alpha[:, None] > 0,
        weighted / np.maximum(out_alpha, 1e-6)[:, None],
        0.0,
    )

    pixels = np.concatenate([out_rgb, (out_alpha * 255.0)[:, None]], axis=1)
    result[covered] = np.clip(np.rint(pixels), 0, 255).astype(np.uint8)
    return result


def _composite_erase(region: np.ndarray, coverage: np.ndarray, color: RgbaColor) -> np.ndarray:
    """Destination-out: scale destination alpha by the uncovered fraction."""
    result = region.copy()
    alpha = region[:, :, 3].astype(np.float32) * (1.0 - coverage)
    result[:, :, 3] = np.clip(np.rint(alpha), 0, 255).astype(np.uint8)
    # Fully cleared pixels read back as transparent black
    result[result[:, :, 3] == 0] = 0
    return result


_COMPOSITORS: Dict[BrushMode, Callable[[np.ndarray, np.ndarray, RgbaColor], np.ndarray]] = {
    BrushMode.PAINT: _composite_paint,
    BrushMode.ERASE: _composite_erase,
}


class StrokeRenderer:
    """
    Pointer-driven stroke state machine over a native-resolution raster.

    States are Idle (no StrokeSession) and Drawing. pointer_down always starts
    a new, disconnected path; pointer_up and pointer_leave both end it and
    publish the raster to ``on_mask_change``.
    """

    def __init__(
        self,
        source: SourceImage,
        brush: Optional[BrushState] = None,
        on_mask_change: Optional[MaskChangeSink] = None,
        fill_color: RgbaColor = PAINT_FILL_COLOR,
        reference_size: float = REFERENCE_DISPLAY_SIZE,
    ):
        if not isinstance(source, SourceImage):
            raise TypeError(f"Expected SourceImage, got {type(source)}")
        if reference_size <= 0:
            raise ValueError(f"reference_size must be positive, got {reference_size}")

        self.source = source
        self.brush = brush if brush is not None else BrushState()
        self.on_mask_change = on_mask_change
        self.fill_color = tuple(fill_color)
        self.reference_size = reference_size
        self._raster = Image.new("RGBA", source.size, TRANSPARENT_COLOR)
        self._stroke: Optional[StrokeSession] = None
        self._dirty_box: Optional[Box] = None

    @property
    def raster(self) -> Any:
        """The live paint layer. Callers must copy before modifying."""
        return self._raster

    @property
    def is_drawing(self) -> bool:
        return self._stroke is not None

    @property
    def stroke(self) -> Optional[StrokeSession]:
        return self._stroke

    def stroke_width(self) -> float:
        return compute_stroke_width(self.brush.diameter, self.source, self.reference_size)

    def take_dirty_box(self) -> Optional[Box]:
        """Raster box changed since the last call, or None if nothing changed."""
        box = self._dirty_box
        self._dirty_box = None
        return box

    # Pointer events (viewport coordinates)

    def pointer_down(self, pointer_x: float, pointer_y: float, rect: DisplayRect) -> bool:
        point = map_to_image(pointer_x, pointer_y, rect, self.source)
        if point is None:
            logger.warning("Display rect %sx%s not laid out, ignoring pointer down", rect.width, rect.height)
            return False
        self.begin_stroke(point)
        return True

    def pointer_move(self, pointer_x: float, pointer_y: float, rect: DisplayRect) -> bool:
        if self._stroke is None:
            return False
        point = map_to_image(pointer_x, pointer_y, rect, self.source)
        if point is None:
            return False
        return self.extend_stroke(point)

    def pointer_up(self) -> bool:
        return self.end_stroke()

    def pointer_leave(self) -> bool:
        return self.end_stroke()

    # Image-space primitives

    def begin_stroke(self, point: Point) -> None:
        """Start a new sub-path at ``point`` and stamp a dot there."""
        if self._stroke is not None:
            logger.debug("Dropping unfinished stroke with %d points", len(self._stroke.points))

        self._stroke = StrokeSession(
            mode=self.brush.mode,
            line_width=self.stroke_width(),
            points=[point],
        )
        self._draw_segment(point, point)

    def extend_stroke(self, point: Point) -> bool:
        """Draw from the current path cursor to ``point`` and move the cursor there."""
        if self._stroke is None:
            return False

        self._draw_segment(self._stroke.last_point, point)
        self._stroke.points.append(point)
        return True

    def end_stroke(self) -> bool:
        """Finish the gesture and publish the raster. No-op when idle."""
        if self._stroke is None:
            return False

        stroke = self._stroke
        self._stroke = None
        logger.debug(
            "Finished %s stroke: %d points, width %.1fpx",
            stroke.mode.value, len(stroke.points), stroke.line_width,
        )

        if self.on_mask_change is not None:
            self.on_mask_change(self.to_data_url())
        return True

    def discard_stroke(self) -> None:
        """Forget the in-progress gesture without publishing."""
        self._stroke = None

    def clear(self) -> None:
        """Reset the raster to fully transparent."""
        self._stroke = None
        self._raster = Image.new("RGBA", self.source.size, TRANSPARENT_COLOR)
        self._dirty_box = (0, 0) + self.source.size

    def to_data_url(self) -> str:
        return encode_data_url(self._raster)

    def _draw_segment(self, start: Point, end: Point) -> None:
        stroke = self._stroke
        box = _segment_bounds(start, end, stroke.line_width, self._raster.size)
        if box is None:
            return

        coverage = _segment_coverage(start, end, stroke.line_width, box)
        region = np.array(self._raster.crop(box), dtype=np.uint8)
        composite = _COMPOSITORS[stroke.mode]
        result = composite(region, np.asarray(coverage, dtype=np.float32) / 255.0, self.fill_color)
        self._raster.paste(Image.fromarray(result), box[:2])
        self._dirty_box = _union_box(self._dirty_box, box)
