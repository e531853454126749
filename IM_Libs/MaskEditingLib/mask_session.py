"""
Mask editing session.

Ties the pieces together for a host UI: owns the current source image, the
brush selection and the stroke renderer, forwards pointer events, and runs
binarization when the user submits.

Lifecycle:
    - No image: painting disabled, pointer events ignored, export fails
    - load_image / set_source_image: fresh transparent raster; any stroke in
      progress is dropped without publishing
    - load failure: the previous image is discarded and the session stays
      disabled until another image loads
"""

import logging
from typing import Any, Callable, Optional, Tuple

from IM_Libs.MaskEditingLib.image_loader import ImageResource, load_source_image
from IM_Libs.MaskEditingLib.mask_binarizer import MaskExportConfig, export_binary_mask
from IM_Libs.MaskEditingLib.mask_errors import ImageDecodeError, MaskExportError
from IM_Libs.MaskEditingLib.mask_models import (
    BrushMode,
    BrushState,
    DisplayRect,
    MaskExport,
    SourceImage,
    validate_brush_diameter,
)
from IM_Libs.MaskEditingLib.stroke_renderer import MaskChangeSink, StrokeRenderer

logger = logging.getLogger(__name__)

# Receives the exported binary mask; returns whatever the transport returns
UploadCollaborator = Callable[[MaskExport], Any]


class MaskEditingSession:
    def __init__(
        self,
        on_mask_change: Optional[MaskChangeSink] = None,
        brush: Optional[BrushState] = None,
        export_config: Optional[MaskExportConfig] = None,
    ):
        self.on_mask_change = on_mask_change
        self.brush = brush if brush is not None else BrushState()
        self.export_config = export_config or MaskExportConfig()
        self.image: Optional[Any] = None
        self._renderer: Optional[StrokeRenderer] = None

    @property
    def source(self) -> Optional[SourceImage]:
        return self._renderer.source if self._renderer is not None else None

    @property
    def is_enabled(self) -> bool:
        return self._renderer is not None

    @property
    def is_drawing(self) -> bool:
        return self._renderer is not None and self._renderer.is_drawing

    @property
    def raster(self) -> Optional[Any]:
        return self._renderer.raster if self._renderer is not None else None

    def load_image(self, resource: ImageResource) -> SourceImage:
        """
        Decode ``resource`` and start a fresh mask for it.

        Raises:
            ImageDecodeError: Decoding failed; the session is left disabled
        """
        self._disable()
        try:
            loaded = load_source_image(resource)
        except ImageDecodeError:
            logger.warning("Image failed to load, mask editing disabled")
            raise

        self.set_source_image(loaded.source, loaded.image)
        return loaded.source

    def set_source_image(self, source: SourceImage, image: Optional[Any] = None) -> None:
        """Start a fresh mask for an image decoded by the host."""
        if self._renderer is not None and self._renderer.is_drawing:
            logger.debug("New image loaded mid-stroke, discarding stroke")
            self._renderer.discard_stroke()

        self.image = image
        self._renderer = StrokeRenderer(
            source,
            brush=self.brush,
            on_mask_change=self._publish_mask,
        )

    def set_mode(self, mode: Any) -> BrushMode:
        self.brush.mode = BrushMode.parse(mode)
        return self.brush.mode

    def set_brush_diameter(self, diameter: Any) -> float:
        self.brush.diameter = validate_brush_diameter(diameter)
        return self.brush.diameter

    def pointer_down(self, pointer_x: float, pointer_y: float, rect: DisplayRect) -> bool:
        if self._renderer is None:
            logger.debug("Pointer down before an image is loaded, ignoring")
            return False
        return self._renderer.pointer_down(pointer_x, pointer_y, rect)

    def pointer_move(self, pointer_x: float, pointer_y: float, rect: DisplayRect) -> bool:
        if self._renderer is None:
            return False
        return self._renderer.pointer_move(pointer_x, pointer_y, rect)

    def pointer_up(self) -> bool:
        if self._renderer is None:
            return False
        return self._renderer.pointer_up()

    def pointer_leave(self) -> bool:
        if self._renderer is None:
            return False
        return self._renderer.pointer_leave()

    def clear(self) -> None:
        if self._renderer is not None:
            self._renderer.clear()

    def take_dirty_box(self) -> Optional[Tuple[int, int, int, int]]:
        """Raster box repainted since the last call, for partial redraws."""
        if self._renderer is None:
            return None
        return self._renderer.take_dirty_box()

    def mask_data_url(self) -> Optional[str]:
        if self._renderer is None:
            return None
        return self._renderer.to_data_url()

    def export(self, upload: Optional[UploadCollaborator] = None) -> MaskExport:
        """
        Binarize the current mask and hand it to ``upload``.

        Runs synchronously over the whole raster.

        Args:
            upload: Optional collaborator called with the MaskExport

        Returns:
            The MaskExport that was produced

        Raises:
            MaskExportError: No image is loaded or encoding failed
        """
        if self._renderer is None:
            raise MaskExportError("No image loaded, nothing to export")

        if self._renderer.is_drawing:
            self._renderer.end_stroke()

        mask = export_binary_mask(self._renderer.raster, self.export_config)
        logger.info("Exporting %dx%d mask as %s", mask.width, mask.height, mask.mime_type)

        if upload is not None:
            upload(mask)
        return mask

    def _disable(self) -> None:
        if self._renderer is not None and self._renderer.is_drawing:
            self._renderer.discard_stroke()
        self._renderer = None
        self.image = None

    def _publish_mask(self, data_url: str) -> None:
        if self.on_mask_change is not None:
            self.on_mask_change(data_url)
