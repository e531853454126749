"""
MaskEditingLib - Mask painting and binarization

This module provides the coordinate mapper, stroke renderer, mask binarizer
and the editing session that ties them together. The PyQt5 window lives in
mask_editor_window and is not imported here.
"""

from IM_Libs.MaskEditingLib.mask_models import (
    BrushMode,
    BrushState,
    ContainTransform,
    DisplayRect,
    MaskExport,
    RgbaColor,
    SourceImage,
    StrokeSession,
)
from IM_Libs.MaskEditingLib.mask_errors import ImageDecodeError, MaskExportError
from IM_Libs.MaskEditingLib.coordinate_mapper import (
    compute_contain_transform,
    map_to_image,
    map_to_display,
    fitted_display_rect,
)
from IM_Libs.MaskEditingLib.stroke_renderer import (
    StrokeRenderer,
    compute_stroke_width,
    resolution_scale,
)
from IM_Libs.MaskEditingLib.mask_binarizer import (
    MaskExportConfig,
    binarize_mask,
    export_binary_mask,
    is_binary_mask,
)
from IM_Libs.MaskEditingLib.mask_codec import decode_data_url, encode_data_url, encode_png
from IM_Libs.MaskEditingLib.image_loader import LoadedImage, load_source_image
from IM_Libs.MaskEditingLib.mask_output import MaskFileUploader
from IM_Libs.MaskEditingLib.mask_preview import compose_preview
from IM_Libs.MaskEditingLib.mask_session import MaskEditingSession

__all__ = [
    "BrushMode",
    "BrushState",
    "ContainTransform",
    "DisplayRect",
    "MaskExport",
    "RgbaColor",
    "SourceImage",
    "StrokeSession",
    "ImageDecodeError",
    "MaskExportError",
    "compute_contain_transform",
    "map_to_image",
    "map_to_display",
    "fitted_display_rect",
    "StrokeRenderer",
    "compute_stroke_width",
    "resolution_scale",
    "MaskExportConfig",
    "binarize_mask",
    "export_binary_mask",
    "is_binary_mask",
    "decode_data_url",
    "encode_data_url",
    "encode_png",
    "LoadedImage",
    "load_source_image",
    "MaskFileUploader",
    "compose_preview",
    "MaskEditingSession",
]
