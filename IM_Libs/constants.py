"""
Constants and configuration values for the inpaint mask editor.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the application.
"""

# Brush sizing
# Average image side (in pixels) at which one nominal brush unit equals one
# image pixel. Larger images scale the brush up, smaller ones never shrink it.
REFERENCE_DISPLAY_SIZE = 800
DEFAULT_BRUSH_DIAMETER = 20
MIN_BRUSH_DIAMETER = 5
MAX_BRUSH_DIAMETER = 100

# Brush modes
MODE_PAINT = "paint"
MODE_ERASE = "erase"
# Host UIs label the paint tool "draw"
MODE_ALIASES = {"draw": MODE_PAINT}

# Paint layer colors (RGBA)
PAINT_FILL_COLOR = (255, 255, 255, 128)
TRANSPARENT_COLOR = (0, 0, 0, 0)

# Binarization
BINARIZE_THRESHOLD = 128
MASK_WHITE = (255, 255, 255, 255)
MASK_BLACK = (0, 0, 0, 255)

# Encoding
MASK_MIME_TYPE = "image/png"
DEFAULT_OUTPUT_FORMAT = "PNG"
DEFAULT_MASK_FILENAME = "mask.png"
DATA_URL_PREFIX = "data:image/png;base64,"

# Supported source image formats
SUPPORTED_STANDARD_IMAGES = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tiff", ".webp"}
STANDARD_IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.gif *.tiff *.webp)"

# UI constants
DEFAULT_WINDOW_WIDTH = 1200
DEFAULT_WINDOW_HEIGHT = 800
MIN_CANVAS_SIZE = 450
PREVIEW_TINT_COLOR = (255, 64, 64)
CANVAS_BACKGROUND_COLOR = "#2d2d30"

# Safe filename characters
SAFE_FILENAME_CHARS = "-_"
FILENAME_REPLACEMENT_CHAR = "_"
