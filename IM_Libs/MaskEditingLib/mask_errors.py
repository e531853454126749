"""
Exceptions raised by the mask editing pipeline.

Layout-not-ready is not an error: pointer events against an empty display
rect are dropped without raising.
"""


class ImageDecodeError(IOError):
    """The source image could not be read or decoded; painting stays disabled."""


class MaskExportError(RuntimeError):
    """The binary mask could not be produced or encoded."""
