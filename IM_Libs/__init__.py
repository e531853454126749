"""
IM_Libs - Inpaint Mask Library Modules

This package contains core functionality for the inpaint mask editor,
organized into specialized sub-packages:

- MaskEditingLib: Coordinate mapping, stroke rendering, mask binarization
  and the desktop editing window
"""

__version__ = "0.1.0"
