"""
Mask editing data models.

This module defines the value types shared by the coordinate mapper, the
stroke renderer and the editing session.

Classes:
    SourceImage: Native pixel dimensions of the image being masked
    DisplayRect: On-screen box the image is rendered into
    ContainTransform: Display-to-image mapping for one pointer event
    BrushMode: Closed set of compositing modes (paint / erase)
    BrushState: Current tool selection
    StrokeSession: Points of one in-progress gesture
    MaskExport: Encoded binary mask handed to the upload collaborator

Type Aliases:
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
    Point: An (x, y) tuple of floats
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from IM_Libs.constants import (
    DEFAULT_BRUSH_DIAMETER,
    DEFAULT_MASK_FILENAME,
    MASK_MIME_TYPE,
    MAX_BRUSH_DIAMETER,
    MIN_BRUSH_DIAMETER,
    MODE_ALIASES,
    MODE_ERASE,
    MODE_PAINT,
)

RgbaColor = Tuple[int, int, int, int]
Point = Tuple[float, float]


@dataclass(frozen=True)
class SourceImage:
    width: int
    height: int

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def aspect(self) -> float:
        return self.width / self.height


@dataclass(frozen=True)
class DisplayRect:
    """Bounding box of the element the image is drawn into, in viewport pixels."""

    left: float
    top: float
    width: float
    height: float

    @property
    def is_laid_out(self) -> bool:
        """False until the host has given the element a non-empty size."""
        return self.width > 0 and self.height > 0


@dataclass(frozen=True)
class ContainTransform:
    """
    Result of fitting a source image inside a display rect ("contain").

    Attributes:
        effective_width: Displayed image width in display pixels
        effective_height: Displayed image height in display pixels
        offset_x: Horizontal pillarbox band width (0 when letterboxed)
        offset_y: Vertical letterbox band height (0 when pillarboxed)
        scale_x: Image pixels per display pixel along x
        scale_y: Image pixels per display pixel along y
    """

    effective_width: float
    effective_height: float
    offset_x: float
    offset_y: float
    scale_x: float
    scale_y: float


class BrushMode(Enum):
    PAINT = MODE_PAINT
    ERASE = MODE_ERASE

    @classmethod
    def parse(cls, value: Any) -> "BrushMode":
        """Accept a BrushMode or its host-facing name ("draw", "paint", "erase")."""
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        name = MODE_ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            raise ValueError(
                f"Unknown brush mode: {value!r}. Use 'draw', 'paint' or 'erase'."
            ) from None


@dataclass
class BrushState:
    """Tool selection exposed to the host UI.

    Attributes:
        mode: Compositing mode for new strokes
        diameter: Nominal brush diameter (resolution independent, 5-100)
    """
    mode: BrushMode = BrushMode.PAINT
    diameter: float = DEFAULT_BRUSH_DIAMETER

    def __post_init__(self):
        self.mode = BrushMode.parse(self.mode)
        self.diameter = validate_brush_diameter(self.diameter)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "mode": self.mode.value,
            "diameter": self.diameter,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BrushState":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items()
                    if k in cls.__dataclass_fields__}
        return cls(**filtered)


def validate_brush_diameter(diameter: Any) -> float:
    try:
        value = float(diameter)
    except (TypeError, ValueError):
        raise TypeError(f"Brush diameter must be a number, got {type(diameter)}") from None

    if not (MIN_BRUSH_DIAMETER <= value <= MAX_BRUSH_DIAMETER):
        raise ValueError(
            f"Brush diameter must be {MIN_BRUSH_DIAMETER}-{MAX_BRUSH_DIAMETER}, got {diameter}"
        )
    return value


@dataclass
class StrokeSession:
    """Points of a single pointer-down to pointer-up gesture.

    Mode and width are captured at pointer-down so one gesture is never
    split across two compositing modes.
    """
    mode: BrushMode
    line_width: float
    points: List[Point] = field(default_factory=list)

    @property
    def last_point(self) -> Optional[Point]:
        return self.points[-1] if self.points else None


@dataclass(frozen=True)
class MaskExport:
    """Binary mask file ready for upload."""

    data: bytes
    width: int
    height: int
    mime_type: str = MASK_MIME_TYPE
    filename: str = DEFAULT_MASK_FILENAME
