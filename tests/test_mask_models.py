"""
Unit tests for mask_models module.

Tests validation and serialization of the mask editing value types.
"""

import pytest

from IM_Libs.MaskEditingLib.mask_models import (
    BrushMode,
    BrushState,
    DisplayRect,
    SourceImage,
    StrokeSession,
    validate_brush_diameter,
)


class TestSourceImage:
    """Tests for SourceImage."""

    def test_properties(self):
        source = SourceImage(1000, 500)

        assert source.size == (1000, 500)
        assert source.aspect == 2.0

    @pytest.mark.parametrize("width, height", [(0, 10), (10, 0), (-1, 5)])
    def test_rejects_non_positive(self, width, height):
        with pytest.raises(ValueError):
            SourceImage(width, height)

    def test_immutable(self):
        source = SourceImage(10, 10)

        with pytest.raises(AttributeError):
            source.width = 20


class TestDisplayRect:
    """Tests for DisplayRect."""

    def test_is_laid_out(self):
        assert DisplayRect(0, 0, 10, 10).is_laid_out
        assert not DisplayRect(0, 0, 0, 10).is_laid_out
        assert not DisplayRect(5, 5, 10, 0).is_laid_out


class TestBrushMode:
    """Tests for BrushMode.parse."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("draw", BrushMode.PAINT),
            ("paint", BrushMode.PAINT),
            (" Erase ", BrushMode.ERASE),
            (BrushMode.ERASE, BrushMode.ERASE),
        ],
    )
    def test_parse(self, value, expected):
        assert BrushMode.parse(value) is expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown brush mode"):
            BrushMode.parse("blur")


class TestBrushState:
    """Tests for BrushState."""

    def test_defaults(self):
        brush = BrushState()

        assert brush.mode is BrushMode.PAINT
        assert brush.diameter == 20

    def test_from_dict_normalizes_mode(self):
        brush = BrushState.from_dict({"mode": "draw", "diameter": 35, "unused": True})

        assert brush.mode is BrushMode.PAINT
        assert brush.diameter == 35
        assert brush.to_dict() == {"mode": "paint", "diameter": 35.0}

    @pytest.mark.parametrize("diameter", [4.9, 100.1, 0, float("nan"), float("inf")])
    def test_rejects_out_of_range(self, diameter):
        with pytest.raises(ValueError):
            BrushState(diameter=diameter)

    def test_bounds_are_inclusive(self):
        assert validate_brush_diameter(5) == 5.0
        assert validate_brush_diameter(100) == 100.0

    def test_rejects_non_numeric(self):
        with pytest.raises(TypeError):
            validate_brush_diameter("big")


class TestStrokeSession:
    """Tests for StrokeSession."""

    def test_last_point(self):
        stroke = StrokeSession(mode=BrushMode.PAINT, line_width=35.0)

        assert stroke.last_point is None
        stroke.points.append((1.0, 2.0))
        stroke.points.append((3.0, 4.0))
        assert stroke.last_point == (3.0, 4.0)
