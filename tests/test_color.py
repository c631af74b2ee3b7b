"""Tests for Color class."""

import pytest
import math

from prismforge.color import Color


class TestColorCreation:
    """Test Color construction and clamping."""

    def test_channels(self):
        c = Color(0.25, 0.5, 0.75)
        assert (c.r, c.g, c.b) == (0.25, 0.5, 0.75)

    def test_clamps_on_construction(self):
        c = Color(-1.0, 2.0, 0.5)
        assert (c.r, c.g, c.b) == (0.0, 1.0, 0.5)

    def test_nan_becomes_zero(self):
        assert Color(math.nan, 0.5, 0.5).r == 0.0

    def test_from_rgb255(self):
        assert Color.from_rgb255(255, 0, 51) == Color(1.0, 0.0, 0.2)

    def test_from_hex(self):
        assert Color.from_hex("#ff0033") == Color.from_rgb255(255, 0, 51)

    def test_from_hex_rejects_short_string(self):
        with pytest.raises(ValueError):
            Color.from_hex("#fff")

    def test_from_hsb(self):
        assert Color.from_hsb(0.0, 1.0, 1.0) == Color(1, 0, 0)
        # Hue wraps around
        assert Color.from_hsb(1.0 / 3.0 + 1.0, 1.0, 1.0) == Color(0, 1, 0)


class TestColorArithmetic:
    """Test saturating arithmetic."""

    def test_addition_saturates(self):
        assert Color(0.8, 0.5, 0.1) + Color(0.5, 0.2, 0.1) == Color(1.0, 0.7, 0.2)

    def test_product(self):
        assert Color(0.5, 1.0, 0.2) * Color(0.5, 0.5, 0.5) == Color(0.25, 0.5, 0.1)

    def test_scalar_multiply(self):
        assert Color(0.2, 0.4, 0.6) * 2 == Color(0.4, 0.8, 1.0)
        assert 0.5 * Color(0.2, 0.4, 0.6) == Color(0.1, 0.2, 0.3)

    def test_negative_scalar_gives_black(self):
        assert (Color(0.5, 0.5, 0.5) * -3.0).is_black()

    def test_lerp(self):
        assert Color.black().lerp(Color.white(), 0.25) == Color(0.25, 0.25, 0.25)


class TestColorAdjustments:
    """Test colour adjustment helpers."""

    def test_invert(self):
        assert Color(0.2, 0.4, 1.0).invert() == Color(0.8, 0.6, 0.0)

    def test_rotate_channels(self):
        assert Color(0.1, 0.2, 0.3).rotate_channels() == Color(0.2, 0.3, 0.1)

    def test_contrast_around_mid_grey(self):
        assert Color(0.5, 0.5, 0.5).adjust_contrast(2.0) == Color(0.5, 0.5, 0.5)
        assert Color(0.6, 0.4, 0.5).adjust_contrast(2.0) == Color(0.7, 0.3, 0.5)

    def test_saturation_keeps_grey(self):
        assert Color(0.3, 0.3, 0.3).adjust_saturation(1.5) == Color(0.3, 0.3, 0.3)

    def test_gamma_correct(self):
        c = Color(0.25, 0.25, 0.25).gamma_correct(2.0)
        assert c.r == pytest.approx(0.5)

    def test_luminance(self):
        assert Color.white().luminance() == pytest.approx(1.0)
        assert Color.black().luminance() == 0.0

    def test_to_rgb255(self):
        assert Color(1.0, 0.5, 0.0).to_rgb255() == (255, 128, 0)

    def test_to_array(self):
        assert list(Color(0.1, 0.2, 0.3).to_array()) == pytest.approx([0.1, 0.2, 0.3])
