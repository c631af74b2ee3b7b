"""
Display-range RGB colour.

Every ``Color`` holds three float channels clamped to [0, 1] at the point of
construction, so arithmetic saturates instead of overflowing or wrapping.
Shading code builds colours freely and never has to clamp by hand.
"""

from __future__ import annotations
import colorsys
from typing import Tuple, Union

import numpy as np


def _clamp01(value: float) -> float:
    # NaN collapses to black
    if value != value:
        return 0.0
    return 0.0 if value < 0.0 else (1.0 if value > 1.0 else float(value))


class Color:
    """An immutable RGB colour with channels in [0, 1]."""

    __slots__ = ('_r', '_g', '_b')

    def __init__(self, r: float = 0.0, g: float = 0.0, b: float = 0.0):
        self._r = _clamp01(r)
        self._g = _clamp01(g)
        self._b = _clamp01(b)

    @classmethod
    def from_rgb255(cls, r: float, g: float, b: float) -> Color:
        """Build a colour from 8-bit style channel values (0-255)."""
        return cls(r / 255.0, g / 255.0, b / 255.0)

    @classmethod
    def from_hex(cls, value: str) -> Color:
        """Parse ``#rrggbb``."""
        text = value.lstrip('#')
        if len(text) != 6:
            raise ValueError(f"Hex colour must have 6 digits, got: {value}")
        return cls.from_rgb255(int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))

    @classmethod
    def from_hsb(cls, hue: float, saturation: float, brightness: float) -> Color:
        """Build a colour from hue (wrapped to [0, 1)), saturation and brightness."""
        r, g, b = colorsys.hsv_to_rgb(hue % 1.0, _clamp01(saturation), _clamp01(brightness))
        return cls(r, g, b)

    @classmethod
    def black(cls) -> Color:
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def white(cls) -> Color:
        return cls(1.0, 1.0, 1.0)

    @property
    def r(self) -> float:
        return self._r

    @property
    def g(self) -> float:
        return self._g

    @property
    def b(self) -> float:
        return self._b

    def __iter__(self):
        return iter((self._r, self._g, self._b))

    def __repr__(self) -> str:
        return f"Color({self._r:.4f}, {self._g:.4f}, {self._b:.4f})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Color):
            return NotImplemented
        return (abs(self._r - other._r) < 1e-9 and
                abs(self._g - other._g) < 1e-9 and
                abs(self._b - other._b) < 1e-9)

    def __hash__(self) -> int:
        return hash((round(self._r, 9), round(self._g, 9), round(self._b, 9)))

    def __add__(self, other: Color) -> Color:
        return Color(self._r + other._r, self._g + other._g, self._b + other._b)

    def __mul__(self, other: Union[Color, float]) -> Color:
        """Component-wise product with a colour, or scale by a non-negative scalar."""
        if isinstance(other, Color):
            return Color(self._r * other._r, self._g * other._g, self._b * other._b)
        factor = max(0.0, float(other))
        return Color(self._r * factor, self._g * factor, self._b * factor)

    def __rmul__(self, other: float) -> Color:
        return self.__mul__(other)

    def lerp(self, other: Color, t: float) -> Color:
        t = _clamp01(t)
        return Color(
            self._r + (other._r - self._r) * t,
            self._g + (other._g - self._g) * t,
            self._b + (other._b - self._b) * t
        )

    def invert(self) -> Color:
        return Color(1.0 - self._r, 1.0 - self._g, 1.0 - self._b)

    def rotate_channels(self) -> Color:
        """Swap channels (r, g, b) -> (g, b, r)."""
        return Color(self._g, self._b, self._r)

    def adjust_contrast(self, factor: float) -> Color:
        """Scale each channel's distance from mid grey."""
        return Color(
            0.5 + factor * (self._r - 0.5),
            0.5 + factor * (self._g - 0.5),
            0.5 + factor * (self._b - 0.5)
        )

    def adjust_saturation(self, factor: float) -> Color:
        """Push channels away from (factor > 1) or toward the Rec.709 luminance."""
        lum = self.luminance()
        return Color(
            lum + (self._r - lum) * factor,
            lum + (self._g - lum) * factor,
            lum + (self._b - lum) * factor
        )

    def gamma_correct(self, gamma: float) -> Color:
        """Raise each channel to ``1 / gamma``; gamma < 1 darkens, > 1 brightens."""
        inv = 1.0 / gamma
        return Color(self._r ** inv, self._g ** inv, self._b ** inv)

    def luminance(self) -> float:
        return 0.2126 * self._r + 0.7152 * self._g + 0.0722 * self._b

    def is_black(self) -> bool:
        return self._r == 0.0 and self._g == 0.0 and self._b == 0.0

    def to_rgb255(self) -> Tuple[int, int, int]:
        return (int(round(self._r * 255)), int(round(self._g * 255)), int(round(self._b * 255)))

    def to_array(self) -> np.ndarray:
        return np.array([self._r, self._g, self._b], dtype=np.float64)
