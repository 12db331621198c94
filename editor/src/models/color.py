"""
Quilt Block Editor - Color Domain Model

Canonical color representation for fabric roles and instance overrides.
Palette roles store colors as '#RRGGBB' strings; this class parses, normalizes
and compares them so variant colors can be reference-counted by value.
"""

from typing import List, Optional, Tuple
from PIL import ImageColor


class Color:
    """Immutable RGB color with uint8 storage.

    Accepts anything PIL's ImageColor understands (hex in 3/6 digit form,
    CSS color names, rgb() functions). Output is always '#RRGGBB' uppercase,
    which is the form palettes and overrides are compared in.
    """

    def __init__(self, r: int, g: int, b: int):
        """Direct construction from RGB uint8 values (0-255).

        Args:
            r: Red component (0-255)
            g: Green component (0-255)
            b: Blue component (0-255)
        """
        self._r = max(0, min(255, int(r)))
        self._g = max(0, min(255, int(g)))
        self._b = max(0, min(255, int(b)))

    @property
    def r(self) -> int:
        """Red component (0-255) - READ ONLY"""
        return self._r

    @property
    def g(self) -> int:
        """Green component (0-255) - READ ONLY"""
        return self._g

    @property
    def b(self) -> int:
        """Blue component (0-255) - READ ONLY"""
        return self._b

    # ========================================
    # Output Methods
    # ========================================

    def to_hex(self) -> str:
        """Convert to hex color string: #RRGGBB.

        Returns:
            Hex color string with leading #
        """
        return f"#{self._r:02X}{self._g:02X}{self._b:02X}"

    def to_rgb255(self) -> Tuple[int, int, int]:
        """Convert to an RGB uint8 tuple, the form Pillow draws with."""
        return (self._r, self._g, self._b)

    def to_float3(self) -> List[float]:
        return [self._r / 255.0, self._g / 255.0, self._b / 255.0]

    def luminance(self) -> float:
        """Perceived brightness in [0, 1]."""
        r, g, b = self.to_float3()
        return 0.299 * r + 0.587 * g + 0.114 * b

    # ========================================
    # Static Factory Methods
    # ========================================

    @staticmethod
    def parse(value: str) -> Optional['Color']:
        """Create Color from any string PIL.ImageColor accepts.

        Args:
            value: '#RRGGBB', 'RRGGBB', '#RGB', a CSS name, or 'rgb(r, g, b)'

        Returns:
            Color object if parse succeeds, None otherwise
        """
        if not isinstance(value, str) or not value.strip():
            return None
        text = value.strip()
        # Bare hex digits are common in stored documents
        if not text.startswith('#') and len(text) in (3, 6) and all(ch in '0123456789abcdefABCDEF' for ch in text):
            text = '#' + text
        try:
            rgb = ImageColor.getrgb(text)
        except ValueError:
            return None
        return Color(rgb[0], rgb[1], rgb[2])

    @staticmethod
    def from_hex(hex_string: str) -> Optional['Color']:
        """Create Color from hex string: #RRGGBB or RRGGBB."""
        return Color.parse(hex_string)

    @staticmethod
    def from_rgb255(r: int, g: int, b: int) -> 'Color':
        return Color(r, g, b)

    # ========================================
    # Equality and Hashing
    # ========================================

    def __eq__(self, other) -> bool:
        if not isinstance(other, Color):
            return False
        return (self._r, self._g, self._b) == (other._r, other._g, other._b)

    def __hash__(self) -> int:
        return hash((self._r, self._g, self._b))

    def __repr__(self) -> str:
        return f"Color({self._r}, {self._g}, {self._b})"

    def __str__(self) -> str:
        return self.to_hex()


def normalize_color(value: str) -> str:
    """Normalize a color string to '#RRGGBB' uppercase.

    Args:
        value: Any color string Color.parse() accepts

    Returns:
        Normalized hex string

    Raises:
        ValueError: If the string is not a color
    """
    color = Color.parse(value)
    if color is None:
        raise ValueError(f"Invalid color value '{value}'")
    return color.to_hex()


def colors_equal(a: Optional[str], b: Optional[str]) -> bool:
    """Compare two color strings by value ('#abc' equals '#AABBCC')."""
    if a is None or b is None:
        return a is b
    ca = Color.parse(a)
    cb = Color.parse(b)
    if ca is None or cb is None:
        return a == b
    return ca == cb
