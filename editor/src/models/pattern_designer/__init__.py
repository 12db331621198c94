"""Pattern designer store and its mixins"""

from .instance_mixin import PatternInstanceMixin
from .variant_color_mixin import PatternVariantColorMixin
from .grid_mixin import PatternGridMixin
from .palette_mixin import PatternPaletteMixin
from .border_mixin import PatternBorderMixin
from .core import PatternDesigner

__all__ = [
    'PatternDesigner',
    'PatternInstanceMixin',
    'PatternVariantColorMixin',
    'PatternGridMixin',
    'PatternPaletteMixin',
    'PatternBorderMixin',
]
