"""
Quilt Block Editor - Data Models

Immutable document types: grid geometry, colors, palettes, units, block
instances, borders, and the Block and Pattern documents.

The design stores live in models.block_designer and models.pattern_designer
and are imported from there; models/_designer_internal/ holds their shared
internals only.
"""

from .transform import GridPosition, GridSize, InstanceShift, Span
from .color import Color
from .palette import FabricRole, Palette, default_palette
from .unit import FlyingGeeseUnit, HstUnit, QstUnit, SquareUnit, Unit
from .pattern import BlockInstance, Border, BorderConfig, PhysicalSize
from .document import Block, Pattern

__all__ = [
    'GridPosition', 'GridSize', 'InstanceShift', 'Span',
    'Color',
    'FabricRole', 'Palette', 'default_palette',
    'Unit', 'SquareUnit', 'HstUnit', 'FlyingGeeseUnit', 'QstUnit',
    'BlockInstance', 'Border', 'BorderConfig', 'PhysicalSize',
    'Block', 'Pattern',
]
