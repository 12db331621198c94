"""Block designer store and its mixins"""

from .placement_mixin import BlockPlacementMixin
from .transform_mixin import BlockTransformMixin
from .palette_mixin import BlockPaletteMixin
from .document_mixin import BlockDocumentMixin
from .core import BlockDesigner

__all__ = [
    'BlockDesigner',
    'BlockPlacementMixin',
    'BlockTransformMixin',
    'BlockPaletteMixin',
    'BlockDocumentMixin',
]
