"""Headless Quilt Renderer Service.

Draws blocks and patterns to Pillow images without any UI: each unit is
rasterized from the triangle geometry its registry definition provides,
colored through the palette (instance override, then palette, then the
fallback grey). Pattern instances apply their flips and rotation to the
rendered block, and enabled borders are drawn as frames around the grid,
innermost first.
"""

import logging
from typing import Dict, Optional

from PIL import Image, ImageDraw

from constants import FALLBACK_ROLE_COLOR
from models.document import Block, Pattern
from models.palette import Palette
from models.pattern import BlockInstance
from services.unit_bridge import get_unit_triangles_with_colors, resolve_color
from services.unit_registry import UnitRegistry

logger = logging.getLogger(__name__)

# Image.rotate() turns counter-clockwise; instance rotation is clockwise
ROTATION_TRANSPOSE = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90,
}


def merge_palettes(primary: Palette, secondary: Palette) -> Palette:
    """Primary roles plus any secondary roles whose ids primary lacks"""
    extra = tuple(role for role in secondary.roles if not primary.has_role(role.id))
    if not extra:
        return primary
    return Palette(primary.roles + extra)


def apply_instance_transform(image: Image.Image, instance: BlockInstance) -> Image.Image:
    """Mirror then rotate a rendered block the way an instance shows it"""
    if instance.flip_horizontal:
        image = image.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
    if instance.flip_vertical:
        image = image.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
    transpose = ROTATION_TRANSPOSE.get(instance.rotation)
    if transpose is not None:
        image = image.transpose(transpose)
    return image


class HeadlessRenderer:
    """Offscreen renderer producing block and pattern thumbnails as PNG files."""

    # Output resolution of a block thumbnail, pixels per side
    OUTPUT_SIZE = 256
    BLOCK_PIXELS_IN_PATTERN = 64
    BACKGROUND = '#FFFFFF'

    def __init__(self, registry: Optional[UnitRegistry] = None):
        self._registry = registry

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def render_block_image(self, block: Block, size: int = OUTPUT_SIZE,
                           palette: Optional[Palette] = None,
                           overrides: Optional[Dict[str, str]] = None) -> Image.Image:
        """Rasterize a block into a size x size RGB image

        Args:
            block: Block to draw
            size: Image side in pixels
            palette: Palette roles resolve against (the block's own when None)
            overrides: Optional role id -> color map applied first
        """
        palette = palette or block.palette
        image = Image.new('RGB', (size, size), self.BACKGROUND)
        draw = ImageDraw.Draw(image)
        cell = size / block.grid_size

        for unit in block.units:
            x0 = unit.position.col * cell
            y0 = unit.position.row * cell
            for points, color in get_unit_triangles_with_colors(unit, cell, palette, overrides,
                                                                registry=self._registry):
                shifted = [value + (x0 if i % 2 == 0 else y0) for i, value in enumerate(points)]
                draw.polygon(shifted, fill=color)
        return image

    def render_block(self, block: Block, output_path: str, size: int = OUTPUT_SIZE) -> str:
        image = self.render_block_image(block, size)
        image.save(output_path, 'PNG')
        logger.info(f"Rendered block '{block.title}' to {output_path}")
        return output_path

    # ------------------------------------------------------------------
    # Patterns
    # ------------------------------------------------------------------

    def _border_pixels(self, pattern: Pattern, block_pixels: int) -> list:
        """(pixel width, color) per enabled border, innermost first"""
        config = pattern.border_config
        if config is None or not config.enabled:
            return []
        scale = block_pixels / pattern.physical_size.block_size_inches
        return [
            (max(1, round(border.width_inches * scale)), resolve_color(border.fabric_role, pattern.palette))
            for border in config.borders
        ]

    def render_pattern_image(self, pattern: Pattern, blocks: Dict[str, Block],
                             block_pixels: int = BLOCK_PIXELS_IN_PATTERN) -> Image.Image:
        """Rasterize a pattern with its borders

        Args:
            pattern: Pattern to draw
            blocks: Library blocks by id; instances of unknown blocks are
                drawn as a flat fallback-grey cell
            block_pixels: Pixels per pattern cell
        """
        borders = self._border_pixels(pattern, block_pixels)
        margin = sum(width for width, _ in borders)
        grid_width = pattern.grid_size.cols * block_pixels
        grid_height = pattern.grid_size.rows * block_pixels
        image = Image.new('RGB', (grid_width + 2 * margin, grid_height + 2 * margin), self.BACKGROUND)
        draw = ImageDraw.Draw(image)

        # Outermost frame first, each inner frame painted over it
        offset = 0
        for width, color in reversed(borders):
            draw.rectangle([offset, offset, image.width - 1 - offset, image.height - 1 - offset], fill=color)
            offset += width
        if borders:
            draw.rectangle([margin, margin, margin + grid_width - 1, margin + grid_height - 1], fill=self.BACKGROUND)

        for instance in pattern.block_instances:
            left = margin + instance.position.col * block_pixels
            top = margin + instance.position.row * block_pixels
            block = blocks.get(instance.block_id)
            if block is None:
                logger.warning(f"Block '{instance.block_id}' not available, drawing placeholder")
                draw.rectangle([left, top, left + block_pixels - 1, top + block_pixels - 1],
                               fill=FALLBACK_ROLE_COLOR)
                continue
            palette = merge_palettes(pattern.palette, block.palette)
            tile = self.render_block_image(block, block_pixels, palette, instance.palette_overrides)
            image.paste(apply_instance_transform(tile, instance), (left, top))
        return image

    def render_pattern(self, pattern: Pattern, blocks: Dict[str, Block], output_path: str,
                       block_pixels: int = BLOCK_PIXELS_IN_PATTERN) -> str:
        image = self.render_pattern_image(pattern, blocks, block_pixels)
        image.save(output_path, 'PNG')
        logger.info(f"Rendered pattern '{pattern.title}' to {output_path}")
        return output_path
