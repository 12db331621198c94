"""
Tests for the pattern designer store.

Covers:
- Instance placement, replacement, batch placement and fill
- Instance rotation / mirroring and placement rotation
- Variant color roles kept in step with instance overrides
- Row / column insertion and deletion at either edge
- Role removal with overrides and borders
- Borders and final quilt size
"""
import pytest

from constants import MAX_BORDERS, MAX_PALETTE_ROLES
from models.transform import GridPosition, GridSize


def positions(designer):
    return {instance.id: instance.position for instance in designer.block_instances}


# ══════════════════════════════════════════════════════════════════════════
# Instances
# ══════════════════════════════════════════════════════════════════════════

class TestInstances:

    def test_place_and_undo(self, pattern_designer):
        instance_id = pattern_designer.add_block_instance('b1', GridPosition(0, 0))
        assert pattern_designer.get_block_instance_at(GridPosition(0, 0)).id == instance_id
        pattern_designer.undo()
        assert pattern_designer.block_instances == ()
        pattern_designer.redo()
        assert pattern_designer.block_instances[0].id == instance_id

    def test_out_of_bounds_rejected(self, pattern_designer):
        assert pattern_designer.add_block_instance('b1', GridPosition(4, 0)) is None
        assert pattern_designer.add_block_instance('b1', GridPosition(0, 0), rotation=45) is None

    def test_replacing_occupant_is_one_step(self, pattern_designer):
        first = pattern_designer.add_block_instance('b1', GridPosition(1, 1))
        second = pattern_designer.add_block_instance('b2', GridPosition(1, 1))
        assert len(pattern_designer.block_instances) == 1
        assert pattern_designer.block_instances[0].id == second
        pattern_designer.undo()
        assert [i.id for i in pattern_designer.block_instances] == [first]
        assert pattern_designer.block_instances[0].block_id == 'b1'

    def test_placement_rotation(self, pattern_designer):
        assert pattern_designer.rotate_placement_clockwise() == 90
        assert pattern_designer.rotate_placement_clockwise() == 180
        instance_id = pattern_designer.add_block_instance('b1', GridPosition(0, 0))
        assert pattern_designer.pattern.get_instance(instance_id).rotation == 180
        pattern_designer.select_library_block('b1')
        assert pattern_designer.placement_rotation == 0

    def test_batch_skips_outside_cells(self, pattern_designer):
        ids = pattern_designer.add_block_instances_batch(
            'b1', [GridPosition(0, 0), GridPosition(0, 1), GridPosition(9, 9)])
        assert len(ids) == 2
        assert pattern_designer.history.undo_count == 1
        pattern_designer.undo()
        assert pattern_designer.block_instances == ()

    def test_batch_with_repeated_cell_returns_surviving_ids(self, pattern_designer):
        ids = pattern_designer.add_block_instances_batch('b1', [GridPosition(0, 0), GridPosition(0, 0)])
        assert len(ids) == 1
        assert pattern_designer.block_instances[0].id == ids[0]

    def test_fill_empty_and_publish(self, pattern_designer):
        pattern_designer.add_block_instance('b2', GridPosition(2, 2))
        assert not pattern_designer.can_publish()
        pattern_designer.select_library_block('b1')
        assert pattern_designer.fill_empty() == 15
        assert pattern_designer.empty_slot_count() == 0
        assert pattern_designer.can_publish()
        assert pattern_designer.fill_empty() == 0

    def test_range_fill(self, pattern_designer):
        pattern_designer.select_library_block('b1')
        pattern_designer.set_range_fill_anchor(GridPosition(1, 1))
        ids = pattern_designer.range_fill(GridPosition(2, 3))
        assert len(ids) == 6
        assert pattern_designer.range_fill_anchor is None

    def test_rotate_cycle(self, pattern_designer):
        instance_id = pattern_designer.add_block_instance('b1', GridPosition(0, 0))
        seen = []
        for _ in range(4):
            pattern_designer.rotate_block_instance(instance_id)
            seen.append(pattern_designer.pattern.get_instance(instance_id).rotation)
        assert seen == [90, 180, 270, 0]

    def test_flips_toggle(self, pattern_designer):
        instance_id = pattern_designer.add_block_instance('b1', GridPosition(0, 0))
        pattern_designer.flip_block_instance_horizontal(instance_id)
        pattern_designer.flip_block_instance_vertical(instance_id)
        instance = pattern_designer.pattern.get_instance(instance_id)
        assert instance.flip_horizontal and instance.flip_vertical
        pattern_designer.undo()
        assert not pattern_designer.pattern.get_instance(instance_id).flip_vertical

    def test_remove_and_selection(self, pattern_designer):
        instance_id = pattern_designer.add_block_instance('b1', GridPosition(0, 0))
        assert pattern_designer.select_block_instance(instance_id)
        assert pattern_designer.mode == 'editing_block'
        assert pattern_designer.remove_block_instance(instance_id)
        assert pattern_designer.selected_instance_id is None
        assert not pattern_designer.remove_block_instance(instance_id)

    def test_undo_clears_vanished_selection(self, pattern_designer):
        instance_id = pattern_designer.add_block_instance('b1', GridPosition(0, 0))
        pattern_designer.select_block_instance(instance_id)
        pattern_designer.undo()
        assert pattern_designer.selected_instance_id is None

    def test_block_cache(self, pattern_designer, square_block):
        pattern_designer.cache_block(square_block)
        assert pattern_designer.get_cached_block('block-1') is square_block
        pattern_designer.clear_block_cache()
        assert pattern_designer.get_cached_block('block-1') is None


# ══════════════════════════════════════════════════════════════════════════
# Variant colors
# ══════════════════════════════════════════════════════════════════════════

class TestVariantColors:

    @pytest.fixture
    def two_instances(self, pattern_designer):
        first = pattern_designer.add_block_instance('b1', GridPosition(0, 0))
        second = pattern_designer.add_block_instance('b1', GridPosition(0, 1))
        return first, second

    def test_override_registers_variant_role(self, pattern_designer, two_instances):
        first, _ = two_instances
        assert pattern_designer.set_instance_role_override(first, 'feature', '#aa0000')
        variants = pattern_designer.get_variant_roles()
        assert len(variants) == 1
        assert variants[0].id == 'variant_1'
        assert variants[0].name == 'Variant #AA0000'
        assert variants[0].color == '#AA0000'
        assert variants[0].is_variant_color
        assert pattern_designer.get_instance_color(first, 'feature') == '#AA0000'

    def test_override_and_variant_undo_together(self, pattern_designer, two_instances):
        first, _ = two_instances
        before = pattern_designer.pattern
        pattern_designer.set_instance_role_override(first, 'feature', '#AA0000')
        pattern_designer.undo()
        assert pattern_designer.palette == before.palette
        assert pattern_designer.block_instances == before.block_instances
        pattern_designer.redo()
        assert len(pattern_designer.get_variant_roles()) == 1

    def test_variant_reference_counted_by_color(self, pattern_designer, two_instances):
        first, second = two_instances
        pattern_designer.set_instance_role_override(first, 'feature', '#AA0000')
        pattern_designer.set_instance_role_override(second, 'accent1', 'aa0000')
        assert len(pattern_designer.get_variant_roles()) == 1

        pattern_designer.clear_instance_role_override(first, 'feature')
        assert len(pattern_designer.get_variant_roles()) == 1
        pattern_designer.reset_instance_overrides(second)
        assert pattern_designer.get_variant_roles() == []

    def test_regular_palette_color_is_not_a_variant(self, pattern_designer, two_instances):
        first, _ = two_instances
        pattern_designer.set_instance_role_override(first, 'accent1', '#2c3e50')
        assert pattern_designer.get_variant_roles() == []

    def test_recoloring_regular_role_to_override_color_retires_variant(self, pattern_designer, two_instances):
        first, _ = two_instances
        pattern_designer.set_instance_role_override(first, 'feature', '#AA0000')
        pattern_designer.set_role_color('accent2', '#AA0000')
        assert pattern_designer.get_variant_roles() == []
        pattern_designer.undo()
        assert len(pattern_designer.get_variant_roles()) == 1
        assert pattern_designer.palette.get_color('accent2') == '#DAA520'

    def test_variant_roles_not_directly_removable(self, pattern_designer, two_instances):
        first, _ = two_instances
        pattern_designer.set_instance_role_override(first, 'feature', '#AA0000')
        assert not pattern_designer.can_remove_role('variant_1')
        assert not pattern_designer.remove_role('variant_1')

    def test_invalid_override_color_raises(self, pattern_designer, two_instances):
        first, _ = two_instances
        with pytest.raises(ValueError):
            pattern_designer.set_instance_role_override(first, 'feature', 'nonsense')

    def test_variants_count_toward_role_cap(self, pattern_designer, two_instances):
        first, _ = two_instances
        pattern_designer.set_instance_role_override(first, 'feature', '#AA0000')
        while len(pattern_designer.palette) < MAX_PALETTE_ROLES:
            assert pattern_designer.add_role() is not None
        assert pattern_designer.add_role() is None

    def test_variant_registration_stops_at_role_cap(self, pattern_designer):
        cells = [GridPosition(0, col) for col in range(4)] + [GridPosition(1, 0)]
        colors = ['#100000', '#200000', '#300000', '#400000', '#500000']
        ids = [pattern_designer.add_block_instance('b1', cell) for cell in cells]
        for instance_id, color in zip(ids, colors):
            assert pattern_designer.set_instance_role_override(instance_id, 'feature', color)

        assert len(pattern_designer.palette) == MAX_PALETTE_ROLES
        assert len(pattern_designer.get_variant_roles()) == 4
        # Unregistered color still applies to its instance
        assert pattern_designer.get_instance_color(ids[4], 'feature') == '#500000'

        # Freeing a slot lets the waiting color in
        pattern_designer.clear_instance_role_override(ids[0], 'feature')
        variant_colors = [role.color for role in pattern_designer.get_variant_roles()]
        assert '#100000' not in variant_colors
        assert '#500000' in variant_colors
        assert len(pattern_designer.palette) == MAX_PALETTE_ROLES

    def test_recoloring_variant_moves_its_overrides(self, pattern_designer, two_instances):
        first, second = two_instances
        pattern_designer.set_instance_role_override(first, 'accent1', '#123456')
        pattern_designer.set_instance_role_override(second, 'accent2', '#123456')
        before = pattern_designer.pattern

        assert pattern_designer.set_role_color('variant_1', '#fedcba')
        assert pattern_designer.get_instance_color(first, 'accent1') == '#FEDCBA'
        assert pattern_designer.get_instance_color(second, 'accent2') == '#FEDCBA'
        variants = pattern_designer.get_variant_roles()
        assert [(role.id, role.color) for role in variants] == [('variant_1', '#FEDCBA')]

        pattern_designer.undo()
        assert pattern_designer.palette == before.palette
        assert pattern_designer.block_instances == before.block_instances

    def test_recolor_leaves_other_override_colors(self, pattern_designer, two_instances):
        first, second = two_instances
        pattern_designer.set_instance_role_override(first, 'feature', '#123456')
        pattern_designer.set_instance_role_override(second, 'feature', '#654321')
        pattern_designer.set_role_color('variant_1', '#FEDCBA')
        assert pattern_designer.get_instance_color(second, 'feature') == '#654321'
        assert len(pattern_designer.get_variant_roles()) == 2

    def test_recoloring_regular_role_carries_matching_overrides(self, pattern_designer, two_instances):
        first, _ = two_instances
        pattern_designer.set_instance_role_override(first, 'accent1', '#2C3E50')
        assert pattern_designer.set_role_color('feature', '#111111')
        assert pattern_designer.get_instance_color(first, 'accent1') == '#111111'
        assert pattern_designer.get_variant_roles() == []


# ══════════════════════════════════════════════════════════════════════════
# Grid
# ══════════════════════════════════════════════════════════════════════════

class TestGrid:

    def test_remove_row_at_start_shifts_instances(self, pattern_designer):
        top = pattern_designer.add_block_instance('b1', GridPosition(0, 0))
        middle = pattern_designer.add_block_instance('b1', GridPosition(1, 1))
        before = pattern_designer.pattern
        assert pattern_designer.set_grid_resize_position('start')

        assert pattern_designer.remove_row()
        assert pattern_designer.grid_size == GridSize(3, 4)
        assert positions(pattern_designer) == {middle: GridPosition(0, 1)}
        assert pattern_designer.pattern.physical_size.height_inches == 36.0

        pattern_designer.undo()
        assert pattern_designer.grid_size == GridSize(4, 4)
        assert pattern_designer.block_instances == before.block_instances
        assert positions(pattern_designer)[top] == GridPosition(0, 0)

    def test_add_column_at_start_shifts_right(self, pattern_designer):
        instance_id = pattern_designer.add_block_instance('b1', GridPosition(2, 3))
        pattern_designer.set_grid_resize_position('start')
        assert pattern_designer.add_column()
        assert pattern_designer.grid_size == GridSize(4, 5)
        assert positions(pattern_designer)[instance_id] == GridPosition(2, 4)

    def test_remove_row_at_end(self, pattern_designer):
        pattern_designer.add_block_instance('b1', GridPosition(3, 0))
        kept = pattern_designer.add_block_instance('b1', GridPosition(0, 0))
        assert pattern_designer.has_blocks_in_row(3)
        assert pattern_designer.remove_row()
        assert list(positions(pattern_designer)) == [kept]

    def test_remove_column_at_start_and_add_row_at_end(self, pattern_designer):
        gone = pattern_designer.add_block_instance('b1', GridPosition(0, 0))
        moved = pattern_designer.add_block_instance('b1', GridPosition(0, 2))
        pattern_designer.set_grid_resize_position('start')
        assert pattern_designer.remove_column()
        assert gone not in positions(pattern_designer)
        assert positions(pattern_designer)[moved] == GridPosition(0, 1)
        pattern_designer.set_grid_resize_position('end')
        assert pattern_designer.add_row()
        assert pattern_designer.grid_size == GridSize(5, 3)
        assert positions(pattern_designer)[moved] == GridPosition(0, 1)

    def test_resize_grid(self, pattern_designer):
        outside = pattern_designer.add_block_instance('b1', GridPosition(3, 3))
        assert pattern_designer.resize_grid(2, 2)
        assert outside not in positions(pattern_designer)
        pattern_designer.undo()
        assert outside in positions(pattern_designer)
        assert pattern_designer.pattern.physical_size.width_inches == 48.0

    def test_resize_limits(self, pattern_designer):
        assert not pattern_designer.resize_grid(1, 4)
        assert not pattern_designer.resize_grid(4, 26)
        assert not pattern_designer.resize_grid(4, 4)
        assert not pattern_designer.set_grid_resize_position('middle')
        pattern_designer.resize_grid(2, 2)
        assert not pattern_designer.can_remove_row()
        assert not pattern_designer.remove_column()

    def test_large_grid(self, pattern_designer):
        assert not pattern_designer.is_grid_large()
        pattern_designer.resize_grid(16, 4)
        assert pattern_designer.is_grid_large()


# ══════════════════════════════════════════════════════════════════════════
# Palette
# ══════════════════════════════════════════════════════════════════════════

class TestPatternPalette:

    def test_remove_role_drops_overrides_and_moves_borders(self, pattern_designer):
        instance_id = pattern_designer.add_block_instance('b1', GridPosition(0, 0))
        pattern_designer.set_instance_role_override(instance_id, 'feature', '#AA0000')
        border_id = pattern_designer.add_border()
        pattern_designer.update_border(border_id, fabric_role='feature')
        before = pattern_designer.pattern

        assert pattern_designer.remove_role('feature')
        assert not pattern_designer.palette.has_role('feature')
        assert pattern_designer.pattern.get_instance(instance_id).palette_overrides == {}
        assert pattern_designer.border_config.get_border(border_id).fabric_role == 'background'
        assert pattern_designer.get_variant_roles() == []

        pattern_designer.undo()
        assert pattern_designer.palette == before.palette
        assert pattern_designer.block_instances == before.block_instances
        assert pattern_designer.border_config == before.border_config

    def test_remove_role_explicit_fallback(self, pattern_designer):
        border_id = pattern_designer.add_border()
        assert pattern_designer.remove_role('accent1', fallback_role_id='accent2')
        assert pattern_designer.border_config.get_border(border_id).fabric_role == 'accent2'

    def test_add_and_rename_role(self, pattern_designer):
        role_id = pattern_designer.add_role('Binding', '#000080')
        assert pattern_designer.palette.get_role(role_id).color == '#000080'
        assert pattern_designer.rename_role(role_id, 'Binding fabric')
        assert pattern_designer.palette.get_role(role_id).name == 'Binding fabric'

    def test_add_role_reuses_existing_color(self, pattern_designer):
        size = len(pattern_designer.palette)
        first = pattern_designer.add_role('Test', '#abcdef')
        assert pattern_designer.add_role('Other', '#ABCDEF') == first
        assert pattern_designer.add_role('Dark', '#2c3e50') == 'feature'
        assert len(pattern_designer.palette) == size + 1
        pattern_designer.undo()
        assert len(pattern_designer.palette) == size

    def test_instances_using_role(self, pattern_designer):
        instance_id = pattern_designer.add_block_instance('b1', GridPosition(0, 0))
        pattern_designer.add_block_instance('b1', GridPosition(0, 1))
        pattern_designer.set_instance_role_override(instance_id, 'accent2', '#123456')
        assert [i.id for i in pattern_designer.get_instances_using_role('accent2')] == [instance_id]


# ══════════════════════════════════════════════════════════════════════════
# Borders
# ══════════════════════════════════════════════════════════════════════════

class TestBorders:

    def test_first_border_creates_config(self, pattern_designer):
        assert pattern_designer.border_config is None
        border_id = pattern_designer.add_border()
        config = pattern_designer.border_config
        assert config.enabled
        assert [b.id for b in config.borders] == [border_id]
        assert config.borders[0].fabric_role == 'accent1'
        assert pattern_designer.selected_border_id == border_id
        assert pattern_designer.final_quilt_size() == (53.0, 53.0)

        pattern_designer.undo()
        assert pattern_designer.border_config is None
        assert pattern_designer.selected_border_id is None

    def test_border_cap(self, pattern_designer):
        for _ in range(MAX_BORDERS):
            assert pattern_designer.add_border(1.0) is not None
        assert not pattern_designer.can_add_border()
        assert pattern_designer.add_border() is None
        assert pattern_designer.total_border_width() == 3.0

    def test_non_positive_width_rejected(self, pattern_designer):
        assert pattern_designer.add_border(0) is None

    def test_disable_and_reenable_by_adding(self, pattern_designer):
        pattern_designer.add_border(2.0)
        assert pattern_designer.set_borders_enabled(False)
        assert pattern_designer.total_border_width() == 0.0
        assert not pattern_designer.set_borders_enabled(False)

        pattern_designer.add_border(1.0)
        assert pattern_designer.border_config.enabled
        assert pattern_designer.total_border_width() == 3.0
        pattern_designer.undo()
        assert not pattern_designer.border_config.enabled
        assert len(pattern_designer.border_config.borders) == 1

    def test_enable_without_borders_round_trip(self, pattern_designer):
        assert pattern_designer.set_borders_enabled(True)
        assert pattern_designer.border_config.borders == ()
        pattern_designer.undo()
        assert pattern_designer.border_config is None

    def test_update_border_validation(self, pattern_designer):
        border_id = pattern_designer.add_border()
        assert pattern_designer.update_border(border_id, style='pieced', corner_style='mitered')
        assert not pattern_designer.update_border(border_id, style='scalloped')
        assert not pattern_designer.update_border(border_id, width_inches=-1)
        assert not pattern_designer.update_border(border_id, fabric_role='missing')
        assert not pattern_designer.update_border(border_id, colour='red')
        assert not pattern_designer.update_border(border_id, style='pieced')
        border = pattern_designer.border_config.get_border(border_id)
        assert (border.style, border.corner_style) == ('pieced', 'mitered')

    def test_update_border_width_must_be_a_number(self, pattern_designer):
        border_id = pattern_designer.add_border()
        assert not pattern_designer.update_border(border_id, width_inches='wide')
        assert not pattern_designer.update_border(border_id, width_inches=None)
        assert pattern_designer.update_border(border_id, width_inches='4')
        assert pattern_designer.border_config.get_border(border_id).width_inches == 4.0

    def test_remove_and_reorder(self, pattern_designer):
        inner = pattern_designer.add_border(1.0)
        outer = pattern_designer.add_border(2.0)
        assert pattern_designer.reorder_borders(0, 1)
        assert [b.id for b in pattern_designer.border_config.borders] == [outer, inner]
        assert not pattern_designer.reorder_borders(0, 5)
        assert pattern_designer.remove_border(inner)
        assert [b.id for b in pattern_designer.border_config.borders] == [outer]
        pattern_designer.undo()
        assert [b.id for b in pattern_designer.border_config.borders] == [outer, inner]

    def test_select_border(self, pattern_designer):
        border_id = pattern_designer.add_border()
        assert pattern_designer.select_border(None)
        assert pattern_designer.select_border(border_id)
        assert not pattern_designer.select_border('missing')
