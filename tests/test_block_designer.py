"""
Tests for the block designer store.

Covers:
- Place / undo / redo round trips with stable ids
- Two-tap flying geese placement
- Batch placement and range fill as single undo steps
- Role lifecycle: recolor, add up to the cap, remove with reassignment
- Grid resizing with atomic unit removal
- Paint mode, selection and metadata
"""
import pytest

from constants import MAX_PALETTE_ROLES
from models.block_designer import BlockDesigner
from models.document import Block
from models.palette import FabricRole, Palette
from models.transform import GridPosition, Span


def unit_ids(designer):
    return [unit.id for unit in designer.units]


# ══════════════════════════════════════════════════════════════════════════
# Placement with undo / redo
# ══════════════════════════════════════════════════════════════════════════

class TestPlacementHistory:

    def test_place_undo_redo_same_id(self, block_designer):
        unit_id = block_designer.add_square(GridPosition(0, 0))
        assert unit_id is not None
        assert block_designer.can_undo()

        assert block_designer.undo()
        assert len(block_designer.units) == 0
        assert block_designer.can_redo()

        assert block_designer.redo()
        assert unit_ids(block_designer) == [unit_id]

    def test_three_undos_and_redos(self, block_designer):
        placed = [
            block_designer.add_square(GridPosition(0, 0)),
            block_designer.add_hst(GridPosition(0, 1), variant='se'),
            block_designer.add_qst(GridPosition(0, 2)),
        ]
        counts = []
        for _ in range(3):
            block_designer.undo()
            counts.append(len(block_designer.units))
        assert counts == [2, 1, 0]

        counts = []
        for _ in range(3):
            block_designer.redo()
            counts.append(len(block_designer.units))
        assert counts == [1, 2, 3]
        assert unit_ids(block_designer) == placed

    def test_undo_on_empty_history_returns_false(self, block_designer):
        assert not block_designer.undo()
        assert not block_designer.redo()

    def test_new_action_after_undo_clears_redo(self, block_designer):
        block_designer.add_square(GridPosition(0, 0))
        block_designer.undo()
        block_designer.add_square(GridPosition(1, 1))
        assert not block_designer.can_redo()

    def test_occupied_cell_rejected(self, block_designer):
        block_designer.add_square(GridPosition(1, 1))
        assert block_designer.add_hst(GridPosition(1, 1)) is None
        assert block_designer.history.undo_count == 1

    def test_out_of_bounds_rejected(self, block_designer):
        assert block_designer.add_flying_geese(GridPosition(0, 2), 'right') is None
        assert block_designer.add_unit('log_cabin', GridPosition(0, 0)) is None

    def test_unit_found_at_every_cell_of_span(self, block_designer):
        unit_id = block_designer.add_flying_geese(GridPosition(0, 0), 'down')
        assert block_designer.get_unit_at(GridPosition(0, 0)).id == unit_id
        assert block_designer.get_unit_at(GridPosition(1, 0)).id == unit_id
        assert block_designer.get_unit_at(GridPosition(0, 1)) is None

    def test_remove_unit_restored_at_index(self, block_designer):
        first = block_designer.add_square(GridPosition(0, 0))
        second = block_designer.add_square(GridPosition(0, 1))
        third = block_designer.add_square(GridPosition(0, 2))
        assert block_designer.remove_unit(second)
        assert unit_ids(block_designer) == [first, third]
        block_designer.undo()
        assert unit_ids(block_designer) == [first, second, third]
        assert not block_designer.remove_unit('missing')

    def test_undo_clears_selection_of_vanished_unit(self, block_designer):
        unit_id = block_designer.add_square(GridPosition(0, 0))
        assert block_designer.select_unit(unit_id)
        block_designer.undo()
        assert block_designer.selected_unit_id is None

    def test_dirty_flag(self, block_designer):
        assert not block_designer.is_dirty
        block_designer.add_square(GridPosition(0, 0))
        assert block_designer.is_dirty
        block_designer.mark_saved()
        assert not block_designer.is_dirty


# ══════════════════════════════════════════════════════════════════════════
# Two-tap placement
# ══════════════════════════════════════════════════════════════════════════

class TestTwoTapPlacement:

    def test_start_and_complete(self, block_designer):
        assert block_designer.start_two_tap_placement(GridPosition(1, 1))
        assert block_designer.mode == 'placing_flying_geese_second'
        assert len(block_designer.two_tap_placement.valid_cells) == 4

        unit_id = block_designer.complete_two_tap_placement(GridPosition(1, 2))
        unit = block_designer.block.get_unit(unit_id)
        assert unit.direction == 'right'
        assert unit.position == GridPosition(1, 1)
        assert unit.span == Span(1, 2)
        assert block_designer.mode == 'placing_unit'
        assert block_designer.two_tap_placement is None

    def test_second_tap_above_points_up(self, block_designer):
        block_designer.start_two_tap_placement(GridPosition(1, 1))
        unit_id = block_designer.complete_two_tap_placement(GridPosition(0, 1))
        unit = block_designer.block.get_unit(unit_id)
        assert unit.direction == 'up'
        assert unit.position == GridPosition(0, 1)
        assert unit.span == Span(2, 1)

    def test_invalid_second_cell_cancels(self, block_designer):
        block_designer.start_two_tap_placement(GridPosition(0, 0))
        assert block_designer.complete_two_tap_placement(GridPosition(2, 2)) is None
        assert block_designer.two_tap_placement is None
        assert len(block_designer.units) == 0

    def test_occupied_first_cell_rejected(self, block_designer):
        block_designer.add_square(GridPosition(0, 0))
        assert not block_designer.start_two_tap_placement(GridPosition(0, 0))
        assert not block_designer.start_two_tap_placement(GridPosition(5, 5))

    def test_second_tap_uses_cells_offered_by_first(self, block_designer):
        block_designer.start_two_tap_placement(GridPosition(1, 1))
        block_designer.add_square(GridPosition(1, 2))
        unit_id = block_designer.complete_two_tap_placement(GridPosition(1, 2))
        unit = block_designer.block.get_unit(unit_id)
        assert unit.direction == 'right'
        assert unit.position == GridPosition(1, 1)

    def test_complete_without_start(self, block_designer):
        assert block_designer.complete_two_tap_placement(GridPosition(0, 1)) is None


# ══════════════════════════════════════════════════════════════════════════
# Batch placement and range fill
# ══════════════════════════════════════════════════════════════════════════

class TestBatchPlacement:

    def test_batch_is_one_undo_step(self, block_designer):
        ids = block_designer.add_units_batch('hst', [GridPosition(0, 0), GridPosition(0, 1),
                                                     GridPosition(0, 1), GridPosition(4, 4)], variant='se')
        assert len(ids) == 2
        assert all(u.variant == 'se' for u in block_designer.units)
        assert block_designer.history.undo_count == 1
        block_designer.undo()
        assert len(block_designer.units) == 0

    def test_batch_rejects_two_tap_types_and_empty_lists(self, block_designer):
        assert block_designer.add_units_batch('flying_geese', [GridPosition(0, 0)]) == []
        assert block_designer.add_units_batch('square', []) == []
        assert not block_designer.can_undo()

    def test_range_fill(self, block_designer):
        block_designer.add_square(GridPosition(0, 1))
        assert block_designer.select_unit_type('square')
        block_designer.set_range_fill_anchor(GridPosition(0, 0))
        ids = block_designer.range_fill(GridPosition(1, 1))
        assert len(ids) == 3
        assert block_designer.range_fill_anchor is None
        assert block_designer.empty_cell_count() == 5

    def test_range_fill_needs_unit_type(self, block_designer):
        block_designer.set_range_fill_anchor(GridPosition(0, 0))
        assert block_designer.range_fill(GridPosition(1, 1)) == []


# ══════════════════════════════════════════════════════════════════════════
# Transforms and role assignment
# ══════════════════════════════════════════════════════════════════════════

class TestTransforms:

    def test_four_rotations_restore_unit(self, block_designer):
        unit_id = block_designer.add_hst(GridPosition(1, 1), variant='sw')
        original = block_designer.block.get_unit(unit_id)
        for _ in range(4):
            assert block_designer.rotate_unit(unit_id)
        assert block_designer.block.get_unit(unit_id) == original

    def test_rotating_square_records_nothing(self, block_designer):
        unit_id = block_designer.add_square(GridPosition(0, 0))
        assert not block_designer.rotate_unit(unit_id)
        assert not block_designer.flip_unit_horizontal(unit_id)
        assert block_designer.history.undo_count == 1

    def test_flip_and_undo(self, block_designer):
        unit_id = block_designer.add_hst(GridPosition(0, 0), variant='nw')
        block_designer.flip_unit_vertical(unit_id)
        assert block_designer.block.get_unit(unit_id).variant == 'sw'
        block_designer.undo()
        assert block_designer.block.get_unit(unit_id).variant == 'nw'

    def test_assign_role_to_patch(self, block_designer):
        unit_id = block_designer.add_qst(GridPosition(0, 0))
        assert block_designer.assign_role(unit_id, 'feature', 'left')
        assert block_designer.block.get_unit(unit_id).patch_fabric_roles['left'] == 'feature'
        assert not block_designer.assign_role(unit_id, 'feature', 'left')
        assert not block_designer.assign_role(unit_id, 'no_such_role')

    def test_paint_mode(self, block_designer):
        unit_id = block_designer.add_hst(GridPosition(0, 0))
        assert block_designer.enter_paint_mode('accent2')
        assert block_designer.mode == 'paint_mode'
        assert block_designer.paint_unit(unit_id, 'secondary')
        assert block_designer.block.get_unit(unit_id).secondary_fabric_role == 'accent2'
        block_designer.exit_paint_mode()
        assert block_designer.mode == 'idle'
        assert not block_designer.paint_unit(unit_id)


# ══════════════════════════════════════════════════════════════════════════
# Palette role lifecycle
# ══════════════════════════════════════════════════════════════════════════

class TestRoleLifecycle:

    def test_remove_role_falls_back_to_first_role_and_undo_restores(self, block_designer):
        unit_id = block_designer.add_square(GridPosition(0, 0), role_id='accent1')
        assert block_designer.remove_role('accent1')
        assert block_designer.block.get_unit(unit_id).fabric_role == 'background'
        assert len(block_designer.palette) == 3

        block_designer.undo()
        assert block_designer.block.get_unit(unit_id).fabric_role == 'accent1'
        assert block_designer.palette.role_ids() == ['background', 'feature', 'accent1', 'accent2']

    def test_remove_role_restores_multi_part_units_exactly(self, block_designer):
        qst_id = block_designer.add_qst(GridPosition(0, 0), role_id='feature')
        block_designer.assign_role(qst_id, 'accent1', 'top')
        block_designer.assign_role(qst_id, 'accent1', 'bottom')
        hst_id = block_designer.add_hst(GridPosition(0, 1), role_id='accent1')
        before = block_designer.block

        assert block_designer.remove_role('accent1', fallback_role_id='accent2')
        assert block_designer.block.get_unit(qst_id).patch_fabric_roles == {
            'top': 'accent2', 'right': 'feature', 'bottom': 'accent2', 'left': 'feature'}
        hst = block_designer.block.get_unit(hst_id)
        assert (hst.fabric_role, hst.secondary_fabric_role) == ('accent2', 'accent2')
        assert block_designer.get_units_using_role('accent1') == []

        block_designer.undo()
        assert block_designer.units == before.units
        assert block_designer.palette == before.palette

        block_designer.redo()
        assert not block_designer.palette.has_role('accent1')

    def test_cannot_remove_last_role(self, ids):
        block = Block(palette=Palette((FabricRole('only', 'Only', '#000000'),)))
        designer = BlockDesigner(block=block, id_generator=ids)
        assert not designer.can_remove_role('only')
        assert not designer.remove_role('only')
        assert not designer.remove_role('missing')

    def test_removing_active_role_leaves_paint_mode(self, block_designer):
        block_designer.enter_paint_mode('feature')
        block_designer.remove_role('feature')
        assert block_designer.active_role_id is None
        assert block_designer.mode == 'idle'

    def test_add_role_until_cap(self, block_designer):
        role_id = block_designer.add_role()
        role = block_designer.palette.get_role(role_id)
        assert role_id == 'accent3'
        assert role.name == 'Accent 3'
        assert role.color == '#2E8B57'
        while len(block_designer.palette) < MAX_PALETTE_ROLES:
            assert block_designer.add_role() is not None
        assert block_designer.add_role() is None

    def test_set_role_color(self, block_designer):
        assert block_designer.set_role_color('feature', '#ff0000')
        assert block_designer.palette.get_color('feature') == '#FF0000'
        assert not block_designer.set_role_color('feature', 'red')
        assert not block_designer.set_role_color('missing', '#000000')
        with pytest.raises(ValueError):
            block_designer.set_role_color('feature', 'not a color')
        block_designer.undo()
        assert block_designer.palette.get_color('feature') == '#2C3E50'

    def test_rename_role(self, block_designer):
        assert block_designer.rename_role('feature', 'Star points')
        assert block_designer.palette.get_role('feature').name == 'Star points'
        block_designer.undo()
        assert block_designer.palette.get_role('feature').name == 'Feature'


# ══════════════════════════════════════════════════════════════════════════
# Grid size
# ══════════════════════════════════════════════════════════════════════════

class TestGridSize:

    def test_shrink_removes_units_atomically(self, ids):
        designer = BlockDesigner(block=Block(grid_size=4), id_generator=ids)
        corner = designer.add_square(GridPosition(3, 3))
        kept = designer.add_square(GridPosition(0, 0))

        removed = designer.set_grid_size(3)
        assert [unit.id for unit in removed] == [corner]
        assert designer.grid_size == 3
        assert unit_ids(designer) == [kept]

        designer.undo()
        assert designer.grid_size == 4
        assert unit_ids(designer) == [corner, kept]
        assert designer.block.get_unit(corner).position == GridPosition(3, 3)

    def test_unchanged_or_invalid_size(self, block_designer):
        assert block_designer.set_grid_size(3) is None
        assert block_designer.set_grid_size(9) is None
        assert block_designer.set_grid_size(1) is None
        assert not block_designer.can_undo()

    def test_grow_keeps_units(self, block_designer):
        block_designer.add_square(GridPosition(2, 2))
        assert block_designer.set_grid_size(5) == []
        assert block_designer.empty_cell_count() == 24


# ══════════════════════════════════════════════════════════════════════════
# Document state
# ══════════════════════════════════════════════════════════════════════════

class TestDocumentState:

    def test_description_hashtags(self, block_designer):
        block_designer.set_description('A #Star for #winter and #star again')
        assert block_designer.block.hashtags == ('star', 'winter')

    def test_title_clipped(self, block_designer):
        block_designer.set_title('x' * 300)
        assert len(block_designer.block.title) == 100

    def test_preview(self, block_designer):
        block_designer.enter_preview()
        assert block_designer.mode == 'preview'
        assert block_designer.set_preview_preset('pinwheel')
        assert not block_designer.set_preview_preset('spiral')
        block_designer.exit_preview()
        assert block_designer.mode == 'idle'

    def test_new_block_resets_history(self, block_designer):
        block_designer.add_square(GridPosition(0, 0))
        block_designer.new_block(5)
        assert block_designer.grid_size == 5
        assert len(block_designer.units) == 0
        assert not block_designer.can_undo()
        assert not block_designer.is_dirty

    def test_snapshot(self, block_designer):
        block_designer.add_square(GridPosition(0, 0))
        snapshot = block_designer.get_snapshot()
        assert snapshot['kind'] == 'block'
        assert snapshot['version'] == 2
        assert snapshot['units'][0]['type'] == 'square'
