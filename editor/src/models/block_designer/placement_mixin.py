"""
Quilt Block Editor - Block Placement Mixin

Unit placement for the block designer:
- single-tap placement of any registered unit type
- batch placement (one undo step) and range fill
- two-tap flying geese placement state machine
- removal, hit testing and selection
"""

from typing import List, Optional

from constants import DEFAULT_UNIT_ROLE
from models.transform import GridPosition
from models.unit import Unit
from services.operations import AddUnit, Batch, RemoveUnit
from services.placement import (
    TwoTapPlacement, derive_direction, get_piece_at, get_range_fill_cells, get_valid_adjacent_cells,
    is_cell_occupied,
)
from services.unit_bridge import build_unit

TWO_TAP_UNIT_TYPE = 'flying_geese'


class BlockPlacementMixin:
    """Mixin containing unit placement for BlockDesigner

    This mixin expects the parent class to have:
    - self._block: current Block document
    - self._registry: UnitRegistry
    - self._id_generator: zero-argument id factory
    - self._logger: Logger instance
    - self._commit(operation, description): record-then-apply
    """

    # ========================================
    # Single placement
    # ========================================

    def add_unit(self, type_id: str, position: GridPosition, variant: Optional[str] = None,
                 role_id: str = DEFAULT_UNIT_ROLE) -> Optional[str]:
        """Place a unit with its anchor at position

        Args:
            type_id: Registered unit type
            position: Anchor (top-left) cell
            variant: Orientation, the type's default when omitted
            role_id: Role assigned to every patch

        Returns:
            New unit id, or None if the type is unknown or the footprint
            is out of bounds or overlaps another unit
        """
        definition = self._registry.get(type_id)
        if definition is None:
            self._logger.debug(f"add_unit: unknown unit type '{type_id}'")
            return None

        variant = variant or definition.default_variant
        if not definition.validate_placement(self._block.units, position, self._block.grid_size, variant).valid:
            self._logger.debug(f"add_unit: cannot place {type_id} at {tuple(position)}")
            return None

        unit = build_unit(type_id, self._id_generator(), position, variant=variant,
                          role_id=role_id, registry=self._registry)
        self._commit(AddUnit(unit, len(self._block.units)), f"Add {type_id}")
        self._logger.debug(f"Added {type_id} unit {unit.id} at {tuple(position)}")
        return unit.id

    def add_square(self, position: GridPosition, role_id: str = DEFAULT_UNIT_ROLE) -> Optional[str]:
        return self.add_unit('square', position, role_id=role_id)

    def add_hst(self, position: GridPosition, variant: str = 'nw',
                role_id: str = DEFAULT_UNIT_ROLE) -> Optional[str]:
        return self.add_unit('hst', position, variant=variant, role_id=role_id)

    def add_flying_geese(self, position: GridPosition, direction: str = 'right',
                         role_id: str = DEFAULT_UNIT_ROLE) -> Optional[str]:
        return self.add_unit('flying_geese', position, variant=direction, role_id=role_id)

    def add_qst(self, position: GridPosition, role_id: str = DEFAULT_UNIT_ROLE) -> Optional[str]:
        return self.add_unit('qst', position, role_id=role_id)

    # ========================================
    # Batch placement
    # ========================================

    def add_units_batch(self, type_id: str, positions: List[GridPosition],
                        variant: Optional[str] = None) -> List[str]:
        """Place one unit type at many cells as a single undo step

        Cells that are out of bounds or already covered (including by a unit
        placed earlier in the same batch) are skipped.

        Returns:
            Ids of the units placed, empty if nothing was placed
        """
        definition = self._registry.get(type_id)
        if definition is None or not positions:
            return []
        if definition.placement_mode == 'two_tap' or not definition.supports_batch_placement:
            self._logger.debug(f"add_units_batch: {type_id} cannot be batch placed")
            return []

        variant = variant or definition.default_variant
        placed: List[Unit] = list(self._block.units)
        operations = []
        for position in positions:
            if not definition.validate_placement(placed, position, self._block.grid_size, variant).valid:
                continue
            unit = build_unit(type_id, self._id_generator(), position, variant=variant,
                              registry=self._registry)
            operations.append(AddUnit(unit, len(placed)))
            placed.append(unit)

        if not operations:
            return []
        self._commit(Batch(tuple(operations)), f"Add {len(operations)} {type_id}")
        self._logger.debug(f"Batch placed {len(operations)} {type_id} units")
        return [op.unit.id for op in operations]

    def set_range_fill_anchor(self, position: Optional[GridPosition]) -> None:
        self._range_fill_anchor = position

    def get_range_fill_positions(self, end: GridPosition) -> List[GridPosition]:
        """Empty cells between the range anchor and end, row-major"""
        return get_range_fill_cells(self._range_fill_anchor, end, self._block.units, self._block.grid_size)

    def range_fill(self, end: GridPosition) -> List[str]:
        """Batch place the selected unit type from the range anchor to end

        Returns:
            Ids of the units placed
        """
        if self._selected_unit_type is None:
            return []
        positions = self.get_range_fill_positions(end)
        ids = self.add_units_batch(self._selected_unit_type, positions, self._selected_variant)
        self._range_fill_anchor = None
        return ids

    # ========================================
    # Two-tap placement
    # ========================================

    def start_two_tap_placement(self, position: GridPosition) -> bool:
        """Record the first cell of a two-cell placement

        Returns:
            False if the cell is out of bounds or occupied
        """
        definition = self._registry.get_or_raise(TWO_TAP_UNIT_TYPE)
        result = definition.validate_placement(self._block.units, position, self._block.grid_size)
        if not result.valid:
            self._logger.debug(f"start_two_tap_placement: cell {tuple(position)} unavailable")
            return False
        self._two_tap = TwoTapPlacement(position, tuple(result.valid_adjacent_cells))
        self._mode = 'placing_flying_geese_second'
        return True

    def complete_two_tap_placement(self, second: GridPosition,
                                   role_id: str = DEFAULT_UNIT_ROLE) -> Optional[str]:
        """Finish a two-cell placement with the second cell

        The second cell is checked only against the neighbors captured by
        the first tap, not against the grid as it is now. An invalid second
        cell cancels the placement.

        Returns:
            New unit id, or None if nothing was placed
        """
        pending = self._two_tap
        if pending is None:
            return None
        if not pending.accepts(second):
            self._logger.debug(f"complete_two_tap_placement: {tuple(second)} not adjacent and free")
            self.cancel_two_tap_placement()
            return None

        direction, anchor = derive_direction(pending.first_cell, second)
        unit = build_unit(TWO_TAP_UNIT_TYPE, self._id_generator(), anchor, variant=direction,
                          role_id=role_id, registry=self._registry)
        self._commit(AddUnit(unit, len(self._block.units)), f"Add {TWO_TAP_UNIT_TYPE}")
        self._logger.debug(f"Added {TWO_TAP_UNIT_TYPE} unit {unit.id} at {tuple(anchor)} pointing {direction}")
        self._two_tap = None
        self._mode = 'placing_unit'
        return unit.id

    def cancel_two_tap_placement(self) -> None:
        self._two_tap = None
        self._mode = 'placing_unit'

    @property
    def two_tap_placement(self) -> Optional[TwoTapPlacement]:
        return self._two_tap

    def get_valid_adjacent_cells(self, position: GridPosition) -> List[GridPosition]:
        return get_valid_adjacent_cells(self._block.units, position, self._block.grid_size)

    # ========================================
    # Removal, hit testing, selection
    # ========================================

    def remove_unit(self, unit_id: str) -> bool:
        """Delete a unit

        Returns:
            False if no unit has that id
        """
        units = self._block.units
        for index, unit in enumerate(units):
            if unit.id == unit_id:
                self._commit(RemoveUnit(unit, index), f"Remove {unit.type}")
                if self._selected_unit_id == unit_id:
                    self._selected_unit_id = None
                self._logger.debug(f"Removed unit {unit_id}")
                return True
        self._logger.debug(f"remove_unit: unit '{unit_id}' not found")
        return False

    def get_unit_at(self, position: GridPosition) -> Optional[Unit]:
        """Unit covering a cell, checking every cell of each span"""
        return get_piece_at(self._block.units, position)

    def is_cell_occupied(self, position: GridPosition) -> bool:
        return is_cell_occupied(self._block.units, position)

    def select_unit(self, unit_id: Optional[str]) -> bool:
        """Select a unit by id, or clear the selection with None

        Selecting a unit leaves paint mode.
        """
        if unit_id is None:
            self._selected_unit_id = None
            return True
        if self._block.get_unit(unit_id) is None:
            return False
        self._selected_unit_id = unit_id
        if self._mode == 'paint_mode':
            self._mode = 'idle'
            self._active_role_id = None
        return True

    def select_unit_type(self, type_id: Optional[str], variant: Optional[str] = None) -> bool:
        """Choose the unit type placed by taps and range fill

        None leaves placing mode.
        """
        if type_id is None:
            self._selected_unit_type = None
            self._selected_variant = None
            self._two_tap = None
            self._range_fill_anchor = None
            if self._mode in ('placing_unit', 'placing_flying_geese_second'):
                self._mode = 'idle'
            return True
        if not self._registry.has(type_id):
            return False
        self._selected_unit_type = type_id
        self._selected_variant = variant
        self._mode = 'placing_unit'
        self._selected_unit_id = None
        self._active_role_id = None
        self._two_tap = None
        return True
