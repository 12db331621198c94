"""
Quilt Block Editor - Pattern Instance Mixin

Block instance placement and transforms for the pattern designer:
- place (replacing any occupant), batch place, range fill, fill empty
- remove, rotate, flip
- canvas and library selection, placement rotation, block cache
"""

from typing import Dict, List, Optional

from constants import ROTATIONS
from models.document import Block
from models.pattern import BlockInstance
from models.transform import GridPosition
from services.operations import AddBlockInstance, Batch, RemoveBlockInstance, UpdateBlockInstance
from services.placement import get_empty_cells, get_piece_at, get_range_fill_cells, in_bounds


class PatternInstanceMixin:
    """Mixin containing block instance operations for PatternDesigner

    This mixin expects the parent class to have:
    - self._pattern: current Pattern document
    - self._id_generator: zero-argument id factory
    - self._logger: Logger instance
    - self._commit(operation, description): record-then-apply
    """

    # ========================================
    # Placement
    # ========================================

    def _placement_operations(self, instances: List[BlockInstance], block_id: str,
                              position: GridPosition, rotation: int) -> list:
        """Operations placing one instance into a working list, replacing any occupant

        The working list is updated in place so later placements in the same
        batch see this one.
        """
        operations = []
        existing = get_piece_at(instances, position)
        if existing is not None:
            index = instances.index(existing)
            operations.append(RemoveBlockInstance(existing, index))
            instances.pop(index)
        instance = BlockInstance(id=self._id_generator(), block_id=block_id,
                                 position=position, rotation=rotation)
        operations.append(AddBlockInstance(instance, len(instances)))
        instances.append(instance)
        return operations

    def _resolve_rotation(self, rotation: Optional[int]) -> Optional[int]:
        rotation = self._placement_rotation if rotation is None else rotation
        return rotation if rotation in ROTATIONS else None

    def add_block_instance(self, block_id: str, position: GridPosition,
                           rotation: Optional[int] = None) -> Optional[str]:
        """Place a block in a cell

        An instance already in the cell is replaced; removal and placement are
        one undo step.

        Args:
            block_id: Library block id
            position: Target cell
            rotation: Degrees clockwise, the current placement rotation when omitted

        Returns:
            New instance id, or None if the cell is outside the grid or the
            rotation is not a quarter turn
        """
        rotation = self._resolve_rotation(rotation)
        if rotation is None or not in_bounds(position, self._pattern.grid_size):
            self._logger.debug(f"add_block_instance: rejected {block_id} at {tuple(position)}")
            return None

        instances = list(self._pattern.block_instances)
        operations = self._placement_operations(instances, block_id, position, rotation)
        operation = operations[0] if len(operations) == 1 else Batch(tuple(operations))
        self._commit(operation, "Place block")
        new_id = operations[-1].instance.id
        self._logger.debug(f"Placed block {block_id} as {new_id} at {tuple(position)}")
        return new_id

    def add_block_instances_batch(self, block_id: str, positions: List[GridPosition],
                                  rotation: Optional[int] = None) -> List[str]:
        """Place one block at many cells as a single undo step

        Cells outside the grid are skipped; occupied cells are replaced.

        Returns:
            Ids of the new instances
        """
        rotation = self._resolve_rotation(rotation)
        if rotation is None or not positions:
            return []

        grid_size = self._pattern.grid_size
        instances = list(self._pattern.block_instances)
        operations = []
        new_ids = []
        for position in positions:
            if not in_bounds(position, grid_size):
                continue
            placed = self._placement_operations(instances, block_id, position, rotation)
            operations.extend(placed)
            new_ids.append(placed[-1].instance.id)

        if not operations:
            return []
        self._commit(Batch(tuple(operations)), f"Place {len(new_ids)} blocks")
        # A later position in the same batch may have replaced an earlier new instance
        surviving = {instance.id for instance in self._pattern.block_instances}
        return [instance_id for instance_id in new_ids if instance_id in surviving]

    def set_range_fill_anchor(self, position: Optional[GridPosition]) -> None:
        self._range_fill_anchor = position

    def get_range_fill_positions(self, end: GridPosition) -> List[GridPosition]:
        return get_range_fill_cells(self._range_fill_anchor, end,
                                    self._pattern.block_instances, self._pattern.grid_size)

    def range_fill(self, end: GridPosition) -> List[str]:
        """Place the selected library block in every empty cell from the anchor to end"""
        if self._selected_library_block_id is None:
            return []
        positions = self.get_range_fill_positions(end)
        ids = self.add_block_instances_batch(self._selected_library_block_id, positions)
        self._range_fill_anchor = None
        return ids

    def fill_empty(self) -> int:
        """Place the selected library block in every empty cell

        Returns:
            Number of instances placed
        """
        if self._selected_library_block_id is None:
            return 0
        empty = get_empty_cells(self._pattern.block_instances, self._pattern.grid_size)
        if not empty:
            return 0
        return len(self.add_block_instances_batch(self._selected_library_block_id, empty))

    # ========================================
    # Removal and transforms
    # ========================================

    def remove_block_instance(self, instance_id: str) -> bool:
        for index, instance in enumerate(self._pattern.block_instances):
            if instance.id == instance_id:
                self._commit(RemoveBlockInstance(instance, index), "Remove block")
                if self._selected_instance_id == instance_id:
                    self._selected_instance_id = None
                self._logger.debug(f"Removed block instance {instance_id}")
                return True
        self._logger.debug(f"remove_block_instance: instance '{instance_id}' not found")
        return False

    def _update_instance(self, instance_id: str, changes: Dict, description: str) -> bool:
        instance = self._pattern.get_instance(instance_id)
        if instance is None:
            return False
        prev = instance.read_fields(changes.keys())
        if prev == changes:
            return False
        self._commit(UpdateBlockInstance(instance_id, prev=prev, next=dict(changes)), description)
        return True

    def rotate_block_instance(self, instance_id: str) -> bool:
        """Rotate an instance a quarter turn clockwise (0, 90, 180, 270, 0, ...)"""
        instance = self._pattern.get_instance(instance_id)
        if instance is None:
            return False
        next_rotation = ROTATIONS[(ROTATIONS.index(instance.rotation) + 1) % len(ROTATIONS)]
        return self._update_instance(instance_id, {'rotation': next_rotation}, "Rotate block")

    def flip_block_instance_horizontal(self, instance_id: str) -> bool:
        instance = self._pattern.get_instance(instance_id)
        if instance is None:
            return False
        return self._update_instance(instance_id, {'flip_horizontal': not instance.flip_horizontal},
                                     "Flip block horizontal")

    def flip_block_instance_vertical(self, instance_id: str) -> bool:
        instance = self._pattern.get_instance(instance_id)
        if instance is None:
            return False
        return self._update_instance(instance_id, {'flip_vertical': not instance.flip_vertical},
                                     "Flip block vertical")

    # ========================================
    # Queries and selection
    # ========================================

    def get_block_instance_at(self, position: GridPosition) -> Optional[BlockInstance]:
        return self._pattern.get_instance_at(position)

    def is_position_occupied(self, position: GridPosition) -> bool:
        return self._pattern.get_instance_at(position) is not None

    def select_block_instance(self, instance_id: Optional[str]) -> bool:
        """Select an instance on the canvas, or deselect with None"""
        if instance_id is None:
            self._selected_instance_id = None
            if self._selected_library_block_id is None:
                self._mode = 'idle'
            return True
        if self._pattern.get_instance(instance_id) is None:
            return False
        self._selected_instance_id = instance_id
        self._selected_library_block_id = None
        self._selected_border_id = None
        self._mode = 'editing_block'
        return True

    def select_library_block(self, block_id: Optional[str]) -> None:
        """Choose the library block to place; resets the placement rotation"""
        self._selected_library_block_id = block_id
        if block_id is not None:
            self._selected_instance_id = None
            self._mode = 'placing_block'
        else:
            self._mode = 'idle'
        self._placement_rotation = 0

    def clear_selections(self) -> None:
        self._selected_instance_id = None
        self._selected_library_block_id = None
        self._selected_border_id = None
        self._mode = 'idle'
        self._placement_rotation = 0
        self._range_fill_anchor = None

    # ========================================
    # Placement rotation
    # ========================================

    def rotate_placement_clockwise(self) -> int:
        self._placement_rotation = ROTATIONS[(ROTATIONS.index(self._placement_rotation) + 1) % len(ROTATIONS)]
        return self._placement_rotation

    def reset_placement_rotation(self) -> None:
        self._placement_rotation = 0

    # ========================================
    # Block cache
    # ========================================

    def cache_block(self, block: Block) -> None:
        self._block_cache[block.id] = block

    def get_cached_block(self, block_id: str) -> Optional[Block]:
        return self._block_cache.get(block_id)

    def clear_block_cache(self) -> None:
        self._block_cache = {}
