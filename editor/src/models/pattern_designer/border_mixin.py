"""
Quilt Block Editor - Pattern Border Mixin

Borders around the finished quilt, innermost first. The border config only
exists once borders are enabled or a border is added; operations that
create it carry created_config so undo removes it again.
"""

from typing import Any, Dict, Optional, Tuple

from constants import (
    BORDER_CORNER_STYLES, BORDER_STYLES, DEFAULT_BORDER_WIDTH_INCHES, MAX_BORDERS,
)
from models.pattern import Border, BorderConfig
from services.operations import (
    AddBorder, Batch, RemoveBorder, ReorderBorders, SetBordersEnabled, UpdateBorder,
)

BORDER_FIELDS = ('width_inches', 'style', 'fabric_role', 'corner_style')


class PatternBorderMixin:
    """Mixin containing border operations for PatternDesigner

    This mixin expects the parent class to have:
    - self._pattern: current Pattern document
    - self._id_generator: zero-argument id factory
    - self._logger: Logger instance
    - self._commit(operation, description): record-then-apply
    """

    @property
    def border_config(self) -> Optional[BorderConfig]:
        return self._pattern.border_config

    def set_borders_enabled(self, enabled: bool) -> bool:
        """Show or hide borders, creating an empty config on first enable

        Returns:
            False if nothing changes
        """
        config = self._pattern.border_config
        if config is None:
            if not enabled:
                return False
            self._commit(SetBordersEnabled(False, True, created_config=True), "Enable borders")
            return True
        if config.enabled == enabled:
            return False
        self._commit(SetBordersEnabled(config.enabled, enabled), "Toggle borders")
        if not enabled:
            self._selected_border_id = None
        return True

    def can_add_border(self) -> bool:
        config = self._pattern.border_config
        return config is None or len(config.borders) < MAX_BORDERS

    def add_border(self, width_inches: float = DEFAULT_BORDER_WIDTH_INCHES) -> Optional[str]:
        """Add an outermost border with default style, role and corners

        Adding a border also enables borders.

        Returns:
            New border id, or None at MAX_BORDERS or for a non-positive width
        """
        if not self.can_add_border() or width_inches <= 0:
            self._logger.debug(f"add_border: rejected (width {width_inches})")
            return None
        config = self._pattern.border_config
        border = Border(id=self._id_generator(), width_inches=float(width_inches))
        if config is None:
            operation = AddBorder(border, 0, created_config=True)
        elif not config.enabled:
            operation = Batch((SetBordersEnabled(False, True), AddBorder(border, len(config.borders))))
        else:
            operation = AddBorder(border, len(config.borders))
        self._commit(operation, "Add border")
        self._selected_border_id = border.id
        self._logger.debug(f"Added border {border.id} ({width_inches} in)")
        return border.id

    def remove_border(self, border_id: str) -> bool:
        config = self._pattern.border_config
        if config is None:
            return False
        index = config.index_of(border_id)
        if index == -1:
            return False
        self._commit(RemoveBorder(config.borders[index], index), "Remove border")
        if self._selected_border_id == border_id:
            self._selected_border_id = None
        return True

    def update_border(self, border_id: str, **changes: Any) -> bool:
        """Change border fields (width_inches, style, fabric_role, corner_style)

        Returns:
            False if the border is missing, a value is invalid, or nothing changes
        """
        config = self._pattern.border_config
        border = config.get_border(border_id) if config else None
        if border is None:
            return False
        updates = self._validated_border_changes(changes)
        if not updates:
            return False
        prev = border.read_fields(updates.keys())
        if prev == updates:
            return False
        self._commit(UpdateBorder(border_id, prev=prev, next=updates), "Edit border")
        return True

    def _validated_border_changes(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        updates = {}
        for key, value in changes.items():
            if key not in BORDER_FIELDS:
                self._logger.debug(f"update_border: unknown field '{key}'")
                return {}
            if key == 'width_inches':
                try:
                    value = float(value)
                except (TypeError, ValueError):
                    self._logger.debug(f"update_border: width '{value}' is not a number")
                    return {}
                if value <= 0:
                    return {}
            elif key == 'style' and value not in BORDER_STYLES:
                return {}
            elif key == 'corner_style' and value not in BORDER_CORNER_STYLES:
                return {}
            elif key == 'fabric_role' and not self._pattern.palette.has_role(value):
                return {}
            updates[key] = value
        return updates

    def reorder_borders(self, from_index: int, to_index: int) -> bool:
        config = self._pattern.border_config
        if config is None or from_index == to_index:
            return False
        count = len(config.borders)
        if not (0 <= from_index < count and 0 <= to_index < count):
            return False
        self._commit(ReorderBorders(from_index, to_index), "Reorder borders")
        return True

    def select_border(self, border_id: Optional[str]) -> bool:
        if border_id is None:
            self._selected_border_id = None
            return True
        config = self._pattern.border_config
        if config is None or config.get_border(border_id) is None:
            return False
        self._selected_border_id = border_id
        self._selected_instance_id = None
        self._selected_library_block_id = None
        return True

    # ========================================
    # Sizes
    # ========================================

    def total_border_width(self) -> float:
        """Width added on each side by enabled borders, in inches"""
        config = self._pattern.border_config
        if config is None or not config.enabled:
            return 0.0
        return config.total_width_inches

    def final_quilt_size(self) -> Tuple[float, float]:
        """(width, height) in inches including borders on both sides"""
        size = self._pattern.physical_size
        extra = 2 * self.total_border_width()
        return size.width_inches + extra, size.height_inches + extra
