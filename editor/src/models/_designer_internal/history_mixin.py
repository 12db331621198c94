"""
Designer History Mixin

Record-then-apply plumbing shared by both designers. Every mutating action
builds one operation, hands it to _commit(), and never touches the document
directly; undo/redo re-use the same apply path.
"""

from utils.history_manager import HistoryManager


class DesignerHistoryMixin:
    """Mixin providing commit/undo/redo for a designer

    This mixin assumes the parent class has:
        - self._history: HistoryManager for the document's operation vocabulary
        - self._logger: logging.Logger instance
        - self._apply_operation(operation): apply to every document slice
        - self._after_history_step(): drop selections that no longer exist
    """

    # ========================================
    # Recording
    # ========================================

    def _commit(self, operation, description: str = "") -> None:
        """Apply an operation to the document and record it for undo"""
        self._apply_operation(operation)
        self._history.record(operation, description)
        self._dirty = True

    # ========================================
    # Undo / Redo
    # ========================================

    def undo(self) -> bool:
        """Undo the most recent operation

        Returns:
            False if there was nothing to undo
        """
        inverse = self._history.undo()
        if inverse is None:
            return False
        self._apply_operation(inverse)
        self._dirty = True
        self._after_history_step()
        return True

    def redo(self) -> bool:
        """Re-apply the most recently undone operation

        Returns:
            False if there was nothing to redo
        """
        operation = self._history.redo()
        if operation is None:
            return False
        self._apply_operation(operation)
        self._dirty = True
        self._after_history_step()
        return True

    def can_undo(self) -> bool:
        return self._history.can_undo()

    def can_redo(self) -> bool:
        return self._history.can_redo()

    @property
    def history(self) -> HistoryManager:
        return self._history

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    def mark_saved(self) -> None:
        self._dirty = False

    def _reset_history(self) -> None:
        """Fresh undo state for a newly loaded or created document"""
        self._history.clear()
        self._dirty = False
