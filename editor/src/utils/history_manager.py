"""
Undo/Redo History Manager for the Quilt Block Editor

Manages two bounded stacks of reversible operations. The manager does not
know what an operation means: callers supply the invert function, apply
what undo()/redo() return, and record every new edit.

The stack logic lives in pure functions over an immutable UndoState so it
can be unit-tested without any designer; HistoryManager wraps one state
and adds change listeners.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, Tuple, TypeVar

from constants import MAX_UNDO_HISTORY

T = TypeVar('T')


@dataclass(frozen=True)
class UndoState(Generic[T]):
    """Undo and redo stacks; the last element of each is the top."""
    undo_stack: Tuple[T, ...] = ()
    redo_stack: Tuple[T, ...] = ()


def create_undo_state() -> UndoState:
    return UndoState()


def record_operation(state: UndoState, operation: T, max_history: int = MAX_UNDO_HISTORY) -> UndoState:
    """Push an operation, dropping the oldest entries past max_history.

    A new edit always invalidates the redo stack.
    """
    undo_stack = state.undo_stack
    if len(undo_stack) >= max_history:
        undo_stack = undo_stack[len(undo_stack) - max_history + 1:]
    return UndoState(undo_stack + (operation,), ())


def undo_operation(state: UndoState, invert: Callable[[T], T]) -> Optional[Tuple[UndoState, T]]:
    """Pop the top operation.

    Returns:
        (new state, inverse operation to apply), or None if nothing to undo
    """
    if not state.undo_stack:
        return None
    operation = state.undo_stack[-1]
    new_state = UndoState(state.undo_stack[:-1], state.redo_stack + (operation,))
    return new_state, invert(operation)


def redo_operation(state: UndoState) -> Optional[Tuple[UndoState, T]]:
    """Pop the top redo entry.

    Returns:
        (new state, original operation to re-apply), or None if nothing to redo
    """
    if not state.redo_stack:
        return None
    operation = state.redo_stack[-1]
    new_state = UndoState(state.undo_stack + (operation,), state.redo_stack[:-1])
    return new_state, operation


def can_undo(state: UndoState) -> bool:
    return len(state.undo_stack) > 0


def can_redo(state: UndoState) -> bool:
    return len(state.redo_stack) > 0


def clear_history() -> UndoState:
    return UndoState()


class HistoryManager(Generic[T]):
    """Manages undo/redo history for one open document"""

    def __init__(self, invert: Callable[[T], T], max_history: int = MAX_UNDO_HISTORY):
        """
        Initialize the history manager

        Args:
            invert: Function returning the inverse of an operation
            max_history: Maximum number of operations kept on the undo stack

        Raises:
            ValueError: If max_history is less than 1
        """
        if max_history < 1:
            raise ValueError(f"max_history must be at least 1, got {max_history}")
        self.max_history = max_history
        self._invert = invert
        self._state: UndoState = create_undo_state()
        self._listeners: List[Callable[[bool, bool], None]] = []
        self._logger = logging.getLogger('History')

    @property
    def state(self) -> UndoState:
        return self._state

    @property
    def undo_count(self) -> int:
        return len(self._state.undo_stack)

    @property
    def redo_count(self) -> int:
        return len(self._state.redo_stack)

    def record(self, operation: T, description: str = "") -> None:
        """
        Record an operation that has already been applied

        Args:
            operation: The applied operation
            description: Optional description for logging
        """
        self._state = record_operation(self._state, operation, self.max_history)
        self._notify_listeners()
        self._logger.debug(f"Recorded: {description or type(operation).__name__} (undo: {self.undo_count})")

    def undo(self) -> Optional[T]:
        """
        Step back one operation

        Returns:
            The inverse operation to apply, or None if the undo stack is empty
        """
        result = undo_operation(self._state, self._invert)
        if result is None:
            self._logger.debug("Cannot undo - undo stack is empty")
            return None
        self._state, inverse = result
        self._notify_listeners()
        self._logger.debug(f"Undo: {type(inverse).__name__} (undo: {self.undo_count}, redo: {self.redo_count})")
        return inverse

    def redo(self) -> Optional[T]:
        """
        Step forward one operation

        Returns:
            The original operation to re-apply, or None if the redo stack is empty
        """
        result = redo_operation(self._state)
        if result is None:
            self._logger.debug("Cannot redo - redo stack is empty")
            return None
        self._state, operation = result
        self._notify_listeners()
        self._logger.debug(f"Redo: {type(operation).__name__} (undo: {self.undo_count}, redo: {self.redo_count})")
        return operation

    def can_undo(self) -> bool:
        """Check if undo is available"""
        return can_undo(self._state)

    def can_redo(self) -> bool:
        """Check if redo is available"""
        return can_redo(self._state)

    def clear(self) -> None:
        """Clear all history"""
        self._state = clear_history()
        self._notify_listeners()
        self._logger.debug("History cleared")

    def add_listener(self, callback: Callable[[bool, bool], None]) -> None:
        """
        Add a listener to be notified when history state changes

        Args:
            callback: Function to call when history changes (receives can_undo, can_redo)
        """
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[bool, bool], None]) -> None:
        """Remove a listener"""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify_listeners(self) -> None:
        """Notify all listeners of history state change"""
        for callback in list(self._listeners):
            try:
                callback(self.can_undo(), self.can_redo())
            except Exception:
                self._logger.exception("Error notifying history listener")
