"""Identifier generation for units, instances, borders and documents.

Designers take an id generator (any zero-argument callable returning a str)
so tests can supply deterministic ids.
"""

import itertools
import uuid as uuid_module
from typing import Callable

IdGenerator = Callable[[], str]


def generate_uuid() -> str:
    """Random UUID4 string, the default generator."""
    return str(uuid_module.uuid4())


class SequentialIdGenerator:
    """Deterministic ids: '<prefix>-1', '<prefix>-2', ..."""

    def __init__(self, prefix: str = 'id', start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"
