"""Unit registry - lookup table from unit type tag to its definition."""

import logging
from typing import Dict, List, Optional

from .base_unit import BaseUnitDefinition


class UnitRegistry:
    """Holds one definition per unit type id.

    Registration validates the definition and rejects duplicates. A frozen
    registry refuses further registration, which the default registry uses
    once the built-in types are in.
    """

    def __init__(self):
        self._definitions: Dict[str, BaseUnitDefinition] = {}
        self._frozen = False
        self._logger = logging.getLogger('UnitRegistry')

    def register(self, definition: BaseUnitDefinition) -> None:
        """Add a definition.

        Raises:
            RuntimeError: If the registry is frozen
            ValueError: If the definition is invalid or its type id is taken
        """
        if self._frozen:
            raise RuntimeError(f"Cannot register '{definition.type_id}': registry is frozen")
        errors = definition.validate_definition()
        if errors:
            raise ValueError(f"Invalid unit definition '{definition.type_id}': {'; '.join(errors)}")
        if definition.type_id in self._definitions:
            raise ValueError(f"Unit type '{definition.type_id}' is already registered")
        self._definitions[definition.type_id] = definition
        self._logger.debug(f"Registered unit type '{definition.type_id}'")

    def get(self, type_id: str) -> Optional[BaseUnitDefinition]:
        return self._definitions.get(type_id)

    def get_or_raise(self, type_id: str) -> BaseUnitDefinition:
        """Get a definition by type id.

        Raises:
            ValueError: If no definition is registered for type_id
        """
        definition = self._definitions.get(type_id)
        if definition is None:
            raise ValueError(f"Unknown unit type '{type_id}'")
        return definition

    def get_all(self) -> List[BaseUnitDefinition]:
        return list(self._definitions.values())

    def get_by_category(self, category: str) -> List[BaseUnitDefinition]:
        return [d for d in self._definitions.values() if d.category == category]

    def type_ids(self) -> List[str]:
        return list(self._definitions.keys())

    def has(self, type_id: str) -> bool:
        return type_id in self._definitions

    @property
    def size(self) -> int:
        return len(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, type_id: str) -> bool:
        return type_id in self._definitions

    def freeze(self) -> None:
        self._frozen = True

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def clear(self) -> None:
        """Remove every definition and unfreeze (test helper)."""
        self._definitions.clear()
        self._frozen = False
