"""Unit type plugin system.

Each unit type is a self-contained plugin that defines its patches,
orientation variants, transform behavior and geometry. Adding a type means
adding a plugin module and an entry in AVAILABLE_UNITS.
"""

from .base_unit import BaseUnitDefinition, PatchDefinition, PlacementValidation, Triangle, UnitConfig
from .registry import UnitRegistry
from .square_unit import SquareDefinition
from .hst_unit import HstDefinition
from .qst_unit import QstDefinition
from .flying_geese_unit import FlyingGeeseDefinition

# Built-in unit types, in picker order
AVAILABLE_UNITS = {
    'square': SquareDefinition,
    'hst': HstDefinition,
    'flying_geese': FlyingGeeseDefinition,
    'qst': QstDefinition,
}


def create_registry(freeze: bool = True) -> UnitRegistry:
    """Build a registry holding every built-in unit type.

    Args:
        freeze: Refuse further registration once populated

    Returns:
        Populated UnitRegistry
    """
    registry = UnitRegistry()
    for definition_class in AVAILABLE_UNITS.values():
        registry.register(definition_class())
    if freeze:
        registry.freeze()
    return registry


# Shared default registry used when callers do not supply their own
unit_registry = create_registry()


def get_unit_definition(type_id: str) -> BaseUnitDefinition:
    """Get a definition from the default registry.

    Raises:
        ValueError: If the type is unknown
    """
    return unit_registry.get_or_raise(type_id)


def get_available_units():
    """Get list of (type_id, display_name) tuples for the unit picker."""
    return [(d.type_id, d.display_name) for d in unit_registry.get_all()]


__all__ = [
    'BaseUnitDefinition', 'PatchDefinition', 'PlacementValidation', 'Triangle', 'UnitConfig',
    'UnitRegistry', 'AVAILABLE_UNITS', 'create_registry', 'unit_registry',
    'get_unit_definition', 'get_available_units',
]
