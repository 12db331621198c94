"""
Quilt Block Editor - Fabric Palette Model

A palette is an ordered list of fabric roles. Units and instances reference
roles by id rather than by literal color, so recoloring a role recolors
every piece that uses it.

Palettes are immutable: every edit returns a new Palette and leaves the
original untouched, which lets operation reducers return the same object
when nothing changed.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from constants import DEFAULT_PALETTE_ROLES
from models.color import colors_equal


@dataclass(frozen=True)
class FabricRole:
    """Named, colored slot referenced by units and instances.

    Attributes:
        id: Unique id within the owning palette
        name: Display name
        color: '#RRGGBB' color
        is_variant_color: True for roles auto-registered from instance overrides
    """
    id: str
    name: str
    color: str
    is_variant_color: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data = {'id': self.id, 'name': self.name, 'color': self.color}
        if self.is_variant_color:
            data['is_variant_color'] = True
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'FabricRole':
        return FabricRole(
            id=data['id'],
            name=data.get('name', data['id']),
            color=data['color'],
            is_variant_color=bool(data.get('is_variant_color', False)),
        )


@dataclass(frozen=True)
class Palette:
    """Ordered, immutable collection of fabric roles."""
    roles: Tuple[FabricRole, ...] = ()

    def __len__(self) -> int:
        return len(self.roles)

    def __iter__(self):
        return iter(self.roles)

    # ========================================
    # Queries
    # ========================================

    def get_role(self, role_id: str) -> Optional[FabricRole]:
        for role in self.roles:
            if role.id == role_id:
                return role
        return None

    def has_role(self, role_id: str) -> bool:
        return self.get_role(role_id) is not None

    def index_of(self, role_id: str) -> int:
        """Index of a role in palette order, or -1 if absent."""
        for i, role in enumerate(self.roles):
            if role.id == role_id:
                return i
        return -1

    def role_ids(self) -> List[str]:
        return [role.id for role in self.roles]

    def get_color(self, role_id: str) -> Optional[str]:
        role = self.get_role(role_id)
        return role.color if role else None

    def find_by_color(self, color: str, include_variants: bool = True) -> Optional[FabricRole]:
        """First role whose color equals the given color by value."""
        for role in self.roles:
            if role.is_variant_color and not include_variants:
                continue
            if colors_equal(role.color, color):
                return role
        return None

    def variant_roles(self) -> List[FabricRole]:
        return [role for role in self.roles if role.is_variant_color]

    # ========================================
    # Copy-on-write edits
    # ========================================

    def with_role_color(self, role_id: str, color: str) -> 'Palette':
        """Return a palette with one role recolored (self if absent or unchanged)."""
        role = self.get_role(role_id)
        if role is None or role.color == color:
            return self
        return self._with_role_replaced(replace(role, color=color))

    def with_role_name(self, role_id: str, name: str) -> 'Palette':
        role = self.get_role(role_id)
        if role is None or role.name == name:
            return self
        return self._with_role_replaced(replace(role, name=name))

    def with_role_inserted(self, role: FabricRole, index: Optional[int] = None) -> 'Palette':
        """Insert a role at an index (appended if None or out of range).

        Inserting an id that already exists returns self.
        """
        if self.has_role(role.id):
            return self
        roles = list(self.roles)
        if index is None or index < 0 or index > len(roles):
            roles.append(role)
        else:
            roles.insert(index, role)
        return Palette(tuple(roles))

    def without_role(self, role_id: str) -> 'Palette':
        if not self.has_role(role_id):
            return self
        return Palette(tuple(role for role in self.roles if role.id != role_id))

    def _with_role_replaced(self, new_role: FabricRole) -> 'Palette':
        return Palette(tuple(new_role if role.id == new_role.id else role for role in self.roles))

    # ========================================
    # Serialization
    # ========================================

    def to_dict(self) -> Dict[str, Any]:
        return {'roles': [role.to_dict() for role in self.roles]}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'Palette':
        return Palette(tuple(FabricRole.from_dict(r) for r in data.get('roles', [])))


def default_palette() -> Palette:
    """Fresh copy of the four standard roles."""
    return Palette(tuple(FabricRole.from_dict(r) for r in DEFAULT_PALETTE_ROLES))
