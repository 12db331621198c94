"""Partial field patches for immutable dataclass models.

A patch is a plain dict keyed by field name. Operations carry patches as
their before/after state, so the helpers here are the only place patches
are read from or written into model objects.
"""

import logging
from dataclasses import fields, replace
from typing import Any, Dict, Iterable

logger = logging.getLogger(__name__)

Patch = Dict[str, Any]


def apply_field_patch(obj, patch: Patch, protected: Iterable[str] = ('id',)):
    """Return a copy of a frozen dataclass with patch fields applied.

    Unknown keys and protected keys are skipped. Dict values are copied so
    the result never shares a mutable mapping with the patch.

    Args:
        obj: Frozen dataclass instance
        patch: Field name -> new value
        protected: Field names a patch may not change

    Returns:
        New instance, or obj itself when the patch changes nothing
    """
    if not patch:
        return obj
    names = {f.name for f in fields(obj)}
    changes = {}
    for key, value in patch.items():
        if key in protected:
            continue
        if key not in names:
            logger.debug(f"Ignoring patch key '{key}' for {type(obj).__name__}")
            continue
        if getattr(obj, key) == value:
            continue
        changes[key] = dict(value) if isinstance(value, dict) else value
    if not changes:
        return obj
    return replace(obj, **changes)


def snapshot_fields(obj, keys: Iterable[str]) -> Patch:
    """Read the named fields into a patch (dict values copied)."""
    snapshot = {}
    for key in keys:
        value = getattr(obj, key)
        snapshot[key] = dict(value) if isinstance(value, dict) else value
    return snapshot
