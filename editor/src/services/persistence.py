"""
Quilt Block Editor - Persistence Service

Converts Block and Pattern documents to and from plain JSON-ready dicts,
with a version tag and additive migrations for older documents, and reads
and writes those dicts as JSON files.

Migrations only fill in or rename; they never drop user data:
- v1 palette roles gain is_variant_color False
- 'shapes' lists become 'units'
- 'part_fabric_roles' / 'partFabricRoles' become 'patch_fabric_roles'
- units saved without a span get their type's span for their orientation
- block instances without 'palette_overrides' get {}
- patterns without 'border_config' keep None
"""

import json
import logging
import re
from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from constants import DOCUMENT_FORMAT_VERSION, HASHTAG_MAX_LENGTH
from models.document import Block, Pattern
from services.placement import count_empty_cells
from services.unit_registry import unit_registry
from utils.logger import loggerRaise

logger = logging.getLogger(__name__)

Document = Union[Block, Pattern]

KIND_BLOCK = 'block'
KIND_PATTERN = 'pattern'

HASHTAG_PATTERN = re.compile(r'#([a-zA-Z0-9_]+)')

LEGACY_PATCH_ROLE_KEYS = ('part_fabric_roles', 'partFabricRoles', 'patchFabricRoles')


# ========================================
# Migrations
# ========================================

def _migrate_palette(palette: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not palette:
        return palette
    for role in palette.get('roles', []):
        role.setdefault('is_variant_color', False)
    return palette


def _migrate_unit(unit: Dict[str, Any]) -> Dict[str, Any]:
    for key in LEGACY_PATCH_ROLE_KEYS:
        if key in unit:
            value = unit.pop(key)
            unit.setdefault('patch_fabric_roles', value)

    if 'span' not in unit:
        definition = unit_registry.get(unit.get('type', ''))
        if definition is not None:
            variant = unit.get('direction') or unit.get('variant')
            unit['span'] = definition.get_span(variant).to_dict()
        else:
            unit['span'] = {'rows': 1, 'cols': 1}
    return unit


def migrate_block_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """Bring a serialized block up to the current format

    Returns:
        A migrated copy; the input is left untouched
    """
    data = deepcopy(data)
    version = int(data.get('version', 1))

    if 'units' not in data and 'shapes' in data:
        data['units'] = data.pop('shapes')
    if 'palette' not in data:
        for legacy_key in ('preview_palette', 'previewPalette'):
            if legacy_key in data:
                data['palette'] = data.pop(legacy_key)
                break

    data['units'] = [_migrate_unit(unit) for unit in data.get('units') or []]
    data['palette'] = _migrate_palette(data.get('palette'))

    if version < DOCUMENT_FORMAT_VERSION:
        logger.debug(f"Migrated block from version {version} to {DOCUMENT_FORMAT_VERSION}")
    data['version'] = DOCUMENT_FORMAT_VERSION
    return data


def migrate_pattern_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """Bring a serialized pattern up to the current format"""
    data = deepcopy(data)
    version = int(data.get('version', 1))

    for instance in data.get('block_instances') or []:
        if instance.get('palette_overrides') is None:
            instance['palette_overrides'] = {}
    data.setdefault('border_config', None)
    data['palette'] = _migrate_palette(data.get('palette'))

    if version < DOCUMENT_FORMAT_VERSION:
        logger.debug(f"Migrated pattern from version {version} to {DOCUMENT_FORMAT_VERSION}")
    data['version'] = DOCUMENT_FORMAT_VERSION
    return data


# ========================================
# Serialize / Deserialize
# ========================================

def serialize_block(block: Block) -> Dict[str, Any]:
    data = block.to_dict()
    data['version'] = DOCUMENT_FORMAT_VERSION
    data['kind'] = KIND_BLOCK
    return data


def deserialize_block(data: Dict[str, Any]) -> Block:
    """Build a Block from a serialized dict of any supported version

    Raises:
        ValueError: If a unit has an unknown type
    """
    return Block.from_dict(migrate_block_data(data))


def serialize_pattern(pattern: Pattern) -> Dict[str, Any]:
    data = pattern.to_dict()
    data['version'] = DOCUMENT_FORMAT_VERSION
    data['kind'] = KIND_PATTERN
    return data


def deserialize_pattern(data: Dict[str, Any]) -> Pattern:
    return Pattern.from_dict(migrate_pattern_data(data))


def serialize_document(document: Document) -> Dict[str, Any]:
    if isinstance(document, Pattern):
        return serialize_pattern(document)
    if isinstance(document, Block):
        return serialize_block(document)
    raise TypeError(f"Cannot serialize {type(document).__name__}")


def document_kind(data: Dict[str, Any]) -> str:
    """'block' or 'pattern', from the kind tag or, for untagged files, the keys present"""
    kind = data.get('kind')
    if kind in (KIND_BLOCK, KIND_PATTERN):
        return kind
    return KIND_PATTERN if 'block_instances' in data else KIND_BLOCK


def deserialize_document(data: Dict[str, Any]) -> Document:
    if document_kind(data) == KIND_PATTERN:
        return deserialize_pattern(data)
    return deserialize_block(data)


# ========================================
# Files
# ========================================

def save_document(document: Document, filename: str) -> str:
    """Write a block or pattern to a JSON file

    Returns:
        The path written
    """
    try:
        with open(filename, 'w', encoding='utf-8') as f:
            json.dump(serialize_document(document), f, indent=2)
        logger.info(f"Saved {type(document).__name__.lower()} to {filename}")
        return filename
    except Exception as e:
        loggerRaise(e, f"Failed to save document to {filename}")


def load_document(filename: str) -> Document:
    """Read a block or pattern from a JSON file

    Raises:
        ValueError: If the file content is not a JSON object
    """
    try:
        with open(filename, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{filename} does not contain a document object")
        document = deserialize_document(data)
        logger.info(f"Loaded {type(document).__name__.lower()} from {filename}")
        return document
    except Exception as e:
        loggerRaise(e, f"Failed to load document from {filename}")


# ========================================
# Publishing helpers
# ========================================

@dataclass(frozen=True)
class PublishValidation:
    valid: bool
    error: Optional[str] = None
    empty_cells: int = 0


def validate_block_for_publish(block: Block) -> PublishValidation:
    """Check that a block has units and every cell is covered"""
    if not block.units:
        return PublishValidation(False, 'Add at least one unit before publishing',
                                 block.grid_size * block.grid_size)
    empty = count_empty_cells(block.units, block.grid_size)
    if empty > 0:
        plural = 's' if empty > 1 else ''
        return PublishValidation(False, f"{empty} empty cell{plural} remaining. Fill all cells to publish.",
                                 empty)
    return PublishValidation(True)


def extract_hashtags(text: Optional[str]) -> List[str]:
    """Lowercase '#tag' words from text, without the '#', first occurrence order"""
    if not text:
        return []
    tags = []
    for match in HASHTAG_PATTERN.finditer(text):
        tag = match.group(1).lower()[:HASHTAG_MAX_LENGTH]
        if tag not in tags:
            tags.append(tag)
    return tags
