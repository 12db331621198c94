"""
Tests for document serialization, migrations and file I/O.

Covers:
- Block and pattern serialize / deserialize
- Additive migrations of older documents
- JSON file save / load through tmp_path
- Publish validation and hashtag extraction
"""
import json

import pytest

from models.document import Block, Pattern
from models.pattern import BlockInstance, Border, BorderConfig
from models.transform import GridPosition, GridSize
from services.persistence import (
    deserialize_block, deserialize_document, deserialize_pattern, document_kind, extract_hashtags,
    load_document, migrate_block_data, migrate_pattern_data, save_document, serialize_block,
    serialize_pattern, validate_block_for_publish,
)

LEGACY_BLOCK = {
    'id': 'old-1',
    'title': 'Old Star',
    'grid_size': 2,
    'shapes': [
        {'type': 'square', 'id': 's1', 'position': {'row': 0, 'col': 0}, 'fabric_role': 'feature'},
        {'type': 'flying_geese', 'id': 'g1', 'position': {'row': 1, 'col': 0}, 'direction': 'right',
         'partFabricRoles': {'goose': 'feature', 'sky1': 'background', 'sky2': 'background'}},
    ],
    'previewPalette': {'roles': [
        {'id': 'background', 'name': 'Background', 'color': '#FFFFFF'},
        {'id': 'feature', 'name': 'Feature', 'color': '#000000'},
    ]},
}

LEGACY_PATTERN = {
    'id': 'p-old',
    'title': 'Old Quilt',
    'grid_size': {'rows': 2, 'cols': 3},
    'block_instances': [
        {'id': 'i1', 'block_id': 'b1', 'position': {'row': 0, 'col': 0}, 'rotation': 90},
    ],
    'palette': {'roles': [{'id': 'background', 'name': 'Background', 'color': '#FFFFFF'}]},
}


# ══════════════════════════════════════════════════════════════════════════
# Round trips
# ══════════════════════════════════════════════════════════════════════════

class TestSerialization:

    def test_block_round_trip(self, square_block):
        data = serialize_block(square_block)
        assert data['version'] == 2
        assert data['kind'] == 'block'
        assert deserialize_block(data) == square_block

    def test_pattern_round_trip(self):
        pattern = Pattern(
            id='p1',
            title='Quilt',
            grid_size=GridSize(2, 3),
            block_instances=(BlockInstance('i1', 'b1', GridPosition(1, 2), rotation=270, flip_vertical=True,
                                           palette_overrides={'feature': '#AA0000'}),),
            border_config=BorderConfig(True, (Border('br1', 3.0, 'pieced', 'feature', 'mitered'),)),
        )
        data = serialize_pattern(pattern)
        assert data['kind'] == 'pattern'
        assert json.loads(json.dumps(data)) == data
        assert deserialize_pattern(data) == pattern

    def test_document_kind_detection(self, square_block):
        assert document_kind({'block_instances': []}) == 'pattern'
        assert document_kind({'units': []}) == 'block'
        assert isinstance(deserialize_document(serialize_block(square_block)), Block)

    def test_unknown_unit_type_raises(self):
        data = {'grid_size': 2, 'units': [{'type': 'hexagon', 'id': 'x', 'position': {'row': 0, 'col': 0}}]}
        with pytest.raises(ValueError):
            deserialize_block(data)


# ══════════════════════════════════════════════════════════════════════════
# Migrations
# ══════════════════════════════════════════════════════════════════════════

class TestMigrations:

    def test_legacy_block_keys(self):
        data = migrate_block_data(LEGACY_BLOCK)
        assert data['version'] == 2
        assert 'shapes' not in data
        assert data['units'][1]['patch_fabric_roles']['goose'] == 'feature'
        assert 'partFabricRoles' not in data['units'][1]
        assert data['units'][1]['span'] == {'rows': 1, 'cols': 2}
        assert data['units'][0]['span'] == {'rows': 1, 'cols': 1}
        assert all(role['is_variant_color'] is False for role in data['palette']['roles'])

    def test_migration_leaves_input_untouched(self):
        migrate_block_data(LEGACY_BLOCK)
        assert 'shapes' in LEGACY_BLOCK
        assert 'span' not in LEGACY_BLOCK['shapes'][0]

    def test_legacy_block_loads(self):
        block = deserialize_block(LEGACY_BLOCK)
        assert [u.id for u in block.units] == ['s1', 'g1']
        assert block.palette.get_color('feature') == '#000000'
        assert block.get_unit('g1').patch_fabric_roles['sky1'] == 'background'

    def test_legacy_pattern(self):
        data = migrate_pattern_data(LEGACY_PATTERN)
        assert data['block_instances'][0]['palette_overrides'] == {}
        assert data['border_config'] is None
        pattern = deserialize_pattern(LEGACY_PATTERN)
        assert pattern.border_config is None
        assert pattern.block_instances[0].rotation == 90
        assert pattern.physical_size.width_inches == 36.0


# ══════════════════════════════════════════════════════════════════════════
# Files
# ══════════════════════════════════════════════════════════════════════════

class TestFiles:

    def test_save_and_load(self, tmp_path, square_block):
        path = str(tmp_path / 'block.json')
        assert save_document(square_block, path) == path
        assert load_document(path) == square_block

    def test_load_untagged_legacy_file(self, tmp_path):
        path = tmp_path / 'legacy.json'
        path.write_text(json.dumps(LEGACY_PATTERN), encoding='utf-8')
        assert isinstance(load_document(str(path)), Pattern)

    def test_load_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_document(str(tmp_path / 'missing.json'))

    def test_load_non_object_raises(self, tmp_path):
        path = tmp_path / 'list.json'
        path.write_text('[1, 2, 3]', encoding='utf-8')
        with pytest.raises(ValueError):
            load_document(str(path))


# ══════════════════════════════════════════════════════════════════════════
# Publishing helpers
# ══════════════════════════════════════════════════════════════════════════

class TestPublishing:

    def test_complete_block_is_valid(self, square_block):
        result = validate_block_for_publish(square_block)
        assert result.valid
        assert result.error is None

    def test_empty_block(self):
        result = validate_block_for_publish(Block(grid_size=3))
        assert not result.valid
        assert result.empty_cells == 9

    def test_partial_block(self, square_block):
        result = validate_block_for_publish(Block(grid_size=3, units=square_block.units))
        assert not result.valid
        assert result.empty_cells == 5
        assert result.error.startswith('5 empty cells')

    def test_hashtags(self):
        assert extract_hashtags('Scrappy #Log_Cabin with #log_cabin and #2024 #') == ['log_cabin', '2024']
        assert extract_hashtags(None) == []
        assert extract_hashtags('#' + 'a' * 80) == ['a' * 50]
