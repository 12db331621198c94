"""
Tests for Color parsing, palette editing and editor configuration.

Verifies:
- Color construction, normalization and value equality
- Palette copy-on-write edits return self when nothing changes
- Role id / color helpers for added and variant roles
- Config load / save, clamping and the environment override
"""
import json

import pytest

from models._designer_internal.roles import choose_fallback, new_role, next_role_id, next_variant_role_id
from models.color import Color, colors_equal, normalize_color
from models.palette import FabricRole, Palette, default_palette
from utils.config import EditorConfig, default_config_path, load_config, save_config


# ══════════════════════════════════════════════════════════════════════════
# Color
# ══════════════════════════════════════════════════════════════════════════

class TestColor:

    def test_from_hex(self):
        c = Color.from_hex('#FF8000')
        assert (c.r, c.g, c.b) == (255, 128, 0)

    def test_from_hex_no_hash(self):
        assert Color.from_hex('00ff00').to_hex() == '#00FF00'

    def test_short_hex_and_names(self):
        assert normalize_color('#abc') == '#AABBCC'
        assert normalize_color('navy') == '#000080'

    def test_invalid(self):
        assert Color.parse('not-a-color') is None
        assert Color.parse('') is None
        with pytest.raises(ValueError):
            normalize_color('#12')

    def test_equality_and_hash(self):
        assert Color(1, 2, 3) == Color.from_rgb255(1, 2, 3)
        assert len({Color(1, 2, 3), Color(1, 2, 3)}) == 1
        assert colors_equal('#fff', '#FFFFFF')
        assert not colors_equal('#fff', None)

    def test_components_clamped(self):
        assert Color(300, -5, 10).to_rgb255() == (255, 0, 10)


# ══════════════════════════════════════════════════════════════════════════
# Palette
# ══════════════════════════════════════════════════════════════════════════

class TestPalette:

    def test_default_palette(self):
        palette = default_palette()
        assert palette.role_ids() == ['background', 'feature', 'accent1', 'accent2']

    def test_unchanged_edits_return_self(self):
        palette = default_palette()
        assert palette.with_role_color('feature', '#2C3E50') is palette
        assert palette.with_role_color('missing', '#000000') is palette
        assert palette.without_role('missing') is palette
        assert palette.with_role_inserted(palette.get_role('feature')) is palette

    def test_insert_at_index(self):
        role = FabricRole('x', 'X', '#000000')
        assert default_palette().with_role_inserted(role, 1).index_of('x') == 1

    def test_find_by_color(self):
        palette = default_palette().with_role_inserted(FabricRole('variant_1', 'V', '#AA0000', True))
        assert palette.find_by_color('#aa0000').id == 'variant_1'
        assert palette.find_by_color('#aa0000', include_variants=False) is None

    def test_round_trip(self):
        palette = Palette((FabricRole('a', 'A', '#000000', True),))
        assert Palette.from_dict(palette.to_dict()) == palette


class TestRoleHelpers:

    def test_next_role_id_skips_taken(self):
        palette = default_palette().with_role_inserted(FabricRole('accent3', 'A3', '#000000'))
        assert next_role_id(palette) == 'accent4'

    def test_new_role_defaults(self):
        role = new_role(default_palette())
        assert (role.id, role.name, role.color) == ('accent3', 'Accent 3', '#2E8B57')

    def test_fallback(self):
        palette = default_palette()
        assert choose_fallback(palette, 'background') == 'feature'
        assert choose_fallback(palette, 'accent1', 'accent2') == 'accent2'
        assert choose_fallback(palette, 'accent1', 'accent1') == 'background'

    def test_fallback_skips_variants(self):
        palette = Palette((FabricRole('variant_1', 'V', '#AA0000', True), FabricRole('a', 'A', '#000000'),
                           FabricRole('b', 'B', '#FFFFFF')))
        assert choose_fallback(palette, 'a', skip_variants=True) == 'b'
        assert choose_fallback(palette, 'a') == 'variant_1'

    def test_variant_ids(self):
        palette = default_palette().with_role_inserted(FabricRole('variant_1', 'V', '#AA0000', True))
        assert next_variant_role_id(palette) == 'variant_2'


# ══════════════════════════════════════════════════════════════════════════
# Config
# ══════════════════════════════════════════════════════════════════════════

class TestConfig:

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(str(tmp_path / 'none.json')) == EditorConfig()

    def test_save_and_load(self, tmp_path):
        path = str(tmp_path / 'nested' / 'config.json')
        config = EditorConfig(max_history=20, default_block_grid_size=5, log_level='debug')
        save_config(config, path)
        loaded = load_config(path)
        assert loaded.max_history == 20
        assert loaded.default_block_grid_size == 5
        assert loaded.log_level == 'DEBUG'

    def test_values_clamped_and_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text(json.dumps({'default_block_grid_size': 40, 'default_pattern_rows': 0,
                                    'max_history': -3, 'theme': 'dark'}), encoding='utf-8')
        config = load_config(str(path))
        assert config.default_block_grid_size == 8
        assert config.default_pattern_rows == 2
        assert config.max_history == 1

    def test_env_override(self, monkeypatch, tmp_path):
        target = str(tmp_path / 'env.json')
        monkeypatch.setenv('QUILT_EDITOR_CONFIG', target)
        assert default_config_path() == target

    def test_config_drives_designer(self, ids):
        from models.block_designer import BlockDesigner
        from models.pattern_designer import PatternDesigner
        config = EditorConfig(max_history=2, default_block_grid_size=6, default_pattern_rows=5,
                              block_size_inches=10.0)
        block_designer = BlockDesigner(config=config, id_generator=ids)
        assert block_designer.grid_size == 6
        assert block_designer.history.max_history == 2
        pattern_designer = PatternDesigner(config=config, id_generator=ids)
        assert pattern_designer.grid_size.rows == 5
        assert pattern_designer.pattern.physical_size.height_inches == 50.0
