"""Configuration management for the Quilt Block Editor"""

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from typing import Optional

from constants import (
    CONFIG_DIR_NAME, CONFIG_FILE_NAME, CONFIG_PATH_ENV,
    DEFAULT_BLOCK_GRID_SIZE, DEFAULT_BLOCK_SIZE_INCHES, DEFAULT_PATTERN_COLS, DEFAULT_PATTERN_ROWS,
    MAX_BLOCK_GRID_SIZE, MAX_PATTERN_GRID_SIZE, MAX_UNDO_HISTORY, MIN_BLOCK_GRID_SIZE,
    MIN_PATTERN_GRID_SIZE,
)
from utils.logger import loggerRaise

logger = logging.getLogger(__name__)


@dataclass
class EditorConfig:
    """User-tunable editor settings"""
    max_history: int = MAX_UNDO_HISTORY
    default_block_grid_size: int = DEFAULT_BLOCK_GRID_SIZE
    default_pattern_rows: int = DEFAULT_PATTERN_ROWS
    default_pattern_cols: int = DEFAULT_PATTERN_COLS
    block_size_inches: float = DEFAULT_BLOCK_SIZE_INCHES
    log_level: str = 'WARNING'

    def clamped(self) -> 'EditorConfig':
        """Copy with every value forced into its allowed range"""
        return EditorConfig(
            max_history=max(1, int(self.max_history)),
            default_block_grid_size=_clamp(int(self.default_block_grid_size),
                                           MIN_BLOCK_GRID_SIZE, MAX_BLOCK_GRID_SIZE),
            default_pattern_rows=_clamp(int(self.default_pattern_rows),
                                        MIN_PATTERN_GRID_SIZE, MAX_PATTERN_GRID_SIZE),
            default_pattern_cols=_clamp(int(self.default_pattern_cols),
                                        MIN_PATTERN_GRID_SIZE, MAX_PATTERN_GRID_SIZE),
            block_size_inches=float(self.block_size_inches) if float(self.block_size_inches) > 0
            else DEFAULT_BLOCK_SIZE_INCHES,
            log_level=str(self.log_level).upper(),
        )


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def default_config_path() -> str:
    """Config file location, overridable with the QUILT_EDITOR_CONFIG variable"""
    override = os.environ.get(CONFIG_PATH_ENV)
    if override:
        return override
    return os.path.join(os.path.expanduser('~'), CONFIG_DIR_NAME, CONFIG_FILE_NAME)


def load_config(path: Optional[str] = None) -> EditorConfig:
    """Load settings from a JSON config file

    A missing file gives the defaults. Unknown keys are ignored and values
    are clamped into range.
    """
    path = path or default_config_path()
    if not os.path.exists(path):
        logger.debug(f"No config at {path}, using defaults")
        return EditorConfig()
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        known = {f.name for f in fields(EditorConfig)}
        config = EditorConfig(**{k: v for k, v in data.items() if k in known})
        return config.clamped()
    except Exception as e:
        loggerRaise(e, f"Error loading config from {path}")


def save_config(config: EditorConfig, path: Optional[str] = None) -> str:
    """Save settings to a JSON config file

    Returns:
        The path written
    """
    path = path or default_config_path()
    try:
        # Create config directory if it doesn't exist
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(asdict(config), f, indent=2)
        return path
    except Exception as e:
        loggerRaise(e, f"Error saving config to {path}")
