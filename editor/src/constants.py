"""
Quilt Block Editor - Constants and Configuration

This module contains all constant values used throughout the editor core:
- Default fabric palette and fallback role colors
- Block and pattern grid bounds
- Undo history capacity
- Border defaults and limits
- Text limits enforced by the external validation layer
"""

# ======================================================================
# FABRIC PALETTE
# ======================================================================
# Four standard roles, in palette order. Colors follow common quilting
# fabric combinations.

DEFAULT_PALETTE_ROLES = [
    {'id': 'background', 'name': 'Background', 'color': '#F5F5DC'},  # Beige/cream
    {'id': 'feature',    'name': 'Feature',    'color': '#2C3E50'},  # Navy blue
    {'id': 'accent1',    'name': 'Accent 1',   'color': '#8B4513'},  # Saddle brown
    {'id': 'accent2',    'name': 'Accent 2',   'color': '#DAA520'},  # Goldenrod
]

# Standard role ids
ROLE_BACKGROUND = 'background'
ROLE_FEATURE = 'feature'
ROLE_ACCENT1 = 'accent1'
ROLE_ACCENT2 = 'accent2'

# Role assigned to freshly placed units
DEFAULT_UNIT_ROLE = ROLE_BACKGROUND

# Maximum number of roles a palette may hold
MAX_PALETTE_ROLES = 8

# Colors handed out to roles added beyond the standard four, cycling
ADDITIONAL_ROLE_COLORS = [
    '#2E8B57',  # Sea green
    '#B22222',  # Firebrick
    '#4682B4',  # Steel blue
    '#9370DB',  # Medium purple
    '#FF8C00',  # Dark orange
    '#708090',  # Slate grey
]

# Used when ADDITIONAL_ROLE_COLORS is empty
ADDITIONAL_ROLE_FALLBACK_COLOR = '#808080'

# Rendered for a role id that resolves to nothing
FALLBACK_ROLE_COLOR = '#CCCCCC'

# Auto-registered variant color roles (pattern level)
VARIANT_ROLE_ID_PREFIX = 'variant_'
VARIANT_ROLE_NAME_PREFIX = 'Variant'

# ======================================================================
# BLOCK GRID
# ======================================================================

MIN_BLOCK_GRID_SIZE = 2
MAX_BLOCK_GRID_SIZE = 8
DEFAULT_BLOCK_GRID_SIZE = 3
BLOCK_GRID_SIZES = list(range(MIN_BLOCK_GRID_SIZE, MAX_BLOCK_GRID_SIZE + 1))

# ======================================================================
# PATTERN GRID
# ======================================================================

MIN_PATTERN_GRID_SIZE = 2
MAX_PATTERN_GRID_SIZE = 25
DEFAULT_PATTERN_ROWS = 4
DEFAULT_PATTERN_COLS = 4

# Grids larger than this on either axis get a performance warning in the UI
LARGE_GRID_THRESHOLD = 15

# Finished size of one block in the quilt
DEFAULT_BLOCK_SIZE_INCHES = 12.0

# Instance rotations, clockwise
ROTATIONS = [0, 90, 180, 270]

# ======================================================================
# HISTORY
# ======================================================================

MAX_UNDO_HISTORY = 100

# ======================================================================
# BORDERS
# ======================================================================

MAX_BORDERS = 3
DEFAULT_BORDER_WIDTH_INCHES = 2.5
BORDER_STYLES = ['plain', 'pieced']
BORDER_CORNER_STYLES = ['butted', 'mitered', 'cornerstone']
DEFAULT_BORDER_STYLE = 'plain'
DEFAULT_BORDER_CORNER_STYLE = 'butted'
DEFAULT_BORDER_ROLE = ROLE_ACCENT1

# ======================================================================
# DESIGNER MODES
# ======================================================================

BLOCK_DESIGNER_MODES = ['idle', 'placing_unit', 'placing_flying_geese_second', 'paint_mode', 'preview']
PATTERN_DESIGNER_MODES = ['idle', 'placing_block', 'selecting', 'preview', 'editing_block']
PREVIEW_PRESETS = ['all_same', 'alternating', 'pinwheel', 'random']
GRID_RESIZE_POSITIONS = ['start', 'end']

# ======================================================================
# TEXT LIMITS
# ======================================================================
# Enforced by the external schema layer; the designers clip to them.

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
HASHTAG_MAX_LENGTH = 50

# ======================================================================
# PERSISTENCE
# ======================================================================

DOCUMENT_FORMAT_VERSION = 2
DEFAULT_BLOCK_TITLE = 'Untitled Block'
DEFAULT_PATTERN_TITLE = 'Untitled Pattern'

# ======================================================================
# CONFIG
# ======================================================================

CONFIG_DIR_NAME = '.quilt_block_editor'
CONFIG_FILE_NAME = 'config.json'
CONFIG_PATH_ENV = 'QUILT_EDITOR_CONFIG'
