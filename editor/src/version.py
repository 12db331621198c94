"""Application version module.

In development: reads the VERSION file at the project root.
In frozen builds: uses _BAKED_VERSION written by the build script.
"""

from pathlib import Path

# This line is overwritten by the build script when packaging.
_BAKED_VERSION = None

# Used when no VERSION file is present (e.g. an installed wheel)
DEFAULT_VERSION = "0.1.0"


def get_version() -> str:
    """Get the application version string (e.g. '0.1.0')."""
    if _BAKED_VERSION is not None:
        return _BAKED_VERSION
    return _dev_version()


def _dev_version() -> str:
    # VERSION file is at project root (editor/src/version.py -> ../../VERSION)
    version_file = Path(__file__).resolve().parent.parent.parent / "VERSION"
    try:
        return version_file.read_text().strip() or DEFAULT_VERSION
    except FileNotFoundError:
        return DEFAULT_VERSION
