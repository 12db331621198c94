"""Global logging and error handling utilities"""
import logging
import sys
import traceback

# Detect debug mode - True if running from source, False if packaged
DEBUG_MODE = not getattr(sys, 'frozen', False)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_logger = logging.getLogger('Editor')


def configure_logging(level=logging.WARNING):
    """Configure root logging for command-line use

    Args:
        level: Logging level name or number (default: warnings and errors only)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout)  # Output to console
        ],
        force=True,
    )


def loggerRaise(e: Exception, user_message: str = None, title: str = "Error"):
    """Handle exceptions at I/O boundaries

    Args:
        e: The exception to handle
        user_message: User-friendly message describing what failed (optional)
        title: Short title prefixed to the logged message

    In DEBUG_MODE:
        - Just raises the exception (shows full traceback)

    In RELEASE_MODE:
        - Logs the user message and the full traceback
        - Then raises the exception
    """
    if DEBUG_MODE:
        # Dev mode: just raise to see full traceback
        raise e

    tb = traceback.format_exc()
    message = user_message if user_message else str(e)
    _logger.error(f"{title}: {message}")
    _logger.error(tb)

    # Re-raise so the caller can handle it appropriately
    raise e
