"""
Logging configuration for the sixsched command-line tools.

The engine modules only create loggers; handlers are installed here.
"""
import logging

from rich.logging import RichHandler

LEVELS = {-1: logging.WARNING, 0: logging.INFO, 1: logging.DEBUG}


def init_logging(verbosity: int = 0) -> logging.Logger:
    """
    Configure Rich logging for the CLI.

    Args:
        verbosity: -1 for warnings only, 0 for progress, 1 or more for
            per-combination debug output
    """
    level = LEVELS[max(-1, min(1, verbosity))]
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=verbosity > 0, markup=False)],
        force=True,
    )
    return logging.getLogger("sixsched")
