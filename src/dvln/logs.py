# src/dvln/logs.py

import logging
from typing import cast

from .meta import PROGRAM_PACKAGE
from .utils_logs import OutputLogger


class AppLogger(OutputLogger):
    """App-specific logger class."""

    # for future use if needed, empty for now


# --- Logger initialization ---------------------------------------------------

# Force the logging module to use the Logger class globally.
# This must happen *before* any loggers are created.
AppLogger.extend_logging_module()

# Create the app logger instance via logging.getLogger()
# This ensures it's registered with the logging module and can be retrieved
# by other code that uses logging.getLogger()
_APP_LOGGER = cast("AppLogger", logging.getLogger(PROGRAM_PACKAGE))


# --- Convenience utils ---------------------------------------------------------


def getAppLogger() -> AppLogger:  # noqa: N802
    """Return the configured app logger.

    Use this in application code instead of logging.getLogger() for
    better type hints.
    """
    return _APP_LOGGER
