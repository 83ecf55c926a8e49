"""Logger factory.

Module loggers hang off the single ``release_auth`` root logger.
"""

import atexit
import logging

from release_auth.constants import LOG_ROOT_NAME
from release_auth.logger.config import load_log_settings
from release_auth.logger.handlers import setup_root_logger
from release_auth.logger.state import get_state


def _stop_listener() -> None:
    # stop() drains the queue before joining the thread
    state = get_state()
    if state.queue_listener is not None:
        state.queue_listener.stop()
        state.queue_listener = None


atexit.register(_stop_listener)


def get_logger(name: str = LOG_ROOT_NAME) -> logging.Logger:
    """Return a logger, initializing the ``release_auth`` root once.

    Use __name__ as the logger name so records propagate to the root:
        >>> logger = get_logger(__name__)
        >>> logger.info("Resolved %s", url)

    Raises:
        LoggingConfigurationError: If the log file cannot be opened

    """
    state = get_state()
    with state.lock:
        if not state.root_initialized:
            console_level, file_level, log_file = load_log_settings()
            setup_root_logger(state, console_level, file_level, log_file)
    return logging.getLogger(name)

