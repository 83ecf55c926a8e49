"""Process-wide logger state shared by the logger modules."""

import queue
import threading
from dataclasses import dataclass, field
from logging.handlers import QueueListener


@dataclass(slots=True)
class LoggerState:
    """Root logger bookkeeping.

    Attributes:
        lock: Guards one-time root initialization
        root_initialized: Whether the root handler chain exists
        config_applied: Whether settings levels have been applied
        queue_listener: Thread draining ``log_queue`` into the handlers
        log_queue: Queue fed by the root QueueHandler

    """

    lock: threading.Lock = field(default_factory=threading.Lock)
    root_initialized: bool = False
    config_applied: bool = False
    queue_listener: QueueListener | None = None
    log_queue: queue.Queue | None = None


_state = LoggerState()


def get_state() -> LoggerState:
    return _state
