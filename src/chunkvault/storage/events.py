"""
Caller callback plumbing shared by the writer, reader and eraser.
"""

import logging
from typing import Optional

from chunkvault.core.contracts import ErrorHandler, LogFunction, LogLevel

logger = logging.getLogger("chunkvault")


class EventSink:
    """
    Fan out progress and failure events to the caller and to ``logging``.

    Callbacks are observability only; nothing branches on them. Messages
    never carry value payloads.
    """

    def __init__(self, on_log: Optional[LogFunction] = None, on_error: Optional[ErrorHandler] = None):
        self.on_log = on_log
        self.on_error = on_error
        self.error_count = 0

    def log(self, message: str, level: LogLevel = "info"):
        if level == "error":
            logger.error(message)
        else:
            logger.info(message)
        if self.on_log is not None:
            self.on_log(message, level)

    def error(self, message: str):
        """Report one detected failure through the error callback."""
        self.error_count += 1
        logger.error(message)
        if self.on_error is not None:
            self.on_error(message)
