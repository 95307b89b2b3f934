"""Python logging handler capturing processor diagnostics.

Per-metric failures never reach the caller of ParserProcessor.apply(); they
only show up in logs. This handler keeps the most recent records as
LogEntry values so they can be inspected programmatically.
"""

import logging
import threading
import traceback
from collections import deque

from metricparse.core.models import LogEntry

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

# Default attributes to extract from LogRecord
_DEFAULT_INCLUDE_ATTRS = ["module", "funcName", "lineno"]


class LogCaptureHandler(logging.Handler):
    """Logging handler that keeps records in a bounded buffer.

    When the buffer is full the oldest entry is evicted.

    Example:
        ```python
        handler = LogCaptureHandler()
        logging.getLogger("metricparse").addHandler(handler)
        processor.apply(metric)
        for entry in handler.errors():
            print(entry.message)
        ```
    """

    def __init__(
        self,
        max_size: int = 1000,
        include_attrs: list[str] | None = None,
        level: int = logging.NOTSET,
    ) -> None:
        """Initialize the handler.

        Args:
            max_size: Maximum number of entries to keep.
            include_attrs: LogRecord attributes to include. Defaults to
                ["module", "funcName", "lineno"].
            level: Minimum level handled.
        """
        super().__init__(level)
        self._buffer: deque[LogEntry] = deque(maxlen=max_size)
        self._buffer_lock = threading.Lock()
        self._include_attrs = include_attrs or _DEFAULT_INCLUDE_ATTRS

    def emit(self, record: logging.LogRecord) -> None:
        """Convert a log record to a LogEntry and store it."""
        attr_mapping: dict[str, str | int | float | bool] = {
            "module": record.name,
            "funcName": record.funcName or "",
            "lineno": record.lineno,
            "pathname": record.pathname,
        }

        attributes: dict[str, str | int | float | bool] = {
            key: attr_mapping[key] for key in self._include_attrs if key in attr_mapping
        }

        # Add any extra attributes passed via logging call
        for key, value in record.__dict__.items():
            if key not in _STANDARD_LOGRECORD_ATTRS and isinstance(
                value, (str, int, float, bool)
            ):
                attributes[key] = value

        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            if exc_type is not None:
                attributes["exc_type"] = exc_type.__name__
            if exc_value is not None:
                attributes["exc_message"] = str(exc_value)
            if exc_tb is not None:
                attributes["exc_traceback"] = "".join(
                    traceback.format_exception(exc_type, exc_value, exc_tb)
                )

        entry = LogEntry(
            timestamp=record.created,
            level=record.levelname,
            message=record.getMessage(),
            attributes=attributes,
        )
        with self._buffer_lock:
            self._buffer.append(entry)

    def entries(self, level: str | None = None) -> list[LogEntry]:
        """Return captured entries, optionally only those of one level."""
        with self._buffer_lock:
            captured = list(self._buffer)
        if level is None:
            return captured
        return [e for e in captured if e.level == level.upper()]

    def errors(self) -> list[LogEntry]:
        return self.entries("ERROR")

    def warnings(self) -> list[LogEntry]:
        return self.entries("WARNING")

    def clear(self) -> None:
        with self._buffer_lock:
            self._buffer.clear()
