# xtrace_shiviz/utils/logger.py
# This file is part of xtrace-shiviz - X-Trace to ShiViz conversion
#
# Logging utility for trace conversion with configurable levels

import logging
import sys
from enum import Enum
from typing import Iterable, Optional


class LogLevel(Enum):
    """Log levels for trace conversion."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


class ConverterLogger:
    """Centralized logger for the converter with short, structured output."""

    def __init__(self, name: str = "xtrace_shiviz", level: LogLevel = LogLevel.WARNING):
        """Initialize the converter logger.

        Args:
            name: Logger name
            level: Default logging level
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level.value)

        # Remove existing handlers to avoid duplicates
        self.logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level.value)
        console_handler.setFormatter(ConverterFormatter())

        self.logger.addHandler(console_handler)

        # Prevent propagation to root logger
        self.logger.propagate = False

    def set_level(self, level: LogLevel):
        """Change the logging level."""
        self.logger.setLevel(level.value)
        for handler in self.logger.handlers:
            handler.setLevel(level.value)

    # Core logging methods
    def debug(self, message: str, **kwargs):
        """Log debug message (detailed internal state)."""
        self.logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs):
        """Log info message (general progress)."""
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message (unexpected but recoverable)."""
        self.logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs):
        """Log error message (serious problems)."""
        self.logger.error(message, **kwargs)

    # Specialized methods for conversion events
    def conversion_start(self, trace_id: str, event_count: int, strategy: str):
        """Log the start of a conversion run."""
        self.info(f"=== Converting trace {trace_id} ===")
        self.info(f"Events: {event_count}, sort strategy: {strategy}")

    def sort_summary(self, emitted: int, dropped: int):
        """Log how many events survived causal sorting."""
        self.debug(f"    🔧 causal sort: {emitted} ordered, {dropped} unresolved")

    def events_dropped(self, event_ids: Iterable[str]):
        """Log events excluded because a parent is missing from the trace."""
        ids = list(event_ids)
        if not ids:
            return
        preview = ", ".join(ids[:10])
        more = f" (+{len(ids) - 10} more)" if len(ids) > 10 else ""
        self.warning(
            f"⚠️  {len(ids)} event(s) dropped, parents not resolvable in trace: {preview}{more}"
        )

    def record_emitted(self, event_id: str, node_id: str, clock: str):
        """Log one assigned clock."""
        self.debug(f"      {event_id} → {node_id} {clock}")

    def conversion_done(self, records: int, output: str):
        """Log the end of a conversion run."""
        self.info(f"✅ Wrote {records} record(s) to {output}")

    def validation_result(self, success: bool, message: str = ""):
        """Log validation results."""
        if success:
            self.info(f"✅ {message}" if message else "✅ Validation successful")
        else:
            self.error(f"❌ {message}" if message else "❌ Validation failed")


class ConverterFormatter(logging.Formatter):
    """Custom formatter for converter logging with clean output."""

    def format(self, record):
        # For INFO level and above, show message only (clean output)
        if record.levelno >= logging.INFO:
            return record.getMessage()

        # For DEBUG level, show with level indicator
        if record.levelno == logging.DEBUG:
            return f"[DEBUG] {record.getMessage()}"

        return f"[{record.levelname}] {record.getMessage()}"


# Global logger instance
_global_logger: Optional[ConverterLogger] = None


def get_logger(name: str = "xtrace_shiviz") -> ConverterLogger:
    """Get or create the global converter logger instance.

    Args:
        name: Logger name (default: "xtrace_shiviz")

    Returns:
        ConverterLogger instance
    """
    global _global_logger
    if _global_logger is None:
        _global_logger = ConverterLogger(name)
    return _global_logger


def set_log_level(level: LogLevel):
    """Set the global log level.

    Args:
        level: New log level
    """
    get_logger().set_level(level)


def configure_logging(verbose: bool = False, debug: bool = False):
    """Configure logging based on command line flags.

    Args:
        verbose: Enable verbose (INFO) output
        debug: Enable debug output (overrides verbose)
    """
    if debug:
        set_log_level(LogLevel.DEBUG)
    elif verbose:
        set_log_level(LogLevel.INFO)
    else:
        set_log_level(LogLevel.WARNING)
