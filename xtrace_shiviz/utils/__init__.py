# xtrace_shiviz/utils/__init__.py
# This file is part of xtrace-shiviz - X-Trace to ShiViz conversion
#
# Utility module exports

from .trace_reader import read_trace, read_traces, describe_events
from .shiviz_writer import SHIVIZ_HEADER, SHIVIZ_REGEX, format_record, write_shiviz_log
from .logger import LogLevel, configure_logging, get_logger

__all__ = [
    "read_trace",
    "read_traces",
    "describe_events",
    "SHIVIZ_HEADER",
    "SHIVIZ_REGEX",
    "format_record",
    "write_shiviz_log",
    "LogLevel",
    "configure_logging",
    "get_logger",
]
