# xtrace_shiviz/core/__init__.py
# This file is part of xtrace-shiviz - X-Trace to ShiViz conversion
#
# Core module public API for the conversion engine

"""Causal-order resolution and vector clock construction.

Primary Components:
    CausalSorter: Orders events so parents precede children
    ClockAssigner: Builds a vector clock per event, guarding against
        duplicate or regressing ticks on fork/rejoin
    TraceConverter: Runs sorter and assigner over one trace
    convert_file: Read, convert and write in one call

Example:
    >>> from xtrace_shiviz.core import convert_file
    >>> result = convert_file("trace.json", "trace.shiviz")
    >>> result.dropped_count
    0
"""

from .causal_sorter import CausalSorter, SORT_STRATEGIES, sort_events
from .clock_assigner import ClockAssigner
from .converter import (
    ConversionResult,
    TraceConverter,
    convert_file,
    convert_trace,
    write_trace_log,
)

__all__ = [
    "CausalSorter",
    "SORT_STRATEGIES",
    "sort_events",
    "ClockAssigner",
    "ConversionResult",
    "TraceConverter",
    "convert_file",
    "convert_trace",
    "write_trace_log",
]
