# xtrace_shiviz/model/__init__.py

"""
Domain objects for X-Trace to ShiViz conversion: vector clocks, trace
events and the per-node log records handed to the writer. These types
carry no conversion logic of their own.
"""

from .vector_clock import VectorClock
from .event import TraceEvent, XTrace
from .record import LogRecord

__all__ = [
    "VectorClock",
    "TraceEvent",
    "XTrace",
    "LogRecord",
]
