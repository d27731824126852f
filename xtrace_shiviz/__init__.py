# xtrace_shiviz/__init__.py
# This file is part of xtrace-shiviz - X-Trace to ShiViz conversion

"""Convert X-Trace causal traces into vector-clock annotated ShiViz logs.

Reports in an X-Trace dump only know their parents. This package orders
them causally, derives a vector clock per report and writes the per-node
log format that ShiViz visualizes.
"""

from .exceptions import (
    CausalOrderError,
    ConversionError,
    LogWriteError,
    TraceFormatError,
    TraceReadError,
    UnresolvedParentsError,
)

__all__ = [
    "ConversionError",
    "TraceReadError",
    "TraceFormatError",
    "LogWriteError",
    "CausalOrderError",
    "UnresolvedParentsError",
]

__version__ = "1.0.0"
