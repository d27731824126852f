# xtrace_shiviz/exceptions.py
# This file is part of xtrace-shiviz - X-Trace to ShiViz conversion
#
# Custom exceptions for trace decoding, causal ordering and log output

"""Domain-specific exceptions for trace conversion.

Every failure the converter can report derives from ConversionError so the
command-line front end can map each kind to its own exit status.
"""

from typing import Sequence


class ConversionError(RuntimeError):
    """Base class for all conversion failures."""

    pass


class TraceReadError(ConversionError):
    """Raised when the input trace file cannot be opened or read."""

    pass


class TraceFormatError(ConversionError):
    """Raised when the trace file is not valid JSON or does not match the
    X-Trace report schema."""

    pass


class LogWriteError(ConversionError):
    """Raised when the ShiViz log cannot be created or a write fails.

    The output file may already hold a partial log when this is raised.
    """

    pass


class CausalOrderError(ConversionError):
    """Raised when clock assignment sees an event before one of its parents."""

    pass


class UnresolvedParentsError(ConversionError):
    """Raised in strict mode when causal sorting had to drop events."""

    def __init__(self, event_ids: Sequence[str]):
        self.event_ids = list(event_ids)
        super().__init__(
            f"{len(self.event_ids)} event(s) reference parents missing from the trace: "
            + ", ".join(self.event_ids[:10])
            + (" ..." if len(self.event_ids) > 10 else "")
        )
