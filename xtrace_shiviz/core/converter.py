# xtrace_shiviz/core/converter.py
# This file is part of xtrace-shiviz - X-Trace to ShiViz conversion
#
# Conversion pipeline: trace -> causal order -> vector clocks -> ShiViz log

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

from xtrace_shiviz.exceptions import UnresolvedParentsError
from xtrace_shiviz.model.event import TraceEvent, XTrace
from xtrace_shiviz.model.record import LogRecord
from xtrace_shiviz.utils.logger import get_logger
from xtrace_shiviz.utils.shiviz_writer import write_shiviz_log
from xtrace_shiviz.utils.trace_reader import read_trace

from .causal_sorter import CausalSorter
from .clock_assigner import ClockAssigner

logger = get_logger()


@dataclass
class ConversionResult:
    """Outcome of converting one trace.

    Attributes:
        trace_id: Identifier of the converted trace
        records: ShiViz records in causal order
        dropped: Events left out because their ancestry is incomplete
    """

    trace_id: str
    records: List[LogRecord] = field(default_factory=list)
    dropped: List[TraceEvent] = field(default_factory=list)

    @property
    def dropped_count(self) -> int:
        return len(self.dropped)

    @property
    def dropped_ids(self) -> List[str]:
        return [event.event_id for event in self.dropped]


class TraceConverter:
    """Single-use engine converting one XTrace into ShiViz records.

    All run state (seen set, waiting list, watermarks, finalized clocks)
    lives in the sorter and assigner owned by this instance.

    Example:
        >>> result = TraceConverter(trace).run()
        >>> write_shiviz_log(result.records, "out.log")
    """

    def __init__(self, trace: XTrace, strategy: str = "scan") -> None:
        self.trace = trace
        self.strategy = strategy
        self._sorter = CausalSorter(strategy)
        self._assigner = ClockAssigner.for_trace(trace)
        self._finished = False

    def run(self) -> ConversionResult:
        if self._finished:
            raise RuntimeError("TraceConverter.run() may only be called once per instance")
        self._finished = True

        logger.conversion_start(self.trace.trace_id, len(self.trace), self.strategy)

        ordered = self._sorter.sort(self.trace.events)
        dropped = list(self._sorter.dropped)
        logger.sort_summary(len(ordered), len(dropped))
        logger.events_dropped(event.event_id for event in dropped)

        records = self._assigner.assign_all(ordered)
        return ConversionResult(trace_id=self.trace.trace_id, records=records, dropped=dropped)


def convert_trace(trace: XTrace, strategy: str = "scan") -> ConversionResult:
    """Convert an in-memory trace with a fresh engine."""
    return TraceConverter(trace, strategy).run()


def convert_file(
    trace_path: Union[str, Path],
    output_path: Union[str, Path],
    strategy: str = "scan",
    fail_on_dropped: bool = False,
) -> ConversionResult:
    """Read an X-Trace JSON file and write its ShiViz log.

    Args:
        trace_path: Input file holding a JSON array of traces (first is used)
        output_path: ShiViz log to create or overwrite
        strategy: Causal sort strategy ("scan" or "kahn")
        fail_on_dropped: Raise instead of warning when events are dropped

    Returns:
        ConversionResult of the converted trace

    Raises:
        TraceReadError: If the input cannot be opened
        TraceFormatError: If the input cannot be decoded
        UnresolvedParentsError: If `fail_on_dropped` is set and events were dropped
        LogWriteError: If the output cannot be written
    """
    trace = read_trace(trace_path)
    return write_trace_log(trace, output_path, strategy, fail_on_dropped)


def write_trace_log(
    trace: XTrace,
    output_path: Union[str, Path],
    strategy: str = "scan",
    fail_on_dropped: bool = False,
) -> ConversionResult:
    """Convert an already decoded trace and write its ShiViz log.

    Raises:
        UnresolvedParentsError: If `fail_on_dropped` is set and events were dropped
        LogWriteError: If the output cannot be written
    """
    result = convert_trace(trace, strategy)

    if fail_on_dropped and result.dropped:
        raise UnresolvedParentsError(result.dropped_ids)

    written = write_shiviz_log(result.records, output_path)
    logger.conversion_done(written, str(output_path))
    return result
