# xtrace_shiviz/utils/trace_reader.py
# This file is part of xtrace-shiviz - X-Trace to ShiViz conversion
#
# JSON reader for X-Trace (v4) report dumps

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from xtrace_shiviz.exceptions import TraceFormatError, TraceReadError
from xtrace_shiviz.model.event import TraceEvent, XTrace
from xtrace_shiviz.utils.logger import get_logger


def read_traces(filepath: Union[str, Path]) -> List[XTrace]:
    """Read every trace from an X-Trace JSON dump.

    Expected format (one JSON array of trace objects):
        [
          {"id": "trace-1",
           "reports": [
             {"ProcessName": "client", "ThreadID": 0, "Label": "start",
              "EventID": "e1", "ParentEventID": [], "Timestamp": 1, "HRT": 7,
              "Agent": "client"},
             ...
           ]}
        ]

    Missing report fields take zero values and unknown fields are ignored.

    Args:
        filepath: Path to the JSON trace file

    Returns:
        List of parsed traces in file order

    Raises:
        TraceReadError: If the file cannot be opened or read
        TraceFormatError: If the content is not valid JSON or does not match the schema
    """
    logger = get_logger()
    path = Path(filepath)
    logger.debug(f"Reading trace file: {path}")

    try:
        with open(path, "r", encoding="utf-8") as file:
            payload = json.load(file)
    except json.JSONDecodeError as e:
        raise TraceFormatError(f"Invalid JSON in {path}: {e}")
    except UnicodeDecodeError as e:
        raise TraceFormatError(f"Trace file {path} is not UTF-8 text: {e}")
    except OSError as e:
        raise TraceReadError(f"Cannot open trace file {path}: {e}")

    if not isinstance(payload, list):
        raise TraceFormatError(
            f"Expected a JSON array of traces, got {type(payload).__name__}"
        )

    traces = [_parse_trace(raw, index) for index, raw in enumerate(payload)]
    logger.debug(f"Parsed {len(traces)} trace(s) from {path}")
    return traces


def read_trace(filepath: Union[str, Path]) -> XTrace:
    """Read the single trace contained in `filepath`.

    Only the first trace is converted; any further traces are reported and
    ignored.

    Raises:
        TraceReadError: If the file cannot be opened or read
        TraceFormatError: If decoding fails or the file holds no trace
    """
    traces = read_traces(filepath)
    if not traces:
        raise TraceFormatError(f"No trace found in {filepath}")
    if len(traces) > 1:
        get_logger().warning(
            f"⚠️  {filepath} holds {len(traces)} traces; only {traces[0].trace_id!r} is converted"
        )
    trace = traces[0]
    _warn_duplicate_ids(trace)
    get_logger().debug(describe_events(trace))
    return trace


def describe_events(trace: XTrace) -> str:
    """Tabulate the events of a trace for quick inspection.

    Returns:
        One header line followed by one line per event
    """
    lines = ["Process, ThreadID, Agent, Event, Parents"]
    for event in trace.events:
        parents = "[" + " ".join(event.parents) + "]"
        lines.append(
            f"{event.process_name} {event.thread_id} {event.agent} {event.event_id} {parents}"
        )
    return "\n".join(lines)


def _warn_duplicate_ids(trace: XTrace) -> None:
    seen = set()
    duplicates: List[str] = []
    for event in trace.events:
        if event.event_id in seen:
            duplicates.append(event.event_id)
        seen.add(event.event_id)
    if duplicates:
        get_logger().warning(
            f"⚠️  Trace {trace.trace_id!r} repeats event id(s): {', '.join(sorted(set(duplicates)))}"
        )


def _parse_trace(raw: Any, index: int) -> XTrace:
    """Parse one trace object.

    Args:
        raw: Decoded JSON value
        index: Position of the trace in the file (for error messages)

    Raises:
        TraceFormatError: If the object does not match the trace schema
    """
    if not isinstance(raw, dict):
        raise TraceFormatError(f"Trace {index}: expected an object, got {type(raw).__name__}")

    trace_id = _field(raw, "id", str, "", where=f"trace {index}")
    reports = raw.get("reports")
    if reports is None:
        reports = []
    if not isinstance(reports, list):
        raise TraceFormatError(f"Trace {index}: 'reports' must be an array")

    events = tuple(
        _parse_report(report, f"trace {index} report {position}")
        for position, report in enumerate(reports)
    )
    return XTrace(trace_id=trace_id, events=events)


def _parse_report(report: Any, where: str) -> TraceEvent:
    """Parse a single report object into a TraceEvent.

    Raises:
        TraceFormatError: If a field has the wrong type
    """
    if not isinstance(report, dict):
        raise TraceFormatError(f"{where}: expected an object, got {type(report).__name__}")

    return TraceEvent(
        event_id=_field(report, "EventID", str, "", where),
        process_name=_field(report, "ProcessName", str, "", where),
        thread_id=_int_field(report, "ThreadID", where),
        label=_field(report, "Label", str, "", where),
        parents=_parse_parents(report.get("ParentEventID"), where),
        timestamp=_int_field(report, "Timestamp", where, unsigned=True),
        hrt=_int_field(report, "HRT", where, unsigned=True),
        agent=_field(report, "Agent", str, "", where),
    )


def _field(raw: Dict[str, Any], key: str, kind: type, default: Any, where: str) -> Any:
    value = raw.get(key)
    if value is None:
        return default
    if not isinstance(value, kind):
        raise TraceFormatError(
            f"{where}: field {key!r} must be {kind.__name__}, got {type(value).__name__}"
        )
    return value


def _int_field(raw: Dict[str, Any], key: str, where: str, unsigned: bool = False) -> int:
    value = raw.get(key)
    if value is None:
        return 0
    # bool is an int subclass but never a valid counter
    if isinstance(value, bool) or not isinstance(value, int):
        raise TraceFormatError(
            f"{where}: field {key!r} must be an integer, got {type(value).__name__}"
        )
    if unsigned and value < 0:
        raise TraceFormatError(f"{where}: field {key!r} must be non-negative, got {value}")
    return value


def _parse_parents(value: Optional[Any], where: str) -> Tuple[str, ...]:
    """Parse the ParentEventID list. null or missing means no parents."""
    if value is None:
        return ()
    if not isinstance(value, list):
        raise TraceFormatError(f"{where}: 'ParentEventID' must be an array")
    for parent in value:
        if not isinstance(parent, str):
            raise TraceFormatError(
                f"{where}: parent ids must be strings, got {type(parent).__name__}"
            )
    return tuple(value)
