# tests/conftest.py
# This file is part of xtrace-shiviz - X-Trace to ShiViz conversion
#
# Test configuration and shared fixtures for pytest

"""Test configuration and shared fixtures for xtrace-shiviz tests.

The configuration handles:
- Python path setup so the package and run_convert import from a checkout
- Factories for trace events and trace files
- A handler capturing converter log output
"""

import json
import logging
import sys
from pathlib import Path

import pytest

# Ensure project modules can be imported
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from xtrace_shiviz.model.event import TraceEvent, XTrace  # noqa: E402
from xtrace_shiviz.utils.logger import get_logger  # noqa: E402


def make_event(eid, process, thread=0, parents=(), label=None):
    """Factory for TraceEvent objects in tests."""
    return TraceEvent(
        event_id=eid,
        process_name=process,
        thread_id=thread,
        label=label if label is not None else eid,
        parents=tuple(parents),
    )


def report(eid, process, thread=0, parents=(), label=None, **extra):
    """Factory for raw X-Trace report dictionaries."""
    data = {
        "ProcessName": process,
        "ThreadID": thread,
        "Label": label if label is not None else eid,
        "EventID": eid,
        "ParentEventID": list(parents),
        "Timestamp": 0,
        "HRT": 0,
        "Agent": process,
    }
    data.update(extra)
    return data


@pytest.fixture
def scenario_reports():
    """The three-event start/step/recv scenario, in causal order."""
    return [
        report("e1", "A", 0, [], "start"),
        report("e2", "A", 0, ["e1"], "step"),
        report("e3", "B", 0, ["e2"], "recv"),
    ]


@pytest.fixture
def fork_rejoin_trace():
    """Node A0 forks into two branches that both come back to A0.

        a1 (A0) ──> b1 (B0) ──> a3 (A0, parents b1)
           └──────> c1 (C0) ──> a2 (A0, parents c1)

    Neither a2 nor a3 has a local predecessor, so both would tick A0 to 1
    without the watermark.
    """
    return XTrace(
        trace_id="fork",
        events=(
            make_event("a1", "A"),
            make_event("b1", "B", parents=["a1"]),
            make_event("c1", "C", parents=["a1"]),
            make_event("a2", "A", parents=["c1"]),
            make_event("a3", "A", parents=["b1"]),
        ),
    )


@pytest.fixture
def write_trace_json(tmp_path):
    """Write a list of trace objects to a temp file and return its path."""

    def _write(traces, name="trace.json"):
        path = tmp_path / name
        path.write_text(json.dumps(traces), encoding="utf-8")
        return path

    return _write


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)

    @property
    def messages(self):
        return [r.getMessage() for r in self.records]


@pytest.fixture
def captured_log():
    """Capture converter log records regardless of console level."""
    converter_logger = get_logger().logger
    handler = _ListHandler()
    previous_level = converter_logger.level
    converter_logger.addHandler(handler)
    converter_logger.setLevel(logging.DEBUG)
    yield handler
    converter_logger.removeHandler(handler)
    converter_logger.setLevel(previous_level)
