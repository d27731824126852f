# tests/core_tests/test_converter.py

"""TraceConverter and the read -> convert -> write pipeline."""

import pytest
from conftest import make_event as E, report

from xtrace_shiviz.core.converter import TraceConverter, convert_file, convert_trace
from xtrace_shiviz.exceptions import UnresolvedParentsError
from xtrace_shiviz.model.event import XTrace
from xtrace_shiviz.utils.shiviz_writer import SHIVIZ_HEADER


def test_run_returns_records_in_causal_order():
    trace = XTrace("t", (E("e2", "A", parents=["e1"]), E("e1", "A")))
    result = TraceConverter(trace).run()
    assert result.trace_id == "t"
    assert [r.clock.get("A0") for r in result.records] == [1, 2]
    assert result.dropped_count == 0


def test_run_is_single_use():
    converter = TraceConverter(XTrace("t", (E("e1", "A"),)))
    converter.run()
    with pytest.raises(RuntimeError):
        converter.run()


def test_independent_runs_do_not_share_state():
    trace = XTrace("t", (E("e1", "A"), E("e2", "A", parents=["e1"])))
    first = convert_trace(trace)
    second = convert_trace(trace)
    assert [r.clock for r in first.records] == [r.clock for r in second.records]


@pytest.mark.parametrize("strategy", ["scan", "kahn"])
def test_dropped_events_reported(strategy, captured_log):
    trace = XTrace("t", (E("e1", "A"), E("e2", "B", parents=["nowhere"])))
    result = convert_trace(trace, strategy=strategy)
    assert len(result.records) == 1
    assert result.dropped_ids == ["e2"]
    assert any("1 event(s) dropped" in m for m in captured_log.messages)


def test_convert_file_writes_log(tmp_path, write_trace_json, scenario_reports):
    source = write_trace_json([{"id": "t1", "reports": scenario_reports}])
    output = tmp_path / "out.shiviz"
    result = convert_file(source, output)
    assert len(result.records) == 3
    assert output.read_text(encoding="utf-8").startswith(SHIVIZ_HEADER)


def test_convert_file_strict_mode_writes_nothing(tmp_path, write_trace_json):
    source = write_trace_json([{"id": "t1", "reports": [
        report("e1", "A"),
        report("e2", "A", parents=["missing"]),
    ]}])
    output = tmp_path / "out.shiviz"
    with pytest.raises(UnresolvedParentsError) as info:
        convert_file(source, output, fail_on_dropped=True)
    assert info.value.event_ids == ["e2"]
    assert not output.exists()
