# tests/integration_tests/test_cli_conversion.py
# This file is part of xtrace-shiviz - X-Trace to ShiViz conversion
#
# End-to-end tests of the command-line converter

"""Integration tests for run_convert covering:

- The reference three-event conversion, byte for byte
- Fork/rejoin traces and out-of-order reports
- Exit codes for every error kind
- The validate-only and list-events modes
"""

import pytest
from conftest import report

import run_convert
from xtrace_shiviz.utils.shiviz_writer import SHIVIZ_HEADER
from xtrace_shiviz.utils.trace_generator import generate_trace, write_trace_file


def records_of(path):
    body = path.read_text(encoding="utf-8")[len(SHIVIZ_HEADER):]
    lines = body.splitlines()
    return list(zip(lines[0::2], lines[1::2]))


class TestConversion:

    def test_reference_scenario_exact_output(self, tmp_path, write_trace_json, scenario_reports):
        source = write_trace_json([{"id": "t", "reports": scenario_reports}])
        output = tmp_path / "out.shiviz"

        assert run_convert.main([str(source), str(output)]) == 0
        assert output.read_text(encoding="utf-8") == (
            SHIVIZ_HEADER
            + 'A0 {"A0":1}\n'
            + "start\n"
            + 'A0 {"A0":2}\n'
            + "step\n"
            + 'B0 {"A0":2,"B0":1}\n'
            + "recv\n"
        )

    @pytest.mark.parametrize("strategy", ["scan", "kahn"])
    def test_reversed_reports_same_clocks(self, tmp_path, write_trace_json, scenario_reports,
                                          strategy):
        source = write_trace_json([{"id": "t", "reports": list(reversed(scenario_reports))}])
        output = tmp_path / "out.shiviz"

        assert run_convert.main([str(source), str(output), "--strategy", strategy]) == 0
        assert records_of(output) == [
            ('A0 {"A0":1}', "start"),
            ('A0 {"A0":2}', "step"),
            ('B0 {"A0":2,"B0":1}', "recv"),
        ]

    def test_fork_rejoin_never_repeats_a_tick(self, tmp_path, write_trace_json):
        source = write_trace_json([{"id": "t", "reports": [
            report("a3", "A", parents=["b1"]),
            report("a1", "A"),
            report("b1", "B", parents=["a1"]),
            report("c1", "C", parents=["a1"]),
            report("a2", "A", parents=["c1"]),
        ]}])
        output = tmp_path / "out.shiviz"

        assert run_convert.main([str(source), str(output)]) == 0
        a_lines = [header for header, _ in records_of(output) if header.startswith("A0 ")]
        assert a_lines == ['A0 {"A0":1}', 'A0 {"A0":2,"B0":1}', 'A0 {"A0":3,"C0":1}']

    def test_dropped_events_left_out_by_default(self, tmp_path, write_trace_json):
        source = write_trace_json([{"id": "t", "reports": [
            report("e1", "A"),
            report("e2", "A", parents=["e1", "elsewhere"]),
        ]}])
        output = tmp_path / "out.shiviz"

        assert run_convert.main([str(source), str(output)]) == 0
        assert records_of(output) == [('A0 {"A0":1}', "e1")]

    def test_generated_trace_round_trip(self, tmp_path):
        trace = generate_trace(200, processes=("client", "server", "db"),
                               threads_per_process=2, fork_prob=0.2, seed=42)
        source = tmp_path / "gen.json"
        output = tmp_path / "gen.shiviz"
        write_trace_file([trace], source)

        assert run_convert.main([str(source), str(output), "--strategy", "kahn"]) == 0
        assert len(records_of(output)) == 200


class TestExitCodes:

    def test_wrong_argument_count_is_usage_error(self, tmp_path):
        with pytest.raises(SystemExit) as info:
            run_convert.main([str(tmp_path / "only-one.json")])
        assert info.value.code == 2

    def test_too_many_arguments_is_usage_error(self, tmp_path):
        with pytest.raises(SystemExit) as info:
            run_convert.main(["a.json", "b.log", "c.log"])
        assert info.value.code == 2

    def test_unreadable_input(self, tmp_path):
        code = run_convert.main([str(tmp_path / "missing.json"), str(tmp_path / "out")])
        assert code == run_convert.EXIT_READ_ERROR

    def test_malformed_input(self, tmp_path):
        source = tmp_path / "bad.json"
        source.write_text("not json", encoding="utf-8")
        assert run_convert.main([str(source), str(tmp_path / "out")]) == \
            run_convert.EXIT_FORMAT_ERROR

    def test_unwritable_output(self, tmp_path, write_trace_json, scenario_reports):
        source = write_trace_json([{"id": "t", "reports": scenario_reports}])
        target = tmp_path / "no-such-dir" / "out.shiviz"
        assert run_convert.main([str(source), str(target)]) == run_convert.EXIT_WRITE_ERROR

    def test_fail_on_dropped(self, tmp_path, write_trace_json):
        source = write_trace_json([{"id": "t", "reports": [report("e1", "A", parents=["x"])]}])
        output = tmp_path / "out.shiviz"
        code = run_convert.main([str(source), str(output), "--fail-on-dropped"])
        assert code == run_convert.EXIT_DROPPED
        assert not output.exists()


class TestInspectionModes:

    def test_validate_only_writes_nothing(self, tmp_path, write_trace_json, scenario_reports):
        source = write_trace_json([{"id": "t", "reports": scenario_reports}])
        output = tmp_path / "out.shiviz"
        assert run_convert.main([str(source), str(output), "--validate-only"]) == 0
        assert not output.exists()

    def test_list_events_prints_table(self, tmp_path, write_trace_json, scenario_reports,
                                      capsys):
        source = write_trace_json([{"id": "t", "reports": scenario_reports}])
        output = tmp_path / "out.shiviz"
        assert run_convert.main([str(source), str(output), "--list-events"]) == 0
        printed = capsys.readouterr().out
        assert "Process, ThreadID, Agent, Event, Parents" in printed
        assert "B 0 B e3 [e2]" in printed
        assert output.exists()

    def test_list_events_decodes_input_once(self, tmp_path, write_trace_json, captured_log,
                                            capsys):
        source = write_trace_json([{"id": "t", "reports": [
            report("e1", "A"),
            report("e1", "B"),
        ]}])
        output = tmp_path / "out.shiviz"
        assert run_convert.main([str(source), str(output), "--list-events"]) == 0
        repeats = [m for m in captured_log.messages if "repeats event id" in m]
        assert len(repeats) == 1
        assert len(records_of(output)) == 2
