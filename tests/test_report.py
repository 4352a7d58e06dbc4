from pathlib import Path

import pytest
from rich.panel import Panel

from cpusched.algorithms import schedule_rr
from cpusched.cli import main
from cpusched.driver import processes_from_pairs
from cpusched.formatting import format_averages_line, format_number
from cpusched.gantt import build_rich_gantt, merge_slices, render_gantt
from cpusched.models import AverageMetrics, ScheduledSlice


def _workload_file(tmp_path: Path, text="0 4\n1 3\n2 1\n") -> Path:
    p = tmp_path / "processes.txt"
    p.write_text(text)
    return p


def test_format_number_with_comma_separator():
    assert format_number(10.3333, precision=1, decimal_separator=",") == "10,3"
    assert format_number(2, precision=2) == "2.00"


def test_format_number_rejects_negative_precision():
    with pytest.raises(ValueError):
        format_number(1.0, precision=-1)


def test_format_averages_line():
    avg = AverageMetrics(turnaround=5.3333, response=1.0, wait=3.0)
    assert format_averages_line("RR", avg) == "RR 5.3 1.0 3.0"


def test_merge_slices_joins_consecutive_runs():
    res = schedule_rr(processes_from_pairs([(0, 3)]), quantum=1)
    assert len(res.timeline) == 3
    assert merge_slices(res.timeline) == [ScheduledSlice("P1", 0, 3)]


def test_render_gantt_marks_idle_time():
    chart = render_gantt([ScheduledSlice("A", 0, 2), ScheduledSlice("B", 4, 5)])
    lines = chart.splitlines()
    assert lines[1] == "|==..=|"
    assert lines[3].split() == ["0", "2", "4", "5"]


def test_render_gantt_empty():
    assert render_gantt([]) == "(no execution)"


def test_build_rich_gantt():
    panel, marks = build_rich_gantt([ScheduledSlice("A", 0, 2)])
    assert isinstance(panel, Panel)
    assert marks.split() == ["0", "2"]


def test_cli_compare_plain(tmp_path: Path, capsys):
    rc = main(["compare", "-w", str(_workload_file(tmp_path)), "--plain"])
    assert rc == 0
    out = capsys.readouterr().out.splitlines()
    assert out == [
        "FCFS 5.3 2.7 2.7",
        "SJF 4.7 2.0 2.0",
        "RR 5.7 1.0 3.0",
    ]


def test_cli_compare_plain_decimal_comma(tmp_path: Path, capsys):
    rc = main([
        "compare",
        "-w",
        str(_workload_file(tmp_path)),
        "-a",
        "fcfs",
        "--plain",
        "--decimal-separator",
        ",",
    ])
    assert rc == 0
    assert capsys.readouterr().out.strip() == "FCFS 5,3 2,7 2,7"


def test_cli_compare_table(tmp_path: Path, capsys):
    rc = main(["compare", "-w", str(_workload_file(tmp_path)), "-q", "3"])
    assert rc == 0
    out = capsys.readouterr().out
    assert "Algorithm comparison" in out
    assert "Round Robin" in out


def test_cli_run_with_gantt(tmp_path: Path, capsys):
    rc = main(["run", "-a", "rr", "-w", str(_workload_file(tmp_path)), "--gantt"])
    assert rc == 0
    out = capsys.readouterr().out
    assert "Gantt Chart" in out
    assert "Per-process metrics" in out


def test_cli_reports_invalid_workload(tmp_path: Path, capsys):
    rc = main(["compare", "-w", str(_workload_file(tmp_path, "0 0\n"))])
    assert rc == 2
    assert "burst time" in capsys.readouterr().err


def test_cli_reports_undecodable_workload(tmp_path: Path, capsys):
    p = tmp_path / "bad.csv"
    p.write_bytes(b"arrival_time,burst_time\n\xff,3\n")
    rc = main(["compare", "-w", str(p)])
    assert rc == 2
    assert "Cannot read workload" in capsys.readouterr().err


def test_cli_rejects_negative_precision(tmp_path: Path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["compare", "-w", str(_workload_file(tmp_path)), "--plain", "--precision", "-1"])
    assert excinfo.value.code == 2
    assert "--precision" in capsys.readouterr().err


def test_cli_precision_zero(tmp_path: Path, capsys):
    rc = main(["compare", "-w", str(_workload_file(tmp_path)), "-a", "rr", "--plain", "--precision", "0"])
    assert rc == 0
    assert capsys.readouterr().out.strip() == "RR 6 1 3"
