from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Dict

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS, PREEMPTIVE, run_algorithm
from .driver import DEFAULT_ALGORITHMS, DEFAULT_QUANTUM, run_all
from .errors import SchedulerError
from .formatting import format_averages_line
from .gantt import build_rich_gantt
from .models import ScheduleResult
from .workload_io import load_workload

logger = logging.getLogger(__name__)

SHORT_NAMES = {"fcfs": "FCFS", "sjf": "SJF", "rr": "RR"}


def _non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be zero or more, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cpusched",
        description="CPU scheduling metrics (FCFS, SJF, RR).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every execution slice.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run one scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        choices=sorted(ALGORITHMS),
        help="Algorithm to use.",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to a JSON, CSV or plain-text workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for round-robin (ignored by FCFS and SJF, default: {DEFAULT_QUANTUM}).",
    )
    run_parser.add_argument(
        "--gantt",
        action="store_true",
        help="Show a Gantt chart of the schedule.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run several algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to a JSON, CSV or plain-text workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        choices=sorted(ALGORITHMS),
        default=list(DEFAULT_ALGORITHMS),
        help="Algorithms to compare (default: fcfs sjf rr).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for RR (default: {DEFAULT_QUANTUM}).",
    )
    compare_parser.add_argument(
        "--plain",
        action="store_true",
        help="Print one 'NAME turnaround response wait' line per algorithm instead of a table.",
    )
    compare_parser.add_argument(
        "--precision",
        type=_non_negative_int,
        default=1,
        help="Decimal places in plain output (default: 1).",
    )
    compare_parser.add_argument(
        "--decimal-separator",
        default=".",
        help="Decimal separator in plain output, e.g. ',' (default: '.').",
    )

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _print_result(result: ScheduleResult, console: Console, show_gantt: bool) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    if show_gantt:
        panel, time_marks = build_rich_gantt(result.timeline)
        console.print(panel)
        if time_marks:
            console.print(time_marks)
        console.print()

    headers = ["PID", "Arrive", "Burst", "Start", "Complete", "Turnaround", "Response", "Wait"]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        proc_table.add_column(h, justify="center" if h == "PID" else "right")

    for rec in sorted(result.processes, key=lambda r: r.index):
        proc_table.add_row(
            rec.pid,
            str(rec.arrival_time),
            str(rec.burst_time),
            str(rec.start_time),
            str(rec.completion_time),
            str(rec.turnaround_time),
            str(rec.response_time),
            str(rec.wait_time),
        )

    console.print(proc_table)
    console.print()

    avg = result.averages
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg turnaround", f"{avg.turnaround:.2f}")
    sys_table.add_row("Avg response", f"{avg.response:.2f}")
    sys_table.add_row("Avg wait", f"{avg.wait:.2f}")
    if result.system:
        sys = result.system
        sys_table.add_row("Makespan", str(sys.makespan))
        sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{sys.cpu_utilization*100:.1f}%")

    console.print(sys_table)


def _print_comparison(results: Dict[str, ScheduleResult], console: Console) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("Avg wait", justify="right")

    for result in results.values():
        avg = result.averages
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{avg.turnaround:.2f}",
            f"{avg.response:.2f}",
            f"{avg.wait:.2f}",
        )

    console.print(summary_table)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    console = Console()
    err_console = Console(stderr=True)

    try:
        processes = load_workload(Path(args.workload))

        if args.command == "run":
            quantum = args.quantum if args.algorithm in PREEMPTIVE else None
            result = run_algorithm(args.algorithm, processes, quantum=quantum)
            _print_result(result, console, show_gantt=args.gantt)
            return 0

        if args.command == "compare":
            results = run_all(processes, quantum=args.quantum, algorithms=args.algorithms)
            if args.plain:
                for name, result in results.items():
                    console.print(
                        format_averages_line(
                            SHORT_NAMES.get(name, name.upper()),
                            result.averages,
                            precision=args.precision,
                            decimal_separator=args.decimal_separator,
                        ),
                        highlight=False,
                    )
            else:
                _print_comparison(results, console)
            return 0
    except SchedulerError as exc:
        logger.debug("Aborting", exc_info=True)
        err_console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
