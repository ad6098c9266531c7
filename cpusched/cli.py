from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS, QUANTUM_ALGORITHMS
from .errors import SchedulerError
from .gantt import build_rich_gantt
from .metrics import summarize_process_metrics
from .models import Process, ScheduleResult
from .simulator import Policy, compare_algorithms, run_algorithm
from .workload_io import default_workload, load_workload

logger = logging.getLogger(__name__)

COMPARE_DEFAULT = ["fcfs", "sjf", "rr", "priority", "priority-aging"]

# Menu entries: (label, algorithm name, prompts for a quantum)
MENU_CHOICES = [
    ("FCFS (First Come First Served)", "fcfs", False),
    ("SJF (Shortest Job First)", "sjf", False),
    ("Round Robin", "rr", True),
    ("Priority Scheduling", "priority", False),
    ("Priority Scheduling with aging", "priority-aging", False),
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cpusched",
        description="CPU scheduling simulator (FCFS, SJF, Round Robin, Priority with optional aging).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING; DEBUG traces every dispatch).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help=f"Algorithm to use ({', '.join(ALGORITHMS)}).",
    )
    _add_workload_args(run_parser)
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round robin (ignored by FCFS, SJF, Priority).",
    )
    run_parser.add_argument(
        "--aging",
        action="store_true",
        help="Enable aging for priority scheduling.",
    )
    run_parser.add_argument(
        "--strict-arrivals",
        action="store_true",
        help="Round robin admits processes only once they have arrived.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    _add_workload_args(compare_parser)
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=COMPARE_DEFAULT,
        help=f"Algorithms to compare (default: {' '.join(COMPARE_DEFAULT)}).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=2,
        help="Time quantum used for round robin when included (default: 2).",
    )

    menu_parser = subparsers.add_parser(
        "menu",
        help="Interactive menu to pick an algorithm at runtime.",
    )
    _add_workload_args(menu_parser)

    return parser


def _add_workload_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--workload",
        "-w",
        default=None,
        help="Path to JSON or CSV workload file (default: built-in ten-process set).",
    )


def _load(workload: Optional[str]) -> List[Process]:
    if workload is None:
        return default_workload()
    return load_workload(Path(workload))


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _print_result(result: ScheduleResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    console.print(build_rich_gantt(result.timeline))
    console.print()

    seg_table = Table(title="Process execution details", box=box.SIMPLE_HEAVY)
    seg_table.add_column("Process", justify="center")
    seg_table.add_column("Start", justify="right")
    seg_table.add_column("End", justify="right")
    seg_table.add_column("Duration", justify="right")
    for sl in result.timeline:
        seg_table.add_row(f"P{sl.pid}", str(sl.start_time), str(sl.end_time), str(sl.duration))

    console.print(seg_table)
    console.print()

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "Priority",
        "Start",
        "Complete",
        "Turnaround",
        "Wait",
        "Response",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in sorted(result.processes, key=lambda m: m.pid):
        proc_table.add_row(
            f"P{p.pid}",
            str(p.arrival_time),
            str(p.burst_time),
            str(p.priority),
            str(p.start_time),
            str(p.completion_time),
            str(p.turnaround_time),
            str(p.waiting_time),
            str(p.response_time),
        )

    console.print(proc_table)
    console.print()

    summary = summarize_process_metrics(result.processes)
    sys_ = result.system
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg turnaround", f"{sys_.avg_turnaround:.2f}")
    sys_table.add_row("Avg waiting", f"{sys_.avg_waiting:.2f}")
    sys_table.add_row("Avg response", f"{summary['avg_response']:.2f}")
    sys_table.add_row("Throughput (proc/time)", f"{sys_.throughput:.3f}")
    sys_table.add_row("CPU utilization", f"{sys_.cpu_utilization*100:.1f}%")
    sys_table.add_row("Makespan", str(sys_.makespan))
    sys_table.add_row("Idle time", str(sys_.idle_time))

    console.print(sys_table)


def _print_comparison(results: List[ScheduleResult], title: str, console: Console) -> None:
    summary_table = Table(title=title, box=box.SIMPLE_HEAVY)
    summary_table.add_column(
        "Algorithm",
        no_wrap=True,
        min_width=max((len(r.algorithm) for r in results), default=0),
    )
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("Throughput", justify="right")

    for result in results:
        summary = summarize_process_metrics(result.processes)
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_response']:.2f}",
            f"{result.system.throughput:.3f}",
        )

    console.print(summary_table)


def _interactive_menu(processes: List[Process], console: Console) -> None:
    quit_idx = len(MENU_CHOICES) + 1

    while True:
        console.print("\n[bold cyan]CPU Scheduling Algorithms[/bold cyan]")
        for idx, (label, _, _) in enumerate(MENU_CHOICES, start=1):
            console.print(f"  [yellow]{idx}[/yellow]. [white]{label}[/white]")
        console.print(f"  [yellow]{quit_idx}[/yellow]. [white]Exit[/white]")

        choice = input(f"Choice [1-{quit_idx}]: ").strip().lower()
        if choice in {str(quit_idx), "q", "quit", "exit"}:
            return

        try:
            idx = int(choice)
            if idx < 1:
                raise IndexError(idx)
            _, alg, wants_quantum = MENU_CHOICES[idx - 1]
        except (ValueError, IndexError):
            console.print("[red]Invalid choice! Please try again.[/red]")
            continue

        quantum = None
        if wants_quantum:
            q_in = input("Time quantum for round robin: ").strip()
            try:
                quantum = int(q_in)
            except ValueError:
                console.print("[red]Invalid quantum.[/red]")
                continue

        try:
            result = run_algorithm(alg, processes, quantum=quantum)
        except SchedulerError as exc:
            console.print(f"[red]Error: {escape(str(exc))}[/red]")
            continue
        _print_result(result, console)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    console = Console()

    try:
        processes = _load(args.workload)

        if args.command == "run":
            name = args.algorithm.lower()
            if args.strict_arrivals and name == "rr":
                name = "rr-strict"
            policy = Policy.from_name(name, quantum=args.quantum, aging=args.aging)
            _print_result(policy.run(processes), console)
            return 0

        if args.command == "compare":
            names = [a.lower() for a in args.algorithms]
            quantum = args.quantum if QUANTUM_ALGORITHMS.intersection(names) else None
            results = compare_algorithms(processes, names, quantum=quantum)
            _print_comparison(results, f"Algorithm comparison: {args.workload or 'built-in workload'}", console)
            return 0

        if args.command == "menu":
            _interactive_menu(processes, console)
            console.print("\nThank you for using the CPU scheduler!")
            return 0
    except (SchedulerError, OSError) as exc:
        logger.debug("command failed", exc_info=True)
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
