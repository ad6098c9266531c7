"""
Simulation driver.

Validates a process set, hands every policy run its own copy of the
input, dispatches by algorithm name and checks the resulting schedule
against the invariants every policy must honour.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence

from .algorithms import ALGORITHMS, QUANTUM_ALGORITHMS
from .errors import InvalidInput, SchedulerError
from .models import Process, ScheduleResult

logger = logging.getLogger(__name__)


def validate_processes(processes: Sequence[Process]) -> None:
    """
    Reject input that no policy may run: empty sets, non-positive bursts,
    negative arrivals and duplicate ids.
    """
    if not processes:
        raise InvalidInput("At least one process is required")

    seen: set[int] = set()
    for p in processes:
        if p.burst_time <= 0:
            raise InvalidInput(f"Process {p.pid}: burst time must be positive (got {p.burst_time})")
        if p.arrival_time < 0:
            raise InvalidInput(f"Process {p.pid}: arrival time must be >= 0 (got {p.arrival_time})")
        if p.pid in seen:
            raise InvalidInput(f"Duplicate process id {p.pid}")
        seen.add(p.pid)


def clone_processes(processes: Iterable[Process]) -> List[Process]:
    return [replace(p) for p in processes]


def check_schedule(result: ScheduleResult, processes: Sequence[Process]) -> None:
    """
    Verify ordering, work conservation and per-process completion bounds.
    Any failure is a bug in the policy, not in the input.
    """
    last_end = 0
    for sl in result.timeline:
        if sl.end_time <= sl.start_time:
            raise SchedulerError(f"{result.algorithm}: empty slice {sl}")
        if sl.start_time < last_end:
            raise SchedulerError(f"{result.algorithm}: slice {sl} overlaps previous slice ending at {last_end}")
        last_end = sl.end_time

    busy = sum(sl.duration for sl in result.timeline)
    work = sum(p.burst_time for p in processes)
    if busy != work:
        raise SchedulerError(f"{result.algorithm}: {busy} units executed for {work} units of work")

    finished = {m.pid: m for m in result.processes}
    for p in processes:
        m = finished.get(p.pid)
        if m is None or not m.finished:
            raise SchedulerError(f"{result.algorithm}: process {p.pid} never completed")
        if m.completion_time < p.arrival_time + p.burst_time:
            raise SchedulerError(
                f"{result.algorithm}: process {p.pid} completed at {m.completion_time}, "
                f"before arrival + burst ({p.arrival_time + p.burst_time})"
            )


def _resolve_name(name: str, aging: bool) -> str:
    name = name.lower()
    if aging and name == "priority":
        name = "priority-aging"
    if name not in ALGORITHMS:
        raise InvalidInput(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")
    return name


def run_algorithm(
    name: str,
    processes: Sequence[Process],
    quantum: Optional[int] = None,
    aging: bool = False,
) -> ScheduleResult:
    """
    Dispatch to the requested algorithm on an independent copy of the
    process set. ``aging`` turns ``priority`` into ``priority-aging``.
    """
    name = _resolve_name(name, aging)

    validate_processes(processes)
    if name in QUANTUM_ALGORITHMS and (quantum is None or quantum <= 0):
        raise InvalidInput(f"{name} requires a positive quantum (got {quantum})")

    work = clone_processes(processes)
    func = ALGORITHMS[name]
    result = func(work, quantum=quantum if name in QUANTUM_ALGORITHMS else None)
    check_schedule(result, work)

    logger.info(
        "%s: %d processes, makespan %d, avg waiting %.2f",
        result.algorithm,
        len(result.processes),
        result.system.makespan,
        result.system.avg_waiting,
    )
    return result


def compare_algorithms(
    processes: Sequence[Process],
    names: Iterable[str] = ("fcfs", "sjf", "rr", "priority", "priority-aging"),
    quantum: Optional[int] = 2,
) -> List[ScheduleResult]:
    """
    Run several algorithms over the same logical input. Each run gets its
    own copy, so results never share state.
    """
    return [run_algorithm(name, processes, quantum=quantum) for name in names]


@dataclass(frozen=True)
class Policy:
    """
    A configured scheduling policy, e.g. ``Policy.from_name("rr", quantum=2)``.
    """

    name: str
    quantum: Optional[int] = None
    aging: bool = False

    @classmethod
    def from_name(cls, name: str, quantum: Optional[int] = None, aging: bool = False) -> "Policy":
        name = _resolve_name(name, aging)
        return cls(
            name=name,
            quantum=quantum if name in QUANTUM_ALGORITHMS else None,
            aging=name == "priority-aging",
        )

    def run(self, processes: Sequence[Process]) -> ScheduleResult:
        return run_algorithm(self.name, processes, quantum=self.quantum, aging=self.aging)
