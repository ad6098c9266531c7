from __future__ import annotations

import logging
from collections import deque
from functools import partial
from typing import Deque, Dict, List, Optional

from .errors import InvalidInput
from .metrics import compute_system_metrics, finalize_metrics
from .models import Process, ProcessMetrics, ScheduleResult, ScheduledSlice

logger = logging.getLogger(__name__)

# Time units of waiting that lower a process's priority value by one.
AGING_INTERVAL = 5


class _Run:
    """
    Clock and bookkeeping shared by every policy: dispatches slices,
    records first response and finalizes metrics on completion.
    """

    def __init__(self, algorithm: str, quantum: Optional[int] = None) -> None:
        self.algorithm = algorithm
        self.quantum = quantum
        self.time = 0
        self.timeline: List[ScheduledSlice] = []
        self.metrics: Dict[int, ProcessMetrics] = {}
        self.completed: List[ProcessMetrics] = []

    def wait_for(self, arrival_time: int) -> None:
        # The clock only ever jumps forward.
        if self.time < arrival_time:
            logger.debug("%s: CPU idle t=%d..%d", self.algorithm, self.time, arrival_time)
            self.time = arrival_time

    def dispatch(self, p: Process, run_time: int) -> ScheduledSlice:
        self.wait_for(p.arrival_time)

        if p.pid not in self.metrics:
            self.metrics[p.pid] = ProcessMetrics(
                pid=p.pid,
                arrival_time=p.arrival_time,
                burst_time=p.burst_time,
                priority=p.priority,
                start_time=self.time,
                response_time=self.time - p.arrival_time,
            )

        slice_ = ScheduledSlice(pid=p.pid, start_time=self.time, end_time=self.time + run_time)
        self.timeline.append(slice_)
        self.time = slice_.end_time
        logger.debug("%s: P%d runs t=%d..%d", self.algorithm, p.pid, slice_.start_time, slice_.end_time)
        return slice_

    def complete(self, p: Process) -> None:
        self.completed.append(finalize_metrics(self.metrics[p.pid], self.time))

    def result(self) -> ScheduleResult:
        result = ScheduleResult(
            algorithm=self.algorithm,
            quantum=self.quantum,
            processes=self.completed,
            timeline=self.timeline,
        )
        compute_system_metrics(result)
        return result


def _next_arrival(pending: List[Process]) -> int:
    return min(p.arrival_time for p in pending)


def effective_priority(p: Process, current_time: int, interval: int = AGING_INTERVAL) -> int:
    """
    Priority after aging: one level per ``interval`` units waited since
    arrival, clamped at 0.
    """
    waited = max(0, current_time - p.arrival_time)
    return max(0, p.priority - waited // interval)


def schedule_fcfs(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    ``sorted`` is stable, so processes arriving together keep input order.
    """
    run = _Run("FCFS")

    for p in sorted(processes, key=lambda p: p.arrival_time):
        run.dispatch(p, p.burst_time)
        run.complete(p)

    return run.result()


def schedule_sjf(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive).

    At each decision point, among processes that have arrived and are not yet
    completed, choose the one with the smallest burst time. Equal bursts go to
    whichever process comes first in input order.
    """
    run = _Run("SJF (non-preemptive)")
    pending: List[Process] = list(processes)

    while pending:
        ready = [p for p in pending if p.arrival_time <= run.time]

        if not ready:
            run.wait_for(_next_arrival(pending))
            continue

        # min() keeps the first of equal keys.
        p = min(ready, key=lambda x: x.burst_time)

        run.dispatch(p, p.burst_time)
        run.complete(p)
        pending.remove(p)

    return run.result()


def schedule_rr(
    processes: List[Process],
    quantum: Optional[int] = None,
    strict_arrivals: bool = False,
) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    By default every process is queued once, in arrival order, before the
    first dispatch; arrival times are not consulted again except that a
    process at the head of the queue never starts before it arrives. With
    ``strict_arrivals`` a process joins the queue only once it has arrived,
    and arrivals during a slice queue ahead of the preempted process.
    """
    if quantum is None or quantum <= 0:
        raise InvalidInput("Round Robin requires a positive quantum (use --quantum)")

    name = "Round Robin (strict arrivals)" if strict_arrivals else "Round Robin"
    run = _Run(name, quantum=quantum)

    by_arrival = sorted(processes, key=lambda p: p.arrival_time)
    remaining = {p.pid: p.burst_time for p in processes}
    ready: Deque[Process] = deque()

    if strict_arrivals:
        arrivals: Deque[Process] = deque(by_arrival)

        def admit_arrivals() -> None:
            while arrivals and arrivals[0].arrival_time <= run.time:
                ready.append(arrivals.popleft())

    else:
        ready.extend(by_arrival)
        arrivals = deque()

        def admit_arrivals() -> None:
            pass

    admit_arrivals()

    while ready or arrivals:
        if not ready:
            run.wait_for(arrivals[0].arrival_time)
            admit_arrivals()
            continue

        p = ready.popleft()
        run_time = min(quantum, remaining[p.pid])
        run.dispatch(p, run_time)
        remaining[p.pid] -= run_time

        admit_arrivals()

        if remaining[p.pid] > 0:
            ready.append(p)
        else:
            run.complete(p)

    return run.result()


def schedule_priority(
    processes: List[Process],
    quantum: Optional[int] = None,
    aging: bool = False,
) -> ScheduleResult:
    """
    Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority. Without aging, the
    smallest static priority wins and ties go to the first process in input
    order. With aging, candidates are ranked by ``effective_priority`` at
    the decision time, then by earlier arrival, then by shorter burst.
    """
    run = _Run("Priority (aging)" if aging else "Priority (static)")
    pending: List[Process] = list(processes)

    def aged_key(p: Process):
        return (effective_priority(p, run.time), p.arrival_time, p.burst_time)

    def static_key(p: Process):
        return p.priority

    key = aged_key if aging else static_key

    while pending:
        ready = [p for p in pending if p.arrival_time <= run.time]

        if not ready:
            run.wait_for(_next_arrival(pending))
            continue

        p = min(ready, key=key)

        run.dispatch(p, p.burst_time)
        run.complete(p)
        pending.remove(p)

    return run.result()


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "rr": schedule_rr,
    "rr-strict": partial(schedule_rr, strict_arrivals=True),
    "priority": schedule_priority,
    "priority-aging": partial(schedule_priority, aging=True),
}

# Registry names that consume a time quantum.
QUANTUM_ALGORITHMS = frozenset({"rr", "rr-strict"})
