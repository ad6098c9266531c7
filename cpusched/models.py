from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Process:
    """
    One schedulable unit of work as supplied by the caller.

    Lower numeric priority means more urgent.
    """

    pid: int
    arrival_time: int
    burst_time: int
    priority: int = 0


@dataclass(frozen=True)
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    pid: int
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass
class ProcessMetrics:
    """
    Per-process outcome of one run. The completion-derived fields stay None
    until the process finishes and are then written exactly once.
    """

    pid: int
    arrival_time: int
    burst_time: int
    priority: int
    start_time: int
    response_time: int
    completion_time: Optional[int] = None
    turnaround_time: Optional[int] = None
    waiting_time: Optional[int] = None

    @property
    def finished(self) -> bool:
        return self.completion_time is not None


@dataclass
class SystemMetrics:
    """Aggregate figures for a whole run; makespan is the last slice end."""

    cpu_busy_time: int
    makespan: int
    throughput: float
    cpu_utilization: float
    avg_turnaround: float
    avg_waiting: float
    idle_time: int = 0


@dataclass
class ScheduleResult:
    """Timeline and metrics produced by one algorithm run."""

    algorithm: str
    quantum: Optional[int]
    processes: List[ProcessMetrics] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    system: Optional[SystemMetrics] = None

    def metrics_for(self, pid: int) -> ProcessMetrics:
        for m in self.processes:
            if m.pid == pid:
                return m
        raise KeyError(pid)
