"""
CPU scheduling simulator.

Runs FCFS, SJF, Round Robin and Priority (optionally with aging) over a
fixed process set and reports the execution timeline and per-process
metrics.
"""

from .errors import DegenerateMetrics, InvalidInput, SchedulerError
from .models import Process, ProcessMetrics, ScheduleResult, ScheduledSlice, SystemMetrics
from .simulator import Policy, compare_algorithms, run_algorithm

__all__ = [
    "DegenerateMetrics",
    "InvalidInput",
    "Policy",
    "Process",
    "ProcessMetrics",
    "ScheduleResult",
    "ScheduledSlice",
    "SchedulerError",
    "SystemMetrics",
    "compare_algorithms",
    "run_algorithm",
]
