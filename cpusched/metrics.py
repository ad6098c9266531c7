from __future__ import annotations

from typing import List

from .errors import DegenerateMetrics, SchedulerError
from .models import ProcessMetrics, ScheduleResult, SystemMetrics


def finalize_metrics(metrics: ProcessMetrics, completion_time: int) -> ProcessMetrics:
    """
    Record completion of a process and derive turnaround and waiting time.

    Completion-derived fields are written exactly once per run.
    """
    if metrics.finished:
        raise SchedulerError(f"Process {metrics.pid} was already completed at t={metrics.completion_time}")

    metrics.completion_time = completion_time
    metrics.turnaround_time = completion_time - metrics.arrival_time
    metrics.waiting_time = metrics.turnaround_time - metrics.burst_time
    return metrics


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute averages, throughput and CPU utilization given populated
    per-process metrics and timeline slices.
    """
    makespan = max((s.end_time for s in result.timeline), default=0)
    if makespan <= 0 or not result.processes:
        raise DegenerateMetrics(f"{result.algorithm}: makespan is zero, throughput is undefined")

    cpu_busy_time = sum(slice_.duration for slice_ in result.timeline)
    summary = summarize_process_metrics(result.processes)

    system = SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        throughput=len(result.processes) / makespan,
        cpu_utilization=cpu_busy_time / makespan,
        avg_turnaround=summary["avg_turnaround"],
        avg_waiting=summary["avg_waiting"],
        idle_time=makespan - cpu_busy_time,
    )
    result.system = system
    return system


def summarize_process_metrics(processes: List[ProcessMetrics]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    if not processes:
        return {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}

    n = len(processes)
    return {
        "avg_waiting": sum(p.waiting_time for p in processes) / n,
        "avg_turnaround": sum(p.turnaround_time for p in processes) / n,
        "avg_response": sum(p.response_time for p in processes) / n,
    }
