from __future__ import annotations


class SchedulerError(Exception):
    """Base class for every error raised by the scheduling engine."""


class InvalidInput(SchedulerError, ValueError):
    """
    The process set or run configuration was rejected before simulation.
    """


class DegenerateMetrics(SchedulerError, ArithmeticError):
    """
    Aggregate metrics are undefined, e.g. throughput over a zero makespan.
    """
