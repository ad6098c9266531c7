import math

import pytest

from cpusched.algorithms import (
    AGING_INTERVAL,
    effective_priority,
    schedule_fcfs,
    schedule_priority,
    schedule_rr,
    schedule_sjf,
)
from cpusched.models import Process
from cpusched.workload_io import default_workload


def _segments(res):
    return [(s.pid, s.start_time, s.end_time) for s in res.timeline]


def _completion_order(res):
    return [m.pid for m in res.processes]


def test_fcfs_two_processes():
    res = schedule_fcfs([Process(1, arrival_time=0, burst_time=3), Process(2, arrival_time=1, burst_time=2)])
    assert _segments(res) == [(1, 0, 3), (2, 3, 5)]
    assert res.metrics_for(1).turnaround_time == 3
    assert res.metrics_for(2).turnaround_time == 4
    assert res.metrics_for(1).waiting_time == 0
    assert res.metrics_for(2).waiting_time == 2


def test_fcfs_equal_arrivals_keep_input_order():
    procs = [
        Process(7, arrival_time=2, burst_time=1),
        Process(3, arrival_time=0, burst_time=2),
        Process(5, arrival_time=2, burst_time=1),
        Process(1, arrival_time=2, burst_time=1),
    ]
    res = schedule_fcfs(procs)
    assert [s.pid for s in res.timeline] == [3, 7, 5, 1]


def test_fcfs_idle_gap():
    res = schedule_fcfs([Process(1, arrival_time=2, burst_time=2), Process(2, arrival_time=10, burst_time=3)])
    assert _segments(res) == [(1, 2, 4), (2, 10, 13)]
    assert res.system.idle_time == 8
    assert res.system.makespan == 13


def test_fcfs_default_workload():
    res = schedule_fcfs(default_workload())
    assert _completion_order(res) == list(range(1, 11))
    assert res.system.makespan == 38
    assert res.metrics_for(10).completion_time == 38


def test_sjf_default_workload():
    res = schedule_sjf(default_workload())
    assert _completion_order(res) == [1, 4, 3, 9, 5, 7, 2, 10, 8, 6]
    # P1 is alone at t=0 and runs to completion although shorter jobs arrive.
    assert res.timeline[0].end_time == 8


def test_sjf_tie_goes_to_first_in_input_order():
    procs = [
        Process(1, arrival_time=0, burst_time=1),
        Process(9, arrival_time=0, burst_time=3),
        Process(4, arrival_time=0, burst_time=3),
    ]
    res = schedule_sjf(procs)
    assert [s.pid for s in res.timeline] == [1, 9, 4]


def test_sjf_jumps_to_earliest_arrival():
    procs = [Process(1, arrival_time=9, burst_time=1), Process(2, arrival_time=4, burst_time=5)]
    res = schedule_sjf(procs)
    assert _segments(res) == [(2, 4, 9), (1, 9, 10)]


def test_rr_quantum_2():
    res = schedule_rr([Process(1, arrival_time=0, burst_time=4), Process(2, arrival_time=0, burst_time=2)], quantum=2)
    assert _segments(res) == [(1, 0, 2), (2, 2, 4), (1, 4, 6)]


@pytest.mark.parametrize("burst,quantum", [(7, 3), (6, 3), (1, 4), (10, 1)])
def test_rr_split_into_quantum_slices(burst, quantum):
    res = schedule_rr([Process(1, arrival_time=0, burst_time=burst)], quantum=quantum)
    durations = [s.duration for s in res.timeline]
    assert len(durations) == math.ceil(burst / quantum)
    assert all(d == quantum for d in durations[:-1])
    assert durations[-1] == (burst % quantum or quantum)


def test_rr_seeded_queue_waits_for_late_head():
    procs = [Process(1, arrival_time=0, burst_time=4), Process(2, arrival_time=10, burst_time=2)]
    res = schedule_rr(procs, quantum=2)
    assert _segments(res) == [(1, 0, 2), (2, 10, 12), (1, 12, 14)]


def test_rr_strict_arrivals():
    procs = [Process(1, arrival_time=0, burst_time=4), Process(2, arrival_time=10, burst_time=2)]
    res = schedule_rr(procs, quantum=2, strict_arrivals=True)
    assert _segments(res) == [(1, 0, 2), (1, 2, 4), (2, 10, 12)]


def test_rr_strict_new_arrival_queues_before_preempted():
    procs = [Process(1, arrival_time=0, burst_time=5), Process(2, arrival_time=1, burst_time=3)]
    res = schedule_rr(procs, quantum=2, strict_arrivals=True)
    assert _segments(res) == [(1, 0, 2), (2, 2, 4), (1, 4, 6), (2, 6, 7), (1, 7, 8)]


def test_rr_requires_quantum():
    with pytest.raises(ValueError):
        schedule_rr(default_workload())
    with pytest.raises(ValueError):
        schedule_rr(default_workload(), quantum=0)


def test_priority_static():
    procs = [
        Process(1, arrival_time=0, burst_time=5, priority=2),
        Process(2, arrival_time=0, burst_time=3, priority=1),
    ]
    res = schedule_priority(procs)
    assert _segments(res) == [(2, 0, 3), (1, 3, 8)]


def test_priority_is_non_preemptive():
    procs = [
        Process(1, arrival_time=0, burst_time=6, priority=5),
        Process(2, arrival_time=1, burst_time=2, priority=0),
    ]
    res = schedule_priority(procs)
    assert _segments(res) == [(1, 0, 6), (2, 6, 8)]


def test_priority_static_default_workload():
    res = schedule_priority(default_workload())
    assert _completion_order(res) == [1, 3, 7, 10, 2, 5, 6, 9, 4, 8]
    assert res.metrics_for(4).completion_time == 33


def test_priority_aging_default_workload():
    res = schedule_priority(default_workload(), aging=True)
    assert _completion_order(res) == [1, 3, 2, 5, 6, 4, 7, 8, 9, 10]
    # Aging lets the low-priority P4 run well before it would statically.
    assert res.metrics_for(4).completion_time == 24


def test_priority_aging_tie_breaks_by_arrival_then_burst():
    procs = [
        Process(1, arrival_time=0, burst_time=1, priority=0),
        Process(2, arrival_time=1, burst_time=4, priority=1),
        Process(3, arrival_time=1, burst_time=2, priority=1),
        Process(4, arrival_time=0, burst_time=3, priority=1),
    ]
    # At t=1 every candidate has effective priority 1.
    res = schedule_priority(procs, aging=True)
    assert [s.pid for s in res.timeline] == [1, 4, 3, 2]


def test_priority_static_tie_goes_to_first_in_input_order():
    procs = [
        Process(1, arrival_time=0, burst_time=1, priority=0),
        Process(2, arrival_time=1, burst_time=4, priority=1),
        Process(3, arrival_time=1, burst_time=2, priority=1),
        Process(4, arrival_time=0, burst_time=3, priority=1),
    ]
    res = schedule_priority(procs)
    assert [s.pid for s in res.timeline] == [1, 2, 3, 4]


def test_effective_priority_decreases_every_interval():
    p = Process(1, arrival_time=3, burst_time=1, priority=3)
    assert effective_priority(p, 3) == 3
    assert effective_priority(p, 3 + AGING_INTERVAL - 1) == 3
    assert effective_priority(p, 3 + AGING_INTERVAL) == 2
    assert effective_priority(p, 3 + 2 * AGING_INTERVAL) == 1
    assert effective_priority(p, 3 + 3 * AGING_INTERVAL) == 0
    assert effective_priority(p, 3 + 100 * AGING_INTERVAL) == 0


def test_effective_priority_equal_for_identical_processes():
    a = Process(1, arrival_time=2, burst_time=5, priority=4)
    b = Process(2, arrival_time=2, burst_time=5, priority=4)
    for t in range(2, 40):
        assert effective_priority(a, t) == effective_priority(b, t)
        assert effective_priority(a, t) >= effective_priority(a, t + 1)
