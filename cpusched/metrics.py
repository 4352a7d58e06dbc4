from __future__ import annotations

from typing import Sequence

from .errors import IncompleteScheduleError
from .models import AverageMetrics, ProcessRecord, ScheduleResult, SystemMetrics


def average(records: Sequence[ProcessRecord]) -> AverageMetrics:
    """
    Mean turnaround, response and wait time over finished records.

    Every record must be finished; an empty sequence averages to zeros.
    """
    unfinished = [r.pid for r in records if not r.finished]
    if unfinished:
        raise IncompleteScheduleError(f"Cannot average unfinished processes: {', '.join(unfinished)}")

    if not records:
        return AverageMetrics(turnaround=0.0, response=0.0, wait=0.0)

    n = len(records)
    return AverageMetrics(
        turnaround=sum(r.turnaround_time for r in records) / n,
        response=sum(r.response_time for r in records) / n,
        wait=sum(r.wait_time for r in records) / n,
    )


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute throughput and CPU utilization given finished records and
    timeline slices.
    """
    if not result.processes:
        system = SystemMetrics(cpu_busy_time=0, makespan=0, throughput=0.0, cpu_utilization=0.0)
        result.system = system
        return system

    makespan = max(r.completion_time for r in result.processes)
    cpu_busy_time = sum(slice_.end_time - slice_.start_time for slice_ in result.timeline)

    system = SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        throughput=len(result.processes) / makespan if makespan > 0 else 0.0,
        cpu_utilization=cpu_busy_time / makespan if makespan > 0 else 0.0,
    )
    result.system = system
    return system


def finalize(result: ScheduleResult) -> ScheduleResult:
    result.averages = average(result.processes)
    compute_system_metrics(result)
    return result
