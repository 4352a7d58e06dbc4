from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Dict, List, Optional, Sequence

from .errors import InvalidWorkloadError, UnknownAlgorithmError
from .metrics import finalize
from .models import Process, ProcessRecord, ScheduleResult, ScheduledSlice, make_records

logger = logging.getLogger(__name__)

SchedulerFunc = Callable[..., ScheduleResult]


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_processes(processes: Sequence[Process]) -> None:
    """
    Reject input that would make the simulation meaningless: an empty list,
    negative arrivals or non-positive bursts.
    """
    if not processes:
        raise InvalidWorkloadError("At least one process is required")

    for p in processes:
        if not _is_int(p.arrival_time) or p.arrival_time < 0:
            raise InvalidWorkloadError(f"{p.pid}: arrival time must be a non-negative integer, got {p.arrival_time!r}")
        if not _is_int(p.burst_time) or p.burst_time <= 0:
            raise InvalidWorkloadError(f"{p.pid}: burst time must be a positive integer, got {p.burst_time!r}")


def validate_quantum(quantum: Optional[int]) -> None:
    if quantum is None or not _is_int(quantum) or quantum <= 0:
        raise InvalidWorkloadError(f"Round Robin requires a positive integer quantum, got {quantum!r}")


def _prepare(processes: Sequence[Process]) -> List[ProcessRecord]:
    validate_processes(processes)
    return make_records(processes)


def schedule_fcfs(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    Processes arriving at the same time keep their input order.
    """
    records = sorted(_prepare(processes), key=lambda r: r.arrival_time)

    clock = 0
    timeline: List[ScheduledSlice] = []

    for rec in records:
        clock = rec.begin(clock)
        rec.run_for(rec.burst_time)
        timeline.append(ScheduledSlice(pid=rec.pid, start_time=clock, end_time=clock + rec.burst_time))
        clock += rec.burst_time
        rec.finish(clock)
        logger.debug("FCFS: %s ran %d..%d", rec.pid, rec.start_time, clock)

    result = ScheduleResult(algorithm="FCFS", quantum=quantum, processes=records, timeline=timeline)
    return _finish(result)


def schedule_sjf(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive).

    At each decision point, among processes that have arrived and are not yet
    completed, choose the one with the smallest burst time. Ties go to the
    earlier arrival, then to the earlier position in the input.

    Instead of advancing the clock one unit at a time while the CPU is idle,
    the clock jumps straight to the next arrival; the selections are the same.
    """
    records = _prepare(processes)
    pending: List[ProcessRecord] = list(records)

    clock = 0
    timeline: List[ScheduledSlice] = []
    completed: List[ProcessRecord] = []

    while pending:
        ready = [r for r in pending if r.arrival_time <= clock]

        if not ready:
            clock = min(r.arrival_time for r in pending)
            logger.debug("SJF: CPU idle, jumping to t=%d", clock)
            continue

        # min() keeps the first of equal keys, i.e. input order.
        rec = min(ready, key=lambda r: (r.burst_time, r.arrival_time))

        clock = rec.begin(clock)
        rec.run_for(rec.burst_time)
        timeline.append(ScheduledSlice(pid=rec.pid, start_time=clock, end_time=clock + rec.burst_time))
        clock += rec.burst_time
        rec.finish(clock)
        logger.debug("SJF: %s ran %d..%d", rec.pid, rec.start_time, clock)

        pending.remove(rec)
        completed.append(rec)

    result = ScheduleResult(algorithm="SJF (non-preemptive)", quantum=quantum, processes=completed, timeline=timeline)
    return _finish(result)


def schedule_rr(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    The ready queue holds indices into the arrival-sorted record list. After
    every slice, newly arrived processes are admitted in arrival order, and
    only then is the preempted process put back at the tail.
    """
    validate_quantum(quantum)
    records = sorted(_prepare(processes), key=lambda r: r.arrival_time)

    clock = 0
    timeline: List[ScheduledSlice] = []
    completed: List[ProcessRecord] = []

    ready: Deque[int] = deque()
    _admit(records, ready, 0)

    while len(completed) < len(records):
        if not ready:
            # Nothing arrived yet; the next process starts at its own arrival.
            _admit(records, ready, _next_unfinished(records))

        idx = ready.popleft()
        rec = records[idx]

        if not rec.has_started:
            clock = rec.begin(clock)

        ran = rec.run_for(quantum)
        timeline.append(ScheduledSlice(pid=rec.pid, start_time=clock, end_time=clock + ran))
        clock += ran
        logger.debug("RR: %s ran %d..%d, %d left", rec.pid, clock - ran, clock, rec.remaining_burst_time)

        if rec.remaining_burst_time == 0:
            rec.finish(clock)
            completed.append(rec)

        _admit_arrivals(records, ready, clock)

        if not rec.finished:
            ready.append(idx)

    result = ScheduleResult(algorithm="Round Robin", quantum=quantum, processes=completed, timeline=timeline)
    return _finish(result)


def _admit(records: List[ProcessRecord], ready: Deque[int], idx: int) -> None:
    records[idx].enqueued = True
    ready.append(idx)


def _admit_arrivals(records: List[ProcessRecord], ready: Deque[int], clock: int) -> None:
    for idx, rec in enumerate(records):
        if rec.enqueued or rec.finished:
            continue
        if rec.arrival_time > clock:
            # Sorted by arrival: nobody further along has arrived either.
            break
        _admit(records, ready, idx)


def _next_unfinished(records: List[ProcessRecord]) -> int:
    return next(idx for idx, rec in enumerate(records) if not rec.finished)


def _finish(result: ScheduleResult) -> ScheduleResult:
    finalize(result)
    avg = result.averages
    logger.info(
        "%s: avg turnaround %.2f, avg response %.2f, avg wait %.2f",
        result.algorithm,
        avg.turnaround,
        avg.response,
        avg.wait,
    )
    return result


ALGORITHMS: Dict[str, SchedulerFunc] = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "rr": schedule_rr,
}

PREEMPTIVE = {"rr"}


def run_algorithm(name: str, processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. The quantum only matters for
    round-robin.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise UnknownAlgorithmError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    func = ALGORITHMS[name]
    return func(processes, quantum=quantum)
