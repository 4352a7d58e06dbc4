"""
Run several scheduling disciplines over the same workload.

Each discipline builds its own working records from the immutable input, so
one run can never observe another's mutations.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence, Tuple

from .algorithms import ALGORITHMS, PREEMPTIVE, run_algorithm, validate_processes, validate_quantum
from .errors import UnknownAlgorithmError
from .models import AverageMetrics, Process, ScheduleResult

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 2
DEFAULT_ALGORITHMS: Tuple[str, ...] = ("fcfs", "sjf", "rr")


def processes_from_pairs(pairs: Iterable[Tuple[int, int]]) -> List[Process]:
    """
    Build labelled processes from ``(arrival_time, burst_time)`` pairs.
    """
    return [Process.from_pair(pair, i) for i, pair in enumerate(pairs)]


def run_all(
    processes: Sequence[Process],
    quantum: int = DEFAULT_QUANTUM,
    algorithms: Iterable[str] = DEFAULT_ALGORITHMS,
) -> Dict[str, ScheduleResult]:
    names = [name.lower() for name in algorithms]
    for name in names:
        if name not in ALGORITHMS:
            raise UnknownAlgorithmError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    validate_processes(processes)
    if any(name in PREEMPTIVE for name in names):
        validate_quantum(quantum)

    logger.info("Scheduling %d processes with %s", len(processes), ", ".join(names))

    results: Dict[str, ScheduleResult] = {}
    for name in names:
        q = quantum if name in PREEMPTIVE else None
        results[name] = run_algorithm(name, processes, quantum=q)
    return results


def compare(
    processes: Sequence[Process],
    quantum: int = DEFAULT_QUANTUM,
    algorithms: Iterable[str] = DEFAULT_ALGORITHMS,
) -> Dict[str, AverageMetrics]:
    """
    Average turnaround, response and wait time per discipline.
    """
    results = run_all(processes, quantum=quantum, algorithms=algorithms)
    return {name: result.averages for name, result in results.items()}
