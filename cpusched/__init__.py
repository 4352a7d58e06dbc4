"""
CPU scheduling metrics.

Simulates FCFS, non-preemptive SJF and Round-Robin over a fixed batch of
processes and reports turnaround, response and wait time per discipline.
"""

from .algorithms import ALGORITHMS, run_algorithm, schedule_fcfs, schedule_rr, schedule_sjf
from .driver import compare, processes_from_pairs, run_all
from .models import AverageMetrics, Process, ScheduleResult

__all__ = [
    "ALGORITHMS",
    "AverageMetrics",
    "Process",
    "ScheduleResult",
    "compare",
    "processes_from_pairs",
    "run_algorithm",
    "run_all",
    "schedule_fcfs",
    "schedule_rr",
    "schedule_sjf",
]
