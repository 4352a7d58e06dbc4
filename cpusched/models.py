from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from .errors import IncompleteScheduleError, RecordStateError


@dataclass(frozen=True)
class Process:
    """
    Immutable description of one task: when it arrives and how much CPU it needs.
    """

    pid: str
    arrival_time: int
    burst_time: int

    @classmethod
    def from_pair(cls, pair: Tuple[int, int], index: int) -> "Process":
        arrival_time, burst_time = pair
        return cls(pid=f"P{index + 1}", arrival_time=arrival_time, burst_time=burst_time)


@dataclass
class ProcessRecord:
    """
    Working copy of a Process for a single scheduler run.

    Records are mutated in place while simulating and are never shared
    between runs.
    """

    pid: str
    arrival_time: int
    burst_time: int
    index: int
    remaining_burst_time: int = 0
    start_time: Optional[int] = None
    completion_time: Optional[int] = None
    finished: bool = False
    enqueued: bool = False

    @classmethod
    def from_process(cls, process: Process, index: int) -> "ProcessRecord":
        return cls(
            pid=process.pid,
            arrival_time=process.arrival_time,
            burst_time=process.burst_time,
            index=index,
            remaining_burst_time=process.burst_time,
        )

    @property
    def has_started(self) -> bool:
        return self.start_time is not None

    def begin(self, clock: int) -> int:
        """
        Record the first execution slice. Returns the clock the slice starts at,
        which is never earlier than the arrival time.
        """
        self.start_time = max(clock, self.arrival_time)
        return self.start_time

    def run_for(self, units: int) -> int:
        ran = min(units, self.remaining_burst_time)
        self.remaining_burst_time -= ran
        return ran

    def finish(self, clock: int) -> None:
        if self.finished:
            raise RecordStateError(f"{self.pid} finished twice")
        self.remaining_burst_time = 0
        self.completion_time = clock
        self.finished = True

    def _require_finished(self) -> None:
        if not self.finished:
            raise IncompleteScheduleError(f"{self.pid} has not finished executing")

    @property
    def turnaround_time(self) -> int:
        self._require_finished()
        return self.completion_time - self.arrival_time

    @property
    def response_time(self) -> int:
        self._require_finished()
        return self.start_time - self.arrival_time

    @property
    def wait_time(self) -> int:
        return self.turnaround_time - self.burst_time


def make_records(processes: Iterable[Process]) -> List[ProcessRecord]:
    return [ProcessRecord.from_process(p, i) for i, p in enumerate(processes)]


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    pid: str
    start_time: int
    end_time: int


@dataclass(frozen=True)
class AverageMetrics:
    turnaround: float
    response: float
    wait: float


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    throughput: float
    cpu_utilization: float


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    processes: List[ProcessRecord] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    averages: Optional[AverageMetrics] = None
    system: Optional[SystemMetrics] = None

    def record(self, pid: str) -> ProcessRecord:
        for rec in self.processes:
            if rec.pid == pid:
                return rec
        raise KeyError(pid)
