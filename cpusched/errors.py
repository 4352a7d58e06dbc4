from __future__ import annotations


class SchedulerError(Exception):
    """Base class for every error raised by cpusched."""


class InvalidWorkloadError(SchedulerError, ValueError):
    """The process list or quantum violates a scheduler precondition."""


class WorkloadError(InvalidWorkloadError):
    """A workload file could not be parsed into processes."""


class UnknownAlgorithmError(SchedulerError, ValueError):
    pass


class IncompleteScheduleError(SchedulerError, RuntimeError):
    """Timing metrics were requested for a process that has not finished."""


class RecordStateError(SchedulerError, RuntimeError):
    """A process record was moved through an invalid lifecycle transition."""
