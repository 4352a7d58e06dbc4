import pytest

from cpusched.errors import IncompleteScheduleError, RecordStateError
from cpusched.metrics import average
from cpusched.models import AverageMetrics, Process, ProcessRecord, make_records


def _finished(arrival, burst, start, completion, index=0):
    rec = ProcessRecord.from_process(Process(f"P{index}", arrival, burst), index)
    rec.begin(start)
    rec.run_for(burst)
    rec.finish(completion)
    return rec


def test_average_of_finished_records():
    records = [
        _finished(0, 5, 0, 5, 0),
        _finished(1, 3, 5, 8, 1),
        _finished(2, 8, 8, 16, 2),
    ]
    avg = average(records)
    assert avg.turnaround == pytest.approx((5 + 7 + 14) / 3)
    assert avg.response == pytest.approx((0 + 4 + 6) / 3)
    assert avg.wait == pytest.approx((0 + 4 + 6) / 3)


def test_average_of_nothing_is_zero():
    assert average([]) == AverageMetrics(turnaround=0.0, response=0.0, wait=0.0)


def test_average_rejects_unfinished_records():
    records = make_records([Process("A", 0, 2)])
    with pytest.raises(IncompleteScheduleError, match="A"):
        average(records)


def test_derived_times_require_completion():
    rec = ProcessRecord.from_process(Process("A", 0, 2), 0)
    with pytest.raises(IncompleteScheduleError):
        rec.turnaround_time
    with pytest.raises(IncompleteScheduleError):
        rec.wait_time


def test_record_starts_no_earlier_than_arrival():
    rec = ProcessRecord.from_process(Process("A", 6, 2), 0)
    assert rec.begin(1) == 6
    assert rec.start_time == 6


def test_remaining_burst_never_negative():
    rec = ProcessRecord.from_process(Process("A", 0, 3), 0)
    assert rec.run_for(2) == 2
    assert rec.run_for(2) == 1
    assert rec.remaining_burst_time == 0


def test_finish_only_once():
    rec = _finished(0, 1, 0, 1)
    with pytest.raises(RecordStateError):
        rec.finish(2)
    assert rec.completion_time == 1


def test_make_records_gives_fresh_copies():
    procs = [Process("A", 0, 2), Process("B", 1, 1)]
    first = make_records(procs)
    first[0].finish(2)
    second = make_records(procs)
    assert not second[0].finished
    assert second[0].remaining_burst_time == 2
    assert [r.index for r in second] == [0, 1]
