from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice

COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def merge_slices(slices: List[ScheduledSlice]) -> List[ScheduledSlice]:
    """
    Join back-to-back slices of the same process, e.g. a lone round-robin
    process running several quanta in a row.
    """
    merged: List[ScheduledSlice] = []
    for sl in sorted(slices, key=lambda s: (s.start_time, s.end_time)):
        last = merged[-1] if merged else None
        if last and last.pid == sl.pid and last.end_time == sl.start_time:
            merged[-1] = ScheduledSlice(pid=last.pid, start_time=last.start_time, end_time=sl.end_time)
        else:
            merged.append(sl)
    return merged


def _segments(slices: List[ScheduledSlice]) -> Tuple[List[Tuple[Optional[str], int]], str]:
    # (pid or None for idle, width) pairs plus the time-mark row.
    segments: List[Tuple[Optional[str], int]] = []
    time_marks = "0"
    last_time = 0

    for sl in merge_slices(slices):
        idle_gap = sl.start_time - last_time
        if idle_gap > 0:
            segments.append((None, idle_gap))
            time_marks += f"{sl.start_time:>3}"

        segments.append((sl.pid, max(1, sl.end_time - sl.start_time)))
        last_time = sl.end_time
        time_marks += f"{last_time:>3}"

    return segments, time_marks


def render_gantt(slices: List[ScheduledSlice]) -> str:
    """
    Plain-text Gantt chart; idle time is drawn with dots.
    """
    if not slices:
        return "(no execution)"

    segments, time_marks = _segments(slices)

    line = "|"
    labels = " "
    for pid, width in segments:
        if pid is None:
            line += "." * width
            labels += " " * width
        else:
            line += "=" * width
            labels += pid[:width].ljust(width)
    line += "|"

    return "\n".join(["Gantt Chart:", line, labels, time_marks])


def build_rich_gantt(slices: List[ScheduledSlice]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not slices:
        return Panel("No execution", title="Gantt Chart"), ""

    pid_to_color: Dict[str, str] = {}

    def pid_color(pid: str) -> str:
        if pid not in pid_to_color:
            pid_to_color[pid] = COLORS[len(pid_to_color) % len(COLORS)]
        return pid_to_color[pid]

    segments, time_marks = _segments(slices)

    timeline = Text()
    labels = Text()
    for pid, width in segments:
        if pid is None:
            timeline.append(" " * width)
            labels.append(" " * width)
            continue
        timeline.append(" " * width, style=f"on {pid_color(pid)}")
        labels.append(pid[:width].ljust(width), style="bold")

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    return Panel.fit(table, title="Gantt Chart"), time_marks
