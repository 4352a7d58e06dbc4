from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import List, Mapping

from .errors import WorkloadError
from .models import Process

logger = logging.getLogger(__name__)


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload into a list of Process objects.

    ``.json`` and ``.csv`` files carry named columns; anything else is read as
    plain text with one ``arrival burst`` pair per line.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    try:
        if suffix == ".json":
            processes = _load_json(path)
        elif suffix == ".csv":
            processes = _load_csv(path)
        else:
            processes = parse_text(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise WorkloadError(f"Cannot read workload {path}: {exc}") from exc

    logger.debug("Loaded %d processes from %s", len(processes), path)
    return processes


def parse_text(text: str) -> List[Process]:
    """
    Parse whitespace-separated ``arrival burst`` lines.

    Blank lines and lines starting with ``#`` are skipped.
    """
    processes: List[Process] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        stripped = line.split("#", 1)[0].strip()
        if not stripped:
            continue

        tokens = stripped.split()
        if len(tokens) != 2:
            raise WorkloadError(f"Line {lineno}: expected 'arrival burst', got {line!r}")

        try:
            arrival_time, burst_time = (int(tok) for tok in tokens)
        except ValueError as exc:
            raise WorkloadError(f"Line {lineno}: not an integer pair: {line!r}") from exc

        processes.append(Process.from_pair((arrival_time, burst_time), len(processes)))

    return processes


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise WorkloadError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(raw, list):
        raise WorkloadError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry, i) for i, entry in enumerate(raw)]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            processes.append(_process_from_mapping(row, len(processes)))
    return processes


def _whole_number(value) -> int:
    # JSON gives ints, floats and bools; CSV gives strings. Only whole numbers pass.
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise TypeError(f"expected an integer, got {value!r}")
    return int(value)


def _process_from_mapping(mapping: Mapping, index: int) -> Process:
    try:
        arrival_time = _whole_number(mapping["arrival_time"])
        burst_time = _whole_number(mapping["burst_time"])
    except (KeyError, TypeError, ValueError) as exc:
        raise WorkloadError(f"Invalid process entry: {mapping!r}") from exc

    pid_val = mapping.get("pid")
    pid = str(pid_val) if pid_val not in (None, "") else f"P{index + 1}"

    return Process(pid=pid, arrival_time=arrival_time, burst_time=burst_time)
