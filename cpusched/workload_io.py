from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import List

from .errors import InvalidInput
from .models import Process

# Ten-process demo set: (pid, arrival, burst, priority).
DEFAULT_WORKLOAD = [
    (1, 0, 8, 1),
    (2, 1, 4, 2),
    (3, 2, 2, 1),
    (4, 3, 1, 3),
    (5, 4, 3, 2),
    (6, 5, 6, 2),
    (7, 6, 3, 1),
    (8, 7, 5, 3),
    (9, 8, 2, 2),
    (10, 9, 4, 1),
]


def default_workload() -> List[Process]:
    return [
        Process(pid=pid, arrival_time=arrival, burst_time=burst, priority=priority)
        for pid, arrival, burst, priority in DEFAULT_WORKLOAD
    ]


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _load_json(path)
    if suffix == ".csv":
        return _load_csv(path)

    raise InvalidInput(f"Unsupported workload format: {suffix} (use .json or .csv)")


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise InvalidInput(f"{path}: not valid JSON ({exc})") from exc

    if not isinstance(raw, list):
        raise InvalidInput("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            processes.append(_process_from_mapping(row))
    return processes


def _process_from_mapping(mapping) -> Process:
    try:
        pid = int(mapping["pid"])
        arrival_time = int(mapping["arrival_time"])
        burst_time = int(mapping["burst_time"])
        priority_val = mapping.get("priority")
        priority = int(priority_val) if priority_val not in (None, "") else 0
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise InvalidInput(f"Invalid process entry: {mapping!r}") from exc

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )
