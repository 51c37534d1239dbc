"""
Business metrics for Taskin.

One TaskinMetrics instance is created per application and handed to the
handlers through their context. The snapshot is served at /metrics; the
OTEL_* settings describe where a collector would pick it up.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Any, Optional

PROJECTS_CREATED = "taskin.projects.created"
PROJECTS_DELETED = "taskin.projects.deleted"
TASKS_CREATED = "taskin.tasks.created"
TASKS_COMPLETED = "taskin.tasks.completed"
TASKS_DELETED = "taskin.tasks.deleted"
POMODOROS_CREATED = "taskin.pomodoros.created"
POMODOROS_DELETED = "taskin.pomodoros.deleted"
POMODORO_DURATION = "taskin.pomodoros.duration"


@dataclass
class Histogram:
    """Running count/sum/min/max of recorded values."""

    unit: str
    count: int = 0
    total: float = 0.0
    min: Optional[float] = None
    max: Optional[float] = None

    def record(self, value: float) -> None:
        self.count += 1
        self.total += value
        self.min = value if self.min is None else min(self.min, value)
        self.max = value if self.max is None else max(self.max, value)

    def as_dict(self) -> dict[str, Any]:
        return {
            "unit": self.unit,
            "count": self.count,
            "sum": self.total,
            "min": self.min,
            "max": self.max,
        }


def parse_resource_attributes(raw: str) -> dict[str, str]:
    """Parse the OTEL_RESOURCE_ATTRIBUTES format: ``key=value,key2=value2``."""
    attributes = {}
    for pair in raw.split(","):
        key, sep, value = pair.partition("=")
        if sep and key.strip():
            attributes[key.strip()] = value.strip()
    return attributes


class TaskinMetrics:
    def __init__(
        self,
        service_name: str = "taskin-api",
        resource_attributes: Optional[dict[str, str]] = None,
        exporter_endpoint: Optional[str] = None,
    ):
        self.service_name = service_name
        self.resource_attributes = resource_attributes or {}
        self.exporter_endpoint = exporter_endpoint
        self._counters: Counter[str] = Counter()
        self._histograms = {POMODORO_DURATION: Histogram(unit="minutes")}

    # Project operations
    def record_project_created(self) -> None:
        self._counters[PROJECTS_CREATED] += 1

    def record_project_deleted(self) -> None:
        self._counters[PROJECTS_DELETED] += 1

    # Task operations
    def record_task_created(self) -> None:
        self._counters[TASKS_CREATED] += 1

    def record_task_completed(self, count: int = 1) -> None:
        self._counters[TASKS_COMPLETED] += count

    def record_task_deleted(self) -> None:
        self._counters[TASKS_DELETED] += 1

    # Pomodoro operations
    def record_pomodoro_created(self) -> None:
        self._counters[POMODOROS_CREATED] += 1

    def record_pomodoro_deleted(self) -> None:
        self._counters[POMODOROS_DELETED] += 1

    def record_pomodoro_duration(self, minutes: float) -> None:
        self._histograms[POMODORO_DURATION].record(minutes)

    def counter(self, name: str) -> int:
        return self._counters[name]

    def snapshot(self) -> dict[str, Any]:
        return {
            "service": self.service_name,
            "resource": dict(self.resource_attributes),
            "exporter_endpoint": self.exporter_endpoint,
            "counters": dict(self._counters),
            "histograms": {name: h.as_dict() for name, h in self._histograms.items()},
        }
