"""Task and TaskList data models used across parsing, queries and verification."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


def task_hierarchy(task_id: str) -> tuple[str | None, int]:
    """Return ``(parent_id, level)`` for a dot-path id.

    ``"1"`` -> ``(None, 0)``, ``"2.1"`` -> ``("2", 1)``, ``"3.2.1"`` -> ``("3.2", 2)``.
    """
    parts = task_id.split(".")
    level = len(parts) - 1
    parent_id = ".".join(parts[:-1]) if level > 0 else None
    return parent_id, level


@dataclass
class Task:
    id: str
    description: str = ""
    completed: bool = False
    details: list[str] = field(default_factory=list)
    requirements: str | None = None
    leverage: str | None = None
    depends_on: list[str] = field(default_factory=list)
    can_run_parallel: bool = False
    # Derived by the resolver pass; None when nothing blocks the task.
    blocked_by: list[str] | None = None

    @property
    def parent_id(self) -> str | None:
        return task_hierarchy(self.id)[0]

    @property
    def level(self) -> int:
        return task_hierarchy(self.id)[1]

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the camelCase keys of the JSON output."""
        data: dict[str, Any] = {
            "id": self.id,
            "description": self.description,
            "completed": self.completed,
            "details": list(self.details),
        }
        if self.requirements is not None:
            data["requirements"] = self.requirements
        if self.leverage is not None:
            data["leverage"] = self.leverage
        data["dependsOn"] = list(self.depends_on)
        data["canRunParallel"] = self.can_run_parallel
        if self.blocked_by:
            data["blockedBy"] = list(self.blocked_by)
        if self.parent_id is not None:
            data["parentId"] = self.parent_id
        data["level"] = self.level
        return data


@dataclass
class TaskList:
    tasks: list[Task] = field(default_factory=list)
    path: Path | None = None

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self):
        return iter(self.tasks)

    def by_id(self) -> dict[str, Task]:
        """Index tasks by id. On duplicate ids the last occurrence wins."""
        return {t.id: t for t in self.tasks}

    def get_task(self, task_id: str) -> Task | None:
        return self.by_id().get(task_id)

    def pending_ids(self) -> list[str]:
        return [t.id for t in self.tasks if not t.completed]

    def next_pending(self) -> Task | None:
        for t in self.tasks:
            if not t.completed:
                return t
        return None

    def children_of(self, task_id: str) -> list[Task]:
        return [t for t in self.tasks if t.parent_id == task_id]

    def to_dicts(self) -> list[dict[str, Any]]:
        return [t.to_dict() for t in self.tasks]
