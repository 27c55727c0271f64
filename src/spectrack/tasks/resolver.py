"""Hierarchy and dependency queries over a parsed task set."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from spectrack.tasks.model import Task, task_hierarchy

__all__ = [
    "DependencyCheck",
    "check_task_dependencies",
    "detect_cycles",
    "find_duplicate_ids",
    "find_unknown_dependencies",
    "resolve_blocked_by",
    "task_hierarchy",
]


def _index(tasks: list[Task]) -> dict[str, Task]:
    # Last occurrence wins on duplicate ids.
    return {t.id: t for t in tasks}


def resolve_blocked_by(tasks: list[Task]) -> list[Task]:
    """Set ``blocked_by`` on every task from the completion state of the whole set.

    Only dependencies that exist and are incomplete count; unknown ids are
    reported by :func:`check_task_dependencies` instead. Completed tasks are
    annotated too, since completion doesn't prove prerequisites were honored.
    """
    by_id = _index(tasks)
    for task in tasks:
        blocked = [
            dep
            for dep in task.depends_on
            if dep in by_id and not by_id[dep].completed
        ]
        task.blocked_by = blocked or None
    return tasks


@dataclass
class DependencyCheck:
    can_execute: bool
    blocked_by: list[str] = field(default_factory=list)
    message: str = ""
    missing: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "canExecute": self.can_execute,
            "blockedBy": list(self.blocked_by),
            "message": self.message,
        }
        if self.missing:
            data["missing"] = list(self.missing)
        return data


def check_task_dependencies(task: Task, all_tasks: list[Task]) -> DependencyCheck:
    """Decide whether *task* can run given the state of *all_tasks*.

    Missing dependencies take precedence over incomplete ones.
    """
    if not task.depends_on:
        return DependencyCheck(
            can_execute=True,
            message=f"Task {task.id} has no dependencies and can be executed.",
        )

    by_id = _index(all_tasks)
    missing = [dep for dep in task.depends_on if dep not in by_id]
    if missing:
        return DependencyCheck(
            can_execute=False,
            blocked_by=missing,
            missing=missing,
            message=(
                f"Task {task.id} cannot execute: "
                f"Referenced tasks not found: {', '.join(missing)}"
            ),
        )

    incomplete = [dep for dep in task.depends_on if not by_id[dep].completed]
    if incomplete:
        return DependencyCheck(
            can_execute=False,
            blocked_by=incomplete,
            message=(
                f"Task {task.id} cannot execute: "
                f"Waiting for tasks {', '.join(incomplete)} to complete."
            ),
        )

    return DependencyCheck(
        can_execute=True,
        message=f"Task {task.id} dependencies satisfied. Ready to execute.",
    )


# ── document-wide diagnostics ────────────────────────────────────


def find_duplicate_ids(tasks: list[Task]) -> list[str]:
    seen: set[str] = set()
    dupes: list[str] = []
    for t in tasks:
        if t.id in seen and t.id not in dupes:
            dupes.append(t.id)
        seen.add(t.id)
    return dupes


def find_unknown_dependencies(tasks: list[Task]) -> dict[str, list[str]]:
    """Map task id -> dependency ids that resolve to no task."""
    by_id = _index(tasks)
    unknown: dict[str, list[str]] = {}
    for t in tasks:
        missing = [dep for dep in t.depends_on if dep not in by_id]
        if missing:
            unknown[t.id] = missing
    return unknown


def detect_cycles(tasks: list[Task]) -> str:
    """Return the first dependency cycle as ``"A -> B -> A"``, or ``""``."""
    by_id = _index(tasks)
    # 0 = unvisited, 1 = on stack, 2 = done
    color: dict[str, int] = {tid: 0 for tid in by_id}

    def visit(tid: str, path: list[str]) -> str:
        color[tid] = 1
        path.append(tid)
        for dep in by_id[tid].depends_on:
            if dep not in by_id:
                continue
            if color[dep] == 1:
                start = path.index(dep)
                return " -> ".join(path[start:] + [dep])
            if color[dep] == 0:
                found = visit(dep, path)
                if found:
                    return found
        path.pop()
        color[tid] = 2
        return ""

    for tid in by_id:
        if color[tid] == 0:
            found = visit(tid, [])
            if found:
                return found
    return ""
