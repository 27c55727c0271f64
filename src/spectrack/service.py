"""Query/mutation entry point: one parse, then act on the selected mode.

Hard errors are raised as :class:`spectrack.errors.SpectrackError`
subclasses; soft outcomes (blocked task, unverified completion) come back
as a :class:`ModeResult` with ``ok=False``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from spectrack import log
from spectrack.config import (
    MODES,
    TASK_ID_MODES,
    Config,
    locate_tasks_file,
    resolve_project_root,
)
from spectrack.errors import TaskNotFoundError, UsageError
from spectrack.io_utils import CachedReader
from spectrack.tasks.io import load_task_list, mark_task_complete_in_file
from spectrack.tasks.model import Task, TaskList
from spectrack.tasks.resolver import (
    check_task_dependencies,
    detect_cycles,
    find_duplicate_ids,
    find_unknown_dependencies,
)
from spectrack.verify import format_verification_result, verify_task_completion


@dataclass
class ModeResult:
    ok: bool = True
    payload: Any = None
    message: str = ""
    report: str = ""
    # True when the document on disk was rewritten.
    changed: bool = False


def _require_task(tl: TaskList, task_id: str) -> Task:
    task = tl.get_task(task_id)
    if task is None:
        raise TaskNotFoundError(task_id)
    return task


def validate_task_list(tl: TaskList) -> ModeResult:
    """Report duplicate ids, dependencies on unknown ids and dependency cycles."""
    duplicates = find_duplicate_ids(tl.tasks)
    unknown = find_unknown_dependencies(tl.tasks)
    cycle = detect_cycles(tl.tasks)
    ok = not (duplicates or unknown or cycle)
    return ModeResult(
        ok=ok,
        payload={
            "valid": ok,
            "duplicateIds": duplicates,
            "unknownDependencies": unknown,
            "cycle": cycle,
        },
        message=f"{len(tl)} task(s) valid" if ok else "Task list has problems",
    )


def get_tasks(
    spec_name: str,
    task_id: str | None = None,
    mode: str = "all",
    project_dir: Path | str | None = None,
    max_age_seconds: float | None = None,
    *,
    cfg: Config | None = None,
    reader: CachedReader | None = None,
) -> ModeResult:
    """Run *mode* against the tasks.md of *spec_name*.

    *project_dir* defaults to the git top-level (or cwd outside a repo); file
    paths named by tasks are verified relative to it.
    """
    cfg = cfg or Config()
    if reader is None and not cfg.use_cache:
        reader = CachedReader()

    if mode not in MODES:
        raise UsageError(f"Unknown mode {mode}. Use: {', '.join(MODES)}")
    if mode in TASK_ID_MODES and not task_id:
        raise UsageError(f"Task ID required for {mode} mode")

    project = Path(project_dir) if project_dir else resolve_project_root()
    path = locate_tasks_file(spec_name, project, cfg)
    log.debug(f"Reading {path}")
    tl, _ = load_task_list(path, reader)

    if not tl.tasks and mode not in TASK_ID_MODES:
        return ModeResult(message="No tasks found")

    duplicates = find_duplicate_ids(tl.tasks)
    if duplicates:
        log.warn(
            f"Duplicate task id(s) {', '.join(duplicates)}; the last occurrence is used"
        )

    match mode:
        case "all":
            return ModeResult(payload=tl.to_dicts())

        case "single":
            return ModeResult(payload=_require_task(tl, task_id).to_dict())

        case "next-pending":
            nxt = tl.next_pending()
            if nxt is None:
                return ModeResult(message="No pending tasks found")
            return ModeResult(payload=nxt.to_dict())

        case "complete":
            task = _require_task(tl, task_id)
            if task.completed:
                return ModeResult(message=f"Task {task_id} is already completed")
            mark_task_complete_in_file(path, task_id, reader)
            return ModeResult(message=f"Task {task_id} marked as complete", changed=True)

        case "check-dependencies":
            check = check_task_dependencies(_require_task(tl, task_id), tl.tasks)
            return ModeResult(
                ok=check.can_execute, payload=check.to_dict(), message=check.message
            )

        case "verify":
            task = _require_task(tl, task_id)
            age = max_age_seconds if max_age_seconds is not None else cfg.max_age_seconds
            result = verify_task_completion(task, age, base_dir=project, cfg=cfg)
            return ModeResult(
                ok=result.auto_verified,
                payload=result.to_dict(),
                report=format_verification_result(result),
            )

        case "validate":
            return validate_task_list(tl)

    raise UsageError(f"Unknown mode {mode}")
