"""Best-effort parser for ``tasks.md`` checklist documents.

Handles the formats agents tend to produce::

    - [ ] 1. Task description          (pending)
    - [x] 2. Task description          (completed)
    - [ ] 2.1 Subtask description      (period optional)
      - free-form detail line
      - _Requirements: 1.1, 2.2_
      - _Leverage: existing component X_
      - _Depends: 1, 2_
      - _Parallel: yes_

Lines that don't fit are skipped; nothing here raises on malformed input.
"""

from __future__ import annotations

import re
from enum import Enum

from spectrack import log
from spectrack.tasks.model import Task
from spectrack.tasks.resolver import resolve_blocked_by

TASK_LINE_RE = re.compile(r"^-\s*\[\s*([xX\s]*)\s*\]\s*([0-9]+(?:\.[0-9]+)*)\s*\.?\s*(.+)$")

# Looser prefix used while collecting: catches task-ish lines such as
# "- [ ] 3" that have no description and therefore don't open a task.
TASK_PREFIX_RE = re.compile(r"^-\s*\[\s*[xX\s]*\s*\]\s*[0-9]")

REQUIREMENTS_RE = re.compile(r"_Requirements:\s*(.+?)(?:_|$)")
LEVERAGE_RE = re.compile(r"_Leverage:\s*(.+?)(?:_|$)")
DEPENDS_RE = re.compile(r"_Depends:\s*(.+?)(?:_|$)", re.IGNORECASE)
PARALLEL_RE = re.compile(r"_Parallel:\s*(.+?)(?:_|$)", re.IGNORECASE)


class _State(str, Enum):
    IDLE = "idle"
    COLLECTING = "collecting"


def _parse_depends(value: str) -> list[str]:
    value = value.strip()
    if value.lower() == "none":
        return []
    return [dep.strip() for dep in value.split(",") if dep.strip()]


def _parse_parallel(value: str) -> bool:
    return value.strip().lower() in ("yes", "true")


def _apply_metadata(task: Task, line: str) -> bool:
    """Run every metadata matcher on *line*. Return ``True`` if any matched."""
    matched = False

    m = REQUIREMENTS_RE.search(line)
    if m:
        task.requirements = m.group(1).strip()
        matched = True

    m = LEVERAGE_RE.search(line)
    if m:
        task.leverage = m.group(1).strip()
        matched = True

    m = DEPENDS_RE.search(line)
    if m:
        task.depends_on = _parse_depends(m.group(1))
        matched = True

    m = PARALLEL_RE.search(line)
    if m:
        task.can_run_parallel = _parse_parallel(m.group(1))
        matched = True

    return matched


def _is_detail_line(line: str, stripped: str) -> bool:
    return (
        bool(stripped)
        and line.startswith(("  ", "\t"))
        and not stripped.startswith("_")
    )


def _closes_block(lines: list[str], i: int) -> bool:
    """A blank line closes the block when the next line is non-empty and not indented."""
    if i + 1 >= len(lines):
        return False
    nxt = lines[i + 1]
    return bool(nxt.strip()) and nxt[0] not in (" ", "\t")


def scan_tasks(content: str) -> list[Task]:
    """Turn checklist text into task records in document order.

    Only the fields written in the document are filled in; ``blocked_by`` is
    left for :func:`spectrack.tasks.resolver.resolve_blocked_by`.
    """
    tasks: list[Task] = []
    lines = content.split("\n")

    state = _State.IDLE
    current: Task | None = None

    i = 0
    while i < len(lines):
        line = lines[i]
        stripped = line.strip()

        m = TASK_LINE_RE.match(stripped)
        if m:
            if current is not None:
                tasks.append(current)
            checkbox, task_id, description = m.groups()
            current = Task(
                id=task_id,
                description=description.strip(),
                completed=checkbox.strip().lower() == "x",
            )
            state = _State.COLLECTING
            i += 1
            continue

        if current is None or state is not _State.COLLECTING:
            i += 1
            continue

        if TASK_PREFIX_RE.match(stripped):
            # Re-read this line with collection closed.
            state = _State.IDLE
            continue

        if not _apply_metadata(current, line) and _is_detail_line(line, stripped):
            current.details.append(stripped)

        if not stripped and _closes_block(lines, i):
            state = _State.IDLE

        i += 1

    if current is not None:
        tasks.append(current)

    return tasks


def parse_tasks(content: str) -> list[Task]:
    """Parse *content* and annotate ``blocked_by`` from the final completion state."""
    tasks = scan_tasks(content)
    resolve_blocked_by(tasks)
    log.debug(f"Parsed {len(tasks)} task(s)")
    return tasks


def render_tasks(tasks: list[Task]) -> str:
    """Serialize tasks back to checklist form. ``parse_tasks`` reads it back unchanged."""
    out: list[str] = []
    for t in tasks:
        box = "x" if t.completed else " "
        out.append(f"- [{box}] {t.id}. {t.description}")
        for detail in t.details:
            out.append(f"  {detail}")
        if t.requirements is not None:
            out.append(f"  - _Requirements: {t.requirements}_")
        if t.leverage is not None:
            out.append(f"  - _Leverage: {t.leverage}_")
        out.append(f"  - _Depends: {', '.join(t.depends_on) if t.depends_on else 'none'}_")
        out.append(f"  - _Parallel: {'yes' if t.can_run_parallel else 'no'}_")
        out.append("")
    return "\n".join(out)
