"""Load task lists from disk and patch completion markers in place."""

from __future__ import annotations

import re
from pathlib import Path

from spectrack import log
from spectrack.errors import (
    DocumentNotFoundError,
    DocumentReadError,
    MutationIntegrityError,
)
from spectrack.io_utils import CachedReader, default_reader, write_text
from spectrack.tasks.model import TaskList
from spectrack.tasks.parser import parse_tasks


def _completion_pattern(task_id: str) -> re.Pattern[str]:
    # The id must not continue into a child id ("1" must not hit "1.1").
    return re.compile(
        rf"^([ \t]*-[ \t]*\[)[ \t]*(\][ \t]*{re.escape(task_id)}(?!\.?[0-9])[ \t]*\.?[ \t]*.+)$",
        re.MULTILINE,
    )


def _read_document(path: Path, reader: CachedReader) -> str:
    if not reader.exists(path):
        raise DocumentNotFoundError(path)
    try:
        return reader.read(path)
    except UnicodeDecodeError as exc:
        raise DocumentReadError(path, f"not valid UTF-8 ({exc.reason} at byte {exc.start})") from exc
    except OSError as exc:
        raise DocumentReadError(path, exc.strerror or str(exc)) from exc


def load_task_list(path: Path, reader: CachedReader | None = None) -> tuple[TaskList, str]:
    """Read and parse *path*. Returns the task list and the raw text it came from."""
    reader = reader or default_reader()
    content = _read_document(path, reader)
    return TaskList(tasks=parse_tasks(content), path=Path(path)), content


def mark_task_complete(content: str, task_id: str) -> str:
    """Return *content* with the checkbox of *task_id* set to ``x``.

    Only the first pending checkbox line for that id is touched. Raises
    :class:`MutationIntegrityError` when no such line exists.
    """
    updated, count = _completion_pattern(task_id).subn(r"\1x\2", content, count=1)
    if count == 0 or updated == content:
        raise MutationIntegrityError(task_id)
    return updated


def mark_task_complete_in_file(
    path: Path,
    task_id: str,
    reader: CachedReader | None = None,
) -> None:
    """Flip *task_id* to complete in *path*, rewriting the whole file once."""
    reader = reader or default_reader()
    reader.invalidate(path)
    content = _read_document(path, reader)
    write_text(path, mark_task_complete(content, task_id))
    reader.invalidate(path)
    log.debug(f"Task {task_id}: pending -> done ({path})")
