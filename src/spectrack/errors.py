"""Error taxonomy for task queries and mutations.

Only the query/mutation layer raises these. Parsing, dependency resolution
and verification encode uncertainty in their results instead.
"""

from __future__ import annotations

from pathlib import Path


class SpectrackError(Exception):
    """Base class for hard errors surfaced to the caller with a non-zero status."""

    exit_code = 1


class UsageError(SpectrackError):
    """A mode was invoked without its required arguments, or the mode is unknown."""


class NotFoundError(SpectrackError):
    """Something the caller referenced does not exist."""


class DocumentNotFoundError(NotFoundError):
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(f"tasks.md not found at {self.path}")


class TaskNotFoundError(NotFoundError):
    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")


class MutationIntegrityError(SpectrackError):
    """The task was parsed but its checkbox line could not be patched.

    Signals that the literal formatting of the line differs from what the
    completion pattern accepts (e.g. a stray character inside the box).
    """

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Could not find task {task_id} to mark as complete")


class DocumentReadError(SpectrackError):
    """tasks.md exists but could not be read as UTF-8 text."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        super().__init__(f"Error reading tasks: {self.path}: {reason}")
