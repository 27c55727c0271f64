"""Heuristic completion checks based on file evidence.

A task is auto-verified when every file it mentions exists and at least one
of them was modified within the freshness window. Nothing is executed and
task text is only pattern-matched for file references.
"""

from __future__ import annotations

import errno
import re
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from spectrack import log
from spectrack.config import (
    DEFAULT_MAX_AGE_SECONDS,
    DEFAULT_PATH_DIRECTORIES,
    DEFAULT_PATH_EXTENSIONS,
    Config,
)
from spectrack.tasks.model import Task

# stat() failures that mean "no usable file at this path".
_MISSING_ERRNOS = frozenset({errno.ENOENT, errno.ENOTDIR, errno.ENAMETOOLONG})

PREFIXED_PATHS_RE = re.compile(r"(?:Files?|Modify|Create|Update):\s*([^\n]+)", re.IGNORECASE)


def _inline_path_re(directories: Iterable[str], extensions: Iterable[str]) -> re.Pattern[str]:
    # Longest extension first so "tsx" wins over "ts".
    exts = sorted({e.lstrip(".") for e in extensions if e}, key=len, reverse=True)
    dirs = "|".join(directories)
    return re.compile(
        rf"(?:^|\s)((?:{dirs})/[a-zA-Z0-9_\-/.]+\.(?:{'|'.join(map(re.escape, exts))}))",
        re.IGNORECASE,
    )


def extract_file_paths(
    text: str,
    *,
    directories: Iterable[str] = DEFAULT_PATH_DIRECTORIES,
    extensions: Iterable[str] = DEFAULT_PATH_EXTENSIONS,
) -> list[str]:
    """Find file paths mentioned in *text*.

    Recognizes ``File:``/``Files:``/``Modify:``/``Create:``/``Update:``
    prefixes (comma-separated remainder of the line) and inline paths such
    as ``src/models/user.py``. Order of first mention is preserved.
    """
    paths: list[str] = []

    for m in PREFIXED_PATHS_RE.finditer(text):
        for piece in m.group(1).split(","):
            piece = piece.strip()
            if piece and not piece.startswith("-"):
                paths.append(piece)

    for m in _inline_path_re(directories, extensions).finditer(text):
        if m.group(1):
            paths.append(m.group(1).strip())

    return list(dict.fromkeys(paths))


@dataclass
class VerificationResult:
    auto_verified: bool = False
    issues: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    needs_manual_confirm: bool = True
    files_checked: list[str] = field(default_factory=list)
    files_modified: list[str] = field(default_factory=list)
    files_missing: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "autoVerified": self.auto_verified,
            "issues": list(self.issues),
            "warnings": list(self.warnings),
            "needsManualConfirm": self.needs_manual_confirm,
            "filesChecked": list(self.files_checked),
            "filesModified": list(self.files_modified),
            "filesMissing": list(self.files_missing),
        }


def verify_task_completion(
    task: Task,
    max_age_seconds: float = DEFAULT_MAX_AGE_SECONDS,
    *,
    base_dir: Path | None = None,
    now: float | None = None,
    cfg: Config | None = None,
) -> VerificationResult:
    """Check filesystem evidence that *task* was implemented.

    Relative paths are resolved against *base_dir* (default: cwd). *now* is a
    POSIX timestamp and defaults to the current time.
    """
    result = VerificationResult()

    text = "\n".join([task.description, *task.details])
    if cfg is not None:
        file_paths = extract_file_paths(
            text, directories=cfg.path_directories, extensions=cfg.path_extensions
        )
    else:
        file_paths = extract_file_paths(text)

    if not file_paths:
        result.warnings.append("No file paths found in task description - cannot auto-verify")
        return result

    base = base_dir or Path.cwd()
    now = time.time() if now is None else now

    for file_path in file_paths:
        result.files_checked.append(file_path)
        p = base / file_path

        try:
            st = p.stat()
        except OSError as exc:
            if exc.errno in _MISSING_ERRNOS:
                result.files_missing.append(file_path)
                result.issues.append(f"File not found: {file_path}")
            else:
                log.debug(f"stat failed for {p}: {exc}")
                result.warnings.append(f"Could not check modification time for: {file_path}")
            continue

        if now - st.st_mtime < max_age_seconds:
            result.files_modified.append(file_path)

    result.auto_verified = not result.files_missing and bool(result.files_modified)

    if result.files_missing:
        result.issues.append(
            f"{len(result.files_missing)} file(s) not found - task may not be complete"
        )

    if not result.files_modified and not result.files_missing:
        minutes = int(max_age_seconds // 60)
        result.warnings.append(
            f"No files modified recently (within {minutes} minutes) - "
            "task may have been completed earlier or files not changed"
        )

    result.needs_manual_confirm = not result.auto_verified or bool(result.warnings)
    return result


def format_verification_result(result: VerificationResult) -> str:
    """Render *result* as a fixed-order markdown report."""
    lines: list[str] = ["## Task Verification Result\n"]

    if result.auto_verified:
        lines.append("✓ Auto-verification: PASSED\n")
    else:
        lines.append("✗ Auto-verification: FAILED\n")

    lines.append(f"Files checked: {len(result.files_checked)}")
    lines.append(f"Files modified recently: {len(result.files_modified)}")
    lines.append(f"Files missing: {len(result.files_missing)}\n")

    sections = (
        ("### Issues:", result.issues),
        ("### Warnings:", result.warnings),
        ("### Recently Modified Files:", result.files_modified),
        ("### Missing Files:", result.files_missing),
    )
    for heading, items in sections:
        if items:
            lines.append(heading)
            lines.extend(f"- {item}" for item in items)
            lines.append("")

    if result.needs_manual_confirm:
        lines.append("⚠️  Manual confirmation required")
        lines.append("Please review the task implementation and confirm completion.")

    return "\n".join(lines)
