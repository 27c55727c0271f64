"""Configuration defaults, env vars, and document location for SPECTRACK."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path


DEFAULT_SPECS_DIR = ".claude/specs"
DEFAULT_TASKS_FILENAME = "tasks.md"

# One hour, in seconds.
DEFAULT_MAX_AGE_SECONDS = 3600.0

DEFAULT_PATH_DIRECTORIES: tuple[str, ...] = (
    "src",
    "tests?",
    "lib",
    "dist",
    "components?",
    "utils?",
    "services?",
    "models?",
    "api",
    "routes?",
)

DEFAULT_PATH_EXTENSIONS: tuple[str, ...] = (
    "ts",
    "js",
    "tsx",
    "jsx",
    "py",
    "java",
    "go",
    "rs",
    "cpp",
    "c",
    "h",
)

MODES: tuple[str, ...] = (
    "all",
    "single",
    "next-pending",
    "complete",
    "check-dependencies",
    "verify",
    "validate",
)

TASK_ID_MODES: frozenset[str] = frozenset(
    {"single", "complete", "check-dependencies", "verify"}
)


def _split_env_list(raw: str) -> list[str]:
    return [item.strip().lstrip(".") for item in raw.split(",") if item.strip()]


@dataclass
class Config:
    """Runtime configuration.

    ``path_directories`` entries are regex fragments (``tests?`` matches
    ``test`` and ``tests``); ``path_extensions`` are plain extensions
    without the dot.
    """

    # Document location
    specs_dir: str = DEFAULT_SPECS_DIR
    tasks_filename: str = DEFAULT_TASKS_FILENAME

    # Verification
    max_age_seconds: float | None = None
    path_directories: list[str] = field(default_factory=lambda: list(DEFAULT_PATH_DIRECTORIES))
    path_extensions: list[str] = field(default_factory=lambda: list(DEFAULT_PATH_EXTENSIONS))

    # Misc
    use_cache: bool = True

    def __post_init__(self) -> None:
        if self.max_age_seconds is None:
            raw = os.environ.get("SPECTRACK_MAX_AGE_SECONDS", "").strip()
            try:
                self.max_age_seconds = float(raw) if raw else DEFAULT_MAX_AGE_SECONDS
            except ValueError:
                self.max_age_seconds = DEFAULT_MAX_AGE_SECONDS

        for ext in _split_env_list(os.environ.get("SPECTRACK_EXTRA_EXTENSIONS", "")):
            if ext not in self.path_extensions:
                self.path_extensions.append(ext)


def resolve_project_root() -> Path:
    """Return the git repository root, falling back to cwd."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            capture_output=True,
            text=True,
            check=True,
        )
        return Path(result.stdout.strip())
    except (subprocess.CalledProcessError, FileNotFoundError):
        return Path.cwd()


def locate_tasks_file(
    spec_name: str,
    project_dir: Path | str | None = None,
    cfg: Config | None = None,
) -> Path:
    """Map a spec name to ``<project>/<specs_dir>/<spec_name>/tasks.md``."""
    cfg = cfg or Config()
    base = Path(project_dir) if project_dir else Path.cwd()
    return (base / cfg.specs_dir / spec_name / cfg.tasks_filename).absolute()
