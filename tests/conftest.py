"""Shared fixtures for spectrack tests.

File handling in tests:
- Use tmp_path for any directory or file creation so tests are isolated and cleaned up.
- Use spectrack.io_utils read_text/write_text for consistent UTF-8 I/O.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from spectrack import log
from spectrack.io_utils import default_reader, write_text
from spectrack.tasks.model import Task


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register opt-in switch for end-to-end tests."""
    parser.addoption(
        "--run-e2e",
        action="store_true",
        default=False,
        help="Run end-to-end tests marked with 'e2e'.",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip e2e tests unless explicitly enabled."""
    if config.getoption("--run-e2e"):
        return

    skip_e2e = pytest.mark.skip(
        reason="E2E tests are skipped by default. Use --run-e2e to include them.",
    )
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_e2e)


@pytest.fixture(autouse=True)
def _reset_shared_state(monkeypatch: pytest.MonkeyPatch):
    """Keep the process-wide read cache, verbosity and env overrides from leaking."""
    monkeypatch.delenv("SPECTRACK_MAX_AGE_SECONDS", raising=False)
    monkeypatch.delenv("SPECTRACK_EXTRA_EXTENSIONS", raising=False)
    default_reader().clear()
    yield
    default_reader().clear()
    log.set_verbose(False)


SAMPLE_TASKS = """\
# Implementation Plan

- [x] 1. Create user model
  - File: src/models/user.py
  - _Requirements: 1.1_
  - _Depends: none_
  - _Parallel: yes_

- [ ] 2. Add auth service
  - Create src/services/auth.py with login/logout
  - _Requirements: 2.1, 2.2_
  - _Leverage: src/models/user.py_
  - _Depends: 1_
  - _Parallel: no_

- [ ] 2.1 Write auth tests
  - Files: tests/test_auth.py
  - _Depends: 2_

- [ ] 3. Document the API
  - _Depends: 1, 2.1_
"""


def _make_task(
    id: str,
    description: str = "",
    completed: bool = False,
    depends_on: list[str] | None = None,
    details: list[str] | None = None,
) -> Task:
    return Task(
        id=id,
        description=description or f"Task {id}",
        completed=completed,
        depends_on=depends_on or [],
        details=details or [],
    )


@pytest.fixture
def make_task():
    """Factory fixture that creates Task instances."""
    return _make_task


@pytest.fixture
def write_spec():
    """Write ``<project>/.claude/specs/<spec>/tasks.md`` and return its path."""

    def _write(project: Path, content: str = SAMPLE_TASKS, spec: str = "user-auth") -> Path:
        path = project / ".claude" / "specs" / spec / "tasks.md"
        path.parent.mkdir(parents=True, exist_ok=True)
        write_text(path, content)
        return path

    return _write
