"""SPECTRACK CLI.

Installed as ``spectrack`` console_script via pipx / pip.
"""

from __future__ import annotations

import json
import sys
from typing import Any

import click

from spectrack import __version__
from spectrack.config import MODES, Config


CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _resolve_mode(mode: str | None, task_id: str | None) -> str:
    """A bare task id means ``single``; otherwise default to ``all``."""
    if mode:
        return mode
    return "single" if task_id else "all"


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
@click.version_option(__version__, prog_name="spectrack")
def main(verbose: bool) -> None:
    """SPECTRACK — task tracking for spec checklists.

    Parses .claude/specs/<spec>/tasks.md and answers: is a task done, what
    blocks it, and is there file evidence that it was implemented.
    """
    from spectrack import log as slog

    slog.set_verbose(verbose)


@main.command("get-tasks")
@click.argument("spec_name")
@click.argument("task_id", required=False)
@click.option(
    "--mode",
    type=click.Choice(MODES),
    default=None,
    help="all | single | next-pending | complete | check-dependencies | verify | validate",
)
@click.option(
    "--project",
    "project_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Project directory (default: git root or cwd)",
)
@click.option(
    "--max-age-minutes",
    type=float,
    default=None,
    help="Freshness window for verify (default: 60)",
)
@click.option("--json", "as_json", is_flag=True, help="Print verify results as JSON instead of a report")
@click.option("--no-cache", is_flag=True, hidden=True)
def get_tasks_cmd(
    spec_name: str,
    task_id: str | None,
    mode: str | None,
    project_dir: str | None,
    max_age_minutes: float | None,
    as_json: bool,
    no_cache: bool,
) -> None:
    """Query or update the tasks of SPEC_NAME.

    \b
    EXAMPLES:
      spectrack get-tasks user-auth                              # All tasks
      spectrack get-tasks user-auth 1.2                          # One task
      spectrack get-tasks user-auth --mode next-pending          # Next pending task
      spectrack get-tasks user-auth 1.2 --mode complete          # Mark 1.2 complete
      spectrack get-tasks user-auth 1.2 --mode check-dependencies
      spectrack get-tasks user-auth 1.2 --mode verify            # Check file evidence
    """
    from spectrack import log as slog
    from spectrack.errors import SpectrackError
    from spectrack.service import get_tasks

    cfg = Config(use_cache=not no_cache)
    resolved_mode = _resolve_mode(mode, task_id)
    max_age = max_age_minutes * 60 if max_age_minutes is not None else None

    try:
        result = get_tasks(
            spec_name,
            task_id,
            resolved_mode,
            project_dir,
            max_age,
            cfg=cfg,
        )
    except SpectrackError as exc:
        slog.error(str(exc))
        sys.exit(exc.exit_code)

    if resolved_mode == "verify" and not as_json and result.report:
        click.echo(result.report)
    elif result.payload is not None:
        _echo_json(result.payload)

    # check-dependencies and validate payloads already state the outcome.
    if result.message and (
        result.payload is None or resolved_mode not in ("check-dependencies", "validate")
    ):
        if resolved_mode == "complete" and result.changed:
            slog.success(result.message)
        elif resolved_mode == "complete":
            slog.warn(result.message)
        else:
            slog.info(result.message)

    if not result.ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
