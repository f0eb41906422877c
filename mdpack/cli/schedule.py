"""Scheduler loop command."""

from __future__ import annotations

import typer

from mdpack.core.models import MANIFEST_COLUMNS, CompressionResult

from . import archive
from .constants import RUN_FAILURE_EXIT_CODE
from .utils import emit_error, prepare_output


def register(app: typer.Typer) -> None:
    """Register the scheduler command on the root CLI application."""

    app.command("schedule")(schedule_command)


def schedule_command(
    ctx: typer.Context,
    poll: float = typer.Option(60.0, "--poll", min=0.0, help="Seconds between build-time checks."),
    max_runs: int | None = typer.Option(None, "--max-runs", min=1, help="Stop after this many daily builds."),
) -> None:
    """Build once a day after the configured build time."""

    scheduler = archive.get_scheduler(ctx)
    formatter, stream, stack, _ = prepare_output(ctx)
    failed: list[CompressionResult] = []

    def _on_results(results: list[CompressionResult]) -> None:
        formatter.render(archive.manifest_rows(results), stream=stream, columns=MANIFEST_COLUMNS)
        failed.extend(result for result in results if not result.success)

    try:
        scheduler.run_forever(poll_seconds=poll, max_runs=max_runs, on_results=_on_results)
    finally:
        stack.close()

    if failed:
        for result in failed:
            emit_error(
                f"{len(result.failures)} failures while building {result.resource_key}",
                "RUN_FAILED",
                details={"resource": result.resource_key, "failures": result.failures},
            )
        raise typer.Exit(code=RUN_FAILURE_EXIT_CODE)


__all__ = ["register", "schedule_command"]
