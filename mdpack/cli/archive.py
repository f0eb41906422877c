"""Archive build commands."""

from __future__ import annotations

import tarfile
from collections.abc import Mapping, Sequence
from datetime import datetime
from pathlib import Path

import typer

from mdpack.core.exceptions import ConfigError, MdPackError
from mdpack.core.logging import configure_logging
from mdpack.core.models import MANIFEST_COLUMNS, CompressionResult
from mdpack.core.services import BuildScheduler, CodeRangeFilter, Compressor

from .constants import RUN_FAILURE_EXIT_CODE, SYSTEM_EXIT_CODE, VALIDATION_EXIT_CODE
from .utils import emit_error, get_cli_options, load_config, prepare_output

ENTRY_COLUMNS = ["name", "size", "mode", "mtime"]


def register(app: typer.Typer) -> None:
    """Register archive commands on the root CLI application."""

    app.command("build")(build_command)
    app.command("compress")(compress_command)
    app.command("inspect")(inspect_command)


def get_compressor(target: Path) -> Compressor:
    """Factory hook returning a :class:`Compressor` for ``target``."""

    return Compressor(target)


def get_scheduler(ctx: typer.Context) -> BuildScheduler:
    """Factory hook returning a :class:`BuildScheduler` for the configured sources."""

    options = get_cli_options(ctx)
    config = load_config(options.config_path)
    # an explicit --log-level wins over the configured level
    level = (options.log_level or config.logging.level).upper()
    try:
        configure_logging(level, file_output=bool(config.logging.file), file_path=config.logging.file)
    except ValueError as error:
        emit_error(f"invalid logging level: {level}", "CONFIG_ERROR", details={"level": level})
        raise typer.Exit(code=VALIDATION_EXIT_CODE) from error
    return BuildScheduler(config)


def build_command(
    ctx: typer.Context,
    resources: list[str] | None = typer.Argument(None, help="Resource keys to build (default: all configured)."),
) -> None:
    """Build archives for the configured sources now and print the manifest."""

    scheduler = get_scheduler(ctx)
    formatter, stream, stack, _ = prepare_output(ctx)
    try:
        results = scheduler.run_once(resources or None)
    except MdPackError as error:
        stack.close()
        emit_error(error.message, error.error_code, details=error.details)
        raise typer.Exit(code=SYSTEM_EXIT_CODE) from error

    try:
        formatter.render(manifest_rows(results), stream=stream, columns=MANIFEST_COLUMNS)
    finally:
        stack.close()
    _exit_on_failures(results)


def compress_command(
    ctx: typer.Context,
    resource: str = typer.Argument(..., help="Resource key, e.g. sse.d1 or szse.m5."),
    source: Path = typer.Argument(..., help="Source folder to traverse."),
    target: Path = typer.Argument(..., help="Root folder for the produced archives."),
    codes: list[str] | None = typer.Option(None, "--codes", help="Instrument code range, e.g. 000001-000100."),
) -> None:
    """Archive one source folder ad hoc."""

    try:
        code_filter = CodeRangeFilter.from_strings(codes) if codes else None
    except ConfigError as error:
        emit_error(error.message, error.error_code, details=error.details)
        raise typer.Exit(code=VALIDATION_EXIT_CODE) from error

    formatter, stream, stack, _ = prepare_output(ctx)
    compressor = get_compressor(target)
    try:
        result = compressor.compress(resource, source, code_filter)
    except MdPackError as error:
        stack.close()
        emit_error(error.message, error.error_code, details=error.details)
        raise typer.Exit(code=VALIDATION_EXIT_CODE) from error

    try:
        formatter.render(manifest_rows([result]), stream=stream, columns=MANIFEST_COLUMNS)
    finally:
        stack.close()
    _exit_on_failures([result])


def inspect_command(
    ctx: typer.Context,
    archive: Path = typer.Argument(..., help="Produced archive to list."),
) -> None:
    """List the entries of a produced archive."""

    try:
        with tarfile.open(archive, "r:gz") as tar:
            rows = [_member_to_row(member) for member in tar.getmembers()]
    except (OSError, tarfile.TarError) as exc:
        emit_error(f"Unable to read archive '{archive}': {exc}", "ARCHIVE_READ_ERROR")
        raise typer.Exit(code=VALIDATION_EXIT_CODE) from exc

    formatter, stream, stack, _ = prepare_output(ctx)
    try:
        formatter.render(rows, stream=stream, columns=ENTRY_COLUMNS)
    finally:
        stack.close()


def manifest_rows(results: Sequence[CompressionResult]) -> list[Mapping[str, object]]:
    return [entry.to_row() for result in results for entry in result.manifest]


def _member_to_row(member: tarfile.TarInfo) -> Mapping[str, object]:
    return {
        "name": member.name,
        "size": member.size,
        "mode": oct(member.mode),
        "mtime": datetime.fromtimestamp(member.mtime),
    }


def _exit_on_failures(results: Sequence[CompressionResult]) -> None:
    failed = [result for result in results if not result.success]
    if not failed:
        return
    for result in failed:
        emit_error(
            f"{len(result.failures)} failures while building {result.resource_key}",
            "RUN_FAILED",
            details={"resource": result.resource_key, "failures": result.failures},
        )
    raise typer.Exit(code=RUN_FAILURE_EXIT_CODE)


__all__ = ["ENTRY_COLUMNS", "build_command", "compress_command", "get_compressor", "get_scheduler", "inspect_command", "register"]
