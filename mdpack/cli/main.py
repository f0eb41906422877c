"""Main entry point for the mdpack command line interface."""

from __future__ import annotations

from pathlib import Path

import typer

from mdpack.core.logging import configure_logging

from .archive import register as register_archive_commands
from .formatters import create_formatter
from .schedule import register as register_schedule_commands


def create_app() -> typer.Typer:
    """Create a Typer application instance for mdpack."""

    app = typer.Typer(add_completion=False, help="Market-data archive builder")

    @app.callback()
    def main(
        ctx: typer.Context,
        format: str = typer.Option(
            "table",
            "--format",
            "-f",
            help="Output format (table, jsonl or json).",
            show_default=True,
        ),
        output: Path | None = typer.Option(
            None,
            "--output",
            "-o",
            help="Write output to a file instead of stdout.",
        ),
        config: Path | None = typer.Option(
            None,
            "--config",
            "-c",
            help="Configuration file (default: ~/.mdpack/config.toml).",
        ),
        log_level: str | None = typer.Option(
            None,
            "--log-level",
            help="Logging level for the JSON log stream on stderr (default: INFO, or the configured level).",
        ),
        no_color: bool = typer.Option(
            False,
            "--no-color",
            help="Disable colorized output for table format.",
        ),
    ) -> None:
        ctx.ensure_object(dict)
        normalized_format = format.strip().lower()
        try:
            # Validate formatter eagerly for immediate feedback on invalid options
            create_formatter(normalized_format, no_color=no_color)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--format") from exc

        ctx.obj.update(
            {
                "format": normalized_format,
                "output_path": output,
                "config_path": config,
                "no_color": no_color,
                "log_level": log_level.upper() if log_level else None,
            }
        )
        try:
            configure_logging((log_level or "INFO").upper())
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--log-level") from exc

    register_archive_commands(app)
    register_schedule_commands(app)
    return app


app = create_app()
