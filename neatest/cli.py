"""Command-line interface for converting and running spell-checker test cases."""

import sys
from pathlib import Path

import click
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from neatest import configure_logging, install_exception_hook
from neatest.batch import BatchCoordinator
from neatest.config import BatchConfig, ConversionMode, Settings, get_settings
from neatest.converter import MissingArtifactError

console = Console()


def configure_verbose_logging(log_file: Path | None = None) -> None:
    """Configure verbose debug logging on the console, plus an optional log file."""
    configure_logging(
        log_file=str(log_file) if log_file else None,
        level="DEBUG",
        sink=lambda msg: console.print(msg, end="", markup=False, highlight=False),
        console_format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )
    console.print("[dim]Debug logging enabled[/dim]")


def configure_quiet_logging(log_file: Path | None = None) -> None:
    """Configure quiet logging - only warnings and errors reach stderr."""
    configure_logging(
        log_file=str(log_file) if log_file else None,
        level="WARNING",
        sink=lambda msg: sys.stderr.write(msg),
        console_format="{level}: {message}",
    )


def load_settings_or_abort() -> Settings:
    """Load settings from the environment or abort with a helpful message."""
    try:
        return get_settings()
    except ValidationError as e:
        console.print("[bold red]Error:[/bold red] Invalid configuration")
        console.print("\nCheck EXT_TEST_DIR, INT_TEST_DIR, INT_TEST_CMD and EXT_TEST_CMD.\n")
        console.print(f"Details: {e}")
        raise click.Abort from e


def resolve_mode(to_external: bool, to_internal: bool) -> ConversionMode:
    if to_external and to_internal:
        msg = "--int and --ext cannot be used together"
        raise click.UsageError(msg)
    if to_external:
        return ConversionMode.TO_EXTERNAL
    if to_internal:
        return ConversionMode.TO_INTERNAL
    return ConversionMode.NONE


def trace(line: str) -> None:
    console.print(line, markup=False, highlight=False, soft_wrap=True)


@click.command()
@click.argument("names", nargs=-1, metavar="TEST_CASE_NAME...")
@click.option(
    "--int",
    "to_external",
    is_flag=True,
    help="Convert internal test case (.neadic) to external test case in EXT_TEST_DIR",
)
@click.option(
    "--ext",
    "to_internal",
    is_flag=True,
    help="Convert external test case (.aff, .dic, .good, .wrong) from EXT_TEST_DIR to internal",
)
@click.option(
    "--ed",
    "external_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="External test directory (default: EXT_TEST_DIR or current directory)",
)
@click.option(
    "--id",
    "internal_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Internal test directory (default: INT_TEST_DIR or current directory)",
)
@click.option(
    "--ec",
    "external_test_command",
    help="Run external test command with the .dic file as last argument",
)
@click.option(
    "--ic",
    "internal_test_command",
    help="Run internal test command with the .neadic file as last argument",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Fail on blocks with an unknown keyword instead of dropping them",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write log records to this file",
)
@click.pass_context
def main(  # noqa: PLR0913
    ctx: click.Context,
    names: tuple[str, ...],
    to_external: bool,
    to_internal: bool,
    external_dir: Path | None,
    internal_dir: Path | None,
    external_test_command: str | None,
    internal_test_command: str | None,
    strict: bool,
    verbose: bool,
    log_file: Path | None,
) -> None:
    """Convert and run spell-checker test cases.

    An internal test case is one .neadic file. An external test case is four
    files with extensions aff, dic, good and wrong. TEST_CASE_NAME is the
    test file name; its directory and extension are ignored.

    The variables EXT_TEST_DIR, INT_TEST_DIR, INT_TEST_CMD and EXT_TEST_CMD
    can be used instead of options. The encoding of files is not changed.
    """
    if not names:
        click.echo(ctx.get_help())
        ctx.exit(1)

    if verbose:
        configure_verbose_logging(log_file)
    else:
        configure_quiet_logging(log_file)
    install_exception_hook()

    mode = resolve_mode(to_external, to_internal)
    settings = load_settings_or_abort()
    config = BatchConfig.from_settings(
        settings,
        mode=mode,
        internal_test_command=internal_test_command,
        external_test_command=external_test_command,
        external_dir=external_dir,
        internal_dir=internal_dir,
        strict=strict,
    )
    logger.debug(f"Batch configuration: {config}")

    coordinator = BatchCoordinator(config, trace=trace)
    try:
        result = coordinator.run(list(names))
    except MissingArtifactError as e:
        console.print(
            f"[bold red]Error:[/bold red] Missing {escape(str(e.path))}, exiting", soft_wrap=True
        )
        raise click.Abort from e
    except ValueError as e:
        # Unclassified blocks in strict mode and unusable test case names
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}", soft_wrap=True)
        raise click.Abort from e

    for run in result.failed_runs:
        logger.warning(f"{run.command} {run.path} exited with status {run.returncode}")
    if result.failed_runs:
        ctx.exit(1)


if __name__ == "__main__":
    main()
