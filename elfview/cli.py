"""
Elfview CLI
============

Click-based command-line interface.  Decodes one ELF file and prints a
report, or prints a shell completion script.

Usage::

    # Human-readable report
    elfview /usr/bin/ls

    # JSON on stdout
    elfview /usr/bin/ls --json

    # Also save a JSON report
    elfview main.o --output main.json

    # Shell completion
    elfview --generate bash > ~/.local/share/bash-completion/completions/elfview

Exit status is 0 on success and 1 when the file cannot be read or
decoded.

References:
    - Click documentation: https://click.palletsprojects.com/
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from click.shell_completion import get_completion_class

from shared.config import ElfviewConfig
from shared.console import ElfviewConsole
from shared.logger import ElfviewLogger

from elfview.core.errors import ElfError
from elfview.output.console import ElfviewConsoleOutput
from elfview.output.report import ElfviewReportGenerator
from elfview.parsers.elf_parser import ElfParser

PROG_NAME: str = "elfview"
COMPLETE_VAR: str = "_ELFVIEW_COMPLETE"
SHELLS: tuple[str, ...] = ("bash", "zsh", "fish")


def completion_script(shell: str) -> str:
    """Return the click completion script for *shell*."""
    comp_cls = get_completion_class(shell)
    if comp_cls is None:
        raise click.BadParameter(f"unsupported shell: {shell}")
    comp = comp_cls(elfview_cli, {}, PROG_NAME, COMPLETE_VAR)
    return comp.source()


@click.command(PROG_NAME)
@click.argument(
    "path",
    required=False,
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "--generate",
    "shell",
    type=click.Choice(SHELLS, case_sensitive=False),
    default=None,
    help="Print a shell completion script and exit.",
)
@click.option(
    "--json", "json_output",
    is_flag=True,
    default=False,
    help="Print the decoded object as JSON instead of the report.",
)
@click.option(
    "--output", "-o",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write a JSON report to this file.",
)
@click.option(
    "--config", "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="TOML configuration file (default: ./elfview.toml if present).",
)
@click.option(
    "--max-symbols",
    type=click.IntRange(min=0),
    default=None,
    help="Rows shown per symbol table (0 shows all).",
)
@click.option(
    "--no-strings",
    is_flag=True,
    default=False,
    help="Do not print string table contents.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)
def elfview_cli(
    path: Path | None,
    shell: str | None,
    json_output: bool,
    output_path: Path | None,
    config_path: Path | None,
    max_symbols: int | None,
    no_strings: bool,
    verbose: bool,
) -> None:
    """Decode a 64-bit ELF object file and print its layout.

    PATH is the object file, executable or shared library to inspect.
    """
    if shell is not None:
        click.echo(completion_script(shell.lower()))
        return

    err_console = ElfviewConsole(stderr=True)
    if path is None:
        err_console.error("Missing argument PATH.")
        sys.exit(2)

    try:
        config = ElfviewConfig.load(config_path)
    except (OSError, ValueError) as exc:
        err_console.error(f"Invalid configuration: {exc}")
        sys.exit(1)

    if max_symbols is not None:
        config.view.max_symbols = max_symbols
    if no_strings:
        config.view.show_string_tables = False

    settings = config.global_settings
    logger = ElfviewLogger(
        "parser",
        log_level="DEBUG" if verbose else settings.log_level,
        log_file=settings.log_file,
        json_logs=settings.log_json,
    )

    parser = ElfParser(config=config, logger=logger)
    try:
        obj = parser.load(path)
    except (ElfError, OSError) as exc:
        err_console.error(f"{path}: {exc}")
        if verbose:
            logger.exception("Decoding %s failed", path)
        sys.exit(1)

    report_gen = ElfviewReportGenerator()
    if json_output:
        click.echo(report_gen.to_json(obj))
    else:
        ElfviewConsoleOutput(view=config.view).display(obj)

    if output_path is not None:
        report_path = report_gen.generate_json(obj, output_path)
        err_console.success(f"JSON report saved: {report_path}")


def main() -> None:
    """Entry point for the ``elfview`` script and ``python -m elfview``."""
    elfview_cli()


if __name__ == "__main__":
    main()
