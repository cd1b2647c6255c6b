"""ulfparser CLI: entry point.

Commands:
    ulfparser parse [FILE]    Parse Unified Log Format records (stdin by default)
"""
from __future__ import annotations

import json
import logging
import sys
from typing import IO

import click
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import settings
from .errors import LogFormatError
from .models import LogEntry, LogLevel
from .parsers.stream import StreamParser

console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)

_LEVEL_NAMES = [level.name for level in LogLevel]

# ── Helpers ─────────────────────────────────────────────────────────────────


def _level_colour(level: LogLevel) -> str:
    return {
        LogLevel.FATAL: "bold red",
        LogLevel.ERROR: "red",
        LogLevel.WARN: "yellow",
        LogLevel.INFO: "green",
        LogLevel.DEBUG: "dim",
    }[level]


def _location(entry: LogEntry) -> str:
    h = entry.header
    return "<unknown>" if h.is_unknown_location else f"{h.file}:{h.line}"


def _fields_text(entry: LogEntry) -> str:
    return " ".join(f"{f.name}={f.value}" for f in entry.fields)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


# ── CLI root ─────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version="0.1.0", prog_name="ulfparser")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging on stderr.")
def main(verbose: bool) -> None:
    """ulfparser: streaming parser for the Unified Log Format."""
    _configure_logging(verbose)


# ── parse ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.File("rb"), default="-")
@click.option(
    "--output", "-o", "output_fmt", default=settings.default_output,
    type=click.Choice(["json", "stream", "table"], case_sensitive=False),
    help="Output format.",
    show_default=True,
)
@click.option("--limit", "-n", default=0, type=int, help="Max records to display (0 = all).")
@click.option(
    "--min-level", default=None,
    type=click.Choice(_LEVEL_NAMES, case_sensitive=False),
    help="Skip records below this severity.",
)
def parse(
    file: IO[bytes],
    output_fmt: str,
    limit: int,
    min_level: str | None,
) -> None:
    """Parse Unified Log Format records from FILE (default: stdin).

    Parsing stops at the first malformed record.

    \b
    Examples:
      ulfparser parse tikv.log
      tail -f tikv.log | ulfparser parse
      ulfparser parse tikv.log --output table --min-level warn
    """
    threshold = LogLevel.from_string(min_level) if min_level else None
    parser = StreamParser(file)
    collected: list[LogEntry] = []
    count = 0

    try:
        for entry in parser:
            if threshold is not None and entry.header.level < threshold:
                continue
            count += 1
            if output_fmt == "json":
                click.echo(json.dumps(entry.to_dict(), ensure_ascii=False))
            elif output_fmt == "stream":
                h = entry.header
                colour = _level_colour(h.level)
                console.print(
                    f"[dim]{h.timestamp.isoformat(timespec='milliseconds')}[/dim] "
                    f"[{colour}]{h.level.name:5}[/{colour}] "
                    f"[cyan]{escape(_location(entry))}[/cyan] {escape(entry.message)} "
                    f"[dim]{escape(_fields_text(entry))}[/dim]"
                )
            else:
                collected.append(entry)
            if limit and count >= limit:
                break
    except LogFormatError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)

    if output_fmt == "table":
        if not collected:
            err_console.print("[yellow]No entries found.[/yellow]")
            return
        tbl = Table(title=getattr(file, "name", "stdin"), box=box.ROUNDED, highlight=True)
        for col in ("timestamp", "level", "location", "message", "fields"):
            tbl.add_column(col, overflow="fold", max_width=70)
        for entry in collected:
            h = entry.header
            tbl.add_row(
                h.timestamp.isoformat(timespec="milliseconds"),
                h.level.name,
                escape(_location(entry)),
                escape(entry.message),
                escape(_fields_text(entry)),
                style=_level_colour(h.level) if h.level >= LogLevel.WARN else "",
            )
        console.print(tbl)
        return

    logger.debug("Parsed %d entries through line %d", count, parser.line)


if __name__ == "__main__":
    main()
