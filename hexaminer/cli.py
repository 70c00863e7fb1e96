"""
Hexaminer CLI
==============

Click-based command-line interface for the Hexaminer analysis engine.

Usage::

    python -m hexaminer analyze /bin/ls --verbose
    python -m hexaminer analyze firmware.bin --offset 0x200 --json
    python -m hexaminer patterns dump.raw --all
    python -m hexaminer patterns dump.raw --emails --urls --min-length 6
    python -m hexaminer dump /bin/ls --length 256 --width 16

Numeric options accept decimal or ``0x``-prefixed hexadecimal.

References:
    - Click Documentation. https://click.palletsprojects.com/
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Optional

import click

from hexaminer import __version__
from hexaminer.core.engine import AnalysisEngine
from hexaminer.core.models import AnalysisResult, DataStructure
from hexaminer.output.console import HexaminerConsoleOutput
from hexaminer.output.hexdump import render_hex_dump
from hexaminer.patterns import (
    find_credit_card_patterns,
    find_email_patterns,
    find_entropy_anomalies,
    find_string_patterns,
    find_url_patterns,
)
from hexaminer.shared.config import HexaminerConfig
from hexaminer.shared.console import HexConsole
from hexaminer.shared.logger import HexLogger


# ===================================================================== #
#  Helpers
# ===================================================================== #

class _IntLiteral(click.ParamType):
    """Integer option accepting ``0x`` / ``0o`` / ``0b`` prefixes."""

    name = "integer"

    def convert(self, value: Any, param: Any, ctx: Any) -> int:
        if isinstance(value, int):
            return value
        try:
            return int(str(value), 0)
        except ValueError:
            self.fail(f"{value!r} is not a valid integer", param, ctx)


INT_LITERAL = _IntLiteral()


def _read_slice(ctx: click.Context, file: str, offset: int, length: int, cap: int) -> bytes:
    """Read up to ``min(length, cap)`` bytes from *file* at *offset*.

    A negative *length* means "to end of file".  Exits with status 1 when
    *offset* lies outside the file.
    """
    console: HexConsole = ctx.obj["console"]
    path = Path(file)
    size = path.stat().st_size

    if offset < 0 or offset > size or (offset == size and size > 0):
        console.error(f"Offset {offset} is beyond file size {size}")
        sys.exit(1)

    wanted = size - offset if length < 0 else min(length, size - offset)
    if wanted > cap:
        console.warning(f"Reading first {cap:,} of {wanted:,} bytes")
        wanted = cap

    with open(path, "rb") as fh:
        fh.seek(offset)
        return fh.read(wanted)


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


def _rebase_structure(structure: DataStructure, delta: int) -> DataStructure:
    return structure.model_copy(update={
        "offset": structure.offset + delta,
        "children": tuple(_rebase_structure(c, delta) for c in structure.children),
    })


def _rebase_result(result: AnalysisResult, delta: int) -> AnalysisResult:
    """Shift slice-relative offsets in *result* to file offsets."""
    return result.model_copy(update={
        "offset": result.offset + delta,
        "structures": tuple(_rebase_structure(s, delta) for s in result.structures),
    })


# ===================================================================== #
#  CLI Group
# ===================================================================== #

@click.group()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to a Hexaminer configuration file (TOML).",
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    default=False,
    help="Suppress console output other than JSON.",
)
@click.version_option(version=__version__, prog_name="hexaminer")
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], quiet: bool) -> None:
    """Hexaminer -- Binary Data Analysis Engine.

    Identify file types, decode PE and ELF headers, scan for embedded
    strings and entropy anomalies, and dump raw bytes.
    """
    ctx.ensure_object(dict)

    hex_config = HexaminerConfig.load(config)
    settings = hex_config.global_settings
    logger = HexLogger(
        "cli",
        log_level="DEBUG" if settings.debug else settings.log_level,
        log_file=settings.log_file,
        json_logs=settings.log_json,
    )

    console = HexConsole(quiet=quiet)
    ctx.obj["config"] = hex_config
    ctx.obj["logger"] = logger
    ctx.obj["console"] = console
    ctx.obj["display"] = HexaminerConsoleOutput(console)


# ===================================================================== #
#  Subcommands
# ===================================================================== #

@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--offset", "-o", type=INT_LITERAL, default=0, help="Start offset in the file.")
@click.option(
    "--length", "-l",
    type=INT_LITERAL,
    default=None,
    help="Number of bytes to analyse (default: to end of file).",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Show properties and structures.")
@click.option("--json", "json_output", is_flag=True, default=False, help="Output results as JSON.")
@click.pass_context
def analyze(
    ctx: click.Context,
    file: str,
    offset: int,
    length: Optional[int],
    verbose: bool,
    json_output: bool,
) -> None:
    """Identify and decode FILE with every registered analyzer."""
    config: HexaminerConfig = ctx.obj["config"]
    logger: HexLogger = ctx.obj["logger"]
    display: HexaminerConsoleOutput = ctx.obj["display"]

    if length is None:
        length = config.analysis.default_length
    data = _read_slice(ctx, file, offset, length, config.analysis.max_buffer_size)

    engine = AnalysisEngine(config=config, logger=logger)
    with logger.timed(f"analyze {file}"):
        results = [_rebase_result(r, offset) for r in engine.analyze_data(data)]

    if json_output:
        _echo_json({
            "file": file,
            "offset": offset,
            "length": len(data),
            "results": [r.model_dump(mode="json") for r in results],
        })
        return

    display.console.info(f"File: {file} ({len(data):,} bytes from offset 0x{offset:x})")
    display.display_results(results, verbose=verbose)

    if verbose:
        structures = [s for r in results for s in r.structures]
        structures.sort(key=lambda s: s.offset)
        if structures:
            display.console.blank()
            display.display_structures(structures)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--strings", "-s", "want_strings", is_flag=True, default=False, help="Find ASCII strings.")
@click.option("--emails", "-e", "want_emails", is_flag=True, default=False, help="Find e-mail addresses.")
@click.option("--urls", "-u", "want_urls", is_flag=True, default=False, help="Find URLs.")
@click.option("--cards", "want_cards", is_flag=True, default=False, help="Find Luhn-valid card numbers.")
@click.option("--entropy", "want_entropy", is_flag=True, default=False, help="Find entropy anomalies.")
@click.option("--all", "-a", "want_all", is_flag=True, default=False, help="Run every scanner.")
@click.option("--min-length", type=int, default=None, help="Minimum ASCII string length.")
@click.option("--json", "json_output", is_flag=True, default=False, help="Output matches as JSON.")
@click.pass_context
def patterns(
    ctx: click.Context,
    file: str,
    want_strings: bool,
    want_emails: bool,
    want_urls: bool,
    want_cards: bool,
    want_entropy: bool,
    want_all: bool,
    min_length: Optional[int],
    json_output: bool,
) -> None:
    """Scan FILE for strings, e-mails, URLs, card numbers and entropy anomalies.

    With no scanner flag, every scanner runs.
    """
    config: HexaminerConfig = ctx.obj["config"]
    logger: HexLogger = ctx.obj["logger"]
    display: HexaminerConsoleOutput = ctx.obj["display"]
    cfg = config.patterns

    if not any((want_strings, want_emails, want_urls, want_cards, want_entropy)):
        want_all = True

    data = _read_slice(ctx, file, 0, -1, cfg.max_buffer_size)
    grouped: dict[str, list] = {}

    with logger.operation("patterns"):
        if want_all or want_strings:
            grouped["strings"] = find_string_patterns(
                data, min_length if min_length is not None else cfg.min_string_length
            )
        if want_all or want_emails:
            grouped["emails"] = find_email_patterns(data)
        if want_all or want_urls:
            grouped["urls"] = find_url_patterns(data)
        if want_all or want_cards:
            grouped["cards"] = find_credit_card_patterns(data)
        if want_all or want_entropy:
            grouped["entropy"] = find_entropy_anomalies(
                data,
                window_size=cfg.entropy_window_size,
                high_threshold=cfg.high_entropy_threshold,
                low_threshold=cfg.low_entropy_threshold,
            )
        logger.debug(
            "Pattern scan complete",
            counts={key: len(matches) for key, matches in grouped.items()},
        )

    if json_output:
        _echo_json({
            key: [m.model_dump(mode="json") for m in matches]
            for key, matches in grouped.items()
        })
        return

    display.display_patterns(grouped, limit=cfg.display_limit)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--offset", "-o", type=INT_LITERAL, default=0, help="Start offset in the file.")
@click.option("--length", "-l", type=INT_LITERAL, default=None, help="Number of bytes to dump.")
@click.option("--width", "-w", type=click.IntRange(min=1), default=None, help="Bytes per line.")
@click.option(
    "--highlight",
    is_flag=True,
    default=False,
    help="Underline bytes covered by decoded structures.",
)
@click.pass_context
def dump(
    ctx: click.Context,
    file: str,
    offset: int,
    length: Optional[int],
    width: Optional[int],
    highlight: bool,
) -> None:
    """Print a colourised hex dump of FILE."""
    config: HexaminerConfig = ctx.obj["config"]
    display: HexaminerConsoleOutput = ctx.obj["display"]

    if length is None:
        length = config.dump.default_length
    if width is None:
        width = config.dump.bytes_per_line

    data = _read_slice(ctx, file, offset, length, config.analysis.max_buffer_size)

    structures = []
    if highlight:
        engine = AnalysisEngine(config=config, logger=ctx.obj["logger"])
        structures = [_rebase_structure(s, offset) for s in engine.extract_structures(data)]

    display.display_dump(
        render_hex_dump(data, offset=offset, width=width, structures=structures),
        title=f"{Path(file).name} @ 0x{offset:08x}",
    )


# ===================================================================== #
#  Entry Point
# ===================================================================== #

def main() -> None:
    """Main entry point for the Hexaminer CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
