"""
Hexaminer Console Output
=========================

Rich-powered terminal display for engine results, decoded structures and
pattern scanner matches.

Uses the :class:`~hexaminer.shared.console.HexConsole` abstraction for
consistent styling.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from hexaminer.core.models import AnalysisResult, DataStructure, PatternMatch
from hexaminer.shared.console import HexConsole


# ---------------------------------------------------------------------------
# Colour helpers
# ---------------------------------------------------------------------------

_CONFIDENCE_COLOUR_THRESHOLDS: list[tuple[float, str]] = [
    (0.1, "dim"),
    (0.5, "yellow"),
    (0.9, "bright_cyan"),
    (1.01, "bright_green"),
]

_SCANNER_TITLES: dict[str, str] = {
    "strings": "ASCII Strings",
    "emails": "Email Addresses",
    "urls": "URLs",
    "cards": "Credit Card Numbers",
    "entropy": "Entropy Anomalies",
}


def _confidence_colour(confidence: float) -> str:
    for threshold, colour in _CONFIDENCE_COLOUR_THRESHOLDS:
        if confidence < threshold:
            return colour
    return "bright_green"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        return f"{value} (0x{value:x})"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value) or "-"
    return str(value)


# ---------------------------------------------------------------------------
# HexaminerConsoleOutput
# ---------------------------------------------------------------------------

class HexaminerConsoleOutput:
    """Rich terminal display for Hexaminer output.

    Usage::

        output = HexaminerConsoleOutput()
        output.display_results(engine.analyze_data(data), verbose=True)
    """

    def __init__(self, console: HexConsole | None = None) -> None:
        self._console: HexConsole = console or HexConsole()

    @property
    def console(self) -> HexConsole:
        return self._console

    # ------------------------------------------------------------------ #
    #  Engine results
    # ------------------------------------------------------------------ #

    def display_results(
        self,
        results: Sequence[AnalysisResult],
        *,
        verbose: bool = False,
    ) -> None:
        """Ranked result table, plus per-result detail when *verbose*."""
        self._console.section("Analysis Results")

        if not results:
            self._console.warning("No analyzer could process this data.")
            return

        tbl = Table(
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            padding=(0, 1),
        )
        tbl.add_column("#", style="dim", width=3, justify="right")
        tbl.add_column("Analyzer", style="bold")
        tbl.add_column("Data Type")
        tbl.add_column("Confidence", justify="right")
        tbl.add_column("Offset", justify="right")
        tbl.add_column("Length", justify="right")

        for rank, result in enumerate(results, 1):
            colour = _confidence_colour(result.confidence)
            tbl.add_row(
                str(rank),
                result.analyzer_name,
                result.data_type,
                f"[{colour}]{result.confidence:.0%}[/{colour}]",
                f"0x{result.offset:08x}",
                f"{result.length:,}",
            )
        self._console.print(tbl)

        if verbose:
            for result in results:
                self.display_result_detail(result)

    def display_result_detail(self, result: AnalysisResult) -> None:
        """Properties panel and structure table for one result."""
        lines: list[str] = []
        for key, value in result.properties.items():
            if isinstance(value, Mapping):
                lines.append(f"[bold]{escape(key)}:[/bold]")
                for sub_key, sub_value in value.items():
                    lines.append(f"    {escape(sub_key)}: {escape(_format_value(sub_value))}")
            else:
                lines.append(f"[bold]{escape(key)}:[/bold] {escape(_format_value(value))}")

        border = "bright_red" if result.error else "bright_cyan"
        self._console.blank()
        self._console.print(Panel(
            "\n".join(lines) or "[dim]no properties[/dim]",
            title=f"[bold {border}]{result.analyzer_name}[/bold {border}]",
            border_style=border,
            padding=(0, 2),
        ))

        if result.structures:
            self.display_structures(result.structures)

    def display_structures(self, structures: Sequence[DataStructure]) -> None:
        """Table of decoded structures, nested children indented."""
        tbl = Table(
            title="Structures",
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            padding=(0, 1),
        )
        tbl.add_column("Offset", justify="right", style="green")
        tbl.add_column("Size", justify="right")
        tbl.add_column("Name", style="bold")
        tbl.add_column("Type")
        tbl.add_column("Value")

        def add(structure: DataStructure, depth: int) -> None:
            tbl.add_row(
                f"0x{structure.offset:08x}",
                str(structure.size),
                "  " * depth + structure.name,
                structure.type,
                "" if structure.value is None else escape(str(structure.value)),
            )
            for child in structure.children:
                add(child, depth + 1)

        for structure in structures:
            add(structure, 0)
        self._console.print(tbl)

    # ------------------------------------------------------------------ #
    #  Pattern matches
    # ------------------------------------------------------------------ #

    def display_patterns(
        self,
        grouped: dict[str, list[PatternMatch]],
        *,
        limit: int | None = None,
    ) -> None:
        """One table per scanner; ``strings`` is truncated to *limit* rows."""
        self._console.section("Pattern Scan")

        for key, matches in grouped.items():
            title = _SCANNER_TITLES.get(key, key)
            shown = matches
            caption = None
            if key == "strings" and limit is not None and len(matches) > limit:
                shown = matches[:limit]
                caption = f"... and {len(matches) - limit} more"

            self._console.info(f"Found {len(matches)} {title.lower()}")
            if not shown:
                continue
            self._console.table(
                title,
                ["Offset", "Length", "Value"],
                [(f"0x{m.offset:08x}", m.length, escape(m.value)) for m in shown],
                caption=caption,
                styles=["green", "dim", ""],
            )

    # ------------------------------------------------------------------ #
    #  Hex dump
    # ------------------------------------------------------------------ #

    def display_dump(self, dump: Text, *, title: str = "Hex Dump") -> None:
        self._console.section(title)
        self._console.print(dump, end="")
