"""
Hexaminer Console Interface
============================

Rich-powered console abstraction giving the command-line front end a
single, consistently styled presentation layer.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from typing import Any, Sequence

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------
_HEX_THEME = Theme(
    {
        "hex.section": "bold bright_magenta",
        "hex.warning": "bold yellow",
        "hex.error": "bold red",
        "hex.info": "bold bright_blue",
    }
)


class HexConsole:
    """Unified console interface for Hexaminer output.

    Usage::

        con = HexConsole()
        con.section("Analysis Results")
        con.info("Found 3 ascii strings")
    """

    def __init__(
        self,
        *,
        quiet: bool = False,
        record: bool = False,
        width: int | None = None,
    ) -> None:
        """Initialise the console.

        Args:
            quiet:  Suppress all output (useful in library / test mode).
            record: Enable Rich recording for text / HTML export.
            width:  Fixed console width; ``None`` auto-detects.
        """
        self._console = Console(
            theme=_HEX_THEME,
            quiet=quiet,
            record=record,
            highlight=False,
            width=width,
        )

    # ------------------------------------------------------------------ #
    #  Section header
    # ------------------------------------------------------------------ #

    def section(self, title: str) -> None:
        """Print a prominent section header."""
        self._console.rule(
            f"  {title}  ",
            style="hex.section",
            characters="─",
        )

    # ------------------------------------------------------------------ #
    #  Message helpers
    # ------------------------------------------------------------------ #

    def warning(self, message: str) -> None:
        self._console.print(f"[hex.warning][⚠] WARNING:[/hex.warning] {message}")

    def error(self, message: str) -> None:
        self._console.print(f"[hex.error][✘] ERROR:[/hex.error] {message}")

    def info(self, message: str) -> None:
        self._console.print(f"[hex.info][ℹ] INFO:[/hex.info] {message}")

    # ------------------------------------------------------------------ #
    #  Table display
    # ------------------------------------------------------------------ #

    def table(
        self,
        title: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        caption: str | None = None,
        styles: Sequence[str] | None = None,
    ) -> None:
        """Render a styled Rich table.

        Args:
            title:    Table title.
            columns:  Column header labels.
            rows:     Iterable of row tuples; each element is stringified.
            caption:  Optional footer caption.
            styles:   Optional per-column Rich style strings.
        """
        tbl = Table(
            title=title,
            caption=caption,
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=False,
            padding=(0, 1),
        )
        for idx, col_name in enumerate(columns):
            style = styles[idx] if styles and idx < len(styles) else ""
            tbl.add_column(col_name, style=style)

        for row in rows:
            tbl.add_row(*(str(cell) for cell in row))

        self._console.print(tbl)

    # ------------------------------------------------------------------ #
    #  Utility
    # ------------------------------------------------------------------ #

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Proxy to :meth:`rich.console.Console.print`."""
        self._console.print(*args, **kwargs)

    def blank(self, count: int = 1) -> None:
        """Print *count* blank lines."""
        for _ in range(count):
            self._console.print()

    def export_text(self) -> str:
        """Export recorded console output as plain text (requires ``record=True``)."""
        return self._console.export_text()
