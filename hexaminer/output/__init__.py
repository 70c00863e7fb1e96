"""
Hexaminer Output
=================

Terminal rendering of analysis results, pattern matches and hex dumps.
"""

from hexaminer.output.console import HexaminerConsoleOutput
from hexaminer.output.hexdump import format_hex_dump, render_hex_dump

__all__ = ["HexaminerConsoleOutput", "format_hex_dump", "render_hex_dump"]
