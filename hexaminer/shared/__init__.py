"""
Hexaminer Shared Module
========================

Configuration, logging, console and math utilities shared by the analysis
core and the command-line front end.
"""

from hexaminer.shared.config import HexaminerConfig, get_config

__all__ = ["HexaminerConfig", "get_config"]
