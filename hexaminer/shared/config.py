"""
Hexaminer Configuration Management
===================================

Centralized configuration for the analysis engine, the pattern scanner and
the command-line front end, using Python dataclasses and TOML-based
persistence.

Every section maps to a ``[table]`` in ``hexaminer.toml``::

    [global]
    log_level = "DEBUG"

    [patterns]
    min_string_length = 6

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any


# ---------------------------------------------------------------------------
# Default configuration file path relative to the project root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent.parent / "hexaminer.toml"


# ========================== Section Configs ================================


@dataclass(frozen=False, slots=True)
class AnalysisConfig:
    """Configuration for the analysis engine front end.

    The engine itself never truncates its input; ``max_buffer_size`` is
    applied by callers (the CLI) before a buffer reaches the engine.
    """

    max_buffer_size: int = 10 * 1024 * 1024  # 10 MiB
    default_length: int = -1


@dataclass(frozen=False, slots=True)
class PatternConfig:
    """Configuration for the pattern / entropy scanner.

    Reference:
        Shannon, C. E. (1948). A Mathematical Theory of Communication.
        Bell System Technical Journal, 27(3), 379-423.
    """

    min_string_length: int = 4
    entropy_window_size: int = 256
    high_entropy_threshold: float = 7.5
    low_entropy_threshold: float = 1.0
    max_buffer_size: int = 100 * 1024 * 1024  # 100 MiB
    display_limit: int = 20


@dataclass(frozen=False, slots=True)
class DumpConfig:
    """Hex dump defaults."""

    default_length: int = 512
    bytes_per_line: int = 16


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Logging verbosity and general operational parameters."""

    log_level: str = "INFO"
    log_file: str | None = None
    log_json: bool = False
    debug: bool = False
    version: str = "1.0.0"


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class HexaminerConfig:
    """Master configuration aggregating all section settings.

    Usage:
        >>> config = HexaminerConfig.load()                  # from default path
        >>> config = HexaminerConfig.load("custom.toml")     # from custom path
        >>> config.patterns.min_string_length
        4
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    patterns: PatternConfig = field(default_factory=PatternConfig)
    dump: DumpConfig = field(default_factory=DumpConfig)

    # ------------------------------------------------------------------ #
    #  TOML Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, path: str | Path | None = None) -> HexaminerConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``hexaminer.toml`` in the
        project root.  Missing keys gracefully fall back to dataclass
        defaults.

        Args:
            path: Filesystem path to a TOML configuration file.

        Returns:
            A fully-populated :class:`HexaminerConfig` instance.

        Raises:
            FileNotFoundError: If the specified path does not exist
                *and* was explicitly provided by the caller.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        return cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            analysis=cls._build_section(AnalysisConfig, raw.get("analysis", {})),
            patterns=cls._build_section(PatternConfig, raw.get("patterns", {})),
            dump=cls._build_section(DumpConfig, raw.get("dump", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise the entire configuration tree to a plain dictionary."""
        return asdict(self)

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares.

        Unknown keys in the TOML source are silently ignored.
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)


# ========================= Module-level convenience ========================

def get_config(path: str | Path | None = None) -> HexaminerConfig:
    """Module-level convenience wrapper around :meth:`HexaminerConfig.load`.

    Caches the result so that repeated calls share one instance.
    """
    if not hasattr(get_config, "_cached") or path is not None:
        get_config._cached = HexaminerConfig.load(path)  # type: ignore[attr-defined]
    return get_config._cached  # type: ignore[attr-defined]
