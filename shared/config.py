"""
Elfview Configuration Management
=================================

Dataclass-based configuration persisted as TOML.

Example ``elfview.toml``::

    [global]
    log_level = "DEBUG"
    log_file = "elfview.log"
    log_json = true

    [view]
    max_symbols = 50
    show_string_tables = false

References:
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


# ---------------------------------------------------------------------------
# Default configuration file, looked up in the current working directory
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_NAME: str = "elfview.toml"


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Logging settings shared by every elfview component."""

    log_level: str = "WARNING"
    log_file: Optional[str] = None
    log_json: bool = False


@dataclass(frozen=False, slots=True)
class ViewConfig:
    """Decoding and report options.

    Attributes:
        max_symbols: Rows shown per symbol table; 0 shows all.
        show_string_tables: Print the contents of every string table.
        show_program_headers: Print the program header table.
        name_placeholder: Format for a section name whose offset does not
            resolve; receives ``offset`` as a keyword.
        use_mmap: Memory-map the input instead of reading it.
    """

    max_symbols: int = 0
    show_string_tables: bool = True
    show_program_headers: bool = True
    name_placeholder: str = "<invalid-name:0x{offset:x}>"
    use_mmap: bool = True

    def __post_init__(self) -> None:
        try:
            self.name_placeholder.format(offset=0)
        except (AttributeError, IndexError, KeyError, ValueError) as exc:
            raise ValueError(
                f"view.name_placeholder {self.name_placeholder!r} must be a "
                f"format string using only {{offset}}: {exc!r}"
            ) from exc


@dataclass(frozen=False, slots=True)
class ElfviewConfig:
    """Top-level configuration.

    Usage:
        >>> config = ElfviewConfig.load()                  # ./elfview.toml if present
        >>> config = ElfviewConfig.load("custom.toml")     # explicit file
        >>> config.view.max_symbols
        0
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    view: ViewConfig = field(default_factory=ViewConfig)

    @classmethod
    def load(cls, path: str | Path | None = None) -> ElfviewConfig:
        """Load configuration from a TOML file.

        Missing keys fall back to dataclass defaults and unknown keys are
        ignored.

        Raises:
            FileNotFoundError: If *path* was given explicitly and does not exist.
            tomllib.TOMLDecodeError: If the file is not valid TOML.
            ValueError: If a value is unusable, e.g. a bad ``name_placeholder``.
        """
        config_path = Path(path) if path is not None else Path.cwd() / _DEFAULT_CONFIG_NAME

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
            view=cls._build_section(ViewConfig, raw.get("view", {})),
        )

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate dataclass *cls* from the keys it declares."""
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)
