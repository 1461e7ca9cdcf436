"""Configuration loading and management for Asset RefGraph.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.asset-refgraph.toml)
    3. Project config (./asset-refgraph.toml)
    4. Explicit config file
    5. Environment variables (REFGRAPH_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(workers=4)
    >>> config.workers
    4
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "REFGRAPH_"


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for dependency analysis.

    Attributes:
        Performance tuning:
            workers: Number of threads resolving per-asset dependencies
                (1 = sequential)

        Caching:
            cache_enabled: Persist dependency records between runs
            cache_dir: Directory for the on-disk cache

        Report limits:
            most_referenced_limit: Entries kept in the most-referenced ranking
            orphan_limit: Maximum orphans listed (0 = unlimited)
            orphan_exclude_suffixes: Display-path suffixes never reported
                as orphans (source code, shaders)

        Output control:
            verbosity: Logging verbosity level
    """

    # Performance tuning
    workers: int = 1

    # Caching
    cache_enabled: bool = True
    cache_dir: str = ".refgraph-cache"

    # Report limits
    most_referenced_limit: int = 10
    orphan_limit: int = 20
    orphan_exclude_suffixes: list[str] = field(default_factory=lambda: [".cs", ".shader"])

    # Output control
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.most_referenced_limit < 1:
            raise InvalidConfigError(
                "most_referenced_limit", self.most_referenced_limit, "must be at least 1"
            )
        if self.orphan_limit < 0:
            raise InvalidConfigError("orphan_limit", self.orphan_limit, "must be non-negative")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError(
                "verbosity", self.verbosity, "must be one of quiet, normal, verbose"
            )

    @property
    def orphan_cap(self) -> Optional[int]:
        """Orphan limit as passed to the analyzer (None = unlimited)."""
        return self.orphan_limit or None


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / ".asset-refgraph.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except Exception as e:
            raise ConfigurationError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "asset-refgraph.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except Exception as e:
            raise ConfigurationError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except Exception as e:
            raise ConfigurationError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    # Convert verbosity boolean flags to string
    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update(overrides)

    try:
        return AnalysisConfig(**merged)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from REFGRAPH_* environment variables.

    Supported environment variables:
        REFGRAPH_WORKERS: int
        REFGRAPH_CACHE_ENABLED: bool (true/false/1/0)
        REFGRAPH_CACHE_DIR: str
        REFGRAPH_MOST_REFERENCED_LIMIT: int
        REFGRAPH_ORPHAN_LIMIT: int
        REFGRAPH_VERBOSITY: quiet/normal/verbose

    Returns:
        Dict of field_name -> parsed_value for any REFGRAPH_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Returns None for types that are not settable from the environment
    (lists).

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Skip list types (like orphan_exclude_suffixes)
    if origin is list or type_hint is list:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict."""
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore

    with open(path, "rb") as f:
        return tomllib.load(f)
