"""Configuration loading and management for docdelta.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.docdelta.toml)
    3. Project config (./docdelta.toml)
    4. Explicit config file
    5. Environment variables (DOCDELTA_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(verbose=True, max_concurrent_reads=16)
    >>> config.verbosity
    'verbose'
    >>> config.max_concurrent_reads
    16
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]


@dataclass(frozen=True)
class ScoringConfig:
    """Health score weights.

    The defaults give the canonical 0-100 score: every issue costs a fixed
    penalty by severity, dense issue counts cost up to ``density_cap`` more,
    and documentation coverage adds a bonus or a penalty.

    Attributes:
        Severity penalties:
            high_penalty, medium_penalty, low_penalty: points per issue

        Density:
            density_threshold: issues per 10 files tolerated before penalising
            density_factor: points per issue-per-10-files above the threshold
            density_cap: maximum density penalty

        Coverage:
            coverage_bonus_threshold: coverage % at or above which the bonus applies
            coverage_bonus: points added for good coverage
            coverage_penalty_threshold: coverage % below which the penalty applies
            coverage_penalty: points removed for poor coverage
    """

    high_penalty: int = 10
    medium_penalty: int = 5
    low_penalty: int = 2

    density_threshold: float = 5.0
    density_factor: float = 2.0
    density_cap: float = 20.0

    coverage_bonus_threshold: float = 80.0
    coverage_bonus: int = 5
    coverage_penalty_threshold: float = 50.0
    coverage_penalty: int = 10

    def __post_init__(self) -> None:
        """Validate scoring configuration."""
        for field_name in (
            "high_penalty",
            "medium_penalty",
            "low_penalty",
            "density_factor",
            "density_cap",
            "coverage_bonus",
            "coverage_penalty",
        ):
            if getattr(self, field_name) < 0:
                raise ValueError(f"{field_name} must be non-negative")

        if self.density_threshold < 0:
            raise ValueError("density_threshold must be non-negative")

        for field_name in ("coverage_bonus_threshold", "coverage_penalty_threshold"):
            value = getattr(self, field_name)
            if not 0.0 <= value <= 100.0:
                raise ValueError(f"{field_name} must be between 0 and 100")

        if self.coverage_penalty_threshold > self.coverage_bonus_threshold:
            raise ValueError(
                "coverage_penalty_threshold must not exceed coverage_bonus_threshold"
            )

    def penalty_for(self, severity: str) -> int:
        """Points deducted for one issue of ``severity`` (unknown counts as low)."""
        if severity == "high":
            return self.high_penalty
        if severity == "medium":
            return self.medium_penalty
        return self.low_penalty


DEFAULT_SCORING = ScoringConfig()


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for a documentation consistency run.

    Attributes:
        Performance tuning:
            max_concurrent_reads: Upper bound on simultaneous file reads/parses
            detector_timeout_seconds: Budget for a single detector

        File filtering:
            exclude_dirs: Directory names never descended into
            exclude_patterns: Glob patterns (relative paths) to exclude
            markdown_extensions: Suffixes treated as documentation
            source_extensions: Suffixes scanned for exported symbols
            image_extensions: Suffixes enumerated so image links can resolve
            max_file_size_mb: Files larger than this are skipped
            max_files: Stop enumerating after this many files

        Detectors:
            disabled_detectors: Detector names to skip

        Caching:
            cache_enabled: Reuse parsed content across runs
            cache_dir: Directory for cache storage
            cache_ttl_hours: Cache time-to-live in hours

        History:
            enable_history: Allow runs to be recorded for delta tracking
            history_dir: Directory (under the project root) for history.db

        Output:
            verbosity: Logging verbosity level
    """

    max_concurrent_reads: int = 64
    detector_timeout_seconds: int = 60

    exclude_dirs: list[str] = field(
        default_factory=lambda: [
            "node_modules",
            ".git",
            "dist",
            "build",
            ".next",
            "coverage",
            "__pycache__",
            ".venv",
            "venv",
            ".tox",
            ".docdelta",
            ".docdelta-cache",
        ]
    )
    exclude_patterns: list[str] = field(default_factory=list)
    markdown_extensions: list[str] = field(default_factory=lambda: [".md", ".markdown"])
    source_extensions: list[str] = field(
        default_factory=lambda: [".js", ".jsx", ".ts", ".tsx", ".py"]
    )
    image_extensions: list[str] = field(
        default_factory=lambda: [
            ".png",
            ".jpg",
            ".jpeg",
            ".gif",
            ".svg",
            ".webp",
            ".bmp",
            ".ico",
        ]
    )
    max_file_size_mb: float = 5.0
    max_files: int = 20000

    disabled_detectors: list[str] = field(default_factory=list)

    cache_enabled: bool = True
    cache_dir: str = ".docdelta-cache"
    cache_ttl_hours: int = 24

    enable_history: bool = True
    history_dir: str = ".docdelta"

    verbosity: Verbosity = "normal"

    scoring: ScoringConfig = field(default_factory=ScoringConfig)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not 1 <= self.max_concurrent_reads <= 128:
            raise ValueError("max_concurrent_reads must be between 1 and 128")
        if self.detector_timeout_seconds < 1:
            raise ValueError("detector_timeout_seconds must be at least 1")

        if self.max_file_size_mb <= 0:
            raise ValueError("max_file_size_mb must be positive")
        if self.max_files < 1:
            raise ValueError("max_files must be at least 1")

        for field_name in ("markdown_extensions", "source_extensions", "image_extensions"):
            for ext in getattr(self, field_name):
                if not ext.startswith("."):
                    raise ValueError(f"{field_name} entries must start with '.', got {ext!r}")

        if self.cache_ttl_hours < 0:
            raise ValueError("cache_ttl_hours must be non-negative")

        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError(f"verbosity must be quiet, normal or verbose, got {self.verbosity!r}")

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)

    @property
    def cache_ttl_seconds(self) -> int:
        """Get cache TTL in seconds."""
        return self.cache_ttl_hours * 3600


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing, or a value
            fails validation
    """
    merged: dict = {}

    global_config = Path.home() / ".docdelta.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "docdelta.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    # Boolean verbosity flags from the CLI map onto the verbosity field
    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    scoring = merged.pop("scoring", None)
    if scoring is not None:
        if isinstance(scoring, dict):
            try:
                merged["scoring"] = ScoringConfig(**scoring)
            except TypeError as e:
                raise ConfigurationError(f"Invalid [scoring] config: {e}")
            except ValueError as e:
                raise InvalidConfigError("scoring", scoring, str(e))
        elif isinstance(scoring, ScoringConfig):
            merged["scoring"] = scoring
        else:
            raise InvalidConfigError("scoring", scoring, "expected a table")

    try:
        return AnalysisConfig(**merged)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from DOCDELTA_* environment variables.

    Only scalar fields are read (list fields are too awkward to express in
    an environment variable), e.g. DOCDELTA_MAX_CONCURRENT_READS=16,
    DOCDELTA_CACHE_ENABLED=false, DOCDELTA_VERBOSITY=verbose.

    Returns:
        Dict of field_name -> parsed_value for any DOCDELTA_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"DOCDELTA_{field_name.upper()}"
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
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Returns:
        Parsed value or None if the field type is not expressible

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    if origin is list or type_hint is list or type_hint is ScoringConfig:
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

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If no TOML parser is available
        Exception: If TOML parsing fails
    """
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or the 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
