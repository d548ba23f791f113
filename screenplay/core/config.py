"""Configuration loader with layered priority.

Priority order (highest to lowest):
1. Environment variables (SCREENPLAY_DEVICE, SCREENPLAY_VERBOSE, SCREENPLAY_SEED,
   SCREENPLAY_DEFINITIONS)
2. Project config (.screenplay.yaml in current directory)
3. Global config (~/.screenplay.yaml)
4. Default values
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# Config file paths
GLOBAL_CONFIG = Path.home() / ".screenplay.yaml"
PROJECT_CONFIG = Path.cwd() / ".screenplay.yaml"

DEFAULT_DEVICE = "iPhone"


def _safe_float(value: Any, default: float | None) -> float | None:
    """Convert value to float, returning default if None or invalid."""
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _safe_int(value: Any, default: int | None) -> int | None:
    """Convert value to int, returning default if None or invalid."""
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _parse_bool(value: Any, default: bool = False) -> bool:
    """Parse boolean value from various formats.

    Handles:
    - None -> default
    - bool -> as-is
    - str -> "true", "1", "yes", "on" are True
    - other -> bool(value)
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in ("true", "1", "yes", "on")
    return bool(value)


def _parse_list(value: Any) -> list[str]:
    """Parse a list from YAML or a comma-separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return [str(value)]


@dataclass
class TagConfig:
    """Tag sets used to select scenarios."""

    any: list[str] = field(default_factory=list)
    all: list[str] = field(default_factory=list)
    none: list[str] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not (self.any or self.all or self.none)


@dataclass
class ScreenplayConfig:
    """Main configuration for the screenplay CLI."""

    device: str = DEFAULT_DEVICE
    definitions: str | None = None
    artifacts_dir: str | None = None
    verbose: bool = False
    random_seed: int | None = None
    scenarios: list[str] = field(default_factory=list)
    settle_delay: float | None = None
    tags: TagConfig = field(default_factory=TagConfig)


class ConfigLoader:
    """Loads and merges configuration from multiple sources."""

    @classmethod
    def load(cls) -> ScreenplayConfig:
        """Load configuration with layered priority.

        Returns:
            Merged ScreenplayConfig instance.
        """
        config_dict: dict[str, Any] = {}

        # Layer 1: Global config (~/.screenplay.yaml)
        if GLOBAL_CONFIG.exists():
            config_dict = cls._deep_merge(config_dict, cls._load_yaml(GLOBAL_CONFIG))

        # Layer 2: Project config (.screenplay.yaml)
        if PROJECT_CONFIG.exists():
            config_dict = cls._deep_merge(config_dict, cls._load_yaml(PROJECT_CONFIG))

        # Layer 3: Environment variables (highest priority)
        config_dict = cls._deep_merge(config_dict, cls._get_env_overrides())

        return cls._build_config(config_dict)

    @classmethod
    def _load_yaml(cls, path: Path) -> dict[str, Any]:
        """Load YAML file safely."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
                return data if isinstance(data, dict) else {}
        except (yaml.YAMLError, OSError):
            return {}

    @classmethod
    def _get_env_overrides(cls) -> dict[str, Any]:
        """Get configuration overrides from environment variables."""
        overrides: dict[str, Any] = {}

        if "SCREENPLAY_DEVICE" in os.environ:
            overrides["device"] = os.environ["SCREENPLAY_DEVICE"]

        if "SCREENPLAY_DEFINITIONS" in os.environ:
            overrides["definitions"] = os.environ["SCREENPLAY_DEFINITIONS"]

        if "SCREENPLAY_VERBOSE" in os.environ:
            overrides["verbose"] = _parse_bool(os.environ["SCREENPLAY_VERBOSE"])

        if "SCREENPLAY_SEED" in os.environ:
            overrides["random_seed"] = os.environ["SCREENPLAY_SEED"]

        return overrides

    @classmethod
    def _deep_merge(cls, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries, with override taking precedence."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = cls._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    @classmethod
    def _build_config(cls, config_dict: dict[str, Any]) -> ScreenplayConfig:
        """Build ScreenplayConfig from dictionary."""
        tags_dict = config_dict.get("tags") or {}
        if not isinstance(tags_dict, dict):
            tags_dict = {}

        tags = TagConfig(
            any=_parse_list(tags_dict.get("any")),
            all=_parse_list(tags_dict.get("all")),
            none=_parse_list(tags_dict.get("none")),
        )

        artifacts_dir = config_dict.get("artifacts_dir")
        return ScreenplayConfig(
            device=str(config_dict.get("device") or DEFAULT_DEVICE),
            definitions=config_dict.get("definitions"),
            artifacts_dir=str(artifacts_dir) if artifacts_dir else None,
            verbose=_parse_bool(config_dict.get("verbose"), False),
            random_seed=_safe_int(config_dict.get("random_seed"), None),
            scenarios=_parse_list(config_dict.get("scenarios")),
            settle_delay=_safe_float(config_dict.get("settle_delay"), None),
            tags=tags,
        )


def setup_logging(verbose: bool, log_dir: Path | None) -> Path | None:
    """Configure file-based DEBUG logging.

    Args:
        verbose: Enable logging when True
        log_dir: Directory to write debug.log

    Returns:
        Path to log file if created, None otherwise
    """
    if not verbose or log_dir is None:
        return None

    log_file = log_dir / "debug.log"
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(log_file, mode="w")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s.%(msecs)03d [%(levelname)-5s] %(name)-22s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))

    # Configure root screenplay logger (clear existing handlers to prevent duplicates)
    root_logger = logging.getLogger("screenplay")
    for old in root_logger.handlers:
        old.close()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(handler)

    return log_file
