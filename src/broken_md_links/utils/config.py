"""Configuration loader supporting YAML files and environment overrides."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, MutableMapping, Optional, Tuple, cast

import yaml  # type: ignore[import-untyped]

from broken_md_links.checker.validator import CheckOptions
from broken_md_links.core.enums import Verbosity

ENV_PREFIX = "BROKEN_MD_LINKS_"
CONFIG_FILENAME = ".broken-md-links.yaml"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass
class OutputConfig:
    """Presentation settings for the command line."""

    verbosity: Verbosity
    log_dir: Optional[str]


def find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """Look for the configuration file in ``start`` and its parents."""
    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current.parent == current:
            return None
        current = current.parent


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"Expected a boolean value, got {value!r}")


def _as_tuple(value: Any, default: Tuple[str, ...]) -> Tuple[str, ...]:
    if value is None:
        return default
    if isinstance(value, str):
        # Environment overrides are comma separated
        return tuple(item.strip() for item in value.split(",") if item.strip())
    return tuple(str(item) for item in value)


def _normalise_extension(extension: str) -> str:
    return extension if extension.startswith(".") else f".{extension}"


class ConfigManager:
    """Load configuration from `.broken-md-links.yaml` plus `BROKEN_MD_LINKS_*` overrides."""

    def __init__(
        self,
        config_path: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize configuration manager.

        Load YAML configuration then apply environment variable overrides
        using the pattern BROKEN_MD_LINKS_SECTION__KEY. Underscores are
        converted to hyphens to allow both styles in YAML keys.

        Args:
            config_path: Path to config file (defaults to the nearest
                `.broken-md-links.yaml` above the working directory; no file
                means built-in defaults)
            logger: Optional logger instance

        Raises:
            FileNotFoundError: if an explicit ``config_path`` does not exist.
        """
        self.logger = logger
        self.config_path: Optional[Path]
        if config_path is None:
            self.config_path = find_config_file()
        else:
            self.config_path = Path(config_path)

        loaded: Any = None
        if self.config_path is not None:
            if self.logger:
                self.logger.debug(f"Loading configuration from {self.config_path}")
            with open(self.config_path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        elif self.logger:
            self.logger.debug("No configuration file found, using defaults")

        if isinstance(loaded, MutableMapping):
            raw: Dict[str, Any] = cast(Dict[str, Any], dict(loaded))
        else:
            raw = {}

        self.config: Dict[str, Any] = raw

        # Allow override from environment variables (flat mapping)
        # e.g. BROKEN_MD_LINKS_CHECK__INCLUDE_IMAGES overrides check.include-images
        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue
            path = key[len(ENV_PREFIX) :].lower().split("__")
            cursor: Dict[str, Any] = self.config
            for part in path[:-1]:
                normalised = part.replace("_", "-")
                next_cursor = cursor.setdefault(normalised, {})
                if not isinstance(next_cursor, dict):
                    next_cursor = {}
                    cursor[normalised] = next_cursor
                cursor = cast(Dict[str, Any], next_cursor)
            cursor[path[-1].replace("_", "-")] = value

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def get(self, *path: str, default: Any = None) -> Any:
        """Retrieve a nested configuration value.

        Example: cfg.get("check", "include-images")
        Hyphen / underscore differences are normalized.
        """
        cursor: Any = self.config
        for part in path:
            if not isinstance(cursor, dict):
                return default
            # Try several key variants to be tolerant to style.
            variants = {
                part,
                part.replace("_", "-"),
                part.replace("-", "_"),
            }
            found = None
            for candidate in variants:
                if candidate in cursor:
                    found = candidate
                    break
            if found is None:
                return default
            cursor = cursor[found]
        return cursor

    @property
    def check_options(self) -> CheckOptions:
        """Get link checking options (defaults for anything unset)."""
        defaults = CheckOptions()
        root_dir = self.get("check", "root-dir")
        if root_dir is not None and self.config_path is not None:
            # Relative roots are anchored at the configuration file
            root_dir = self.config_path.parent / root_dir
        extensions = _as_tuple(self.get("check", "markdown-extensions"), defaults.markdown_extensions)
        return CheckOptions(
            ignore_header_links=_as_bool(
                self.get("check", "ignore-header-links"), defaults.ignore_header_links
            ),
            disallow_dir_links=_as_bool(
                self.get("check", "disallow-dir-links"), defaults.disallow_dir_links
            ),
            include_images=_as_bool(self.get("check", "include-images"), defaults.include_images),
            markdown_extensions=tuple(_normalise_extension(ext) for ext in extensions),
            root_dir=Path(root_dir) if root_dir is not None else None,
            exclude=_as_tuple(self.get("check", "exclude"), defaults.exclude),
        )

    @property
    def output_config(self) -> OutputConfig:
        """Get output configuration (verbosity defaults to 'warn')."""
        verbosity = self.get("output", "verbosity", default=Verbosity.WARN.value)
        log_dir = self.get("output", "log-dir")
        return OutputConfig(
            verbosity=Verbosity(str(verbosity).lower()),
            log_dir=str(log_dir) if log_dir else None,
        )
