"""Configuration loading for the resolver CLI.

Settings come from an optional YAML file; platform dependencies come from a
YAML or JSON document mapping platform names to version pattern lists.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from constants import Constants
from versioning.aliases import VELOCITY_ALIASES, PlatformAliasTable
from versioning.errors import ConfigError
from versioning.resolver import Platform

logger = logging.getLogger(__name__)


def _default_aliases() -> Dict[Platform, PlatformAliasTable]:
    return {Platform.VELOCITY: VELOCITY_ALIASES}


@dataclass
class Settings:
    """Runtime tunables for upstream access and alias tables."""
    manifest_url: str = Constants.MANIFEST_URL
    fill_base_url: str = Constants.FILL_BASE_URL
    request_timeout: float = Constants.REQUEST_TIMEOUT
    user_agent: str = Constants.USER_AGENT
    aliases: Dict[Platform, PlatformAliasTable] = field(default_factory=_default_aliases)


def _parse_aliases(raw: Any) -> Dict[Platform, PlatformAliasTable]:
    if not isinstance(raw, dict):
        raise ConfigError("'aliases' must map platform names to lists of [source, platform] pairs")
    tables = _default_aliases()
    for name, pairs in raw.items():
        platform = Platform.parse(str(name).upper())
        if not isinstance(pairs, list) or not all(
            isinstance(pair, (list, tuple)) and len(pair) == 2 for pair in pairs
        ):
            raise ConfigError(f"Aliases for {platform.value} must be a list of [source, platform] pairs")
        tables[platform] = PlatformAliasTable.from_pairs(pairs)
    return tables


def _find_config_file(path: Optional[str]) -> Optional[str]:
    if path:
        return path
    env_path = os.environ.get(Constants.CONFIG_ENV)
    if env_path:
        return env_path
    if os.path.isfile(Constants.CONFIG_FILE):
        return Constants.CONFIG_FILE
    return None


def load_settings(path: Optional[str] = None) -> Settings:
    """Load settings from a YAML file.

    Args:
        path: Explicit config path; otherwise ``HANGAR_RESOLVE_CONFIG`` or
            ``hangar-resolve.yml`` in the working directory, when present.

    Returns:
        Settings with file values applied over the defaults.

    Raises:
        ConfigError: If an explicit file is missing or any file is malformed.
    """
    config_path = _find_config_file(path)
    if not config_path:
        return Settings()

    if not os.path.isfile(config_path):
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must be a mapping")

    settings = Settings()
    if data.get("manifest_url"):
        settings.manifest_url = str(data["manifest_url"])
    if data.get("fill_base_url"):
        settings.fill_base_url = str(data["fill_base_url"])
    if data.get("user_agent"):
        settings.user_agent = str(data["user_agent"])
    if data.get("request_timeout") is not None:
        try:
            settings.request_timeout = float(data["request_timeout"])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid request_timeout: {data['request_timeout']!r}") from e
    if "aliases" in data:
        settings.aliases = _parse_aliases(data["aliases"])

    logger.info("Loaded config from: %s", config_path)
    return settings


def parse_platform_dependencies(text: str) -> Dict[str, List[str]]:
    """Parse and validate a platform dependency document.

    Args:
        text: YAML or JSON mapping of platform name to version patterns.

    Returns:
        Mapping of platform name to patterns, in document order.

    Raises:
        ConfigError: If the document is not a mapping of non-empty names to
            lists of non-empty strings.
    """
    try:
        data = yaml.safe_load(text) if text and text.strip() else {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse platform_dependencies: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("platform_dependencies must be a mapping of platform to version list")

    dependencies: Dict[str, List[str]] = {}
    for platform, patterns in data.items():
        if not isinstance(platform, str) or not platform:
            raise ConfigError("Platform name cannot be empty")
        if not isinstance(patterns, list):
            raise ConfigError(f"{platform}: versions must be a list")
        for pattern in patterns:
            if not isinstance(pattern, str):
                # YAML reads unquoted 1.20 as a float
                raise ConfigError(f"{platform}: version {pattern!r} must be a quoted string")
            if not pattern:
                raise ConfigError(f"{platform}: Platform version cannot be empty")
        dependencies[platform] = list(patterns)
    return dependencies


def load_platform_dependencies(path: str) -> Dict[str, List[str]]:
    """Read and validate a platform dependency file."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return parse_platform_dependencies(fh.read())
    except OSError as e:
        raise ConfigError(f"Failed to read {path}: {e}") from e
