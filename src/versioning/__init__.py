"""Version pattern normalization, matching and platform resolution."""

from .aliases import AliasEntry, PlatformAliasTable, VELOCITY_ALIASES
from .errors import ConfigError, ResolutionError, UnrecognizedPlatformError, UpstreamFetchError
from .matcher import PatternMatcher, match_pattern
from .normalize import normalize_version, sort_newest_first
from .resolver import Platform, PlatformProfile, VersionResolver

__all__ = [
    "AliasEntry",
    "PlatformAliasTable",
    "VELOCITY_ALIASES",
    "ConfigError",
    "ResolutionError",
    "UnrecognizedPlatformError",
    "UpstreamFetchError",
    "PatternMatcher",
    "match_pattern",
    "normalize_version",
    "sort_newest_first",
    "Platform",
    "PlatformProfile",
    "VersionResolver",
]
