"""Resolution of Hangar platform dependency version patterns."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Sequence, Set

from .aliases import PlatformAliasTable
from .errors import UnrecognizedPlatformError
from .matcher import PatternMatcher
from .normalize import sort_newest_first

if TYPE_CHECKING:
    from registry.sources import CandidateSource

logger = logging.getLogger(__name__)


class Platform(Enum):
    """Platforms Hangar accepts dependency versions for."""
    PAPER = "PAPER"
    VELOCITY = "VELOCITY"
    WATERFALL = "WATERFALL"

    @classmethod
    def parse(cls, name: str) -> "Platform":
        """Return the platform named ``name``.

        Raises:
            UnrecognizedPlatformError: If ``name`` is not a known platform.
        """
        try:
            return cls(name)
        except ValueError:
            raise UnrecognizedPlatformError(name) from None


@dataclass
class PlatformProfile:
    """Where a platform's candidates come from and how they are translated.

    ``project`` is the key passed to ``source``; ``aliases`` maps matched ids
    to Hangar ids.
    """
    source: CandidateSource
    project: Optional[str] = None
    aliases: Optional[PlatformAliasTable] = None


class VersionResolver:
    """Maps platform version patterns to versions Hangar accepts."""

    def __init__(
        self,
        profiles: Mapping[Platform, PlatformProfile],
        matcher: Optional[PatternMatcher] = None,
    ):
        """Initialize the resolver.

        Args:
            profiles: Dispatch table; every :class:`Platform` must be present.
            matcher: Pattern matcher, default strategy chain if omitted.
        """
        missing = [p.value for p in Platform if p not in profiles]
        if missing:
            raise ValueError(f"No profile configured for platform(s): {', '.join(missing)}")
        self._profiles: Dict[Platform, PlatformProfile] = dict(profiles)
        self._matcher = matcher or PatternMatcher()

    def profile(self, platform: str) -> PlatformProfile:
        """Dispatch a platform name to its profile."""
        return self._profiles[Platform.parse(platform)]

    async def resolve(self, platform: str, patterns: Sequence[str]) -> List[str]:
        """Resolve the patterns of one platform.

        Args:
            platform: Hangar platform name, e.g. "PAPER".
            patterns: Version patterns to resolve.

        Returns:
            Matching Hangar version strings, deduplicated, newest first.
            Empty when no pattern matched.

        Raises:
            UnrecognizedPlatformError: Unknown platform name.
            UpstreamFetchError: The candidate list could not be fetched.
        """
        logger.debug("Resolving platform dependencies for %s: %s", platform, list(patterns))
        profile = self.profile(platform)
        candidates = await profile.source.list_versions(profile.project)

        matched = self.resolve_versions(patterns, candidates)
        if profile.aliases is not None:
            matched = set(profile.aliases.translate(matched))

        result = sort_newest_first(matched)
        logger.debug(
            "Resolved patterns [%s] to %d versions: %s",
            ", ".join(patterns),
            len(result),
            result,
        )
        return result

    def resolve_versions(self, patterns: Sequence[str], candidates: Sequence[str]) -> Set[str]:
        """Union of the candidates matched by each pattern."""
        matched: Set[str] = set()
        for pattern in patterns:
            matched.update(self._matcher.match(pattern, candidates))
        return matched

    async def resolve_all(self, dependencies: Mapping[str, Sequence[str]]) -> Dict[str, List[str]]:
        """Resolve every platform in turn.

        Platforms are processed sequentially in mapping order; the first fatal
        error propagates and later platforms are not attempted.
        """
        resolved: Dict[str, List[str]] = {}
        for platform, patterns in dependencies.items():
            resolved[platform] = await self.resolve(platform, patterns)
        return resolved
