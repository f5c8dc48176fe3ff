"""Matching of user version patterns against candidate version lists."""

from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional, Sequence

import semantic_version

from .normalize import parse_normalized

logger = logging.getLogger(__name__)

# (original pattern, candidates) -> matches, or None when the strategy does not apply
MatchStrategy = Callable[[str, Sequence[str]], Optional[List[str]]]

# Build metadata in a range expression; npm ranges ignore it
_BUILD_RE = re.compile(r"\+[0-9A-Za-z.-]+")


def preprocess_pattern(pattern: str) -> str:
    """Rewrite pattern shorthands into npm range syntax.

    "1.19.x" becomes "1.19.*". Patterns mentioning "latest" are unsupported
    and are passed through unchanged.
    """
    if pattern.endswith(".x"):
        return f"{pattern[:-2]}.*"

    if "latest" in pattern:
        logger.warning("'latest' pattern not supported in semver, treating as exact match")

    return pattern


def match_range(pattern: str, candidates: Sequence[str]) -> Optional[List[str]]:
    """Filter candidates satisfying the pattern read as an npm range.

    Candidates are compared by their normalized form but returned as given.
    Returns None if the pattern is not a valid range.
    """
    expression = _BUILD_RE.sub("", preprocess_pattern(pattern))
    try:
        spec = semantic_version.NpmSpec(expression)
    except ValueError:
        logger.debug("Pattern '%s' is not a valid semver range", expression)
        return None

    matches = []
    for candidate in candidates:
        version = parse_normalized(candidate)
        if version is not None and spec.match(version):
            matches.append(candidate)
    return matches


def match_exact(pattern: str, candidates: Sequence[str]) -> Optional[List[str]]:
    """Filter candidates equal to the unmodified pattern."""
    return [candidate for candidate in candidates if candidate == pattern]


MATCH_STRATEGIES: List[MatchStrategy] = [match_range, match_exact]


class PatternMatcher:
    """Resolve one pattern against one candidate list.

    Strategies are tried in order; the first one producing a non-empty
    result wins.
    """

    def __init__(self, strategies: Optional[Sequence[MatchStrategy]] = None):
        self._strategies = list(strategies) if strategies is not None else list(MATCH_STRATEGIES)

    def match(self, pattern: str, candidates: Sequence[str]) -> List[str]:
        """Return the candidates matched by ``pattern``, possibly empty."""
        for strategy in self._strategies:
            result = strategy(pattern, candidates)
            if result:
                return result

        logger.warning("No matches found for version pattern: %s", pattern)
        return []


def match_pattern(pattern: str, candidates: Sequence[str]) -> List[str]:
    """Match with the default strategy chain."""
    return PatternMatcher().match(pattern, candidates)
