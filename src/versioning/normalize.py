"""Normalization of loosely formatted version strings into semver form."""

from __future__ import annotations

import functools
import logging
import re
from typing import Iterable, List, Optional

import semantic_version

logger = logging.getLogger(__name__)

# First major[.minor[.patch]] run that is not glued to other digits
_COERCE_RE = re.compile(r"(?:^|[^\d])(\d{1,16})(?:\.(\d{1,16}))?(?:\.(\d{1,16}))?(?=$|[^\d])")


def normalize_version(raw: str) -> Optional[str]:
    """Normalize a version string to a valid semver version.

    Strict semver input is returned unchanged. Anything else is coerced from
    its first numeric run, zero-filling missing components ("1.20" -> "1.20.0").

    Args:
        raw: Version string as published upstream.

    Returns:
        Normalized version string, or None when no numeric run exists.
    """
    if semantic_version.validate(raw):
        return raw

    match = _COERCE_RE.search(raw)
    if match:
        major, minor, patch = (int(part or 0) for part in match.groups())
        return f"{major}.{minor}.{patch}"

    logger.debug("Could not normalize version to semver: %s", raw)
    return None


def parse_normalized(raw: str) -> Optional[semantic_version.Version]:
    """Return the normalized form of ``raw`` as a Version, or None."""
    normalized = normalize_version(raw)
    if normalized is None:
        return None
    return semantic_version.Version(normalized)


def compare_desc(a: str, b: str) -> int:
    """Comparator ordering versions newest first.

    Both sides are compared by normalized version when both normalize;
    otherwise reverse lexicographic string order decides.
    """
    ver_a = parse_normalized(a)
    ver_b = parse_normalized(b)
    if ver_a is not None and ver_b is not None:
        if ver_a != ver_b:
            return -1 if ver_a > ver_b else 1
        # Equal precedence ("1.20" vs "1.20.0") falls through to string order
    return (a < b) - (a > b)


def sort_newest_first(versions: Iterable[str]) -> List[str]:
    """Sort version strings newest first using :func:`compare_desc`.

    Input is pre-sorted in reverse string order, so equal sets always give
    the same output even when unnormalizable entries are mixed in.
    """
    return sorted(sorted(versions, reverse=True), key=functools.cmp_to_key(compare_desc))
