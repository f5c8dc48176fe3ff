"""Upstream sources of authoritative version lists.

Each source fetches once per key and keeps the result for the lifetime of
the instance. Failed fetches are not cached, so the next call hits the
network again.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from constants import Constants
from versioning.aliases import PlatformAliasTable
from versioning.normalize import normalize_version, sort_newest_first
from .http import ensure_mapping

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class CandidateSource(ABC):
    """Base class for cached upstream version lists."""

    def __init__(self, http: Any = None):
        """Initialize the source.

        Args:
            http: Object exposing ``async get_json(url, *, context)``,
                usually a :class:`registry.http.HttpSession`.
        """
        self._http = http
        self._cache: Dict[str, Tuple[str, ...]] = {}

    @property
    @abstractmethod
    def name(self) -> str:
        """Upstream identity used in logs and errors."""

    @abstractmethod
    async def fetch(self, key: Optional[str]) -> List[str]:
        """Fetch the filtered, ordered version list for ``key``."""

    def cache_key(self, key: Optional[str]) -> str:
        """Cache key for ``key``; single-list sources ignore it."""
        return ""

    async def list_versions(self, key: Optional[str] = None) -> List[str]:
        """Return the version list for ``key``, fetching it on first use."""
        cache_key = self.cache_key(key)
        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.debug("Using cached %s versions for '%s'", self.name, cache_key)
            return list(cached)

        versions = await self.fetch(key)
        self._cache[cache_key] = tuple(versions)
        logger.debug("Cached %d %s versions", len(versions), self.name)
        return list(versions)

    def clear_cache(self) -> None:
        """Forget every cached list."""
        self._cache.clear()


def _release_time(entry: Dict[str, Any]) -> datetime:
    """Parse an ISO-8601 releaseTime, sorting unparsable values last."""
    raw = str(entry.get("releaseTime") or "")
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return _EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class ReleaseManifestSource(CandidateSource):
    """Minecraft release versions from the Mojang version manifest."""

    def __init__(self, http: Any = None, url: Optional[str] = None):
        super().__init__(http)
        self.url = url or Constants.MANIFEST_URL

    @property
    def name(self) -> str:
        return "mojang"

    async def fetch(self, key: Optional[str]) -> List[str]:
        """Fetch release entries, newest release first."""
        logger.debug("Fetching Minecraft version manifest from Mojang")
        manifest = ensure_mapping(
            await self._http.get_json(self.url, context=self.name),
            context=self.name,
            url=self.url,
        )

        releases = [
            entry
            for entry in manifest.get("versions") or []
            if isinstance(entry, dict)
            and entry.get("type") == Constants.MANIFEST_RELEASE_TYPE
            and entry.get("id")
        ]
        releases.sort(key=_release_time, reverse=True)
        return [str(entry["id"]) for entry in releases]


def is_prerelease(version: str) -> bool:
    """True if ``version`` carries one of the Fill pre-release markers."""
    return any(marker in version for marker in Constants.PRERELEASE_MARKERS)


class ProjectVersionsSource(CandidateSource):
    """Release versions of a PaperMC project from the Fill API."""

    def __init__(self, http: Any = None, base_url: Optional[str] = None):
        super().__init__(http)
        base = base_url or Constants.FILL_BASE_URL
        self.base_url = base if base.endswith("/") else f"{base}/"

    @property
    def name(self) -> str:
        return "fill"

    def cache_key(self, key: Optional[str]) -> str:
        return (key or "").lower()

    def project_url(self, project: str) -> str:
        """URL of the project document for ``project``."""
        return f"{self.base_url}{project}"

    async def fetch(self, key: Optional[str]) -> List[str]:
        """Fetch, flatten, filter and sort the versions of project ``key``."""
        if not key:
            raise ValueError("A project name is required for Fill version lists")
        project = key
        context = f"{self.name}:{project}"
        url = self.project_url(project)
        logger.debug("Fetching %s versions from PaperMC API", project)

        document = ensure_mapping(
            await self._http.get_json(url, context=context), context=context, url=url
        )
        groups = document.get("versions") or {}
        if not isinstance(groups, dict):
            groups = {}

        flattened: List[str] = []
        for major, versions in groups.items():
            flattened.extend(str(v) for v in versions or [])
            if project.lower() == Constants.MAJOR_KEY_PROJECT:
                # Velocity builds accept bare major versions as targets
                flattened.append(str(major))

        releases = [
            v for v in flattened
            if not is_prerelease(v) and normalize_version(v) is not None
        ]
        return sort_newest_first(releases)


class AliasTableSource(CandidateSource):
    """Candidate list made of an alias table's upstream ids; no network."""

    def __init__(self, table: PlatformAliasTable, label: str = "aliases"):
        super().__init__(None)
        self.table = table
        self._label = label

    @property
    def name(self) -> str:
        return self._label

    async def fetch(self, key: Optional[str]) -> List[str]:
        return self.table.source_ids()
