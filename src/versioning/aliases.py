"""Static mapping between upstream version ids and Hangar platform version ids."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AliasEntry:
    """One upstream id paired with the id Hangar accepts for it."""
    source_id: str
    platform_id: str


class PlatformAliasTable:
    """Ordered alias table; lookups return the first matching entry."""

    def __init__(self, entries: Iterable[AliasEntry]):
        self._entries: Tuple[AliasEntry, ...] = tuple(entries)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Sequence[str]]) -> "PlatformAliasTable":
        """Build a table from ``(source_id, platform_id)`` pairs."""
        return cls(AliasEntry(str(src), str(dst)) for src, dst in pairs)

    def __len__(self) -> int:
        return len(self._entries)

    def source_ids(self) -> List[str]:
        """Upstream ids in table order."""
        return [entry.source_id for entry in self._entries]

    def to_platform_id(self, source_id: str) -> Optional[str]:
        """Map an upstream id to the platform id, or None if unmapped."""
        for entry in self._entries:
            if entry.source_id == source_id:
                return entry.platform_id
        return None

    def translate(self, source_ids: Iterable[str]) -> List[str]:
        """Map upstream ids to platform ids, dropping unmapped ones."""
        translated = []
        for source_id in source_ids:
            platform_id = self.to_platform_id(source_id)
            if platform_id is None:
                logger.debug("No platform alias for version %s, dropping it", source_id)
                continue
            translated.append(platform_id)
        return translated


# Hangar only accepts its own Velocity version labels.
# FIXME: replace with Hangar's platform version API once it is exposed
VELOCITY_ALIASES = PlatformAliasTable.from_pairs([
    ("3.4.0", "3.4"),
    ("3.3.0", "3.3"),
    ("3.2.0", "3.2"),
    ("3.1.1", "3.1.1"),
    ("3.1.0", "3.1.0"),
    ("3.0.0", "3.0"),
    ("1.1.9", "1.1.9"),
    ("1.1.0", "1.1"),
    ("1.0.0", "1.0"),
])
