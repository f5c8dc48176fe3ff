"""Default wiring of Hangar platforms to their version sources."""

from __future__ import annotations

from typing import Any, Dict

from versioning.resolver import Platform, PlatformProfile, VersionResolver
from .sources import AliasTableSource, ProjectVersionsSource, ReleaseManifestSource


def build_profiles(http: Any, settings: Any) -> Dict[Platform, PlatformProfile]:
    """Build the platform dispatch table.

    PAPER resolves against Minecraft releases, WATERFALL against its Fill
    project, and VELOCITY against the alias table, whose ids are then
    translated to Hangar's labels.

    Args:
        http: Fetcher shared by the network sources.
        settings: :class:`common.config.Settings`.
    """
    manifest = ReleaseManifestSource(http, settings.manifest_url)
    fill = ProjectVersionsSource(http, settings.fill_base_url)

    profiles = {
        Platform.PAPER: PlatformProfile(source=manifest),
        Platform.WATERFALL: PlatformProfile(source=fill, project="waterfall"),
    }
    velocity_aliases = settings.aliases.get(Platform.VELOCITY)
    if velocity_aliases is not None:
        profiles[Platform.VELOCITY] = PlatformProfile(
            source=AliasTableSource(velocity_aliases, label="velocity-aliases"),
            aliases=velocity_aliases,
        )
    else:
        profiles[Platform.VELOCITY] = PlatformProfile(source=fill, project="velocity")

    for platform, table in settings.aliases.items():
        if platform is not Platform.VELOCITY:
            profiles[platform].aliases = table
    return profiles


def build_resolver(http: Any, settings: Any) -> VersionResolver:
    """Resolver over the default profiles."""
    return VersionResolver(build_profiles(http, settings))
