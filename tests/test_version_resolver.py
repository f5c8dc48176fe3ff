"""Tests for platform version resolution."""

import asyncio
import logging
from typing import List, Optional

import pytest

from common.config import Settings
from registry.profiles import build_profiles, build_resolver
from registry.sources import (
    AliasTableSource,
    CandidateSource,
    ProjectVersionsSource,
    ReleaseManifestSource,
)
from versioning.aliases import VELOCITY_ALIASES
from versioning.errors import UnrecognizedPlatformError, UpstreamFetchError
from versioning.resolver import Platform, PlatformProfile, VersionResolver


class StaticSource(CandidateSource):
    """Candidate source returning a fixed list and counting fetches."""

    def __init__(self, versions: List[str], error: Optional[Exception] = None):
        super().__init__(None)
        self.versions = versions
        self.error = error
        self.fetches = 0

    @property
    def name(self) -> str:
        return "static"

    async def fetch(self, key):
        self.fetches += 1
        if self.error is not None:
            raise self.error
        return list(self.versions)


class FakeHttp:
    """Counts requests per URL and replays canned documents."""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    async def get_json(self, url, *, context):
        self.calls.append(url)
        return self.responses[url]


def make_resolver(paper=None, waterfall=None, velocity=None):
    profiles = {
        Platform.PAPER: PlatformProfile(source=paper or StaticSource(["1.19.1", "1.19.2", "1.18.2"])),
        Platform.WATERFALL: PlatformProfile(source=waterfall or StaticSource(["1.20", "1.19"])),
        Platform.VELOCITY: PlatformProfile(
            source=velocity or AliasTableSource(VELOCITY_ALIASES),
            aliases=VELOCITY_ALIASES,
        ),
    }
    return VersionResolver(profiles)


class TestPlatform:
    """Tests for platform dispatch."""

    def test_known_platforms(self):
        """The closed set of Hangar platforms parses."""
        assert Platform.parse("PAPER") is Platform.PAPER
        assert Platform.parse("VELOCITY") is Platform.VELOCITY
        assert Platform.parse("WATERFALL") is Platform.WATERFALL

    @pytest.mark.parametrize("name", ["FORGE", "paper", "", "Paper "])
    def test_unknown_platform(self, name):
        """Anything else is rejected."""
        with pytest.raises(UnrecognizedPlatformError) as exc_info:
            Platform.parse(name)
        assert exc_info.value.platform == name

    def test_profile_source_is_typed(self):
        """The dispatch record declares the candidate source type it holds."""
        assert PlatformProfile.__annotations__["source"] == "CandidateSource"

    def test_profiles_must_cover_every_platform(self):
        """A resolver cannot be built with a hole in its dispatch table."""
        with pytest.raises(ValueError):
            VersionResolver({Platform.PAPER: PlatformProfile(source=StaticSource([]))})


class TestVersionResolver:
    """Tests for VersionResolver.resolve and resolve_all."""

    def test_wildcard_resolves_newest_first(self):
        """1.19.x yields both 1.19 releases, newest first."""
        resolver = make_resolver()

        result = asyncio.run(resolver.resolve("PAPER", ["1.19.x"]))

        assert result == ["1.19.2", "1.19.1"]

    def test_duplicate_matches_collapse(self):
        """Overlapping patterns contribute each version once."""
        resolver = make_resolver()

        result = asyncio.run(resolver.resolve("PAPER", ["1.19.x", "1.19.2", ">=1.19.0"]))

        assert result == ["1.19.2", "1.19.1"]

    def test_exact_fallback(self):
        """Non-range literals resolve by exact match."""
        resolver = make_resolver(paper=StaticSource(["1.20.1", "custom-build-7"]))

        assert asyncio.run(resolver.resolve("PAPER", ["custom-build-7"])) == ["custom-build-7"]

    def test_alias_translation(self):
        """Velocity 3.4.0 is published to Hangar as 3.4."""
        resolver = make_resolver()

        assert asyncio.run(resolver.resolve("VELOCITY", ["3.4.0"])) == ["3.4"]

    def test_alias_translation_sorted(self):
        """Translated ids are sorted newest first."""
        resolver = make_resolver()

        result = asyncio.run(resolver.resolve("VELOCITY", ["3.x"]))

        assert result == ["3.4", "3.3", "3.2", "3.1.1", "3.1.0", "3.0"]

    def test_unmapped_alias_dropped(self):
        """Matches missing from the alias table are left out."""
        resolver = make_resolver(velocity=StaticSource(["3.5.0", "3.4.0"]))

        assert asyncio.run(resolver.resolve("VELOCITY", ["3.x"])) == ["3.4"]

    def test_no_match_is_not_fatal(self, caplog):
        """Unmatched patterns only warn; other patterns and platforms still resolve."""
        resolver = make_resolver()

        with caplog.at_level(logging.WARNING):
            result = asyncio.run(resolver.resolve_all({
                "PAPER": ["99.99.99", "1.19.x"],
                "WATERFALL": ["99.99.99"],
            }))

        assert result == {"PAPER": ["1.19.2", "1.19.1"], "WATERFALL": []}
        assert any("99.99.99" in r.getMessage() for r in caplog.records)

    def test_unknown_platform_aborts_batch(self):
        """An unknown platform raises and later platforms are not fetched."""
        paper = StaticSource(["1.19.1"])
        waterfall = StaticSource(["1.20"])
        resolver = make_resolver(paper=paper, waterfall=waterfall)

        with pytest.raises(UnrecognizedPlatformError):
            asyncio.run(resolver.resolve_all({
                "PAPER": ["1.19.1"],
                "FORGE": ["1.0.0"],
                "WATERFALL": ["1.20"],
            }))

        assert paper.fetches == 1
        assert waterfall.fetches == 0

    def test_upstream_failure_propagates(self):
        """Fetch failures are fatal for the resolution."""
        error = UpstreamFetchError("mojang", "https://manifest.test", "HTTP 500", status=500)
        resolver = make_resolver(paper=StaticSource([], error=error))

        with pytest.raises(UpstreamFetchError) as exc_info:
            asyncio.run(resolver.resolve("PAPER", ["1.20"]))
        assert exc_info.value is error

    def test_cache_reused_across_resolutions(self):
        """Two resolutions of the same project trigger one network fetch."""
        url = "https://fill.test/v3/projects/waterfall"
        http = FakeHttp({url: {"versions": {"1.20": ["1.20.4", "1.20"]}}})
        waterfall = ProjectVersionsSource(http, "https://fill.test/v3/projects")
        resolver = VersionResolver({
            Platform.PAPER: PlatformProfile(source=StaticSource([])),
            Platform.WATERFALL: PlatformProfile(source=waterfall, project="waterfall"),
            Platform.VELOCITY: PlatformProfile(source=StaticSource([])),
        })

        async def _run():
            first = await resolver.resolve("WATERFALL", ["1.20.x"])
            second = await resolver.resolve("WATERFALL", ["1.20.4"])
            return first, second

        first, second = asyncio.run(_run())
        assert first == ["1.20.4", "1.20"]
        assert second == ["1.20.4"]
        assert http.calls == [url]

    def test_empty_patterns(self):
        """No patterns resolve to an empty list."""
        resolver = make_resolver()
        assert asyncio.run(resolver.resolve("PAPER", [])) == []


class TestDefaultProfiles:
    """Tests for the default platform wiring."""

    def test_default_dispatch(self):
        """Each platform is wired to its upstream."""
        profiles = build_profiles(FakeHttp({}), Settings())

        assert isinstance(profiles[Platform.PAPER].source, ReleaseManifestSource)
        assert isinstance(profiles[Platform.WATERFALL].source, ProjectVersionsSource)
        assert profiles[Platform.WATERFALL].project == "waterfall"
        assert isinstance(profiles[Platform.VELOCITY].source, AliasTableSource)
        assert profiles[Platform.VELOCITY].aliases is VELOCITY_ALIASES
        assert profiles[Platform.PAPER].aliases is None

    def test_velocity_without_alias_table_uses_fill(self):
        """Without an alias table Velocity resolves against its Fill project."""
        profiles = build_profiles(FakeHttp({}), Settings(aliases={}))

        assert isinstance(profiles[Platform.VELOCITY].source, ProjectVersionsSource)
        assert profiles[Platform.VELOCITY].project == "velocity"
        assert profiles[Platform.VELOCITY].aliases is None

    def test_end_to_end(self):
        """All platforms resolve through the default wiring."""
        settings = Settings(
            manifest_url="https://manifest.test/manifest.json",
            fill_base_url="https://fill.test/v3/projects/",
        )
        http = FakeHttp({
            "https://manifest.test/manifest.json": {
                "versions": [
                    {"id": "1.21", "type": "release", "releaseTime": "2024-06-13T08:24:03+00:00"},
                    {"id": "1.20.6", "type": "release", "releaseTime": "2024-04-29T12:00:00+00:00"},
                    {"id": "1.20.5", "type": "release", "releaseTime": "2024-04-23T12:00:00+00:00"},
                    {"id": "24w14a", "type": "snapshot", "releaseTime": "2024-04-03T12:00:00+00:00"},
                ],
            },
            "https://fill.test/v3/projects/waterfall": {
                "versions": {"1.21": ["1.21"], "1.20": ["1.20", "1.20-rc1"]},
            },
        })
        resolver = build_resolver(http, settings)

        result = asyncio.run(resolver.resolve_all({
            "PAPER": ["1.20.x", "1.21"],
            "VELOCITY": ["3.4.0", "3.1.x"],
            "WATERFALL": ["1.20"],
        }))

        assert result == {
            "PAPER": ["1.21", "1.20.6", "1.20.5"],
            "VELOCITY": ["3.4", "3.1.1", "3.1.0"],
            "WATERFALL": ["1.20"],
        }
        assert len(http.calls) == 2
