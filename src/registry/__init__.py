"""Upstream version sources (Mojang manifest, PaperMC Fill) and their wiring."""

from .http import HttpSession, fetch_json
from .sources import AliasTableSource, CandidateSource, ProjectVersionsSource, ReleaseManifestSource
from .profiles import build_profiles, build_resolver

__all__ = [
    "HttpSession",
    "fetch_json",
    "AliasTableSource",
    "CandidateSource",
    "ProjectVersionsSource",
    "ReleaseManifestSource",
    "build_profiles",
    "build_resolver",
]
