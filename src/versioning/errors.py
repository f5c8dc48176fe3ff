"""Exceptions raised by version resolution."""

from __future__ import annotations

from typing import Optional


class ResolutionError(Exception):
    """Base class for fatal resolution failures."""


class ConfigError(ResolutionError):
    """Configuration or input data has an invalid shape."""


class UnrecognizedPlatformError(ResolutionError):
    """A platform name outside the supported set was requested."""

    def __init__(self, platform: str):
        self.platform = platform
        super().__init__(f"Invalid platform dependency name: {platform!r}")


class UpstreamFetchError(ResolutionError):
    """An upstream version list could not be fetched.

    Args:
        context: Upstream identity (e.g. "mojang" or "fill:waterfall").
        url: Requested URL.
        cause: Human-readable root cause.
        status: HTTP status when the upstream answered with a non-success code.
    """

    def __init__(self, context: str, url: str, cause: str, status: Optional[int] = None):
        self.context = context
        self.url = url
        self.cause = cause
        self.status = status
        super().__init__(f"Could not fetch {context} versions: {cause}")
