"""Shared async HTTP helpers for upstream version sources.

Encapsulates request/timeout error handling so each source only deals with
decoded JSON or a single :class:`UpstreamFetchError`.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import aiohttp

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer
from versioning.errors import UpstreamFetchError

logger = logging.getLogger(__name__)


class HttpSession:
    """Owns the aiohttp session used for all upstream fetches."""

    def __init__(self, timeout: Optional[float] = None, user_agent: Optional[str] = None):
        """Initialize the session holder.

        Args:
            timeout: Total request timeout in seconds.
            user_agent: User-Agent header sent upstream.
        """
        self._timeout = aiohttp.ClientTimeout(
            total=timeout if timeout is not None else Constants.REQUEST_TIMEOUT
        )
        self._headers = {
            "User-Agent": user_agent or Constants.USER_AGENT,
            "Accept": "application/json",
        }
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """The started client session."""
        if self._session is None:
            raise RuntimeError("HttpSession is not started")
        return self._session

    async def start(self) -> None:
        """Start the HTTP session."""
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self._timeout, headers=self._headers)

    async def stop(self) -> None:
        """Stop the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def get_json(self, url: str, *, context: str) -> Any:
        """GET ``url`` and decode its JSON body; see :func:`fetch_json`.

        Raises:
            RuntimeError: If the session has not been started.
        """
        return await fetch_json(self.session, url, context=context)

    async def __aenter__(self) -> "HttpSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()


async def fetch_json(session: aiohttp.ClientSession, url: str, *, context: str) -> Any:
    """Perform a GET request and decode the JSON response.

    Args:
        session: Client session to issue the request with.
        url: Target URL.
        context: Upstream identity used in logs and errors (e.g. "mojang").

    Returns:
        Decoded JSON document.

    Raises:
        UpstreamFetchError: On transport failure, timeout, non-2xx status or
            an undecodable body. Nothing is retried.
    """
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context,
                ),
            )
        try:
            async with session.get(url) as response:
                if response.status < 200 or response.status >= 300:
                    raise UpstreamFetchError(
                        context,
                        url,
                        f"HTTP {response.status} {response.reason or ''}".strip(),
                        status=response.status,
                    )
                body = await response.text()
        except UpstreamFetchError:
            raise
        except aiohttp.ClientError as exc:
            raise UpstreamFetchError(context, url, f"connection error: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise UpstreamFetchError(context, url, "request timed out") from exc

        try:
            data = json.loads(body)
        except ValueError as exc:
            raise UpstreamFetchError(context, url, f"invalid JSON response: {exc}") from exc

        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response ok",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    outcome="success",
                    status_code=response.status,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context,
                ),
            )
        return data


def ensure_mapping(data: Any, *, context: str, url: str) -> Dict[str, Any]:
    """Return ``data`` if it is a JSON object, else raise UpstreamFetchError."""
    if not isinstance(data, dict):
        raise UpstreamFetchError(context, url, "unexpected response document shape")
    return data
