"""
Base client for all external HTTP collaborators.

Provides: lazy aiohttp session management, structured request logging,
and a single error type for every failure mode. There are no retries:
a failed request surfaces as ``DataSourceError`` and the caller decides
whether a partial result is acceptable.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Any

import aiohttp
from pydantic import BaseModel

from publication_watch.constants import DEFAULT_TIMEOUT

logger = logging.getLogger("publication_watch.data_sources")


# ---------------------------------------------------------------------------
# Request context (for structured logging)
# ---------------------------------------------------------------------------


class RequestContext(BaseModel):
    """Metadata attached to every outgoing request for logging."""

    source: str  # e.g. "orcid", "pubmed", "github"
    method: str  # e.g. "search", "create_issue"
    params: dict[str, Any] = {}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class DataSourceError(Exception):
    """Base exception for data source failures."""

    def __init__(self, source: str, message: str, status_code: int | None = None):
        self.source = source
        self.status_code = status_code
        super().__init__(f"[{source}] {message}")


# ---------------------------------------------------------------------------
# Base client
# ---------------------------------------------------------------------------


class BaseClient(ABC):
    """
    Abstract base for the ORCID, PubMed, and GitHub clients.

    Subclasses implement `_source_name` and their own typed methods that
    call `_rest_get()` or `_rest_post()`.
    """

    def __init__(self, timeout_seconds: float = DEFAULT_TIMEOUT):
        self.timeout_seconds = timeout_seconds
        self._session: aiohttp.ClientSession | None = None

    @property
    @abstractmethod
    def _source_name(self) -> str:
        """Identifier for this data source, e.g. 'pubmed'."""
        ...

    # -- Session management --------------------------------------------------

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()

    # -- Core request ---------------------------------------------------------

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        context: RequestContext | None = None,
    ) -> Any:
        """
        Make a single HTTP request and return the decoded JSON body.

        Parameters
        ----------
        method : str
            HTTP method — "GET" or "POST".
        url : str
            Full URL.
        params : dict, optional
            Query string parameters.
        json_body : dict, optional
            JSON body (for POST).
        headers : dict, optional
            Additional HTTP headers.
        context : RequestContext, optional
            Logging context.

        Raises
        ------
        DataSourceError
            On HTTP status >= 400, timeouts, and connection errors.
        """
        ctx = context or RequestContext(source=self._source_name, method="unknown")
        start = time.monotonic()

        try:
            session = await self._get_session()
            logger.info("Request [%s.%s] url=%s", ctx.source, ctx.method, url)

            if method.upper() == "GET":
                resp = await session.get(url, params=params, headers=headers)
            else:
                resp = await session.post(
                    url, json=json_body, params=params, headers=headers
                )

            if resp.status >= 400:
                body = await resp.text()
                raise DataSourceError(
                    ctx.source,
                    f"HTTP {resp.status}: {body[:500]}",
                    status_code=resp.status,
                )

            data = await resp.json()

        except asyncio.TimeoutError:
            elapsed = time.monotonic() - start
            raise DataSourceError(ctx.source, f"Timeout after {elapsed:.1f}s")

        except aiohttp.ClientError as e:
            raise DataSourceError(ctx.source, f"Connection error: {e}")

        except ValueError as e:
            raise DataSourceError(ctx.source, f"Invalid JSON response: {e}")

        logger.info(
            "Success [%s.%s] elapsed=%.2fs",
            ctx.source,
            ctx.method,
            time.monotonic() - start,
        )
        return data

    # -- Convenience methods for subclasses ----------------------------------

    async def _rest_get(
        self,
        url: str,
        params: dict[str, Any],
        *,
        headers: dict[str, str] | None = None,
        context: RequestContext | None = None,
    ) -> Any:
        """Convenience wrapper for REST GET requests (ORCID, PubMed)."""
        return await self._request(
            "GET", url, params=params, headers=headers, context=context
        )

    async def _rest_post(
        self,
        url: str,
        json_body: dict[str, Any],
        *,
        headers: dict[str, str] | None = None,
        context: RequestContext | None = None,
    ) -> Any:
        """Convenience wrapper for JSON POST requests (GitHub issues)."""
        return await self._request(
            "POST", url, json_body=json_body, headers=headers, context=context
        )
