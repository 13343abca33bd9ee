"""HTTP transport used by the client."""

from __future__ import annotations

import asyncio
import contextvars
import logging
import time
import uuid
from typing import Any, Protocol

import aiohttp

from .errors import RemoteError, remote_error

logger = logging.getLogger(__name__)

request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("request_id", default=None)


def get_request_id() -> str | None:
    return request_id_var.get()


class Transport(Protocol):
    async def get(self, url: str, *, headers: dict[str, str]) -> dict[str, Any]:
        """GET ``url``; returns the JSON body or raises ``RemoteError``."""

    async def put(
        self, url: str, body: dict[str, Any] | None = None, *, headers: dict[str, str]
    ) -> dict[str, Any]:
        """PUT ``body`` (``None`` sends no body)."""

    async def post(
        self, url: str, body: dict[str, Any] | None = None, *, headers: dict[str, str]
    ) -> dict[str, Any]:
        """POST ``body``."""

    async def close(self) -> None:
        ...


class AiohttpTransport:
    """Transport backed by a single lazily created ``aiohttp.ClientSession``.

    Headers are sent exactly as given; no session-level auth is configured.
    """

    def __init__(self, timeout: float = 30):
        self.timeout = timeout
        self._session: aiohttp.ClientSession | None = None
        self._session_lock = asyncio.Lock()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create an aiohttp session."""
        async with self._session_lock:
            if self._session is None or self._session.closed:
                timeout = aiohttp.ClientTimeout(total=self.timeout)
                self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        """Close the client session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def _request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        session = await self._get_session()
        token = request_id_var.set(str(uuid.uuid4())[:8])
        start = time.perf_counter()
        try:
            async with session.request(method, url, json=json, headers=headers) as response:
                try:
                    data = await response.json(content_type=None)
                except ValueError:
                    logger.warning("Non-JSON response body from %s %s", method, url)
                    data = None
                if data is None:
                    data = {}
                fields = {
                    "method": method,
                    "url": url,
                    "status": response.status,
                    "duration_ms": round((time.perf_counter() - start) * 1000, 1),
                }
                logger.debug(
                    "%s %s -> %s", method, url, response.status, extra={"extra_fields": fields}
                )
                if response.status >= 400:
                    error = remote_error(response.status, url, data)
                    logger.warning(
                        "%s %s failed with %s: %s",
                        method,
                        url,
                        response.status,
                        error.error,
                        extra={"extra_fields": {**fields, "error": error.error}},
                    )
                    raise error
                return data
        except asyncio.TimeoutError as e:
            logger.error(
                f"Request timed out after {self.timeout}s for {method} {url}",
                extra={"extra_fields": {"method": method, "url": url}},
            )
            reason = f"Request timed out after {self.timeout}s"
            raise RemoteError(reason, 504, "timeout", {"error": "timeout", "reason": reason}) from e
        except aiohttp.ClientError as e:
            logger.error(
                f"Request error for {method} {url}: {e}",
                extra={"extra_fields": {"method": method, "url": url}},
            )
            raise RemoteError(
                str(e), 503, "connection_error", {"error": "connection_error", "reason": str(e)}
            ) from e
        finally:
            request_id_var.reset(token)

    async def get(self, url: str, *, headers: dict[str, str]) -> dict[str, Any]:
        return await self._request("GET", url, headers)

    async def put(
        self, url: str, body: dict[str, Any] | None = None, *, headers: dict[str, str]
    ) -> dict[str, Any]:
        return await self._request("PUT", url, headers, json=body)

    async def post(
        self, url: str, body: dict[str, Any] | None = None, *, headers: dict[str, str]
    ) -> dict[str, Any]:
        return await self._request("POST", url, headers, json=body)
