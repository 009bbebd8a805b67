"""Thin aiohttp wrapper around the marketplace REST API.

Transport problems (connection refused, timeouts, non-JSON bodies) are
turned into GatewayUnavailableError here; status-code meaning is left
to each adapter, because "400" means different things per endpoint.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any

import aiohttp

from storefront.domain.exceptions import GatewayUnavailableError

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Could not reach the store. Please try again."


@dataclass(frozen=True)
class ApiResponse:
    status: int
    data: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def is_server_error(self) -> bool:
        return self.status >= 500

    @property
    def message(self) -> str | None:
        if isinstance(self.data, dict):
            message = self.data.get("message") or self.data.get("error")
            return str(message) if message else None
        return None


class ApiClient:
    """One aiohttp session per client; use as an async context manager."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> ApiClient:
        await self.open()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def open(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            headers = {"Accept": "application/json"}
            if self._token:
                headers["Authorization"] = f"Bearer {self._token}"
            self._session = aiohttp.ClientSession(headers=headers, timeout=self._timeout)
        return self._session

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def get(self, path: str) -> ApiResponse:
        return await self.request("GET", path)

    async def post(self, path: str, payload: dict[str, Any]) -> ApiResponse:
        return await self.request("POST", path, payload)

    async def request(
        self, method: str, path: str, payload: dict[str, Any] | None = None
    ) -> ApiResponse:
        session = await self.open()
        url = f"{self._base_url}/{path.lstrip('/')}"
        try:
            async with session.request(method, url, json=payload) as resp:
                data = await self._read_body(resp)
                logger.debug("%s %s -> %s", method, url, resp.status)
                return ApiResponse(status=resp.status, data=data)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise GatewayUnavailableError(GENERIC_FAILURE) from exc

    @staticmethod
    async def _read_body(resp: aiohttp.ClientResponse) -> Any:
        text = await resp.text(errors="replace")
        if not text:
            return None
        try:
            return json.loads(text)
        except ValueError:
            # Non-JSON bodies still carry a readable error message.
            return {"message": text.strip()[:200]}
