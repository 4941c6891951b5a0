"""HTTP client for posting build-status payloads to webhook targets."""

from __future__ import annotations

import logging

import httpx

from src.config import settings

logger = logging.getLogger(__name__)


class WebhookClient:
    """POST JSON bodies to webhook endpoints.

    Non-2xx responses are returned, not raised; the caller decides what a
    failed delivery means.
    """

    def __init__(
        self,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.webhook_timeout_seconds,
            transport=transport,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )

    async def post(self, url: str, payload: dict) -> httpx.Response:
        resp = await self._client.post(url, json=payload)
        logger.debug("POST %s -> %d", url, resp.status_code)
        return resp

    async def close(self) -> None:
        await self._client.aclose()
