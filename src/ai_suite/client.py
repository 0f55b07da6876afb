"""Async HTTP transport that drives adapters over httpx."""

from __future__ import annotations

from collections.abc import AsyncGenerator
import json
import logging
import time
from typing import Any

import httpx

from .exceptions import AiSuiteError, ProviderConnectionError, ProviderError
from .providers.base import ProviderAdapter, is_success

LOGGER = logging.getLogger(__name__)


def _sse_payload(line: str) -> str | None:
    """Return the data portion of one server-sent event line, if any."""
    if not line.startswith("data:"):
        return None
    payload = line[len("data:") :].strip()
    if not payload or payload == "[DONE]":
        return None
    return payload


class ProviderClient:
    """Perform request/response, streaming and upload calls for any adapter.

    No retries and no cancellation: one call runs to completion or failure.
    """

    def __init__(
        self,
        timeout: float = 120.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    def _map_exception(self, adapter: ProviderAdapter, exc: Exception) -> AiSuiteError:
        if isinstance(exc, AiSuiteError):
            return exc
        if isinstance(exc, httpx.HTTPError):
            return ProviderConnectionError(
                f"Unable to reach {adapter.provider.label} at {adapter.base_url}: {exc}"
            )
        return ProviderConnectionError(f"{adapter.provider.label} request failed: {exc}")

    async def complete(
        self, adapter: ProviderAdapter, body: dict[str, Any], credential: str
    ) -> str:
        """POST ``body`` and return the parsed reply text."""
        started = time.monotonic()
        LOGGER.info(
            "client.request.start",
            extra={
                "event": "client.request.start",
                "provider": adapter.provider.value,
                "model": body.get("model", ""),
            },
        )
        try:
            response = await self._client.post(
                adapter.endpoint,
                json=body,
                headers=adapter.headers(credential),
                timeout=adapter.timeout,
            )
        except Exception as exc:  # noqa: BLE001 - transport can fail in many ways.
            raise self._map_exception(adapter, exc) from exc

        text = adapter.parse_response(response.status_code, response.text)
        LOGGER.info(
            "client.request.complete",
            extra={
                "event": "client.request.complete",
                "provider": adapter.provider.value,
                "status": response.status_code,
                "elapsed_ms": int((time.monotonic() - started) * 1000),
            },
        )
        return text

    async def stream(
        self, adapter: ProviderAdapter, body: dict[str, Any], credential: str
    ) -> AsyncGenerator[str, None]:
        """POST a streaming request and yield text tokens in arrival order."""
        payload = dict(body)
        payload["stream"] = True
        try:
            async with self._client.stream(
                "POST",
                adapter.endpoint,
                json=payload,
                headers=adapter.headers(credential),
                timeout=adapter.timeout,
            ) as response:
                if not is_success(response.status_code):
                    await response.aread()
                    raise ProviderError(response.status_code, response.text)
                async for line in response.aiter_lines():
                    data = _sse_payload(line)
                    if data is None:
                        continue
                    try:
                        event = json.loads(data)
                    except json.JSONDecodeError:
                        LOGGER.debug(
                            "client.stream.undecodable",
                            extra={"event": "client.stream.undecodable"},
                        )
                        continue
                    if not isinstance(event, dict):
                        continue
                    token = adapter.parse_stream_event(event)
                    if token:
                        yield token
        except AiSuiteError:
            raise
        except Exception as exc:  # noqa: BLE001 - transport can fail in many ways.
            raise self._map_exception(adapter, exc) from exc

    async def upload(
        self, adapter: ProviderAdapter, name: str, data: bytes, credential: str
    ) -> str:
        """Upload one file as multipart form data and return its remote id."""
        LOGGER.info(
            "client.upload.start",
            extra={
                "event": "client.upload.start",
                "provider": adapter.provider.value,
                "file": name,
                "bytes": len(data),
            },
        )
        try:
            response = await self._client.post(
                adapter.upload_endpoint,
                data=adapter.upload_fields(),
                files={"file": (name, data)},
                headers=adapter.headers(credential),
                timeout=adapter.timeout,
            )
        except Exception as exc:  # noqa: BLE001 - transport can fail in many ways.
            raise self._map_exception(adapter, exc) from exc
        return adapter.parse_upload(response.status_code, response.text)
