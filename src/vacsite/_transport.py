"""HTTP transport for the hosted REST backend."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

import aiohttp

from vacsite._constants import USER_AGENT
from vacsite._redact import redact_for_log
from vacsite.config import SiteConfig
from vacsite.exceptions import BackendTransportError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RestResponse:
    """Decoded backend reply. ``data`` is ``None`` for empty bodies."""

    status: int
    data: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    """Structural transport interface used by the endpoint modules.

    Tests pass in-memory doubles; production uses :class:`RestTransport`.
    """

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Any = None,
        content: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        access_token: str | None = None,
    ) -> RestResponse:
        ...


class RestTransport:
    """aiohttp transport that adds the backend's key headers and decodes JSON."""

    def __init__(self, config: SiteConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _build_headers(self, extra: Mapping[str, str] | None, access_token: str | None) -> dict[str, str]:
        headers: dict[str, str] = {
            "accept": "application/json",
            "content-type": "application/json",
            "user-agent": USER_AGENT,
            "apikey": self._config.anon_key,
            "authorization": f"Bearer {access_token or self._config.anon_key}",
        }
        if extra:
            headers.update({k.lower(): v for k, v in extra.items()})
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Any = None,
        content: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        access_token: str | None = None,
    ) -> RestResponse:
        """Send one request and decode the JSON reply.

        *content* sends raw bytes instead of a JSON body (file uploads);
        pass the matching ``content-type`` in *headers*.

        Non-2xx replies with a JSON body are returned as-is so the endpoint
        modules can map backend error codes. Network failures, timeouts and
        non-JSON bodies raise :class:`BackendTransportError`.
        """
        url = f"{self._config.base_url}{path}"
        body: str | bytes | None = content
        if body is None and json_body is not None:
            body = json.dumps(json_body)
        request_headers = self._build_headers(headers, access_token)

        _logger.debug("%s %s params=%s", method, url, dict(params or {}))
        if self._config.api_trace_enabled:
            _logger.debug("request headers=%s body=%s", redact_for_log(request_headers), redact_for_log(json_body))

        try:
            async with self._http.request(
                method,
                url,
                params=dict(params or {}),
                data=body,
                headers=request_headers,
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                status = resp.status
                resp_headers = {k.lower(): v for k, v in resp.headers.items()}
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise BackendTransportError(
                f"{method} {path} failed: {exc!r}",
                table=path,
            ) from exc

        if not text.strip():
            if status >= 400:
                raise BackendTransportError(
                    f"HTTP {status} from {method} {path} with empty body",
                    status_code=status,
                    table=path,
                )
            return RestResponse(status=status, data=None, headers=resp_headers)

        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise BackendTransportError(
                f"Invalid JSON from {method} {path} (HTTP {status}): {text[:200]}",
                status_code=status,
                table=path,
            ) from exc

        if self._config.api_trace_enabled:
            _logger.debug("response status=%s body=%s", status, redact_for_log(data))

        if status >= 500:
            raise BackendTransportError(
                f"HTTP {status} from {method} {path}: {text[:200]}",
                status_code=status,
                table=path,
            )
        return RestResponse(status=status, data=data, headers=resp_headers)
