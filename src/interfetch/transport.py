"""Transport adapter on top of ``httpx.AsyncClient``.

``FetchTransport`` performs the actual network call for a fully resolved
``FetchConfig``. It offers three call shapes:

    - ``fetch``: the decoded response body
    - ``raw``: a ``FetchResponse`` with status, headers and decoded body
    - ``native``: the untouched ``httpx.Response``

All three take an optional ``AbortSignal``; when it fires the in-flight send
is cancelled and the signal's reason is raised.

Example:
    Sharing a preconfigured httpx client::

        transport = FetchTransport(httpx.AsyncClient(http2=True))
        client = create_instance(FetchConfig(base_url=url), transport)
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Mapping
from typing import Any

import httpx
from loguru import logger

from .errors import FetchError
from .resolver import join_url
from .signals import AbortSignal
from .types import FetchConfig, FetchResponse

_JSON_CONTENT_TYPE = re.compile(r"^application/(?:[\w!#$%&*.^`~-]*\+)?json(;.+)?$", re.IGNORECASE)

_TEXT_CONTENT_TYPES = ("text/", "image/svg", "application/xml", "application/xhtml", "application/html")

# Extra config keys passed straight to httpx.AsyncClient.build_request
_FORWARDED_KEYS = ("json", "data", "files", "extensions")


class FetchTransport:
    """Default transport implementation using httpx."""

    def __init__(self, client: httpx.AsyncClient | None = None, **client_kwargs: Any):
        """Wrap ``client`` or create a new ``httpx.AsyncClient``.

        Args:
            client: Existing client to use
            **client_kwargs: Passed to ``httpx.AsyncClient`` when no client is
                given. The pipeline owns timeouts, so httpx timeouts default
                to None here.
        """
        if client is None:
            client_kwargs.setdefault("timeout", None)
            client = httpx.AsyncClient(**client_kwargs)
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    @property
    def cookies(self) -> httpx.Cookies:
        return self._client.cookies

    async def __aenter__(self):
        await self._client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self._client.__aexit__(exc_type, exc_val, exc_tb)

    async def aclose(self) -> None:
        await self._client.aclose()

    def build_request(self, url: str, config: FetchConfig) -> httpx.Request:
        """Translate a ``FetchConfig`` into an ``httpx.Request``."""
        kwargs: dict[str, Any] = {}
        extras = config.model_extra or {}
        for key in _FORWARDED_KEYS:
            if extras.get(key) is not None:
                kwargs[key] = extras[key]

        body = config.body
        if body is not None:
            if isinstance(body, (str, bytes)):
                kwargs["content"] = body
            elif isinstance(body, (Mapping, list, tuple)):
                kwargs["json"] = body
            else:
                kwargs["content"] = body

        query = config.query if config.query is not None else config.params

        return self._client.build_request(
            method=config.method or "GET",
            url=join_url(config.base_url, url),
            params=query,
            headers=config.headers,
            **kwargs,
        )

    async def native(
        self, url: str, config: FetchConfig, signal: AbortSignal | None = None
    ) -> httpx.Response:
        """Send the request and return the ``httpx.Response`` as is."""
        request = self.build_request(url, config)
        logger.debug(f"{request.method} {request.url}")
        try:
            return await self._send(request, signal)
        except FetchError as e:
            e.request = request
            e.options = config
            raise
        except httpx.TransportError as e:
            raise FetchError.from_exception(
                request.method, str(request.url), e, request=request, options=config
            ) from e

    async def raw(
        self, url: str, config: FetchConfig, signal: AbortSignal | None = None
    ) -> FetchResponse:
        """Send the request and return a decoded ``FetchResponse``.

        Raises:
            FetchError: For 4xx/5xx responses unless ``ignore_response_error``
                or when ``response_type="json"`` and the body is not JSON
        """
        response = await self.native(url, config, signal)
        try:
            data = None if response.request.method == "HEAD" else self._decode(response, config.response_type)
        except ValueError as e:
            raise FetchError(
                f'[{response.request.method}] "{response.request.url}": invalid JSON body: {e}',
                request=response.request,
                response=response,
                data=response.text,
                options=config,
            ) from e

        if response.status_code >= 400 and not config.ignore_response_error:
            raise FetchError.from_response(
                response.request.method, str(response.request.url), response, data, config
            )

        return FetchResponse(
            status=response.status_code,
            status_text=response.reason_phrase,
            headers=response.headers,
            url=str(response.url),
            data=data,
            native=response,
        )

    async def fetch(self, url: str, config: FetchConfig, signal: AbortSignal | None = None) -> Any:
        """Send the request and return only the decoded body."""
        response = await self.raw(url, config, signal)
        return response.data

    async def _send(self, request: httpx.Request, signal: AbortSignal | None) -> httpx.Response:
        if signal is None:
            return await self._client.send(request)

        signal.raise_if_aborted()
        send = asyncio.ensure_future(self._client.send(request))
        aborted = asyncio.ensure_future(signal.wait())
        try:
            done, _ = await asyncio.wait({send, aborted}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            send.cancel()
            aborted.cancel()
            raise

        aborted.cancel()
        if send in done:
            return send.result()

        send.cancel()
        await asyncio.gather(send, return_exceptions=True)
        raise signal.reason

    def _decode(self, response: httpx.Response, response_type: str | None) -> Any:
        if response_type == "bytes":
            return response.content
        if response_type == "text":
            return response.text
        if not response.content:
            return None
        if response_type == "json":
            return response.json()

        content_type = response.headers.get("content-type", "")
        if not content_type or _JSON_CONTENT_TYPE.match(content_type):
            try:
                return response.json()
            except ValueError:
                return response.text
        if content_type.lower().startswith(_TEXT_CONTENT_TYPES):
            return response.text
        return response.content
