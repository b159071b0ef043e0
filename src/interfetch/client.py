"""Fetch client with request/response interceptor pipeline."""

from __future__ import annotations

from collections.abc import Awaitable, Mapping
from typing import Any, Callable, Union
from urllib.parse import unquote

import httpx
from loguru import logger

from .cookies import get_cookies
from .interceptors import InterceptorManager
from .pipeline import run_chain, settle, then
from .resolver import as_dict, join_url, merge_configs, resolve_config, serialize_query
from .signals import AbortController
from .transport import FetchTransport
from .types import FetchConfig, FetchResponse, RequestInfo

ConfigLike = Union[FetchConfig, Mapping[str, Any], None]


class Interceptors:
    """The two interceptor stages of a client."""

    def __init__(self):
        self.request = InterceptorManager("request interceptor")
        self.response = InterceptorManager("response interceptor")


def _with_options(request: RequestInfo, config: ConfigLike, **options: Any) -> tuple[RequestInfo, ConfigLike]:
    if isinstance(request, str):
        return request, {**as_dict(config), **options}
    return {**as_dict(request), **options}, None


def _verb(method: str, raw: bool) -> Callable[..., Awaitable[Any]]:
    async def call(self: Fetch, request: RequestInfo, config: ConfigLike = None) -> Any:
        request, config = _with_options(request, config, method=method)
        if raw:
            return await self.raw(request, config)
        return await self.request(request, config)

    call.__name__ = method if raw else f"{method}_data"
    if raw:
        call.__doc__ = f"Make a {method.upper()} request and return a FetchResponse."
    else:
        call.__doc__ = f"Make a {method.upper()} request and return the decoded body."
    return call


class Fetch:
    """HTTP client that runs every call through its interceptors.

    Request interceptors run newest first, then the request is dispatched
    through the transport, then response interceptors run oldest first.

    Example:
        >>> client = Fetch(FetchConfig(base_url="https://api.example.com"))
        >>> client.on_request(lambda config: config.headers.update({"X-Trace": "1"}))
        >>> users = await client.get_data("/users", {"params": {"page": 1}})
    """

    def __init__(self, config: ConfigLike = None, transport: FetchTransport | None = None):
        self._defaults = FetchConfig.model_validate(as_dict(config))
        self._transport = transport if transport is not None else FetchTransport()
        self.interceptors = Interceptors()

    async def __aenter__(self) -> Fetch:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying transport."""
        await self._transport.aclose()

    # --- dispatch pipeline ---

    async def request(self, request: RequestInfo, config: ConfigLike = None) -> Any:
        """Run one call through the interceptor pipeline.

        Args:
            request: URL string, or a full configuration for the call
            config: Call-site options when ``request`` is a URL

        Returns:
            Decoded body, ``FetchResponse`` (``raw``) or ``httpx.Response``
            (``native``), as transformed by the response interceptors
        """
        config = resolve_config(request, config, self._defaults)

        request_chain = []
        synchronous = True
        for interceptor in self.interceptors.request:
            if interceptor.run_when is not None and not interceptor.run_when(config):
                continue
            synchronous = synchronous and interceptor.synchronous
            request_chain.insert(0, (interceptor.on_fulfilled, interceptor.on_rejected))

        response_chain = [
            (interceptor.on_fulfilled, interceptor.on_rejected)
            for interceptor in self.interceptors.response
        ]

        if not synchronous:
            logger.debug(f"{config.method} {config.url}: asynchronous interceptor chain")
            chain = [*request_chain, (self._dispatch_request, None), *response_chain]
            return await run_chain(config, chain)

        logger.debug(f"{config.method} {config.url}: synchronous interceptor chain")
        for on_fulfilled, on_rejected in request_chain:
            if on_fulfilled is None:
                continue
            try:
                config = await settle(on_fulfilled(config))
            except Exception as e:
                if on_rejected is None:
                    raise
                try:
                    await settle(on_rejected(e))
                except Exception as handler_error:
                    logger.warning(
                        f"Request interceptor error handler failed, dispatching anyway: {handler_error!r}"
                    )
                break

        pending = self._dispatch_request(config)
        return await then(pending, response_chain)

    def _dispatch_request(self, config: FetchConfig) -> Awaitable[Any]:
        controller = AbortController()
        controller.abort_after(config.timeout)

        try:
            config = self._add_xsrf_header(config)

            if config.params is not None or config.query is not None:
                config.query = config.params = serialize_query(
                    config.query if config.query is not None else config.params
                )

            signal = controller.signal
            if config.native:
                call = self._transport.native(config.url, config, signal)
            elif config.raw:
                call = self._transport.raw(config.url, config, signal)
            else:
                call = self._transport.fetch(config.url, config, signal)
        except Exception:
            controller.dispose()
            raise

        return self._await_dispatch(call, controller)

    async def _await_dispatch(self, call: Awaitable[Any], controller: AbortController) -> Any:
        try:
            return await call
        finally:
            controller.dispose()

    def _add_xsrf_header(self, config: FetchConfig) -> FetchConfig:
        name = config.xsrf_cookie_name
        if config.credentials != "include" or not name or not config.xsrf_header_name:
            return config

        host = httpx.URL(join_url(config.base_url, config.url)).host
        cookies = get_cookies(getattr(self._transport, "cookies", None), domain=host)
        if cookies.get(name):
            config.headers[config.xsrf_header_name] = unquote(cookies[name])
        return config

    # --- call shapes ---

    async def raw(self, request: RequestInfo, config: ConfigLike = None) -> FetchResponse:
        """Make a request and return a ``FetchResponse``."""
        return await self.request(*_with_options(request, config, raw=True))

    async def native(self, request: RequestInfo, config: ConfigLike = None) -> httpx.Response:
        """Make a request and return the ``httpx.Response`` untouched."""
        return await self.request(*_with_options(request, config, native=True))

    get = _verb("get", raw=True)
    head = _verb("head", raw=True)
    delete = _verb("delete", raw=True)
    post = _verb("post", raw=True)
    put = _verb("put", raw=True)
    patch = _verb("patch", raw=True)
    options = _verb("options", raw=True)

    get_data = _verb("get", raw=False)
    head_data = _verb("head", raw=False)
    delete_data = _verb("delete", raw=False)
    post_data = _verb("post", raw=False)
    put_data = _verb("put", raw=False)
    patch_data = _verb("patch", raw=False)
    options_data = _verb("options", raw=False)

    # --- defaults ---

    def get_fetch(self) -> FetchTransport:
        return self._transport

    def get_defaults(self) -> FetchConfig:
        return self._defaults

    def get_base_url(self) -> str | None:
        return self._defaults.base_url

    def set_base_url(self, base_url: str | None) -> None:
        self._defaults.base_url = base_url

    def set_header(self, name: str, value: str | None) -> None:
        """Set a default header; a falsy ``value`` removes it."""
        headers = dict(self._defaults.headers)
        if not value:
            headers.pop(name, None)
        else:
            headers[name] = value
        self._defaults.headers = headers

    def set_token(self, token: str | None, type: str | None = None) -> None:
        """Set the default ``Authorization`` header, e.g. ``set_token(t, "Bearer")``."""
        value = None if not token else (f"{type} " if type else "") + token
        self.set_header("Authorization", value)

    # --- interceptor shortcuts ---

    def on_request(self, fn: Callable[[FetchConfig], Any]) -> int:
        """Register ``fn`` as a request transform.

        ``fn`` may mutate the config in place and return nothing.
        """

        async def fulfilled(config: FetchConfig) -> Any:
            return await settle(fn(config)) or config

        return self.interceptors.request.use(fulfilled)

    def on_response(self, fn: Callable[[Any], Any]) -> int:
        """Register ``fn`` as a response transform."""

        async def fulfilled(response: Any) -> Any:
            return await settle(fn(response)) or response

        return self.interceptors.response.use(fulfilled)

    def on_request_error(self, fn: Callable[[BaseException], Any]) -> int:
        """Register ``fn`` as a request error handler.

        A truthy result recovers the chain; otherwise the error is re-raised.
        """
        return self.interceptors.request.use(None, _recover_with(fn))

    def on_response_error(self, fn: Callable[[BaseException], Any]) -> int:
        """Register ``fn`` as a response error handler."""
        return self.interceptors.response.use(None, _recover_with(fn))

    def create(self, config: ConfigLike = None, **overrides: Any) -> Fetch:
        """Return a new client whose defaults extend this client's defaults.

        The new client shares the transport but starts with no interceptors.
        """
        options = {**as_dict(config), **overrides}
        return Fetch(merge_configs(self._defaults.model_dump(), options), self._transport)


def _recover_with(fn: Callable[[BaseException], Any]) -> Callable[[BaseException], Awaitable[Any]]:
    async def rejected(error: BaseException) -> Any:
        result = await settle(fn(error))
        if not result:
            raise error
        return result

    return rejected


def create_instance(config: ConfigLike = None, transport: FetchTransport | None = None) -> Fetch:
    """Create a new ``Fetch`` client."""
    return Fetch(config, transport)
