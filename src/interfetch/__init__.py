"""Async HTTP client with an interceptor pipeline.

interfetch wraps each outbound call in an ordered, mutable chain of
interceptors. Request interceptors can rewrite the configuration before the
request is sent; response interceptors can transform the result or recover
from errors on the way back.

Key Features:
    - ``use``/``eject``/``clear`` registries for request and response stages
    - Per-call ``run_when`` predicates and a fast path for synchronous
      request interceptors
    - Deep-merged instance defaults and ``create()`` to fork clients
    - Per-request timeout through an abort signal
    - XSRF header injection from the cookie jar
    - httpx transport with decoded, raw and native call shapes

Quick Start:
    Basic usage example::

        from interfetch import FetchConfig, create_instance

        client = create_instance(FetchConfig(base_url="https://api.example.com", timeout=10))
        client.set_token(token, "Bearer")

        def add_trace(config):
            config.headers["X-Trace-Id"] = new_trace_id()

        client.on_request(add_trace)
        users = await client.get_data("/users", {"params": {"page": 1}})

    Full interceptor contract::

        handle = client.interceptors.request.use(
            add_signature,
            on_signature_error,
            synchronous=True,
            run_when=lambda config: config.method == "POST",
        )
        client.interceptors.request.eject(handle)

Logging:
    The package logs through loguru and is disabled by default. Enable it
    with ``logger.enable("interfetch")``.
"""

from loguru import logger

__version__ = "0.1.0"

from .client import Fetch, Interceptors, create_instance
from .cookies import get_cookie, get_cookies
from .errors import FetchAbortError, FetchError, FetchTimeoutError
from .interceptors import InterceptorEntry, InterceptorManager
from .resolver import clean_params, merge_configs, resolve_config, serialize_query
from .settings import FetchSettings
from .signals import AbortController, AbortSignal
from .transport import FetchTransport
from .types import FetchConfig, FetchResponse, RequestInfo

__all__ = [
    # Client
    "Fetch",
    "Interceptors",
    "create_instance",
    # Configuration
    "FetchConfig",
    "FetchSettings",
    "RequestInfo",
    "clean_params",
    "merge_configs",
    "resolve_config",
    "serialize_query",
    # Interceptors
    "InterceptorEntry",
    "InterceptorManager",
    # Transport
    "AbortController",
    "AbortSignal",
    "FetchResponse",
    "FetchTransport",
    "get_cookie",
    "get_cookies",
    # Errors
    "FetchAbortError",
    "FetchError",
    "FetchTimeoutError",
]

logger.disable("interfetch")  # Disabled by default, users can enable with logger.enable("interfetch")
