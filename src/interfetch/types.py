"""Type definitions for interfetch.

This module defines the configuration model that flows through the
interceptor pipeline, the response wrapper returned by raw calls, and the
type aliases used for interceptor functions.

Classes:
    FetchConfig: Mutable per-call configuration (also used for defaults)
    FetchResponse: Decoded response plus status and headers

Type Aliases:
    RequestInfo: A URL string or a full configuration
    OnFulfilled: Interceptor transform function
    OnRejected: Interceptor error handler
    RunWhen: Predicate deciding whether a request interceptor applies

Example:
    Building defaults for a client::

        from interfetch.types import FetchConfig

        config = FetchConfig(
            base_url="https://api.example.com",
            headers={"Accept": "application/json"},
            timeout=10.0,
        )
"""

from __future__ import annotations

from collections.abc import Awaitable, Mapping
from dataclasses import dataclass
from typing import Any, Callable, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator


class FetchConfig(BaseModel):
    """Configuration for a single call.

    Instances are created per call by merging the client's defaults with the
    call-site values, then mutated in place by request interceptors before
    the terminal dispatch consumes them. Keys that are not declared below are
    kept as extras and forwarded to httpx when it understands them
    (``data``, ``files``, ``json``).

    Attributes:
        url: Target URL, absolute or relative to ``base_url``
        method: HTTP method, uppercased during resolution (default: GET)
        base_url: Prefix for relative URLs, dropped for absolute ones
        headers: Request headers; values are converted to strings and
            None values are dropped
        params: Query parameters (alias of ``query``)
        query: Query parameters
        body: Request body; mappings and lists are sent as JSON
        timeout: Seconds before the call is aborted (None: never)
        raw: Return a ``FetchResponse`` instead of the decoded body
        native: Return the untouched ``httpx.Response``
        credentials: "include", "same-origin" or "omit"
        xsrf_cookie_name: Cookie holding the XSRF token
        xsrf_header_name: Header the XSRF token is copied to
        response_type: "json", "text" or "bytes" (None: from content type)
        ignore_response_error: Do not raise for 4xx/5xx responses
    """

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    url: str | None = None
    method: str | None = None
    base_url: str | None = None
    headers: dict[str, str] = Field(default_factory=dict)
    params: dict[str, Any] | None = None
    query: dict[str, Any] | None = None
    body: Any = None
    timeout: float | None = None
    raw: bool = False
    native: bool = False
    credentials: str | None = None
    xsrf_cookie_name: str | None = "XSRF-TOKEN"
    xsrf_header_name: str | None = "X-XSRF-TOKEN"
    response_type: str | None = None
    ignore_response_error: bool = False

    @field_validator("headers", mode="before")
    @classmethod
    def _stringify_headers(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return {str(k): str(v) for k, v in value.items() if v is not None}
        return value

    def to_dict(self) -> dict[str, Any]:
        """Return the explicitly set keys, extras included."""
        return self.model_dump(exclude_unset=True)


@dataclass
class FetchResponse:
    """Response returned by raw calls.

    Attributes:
        status: HTTP status code
        status_text: Reason phrase
        headers: Response headers
        url: Final URL of the request
        data: Decoded body (see ``FetchConfig.response_type``)
        native: The underlying ``httpx.Response``
    """

    status: int
    status_text: str
    headers: httpx.Headers
    url: str
    data: Any
    native: httpx.Response

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


RequestInfo = Union[str, FetchConfig, Mapping[str, Any]]
"""A bare URL or a full call configuration."""

OnFulfilled = Callable[[Any], Union[Any, Awaitable[Any]]]
"""Transform for a config (request stage) or a response (response stage)."""

OnRejected = Callable[[BaseException], Union[Any, Awaitable[Any]]]
"""Error handler; its return value recovers the chain, raising re-rejects."""

RunWhen = Callable[[FetchConfig], bool]
"""Predicate evaluated at dispatch time for request interceptors."""
