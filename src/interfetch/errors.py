"""Exception hierarchy for failed fetch calls.

Only failures produced by the terminal dispatch step are wrapped in these
types. Errors raised by interceptors travel through the pipeline unchanged.

Exception Hierarchy:
    FetchError: Network failure or non-success status
    └── FetchAbortError: Call aborted through its signal
        └── FetchTimeoutError: Call aborted by the timeout timer

Example:
    >>> try:
    ...     await client.get_data("/users")
    ... except FetchTimeoutError:
    ...     print("too slow")
    ... except FetchError as e:
    ...     print(e.status, e.data)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import httpx


class FetchError(Exception):
    """Raised when the transport cannot produce a successful response.

    Attributes:
        request: The ``httpx.Request`` that was sent, when one was built
        response: The ``httpx.Response``, or None when nothing came back
        data: Decoded response body, when there is one
        options: The ``FetchConfig`` the call was dispatched with
    """

    def __init__(
        self,
        message: str,
        *,
        request: httpx.Request | None = None,
        response: httpx.Response | None = None,
        data: Any = None,
        options: Any = None,
    ):
        super().__init__(message)
        self.request = request
        self.response = response
        self.data = data
        self.options = options

    @property
    def status(self) -> int | None:
        return self.response.status_code if self.response is not None else None

    @property
    def status_text(self) -> str | None:
        return self.response.reason_phrase if self.response is not None else None

    @classmethod
    def from_response(
        cls,
        method: str,
        url: str,
        response: httpx.Response,
        data: Any = None,
        options: Any = None,
    ) -> FetchError:
        message = f'[{method}] "{url}": {response.status_code} {response.reason_phrase}'
        return cls(message, request=response.request, response=response, data=data, options=options)

    @classmethod
    def from_exception(
        cls,
        method: str,
        url: str,
        error: BaseException,
        request: httpx.Request | None = None,
        options: Any = None,
    ) -> FetchError:
        message = f'[{method}] "{url}": <no response> {error}'
        return cls(message, request=request, options=options)


class FetchAbortError(FetchError):
    """Raised when a call is aborted through its ``AbortSignal``."""

    pass


class FetchTimeoutError(FetchAbortError):
    """Raised when a call exceeds its configured timeout."""

    def __init__(self, timeout: float, **kwargs: Any):
        super().__init__(f"Request timed out after {timeout}s", **kwargs)
        self.timeout = timeout
