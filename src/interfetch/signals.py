"""Per-request cancellation.

An ``AbortController`` is created for every terminal dispatch. The transport
watches its ``signal`` and cancels the in-flight send once it fires.
"""

from __future__ import annotations

import asyncio

from loguru import logger

from .errors import FetchAbortError, FetchTimeoutError


class AbortSignal:
    """Read side of an ``AbortController``."""

    def __init__(self):
        self._event = asyncio.Event()
        self.reason: BaseException | None = None

    @property
    def aborted(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> BaseException | None:
        """Suspend until the signal fires and return the abort reason."""
        await self._event.wait()
        return self.reason

    def raise_if_aborted(self) -> None:
        if self.aborted:
            raise self.reason

    def _fire(self, reason: BaseException) -> None:
        if self.aborted:
            return
        self.reason = reason
        self._event.set()


class AbortController:
    """Owns an ``AbortSignal`` and an optional timeout timer.

    Example:
        >>> controller = AbortController()
        >>> controller.abort_after(5.0)
        >>> await transport.fetch(url, config, controller.signal)
        >>> controller.dispose()
    """

    def __init__(self):
        self.signal = AbortSignal()
        self._timer: asyncio.TimerHandle | None = None

    def abort(self, reason: BaseException | None = None) -> None:
        """Fire the signal; later calls keep the first reason."""
        self.signal._fire(reason if reason is not None else FetchAbortError("Request aborted"))

    def abort_after(self, timeout: float | None) -> None:
        """Abort with ``FetchTimeoutError`` after ``timeout`` seconds.

        Must be called with a running event loop. ``None`` never aborts.
        """
        if timeout is None:
            return
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(timeout, self._on_timeout, timeout)

    def _on_timeout(self, timeout: float) -> None:
        logger.debug(f"Aborting request after {timeout}s timeout")
        self.abort(FetchTimeoutError(timeout))

    def dispose(self) -> None:
        """Cancel the pending timer, if any."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
