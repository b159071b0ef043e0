"""Interceptor registry.

Each client owns two ``InterceptorManager`` instances, one for the request
stage and one for the response stage. Entries are keyed by a handle taken
from a counter that only ever grows, so ejecting one entry never moves the
others and a handle can never point at a different entry later on.

Example:
    >>> manager = InterceptorManager()
    >>> handle = manager.use(add_auth_header, synchronous=True)
    >>> manager.eject(handle)
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Callable

from loguru import logger

from .types import OnFulfilled, OnRejected, RunWhen


@dataclass(frozen=True, slots=True)
class InterceptorEntry:
    """One registered interceptor pair.

    Attributes:
        on_fulfilled: Transform applied to the value flowing through the chain
        on_rejected: Handler applied to an error flowing through the chain
        synchronous: The transform never suspends; request interceptors only
        run_when: Skip this entry for configs where the predicate is false
    """

    on_fulfilled: OnFulfilled | None = None
    on_rejected: OnRejected | None = None
    synchronous: bool = False
    run_when: RunWhen | None = None


class InterceptorManager:
    """Ordered collection of interceptor entries."""

    def __init__(self, name: str = "interceptor"):
        self.name = name
        self._handlers: dict[int, InterceptorEntry] = {}
        self._next_handle = 0

    def use(
        self,
        on_fulfilled: OnFulfilled | None = None,
        on_rejected: OnRejected | None = None,
        *,
        synchronous: bool = False,
        run_when: RunWhen | None = None,
    ) -> int:
        """Add a new interceptor to the stack.

        Args:
            on_fulfilled: Called with the value when the previous stage succeeded
            on_rejected: Called with the error when the previous stage failed
            synchronous: Declare that ``on_fulfilled`` never suspends
            run_when: Predicate over the request config, checked per call

        Returns:
            Handle used to remove the interceptor with ``eject``
        """
        handle = self._next_handle
        self._next_handle += 1
        self._handlers[handle] = InterceptorEntry(
            on_fulfilled=on_fulfilled,
            on_rejected=on_rejected,
            synchronous=synchronous,
            run_when=run_when,
        )
        logger.debug(f"Registered {self.name} #{handle} (synchronous={synchronous})")
        return handle

    def eject(self, handle: int) -> None:
        """Remove the interceptor registered under ``handle``.

        Unknown or already removed handles are ignored.
        """
        if self._handlers.pop(handle, None) is not None:
            logger.debug(f"Ejected {self.name} #{handle}")

    def clear(self) -> None:
        """Remove every interceptor.

        Handles issued before the call stay invalid; new handles continue
        from the current counter.
        """
        self._handlers = {}

    def for_each(self, visit: Callable[[InterceptorEntry], None]) -> None:
        """Call ``visit`` for each live entry in registration order."""
        for entry in self:
            visit(entry)

    def __iter__(self) -> Iterator[InterceptorEntry]:
        # Snapshot so use/eject during traversal does not break iteration
        return iter(list(self._handlers.values()))

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, handle: object) -> bool:
        return handle in self._handlers
