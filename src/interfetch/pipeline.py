"""Sequential interceptor chain execution.

A chain is a list of ``(on_fulfilled, on_rejected)`` pairs. It is run the
way a chain of ``then`` continuations would be: every stage sees either the
value produced by the previous stage or the error it raised, and hands its
own outcome to the next stage.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Iterable
from typing import Any, Optional

from .types import OnFulfilled, OnRejected

Stage = tuple[Optional[OnFulfilled], Optional[OnRejected]]


async def settle(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it."""
    if inspect.isawaitable(value):
        return await value
    return value


async def run_chain(value: Any, chain: Iterable[Stage], error: BaseException | None = None) -> Any:
    """Run ``chain`` starting from ``value`` (or from ``error`` when given).

    A stage without the handler it needs passes the value or error on
    unchanged. A handler that raises turns its exception into the input of
    the next stage's ``on_rejected``. Control returns to the event loop
    before each stage.

    Returns:
        The value left after the last stage

    Raises:
        The error left after the last stage, if the chain ended rejected
    """
    for on_fulfilled, on_rejected in chain:
        await asyncio.sleep(0)
        handler = on_fulfilled if error is None else on_rejected
        if handler is None:
            continue
        try:
            value = await settle(handler(value if error is None else error))
            error = None
        except Exception as e:
            error = e

    if error is not None:
        raise error
    return value


async def then(pending: Any, chain: Iterable[Stage]) -> Any:
    """Wait for ``pending`` and feed its outcome into ``chain``."""
    try:
        value = await settle(pending)
    except Exception as e:
        return await run_chain(None, chain, error=e)
    return await run_chain(value, chain)
