"""
Keyed listener registry.

Provides:
- Listener chains keyed by event name plus extra key segments
- Fire-and-forget emission (results ignored, nothing awaited)
- Gated emission (sequential, awaits each result, stops at the first falsy)
"""

from __future__ import annotations

import asyncio
import inspect
import threading
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any, TypeVar

from hookbus.errors import InvalidListenerError
from hookbus.events.keys import ExtraKey, ListenerKey
from hookbus.logging_config import get_logger

logger = get_logger(__name__)


# =============================================================================
# Types
# =============================================================================

# A listener takes one optional payload. Fire-and-forget ignores the return
# value; gated dispatch treats it (or what it awaits to) as a verdict.
EventListener = Callable[..., Any]

L = TypeVar("L", bound=Callable[..., Any])


def _listener_name(listener: Callable[..., Any]) -> str:
    return getattr(listener, "__qualname__", None) or repr(listener)


async def _await_logged(awaitable: Awaitable[Any], key: str, listener: str, position: int) -> None:
    try:
        await awaitable
    except Exception:
        logger.exception("listener_failed", key=key, listener=listener, position=position, detached=True)


# =============================================================================
# Event Bus
# =============================================================================


class EventBus:
    """
    Registry of listener chains keyed by ``(event, key segments)``.

    Registering under an existing key appends to its chain; chains keep
    registration order and are only removed wholesale by ``off``.

    Examples:
        bus.on("userUpdated", store_user)
        bus.on("userUpdated", audit, key=["tenantA"])
        bus.emit("userUpdated", {"firstName": "Ada"})
        ok = await bus.emit_with_check("userUpdated", payload, key=["tenantA"])
    """

    def __init__(self) -> None:
        self._chains: dict[str, list[EventListener]] = {}
        self._lock = threading.RLock()
        self._background: set[asyncio.Task[Any]] = set()

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def on(
        self,
        event: str,
        listener: EventListener | None = None,
        key: ExtraKey = None,
    ) -> Any:
        """
        Append a listener to the chain for ``(event, key)``.

        Args:
            event: Event name
            listener: Callable taking one optional payload
            key: Extra key segments (str, iterable of str/None, or None)

        Returns:
            None, or a decorator when ``listener`` is omitted

        Usage:
            @bus.on("logout")
            def after_logout(payload=None):
                ...
        """
        if listener is None:
            def decorator(fn: L) -> L:
                self.on(event, fn, key)
                return fn

            return decorator

        if not callable(listener):
            raise InvalidListenerError(listener)

        listener_key = ListenerKey.of(event, key)
        with self._lock:
            chain = self._chains.setdefault(listener_key.canonical, [])
            chain.append(listener)
            chain_length = len(chain)

        logger.debug(
            "listener_registered",
            key=listener_key.canonical,
            listener=_listener_name(listener),
            chain_length=chain_length,
        )
        return None

    def off(self, event: str, key: ExtraKey = None) -> None:
        """
        Remove the whole chain for ``(event, key)``.

        Unknown keys are a no-op.
        """
        listener_key = ListenerKey.of(event, key)
        with self._lock:
            removed = self._chains.pop(listener_key.canonical, None)

        if removed is not None:
            logger.debug("chain_removed", key=listener_key.canonical, count=len(removed))

    def get(self, event: str, key: ExtraKey = None) -> tuple[EventListener, ...] | None:
        """
        Look up the chain for ``(event, key)``.

        Returns:
            Snapshot of the chain in registration order, or None if no
            chain exists for the key
        """
        return self._snapshot(ListenerKey.of(event, key))

    def _snapshot(self, listener_key: ListenerKey) -> tuple[EventListener, ...] | None:
        with self._lock:
            chain = self._chains.get(listener_key.canonical)
            return tuple(chain) if chain is not None else None

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def emit(self, event: str, payload: Any = None, key: ExtraKey = None) -> None:
        """
        Invoke every listener in the chain, in order, ignoring results.

        Nothing is awaited. An awaitable returned by a listener runs in
        the background: as a task on the running event loop, or on a
        daemon thread with its own loop when none is running. Failures
        in that background work are logged and never reach the caller.
        Exceptions raised synchronously by listeners propagate.

        Args:
            event: Event name
            payload: Value passed to each listener
            key: Extra key segments
        """
        listener_key = ListenerKey.of(event, key)
        chain = self._snapshot(listener_key) or ()

        logger.debug("event_emitting", key=listener_key.canonical, listeners=len(chain))

        for position, listener in enumerate(chain):
            result = listener(payload)
            if inspect.isawaitable(result):
                self._run_detached(
                    _await_logged(result, listener_key.canonical, _listener_name(listener), position)
                )

    def _run_detached(self, coro: Coroutine[Any, Any, None]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            task = loop.create_task(coro)
            # Strong reference until done.
            self._background.add(task)
            task.add_done_callback(self._background.discard)
        else:
            thread = threading.Thread(target=asyncio.run, args=(coro,), daemon=True)
            thread.start()

    async def emit_with_check(
        self,
        event: str,
        payload: Any = None,
        key: ExtraKey = None,
    ) -> bool:
        """
        Run the chain sequentially, stopping at the first rejection.

        Each listener's result is awaited if awaitable before the next
        listener is invoked. A falsy result or an exception ends the
        chain with ``False``; the exception is logged and not re-raised.

        Args:
            event: Event name
            payload: Value passed to each listener
            key: Extra key segments

        Returns:
            True if the chain is empty or every listener returned truthy
        """
        listener_key = ListenerKey.of(event, key)
        chain = self._snapshot(listener_key) or ()

        for position, listener in enumerate(chain):
            try:
                result = listener(payload)
                if inspect.isawaitable(result):
                    result = await result
                passed = bool(result)
            except Exception:
                logger.exception(
                    "listener_failed",
                    key=listener_key.canonical,
                    listener=_listener_name(listener),
                    position=position,
                )
                return False

            if not passed:
                logger.debug(
                    "listener_vetoed",
                    key=listener_key.canonical,
                    listener=_listener_name(listener),
                    position=position,
                )
                return False

        logger.debug("chain_passed", key=listener_key.canonical, listeners=len(chain))
        return True

    # -------------------------------------------------------------------------
    # Stats
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        with self._lock:
            return len(self._chains)

    def get_stats(self) -> dict[str, int]:
        """Get registry statistics."""
        with self._lock:
            return {
                "keys": len(self._chains),
                "total_listeners": sum(len(chain) for chain in self._chains.values()),
            }
