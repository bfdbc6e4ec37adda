"""
Action router: middleware before an action, post-hooks after it.

Callers bracket their own action with the two gated checks:

    router = EventRouter[AuthInput, AuthResult]()
    router.set_middleware("registerUser", passwords_match)
    router.set_after("registerUser", no_error)

    if await router.run_middlewares("registerUser", user):
        result = await register(user)
        await router.check_post_events("registerUser", result)
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

from hookbus.errors import InvalidKeyError
from hookbus.events.bus import L, EventBus
from hookbus.events.keys import ExtraKey, Segment, normalize_segments

MiddlewareInput = TypeVar("MiddlewareInput")
PostEventInput = TypeVar("PostEventInput")
T = TypeVar("T")

RouterEvent = Callable[[T], bool | Awaitable[bool]]


class Channel:
    """Top-level event names partitioning the router's registry."""

    BEFORE = "before"
    AFTER = "after"


def _route(process: str, extra_keys: ExtraKey) -> tuple[Segment, ...]:
    if not isinstance(process, str) or not process:
        raise InvalidKeyError(process, "Process name must be a non-empty string")
    return (process, *normalize_segments(extra_keys))


class EventRouter(Generic[MiddlewareInput, PostEventInput]):
    """
    Process-scoped middleware and post-hook chains over one EventBus.

    Middleware run on the ``before`` channel with the action input;
    post-hooks run on the ``after`` channel with the action result.
    Both are gated: the first falsy or failing predicate stops the
    chain and the run reports ``False``.
    """

    def __init__(self, bus: EventBus | None = None) -> None:
        self._bus = bus if bus is not None else EventBus()

    @property
    def bus(self) -> EventBus:
        return self._bus

    def _register(self, channel: str, process: str, predicate: Any, extra_keys: ExtraKey) -> Any:
        route = _route(process, extra_keys)
        if predicate is None:
            def decorator(fn: L) -> L:
                self._bus.on(channel, fn, route)
                return fn

            return decorator
        self._bus.on(channel, predicate, route)
        return None

    def set_middleware(
        self,
        process: str,
        predicate: RouterEvent[MiddlewareInput] | None = None,
        extra_keys: ExtraKey = None,
    ) -> Any:
        """Register a predicate to run before ``process``.

        Returns a decorator when ``predicate`` is omitted.
        """
        return self._register(Channel.BEFORE, process, predicate, extra_keys)

    def set_after(
        self,
        process: str,
        predicate: RouterEvent[PostEventInput] | None = None,
        extra_keys: ExtraKey = None,
    ) -> Any:
        """Register a predicate to run on the result of ``process``.

        Returns a decorator when ``predicate`` is omitted.
        """
        return self._register(Channel.AFTER, process, predicate, extra_keys)

    def get_middlewares(
        self, process: str, extra_keys: ExtraKey = None
    ) -> tuple[RouterEvent[MiddlewareInput], ...]:
        """Middleware chain for ``process``, or ``()`` when nothing is registered."""
        return self._bus.get(Channel.BEFORE, _route(process, extra_keys)) or ()

    def get_post_events(
        self, process: str, extra_keys: ExtraKey = None
    ) -> tuple[RouterEvent[PostEventInput], ...]:
        """Post-hook chain for ``process``, or ``()`` when nothing is registered."""
        return self._bus.get(Channel.AFTER, _route(process, extra_keys)) or ()

    async def run_middlewares(
        self,
        process: str,
        payload: MiddlewareInput,
        extra_keys: ExtraKey = None,
    ) -> bool:
        """Run the middleware chain; True means the action may proceed."""
        return await self._bus.emit_with_check(Channel.BEFORE, payload, _route(process, extra_keys))

    async def check_post_events(
        self,
        process: str,
        payload: PostEventInput,
        extra_keys: ExtraKey = None,
    ) -> bool:
        """Run the post-hook chain on an action result; True if all accept it."""
        return await self._bus.emit_with_check(Channel.AFTER, payload, _route(process, extra_keys))
