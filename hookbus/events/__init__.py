"""
Keyed in-process events.

Provides the listener registry and the before/after action router built on it.
"""

from hookbus.events.bus import EventBus, EventListener
from hookbus.events.keys import ExtraKey, ListenerKey, canonicalize
from hookbus.events.router import Channel, EventRouter, RouterEvent

__all__ = [
    "Channel",
    "EventBus",
    "EventListener",
    "EventRouter",
    "ExtraKey",
    "ListenerKey",
    "RouterEvent",
    "canonicalize",
]
