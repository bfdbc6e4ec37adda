"""
Listener keys.

A listener key is an event name plus an ordered sequence of extra
segments, each a string or ``None``. Keys are compared through their
canonical form, the JSON array text of ``[name, *segments]``.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field

from hookbus.errors import InvalidKeyError

Segment = str | None

# None, one segment, or a sequence of segments
ExtraKey = str | Iterable[Segment] | None


def normalize_segments(key: ExtraKey) -> tuple[Segment, ...]:
    """Turn the accepted ``key`` shapes into a tuple of segments.

    A bare string is a single segment, never a sequence of characters.
    """
    if key is None:
        return ()
    if isinstance(key, str):
        return (key,)
    if isinstance(key, (bytes, bytearray)):
        raise InvalidKeyError(key, "Key segments must be str or None, not bytes")
    try:
        segments = tuple(key)
    except TypeError:
        raise InvalidKeyError(key, f"Key must be str, None or an iterable, got {type(key).__name__}") from None
    for segment in segments:
        if segment is not None and not isinstance(segment, str):
            raise InvalidKeyError(segment, f"Key segments must be str or None, got {type(segment).__name__}")
    return segments


def canonicalize(name: str, segments: tuple[Segment, ...] = ()) -> str:
    """Encode a name and its segments as one comparable token."""
    return json.dumps([name, *segments], ensure_ascii=False, separators=(",", ":"))


@dataclass(frozen=True)
class ListenerKey:
    """Identity of one listener chain.

    Attributes:
        name: Event or action name
        segments: Extra discriminating segments, order-sensitive
        canonical: Serialized form used as the registry key
    """

    name: str
    segments: tuple[Segment, ...] = ()
    canonical: str = field(default="", init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise InvalidKeyError(self.name, "Event name must be a non-empty string")
        object.__setattr__(self, "segments", normalize_segments(self.segments))
        object.__setattr__(self, "canonical", canonicalize(self.name, self.segments))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ListenerKey):
            return NotImplemented
        return self.canonical == other.canonical

    def __hash__(self) -> int:
        return hash(self.canonical)

    @classmethod
    def of(cls, name: str, key: ExtraKey = None) -> ListenerKey:
        """Build a key from a name and any accepted extra-key shape."""
        return cls(name, normalize_segments(key))
