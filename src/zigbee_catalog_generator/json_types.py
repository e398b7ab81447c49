"""JSON value typing aliases and the line-carrying object key."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime
from functools import total_ordering
from typing import Optional, TypeAlias, Union


@total_ordering
class PositionedKey:
    """Object key paired with the 1-based source line where it started.

    Equality, hashing and ordering only look at ``key``; ``line`` is carried
    alongside as metadata.
    """

    __slots__ = ("_key", "_line")

    def __init__(self, key: Optional[str], line: Optional[int]) -> None:
        if (key is None) != (line is None):
            raise ValueError("PositionedKey key and line must both be set or both be None")
        self._key = key
        self._line = line

    @classmethod
    def null(cls) -> PositionedKey:
        """Return the null key."""
        return cls(None, None)

    @property
    def key(self) -> Optional[str]:
        return self._key

    @property
    def line(self) -> Optional[int]:
        return self._line

    @property
    def is_null(self) -> bool:
        return self._key is None and self._line is None

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PositionedKey):
            return self._key == other._key
        return NotImplemented

    def __lt__(self, other: PositionedKey) -> bool:
        if not isinstance(other, PositionedKey):
            return NotImplemented
        return (self._key or "") < (other._key or "")

    def __hash__(self) -> int:
        return hash(self._key)

    def __str__(self) -> str:
        return self._key or ""

    def __repr__(self) -> str:
        return f"PositionedKey({self._key!r}, line={self._line!r})"


JSONPrimitive: TypeAlias = Union[str, float, bool, datetime, None]
JSONValue: TypeAlias = Union[JSONPrimitive, Sequence["JSONValue"], Mapping[PositionedKey, "JSONValue"]]
JSONObject: TypeAlias = Mapping[PositionedKey, JSONValue]
MutableJSONObject: TypeAlias = dict[PositionedKey, JSONValue]
JSONArray: TypeAlias = Sequence[JSONValue]
