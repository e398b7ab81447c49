"""Ordered mapping from category file to section alias."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import PurePosixPath
from typing import Optional

from .config import FileAlias


def file_title(file_id: str) -> str:
    """Return the file name without its extension."""
    return PurePosixPath(file_id).stem


class NameRegistry:
    """Deduplicated, insertion-ordered ``file_id -> alias`` table.

    Seeded from the configured alias list; files seen during collection that
    are not in it get their title as alias.
    """

    def __init__(self, aliases: Iterable[FileAlias] = ()) -> None:
        self._aliases: dict[str, str] = {}
        for item in aliases:
            self._aliases.setdefault(item.file_id, item.alias)

    def register(self, file_id: str) -> str:
        """Add ``file_id`` when unknown and return its alias."""
        return self._aliases.setdefault(file_id, file_title(file_id))

    def alias_for(self, file_id: str) -> Optional[str]:
        return self._aliases.get(file_id)

    def items(self) -> list[tuple[str, str]]:
        return list(self._aliases.items())

    def __contains__(self, file_id: object) -> bool:
        return file_id in self._aliases

    def __iter__(self) -> Iterator[str]:
        return iter(self._aliases)

    def __len__(self) -> int:
        return len(self._aliases)
