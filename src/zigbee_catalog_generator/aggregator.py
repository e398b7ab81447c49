"""Accumulate collected devices per category file and order catalog sections."""

from __future__ import annotations

from .config import CATCH_ALL_FILE
from .model_types import CatalogEntry, CatalogSection
from .registry import NameRegistry, file_title


class CatalogAggregator:
    """Per-file device lists plus the alias registry they are rendered under."""

    def __init__(self, registry: NameRegistry, *, catch_all_file: str = CATCH_ALL_FILE) -> None:
        self.registry = registry
        self.catch_all_file = catch_all_file
        self._entries: dict[str, list[CatalogEntry]] = {}

    def register_file(self, file_id: str) -> str:
        """Make sure ``file_id`` has an alias and an entry list."""
        alias = self.registry.register(file_id)
        self._entries.setdefault(file_id, [])
        return alias

    def add_entry(self, file_id: str, entry: CatalogEntry) -> None:
        self._entries.setdefault(file_id, []).append(entry)

    def entries_for(self, file_id: str) -> tuple[CatalogEntry, ...]:
        return tuple(self._entries.get(file_id, ()))

    def sections(self) -> list[CatalogSection]:
        """Return sections sorted by alias with the catch-all file last.

        Every registered file gets a section, including files without
        collected devices. The catch-all section is always present exactly once.

        Returns:
            list[CatalogSection]: Sections in render order.
        """
        pairs = [
            (file_id, alias)
            for file_id, alias in self.registry.items()
            if file_id != self.catch_all_file
        ]
        pairs.sort(key=lambda item: item[1])

        catch_all_alias = self.registry.alias_for(self.catch_all_file)
        if catch_all_alias is None:
            catch_all_alias = file_title(self.catch_all_file)
        pairs.append((self.catch_all_file, catch_all_alias))

        return [
            CatalogSection(alias=alias, file_id=file_id, entries=self.entries_for(file_id))
            for file_id, alias in pairs
        ]
