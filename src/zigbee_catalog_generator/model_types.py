"""Internal datatypes for collection and rendering."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CatalogEntry:
    """A device display name and the line of its ``description`` key."""

    name: str
    line: int


@dataclass(frozen=True)
class CatalogSection:
    """One rendered section: a category file and its collected devices."""

    alias: str
    file_id: str
    entries: tuple[CatalogEntry, ...]


@dataclass(frozen=True)
class SourceDocument:
    """Raw content of one category file and where it came from."""

    file_id: str
    source_label: str
    content: str


@dataclass(frozen=True)
class CatalogRun:
    """Catalog generation output metadata."""

    document: str
    sections: tuple[CatalogSection, ...]
    document_count: int
