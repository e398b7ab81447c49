"""Markdown rendering of the device catalog."""

from __future__ import annotations

from collections.abc import Iterable

from .config import CatalogConfig
from .model_types import CatalogEntry, CatalogSection


def render_catalog(sections: Iterable[CatalogSection], *, config: CatalogConfig) -> str:
    """Render the full catalog document.

    Args:
        sections (Iterable[CatalogSection]): Sections in render order.
        config (CatalogConfig): Header texts and permalink base.

    Returns:
        str: Markdown document.
    """
    lines: list[str] = [f"# {config.title}", "", f"## {config.general_heading}", ""]
    for paragraph in config.general_paragraphs:
        lines.extend([paragraph, ""])

    for section in sections:
        lines.append(f"## {section.alias}")
        lines.append("")
        if not section.entries:
            continue
        lines.extend(
            render_entry(entry, file_id=section.file_id, permalink_base=config.permalink_base)
            for entry in section.entries
        )
        lines.append("")

    return "\n".join(lines)


def render_entry(entry: CatalogEntry, *, file_id: str, permalink_base: str) -> str:
    """Render one device bullet linking to its definition line."""
    return f"* [{entry.name}]({permalink_url(permalink_base, file_id, entry.line)})"


def permalink_url(permalink_base: str, file_id: str, line: int) -> str:
    return f"{permalink_base.rstrip('/')}/{file_id}#L{line}"
