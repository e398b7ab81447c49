"""High-level catalog generation orchestration."""

from __future__ import annotations

from collections.abc import Iterable
import logging
from pathlib import Path
from typing import Optional

import httpx

from .aggregator import CatalogAggregator
from .collector import CollectionError, DeviceCatalogCollector
from .config import CatalogConfig
from .loader import FileAccessError, SourceError, iter_directory_documents
from .model_types import CatalogRun, SourceDocument
from .registry import NameRegistry
from .remote import FetchError, RemoteRepository
from .renderer import render_catalog

logger = logging.getLogger(__name__)


def run_catalog(
    *,
    config: CatalogConfig,
    directory: Optional[Path] = None,
    client: Optional[httpx.Client] = None,
) -> CatalogRun:
    """Collect category files and render the device catalog.

    Args:
        config (CatalogConfig): Alias table, URLs and header texts.
        directory (Optional[Path]): Local device library; the remote listing
            is used when omitted.
        client (Optional[httpx.Client]): HTTP client for remote retrieval.

    Returns:
        CatalogRun: Rendered document and the sections it was built from.
    """
    if directory is not None:
        return build_catalog(iter_directory_documents(directory, config.pattern), config=config)

    with RemoteRepository(config.listing_url, client=client) as repository:
        return build_catalog(repository.iter_documents(), config=config)


def build_catalog(documents: Iterable[SourceDocument], *, config: CatalogConfig) -> CatalogRun:
    """Collect ``documents`` in order and render them.

    Collection stops at the first document that cannot be collected.

    Args:
        documents (Iterable[SourceDocument]): Category files to collect.
        config (CatalogConfig): Alias table, URLs and header texts.

    Returns:
        CatalogRun: Rendered document and the sections it was built from.
    """
    aggregator = CatalogAggregator(
        NameRegistry(config.file_aliases),
        catch_all_file=config.catch_all_file,
    )
    collector = DeviceCatalogCollector(aggregator)

    document_count = 0
    for document in documents:
        if not collector.collect(document.file_id, document.source_label, document.content):
            raise CollectionError(f"Couldn't collect {document.source_label}")
        document_count += 1
    logger.debug("collected %d category files", document_count)

    sections = aggregator.sections()
    return CatalogRun(
        document=render_catalog(sections, config=config),
        sections=tuple(sections),
        document_count=document_count,
    )


__all__ = [
    "CatalogRun",
    "CollectionError",
    "FetchError",
    "FileAccessError",
    "SourceError",
    "build_catalog",
    "run_catalog",
]
