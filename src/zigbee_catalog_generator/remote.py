"""Category file retrieval from the upstream repository contents API."""

from __future__ import annotations

from collections.abc import Iterator
import logging
from pathlib import PurePosixPath
from types import TracebackType
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from .loader import SourceError
from .model_types import SourceDocument

logger = logging.getLogger(__name__)

_LISTING_HEADERS = {"Accept": "application/vnd.github+json"}


class FetchError(SourceError):
    """Raised when a GET request does not produce a usable body."""


class RepositoryListingEntry(BaseModel):
    """One item of a repository directory listing."""

    model_config = ConfigDict(extra="ignore")

    type: str
    name: str
    download_url: Optional[str] = None

    @property
    def is_category_file(self) -> bool:
        return self.type == "file" and PurePosixPath(self.name).suffix == ".json"


_LISTING_ADAPTER = TypeAdapter(list[RepositoryListingEntry])


class RemoteRepository:
    """Sequential reader of category files published in a remote repository."""

    def __init__(self, listing_url: str, *, client: Optional[httpx.Client] = None) -> None:
        self.listing_url = listing_url
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(follow_redirects=True)

    def __enter__(self) -> RemoteRepository:
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def fetch_text(self, url: str, *, headers: Optional[dict[str, str]] = None) -> str:
        """Return the body of a successful GET request.

        Args:
            url (str): Address to fetch.
            headers (Optional[dict[str, str]]): Extra request headers.

        Returns:
            str: Decoded response body.
        """
        try:
            response = self._client.get(url, headers=headers)
        except httpx.HTTPError as exc:
            raise FetchError(f"failed to execute GET request: {exc}. `{url}`") from exc

        if not response.is_success:
            raise FetchError(
                f"failed to execute GET request with error code `{response.status_code}`. `{url}`"
            )
        if not response.content:
            raise FetchError(f"empty response body. `{url}`")
        return response.text

    def list_category_files(self) -> list[RepositoryListingEntry]:
        """Return listing entries for the ``.json`` files of the directory."""
        body = self.fetch_text(self.listing_url, headers=_LISTING_HEADERS)
        try:
            entries = _LISTING_ADAPTER.validate_json(body)
        except ValidationError as exc:
            raise FetchError(
                f"unexpected directory listing format: {exc}. `{self.listing_url}`"
            ) from exc
        return [entry for entry in entries if entry.is_category_file]

    def iter_documents(self) -> Iterator[SourceDocument]:
        """Yield every category file of the listing, fetched one after another."""
        for entry in self.list_category_files():
            if not entry.download_url:
                raise FetchError(
                    f"listing entry {entry.name} has no download URL. `{self.listing_url}`"
                )
            logger.debug("fetching %s", entry.download_url)
            content = self.fetch_text(entry.download_url)
            yield SourceDocument(
                file_id=entry.name,
                source_label=entry.download_url,
                content=content,
            )
