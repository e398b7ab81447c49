"""Category file loading from a local device library directory."""

from __future__ import annotations

from collections.abc import Iterator
import logging
from pathlib import Path

from .model_types import SourceDocument

logger = logging.getLogger(__name__)


class SourceError(RuntimeError):
    """Raised when category files cannot be retrieved."""


class FileAccessError(SourceError):
    """Raised when a local category file cannot be read."""


def find_category_files(base_dir: Path, pattern: str = "*.json") -> list[Path]:
    """Return every file below ``base_dir`` matching ``pattern``, sorted by path."""
    if not base_dir.is_dir():
        raise FileAccessError(f"Couldn't open directory {base_dir}")
    return sorted(path for path in base_dir.rglob(pattern) if path.is_file())


def load_category_file(path: Path) -> SourceDocument:
    """Read one category file as UTF-8 text."""
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FileAccessError(f"Couldn't open file {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise FileAccessError(f"Couldn't decode file {path} as UTF-8: {exc}") from exc
    return SourceDocument(file_id=path.name, source_label=str(path), content=content)


def iter_directory_documents(base_dir: Path, pattern: str = "*.json") -> Iterator[SourceDocument]:
    """Yield category files found below ``base_dir``.

    The first unreadable file stops iteration with ``FileAccessError``.

    Args:
        base_dir (Path): Device library directory.
        pattern (str): Glob matched against file names.

    Yields:
        SourceDocument: One document per matching file.
    """
    paths = find_category_files(base_dir, pattern)
    logger.debug("found %d category files in %s", len(paths), base_dir)
    for path in paths:
        yield load_category_file(path)
