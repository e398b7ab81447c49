"""Output stream selection for the rendered catalog.

A catalog written to a file goes to a sibling ``.<name>.tmp`` file first and
only replaces the target once the document is complete, so a failed run leaves
any earlier catalog untouched.
"""

from __future__ import annotations

import os
from pathlib import Path
import sys
from typing import Optional, TextIO


class WriteError(RuntimeError):
    """Raised when the catalog cannot be written."""


def staging_path(path: Path) -> Path:
    return path.with_name(f".{path.name}.tmp")


def open_output(path: Optional[Path]) -> TextIO:
    """Open the catalog destination.

    Args:
        path (Optional[Path]): Output file, or ``None`` for standard output.

    Returns:
        TextIO: Writable UTF-8 text stream. For a file this is the staging
        file; ``commit_output`` moves it onto ``path``.
    """
    if path is None:
        return sys.stdout
    if path.is_dir():
        raise WriteError(f"Couldn't create file {path}")
    try:
        return staging_path(path).open("w", encoding="utf-8", newline="\n")
    except OSError as exc:
        raise WriteError(f"Couldn't create file {path}") from exc


def write_document(stream: TextIO, document: str) -> None:
    """Write the rendered document and flush the stream."""
    try:
        stream.write(document)
        stream.flush()
    except (OSError, UnicodeError) as exc:
        raise WriteError(f"Failed to write catalog: {exc}") from exc


def commit_output(stream: TextIO, path: Optional[Path]) -> None:
    """Replace ``path`` with the finished staging file."""
    if path is None:
        return
    try:
        stream.close()
        os.replace(stream.name, path)
    except OSError as exc:
        raise WriteError(f"Failed to write catalog: {exc}") from exc


def close_output(stream: TextIO) -> None:
    """Close a file stream and drop its staging file if it was not committed."""
    if stream is sys.stdout:
        return
    stream.close()
    Path(stream.name).unlink(missing_ok=True)
