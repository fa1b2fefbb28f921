"""Filesystem writers for generated SDL and config documents."""

from __future__ import annotations

from pathlib import Path


class WriteError(RuntimeError):
    """Raised when output files cannot be written."""


def write_output(path: Path, content: str) -> None:
    """Write a generated document, creating missing parent directories.

    Args:
        path (Path): Destination file.
        content (str): Text to write.
    """
    if path.is_dir():
        raise WriteError(f"Output path is a directory: {path}")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise WriteError(f"Failed to create directory {path.parent}: {exc}") from exc
    _write_file(path, content)


def _write_file(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise WriteError(f"Failed to write file {path}: {exc}") from exc
