"""Recursive file listing over a contents-style directory API."""

import logging
from typing import Callable, Iterable

from .models import ContentEntry, EntryType

logger = logging.getLogger(__name__)

ListEntries = Callable[[str], Iterable[ContentEntry]]


def walk_files(list_entries: ListEntries, start: str = "") -> list[str]:
    """
    Collect every file path at or below a directory.

    Directories are listed one at a time from an explicit stack, so depth
    is not limited by the call stack. The repository tree has no back
    edges, so no path is ever listed twice.

    Args:
        list_entries: Returns the one-level entries of a directory path
        start: Directory to start from ("" for the repository root)

    Returns:
        File paths in depth-first discovery order
    """
    files: list[str] = []
    pending = [start]
    listed = 0

    while pending:
        directory = pending.pop()
        listed += 1
        logger.debug("Listing directory: %r (%d pending)", directory, len(pending))
        for entry in list_entries(directory):
            kind = entry.entry_type
            if kind is EntryType.FILE:
                files.append(entry.path)
            elif kind is EntryType.DIRECTORY:
                pending.append(entry.path)

    logger.debug("Walked %d directories under %r: %d files", listed, start, len(files))
    return files
