"""
Filesystem access primitives for the search pipeline.

This module wraps the operating system calls the workers need: enumerating
the host's filesystem roots, listing the immediate children of a directory,
and classifying each child as a directory to expand or an entry to match.
"""

import os
import platform
import string
import logging
from typing import Callable, List, Optional

from ..models.entries import PathEntry


logger = logging.getLogger(__name__)

ListingErrorHandler = Callable[[str, OSError], None]


def system_roots() -> List[str]:
    """
    Get the root paths a whole-filesystem search is seeded with.

    On Windows every mounted drive letter is a root; everywhere else the
    single root ``/`` is used.

    Returns:
        List of absolute root paths
    """
    if platform.system().lower() != "windows":
        return [os.sep]

    if hasattr(os, 'listdrives'):
        try:
            drives = os.listdrives()
            if drives:
                return list(drives)
        except OSError as e:
            logger.warning(f"Cannot enumerate drives, probing drive letters: {e}")

    return [f"{letter}:\\" for letter in string.ascii_uppercase
            if os.path.exists(f"{letter}:\\")]


def classify(entry: os.DirEntry, follow_symlinks: bool = False) -> bool:
    """
    Check if a directory entry is a directory that can be expanded.

    Args:
        entry: Entry returned by os.scandir
        follow_symlinks: Whether a symlink pointing to a directory counts as one

    Returns:
        True if the entry is a directory, False for anything else or on error
    """
    try:
        return entry.is_dir(follow_symlinks=follow_symlinks)
    except OSError:
        # Entry vanished or cannot be stat'ed; treat it as a plain entry
        return False


def is_directory_link(entry: os.DirEntry) -> bool:
    """
    Check if a directory entry is a symlink whose target is a directory.

    Args:
        entry: Entry returned by os.scandir

    Returns:
        True for a symlink to a directory, False for anything else or on error
    """
    try:
        return entry.is_symlink() and entry.is_dir(follow_symlinks=True)
    except OSError:
        return False


def _to_path_entry(entry: os.DirEntry, follow_symlinks: bool) -> PathEntry:
    is_dir = classify(entry, follow_symlinks)
    is_dir_link = not is_dir and not follow_symlinks and is_directory_link(entry)
    return PathEntry(path=entry.path, is_dir=is_dir, is_dir_link=is_dir_link)


def list_children(
    directory: str,
    follow_symlinks: bool = False,
    on_error: Optional[ListingErrorHandler] = None
) -> List[PathEntry]:
    """
    List the immediate children of a directory.

    Children are returned in the order the filesystem yields them. A directory
    that cannot be listed (permission denied, removed mid-walk, not a
    directory) has zero children; the error is reported to ``on_error`` and
    never raised.

    Args:
        directory: Absolute path of the directory to list
        follow_symlinks: Whether symlinked directories are classified as directories;
            when False they are flagged with ``is_dir_link`` instead
        on_error: Optional callback receiving the directory and the OSError

    Returns:
        List of PathEntry objects, empty on failure
    """
    try:
        with os.scandir(directory) as it:
            return [_to_path_entry(entry, follow_symlinks) for entry in it]
    except OSError as e:
        if on_error is not None:
            on_error(directory, e)
        else:
            logger.debug(f"Cannot list directory {directory}: {e}")
        return []
