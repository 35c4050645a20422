"""
Queue item types for the search pipeline.

Directory producers and the file consumer exchange ``PathEntry`` objects over
two queues. End of stream is signalled with the ``END_OF_STREAM`` singleton,
which is checked by identity so it can never be confused with a real path.
"""

import os
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class PathEntry:
    """
    An absolute filesystem path plus its directory classification.

    Attributes:
        path: Absolute path of the entry
        is_dir: Whether the entry was classified as a directory to expand
        is_dir_link: Whether the entry is a symlink to a directory that is not followed
    """
    path: str
    is_dir: bool = False
    is_dir_link: bool = False

    @property
    def name(self) -> str:
        """Base name of the entry."""
        return os.path.basename(self.path.rstrip(os.sep)) or self.path

    def __str__(self) -> str:
        return self.path


class EndOfStream:
    """Marker type for the end-of-stream sentinel. Only one instance exists."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "END_OF_STREAM"

    def __reduce__(self):
        return (EndOfStream, ())


END_OF_STREAM = EndOfStream()

QueueItem = Union[PathEntry, EndOfStream]


def is_end_of_stream(item: object) -> bool:
    """Check whether a dequeued item is the end-of-stream sentinel."""
    return item is END_OF_STREAM
