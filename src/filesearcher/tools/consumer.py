"""
File consumer for the File Searcher.

The single consumer drains the file queue and keeps every entry whose base
name equals the target name exactly.
"""

import queue
import logging
from typing import List

from ..models.entries import QueueItem, is_end_of_stream
from ..models.search_results import SearchStats


logger = logging.getLogger(__name__)


class FileConsumer:
    """Worker that filters discovered entries by exact name."""

    def __init__(self, file_queue: "queue.Queue[QueueItem]", target_name: str):
        self.file_queue = file_queue
        self.target_name = target_name
        self.stats = SearchStats()

    def run(self) -> List[str]:
        """
        Drain the file queue until the end-of-stream sentinel arrives.

        There is no early exit on the first match: the queue is always drained
        so that blocked producers are released.

        Returns:
            Absolute paths of matching entries, in drain order
        """
        matches = []

        while True:
            item = self.file_queue.get()
            if is_end_of_stream(item):
                break

            self.stats.files_examined += 1
            if item.name == self.target_name:
                matches.append(item.path)

        logger.debug(f"Consumer examined {self.stats.files_examined} entries, {len(matches)} matched")
        return matches
