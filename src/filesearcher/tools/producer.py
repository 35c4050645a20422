"""
Directory producer for the File Searcher.

Producers take directories from the shared directory queue, list their
children, and route subdirectories back into the directory queue and
everything else into the bounded file queue. Together they detect when the
whole tree has been walked using the pending-work counter: the producer whose
decrement brings the counter to zero starts the shutdown.
"""

import queue
import logging
import threading
from typing import List, Optional

from ..models.config import SkipConfig
from ..models.entries import END_OF_STREAM, PathEntry, QueueItem, is_end_of_stream
from ..models.search_results import SearchStats
from .counter import PendingWorkCounter
from .fs_access import list_children


logger = logging.getLogger(__name__)


class DirectoryProducer:
    """
    Worker that expands directories into child entries.

    The directory queue must be unbounded: a producer puts subdirectories
    while it still owes a decrement, so a blocking put there could deadlock
    the pending-work protocol. Puts on the file queue may block; they are
    retried every ``put_poll_interval`` seconds until they succeed or the
    coordinator sets ``cancel_event``.
    """

    def __init__(
        self,
        directory_queue: "queue.Queue[QueueItem]",
        file_queue: "queue.Queue[QueueItem]",
        counter: PendingWorkCounter,
        producer_count: int,
        skip: SkipConfig,
        cancel_event: threading.Event,
        put_poll_interval: float = 0.1,
        max_recorded_errors: int = 100,
        name: Optional[str] = None
    ):
        """
        Initialize the producer.

        Args:
            directory_queue: Unbounded queue of directories waiting to be expanded
            file_queue: Bounded queue of entries waiting for the name comparison
            counter: Pending-work counter shared by all producers
            producer_count: Number of producers, i.e. sentinels broadcast at shutdown
            skip: Rules for entries that are neither expanded nor matched
            cancel_event: Set by the coordinator when the pipeline is torn down
            put_poll_interval: Seconds between cancel checks while the file queue is full
            max_recorded_errors: Maximum listing failures kept in ``errors``
            name: Name used in log messages
        """
        self.directory_queue = directory_queue
        self.file_queue = file_queue
        self.counter = counter
        self.producer_count = producer_count
        self.skip = skip
        self.cancel_event = cancel_event
        self.put_poll_interval = put_poll_interval
        self.max_recorded_errors = max_recorded_errors
        self.name = name or self.__class__.__name__
        self.stats = SearchStats()
        self.errors: List[str] = []

    def run(self) -> SearchStats:
        """
        Expand directories until the end-of-stream sentinel is received.

        Returns:
            Counters collected by this producer

        Raises:
            Exception: Any unexpected error, after the pipeline has been aborted
        """
        try:
            while not self.cancel_event.is_set():
                item = self.directory_queue.get()

                if is_end_of_stream(item):
                    # Forward it so a sibling producer also stops
                    self.directory_queue.put(END_OF_STREAM)
                    break

                self._expand(item)

                if self.counter.decrement() == 0:
                    self._broadcast_shutdown()
        except Exception as e:
            logger.error(f"{self.name} failed, aborting search: {e}")
            self._abort()
            raise

        logger.debug(f"{self.name} stopped after expanding {self.stats.directories_expanded} directories")
        return self.stats

    def _expand(self, directory: PathEntry) -> None:
        """
        List one directory and route each child to the proper queue.

        Args:
            directory: Directory entry taken from the directory queue
        """
        children = list_children(
            directory.path,
            follow_symlinks=self.skip.follow_symlinks,
            on_error=self._record_listing_error
        )
        self.stats.directories_expanded += 1

        for child in children:
            if self.skip.is_skipped(child.path) or child.is_dir_link:
                self.stats.entries_skipped += 1
                continue

            if child.is_dir:
                self.counter.increment()
                self.directory_queue.put(child)
            elif not self._put_file(child):
                return

    def _put_file(self, item: QueueItem) -> bool:
        """
        Put an item on the bounded file queue, waiting while it is full.

        Returns:
            True once the item was queued, False if the pipeline was cancelled
        """
        while not self.cancel_event.is_set():
            try:
                self.file_queue.put(item, timeout=self.put_poll_interval)
                return True
            except queue.Full:
                continue
        return False

    def _broadcast_shutdown(self) -> None:
        """Signal end of stream once to the consumer and once per producer."""
        logger.debug(f"{self.name} observed an empty tree, broadcasting end of stream")

        if self._put_file(END_OF_STREAM):
            self.stats.file_sentinels_sent += 1

        for _ in range(self.producer_count):
            self.directory_queue.put(END_OF_STREAM)
        self.stats.directory_sentinels_broadcast += self.producer_count

    def _abort(self) -> None:
        """Release every other worker after this producer lost track of its work."""
        self._put_file(END_OF_STREAM)
        for _ in range(self.producer_count):
            self.directory_queue.put(END_OF_STREAM)

    def _record_listing_error(self, directory: str, error: OSError) -> None:
        """Count a directory that could not be listed; the walk continues."""
        self.stats.listing_errors += 1
        logger.debug(f"Cannot list directory {directory}: {error}")

        if len(self.errors) < self.max_recorded_errors:
            reason = error.strerror or str(error)
            self.errors.append(f"{directory}: {reason}")
