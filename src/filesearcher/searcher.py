"""
Search coordinator for the File Searcher.

The coordinator seeds the directory queue with the root paths, starts the
directory producers and the file consumer on a fixed-size thread pool, and
blocks until the consumer has seen the end of the stream. Every call builds
its own queues and counter, so searches never share state.
"""

import os
import time
import queue
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import datetime
from typing import Iterable, List, Optional

from .models.config import SearcherConfig
from .models.entries import END_OF_STREAM, PathEntry, QueueItem
from .models.search_query import SearchQuery
from .models.search_results import SearchResults, SearchStats
from .tools.consumer import FileConsumer
from .tools.counter import PendingWorkCounter
from .tools.fs_access import system_roots
from .tools.producer import DirectoryProducer


logger = logging.getLogger(__name__)


class SearchError(Exception):
    """Raised when a worker fails before the tree has been fully walked."""
    pass


class FileSearcher:
    """
    Concurrent file-name search over one or more directory trees.

    Each search runs ``producer_count`` directory producers and one file
    consumer connected by an unbounded directory queue and a bounded file
    queue. The call returns only after the whole tree has been visited.
    """

    def __init__(self, config: Optional[SearcherConfig] = None):
        """
        Initialize the searcher.

        Args:
            config: Configuration object; defaults are used when omitted
        """
        self.config = config or SearcherConfig()

    def find(self, target_name: str) -> List[str]:
        """
        Find files named ``target_name`` under the configured roots.

        When no roots are configured the host's filesystem roots are used.

        Args:
            target_name: Exact file name to search for

        Returns:
            Absolute paths of all matching files
        """
        roots = self.config.roots or system_roots()
        return self.search(roots, target_name)

    def search(self, roots: Iterable[str], target_name: str) -> List[str]:
        """
        Find files named ``target_name`` under the given roots.

        Args:
            roots: Root directories to walk
            target_name: Exact file name to search for

        Returns:
            Absolute paths of all matching files, in the order they were found

        Raises:
            pydantic.ValidationError: If roots are empty or the name is blank
            SearchError: If a worker failed during the walk
        """
        query = SearchQuery(target_name=target_name, roots=list(roots))
        return self.run(query).matches

    def run(self, query: SearchQuery) -> SearchResults:
        """
        Execute a search and return the full result set.

        Args:
            query: Validated search query

        Returns:
            SearchResults with matches, merged worker stats and listing errors

        Raises:
            SearchError: If a worker failed during the walk
        """
        concurrency = self.config.concurrency
        producer_count = concurrency.producer_count

        directory_queue: "queue.Queue[QueueItem]" = queue.Queue()
        file_queue: "queue.Queue[QueueItem]" = queue.Queue(maxsize=concurrency.file_queue_capacity)
        counter = PendingWorkCounter()
        cancel_event = threading.Event()

        for root in query.roots:
            if not os.path.isdir(root):
                logger.warning(f"Root directory does not exist or is not a directory: {root}")
            counter.increment()
            directory_queue.put(PathEntry(path=root, is_dir=True))

        producers = [
            DirectoryProducer(
                directory_queue,
                file_queue,
                counter,
                producer_count,
                self.config.skip,
                cancel_event,
                put_poll_interval=concurrency.put_poll_interval,
                max_recorded_errors=self.config.max_recorded_errors,
                name=f"producer-{i}"
            )
            for i in range(producer_count)
        ]
        consumer = FileConsumer(file_queue, query.target_name)

        logger.info(
            f"Searching for '{query.target_name}' under {len(query.roots)} root(s) "
            f"with {producer_count} producers"
        )
        timestamp = datetime.now()
        started = time.monotonic()

        executor = ThreadPoolExecutor(max_workers=concurrency.worker_count, thread_name_prefix="filesearcher")
        producer_futures: List[Future] = []
        consumer_future: Optional[Future] = None
        try:
            producer_futures = [executor.submit(producer.run) for producer in producers]
            consumer_future = executor.submit(consumer.run)

            try:
                matches = consumer_future.result()
            except Exception as e:
                logger.error(f"File consumer failed: {e}")
                raise SearchError(f"File consumer failed: {e}") from e

            # Producers still putting files after an abort must not wait for a consumer that has left
            cancel_event.set()
            wait(producer_futures)
            for future in producer_futures:
                error = future.exception()
                if error is not None:
                    raise SearchError(f"Directory producer failed: {error}") from error
        finally:
            self._release_workers(directory_queue, file_queue, producer_futures, consumer_future, cancel_event)
            executor.shutdown(wait=True, cancel_futures=True)

        results = SearchResults(
            query=query,
            matches=matches,
            stats=self._merge_stats(producers, consumer),
            execution_time=time.monotonic() - started,
            timestamp=timestamp,
            errors=self._collect_errors(producers)
        )

        logger.info(str(results))
        return results

    def _release_workers(
        self,
        directory_queue: "queue.Queue[QueueItem]",
        file_queue: "queue.Queue[QueueItem]",
        producer_futures: List[Future],
        consumer_future: Optional[Future],
        cancel_event: threading.Event
    ) -> None:
        """
        Make sure no worker stays blocked on a queue.

        After a normal shutdown this changes nothing: every file put has
        already completed, the consumer has returned and each producer is
        about to take a sentinel. After a failure or an interrupt it stops
        producers waiting on either queue and feeds the consumer its
        end-of-stream marker.
        """
        cancel_event.set()

        running = sum(1 for future in producer_futures if not future.done())
        for _ in range(running):
            directory_queue.put(END_OF_STREAM)

        poll_interval = self.config.concurrency.put_poll_interval
        while consumer_future is not None and not consumer_future.done():
            try:
                file_queue.put(END_OF_STREAM, timeout=poll_interval)
                break
            except queue.Full:
                continue

    def _merge_stats(self, producers: List[DirectoryProducer], consumer: FileConsumer) -> SearchStats:
        """Merge the counters of all workers into one SearchStats."""
        stats = SearchStats()
        for producer in producers:
            stats.merge(producer.stats)
        return stats.merge(consumer.stats)

    def _collect_errors(self, producers: List[DirectoryProducer]) -> List[str]:
        """Gather recorded listing failures, capped at max_recorded_errors."""
        errors = []
        for producer in producers:
            errors.extend(producer.errors)
        return errors[:self.config.max_recorded_errors]


def find(target_name: str, config: Optional[SearcherConfig] = None) -> List[str]:
    """
    Find files named ``target_name`` on this machine.

    Args:
        target_name: Exact file name to search for
        config: Optional configuration; roots default to the host's filesystem roots

    Returns:
        Absolute paths of all matching files
    """
    return FileSearcher(config).find(target_name)
