"""
Pending-work counter shared by the directory producers.

The counter tracks directories that have been queued but not yet fully
expanded. It is the only shared mutable state besides the two queues.
"""

import threading


class PendingWorkCounter:
    """
    Thread-safe integer with increment and decrement-and-get.

    The decrement returns the new value under the same lock, so exactly one
    caller observes the transition to zero.
    """

    def __init__(self, initial: int = 0):
        if initial < 0:
            raise ValueError(f"Counter cannot start negative: {initial}")
        self._value = initial
        self._lock = threading.Lock()

    def increment(self) -> int:
        """Add one pending directory and return the new count."""
        with self._lock:
            self._value += 1
            return self._value

    def decrement(self) -> int:
        """
        Mark one directory as fully expanded and return the new count.

        Raises:
            RuntimeError: If the counter would drop below zero
        """
        with self._lock:
            if self._value <= 0:
                raise RuntimeError("Pending-work counter decremented below zero")
            self._value -= 1
            return self._value

    @property
    def value(self) -> int:
        """Current number of pending directories."""
        with self._lock:
            return self._value

    def __repr__(self) -> str:
        return f"PendingWorkCounter({self.value})"
