"""TransactionFeed - bounded newest-first transaction log"""

from collections import deque
from typing import Deque, List, Optional

from revdash.models.transaction import Transaction


class TransactionFeed:
    """
    Ordered log of the most recent transactions.

    Newest entry is at index 0; when the capacity is exceeded the oldest
    entries fall off the back. Pure data structure, no timing behavior.
    """

    def __init__(self, capacity: int = 10):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self._items: Deque[Transaction] = deque(maxlen=capacity)

    def append(self, tx: Transaction) -> None:
        """Insert at the front, evicting from the back on overflow"""
        self._items.appendleft(tx)

    def to_list(self) -> List[Transaction]:
        """Snapshot copy, newest first"""
        return list(self._items)

    @property
    def latest(self) -> Optional[Transaction]:
        return self._items[0] if self._items else None

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)
