"""Bounded in-memory cache of recent search queries and their embeddings."""

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import List, Tuple

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 100


@dataclass
class CachedQuery:
    """A search query remembered for similar-query suggestions."""

    query: str
    embedding: List[float]
    timestamp: float


class QueryCache:
    """Insertion-ordered query cache with FIFO eviction.

    When an insert pushes the size past capacity the first-inserted entry is
    dropped, regardless of how recently it was looked at. Re-inserting a
    query already present refreshes its embedding and timestamp but keeps
    its original position in the eviction order.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._entries: "OrderedDict[str, CachedQuery]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, query: object) -> bool:
        return query in self._entries

    def put(self, query: str, embedding: List[float]) -> CachedQuery:
        """Store a query embedding, evicting the oldest entry if over capacity."""
        entry = CachedQuery(query=query, embedding=embedding, timestamp=time.time())
        self._entries[query] = entry

        while len(self._entries) > self.capacity:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Query cache full, evicted oldest query: {evicted[:50]}")

        return entry

    def get(self, query: str) -> CachedQuery | None:
        return self._entries.get(query)

    def entries(self) -> List[CachedQuery]:
        """Cached entries, oldest first."""
        return list(self._entries.values())

    def items(self) -> List[Tuple[str, List[float]]]:
        """(query, embedding) pairs, oldest first."""
        return [(entry.query, entry.embedding) for entry in self._entries.values()]

    def clear(self) -> None:
        self._entries.clear()
