from cachetools import LRUCache

from ...core.query import RecordQuery
from ...core.record import Record
from ...core.snapshot import ServiceSnapshot
from ..interfaces import FileCabinetService
from .base import ServiceDecorator


class CachingService(ServiceDecorator):
    """
    Memoizes search results until the next mutating call.

    Results are keyed by ``RecordQuery.cache_key()`` and stored as tuples,
    so a cache hit hands back the very same object. Any create, edit,
    remove, restore or purge clears the whole cache.
    """

    DEFAULT_MAX_ENTRIES = 256

    def __init__(self, service: FileCabinetService, max_entries: int = DEFAULT_MAX_ENTRIES):
        super().__init__(service)
        self._search_cache: LRUCache[str, tuple[Record, ...]] = LRUCache(maxsize=max_entries)
        self.hits = 0
        self.misses = 0

    def search(self, query: RecordQuery) -> tuple[Record, ...]:
        if query is None:
            raise TypeError("Query cannot be None")

        key = query.cache_key()
        cached = self._search_cache.get(key)
        if cached is not None:
            self.hits += 1
            return cached

        self.misses += 1
        result = tuple(self._service.search(query))
        self._search_cache[key] = result
        return result

    def create_record(self, record: Record) -> int:
        self.invalidate()
        return self._service.create_record(record)

    def edit_record(self, record: Record) -> None:
        self.invalidate()
        self._service.edit_record(record)

    def remove_record(self, record_id: int) -> None:
        self.invalidate()
        self._service.remove_record(record_id)

    def restore(self, snapshot: ServiceSnapshot) -> int:
        self.invalidate()
        return self._service.restore(snapshot)

    def purge(self) -> int:
        self.invalidate()
        return self._service.purge()

    def invalidate(self) -> None:
        """Drop every cached search result."""
        self._search_cache.clear()

    def __len__(self) -> int:
        return len(self._search_cache)
