"""
Course Catalog Backend — Request-Scoped Query Cache
====================================================

What:  Memoizes query results for the duration of one request.
Why:   A single response (e.g. GET /api/catalog) can need the same course
       list or facet list more than once; the second use should not hit
       the database again.
How:   A plain dict keyed by the exact filter tuple. `get_query_cache` is a
       FastAPI dependency, and FastAPI resolves a dependency once per request,
       so every consumer within a request shares one instance and the cache
       is dropped with the request.

Lifetime:
    Never stored on a module, the app, or anything that outlives a request.
    There is no eviction: the cache is bounded by the handful of queries a
    single request makes.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Hashable

logger = logging.getLogger(__name__)


class QueryCache:
    """
    Per-request memo of query results.

    Usage:
        cache = QueryCache()
        courses = await cache.get_or_load(params.cache_key(), lambda: run_query(params))

    Only successful results are stored. If the loader raises, nothing is
    cached and the exception propagates.
    """

    def __init__(self) -> None:
        self._entries: Dict[Hashable, Any] = {}
        self.hits = 0
        self.misses = 0

    async def get_or_load(
        self,
        key: Hashable,
        loader: Callable[[], Awaitable[Any]],
    ) -> Any:
        if key in self._entries:
            self.hits += 1
            logger.debug("Query cache hit: %s", key)
            return self._entries[key]

        self.misses += 1
        value = await loader()
        self._entries[key] = value
        return value

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def get_query_cache() -> QueryCache:
    """FastAPI dependency: a fresh QueryCache for the current request."""
    return QueryCache()
