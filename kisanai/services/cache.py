import time
import logging
import threading
from typing import Any, Callable, Dict, Optional

from kisanai.config import CACHE_NAMESPACE, RESULT_CACHE_TTL
from kisanai.models import CachedResult

logger = logging.getLogger(__name__)

LAST_RESULT_KEY = "last"


def get_cache_key(domain: str, key: str = LAST_RESULT_KEY) -> str:
    """Generate namespaced cache key"""
    return f"{CACHE_NAMESPACE}:{domain}:{key}"


class ResultCache:
    """
    Best-effort in-memory store for the last request/result pair per domain.

    Entries expire after ``ttl`` seconds and are evicted when read. The cache
    never raises: a failed save or load is logged and treated as a miss.
    """

    def __init__(self, ttl: int = RESULT_CACHE_TTL, clock: Callable[[], float] = time.time):
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def save_result(self, domain: str, request: dict, result: dict) -> bool:
        """Save the latest request/result for a domain"""
        try:
            entry = CachedResult(domain=domain, request=request, result=result, saved_at=self._clock())
            full_key = get_cache_key(domain)
            with self._lock:
                self._entries[full_key] = {
                    "value": entry.model_dump(),
                    "expires_at": entry.saved_at + self.ttl,
                }
            logger.info(f"✓ Cache set: {full_key}")
            return True
        except Exception as e:
            logger.error(f"Cache set error: {e}")
            return False

    def load_result(self, domain: str) -> Optional[CachedResult]:
        """Load the latest request/result for a domain, None when absent or expired"""
        try:
            full_key = get_cache_key(domain)
            with self._lock:
                entry = self._entries.get(full_key)
                if entry is None:
                    self._misses += 1
                    return None
                if entry["expires_at"] <= self._clock():
                    del self._entries[full_key]
                    self._misses += 1
                    logger.info(f"Cache expired: {full_key}")
                    return None
                self._hits += 1
                value = entry["value"]
            logger.info(f"✓ Cache hit: {full_key}")
            return CachedResult.model_validate(value)
        except Exception as e:
            logger.error(f"Cache get error: {e}")
            return None

    def clear_domain(self, domain: str) -> bool:
        """Remove the stored result for a domain. Returns True if one existed"""
        try:
            full_key = get_cache_key(domain)
            with self._lock:
                existed = self._entries.pop(full_key, None) is not None
            if existed:
                logger.info(f"Cache cleared: {full_key}")
            return existed
        except Exception as e:
            logger.error(f"Error clearing cache: {e}")
            return False

    def clear_all(self):
        with self._lock:
            self._entries.clear()
        logger.info("All cached results cleared")

    def get_cache_stats(self) -> dict:
        """Get cache statistics"""
        with self._lock:
            now = self._clock()
            active = sum(1 for entry in self._entries.values() if entry["expires_at"] > now)
            return {
                "entries": len(self._entries),
                "active": active,
                "hits": self._hits,
                "misses": self._misses,
                "ttl_seconds": self.ttl,
            }


result_cache = ResultCache()
