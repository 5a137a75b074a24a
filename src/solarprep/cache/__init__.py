"""In-process result cache for solarprep.

TTL-bound storage of prepared datasets, one entry per lookback window.
"""

from solarprep.cache.result_cache import CacheEntry, ResultCache

__all__ = ["CacheEntry", "ResultCache"]
