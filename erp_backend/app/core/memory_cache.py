# erp_backend/app/core/memory_cache.py
from cachetools import TTLCache

from ..config import settings

ANALYTICS_CACHE_KEY = "excel_analytics"

# Single slot: key = ANALYTICS_CACHE_KEY, value = AnalyticsResponse
analytics_response_cache = TTLCache(
    maxsize=1, ttl=settings.analytics.cache_ttl_seconds
)
