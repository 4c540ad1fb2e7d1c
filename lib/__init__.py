# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - geo.py: Great-circle distance between coordinates
# - swr.py: Stale-while-revalidate cache for API reads
# - api_client.py: httpx client for the SkillSwap API, backed by the cache
# - monitoring.py: Sentry error reporting
# - utils.py: Shared utilities (UUID normalization, filters, debounce)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.geo import calculate_geo_distance
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import Debounced, debounce, normalize_uuid

__all__ = [
    # Geo
    "calculate_geo_distance",
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Utils
    "Debounced",
    "debounce",
    "normalize_uuid",
]
