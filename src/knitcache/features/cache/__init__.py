# Where: knitcache.features.cache.__init__
# What: Expose fingerprinting and the document-scoped cache store.
# Why: Let the build layer depend on the store without touching SQL.

from .domain.fingerprint import DEFAULT_ALGORITHM, fingerprint
from .domain.models import CacheEntry
from .usecases.cache_store import CacheStore
from .usecases.ports import CacheRepositoryPort

__all__ = [
    "CacheEntry",
    "CacheRepositoryPort",
    "CacheStore",
    "DEFAULT_ALGORITHM",
    "fingerprint",
]
