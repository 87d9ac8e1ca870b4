"""
Services module initialization
"""

from swipematch.core.config import settings
from swipematch.services.profile_store import InMemoryProfileStore, MongoProfileStore, ProfileStore

# Global service instances
_profile_store: ProfileStore | None = None


def get_profile_store() -> ProfileStore:
    """Get the global profile store instance (singleton)"""
    global _profile_store
    if _profile_store is None:
        if settings.STORE_BACKEND == "memory":
            _profile_store = InMemoryProfileStore()
        else:
            _profile_store = MongoProfileStore()
    return _profile_store


def set_profile_store(store: ProfileStore | None) -> None:
    """Set the global profile store instance"""
    global _profile_store
    _profile_store = store
