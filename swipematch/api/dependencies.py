from fastapi import HTTPException, status

from swipematch.exceptions import ProfileNotFoundError, ProfileStoreError
from swipematch.services import get_profile_store
from swipematch.services.profile_store import ProfileStore


async def get_store() -> ProfileStore:
    return get_profile_store()


def store_error_to_http(error: ProfileStoreError) -> HTTPException:
    """Translate a profile store failure into an HTTP error"""
    if isinstance(error, ProfileNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.message)
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=error.message)
