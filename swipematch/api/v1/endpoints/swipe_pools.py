"""
API endpoints for matchmaker swipe pools
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from swipematch.api.dependencies import get_store
from swipematch.models.match import PoolState
from swipematch.models.user import UserProfile, is_storable_key
from swipematch.services.profile_store import ProfileStore
from swipematch.services.swipe_pool_service import SwipePoolService

router = APIRouter()


def get_swipe_pool_service(store: ProfileStore = Depends(get_store)) -> SwipePoolService:
    return SwipePoolService(store)


def require_storable_ids(friend_id: str, matchmaker_id: str) -> None:
    if not (is_storable_key(friend_id) and is_storable_key(matchmaker_id)):
        raise HTTPException(status_code=400, detail="User IDs may not contain '.' or start with '$'")


@router.post("/{friend_id}/{matchmaker_id}/refresh", response_model=PoolState)
async def refresh_pool(
    friend_id: str,
    matchmaker_id: str,
    service: SwipePoolService = Depends(get_swipe_pool_service),
):
    """Recompute the undecided candidates of a matchmaker for a friend"""
    require_storable_ids(friend_id, matchmaker_id)
    state = await service.refresh_pool(friend_id, matchmaker_id)
    if state is None:
        raise HTTPException(status_code=502, detail="Failed to refresh swipe pool")
    return state


@router.get("/{friend_id}/{matchmaker_id}", response_model=List[UserProfile])
async def get_swipe_deck(
    friend_id: str,
    matchmaker_id: str,
    service: SwipePoolService = Depends(get_swipe_pool_service),
):
    """Candidate profiles a matchmaker swipes through for a friend"""
    require_storable_ids(friend_id, matchmaker_id)
    deck = await service.get_deck(friend_id, matchmaker_id)
    if deck is None:
        raise HTTPException(status_code=502, detail="Failed to load swipe deck")
    return deck
