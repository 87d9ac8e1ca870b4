"""
API endpoints for confirmed matches
"""

from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query

from swipematch.api.dependencies import get_store, store_error_to_http
from swipematch.exceptions import ProfileStoreError
from swipematch.models.match import Match, MatchAsymmetry
from swipematch.models.user import MatchEntry
from swipematch.services.match_registry import MatchRegistry
from swipematch.services.profile_store import ProfileStore

router = APIRouter()


def get_match_registry(store: ProfileStore = Depends(get_store)) -> MatchRegistry:
    return MatchRegistry(store)


@router.get("/user/{user_id}", response_model=List[Match])
async def get_user_matches(user_id: str, registry: MatchRegistry = Depends(get_match_registry)):
    """Confirmed matches of a user"""
    try:
        return await registry.get_matches(user_id)
    except ProfileStoreError as e:
        raise store_error_to_http(e) from e


@router.get("/user/{user_id}/pending", response_model=Dict[str, MatchEntry])
async def get_pending_matches(user_id: str, registry: MatchRegistry = Depends(get_match_registry)):
    """Ledger entries that have not become matches yet"""
    try:
        return await registry.get_pending(user_id)
    except ProfileStoreError as e:
        raise store_error_to_http(e) from e


@router.get("/user/{user_id}/asymmetric", response_model=List[MatchAsymmetry])
async def get_asymmetric_matches(user_id: str, registry: MatchRegistry = Depends(get_match_registry)):
    """Match entries the other user's document disagrees with"""
    try:
        return await registry.find_asymmetries(user_id)
    except ProfileStoreError as e:
        raise store_error_to_http(e) from e


@router.get("/user/{user_id}/state/{other_id}", response_model=dict)
async def get_pair_state(user_id: str, other_id: str, registry: MatchRegistry = Depends(get_match_registry)):
    """Ledger state of another user as seen by this user"""
    try:
        state = await registry.get_pair_state(user_id, other_id)
    except ProfileStoreError as e:
        raise store_error_to_http(e) from e
    return {"user_id": user_id, "other_user_id": other_id, "state": state.value}


@router.get("/between/{user_a}/{user_b}", response_model=dict)
async def are_matched(user_a: str, user_b: str, registry: MatchRegistry = Depends(get_match_registry)):
    """Whether two users share a confirmed match"""
    try:
        matched = await registry.is_matched(user_a, user_b)
    except ProfileStoreError as e:
        raise store_error_to_http(e) from e
    return {"matched": matched}


@router.get("/{match_id}", response_model=Match)
async def get_match(
    match_id: str,
    user_id: str = Query(..., description="One of the two matched users"),
    registry: MatchRegistry = Depends(get_match_registry),
):
    """Get a confirmed match by ID"""
    try:
        match = await registry.get_match(match_id, user_id)
    except ProfileStoreError as e:
        raise store_error_to_http(e) from e
    if match is None:
        raise HTTPException(status_code=404, detail="Match not found")
    return match
