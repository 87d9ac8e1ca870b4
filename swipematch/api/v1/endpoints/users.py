"""
API endpoints for user profiles and friendships
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from swipematch.api.dependencies import get_store, store_error_to_http
from swipematch.exceptions import ProfileStoreError
from swipematch.models.user import UserProfile, UserProfileCreate, UserProfileUpdate
from swipematch.services.profile_store import ProfileStore
from swipematch.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_user_service(store: ProfileStore = Depends(get_store)) -> UserService:
    return UserService(store)


@router.post("/", response_model=UserProfile)
async def register_user(user_data: UserProfileCreate, service: UserService = Depends(get_user_service)):
    """Create a profile after registration"""
    try:
        return await service.register_user(user_data)
    except ProfileStoreError as e:
        logger.error("Error registering user: %s", e)
        raise store_error_to_http(e) from e


@router.get("/by-phone/{phone_number}", response_model=UserProfile)
async def get_user_by_phone(phone_number: str, service: UserService = Depends(get_user_service)):
    """Find a user by phone number"""
    try:
        user = await service.find_by_phone(phone_number)
    except ProfileStoreError as e:
        raise store_error_to_http(e) from e
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/{user_id}", response_model=UserProfile)
async def get_user(user_id: str, service: UserService = Depends(get_user_service)):
    """Get a user profile"""
    try:
        return await service.get_user(user_id)
    except ProfileStoreError as e:
        raise store_error_to_http(e) from e


@router.patch("/{user_id}", response_model=UserProfile)
async def update_user(user_id: str, update: UserProfileUpdate, service: UserService = Depends(get_user_service)):
    """Update editable profile fields"""
    try:
        return await service.update_profile(user_id, update)
    except ProfileStoreError as e:
        logger.error("Error updating user %s: %s", user_id, e)
        raise store_error_to_http(e) from e


@router.post("/{user_id}/friends/{friend_id}", response_model=dict)
async def add_friend(user_id: str, friend_id: str, service: UserService = Depends(get_user_service)):
    """Connect two users"""
    try:
        added = await service.add_friend(user_id, friend_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ProfileStoreError as e:
        raise store_error_to_http(e) from e
    return {"added": added}


@router.delete("/{user_id}/friends/{friend_id}", response_model=dict)
async def remove_friend(user_id: str, friend_id: str, service: UserService = Depends(get_user_service)):
    """Disconnect two users"""
    try:
        removed = await service.remove_friend(user_id, friend_id)
    except ProfileStoreError as e:
        raise store_error_to_http(e) from e
    return {"removed": removed}


@router.get("/{user_id}/matchmaker-friends", response_model=List[UserProfile])
async def get_matchmaker_friends(user_id: str, service: UserService = Depends(get_user_service)):
    """Friends this user can swipe for"""
    try:
        return await service.get_matchmaker_friends(user_id)
    except ProfileStoreError as e:
        raise store_error_to_http(e) from e


@router.post("/{user_id}/friend-requests/{target_id}", response_model=dict)
async def send_friend_request(user_id: str, target_id: str, service: UserService = Depends(get_user_service)):
    """Ask another user to become friends"""
    try:
        sent = await service.send_friend_request(user_id, target_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ProfileStoreError as e:
        raise store_error_to_http(e) from e
    return {"sent": sent}


@router.post("/{user_id}/friend-requests/{requester_id}/accept", response_model=dict)
async def accept_friend_request(user_id: str, requester_id: str, service: UserService = Depends(get_user_service)):
    """Accept a pending friend request"""
    try:
        accepted = await service.accept_friend_request(user_id, requester_id)
    except ProfileStoreError as e:
        raise store_error_to_http(e) from e
    return {"accepted": accepted}


@router.post("/{user_id}/friend-requests/{requester_id}/reject", response_model=dict)
async def reject_friend_request(user_id: str, requester_id: str, service: UserService = Depends(get_user_service)):
    """Decline a pending friend request"""
    try:
        rejected = await service.reject_friend_request(user_id, requester_id)
    except ProfileStoreError as e:
        raise store_error_to_http(e) from e
    return {"rejected": rejected}


@router.get("/{user_id}/friend-suggestions", response_model=List[UserProfile])
async def get_friend_suggestions(
    user_id: str,
    limit: int = Query(default=10, ge=1, le=50),
    service: UserService = Depends(get_user_service),
):
    """People the user is not connected to yet"""
    try:
        return await service.get_friend_suggestions(user_id, limit=limit)
    except ProfileStoreError as e:
        raise store_error_to_http(e) from e
