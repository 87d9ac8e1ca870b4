"""
User management service: registration, lookup and the friend graph
"""

import logging
from typing import List, Optional
from uuid import uuid4

from swipematch.exceptions import ProfileNotFoundError
from swipematch.models.user import UserProfile, UserProfileCreate, UserProfileUpdate
from swipematch.services import get_profile_store
from swipematch.services.profile_store import ProfileStore, field_path

logger = logging.getLogger(__name__)


class UserService:
    """Service for managing user profiles and friendships"""

    def __init__(self, store: Optional[ProfileStore] = None):
        self.store = store or get_profile_store()

    async def register_user(self, user_data: UserProfileCreate) -> UserProfile:
        """Create the profile on first successful registration"""
        user_id = user_data.id or uuid4().hex
        profile = UserProfile(id=user_id, **user_data.model_dump(exclude={"id"}))
        await self.store.create(profile)
        logger.info("Registered user %s as %s", user_id, profile.user_type.value)
        return profile

    async def get_user(self, user_id: str) -> UserProfile:
        return await self.store.get(user_id)

    async def find_by_phone(self, phone_number: str) -> Optional[UserProfile]:
        """First user registered with ``phone_number``"""
        users = await self.store.query("phone_number", phone_number)
        if len(users) > 1:
            logger.warning("Phone number %s is shared by %d users", phone_number, len(users))
        return users[0] if users else None

    async def update_profile(self, user_id: str, update: UserProfileUpdate) -> UserProfile:
        patch = update.model_dump(exclude_unset=True)
        # Profile details are merged field by field
        details = patch.pop("profile_data", None) or {}
        for name, value in details.items():
            patch[field_path("profile_data", name)] = value
        if patch:
            await self.store.merge(user_id, patch)
        return await self.store.get(user_id)

    async def add_friend(self, user_id: str, friend_id: str) -> bool:
        """
        Connect two users. The connection is stored on both documents with
        two separate writes; returns False when they were already friends.
        """
        if user_id == friend_id:
            raise ValueError("A user cannot befriend themselves")

        user = await self.store.get(user_id)
        friend = await self.store.get(friend_id)

        changed = False
        if friend_id not in user.friends:
            await self.store.merge(user_id, {"friends": [*user.friends, friend_id]})
            changed = True
        if user_id not in friend.friends:
            await self.store.merge(friend_id, {"friends": [*friend.friends, user_id]})
            changed = True

        if changed:
            logger.info("Connected users %s and %s", user_id, friend_id)
        return changed

    async def remove_friend(self, user_id: str, friend_id: str) -> bool:
        """Disconnect two users on both sides; returns False when they were not friends"""
        user = await self.store.get(user_id)
        changed = False

        if friend_id in user.friends:
            await self.store.merge(user_id, {"friends": [fid for fid in user.friends if fid != friend_id]})
            changed = True

        try:
            friend = await self.store.get(friend_id)
        except ProfileNotFoundError:
            logger.warning("Removed dangling friend %s from %s", friend_id, user_id)
            return changed

        if user_id in friend.friends:
            await self.store.merge(friend_id, {"friends": [fid for fid in friend.friends if fid != user_id]})
            changed = True

        return changed

    async def get_matchmaker_friends(self, user_id: str) -> List[UserProfile]:
        """Friends of ``user_id`` that ``user_id`` can swipe for"""
        user = await self.store.get(user_id)
        if not user.is_matchmaker:
            logger.info("User %s is not a matchmaker", user_id)
            return []

        friends = []
        for friend_id in user.friends:
            try:
                friend = await self.store.get(friend_id)
            except ProfileNotFoundError:
                logger.warning("Friend %s of %s not found", friend_id, user_id)
                continue
            if friend.is_dater:
                friends.append(friend)

        logger.info("Found %d matchmaker friends for %s", len(friends), user_id)
        return friends

    async def send_friend_request(self, user_id: str, target_id: str) -> bool:
        """
        Ask ``target_id`` to connect. Stored as a sent request on the sender
        and a pending request on the target; returns False when the two are
        already friends or a request is open in either direction.
        """
        if user_id == target_id:
            raise ValueError("A user cannot send a friend request to themselves")

        user = await self.store.get(user_id)
        target = await self.store.get(target_id)

        if user.is_connected_to(target_id):
            return False

        await self.store.merge(user_id, {"sent_friend_requests": [*user.sent_friend_requests, target_id]})
        if user_id not in target.pending_friend_requests:
            await self.store.merge(
                target_id, {"pending_friend_requests": [*target.pending_friend_requests, user_id]}
            )

        logger.info("Friend request sent from %s to %s", user_id, target_id)
        return True

    async def _close_friend_request(self, user_id: str, requester_id: str, accept: bool) -> bool:
        user = await self.store.get(user_id)
        if requester_id not in user.pending_friend_requests:
            return False
        requester = await self.store.get(requester_id)

        user_patch = {"pending_friend_requests": [rid for rid in user.pending_friend_requests if rid != requester_id]}
        requester_patch = {"sent_friend_requests": [tid for tid in requester.sent_friend_requests if tid != user_id]}
        if accept:
            if requester_id not in user.friends:
                user_patch["friends"] = [*user.friends, requester_id]
            if user_id not in requester.friends:
                requester_patch["friends"] = [*requester.friends, user_id]

        await self.store.merge(user_id, user_patch)
        await self.store.merge(requester_id, requester_patch)

        logger.info(
            "Friend request from %s to %s %s", requester_id, user_id, "accepted" if accept else "rejected"
        )
        return True

    async def accept_friend_request(self, user_id: str, requester_id: str) -> bool:
        """Turn a pending request into a friendship on both documents"""
        return await self._close_friend_request(user_id, requester_id, accept=True)

    async def reject_friend_request(self, user_id: str, requester_id: str) -> bool:
        return await self._close_friend_request(user_id, requester_id, accept=False)

    async def get_friend_suggestions(self, user_id: str, limit: int = 10) -> List[UserProfile]:
        """Users ``user_id`` is not connected to in any way, ordered by ID"""
        user = await self.store.get(user_id)
        suggestions = [
            other
            for other in await self.store.list_all()
            if other.id != user_id and not user.is_connected_to(other.id)
        ]
        suggestions.sort(key=lambda other: other.id)
        return suggestions[:limit]
