"""
Swipe pool manager.

Each friend document keeps one sub-pool per matchmaker: the ordered
candidates that matchmaker has not decided on yet, and the set they
already decided on. Refreshing re-derives the undecided list from the
compatibility filter on every call, reading the friend from the store
each time so several matchmakers can work on the same friend.
"""

import logging
from typing import List, Optional

from swipematch.core.config import settings
from swipematch.exceptions import PoolIntegrityError, ProfileStoreError
from swipematch.models.match import PoolState
from swipematch.models.user import SwipePool, UserProfile, UserType
from swipematch.services import get_profile_store
from swipematch.services.compatibility import eligible_candidates
from swipematch.services.profile_store import ProfileStore, field_path

logger = logging.getLogger(__name__)

DATER_TYPES = [user_type for user_type in UserType if user_type.can_date]


class SwipePoolService:
    """Service for building and updating per-matchmaker swipe pools"""

    def __init__(self, store: Optional[ProfileStore] = None):
        self.store = store or get_profile_store()

    async def load_candidate_population(self) -> List[UserProfile]:
        """Users the compatibility filter runs over"""
        if settings.INDEXED_CANDIDATE_QUERY:
            users = []
            for user_type in DATER_TYPES:
                users.extend(await self.store.query("user_type", user_type.value))
            return users
        return await self.store.list_all()

    async def refresh_pool(
        self,
        friend_id: str,
        matchmaker_id: str,
        all_users: Optional[List[UserProfile]] = None,
    ) -> Optional[PoolState]:
        """Recompute the undecided candidates ``matchmaker_id`` sees for ``friend_id``"""
        try:
            friend = await self.store.get(friend_id)
            if all_users is None:
                all_users = await self.load_candidate_population()

            sub_pool = friend.swiping_pool_for(matchmaker_id)
            try:
                sub_pool.assert_consistent(matchmaker_id)
            except PoolIntegrityError as e:
                # Recomputing below drops decided candidates from the pool
                logger.warning("Repairing pool of %s: %s", friend_id, e)

            candidates = eligible_candidates(
                friend,
                all_users,
                exclude_ids=[matchmaker_id, *sub_pool.swiped_pool],
            )
            sub_pool.pool = [candidate.id for candidate in candidates]

            await self.store.merge(friend_id, {field_path("swiping_pools", matchmaker_id): sub_pool})

            logger.info(
                "Refreshed pool of matchmaker %s for %s: %d undecided, %d swiped",
                matchmaker_id,
                friend_id,
                len(sub_pool.pool),
                len(sub_pool.swiped_pool),
            )
            return PoolState(
                friend_id=friend_id,
                matchmaker_id=matchmaker_id,
                pool=sub_pool.pool,
                swiped_pool=sub_pool.swiped_pool,
            )

        except ValueError as e:
            logger.error("Cannot store pool of matchmaker %s for %s: %s", matchmaker_id, friend_id, e)
            return None
        except ProfileStoreError as e:
            logger.error("Error refreshing pool of matchmaker %s for %s: %s", matchmaker_id, friend_id, e)
            return None

    async def mark_swiped(self, friend: UserProfile, matchmaker_id: str, candidate_id: str) -> SwipePool:
        """Move ``candidate_id`` into the matchmaker's decided set and persist the sub-pool"""
        sub_pool = friend.swiping_pool_for(matchmaker_id)
        sub_pool.mark_swiped(candidate_id)
        await self.store.merge(friend.id, {field_path("swiping_pools", matchmaker_id): sub_pool})
        return sub_pool

    async def get_deck(self, friend_id: str, matchmaker_id: str) -> Optional[List[UserProfile]]:
        """Refresh the pool and return the candidate profiles in pool order"""
        try:
            all_users = await self.load_candidate_population()
        except ProfileStoreError as e:
            logger.error("Error loading candidates for %s: %s", friend_id, e)
            return None

        state = await self.refresh_pool(friend_id, matchmaker_id, all_users)
        if state is None:
            return None

        by_id = {user.id: user for user in all_users}
        return [by_id[candidate_id] for candidate_id in state.pool if candidate_id in by_id]
