"""
Decision recorder.

Applies one matchmaker's approve/reject swipe on a candidate for a
friend. Approvals accumulate on the friend's ledger entry for the
candidate; once the accumulated rate exceeds the threshold and the
candidate's own ledger already holds an entry for the friend, a match
ID is minted and written to both documents.

Writes are read-modify-write with no concurrency token and no
transaction across the two documents (unless TRANSACTIONAL_MATCH_WRITES
is set): two matchmakers approving the same pair at the same moment can
lose an update, and a failed second write leaves the match on one side.
"""

import logging
from typing import List, Optional

from swipematch.core.config import settings
from swipematch.exceptions import ProfileNotFoundError, ProfileStoreError
from swipematch.models.match import DecisionResult
from swipematch.models.status_enums import DecisionFailure, SwipeDecision
from swipematch.models.user import MatchEntry, UserProfile, UserType, is_storable_key
from swipematch.services import get_profile_store
from swipematch.services.match_registry import make_match_id
from swipematch.services.profile_store import ProfileStore, field_path
from swipematch.services.swipe_pool_service import SwipePoolService

logger = logging.getLogger(__name__)


def approval_increment(friend: UserProfile, all_users: List[UserProfile]) -> float:
    """
    Weight of one approval for ``friend``: one over the number of the
    friend's friends who can swipe for them. Friends known to be plain
    daters are not counted; friends missing from ``all_users`` are.
    """
    known = {user.id: user for user in all_users}
    voters = [
        friend_id
        for friend_id in friend.friends
        if not (friend_id in known and known[friend_id].user_type == UserType.DATER)
    ]
    if not voters:
        return 0.0
    return 1 / len(voters)


def next_approval_rate(current: float, increment: float) -> float:
    rate = current + increment
    if settings.CLAMP_APPROVAL_RATE:
        rate = min(rate, 1.0)
    return rate


class DecisionService:
    """Service for recording matchmaker swipes"""

    def __init__(
        self,
        store: Optional[ProfileStore] = None,
        pool_service: Optional[SwipePoolService] = None,
    ):
        self.store = store or get_profile_store()
        self.pool_service = pool_service or SwipePoolService(self.store)

    async def record_decision(
        self,
        friend_id: str,
        candidate_id: str,
        matchmaker_id: str,
        decision: SwipeDecision,
        all_users: Optional[List[UserProfile]] = None,
    ) -> DecisionResult:
        """Record one swipe; failures are logged and reported in the result"""
        result = DecisionResult(
            friend_id=friend_id,
            candidate_id=candidate_id,
            matchmaker_id=matchmaker_id,
            decision=decision,
        )

        if candidate_id == friend_id:
            result.error = "A user cannot be their own candidate"
            result.failure = DecisionFailure.INVALID_INPUT
            return result

        # IDs become keys of the friend's pools and ledgers; refuse before any write
        bad_ids = [uid for uid in (friend_id, candidate_id, matchmaker_id) if not is_storable_key(uid)]
        if bad_ids:
            result.error = f"User IDs {bad_ids} cannot be used as document keys"
            result.failure = DecisionFailure.INVALID_INPUT
            return result

        try:
            friend = await self.store.get(friend_id)
            candidate = await self.store.get(candidate_id)
            if all_users is None:
                all_users = await self.pool_service.load_candidate_population()

            already_swiped = friend.swiping_pool_for(matchmaker_id).has_swiped(candidate_id)
            await self.pool_service.mark_swiped(friend, matchmaker_id, candidate_id)

            if decision == SwipeDecision.REJECT:
                entry = await self._reject(friend, candidate_id)
            elif already_swiped:
                # A repeated right swipe from the same matchmaker does not count twice
                logger.info(
                    "Matchmaker %s already decided on %s for %s, approval not counted again",
                    matchmaker_id,
                    candidate_id,
                    friend_id,
                )
                entry = friend.match_entry_for(candidate_id)
            else:
                entry, result.match_created = await self._approve(friend, candidate, all_users)

        except ValueError as e:
            logger.error("Rejected decision by %s on %s for %s: %s", matchmaker_id, candidate_id, friend_id, e)
            result.error = str(e)
            result.failure = DecisionFailure.INVALID_INPUT
            return result
        except ProfileStoreError as e:
            logger.error(
                "Error recording %s by %s on %s for %s: %s",
                decision.value,
                matchmaker_id,
                candidate_id,
                friend_id,
                e,
            )
            result.error = e.message
            if isinstance(e, ProfileNotFoundError):
                result.failure = DecisionFailure.NOT_FOUND
            else:
                result.failure = DecisionFailure.STORE_FAILURE
            return result

        result.success = True
        result.approval_rate = entry.approval_rate
        result.match_back = entry.match_back
        result.match_id = entry.match_id

        # Drop the decided candidate and admit newly eligible users
        if await self.pool_service.refresh_pool(friend_id, matchmaker_id, all_users) is None:
            logger.warning("Swipe recorded but pool of %s for %s was not refreshed", matchmaker_id, friend_id)

        return result

    async def _reject(self, friend: UserProfile, candidate_id: str) -> MatchEntry:
        if candidate_id in friend.matches:
            return friend.matches[candidate_id]

        entry = friend.match_entry_for(candidate_id)
        await self.store.merge(friend.id, {field_path("matches", candidate_id): entry})
        logger.info("Recorded rejection of %s for %s", candidate_id, friend.id)
        return entry

    async def _approve(
        self,
        friend: UserProfile,
        candidate: UserProfile,
        all_users: List[UserProfile],
    ) -> tuple[MatchEntry, bool]:
        entry = friend.match_entry_for(candidate.id)
        entry.approval_rate = next_approval_rate(entry.approval_rate, approval_increment(friend, all_users))

        # Someone already swiped on the friend from the candidate's side
        reciprocal = friend.id in candidate.matches

        if entry.match_id or not reciprocal or entry.approval_rate <= settings.MATCH_APPROVAL_THRESHOLD:
            await self.store.merge(friend.id, {field_path("matches", candidate.id): entry})
            logger.info(
                "Approved %s for %s: rate=%.3f reciprocal=%s",
                candidate.id,
                friend.id,
                entry.approval_rate,
                reciprocal,
            )
            return entry, False

        # match_back is only ever written together with the match ID so
        # both sides flip in the same step
        match_id = make_match_id(friend.id, candidate.id)
        entry.match_back = True
        entry.match_id = match_id
        counterpart = candidate.match_entry_for(friend.id)
        counterpart.match_back = True
        counterpart.match_id = match_id

        # Only the reciprocity fields on the candidate side; its approval
        # rate belongs to the candidate's own matchmakers
        await self.store.merge_many(
            {
                friend.id: {field_path("matches", candidate.id): entry},
                candidate.id: {
                    field_path("matches", friend.id, "match_back"): True,
                    field_path("matches", friend.id, "match_id"): match_id,
                },
            }
        )
        logger.info("Created match %s between %s and %s", match_id, friend.id, candidate.id)
        return entry, True
