"""
Match registry.

There is no match collection: a match exists when both users' ledger
entries for each other carry the same match ID. This module mints those
IDs and reads the derived view back out of the profile store.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from swipematch.exceptions import ProfileNotFoundError
from swipematch.models.match import Match, MatchAsymmetry
from swipematch.models.status_enums import AsymmetryReason, PairState
from swipematch.models.user import MatchEntry, UserProfile
from swipematch.services import get_profile_store
from swipematch.services.profile_store import ProfileStore

logger = logging.getLogger(__name__)


def make_match_id(user_a: str, user_b: str, created_at: Optional[datetime] = None) -> str:
    """
    Build a match ID from the sorted user pair and a millisecond timestamp.

    The same pair yields the same prefix whichever side triggered the
    match, and the timestamp keeps separate match events apart.
    """
    first, second = sorted((user_a, user_b))
    created_at = created_at or datetime.now(timezone.utc)
    return f"{first}_{second}_{int(created_at.timestamp() * 1000)}"


def match_created_at(match_id: str) -> Optional[datetime]:
    """Timestamp encoded in a match ID, or None for foreign formats"""
    _, _, millis = match_id.rpartition("_")
    try:
        return datetime.fromtimestamp(int(millis) / 1000, tz=timezone.utc)
    except (ValueError, OverflowError):
        return None


def match_id_belongs_to(match_id: str, user_a: str, user_b: str) -> bool:
    first, second = sorted((user_a, user_b))
    return match_id.startswith(f"{first}_{second}_")


class MatchRegistry:
    """Read side of confirmed matches"""

    def __init__(self, store: Optional[ProfileStore] = None):
        self.store = store or get_profile_store()

    async def _counterpart(self, other_id: str) -> Optional[UserProfile]:
        try:
            return await self.store.get(other_id)
        except ProfileNotFoundError:
            logger.warning("Ledger references missing user %s", other_id)
            return None

    def _to_match(self, user: UserProfile, other_id: str, entry: MatchEntry) -> Match:
        return Match(
            match_id=entry.match_id,
            user_id=user.id,
            other_user_id=other_id,
            created_at=match_created_at(entry.match_id),
            approval_rate=entry.approval_rate,
            match_back=entry.match_back,
        )

    async def get_matches(self, user_id: str) -> List[Match]:
        """Matches of ``user_id`` confirmed by identical IDs on both sides"""
        user = await self.store.get(user_id)
        matches = []

        for other_id, entry in user.matches.items():
            if not entry.match_id:
                continue
            other = await self._counterpart(other_id)
            if other is None:
                continue
            counterpart = other.matches.get(user_id)
            if counterpart is None or counterpart.match_id != entry.match_id:
                continue
            matches.append(self._to_match(user, other_id, entry))

        matches.sort(key=lambda match: match.match_id)
        return matches

    async def get_match(self, match_id: str, user_id: str) -> Optional[Match]:
        """Look up one confirmed match of ``user_id`` by ID"""
        for match in await self.get_matches(user_id):
            if match.match_id == match_id:
                return match
        return None

    async def is_matched(self, user_a: str, user_b: str) -> bool:
        first = await self.store.get(user_a)
        second = await self.store.get(user_b)
        entry = first.matches.get(user_b)
        counterpart = second.matches.get(user_a)
        return bool(
            entry is not None
            and counterpart is not None
            and entry.match_id
            and entry.match_id == counterpart.match_id
        )

    async def get_pair_state(self, user_id: str, other_id: str) -> PairState:
        """Where ``other_id`` stands in the ledger of ``user_id``"""
        user = await self.store.get(user_id)
        return user.pair_state(other_id)

    async def get_pending(self, user_id: str) -> Dict[str, MatchEntry]:
        """Ledger entries of ``user_id`` that have not become matches"""
        user = await self.store.get(user_id)
        return {other_id: entry for other_id, entry in user.matches.items() if not entry.match_id}

    async def find_asymmetries(self, user_id: str) -> List[MatchAsymmetry]:
        """
        Ledger entries whose counterpart disagrees.

        Match creation writes two documents without a transaction, so a
        failed second write leaves a match ID or reciprocity flag on one
        side only. This reports those entries so they can be repaired.
        """
        user = await self.store.get(user_id)
        asymmetries = []

        for other_id, entry in user.matches.items():
            if not entry.match_id and not entry.match_back:
                continue

            other = await self._counterpart(other_id)
            counterpart = other.matches.get(user_id) if other is not None else None

            if counterpart is None:
                reason = AsymmetryReason.MISSING_COUNTERPART
            elif entry.match_id != counterpart.match_id:
                reason = AsymmetryReason.MATCH_ID_MISMATCH
            elif entry.match_id and not match_id_belongs_to(entry.match_id, user_id, other_id):
                reason = AsymmetryReason.FOREIGN_MATCH_ID
            elif entry.match_id and entry.match_back != counterpart.match_back:
                reason = AsymmetryReason.MATCH_BACK_MISMATCH
            else:
                continue

            asymmetries.append(
                MatchAsymmetry(
                    user_id=user_id,
                    other_user_id=other_id,
                    reason=reason,
                    match_id=entry.match_id,
                    counterpart_match_id=counterpart.match_id if counterpart else None,
                )
            )

        return asymmetries
