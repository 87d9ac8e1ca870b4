"""
Models for swipe pools, decisions and confirmed matches
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from swipematch.models.status_enums import AsymmetryReason, DecisionFailure, SwipeDecision


class PoolState(BaseModel):
    """Snapshot of one matchmaker's sub-pool after a refresh"""
    friend_id: str
    matchmaker_id: str
    pool: List[str] = Field(default_factory=list)
    swiped_pool: List[str] = Field(default_factory=list)


class DecisionRequest(BaseModel):
    """A matchmaker swiping on a candidate for a friend"""
    friend_id: str
    candidate_id: str
    matchmaker_id: str
    decision: SwipeDecision


class DecisionResult(BaseModel):
    """Outcome of recording one swipe"""
    friend_id: str
    candidate_id: str
    matchmaker_id: str
    decision: SwipeDecision
    success: bool = False
    match_created: bool = False
    match_id: Optional[str] = None
    approval_rate: Optional[float] = None
    match_back: bool = False
    error: Optional[str] = None
    failure: Optional[DecisionFailure] = None


class Match(BaseModel):
    """Confirmed mutual pairing, as seen from ``user_id``'s ledger"""
    match_id: str
    user_id: str
    other_user_id: str
    created_at: Optional[datetime] = None  # Decoded from the match ID
    approval_rate: float = 0.0
    match_back: bool = True


class MatchAsymmetry(BaseModel):
    """A ledger entry whose counterpart disagrees with it"""
    user_id: str
    other_user_id: str
    reason: AsymmetryReason
    match_id: Optional[str] = None
    counterpart_match_id: Optional[str] = None
