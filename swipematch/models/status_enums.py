"""
Centralized status enums for swiping and matching
"""

from enum import Enum


class SwipeDecision(str, Enum):
    """Decision a matchmaker records about a candidate"""
    APPROVE = "approve"            # Swipe right
    REJECT = "reject"              # Swipe left


class PairState(str, Enum):
    """Lifecycle of a (friend, candidate) pair in the friend's ledger"""
    UNDECIDED = "undecided"                    # No ledger entry yet
    REJECTED = "rejected"                      # Entry exists, nobody approved
    PARTIALLY_APPROVED = "partially_approved"  # Some approval, no match yet
    MATCHED = "matched"                        # Match ID assigned


class AsymmetryReason(str, Enum):
    """Ways the two halves of a match can disagree after a partial write"""
    MISSING_COUNTERPART = "missing_counterpart"      # Other side has no ledger entry
    MATCH_ID_MISMATCH = "match_id_mismatch"          # Other side has a different match ID
    MATCH_BACK_MISMATCH = "match_back_mismatch"      # Only one side flagged reciprocity
    FOREIGN_MATCH_ID = "foreign_match_id"            # Shared ID was minted for another pair


class DecisionFailure(str, Enum):
    """Why a swipe could not be recorded"""
    INVALID_INPUT = "invalid_input"    # Request can never succeed
    NOT_FOUND = "not_found"            # Friend or candidate document missing
    STORE_FAILURE = "store_failure"    # Read or write against the store failed
