"""
API endpoints for matchmaker swipe decisions
"""

from fastapi import APIRouter, Depends, HTTPException

from swipematch.api.dependencies import get_store
from swipematch.models.match import DecisionRequest, DecisionResult
from swipematch.models.status_enums import DecisionFailure
from swipematch.services.decision_service import DecisionService
from swipematch.services.profile_store import ProfileStore

router = APIRouter()

FAILURE_STATUS_CODES = {
    DecisionFailure.INVALID_INPUT: 400,
    DecisionFailure.NOT_FOUND: 404,
    DecisionFailure.STORE_FAILURE: 502,
}


def get_decision_service(store: ProfileStore = Depends(get_store)) -> DecisionService:
    return DecisionService(store)


@router.post("/", response_model=DecisionResult)
async def record_decision(request: DecisionRequest, service: DecisionService = Depends(get_decision_service)):
    """Record an approve or reject swipe by a matchmaker"""
    result = await service.record_decision(
        friend_id=request.friend_id,
        candidate_id=request.candidate_id,
        matchmaker_id=request.matchmaker_id,
        decision=request.decision,
    )
    if not result.success:
        status_code = FAILURE_STATUS_CODES.get(result.failure, 500)
        raise HTTPException(status_code=status_code, detail=result.error or "Failed to record decision")
    return result
