from fastapi import APIRouter

from swipematch.api.v1.endpoints import decisions, matches, swipe_pools, users

api_router = APIRouter()
api_router.include_router(
    users.router, prefix="/users", tags=["users"]
)
api_router.include_router(
    swipe_pools.router, prefix="/swipe-pools", tags=["swipe-pools"]
)
api_router.include_router(
    decisions.router, prefix="/decisions", tags=["decisions"]
)
api_router.include_router(
    matches.router, prefix="/matches", tags=["matches"]
)
