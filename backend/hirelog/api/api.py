"""
API Router Aggregator.

Combines all v1 API routers into a single router for the main app.
"""

from fastapi import APIRouter

from hirelog.api.v1 import auth, users, candidates, notes, notifications, live

api_router = APIRouter()

# Include all v1 routers with their prefixes and tags
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Authentication"],
)

api_router.include_router(
    users.router,
    prefix="/users",
    tags=["Users"],
)

api_router.include_router(
    candidates.router,
    prefix="/candidates",
    tags=["Candidates"],
)

# Notes live under /candidates/{candidate_id}/notes
api_router.include_router(
    notes.router,
    prefix="/candidates",
    tags=["Notes"],
)

api_router.include_router(
    notifications.router,
    prefix="/notifications",
    tags=["Notifications"],
)

api_router.include_router(
    live.router,
    prefix="/live",
    tags=["Live"],
)
