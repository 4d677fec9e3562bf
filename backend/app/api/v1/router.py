"""Aggregate API v1 router: mounts all sub-routers."""
from fastapi import APIRouter
from app.api.v1 import admin, ai, analytics, auth, doubts, favorites, feedback, leaderboard, replies, teachers
from app.schemas.common import ErrorResponse

router = APIRouter(
    prefix="/api/v1",
    responses={status: {"model": ErrorResponse} for status in (400, 401, 403, 404)},
)

router.include_router(auth.router, prefix="/auth", tags=["Auth"])
router.include_router(teachers.router, prefix="/teachers", tags=["Teachers"])
router.include_router(feedback.router, prefix="/feedback", tags=["Feedback"])
router.include_router(feedback.qr_router, tags=["Feedback"])
router.include_router(replies.router, tags=["Replies"])
router.include_router(doubts.router, prefix="/doubts", tags=["Doubts"])
router.include_router(favorites.router, prefix="/favorites", tags=["Favorites"])
router.include_router(analytics.router, prefix="/analytics", tags=["Analytics"])
router.include_router(leaderboard.router, tags=["Leaderboard"])
router.include_router(admin.router, prefix="/admin", tags=["Admin"])
router.include_router(ai.router, prefix="/ai", tags=["AI"])
