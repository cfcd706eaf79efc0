"""API router aggregating all route modules."""

from fastapi import APIRouter

from showdown.api.game import router as game_router

router = APIRouter()

router.include_router(game_router, tags=["Game"])
