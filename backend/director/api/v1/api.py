"""API v1 — aggregates all routers under a single prefix."""

from fastapi import APIRouter

from director.api.v1.routers import board, chat, exports, sessions

router = APIRouter()
router.include_router(sessions.router)
router.include_router(chat.router)
router.include_router(board.router)
router.include_router(exports.router)
