"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from narumate.api.routes import chat, conversations, moods

api_router = APIRouter()

# Include all route modules
api_router.include_router(conversations.router)
api_router.include_router(chat.router)
api_router.include_router(moods.router)
