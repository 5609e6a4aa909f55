from fastapi import APIRouter

from app.api.v1.routes import goals

api_router = APIRouter()

api_router.include_router(goals.router, tags=["goals"])
