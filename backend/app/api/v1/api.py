"""
V1 API Router - aggregates all v1 endpoints.
"""
from fastapi import APIRouter
from app.api.v1.endpoints import chat, health

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(chat.router, prefix="/chat", tags=["chat"])
