"""
API v1 main router
"""

from fastapi import APIRouter

from app.api.v1.endpoints import file_node

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(file_node.router, prefix="/files", tags=["Files"])
