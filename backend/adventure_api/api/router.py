"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from adventure_api.api.routes import auth, users, items, bookings, location
from adventure_api.schemas.envelope import ErrorResponse

# Every /api route can fail through the error boundary with this body
ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Validation failed"},
    401: {"model": ErrorResponse, "description": "Unauthorized"},
    404: {"model": ErrorResponse, "description": "Not found"},
    500: {"model": ErrorResponse, "description": "Internal Server Error"},
}

api_router = APIRouter(prefix="/api", responses=ERROR_RESPONSES)
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(items.router)
api_router.include_router(bookings.router)
api_router.include_router(location.router)
