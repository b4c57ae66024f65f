"""Main API router that aggregates all route modules."""

from fastapi import APIRouter

from monsterverify.api import health, verification

api_router = APIRouter()

# Include all route modules
api_router.include_router(health.router, tags=["health"])
api_router.include_router(verification.router, tags=["verification"])

AVAILABLE_ROUTES = [
    "/api/health",
    "/api/send-verification",
    "/api/verify-code",
    "/api/test-email",
]
