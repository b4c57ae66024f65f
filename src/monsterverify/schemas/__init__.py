"""Pydantic schemas for API requests/responses."""

from monsterverify.schemas.common import (
    ApiResponse,
    EmailTestResponse,
    HealthResponse,
    SendVerificationRequest,
    VerifyCodeRequest,
)

__all__ = [
    "ApiResponse",
    "EmailTestResponse",
    "HealthResponse",
    "SendVerificationRequest",
    "VerifyCodeRequest",
]
