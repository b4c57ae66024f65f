"""Common schemas used across the API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(ApiModel):
    """Standard response envelope: every body carries success and message."""

    success: bool
    message: str


class HealthResponse(ApiResponse):
    """Health check response."""

    timestamp: datetime
    email_configured: bool


class EmailTestResponse(ApiResponse):
    """Result of a live email connectivity check."""

    configured: bool
    email_user: str | None = None
    error: str | None = None


class SendVerificationRequest(ApiModel):
    """Request body for issuing a verification code.

    Fields are optional so missing values reach the service and get the
    same answer as malformed ones.
    """

    email: str | None = None


class VerifyCodeRequest(ApiModel):
    """Request body for checking a verification code."""

    email: str | None = None
    code: str | int | None = None

    @property
    def code_text(self) -> str | None:
        """The code as a string; numeric JSON codes are accepted too."""
        if self.code is None:
            return None
        return str(self.code)
