"""Health check and email diagnostics endpoints."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from monsterverify.api.deps import EmailServiceDep
from monsterverify.config import settings
from monsterverify.schemas import EmailTestResponse, HealthResponse
from monsterverify.services.codes import utcnow
from monsterverify.services.email import EmailDeliveryError, EmailNotConfiguredError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(email: EmailServiceDep):
    """Basic health check - confirms the service is running.

    Reports whether email credentials are present without contacting the
    mail server.
    """
    return HealthResponse(
        success=True,
        message=f"🚀 {settings.app_name} Backend is running!",
        timestamp=utcnow(),
        email_configured=email.configured,
    )


@router.get("/test-email", response_model=EmailTestResponse, response_model_exclude_none=True)
async def test_email(email: EmailServiceDep):
    """Live email check - opens and authenticates a mail transport channel."""
    try:
        await email.check_connection()
    except EmailNotConfiguredError as e:
        return JSONResponse(
            status_code=500,
            content=EmailTestResponse(
                success=False,
                message="Email credentials not configured. Please check environment variables.",
                configured=False,
                error=str(e),
            ).model_dump(by_alias=True, exclude_none=True),
        )
    except EmailDeliveryError as e:
        logger.error(f"Email connectivity check failed: {e!r}")
        return JSONResponse(
            status_code=500,
            content=EmailTestResponse(
                success=False,
                message=f"❌ Email test failed: {e}",
                configured=True,
                error=str(e),
            ).model_dump(by_alias=True, exclude_none=True),
        )

    return EmailTestResponse(
        success=True,
        message="✅ Email configuration is working!",
        configured=True,
        email_user=email.identity,
    )
