"""FastAPI dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends, Request

from monsterverify.services.email import EmailService
from monsterverify.services.verification import VerificationService


def get_verification_service(request: Request) -> VerificationService:
    """Get the verification service built for this application."""
    return request.app.state.verification_service


def get_email_service(
    service: Annotated[VerificationService, Depends(get_verification_service)],
) -> EmailService:
    """Get the email service the verification service dispatches through."""
    return service.email


# Type aliases for common dependencies
VerificationServiceDep = Annotated[VerificationService, Depends(get_verification_service)]
EmailServiceDep = Annotated[EmailService, Depends(get_email_service)]
