"""Verification code endpoints."""

from fastapi import APIRouter

from monsterverify.api.deps import VerificationServiceDep
from monsterverify.config import settings
from monsterverify.schemas import ApiResponse, SendVerificationRequest, VerifyCodeRequest

router = APIRouter()


@router.post("/send-verification", response_model=ApiResponse)
async def send_verification(request: SendVerificationRequest, service: VerificationServiceDep):
    """
    Issue a verification code and email it.

    Failures are raised as VerificationError and rendered by the app's
    exception handler.
    """
    await service.issue(request.email)
    return ApiResponse(success=True, message="Verification code sent to your email!")


@router.post("/verify-code", response_model=ApiResponse)
async def verify_code(request: VerifyCodeRequest, service: VerificationServiceDep):
    """
    Check a verification code. A correct code is consumed.
    """
    service.verify(request.email, request.code_text)
    return ApiResponse(
        success=True,
        message=f"🎉 Email verified successfully! Welcome to {settings.app_name}.",
    )
