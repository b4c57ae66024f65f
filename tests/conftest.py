"""Pytest configuration and fixtures."""

import os
import re
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

# Set test environment before importing app
os.environ["ENVIRONMENT"] = "test"

import pytest
from httpx import ASGITransport, AsyncClient

from monsterverify.api.deps import get_verification_service
from monsterverify.main import app
from monsterverify.services.codes import CodeStore
from monsterverify.services.email import (
    EmailBackend,
    EmailConfigured,
    EmailService,
    EmailUnconfigured,
)
from monsterverify.services.verification import VerificationService

SENDER = "noreply@monstertrading.site"


class FakeClock:
    """Controllable clock for expiry tests.

    Usage:
        clock.advance(minutes=11)
    """

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class RecordingEmailBackend(EmailBackend):
    """Email backend that keeps sent messages in memory."""

    def __init__(self) -> None:
        self.sent: list[dict[str, str | None]] = []
        self.send_error: Exception | None = None
        self.check_error: Exception | None = None

    async def send(
        self,
        to: str,
        subject: str,
        html: str,
        text: str | None = None,
    ) -> None:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append({"to": to, "subject": subject, "html": html, "text": text})

    async def check_connection(self) -> None:
        if self.check_error is not None:
            raise self.check_error

    def last_code(self) -> str:
        """Extract the code from the most recent message."""
        match = re.search(r"code is: (\d{6})", self.sent[-1]["text"] or "")
        assert match, "no verification code in last email"
        return match.group(1)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def email_backend() -> RecordingEmailBackend:
    return RecordingEmailBackend()


@pytest.fixture
def email_service(email_backend: RecordingEmailBackend) -> EmailService:
    return EmailService(
        capability=EmailConfigured(backend=email_backend, identity=SENDER),
        app_name="Monster Future AI",
    )


@pytest.fixture
def store() -> CodeStore:
    return CodeStore()


@pytest.fixture
def verification_service(
    store: CodeStore, email_service: EmailService, clock: FakeClock
) -> VerificationService:
    return VerificationService(store=store, email=email_service, clock=clock)


@pytest.fixture
def unconfigured_service(store: CodeStore, clock: FakeClock) -> VerificationService:
    """Verification service whose email capability lacks credentials."""
    email = EmailService(capability=EmailUnconfigured(reason="EMAIL_USER or EMAIL_PASS is not set"))
    return VerificationService(store=store, email=email, clock=clock)


async def make_client(service: VerificationService) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_verification_service] = lambda: service

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def client(verification_service: VerificationService) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client backed by a configured email service."""
    async for ac in make_client(verification_service):
        yield ac


@pytest.fixture
async def unconfigured_client(
    unconfigured_service: VerificationService,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client whose email credentials are missing."""
    async for ac in make_client(unconfigured_service):
        yield ac
