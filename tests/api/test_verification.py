"""Verification endpoint tests."""

import pytest
from httpx import ASGITransport, AsyncClient

from monsterverify.api.deps import get_verification_service
from monsterverify.main import app
from monsterverify.services.codes import CodeStore
from monsterverify.services.email import EmailDeliveryError

EMAIL = "a@b.com"


async def request_code(client: AsyncClient, email: str = EMAIL):
    return await client.post("/api/send-verification", json={"email": email})


@pytest.mark.asyncio
async def test_send_verification(client: AsyncClient, email_backend, store: CodeStore):
    response = await request_code(client)
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Verification code sent to your email!",
    }
    assert len(email_backend.sent) == 1
    assert email_backend.sent[0]["to"] == EMAIL
    assert store.get(EMAIL).code == email_backend.last_code()  # type: ignore[union-attr]


@pytest.mark.asyncio
async def test_send_verification_invalid_email(client: AsyncClient, email_backend):
    response = await request_code(client, "not-an-email")
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "Please provide a valid email address",
    }
    assert email_backend.sent == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "kwargs",
    [
        {"json": {}},
        {"json": {"email": 42}},
        {"content": b"not json", "headers": {"Content-Type": "application/json"}},
        {},
    ],
)
async def test_send_verification_bad_body(client: AsyncClient, kwargs):
    response = await client.post("/api/send-verification", **kwargs)
    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["message"] == "Please provide a valid email address"


@pytest.mark.asyncio
async def test_send_verification_without_credentials(unconfigured_client: AsyncClient, store: CodeStore):
    response = await request_code(unconfigured_client)
    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "message": "Email service not configured. Please contact support.",
    }
    assert len(store) == 0


@pytest.mark.asyncio
async def test_send_verification_dispatch_failure(client: AsyncClient, email_backend, store: CodeStore):
    email_backend.send_error = EmailDeliveryError("Connection refused")

    response = await request_code(client)
    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "message": "Failed to send verification code. Please try again.",
    }
    assert len(store) == 0


@pytest.mark.asyncio
async def test_verify_code_flow(client: AsyncClient, email_backend, store: CodeStore):
    await request_code(client)
    code = email_backend.last_code()

    response = await client.post("/api/verify-code", json={"email": EMAIL, "code": code})
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "🎉 Email verified successfully! Welcome to Monster Future AI.",
    }
    assert EMAIL not in store

    # Codes are single-use
    response = await client.post("/api/verify-code", json={"email": EMAIL, "code": code})
    assert response.status_code == 400
    assert response.json()["message"] == (
        "No verification code found for this email. Please request a new code."
    )


@pytest.mark.asyncio
async def test_verify_code_accepts_numeric_code(client: AsyncClient, email_backend):
    await request_code(client)
    code = int(email_backend.last_code())

    response = await client.post("/api/verify-code", json={"email": EMAIL, "code": code})
    assert response.status_code == 200
    assert response.json()["success"] is True


@pytest.mark.asyncio
async def test_verify_code_mismatch_is_retryable(client: AsyncClient, email_backend):
    await request_code(client)
    code = email_backend.last_code()
    wrong = "100000" if code != "100000" else "100001"

    response = await client.post("/api/verify-code", json={"email": EMAIL, "code": wrong})
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "Invalid verification code. Please check and try again.",
    }

    response = await client.post("/api/verify-code", json={"email": EMAIL, "code": code})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_verify_code_expired(client: AsyncClient, email_backend, clock, store: CodeStore):
    await request_code(client)
    code = email_backend.last_code()
    clock.advance(minutes=10, seconds=1)

    response = await client.post("/api/verify-code", json={"email": EMAIL, "code": code})
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "Verification code has expired. Please request a new code.",
    }
    assert EMAIL not in store

    response = await client.post("/api/verify-code", json={"email": EMAIL, "code": code})
    assert response.status_code == 400
    assert "No verification code found" in response.json()["message"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [{}, {"email": EMAIL}, {"code": "123456"}, {"email": "", "code": "123456"}, {"email": EMAIL, "code": ""}],
)
async def test_verify_code_missing_fields(client: AsyncClient, body):
    response = await client.post("/api/verify-code", json=body)
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "Email and verification code are required",
    }


@pytest.mark.asyncio
async def test_verify_code_not_requested(client: AsyncClient):
    response = await client.post("/api/verify-code", json={"email": EMAIL, "code": "123456"})
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "No verification code found for this email. Please request a new code.",
    }


@pytest.mark.asyncio
async def test_reissue_invalidates_previous_code(client: AsyncClient, email_backend, monkeypatch):
    codes = iter(["111111", "222222"])
    monkeypatch.setattr("monsterverify.services.verification.generate_code", lambda: next(codes))

    await request_code(client)
    await request_code(client)

    response = await client.post("/api/verify-code", json={"email": EMAIL, "code": "111111"})
    assert response.status_code == 400
    assert "Invalid verification code" in response.json()["message"]

    response = await client.post("/api/verify-code", json={"email": EMAIL, "code": "222222"})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_unknown_route(client: AsyncClient):
    response = await client.get("/api/unknown")
    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "message": (
            "Route not found. Available routes: /api/health, /api/send-verification, "
            "/api/verify-code, /api/test-email"
        ),
    }


@pytest.mark.asyncio
async def test_wrong_method(client: AsyncClient):
    response = await client.get("/api/send-verification")
    assert response.status_code == 405
    data = response.json()
    assert data["success"] is False
    assert data["message"].startswith("Route not found.")


@pytest.mark.asyncio
async def test_unexpected_error_returns_json(verification_service, email_backend):
    """An unexpected exception becomes a 500 success:false body."""
    email_backend.send_error = RuntimeError("boom")
    app.dependency_overrides[get_verification_service] = lambda: verification_service

    try:
        async with AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=False),
            base_url="http://test",
        ) as ac:
            response = await request_code(ac)
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json()["success"] is False
