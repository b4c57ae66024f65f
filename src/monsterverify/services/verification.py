"""Verification code lifecycle: issue, dispatch, verify and consume."""

import itertools
import logging
import math
import secrets
from datetime import timedelta

from monsterverify.services.codes import (
    Clock,
    CodeStore,
    VerificationEntry,
    generate_code,
    utcnow,
)
from monsterverify.services.email import (
    EmailDeliveryError,
    EmailNotConfiguredError,
    EmailService,
)

logger = logging.getLogger(__name__)

DEFAULT_CODE_TTL = timedelta(minutes=10)


class VerificationError(Exception):
    """Base error for the verification flow.

    Carries the HTTP status and the user-facing message the API returns.
    """

    status_code = 400
    message = "Verification failed. Please try again."

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidInput(VerificationError):
    message = "Please provide a valid email address"


class NotConfigured(VerificationError):
    status_code = 500
    message = "Email service not configured. Please contact support."


class DispatchFailed(VerificationError):
    status_code = 500
    message = "Failed to send verification code. Please try again."


class CodeNotFound(VerificationError):
    message = "No verification code found for this email. Please request a new code."


class CodeExpired(VerificationError):
    message = "Verification code has expired. Please request a new code."


class CodeMismatch(VerificationError):
    message = "Invalid verification code. Please check and try again."


class VerificationService:
    """Issues codes by email and checks them back.

    An entry is stored only after its email was handed to the mail transport,
    so a failed dispatch never leaves behind a code nobody received. When
    issues for one email overlap, only the most recently started one stores
    its code, whatever order the sends finish in.
    """

    def __init__(
        self,
        store: CodeStore,
        email: EmailService,
        clock: Clock = utcnow,
        ttl: timedelta = DEFAULT_CODE_TTL,
    ):
        self.store = store
        self.email = email
        self.clock = clock
        self.ttl = ttl
        self._tickets = itertools.count(1)
        # email -> ticket of the newest issue still in flight
        self._pending: dict[str, int] = {}

    @property
    def ttl_minutes(self) -> int:
        return math.ceil(self.ttl.total_seconds() / 60)

    async def issue(self, email: str | None) -> VerificationEntry:
        """Generate a code for an email address and send it.

        Args:
            email: Recipient address, used as the store key as-is

        Returns:
            The stored entry

        Raises:
            InvalidInput: Email missing or without '@'
            NotConfigured: No email backend configured
            DispatchFailed: The transport failed to deliver
        """
        # Minimal syntactic check only
        if not email or "@" not in email:
            raise InvalidInput()

        if not self.email.configured:
            logger.error("Refusing to issue verification code: email is not configured")
            raise NotConfigured()

        code = generate_code()
        ticket = next(self._tickets)
        self._pending[email] = ticket

        try:
            await self.email.send_verification_code(email, code, self.ttl_minutes)
        except EmailNotConfiguredError as e:
            raise NotConfigured() from e
        except EmailDeliveryError as e:
            logger.error(f"Verification email to {email} failed: {e}")
            raise DispatchFailed() from e
        finally:
            latest = self._pending.get(email) == ticket
            if latest:
                del self._pending[email]

        entry = VerificationEntry(code=code, expires_at=self.clock() + self.ttl)
        if not latest:
            logger.info(f"Verification code for {email} superseded by a newer request")
            return entry

        self.store.put(email, entry)
        logger.info(f"Verification code sent to {email}")
        return entry

    def verify(self, email: str | None, code: str | None) -> None:
        """Check a code and consume it on success.

        Raises:
            InvalidInput: Email or code missing
            CodeNotFound: No code was issued for the email
            CodeExpired: The code expired; the entry is removed
            CodeMismatch: Wrong code; the entry is kept for another attempt
        """
        if not email or not code:
            raise InvalidInput("Email and verification code are required")

        entry = self.store.get(email)
        if entry is None:
            raise CodeNotFound()

        if entry.is_expired(self.clock()):
            self.store.delete(email)
            logger.info(f"Verification code for {email} expired")
            raise CodeExpired()

        if not secrets.compare_digest(entry.code.encode(), code.encode()):
            raise CodeMismatch()

        self.store.delete(email)
        logger.info(f"Email verified: {email}")

    def purge_expired(self) -> int:
        """Drop every expired entry. Returns the number removed."""
        return self.store.purge_expired(self.clock())
