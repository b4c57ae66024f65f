"""Verification code generation and in-memory storage."""

import secrets
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

CODE_LENGTH = 6
CODE_MIN = 10 ** (CODE_LENGTH - 1)
CODE_MAX = 10**CODE_LENGTH - 1

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def generate_code() -> str:
    """Generate a 6-digit numeric code, uniform over 100000-999999."""
    return str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))


@dataclass(frozen=True)
class VerificationEntry:
    """A code issued for an email address and the moment it stops being valid."""

    code: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


class CodeStore:
    """In-memory mapping of email address to its single live verification entry.

    Keys are used exactly as received. Every method is synchronous, so calls
    made from request handlers on the event loop never interleave.

    Note: Entries do not survive a restart and are not shared between
    processes.
    """

    def __init__(self) -> None:
        self._entries: dict[str, VerificationEntry] = {}

    def put(self, email: str, entry: VerificationEntry) -> None:
        """Store an entry, replacing any existing one for the email."""
        self._entries[email] = entry

    def get(self, email: str) -> VerificationEntry | None:
        return self._entries.get(email)

    def delete(self, email: str) -> None:
        self._entries.pop(email, None)

    def purge_expired(self, now: datetime) -> int:
        """Remove expired entries from memory.

        Returns:
            Number of entries removed
        """
        expired = [email for email, entry in self._entries.items() if entry.is_expired(now)]
        for email in expired:
            del self._entries[email]
        return len(expired)

    def clear(self) -> None:
        """Remove all entries. Useful for testing."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, email: object) -> bool:
        return email in self._entries
