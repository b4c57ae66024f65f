"""Email service for sending verification codes."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import aiosmtplib

from monsterverify.config import Settings, settings

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """The mail transport could not connect, authenticate or deliver."""

    pass


class EmailNotConfiguredError(Exception):
    """No usable email backend is configured."""

    pass


class EmailBackend(ABC):
    """Abstract base class for email backends."""

    @abstractmethod
    async def send(
        self,
        to: str,
        subject: str,
        html: str,
        text: str | None = None,
    ) -> None:
        """Send an email.

        Args:
            to: Recipient email address
            subject: Email subject
            html: HTML content
            text: Plain text content (optional)

        Raises:
            EmailDeliveryError: If the message could not be delivered
        """
        pass

    @abstractmethod
    async def check_connection(self) -> None:
        """Open and authenticate a transport channel without sending anything.

        Raises:
            EmailDeliveryError: With the raw failure reason
        """
        pass


class ConsoleEmailBackend(EmailBackend):
    """Email backend that logs to console (for development)."""

    async def send(
        self,
        to: str,
        subject: str,
        html: str,
        text: str | None = None,
    ) -> None:
        """Log email to console instead of sending."""
        logger.info(
            f"\n{'='*60}\n"
            f"EMAIL (console backend - not sent)\n"
            f"{'='*60}\n"
            f"To: {to}\n"
            f"Subject: {subject}\n"
            f"{'='*60}\n"
            f"{text or html}\n"
            f"{'='*60}\n"
        )

    async def check_connection(self) -> None:
        """Console output is always available."""
        return None


class SMTPEmailBackend(EmailBackend):
    """Email backend using SMTP."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        use_tls: bool = True,
        validate_certs: bool = False,
        timeout: float = 10.0,
        from_address: str = "",
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.validate_certs = validate_certs
        self.timeout = timeout
        self.from_address = from_address

    async def send(
        self,
        to: str,
        subject: str,
        html: str,
        text: str | None = None,
    ) -> None:
        """Send email via SMTP."""
        message = MIMEMultipart("alternative")
        message["From"] = self.from_address
        message["To"] = to
        message["Subject"] = subject

        # Add plain text part
        if text:
            message.attach(MIMEText(text, "plain", "utf-8"))

        # Add HTML part
        message.attach(MIMEText(html, "html", "utf-8"))

        try:
            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.username,
                password=self.password,
                start_tls=self.use_tls,
                validate_certs=self.validate_certs,
                timeout=self.timeout,
            )
        except (aiosmtplib.SMTPException, OSError, TimeoutError) as e:
            logger.error(f"Failed to send email via SMTP to {to}: {e}")
            raise EmailDeliveryError(str(e)) from e

        logger.info(f"Email sent via SMTP to {to}")

    async def check_connection(self) -> None:
        """Connect, upgrade to TLS and log in, then disconnect."""
        client = aiosmtplib.SMTP(
            hostname=self.host,
            port=self.port,
            start_tls=self.use_tls,
            validate_certs=self.validate_certs,
            timeout=self.timeout,
        )
        try:
            async with client:
                await client.login(self.username, self.password)
        except (aiosmtplib.SMTPException, OSError, TimeoutError) as e:
            logger.warning(f"SMTP connection check against {self.host}:{self.port} failed: {e}")
            raise EmailDeliveryError(str(e)) from e


@dataclass(frozen=True)
class EmailConfigured:
    """A ready-to-use backend and the account identity it sends as."""

    backend: EmailBackend
    identity: str


@dataclass(frozen=True)
class EmailUnconfigured:
    """Email cannot be sent; reason says what is missing."""

    reason: str


EmailCapability = EmailConfigured | EmailUnconfigured


def get_email_capability(config: Settings | None = None) -> EmailCapability:
    """Build the email capability from settings."""
    config = config or settings

    if config.email_backend == "console":
        return EmailConfigured(
            backend=ConsoleEmailBackend(),
            identity=config.email_user or "console",
        )
    elif config.email_backend == "smtp":
        if not config.email_credentials_configured:
            logger.warning("Email credentials missing (EMAIL_USER / EMAIL_PASS)")
            return EmailUnconfigured(reason="EMAIL_USER or EMAIL_PASS is not set")
        return EmailConfigured(
            backend=SMTPEmailBackend(
                host=config.smtp_host,
                port=config.smtp_port,
                username=config.email_user,
                password=config.email_pass,
                use_tls=config.smtp_use_tls,
                validate_certs=config.smtp_validate_certs,
                timeout=config.smtp_timeout,
                from_address=config.email_from,
            ),
            identity=config.email_user,
        )
    else:
        raise ValueError(f"Unknown email backend: {config.email_backend}")


class EmailService:
    """High-level email service for sending application emails."""

    def __init__(self, capability: EmailCapability | None = None, app_name: str | None = None):
        self._capability = capability
        self.app_name = app_name or settings.app_name

    @property
    def capability(self) -> EmailCapability:
        """Lazy-load the capability."""
        if self._capability is None:
            self._capability = get_email_capability()
        return self._capability

    @property
    def configured(self) -> bool:
        return isinstance(self.capability, EmailConfigured)

    @property
    def identity(self) -> str | None:
        """Account the service sends as, if configured."""
        capability = self.capability
        if isinstance(capability, EmailConfigured):
            return capability.identity
        return None

    def _require_backend(self) -> EmailBackend:
        capability = self.capability
        if isinstance(capability, EmailUnconfigured):
            raise EmailNotConfiguredError(capability.reason)
        return capability.backend

    async def check_connection(self) -> None:
        """Run a live connectivity check against the configured backend.

        Raises:
            EmailNotConfiguredError: If no backend is configured
            EmailDeliveryError: If the transport check fails
        """
        await self._require_backend().check_connection()

    async def send_verification_code(self, to: str, code: str, ttl_minutes: int) -> None:
        """Send a verification code email.

        Args:
            to: Recipient email address
            code: The 6-digit verification code
            ttl_minutes: How long the code stays valid, shown to the reader

        Raises:
            EmailNotConfiguredError: If no backend is configured
            EmailDeliveryError: If sending fails
        """
        backend = self._require_backend()
        subject = f"{self.app_name} - Verification Code"
        expiry = f"{ttl_minutes} minute{'s' if ttl_minutes != 1 else ''}"

        html = f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <div style="background: linear-gradient(135deg, #8B0000, #FF4500); color: white; padding: 30px; text-align: center;">
        <h1 style="margin: 0;">{self.app_name.upper()}</h1>
        <p style="margin: 10px 0 0 0;">Email Verification</p>
    </div>

    <div style="padding: 30px;">
        <h2>Hello Trader! 👋</h2>
        <p>Your verification code is:</p>
        <div style="background: #f8f9fa; border: 2px dashed #8B0000; padding: 20px; text-align: center; margin: 20px 0;">
            <span style="font-size: 32px; font-weight: bold; color: #8B0000; letter-spacing: 5px;">
                {code}
            </span>
        </div>
        <p><strong>This code expires in {expiry}.</strong></p>
        <p>If you didn't request this code, please ignore this email.</p>
    </div>

    <div style="background: #f8f9fa; padding: 20px; text-align: center; color: #666; border-top: 1px solid #ddd;">
        <p>&copy; {self.app_name}</p>
    </div>
</body>
</html>
"""

        text = f"""
{self.app_name} - Email Verification
===================================

Your verification code is: {code}

This code expires in {expiry}.

If you didn't request this code, please ignore this email.
"""

        await backend.send(to=to, subject=subject, html=html, text=text)
