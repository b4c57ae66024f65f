"""Background sweeping of expired verification codes."""

import asyncio
import logging

from monsterverify.services.verification import VerificationService

logger = logging.getLogger(__name__)


def purge_expired_codes(service: VerificationService) -> int:
    """Remove expired entries from the code store.

    Returns:
        Number of entries removed
    """
    removed = service.purge_expired()
    if removed:
        logger.info(f"Purged {removed} expired verification code(s), {len(service.store)} remaining")
    return removed


async def run_code_sweeper(service: VerificationService, interval_seconds: float) -> None:
    """Purge expired codes every interval_seconds until cancelled."""
    logger.debug(f"Code sweeper started (interval={interval_seconds}s)")
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            purge_expired_codes(service)
        except Exception as e:
            logger.error(f"Code sweep failed: {e!r}", exc_info=True)
