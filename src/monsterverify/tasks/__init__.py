"""Background tasks."""

from monsterverify.tasks.cleanup import purge_expired_codes, run_code_sweeper

__all__ = ["purge_expired_codes", "run_code_sweeper"]
