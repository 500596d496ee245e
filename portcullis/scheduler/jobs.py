"""APScheduler jobs: periodic sweep of expired password reset codes."""

import pytz
import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from portcullis.config import get_settings
from portcullis.infrastructure.database import SessionLocal

settings = get_settings()
logger = structlog.get_logger(__name__)
tz = pytz.timezone(settings.TIMEZONE)

scheduler = AsyncIOScheduler(timezone=tz)


async def cleanup_reset_codes_job():
    """Periodic job: delete reset codes past their expiry."""
    from portcullis.application.services.password_reset_service import cleanup_expired
    from portcullis.domain.models.password_reset_token import PasswordResetToken
    from portcullis.infrastructure.repositories.password_reset_repository import SQLAlchemyPasswordResetRepository

    async with SessionLocal() as session:
        try:
            repo = SQLAlchemyPasswordResetRepository(session, PasswordResetToken)
            deleted = await cleanup_expired(repo)
            logger.info("Reset code cleanup finished", deleted=deleted)
        except Exception:
            await session.rollback()
            logger.exception("Reset code cleanup failed")


def start_scheduler():
    """Start the APScheduler with the reset-code cleanup job."""
    scheduler.add_job(
        cleanup_reset_codes_job,
        trigger=IntervalTrigger(minutes=settings.CLEANUP_INTERVAL_MINUTES, timezone=tz),
        id="reset_code_cleanup",
        name=f"Reset code cleanup (every {settings.CLEANUP_INTERVAL_MINUTES} mins)",
        replace_existing=True,
    )
    scheduler.start()
    logger.info("Scheduler started", cleanup_interval_minutes=settings.CLEANUP_INTERVAL_MINUTES, timezone=settings.TIMEZONE)


def stop_scheduler():
    """Stop the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
