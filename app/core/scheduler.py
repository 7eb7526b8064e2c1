"""Background job scheduler for completing notification fan-out."""
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlmodel import Session

from app.core.config import settings
from app.core.database import engine
from app.registration.notifications import redeliver_pending

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


def redelivery_job():
    """Background job delivering notifications to inboxes that missed them."""
    try:
        with Session(engine) as session:
            created = redeliver_pending(session)
            logger.info(f"Background redelivery completed: {created} entries created")
    except Exception as e:
        logger.error(f"Background redelivery failed: {e}")


def start_scheduler():
    """Start the background scheduler."""
    scheduler.add_job(
        redelivery_job,
        trigger=IntervalTrigger(minutes=settings.fanout_reconcile_interval_minutes),
        id="notification_redelivery",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(
        f"Scheduler started, redelivering notifications every "
        f"{settings.fanout_reconcile_interval_minutes} minutes"
    )


def shutdown_scheduler():
    """Graceful shutdown."""
    scheduler.shutdown(wait=False)
    logger.info("Scheduler shut down")
