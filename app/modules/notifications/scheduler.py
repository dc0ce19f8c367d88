import asyncio
import logging
from app.config import settings
from app.database.supabase_client import get_service_supabase
from app.modules.notifications.service import NotificationService

logger = logging.getLogger(__name__)


async def run_nudge_cycle():
    """Assign today's nudge times, then send the ones that are due."""
    try:
        service = NotificationService(get_service_supabase())
        await asyncio.to_thread(service.schedule_nudges)
        await asyncio.to_thread(service.send_due_nudges)
    except Exception as e:
        logger.error(f"Error in nudge cycle: {str(e)}")


async def nudge_scheduler_loop():
    """Background task that periodically schedules and sends nudges"""
    while True:
        try:
            await run_nudge_cycle()
        except Exception as e:
            logger.error(f"Error in nudge scheduler loop: {str(e)}")

        await asyncio.sleep(settings.nudge_scheduler_interval_seconds)
