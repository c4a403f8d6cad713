from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from ..attendance.auto_logout import AutoLogoutService

logger = logging.getLogger(__name__)

AUTO_LOGOUT_JOB_ID = "auto_logout_current_day"


def run_auto_logout(service: AutoLogoutService) -> int:
    logger.info("Running scheduled job: auto-logging out users for today...")
    try:
        return service.auto_logout_current_day()
    except Exception:
        logger.exception("Error during auto-logout")
        return 0


def run_startup_cleanup(service: AutoLogoutService) -> int:
    logger.info("Running startup cleanup for any missed logouts from previous days...")
    try:
        return service.cleanup_previous_days()
    except Exception:
        logger.exception("Error during cleanup of previous days")
        return 0


def build_scheduler(service: AutoLogoutService, *, hour: int, minute: int, timezone: str) -> BackgroundScheduler:
    scheduler = BackgroundScheduler(
        timezone=timezone,
        job_defaults={
            "coalesce": True,
            "misfire_grace_time": 3600,
        },
    )
    scheduler.add_job(
        func=run_auto_logout,
        args=[service],
        trigger=CronTrigger(hour=hour, minute=minute, timezone=timezone),
        id=AUTO_LOGOUT_JOB_ID,
        name="Auto-logout open sessions for today",
        replace_existing=True,
    )
    return scheduler
