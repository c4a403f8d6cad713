from __future__ import annotations

import logging
from datetime import date, time
from typing import Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_AUTO_LOGOUT_TIME
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AutoLogoutService:
    """Close sessions that were never closed by a second scan."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        logout_time: time = DEFAULT_AUTO_LOGOUT_TIME,
        timezone: Optional[str] = None,
    ):
        self._attendance = attendance
        self._logout_time = logout_time
        self._timezone = timezone

    def _today(self) -> date:
        return now_local(self._timezone).date()

    def auto_logout_current_day(self, today: Optional[date] = None) -> int:
        today = today or self._today()
        closed = self._attendance.close_open_sessions_on(today, logout_time=self._logout_time)
        if closed > 0:
            logger.info("Auto-logged out %d users for %s.", closed, today)
        return closed

    def cleanup_previous_days(self, today: Optional[date] = None) -> int:
        today = today or self._today()
        closed = self._attendance.close_open_sessions_before(today, logout_time=self._logout_time)
        if closed > 0:
            logger.info("Startup cleanup: logged out %d users from previous days.", closed)
        return closed
