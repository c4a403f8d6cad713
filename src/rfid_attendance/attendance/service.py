from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..cards.repository import CardRepository
from ..common.datetime_utils import now_local
from ..core.constants import DATE_FORMAT, TIME_FORMAT
from ..core.enums import ScanStatus, SocketEvent
from ..users.repository import UserRepository
from .broadcast import EventBroadcaster
from .debounce import DuplicateScanFilter
from .model import ScanEvent
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardData:
    date: str
    logs: list[dict]
    counts: dict[str, list[dict]]


class ScanService:
    """Turn card scans into login/logout toggles and live dashboard events.

    A scan opens a session when the user has no open session today, and
    closes the open one otherwise. Every outcome is broadcast as
    `scan_event`; a LOGIN also rebroadcasts today's branch counts.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        cards: CardRepository,
        users: UserRepository,
        broadcaster: EventBroadcaster,
        *,
        scan_filter: Optional[DuplicateScanFilter] = None,
        timezone: Optional[str] = None,
    ):
        self._attendance = attendance
        self._cards = cards
        self._users = users
        self._broadcaster = broadcaster
        self._filter = scan_filter or DuplicateScanFilter()
        self._timezone = timezone

    def _now(self) -> datetime:
        return now_local(self._timezone)

    def _emit_scan(self, event: ScanEvent) -> ScanEvent:
        self._broadcaster.emit(SocketEvent.SCAN.value, event.to_payload())
        return event

    def submit(self, uid: str, *, now: Optional[datetime] = None) -> ScanEvent:
        """Entry point for the reader: debounce, then toggle."""

        uid = (uid or "").strip()
        if not self._filter.try_accept(uid):
            wait = f"{self._filter.window_seconds:g}"
            logger.debug("Duplicate scan of %s ignored", uid)
            return self._emit_scan(
                ScanEvent(
                    uid=uid,
                    status=ScanStatus.IGNORED,
                    message=f"Duplicate scan. Please wait {wait} seconds.",
                )
            )
        return self.handle_scan(uid, now=now)

    def handle_scan(self, uid: str, *, now: Optional[datetime] = None) -> ScanEvent:
        now = now or self._now()
        today = now.date()
        at = now.time().replace(microsecond=0)
        stamp = at.strftime(TIME_FORMAT)

        user_id: Optional[str] = None
        user_name: Optional[str] = None
        try:
            binding = self._cards.get_by_uid(uid)
            if not binding:
                return self._emit_scan(ScanEvent(uid=uid, status=ScanStatus.UNREGISTERED))

            user_id = binding.user_id
            user = self._users.get_by_id(user_id)
            if not user:
                return self._emit_scan(ScanEvent(uid=uid, user_id=user_id, status=ScanStatus.NO_DETAILS))

            user_name = user.user_name
            open_session = self._attendance.find_open_session(user_id, today)
            if open_session:
                self._attendance.close_session(log_id=open_session.log_id, logout_time=at)
                logger.info("LOGOUT %s (%s) at %s", user_id, uid, stamp)
                return self._emit_scan(
                    ScanEvent(uid=uid, user_id=user_id, user_name=user_name, status=ScanStatus.LOGOUT, time=stamp)
                )

            self._attendance.open_session(user_id=user_id, log_date=today, login_time=at)
            logger.info("LOGIN %s (%s) at %s", user_id, uid, stamp)
            event = self._emit_scan(
                ScanEvent(uid=uid, user_id=user_id, user_name=user_name, status=ScanStatus.LOGIN, time=stamp)
            )
            self._broadcaster.emit(SocketEvent.COUNTS.value, self.today_branch_counts(today))
            return event
        except Exception:
            logger.exception("Database/logic error while handling scan %s", uid)
            return self._emit_scan(ScanEvent(uid=uid, user_id=user_id, user_name=user_name, status=ScanStatus.ERROR))

    def today_branch_counts(self, today: Optional[date] = None) -> dict[str, list[dict]]:
        today = today or self._now().date()
        grouped: dict[str, list[dict]] = {}
        for row in self._attendance.branch_counts(today):
            grouped.setdefault(row.degree, []).append(
                {"branch_code": row.branch_code, "visit_count": row.visit_count}
            )
        return grouped

    def dashboard(self, today: Optional[date] = None) -> DashboardData:
        today = today or self._now().date()
        logs = [
            {
                "user_id": r.user_id,
                "user_name": r.user_name,
                "login_time": r.login_time.strftime(TIME_FORMAT),
                "logout_time": r.logout_time.strftime(TIME_FORMAT) if r.logout_time else None,
            }
            for r in self._attendance.list_for_date(today)
        ]
        return DashboardData(date=today.strftime(DATE_FORMAT), logs=logs, counts=self.today_branch_counts(today))
