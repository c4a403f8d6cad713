from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, translate_integrity_errors
from .model import RfidBinding
from .repository import CardRepository


class MySQLCardRepository(CardRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_uid(self, uid: str) -> Optional[RfidBinding]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT rfid_id, user_id, uid, registered_at FROM rfid_details WHERE uid=%s", (uid,))
            r = fetchone(cur)
            if not r:
                return None
            return RfidBinding(
                rfid_id=int(r["rfid_id"]),
                user_id=str(r["user_id"]),
                uid=r["uid"],
                registered_at=r.get("registered_at"),
            )

    def create(self, *, user_id: str, uid: str) -> int:
        with translate_integrity_errors():
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("INSERT INTO rfid_details(user_id, uid) VALUES(%s,%s)", (user_id, uid))
                return int(cur.lastrowid)

    def delete_by_uid(self, uid: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM rfid_details WHERE uid=%s", (uid,))
            return cur.rowcount > 0

    def list_view(self) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT r.uid, r.user_id, r.registered_at, u.user_name, u.user_type
                FROM rfid_details r
                LEFT JOIN users u ON u.user_id = r.user_id
                ORDER BY r.registered_at DESC, r.rfid_id DESC
                """
            )
            return [
                {
                    "uid": r["uid"],
                    "user_id": r["user_id"],
                    "user_name": r.get("user_name") or "-",
                    "user_type": r.get("user_type") or "-",
                    "registered_at": r["registered_at"].strftime("%Y-%m-%d %H:%M") if r.get("registered_at") else "-",
                }
                for r in fetchall(cur)
            ]
