from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class RfidBinding:
    """Binding between an RFID card (UID) and a user."""

    user_id: str
    uid: str
    rfid_id: Optional[int] = None
    registered_at: Optional[datetime] = None
