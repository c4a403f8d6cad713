from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import UserType


@dataclass(frozen=True)
class User:
    """Domain entity: someone who can scan a card (student or faculty).

    Note: plain data object, no database access.
    """

    user_id: str
    user_type: UserType
    user_name: str
    year: Optional[str] = None
    program_id: Optional[int] = None
    designation: Optional[str] = None
    department_id: Optional[int] = None


@dataclass(frozen=True)
class Admin:
    admin_id: int
    username: str
    full_name: str
    password_hash: str
    is_active: bool = True
