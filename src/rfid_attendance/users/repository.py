from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Admin, User


class UserRepository(Protocol):
    """Repository interface for users.

    Note: services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, user: User) -> None:
        raise NotImplementedError

    def bulk_create(self, users: Sequence[User]) -> int:
        """Insert all users in a single transaction; nothing is written on failure."""

        raise NotImplementedError

    def list_roster(self) -> Sequence[dict]:
        raise NotImplementedError


class AdminRepository(Protocol):
    def get_by_username(self, username: str) -> Optional[Admin]:
        raise NotImplementedError
