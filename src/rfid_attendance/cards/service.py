from __future__ import annotations

import logging
from typing import Sequence

from ..core.exceptions import DuplicateEntryError, ReferenceNotFoundError, ValidationError
from .repository import CardRepository

logger = logging.getLogger(__name__)


class CardRegistrationService:
    """Use case: bind RFID cards to users (admin)."""

    def __init__(self, cards: CardRepository):
        self._cards = cards

    def bind(self, *, user_id: str, uid: str) -> int:
        user_id = (user_id or "").strip()
        uid = (uid or "").strip()
        if not user_id or not uid:
            raise ValidationError("All fields are required.")

        try:
            rfid_id = self._cards.create(user_id=user_id, uid=uid)
        except DuplicateEntryError:
            raise ValidationError("Duplicate User ID or UID.")
        except ReferenceNotFoundError:
            raise ValidationError(f"User ID {user_id} does not exist.")

        logger.info("Card %s bound to user %s", uid, user_id)
        return rfid_id

    def unbind(self, uid: str) -> None:
        if not self._cards.delete_by_uid((uid or "").strip()):
            raise ValidationError("Card is not registered.")
        logger.info("Card %s unbound", uid)

    def list_bindings(self) -> Sequence[dict]:
        return self._cards.list_view()
