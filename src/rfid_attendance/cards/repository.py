from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import RfidBinding


class CardRepository(Protocol):
    def get_by_uid(self, uid: str) -> Optional[RfidBinding]:
        raise NotImplementedError

    def create(self, *, user_id: str, uid: str) -> int:
        raise NotImplementedError

    def delete_by_uid(self, uid: str) -> bool:
        raise NotImplementedError

    def list_view(self) -> Sequence[dict]:
        raise NotImplementedError
