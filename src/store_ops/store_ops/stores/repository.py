from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Store


class StoreRepository(Protocol):
    def get_by_id(self, store_id: int) -> Optional[Store]:
        raise NotImplementedError

    def list_ids_by_type(self, store_type: str) -> Sequence[int]:
        raise NotImplementedError
