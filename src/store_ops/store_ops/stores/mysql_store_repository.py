from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Store
from .repository import StoreRepository


def _to_store(r: dict) -> Store:
    return Store(store_id=int(r["store_id"]), store_name=r["store_name"], store_type=r["store_type"])


class MySQLStoreRepository(StoreRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, store_id: int) -> Optional[Store]:
        with db_cursor(self._conn_factory, op="stores.get", store_id=store_id) as (_, cur):
            cur.execute(
                "SELECT store_id, store_name, store_type FROM stores WHERE store_id=%s",
                (int(store_id),),
            )
            r = fetchone(cur)
            return _to_store(r) if r else None

    def list_ids_by_type(self, store_type: str) -> Sequence[int]:
        with db_cursor(self._conn_factory, op="stores.ids_by_type", store_type=store_type) as (_, cur):
            cur.execute("SELECT store_id FROM stores WHERE store_type=%s ORDER BY store_id", (store_type,))
            return [int(r["store_id"]) for r in fetchall(cur)]
