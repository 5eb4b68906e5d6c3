from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Collection, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.constants import NOTES_SEPARATOR
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone, in_clause
from .model import CashRegisterEntry, MonthlyRegisterRow
from .repository import CashRegisterRepository

_ENTRY_COLUMNS = """
    cr.register_id, cr.store_id, cr.user_id, cr.register_date,
    cr.opening_cash, cr.closing_cash, cr.calculated_cash, cr.cash_difference,
    cr.opening_time, cr.closing_time, cr.notes,
    s.store_name, u.full_name AS opened_by_name
"""

_ENTRY_FROM = """
    FROM cash_register cr
    JOIN stores s ON s.store_id = cr.store_id
    LEFT JOIN users u ON u.user_id = cr.user_id
"""


def _dec(value) -> Optional[Decimal]:
    return Decimal(value) if value is not None else None


def _to_entry(r: dict) -> CashRegisterEntry:
    return CashRegisterEntry(
        register_id=int(r["register_id"]),
        store_id=int(r["store_id"]),
        user_id=int(r["user_id"]),
        register_date=as_date(r["register_date"]),
        opening_cash=Decimal(r["opening_cash"]),
        opening_time=r["opening_time"],
        closing_cash=_dec(r.get("closing_cash")),
        calculated_cash=_dec(r.get("calculated_cash")),
        cash_difference=_dec(r.get("cash_difference")),
        closing_time=r.get("closing_time"),
        notes=r.get("notes"),
        store_name=r.get("store_name"),
        opened_by_name=r.get("opened_by_name"),
    )


def _history_filters(store_id, start_date, end_date) -> tuple[str, list[object]]:
    clauses = ["1=1"]
    params: list[object] = []
    if store_id is not None:
        clauses.append("cr.store_id=%s")
        params.append(int(store_id))
    if start_date is not None:
        clauses.append("cr.register_date >= %s")
        params.append(start_date)
    if end_date is not None:
        clauses.append("cr.register_date <= %s")
        params.append(end_date)
    return " AND ".join(clauses), params


class MySQLCashRegisterRepository(CashRegisterRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_store_and_date(self, store_id: int, register_date: date) -> Optional[CashRegisterEntry]:
        with db_cursor(self._conn_factory, op="cash.get", store_id=store_id, register_date=register_date) as (_, cur):
            cur.execute(
                f"SELECT {_ENTRY_COLUMNS} {_ENTRY_FROM} WHERE cr.store_id=%s AND cr.register_date=%s",
                (int(store_id), register_date),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def create_open(
        self,
        *,
        store_id: int,
        user_id: int,
        register_date: date,
        opening_cash: Decimal,
        opening_time: datetime,
        notes: Optional[str] = None,
    ) -> Optional[int]:
        with db_cursor(self._conn_factory, op="cash.open", store_id=store_id, register_date=register_date) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO cash_register(store_id, user_id, register_date, opening_cash, opening_time, notes)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (int(store_id), int(user_id), register_date, opening_cash, opening_time, notes),
                )
            except mysql.connector.IntegrityError as e:
                if e.errno == errorcode.ER_DUP_ENTRY:
                    return None
                raise
            return int(cur.lastrowid)

    def reopen(self, *, register_id: int, opening_cash: Decimal, notes: Optional[str] = None) -> bool:
        with db_cursor(self._conn_factory, op="cash.reopen", register_id=register_id) as (_, cur):
            cur.execute(
                """
                UPDATE cash_register
                SET opening_cash=%s, notes=CONCAT_WS(%s, notes, %s)
                WHERE register_id=%s AND closing_cash IS NULL
                """,
                (opening_cash, NOTES_SEPARATOR, notes, int(register_id)),
            )
            return cur.rowcount > 0

    def close_if_open(
        self,
        *,
        register_id: int,
        closing_cash: Decimal,
        calculated_cash: Decimal,
        cash_difference: Decimal,
        closing_time: datetime,
        notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory, op="cash.close", register_id=register_id) as (_, cur):
            cur.execute(
                """
                UPDATE cash_register
                SET closing_cash=%s, calculated_cash=%s, cash_difference=%s,
                    closing_time=%s, notes=CONCAT_WS(%s, notes, %s)
                WHERE register_id=%s AND closing_cash IS NULL
                """,
                (
                    closing_cash, calculated_cash, cash_difference,
                    closing_time, NOTES_SEPARATOR, notes, int(register_id),
                ),
            )
            return cur.rowcount > 0

    def list_for_date(
        self, register_date: date, *, store_ids: Optional[Collection[int]] = None
    ) -> Sequence[CashRegisterEntry]:
        clauses = ["cr.register_date=%s"]
        params: list[object] = [register_date]
        if store_ids is not None:
            ids = [int(s) for s in store_ids]
            if not ids:
                return []
            clauses.append(f"cr.store_id IN ({in_clause(ids)})")
            params.extend(ids)

        with db_cursor(self._conn_factory, op="cash.list_for_date", register_date=register_date) as (_, cur):
            cur.execute(
                f"SELECT {_ENTRY_COLUMNS} {_ENTRY_FROM} WHERE {' AND '.join(clauses)} ORDER BY s.store_name",
                tuple(params),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_history(
        self,
        *,
        store_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int,
        offset: int,
    ) -> Sequence[CashRegisterEntry]:
        where, params = _history_filters(store_id, start_date, end_date)
        with db_cursor(self._conn_factory, op="cash.history", store_id=store_id) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ENTRY_COLUMNS} {_ENTRY_FROM}
                WHERE {where}
                ORDER BY cr.register_date DESC, s.store_name
                LIMIT %s OFFSET %s
                """,
                (*params, int(limit), int(offset)),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def count_history(
        self,
        *,
        store_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> int:
        where, params = _history_filters(store_id, start_date, end_date)
        with db_cursor(self._conn_factory, op="cash.history_count", store_id=store_id) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM cash_register cr WHERE {where}", tuple(params))
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def list_for_month(
        self,
        *,
        start_date: date,
        end_date: date,
        store_ids: Optional[Collection[int]] = None,
    ) -> Sequence[MonthlyRegisterRow]:
        clauses = ["cr.register_date >= %s", "cr.register_date <= %s"]
        params: list[object] = [start_date, end_date]
        if store_ids is not None:
            ids = [int(s) for s in store_ids]
            if not ids:
                return []
            clauses.append(f"cr.store_id IN ({in_clause(ids)})")
            params.extend(ids)

        with db_cursor(self._conn_factory, op="cash.month", start_date=start_date, end_date=end_date) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ENTRY_COLUMNS}, s.store_type,
                       COALESCE((
                           SELECT SUM(sa.cash_amount) FROM sales sa
                           WHERE sa.store_id = cr.store_id AND sa.sale_date = cr.register_date
                       ), 0) AS total_cash_sales
                {_ENTRY_FROM}
                WHERE {' AND '.join(clauses)}
                ORDER BY cr.register_date DESC, s.store_name
                """,
                tuple(params),
            )
            return [
                MonthlyRegisterRow(
                    entry=_to_entry(r),
                    store_type=r.get("store_type"),
                    total_cash_sales=Decimal(r["total_cash_sales"]),
                )
                for r in fetchall(cur)
            ]
