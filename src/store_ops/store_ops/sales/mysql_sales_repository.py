from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Collection, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, in_clause
from .model import PaymentAmounts, SaleRecord
from .repository import SalesRepository


def _as_time(value) -> Optional[time]:
    # mysql-connector returns TIME columns as timedelta
    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return time(seconds // 3600, (seconds % 3600) // 60, seconds % 60)
    return datetime.strptime(str(value), "%H:%M:%S").time()


class MySQLSalesRepository(SalesRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_sale(
        self,
        *,
        store_id: int,
        user_id: int,
        sale_date: date,
        sale_time: Optional[time],
        sale_datetime: Optional[datetime],
        amounts: PaymentAmounts,
        total_customers: int,
        product_description: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory, op="sales.create", store_id=store_id, sale_date=sale_date) as (_, cur):
            cur.execute(
                """
                INSERT INTO sales(
                    store_id, user_id, sale_date, sale_time, sale_datetime,
                    cash_amount, upi_amount, card_amount, booking_amount,
                    product_description, total_customers, total_amount, notes
                ) VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(store_id), int(user_id), sale_date, sale_time, sale_datetime,
                    amounts.cash, amounts.upi, amounts.card, amounts.booking,
                    product_description, int(total_customers), amounts.total, notes,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, sale_id: int) -> Optional[SaleRecord]:
        with db_cursor(self._conn_factory, op="sales.get", sale_id=sale_id) as (_, cur):
            cur.execute(
                """
                SELECT sale_id, store_id, user_id, sale_date, sale_time,
                       cash_amount, upi_amount, card_amount, booking_amount,
                       total_customers, product_description, notes
                FROM sales
                WHERE sale_id=%s
                """,
                (int(sale_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return SaleRecord(
                sale_id=int(r["sale_id"]),
                store_id=int(r["store_id"]),
                user_id=int(r["user_id"]),
                sale_date=r["sale_date"],
                sale_time=_as_time(r.get("sale_time")),
                amounts=PaymentAmounts(
                    cash=Decimal(r["cash_amount"]),
                    upi=Decimal(r["upi_amount"]),
                    card=Decimal(r["card_amount"]),
                    booking=Decimal(r["booking_amount"]),
                ),
                total_customers=int(r["total_customers"]),
                product_description=r.get("product_description"),
                notes=r.get("notes"),
            )

    def update_amounts(self, *, sale_id: int, amounts: PaymentAmounts) -> bool:
        with db_cursor(self._conn_factory, op="sales.update_amounts", sale_id=sale_id) as (_, cur):
            cur.execute(
                """
                UPDATE sales
                SET cash_amount=%s, upi_amount=%s, card_amount=%s, booking_amount=%s, total_amount=%s
                WHERE sale_id=%s
                """,
                (amounts.cash, amounts.upi, amounts.card, amounts.booking, amounts.total, int(sale_id)),
            )
            return cur.rowcount > 0

    def sum_cash(self, *, store_ids: Collection[int], sale_date: date) -> Decimal:
        ids = [int(s) for s in store_ids]
        if not ids:
            return Decimal("0")
        with db_cursor(self._conn_factory, op="sales.sum_cash", store_ids=ids, sale_date=sale_date) as (_, cur):
            cur.execute(
                f"""
                SELECT COALESCE(SUM(cash_amount), 0) AS total_cash_sales
                FROM sales
                WHERE store_id IN ({in_clause(ids)}) AND sale_date=%s
                """,
                (*ids, sale_date),
            )
            r = fetchone(cur)
            return Decimal(r["total_cash_sales"]) if r else Decimal("0")
