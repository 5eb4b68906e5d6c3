from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .cash.factory import CashSalesScopeFactory
from .cash.mysql_cash_repository import MySQLCashRegisterRepository
from .cash.service import CashRegisterService
from .core.constants import DEFAULT_SHARED_TILL_STORE_IDS
from .core.enums import CashSalesScope, ReopenPolicy
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import AttendanceSummaryService
from .sales.mysql_sales_repository import MySQLSalesRepository
from .sales.service import SalesService
from .stores.mysql_store_repository import MySQLStoreRepository
from .users.mysql_user_repository import MySQLUserRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: Any
    stores_repo: Any
    sales_repo: Any
    cash_repo: Any
    attendance_repo: Any

    sales_service: SalesService
    cash_register_service: CashRegisterService
    attendance_service: AttendanceService
    attendance_summary_service: AttendanceSummaryService


def build_container(*, db_config: dict, settings: Any = None) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        ssl_ca=db_config.get("ssl_ca") or None,
        ssl_disabled=bool(db_config.get("ssl_disabled", True)),
    )
    conn = DatabaseConnection.get_instance(config)

    users_repo = MySQLUserRepository(conn)
    stores_repo = MySQLStoreRepository(conn)
    sales_repo = MySQLSalesRepository(conn)
    cash_repo = MySQLCashRegisterRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)

    scope_factory = CashSalesScopeFactory(
        shared_till_store_ids=getattr(settings, "SHARED_TILL_STORE_IDS", DEFAULT_SHARED_TILL_STORE_IDS),
    )
    cash_register_service = CashRegisterService(
        cash_repo,
        sales_repo,
        stores_repo,
        scope=scope_factory.for_scope(getattr(settings, "CASH_SALES_SCOPE", CashSalesScope.STORE)),
        reopen_policy=ReopenPolicy(getattr(settings, "REOPEN_POLICY", ReopenPolicy.UPDATE)),
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        stores_repo=stores_repo,
        sales_repo=sales_repo,
        cash_repo=cash_repo,
        attendance_repo=attendance_repo,
        sales_service=SalesService(sales_repo, stores_repo),
        cash_register_service=cash_register_service,
        attendance_service=AttendanceService(attendance_repo, stores_repo),
        attendance_summary_service=AttendanceSummaryService(attendance_repo, users_repo),
    )
