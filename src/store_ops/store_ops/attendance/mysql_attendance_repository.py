from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Collection, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone, in_clause
from .model import AttendanceRecord, Coordinates, work_minutes
from .repository import AttendanceRepository

_RECORD_COLUMNS = """
    a.attendance_id, a.user_id, a.store_id, a.attendance_date,
    a.login_time, a.login_latitude, a.login_longitude,
    a.logout_time, a.logout_latitude, a.logout_longitude,
    a.work_duration_minutes,
    s.store_name, u.full_name, u.username
"""

_RECORD_FROM = """
    FROM staff_attendance a
    JOIN stores s ON s.store_id = a.store_id
    JOIN users u ON u.user_id = a.user_id
"""


def _coords(lat, lng) -> Optional[Coordinates]:
    if lat is None or lng is None:
        return None
    return Coordinates(latitude=Decimal(lat), longitude=Decimal(lng))


def _to_record(r: dict) -> AttendanceRecord:
    logout_time = r.get("logout_time")
    duration = r.get("work_duration_minutes")
    if logout_time is not None and duration is None:
        # rows closed before the duration column existed
        duration = work_minutes(r["login_time"], logout_time)
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        store_id=int(r["store_id"]),
        attendance_date=as_date(r["attendance_date"]),
        login_time=r["login_time"],
        login_location=_coords(r.get("login_latitude"), r.get("login_longitude")),
        logout_time=logout_time,
        logout_location=_coords(r.get("logout_latitude"), r.get("logout_longitude")),
        work_duration_minutes=int(duration) if logout_time is not None else None,
        store_name=r.get("store_name"),
        full_name=r.get("full_name"),
        username=r.get("username"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_open_for_user_and_date(self, user_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory, op="attendance.get_open", user_id=user_id, date=attendance_date) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS} {_RECORD_FROM}
                WHERE a.user_id=%s AND a.attendance_date=%s AND a.logout_time IS NULL
                ORDER BY a.login_time DESC
                LIMIT 1
                """,
                (int(user_id), attendance_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_latest_for_user_and_date(self, user_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory, op="attendance.get_latest", user_id=user_id, date=attendance_date) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS} {_RECORD_FROM}
                WHERE a.user_id=%s AND a.attendance_date=%s
                ORDER BY a.login_time DESC
                LIMIT 1
                """,
                (int(user_id), attendance_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_clock_in(
        self,
        *,
        user_id: int,
        store_id: int,
        attendance_date: date,
        login_time: datetime,
        location: Optional[Coordinates],
    ) -> Optional[int]:
        lat = location.latitude if location else None
        lng = location.longitude if location else None
        with db_cursor(self._conn_factory, op="attendance.clock_in", user_id=user_id, date=attendance_date) as (_, cur):
            # single statement so two concurrent clock-ins cannot both open a session
            cur.execute(
                """
                INSERT INTO staff_attendance(
                    user_id, store_id, attendance_date, login_time, login_latitude, login_longitude
                )
                SELECT %s, %s, %s, %s, %s, %s FROM DUAL
                WHERE NOT EXISTS (
                    SELECT 1 FROM staff_attendance
                    WHERE user_id=%s AND attendance_date=%s AND logout_time IS NULL
                )
                """,
                (int(user_id), int(store_id), attendance_date, login_time, lat, lng, int(user_id), attendance_date),
            )
            if cur.rowcount == 0:
                return None
            return int(cur.lastrowid)

    def close_session(
        self,
        *,
        attendance_id: int,
        logout_time: datetime,
        location: Optional[Coordinates],
        work_duration_minutes: int,
    ) -> bool:
        lat = location.latitude if location else None
        lng = location.longitude if location else None
        with db_cursor(self._conn_factory, op="attendance.clock_out", attendance_id=attendance_id) as (_, cur):
            cur.execute(
                """
                UPDATE staff_attendance
                SET logout_time=%s, logout_latitude=%s, logout_longitude=%s, work_duration_minutes=%s
                WHERE attendance_id=%s AND logout_time IS NULL
                """,
                (logout_time, lat, lng, int(work_duration_minutes), int(attendance_id)),
            )
            return cur.rowcount > 0

    def list_records(
        self,
        *,
        user_id: Optional[int] = None,
        store_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["1=1"]
        params: list[object] = []
        if user_id is not None:
            clauses.append("a.user_id=%s")
            params.append(int(user_id))
        if store_id is not None:
            clauses.append("a.store_id=%s")
            params.append(int(store_id))
        if start_date is not None:
            clauses.append("a.attendance_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("a.attendance_date <= %s")
            params.append(end_date)

        with db_cursor(self._conn_factory, op="attendance.list", user_id=user_id, store_id=store_id) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS} {_RECORD_FROM}
                WHERE {' AND '.join(clauses)}
                ORDER BY a.attendance_date DESC, a.login_time DESC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_in_range(
        self,
        *,
        start_date: date,
        end_date: date,
        user_ids: Collection[int],
    ) -> Sequence[AttendanceRecord]:
        ids = [int(u) for u in user_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory, op="attendance.range", start_date=start_date, end_date=end_date) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS} {_RECORD_FROM}
                WHERE a.attendance_date BETWEEN %s AND %s
                  AND a.user_id IN ({in_clause(ids)})
                ORDER BY a.user_id, a.attendance_date, a.login_time
                """,
                (start_date, end_date, *ids),
            )
            return [_to_record(r) for r in fetchall(cur)]
