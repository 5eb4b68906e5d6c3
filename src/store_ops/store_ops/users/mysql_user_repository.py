from __future__ import annotations

from typing import Collection, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import User
from .repository import UserRepository

_USER_COLUMNS = "u.user_id, u.full_name, u.username, u.user_type, u.assigned_store, u.is_active"


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        full_name=row["full_name"],
        username=row["username"],
        role=Role(row["user_type"]),
        assigned_store=row.get("assigned_store") or "all",
        is_active=bool(row.get("is_active", True)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory, op="users.get", user_id=user_id) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users u WHERE u.user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def list_by_roles(
        self,
        *,
        roles: Collection[Role],
        store_id: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> Sequence[User]:
        if not roles:
            return []

        role_values = [Role(r).value for r in roles]
        clauses = [f"u.user_type IN ({in_clause(role_values)})"]
        params: list[object] = list(role_values)

        if store_id is not None:
            clauses.append("u.user_id IN (SELECT us.user_id FROM user_stores us WHERE us.store_id=%s)")
            params.append(int(store_id))
        if user_id is not None:
            clauses.append("u.user_id=%s")
            params.append(int(user_id))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory, op="users.list_by_roles", store_id=store_id, user_id=user_id) as (_, cur):
            cur.execute(
                f"SELECT {_USER_COLUMNS} FROM users u WHERE {where} ORDER BY u.full_name, u.user_id",
                tuple(params),
            )
            return [_to_user(r) for r in fetchall(cur)]
