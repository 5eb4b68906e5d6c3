from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

import mysql.connector
from werkzeug.security import generate_password_hash

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str
    ssl_ca: Optional[str] = None
    ssl_disabled: bool = True


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "store_ops")),
        ssl_ca=db_config.get("ssl_ca") or None,
        ssl_disabled=bool(db_config.get("ssl_disabled", True)),
    )


def _connect(target: DBTarget, *, with_database: bool = True):
    options = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    if with_database:
        options["database"] = target.database
    if target.ssl_ca:
        options["ssl_ca"] = target.ssl_ca
    elif target.ssl_disabled:
        options["ssl_disabled"] = True
    return mysql.connector.connect(**options)


_CREATE_DB_OR_USE = re.compile(r"^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$", re.IGNORECASE | re.MULTILINE)

_SQL_TOKENS = re.compile(
    r"""
    '(?:[^'\\]|\\.)*'       # single-quoted literal
    | "(?:[^"\\]|\\.)*"     # double-quoted literal
    | --[^\n]*              # line comment
    | ;
    | [^'";-]+
    | .
    """,
    re.VERBOSE | re.DOTALL,
)


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on top-level ``;``. Line comments are dropped."""
    parts: list[str] = []
    for token in _SQL_TOKENS.findall(sql):
        if token.startswith("--"):
            continue
        if token != ";":
            parts.append(token)
            continue
        statement = "".join(parts).strip()
        parts = []
        if statement:
            yield statement

    tail = "".join(parts).strip()
    if tail:
        yield tail


def _run_script(db_config: dict, path: str | Path) -> int:
    # the target database comes from settings, not from the script
    sql = _CREATE_DB_OR_USE.sub("", Path(path).read_text(encoding="utf-8"))
    statements = list(iter_sql_statements(sql))

    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        for statement in statements:
            cur.execute(statement)
        conn.commit()
    finally:
        conn.close()
    return len(statements)


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _run_script(db_config, schema_path)
    logger.info("schema applied from %s (%d statements)", schema_path, count)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _run_script(db_config, seed_path)
    logger.info("seed applied from %s (%d statements)", seed_path, count)


def ensure_demo_users(db_config: dict) -> None:
    """Create or refresh one demo account per role.

    Admin and manager are assigned every store; staff only the stores of their type.
    """

    target = _as_target(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor(dictionary=True)

        def upsert_user(full_name: str, username: str, password: str, role: str, assigned_store: str) -> int:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM users WHERE username=%s", (username,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    """
                    UPDATE users
                    SET full_name=%s, password_hash=%s, user_type=%s, assigned_store=%s, is_active=1
                    WHERE username=%s
                    """,
                    (full_name, password_hash, role, assigned_store, username),
                )
                return int(existing["user_id"])
            cur.execute(
                """
                INSERT INTO users (full_name, username, password_hash, user_type, assigned_store)
                VALUES (%s, %s, %s, %s, %s)
                """,
                (full_name, username, password_hash, role, assigned_store),
            )
            return int(cur.lastrowid)

        demo_users = [
            ("Admin Demo", "admin", "admin123", "admin", "all"),
            ("Manager Demo", "manager", "manager123", "manager", "all"),
            ("Arcade Staff", "arcade_staff", "staff123", "staff", "arcade"),
        ]

        cur.execute("SELECT store_id, store_type FROM stores")
        stores = cur.fetchall()
        for full_name, username, password, role, assigned_store in demo_users:
            user_id = upsert_user(full_name, username, password, role, assigned_store)
            for store in stores:
                if assigned_store != "all" and store["store_type"] != assigned_store:
                    continue
                cur.execute(
                    "INSERT IGNORE INTO user_stores (user_id, store_id) VALUES (%s, %s)",
                    (user_id, int(store["store_id"])),
                )

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
