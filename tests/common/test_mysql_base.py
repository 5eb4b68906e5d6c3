from __future__ import annotations

import logging

import mysql.connector
import pytest

from src.store_ops.store_ops.core.exceptions import StorageError, ValidationError
from src.store_ops.store_ops.database.bootstrap import iter_sql_statements
from src.store_ops.store_ops.database.mysql_base import as_date, db_cursor, in_clause


class FakeCursor:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self):
        self.cursor_obj = FakeCursor()
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self.cursor_obj

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self, conn=None, error=None):
        self.conn = conn or FakeConnection()
        self.error = error

    def connect(self):
        if self.error:
            raise self.error
        return self.conn


def test_clean_block_commits_and_closes():
    factory = FakeFactory()

    with db_cursor(factory, op="test") as (conn, cur):
        assert cur is factory.conn.cursor_obj

    assert factory.conn.committed
    assert not factory.conn.rolled_back
    assert factory.conn.cursor_obj.closed
    assert factory.conn.closed


def test_driver_error_rolls_back_and_becomes_storage_error(caplog):
    factory = FakeFactory()

    with caplog.at_level(logging.ERROR):
        with pytest.raises(StorageError):
            with db_cursor(factory, op="close_register", store_id=1, register_date="2025-03-14"):
                raise mysql.connector.Error("boom")

    assert factory.conn.rolled_back
    assert not factory.conn.committed
    assert factory.conn.closed
    assert "op=close_register" in caplog.text
    assert "store_id=1" in caplog.text


def test_domain_errors_pass_through_after_rollback():
    factory = FakeFactory()

    with pytest.raises(ValidationError):
        with db_cursor(factory):
            raise ValidationError("bad")

    assert factory.conn.rolled_back
    assert factory.conn.closed


def test_connection_failure_is_storage_error():
    factory = FakeFactory(error=mysql.connector.Error("refused"))

    with pytest.raises(StorageError):
        with db_cursor(factory, op="open_register"):
            pass


def test_sql_helpers():
    assert in_clause([1, 2, 3]) == "%s, %s, %s"
    assert as_date("2025-03-14 00:00:00").isoformat() == "2025-03-14"
    assert as_date(None) is None


def test_script_splitter_keeps_quoted_semicolons_and_drops_comments():
    script = """
    -- stores
    INSERT INTO stores(store_name) VALUES ('A;B');
    INSERT INTO stores(store_name) VALUES ("it's");
    SELECT 1
    """

    assert list(iter_sql_statements(script)) == [
        "INSERT INTO stores(store_name) VALUES ('A;B')",
        'INSERT INTO stores(store_name) VALUES ("it\'s")',
        "SELECT 1",
    ]
