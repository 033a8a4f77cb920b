from __future__ import annotations

from datetime import date

import mysql.connector
import pytest

from src.choir_system.choir_system.attendance.model import AttendanceRecord, EventSnapshot
from src.choir_system.choir_system.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.choir_system.choir_system.core.enums import AttendanceStatus
from src.choir_system.choir_system.core.exceptions import StorageError


class StubCursor:
    def __init__(self, fail_on_call=None):
        self.fail_on_call = fail_on_call
        self.statements = []
        self.closed = False

    def execute(self, sql, params=None):
        self.statements.append((sql, params))
        if len(self.statements) == self.fail_on_call:
            raise mysql.connector.Error("connection lost")

    def fetchall(self):
        return []

    def close(self):
        self.closed = True


class StubConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class StubConnectionFactory:
    def __init__(self, conn):
        self.conn = conn

    def connect(self):
        return self.conn


def _entries(*user_ids):
    snapshot = EventSnapshot(name="Sunday Service", date=date(2024, 5, 5))
    record = AttendanceRecord(event_id=7, snapshot=snapshot, status=AttendanceStatus.PRESENT)
    return {uid: (f"Member {uid}", record) for uid in user_ids}


def test_save_commits_one_transaction():
    cur = StubCursor()
    conn = StubConnection(cur)
    repo = MySQLAttendanceRepository(StubConnectionFactory(conn))

    assert repo.save_event_records(7, _entries(1, 2)) == 2
    # One locking read plus one upsert per member.
    assert len(cur.statements) == 3
    assert "FOR UPDATE" in cur.statements[0][0]
    assert conn.committed and not conn.rolled_back
    assert cur.closed and conn.closed


def test_failed_upsert_rolls_back_whole_save():
    # Fails on the second member's upsert, after the first was sent.
    cur = StubCursor(fail_on_call=3)
    conn = StubConnection(cur)
    repo = MySQLAttendanceRepository(StubConnectionFactory(conn))

    with pytest.raises(StorageError, match="no changes were applied"):
        repo.save_event_records(7, _entries(1, 2))

    assert conn.rolled_back
    assert not conn.committed
    assert cur.closed and conn.closed


def test_empty_save_does_not_open_connection():
    class NoConnect:
        def connect(self):
            raise AssertionError("should not connect")

    assert MySQLAttendanceRepository(NoConnect()).save_event_records(7, {}) == 0
