from __future__ import annotations

from datetime import date

import mysql.connector
import pytest
from mysql.connector import errorcode

from account_service.core.constants import EMAIL_TAKEN, USERNAME_TAKEN
from account_service.core.exceptions import ValidationError
from account_service.users.model import User
from account_service.users.mysql_user_repository import MySQLUserRepository


class FakeCursor:
    def __init__(self, rows=None, write_error=None, lastrowid=7):
        self.rows = list(rows or [])
        self.write_error = write_error
        self.lastrowid = lastrowid
        self.executed = []

    def execute(self, sql, params=None):
        sql = " ".join(sql.split())
        self.executed.append((sql, params))
        if self.write_error and sql.startswith(("INSERT", "UPDATE")):
            raise self.write_error

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def fetchall(self):
        return list(self.rows)

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.commits = 0
        self.rollbacks = 0

    def cursor(self, dictionary=False):
        return self._cursor

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self, cursor):
        self.cursor = cursor
        self.connections = []

    def connect(self, *, with_database=True):
        conn = FakeConnection(self.cursor)
        self.connections.append(conn)
        return conn


def _row(**overrides):
    row = {
        "user_id": 7,
        "email": "a@x.com",
        "username": "a",
        "full_name": "Ana",
        "password_hash": "hashed",
        "role": "USER",
        "status": 1,
        "phone_number": None,
        "birth_date": date(1990, 5, 17),
        "profile_picture_url": None,
    }
    row.update(overrides)
    return row


def _new_user():
    return User(email="a@x.com", username="a", full_name="Ana", password_hash="hashed")


def _duplicate(key):
    return mysql.connector.IntegrityError(
        msg=f"Duplicate entry 'a' for key 'users.{key}'",
        errno=errorcode.ER_DUP_ENTRY,
    )


def test_row_mapping_converts_status_to_bool():
    repo = MySQLUserRepository(FakeConnFactory(FakeCursor(rows=[_row(status=0)])))

    user = repo.get_by_id(7)

    assert user.user_id == 7
    assert user.status is False
    assert user.birth_date == date(1990, 5, 17)
    assert user.role == "USER"


def test_missing_row_returns_none():
    repo = MySQLUserRepository(FakeConnFactory(FakeCursor()))

    assert repo.get_by_email("ghost@x.com") is None
    assert repo.exists_by_id(99) is False


def test_insert_uses_lastrowid_and_rereads_row():
    cursor = FakeCursor(rows=[_row()], lastrowid=7)
    repo = MySQLUserRepository(FakeConnFactory(cursor))

    saved = repo.save(_new_user())

    insert_sql, params = cursor.executed[0]
    assert insert_sql.startswith("INSERT INTO users")
    assert params[5] == 1
    assert saved.user_id == 7
    assert cursor.executed[1][1] == (7,)


def test_duplicate_username_key_maps_to_validation_error():
    factory = FakeConnFactory(FakeCursor(write_error=_duplicate("uq_users_username")))
    repo = MySQLUserRepository(factory)

    with pytest.raises(ValidationError) as exc_info:
        repo.save(_new_user())

    assert str(exc_info.value) == USERNAME_TAKEN
    assert factory.connections[0].rollbacks == 1
    assert factory.connections[0].commits == 0


def test_duplicate_email_key_maps_to_validation_error():
    repo = MySQLUserRepository(FakeConnFactory(FakeCursor(write_error=_duplicate("uq_users_email"))))

    with pytest.raises(ValidationError) as exc_info:
        repo.save(User(email="a@x.com", username="a", full_name=None, password_hash="h", user_id=3))

    assert str(exc_info.value) == EMAIL_TAKEN


def test_other_integrity_errors_propagate():
    error = mysql.connector.IntegrityError(msg="Column 'email' cannot be null", errno=errorcode.ER_BAD_NULL_ERROR)
    repo = MySQLUserRepository(FakeConnFactory(FakeCursor(write_error=error)))

    with pytest.raises(mysql.connector.IntegrityError):
        repo.save(_new_user())
