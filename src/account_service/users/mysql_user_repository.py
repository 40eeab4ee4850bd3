from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.constants import EMAIL_TAKEN, USERNAME_TAKEN
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = (
    "user_id, email, username, full_name, password_hash, role, status, "
    "phone_number, birth_date, profile_picture_url"
)


def _row_to_user(row: Dict[str, Any]) -> User:
    return User(
        user_id=int(row["user_id"]),
        email=row["email"],
        username=row["username"],
        full_name=row.get("full_name"),
        password_hash=row["password_hash"],
        role=row["role"],
        status=bool(row.get("status", True)),
        phone_number=row.get("phone_number"),
        birth_date=row.get("birth_date"),
        profile_picture_url=row.get("profile_picture_url"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, column: str, value: Any) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE {column}=%s", (value,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one("user_id", user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one("email", email)

    def get_by_username(self, username: str) -> Optional[User]:
        return self._get_one("username", username)

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY user_id")
            return [_row_to_user(r) for r in fetchall(cur)]

    def exists_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM users WHERE user_id=%s", (user_id,))
            return fetchone(cur) is not None

    def save(self, user: User) -> User:
        values = (
            user.email,
            user.username,
            user.full_name,
            user.password_hash,
            user.role,
            int(bool(user.status)),
            user.phone_number,
            user.birth_date,
            user.profile_picture_url,
        )
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                if user.user_id is None:
                    cur.execute(
                        """
                        INSERT INTO users(email, username, full_name, password_hash, role, status,
                                          phone_number, birth_date, profile_picture_url)
                        VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                        """,
                        values,
                    )
                    user_id = int(cur.lastrowid)
                else:
                    cur.execute(
                        """
                        UPDATE users
                        SET email=%s, username=%s, full_name=%s, password_hash=%s, role=%s, status=%s,
                            phone_number=%s, birth_date=%s, profile_picture_url=%s
                        WHERE user_id=%s
                        """,
                        values + (user.user_id,),
                    )
                    user_id = int(user.user_id)
        except mysql.connector.IntegrityError as e:
            # UNIQUE(email) / UNIQUE(username) catch registrations that raced past the service check.
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise ValidationError(USERNAME_TAKEN if "uq_users_username" in str(e.msg) else EMAIL_TAKEN) from e
            raise

        return self.get_by_id(user_id) or user

    def delete_by_id(self, user_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (user_id,))
