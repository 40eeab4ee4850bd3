from __future__ import annotations

from dataclasses import replace
from threading import Lock
from typing import Optional, Sequence

from ..core.constants import EMAIL_TAKEN, USERNAME_TAKEN
from ..core.exceptions import ValidationError
from .model import User
from .repository import UserRepository


class InMemoryUserRepository(UserRepository):
    """Dict-backed store for the testing settings and local runs without MySQL.

    Mirrors the MySQL table: ids are assigned on insert, rows come back in id
    order and email/username are unique.
    """

    def __init__(self) -> None:
        self._rows: dict[int, User] = {}
        self._next_id = 1
        self._lock = Lock()

    def get_by_id(self, user_id: int) -> Optional[User]:
        with self._lock:
            return self._rows.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            return next((u for u in self._rows.values() if u.email == email), None)

    def get_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            return next((u for u in self._rows.values() if u.username == username), None)

    def list_all(self) -> Sequence[User]:
        with self._lock:
            return [self._rows[k] for k in sorted(self._rows)]

    def exists_by_id(self, user_id: int) -> bool:
        with self._lock:
            return int(user_id) in self._rows

    def save(self, user: User) -> User:
        with self._lock:
            for other in self._rows.values():
                if other.user_id == user.user_id:
                    continue
                if other.email == user.email:
                    raise ValidationError(EMAIL_TAKEN)
                if other.username == user.username:
                    raise ValidationError(USERNAME_TAKEN)

            if user.user_id is None:
                user = replace(user, user_id=self._next_id)
                self._next_id += 1
            self._rows[user.user_id] = user
            return user

    def delete_by_id(self, user_id: int) -> None:
        with self._lock:
            self._rows.pop(int(user_id), None)
