from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): the service layer depends on this interface, never on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def exists_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def save(self, user: User) -> User:
        """Insert when ``user.user_id`` is None, update otherwise; return the stored user."""
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> None:
        raise NotImplementedError
