from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Sequence

from ..common.privacy import mask_email
from ..common.validators import require_non_empty, require_present
from ..core.constants import (
    DEFAULT_ROLE,
    EMAIL_TAKEN,
    EMPTY_PASSWORD,
    USER_NOT_FOUND,
    USERNAME_TAKEN,
)
from ..core.exceptions import NotFoundError, ValidationError
from ..notifications.notifier import Notifier
from ..security.hasher import PasswordHasher
from .model import User, UserPatch
from .repository import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    """Use cases: register, look up, update, delete users and request password resets.

    Uniqueness checks are check-then-act; concurrent registrations are only
    fully protected where the repository enforces UNIQUE constraints itself.
    """

    def __init__(self, users: UserRepository, hasher: PasswordHasher, notifier: Notifier):
        self._users = users
        self._hasher = hasher
        self._notifier = notifier

    def find_by_email(self, email: str) -> Optional[User]:
        return self._users.get_by_email(email)

    def find_by_username(self, username: str) -> Optional[User]:
        return self._users.get_by_username(username)

    def list_all(self) -> Sequence[User]:
        return self._users.list_all()

    def register(self, candidate: User) -> User:
        """Create an account. ``candidate.password_hash`` carries the plaintext password.

        Raises ValidationError on a taken email/username or an empty password.
        """
        email = require_non_empty(candidate.email, "Email")
        username = require_non_empty(candidate.username, "Username")

        if self._users.get_by_email(email):
            logger.warning("Registration rejected: email %s already registered", mask_email(email))
            raise ValidationError(EMAIL_TAKEN)
        if self._users.get_by_username(username):
            logger.warning("Registration rejected: username already registered")
            raise ValidationError(USERNAME_TAKEN)

        password = require_present(candidate.password_hash, EMPTY_PASSWORD)

        user = self._users.save(
            replace(
                candidate,
                email=email,
                username=username,
                password_hash=self._hasher.hash(password),
                role=DEFAULT_ROLE,
                status=True,
            )
        )
        logger.info("Registered user id=%s", user.user_id)
        return user

    def update(self, user_id: int, patch: UserPatch) -> User:
        """Merge the non-None fields of ``patch`` into the stored user.

        Fields are applied in a fixed order; the first failing check aborts the
        whole update before anything is written. Role and status never change here.
        """
        existing = self._users.get_by_id(user_id)
        if not existing:
            raise NotFoundError(USER_NOT_FOUND)

        merged = existing

        if patch.full_name is not None:
            merged = replace(merged, full_name=patch.full_name)

        # Lookups may match case-insensitively (MySQL collation), so the owner is compared by id.
        if patch.username is not None:
            owner = self._users.get_by_username(patch.username)
            if owner and owner.user_id != existing.user_id:
                raise ValidationError(USERNAME_TAKEN)
            merged = replace(merged, username=patch.username)

        if patch.email is not None:
            owner = self._users.get_by_email(patch.email)
            if owner and owner.user_id != existing.user_id:
                raise ValidationError(EMAIL_TAKEN)
            merged = replace(merged, email=patch.email)

        if patch.password is not None:
            if patch.password == "":
                raise ValidationError(EMPTY_PASSWORD)
            merged = replace(merged, password_hash=self._hasher.hash(patch.password))

        if patch.phone_number is not None:
            merged = replace(merged, phone_number=patch.phone_number)

        if patch.birth_date is not None:
            merged = replace(merged, birth_date=patch.birth_date)

        if patch.profile_picture_url is not None:
            merged = replace(merged, profile_picture_url=patch.profile_picture_url)

        saved = self._users.save(merged)
        logger.info("Updated user id=%s", saved.user_id)
        return saved

    def delete(self, user_id: int) -> None:
        if not self._users.exists_by_id(user_id):
            raise NotFoundError(USER_NOT_FOUND)
        self._users.delete_by_id(user_id)
        logger.info("Deleted user id=%s", user_id)

    def request_password_reset(self, email: str) -> None:
        user = self._users.get_by_email(email)
        if not user:
            raise NotFoundError(USER_NOT_FOUND)
        self._notifier.send_password_reset(email)
        logger.info("Password reset dispatched for user id=%s", user.user_id)
