from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.constants import DEFAULT_ROLE, DEFAULT_STATUS


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: Plain data object (no DB access code). ``user_id`` stays None until
    the repository assigns one on first save.
    """

    email: str
    username: str
    full_name: Optional[str]
    password_hash: Optional[str]
    role: str = DEFAULT_ROLE
    status: bool = DEFAULT_STATUS
    phone_number: Optional[str] = None
    birth_date: Optional[date] = None
    profile_picture_url: Optional[str] = None
    user_id: Optional[int] = None


@dataclass(frozen=True)
class UserPatch:
    """Partial update payload. ``None`` means "leave unchanged"."""

    full_name: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    phone_number: Optional[str] = None
    birth_date: Optional[date] = None
    profile_picture_url: Optional[str] = None
