from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .database.bootstrap import apply_schema
from .database.connection import DatabaseConnection, DBConfig
from .notifications.notifier import LoggingNotifier, Notifier, SmtpNotifier
from .security.hasher import PasswordHasher, WerkzeugPasswordHasher
from .users.memory_user_repository import InMemoryUserRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    hasher: PasswordHasher
    notifier: Notifier

    user_service: UserService


def build_notifier(settings) -> Notifier:
    server = getattr(settings, "MAIL_SERVER", "")
    if not server:
        return LoggingNotifier()
    return SmtpNotifier(
        server=server,
        port=int(getattr(settings, "MAIL_PORT", 587)),
        sender=getattr(settings, "MAIL_SENDER", "") or getattr(settings, "MAIL_USERNAME", ""),
        username=getattr(settings, "MAIL_USERNAME", ""),
        password=getattr(settings, "MAIL_PASSWORD", ""),
        use_tls=bool(getattr(settings, "MAIL_USE_TLS", True)),
        reset_url=getattr(settings, "PASSWORD_RESET_URL", "") or None,
    )


def build_container(settings) -> Container:
    """Construct every collaborator once; the app holds the result for its lifetime."""
    conn: Optional[DatabaseConnection] = None
    users_repo: UserRepository

    if getattr(settings, "USER_STORE", "mysql") == "memory":
        users_repo = InMemoryUserRepository()
    else:
        conn = DatabaseConnection(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(conn)
        users_repo = MySQLUserRepository(conn)

    hasher = WerkzeugPasswordHasher()
    notifier = build_notifier(settings)
    user_service = UserService(users_repo, hasher, notifier)

    return Container(
        conn=conn,
        users_repo=users_repo,
        hasher=hasher,
        notifier=notifier,
        user_service=user_service,
    )
