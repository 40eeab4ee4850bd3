from __future__ import annotations

from typing import Protocol

from werkzeug.security import check_password_hash, generate_password_hash


class PasswordHasher(Protocol):
    def hash(self, plaintext: str) -> str:
        raise NotImplementedError

    def verify(self, plaintext: str, hashed: str) -> bool:
        raise NotImplementedError


class WerkzeugPasswordHasher(PasswordHasher):
    """Salted one-way hashing via werkzeug (scrypt/pbkdf2, whatever werkzeug defaults to)."""

    def __init__(self, method: str | None = None):
        self._method = method

    def hash(self, plaintext: str) -> str:
        if self._method:
            return generate_password_hash(plaintext, method=self._method)
        return generate_password_hash(plaintext)

    def verify(self, plaintext: str, hashed: str) -> bool:
        try:
            return check_password_hash(hashed, plaintext)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            return False
