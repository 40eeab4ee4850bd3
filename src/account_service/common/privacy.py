from __future__ import annotations


def mask_email(email: str) -> str:
    """Keep the first character of the local part and the domain: ``a***@x.com``."""
    local, sep, domain = (email or "").partition("@")
    if not sep:
        return "***"
    return f"{local[:1]}***@{domain}"
