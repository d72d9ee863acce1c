from __future__ import annotations

import re

import bcrypt


def _safe(password: str) -> bytes:
    # Multi-byte safe password truncation for bcrypt (max 72 bytes)
    safe_password = password.strip().encode("utf-8")[:72].decode("utf-8", errors="ignore")
    return safe_password.encode("utf-8")


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_safe(password), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    return bcrypt.checkpw(_safe(password), password_hash.encode("utf-8"))


_STRONG = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$")


def check_strength(password: str) -> str:
    """Validator helper: returns the password or raises ValueError."""
    if len(password or "") < 8:
        raise ValueError("Password must be at least 8 characters long")
    if not _STRONG.match(password):
        raise ValueError(
            "Password must contain at least one uppercase letter, one lowercase letter, "
            "one number, and one special character"
        )
    return password
