from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional, Type, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import Candidate, Client, utcnow
from utils.errors import IdentityNotFound, OtpExpired, OtpInvalid


logger = logging.getLogger(__name__)

OTP_EXP_MIN = 10

Identity = Union[Candidate, Client]


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def generate_otp() -> str:
    """Five digits, 10000-99999; the leading digit is never zero."""
    return str(10000 + secrets.randbelow(90000))


def _find(db: Session, model: Type[Identity], email: str) -> Optional[Identity]:
    return db.query(model).filter(model.email == email).first()


def _write_otp(db: Session, model: Type[Identity], email: str, code: str, expires_at: datetime) -> int:
    # Both columns in one UPDATE so a concurrent issuance can never leave a mixed pair.
    updated = (
        db.query(model)
        .filter(model.email == email)
        .update(
            {model.otp_code: code, model.otp_expires_at: expires_at, model.updated_at: utcnow()},
            synchronize_session=False,
        )
    )
    db.commit()
    return updated


def otp_issue(
    db: Session,
    *,
    model: Type[Identity],
    email: str,
    code: str,
    ttl_minutes: int = OTP_EXP_MIN,
    create_missing: bool = False,
    now: Optional[datetime] = None,
) -> Identity:
    """
    Store `code` on the identity keyed by `email`, expiring `ttl_minutes` from now.

    Overwrites any earlier code. When no identity exists, a bare record holding
    only the email and OTP is created if `create_missing` is set (candidate
    join); otherwise IdentityNotFound is raised (client password reset).
    """
    email = normalize_email(email)
    expires_at = (now or utcnow()) + timedelta(minutes=ttl_minutes)

    if _write_otp(db, model, email, code, expires_at):
        return _find(db, model, email)

    if not create_missing:
        raise IdentityNotFound()

    record = model(email=email, otp_code=code, otp_expires_at=expires_at)
    db.add(record)
    try:
        db.commit()
    except IntegrityError:
        # Another request created the same identity first; last write wins.
        db.rollback()
        _write_otp(db, model, email, code, expires_at)
        return _find(db, model, email)
    db.refresh(record)
    logger.info("Created %s record for %s on first OTP request", model.__name__.lower(), email)
    return record


def otp_validate(
    db: Session,
    *,
    model: Type[Identity],
    email: str,
    otp: str,
    now: Optional[datetime] = None,
) -> Identity:
    """
    Check `otp` against the identity's stored code.

    Raises IdentityNotFound, OtpExpired (strictly after expiry) or OtpInvalid.
    The code is not consumed: the same code keeps validating until it expires
    or is replaced.
    """
    record = _find(db, model, normalize_email(email))
    if not record:
        raise IdentityNotFound()

    now = now or utcnow()
    if record.otp_expires_at is not None and now > record.otp_expires_at:
        raise OtpExpired()

    # String comparison: "00123" and "123" are different codes.
    stored = record.otp_code
    submitted = (otp or "").strip()
    if not stored or not secrets.compare_digest(stored.encode("utf-8"), submitted.encode("utf-8")):
        raise OtpInvalid()
    return record


def otp_clear(db: Session, record: Identity) -> None:
    record.otp_code = None
    record.otp_expires_at = None
    db.add(record)
