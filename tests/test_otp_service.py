from __future__ import annotations

import re
from datetime import datetime, timedelta

import pytest

from models import Candidate, Client
from utils.errors import IdentityNotFound, OtpExpired, OtpInvalid
from utils.otp_service import generate_otp, otp_clear, otp_issue, otp_validate


T0 = datetime(2026, 1, 5, 9, 30, 0)


def test_generated_codes_are_five_digits_without_leading_zero() -> None:
    for _ in range(2000):
        code = generate_otp()
        assert re.fullmatch(r"\d{5}", code)
        assert 10000 <= int(code) <= 99999


def test_issue_creates_bare_candidate_on_first_join(db) -> None:
    candidate = otp_issue(db, model=Candidate, email="  New@X.com ", code="12345", create_missing=True, now=T0)

    assert candidate.id is not None
    assert candidate.email == "new@x.com"
    assert candidate.otp_code == "12345"
    assert candidate.otp_expires_at == T0 + timedelta(minutes=10)
    assert candidate.first_name is None
    assert db.query(Candidate).count() == 1


def test_issue_overwrites_previous_code_and_expiry(db, make_candidate) -> None:
    make_candidate(email="a@x.com", otp_code="11111", otp_expires_at=T0)

    later = T0 + timedelta(minutes=3)
    candidate = otp_issue(db, model=Candidate, email="a@x.com", code="22222", create_missing=True, now=later)

    assert candidate.otp_code == "22222"
    assert candidate.otp_expires_at == later + timedelta(minutes=10)
    assert db.query(Candidate).count() == 1


def test_issue_for_unknown_client_is_not_found(db) -> None:
    with pytest.raises(IdentityNotFound):
        otp_issue(db, model=Client, email="nobody@x.com", code="12345")
    assert db.query(Client).count() == 0


def test_validate_within_window_then_expired(db) -> None:
    otp_issue(db, model=Candidate, email="a@x.com", code="54321", create_missing=True, now=T0)

    ok = otp_validate(db, model=Candidate, email="a@x.com", otp="54321", now=T0 + timedelta(minutes=9, seconds=59))
    assert ok.email == "a@x.com"

    with pytest.raises(OtpExpired):
        otp_validate(db, model=Candidate, email="a@x.com", otp="54321", now=T0 + timedelta(minutes=10, seconds=1))

    with pytest.raises(OtpInvalid):
        otp_validate(db, model=Candidate, email="a@x.com", otp="00000", now=T0 + timedelta(minutes=5))


def test_exact_expiry_moment_is_still_valid(db) -> None:
    otp_issue(db, model=Candidate, email="a@x.com", code="54321", create_missing=True, now=T0)
    otp_validate(db, model=Candidate, email="a@x.com", otp="54321", now=T0 + timedelta(minutes=10))


def test_expiry_wins_over_code_correctness(db) -> None:
    otp_issue(db, model=Candidate, email="a@x.com", code="54321", create_missing=True, now=T0)
    with pytest.raises(OtpExpired):
        otp_validate(db, model=Candidate, email="a@x.com", otp="99999", now=T0 + timedelta(hours=1))


def test_superseded_code_is_rejected(db) -> None:
    otp_issue(db, model=Candidate, email="a@x.com", code="11111", create_missing=True, now=T0)
    otp_issue(db, model=Candidate, email="a@x.com", code="22222", create_missing=True, now=T0 + timedelta(seconds=1))

    with pytest.raises(OtpInvalid):
        otp_validate(db, model=Candidate, email="a@x.com", otp="11111", now=T0 + timedelta(seconds=2))
    otp_validate(db, model=Candidate, email="a@x.com", otp="22222", now=T0 + timedelta(seconds=2))


def test_valid_code_can_be_replayed_until_expiry(db) -> None:
    otp_issue(db, model=Candidate, email="a@x.com", code="54321", create_missing=True, now=T0)
    for minute in (1, 2, 9):
        otp_validate(db, model=Candidate, email="a@x.com", otp="54321", now=T0 + timedelta(minutes=minute))

    db.expire_all()
    assert db.query(Candidate).one().otp_code == "54321"


def test_comparison_is_by_string_not_number(db, make_candidate) -> None:
    make_candidate(email="a@x.com", otp_code="00123", otp_expires_at=T0 + timedelta(minutes=10))
    with pytest.raises(OtpInvalid):
        otp_validate(db, model=Candidate, email="a@x.com", otp="123", now=T0)
    otp_validate(db, model=Candidate, email="a@x.com", otp="00123", now=T0)


def test_unknown_identity_is_not_found(db) -> None:
    with pytest.raises(IdentityNotFound):
        otp_validate(db, model=Candidate, email="ghost@x.com", otp="12345", now=T0)


def test_missing_code_is_invalid(db, make_candidate) -> None:
    make_candidate(email="a@x.com")
    with pytest.raises(OtpInvalid):
        otp_validate(db, model=Candidate, email="a@x.com", otp="12345", now=T0)


def test_lookup_is_case_insensitive(db) -> None:
    otp_issue(db, model=Candidate, email="a@x.com", code="54321", create_missing=True, now=T0)
    otp_validate(db, model=Candidate, email="A@X.COM", otp="54321", now=T0)


def test_clear_removes_code_and_expiry_together(db, make_client) -> None:
    make_client(email="hr@acme.com")
    client = otp_issue(db, model=Client, email="hr@acme.com", code="12345", now=T0)

    otp_clear(db, client)
    db.commit()
    db.expire_all()

    stored = db.query(Client).one()
    assert stored.otp_code is None
    assert stored.otp_expires_at is None
    with pytest.raises(OtpInvalid):
        otp_validate(db, model=Client, email="hr@acme.com", otp="12345", now=T0)
