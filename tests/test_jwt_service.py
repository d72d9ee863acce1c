from __future__ import annotations

from datetime import datetime, timedelta, timezone

from config import get_settings
from utils.jwt_service import TokenIssuer


CLAIMS = {"candidateId": 7, "email": "a@x.com", "role": "candidate"}


def _issuer(**overrides) -> TokenIssuer:
    return TokenIssuer(get_settings().model_copy(update=overrides))


def _tamper(token: str) -> str:
    header, payload, sig = token.split(".")
    i = len(sig) // 2
    swapped = "A" if sig[i] != "A" else "B"
    return ".".join([header, payload, sig[:i] + swapped + sig[i + 1:]])


def test_claims_round_trip() -> None:
    issuer = _issuer()
    assert issuer.verify(issuer.issue(CLAIMS)) == CLAIMS


def test_token_still_valid_just_under_a_day_old() -> None:
    issuer = _issuer()
    issued = datetime.now(timezone.utc) - timedelta(hours=23, minutes=59)
    assert issuer.verify(issuer.issue(CLAIMS, now=issued)) == CLAIMS


def test_token_rejected_after_a_day() -> None:
    issuer = _issuer()
    issued = datetime.now(timezone.utc) - timedelta(hours=24, seconds=5)
    assert issuer.verify(issuer.issue(CLAIMS, now=issued)) is None


def test_tampered_signature_is_rejected() -> None:
    issuer = _issuer()
    assert issuer.verify(_tamper(issuer.issue(CLAIMS))) is None


def test_other_secret_is_rejected() -> None:
    token = _issuer(jwt_secret="another-secret").issue(CLAIMS)
    assert _issuer().verify(token) is None


def test_garbage_and_empty_tokens_return_none() -> None:
    issuer = _issuer()
    assert issuer.verify("") is None
    assert issuer.verify("not.a.token") is None
    assert issuer.verify("abc") is None


def test_custom_ttl() -> None:
    issuer = _issuer()
    issued = datetime.now(timezone.utc) - timedelta(minutes=11)
    assert issuer.verify(issuer.issue(CLAIMS, ttl=timedelta(minutes=10), now=issued)) is None
