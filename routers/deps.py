from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config import Settings, get_settings
from models import ADMIN_ROLES
from utils.brevo_email import BrevoMailer
from utils.errors import TokenInvalidOrExpired
from utils.jwt_service import TokenIssuer
from utils.notifications import NotificationDispatcher
from utils.s3_storage import S3Storage


bearer = HTTPBearer(auto_error=False)


def get_app_settings() -> Settings:
    return get_settings()


@lru_cache()
def get_scheduler() -> BackgroundScheduler:
    """Process-wide worker pool for fire-and-forget jobs; started by main.py."""
    return BackgroundScheduler(timezone=get_settings().tz)


@lru_cache()
def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(get_settings())


@lru_cache()
def get_dispatcher() -> NotificationDispatcher:
    settings = get_settings()
    return NotificationDispatcher(settings, BrevoMailer(settings), get_scheduler())


@lru_cache()
def get_storage() -> S3Storage:
    return S3Storage(get_settings())


def _raw_token(request: Request, creds: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if creds and creds.credentials:
        return creds.credentials
    # Older clients send the bare token without the "Bearer" scheme.
    raw = (request.headers.get("authorization") or request.headers.get("auth_token") or "").strip()
    return raw or None


def get_token_claims(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> Dict[str, Any]:
    token = _raw_token(request, creds)
    if not token:
        raise HTTPException(401, "No token provided !")
    claims = issuer.verify(token)
    # Purpose-scoped tokens (password reset) are not sessions.
    if claims is None or "purpose" in claims:
        raise TokenInvalidOrExpired()
    return claims


def require_candidate(claims: Dict[str, Any] = Depends(get_token_claims)) -> int:
    candidate_id = claims.get("candidateId")
    if not candidate_id or claims.get("role") != "candidate":
        raise HTTPException(401, "Invalid candidate ID. Access denied !")
    return int(candidate_id)


def require_client(claims: Dict[str, Any] = Depends(get_token_claims)) -> int:
    client_id = claims.get("clientId")
    if not client_id or claims.get("role") != "client":
        raise HTTPException(401, "Invalid client ID. Access denied !")
    return int(client_id)


def require_recruiter(claims: Dict[str, Any] = Depends(get_token_claims)) -> int:
    recruiter_id = claims.get("recruiterId")
    if not recruiter_id or claims.get("role") != "recruiter":
        raise HTTPException(401, "Invalid recruiter ID. Access denied !")
    return int(recruiter_id)


def require_admin(claims: Dict[str, Any] = Depends(get_token_claims)) -> Dict[str, Any]:
    if not claims.get("adminId") or not claims.get("role"):
        raise HTTPException(401, "Invalid admin credentials. Access denied !")
    if claims["role"] not in ADMIN_ROLES:
        raise HTTPException(403, "Insufficient permissions. Admin access required !")
    return claims
