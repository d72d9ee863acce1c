from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional

from jose import JWTError, jwt

from config import Settings


logger = logging.getLogger(__name__)

_REGISTERED = ("iat", "exp")


class TokenIssuer:
    """Signs and checks stateless bearer tokens. There is no revocation list."""

    def __init__(self, settings: Settings) -> None:
        self._secret = settings.jwt_secret
        self._alg = settings.jwt_alg
        self._ttl = timedelta(hours=settings.jwt_exp_hours)

    def issue(
        self,
        claims: Mapping[str, Any],
        *,
        ttl: Optional[timedelta] = None,
        now: Optional[datetime] = None,
    ) -> str:
        issued = now or datetime.now(timezone.utc)
        payload = dict(claims)
        payload["iat"] = int(issued.timestamp())
        payload["exp"] = int((issued + (ttl or self._ttl)).timestamp())
        return jwt.encode(payload, self._secret, algorithm=self._alg)

    def verify(self, token: str) -> Optional[Dict[str, Any]]:
        """Return the caller's claims, or None for a bad signature, expiry or garbage."""
        if not token:
            return None
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._alg])
        except JWTError as exc:
            logger.debug("Rejected bearer token: %s", exc)
            return None
        return {k: v for k, v in payload.items() if k not in _REGISTERED}
