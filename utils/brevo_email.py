from __future__ import annotations

from typing import Optional

import requests

from config import Settings


BREVO_URL = "https://api.brevo.com/v3/smtp/email"


class BrevoMailer:
    """Sends email using Brevo Transactional Email API."""

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None) -> None:
        self._api_key = settings.brevo_api_key
        self._from_email = settings.email_from
        self._from_name = settings.email_from_name
        self._http = session or requests.Session()

    def send_email(self, *, to_email: str, subject: str, html: str, text: Optional[str] = None) -> None:
        if not self._api_key:
            raise RuntimeError("BREVO_API_KEY is not set")
        if not self._from_email:
            raise RuntimeError("BREVO_FROM (or EMAIL_FROM) is not set")

        payload = {
            "sender": {"email": self._from_email, "name": self._from_name},
            "to": [{"email": to_email}],
            "subject": subject,
            "htmlContent": html,
        }
        if text:
            payload["textContent"] = text

        resp = self._http.post(
            BREVO_URL,
            headers={
                "accept": "application/json",
                "api-key": self._api_key,
                "content-type": "application/json",
            },
            json=payload,
            timeout=15,
        )
        if resp.status_code >= 300:
            raise RuntimeError(f"Brevo send failed ({resp.status_code}): {resp.text}")
