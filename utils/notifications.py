from __future__ import annotations

import logging
from typing import Optional

from apscheduler.schedulers.base import BaseScheduler

from config import Settings
from utils import email_templates
from utils.brevo_email import BrevoMailer
from utils.otp_service import OTP_EXP_MIN


logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """
    One-way email delivery.

    Every `send_*` call adds a one-shot job to the background scheduler and
    returns straight away; the request never waits for Brevo. A failed delivery
    is logged and dropped, never retried, and never reaches the caller.
    """

    def __init__(self, settings: Settings, mailer: BrevoMailer, scheduler: BaseScheduler) -> None:
        self._settings = settings
        self._mailer = mailer
        self._scheduler = scheduler

    def _enqueue(self, *, to_email: str, subject: str, html: str, text: Optional[str] = None) -> None:
        # No trigger means "run once, now" on the scheduler's worker pool.
        self._scheduler.add_job(
            self._deliver,
            kwargs={"to_email": to_email, "subject": subject, "html": html, "text": text},
            misfire_grace_time=None,
        )

    def _deliver(self, *, to_email: str, subject: str, html: str, text: Optional[str] = None) -> None:
        try:
            self._mailer.send_email(to_email=to_email, subject=subject, html=html, text=text)
        except Exception:
            logger.exception("Failed to send %r email to %s", subject, to_email)
            return
        logger.info("Sent %r email to %s", subject, to_email)

    def send_candidate_otp(self, email: str, code: str) -> None:
        self._enqueue(
            to_email=email,
            subject="Your JobSetu login OTP",
            html=email_templates.candidate_otp(code, OTP_EXP_MIN),
            text=f"Your OTP is {code}. It expires in {OTP_EXP_MIN} minutes.",
        )

    def send_client_reset_otp(self, *, email: str, first_name: str, last_name: str, code: str) -> None:
        self._enqueue(
            to_email=email,
            subject="Password Reset OTP - JobSetu",
            html=email_templates.client_forget_password_otp(first_name, last_name, code, OTP_EXP_MIN),
            text=f"Your password reset OTP is {code}. It expires in {OTP_EXP_MIN} minutes.",
        )

    def send_client_registration(self, *, email: str, organization_name: str) -> None:
        self._enqueue(
            to_email=email,
            subject="Registration received - JobSetu",
            html=email_templates.client_registration(organization_name),
        )

    def send_admin_client_notification(self, *, organization_name: str, email: str, client_id: int) -> None:
        admin_email = self._settings.admin_notification_email
        if not admin_email:
            logger.warning("ADMIN_NOTIFICATION_EMAIL is not set; skipping notice for client %s", client_id)
            return
        self._enqueue(
            to_email=admin_email,
            subject=f"New client registration: {organization_name}",
            html=email_templates.admin_client_notification(organization_name, email, client_id),
        )

    def send_job_applied(self, *, email: str, job_title: str) -> None:
        self._enqueue(
            to_email=email,
            subject=f"Applied: {job_title} - JobSetu",
            html=email_templates.job_applied(job_title),
        )

    def send_contact_us(self, *, name: str, email: str, mobile: str, message: str) -> None:
        to_email = self._settings.contact_us_email or self._settings.email_from
        if not to_email:
            logger.warning("CONTACT_US_EMAIL is not set; dropping contact request from %s", email)
            return
        self._enqueue(
            to_email=to_email,
            subject=f"Contact us: {name}",
            html=email_templates.contact_us(name, email, mobile, message),
        )
