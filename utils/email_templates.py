"""HTML bodies for the transactional emails."""

from __future__ import annotations

from html import escape


SUPPORT_EMAIL = "iglobusjobsetu@gmail.com"


def _wrap(greeting: str, body: str) -> str:
    return f"""
    <div style="font-family:Arial,sans-serif;max-width:750px;margin:0 auto">
      <div style="background:#79b5f5;color:#fff;text-align:center;padding:10px">
        <h2 style="margin:0;font-size:18px">{greeting}</h2>
      </div>
      <div style="background:#dcebf8;padding:20px;color:#333">
        {body}
        <p>Please reach out to <a href="mailto:{SUPPORT_EMAIL}">{SUPPORT_EMAIL}</a>
        if you are facing any issues.</p>
        <p>Regards,<br><b>JOBSETU Team.</b></p>
      </div>
    </div>
    """


def candidate_otp(code: str, ttl_minutes: int) -> str:
    return _wrap(
        "Welcome to JobSetu",
        f"""
        <p>Your login OTP is:</p>
        <div style="font-size:28px;font-weight:700;letter-spacing:2px">{code}</div>
        <p>This OTP expires in {ttl_minutes} minutes. Please do not share it with anyone.</p>
        """,
    )


def client_forget_password_otp(first_name: str, last_name: str, code: str, ttl_minutes: int) -> str:
    return _wrap(
        f"Hello <b>{escape(first_name)} {escape(last_name)}</b>",
        f"""
        <p>We received a request to reset your password. Please use the OTP below to proceed.</p>
        <p><b>Your OTP is:</b> <span style="font-size:24px;color:#007bff;font-weight:bold">{code}</span></p>
        <p style="color:#d9534f"><u>Note:</u> This OTP is valid for {ttl_minutes} minutes only.</p>
        <p>If you did not request a password reset, please ignore this email.</p>
        """,
    )


def client_registration(organization_name: str) -> str:
    return _wrap(
        f"Hello <b>{escape(organization_name)}</b>",
        """
        <p>Thank you for registering with JobSetu. Your account is under review and
        you will be able to log in once an admin activates it.</p>
        """,
    )


def admin_client_notification(organization_name: str, email: str, client_id: int) -> str:
    return _wrap(
        "New client registration",
        f"""
        <p>A new client has registered and is waiting for activation.</p>
        <ul>
          <li>Organization: <b>{escape(organization_name)}</b></li>
          <li>Email: {escape(email)}</li>
          <li>Client ID: {client_id}</li>
        </ul>
        """,
    )


def job_applied(job_title: str) -> str:
    return _wrap(
        "Application received",
        f"<p>You have successfully applied for <b>{escape(job_title)}</b>. Good luck!</p>",
    )


def contact_us(name: str, email: str, mobile: str, message: str) -> str:
    return _wrap(
        "New contact request",
        f"""
        <ul>
          <li>Name: {escape(name)}</li>
          <li>Email: {escape(email)}</li>
          <li>Mobile: {escape(mobile)}</li>
        </ul>
        <p>{escape(message)}</p>
        """,
    )
