"""
Domain errors raised by services and routers.

Each error carries the HTTP status and user-facing message the API returns for
it; `main.py` registers a single handler that renders them.
"""

from __future__ import annotations

from typing import Optional


class AppError(Exception):
    status_code = 500
    message = "Something went wrong. Please try again later !"

    def __init__(self, message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


# --- authentication core ---

class IdentityNotFound(AppError):
    status_code = 404
    message = "Account not found !"


class OtpExpired(AppError):
    status_code = 400
    message = "OTP has expired. Please request a new one !"


class OtpInvalid(AppError):
    status_code = 400
    message = "Invalid OTP !"


class TokenInvalidOrExpired(AppError):
    status_code = 401
    message = "Invalid token !"


# --- accounts ---

class BadCredentials(AppError):
    status_code = 401
    message = "Incorrect password !"


class AccountNotActive(AppError):
    status_code = 403
    message = "Your account is under review by admin for activation !"


class AccountDeactivated(AppError):
    status_code = 403
    message = "Your account has been deactivated. Please contact support !"


class AlreadyExists(AppError):
    status_code = 409
    message = "Email already exists !"


# --- jobs ---

class JobNotFound(AppError):
    status_code = 404
    message = "Job not found !"


class JobAlreadyApplied(AppError):
    status_code = 409
    message = "You have already applied to this job !"


class JobNotSaved(AppError):
    status_code = 400
    message = "Job is not saved !"


# --- uploads ---

class InvalidUpload(AppError):
    status_code = 400
    message = "Invalid file upload !"


class UploadFailed(AppError):
    status_code = 500
    message = "An error occurred while uploading the file. Please try again later !"
