from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pydantic import BaseModel, EmailStr, Field, ValidationError, field_validator, model_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import Settings
from database import get_db
from models import CATEGORIES, JOB_STATUSES, JOB_TYPES, Client, Job
from routers.deps import get_app_settings, get_dispatcher, get_storage, get_token_issuer, require_client
from routers.uploads import read_upload
from utils.errors import (
    AccountDeactivated,
    AccountNotActive,
    AlreadyExists,
    BadCredentials,
    IdentityNotFound,
    JobNotFound,
    TokenInvalidOrExpired,
    UploadFailed,
)
from utils.jwt_service import TokenIssuer
from utils.notifications import NotificationDispatcher
from utils.otp_service import generate_otp, normalize_email, otp_clear, otp_issue, otp_validate
from utils.passwords import check_password, check_strength, hash_password
from utils.presenters import client_out, job_out
from utils.s3_storage import IMAGE_TYPES, S3Storage


logger = logging.getLogger(__name__)

router = APIRouter(tags=["client"])

RESET_PURPOSE = "client_password_reset"


class ClientLoginIn(BaseModel):
    email: EmailStr
    password: str


class ForgetPasswordIn(BaseModel):
    email: EmailStr
    otp: Optional[str] = Field(default=None, pattern=r"^\d{5}$")

    @field_validator("otp", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v


class UpdatePasswordIn(BaseModel):
    email: EmailStr
    newPassword: str
    reEnterNewPassword: str
    resetToken: Optional[str] = None

    @field_validator("newPassword")
    @classmethod
    def _strong(cls, v: str) -> str:
        return check_strength(v)

    @model_validator(mode="after")
    def _match(self):
        if self.newPassword != self.reEnterNewPassword:
            raise ValueError("Passwords do not match")
        return self


class JobFields(BaseModel):
    jobDescription: Optional[str] = None
    postStart: Optional[datetime] = None
    postEnd: Optional[datetime] = None
    noOfPositions: Optional[int] = Field(default=None, ge=1)
    minimumSalary: Optional[int] = Field(default=None, ge=0)
    maximumSalary: Optional[int] = Field(default=None, ge=0)
    jobType: Optional[str] = None
    jobLocation: Optional[str] = None
    minimumExperience: Optional[int] = Field(default=None, ge=0)
    maximumExperience: Optional[int] = Field(default=None, ge=0)
    status: Optional[str] = None

    @field_validator("jobType")
    @classmethod
    def _job_type(cls, v):
        if v is not None and v not in JOB_TYPES:
            raise ValueError(f"jobType must be one of {', '.join(JOB_TYPES)}")
        return v

    @field_validator("status")
    @classmethod
    def _status(cls, v):
        if v is not None and v not in JOB_STATUSES:
            raise ValueError(f"status must be one of {', '.join(JOB_STATUSES)}")
        return v

    @model_validator(mode="after")
    def _ranges(self):
        if self.minimumSalary is not None and self.maximumSalary is not None:
            if self.minimumSalary > self.maximumSalary:
                raise ValueError("minimumSalary cannot exceed maximumSalary")
        if self.minimumExperience is not None and self.maximumExperience is not None:
            if self.minimumExperience > self.maximumExperience:
                raise ValueError("minimumExperience cannot exceed maximumExperience")
        if self.postStart and self.postEnd and self.postStart > self.postEnd:
            raise ValueError("postStart cannot be after postEnd")
        return self


class JobCreateIn(JobFields):
    jobTitle: str = Field(min_length=1)


class JobUpdateIn(JobFields):
    jobId: int
    jobTitle: Optional[str] = Field(default=None, min_length=1)


JOB_COLUMNS = {
    "jobTitle": "job_title",
    "jobDescription": "job_description",
    "postStart": "post_start",
    "postEnd": "post_end",
    "noOfPositions": "no_of_positions",
    "minimumSalary": "minimum_salary",
    "maximumSalary": "maximum_salary",
    "jobType": "job_type",
    "jobLocation": "job_location",
    "minimumExperience": "minimum_experience",
    "maximumExperience": "maximum_experience",
    "status": "status",
}


def _get_client(db: Session, client_id: int) -> Client:
    client = db.get(Client, client_id)
    if not client:
        raise IdentityNotFound("Invalid Account !")
    return client


def _owned_job(db: Session, client_id: int, job_id: int) -> Job:
    job = db.query(Job).filter(Job.id == job_id, Job.client_id == client_id).first()
    if not job:
        raise JobNotFound("Job not found or you are not authorized to access this job !")
    return job


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


@router.post("/registerclient", status_code=201)
async def register_client(
    email: str = Form(...),
    password: str = Form(...),
    organizationName: str = Form(...),
    primaryContactFirstName: str = Form(...),
    primaryContactLastName: str = Form(...),
    gstin: str = Form(...),
    panCard: str = Form(...),
    category: str = Form(...),
    secondaryContactFirstName: Optional[str] = Form(None),
    secondaryContactLastName: Optional[str] = Form(None),
    mobile: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    logo: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    storage: S3Storage = Depends(get_storage),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    email = normalize_email(email)
    if "@" not in email:
        raise HTTPException(400, "Please provide a valid email address")
    try:
        check_strength(password)
    except ValueError as exc:
        raise HTTPException(400, str(exc))
    if category not in CATEGORIES:
        raise HTTPException(400, "Category must be IT or Non-IT.")
    for label, value in (("Organization name", organizationName), ("First name", primaryContactFirstName),
                         ("Last name", primaryContactLastName), ("GSTIN", gstin), ("PAN card", panCard)):
        if not value.strip():
            raise HTTPException(400, f"{label} is required.")

    if db.query(Client).filter(Client.email == email).first():
        raise AlreadyExists()

    logo_file = await read_upload(logo, allowed=IMAGE_TYPES, max_bytes=settings.max_upload_bytes, label="logo")

    client = Client(
        email=email,
        password_hash=hash_password(password),
        organization_name=organizationName.strip(),
        primary_first_name=primaryContactFirstName.strip(),
        primary_last_name=primaryContactLastName.strip(),
        secondary_first_name=_clean(secondaryContactFirstName),
        secondary_last_name=_clean(secondaryContactLastName),
        mobile=_clean(mobile),
        location=_clean(location),
        gstin=gstin.strip().upper(),
        pan_card=panCard.strip().upper(),
        category=category,
    )
    db.add(client)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise AlreadyExists()
    db.refresh(client)

    if logo_file:
        data, content_type, filename = logo_file
        try:
            key = storage.upload(
                folder="clients", owner_id=client.id, kind="logos",
                filename=filename, data=data, content_type=content_type,
            )
        except UploadFailed:
            # Registration stands without a logo; it can be added from the profile later.
            logger.exception("Logo upload failed during registration of client %s", client.id)
        else:
            client.logo = storage.public_url(key)
            db.commit()
            db.refresh(client)

    dispatcher.send_client_registration(email=client.email, organization_name=client.organization_name)
    dispatcher.send_admin_client_notification(
        organization_name=client.organization_name, email=client.email, client_id=client.id
    )
    logger.info("Registered client %s (%s)", client.id, client.organization_name)
    return {"success": True, "message": "Client registered successfully !", "data": client_out(client)}


@router.post("/loginclient")
def login_client(
    payload: ClientLoginIn,
    db: Session = Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    client = db.query(Client).filter(Client.email == normalize_email(str(payload.email))).first()
    if not client:
        raise BadCredentials("Invalid Account !")
    if not check_password(payload.password, client.password_hash):
        raise BadCredentials()
    if client.status == "registered":
        raise AccountNotActive()
    if client.status != "active":
        raise AccountDeactivated()

    token = issuer.issue({
        "clientId": client.id,
        "email": client.email,
        "organizationName": client.organization_name,
        "role": "client",
    })
    return {
        "success": True,
        "message": "Client login successfully !",
        "data": {"token": token, "client": client_out(client)},
    }


@router.get("/getclientprofile")
def get_client_profile(client_id: int = Depends(require_client), db: Session = Depends(get_db)):
    client = _get_client(db, client_id)
    return {"success": True, "message": "Client details fetched successfully !", "data": client_out(client)}


@router.put("/updateclientprofile")
async def update_client_profile(
    organizationName: Optional[str] = Form(None),
    primaryContactFirstName: Optional[str] = Form(None),
    primaryContactLastName: Optional[str] = Form(None),
    secondaryContactFirstName: Optional[str] = Form(None),
    secondaryContactLastName: Optional[str] = Form(None),
    mobile: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    logo: Optional[UploadFile] = File(None),
    client_id: int = Depends(require_client),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    storage: S3Storage = Depends(get_storage),
):
    client = _get_client(db, client_id)
    if category is not None and category not in CATEGORIES:
        raise HTTPException(400, "Category must be IT or Non-IT.")
    if password:
        try:
            check_strength(password)
        except ValueError as exc:
            raise HTTPException(400, str(exc))

    logo_file = await read_upload(logo, allowed=IMAGE_TYPES, max_bytes=settings.max_upload_bytes, label="logo")

    fields = {
        "organization_name": organizationName,
        "primary_first_name": primaryContactFirstName,
        "primary_last_name": primaryContactLastName,
        "secondary_first_name": secondaryContactFirstName,
        "secondary_last_name": secondaryContactLastName,
        "mobile": mobile,
        "location": location,
        "category": category,
    }
    for attr, value in fields.items():
        if value is not None:
            setattr(client, attr, value.strip())
    if password:
        client.password_hash = hash_password(password)
    if logo_file:
        data, content_type, filename = logo_file
        key = storage.upload(
            folder="clients", owner_id=client.id, kind="logos",
            filename=filename, data=data, content_type=content_type,
        )
        client.logo = storage.public_url(key)

    db.commit()
    db.refresh(client)
    return {"success": True, "message": "Client profile updated successfully !", "data": client_out(client)}


@router.post("/createjobbyclient", status_code=201)
def create_job_by_client(
    payload: JobCreateIn,
    client_id: int = Depends(require_client),
    db: Session = Depends(get_db),
):
    client = _get_client(db, client_id)
    job = Job(client_id=client.id, organization_name=client.organization_name)
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(job, JOB_COLUMNS[key], value)
    db.add(job)
    db.commit()
    db.refresh(job)
    logger.info("Client %s created job %s", client.id, job.id)
    return {"success": True, "message": "Job created successfully !", "data": job_out(job)}


@router.get("/getalljobsbyclient")
def get_all_jobs_by_client(client_id: int = Depends(require_client), db: Session = Depends(get_db)):
    jobs = db.query(Job).filter(Job.client_id == client_id).order_by(Job.created_at.desc(), Job.id.desc()).all()
    return {"success": True, "message": "Jobs fetched successfully !", "data": [job_out(j) for j in jobs]}


@router.get("/getjobbyclient/{job_id}")
def get_job_by_client(job_id: int, client_id: int = Depends(require_client), db: Session = Depends(get_db)):
    job = _owned_job(db, client_id, job_id)
    return {"success": True, "message": "Job details fetched successfully !", "data": job_out(job)}


@router.put("/updatejobbyclient")
def update_job_by_client(
    payload: JobUpdateIn,
    client_id: int = Depends(require_client),
    db: Session = Depends(get_db),
):
    job = _owned_job(db, client_id, payload.jobId)
    changes = payload.model_dump(exclude_unset=True, exclude={"jobId"})
    for key, value in changes.items():
        setattr(job, JOB_COLUMNS[key], value)

    # Partial updates can still break a range against the stored value.
    try:
        JobFields(
            minimumSalary=job.minimum_salary, maximumSalary=job.maximum_salary,
            minimumExperience=job.minimum_experience, maximumExperience=job.maximum_experience,
            postStart=job.post_start, postEnd=job.post_end,
        )
    except ValidationError as exc:
        db.rollback()
        raise HTTPException(400, exc.errors()[0]["msg"])

    db.commit()
    db.refresh(job)
    return {"success": True, "message": "Job updated successfully !", "data": job_out(job)}


@router.delete("/deletejob/{job_id}")
def delete_job(job_id: int, client_id: int = Depends(require_client), db: Session = Depends(get_db)):
    job = _owned_job(db, client_id, job_id)
    db.delete(job)
    db.commit()
    return {"success": True, "message": "Job deleted successfully !"}


@router.post("/clients/forget-password")
def forget_password(
    payload: ForgetPasswordIn,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    issuer: TokenIssuer = Depends(get_token_issuer),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """
    Without `otp`: send a reset code to a registered client.
    With `otp`: validate it. Validation does not consume the code and issues no
    session token; it returns a short-lived reset token for update-password.
    """
    email = str(payload.email)

    if payload.otp is None:
        code = generate_otp()
        client = otp_issue(db, model=Client, email=email, code=code)
        dispatcher.send_client_reset_otp(
            email=client.email,
            first_name=client.primary_first_name,
            last_name=client.primary_last_name,
            code=code,
        )
        return {"success": True, "message": "OTP sent successfully to your email !"}

    client = otp_validate(db, model=Client, email=email, otp=payload.otp)
    reset_token = issuer.issue(
        {"purpose": RESET_PURPOSE, "email": client.email},
        ttl=timedelta(minutes=settings.reset_token_exp_minutes),
    )
    return {"success": True, "message": "OTP validated successfully !", "data": {"resetToken": reset_token}}


@router.post("/clients/update-password")
def update_client_password(
    payload: UpdatePasswordIn,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    email = normalize_email(str(payload.email))

    if settings.require_reset_token:
        claims = issuer.verify(payload.resetToken or "")
        if not claims or claims.get("purpose") != RESET_PURPOSE or claims.get("email") != email:
            raise TokenInvalidOrExpired("Please validate the OTP before resetting the password !")

    client = db.query(Client).filter(Client.email == email).first()
    if not client:
        raise IdentityNotFound("Email address not found !")

    client.password_hash = hash_password(payload.newPassword)
    otp_clear(db, client)
    db.commit()
    logger.info("Password reset for client %s", client.id)
    return {"success": True, "message": "Password updated successfully !"}
