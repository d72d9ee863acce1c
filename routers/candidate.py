from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pydantic import BaseModel, EmailStr, Field, field_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import Settings
from database import get_db
from models import CATEGORIES, Candidate, CandidateJob, Job, utcnow
from routers.deps import (
    get_app_settings,
    get_dispatcher,
    get_storage,
    get_token_claims,
    get_token_issuer,
    require_candidate,
)
from routers.uploads import read_upload
from utils.errors import IdentityNotFound, JobAlreadyApplied, JobNotFound, JobNotSaved
from utils.jwt_service import TokenIssuer
from utils.notifications import NotificationDispatcher
from utils.otp_service import generate_otp, otp_issue, otp_validate
from utils.presenters import candidate_job_out, candidate_out, job_out
from utils.s3_storage import DOCUMENT_TYPES, IMAGE_TYPES, S3Storage


logger = logging.getLogger(__name__)

router = APIRouter(tags=["candidate"])


class JoinIn(BaseModel):
    email: EmailStr


class ValidateOtpIn(BaseModel):
    email: EmailStr
    otp: str = Field(pattern=r"^\d{5}$")

    @field_validator("otp", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v


class JobIdIn(BaseModel):
    jobId: int


def _get_candidate(db: Session, candidate_id: int) -> Candidate:
    candidate = db.get(Candidate, candidate_id)
    if not candidate:
        raise IdentityNotFound("Candidate not found !")
    return candidate


def _get_job(db: Session, job_id: int) -> Job:
    job = db.get(Job, job_id)
    if not job:
        raise JobNotFound()
    return job


@router.post("/join")
def candidate_join(
    payload: JoinIn,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    code = generate_otp()
    candidate = otp_issue(
        db,
        model=Candidate,
        email=str(payload.email),
        code=code,
        create_missing=True,
    )
    # Delivery happens in the background; the response does not depend on it.
    dispatcher.send_candidate_otp(candidate.email, code)
    return {"success": True, "message": "OTP sent successfully !", "data": {"email": candidate.email}}


@router.post("/validateOTP")
def validate_otp(
    payload: ValidateOtpIn,
    db: Session = Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer),
    storage: S3Storage = Depends(get_storage),
):
    candidate = otp_validate(db, model=Candidate, email=str(payload.email), otp=payload.otp)
    token = issuer.issue({"candidateId": candidate.id, "email": candidate.email, "role": "candidate"})
    return {
        "success": True,
        "message": "OTP Validation successfully !",
        "data": {
            "token": token,
            "candidate": {
                "id": candidate.id,
                "email": candidate.email,
                "profilePictureUrl": storage.presigned_url(candidate.profile_picture),
            },
        },
    }


@router.get("/getcandidateprofile")
def get_candidate_profile(
    candidate_id: int = Depends(require_candidate),
    db: Session = Depends(get_db),
    storage: S3Storage = Depends(get_storage),
):
    candidate = _get_candidate(db, candidate_id)
    return {
        "success": True,
        "message": "Candidate details fetched successfully !",
        "data": candidate_out(candidate, storage),
    }


@router.put("/updatecandidateprofile")
async def update_candidate_profile(
    firstName: Optional[str] = Form(None),
    lastName: Optional[str] = Form(None),
    mobileNumber: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    dateOfBirth: Optional[str] = Form(None),
    gender: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    designation: Optional[str] = Form(None),
    experience: Optional[str] = Form(None),
    profile: Optional[UploadFile] = File(None),
    profilepicture: Optional[UploadFile] = File(None),
    candidate_id: int = Depends(require_candidate),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    storage: S3Storage = Depends(get_storage),
):
    candidate = _get_candidate(db, candidate_id)

    if category is not None and category not in CATEGORIES:
        raise HTTPException(400, "Category must be IT or Non-IT.")
    dob = None
    if dateOfBirth:
        try:
            dob = datetime.fromisoformat(dateOfBirth.strip())
        except ValueError:
            raise HTTPException(400, "Date of birth must be an ISO date (YYYY-MM-DD).")

    resume = await read_upload(profile, allowed=DOCUMENT_TYPES, max_bytes=settings.max_upload_bytes, label="resume")
    picture = await read_upload(
        profilepicture, allowed=IMAGE_TYPES, max_bytes=settings.max_upload_bytes, label="profile picture"
    )

    fields = {
        "first_name": firstName,
        "last_name": lastName,
        "mobile_number": mobileNumber,
        "address": address,
        "gender": gender,
        "category": category,
        "designation": designation,
        "experience": experience,
    }
    for attr, value in fields.items():
        if value is not None:
            setattr(candidate, attr, value.strip())
    if dob is not None:
        candidate.date_of_birth = dob

    if resume:
        data, content_type, filename = resume
        candidate.profile = storage.upload(
            folder="candidates", owner_id=candidate.id, kind="resume",
            filename=filename, data=data, content_type=content_type,
        )
    if picture:
        data, content_type, filename = picture
        candidate.profile_picture = storage.upload(
            folder="candidates", owner_id=candidate.id, kind="profilepicture",
            filename=filename, data=data, content_type=content_type,
        )

    db.add(candidate)
    db.commit()
    db.refresh(candidate)
    return {
        "success": True,
        "message": "Candidate details updated successfully !",
        "data": candidate_out(candidate, storage),
    }


@router.get("/getalljobsbycandidate")
def get_all_jobs_by_candidate(
    _claims: Dict[str, Any] = Depends(get_token_claims),
    db: Session = Depends(get_db),
):
    jobs = db.query(Job).filter(Job.status == "active").order_by(Job.created_at.desc(), Job.id.desc()).all()
    return {"success": True, "message": "Jobs fetched successfully !", "data": [job_out(j) for j in jobs]}


def _association(db: Session, candidate_id: int, job_id: int) -> Optional[CandidateJob]:
    return (
        db.query(CandidateJob)
        .filter(CandidateJob.candidate_id == candidate_id, CandidateJob.job_id == job_id)
        .first()
    )


def _save_association(db: Session, entry: CandidateJob) -> CandidateJob:
    db.add(entry)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(409, "Request already in progress, please retry.")
    db.refresh(entry)
    return entry


@router.post("/applytojob")
def apply_to_job(
    payload: JobIdIn,
    candidate_id: int = Depends(require_candidate),
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    job = _get_job(db, payload.jobId)
    candidate = _get_candidate(db, candidate_id)

    entry = _association(db, candidate.id, job.id)
    if entry and entry.is_job_applied:
        raise JobAlreadyApplied()
    if not entry:
        entry = CandidateJob(candidate_id=candidate.id, job_id=job.id)
    entry.is_job_applied = True
    entry.applied_at = utcnow()
    entry = _save_association(db, entry)

    dispatcher.send_job_applied(email=candidate.email, job_title=job.job_title)
    logger.info("Candidate %s applied to job %s", candidate.id, job.id)
    return {"success": True, "message": "Job applied successfully !", "data": candidate_job_out(entry)}


@router.post("/savejob")
def save_job(
    payload: JobIdIn,
    candidate_id: int = Depends(require_candidate),
    db: Session = Depends(get_db),
):
    job = _get_job(db, payload.jobId)
    candidate = _get_candidate(db, candidate_id)

    entry = _association(db, candidate.id, job.id) or CandidateJob(candidate_id=candidate.id, job_id=job.id)
    entry.is_job_saved = True
    entry.saved_at = utcnow()
    entry = _save_association(db, entry)
    return {"success": True, "message": "Job saved successfully !", "data": candidate_job_out(entry)}


@router.put("/unsavejob")
def unsave_job(
    payload: JobIdIn,
    candidate_id: int = Depends(require_candidate),
    db: Session = Depends(get_db),
):
    entry = _association(db, candidate_id, payload.jobId)
    if not entry or not entry.is_job_saved:
        raise JobNotSaved()
    entry.is_job_saved = False
    entry.saved_at = None
    db.commit()
    db.refresh(entry)
    return {"success": True, "message": "Job unsaved successfully !", "data": candidate_job_out(entry)}


@router.get("/getmyjobs")
def get_my_jobs(
    candidate_id: int = Depends(require_candidate),
    db: Session = Depends(get_db),
):
    entries = (
        db.query(CandidateJob)
        .filter(CandidateJob.candidate_id == candidate_id)
        .order_by(CandidateJob.created_at.desc(), CandidateJob.id.desc())
        .all()
    )
    return {"success": True, "message": "Jobs fetched successfully !", "data": [candidate_job_out(e) for e in entries]}
