from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.orm import Session

from database import get_db
from models import Candidate, Job
from routers.deps import get_dispatcher, get_storage, get_token_claims
from utils.errors import IdentityNotFound, JobNotFound
from utils.notifications import NotificationDispatcher
from utils.presenters import candidate_out, job_out
from utils.s3_storage import S3Storage


router = APIRouter(tags=["common"])


class ContactUsIn(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    mobile: Optional[str] = ""
    message: str = Field(min_length=1)


@router.get("/")
def root():
    return {"message": "Successfully server up and running !"}


@router.get("/getalljobs")
def get_all_jobs(db: Session = Depends(get_db)):
    """Public job board: active postings, newest first."""
    jobs = db.query(Job).filter(Job.status == "active").order_by(Job.created_at.desc(), Job.id.desc()).all()
    return {"success": True, "jobs": [job_out(j) for j in jobs]}


@router.get("/getjobdetailsbyid/{job_id}")
def get_job_details(job_id: int, db: Session = Depends(get_db)):
    job = db.get(Job, job_id)
    if not job:
        raise JobNotFound()
    return {"success": True, "data": job_out(job)}


@router.get("/getallcandidates")
def get_all_candidates(
    _claims: Dict[str, Any] = Depends(get_token_claims),
    db: Session = Depends(get_db),
    storage: S3Storage = Depends(get_storage),
):
    candidates = db.query(Candidate).order_by(Candidate.id).all()
    return {"success": True, "candidates": [candidate_out(c, storage) for c in candidates]}


@router.get("/getcandidatedetailsbyid/{candidate_id}")
def get_candidate_details(
    candidate_id: int,
    _claims: Dict[str, Any] = Depends(get_token_claims),
    db: Session = Depends(get_db),
    storage: S3Storage = Depends(get_storage),
):
    candidate = db.get(Candidate, candidate_id)
    if not candidate:
        raise IdentityNotFound("Candidate not found !")
    return {"success": True, "data": candidate_out(candidate, storage)}


@router.post("/contactus")
def contact_us(payload: ContactUsIn, dispatcher: NotificationDispatcher = Depends(get_dispatcher)):
    dispatcher.send_contact_us(
        name=payload.name.strip(),
        email=str(payload.email),
        mobile=(payload.mobile or "").strip(),
        message=payload.message.strip(),
    )
    return {"success": True, "message": "Thank you for contacting us. We will get back to you soon !"}
