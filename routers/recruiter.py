from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr
from sqlalchemy.orm import Session

from database import get_db
from models import Candidate, Client, Job, Recruiter
from routers.deps import get_storage, get_token_issuer, require_recruiter
from utils.errors import BadCredentials, IdentityNotFound, JobNotFound
from utils.jwt_service import TokenIssuer
from utils.otp_service import normalize_email
from utils.passwords import check_password
from utils.presenters import candidate_out, client_out, job_out, recruiter_out
from utils.s3_storage import S3Storage


router = APIRouter(prefix="/recruiter", tags=["recruiter"])


class RecruiterLoginIn(BaseModel):
    email: EmailStr
    password: str


@router.post("")
def recruiter_login(
    payload: RecruiterLoginIn,
    db: Session = Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    recruiter = (
        db.query(Recruiter)
        .filter(Recruiter.email == normalize_email(str(payload.email)), Recruiter.is_deleted.is_(False))
        .first()
    )
    if not recruiter:
        raise IdentityNotFound("Recruiter not found !")
    if not check_password(payload.password, recruiter.password_hash):
        raise BadCredentials()
    token = issuer.issue({
        "recruiterId": recruiter.id,
        "firstName": recruiter.first_name,
        "lastName": recruiter.last_name,
        "email": recruiter.email,
        "role": "recruiter",
    })
    return {
        "success": True,
        "message": "Recruiter login successfully !",
        "data": {"token": token, "recruiter": recruiter_out(recruiter)},
    }


@router.get("/jobs")
def get_all_jobs(_recruiter_id: int = Depends(require_recruiter), db: Session = Depends(get_db)):
    jobs = db.query(Job).order_by(Job.created_at.desc(), Job.id.desc()).all()
    return {"success": True, "jobs": [job_out(j) for j in jobs]}


@router.get("/job/{job_id}")
def get_job(job_id: int, _recruiter_id: int = Depends(require_recruiter), db: Session = Depends(get_db)):
    job = db.get(Job, job_id)
    if not job:
        raise JobNotFound()
    return {"success": True, "data": job_out(job)}


@router.get("/clients")
def get_active_clients(_recruiter_id: int = Depends(require_recruiter), db: Session = Depends(get_db)):
    clients = db.query(Client).filter(Client.status == "active").order_by(Client.id).all()
    return {"success": True, "clients": [client_out(c) for c in clients]}


@router.get("/client/{client_id}")
def get_client(client_id: int, _recruiter_id: int = Depends(require_recruiter), db: Session = Depends(get_db)):
    client = db.get(Client, client_id)
    if not client:
        raise IdentityNotFound("Client not found !")
    return {"success": True, "data": client_out(client)}


@router.get("/candidates")
def get_all_candidates(
    _recruiter_id: int = Depends(require_recruiter),
    db: Session = Depends(get_db),
    storage: S3Storage = Depends(get_storage),
):
    candidates = db.query(Candidate).order_by(Candidate.id).all()
    return {"success": True, "candidates": [candidate_out(c, storage) for c in candidates]}


@router.get("/candidate/{candidate_id}")
def get_candidate(
    candidate_id: int,
    _recruiter_id: int = Depends(require_recruiter),
    db: Session = Depends(get_db),
    storage: S3Storage = Depends(get_storage),
):
    candidate = db.get(Candidate, candidate_id)
    if not candidate:
        raise IdentityNotFound("Candidate not found !")
    return {"success": True, "data": candidate_out(candidate, storage)}
