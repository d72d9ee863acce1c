from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, EmailStr, Field, field_validator
from sqlalchemy.orm import Session

from database import get_db
from models import ADMIN_ROLES, CATEGORIES, CLIENT_STATUSES, Admin, Candidate, Client, Job, Recruiter
from routers.deps import get_storage, get_token_issuer, require_admin
from utils.errors import AlreadyExists, BadCredentials, IdentityNotFound
from utils.jwt_service import TokenIssuer
from utils.otp_service import normalize_email
from utils.passwords import check_password, check_strength, hash_password
from utils.presenters import admin_out, candidate_out, client_out, job_out, recruiter_out
from utils.s3_storage import S3Storage


logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin"])


class AdminLoginIn(BaseModel):
    username: str
    password: str


class CreateAdminIn(BaseModel):
    username: str = Field(min_length=3)
    password: str
    role: str = "admin"

    @field_validator("role")
    @classmethod
    def _role(cls, v: str) -> str:
        if v not in ADMIN_ROLES:
            raise ValueError("role must be admin or superadmin")
        return v

    @field_validator("password")
    @classmethod
    def _strong(cls, v: str) -> str:
        return check_strength(v)


class CreateRecruiterIn(BaseModel):
    firstName: str = Field(min_length=1)
    lastName: str = Field(min_length=1)
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def _strong(cls, v: str) -> str:
        return check_strength(v)


class UpdateClientByAdminIn(BaseModel):
    clientId: int
    organizationName: Optional[str] = None
    primaryContactFirstName: Optional[str] = None
    primaryContactLastName: Optional[str] = None
    secondaryContactFirstName: Optional[str] = None
    secondaryContactLastName: Optional[str] = None
    status: Optional[str] = None
    emailStatus: Optional[str] = None
    mobile: Optional[str] = None
    mobileStatus: Optional[str] = None
    location: Optional[str] = None
    gstin: Optional[str] = None
    panCard: Optional[str] = None
    category: Optional[str] = None
    password: Optional[str] = None

    @field_validator("status")
    @classmethod
    def _status(cls, v):
        if v is not None and v not in CLIENT_STATUSES:
            raise ValueError(f"status must be one of {', '.join(CLIENT_STATUSES)}")
        return v

    @field_validator("emailStatus", "mobileStatus")
    @classmethod
    def _verification(cls, v):
        if v is not None and v not in ("verified", "notverified"):
            raise ValueError("must be verified or notverified")
        return v

    @field_validator("category")
    @classmethod
    def _category(cls, v):
        if v is not None and v not in CATEGORIES:
            raise ValueError("category must be IT or Non-IT")
        return v

    @field_validator("password")
    @classmethod
    def _strong(cls, v):
        return check_strength(v) if v is not None else v


# No email: it is the login key and is not editable here.
CLIENT_COLUMNS = {
    "organizationName": "organization_name",
    "primaryContactFirstName": "primary_first_name",
    "primaryContactLastName": "primary_last_name",
    "secondaryContactFirstName": "secondary_first_name",
    "secondaryContactLastName": "secondary_last_name",
    "status": "status",
    "emailStatus": "email_status",
    "mobile": "mobile",
    "mobileStatus": "mobile_status",
    "location": "location",
    "gstin": "gstin",
    "panCard": "pan_card",
    "category": "category",
}


@router.post("/admin")
def admin_login(
    payload: AdminLoginIn,
    db: Session = Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    admin = db.query(Admin).filter(Admin.username == payload.username.strip().lower()).first()
    if not admin:
        raise IdentityNotFound("Admin not found !")
    if not check_password(payload.password, admin.password_hash):
        raise BadCredentials()
    token = issuer.issue({"adminId": admin.id, "username": admin.username, "role": admin.role})
    return {
        "success": True,
        "message": "Logged in Successfully !",
        "username": admin.username,
        "role": admin.role,
        "token": token,
    }


@router.post("/createadmin", status_code=201)
def create_admin(
    payload: CreateAdminIn,
    claims: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db),
):
    if claims["role"] != "superadmin":
        raise HTTPException(403, "Only a superadmin can create admins !")
    username = payload.username.strip().lower()
    if db.query(Admin).filter(Admin.username == username).first():
        raise AlreadyExists("Admin already exists !")
    admin = Admin(username=username, password_hash=hash_password(payload.password), role=payload.role)
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info("Admin %s created admin %s (%s)", claims["adminId"], admin.username, admin.role)
    return {"success": True, "message": "Admin created successfully !", "data": admin_out(admin)}


@router.get("/getallclients")
def get_all_clients(_claims: Dict[str, Any] = Depends(require_admin), db: Session = Depends(get_db)):
    clients = db.query(Client).order_by(Client.created_at.desc(), Client.id.desc()).all()
    return {"success": True, "clients": [client_out(c) for c in clients]}


@router.get("/getclientdetailsbyadmin/{client_id}")
def get_client_details_by_admin(
    client_id: int,
    _claims: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db),
):
    client = db.get(Client, client_id)
    if not client:
        raise IdentityNotFound("Client not found !")
    return {"success": True, "message": "Client details fetched successfully !", "data": client_out(client)}


@router.put("/updateclientbyadmin")
def update_client_by_admin(
    payload: UpdateClientByAdminIn,
    claims: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db),
):
    client = db.get(Client, payload.clientId)
    if not client:
        raise IdentityNotFound("Client not found !")

    changes = payload.model_dump(exclude_unset=True, exclude={"clientId", "password"})
    for key, value in changes.items():
        if value is None:
            continue
        if key in ("gstin", "panCard"):
            value = value.strip().upper()
        setattr(client, CLIENT_COLUMNS[key], value)
    if payload.password:
        client.password_hash = hash_password(payload.password)

    db.commit()
    db.refresh(client)
    logger.info("Admin %s updated client %s (status=%s)", claims["adminId"], client.id, client.status)
    return {"success": True, "message": "Client updated successfully !", "data": client_out(client)}


@router.get("/getcandidatedetailsbyadmin/{candidate_id}")
def get_candidate_details_by_admin(
    candidate_id: int,
    _claims: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db),
    storage: S3Storage = Depends(get_storage),
):
    candidate = db.get(Candidate, candidate_id)
    if not candidate:
        raise IdentityNotFound("Candidate not found !")
    return {"success": True, "message": "Candidate details fetched successfully !", "data": candidate_out(candidate, storage)}


@router.post("/createrecruiter", status_code=201)
def create_recruiter(
    payload: CreateRecruiterIn,
    _claims: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db),
):
    email = normalize_email(str(payload.email))
    if db.query(Recruiter).filter(Recruiter.email == email).first():
        raise AlreadyExists("Recruiter already exists !")
    recruiter = Recruiter(
        first_name=payload.firstName.strip(),
        last_name=payload.lastName.strip(),
        email=email,
        password_hash=hash_password(payload.password),
    )
    db.add(recruiter)
    db.commit()
    db.refresh(recruiter)
    return {"success": True, "message": "Recruiter created successfully !", "data": recruiter_out(recruiter)}


@router.get("/getallrecruiters")
def get_all_recruiters(_claims: Dict[str, Any] = Depends(require_admin), db: Session = Depends(get_db)):
    recruiters = db.query(Recruiter).filter(Recruiter.is_deleted.is_(False)).order_by(Recruiter.id).all()
    return {"success": True, "recruiters": [recruiter_out(r) for r in recruiters]}


@router.delete("/deleterecruiter/{recruiter_id}")
def delete_recruiter(
    recruiter_id: int,
    _claims: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db),
):
    recruiter = db.get(Recruiter, recruiter_id)
    if not recruiter or recruiter.is_deleted:
        raise IdentityNotFound("Recruiter not found !")
    # Soft delete: the row and its email stay reserved.
    recruiter.is_deleted = True
    db.commit()
    return {"success": True, "message": "Recruiter deleted successfully !"}


@router.get("/getalljobsbyadmin")
def get_all_jobs_by_admin(_claims: Dict[str, Any] = Depends(require_admin), db: Session = Depends(get_db)):
    jobs = db.query(Job).order_by(Job.created_at.desc(), Job.id.desc()).all()
    return {"success": True, "message": "Jobs fetched successfully !", "data": [job_out(j) for j in jobs]}
