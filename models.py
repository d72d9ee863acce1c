from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from database import Base


def utcnow() -> datetime:
    # Naive UTC throughout; SQLite drops tzinfo anyway.
    return datetime.now(timezone.utc).replace(tzinfo=None)


CATEGORIES = ("IT", "Non-IT")
CLIENT_STATUSES = ("registered", "active", "inactive")
JOB_TYPES = ("full-time", "part-time", "internship", "freelance", "contract")
JOB_STATUSES = ("active", "closed", "drafted")
ADMIN_ROLES = ("admin", "superadmin")


class Candidate(Base):
    __tablename__ = "candidates"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)

    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    mobile_number = Column(String, nullable=True)
    address = Column(String, nullable=True)
    date_of_birth = Column(DateTime, nullable=True)
    gender = Column(String, nullable=True)
    category = Column(String, nullable=True)  # "IT" | "Non-IT"
    designation = Column(String, nullable=True)
    experience = Column(String, nullable=True)

    # S3 object keys, resolved to presigned URLs on read.
    profile = Column(String, nullable=True)  # resume
    profile_picture = Column(String, nullable=True)

    # Set together on issuance; a new issuance overwrites both.
    otp_code = Column(String(5), nullable=True)
    otp_expires_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)

    organization_name = Column(String, nullable=False, index=True)
    primary_first_name = Column(String, nullable=False)
    primary_last_name = Column(String, nullable=False)
    secondary_first_name = Column(String, nullable=True)
    secondary_last_name = Column(String, nullable=True)

    # registered -> active (by admin) -> inactive
    status = Column(String, default="registered", nullable=False)
    email_status = Column(String, default="notverified", nullable=False)
    mobile = Column(String, nullable=True)
    mobile_status = Column(String, default="notverified", nullable=False)
    location = Column(String, nullable=True)
    gstin = Column(String, nullable=False)
    pan_card = Column(String, nullable=False)
    category = Column(String, nullable=False)
    logo = Column(String, nullable=True)  # public S3 URL

    # Forget-password OTP; cleared together when the password is reset.
    otp_code = Column(String(5), nullable=True)
    otp_expires_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    jobs = relationship("Job", back_populates="client", cascade="all, delete-orphan")


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    organization_name = Column(String, nullable=False)

    job_title = Column(String, nullable=False)
    job_description = Column(Text, nullable=True)
    post_start = Column(DateTime, nullable=True)
    post_end = Column(DateTime, nullable=True)
    no_of_positions = Column(Integer, nullable=True)
    minimum_salary = Column(Integer, nullable=True)
    maximum_salary = Column(Integer, nullable=True)
    job_type = Column(String, nullable=True)
    job_location = Column(String, nullable=True)
    minimum_experience = Column(Integer, nullable=True)
    maximum_experience = Column(Integer, nullable=True)
    status = Column(String, default="drafted", nullable=False)  # active | closed | drafted

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    client = relationship("Client", back_populates="jobs")
    candidate_jobs = relationship("CandidateJob", back_populates="job", cascade="all, delete-orphan")


class CandidateJob(Base):
    __tablename__ = "candidate_jobs"
    __table_args__ = (UniqueConstraint("candidate_id", "job_id", name="uq_candidate_job"),)

    id = Column(Integer, primary_key=True)
    candidate_id = Column(Integer, ForeignKey("candidates.id"), nullable=False, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)

    is_job_saved = Column(Boolean, default=False, nullable=False)
    is_job_applied = Column(Boolean, default=False, nullable=False)
    applied_at = Column(DateTime, nullable=True)
    saved_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    candidate = relationship("Candidate")
    job = relationship("Job", back_populates="candidate_jobs")


class Recruiter(Base):
    __tablename__ = "recruiters"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String, default="admin", nullable=False)  # admin | superadmin

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
