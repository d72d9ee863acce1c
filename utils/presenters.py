from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from models import Admin, Candidate, CandidateJob, Client, Job, Recruiter
from utils.s3_storage import S3Storage


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def candidate_out(candidate: Candidate, storage: Optional[S3Storage] = None) -> Dict[str, Any]:
    profile_url = storage.presigned_url(candidate.profile) if storage else None
    picture_url = storage.presigned_url(candidate.profile_picture) if storage else None
    return {
        "id": candidate.id,
        "email": candidate.email,
        "firstName": candidate.first_name or "",
        "lastName": candidate.last_name or "",
        "mobileNumber": candidate.mobile_number or "",
        "address": candidate.address or "",
        "dateOfBirth": _iso(candidate.date_of_birth) or "",
        "gender": candidate.gender or "",
        "category": candidate.category or "",
        "designation": candidate.designation or "",
        "experience": candidate.experience or "",
        "profile": candidate.profile or "",
        "profileUrl": profile_url,
        "profilePicture": candidate.profile_picture or "",
        "profilePictureUrl": picture_url,
        "createdAt": _iso(candidate.created_at),
        "updatedAt": _iso(candidate.updated_at),
    }


def client_out(client: Client) -> Dict[str, Any]:
    return {
        "id": client.id,
        "email": client.email,
        "organizationName": client.organization_name,
        "primaryContact": {
            "firstName": client.primary_first_name,
            "lastName": client.primary_last_name,
        },
        "secondaryContact": {
            "firstName": client.secondary_first_name or "",
            "lastName": client.secondary_last_name or "",
        },
        "status": client.status,
        "emailStatus": client.email_status,
        "mobile": client.mobile or "",
        "mobileStatus": client.mobile_status,
        "location": client.location or "",
        "gstin": client.gstin,
        "panCard": client.pan_card,
        "category": client.category,
        "logo": client.logo or "",
        "createdAt": _iso(client.created_at),
        "updatedAt": _iso(client.updated_at),
    }


def job_out(job: Job) -> Dict[str, Any]:
    client = job.client
    return {
        "id": job.id,
        "clientId": job.client_id,
        "organizationName": client.organization_name if client else job.organization_name,
        "primaryContactFirstName": client.primary_first_name if client else "",
        "primaryContactLastName": client.primary_last_name if client else "",
        "logo": (client.logo if client else None) or "",
        "jobTitle": job.job_title,
        "jobDescription": job.job_description or "",
        "postStart": _iso(job.post_start),
        "postEnd": _iso(job.post_end),
        "noOfPositions": job.no_of_positions,
        "minimumSalary": job.minimum_salary,
        "maximumSalary": job.maximum_salary,
        "jobType": job.job_type,
        "jobLocation": job.job_location or "",
        "minimumExperience": job.minimum_experience,
        "maximumExperience": job.maximum_experience,
        "status": job.status,
        "createdAt": _iso(job.created_at),
        "updatedAt": _iso(job.updated_at),
    }


def candidate_job_out(entry: CandidateJob) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "candidateId": entry.candidate_id,
        "jobId": entry.job_id,
        "isJobSaved": bool(entry.is_job_saved),
        "isJobApplied": bool(entry.is_job_applied),
        "appliedAt": _iso(entry.applied_at),
        "savedAt": _iso(entry.saved_at),
        "job": job_out(entry.job) if entry.job else None,
        "createdAt": _iso(entry.created_at),
        "updatedAt": _iso(entry.updated_at),
    }


def recruiter_out(recruiter: Recruiter) -> Dict[str, Any]:
    return {
        "id": recruiter.id,
        "firstName": recruiter.first_name,
        "lastName": recruiter.last_name,
        "email": recruiter.email,
        "isDeleted": bool(recruiter.is_deleted),
        "createdAt": _iso(recruiter.created_at),
        "updatedAt": _iso(recruiter.updated_at),
    }


def admin_out(admin: Admin) -> Dict[str, Any]:
    return {
        "id": admin.id,
        "username": admin.username,
        "role": admin.role,
        "createdAt": _iso(admin.created_at),
    }
