"""
Recruitment API endpoints
Job postings (public listing) and applications (public submission)
"""

from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from aby_api.api import deps
from aby_api.core.security import Principal
from aby_api.models.hr import ApplicantStage, JobStatus
from aby_api.realtime import recruitment_gateway
from aby_api.schemas.common import MessageResponse
from aby_api.schemas.hr import (
    ApplicantCreate,
    ApplicantResponse,
    ApplicantUpdate,
    JobCreate,
    JobResponse,
    JobUpdate,
)
from aby_api.services.hr import ApplicantService, JobService

jobs_router = APIRouter()
applicants_router = APIRouter()


# Jobs

@jobs_router.get("/", response_model=List[JobResponse])
def list_jobs(
    job_status: Optional[JobStatus] = Query(None, alias="status"),
    db: Session = Depends(deps.get_db)
):
    """
    Public job board.
    """
    return JobService(db).list_jobs(status=job_status.value if job_status else None)


@jobs_router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: int, db: Session = Depends(deps.get_db)):
    return JobService(db).get_job(job_id)


@jobs_router.post("/", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
def create_job(
    job_in: JobCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    job = JobResponse.model_validate(JobService(db).create_job(job_in))
    background_tasks.add_task(recruitment_gateway.emit, "jobCreated", job)
    return job


@jobs_router.put("/{job_id}", response_model=JobResponse)
def update_job(
    job_id: int,
    job_in: JobUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    job = JobResponse.model_validate(JobService(db).update_job(job_id, job_in))
    background_tasks.add_task(recruitment_gateway.emit, "jobUpdated", job)
    return job


@jobs_router.delete("/{job_id}", response_model=MessageResponse)
def delete_job(
    job_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    JobService(db).delete_job(job_id)
    background_tasks.add_task(recruitment_gateway.emit, "jobDeleted", {"id": job_id})
    return {"message": "Job deleted successfully"}


# Applicants

@applicants_router.post("/", response_model=ApplicantResponse, status_code=status.HTTP_201_CREATED)
def apply(
    applicant_in: ApplicantCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db)
):
    """
    Submit an application for an open job. No sign-in required.
    """
    applicant = ApplicantResponse.model_validate(ApplicantService(db).create_applicant(applicant_in))
    background_tasks.add_task(recruitment_gateway.emit, "applicantCreated", applicant)
    return applicant


@applicants_router.get("/", response_model=List[ApplicantResponse])
def list_applicants(
    job_id: Optional[int] = Query(None, alias="jobId"),
    stage: Optional[ApplicantStage] = None,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return ApplicantService(db).list_applicants(
        job_id=job_id, stage=stage.value if stage else None
    )


@applicants_router.get("/{applicant_id}", response_model=ApplicantResponse)
def get_applicant(
    applicant_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return ApplicantService(db).get_applicant(applicant_id)


@applicants_router.put("/{applicant_id}", response_model=ApplicantResponse)
def update_applicant(
    applicant_id: int,
    applicant_in: ApplicantUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Edit an application or move it along the recruitment stages.
    """
    applicant = ApplicantResponse.model_validate(
        ApplicantService(db).update_applicant(applicant_id, applicant_in)
    )
    background_tasks.add_task(recruitment_gateway.emit, "applicantUpdated", applicant)
    return applicant


@applicants_router.delete("/{applicant_id}", response_model=MessageResponse)
def delete_applicant(
    applicant_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    ApplicantService(db).delete_applicant(applicant_id)
    background_tasks.add_task(recruitment_gateway.emit, "applicantDeleted", {"id": applicant_id})
    return {"message": "Applicant deleted successfully"}
