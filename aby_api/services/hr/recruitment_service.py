"""
Recruitment Service
Job postings and the applicants who respond to them
"""
from datetime import date
from typing import List, Optional
import logging

from sqlalchemy.orm import Session

from aby_api.core.exceptions import NotFoundError, ValidationError, BusinessLogicError
from aby_api.models.hr import Applicant, ApplicantStage, Job, JobStatus
from aby_api.schemas.hr import ApplicantCreate, ApplicantUpdate, JobCreate, JobUpdate

logger = logging.getLogger(__name__)


def job_accepts_applications(job: Job, today: Optional[date] = None) -> bool:
    """An OPEN job whose expiry date, if any, has not passed"""
    today = today or date.today()
    if job.status != JobStatus.OPEN.value:
        return False
    return job.expiry_date is None or job.expiry_date >= today


class JobService:
    def __init__(self, db: Session):
        self.db = db

    def list_jobs(self, status: Optional[str] = None) -> List[Job]:
        query = self.db.query(Job)
        if status:
            query = query.filter(Job.status == status)
        return query.order_by(Job.created_at.desc(), Job.id.desc()).all()

    def get_job(self, job_id: int) -> Job:
        job = self.db.get(Job, job_id)
        if not job:
            raise NotFoundError("Job not found")
        return job

    def create_job(self, data: JobCreate) -> Job:
        if not data.title.strip():
            raise ValidationError("Job title is required")
        job = Job(**data.model_dump())
        job.title = job.title.strip()
        self.db.add(job)
        self.db.commit()
        self.db.refresh(job)
        logger.info(f"Job posted: {job.title}")
        return job

    def update_job(self, job_id: int, data: JobUpdate) -> Job:
        job = self.get_job(job_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(job, field, value)
        self.db.commit()
        self.db.refresh(job)
        return job

    def delete_job(self, job_id: int) -> None:
        job = self.get_job(job_id)
        self.db.delete(job)
        self.db.commit()
        logger.info(f"Job {job_id} deleted with its applications")


class ApplicantService:
    def __init__(self, db: Session):
        self.db = db

    def list_applicants(self, job_id: Optional[int] = None, stage: Optional[str] = None) -> List[Applicant]:
        query = self.db.query(Applicant)
        if job_id:
            query = query.filter(Applicant.job_id == job_id)
        if stage:
            query = query.filter(Applicant.stage == stage)
        return query.order_by(Applicant.created_at.desc(), Applicant.id.desc()).all()

    def get_applicant(self, applicant_id: int) -> Applicant:
        applicant = self.db.get(Applicant, applicant_id)
        if not applicant:
            raise NotFoundError("Applicant not found")
        return applicant

    def create_applicant(self, data: ApplicantCreate) -> Applicant:
        self._open_job(data.job_id)

        applicant = Applicant(**data.model_dump(), stage=ApplicantStage.APPLIED.value)
        applicant.email = applicant.email.lower()
        self.db.add(applicant)
        self.db.commit()
        self.db.refresh(applicant)
        logger.info(f"Application {applicant.id} received for job {applicant.job_id}")
        return applicant

    def update_applicant(self, applicant_id: int, data: ApplicantUpdate) -> Applicant:
        applicant = self.get_applicant(applicant_id)
        update_data = data.model_dump(exclude_unset=True)

        new_job_id = update_data.get("job_id")
        if new_job_id is not None and new_job_id != applicant.job_id:
            self._open_job(new_job_id)
        elif "job_id" in update_data and new_job_id is None:
            update_data.pop("job_id")

        previous_stage = applicant.stage
        for field, value in update_data.items():
            setattr(applicant, field, value)
        self.db.commit()
        self.db.refresh(applicant)

        if applicant.stage != previous_stage:
            logger.info(f"Applicant {applicant_id} moved {previous_stage} -> {applicant.stage}")
        return applicant

    def delete_applicant(self, applicant_id: int) -> None:
        applicant = self.get_applicant(applicant_id)
        self.db.delete(applicant)
        self.db.commit()

    def _open_job(self, job_id: int) -> Job:
        job = self.db.get(Job, job_id)
        if not job:
            raise NotFoundError("Job does not exist")
        if not job_accepts_applications(job):
            raise BusinessLogicError("Job is closed or expired")
        return job
