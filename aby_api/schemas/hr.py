"""HR Schemas - departments, employees, contracts, jobs, applicants and clients"""

from pydantic import EmailStr, field_validator
from typing import Optional, List, Any
from datetime import datetime, date
from decimal import Decimal

from aby_api.models.hr import (
    EmployeeStatus, MaritalStatus, JobStatus, ApplicantStage, ClientStatus, ContractType, ContractStatus
)
from .common import InputSchema, ORMSchema


# Department Schemas
class DepartmentCreate(InputSchema):
    name: str
    description: Optional[str] = None


class DepartmentUpdate(InputSchema):
    name: Optional[str] = None
    description: Optional[str] = None


class DepartmentResponse(ORMSchema):
    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None


# Employee Schemas
class EmployeeBase(InputSchema):
    first_name: str
    last_name: str
    gender: Optional[str] = None
    date_of_birth: Optional[date] = None
    phone: str
    email: EmailStr
    national_id: Optional[str] = None
    address: Optional[str] = None
    position: Optional[str] = None
    department_id: Optional[int] = None
    marital_status: MaritalStatus = MaritalStatus.SINGLE
    date_hired: Optional[date] = None
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    experience: Optional[List[Any]] = None
    bank_name: Optional[str] = None
    bank_account: Optional[str] = None

    @field_validator("first_name", "last_name", "phone")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()


class EmployeeCreate(EmployeeBase):
    pass


class EmployeeUpdate(InputSchema):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[date] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    national_id: Optional[str] = None
    address: Optional[str] = None
    position: Optional[str] = None
    department_id: Optional[int] = None
    marital_status: Optional[MaritalStatus] = None
    date_hired: Optional[date] = None
    status: Optional[EmployeeStatus] = None
    experience: Optional[List[Any]] = None
    bank_name: Optional[str] = None
    bank_account: Optional[str] = None


class EmployeeBrief(ORMSchema):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    position: Optional[str] = None


class EmployeeResponse(EmployeeBrief):
    gender: Optional[str] = None
    date_of_birth: Optional[date] = None
    national_id: Optional[str] = None
    address: Optional[str] = None
    department_id: Optional[int] = None
    department: Optional[DepartmentResponse] = None
    marital_status: MaritalStatus
    date_hired: Optional[date] = None
    status: EmployeeStatus
    experience: Optional[List[Any]] = None
    bank_name: Optional[str] = None
    bank_account: Optional[str] = None
    profile_picture: Optional[str] = None
    cv: Optional[str] = None
    application_letter: Optional[str] = None
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Job Schemas
class JobCreate(InputSchema):
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    employment_type: Optional[str] = None
    skills_required: Optional[List[str]] = None
    experience_level: Optional[str] = None
    status: JobStatus = JobStatus.OPEN
    expiry_date: Optional[date] = None


class JobUpdate(InputSchema):
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    employment_type: Optional[str] = None
    skills_required: Optional[List[str]] = None
    experience_level: Optional[str] = None
    status: Optional[JobStatus] = None
    expiry_date: Optional[date] = None


class JobResponse(ORMSchema):
    id: int
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    employment_type: Optional[str] = None
    skills_required: Optional[List[str]] = None
    experience_level: Optional[str] = None
    status: JobStatus
    expiry_date: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Applicant Schemas
class ApplicantCreate(InputSchema):
    job_id: int
    name: str
    email: EmailStr
    phone: Optional[str] = None
    cv_url: Optional[str] = None
    cover_letter: Optional[str] = None
    skills: Optional[List[str]] = None
    education: Optional[List[Any]] = None
    experience_years: Optional[int] = None


class ApplicantUpdate(InputSchema):
    job_id: Optional[int] = None
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    cv_url: Optional[str] = None
    cover_letter: Optional[str] = None
    skills: Optional[List[str]] = None
    education: Optional[List[Any]] = None
    experience_years: Optional[int] = None
    stage: Optional[ApplicantStage] = None


class ApplicantResponse(ORMSchema):
    id: int
    job_id: int
    name: str
    email: str
    phone: Optional[str] = None
    cv_url: Optional[str] = None
    cover_letter: Optional[str] = None
    skills: Optional[List[str]] = None
    education: Optional[List[Any]] = None
    experience_years: Optional[int] = None
    stage: ApplicantStage
    job: Optional[JobResponse] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Client Schemas
class ClientCreate(InputSchema):
    names: str
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None


class ClientUpdate(InputSchema):
    names: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    status: Optional[ClientStatus] = None


class ClientResponse(ORMSchema):
    id: int
    names: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    status: ClientStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Contract Schemas
class ContractCreate(InputSchema):
    employee_id: int
    department_id: int
    contract_type: ContractType
    start_date: date
    end_date: Optional[date] = None
    salary: Decimal
    currency: str = "RWF"
    status: ContractStatus = ContractStatus.ACTIVE


class ContractUpdate(InputSchema):
    employee_id: Optional[int] = None
    department_id: Optional[int] = None
    contract_type: Optional[ContractType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    salary: Optional[Decimal] = None
    currency: Optional[str] = None
    status: Optional[ContractStatus] = None


class ContractResponse(ORMSchema):
    id: int
    employee_id: int
    department_id: int
    contract_type: ContractType
    start_date: date
    end_date: Optional[date] = None
    salary: Decimal
    currency: str
    status: ContractStatus
    employee: Optional[EmployeeBrief] = None
    department: Optional[DepartmentResponse] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
