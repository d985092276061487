"""HR Services - employees, contracts, departments, recruitment and clients"""

from .employee_service import EmployeeService
from .contract_service import ContractService
from .department_service import DepartmentService
from .recruitment_service import JobService, ApplicantService, job_accepts_applications
from .client_service import ClientService

__all__ = [
    "EmployeeService",
    "ContractService",
    "DepartmentService",
    "JobService",
    "ApplicantService",
    "ClientService",
    "job_accepts_applications",
]
