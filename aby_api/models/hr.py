"""
HR Models
Departments, employees, contracts, recruitment (jobs / applicants) and clients
"""
import enum

from sqlalchemy import Column, String, Integer, Numeric, Text, Date, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from aby_api.core.database import Base, TimestampMixin


class EmployeeStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ON_LEAVE = "ON_LEAVE"
    TERMINATED = "TERMINATED"


class MaritalStatus(str, enum.Enum):
    SINGLE = "SINGLE"
    MARRIED = "MARRIED"
    DIVORCED = "DIVORCED"
    WIDOWED = "WIDOWED"


class JobStatus(str, enum.Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class ApplicantStage(str, enum.Enum):
    APPLIED = "APPLIED"
    SHORTLISTED = "SHORTLISTED"
    INTERVIEWED = "INTERVIEWED"
    OFFERED = "OFFERED"
    HIRED = "HIRED"
    REJECTED = "REJECTED"


class ClientStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class ContractType(str, enum.Enum):
    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    TEMPORARY = "TEMPORARY"
    INTERNSHIP = "INTERNSHIP"


class ContractStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    TERMINATED = "TERMINATED"


class Department(TimestampMixin, Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), unique=True, nullable=False)
    description = Column(Text)

    employees = relationship("Employee", back_populates="department")


class Employee(TimestampMixin, Base):
    """Staff member; also the login identity for site engineers and store keepers"""
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(80), nullable=False)
    last_name = Column(String(80), nullable=False)
    gender = Column(String(20))
    date_of_birth = Column(Date)
    phone = Column(String(30), unique=True, nullable=False, index=True)
    email = Column(String(120), unique=True, nullable=False, index=True)
    national_id = Column(String(40), unique=True)
    address = Column(String(200))
    position = Column(String(80))
    department_id = Column(Integer, ForeignKey("departments.id", ondelete="SET NULL"))
    marital_status = Column(String(20), default=MaritalStatus.SINGLE.value, nullable=False)
    date_hired = Column(Date)
    status = Column(String(20), default=EmployeeStatus.ACTIVE.value, nullable=False)
    experience = Column(JSON)
    bank_name = Column(String(80))
    bank_account = Column(String(40))
    profile_picture = Column(String(255))
    cv = Column(String(255))
    application_letter = Column(String(255))
    password_hash = Column(String(255))
    last_login = Column(DateTime(timezone=True))

    department = relationship("Department", back_populates="employees")
    contracts = relationship(
        "Contract", back_populates="employee", order_by="Contract.start_date.desc()"
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<Employee(id={self.id}, email='{self.email}')>"


class Contract(TimestampMixin, Base):
    """Employment contract; an employee holds at most one ACTIVE contract"""
    __tablename__ = "contracts"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=False)
    contract_type = Column(String(20), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date)
    salary = Column(Numeric(14, 2), nullable=False)
    currency = Column(String(3), default="RWF", nullable=False)
    status = Column(String(20), default=ContractStatus.ACTIVE.value, nullable=False)

    employee = relationship("Employee", back_populates="contracts")
    department = relationship("Department")


class Job(TimestampMixin, Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(150), nullable=False)
    description = Column(Text)
    location = Column(String(150))
    employment_type = Column(String(40))
    skills_required = Column(JSON)
    experience_level = Column(String(40))
    status = Column(String(20), default=JobStatus.OPEN.value, nullable=False)
    expiry_date = Column(Date)

    applicants = relationship("Applicant", back_populates="job", cascade="all, delete-orphan")


class Applicant(TimestampMixin, Base):
    __tablename__ = "applicants"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(150), nullable=False)
    email = Column(String(120), nullable=False)
    phone = Column(String(30))
    cv_url = Column(String(255))
    cover_letter = Column(Text)
    skills = Column(JSON)
    education = Column(JSON)
    experience_years = Column(Integer)
    stage = Column(String(20), default=ApplicantStage.APPLIED.value, nullable=False)

    job = relationship("Job", back_populates="applicants")


class Client(TimestampMixin, Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    names = Column(String(150), nullable=False)
    email = Column(String(120))
    phone = Column(String(30))
    address = Column(String(200))
    description = Column(Text)
    status = Column(String(20), default=ClientStatus.ACTIVE.value, nullable=False)
