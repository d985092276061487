"""
Employee API endpoints
Employees are created and updated with multipart forms carrying their documents
"""

from datetime import date
from typing import Dict, List, Optional
import json
from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from sqlalchemy.orm import Session

from aby_api.api import deps
from aby_api.core.exceptions import ValidationError
from aby_api.core.security import Principal
from aby_api.models.hr import EmployeeStatus
from aby_api.schemas.hr import EmployeeCreate, EmployeeResponse, EmployeeUpdate
from aby_api.services.file_storage import (
    APPLICATION_LETTERS, CV_FILES, PROFILE_IMAGES, FileStorage
)
from aby_api.services.hr import EmployeeService

router = APIRouter()


def _parse_experience(experience: Optional[str]):
    if experience is None or experience == "":
        return None
    try:
        parsed = json.loads(experience)
    except ValueError:
        raise ValidationError("Experience must be a JSON list")
    if not isinstance(parsed, list):
        raise ValidationError("Experience must be a JSON list")
    return parsed


async def _store_documents(
    storage: FileStorage,
    profile_img: Optional[UploadFile],
    cv: Optional[UploadFile],
    application_letter: Optional[UploadFile]
) -> Dict[str, str]:
    """Save uploaded documents; returns column name -> URL"""
    uploads = (
        ("profile_picture", profile_img, PROFILE_IMAGES),
        ("cv", cv, CV_FILES),
        ("application_letter", application_letter, APPLICATION_LETTERS),
    )
    documents = {}
    try:
        for field, upload, folder in uploads:
            if upload is not None and upload.filename:
                documents[field] = await storage.save(upload, folder)
    except Exception:
        for url in documents.values():
            storage.delete(url)
        raise
    return documents


@router.get("/", response_model=List[EmployeeResponse])
def list_employees(
    search: Optional[str] = None,
    employee_status: Optional[EmployeeStatus] = Query(None, alias="status"),
    department_id: Optional[int] = Query(None, alias="departmentId"),
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return EmployeeService(db).list_employees(
        search=search,
        status=employee_status.value if employee_status else None,
        department_id=department_id
    )


@router.post("/", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    first_name: str = Form(..., alias="firstName"),
    last_name: str = Form(..., alias="lastName"),
    phone: str = Form(...),
    email: str = Form(...),
    gender: Optional[str] = Form(None),
    date_of_birth: Optional[date] = Form(None, alias="dateOfBirth"),
    national_id: Optional[str] = Form(None, alias="nationalId"),
    address: Optional[str] = Form(None),
    position: Optional[str] = Form(None),
    department_id: Optional[int] = Form(None, alias="departmentId"),
    marital_status: Optional[str] = Form(None, alias="maritalStatus"),
    date_hired: Optional[date] = Form(None, alias="dateHired"),
    employee_status: Optional[str] = Form(None, alias="status"),
    experience: Optional[str] = Form(None),
    bank_name: Optional[str] = Form(None, alias="bankName"),
    bank_account: Optional[str] = Form(None, alias="bankAccount"),
    profile_img: Optional[UploadFile] = File(None, alias="profileImg"),
    cv: Optional[UploadFile] = File(None),
    application_letter: Optional[UploadFile] = File(None, alias="applicationLetter"),
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Register an employee.

    A temporary password is generated and sent in the welcome email.
    """
    employee_in = deps.validate_form(EmployeeCreate, {
        "first_name": first_name,
        "last_name": last_name,
        "phone": phone,
        "email": email,
        "gender": gender,
        "date_of_birth": date_of_birth,
        "national_id": national_id,
        "address": address,
        "position": position,
        "department_id": department_id,
        "marital_status": marital_status,
        "date_hired": date_hired,
        "status": employee_status,
        "experience": _parse_experience(experience),
        "bank_name": bank_name,
        "bank_account": bank_account,
    })

    storage = FileStorage()
    service = EmployeeService(db, storage=storage)
    documents = await _store_documents(storage, profile_img, cv, application_letter)
    try:
        employee, _ = service.create_employee(employee_in, documents=documents)
    except Exception:
        for url in documents.values():
            storage.delete(url)
        raise
    return employee


@router.get("/{employee_id}", response_model=EmployeeResponse)
def get_employee(
    employee_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return EmployeeService(db).get_employee(employee_id)


@router.put("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: int,
    first_name: Optional[str] = Form(None, alias="firstName"),
    last_name: Optional[str] = Form(None, alias="lastName"),
    phone: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    gender: Optional[str] = Form(None),
    date_of_birth: Optional[date] = Form(None, alias="dateOfBirth"),
    national_id: Optional[str] = Form(None, alias="nationalId"),
    address: Optional[str] = Form(None),
    position: Optional[str] = Form(None),
    department_id: Optional[int] = Form(None, alias="departmentId"),
    marital_status: Optional[str] = Form(None, alias="maritalStatus"),
    date_hired: Optional[date] = Form(None, alias="dateHired"),
    employee_status: Optional[str] = Form(None, alias="status"),
    experience: Optional[str] = Form(None),
    bank_name: Optional[str] = Form(None, alias="bankName"),
    bank_account: Optional[str] = Form(None, alias="bankAccount"),
    profile_img: Optional[UploadFile] = File(None, alias="profileImg"),
    cv: Optional[UploadFile] = File(None),
    application_letter: Optional[UploadFile] = File(None, alias="applicationLetter"),
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Update an employee; uploaded documents replace the stored ones.
    """
    employee_in = deps.validate_form(EmployeeUpdate, {
        "first_name": first_name,
        "last_name": last_name,
        "phone": phone,
        "email": email,
        "gender": gender,
        "date_of_birth": date_of_birth,
        "national_id": national_id,
        "address": address,
        "position": position,
        "department_id": department_id,
        "marital_status": marital_status,
        "date_hired": date_hired,
        "status": employee_status,
        "experience": _parse_experience(experience),
        "bank_name": bank_name,
        "bank_account": bank_account,
    })

    storage = FileStorage()
    service = EmployeeService(db, storage=storage)
    service.get_employee(employee_id)
    documents = await _store_documents(storage, profile_img, cv, application_letter)
    try:
        return service.update_employee(employee_id, employee_in, documents=documents)
    except Exception:
        for url in documents.values():
            storage.delete(url)
        raise


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_employee(
    employee_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.AdminOnly)
):
    EmployeeService(db).delete_employee(employee_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
