"""
Contract Service
Employment contracts; starting an ACTIVE contract terminates the employee's
other ACTIVE contracts
"""
from decimal import Decimal
from typing import List, Optional
import logging

from sqlalchemy.orm import Session

from aby_api.core.exceptions import NotFoundError, ValidationError
from aby_api.models.hr import Contract, ContractStatus, Department, Employee
from aby_api.schemas.hr import ContractCreate, ContractUpdate

logger = logging.getLogger(__name__)


class ContractService:
    def __init__(self, db: Session):
        self.db = db

    def list_contracts(
        self,
        employee_id: Optional[int] = None,
        status: Optional[str] = None
    ) -> List[Contract]:
        query = self.db.query(Contract)
        if employee_id:
            query = query.filter(Contract.employee_id == employee_id)
        if status:
            query = query.filter(Contract.status == status)
        return query.order_by(Contract.start_date.desc(), Contract.id.desc()).all()

    def get_contract(self, contract_id: int) -> Contract:
        contract = self.db.get(Contract, contract_id)
        if not contract:
            raise NotFoundError(f"Contract with ID {contract_id} not found")
        return contract

    def create_contract(self, data: ContractCreate) -> Contract:
        self._check_employee(data.employee_id)
        self._check_department(data.department_id)
        self._check_terms(data.salary, data.start_date, data.end_date)

        values = data.model_dump()
        values["currency"] = (data.currency or "RWF").upper()
        contract = Contract(**values)

        try:
            if contract.status == ContractStatus.ACTIVE.value:
                self._terminate_active(data.employee_id)
            self.db.add(contract)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(contract)
        logger.info(f"Contract {contract.id} ({contract.contract_type}) created for employee {contract.employee_id}")
        return contract

    def update_contract(self, contract_id: int, data: ContractUpdate) -> Contract:
        contract = self.get_contract(contract_id)
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        if "employee_id" in update_data:
            self._check_employee(update_data["employee_id"])
        if "department_id" in update_data:
            self._check_department(update_data["department_id"])
        self._check_terms(
            update_data.get("salary", contract.salary),
            update_data.get("start_date", contract.start_date),
            update_data.get("end_date", contract.end_date),
        )
        if "currency" in update_data:
            update_data["currency"] = update_data["currency"].upper()

        try:
            if update_data.get("status") == ContractStatus.ACTIVE.value:
                self._terminate_active(update_data.get("employee_id", contract.employee_id), exclude_id=contract_id)
            for field, value in update_data.items():
                setattr(contract, field, value)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(contract)
        return contract

    def delete_contract(self, contract_id: int) -> None:
        contract = self.get_contract(contract_id)
        self.db.delete(contract)
        self.db.commit()
        logger.info(f"Contract {contract_id} deleted")

    def _terminate_active(self, employee_id: int, exclude_id: Optional[int] = None) -> None:
        query = self.db.query(Contract).filter(
            Contract.employee_id == employee_id,
            Contract.status == ContractStatus.ACTIVE.value,
        )
        if exclude_id is not None:
            query = query.filter(Contract.id != exclude_id)
        for contract in query.all():
            contract.status = ContractStatus.TERMINATED.value
            logger.info(f"Contract {contract.id} terminated by a newer active contract")

    def _check_employee(self, employee_id: int) -> None:
        if not self.db.get(Employee, employee_id):
            raise NotFoundError(f"Employee with ID {employee_id} not found")

    def _check_department(self, department_id: int) -> None:
        if not self.db.get(Department, department_id):
            raise NotFoundError(f"Department with ID {department_id} not found")

    @staticmethod
    def _check_terms(salary, start_date, end_date) -> None:
        if Decimal(salary) < 0:
            raise ValidationError("Salary cannot be negative")
        if end_date is not None and end_date < start_date:
            raise ValidationError("End date cannot be before the start date")
