"""
Site Service
Sites with their manager, supervisor and assigned staff
"""
from typing import List, Optional
import logging

from sqlalchemy.orm import Session

from aby_api.core.exceptions import NotFoundError, ConflictError, ValidationError
from aby_api.models.hr import Employee
from aby_api.models.organization import Site
from aby_api.models.stock import StockRequest
from aby_api.schemas.organization import SiteCreate, SiteUpdate

logger = logging.getLogger(__name__)


class SiteService:
    def __init__(self, db: Session):
        self.db = db

    def list_sites(self) -> List[Site]:
        return self.db.query(Site).order_by(Site.name).all()

    def get_site(self, site_id: int) -> Site:
        site = self.db.get(Site, site_id)
        if not site:
            raise NotFoundError("Site not found")
        return site

    def create_site(self, data: SiteCreate) -> Site:
        values = data.model_dump()
        if not values["name"].strip():
            raise ValidationError("Site name is required")
        values["name"] = values["name"].strip()
        self._check_roles(values.get("manager_id"), values.get("supervisor_id"))
        self._check_code(values.get("code"))

        site = Site(**values)
        self.db.add(site)
        self.db.commit()
        self.db.refresh(site)
        logger.info(f"Site created: {site.name}")
        return site

    def update_site(self, site_id: int, data: SiteUpdate) -> Site:
        site = self.get_site(site_id)
        update_data = data.model_dump(exclude_unset=True)

        manager_id = update_data.get("manager_id", site.manager_id)
        supervisor_id = update_data.get("supervisor_id", site.supervisor_id)
        self._check_roles(manager_id, supervisor_id)
        if update_data.get("code"):
            self._check_code(update_data["code"], exclude_id=site_id)

        for field, value in update_data.items():
            setattr(site, field, value)

        # Manager and supervisor are never also listed as site employees
        site.employees = [
            e for e in site.employees if e.id not in (site.manager_id, site.supervisor_id)
        ]
        self.db.commit()
        self.db.refresh(site)
        return site

    def assign_employees(self, site_id: int, employee_ids: List[int]) -> Site:
        """Replace the site's staff list; the manager and supervisor are skipped"""
        site = self.get_site(site_id)
        wanted = [
            emp_id for emp_id in dict.fromkeys(employee_ids)
            if emp_id not in (site.manager_id, site.supervisor_id)
        ]
        employees = self.db.query(Employee).filter(Employee.id.in_(wanted)).all() if wanted else []
        missing = set(wanted) - {e.id for e in employees}
        if missing:
            raise ValidationError(f"Employees not found: {sorted(missing)}")

        site.employees = employees
        self.db.commit()
        self.db.refresh(site)
        logger.info(f"Site {site_id} staffed with {len(employees)} employees")
        return site

    def delete_site(self, site_id: int) -> None:
        site = self.get_site(site_id)
        if self.db.query(StockRequest.id).filter(StockRequest.site_id == site_id).first():
            raise ConflictError("Site has stock requests and cannot be deleted")
        self.db.delete(site)
        self.db.commit()
        logger.info(f"Site {site_id} deleted")

    def _check_roles(self, manager_id: Optional[int], supervisor_id: Optional[int]) -> None:
        if manager_id is not None and manager_id == supervisor_id:
            raise ValidationError("Manager and supervisor must be different employees")
        for emp_id, label in ((manager_id, "Manager"), (supervisor_id, "Supervisor")):
            if emp_id is not None and not self.db.get(Employee, emp_id):
                raise ValidationError(f"{label} not found")

    def _check_code(self, code: Optional[str], exclude_id: Optional[int] = None) -> None:
        if not code:
            return
        query = self.db.query(Site.id).filter(Site.code == code)
        if exclude_id is not None:
            query = query.filter(Site.id != exclude_id)
        if query.first():
            raise ConflictError("A site with this code already exists")
