"""HR API endpoints"""

from . import employees, departments, contracts, recruitment, clients

__all__ = ["employees", "departments", "contracts", "recruitment", "clients"]
