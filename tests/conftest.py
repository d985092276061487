"""
Test Configuration and Fixtures
Shared testing infrastructure for the Aby API
"""

import os
import tempfile

# Settings are read at import time; point them at throwaway storage first
_TMP_DIR = tempfile.mkdtemp(prefix="aby-tests-")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["LOG_DIR"] = os.path.join(_TMP_DIR, "logs")
os.environ["LOG_TO_FILE"] = "false"
os.environ.pop("SMTP_HOST", None)

import pytest
from decimal import Decimal
from typing import Any, Dict, Generator
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from aby_api import models  # noqa: F401
from aby_api.main import app
from aby_api.core.database import Base, engine, get_db
from aby_api.core.security import ADMIN, EMPLOYEE, Principal, get_password_hash
from aby_api.models.auth import Admin
from aby_api.models.hr import Employee
from aby_api.models.organization import Site, Store
from aby_api.models.stock import StockCategory, StockIn
from aby_api.services.file_storage import FileStorage

ADMIN_PASSWORD = "adminpassword123"
EMPLOYEE_PASSWORD = "employeepass123"

# Create test session
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test"""
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database dependency override"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def storage(tmp_path) -> FileStorage:
    return FileStorage(base_dir=tmp_path, url_prefix="/uploads")


class RecordingMailer:
    """Stands in for EmailService; keeps what would have been sent"""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    def send_welcome_email(self, employee, password: str) -> bool:
        if self.fail:
            raise RuntimeError("SMTP unavailable")
        self.sent.append((employee.email, password))
        return True


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def failing_mailer() -> RecordingMailer:
    return RecordingMailer(fail=True)


@pytest.fixture
def test_admin(db_session: Session) -> Admin:
    """Create a test administrator"""
    admin = Admin(
        names="Test Admin",
        email="admin@example.com",
        password_hash=get_password_hash(ADMIN_PASSWORD),
        is_active=True,
    )
    db_session.add(admin)
    db_session.commit()
    db_session.refresh(admin)
    return admin


@pytest.fixture
def test_employee(db_session: Session) -> Employee:
    """Create an active site engineer who can sign in"""
    employee = Employee(
        first_name="Jean",
        last_name="Mugisha",
        phone="0788000001",
        email="jean@example.com",
        position="Site Engineer",
        password_hash=get_password_hash(EMPLOYEE_PASSWORD),
    )
    db_session.add(employee)
    db_session.commit()
    db_session.refresh(employee)
    return employee


@pytest.fixture
def second_employee(db_session: Session) -> Employee:
    employee = Employee(
        first_name="Alice",
        last_name="Uwase",
        phone="0788000002",
        email="alice@example.com",
        position="Store Keeper",
    )
    db_session.add(employee)
    db_session.commit()
    db_session.refresh(employee)
    return employee


@pytest.fixture
def admin_principal(test_admin: Admin) -> Principal:
    return Principal(kind=ADMIN, id=test_admin.id, role="ADMIN", name=test_admin.names)


@pytest.fixture
def employee_principal(test_employee: Employee) -> Principal:
    return Principal(
        kind=EMPLOYEE, id=test_employee.id, role="SITE_ENGINEER", name=test_employee.full_name
    )


@pytest.fixture
def auth_headers(client: TestClient, test_admin: Admin) -> Dict[str, str]:
    """Get authentication headers for the test administrator"""
    login_data = {
        "username": test_admin.email,
        "password": ADMIN_PASSWORD
    }

    response = client.post("/api/v1/auth/login", data=login_data)
    assert response.status_code == 200

    # Login also sets a cookie; tests authenticate explicitly through the header
    client.cookies.clear()
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def employee_headers(client: TestClient, test_employee: Employee) -> Dict[str, str]:
    """Bearer header for the test site engineer"""
    response = client.post(
        "/api/v1/auth/employee/login",
        json={"identifier": test_employee.email, "password": EMPLOYEE_PASSWORD}
    )
    assert response.status_code == 200

    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def test_site(db_session: Session, test_employee: Employee) -> Site:
    site = Site(name="Kigali Heights", code="KGL-01", location="Kigali", manager_id=test_employee.id)
    db_session.add(site)
    db_session.commit()
    db_session.refresh(site)
    return site


@pytest.fixture
def test_store(db_session: Session) -> Store:
    store = Store(name="Main Store", code="ST-01", location="Remera")
    db_session.add(store)
    db_session.commit()
    db_session.refresh(store)
    return store


@pytest.fixture
def test_category(db_session: Session) -> StockCategory:
    category = StockCategory(name="Building Materials", description="Cement, sand, bricks")
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def cement(db_session: Session, test_category: StockCategory, test_store: Store) -> StockIn:
    """100 bags of cement in the main store"""
    stock = StockIn(
        product_name="Portland Cement",
        sku="CEM-001",
        quantity=Decimal("100"),
        unit="bag",
        unit_price=Decimal("12500"),
        reorder_level=Decimal("20"),
        stock_category_id=test_category.id,
        store_id=test_store.id,
    )
    db_session.add(stock)
    db_session.commit()
    db_session.refresh(stock)
    return stock


@pytest.fixture
def sand(db_session: Session, test_category: StockCategory, test_store: Store) -> StockIn:
    stock = StockIn(
        product_name="River Sand",
        sku="SND-001",
        quantity=Decimal("10"),
        unit="ton",
        unit_price=Decimal("30000"),
        reorder_level=Decimal("15"),
        stock_category_id=test_category.id,
        store_id=test_store.id,
    )
    db_session.add(stock)
    db_session.commit()
    db_session.refresh(stock)
    return stock


@pytest.fixture
def sample_employee_data() -> Dict[str, Any]:
    """Sample employee form data for testing"""
    return {
        "first_name": "Eric",
        "last_name": "Habimana",
        "phone": "0788123456",
        "email": "Eric.Habimana@Example.com",
        "gender": "MALE",
        "national_id": "1199080012345678",
        "position": "Site Engineer",
        "marital_status": "SINGLE",
        "status": "ACTIVE",
    }


# API test helpers
class APITestHelper:
    """Helper class for API testing"""

    @staticmethod
    def assert_error_response(response, expected_status: int, expected_detail: str = None):
        """Assert error response format"""
        assert response.status_code == expected_status
        data = response.json()
        assert "detail" in data
        if expected_detail:
            assert expected_detail in data["detail"]

    @staticmethod
    def assert_envelope(response, expected_status: int = 200, message: str = None) -> Dict[str, Any]:
        """Assert a ``{success, data, message}`` body and return its data"""
        assert response.status_code == expected_status
        body = response.json()
        assert body["success"] is True
        if message:
            assert body["message"] == message
        return body["data"]


@pytest.fixture
def api_helper() -> APITestHelper:
    return APITestHelper()
