"""
API Integration Tests
End-to-end tests through the HTTP layer
"""

from decimal import Decimal
from fastapi.testclient import TestClient

from aby_api.models.asset import AssetRequest
from aby_api.models.hr import Job
from aby_api.schemas.aquaculture import (
    EggToPondMigrationCreate, FeedStockCreate, GrownEggPondCreate, LaboratoryBoxCreate, MedicineCreate,
    ParentEggMigrationCreate, ParentFishPoolCreate
)
from aby_api.schemas.hr import DepartmentCreate
from aby_api.services.aquaculture import (
    FeedService, GrownEggPondService, LaboratoryBoxService, MedicineService, MigrationService,
    ParentPoolService
)
from aby_api.services.hr import DepartmentService

from conftest import EMPLOYEE_PASSWORD


class TestSystemEndpoints:
    """Health and info endpoints need no sign-in"""

    def test_health_check(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "connected"
        assert "websocket_connections" in data

    def test_info(self, client: TestClient):
        response = client.get("/info")

        assert response.status_code == 200
        assert "stock_requisition" in response.json()["business_modules"]


class TestAuthenticationAPI:
    """Test authentication endpoints"""

    def test_protected_route_without_token(self, client: TestClient, api_helper):
        response = client.get("/api/v1/stock-requests/")

        api_helper.assert_error_response(response, 401, "Could not validate credentials")

    def test_admin_login_sets_cookie(self, client: TestClient, test_admin):
        response = client.post(
            "/api/v1/auth/login",
            data={"username": test_admin.email, "password": "adminpassword123"}
        )

        assert response.status_code == 200
        assert response.json()["user"]["kind"] == "admin"
        assert "AccessAdminToken" in response.cookies

        # The cookie alone authenticates
        me = client.get("/api/v1/auth/me")
        assert me.status_code == 200
        assert me.json()["email"] == test_admin.email

    def test_admin_login_wrong_password(self, client: TestClient, test_admin, api_helper):
        response = client.post(
            "/api/v1/auth/login",
            data={"username": test_admin.email, "password": "wrong"}
        )

        api_helper.assert_error_response(response, 401, "Incorrect email or password")

    def test_employee_login_with_phone(self, client: TestClient, test_employee):
        response = client.post(
            "/api/v1/auth/employee/login",
            json={"identifier": test_employee.phone, "password": EMPLOYEE_PASSWORD}
        )

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["role"] == "SITE_ENGINEER"
        assert user["name"] == "Jean Mugisha"
        assert "AccessEmployeeToken" in response.cookies

    def test_me_with_bearer(self, client: TestClient, auth_headers):
        response = client.get("/api/v1/auth/me", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["role"] == "ADMIN"

    def test_invalid_token(self, client: TestClient, api_helper):
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer nonsense"})

        api_helper.assert_error_response(response, 401)


class TestStockRequestAPI:
    """Requisition workflow through the envelope endpoints"""

    def _create(self, client, auth_headers, site, stock, qty=10):
        response = client.post(
            "/api/v1/stock-requests/",
            json={"siteId": site.id, "notes": "Slab works", "items": [{"stockInId": stock.id, "qtyRequested": qty}]},
            headers=auth_headers
        )
        return response

    def test_full_workflow(self, client: TestClient, auth_headers, api_helper, test_site, cement):
        data = api_helper.assert_envelope(
            self._create(client, auth_headers, test_site, cement), 201, "Request created successfully"
        )
        request = data["request"]
        assert request["status"] == "PENDING"
        assert request["ref_no"].startswith("REQ-")
        item_id = request["items"][0]["id"]

        approved = api_helper.assert_envelope(
            client.patch(f"/api/v1/stock-requests/{request['id']}/approve", headers=auth_headers)
        )["request"]
        assert approved["status"] == "APPROVED"

        issued = api_helper.assert_envelope(client.post(
            "/api/v1/stock-requests/issue-materials",
            json={"requestId": request["id"], "items": [{"requestItemId": item_id, "qtyIssued": 10}]},
            headers=auth_headers
        ), message="Materials issued successfully")["request"]
        assert issued["status"] == "ISSUED"

        stock = client.get(f"/api/v1/stock/stockin/{cement.id}", headers=auth_headers).json()
        assert float(stock["quantity"]) == 90

        received = api_helper.assert_envelope(client.post(
            "/api/v1/stock-requests/receive-materials",
            json={"requestId": request["id"], "items": [{"requestItemId": item_id, "qtyReceived": 10}]},
            headers=auth_headers
        ))["request"]
        assert received["status"] == "CLOSED"

    def test_list_requests_paginated(self, client: TestClient, auth_headers, api_helper, test_site, cement):
        for _ in range(3):
            self._create(client, auth_headers, test_site, cement, qty=1)

        data = api_helper.assert_envelope(
            client.get("/api/v1/stock-requests/?page=1&limit=2", headers=auth_headers)
        )

        assert len(data["requests"]) == 2
        assert data["pagination"]["total_items"] == 3
        assert data["pagination"]["total_pages"] == 2

    def test_missing_request(self, client: TestClient, auth_headers, api_helper):
        response = client.get("/api/v1/stock-requests/999", headers=auth_headers)

        api_helper.assert_error_response(response, 404, "Request not found")

    def test_issue_before_approval(self, client: TestClient, auth_headers, api_helper, test_site, cement):
        request = self._create(client, auth_headers, test_site, cement).json()["data"]["request"]

        response = client.post(
            "/api/v1/stock-requests/issue-materials",
            json={"requestId": request["id"], "items": [
                {"requestItemId": request["items"][0]["id"], "qtyIssued": 1}
            ]},
            headers=auth_headers
        )

        api_helper.assert_error_response(response, 400, "must be approved")

    def test_payload_validation(self, client: TestClient, auth_headers):
        response = client.post("/api/v1/stock-requests/", json={"notes": "no site"}, headers=auth_headers)

        assert response.status_code == 422

    def test_delete_pending_request(self, client: TestClient, auth_headers, api_helper, test_site, cement):
        request = self._create(client, auth_headers, test_site, cement).json()["data"]["request"]

        data = api_helper.assert_envelope(
            client.delete(f"/api/v1/stock-requests/{request['id']}", headers=auth_headers)
        )

        assert data == {"id": request["id"]}

    def test_comment_on_request(self, client: TestClient, auth_headers, test_site, cement):
        request = self._create(client, auth_headers, test_site, cement).json()["data"]["request"]

        response = client.post(
            f"/api/v1/stock-requests/{request['id']}/comments",
            json={"description": "Deliver before Friday"},
            headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()[-1]["description"] == "Deliver before Friday"


class TestStockAPI:
    """Categories, stock-ins and movement history"""

    def test_category_crud(self, client: TestClient, auth_headers, api_helper):
        blank = client.post("/api/v1/stock/category", json={"name": "  "}, headers=auth_headers)
        api_helper.assert_error_response(blank, 400, "Category name is required")

        created = client.post("/api/v1/stock/category", json={"name": "Paint"}, headers=auth_headers)
        assert created.status_code == 201
        category_id = created.json()["id"]

        updated = client.put(
            f"/api/v1/stock/category/{category_id}", json={"description": "Interior"}, headers=auth_headers
        )
        assert updated.json()["description"] == "Interior"

        deleted = client.delete(f"/api/v1/stock/category/{category_id}", headers=auth_headers)
        assert deleted.status_code == 200

    def test_create_stock_in_generates_sku(
        self, client: TestClient, auth_headers, test_category, test_store
    ):
        response = client.post("/api/v1/stock/stockin", json={
            "productName": "Iron Bars 12mm",
            "quantity": 40,
            "unit": "piece",
            "unitPrice": 9000,
            "stockCategoryId": test_category.id,
            "storeId": test_store.id,
        }, headers=auth_headers)

        assert response.status_code == 201
        stock = response.json()
        assert stock["sku"]
        assert float(stock["total_value"]) == 360000

        history = client.get(f"/api/v1/stock/history/stock/{stock['id']}", headers=auth_headers).json()
        assert [h["movement_type"] for h in history] == ["IN"]

    def test_history_export(self, client: TestClient, auth_headers, cement):
        response = client.get("/api/v1/stock/history/export", headers=auth_headers)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        assert "stock_history_" in response.headers["content-disposition"]


class TestPublicRecruitmentAPI:
    """Job board and applications are open to the public"""

    def test_public_job_board_and_application(self, client: TestClient, db_session):
        job = Job(title="Quantity Surveyor", status="OPEN")
        db_session.add(job)
        db_session.commit()

        jobs = client.get("/api/v1/jobs/")
        assert jobs.status_code == 200
        assert [j["title"] for j in jobs.json()] == ["Quantity Surveyor"]

        applied = client.post("/api/v1/applicants/", json={
            "jobId": job.id, "name": "Aline Mukamana", "email": "aline@example.com"
        })
        assert applied.status_code == 201
        assert applied.json()["stage"] == "APPLIED"

    def test_listing_applicants_needs_sign_in(self, client: TestClient):
        assert client.get("/api/v1/applicants/").status_code == 401

    def test_apply_to_closed_job(self, client: TestClient, db_session, api_helper):
        job = Job(title="Foreman", status="CLOSED")
        db_session.add(job)
        db_session.commit()

        response = client.post("/api/v1/applicants/", json={
            "jobId": job.id, "name": "Late", "email": "late@example.com"
        })

        api_helper.assert_error_response(response, 400, "Job is closed or expired")


class TestStoresAPI:
    """Paged store listing"""

    def test_store_pages(self, client: TestClient, auth_headers):
        for i in range(3):
            client.post(
                "/api/v1/stores/", json={"name": f"Store {i}", "code": f"S-{i}"}, headers=auth_headers
            )

        response = client.get("/api/v1/stores/?page=2&limit=2", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert len(body["stores"]) == 1
        assert body["pagination"]["current_page"] == 2
        assert body["pagination"]["total_items"] == 3

    def test_delete_store_holding_stock(self, client: TestClient, auth_headers, api_helper, test_store, cement):
        response = client.delete(f"/api/v1/stores/{test_store.id}", headers=auth_headers)

        api_helper.assert_error_response(response, 409, "holds stock items")


class TestRoleChecks:
    """Endpoints limited to approvers or administrators"""

    def _pending_request(self, client, auth_headers, site, stock):
        response = client.post(
            "/api/v1/stock-requests/",
            json={"siteId": site.id, "items": [{"stockInId": stock.id, "qtyRequested": 5}]},
            headers=auth_headers
        )
        assert response.status_code == 201
        return response.json()["data"]["request"]["id"]

    def test_site_engineer_cannot_approve(
        self, client: TestClient, auth_headers, employee_headers, api_helper, test_site, cement
    ):
        request_id = self._pending_request(client, auth_headers, test_site, cement)

        response = client.patch(f"/api/v1/stock-requests/{request_id}/approve", headers=employee_headers)

        api_helper.assert_error_response(response, 403, "Required one of: ADMIN, PADIRI")
        detail = client.get(f"/api/v1/stock-requests/{request_id}", headers=auth_headers)
        assert detail.json()["data"]["request"]["status"] == "PENDING"

    def test_diocesan_site_engineer_cannot_approve(
        self, client: TestClient, db_session, auth_headers, api_helper, test_employee, test_site, cement
    ):
        request_id = self._pending_request(client, auth_headers, test_site, cement)
        test_employee.position = "Diocesan Site Engineer"
        db_session.commit()
        login = client.post(
            "/api/v1/auth/employee/login",
            json={"identifier": test_employee.phone, "password": EMPLOYEE_PASSWORD}
        )
        assert login.json()["user"]["role"] == "DIOCESAN_SITE_ENGINEER"
        client.cookies.clear()

        response = client.patch(
            f"/api/v1/stock-requests/{request_id}/approve",
            headers={"Authorization": f"Bearer {login.json()['access_token']}"}
        )

        api_helper.assert_error_response(response, 403, "Role not allowed")

    def test_admin_approves(self, client: TestClient, auth_headers, api_helper, test_site, cement):
        request_id = self._pending_request(client, auth_headers, test_site, cement)

        response = client.patch(f"/api/v1/stock-requests/{request_id}/approve", headers=auth_headers)

        assert api_helper.assert_envelope(response)["request"]["status"] == "APPROVED"

    def test_employee_cannot_delete_employees(
        self, client: TestClient, employee_headers, api_helper, second_employee
    ):
        response = client.delete(f"/api/v1/employees/{second_employee.id}", headers=employee_headers)

        api_helper.assert_error_response(response, 403, "Role not allowed")

    def test_delete_employee_with_asset_request(
        self, client: TestClient, db_session, auth_headers, api_helper, second_employee
    ):
        db_session.add(AssetRequest(employee_id=second_employee.id, description="Safety boots"))
        db_session.commit()

        response = client.delete(f"/api/v1/employees/{second_employee.id}", headers=auth_headers)

        api_helper.assert_error_response(response, 409, "Employee has asset requests and cannot be deleted")


class TestOpenAPIDocument:
    """Error bodies are documented on the v1 routes"""

    def test_error_responses_documented(self, client: TestClient):
        document = client.get("/openapi.json").json()

        assert "ErrorResponse" in document["components"]["schemas"]
        responses = document["paths"]["/api/v1/stock-requests/{request_id}"]["get"]["responses"]
        for code in ("400", "401", "403", "404", "409"):
            assert responses[code]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")

    def test_system_routes_are_not_affected(self, client: TestClient):
        document = client.get("/openapi.json").json()

        assert "404" not in document["paths"]["/health"]["get"]["responses"]


class TestHatcheryAPI:
    """Laboratory boxes, batches and their records over HTTP"""

    def test_box_crud(self, client: TestClient, auth_headers, api_helper):
        created = client.post(
            "/api/v1/laboratory-boxes/", json={"name": "Box 1", "code": "LB-01"}, headers=auth_headers
        )
        assert created.status_code == 201
        box_id = created.json()["id"]

        duplicate = client.post(
            "/api/v1/laboratory-boxes/", json={"name": "Box 2", "code": "LB-01"}, headers=auth_headers
        )
        api_helper.assert_error_response(duplicate, 409, "name or code already exists")

        renamed = client.put(
            f"/api/v1/laboratory-boxes/{box_id}", json={"description": "Row A"}, headers=auth_headers
        )
        assert renamed.json()["description"] == "Row A"

        deleted = client.delete(f"/api/v1/laboratory-boxes/{box_id}", headers=auth_headers)
        assert deleted.json()["message"] == "Laboratory box deleted successfully"

    def test_pond_medication_is_broadcast(
        self, client: TestClient, db_session, employee_headers, employee_principal
    ):
        pool = ParentPoolService(db_session).create_pool(
            ParentFishPoolCreate(name="Broodstock A", employee_id=employee_principal.id)
        )
        box = LaboratoryBoxService(db_session).create_box(LaboratoryBoxCreate(name="Box 1", code="LB-01"))
        pond = GrownEggPondService(db_session).create_pond(GrownEggPondCreate(name="Nursery", size=Decimal("80")))
        migrations = MigrationService(db_session, employee_principal)
        batch = migrations.create_egg_migration(
            ParentEggMigrationCreate(parent_pool_id=pool.id, laboratory_box_id=box.id)
        )
        pond_batch = migrations.create_pond_migration(
            EggToPondMigrationCreate(parent_egg_migration_id=batch.id, pond_id=pond.id)
        )
        medicine = MedicineService(db_session, employee_principal).create_medicine(MedicineCreate(
            name="Salt", quantity=Decimal("10"), price_per_unit=Decimal("300")
        ))

        with client.websocket_connect("/ws") as ws:
            response = client.post(
                "/api/v1/pond-medications/",
                json={"eggToPondMigrationId": pond_batch.id, "medicineId": medicine.id, "quantity": 2},
                headers=employee_headers
            )
            assert response.status_code == 201

            message = ws.receive_json()

        assert message["event"] == "pondMedicationCreated"
        assert message["data"]["id"] == response.json()["id"]
        assert response.json()["employee_id"] == employee_principal.id

        listed = client.get(
            f"/api/v1/pond-medications/?eggToPondMigrationId={pond_batch.id}", headers=employee_headers
        )
        assert [t["id"] for t in listed.json()] == [response.json()["id"]]

    def test_feeding_without_stock(
        self, client: TestClient, db_session, employee_headers, employee_principal, api_helper
    ):
        pool = ParentPoolService(db_session).create_pool(
            ParentFishPoolCreate(name="Broodstock B", employee_id=employee_principal.id)
        )
        feed = FeedService(db_session).create_feed(FeedStockCreate(name="Pellets", quantity=Decimal("3")))

        response = client.post(
            "/api/v1/parent-fish-feedings/",
            json={"parentPoolId": pool.id, "feedId": feed.id, "quantity": 5},
            headers=employee_headers
        )

        api_helper.assert_error_response(response, 400, "Insufficient feed stock for Pellets")


class TestContractAPI:
    """Contracts are managed by administrators"""

    def _payload(self, employee, department):
        return {
            "employeeId": employee.id,
            "departmentId": department.id,
            "contractType": "FULL_TIME",
            "startDate": "2026-01-01",
            "salary": 450000,
        }

    def test_admin_creates_contract(self, client: TestClient, db_session, auth_headers, test_employee):
        department = DepartmentService(db_session).create_department(DepartmentCreate(name="Engineering"))

        with client.websocket_connect("/ws") as ws:
            response = client.post(
                "/api/v1/contracts/", json=self._payload(test_employee, department), headers=auth_headers
            )
            assert response.status_code == 201
            message = ws.receive_json()

        assert message["event"] == "contractCreated"
        body = response.json()
        assert body["status"] == "ACTIVE"
        assert body["currency"] == "RWF"

        listed = client.get(f"/api/v1/contracts/?employeeId={test_employee.id}&status=ACTIVE", headers=auth_headers)
        assert [c["id"] for c in listed.json()] == [body["id"]]

    def test_employee_cannot_create_contract(
        self, client: TestClient, db_session, employee_headers, api_helper, test_employee
    ):
        department = DepartmentService(db_session).create_department(DepartmentCreate(name="Engineering"))

        response = client.post(
            "/api/v1/contracts/", json=self._payload(test_employee, department), headers=employee_headers
        )

        api_helper.assert_error_response(response, 403, "Required one of: ADMIN")

    def test_end_before_start(self, client: TestClient, db_session, auth_headers, api_helper, test_employee):
        department = DepartmentService(db_session).create_department(DepartmentCreate(name="Engineering"))
        payload = dict(self._payload(test_employee, department), endDate="2025-06-30")

        response = client.post("/api/v1/contracts/", json=payload, headers=auth_headers)

        api_helper.assert_error_response(response, 400, "End date cannot be before the start date")
