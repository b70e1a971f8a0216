"""API endpoint integration tests.

Tests the FastAPI endpoints for employees, departments, payroll records
and reports.
"""

from decimal import Decimal

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from payroll_records.models import PayrollRecord

pytestmark = pytest.mark.asyncio


async def create_record(client: AsyncClient, seeded, **overrides) -> dict:
    body = {
        "employee_id": seeded.employee_id,
        "pay_period_start": "2024-01-01",
        "pay_period_end": "2024-01-31",
        "overtime_hours": "10",
    }
    body.update(overrides)
    response = await client.post(
        "/api/v1/payroll-records",
        headers={"X-User-ID": str(seeded.admin_id)},
        json=body,
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestHealthEndpoints:
    """Test health check endpoints."""

    async def test_health_check(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"

    async def test_readiness_check(self, client: AsyncClient):
        response = await client.get("/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    async def test_liveness_check(self, client: AsyncClient):
        response = await client.get("/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"


class TestEmployeeEndpoints:
    async def test_create_employee(self, client: AsyncClient, seeded):
        response = await client.post(
            "/api/v1/employees",
            json={
                "employee_code": "EMP010",
                "first_name": "Lena",
                "last_name": "Park",
                "email": "lena.park@example.com",
                "hire_date": "2024-01-08",
                "base_salary": "4200.00",
                "department_id": seeded.it_department_id,
            },
        )

        assert response.status_code == 201, response.text
        data = response.json()
        assert data["employment_status"] == "ACTIVE"
        assert data["full_name"] == "Lena Park"

    async def test_duplicate_code_is_409(self, client: AsyncClient, seeded):
        response = await client.post(
            "/api/v1/employees",
            json={
                "employee_code": "EMP001",
                "first_name": "Other",
                "last_name": "Person",
                "email": "other.person@example.com",
                "hire_date": "2024-01-08",
                "base_salary": "1000",
            },
        )

        assert response.status_code == 409
        assert response.json()["code"] == "CONFLICT"

    async def test_invalid_email_is_422(self, client: AsyncClient, seeded):
        response = await client.post(
            "/api/v1/employees",
            json={
                "employee_code": "EMP011",
                "first_name": "Bad",
                "last_name": "Email",
                "email": "not-an-email",
                "hire_date": "2024-01-08",
                "base_salary": "1000",
            },
        )

        assert response.status_code == 422
        data = response.json()
        assert data["code"] == "VALIDATION_ERROR"
        assert data["field"] == "email"

    async def test_list_and_search(self, client: AsyncClient, seeded):
        response = await client.get("/api/v1/employees", params={"status": "ACTIVE"})
        assert response.status_code == 200
        assert response.json()["total"] == 2

        response = await client.get("/api/v1/employees", params={"q": "doe"})
        assert [e["employee_code"] for e in response.json()["items"]] == ["EMP002"]

    async def test_hr_user_cannot_change_salary(self, client: AsyncClient, seeded):
        response = await client.patch(
            f"/api/v1/employees/{seeded.employee_id}",
            headers={"X-User-ID": str(seeded.hr_id)},
            json={"base_salary": "9000"},
        )

        assert response.status_code == 403
        assert response.json()["code"] == "PERMISSION_DENIED"

    async def test_admin_changes_salary(self, client: AsyncClient, seeded):
        response = await client.patch(
            f"/api/v1/employees/{seeded.employee_id}",
            headers={"X-User-ID": str(seeded.admin_id)},
            json={"base_salary": "3500.00"},
        )

        assert response.status_code == 200, response.text
        assert Decimal(response.json()["base_salary"]) == Decimal("3500")

    async def test_unknown_acting_user(self, client: AsyncClient, seeded):
        response = await client.patch(
            f"/api/v1/employees/{seeded.employee_id}",
            headers={"X-User-ID": "999"},
            json={"position": "Lead"},
        )

        assert response.status_code == 400

    async def test_terminate(self, client: AsyncClient, seeded):
        response = await client.delete(f"/api/v1/employees/{seeded.second_employee_id}")
        assert response.status_code == 200
        assert response.json()["employment_status"] == "TERMINATED"

        response = await client.get(f"/api/v1/employees/{seeded.second_employee_id}")
        assert response.status_code == 200

    async def test_get_missing_employee(self, client: AsyncClient, seeded):
        response = await client.get("/api/v1/employees/999")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"


class TestDepartmentEndpoints:
    async def test_create_and_deactivate(self, client: AsyncClient, seeded):
        response = await client.post(
            "/api/v1/departments",
            json={"department_code": "FIN", "department_name": "Finance", "budget": "50000"},
        )
        assert response.status_code == 201, response.text
        department_id = response.json()["department_id"]

        response = await client.delete(f"/api/v1/departments/{department_id}")
        assert response.status_code == 200
        assert response.json()["is_active"] is False

        response = await client.get("/api/v1/departments")
        codes = [d["department_code"] for d in response.json()["items"]]
        assert "FIN" not in codes

    async def test_clear_budget(self, client: AsyncClient, seeded):
        response = await client.patch(
            f"/api/v1/departments/{seeded.it_department_id}",
            json={"budget": None},
        )

        assert response.status_code == 200, response.text
        assert response.json()["budget"] is None

    async def test_employee_count(self, client: AsyncClient, seeded):
        response = await client.get(
            f"/api/v1/departments/{seeded.it_department_id}/employee-count"
        )

        assert response.status_code == 200
        assert response.json()["employee_count"] == 2


class TestPayrollEndpoints:
    async def test_create_record(self, client: AsyncClient, seeded):
        data = await create_record(client, seeded)

        assert data["payment_status"] == "PENDING"
        assert data["base_salary"] == "3200.00"
        assert data["overtime_pay"] == "300.00"
        assert data["gross_salary"] == "3500.00"
        assert data["net_salary"] == "3500.00"
        assert data["created_by"] == seeded.admin_id
        assert data["employee_code"] == "EMP001"

    async def test_overlapping_period_is_409(self, client: AsyncClient, seeded):
        await create_record(client, seeded)

        response = await client.post(
            "/api/v1/payroll-records",
            json={
                "employee_id": seeded.employee_id,
                "pay_period_start": "2024-01-31",
                "pay_period_end": "2024-02-15",
            },
        )

        assert response.status_code == 409
        assert response.json()["code"] == "CONFLICT"

    async def test_adjacent_period_is_allowed(self, client: AsyncClient, seeded):
        await create_record(client, seeded)

        await create_record(
            client, seeded, pay_period_start="2024-02-01", pay_period_end="2024-02-28"
        )

    async def test_update_pending_record(self, client: AsyncClient, seeded):
        record = await create_record(client, seeded)

        response = await client.patch(
            f"/api/v1/payroll-records/{record['payroll_id']}",
            json={"tax_deduction": "500"},
        )

        assert response.status_code == 200, response.text
        assert response.json()["net_salary"] == "3000.00"

    async def test_pay_then_cancel_is_409(self, client: AsyncClient, seeded):
        record = await create_record(client, seeded)
        payroll_id = record["payroll_id"]

        response = await client.post(
            f"/api/v1/payroll-records/{payroll_id}/pay",
            json={"payment_date": "2024-02-01"},
        )
        assert response.status_code == 200, response.text
        assert response.json()["payment_status"] == "PAID"
        assert response.json()["payment_date"] == "2024-02-01"

        response = await client.post(f"/api/v1/payroll-records/{payroll_id}/cancel")
        assert response.status_code == 409
        assert response.json()["code"] == "INVALID_TRANSITION"

        response = await client.patch(
            f"/api/v1/payroll-records/{payroll_id}", json={"bonus": "100"}
        )
        assert response.status_code == 409

    async def test_pay_returns_recomputed_values(
        self,
        client: AsyncClient,
        seeded,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        record = await create_record(client, seeded)
        async with session_factory() as session:
            stored = await session.get(PayrollRecord, record["payroll_id"])
            stored.net_salary = Decimal("1")
            await session.commit()

        response = await client.post(
            f"/api/v1/payroll-records/{record['payroll_id']}/pay",
            json={"payment_date": "2024-02-01"},
        )

        assert response.status_code == 200, response.text
        data = response.json()
        assert Decimal(data["net_salary"]) == Decimal("3500")
        assert data["employee_code"] == "EMP001"
        assert data["created_at"] is not None

    async def test_pay_without_body_defaults_to_today(
        self, client: AsyncClient, seeded
    ):
        record = await create_record(client, seeded)

        response = await client.post(f"/api/v1/payroll-records/{record['payroll_id']}/pay")

        assert response.status_code == 200, response.text
        assert response.json()["payment_date"] is not None

    async def test_cancel(self, client: AsyncClient, seeded):
        record = await create_record(client, seeded)

        response = await client.post(f"/api/v1/payroll-records/{record['payroll_id']}/cancel")

        assert response.status_code == 200
        assert response.json()["payment_status"] == "CANCELLED"
        assert response.json()["payment_date"] is None

    async def test_list_filters(self, client: AsyncClient, seeded):
        await create_record(client, seeded)
        await create_record(client, seeded, employee_id=seeded.second_employee_id)

        response = await client.get(
            "/api/v1/payroll-records", params={"employee_id": seeded.second_employee_id}
        )
        assert response.status_code == 200
        assert response.json()["total"] == 1

        response = await client.get("/api/v1/payroll-records", params={"status": "BOGUS"})
        assert response.status_code == 422

    async def test_calculate_preview(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/payroll-records/calculate",
            json={"base_salary": "1000", "tax_deduction": "1500"},
        )

        assert response.status_code == 200, response.text
        data = response.json()
        assert data["net_salary"] == "-500.00"
        assert data["negative_net"] is True

    async def test_calculate_rejects_negative(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/payroll-records/calculate",
            json={"base_salary": "1000", "bonus": "-1"},
        )

        assert response.status_code == 422
        assert response.json()["field"] == "bonus"


class TestReportEndpoints:
    async def test_employee_statistics(self, client: AsyncClient, seeded):
        await client.delete(f"/api/v1/employees/{seeded.second_employee_id}")

        response = await client.get("/api/v1/reports/employee-statistics")

        assert response.status_code == 200
        assert response.json() == {"total": 2, "active": 1, "inactive": 0, "terminated": 1}

    async def test_payroll_totals(self, client: AsyncClient, seeded):
        record = await create_record(client, seeded)
        await create_record(client, seeded, employee_id=seeded.second_employee_id)
        await client.post(f"/api/v1/payroll-records/{record['payroll_id']}/pay")

        response = await client.get("/api/v1/reports/payroll-totals")

        data = response.json()
        assert data["total_paid"] == "3500.00"
        assert data["record_count"] == 2
        assert data["count_by_status"] == {"PENDING": 1, "PAID": 1, "CANCELLED": 0}

    async def test_department_utilization(self, client: AsyncClient, seeded):
        response = await client.get(
            f"/api/v1/reports/departments/{seeded.it_department_id}/utilization"
        )

        assert response.status_code == 200
        data = response.json()
        assert data["percentage"] == "40.0000"
        assert data["formatted"] == "40.0%"

    async def test_department_without_budget(self, client: AsyncClient, seeded):
        response = await client.get(
            f"/api/v1/reports/departments/{seeded.hr_department_id}/utilization"
        )

        data = response.json()
        assert data["applicable"] is False
        assert data["percentage"] is None
        assert data["formatted"] == "N/A"

    async def test_department_report(self, client: AsyncClient, seeded):
        response = await client.get("/api/v1/reports/departments")

        assert response.status_code == 200
        rows = response.json()
        assert [r["department_code"] for r in rows] == ["HR", "IT"]
        assert rows[1]["employee_count"] == 2

    async def test_payroll_report(self, client: AsyncClient, seeded):
        await create_record(client, seeded)

        response = await client.get(
            "/api/v1/reports/payroll",
            params={"period_start": "2024-01-01", "period_end": "2024-01-31"},
        )

        assert response.status_code == 200
        rows = response.json()
        assert len(rows) == 1
        assert rows[0]["employee_name"] == "John Smith"
        assert rows[0]["salary"]["net_salary"] == "3500.00"
