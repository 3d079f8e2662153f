"""
Employee endpoint tests.
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from app.employees.models import EmployeeStatus, EmployeeType
from conftest import employee_payload, make_employee, make_payroll

BASE_URL = "/api/v1/employees"


class TestCreateEmployee:
    def test_create_teacher(self, client):
        response = client.post(f"{BASE_URL}/", json=employee_payload())

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Employee created successfully"

        employee = body["data"]
        assert employee["employee_type"] == "TEACHER"
        assert employee["status"] == "ACTIVE"
        assert Decimal(employee["basic_salary"]) == Decimal("65000")
        assert Decimal(employee["house_rent"]) == Decimal("15000")
        assert Decimal(employee["tax"]) == Decimal("7000")
        assert Decimal(employee["loan"]) == Decimal("0")
        assert employee["teacher"]["department"] == "Computer Science"
        assert employee["teacher"]["publications"] == 0
        assert employee["officer"] is None

    def test_create_staff(self, client):
        payload = employee_payload(
            employee_type="STAFF",
            designation="Electrician",
            role={"role_type": "STAFF", "section": "Maintenance", "shift": "NIGHT"},
        )

        response = client.post(f"{BASE_URL}/", json=payload)

        assert response.status_code == 201
        assert response.json()["data"]["staff"] == {"section": "Maintenance", "shift": "NIGHT"}

    def test_role_must_match_type(self, client):
        payload = employee_payload(employee_type="OFFICER")

        response = client.post(f"{BASE_URL}/", json=payload)

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_negative_salary_rejected(self, client):
        response = client.post(f"{BASE_URL}/", json=employee_payload(basic_salary="-1"))

        assert response.status_code == 422

    def test_duplicate_email_is_a_conflict(self, client):
        client.post(f"{BASE_URL}/", json=employee_payload())

        response = client.post(f"{BASE_URL}/", json=employee_payload(phone="+1-555-0199"))

        assert response.status_code == 409
        body = response.json()
        assert body["error"] is True
        assert body["error_code"] == "RESOURCE_ALREADY_EXISTS"
        assert body["error_data"]["field"] == "email"


class TestListEmployees:
    def test_pagination_metadata(self, client, db_session):
        for index in range(12):
            make_employee(db_session, f"Teacher {index:02d}")

        response = client.get(f"{BASE_URL}/", params={"page": 2, "limit": 5})

        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 5
        assert body["pagination"] == {"total": 12, "page": 2, "limit": 5, "total_pages": 3}

    def test_filters(self, client, staff_roster):
        response = client.get(f"{BASE_URL}/", params={"type": "TEACHER", "status": "ACTIVE"})

        names = [employee["name"] for employee in response.json()["data"]]
        assert names == ["Ada Lovelace"]

    def test_search(self, client, staff_roster):
        response = client.get(f"{BASE_URL}/", params={"search": "grace"})

        body = response.json()
        assert [employee["name"] for employee in body["data"]] == ["Grace Hopper"]
        assert body["pagination"]["total"] == 1

    def test_invalid_page(self, client):
        assert client.get(f"{BASE_URL}/", params={"page": 0}).status_code == 422
        assert client.get(f"{BASE_URL}/", params={"page": "abc"}).status_code == 422

    def test_limit_has_no_upper_bound(self, client, staff_roster):
        response = client.get(f"{BASE_URL}/", params={"limit": 500})

        assert response.status_code == 200
        assert response.json()["pagination"] == {"total": 4, "page": 1, "limit": 500, "total_pages": 1}

    def test_invalid_type(self, client):
        assert client.get(f"{BASE_URL}/", params={"type": "JANITOR"}).status_code == 422


class TestEmployeeDetail:
    def test_detail_includes_recent_payrolls(self, client, db_session, professor):
        for month in range(1, 8):
            make_payroll(db_session, professor, month, 2024)

        response = client.get(f"{BASE_URL}/{professor.id}")

        assert response.status_code == 200
        employee = response.json()["data"]
        assert employee["teacher"]["faculty"] == "Engineering"
        assert len(employee["recent_payrolls"]) == 5
        assert Decimal(employee["recent_payrolls"][0]["net_salary"]) == Decimal("93000")

    def test_unknown_employee(self, client):
        response = client.get(f"{BASE_URL}/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error_code"] == "RESOURCE_NOT_FOUND"

    def test_malformed_id(self, client):
        assert client.get(f"{BASE_URL}/not-a-uuid").status_code == 422


class TestUpdateEmployee:
    def test_update_fields_and_role(self, client, professor):
        response = client.put(f"{BASE_URL}/{professor.id}", json={
            "designation": "Dean",
            "allowances": {"special": "9000"},
            "role": {"role_type": "TEACHER", "department": "Mathematics"},
        })

        assert response.status_code == 200
        employee = response.json()["data"]
        assert employee["designation"] == "Dean"
        assert Decimal(employee["special"]) == Decimal("9000")
        assert Decimal(employee["house_rent"]) == Decimal("20000")
        assert employee["teacher"]["department"] == "Mathematics"
        assert employee["teacher"]["faculty"] == "Engineering"

    def test_mismatched_role_rejected(self, client, professor):
        response = client.put(f"{BASE_URL}/{professor.id}", json={
            "role": {"role_type": "OFFICER", "office": "Bursar"},
        })

        assert response.status_code == 422
        assert response.json()["error_code"] == "ROLE_MISMATCH"

    @pytest.mark.parametrize("field", ["name", "age", "phone", "email", "designation", "basic_salary", "status"])
    def test_null_for_required_field_rejected(self, client, professor, field):
        response = client.put(f"{BASE_URL}/{professor.id}", json={field: None})

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert "original_error" not in response.text
        assert client.get(f"{BASE_URL}/{professor.id}").json()["data"]["name"] == "Ada Lovelace"

    def test_null_avatar_clears_it(self, client, professor):
        response = client.put(f"{BASE_URL}/{professor.id}", json={"avatar": None})

        assert response.status_code == 200
        assert response.json()["data"]["avatar"] is None

    def test_deactivate(self, client, professor):
        response = client.put(f"{BASE_URL}/{professor.id}", json={"status": "INACTIVE"})

        assert response.json()["data"]["status"] == EmployeeStatus.INACTIVE.value


class TestDeleteEmployee:
    def test_delete_removes_payrolls(self, client, db_session, professor):
        make_payroll(db_session, professor, 1, 2024)
        employee_id = professor.id

        response = client.delete(f"{BASE_URL}/{employee_id}")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Employee deleted successfully"}
        assert client.get(f"{BASE_URL}/{employee_id}").status_code == 404
        assert client.get("/api/v1/payroll/", params={"employee_id": str(employee_id)}).json()["data"] == []

    def test_delete_unknown(self, client):
        assert client.delete(f"{BASE_URL}/{uuid4()}").status_code == 404


def test_stats(client, staff_roster, db_session):
    make_employee(db_session, "Katherine Johnson", employee_type=EmployeeType.OFFICER)

    response = client.get(f"{BASE_URL}/stats")

    assert response.json()["data"] == {
        "total": 5,
        "by_type": {"teachers": 2, "officers": 2, "staff": 1},
        "by_status": {"active": 4, "inactive": 1},
    }
