# backend/modules/payroll/tests/test_payroll_routes.py

"""
API tests for payroll endpoints.
"""

import pytest
from datetime import date
from decimal import Decimal

from core.permissions import Permission
from modules.staff.enums.attendance_enums import AttendanceStatus
from modules.staff.models.attendance_models import AttendanceRecord
from ..schemas.error_schemas import PayrollErrorCodes


@pytest.fixture
def headers(token_factory):
    return token_factory()


@pytest.fixture
def configured(client, headers):
    response = client.put(
        "/api/payroll/config/target-hours/Stylist", json={"required_hours": 150}, headers=headers
    )
    assert response.status_code == 200
    response = client.put(
        "/api/payroll/config/rates",
        json={"default_ot_rate": "200", "default_extra_day_rate": "500"},
        headers=headers,
    )
    assert response.status_code == 200


@pytest.fixture
def march_attendance(db_session, stylist):
    """125 hours worked in March 2024, 5 of them overtime."""
    db_session.add(
        AttendanceRecord(
            tenant_id=1,
            staff_id=stylist.id,
            work_date=date(2024, 3, 4),
            required_minutes=540,
            total_working_minutes=125 * 60,
            overtime_minutes=5 * 60,
            is_work_complete=True,
            status=AttendanceStatus.PRESENT,
        )
    )
    db_session.commit()
    return stylist


def _salary_body(staff_id, **kwargs):
    body = {
        "staff_id": staff_id,
        "year": 2024,
        "month": 3,
        "ot_hours": None,
        "extra_days": 1,
        "addition": "200",
        "deduction": "100",
    }
    body.update(kwargs)
    return body


class TestAuth:
    def test_missing_token(self, client):
        response = client.get("/api/payroll/salary", params={"year": 2024, "month": 3})

        assert response.status_code == 401

    def test_invalid_token(self, client):
        response = client.get(
            "/api/payroll/salary",
            params={"year": 2024, "month": 3},
            headers={"Authorization": "Bearer not-a-token"},
        )

        assert response.status_code == 401

    def test_read_permission_cannot_process(self, client, token_factory, stylist):
        headers = token_factory(permissions=[Permission.STAFF_SALARY_READ])

        response = client.post("/api/payroll/salary", json=_salary_body(stylist.id), headers=headers)

        assert response.status_code == 403
        assert response.json()["error_code"] == "PERMISSION_DENIED"

    def test_target_hours_need_settings_permission(self, client, token_factory):
        headers = token_factory(permissions=[Permission.PAYROLL_SETTINGS_MANAGE])

        response = client.put(
            "/api/payroll/config/target-hours/Stylist", json={"required_hours": 150}, headers=headers
        )

        assert response.status_code == 403


class TestConfigurationRoutes:
    def test_rates_round_trip(self, client, headers, configured):
        client.put(
            "/api/payroll/config/rates/overrides/Manager",
            json={"ot_rate": "300", "extra_day_rate": "900"},
            headers=headers,
        )

        body = client.get("/api/payroll/config/rates", headers=headers).json()

        assert Decimal(body["default_ot_rate"]) == Decimal("200")
        assert [o["position_name"] for o in body["position_overrides"]] == ["Manager"]

    def test_target_hours_map(self, client, headers, configured):
        body = client.get("/api/payroll/config/target-hours", headers=headers).json()

        assert body == {"position_hours": {"Stylist": 150}}

    def test_delete_missing_target_hours(self, client, headers):
        response = client.delete("/api/payroll/config/target-hours/Nobody", headers=headers)

        assert response.status_code == 404
        assert response.json()["code"] == PayrollErrorCodes.RECORD_NOT_FOUND


class TestSalaryRoutes:
    def test_process_and_pay(self, client, headers, configured, march_attendance):
        response = client.post(
            "/api/payroll/salary", json=_salary_body(march_attendance.id), headers=headers
        )
        assert response.status_code == 200
        record = response.json()
        assert Decimal(record["base_salary"]) == Decimal("24000")
        assert Decimal(record["ot_amount"]) == Decimal("1000")
        assert Decimal(record["net_salary"]) == Decimal("25600")
        assert record["status"] == "processed"
        assert record["processed_by"] == 7

        response = client.patch(
            f"/api/payroll/salary/{record['id']}/pay",
            json={"is_paid": True, "paid_date": "2024-04-01"},
            headers=headers,
        )
        assert response.status_code == 200
        assert response.json()["status"] == "paid"
        assert response.json()["paid_date"] == "2024-04-01"

        response = client.post(
            "/api/payroll/salary", json=_salary_body(march_attendance.id), headers=headers
        )
        assert response.status_code == 409
        assert response.json()["code"] == PayrollErrorCodes.PAYMENT_ALREADY_PROCESSED

    def test_missing_target_hours(self, client, headers, march_attendance):
        response = client.post(
            "/api/payroll/salary", json=_salary_body(march_attendance.id), headers=headers
        )

        assert response.status_code == 422
        body = response.json()
        assert body["code"] == PayrollErrorCodes.CONFIG_NOT_FOUND
        assert body["message"] == "Monthly Target Hours are not set for position: Stylist"

    def test_preview(self, client, headers, configured, march_attendance):
        response = client.post(
            "/api/payroll/salary/preview",
            json=_salary_body(march_attendance.id, ot_hours="2"),
            headers=headers,
        )

        assert response.status_code == 200
        assert Decimal(response.json()["ot_amount"]) == Decimal("400")
        listed = client.get(
            "/api/payroll/salary", params={"year": 2024, "month": 3}, headers=headers
        ).json()
        assert listed == []

    def test_invalid_month(self, client, headers, stylist):
        response = client.post(
            "/api/payroll/salary", json=_salary_body(stylist.id, month=13), headers=headers
        )

        assert response.status_code == 422

    def test_mark_unpaid_not_supported(self, client, headers, configured, march_attendance):
        record = client.post(
            "/api/payroll/salary", json=_salary_body(march_attendance.id), headers=headers
        ).json()

        response = client.patch(
            f"/api/payroll/salary/{record['id']}/pay",
            json={"is_paid": False, "paid_date": "2024-04-01"},
            headers=headers,
        )

        assert response.status_code == 422

    def test_other_tenant_cannot_read_record(self, client, headers, token_factory, configured, march_attendance):
        record = client.post(
            "/api/payroll/salary", json=_salary_body(march_attendance.id), headers=headers
        ).json()

        response = client.get(
            f"/api/payroll/salary/{record['id']}", headers=token_factory(tenant_id=2)
        )

        assert response.status_code == 404

    def test_summary(self, client, headers, configured, march_attendance):
        record = client.post(
            "/api/payroll/salary", json=_salary_body(march_attendance.id), headers=headers
        ).json()
        client.patch(
            f"/api/payroll/salary/{record['id']}/pay",
            json={"is_paid": True, "paid_date": "2024-04-01"},
            headers=headers,
        )

        summary = client.get(
            "/api/payroll/salary/summary", params={"year": 2024, "month": 3}, headers=headers
        ).json()

        assert summary["paid_count"] == 1
        assert summary["pending_count"] == 0
        assert Decimal(summary["total_paid_amount"]) == Decimal("25600")


class TestAdvanceRoutes:
    def test_request_and_approve(self, client, headers, stylist):
        response = client.post(
            "/api/payroll/advances",
            json={
                "staff_id": stylist.id,
                "amount": "1500",
                "reason": "School fees",
                "repayment_plan": "Next salary",
            },
            headers=headers,
        )
        assert response.status_code == 201
        advance_id = response.json()["id"]
        assert response.json()["status"] == "pending"

        response = client.patch(
            f"/api/payroll/advances/{advance_id}", json={"status": "approved"}, headers=headers
        )
        assert response.status_code == 200
        assert response.json()["approved_date"] is not None

        response = client.patch(
            f"/api/payroll/advances/{advance_id}", json={"status": "rejected"}, headers=headers
        )
        assert response.status_code == 409

    def test_zero_amount_rejected(self, client, headers, stylist):
        response = client.post(
            "/api/payroll/advances",
            json={"staff_id": stylist.id, "amount": "0", "reason": "x", "repayment_plan": "y"},
            headers=headers,
        )

        assert response.status_code == 422


class TestIncentiveRoutes:
    def test_rule_needs_target(self, client, headers):
        response = client.post(
            "/api/payroll/incentives/rules",
            json={"rule_type": "daily", "rate": "0.05", "double_rate": "0.1"},
            headers=headers,
        )

        assert response.status_code == 422

    def test_balance_without_sales(self, client, headers, stylist):
        response = client.get(
            f"/api/payroll/incentives/payouts/staff/{stylist.id}/balance", headers=headers
        )

        assert response.status_code == 200
        assert Decimal(response.json()["balance"]) == Decimal("0")

    def test_payout_above_balance(self, client, headers, stylist):
        response = client.post(
            "/api/payroll/incentives/payouts",
            json={"staff_id": stylist.id, "amount": "10", "reason": "Claim"},
            headers=headers,
        )

        assert response.status_code == 422
        assert response.json()["code"] == PayrollErrorCodes.EXCEEDS_BALANCE
