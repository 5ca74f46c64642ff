# backend/modules/payroll/tests/conftest.py

"""
Pytest fixtures for payroll module tests.

Provides a configured tenant (target hours and default rates), a stylist
on a 30000 monthly salary and stub collaborators for salary processing.
"""

import pytest
from decimal import Decimal

from modules.staff.schemas.attendance_schemas import AttendanceSummary
from ..services.payroll_configuration_service import PayrollConfigurationService


@pytest.fixture
def config_service(db_session):
    return PayrollConfigurationService(db_session)


@pytest.fixture
def configured_tenant(config_service):
    """Tenant 1: Stylist target 150h, OT 200/h, extra day 500."""
    config_service.set_target_hours(1, "Stylist", 150)
    config_service.set_default_rates(1, Decimal("200"), Decimal("500"))
    return 1


@pytest.fixture
def stylist(staff_factory):
    return staff_factory(name="Priya", position="Stylist", fixed_salary=Decimal("30000.00"))


@pytest.fixture
def attendance_stub():
    """Attendance fetcher answering a fixed number of hours for any staff/period."""

    def make(total_hours="125", overtime_hours="5"):
        calls = []

        def fetch(tenant_id, staff_id, year, month):
            calls.append((tenant_id, staff_id, year, month))
            return AttendanceSummary(
                staff_id=staff_id,
                year=year,
                month=month,
                total_working_hours=Decimal(total_hours),
                total_overtime_hours=Decimal(overtime_hours),
            )

        fetch.calls = calls
        return fetch

    return make
