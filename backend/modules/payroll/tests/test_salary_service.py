# backend/modules/payroll/tests/test_salary_service.py

"""
Tests for salary processing, payment and reporting.
"""

import httpx
import pytest
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import Mock

from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import NotFoundError
from modules.staff.models.attendance_models import AttendanceRecord
from modules.staff.enums.attendance_enums import AttendanceStatus
from modules.staff.schemas.staff_schemas import StaffUpdate
from modules.staff.services.staff_service import StaffService
from ..enums.payroll_enums import AdvanceStatus, SalaryRecordStatus
from ..exceptions import (
    PayrollConfigurationError,
    PayrollValidationError,
    TerminalStateViolation,
    UpstreamFetchError,
)
from ..models.payroll_models import SalaryRecord
from ..schemas.error_schemas import PayrollErrorCodes
from ..schemas.payroll_schemas import SalaryInputs
from ..services.advance_service import AdvanceService
from ..services.salary_service import SalaryService


def _inputs(staff_id, **kwargs):
    values = dict(
        staff_id=staff_id,
        year=2024,
        month=3,
        ot_hours=None,
        extra_days=1,
        addition=Decimal("200"),
        deduction=Decimal("100"),
    )
    values.update(kwargs)
    return SalaryInputs(**values)


def _approve_advance(db_session, staff_id, amount, approved_at):
    service = AdvanceService(db_session)
    advance = service.request_advance(
        1, 7, staff_id, Decimal(amount), "Rent", "One month", now=approved_at
    )
    return service.decide_advance(1, advance.id, AdvanceStatus.APPROVED, 8, now=approved_at)


@pytest.fixture
def salary_service(db_session, attendance_stub):
    return SalaryService(db_session, attendance_fetcher=attendance_stub())


class TestProcessSalary:
    def test_processes_month(self, db_session, salary_service, configured_tenant, stylist):
        _approve_advance(db_session, stylist.id, "1000", datetime(2024, 3, 10))

        record = salary_service.process_salary(1, 7, _inputs(stylist.id))

        assert record.base_salary == Decimal("24000")
        assert record.ot_amount == Decimal("1000")
        assert record.extra_day_pay == Decimal("500")
        assert record.advance_deducted == Decimal("1000")
        assert record.total_earnings == Decimal("25700")
        assert record.total_deductions == Decimal("1100")
        assert record.net_salary == Decimal("24600")
        assert record.is_paid is False
        assert record.status == SalaryRecordStatus.PROCESSED
        assert record.processed_by == 7

    def test_reprocess_updates_same_record(self, db_session, salary_service, configured_tenant, stylist):
        first = salary_service.process_salary(1, 7, _inputs(stylist.id))

        second = salary_service.process_salary(
            1, 7, _inputs(stylist.id, extra_days=2, deduction=Decimal("0"))
        )

        assert second.id == first.id
        assert second.extra_day_pay == Decimal("1000")
        assert db_session.query(SalaryRecord).count() == 1

    def test_reprocess_keeps_stored_advance(self, db_session, configured_tenant, stylist, attendance_stub):
        _approve_advance(db_session, stylist.id, "1000", datetime(2024, 3, 10))
        service = SalaryService(db_session, attendance_fetcher=attendance_stub())
        service.process_salary(1, 7, _inputs(stylist.id))

        # Approved after the first run; must not change an existing record
        _approve_advance(db_session, stylist.id, "500", datetime(2024, 3, 20))
        advance_fetcher = Mock()
        service = SalaryService(
            db_session, attendance_fetcher=attendance_stub(), advance_fetcher=advance_fetcher
        )
        record = service.process_salary(1, 7, _inputs(stylist.id))

        assert record.advance_deducted == Decimal("1000")
        assert record.net_salary == Decimal("24600")
        advance_fetcher.assert_not_called()

    def test_position_renamed_with_padding_still_configured(
        self, db_session, salary_service, configured_tenant, staff_factory
    ):
        staff = staff_factory(name="Meera", position="Receptionist", fixed_salary=Decimal("30000"))
        StaffService(db_session).update_staff(1, staff.id, StaffUpdate(position="Stylist "))

        record = salary_service.process_salary(1, 7, _inputs(staff.id))

        assert record.base_salary == Decimal("24000")
        assert record.net_salary == Decimal("25600")

    def test_manual_ot_hours(self, salary_service, configured_tenant, stylist):
        record = salary_service.process_salary(
            1, 7, _inputs(stylist.id, ot_hours=Decimal("2"))
        )

        assert record.ot_hours == Decimal("2")
        assert record.ot_amount == Decimal("400")

    def test_position_override_rates(self, salary_service, config_service, configured_tenant, stylist):
        config_service.upsert_rate_override(1, "Stylist", Decimal("300"), Decimal("800"))

        record = salary_service.process_salary(1, 7, _inputs(stylist.id))

        assert record.ot_amount == Decimal("1500")
        assert record.extra_day_pay == Decimal("800")

    def test_missing_target_hours_stops_before_fetching(self, db_session, stylist):
        attendance_fetcher = Mock()
        advance_fetcher = Mock()
        service = SalaryService(
            db_session, attendance_fetcher=attendance_fetcher, advance_fetcher=advance_fetcher
        )

        with pytest.raises(PayrollConfigurationError) as exc_info:
            service.process_salary(1, 7, _inputs(stylist.id))

        assert exc_info.value.message == "Monthly Target Hours are not set for position: Stylist"
        attendance_fetcher.assert_not_called()
        advance_fetcher.assert_not_called()
        assert db_session.query(SalaryRecord).count() == 0

    @pytest.mark.parametrize(
        "error", [ConnectionError("refused"), TimeoutError("slow"), SQLAlchemyError("gone")]
    )
    def test_attendance_failure_is_not_zero(self, db_session, configured_tenant, stylist, error):
        service = SalaryService(db_session, attendance_fetcher=Mock(side_effect=error))

        with pytest.raises(UpstreamFetchError) as exc_info:
            service.process_salary(1, 7, _inputs(stylist.id))

        assert exc_info.value.source == "attendance"
        assert exc_info.value.status_code == 502
        assert db_session.query(SalaryRecord).count() == 0

    @pytest.mark.parametrize(
        "error",
        [
            httpx.ConnectError("connection refused"),
            httpx.HTTPStatusError(
                "503 Service Unavailable",
                request=httpx.Request("GET", "http://attendance.local/summary"),
                response=httpx.Response(503),
            ),
        ],
    )
    def test_http_client_failure_is_upstream_error(self, db_session, configured_tenant, stylist, error):
        service = SalaryService(db_session, attendance_fetcher=Mock(side_effect=error))

        with pytest.raises(UpstreamFetchError) as exc_info:
            service.process_salary(1, 7, _inputs(stylist.id))

        assert exc_info.value.source == "attendance"
        assert exc_info.value.code == PayrollErrorCodes.UPSTREAM_FETCH_FAILED
        assert db_session.query(SalaryRecord).count() == 0

    def test_http_client_failure_on_advances(self, db_session, configured_tenant, stylist, attendance_stub):
        service = SalaryService(
            db_session,
            attendance_fetcher=attendance_stub(),
            advance_fetcher=Mock(side_effect=httpx.ReadTimeout("timed out")),
        )

        with pytest.raises(UpstreamFetchError) as exc_info:
            service.process_salary(1, 7, _inputs(stylist.id))

        assert exc_info.value.source == "advances"

    def test_api_errors_from_fetcher_pass_through(self, db_session, configured_tenant, stylist):
        error = NotFoundError("Staff member not found", error_code="STAFF_NOT_FOUND")
        service = SalaryService(db_session, attendance_fetcher=Mock(side_effect=error))

        with pytest.raises(NotFoundError):
            service.process_salary(1, 7, _inputs(stylist.id))

    def test_attendance_failure_on_edit_keeps_record(self, db_session, salary_service, configured_tenant, stylist):
        record = salary_service.process_salary(1, 7, _inputs(stylist.id))
        failing = SalaryService(
            db_session, attendance_fetcher=Mock(side_effect=ConnectionError("refused"))
        )

        with pytest.raises(UpstreamFetchError):
            failing.process_salary(1, 7, _inputs(stylist.id, extra_days=5))

        db_session.refresh(record)
        assert record.extra_days == 1

    def test_malformed_attendance_answer(self, db_session, configured_tenant, stylist):
        service = SalaryService(
            db_session,
            attendance_fetcher=lambda *args: {"staff_id": stylist.id, "year": 2024, "month": 3},
        )

        with pytest.raises(UpstreamFetchError):
            service.process_salary(1, 7, _inputs(stylist.id))

    def test_attendance_for_other_staff_rejected(self, db_session, configured_tenant, stylist, attendance_stub):
        stub = attendance_stub()
        service = SalaryService(
            db_session,
            attendance_fetcher=lambda tenant_id, staff_id, year, month: stub(
                tenant_id, staff_id + 1, year, month
            ),
        )

        with pytest.raises(UpstreamFetchError):
            service.process_salary(1, 7, _inputs(stylist.id))

    def test_advance_failure_is_not_zero(self, db_session, configured_tenant, stylist, attendance_stub):
        service = SalaryService(
            db_session,
            attendance_fetcher=attendance_stub(),
            advance_fetcher=Mock(side_effect=ConnectionError("refused")),
        )

        with pytest.raises(UpstreamFetchError) as exc_info:
            service.process_salary(1, 7, _inputs(stylist.id))

        assert exc_info.value.source == "advances"

    def test_negative_advance_answer_rejected(self, db_session, configured_tenant, stylist, attendance_stub):
        service = SalaryService(
            db_session,
            attendance_fetcher=attendance_stub(),
            advance_fetcher=lambda *args: Decimal("-10"),
        )

        with pytest.raises(UpstreamFetchError):
            service.process_salary(1, 7, _inputs(stylist.id))

    def test_uses_recorded_attendance(self, db_session, configured_tenant, stylist):
        for day, minutes, overtime in [(4, 600, 60), (5, 480, 0)]:
            db_session.add(
                AttendanceRecord(
                    tenant_id=1,
                    staff_id=stylist.id,
                    work_date=date(2024, 3, day),
                    required_minutes=540,
                    total_working_minutes=minutes,
                    overtime_minutes=overtime,
                    is_work_complete=minutes >= 540,
                    status=AttendanceStatus.PRESENT,
                )
            )
        db_session.commit()

        record = SalaryService(db_session).process_salary(
            1, 7, _inputs(stylist.id, extra_days=0, addition=Decimal("0"), deduction=Decimal("0"))
        )

        # 18h worked, 1h overtime: 17h x 200 + 1h x 200
        assert record.total_working_hours == Decimal("18")
        assert record.base_salary == Decimal("3400")
        assert record.ot_amount == Decimal("200")
        assert record.net_salary == Decimal("3600")

    def test_preview_does_not_persist(self, db_session, salary_service, configured_tenant, stylist):
        breakdown = salary_service.preview_salary(1, _inputs(stylist.id))

        assert breakdown.net_salary == Decimal("25600.00")
        assert db_session.query(SalaryRecord).count() == 0


class TestPayment:
    def test_mark_paid(self, salary_service, configured_tenant, stylist):
        record = salary_service.process_salary(1, 7, _inputs(stylist.id))

        record = salary_service.mark_paid(1, record.id, date(2024, 4, 1), actor_id=9)

        assert record.is_paid is True
        assert record.paid_date == date(2024, 4, 1)
        assert record.paid_by == 9
        assert record.status == SalaryRecordStatus.PAID

    def test_paid_record_is_final(self, salary_service, configured_tenant, stylist):
        record = salary_service.process_salary(1, 7, _inputs(stylist.id))
        salary_service.mark_paid(1, record.id, date(2024, 4, 1))

        with pytest.raises(TerminalStateViolation) as exc_info:
            salary_service.process_salary(1, 7, _inputs(stylist.id, extra_days=3))
        assert exc_info.value.code == PayrollErrorCodes.PAYMENT_ALREADY_PROCESSED

        with pytest.raises(TerminalStateViolation):
            salary_service.mark_paid(1, record.id, date(2024, 4, 2))

        with pytest.raises(TerminalStateViolation):
            salary_service.delete_record(1, record.id)

    def test_mark_paid_requires_date(self, salary_service, configured_tenant, stylist):
        record = salary_service.process_salary(1, 7, _inputs(stylist.id))

        with pytest.raises(PayrollValidationError):
            salary_service.mark_paid(1, record.id, None)

    def test_delete_unpaid_record(self, db_session, salary_service, configured_tenant, stylist):
        record = salary_service.process_salary(1, 7, _inputs(stylist.id))

        salary_service.delete_record(1, record.id)

        assert db_session.query(SalaryRecord).count() == 0


class TestReporting:
    def test_monthly_summary(self, salary_service, staff_factory, configured_tenant, stylist):
        other = staff_factory(name="Ravi", position="Stylist", fixed_salary=Decimal("15000"))
        paid = salary_service.process_salary(1, 7, _inputs(stylist.id))
        salary_service.process_salary(1, 7, _inputs(other.id))
        salary_service.process_salary(1, 7, _inputs(stylist.id, month=4))
        salary_service.mark_paid(1, paid.id, date(2024, 4, 1))

        summary = salary_service.monthly_summary(1, 2024, 3)

        assert summary.processed_count == 2
        assert summary.paid_count == 1
        assert summary.pending_count == 1
        assert summary.total_paid_amount == Decimal("25600.00")

    def test_list_records_scoped_to_tenant(self, salary_service, configured_tenant, stylist):
        salary_service.process_salary(1, 7, _inputs(stylist.id))

        assert len(salary_service.list_records(1, 2024, 3)) == 1
        assert salary_service.list_records(2, 2024, 3) == []

    def test_summary_rejects_bad_month(self, salary_service):
        with pytest.raises(PayrollValidationError):
            salary_service.monthly_summary(1, 2024, 0)
