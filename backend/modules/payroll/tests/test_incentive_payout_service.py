# backend/modules/payroll/tests/test_incentive_payout_service.py

import pytest
from datetime import date, datetime
from decimal import Decimal

from core.exceptions import NotFoundError
from ..enums.payroll_enums import IncentiveRuleType, PayoutStatus
from ..exceptions import PayrollValidationError, TerminalStateViolation
from ..schemas.error_schemas import PayrollErrorCodes
from ..schemas.incentive_schemas import DailySaleCreate, IncentiveRuleCreate
from ..services.incentive_payout_service import IncentivePayoutService
from ..services.incentive_service import IncentiveService


@pytest.fixture
def service(db_session):
    return IncentivePayoutService(db_session)


@pytest.fixture
def earned_600(db_session, stylist):
    """Package sales above target: 6000 x 0.1."""
    incentives = IncentiveService(db_session)
    incentives.create_rule(
        1,
        IncentiveRuleCreate(
            rule_type=IncentiveRuleType.PACKAGE,
            target_value=Decimal("5000"),
            rate=Decimal("0.1"),
            double_rate=Decimal("0.2"),
        ),
        now=datetime(2024, 1, 1),
    )
    incentives.record_daily_sale(
        1,
        DailySaleCreate(staff_id=stylist.id, sale_date=date(2024, 3, 1), package_sale=Decimal("6000")),
        now=datetime(2024, 3, 1, 20, 0),
    )
    return stylist


class TestBalance:
    def test_balance_from_sales(self, service, earned_600):
        balance = service.get_balance(1, earned_600.id)

        assert balance.total_earned == Decimal("600.00")
        assert balance.total_paid == Decimal("0.00")
        assert balance.balance == Decimal("600.00")

    def test_pending_payouts_do_not_reduce_balance(self, service, earned_600):
        service.request_payout(1, 7, earned_600.id, Decimal("400"), "Festival")

        assert service.max_claimable(1, earned_600.id) == Decimal("600.00")

    def test_approved_payouts_reduce_balance(self, service, earned_600):
        payout = service.request_payout(1, 7, earned_600.id, Decimal("400"), "Festival")
        service.decide_payout(1, payout.id, PayoutStatus.APPROVED, 8)

        balance = service.get_balance(1, earned_600.id)
        assert balance.total_paid == Decimal("400.00")
        assert balance.balance == Decimal("200.00")

    def test_staff_without_salary(self, service, staff_factory):
        staff = staff_factory(fixed_salary=Decimal("0"))

        with pytest.raises(NotFoundError) as exc_info:
            service.get_balance(1, staff.id)

        assert exc_info.value.error_code == "STAFF_SALARY_NOT_SET"


class TestPayouts:
    def test_claim_above_balance_rejected(self, service, earned_600):
        payout = service.request_payout(1, 7, earned_600.id, Decimal("400"), "Festival")
        service.decide_payout(1, payout.id, PayoutStatus.APPROVED, 8)

        with pytest.raises(PayrollValidationError) as exc_info:
            service.request_payout(1, 7, earned_600.id, Decimal("300"), "More")

        assert exc_info.value.code == PayrollErrorCodes.EXCEEDS_BALANCE

    def test_full_balance_can_be_claimed(self, service, earned_600):
        payout = service.request_payout(1, 7, earned_600.id, Decimal("600"), "All of it")

        assert payout.status == PayoutStatus.PENDING

    def test_amount_must_be_positive(self, service, earned_600):
        with pytest.raises(PayrollValidationError):
            service.request_payout(1, 7, earned_600.id, Decimal("0"), "Nothing")

    def test_decision_is_final(self, service, earned_600):
        payout = service.request_payout(1, 7, earned_600.id, Decimal("100"), "Bonus")
        payout = service.decide_payout(
            1, payout.id, PayoutStatus.REJECTED, 8, now=datetime(2024, 3, 5)
        )

        assert payout.processed_date == datetime(2024, 3, 5)
        with pytest.raises(TerminalStateViolation):
            service.decide_payout(1, payout.id, PayoutStatus.APPROVED, 8)

    def test_list_payouts_by_status(self, service, earned_600):
        first = service.request_payout(1, 7, earned_600.id, Decimal("100"), "One")
        service.request_payout(1, 7, earned_600.id, Decimal("50"), "Two")
        service.decide_payout(1, first.id, PayoutStatus.APPROVED, 8)

        approved = service.list_payouts(1, staff_id=earned_600.id, status=PayoutStatus.APPROVED)

        assert [p.id for p in approved] == [first.id]
