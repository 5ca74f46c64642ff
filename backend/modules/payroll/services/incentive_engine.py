"""
Sales incentive calculation.

Incentives are earned per recorded sales day against the rule version in
effect when the sale was recorded:

- daily: the day's sales (plus review bonuses) against a daily share of
  ``salary * multiplier``
- monthly: month-to-date sales against ``salary * multiplier``; each day
  earns the increase of the cumulative monthly incentive
- package / gift card: once month-to-date sales of that kind reach a fixed
  target, each day's sale of that kind earns at the applicable rate

Meeting a target pays ``rate``; reaching twice the target pays
``double_rate``.
"""

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence

from ..enums.payroll_enums import IncentiveApplyOn, IncentiveRuleType

ZERO = Decimal("0")


@dataclass(frozen=True)
class IncentiveResult:
    incentive: Decimal
    is_target_met: bool
    applied_rate: Decimal


def calculate_incentive(
    achieved: Decimal,
    target: Decimal,
    rate: Decimal,
    double_rate: Decimal,
    base: Decimal,
) -> IncentiveResult:
    """
    Incentive for ``achieved`` against ``target``, paid on ``base``.

    Nothing is earned below target or when the target is not positive.
    """
    if target <= 0 or achieved < target:
        return IncentiveResult(incentive=ZERO, is_target_met=False, applied_rate=ZERO)
    applied_rate = Decimal(double_rate) if achieved >= target * 2 else Decimal(rate)
    return IncentiveResult(
        incentive=Decimal(base) * applied_rate, is_target_met=True, applied_rate=applied_rate
    )


def rule_in_effect(rules: Sequence, at: datetime):
    """Newest rule whose ``effective_from`` is at or before ``at``."""
    candidates = [r for r in rules if r.effective_from <= at]
    if not candidates:
        return None
    return max(candidates, key=lambda r: r.effective_from)


def _dec(value) -> Decimal:
    return Decimal(value) if value is not None else ZERO


def _sale_timestamp(sale) -> datetime:
    return sale.recorded_at or datetime.combine(sale.sale_date, datetime.min.time())


class IncentiveEngine:
    """Computes a staff member's total earned incentive from sales history."""

    def __init__(self, fixed_salary: Decimal, rules: Iterable):
        self.fixed_salary = _dec(fixed_salary)
        self.rules: Dict[IncentiveRuleType, List] = {t: [] for t in IncentiveRuleType}
        for rule in rules:
            self.rules[IncentiveRuleType(rule.rule_type)].append(rule)

    def _rule(self, rule_type: IncentiveRuleType, at: datetime):
        return rule_in_effect(self.rules[rule_type], at)

    def _achieved(self, rule, service: Decimal, product: Decimal) -> Decimal:
        return (service if rule.include_service_sale else ZERO) + (
            product if rule.include_product_sale else ZERO
        )

    def _base(self, rule, service: Decimal, achieved: Decimal) -> Decimal:
        if IncentiveApplyOn(rule.apply_on) == IncentiveApplyOn.SERVICE_SALE_ONLY:
            return service
        return achieved

    def daily_incentive(self, sale, rule) -> Decimal:
        if rule is None:
            return ZERO
        days_in_month = calendar.monthrange(sale.sale_date.year, sale.sale_date.month)[1]
        target = self.fixed_salary * _dec(rule.target_multiplier) / Decimal(days_in_month)
        review_bonus = (
            Decimal(sale.reviews_with_name or 0) * _dec(rule.review_name_value)
            + Decimal(sale.reviews_with_photo or 0) * _dec(rule.review_photo_value)
        )
        service = _dec(sale.service_sale)
        achieved = self._achieved(rule, service, _dec(sale.product_sale)) + review_bonus
        return calculate_incentive(
            achieved, target, _dec(rule.rate), _dec(rule.double_rate),
            self._base(rule, service, achieved),
        ).incentive

    def cumulative_monthly_incentive(self, sales: Sequence, rule) -> Decimal:
        if rule is None:
            return ZERO
        service = sum((_dec(s.service_sale) for s in sales), ZERO)
        product = sum((_dec(s.product_sale) for s in sales), ZERO)
        target = self.fixed_salary * _dec(rule.target_multiplier)
        achieved = self._achieved(rule, service, product)
        return calculate_incentive(
            achieved, target, _dec(rule.rate), _dec(rule.double_rate),
            self._base(rule, service, achieved),
        ).incentive

    @staticmethod
    def fixed_target_incentive(month_to_date: Decimal, today: Decimal, rule) -> Decimal:
        if rule is None:
            return ZERO
        result = calculate_incentive(
            month_to_date, _dec(rule.target_value), _dec(rule.rate),
            _dec(rule.double_rate), month_to_date,
        )
        return today * result.applied_rate if result.is_target_met else ZERO

    def total_earned(self, sales: Iterable) -> Decimal:
        ordered = sorted(sales, key=lambda s: (s.sale_date, _sale_timestamp(s)))
        by_month: Dict[tuple, list] = {}
        for sale in ordered:
            by_month.setdefault((sale.sale_date.year, sale.sale_date.month), []).append(sale)

        total = ZERO
        for month_sales in by_month.values():
            for i, sale in enumerate(month_sales):
                at = _sale_timestamp(sale)
                to_date = month_sales[: i + 1]

                daily = self.daily_incentive(sale, self._rule(IncentiveRuleType.DAILY, at))

                previous_at = (
                    _sale_timestamp(month_sales[i - 1]) if i > 0 else at - timedelta(days=1)
                )
                monthly_delta = self.cumulative_monthly_incentive(
                    to_date, self._rule(IncentiveRuleType.MONTHLY, at)
                ) - self.cumulative_monthly_incentive(
                    month_sales[:i], self._rule(IncentiveRuleType.MONTHLY, previous_at)
                )

                package = self.fixed_target_incentive(
                    sum((_dec(s.package_sale) for s in to_date), ZERO),
                    _dec(sale.package_sale),
                    self._rule(IncentiveRuleType.PACKAGE, at),
                )
                gift_card = self.fixed_target_incentive(
                    sum((_dec(s.gift_card_sale) for s in to_date), ZERO),
                    _dec(sale.gift_card_sale),
                    self._rule(IncentiveRuleType.GIFT_CARD, at),
                )

                total += daily + monthly_delta + package + gift_card
        return total
