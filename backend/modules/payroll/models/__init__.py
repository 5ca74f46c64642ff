# Staff models must be mapped before payroll relationships resolve
from modules.staff.models import StaffMember  # noqa: F401

from .payroll_configuration import (
    PayrollRateSettings,
    PositionRateOverride,
    PositionTargetHours,
)
from .payroll_models import SalaryRecord, AdvancePayment
from .incentive_models import IncentiveRule, DailySale, IncentivePayout

__all__ = [
    "PayrollRateSettings",
    "PositionRateOverride",
    "PositionTargetHours",
    "SalaryRecord",
    "AdvancePayment",
    "IncentiveRule",
    "DailySale",
    "IncentivePayout",
]
