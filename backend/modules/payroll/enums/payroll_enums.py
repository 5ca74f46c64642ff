from enum import Enum


class SalaryRecordStatus(str, Enum):
    PROCESSED = "processed"
    PAID = "paid"


class AdvanceStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PayoutStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class IncentiveRuleType(str, Enum):
    DAILY = "daily"
    MONTHLY = "monthly"
    PACKAGE = "package"
    GIFT_CARD = "gift_card"


class IncentiveApplyOn(str, Enum):
    TOTAL_SALE_VALUE = "total_sale_value"
    SERVICE_SALE_ONLY = "service_sale_only"
