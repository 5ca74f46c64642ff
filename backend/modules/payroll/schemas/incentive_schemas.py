# backend/modules/payroll/schemas/incentive_schemas.py

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

from ..enums.payroll_enums import (
    IncentiveApplyOn,
    IncentiveRuleType,
    PayoutStatus,
)

SALARY_TARGET_RULES = (IncentiveRuleType.DAILY, IncentiveRuleType.MONTHLY)


class IncentiveRuleCreate(BaseModel):
    rule_type: IncentiveRuleType
    target_multiplier: Optional[Decimal] = Field(None, ge=0)
    target_value: Optional[Decimal] = Field(None, ge=0)
    include_service_sale: bool = True
    include_product_sale: bool = False
    review_name_value: Decimal = Field(Decimal("0"), ge=0)
    review_photo_value: Decimal = Field(Decimal("0"), ge=0)
    rate: Decimal = Field(..., ge=0)
    double_rate: Decimal = Field(..., ge=0)
    apply_on: IncentiveApplyOn = IncentiveApplyOn.TOTAL_SALE_VALUE

    @model_validator(mode="after")
    def target_matches_type(self):
        if self.rule_type in SALARY_TARGET_RULES and self.target_multiplier is None:
            raise ValueError(f"{self.rule_type.value} rules need a target_multiplier")
        if self.rule_type not in SALARY_TARGET_RULES and self.target_value is None:
            raise ValueError(f"{self.rule_type.value} rules need a target_value")
        return self


class IncentiveRuleResponse(IncentiveRuleCreate):
    id: int
    effective_from: datetime

    model_config = ConfigDict(from_attributes=True)


class DailySaleCreate(BaseModel):
    staff_id: int
    sale_date: date
    service_sale: Decimal = Field(Decimal("0"), ge=0)
    product_sale: Decimal = Field(Decimal("0"), ge=0)
    package_sale: Decimal = Field(Decimal("0"), ge=0)
    gift_card_sale: Decimal = Field(Decimal("0"), ge=0)
    reviews_with_name: int = Field(0, ge=0)
    reviews_with_photo: int = Field(0, ge=0)


class DailySaleResponse(DailySaleCreate):
    id: int
    recorded_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PayoutRequest(BaseModel):
    staff_id: int
    amount: Decimal = Field(..., gt=0)
    reason: str = Field(..., min_length=1)


class PayoutDecision(BaseModel):
    status: PayoutStatus

    @model_validator(mode="after")
    def must_be_decision(self):
        if self.status == PayoutStatus.PENDING:
            raise ValueError("Status must be 'approved' or 'rejected'")
        return self


class PayoutResponse(BaseModel):
    id: int
    staff_id: int
    amount: Decimal
    reason: str
    status: PayoutStatus
    processed_date: Optional[datetime] = None
    requested_by: Optional[int] = None
    decided_by: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PayoutBalance(BaseModel):
    staff_id: int
    total_earned: Decimal
    total_paid: Decimal
    balance: Decimal
