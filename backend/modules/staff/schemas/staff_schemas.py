from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..enums.staff_enums import StaffStatus


def _strip_position(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not v.strip():
        raise ValueError("position must not be blank")
    # Positions are matched exactly against rate and hours settings
    return v.strip()


class StaffBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[str] = None
    phone: Optional[str] = None
    position: str = Field(..., min_length=1, max_length=100)
    fixed_salary: Decimal = Field(..., ge=0, decimal_places=2)
    start_date: Optional[date] = None

    @field_validator("position")
    @classmethod
    def position_not_blank(cls, v: str) -> str:
        return _strip_position(v)


class StaffCreate(StaffBase):
    pass


class StaffUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[str] = None
    phone: Optional[str] = None
    position: Optional[str] = Field(None, min_length=1, max_length=100)
    fixed_salary: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    start_date: Optional[date] = None
    status: Optional[StaffStatus] = None

    @field_validator("position")
    @classmethod
    def position_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return _strip_position(v)


class StaffOut(StaffBase):
    id: int
    tenant_id: int
    status: StaffStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
