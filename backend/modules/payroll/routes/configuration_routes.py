# backend/modules/payroll/routes/configuration_routes.py

"""
Payroll configuration endpoints: default rates, position rate overrides
and monthly target hours per position.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from core.auth import CurrentUser, require_permission
from core.database import get_db
from core.permissions import Permission
from ..schemas.payroll_schemas import (
    DefaultRatesPayload,
    RateConfigurationResponse,
    RateOverridePayload,
    RateOverrideResponse,
    TargetHoursMap,
    TargetHoursPayload,
    TargetHoursResponse,
)
from ..services.payroll_configuration_service import PayrollConfigurationService

router = APIRouter()

require_salary_read = require_permission(Permission.STAFF_SALARY_READ)
require_settings_manage = require_permission(Permission.PAYROLL_SETTINGS_MANAGE)
require_hours_manage = require_permission(Permission.POSITION_HOURS_SETTINGS_MANAGE)


def _rate_configuration(service: PayrollConfigurationService, tenant_id: int):
    config = service.get_rate_configuration(tenant_id)
    return RateConfigurationResponse(
        default_ot_rate=config.defaults.ot_rate,
        default_extra_day_rate=config.defaults.extra_day_rate,
        position_overrides=[
            RateOverrideResponse(
                position_name=o.position_name,
                ot_rate=o.ot_rate,
                extra_day_rate=o.extra_day_rate,
            )
            for o in config.overrides
        ],
    )


@router.get("/rates", response_model=RateConfigurationResponse)
async def get_rates(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_salary_read),
):
    """
    Default overtime and extra-day rates plus every position override.
    """
    return _rate_configuration(PayrollConfigurationService(db), current_user.tenant_id)


@router.put("/rates", response_model=RateConfigurationResponse)
async def set_default_rates(
    payload: DefaultRatesPayload,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_settings_manage),
):
    service = PayrollConfigurationService(db)
    service.set_default_rates(
        current_user.tenant_id, payload.default_ot_rate, payload.default_extra_day_rate
    )
    return _rate_configuration(service, current_user.tenant_id)


@router.get("/rates/overrides", response_model=List[RateOverrideResponse])
async def list_rate_overrides(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_salary_read),
):
    return PayrollConfigurationService(db).list_rate_overrides(current_user.tenant_id)


@router.put("/rates/overrides/{position_name}", response_model=RateOverrideResponse)
async def upsert_rate_override(
    position_name: str,
    payload: RateOverridePayload,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_settings_manage),
):
    """
    Create or replace the rates for one position.

    ## Path Parameters
    - **position_name**: Exact position name (case-sensitive)
    """
    return PayrollConfigurationService(db).upsert_rate_override(
        current_user.tenant_id, position_name, payload.ot_rate, payload.extra_day_rate
    )


@router.delete("/rates/overrides/{position_name}", status_code=204)
async def delete_rate_override(
    position_name: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_settings_manage),
):
    PayrollConfigurationService(db).delete_rate_override(current_user.tenant_id, position_name)


@router.get("/target-hours", response_model=TargetHoursMap)
async def get_target_hours(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_salary_read),
):
    return TargetHoursMap(
        position_hours=PayrollConfigurationService(db).get_target_hours_map(
            current_user.tenant_id
        )
    )


@router.put("/target-hours/{position_name}", response_model=TargetHoursResponse)
async def set_target_hours(
    position_name: str,
    payload: TargetHoursPayload,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_hours_manage),
):
    """
    Set the monthly required hours for a position.

    Salary cannot be processed for a position until this is set to a
    positive value.
    """
    return PayrollConfigurationService(db).set_target_hours(
        current_user.tenant_id, position_name, payload.required_hours
    )


@router.delete("/target-hours/{position_name}", status_code=204)
async def delete_target_hours(
    position_name: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_hours_manage),
):
    PayrollConfigurationService(db).delete_target_hours(current_user.tenant_id, position_name)
