"""
Payroll configuration: default rates, position rate overrides and
monthly target hours.

Target hours are mandatory per position. There is no fallback: a
position without a positive target cannot be paid until an
administrator configures one.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from .rate_resolver import PositionRates, RateSet
from ..exceptions import (
    PayrollConfigurationError,
    PayrollNotFoundError,
    PayrollValidationError,
)
from ..models.payroll_configuration import (
    PayrollRateSettings,
    PositionRateOverride,
    PositionTargetHours,
)
from ..schemas.error_schemas import PayrollErrorCodes

logger = logging.getLogger(__name__)


@dataclass
class RateConfiguration:
    """Everything rate resolution needs for one tenant."""
    defaults: RateSet
    overrides: List[PositionRates] = field(default_factory=list)


def _clean_position(position: str) -> str:
    if position is None or not position.strip():
        raise PayrollValidationError("Position name is required", field="position_name")
    return position.strip()


def _check_rate(name: str, value: Decimal) -> Decimal:
    if value is None or Decimal(value) < 0:
        raise PayrollValidationError(
            f"{name} must be non-negative",
            field=name,
            code=PayrollErrorCodes.INVALID_CONFIG_VALUE,
        )
    return Decimal(value)


class PayrollConfigurationService:
    def __init__(self, db_session: Session):
        self.db = db_session

    # Default rates

    def _get_rate_settings(self, tenant_id: int) -> Optional[PayrollRateSettings]:
        return (
            self.db.query(PayrollRateSettings)
            .filter(PayrollRateSettings.tenant_id == tenant_id)
            .first()
        )

    def get_default_rates(self, tenant_id: int) -> RateSet:
        """
        Tenant-wide default rates.

        A tenant that has not configured defaults gets zero rates.
        """
        row = self._get_rate_settings(tenant_id)
        if row is None:
            return RateSet(ot_rate=Decimal("0"), extra_day_rate=Decimal("0"))
        return RateSet(
            ot_rate=Decimal(row.default_ot_rate),
            extra_day_rate=Decimal(row.default_extra_day_rate),
        )

    def set_default_rates(
        self, tenant_id: int, ot_rate: Decimal, extra_day_rate: Decimal
    ) -> RateSet:
        ot_rate = _check_rate("default_ot_rate", ot_rate)
        extra_day_rate = _check_rate("default_extra_day_rate", extra_day_rate)

        row = self._get_rate_settings(tenant_id)
        if row is None:
            row = PayrollRateSettings(tenant_id=tenant_id)
            self.db.add(row)
        row.default_ot_rate = ot_rate
        row.default_extra_day_rate = extra_day_rate

        self.db.commit()
        logger.info(
            f"Default rates for tenant {tenant_id} set to OT {ot_rate}, extra day {extra_day_rate}"
        )
        return RateSet(ot_rate=ot_rate, extra_day_rate=extra_day_rate)

    # Position rate overrides

    def list_rate_overrides(self, tenant_id: int) -> List[PositionRateOverride]:
        return (
            self.db.query(PositionRateOverride)
            .filter(PositionRateOverride.tenant_id == tenant_id)
            .order_by(PositionRateOverride.position_name)
            .all()
        )

    def upsert_rate_override(
        self,
        tenant_id: int,
        position_name: str,
        ot_rate: Decimal,
        extra_day_rate: Decimal,
    ) -> PositionRateOverride:
        position_name = _clean_position(position_name)
        ot_rate = _check_rate("ot_rate", ot_rate)
        extra_day_rate = _check_rate("extra_day_rate", extra_day_rate)

        override = (
            self.db.query(PositionRateOverride)
            .filter(
                PositionRateOverride.tenant_id == tenant_id,
                PositionRateOverride.position_name == position_name,
            )
            .first()
        )
        if override is None:
            override = PositionRateOverride(tenant_id=tenant_id, position_name=position_name)
            self.db.add(override)
        override.ot_rate = ot_rate
        override.extra_day_rate = extra_day_rate

        self.db.commit()
        self.db.refresh(override)
        logger.info(f"Rate override for {position_name!r} saved in tenant {tenant_id}")
        return override

    def delete_rate_override(self, tenant_id: int, position_name: str) -> None:
        position_name = _clean_position(position_name)
        deleted = (
            self.db.query(PositionRateOverride)
            .filter(
                PositionRateOverride.tenant_id == tenant_id,
                PositionRateOverride.position_name == position_name,
            )
            .delete(synchronize_session=False)
        )
        if not deleted:
            raise PayrollNotFoundError("Rate override", position_name)
        self.db.commit()
        logger.info(f"Rate override for {position_name!r} removed in tenant {tenant_id}")

    def get_rate_configuration(self, tenant_id: int) -> RateConfiguration:
        overrides = [
            PositionRates(
                position_name=o.position_name,
                ot_rate=Decimal(o.ot_rate),
                extra_day_rate=Decimal(o.extra_day_rate),
            )
            for o in self.list_rate_overrides(tenant_id)
        ]
        return RateConfiguration(defaults=self.get_default_rates(tenant_id), overrides=overrides)

    # Monthly target hours

    def get_target_hours_map(self, tenant_id: int) -> Dict[str, int]:
        rows = (
            self.db.query(PositionTargetHours)
            .filter(PositionTargetHours.tenant_id == tenant_id)
            .all()
        )
        return {row.position_name: row.required_hours for row in rows}

    def set_target_hours(
        self, tenant_id: int, position_name: str, required_hours: int
    ) -> PositionTargetHours:
        position_name = _clean_position(position_name)
        if required_hours is None or int(required_hours) < 0:
            raise PayrollValidationError(
                "required_hours must be a non-negative integer",
                field="required_hours",
                code=PayrollErrorCodes.INVALID_CONFIG_VALUE,
            )

        row = (
            self.db.query(PositionTargetHours)
            .filter(
                PositionTargetHours.tenant_id == tenant_id,
                PositionTargetHours.position_name == position_name,
            )
            .first()
        )
        if row is None:
            row = PositionTargetHours(tenant_id=tenant_id, position_name=position_name)
            self.db.add(row)
        row.required_hours = int(required_hours)

        self.db.commit()
        self.db.refresh(row)
        logger.info(
            f"Target hours for {position_name!r} set to {required_hours} in tenant {tenant_id}"
        )
        return row

    def delete_target_hours(self, tenant_id: int, position_name: str) -> None:
        position_name = _clean_position(position_name)
        deleted = (
            self.db.query(PositionTargetHours)
            .filter(
                PositionTargetHours.tenant_id == tenant_id,
                PositionTargetHours.position_name == position_name,
            )
            .delete(synchronize_session=False)
        )
        if not deleted:
            raise PayrollNotFoundError("Target hours", position_name)
        self.db.commit()

    def require_target_hours(self, tenant_id: int, position: str) -> int:
        """
        Monthly target hours for ``position``.

        Raises:
            PayrollConfigurationError: no entry, or an entry of zero
        """
        hours = self.get_target_hours_map(tenant_id).get(position)
        if not hours or hours <= 0:
            logger.warning(f"Target hours missing for position {position!r} in tenant {tenant_id}")
            raise PayrollConfigurationError(position)
        return hours
