"""
Overtime and extra-day rate resolution.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional


@dataclass(frozen=True)
class RateSet:
    """Overtime hourly rate and extra-day rate applied to one computation."""
    ot_rate: Decimal
    extra_day_rate: Decimal


@dataclass(frozen=True)
class PositionRates:
    """Rates configured for one position name."""
    position_name: str
    ot_rate: Decimal
    extra_day_rate: Decimal


def resolve_rates(
    position: Optional[str],
    overrides: Iterable[PositionRates],
    defaults: RateSet,
) -> RateSet:
    """
    Pick the rates for ``position``.

    An override applies only when its position name matches exactly
    (case-sensitive). Otherwise the tenant defaults apply unchanged; the
    two are never mixed.
    """
    for override in overrides:
        if override.position_name == position:
            return RateSet(ot_rate=override.ot_rate, extra_day_rate=override.extra_day_rate)
    return defaults
