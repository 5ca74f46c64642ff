# backend/modules/payroll/routes/payroll_routes.py

"""
Main payroll routes combining all payroll module endpoints.

This router aggregates:
- Rate and target hour configuration
- Salary processing and payment
- Cash advances
- Incentives and payout claims
"""

from fastapi import APIRouter
from .configuration_routes import router as configuration_router
from .salary_routes import router as salary_router
from .advance_routes import router as advance_router
from .incentive_routes import router as incentive_router

# Create main payroll router
router = APIRouter(prefix="/api/payroll", tags=["Payroll"])

# Include sub-routers
router.include_router(
    configuration_router, prefix="/config", tags=["Payroll Configuration"]
)
router.include_router(salary_router, prefix="/salary", tags=["Salary"])
router.include_router(advance_router, prefix="/advances", tags=["Advances"])
router.include_router(incentive_router, prefix="/incentives", tags=["Incentives"])

