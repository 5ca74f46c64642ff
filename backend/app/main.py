from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from core.config import settings
from core.exceptions import register_exception_handlers
from core.logging_config import setup_logging

# ========== Staff Management ==========
from modules.staff.routes.staff_routes import router as staff_router
from modules.staff.routes.attendance_routes import router as attendance_router

# ========== Payroll ==========
from modules.payroll.routes import payroll_router
from modules.payroll.exceptions import PayrollException, payroll_exception_handler

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Salon Payroll API",
    description="""
    Staff, attendance and payroll backend for multi-tenant salon businesses.

    ## Features

    * **Staff Management** - Staff contracts with position and fixed monthly salary
    * **Attendance** - Check-in/out with temporary exits and daily overtime
    * **Salary Processing** - Pro-rated base salary, overtime, extra days and advance deduction
    * **Advances** - Cash advance requests with approval workflow
    * **Incentives** - Sales-based incentive rules and payout claims

    ## Authentication

    Every endpoint requires a bearer JWT carrying `sub`, `tenant_id` and
    `permissions` claims.
    """,
    version="1.0.0",
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers for consistent error responses
register_exception_handlers(app)
app.add_exception_handler(PayrollException, payroll_exception_handler)

app.include_router(staff_router, prefix="/api")
app.include_router(attendance_router, prefix="/api")
app.include_router(payroll_router)


@app.get("/health")
def health():
    return {"status": "ok", "environment": settings.environment}


logger.info(f"Salon payroll API initialised ({settings.environment})")
