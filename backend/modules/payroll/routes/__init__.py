# backend/modules/payroll/routes/__init__.py

"""
Payroll Module Routes Package
"""

from .payroll_routes import router as payroll_router

__all__ = ["payroll_router"]
