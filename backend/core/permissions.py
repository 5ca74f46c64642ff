# backend/core/permissions.py

"""
Core permissions module

Permissions are flat strings. A holder of ``*`` has every permission;
otherwise a permission must be held exactly.
"""

from enum import Enum
from typing import Iterable

from .exceptions import PermissionError


class Permission(str, Enum):
    """System permissions"""

    # Staff permissions
    STAFF_READ = "staff:read"
    STAFF_MANAGE = "staff:manage"

    # Salary permissions
    STAFF_SALARY_READ = "staff-salary:read"
    STAFF_SALARY_MANAGE = "staff-salary:manage"

    # Advance permissions
    STAFF_ADVANCE_READ = "staff-advance:read"
    STAFF_ADVANCE_MANAGE = "staff-advance:manage"

    # Attendance permissions
    STAFF_ATTENDANCE_READ = "staff-attendance:read"
    STAFF_ATTENDANCE_MANAGE = "staff-attendance:manage"

    # Incentive permissions
    STAFF_INCENTIVES_READ = "staff-incentives:read"
    STAFF_INCENTIVES_MANAGE = "staff-incentives:manage"

    # Settings permissions
    POSITION_HOURS_SETTINGS_MANAGE = "position-hours-settings:manage"
    PAYROLL_SETTINGS_MANAGE = "payroll-settings:manage"

    ALL = "*"


def _value(permission) -> str:
    return permission.value if isinstance(permission, Permission) else str(permission)


def has_permission(user_permissions: Iterable[str], permission) -> bool:
    """
    Check if a permission set grants ``permission``.

    Args:
        user_permissions: Permission strings held by the user
        permission: Required permission

    Returns:
        bool: True if the wildcard or the exact permission is held
    """
    held = {_value(p) for p in user_permissions or []}
    return Permission.ALL.value in held or _value(permission) in held


def has_any_permission(user_permissions: Iterable[str], permissions: Iterable) -> bool:
    held = list(user_permissions or [])
    return any(has_permission(held, p) for p in permissions)


def has_all_permissions(user_permissions: Iterable[str], permissions: Iterable) -> bool:
    held = list(user_permissions or [])
    return all(has_permission(held, p) for p in permissions)


def check_permission(user_permissions: Iterable[str], permission) -> None:
    """
    Raise if the permission set does not grant ``permission``.

    Raises:
        PermissionError: If the user lacks the permission
    """
    if not has_permission(user_permissions, permission):
        raise PermissionError(
            detail=f"You don't have permission to perform this action: {_value(permission)}"
        )
