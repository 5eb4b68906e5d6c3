"""Capability table for role-based access control."""

from __future__ import annotations

from enum import Enum

from .enums import Role
from .exceptions import AuthorizationError


class Capability(str, Enum):
    RECORD_SALES = "record_sales"
    EDIT_SALES = "edit_sales"
    OPERATE_REGISTER = "operate_register"
    VIEW_REGISTER_HISTORY = "view_register_history"
    VIEW_MONTHLY_REGISTERS = "view_monthly_registers"
    CLOCK_ATTENDANCE = "clock_attendance"
    VIEW_ATTENDANCE = "view_attendance"
    VIEW_ATTENDANCE_SUMMARY = "view_attendance_summary"


_EVERYONE = frozenset({Role.STAFF, Role.MANAGER, Role.ADMIN})
_SUPERVISORS = frozenset({Role.MANAGER, Role.ADMIN})

CAPABILITIES: dict[Capability, frozenset[Role]] = {
    Capability.RECORD_SALES: _EVERYONE,
    Capability.EDIT_SALES: _SUPERVISORS,
    Capability.OPERATE_REGISTER: _EVERYONE,
    Capability.VIEW_REGISTER_HISTORY: _SUPERVISORS,
    Capability.VIEW_MONTHLY_REGISTERS: _EVERYONE,
    Capability.CLOCK_ATTENDANCE: _EVERYONE,
    Capability.VIEW_ATTENDANCE: _EVERYONE,
    Capability.VIEW_ATTENDANCE_SUMMARY: _EVERYONE,
}


def has_capability(role: Role, capability: Capability) -> bool:
    return role in CAPABILITIES.get(capability, frozenset())


def require_capability(role: Role, capability: Capability) -> None:
    if not has_capability(role, capability):
        raise AuthorizationError("You do not have permission to perform this action")
