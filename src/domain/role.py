"""Roles and the capabilities they carry

The role set is closed. Tenancy decisions branch on ``Capability``, never on
role names, so a misspelled role cannot widen access.
"""

from enum import Enum


class Capability(str, Enum):
    CROSS_TENANT_READ = "cross_tenant_read"
    TENANT_SCOPED_ONLY = "tenant_scoped_only"


class Role(str, Enum):
    SUPPORT_WORKER = "SupportWorker"
    TEAM_LEADER = "TeamLeader"
    COORDINATOR = "Coordinator"
    ADMIN = "Admin"
    CONSOLE_MANAGER = "ConsoleManager"

    @property
    def capability(self) -> Capability:
        return _CAPABILITIES[self]

    @property
    def can_adjust_budgets(self) -> bool:
        return self in _BUDGET_ADJUSTERS

    def can_write_records(self, kind: str) -> bool:
        """Kinds without an entry are writable by every role"""
        writers = _RECORD_WRITERS.get(kind)
        return writers is None or self in writers

    @property
    def is_staff(self) -> bool:
        """Staff roles receive rostered hour allocations"""
        return self in _WEEKLY_HOURS

    @property
    def weekly_hours(self) -> int:
        return _WEEKLY_HOURS[self]


_CAPABILITIES = {
    Role.SUPPORT_WORKER: Capability.TENANT_SCOPED_ONLY,
    Role.TEAM_LEADER: Capability.TENANT_SCOPED_ONLY,
    Role.COORDINATOR: Capability.TENANT_SCOPED_ONLY,
    Role.ADMIN: Capability.TENANT_SCOPED_ONLY,
    Role.CONSOLE_MANAGER: Capability.CROSS_TENANT_READ,
}

_BUDGET_ADJUSTERS = frozenset({Role.COORDINATOR, Role.ADMIN, Role.CONSOLE_MANAGER})

_RATE_MANAGERS = frozenset({Role.ADMIN, Role.CONSOLE_MANAGER})

_RECORD_WRITERS = {
    "budget": frozenset({Role.TEAM_LEADER, Role.COORDINATOR, Role.ADMIN, Role.CONSOLE_MANAGER}),
    "hour_allocation": frozenset({Role.TEAM_LEADER, Role.ADMIN, Role.CONSOLE_MANAGER}),
    "pay_scale": _RATE_MANAGERS,
    "tax_bracket": _RATE_MANAGERS,
    "service_rate": _RATE_MANAGERS,
}

_WEEKLY_HOURS = {
    Role.SUPPORT_WORKER: 35,
    Role.TEAM_LEADER: 38,
    Role.COORDINATOR: 30,
}


class EmploymentType(str, Enum):
    FULLTIME = "fulltime"
    PARTTIME = "parttime"
    CASUAL = "casual"
