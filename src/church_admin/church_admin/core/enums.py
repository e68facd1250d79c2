from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    SUPERADMIN = "superadmin"
    FIELD_SECRETARY = "field_secretary"
    PASTOR = "pastor"
    CHURCH_SECRETARY = "church_secretary"
    COORDINATOR = "coordinator"
    BIBLEWORKER = "bibleworker"


class DataScope(str, Enum):
    """Which churches a role's data access spans."""

    NATIONAL = "national"
    FIELD = "field"
    DISTRICT = "district"
    CHURCH = "church"
    EVENTS_ONLY = "events_only"


class Module(str, Enum):
    """Functional areas of the application, gated independently of data scope."""

    DASHBOARD = "dashboard"
    MEMBERS = "members"
    VISITORS = "visitors"
    CHURCHES = "churches"
    EVENTS = "events"
    ATTENDANCE = "attendance"
    TRANSFERS = "transfers"
    CALENDAR = "calendar"
    REPORTS = "reports"
    MISSIONARY_REPORTS = "missionary-reports"
    SETTINGS = "settings"


class SpecialPermission(str, Enum):
    READ = "read"
    WRITE = "write"


class RegistrationStatus(str, Enum):
    """Event registration lifecycle status as stored in the database."""

    REGISTERED = "registered"
    ATTENDED = "attended"
    NO_SHOW = "no_show"
    CANCELLED = "cancelled"
    CONFIRMED = "confirmed"


class TransferStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
