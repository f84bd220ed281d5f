from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for route gating."""

    ADMIN = "admin"
    REGISTRAR = "registrar"
    TEACHER = "teacher"
    PARENT = "parent"


class Weekday(str, Enum):
    """School days a schedule can recur on, in calendar order."""

    MON = "Mon"
    TUE = "Tue"
    WED = "Wed"
    THU = "Thu"
    FRI = "Fri"

    @property
    def order(self) -> int:
        return list(Weekday).index(self)


class EnrollmentStatus(str, Enum):
    """Admission decision state of an enrollment application."""

    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"


class StudentStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
