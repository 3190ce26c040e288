from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role stored on the employee profile."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the database."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class OvertimeStatus(str, Enum):
    """Overtime request approval workflow state."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
