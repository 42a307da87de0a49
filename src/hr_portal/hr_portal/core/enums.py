from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Authorization role of a directory user."""

    ADMIN = "admin"
    USER = "user"


class UserStatus(str, Enum):
    """Account lifecycle, independent of attendance state."""

    ACTIVE = "active"
    PENDING = "pending"
    INACTIVE = "inactive"


class AttendanceStatus(str, Enum):
    """Status frozen on an attendance record at check-in time."""

    PRESENT = "Present"
    LATE = "Late"
    ABSENT = "Absent"


class TodayState(str, Enum):
    NOT_CHECKED_IN = "Not Checked In"
    CHECKED_IN = "Checked In"
    CHECKED_OUT = "Checked Out"


class RequestStatus(str, Enum):
    """Lifecycle of leave/document requests."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RequestKind(str, Enum):
    LEAVE = "leave"
    DOCUMENT = "document"


class LeaveType(str, Enum):
    SICK = "sick"
    ANNUAL = "annual"
    EMERGENCY = "emergency"


class NotificationType(str, Enum):
    LEAVE_REQUEST = "leave_request"
    DOCUMENT_REQUEST = "document_request"


class AnnouncementPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
