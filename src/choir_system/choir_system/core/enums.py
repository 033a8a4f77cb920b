from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Choir roles. President and Advisor form the admin tier."""

    SINGER = "Singer"
    ADVISOR = "Advisor"
    PRESIDENT = "President"
    SONG_CONDUCTOR = "Song Conductor"
    ACCOUNTANT = "Accountant"
    SECRETARY = "Secretary"


ADMIN_ROLES = frozenset({Role.PRESIDENT, Role.ADVISOR})
FINANCE_ROLES = frozenset({Role.SECRETARY, Role.ACCOUNTANT}) | ADMIN_ROLES
SONG_MANAGER_ROLES = frozenset({Role.SONG_CONDUCTOR}) | ADMIN_ROLES


class UserStatus(str, Enum):
    """Account approval state."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AttendanceStatus(str, Enum):
    """Statuses that may be stored in an attendance bucket."""

    PRESENT = "Present"
    ABSENT = "Absent"
    EXCUSED = "Excused"


# Display-only marker used by the front end; never accepted or persisted.
NO_EVENT = "No Event"


class PermissionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class EventType(str, Enum):
    PRACTICE = "Practice"
    SERVICE = "Service"


class AnnouncementType(str, Enum):
    GENERAL = "general"
    PERMISSION = "permission"


class AnnouncementState(str, Enum):
    """Visibility of an announcement, derived from its window at read time."""

    ACTIVE = "active"
    SCHEDULED = "scheduled"
    EXPIRED = "expired"


class ContributionStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"


class YearOfStudy(str, Enum):
    YEAR_1 = "Year 1"
    YEAR_2 = "Year 2"
    YEAR_3 = "Year 3"
    YEAR_4 = "Year 4"
    YEAR_5 = "Year 5"


class University(str, Enum):
    UNIVERSITY_OF_RWANDA = "University of Rwanda"
    EAST_AFRICAN = "East African"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"


class MaritalStatus(str, Enum):
    SINGLE = "Single"
    MARRIED = "Married"
