from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import format_datetime
from ..core.enums import ADMIN_ROLES, Gender, MaritalStatus, Role, University, UserStatus, YearOfStudy

# Optional profile attributes: storage key -> wire key.
PROFILE_FIELDS = {
    "date_of_birth": "dateOfBirth",
    "place_of_birth": "placeOfBirth",
    "place_of_residence": "placeOfResidence",
    "year_of_study": "yearOfStudy",
    "university": "university",
    "gender": "gender",
    "marital_status": "maritalStatus",
    "home_parish_name": "homeParishName",
    "home_parish_location": "homeParishLocation",
    "school_residence": "schoolResidence",
}

# Profile attributes restricted to a fixed set of values.
PROFILE_CHOICES = {
    "year_of_study": YearOfStudy,
    "university": University,
    "gender": Gender,
    "marital_status": MaritalStatus,
}


@dataclass(frozen=True)
class User:
    """Domain entity: choir member.

    Note: plain data object, no DB access here.
    """

    user_id: int
    username: str
    name: str
    email: str
    role: Role
    status: UserStatus
    password_hash: str
    phone_number: Optional[str] = None
    profile_picture_url: Optional[str] = None
    profile: dict = field(default_factory=dict)
    created_at: Optional[datetime] = None

    @property
    def is_approved(self) -> bool:
        return self.status == UserStatus.APPROVED


@dataclass(frozen=True)
class NewUser:
    username: str
    name: str
    email: str
    role: Role
    password_hash: str
    status: UserStatus = UserStatus.PENDING
    phone_number: Optional[str] = None
    profile_picture_url: Optional[str] = None
    profile: dict = field(default_factory=dict)


@dataclass(frozen=True)
class Actor:
    """The authenticated caller, passed explicitly into service calls."""

    user_id: int
    name: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        return cls(user_id=user.user_id, name=user.name, role=user.role)


def public_user_dict(user: User) -> dict:
    """User as returned by the API (never includes the password hash)."""
    out = {
        "_id": user.user_id,
        "username": user.username,
        "name": user.name,
        "email": user.email,
        "phoneNumber": user.phone_number,
        "profilePictureUrl": user.profile_picture_url,
        "role": user.role.value,
        "status": user.status.value,
        "createdAt": format_datetime(user.created_at),
    }
    for key, wire_key in PROFILE_FIELDS.items():
        out[wire_key] = user.profile.get(key)
    return out
