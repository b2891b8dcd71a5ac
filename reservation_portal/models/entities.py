"""Dataclass-style entity representations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Iterable, Optional

from flask_login import UserMixin


class Role(str, Enum):
    STUDENT = "student"
    FACULTY = "faculty"
    ADMIN = "admin"


class ResourceKind(str, Enum):
    ROOM_KEY = "room_key"
    PROJECTOR = "projector"


class ResourceStatus(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class ReservationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Weekday(str, Enum):
    """Teaching days, named the way the department timetable names them."""

    SENIN = "Senin"
    SELASA = "Selasa"
    RABU = "Rabu"
    KAMIS = "Kamis"
    JUMAT = "Jumat"
    SABTU = "Sabtu"
    MINGGU = "Minggu"

    @classmethod
    def from_date(cls, value: date) -> "Weekday":
        """Map a calendar date (Monday == 0) onto the timetable weekday."""

        return list(cls)[value.weekday()]


@dataclass
class User(UserMixin):
    """User entity compatible with Flask-Login."""

    user_id: int
    full_name: str
    email: str
    password_hash: str
    role: Role
    nim_nip: Optional[str]
    phone: Optional[str]
    created_at: datetime
    is_active: bool = True

    def get_id(self) -> str:
        return str(self.user_id)

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def has_role(self, roles: Iterable[Role]) -> bool:
        return self.role in set(roles)


@dataclass
class Resource:
    """A bookable room key or projector.

    ``details`` holds the room location or the projector brand.
    """

    resource_id: int
    kind: ResourceKind
    name: str
    details: Optional[str]
    description: Optional[str]
    status: ResourceStatus
    created_at: datetime

    @property
    def is_available(self) -> bool:
        return self.status is ResourceStatus.AVAILABLE


@dataclass
class TeachingSlot:
    """Recurring weekly class joined with its instructor's display name."""

    slot_id: int
    instructor_id: int
    instructor_name: str
    weekday: Weekday
    start_time: time
    end_time: time
    course_label: str
    room_id: Optional[int] = None


@dataclass
class Reservation:
    """A request to use a resource for a time window."""

    reservation_id: int
    requester_id: int
    kind: ResourceKind
    resource_id: int
    purpose: str
    start_datetime: datetime
    end_datetime: datetime
    status: ReservationStatus
    admin_annotation: Optional[str]
    created_at: datetime
    updated_at: datetime
    # requester profile, joined from users when the row is read
    requester_name: Optional[str] = None
    requester_nim_nip: Optional[str] = None
    requester_role: Optional[Role] = None


@dataclass
class Notification:
    """Inbox entry telling a requester what happened to their reservation."""

    notification_id: int
    user_id: int
    reservation_id: Optional[int]
    message: str
    is_read: bool
    created_at: datetime
