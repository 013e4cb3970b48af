"""Plain records handed out by every storage backend.

Records are frozen: a store returns a fresh copy and updates go back
through the store, never by mutating what a caller holds.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


class SpotType:
    REGULAR = 'regular'
    STUDENT = 'student'
    FACULTY = 'faculty'
    HANDICAP = 'handicap'

    ALL = (REGULAR, STUDENT, FACULTY, HANDICAP)


class ReservationStatus:
    ACTIVE = 'active'
    UPCOMING = 'upcoming'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'

    OPEN = (ACTIVE, UPCOMING)


class NotificationType:
    SUCCESS = 'success'
    INFO = 'info'
    WARNING = 'warning'
    ERROR = 'error'

    ALL = (SUCCESS, INFO, WARNING, ERROR)


def utcnow() -> datetime:
    """Current time as a naive UTC datetime (what both stores persist)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def isoformat(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return to_utc(value).isoformat(timespec='milliseconds') + 'Z'


@dataclass(frozen=True)
class User:
    id: int
    username: str
    password: str
    full_name: str
    email: str

    def to_dict(self):
        # never expose the stored credential
        return {
            'id': self.id,
            'username': self.username,
            'fullName': self.full_name,
            'email': self.email,
        }


@dataclass(frozen=True)
class ParkingLot:
    id: int
    name: str
    description: str
    total_spots: int
    latitude: str
    longitude: str

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'totalSpots': self.total_spots,
            'latitude': self.latitude,
            'longitude': self.longitude,
        }


@dataclass(frozen=True)
class ParkingSpot:
    id: int
    lot_id: int
    spot_number: str
    type: str
    is_available: bool = True

    def to_dict(self):
        return {
            'id': self.id,
            'lotId': self.lot_id,
            'spotNumber': self.spot_number,
            'type': self.type,
            'isAvailable': self.is_available,
        }


@dataclass(frozen=True)
class Vehicle:
    id: int
    user_id: int
    make: str
    model: str
    license_plate: str
    state: str

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'make': self.make,
            'model': self.model,
            'licensePlate': self.license_plate,
            'state': self.state,
        }


@dataclass(frozen=True)
class Reservation:
    id: int
    user_id: int
    spot_id: int
    vehicle_id: int
    start_time: datetime
    end_time: datetime
    status: str
    confirmation_code: str

    @property
    def is_open(self) -> bool:
        return self.status in ReservationStatus.OPEN

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'spotId': self.spot_id,
            'vehicleId': self.vehicle_id,
            'startTime': isoformat(self.start_time),
            'endTime': isoformat(self.end_time),
            'status': self.status,
            'confirmationCode': self.confirmation_code,
        }


@dataclass(frozen=True)
class Notification:
    id: int
    user_id: int
    message: str
    type: str
    created_at: datetime
    is_read: bool = False

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'message': self.message,
            'type': self.type,
            'isRead': self.is_read,
            'createdAt': isoformat(self.created_at),
        }
