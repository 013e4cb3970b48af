"""Entity store contract and the dict-backed implementation.

Both backends (this one and :mod:`parkwise.db_storage`) behave the same:
``create_*`` hands out increasing ids and returns the stored record,
``get_*`` returns ``None`` when nothing matches and ``update_*`` returns the
new record or ``None`` for an unknown id. No method touches another entity;
keeping spots and reservations consistent is the reservation manager's job.
"""
from __future__ import annotations

import itertools
import threading
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional

from parkwise.errors import DuplicateUsernameError
from parkwise.records import (
    Notification,
    ParkingLot,
    ParkingSpot,
    Reservation,
    ReservationStatus,
    User,
    Vehicle,
)


class Storage(ABC):

    # --- users ---
    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def create_user(self, username: str, password: str, full_name: str, email: str) -> User: ...

    # --- parking lots ---
    @abstractmethod
    def list_parking_lots(self) -> List[ParkingLot]: ...

    @abstractmethod
    def get_parking_lot(self, lot_id: int) -> Optional[ParkingLot]: ...

    @abstractmethod
    def create_parking_lot(self, name: str, description: str, total_spots: int,
                           latitude: str, longitude: str) -> ParkingLot: ...

    # --- vehicles ---
    @abstractmethod
    def list_vehicles(self, user_id: int) -> List[Vehicle]: ...

    @abstractmethod
    def get_vehicle(self, vehicle_id: int) -> Optional[Vehicle]: ...

    @abstractmethod
    def create_vehicle(self, user_id: int, make: str, model: str,
                       license_plate: str, state: str) -> Vehicle: ...

    # --- parking spots ---
    @abstractmethod
    def list_parking_spots(self, lot_id: int) -> List[ParkingSpot]: ...

    @abstractmethod
    def get_parking_spot(self, spot_id: int) -> Optional[ParkingSpot]: ...

    @abstractmethod
    def create_parking_spot(self, lot_id: int, spot_number: str, type: str,
                            is_available: bool = True) -> ParkingSpot: ...

    @abstractmethod
    def update_parking_spot(self, spot_id: int, **changes) -> Optional[ParkingSpot]: ...

    def update_parking_spot_availability(self, spot_id: int, is_available: bool) -> Optional[ParkingSpot]:
        return self.update_parking_spot(spot_id, is_available=is_available)

    @abstractmethod
    def claim_parking_spot(self, spot_id: int) -> bool:
        """Atomically flip an available spot to unavailable.

        Returns False when the spot is unknown or already taken.
        """

    # --- reservations ---
    @abstractmethod
    def list_reservations(self, user_id: int) -> List[Reservation]: ...

    @abstractmethod
    def list_open_reservations(self) -> List[Reservation]: ...

    @abstractmethod
    def list_active_reservations_by_lot(self, lot_id: int) -> List[Reservation]: ...

    @abstractmethod
    def get_reservation(self, reservation_id: int) -> Optional[Reservation]: ...

    @abstractmethod
    def create_reservation(self, user_id: int, spot_id: int, vehicle_id: int,
                           start_time: datetime, end_time: datetime,
                           status: str, confirmation_code: str) -> Reservation: ...

    @abstractmethod
    def update_reservation_status(self, reservation_id: int, status: str) -> Optional[Reservation]: ...

    @abstractmethod
    def transition_reservation(self, reservation_id: int, from_statuses,
                               to_status: str) -> Optional[Reservation]:
        """Atomically move a reservation to ``to_status`` if its status is one of ``from_statuses``.

        Returns the updated record, or None when the reservation is unknown or
        its status no longer matches.
        """

    # --- notifications ---
    @abstractmethod
    def list_notifications(self, user_id: int) -> List[Notification]: ...

    @abstractmethod
    def count_unread_notifications(self, user_id: int) -> int: ...

    @abstractmethod
    def get_notification(self, notification_id: int) -> Optional[Notification]: ...

    @abstractmethod
    def create_notification(self, user_id: int, message: str, type: str,
                            created_at: datetime, is_read: bool = False) -> Notification: ...

    @abstractmethod
    def mark_notification_as_read(self, notification_id: int) -> Optional[Notification]: ...


class MemoryStorage(Storage):
    """Keeps every entity in a dict keyed by id. Lost on restart."""

    def __init__(self):
        self._lock = threading.RLock()
        self.users: Dict[int, User] = {}
        self.parking_lots: Dict[int, ParkingLot] = {}
        self.vehicles: Dict[int, Vehicle] = {}
        self.parking_spots: Dict[int, ParkingSpot] = {}
        self.reservations: Dict[int, Reservation] = {}
        self.notifications: Dict[int, Notification] = {}

        self._ids = {name: itertools.count(1) for name in (
            'users', 'parking_lots', 'vehicles', 'parking_spots', 'reservations', 'notifications')}

    def _insert(self, table, factory, **fields):
        with self._lock:
            record = factory(id=next(self._ids[table]), **fields)
            getattr(self, table)[record.id] = record
            return record

    def _update(self, table, record_id, **changes):
        with self._lock:
            rows = getattr(self, table)
            current = rows.get(record_id)
            if current is None:
                return None
            updated = replace(current, **changes)
            rows[record_id] = updated
            return updated

    # --- users ---
    def get_user(self, user_id):
        return self.users.get(user_id)

    def get_user_by_username(self, username):
        with self._lock:
            return next((u for u in self.users.values() if u.username == username), None)

    def create_user(self, username, password, full_name, email):
        with self._lock:
            if self.get_user_by_username(username) is not None:
                raise DuplicateUsernameError(username)
            return self._insert('users', User, username=username, password=password,
                                full_name=full_name, email=email)

    # --- parking lots ---
    def list_parking_lots(self):
        with self._lock:
            return sorted(self.parking_lots.values(), key=lambda lot: lot.id)

    def get_parking_lot(self, lot_id):
        return self.parking_lots.get(lot_id)

    def create_parking_lot(self, name, description, total_spots, latitude, longitude):
        return self._insert('parking_lots', ParkingLot, name=name, description=description,
                            total_spots=total_spots, latitude=latitude, longitude=longitude)

    # --- vehicles ---
    def list_vehicles(self, user_id):
        with self._lock:
            return [v for v in self.vehicles.values() if v.user_id == user_id]

    def get_vehicle(self, vehicle_id):
        return self.vehicles.get(vehicle_id)

    def create_vehicle(self, user_id, make, model, license_plate, state):
        return self._insert('vehicles', Vehicle, user_id=user_id, make=make, model=model,
                            license_plate=license_plate, state=state)

    # --- parking spots ---
    def list_parking_spots(self, lot_id):
        with self._lock:
            return [s for s in self.parking_spots.values() if s.lot_id == lot_id]

    def get_parking_spot(self, spot_id):
        return self.parking_spots.get(spot_id)

    def create_parking_spot(self, lot_id, spot_number, type, is_available=True):
        return self._insert('parking_spots', ParkingSpot, lot_id=lot_id, spot_number=spot_number,
                            type=type, is_available=is_available)

    def update_parking_spot(self, spot_id, **changes):
        return self._update('parking_spots', spot_id, **changes)

    def claim_parking_spot(self, spot_id):
        with self._lock:
            spot = self.parking_spots.get(spot_id)
            if spot is None or not spot.is_available:
                return False
            self.parking_spots[spot_id] = replace(spot, is_available=False)
            return True

    # --- reservations ---
    def list_reservations(self, user_id):
        with self._lock:
            return [r for r in self.reservations.values() if r.user_id == user_id]

    def list_open_reservations(self):
        with self._lock:
            return [r for r in self.reservations.values() if r.status in ReservationStatus.OPEN]

    def list_active_reservations_by_lot(self, lot_id):
        with self._lock:
            spot_ids = {s.id for s in self.list_parking_spots(lot_id)}
            return [r for r in self.list_open_reservations() if r.spot_id in spot_ids]

    def get_reservation(self, reservation_id):
        return self.reservations.get(reservation_id)

    def create_reservation(self, user_id, spot_id, vehicle_id, start_time, end_time,
                           status, confirmation_code):
        return self._insert('reservations', Reservation, user_id=user_id, spot_id=spot_id,
                            vehicle_id=vehicle_id, start_time=start_time, end_time=end_time,
                            status=status, confirmation_code=confirmation_code)

    def update_reservation_status(self, reservation_id, status):
        return self._update('reservations', reservation_id, status=status)

    def transition_reservation(self, reservation_id, from_statuses, to_status):
        with self._lock:
            current = self.reservations.get(reservation_id)
            if current is None or current.status not in from_statuses:
                return None
            updated = replace(current, status=to_status)
            self.reservations[reservation_id] = updated
            return updated

    # --- notifications ---
    def list_notifications(self, user_id):
        with self._lock:
            mine = [n for n in self.notifications.values() if n.user_id == user_id]
        return sorted(mine, key=lambda n: (n.created_at, n.id), reverse=True)

    def count_unread_notifications(self, user_id):
        with self._lock:
            return sum(1 for n in self.notifications.values() if n.user_id == user_id and not n.is_read)

    def get_notification(self, notification_id):
        return self.notifications.get(notification_id)

    def create_notification(self, user_id, message, type, created_at, is_read=False):
        return self._insert('notifications', Notification, user_id=user_id, message=message,
                            type=type, created_at=created_at, is_read=is_read)

    def mark_notification_as_read(self, notification_id):
        return self._update('notifications', notification_id, is_read=True)
