"""Entity store backed by the Flask-SQLAlchemy tables in :mod:`parkwise.models`.

Every write commits immediately and rolls back on failure, the same
one-operation-one-commit rhythm the blueprints used to follow inline.
"""
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError

from parkwise import models, records
from parkwise.errors import DuplicateUsernameError
from parkwise.extensions import db
from parkwise.records import ReservationStatus
from parkwise.storage import Storage


def _user(row):
    return records.User(id=row.id, username=row.username, password=row.password,
                        full_name=row.full_name, email=row.email)


def _lot(row):
    return records.ParkingLot(id=row.id, name=row.name, description=row.description,
                              total_spots=row.total_spots, latitude=row.latitude,
                              longitude=row.longitude)


def _spot(row):
    return records.ParkingSpot(id=row.id, lot_id=row.lot_id, spot_number=row.spot_number,
                               type=row.type, is_available=row.is_available)


def _vehicle(row):
    return records.Vehicle(id=row.id, user_id=row.user_id, make=row.make, model=row.model,
                           license_plate=row.license_plate, state=row.state)


def _reservation(row):
    return records.Reservation(id=row.id, user_id=row.user_id, spot_id=row.spot_id,
                               vehicle_id=row.vehicle_id, start_time=row.start_time,
                               end_time=row.end_time, status=row.status,
                               confirmation_code=row.confirmation_code)


def _notification(row):
    return records.Notification(id=row.id, user_id=row.user_id, message=row.message,
                                type=row.type, created_at=row.created_at, is_read=row.is_read)


def _query(model):
    # always reload rows: another session may have changed them since we last looked
    return model.query.populate_existing()


class DatabaseStorage(Storage):

    def _add(self, row, convert):
        try:
            db.session.add(row)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return convert(row)

    def _get(self, model, record_id, convert):
        row = db.session.get(model, record_id, populate_existing=True)
        return convert(row) if row is not None else None

    def _update(self, model, record_id, convert, **changes):
        row = db.session.get(model, record_id, populate_existing=True)
        if row is None:
            return None
        for key, value in changes.items():
            if not hasattr(model, key):
                raise TypeError(f"{model.__name__} has no field {key!r}")
            setattr(row, key, value)
        try:
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return convert(row)

    # --- users ---
    def get_user(self, user_id):
        return self._get(models.User, user_id, _user)

    def get_user_by_username(self, username):
        row = _query(models.User).filter_by(username=username).first()
        return _user(row) if row else None

    def create_user(self, username, password, full_name, email):
        if _query(models.User).filter_by(username=username).first():
            raise DuplicateUsernameError(username)
        try:
            return self._add(models.User(username=username, password=password,
                                         full_name=full_name, email=email), _user)
        except IntegrityError:
            # lost a race with another registration for the same name
            raise DuplicateUsernameError(username)

    # --- parking lots ---
    def list_parking_lots(self):
        return [_lot(row) for row in _query(models.ParkingLot).order_by(models.ParkingLot.id).all()]

    def get_parking_lot(self, lot_id):
        return self._get(models.ParkingLot, lot_id, _lot)

    def create_parking_lot(self, name, description, total_spots, latitude, longitude):
        return self._add(models.ParkingLot(name=name, description=description,
                                           total_spots=total_spots, latitude=latitude,
                                           longitude=longitude), _lot)

    # --- vehicles ---
    def list_vehicles(self, user_id):
        rows = _query(models.Vehicle).filter_by(user_id=user_id).order_by(models.Vehicle.id).all()
        return [_vehicle(row) for row in rows]

    def get_vehicle(self, vehicle_id):
        return self._get(models.Vehicle, vehicle_id, _vehicle)

    def create_vehicle(self, user_id, make, model, license_plate, state):
        return self._add(models.Vehicle(user_id=user_id, make=make, model=model,
                                        license_plate=license_plate, state=state), _vehicle)

    # --- parking spots ---
    def list_parking_spots(self, lot_id):
        rows = _query(models.ParkingSpot).filter_by(lot_id=lot_id).order_by(models.ParkingSpot.id).all()
        return [_spot(row) for row in rows]

    def get_parking_spot(self, spot_id):
        return self._get(models.ParkingSpot, spot_id, _spot)

    def create_parking_spot(self, lot_id, spot_number, type, is_available=True):
        return self._add(models.ParkingSpot(lot_id=lot_id, spot_number=spot_number, type=type,
                                            is_available=is_available), _spot)

    def update_parking_spot(self, spot_id, **changes):
        return self._update(models.ParkingSpot, spot_id, _spot, **changes)

    def claim_parking_spot(self, spot_id):
        # single conditional UPDATE: only one caller can see rowcount == 1
        stmt = (
            update(models.ParkingSpot)
            .where(models.ParkingSpot.id == spot_id, models.ParkingSpot.is_available.is_(True))
            .values(is_available=False)
            .execution_options(synchronize_session=False)
        )
        try:
            claimed = db.session.execute(stmt).rowcount == 1
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        # drop any cached copy of the spot so later reads see the new flag
        db.session.expire_all()
        return claimed

    # --- reservations ---
    def list_reservations(self, user_id):
        rows = _query(models.Reservation).filter_by(user_id=user_id).order_by(models.Reservation.id).all()
        return [_reservation(row) for row in rows]

    def list_open_reservations(self):
        rows = (_query(models.Reservation)
                .filter(models.Reservation.status.in_(ReservationStatus.OPEN))
                .order_by(models.Reservation.id).all())
        return [_reservation(row) for row in rows]

    def list_active_reservations_by_lot(self, lot_id):
        lot_spots = select(models.ParkingSpot.id).where(models.ParkingSpot.lot_id == lot_id)
        rows = (_query(models.Reservation)
                .filter(models.Reservation.status.in_(ReservationStatus.OPEN),
                        models.Reservation.spot_id.in_(lot_spots))
                .order_by(models.Reservation.id).all())
        return [_reservation(row) for row in rows]

    def get_reservation(self, reservation_id):
        return self._get(models.Reservation, reservation_id, _reservation)

    def create_reservation(self, user_id, spot_id, vehicle_id, start_time, end_time,
                           status, confirmation_code):
        return self._add(models.Reservation(user_id=user_id, spot_id=spot_id,
                                            vehicle_id=vehicle_id, start_time=start_time,
                                            end_time=end_time, status=status,
                                            confirmation_code=confirmation_code), _reservation)

    def update_reservation_status(self, reservation_id, status):
        return self._update(models.Reservation, reservation_id, _reservation, status=status)

    def transition_reservation(self, reservation_id, from_statuses, to_status):
        stmt = (
            update(models.Reservation)
            .where(models.Reservation.id == reservation_id,
                   models.Reservation.status.in_(list(from_statuses)))
            .values(status=to_status)
            .execution_options(synchronize_session=False)
        )
        try:
            moved = db.session.execute(stmt).rowcount == 1
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        db.session.expire_all()
        return self.get_reservation(reservation_id) if moved else None

    # --- notifications ---
    def list_notifications(self, user_id):
        rows = (_query(models.Notification).filter_by(user_id=user_id)
                .order_by(models.Notification.created_at.desc(), models.Notification.id.desc())
                .all())
        return [_notification(row) for row in rows]

    def count_unread_notifications(self, user_id):
        return db.session.scalar(
            select(func.count(models.Notification.id))
            .where(models.Notification.user_id == user_id, models.Notification.is_read.is_(False))
        ) or 0

    def get_notification(self, notification_id):
        return self._get(models.Notification, notification_id, _notification)

    def create_notification(self, user_id, message, type, created_at, is_read=False):
        return self._add(models.Notification(user_id=user_id, message=message, type=type,
                                             created_at=created_at, is_read=is_read), _notification)

    def mark_notification_as_read(self, notification_id):
        return self._update(models.Notification, notification_id, _notification, is_read=True)
