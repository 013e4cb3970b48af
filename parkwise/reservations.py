"""Reservation lifecycle: create, cancel and the time-based status sweep.

Status moves ``upcoming -> active -> completed``; ``cancelled`` can be
reached from either open state. While a reservation is open its spot is
unavailable, and leaving the open states gives the spot back.
"""
import logging

from parkwise.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from parkwise.records import NotificationType, ReservationStatus, to_utc, utcnow

logger = logging.getLogger(__name__)

TRANSITIONS = {
    ReservationStatus.UPCOMING: {ReservationStatus.ACTIVE, ReservationStatus.CANCELLED,
                                 ReservationStatus.COMPLETED},
    ReservationStatus.ACTIVE: {ReservationStatus.COMPLETED, ReservationStatus.CANCELLED},
    ReservationStatus.COMPLETED: set(),
    ReservationStatus.CANCELLED: set(),
}


def sources_of(status):
    """Statuses a reservation may be in to move to ``status``."""
    return {source for source, targets in TRANSITIONS.items() if status in targets}


def confirmation_code(created_at, spot_number):
    return f"PW-{created_at.date().isoformat()}-{spot_number}"


def initial_status(start_time, now):
    return ReservationStatus.ACTIVE if start_time <= now else ReservationStatus.UPCOMING


def clock_time(value):
    # e.g. 04:00 PM
    return value.strftime('%I:%M %p')


class ReservationManager:

    def __init__(self, storage, notifier, clock=utcnow):
        self.storage = storage
        self.notifier = notifier
        self.clock = clock

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------
    def expand(self, reservation):
        """Reservation payload joined with its spot, lot and vehicle."""
        spot = self.storage.get_parking_spot(reservation.spot_id)
        lot = self.storage.get_parking_lot(spot.lot_id) if spot else None
        vehicle = self.storage.get_vehicle(reservation.vehicle_id)

        payload = reservation.to_dict()
        payload['spot'] = spot.to_dict() if spot else None
        payload['lot'] = lot.to_dict() if lot else None
        payload['vehicle'] = vehicle.to_dict() if vehicle else None
        return payload

    def list_for_user(self, user_id):
        return [self.expand(r) for r in self.storage.list_reservations(user_id)]

    # ------------------------------------------------------------------
    # commands
    # ------------------------------------------------------------------
    def create(self, user_id, spot_id, vehicle_id, start_time, end_time):
        start_time, end_time = to_utc(start_time), to_utc(end_time)
        if end_time <= start_time:
            raise ValidationError('End time must be after start time',
                                  errors={'endTime': 'must be after startTime'})

        spot = self.storage.get_parking_spot(spot_id)
        if spot is None:
            raise NotFoundError('Parking spot not found')
        if not spot.is_available:
            raise ConflictError('Parking spot is not available')

        vehicle = self.storage.get_vehicle(vehicle_id)
        if vehicle is None:
            raise NotFoundError('Vehicle not found')
        if vehicle.user_id != user_id:
            raise ForbiddenError('Vehicle does not belong to you')

        # someone else may have taken the spot since the read above
        if not self.storage.claim_parking_spot(spot.id):
            logger.info("Lost claim on spot %s for user %s", spot.id, user_id)
            raise ConflictError('Parking spot is not available')

        now = self.clock()
        try:
            reservation = self.storage.create_reservation(
                user_id=user_id,
                spot_id=spot.id,
                vehicle_id=vehicle.id,
                start_time=start_time,
                end_time=end_time,
                status=initial_status(start_time, now),
                confirmation_code=confirmation_code(now, spot.spot_number),
            )
        except Exception:
            self.storage.update_parking_spot_availability(spot.id, True)
            raise

        lot = self.storage.get_parking_lot(spot.lot_id)
        lot_name = lot.name if lot else 'Unknown'
        self.notifier.emit(
            user_id,
            f"Your reservation for {lot_name} has been confirmed from "
            f"{clock_time(start_time)} to {clock_time(end_time)}.",
            NotificationType.SUCCESS,
        )
        logger.info("Reservation %s (%s) created on spot %s, status %s",
                    reservation.id, reservation.confirmation_code, spot.id, reservation.status)
        return self.expand(reservation)

    def cancel(self, reservation_id, user_id):
        reservation = self.storage.get_reservation(reservation_id)
        if reservation is None:
            raise NotFoundError('Reservation not found')
        if reservation.user_id != user_id:
            raise ForbiddenError("You cannot cancel reservations you don't own")
        if not reservation.is_open:
            raise ConflictError(f"Reservation is already {reservation.status}")

        updated = self._close(reservation, ReservationStatus.CANCELLED)
        self.notifier.emit(user_id, 'Your reservation has been cancelled successfully.',
                           NotificationType.INFO)
        logger.info("Reservation %s cancelled, spot %s released", reservation.id, reservation.spot_id)
        return updated

    def sweep(self, now=None):
        """Bring open reservations in line with the clock.

        Upcoming reservations whose start has passed become active; open
        reservations whose end has passed become completed and release their
        spot. Returns how many of each happened.
        """
        now = now or self.clock()
        activated = completed = 0

        for reservation in self.storage.list_open_reservations():
            try:
                if reservation.end_time <= now:
                    self._complete(reservation)
                    completed += 1
                elif (reservation.status == ReservationStatus.UPCOMING
                      and reservation.start_time <= now):
                    self._transition(reservation, ReservationStatus.ACTIVE)
                    activated += 1
            except ConflictError as error:
                # cancelled or already swept since the list was read
                logger.info("Sweep skipped reservation %s: %s", reservation.id, error.message)

        if activated or completed:
            logger.info("Sweep: %d activated, %d completed", activated, completed)
        return {'activated': activated, 'completed': completed}

    # ------------------------------------------------------------------
    def _complete(self, reservation):
        self._close(reservation, ReservationStatus.COMPLETED)
        spot = self.storage.get_parking_spot(reservation.spot_id)
        lot = self.storage.get_parking_lot(spot.lot_id) if spot else None
        self.notifier.emit(
            reservation.user_id,
            f"Your reservation at {lot.name if lot else 'your lot'} has ended.",
            NotificationType.INFO,
        )

    def _transition(self, reservation, status):
        if status not in TRANSITIONS[reservation.status]:
            raise ConflictError(f"Reservation is already {reservation.status}")
        # the read above may be stale: only move it if nobody else has
        updated = self.storage.transition_reservation(reservation.id, sources_of(status), status)
        if updated is None:
            current = self.storage.get_reservation(reservation.id)
            if current is None:
                raise NotFoundError('Reservation not found')
            raise ConflictError(f"Reservation is already {current.status}")
        return updated

    def _close(self, reservation, status):
        # only the caller whose transition won gives the spot back
        updated = self._transition(reservation, status)
        self.storage.update_parking_spot_availability(reservation.spot_id, True)
        return updated
