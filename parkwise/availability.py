from parkwise.errors import ValidationError
from parkwise.records import SpotType


def count_available(spots):
    return sum(1 for spot in spots if spot.is_available)


def _with_counts(lot, spots):
    payload = lot.to_dict()
    payload['availableSpots'] = count_available(spots)
    payload['totalSpots'] = lot.total_spots
    return payload


def lot_availability(storage, lot):
    """Lot payload with a freshly counted ``availableSpots``."""
    return _with_counts(lot, storage.list_parking_spots(lot.id))


def lot_detail(storage, lot):
    spots = storage.list_parking_spots(lot.id)
    payload = _with_counts(lot, spots)
    payload['spots'] = [spot.to_dict() for spot in sorted(spots, key=lambda s: s.id)]
    return payload


def spots_by_type(storage, lot_id, spot_type):
    """Available spots of one type in a lot, plus how many of that type exist."""
    if spot_type not in SpotType.ALL:
        raise ValidationError(f"Invalid spot type '{spot_type}'",
                              errors={'type': f"must be one of {', '.join(SpotType.ALL)}"})

    of_type = [s for s in storage.list_parking_spots(lot_id) if s.type == spot_type]
    available = [s for s in of_type if s.is_available]
    return {
        'lotId': lot_id,
        'type': spot_type,
        'availableSpots': [s.to_dict() for s in available],
        'totalTypeSpots': len(of_type),
        'hasAvailableSpots': bool(available),
    }
