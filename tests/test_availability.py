import pytest

from parkwise.availability import lot_availability, lot_detail, spots_by_type
from parkwise.errors import ValidationError


def test_available_count_follows_spot_flags(storage, campus):
    payload = lot_availability(storage, campus.west)
    assert payload['availableSpots'] == 3
    assert payload['totalSpots'] == 45
    assert payload['name'] == 'West Lot'

    storage.update_parking_spot_availability(campus.a1.id, False)
    # recomputed on every call
    assert lot_availability(storage, campus.west)['availableSpots'] == 2


def test_lot_detail_lists_every_spot(storage, campus):
    payload = lot_detail(storage, campus.west)
    assert [s['spotNumber'] for s in payload['spots']] == ['A1', 'A2', 'A3', 'A4']
    assert payload['availableSpots'] == sum(s['isAvailable'] for s in payload['spots'])


def test_spots_by_type(storage, campus):
    student = spots_by_type(storage, campus.west.id, 'student')
    assert [s['spotNumber'] for s in student['availableSpots']] == ['A2']
    assert student['totalTypeSpots'] == 2
    assert student['hasAvailableSpots'] is True

    handicap = spots_by_type(storage, campus.west.id, 'handicap')
    assert handicap == {'lotId': campus.west.id, 'type': 'handicap', 'availableSpots': [],
                        'totalTypeSpots': 0, 'hasAvailableSpots': False}


def test_spots_by_unknown_type(storage, campus):
    with pytest.raises(ValidationError):
        spots_by_type(storage, campus.west.id, 'vip')
