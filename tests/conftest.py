from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from parkwise import create_app
from parkwise.config import TestConfig
from parkwise.extensions import db
from parkwise.notifications import NotificationEmitter
from parkwise.reservations import ReservationManager

NOW = datetime(2026, 10, 19, 12, 0, 0)
PASSWORD = 'secret123'


def iso(value):
    return value.isoformat() + 'Z'


@pytest.fixture(params=['sql', 'memory'])
def app(request):
    class Config(TestConfig):
        STORE_BACKEND = request.param

    app = create_app(Config)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def services(app):
    services = app.extensions['parkwise']
    # freeze time for everything that stamps or compares against "now"
    services.reservations.clock = lambda: NOW
    services.notifications.clock = lambda: NOW
    return services


@pytest.fixture
def storage(services):
    return services.storage


@pytest.fixture
def manager(storage):
    notifier = NotificationEmitter(storage, clock=lambda: NOW)
    return ReservationManager(storage, notifier, clock=lambda: NOW)


@pytest.fixture
def campus(services):
    storage = services.storage
    alice = storage.create_user('alice', services.credentials.hash(PASSWORD), 'Alice Smith', 'alice@stevens.edu')
    bob = storage.create_user('bob', services.credentials.hash(PASSWORD), 'Bob Jones', 'bob@stevens.edu')

    west = storage.create_parking_lot('West Lot', 'Located near the Babbio Center', 45,
                                      '40.745262', '-74.025506')
    north = storage.create_parking_lot('North Lot', 'Located near the Howe Center', 30,
                                       '40.746782', '-74.024098')

    a1 = storage.create_parking_spot(west.id, 'A1', 'regular', True)
    a2 = storage.create_parking_spot(west.id, 'A2', 'student', True)
    a3 = storage.create_parking_spot(west.id, 'A3', 'student', False)
    a4 = storage.create_parking_spot(west.id, 'A4', 'faculty', True)
    n1 = storage.create_parking_spot(north.id, 'A1', 'regular', True)

    civic = storage.create_vehicle(alice.id, 'Honda', 'Civic', '123-ABC', 'NJ')
    corolla = storage.create_vehicle(bob.id, 'Toyota', 'Corolla', '456-DEF', 'NJ')

    return SimpleNamespace(alice=alice, bob=bob, west=west, north=north,
                           a1=a1, a2=a2, a3=a3, a4=a4, n1=n1,
                           civic=civic, corolla=corolla)


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, username, password=PASSWORD):
    response = client.post('/api/auth/login', json={'username': username, 'password': password})
    assert response.status_code == 200, response.get_json()
    return response


@pytest.fixture
def alice_client(client, campus):
    login(client, 'alice')
    return client


@pytest.fixture
def bob_client(app, campus):
    other = app.test_client()
    login(other, 'bob')
    return other


def reservation_payload(spot, vehicle, start=None, end=None):
    start = start or NOW - timedelta(hours=1)
    end = end or NOW + timedelta(hours=3)
    return {'spotId': spot.id, 'vehicleId': vehicle.id, 'startTime': iso(start), 'endTime': iso(end)}
