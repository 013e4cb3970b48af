import logging
import math
import random
from datetime import datetime, timedelta

from parkwise.records import NotificationType, SpotType

logger = logging.getLogger(__name__)

DEMO_USER = {
    'username': 'demo_user',
    'password': 'password123',
    'full_name': 'Alex Johnson',
    'email': 'alex.johnson@stevens.edu',
}

LOTS = [
    ("West Lot", "Located near the Babbio Center", 45, "40.745262", "-74.025506"),
    ("North Lot", "Located near the Howe Center", 30, "40.746782", "-74.024098"),
    ("South Garage", "Located near the Student Center", 75, "40.744213", "-74.024751"),
]

DEMO_VEHICLES = [
    ("Honda", "Civic", "123-ABC", "NJ"),
    ("Toyota", "Corolla", "456-DEF", "NJ"),
]

# the first few spots of every lot are kept open for students
STUDENT_SPOTS_PER_LOT = 5


def spot_number(i):
    """1 -> A1, 10 -> A10, 11 -> B1 ..."""
    row = chr(64 + math.ceil(i / 10))
    return f"{row}{i % 10 or 10}"


def seed_demo_data(services, seed=None, now=None):
    """Fill an empty store with the demo campus. Returns False if already seeded."""
    storage = services.storage
    if storage.get_user_by_username(DEMO_USER['username']) is not None:
        logger.info("Demo data already present, skipping")
        return False

    rng = random.Random(seed)
    now = now or services.reservations.clock()

    user = storage.create_user(
        username=DEMO_USER['username'],
        password=services.credentials.hash(DEMO_USER['password']),
        full_name=DEMO_USER['full_name'],
        email=DEMO_USER['email'],
    )

    # handicap spots are not handed out at random
    random_types = [SpotType.REGULAR, SpotType.STUDENT, SpotType.FACULTY]
    lots = []
    for name, description, total, lat, lng in LOTS:
        lot = storage.create_parking_lot(name, description, total, lat, lng)
        lots.append(lot)
        for i in range(1, total + 1):
            if i <= STUDENT_SPOTS_PER_LOT:
                spot_type, available = SpotType.STUDENT, True
            else:
                spot_type, available = rng.choice(random_types), rng.random() > 0.3
            storage.create_parking_spot(lot.id, spot_number(i), spot_type, available)
        logger.info("Created parking lot %s with %d spots", lot.name, total)

    vehicles = [storage.create_vehicle(user.id, make, model, plate, state)
                for make, model, plate, state in DEMO_VEHICLES]

    # one reservation running now in South Garage, one tomorrow morning in North Lot
    today = datetime(now.year, now.month, now.day)
    plans = [
        (lots[2], vehicles[0], now - timedelta(hours=1), now + timedelta(hours=3)),
        (lots[1], vehicles[1], today + timedelta(days=1, hours=8), today + timedelta(days=1, hours=12)),
    ]
    for lot, vehicle, start, end in plans:
        spot = next(s for s in storage.list_parking_spots(lot.id) if s.is_available)
        services.reservations.create(user.id, spot.id, vehicle.id, start, end)

    services.notifications.emit(
        user.id,
        "Your parking reservation at North Lot begins tomorrow. "
        "Don't forget to check in upon arrival.",
        NotificationType.INFO,
    )
    logger.info("Seeded demo user %s", user.username)
    return True
