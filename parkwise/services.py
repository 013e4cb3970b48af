from dataclasses import dataclass

from flask import current_app

from parkwise.credentials import CredentialVerifier, make_verifier
from parkwise.db_storage import DatabaseStorage
from parkwise.notifications import NotificationEmitter
from parkwise.reservations import ReservationManager
from parkwise.storage import MemoryStorage, Storage

EXTENSION_KEY = 'parkwise'


@dataclass
class Services:
    """Everything a request handler needs, built once per app."""

    storage: Storage
    credentials: CredentialVerifier
    notifications: NotificationEmitter
    reservations: ReservationManager


def make_storage(backend):
    if backend == 'sql':
        return DatabaseStorage()
    if backend == 'memory':
        return MemoryStorage()
    raise ValueError(f"Unknown STORE_BACKEND {backend!r}; expected 'sql' or 'memory'")


def init_services(app, storage=None):
    storage = storage or make_storage(app.config['STORE_BACKEND'])
    notifications = NotificationEmitter(storage, send_mail=app.config['MAIL_NOTIFICATIONS'])
    services = Services(
        storage=storage,
        credentials=make_verifier(app.config['PASSWORD_SCHEME']),
        notifications=notifications,
        reservations=ReservationManager(storage, notifications),
    )
    app.extensions[EXTENSION_KEY] = services
    return services


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]
