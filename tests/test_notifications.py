import pytest

from conftest import NOW
from parkwise.errors import ForbiddenError, NotFoundError, ValidationError
from parkwise.extensions import mail
from parkwise.notifications import NotificationEmitter


@pytest.fixture
def notifier(storage):
    return NotificationEmitter(storage, clock=lambda: NOW)


def test_emit_appends_unread_record(notifier, storage, campus):
    notification = notifier.emit(campus.alice.id, 'Hello', 'warning')

    assert notification.created_at == NOW
    assert notification.is_read is False
    assert storage.list_notifications(campus.alice.id) == [notification]
    assert notifier.unread_count(campus.alice.id) == 1


def test_emit_does_not_dedupe(notifier, campus):
    notifier.emit(campus.alice.id, 'Same', 'info')
    notifier.emit(campus.alice.id, 'Same', 'info')
    assert len(notifier.list_for_user(campus.alice.id)) == 2


def test_emit_rejects_unknown_type(notifier, campus):
    with pytest.raises(ValidationError):
        notifier.emit(campus.alice.id, 'Hello', 'urgent')


def test_mark_read_requires_owner(notifier, campus):
    notification = notifier.emit(campus.alice.id, 'Hello')

    with pytest.raises(ForbiddenError):
        notifier.mark_read(notification.id, campus.bob.id)
    with pytest.raises(NotFoundError):
        notifier.mark_read(999, campus.alice.id)

    assert notifier.mark_read(notification.id, campus.alice.id).is_read is True
    assert notifier.unread_count(campus.alice.id) == 0


def test_mail_copy_when_enabled(storage, campus):
    notifier = NotificationEmitter(storage, clock=lambda: NOW, send_mail=True)

    with mail.record_messages() as outbox:
        notifier.emit(campus.alice.id, 'Your reservation has been cancelled successfully.', 'info')

    [message] = outbox
    assert message.recipients == ['alice@stevens.edu']
    assert 'Your reservation has been cancelled successfully.' in message.body
    assert 'Alice Smith' in message.body


def test_mail_failure_keeps_the_notification(storage, campus, monkeypatch):
    notifier = NotificationEmitter(storage, clock=lambda: NOW, send_mail=True)

    def refuse(message):
        raise ConnectionRefusedError('smtp down')

    monkeypatch.setattr(mail, 'send', refuse)

    notification = notifier.emit(campus.alice.id, 'Hello', 'info')
    assert storage.get_notification(notification.id) == notification
