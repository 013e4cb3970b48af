import logging

from flask_mail import Message

from parkwise.errors import ForbiddenError, NotFoundError, ValidationError
from parkwise.extensions import mail
from parkwise.records import NotificationType, utcnow

logger = logging.getLogger(__name__)

SUBJECTS = {
    NotificationType.SUCCESS: 'ParkWise: confirmed',
    NotificationType.INFO: 'ParkWise: update',
    NotificationType.WARNING: 'ParkWise: heads up',
    NotificationType.ERROR: 'ParkWise: problem with your reservation',
}


class NotificationEmitter:
    """Appends notification rows and, if enabled, mails a copy to the user."""

    def __init__(self, storage, clock=utcnow, send_mail=False):
        self.storage = storage
        self.clock = clock
        self.send_mail = send_mail

    def emit(self, user_id, message, type=NotificationType.INFO):
        if type not in NotificationType.ALL:
            raise ValidationError(f"Invalid notification type '{type}'")

        notification = self.storage.create_notification(
            user_id=user_id, message=message, type=type, created_at=self.clock())
        logger.debug("Notification %s (%s) for user %s", notification.id, type, user_id)

        if self.send_mail:
            self._mail(notification)
        return notification

    def _mail(self, notification):
        user = self.storage.get_user(notification.user_id)
        if user is None or not user.email:
            return
        try:
            msg = Message(SUBJECTS[notification.type], recipients=[user.email])
            msg.body = f"Hello {user.full_name},\n\n{notification.message}\n\nParkWise"
            mail.send(msg)
            logger.info("Notification e-mail sent to %s", user.email)
        except Exception as e:
            # the notification row is already stored; mail is best effort
            logger.warning("Notification e-mail to %s failed: %s", user.email, e)

    def list_for_user(self, user_id):
        return self.storage.list_notifications(user_id)

    def unread_count(self, user_id):
        return self.storage.count_unread_notifications(user_id)

    def mark_read(self, notification_id, user_id):
        notification = self.storage.get_notification(notification_id)
        if notification is None:
            raise NotFoundError('Notification not found')
        if notification.user_id != user_id:
            raise ForbiddenError("You cannot update notifications you don't own")
        return self.storage.mark_notification_as_read(notification_id)

