"""Recipient-side notification commands: mark read and purge."""

from datetime import UTC, datetime

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from partstore import config
from partstore.domain import partstore
from partstore.notifications.notification import Notification, RecipientKind
from partstore.shared.queries import fetch_all

logger = structlog.get_logger(__name__)


@partstore.command(part_of="Notification")
class MarkNotificationRead:
    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    recipient_kind: String(choices=RecipientKind, default=RecipientKind.USER.value)


@partstore.command(part_of="Notification")
class MarkAllNotificationsRead:
    recipient_id: Identifier(required=True)
    recipient_kind: String(choices=RecipientKind, default=RecipientKind.USER.value)


@partstore.command(part_of="Notification")
class PurgeExpiredNotifications:
    """Delete read notifications whose retention period has passed."""

    as_of: DateTime()  # Defaults to now


@partstore.command_handler(part_of=Notification)
class InboxHandler:
    @handle(MarkNotificationRead)
    def mark_read(self, command: MarkNotificationRead):
        repo = current_domain.repository_for(Notification)
        notification = repo.get(command.notification_id)
        # Someone else's notification is reported as missing
        if not notification.belongs_to(command.recipient_id, command.recipient_kind):
            raise ObjectNotFoundError("Notification not found")

        notification.mark_read(config.notification_retention_days())
        repo.add(notification)
        return str(notification.id)

    @handle(MarkAllNotificationsRead)
    def mark_all_read(self, command: MarkAllNotificationsRead):
        repo = current_domain.repository_for(Notification)
        unread = fetch_all(
            Notification,
            recipient_id=str(command.recipient_id),
            recipient_kind=command.recipient_kind,
            is_read=False,
        )
        now = datetime.now(UTC)
        retention = config.notification_retention_days()
        for notification in unread:
            notification.mark_read(retention, now=now)
            repo.add(notification)
        return len(unread)

    @handle(PurgeExpiredNotifications)
    def purge_expired(self, command: PurgeExpiredNotifications):
        as_of = command.as_of or datetime.now(UTC)
        repo = current_domain.repository_for(Notification)

        purged = 0
        for notification in fetch_all(Notification, is_read=True):
            if notification.is_expired(as_of):
                repo._dao.delete(notification)
                purged += 1

        if purged:
            logger.info("notifications_purged", purged=purged, as_of=str(as_of))
        return purged
