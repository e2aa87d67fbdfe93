"""Notification fan-out: persist, then push in real time.

Nothing here may fail the workflow that asked for a notification. Every
helper logs and swallows its own errors.
"""

import functools

import structlog
from protean.utils.globals import current_domain

from partstore.identity.admin import Admin
from partstore.notifications.notification import Notification, Priority, RecipientKind
from partstore.realtime import get_channel
from partstore.shared.queries import fetch_all

logger = structlog.get_logger(__name__)

NEW_NOTIFICATION = "new_notification"


def fanout_guard(fn):
    """Wrap a `@handle` method so nothing it does, its own commit included,
    reaches the workflow that raised the event."""

    @functools.wraps(fn)
    def wrapper(instance, event):
        try:
            return fn(instance, event)
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "fanout_failed",
                handler=fn.__qualname__,
                event_type=event.__class__.__name__,
                error=str(exc),
            )
            return None

    return wrapper


def push_to_user(user_id, event: str, data: dict) -> None:
    try:
        get_channel().emit_to_user(str(user_id), event, data)
    except Exception as exc:  # noqa: BLE001
        logger.error("push_failed", room=f"user:{user_id}", push_event=event, error=str(exc))


def push_to_admins(event: str, data: dict) -> None:
    try:
        get_channel().emit_to_admins(event, data)
    except Exception as exc:  # noqa: BLE001
        logger.error("push_failed", room="admins", push_event=event, error=str(exc))


def notify(
    recipient_id,
    notification_type: str,
    title: str,
    message: str,
    payload: dict | None = None,
    priority: str = Priority.MEDIUM.value,
    recipient_kind: str = RecipientKind.USER.value,
):
    """Persist a notification for one recipient and push it to them."""
    try:
        notification = Notification.create(
            recipient_id=str(recipient_id),
            recipient_kind=recipient_kind,
            notification_type=notification_type,
            title=title,
            message=message,
            payload=payload,
            priority=priority,
        )
        current_domain.repository_for(Notification).add(notification)
    except Exception as exc:  # noqa: BLE001
        logger.error(
            "notification_failed",
            recipient_id=str(recipient_id),
            notification_type=notification_type,
            error=str(exc),
        )
        return None

    if recipient_kind == RecipientKind.ADMIN.value:
        push_to_admins(NEW_NOTIFICATION, notification.to_dict())
    else:
        push_to_user(recipient_id, NEW_NOTIFICATION, notification.to_dict())
    return notification


def notify_admins(notification_type, title, message, payload=None, priority=Priority.MEDIUM.value) -> list:
    """One stored notification per active admin, one push to the admin group."""
    try:
        admins = [admin for admin in fetch_all(Admin) if admin.is_active]
    except Exception as exc:  # noqa: BLE001
        logger.error("notification_failed", recipient_kind="Admin", notification_type=notification_type, error=str(exc))
        return []

    created = []
    for admin in admins:
        try:
            notification = Notification.create(
                recipient_id=str(admin.id),
                recipient_kind=RecipientKind.ADMIN.value,
                notification_type=notification_type,
                title=title,
                message=message,
                payload=payload,
                priority=priority,
            )
            current_domain.repository_for(Notification).add(notification)
            created.append(notification)
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "notification_failed",
                recipient_id=str(admin.id),
                notification_type=notification_type,
                error=str(exc),
            )

    if created:
        message_data = created[0].to_dict()
        message_data.pop("recipient_id")
        push_to_admins(NEW_NOTIFICATION, message_data)
    return created
