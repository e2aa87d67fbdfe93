"""FastAPI routes for the caller's notification inbox."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from partstore.api.auth import current_principal
from partstore.api.envelope import ok, paginated
from partstore.notifications.inbox import MarkAllNotificationsRead, MarkNotificationRead, PurgeExpiredNotifications
from partstore.notifications.notification import RecipientKind
from partstore.notifications.queries import inbox

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


def _kind(principal) -> str:
    return RecipientKind.ADMIN.value if principal.is_admin else RecipientKind.USER.value


@router.get("")
async def list_notifications(page: int = 1, limit: int = 20, principal=Depends(current_principal)):
    current_domain.process(PurgeExpiredNotifications(), asynchronous=False)
    result, unread_count = inbox(principal.id, _kind(principal), page=page, limit=limit)
    return paginated(
        "Notifications fetched",
        "notifications",
        [n.to_dict() for n in result.items],
        result,
        unread_count=unread_count,
    )


@router.put("/read-all")
async def mark_all_read(principal=Depends(current_principal)):
    marked = current_domain.process(
        MarkAllNotificationsRead(recipient_id=principal.id, recipient_kind=_kind(principal)),
        asynchronous=False,
    )
    return ok("All notifications marked as read", {"marked": marked})


@router.put("/{notification_id}/read")
async def mark_read(notification_id: str, principal=Depends(current_principal)):
    current_domain.process(
        MarkNotificationRead(
            notification_id=notification_id,
            recipient_id=principal.id,
            recipient_kind=_kind(principal),
        ),
        asynchronous=False,
    )
    return ok("Marked as read")
