"""Read side for a recipient's notifications."""

from partstore.notifications.notification import Notification
from partstore.shared.queries import Page, fetch_all, newest_first, paginate


def inbox(recipient_id, recipient_kind, page=1, limit=20) -> tuple[Page, int]:
    """A page of notifications, newest first, plus the recipient's unread count."""
    notifications = fetch_all(Notification, recipient_id=str(recipient_id), recipient_kind=recipient_kind)
    unread = sum(1 for n in notifications if not n.is_read)
    return paginate(newest_first(notifications), page, limit), unread
