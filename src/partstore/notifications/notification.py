"""Notification aggregate: an in-app message for one customer or admin.

Recipients are a tagged union of ``recipient_kind`` (User or Admin) and
``recipient_id``. Reading a notification starts its retention clock; once
``expires_at`` passes it is eligible for purging.
"""

import json
from datetime import UTC, datetime, timedelta
from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, String, Text

from partstore.domain import partstore
from partstore.notifications.payloads import validate_payload


class RecipientKind(Enum):
    USER = "User"
    ADMIN = "Admin"


class NotificationType(Enum):
    ORDER_PLACED = "order_placed"
    NEW_ORDER = "new_order"
    ORDER_CONFIRMED = "order_confirmed"
    ORDER_PACKED = "order_packed"
    ORDER_SHIPPED = "order_shipped"
    ORDER_DELIVERED = "order_delivered"
    ORDER_CANCELLED = "order_cancelled"
    PAYMENT_SUCCESS = "payment_success"
    PAYMENT_FAILED = "payment_failed"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"
    GENERAL = "general"


class Priority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@partstore.aggregate
class Notification:
    recipient_id: Identifier(required=True)
    recipient_kind: String(choices=RecipientKind, required=True)

    notification_type: String(choices=NotificationType, required=True)
    title: String(required=True, max_length=200)
    message: Text(required=True)
    payload: Text()  # JSON, shape fixed by ``type``
    priority: String(choices=Priority, default=Priority.MEDIUM.value)

    is_read: Boolean(default=False)
    read_at: DateTime()
    expires_at: DateTime()

    created_at: DateTime()

    @classmethod
    def create(
        cls,
        recipient_id,
        recipient_kind,
        notification_type,
        title,
        message,
        payload=None,
        priority=Priority.MEDIUM.value,
    ):
        data = validate_payload(notification_type, payload)
        return cls(
            recipient_id=recipient_id,
            recipient_kind=recipient_kind,
            notification_type=notification_type,
            title=title,
            message=message,
            payload=json.dumps(data),
            priority=priority,
            is_read=False,
            created_at=datetime.now(UTC),
        )

    @property
    def payload_data(self) -> dict:
        return json.loads(self.payload) if self.payload else {}

    def belongs_to(self, recipient_id, recipient_kind) -> bool:
        return str(self.recipient_id) == str(recipient_id) and self.recipient_kind == recipient_kind

    def mark_read(self, retention_days: int, now=None):
        """Idempotent; the first read fixes ``expires_at``."""
        if self.is_read:
            return
        now = now or datetime.now(UTC)
        self.is_read = True
        self.read_at = now
        self.expires_at = now + timedelta(days=retention_days)

    def is_expired(self, as_of: datetime) -> bool:
        if self.expires_at is None:
            return False
        expires = self.expires_at
        if expires.tzinfo is not None and as_of.tzinfo is None:
            expires = expires.replace(tzinfo=None)
        elif expires.tzinfo is None and as_of.tzinfo is not None:
            expires = expires.replace(tzinfo=as_of.tzinfo)
        return expires <= as_of

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "recipient_id": str(self.recipient_id),
            "recipient_kind": self.recipient_kind,
            "type": self.notification_type,
            "title": self.title,
            "message": self.message,
            "data": self.payload_data,
            "priority": self.priority,
            "is_read": self.is_read,
            "read_at": self.read_at.isoformat() if self.read_at else None,
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
