"""Tests for the Notification aggregate and its typed payloads."""

from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError

from partstore.notifications.notification import Notification, NotificationType, Priority, RecipientKind
from partstore.notifications.payloads import PAYLOAD_TYPES, validate_payload


def _make_notification(**overrides):
    fields = {
        "recipient_id": "cust-001",
        "recipient_kind": RecipientKind.USER.value,
        "notification_type": NotificationType.ORDER_PLACED.value,
        "title": "Order placed",
        "message": "Your order ORD1 has been placed.",
        "payload": {"order_id": "ord-1", "order_number": "ORD1", "total_amount": 336.0},
    }
    fields.update(overrides)
    return Notification.create(**fields)


class TestPayloads:
    def test_every_type_has_a_payload_model(self):
        assert set(PAYLOAD_TYPES) == {t.value for t in NotificationType}

    def test_drops_unset_optionals(self):
        assert validate_payload("order_placed", {"order_id": "o1", "order_number": "N1"}) == {
            "order_id": "o1",
            "order_number": "N1",
        }

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValidationError) as exc:
            validate_payload("low_stock", {"product_id": "p1", "part_number": "X", "stock": 2, "colour": "red"})
        assert "payload" in exc.value.messages

    def test_missing_required_key_rejected(self):
        with pytest.raises(ValidationError):
            validate_payload("payment_failed", {"order_id": "o1"})

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            validate_payload("party", {})

    def test_general_takes_no_data(self):
        assert validate_payload("general", None) == {}


class TestCreate:
    def test_starts_unread(self):
        notification = _make_notification()
        assert notification.is_read is False
        assert notification.read_at is None
        assert notification.expires_at is None
        assert notification.priority == Priority.MEDIUM.value

    def test_payload_is_stored_as_json(self):
        notification = _make_notification()
        assert notification.payload_data == {"order_id": "ord-1", "order_number": "ORD1", "total_amount": 336.0}

    def test_bad_payload_rejected(self):
        with pytest.raises(ValidationError):
            _make_notification(payload={"product_id": "p1"})

    def test_belongs_to(self):
        notification = _make_notification()
        assert notification.belongs_to("cust-001", "User")
        assert not notification.belongs_to("cust-001", "Admin")
        assert not notification.belongs_to("cust-002", "User")


class TestMarkRead:
    def test_sets_retention_window(self):
        notification = _make_notification()
        now = datetime(2026, 3, 1, tzinfo=UTC)
        notification.mark_read(30, now=now)
        assert notification.is_read is True
        assert notification.read_at == now
        assert notification.expires_at == now + timedelta(days=30)

    def test_idempotent(self):
        notification = _make_notification()
        first = datetime(2026, 3, 1, tzinfo=UTC)
        notification.mark_read(30, now=first)
        notification.mark_read(30, now=first + timedelta(days=5))
        assert notification.read_at == first
        assert notification.expires_at == first + timedelta(days=30)


class TestExpiry:
    def test_unread_never_expires(self):
        assert _make_notification().is_expired(datetime.now(UTC) + timedelta(days=365)) is False

    def test_expired_after_retention(self):
        notification = _make_notification()
        now = datetime(2026, 3, 1, tzinfo=UTC)
        notification.mark_read(30, now=now)
        assert notification.is_expired(now + timedelta(days=29)) is False
        assert notification.is_expired(now + timedelta(days=30)) is True

    def test_naive_comparison(self):
        notification = _make_notification()
        notification.mark_read(1, now=datetime(2026, 3, 1, tzinfo=UTC))
        assert notification.is_expired(datetime(2026, 3, 5)) is True


class TestToDict:
    def test_wire_shape(self):
        data = _make_notification().to_dict()
        assert data["type"] == "order_placed"
        assert data["data"]["order_number"] == "ORD1"
        assert data["recipient_kind"] == "User"
        assert data["is_read"] is False
        assert data["created_at"] is not None
