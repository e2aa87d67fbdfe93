"""Payment aggregate: one record per order tracking what the gateway reported.

State Machine:
    PENDING → COMPLETED → REFUNDED
    PENDING → FAILED → COMPLETED (customer retries and the retry verifies)
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String

from partstore.domain import partstore
from partstore.payments.events import PaymentCompleted, PaymentFailed, PaymentRefunded


class PaymentRecordStatus(Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    FAILED = "Failed"
    REFUNDED = "Refunded"


_VALID_TRANSITIONS = {
    PaymentRecordStatus.PENDING: {PaymentRecordStatus.COMPLETED, PaymentRecordStatus.FAILED},
    PaymentRecordStatus.FAILED: {PaymentRecordStatus.COMPLETED, PaymentRecordStatus.FAILED},
    PaymentRecordStatus.COMPLETED: {PaymentRecordStatus.REFUNDED},
    PaymentRecordStatus.REFUNDED: set(),
}

SIGNATURE_MISMATCH = "Signature verification failed"
DEFAULT_FAILURE_REASON = "Payment failed"


@partstore.aggregate
class Payment:
    order_id = Identifier(required=True, unique=True)
    order_number = String(required=True, max_length=20)
    customer_id = Identifier(required=True)
    amount = Float(required=True, min_value=0.0)
    payment_method = String(required=True, max_length=20)
    status = String(choices=PaymentRecordStatus, default=PaymentRecordStatus.PENDING.value)
    gateway_order_id = String(max_length=100)
    gateway_payment_id = String(max_length=100)
    gateway_signature = String(max_length=256)
    transaction_id = String(max_length=100)
    failure_reason = String(max_length=500)
    paid_at = DateTime()
    refund_id = String(max_length=100)
    refund_amount = Float()
    refunded_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def open_for(cls, order_id, order_number, customer_id, amount, payment_method):
        now = datetime.now(UTC)
        return cls(
            order_id=order_id,
            order_number=order_number,
            customer_id=customer_id,
            amount=amount,
            payment_method=payment_method,
            status=PaymentRecordStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )

    def _assert_can_transition(self, target_status):
        current = PaymentRecordStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    @property
    def amount_in_minor_units(self) -> int:
        return int(round(self.amount * 100))

    def attach_gateway_order(self, gateway_order_id):
        self.gateway_order_id = gateway_order_id
        self.updated_at = datetime.now(UTC)

    def complete(self, gateway_order_id, gateway_payment_id, signature):
        self._assert_can_transition(PaymentRecordStatus.COMPLETED)
        now = datetime.now(UTC)

        self.status = PaymentRecordStatus.COMPLETED.value
        self.gateway_order_id = gateway_order_id
        self.gateway_payment_id = gateway_payment_id
        self.gateway_signature = signature
        self.transaction_id = gateway_payment_id
        self.failure_reason = None
        self.paid_at = now
        self.updated_at = now

        self.raise_(
            PaymentCompleted(
                payment_id=str(self.id),
                order_id=str(self.order_id),
                order_number=self.order_number,
                customer_id=str(self.customer_id),
                amount=self.amount,
                transaction_id=gateway_payment_id,
                paid_at=now,
            )
        )

    def fail(self, reason=None, gateway_payment_id=None, signature=None):
        self._assert_can_transition(PaymentRecordStatus.FAILED)
        now = datetime.now(UTC)

        self.status = PaymentRecordStatus.FAILED.value
        self.failure_reason = reason or DEFAULT_FAILURE_REASON
        if gateway_payment_id:
            self.gateway_payment_id = gateway_payment_id
        if signature:
            self.gateway_signature = signature
        self.updated_at = now

        self.raise_(
            PaymentFailed(
                payment_id=str(self.id),
                order_id=str(self.order_id),
                order_number=self.order_number,
                customer_id=str(self.customer_id),
                amount=self.amount,
                reason=self.failure_reason,
                failed_at=now,
            )
        )

    def record_refund(self, refund_id, amount=None):
        self._assert_can_transition(PaymentRecordStatus.REFUNDED)
        now = datetime.now(UTC)

        self.status = PaymentRecordStatus.REFUNDED.value
        self.refund_id = refund_id
        self.refund_amount = self.amount if amount is None else amount
        self.refunded_at = now
        self.updated_at = now

        self.raise_(
            PaymentRefunded(
                payment_id=str(self.id),
                order_id=str(self.order_id),
                customer_id=str(self.customer_id),
                refund_id=refund_id,
                amount=self.refund_amount,
                refunded_at=now,
            )
        )
