"""Configurable fake payment gateway for development and testing.

No network calls are made. Order and refund ids are random and every call is
recorded on ``calls`` so tests can assert on what the application asked for.
"""

from uuid import uuid4

from partstore.payments.gateway.port import GatewayCall, GatewayOrder, PaymentGateway, RefundResult


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Refund declined"
        self.calls: list[GatewayCall] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Refund declined") -> None:
        """Configure refund behaviour at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def calls_to(self, method: str) -> list[GatewayCall]:
        return [call for call in self.calls if call.method == method]

    def create_order(self, amount, currency, receipt, notes=None) -> GatewayOrder:
        self.calls.append(
            GatewayCall(
                "create_order",
                {"amount": amount, "currency": currency, "receipt": receipt, "notes": dict(notes or {})},
            )
        )
        return GatewayOrder(id=f"order_fake_{uuid4().hex[:14]}", amount=amount, currency=currency, receipt=receipt)

    def create_refund(self, gateway_payment_id, amount, reason) -> RefundResult:
        self.calls.append(
            GatewayCall(
                "create_refund",
                {"gateway_payment_id": gateway_payment_id, "amount": amount, "reason": reason},
            )
        )

        if self.should_succeed:
            return RefundResult(
                success=True,
                gateway_refund_id=f"rfnd_fake_{uuid4().hex[:14]}",
                gateway_status="processed",
            )
        return RefundResult(success=False, gateway_status="failed", failure_reason=self.failure_reason)
