"""Payment gateway port (abstract interface).

Checkout never talks to the gateway directly: a customer paying online asks
for a gateway order, pays in the browser, and comes back with a signed
payment id. The port covers the two server-side calls that flow needs.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class GatewayOrder:
    """An order opened on the gateway for a given amount in minor units."""

    id: str
    amount: int
    currency: str
    receipt: str | None = None
    status: str = "created"


@dataclass(frozen=True)
class RefundResult:
    """Result of a refund attempt."""

    success: bool
    gateway_refund_id: str | None = None
    gateway_status: str | None = None
    failure_reason: str | None = None


@dataclass
class GatewayCall:
    method: str
    arguments: dict = field(default_factory=dict)


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
        notes: dict | None = None,
    ) -> GatewayOrder:
        """Open an order on the gateway. ``amount`` is in minor units (paise)."""
        ...

    @abstractmethod
    def create_refund(
        self,
        gateway_payment_id: str,
        amount: int,
        reason: str,
    ) -> RefundResult:
        """Refund a captured payment, ``amount`` in minor units."""
        ...
