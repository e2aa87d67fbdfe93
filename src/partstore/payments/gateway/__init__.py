"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway when no gateway credentials are configured (development, tests)
- HttpGateway once PAYMENT_GATEWAY_KEY_ID and PAYMENT_GATEWAY_SECRET are set
"""

from partstore import config
from partstore.payments.gateway.fake_adapter import FakeGateway
from partstore.payments.gateway.http_adapter import HttpGateway
from partstore.payments.gateway.port import PaymentGateway

_current_gateway: PaymentGateway | None = None


def get_gateway() -> PaymentGateway:
    global _current_gateway
    if _current_gateway is None:
        key_id, secret = config.payment_gateway_key_id(), config.payment_gateway_secret()
        if key_id and secret:
            _current_gateway = HttpGateway(config.payment_gateway_url(), key_id, secret)
        else:
            _current_gateway = FakeGateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    global _current_gateway
    _current_gateway = None
