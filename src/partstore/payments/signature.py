"""Gateway checkout signatures.

The gateway signs ``"{gateway_order_id}|{gateway_payment_id}"`` with the
merchant secret using HMAC-SHA256 and hands the hex digest to the browser.
"""

import hashlib
import hmac

from partstore import config


def compute_signature(gateway_order_id: str, gateway_payment_id: str, secret: str | None = None) -> str:
    key = (secret if secret is not None else config.payment_gateway_secret()).encode()
    message = f"{gateway_order_id}|{gateway_payment_id}".encode()
    return hmac.new(key, message, hashlib.sha256).hexdigest()


def signature_matches(gateway_order_id, gateway_payment_id, signature, secret=None) -> bool:
    """Constant-time comparison; an unconfigured secret never matches."""
    secret = secret if secret is not None else config.payment_gateway_secret()
    if not secret or not signature:
        return False
    expected = compute_signature(gateway_order_id, gateway_payment_id, secret)
    return hmac.compare_digest(expected.encode(), signature.encode("utf-8"))
