"""Gateway adapter speaking the Razorpay-style REST API over ``requests``.

Orders are opened with ``POST /orders`` and refunds with
``POST /payments/{id}/refund``; both authenticate with HTTP basic auth using
the key id and secret.
"""

import requests
import structlog

from partstore.payments.gateway.port import GatewayOrder, PaymentGateway, RefundResult
from partstore.shared.errors import PaymentGatewayError

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 10


class HttpGateway(PaymentGateway):
    def __init__(self, base_url: str, key_id: str, secret: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.auth = (key_id, secret)

    def _post(self, path: str, payload: dict) -> requests.Response:
        try:
            return self.session.post(f"{self.base_url}{path}", json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("gateway_request_failed", path=path, error=str(exc))
            raise PaymentGatewayError("Payment gateway is unavailable") from exc

    def _json(self, response: requests.Response) -> dict:
        try:
            return response.json()
        except requests.JSONDecodeError as exc:
            logger.error("gateway_response_unreadable", status=response.status_code, body=response.text[:500])
            raise PaymentGatewayError("Payment gateway returned an unreadable response") from exc

    def create_order(self, amount, currency, receipt, notes=None) -> GatewayOrder:
        response = self._post(
            "/orders",
            {"amount": amount, "currency": currency, "receipt": receipt, "notes": notes or {}},
        )
        if response.status_code >= 400:
            logger.error("gateway_order_rejected", status=response.status_code, body=response.text[:500])
            raise PaymentGatewayError("Payment gateway rejected the order")

        body = self._json(response)
        return GatewayOrder(
            id=body["id"],
            amount=body.get("amount", amount),
            currency=body.get("currency", currency),
            receipt=body.get("receipt", receipt),
            status=body.get("status", "created"),
        )

    def create_refund(self, gateway_payment_id, amount, reason) -> RefundResult:
        response = self._post(
            f"/payments/{gateway_payment_id}/refund",
            {"amount": amount, "notes": {"reason": reason}},
        )
        if response.status_code >= 400:
            try:
                body = response.json() if response.content else {}
            except requests.JSONDecodeError:
                body = {}
            description = body.get("error", {}).get("description") if isinstance(body, dict) else None
            return RefundResult(success=False, gateway_status="failed", failure_reason=description or response.text)

        body = self._json(response)
        return RefundResult(success=True, gateway_refund_id=body["id"], gateway_status=body.get("status"))
