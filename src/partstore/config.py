"""Runtime settings read from the environment.

Values are resolved on every call so a changed environment (tests, reloads)
takes effect without re-importing.
"""

import os


def _float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value not in (None, "") else default


def _int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value not in (None, "") else default


def tax_rate_percent() -> float:
    return _float("TAX_RATE_PERCENT", 18.0)


def free_shipping_threshold() -> float:
    return _float("FREE_SHIPPING_THRESHOLD", 5000.0)


def shipping_fee() -> float:
    return _float("SHIPPING_FEE", 100.0)


def payment_gateway_key_id() -> str:
    return os.getenv("PAYMENT_GATEWAY_KEY_ID", "")


def payment_gateway_secret() -> str:
    return os.getenv("PAYMENT_GATEWAY_SECRET", "")


def payment_currency() -> str:
    return os.getenv("PAYMENT_CURRENCY", "INR")


def invoice_dir() -> str:
    return os.getenv("INVOICE_DIR", "invoices")


def notification_retention_days() -> int:
    return _int("NOTIFICATION_RETENTION_DAYS", 30)


def cors_origins() -> list[str]:
    return [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]


def payment_gateway_url() -> str:
    return os.getenv("PAYMENT_GATEWAY_URL", "https://api.razorpay.com/v1")
