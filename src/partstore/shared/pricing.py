"""Money arithmetic shared by the cart and the order snapshot."""

from dataclasses import dataclass

from partstore import config


@dataclass(frozen=True)
class Totals:
    subtotal: float
    tax: float
    tax_percentage: float
    shipping_charges: float
    total_amount: float


def _money(value: float) -> float:
    return round(value + 0.0, 2)


def calculate_totals(subtotal: float) -> Totals:
    """Derive tax, shipping and grand total from a line-item subtotal.

    An empty subtotal ships free: a cleared cart has every total at zero.
    """
    rate = config.tax_rate_percent()
    subtotal = _money(subtotal)
    tax = _money(subtotal * rate / 100)
    if subtotal <= 0 or subtotal >= config.free_shipping_threshold():
        shipping = 0.0
    else:
        shipping = _money(config.shipping_fee())
    return Totals(
        subtotal=subtotal,
        tax=tax,
        tax_percentage=rate,
        shipping_charges=shipping,
        total_amount=_money(subtotal + tax + shipping),
    )
