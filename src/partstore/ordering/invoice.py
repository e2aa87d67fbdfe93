"""Plain-text tax invoices written under ``INVOICE_DIR``."""

from pathlib import Path

from partstore import config

STORE_NAME = "PartStore Auto Spares"
WIDTH = 72


def invoice_number_for(order) -> str:
    return order.invoice_number or f"INV-{order.order_number}"


def _money(value) -> str:
    return f"{value or 0.0:,.2f}"


def render_invoice(order, customer=None) -> str:
    number = invoice_number_for(order)
    address = order.shipping_address
    placed = order.created_at.strftime("%d/%m/%Y") if order.created_at else ""

    lines = [
        STORE_NAME,
        "TAX INVOICE".rjust(WIDTH),
        f"Invoice No: {number}".rjust(WIDTH),
        f"Order No: {order.order_number}".rjust(WIDTH),
        f"Date: {placed}".rjust(WIDTH),
        f"Payment: {order.payment_method} ({order.payment_status})".rjust(WIDTH),
        "-" * WIDTH,
        "Bill To:",
    ]
    if customer is not None:
        lines += [f"  {customer.name}", f"  {customer.email}"]
    if address is not None:
        lines += [
            f"  Phone: {address.phone or ''}",
            "Ship To:",
            f"  {address.street}",
            f"  {address.city}, {address.state}",
            f"  PIN: {address.pincode}",
        ]

    lines += ["-" * WIDTH, f"{'Item':<30}{'Part No.':<16}{'Qty':>5}{'Price':>10}{'Amount':>11}", "-" * WIDTH]
    for item in order.items:
        lines.append(
            f"{item.name[:29]:<30}{item.part_number[:15]:<16}{item.quantity:>5}"
            f"{_money(item.price):>10}{_money(item.subtotal):>11}"
        )

    lines += [
        "-" * WIDTH,
        f"{'Subtotal:':>50}{_money(order.subtotal):>22}",
        f"{f'Tax ({order.tax_percentage:g}%):':>50}{_money(order.tax):>22}",
        f"{'Shipping:':>50}{_money(order.shipping_charges):>22}",
        f"{'Total:':>50}{_money(order.total_amount):>22}",
        "",
        "Thank you for your business!",
    ]
    return "\n".join(lines) + "\n"


def write_invoice(order, customer=None) -> tuple[str, str]:
    """Render the invoice to disk and return ``(invoice_number, path)``."""
    directory = Path(config.invoice_dir())
    directory.mkdir(parents=True, exist_ok=True)

    number = invoice_number_for(order)
    path = directory / f"{number}.txt"
    path.write_text(render_invoice(order, customer), encoding="utf-8")
    return number, str(path)
