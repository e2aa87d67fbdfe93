"""Aggregate to JSON views.

Credentials never leave the server: password hashes and tokens are dropped
from every account view.
"""


def _iso(value):
    return value.isoformat() if value else None


def product_view(product) -> dict:
    return {
        "id": str(product.id),
        "name": product.name,
        "part_number": product.part_number,
        "description": product.description,
        "category": product.category,
        "subcategory": product.subcategory,
        "compatible_models": [
            {
                "id": str(m.id),
                "model_name": m.model_name,
                "year_from": m.year_from,
                "year_to": m.year_to,
                "variant": m.variant,
            }
            for m in product.compatible_models
        ],
        "price": product.price,
        "discount_price": product.discount_price,
        "final_price": product.final_price,
        "stock": product.stock,
        "stock_status": product.stock_status,
        "low_stock_threshold": product.low_stock_threshold,
        "images": [{"id": str(i.id), "url": i.url, "public_id": i.public_id} for i in product.images],
        "specifications": product.specification_map(),
        "warranty_period": product.warranty_period,
        "manufacturer": product.manufacturer,
        "tags": product.tag_list(),
        "weight": product.weight,
        "is_active": product.is_active,
        "average_rating": product.average_rating,
        "total_reviews": product.total_reviews,
        "total_sales": product.total_sales,
        "created_at": _iso(product.created_at),
        "updated_at": _iso(product.updated_at),
    }


def address_view(address) -> dict:
    return {
        "id": str(address.id),
        "address_type": address.address_type,
        "street": address.street,
        "city": address.city,
        "state": address.state,
        "pincode": address.pincode,
        "is_default": address.is_default,
    }


def customer_view(customer) -> dict:
    return {
        "id": str(customer.id),
        "name": customer.name,
        "email": customer.email,
        "phone": customer.phone,
        "role": "customer",
        "addresses": [address_view(a) for a in customer.addresses],
        "is_active": customer.is_active,
        "last_login": _iso(customer.last_login),
        "created_at": _iso(customer.created_at),
    }


def admin_view(admin) -> dict:
    return {
        "id": str(admin.id),
        "name": admin.name,
        "email": admin.email,
        "role": admin.role,
        "is_active": admin.is_active,
        "last_login": _iso(admin.last_login),
        "created_at": _iso(admin.created_at),
    }


def cart_view(cart, products: dict | None = None) -> dict:
    """``products`` maps product ids to Product aggregates for display fields."""
    products = products or {}
    items = []
    for item in cart.items:
        product = products.get(str(item.product_id))
        items.append(
            {
                "id": str(item.id),
                "product_id": str(item.product_id),
                "name": product.name if product else None,
                "part_number": product.part_number if product else None,
                "image": product.primary_image_url() if product else None,
                "quantity": item.quantity,
                "price": item.price,
                "subtotal": item.subtotal,
                "added_at": _iso(item.added_at),
            }
        )
    return {
        "id": str(cart.id),
        "customer_id": str(cart.customer_id),
        "items": items,
        "total_items": cart.total_items,
        "subtotal": cart.subtotal,
        "tax": cart.tax,
        "tax_percentage": cart.tax_percentage,
        "shipping_charges": cart.shipping_charges,
        "total_amount": cart.total_amount,
        "updated_at": _iso(cart.updated_at),
    }


def order_view(order) -> dict:
    address = order.shipping_address
    return {
        "id": str(order.id),
        "order_number": order.order_number,
        "customer_id": str(order.customer_id),
        "items": [
            {
                "id": str(i.id),
                "product_id": str(i.product_id),
                "name": i.name,
                "part_number": i.part_number,
                "quantity": i.quantity,
                "price": i.price,
                "subtotal": i.subtotal,
                "image": i.image,
            }
            for i in order.items
        ],
        "shipping_address": (
            {
                "street": address.street,
                "city": address.city,
                "state": address.state,
                "pincode": address.pincode,
                "phone": address.phone,
            }
            if address
            else None
        ),
        "subtotal": order.subtotal,
        "tax": order.tax,
        "tax_percentage": order.tax_percentage,
        "shipping_charges": order.shipping_charges,
        "total_amount": order.total_amount,
        "payment_method": order.payment_method,
        "payment_status": order.payment_status,
        "gateway_order_id": order.gateway_order_id,
        "paid_at": _iso(order.paid_at),
        "order_status": order.order_status,
        "status_history": [
            {"status": h.status, "note": h.note, "timestamp": _iso(h.changed_at)}
            for h in sorted(order.status_history, key=lambda h: h.changed_at)
        ],
        "tracking_number": order.tracking_number,
        "courier_partner": order.courier_partner,
        "estimated_delivery": _iso(order.estimated_delivery),
        "delivered_at": _iso(order.delivered_at),
        "cancelled_at": _iso(order.cancelled_at),
        "cancellation_reason": order.cancellation_reason,
        "invoice_number": order.invoice_number,
        "notes": order.notes,
        "created_at": _iso(order.created_at),
        "updated_at": _iso(order.updated_at),
    }


def payment_view(payment) -> dict:
    return {
        "id": str(payment.id),
        "order_id": str(payment.order_id),
        "order_number": payment.order_number,
        "customer_id": str(payment.customer_id),
        "amount": payment.amount,
        "payment_method": payment.payment_method,
        "status": payment.status,
        "gateway_order_id": payment.gateway_order_id,
        "gateway_payment_id": payment.gateway_payment_id,
        "transaction_id": payment.transaction_id,
        "failure_reason": payment.failure_reason,
        "paid_at": _iso(payment.paid_at),
        "refund_id": payment.refund_id,
        "refund_amount": payment.refund_amount,
        "refunded_at": _iso(payment.refunded_at),
        "created_at": _iso(payment.created_at),
    }
