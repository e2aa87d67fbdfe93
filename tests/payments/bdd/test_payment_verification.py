"""BDD tests for gateway signature verification."""

from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when

from partstore.payments.reconciliation import VerifyPayment
from partstore.payments.signature import compute_signature

scenarios("features/payment_verification.feature")


def _report(order, gateway_order_id, payment_id, kind):
    signature = compute_signature(gateway_order_id, payment_id) if kind == "genuine" else "0" * 64
    return current_domain.process(
        VerifyPayment(
            order_id=order["order_id"],
            customer_id=order["customer_id"],
            gateway_order_id=gateway_order_id,
            gateway_payment_id=payment_id,
            signature=signature,
        ),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Given / When steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the customer reported payment "{payment_id}" with a {kind} signature'))
def reported_payment(order, gateway_order_id, payment_id, kind):
    _report(order, gateway_order_id, payment_id, kind)


@when(
    parsers.cfparse('the customer reports payment "{payment_id}" with a {kind} signature'),
    target_fixture="verified",
)
def report_payment(order, gateway_order_id, payment_id, kind):
    return _report(order, gateway_order_id, payment_id, kind)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("verification succeeds")
def verification_succeeds(verified):
    assert verified is True


@then("verification fails")
def verification_fails(verified):
    assert verified is False
