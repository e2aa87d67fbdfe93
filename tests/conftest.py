import itertools
import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Selects the config overlay and pins the payment settings every test relies
    on: a known signing secret and no gateway key, so the fake gateway is used.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ["PAYMENT_GATEWAY_SECRET"] = "test-secret"
    os.environ.pop("PAYMENT_GATEWAY_KEY_ID", None)


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def partstore_bed():
    from partstore.domain import partstore

    bed = DomainFixture(partstore)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(partstore_bed):
    with partstore_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def push_channel():
    """Every test records real-time pushes instead of sending them."""
    from partstore.realtime import reset_channel, set_channel
    from partstore.realtime.fake_channel import FakePushChannel

    channel = FakePushChannel()
    set_channel(channel)
    yield channel
    reset_channel()


@pytest.fixture(autouse=True)
def gateway():
    from partstore.payments.gateway import reset_gateway, set_gateway
    from partstore.payments.gateway.fake_adapter import FakeGateway

    fake = FakeGateway()
    set_gateway(fake)
    yield fake
    reset_gateway()


@pytest.fixture(autouse=True)
def invoice_dir(tmp_path, monkeypatch):
    directory = tmp_path / "invoices"
    monkeypatch.setenv("INVOICE_DIR", str(directory))
    return directory


@pytest.fixture(autouse=True)
def run_around_tests(_ctx):
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from protean import current_domain

    # Clear all databases
    for _, provider in current_domain.providers.items():
        provider._data_reset()

    # Drain event stores
    current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
@pytest.fixture
def add_product():
    """Add a catalogue product through the command pipeline; returns its id."""
    from protean import current_domain

    from partstore.catalogue.management import AddProduct

    counter = itertools.count(1)

    def _add(name="Oil Filter", price=100.0, stock=10, category="Engine", part_number=None, **fields):
        return current_domain.process(
            AddProduct(
                name=name,
                part_number=part_number or f"HY-{next(counter):05d}",
                description=f"{name} for Hyundai passenger cars",
                category=category,
                price=price,
                stock=stock,
                **fields,
            ),
            asynchronous=False,
        )

    return _add


@pytest.fixture
def register_customer():
    """Register a customer, by default with one (default) delivery address."""
    from protean import current_domain

    from partstore.identity.accounts import AddAddress, RegisterCustomer

    def _register(
        name="Ravi Kumar",
        email="ravi@example.com",
        password="secret123",
        phone="9876543210",
        with_address=True,
    ):
        customer_id = current_domain.process(
            RegisterCustomer(name=name, email=email, password=password, phone=phone),
            asynchronous=False,
        )
        if with_address:
            current_domain.process(
                AddAddress(
                    customer_id=customer_id,
                    street="12 MG Road",
                    city="Bengaluru",
                    state="Karnataka",
                    pincode="560001",
                ),
                asynchronous=False,
            )
        return customer_id

    return _register


@pytest.fixture
def register_admin():
    from protean import current_domain

    from partstore.identity.admins import RegisterAdmin

    def _register(name="Store Admin", email="admin@example.com", password="admin123", role="admin"):
        return current_domain.process(
            RegisterAdmin(name=name, email=email, password=password, role=role),
            asynchronous=False,
        )

    return _register


@pytest.fixture
def checkout():
    """Fill the customer's cart with ``lines`` and place the order; returns the order id."""
    from protean import current_domain

    from partstore.cart.items import AddToCart
    from partstore.ordering.checkout import PlaceOrder

    def _checkout(customer_id, lines, payment_method="COD", notes=None):
        for product_id, quantity in lines:
            current_domain.process(
                AddToCart(customer_id=customer_id, product_id=product_id, quantity=quantity),
                asynchronous=False,
            )
        return current_domain.process(
            PlaceOrder(customer_id=customer_id, payment_method=payment_method, notes=notes),
            asynchronous=False,
        )

    return _checkout


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------
@pytest.fixture
def client():
    """The HTTP API without CORS or request logging, on the test domain."""
    from fastapi import FastAPI, Request
    from fastapi.testclient import TestClient

    from partstore.api.errors import register_error_handlers
    from partstore.api.routes import (
        accounts,
        cart,
        dashboard,
        notifications,
        orders,
        payments,
        products,
        realtime,
        wishlist,
    )
    from partstore.domain import partstore

    app = FastAPI()
    app.state.domain = partstore

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        with partstore.domain_context():
            return await call_next(request)

    register_error_handlers(app)
    for module in (cart, dashboard, notifications, orders, payments, products, realtime, wishlist):
        app.include_router(module.router)
    app.include_router(accounts.router)
    app.include_router(accounts.admin_router)
    return TestClient(app)


@pytest.fixture
def customer_headers(client, register_customer):
    """Register a customer with an address and return bearer headers for them."""

    def _headers(email="ravi@example.com", password="secret123"):
        register_customer(email=email, password=password)
        response = client.post("/api/auth/login", json={"email": email, "password": password})
        return {"Authorization": f"Bearer {response.json()['data']['token']}"}

    return _headers


@pytest.fixture
def admin_headers(client, register_admin):
    def _headers(email="admin@example.com", password="admin123", role="admin"):
        register_admin(email=email, password=password, role=role)
        response = client.post("/api/admin/auth/login", json={"email": email, "password": password})
        return {"Authorization": f"Bearer {response.json()['data']['token']}"}

    return _headers
