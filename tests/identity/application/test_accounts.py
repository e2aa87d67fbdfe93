"""Application tests for customer and admin account commands and token resolution."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from partstore.identity.accounts import (
    ChangeCustomerPassword,
    LoginCustomer,
    LogoutCustomer,
    RemoveAddress,
    UpdateAddress,
    UpdateCustomerProfile,
)
from partstore.identity.admin import Admin
from partstore.identity.admins import LoginAdmin, LogoutAdmin
from partstore.identity.customer import Customer
from partstore.identity.tokens import ADMIN, CUSTOMER, authenticate, bearer_token
from partstore.shared.errors import AuthenticationError, ConflictError


def _customer(customer_id) -> Customer:
    return current_domain.repository_for(Customer).get(customer_id)


def _login(email="ravi@example.com", password="secret123"):
    return current_domain.process(LoginCustomer(email=email, password=password), asynchronous=False)


class TestRegisterCustomer:
    def test_registers_with_default_address(self, register_customer):
        customer = _customer(register_customer())
        assert customer.email == "ravi@example.com"
        assert len(customer.addresses) == 1
        assert customer.addresses[0].is_default is True

    def test_duplicate_email_conflicts(self, register_customer):
        register_customer()
        with pytest.raises(ConflictError):
            register_customer(email="RAVI@example.com")


class TestSessions:
    def test_login_and_authenticate(self, register_customer):
        customer_id = register_customer()
        token = _login(email="Ravi@Example.com")
        principal = authenticate(token)
        assert principal.kind == CUSTOMER
        assert principal.id == customer_id
        assert principal.is_admin is False

    def test_unknown_email(self):
        with pytest.raises(AuthenticationError):
            _login(email="nobody@example.com")

    def test_logout_revokes_token(self, register_customer):
        customer_id = register_customer()
        token = _login()
        current_domain.process(LogoutCustomer(customer_id=customer_id), asynchronous=False)
        with pytest.raises(AuthenticationError):
            authenticate(token)

    def test_change_password_revokes_token(self, register_customer):
        customer_id = register_customer()
        token = _login()
        current_domain.process(
            ChangeCustomerPassword(customer_id=customer_id, current_password="secret123", new_password="another1"),
            asynchronous=False,
        )
        with pytest.raises(AuthenticationError):
            authenticate(token)
        assert _login(password="another1")

    def test_missing_token(self):
        with pytest.raises(AuthenticationError):
            authenticate(None)


class TestProfileAndAddresses:
    def test_update_profile(self, register_customer):
        customer_id = register_customer()
        current_domain.process(
            UpdateCustomerProfile(customer_id=customer_id, name="Ravi K", phone="9123456780"),
            asynchronous=False,
        )
        customer = _customer(customer_id)
        assert customer.name == "Ravi K"
        assert customer.phone == "9123456780"

    def test_invalid_phone_rejected(self, register_customer):
        customer_id = register_customer()
        with pytest.raises(ValidationError):
            current_domain.process(UpdateCustomerProfile(customer_id=customer_id, phone="123"), asynchronous=False)

    def test_update_and_remove_address(self, register_customer):
        customer_id = register_customer()
        address_id = _customer(customer_id).addresses[0].id
        current_domain.process(
            UpdateAddress(customer_id=customer_id, address_id=address_id, city="Mysuru"),
            asynchronous=False,
        )
        assert _customer(customer_id).addresses[0].city == "Mysuru"

        current_domain.process(RemoveAddress(customer_id=customer_id, address_id=address_id), asynchronous=False)
        assert _customer(customer_id).addresses == []


class TestAdminAccounts:
    def test_admin_login_resolves_admin_principal(self, register_admin):
        admin_id = register_admin()
        token = current_domain.process(LoginAdmin(email="admin@example.com", password="admin123"), asynchronous=False)
        principal = authenticate(token)
        assert principal.kind == ADMIN
        assert principal.id == admin_id
        assert principal.is_admin is True

    def test_admin_logout(self, register_admin):
        admin_id = register_admin()
        token = current_domain.process(LoginAdmin(email="admin@example.com", password="admin123"), asynchronous=False)
        current_domain.process(LogoutAdmin(admin_id=admin_id), asynchronous=False)
        with pytest.raises(AuthenticationError):
            authenticate(token)

    def test_duplicate_admin_email(self, register_admin):
        register_admin()
        with pytest.raises(ConflictError):
            register_admin(name="Other")

    def test_deactivated_admin_cannot_log_in(self, register_admin):
        admin_id = register_admin()
        repo = current_domain.repository_for(Admin)
        admin = repo.get(admin_id)
        admin.is_active = False
        repo.add(admin)
        with pytest.raises(AuthenticationError):
            current_domain.process(LoginAdmin(email="admin@example.com", password="admin123"), asynchronous=False)

    def test_superadmin_role(self, register_admin):
        admin_id = register_admin(role="superadmin")
        assert current_domain.repository_for(Admin).get(admin_id).is_superadmin is True


class TestBearerToken:
    def test_parses_bearer_header(self):
        assert bearer_token("Bearer abc") == "abc"

    def test_rejects_other_schemes(self):
        assert bearer_token("Basic abc") is None
        assert bearer_token(None) is None
