"""Customer aggregate root with the Address entity."""

import re
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, String

from partstore.domain import partstore
from partstore.identity.security import hash_password, issue_token, verify_password
from partstore.shared.errors import AuthenticationError

MIN_PASSWORD_LENGTH = 6

_PHONE = re.compile(r"^[0-9]{10}$")
_PINCODE = re.compile(r"^[0-9]{6}$")


class AddressType(Enum):
    HOME = "Home"
    WORK = "Work"
    OTHER = "Other"


def validate_password(password):
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError({"password": [f"Password must be at least {MIN_PASSWORD_LENGTH} characters"]})


@partstore.entity(part_of="Customer")
class Address:
    """A delivery address in the customer's address book."""

    address_type: String(choices=AddressType, default=AddressType.HOME.value)
    street: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    state: String(required=True, max_length=100)
    pincode: String(required=True, max_length=6)
    is_default: Boolean(default=False)

    @invariant.post
    def pincode_must_have_six_digits(self):
        if self.pincode and not _PINCODE.match(self.pincode):
            raise ValidationError({"pincode": ["Please provide a valid 6-digit pincode"]})


@partstore.aggregate
class Customer:
    """A shopper with credentials, contact details and an address book.

    Exactly one address is the default whenever the book is non-empty; checkout
    falls back to it when no address is chosen explicitly.
    """

    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254, unique=True)
    password_hash: String(required=True, max_length=255)
    phone: String(required=True, max_length=10)
    addresses: HasMany(Address)
    is_active: Boolean(default=True)
    auth_token: String(max_length=128)
    last_login: DateTime()
    created_at: DateTime()

    @invariant.post
    def phone_must_have_ten_digits(self):
        if self.phone and not _PHONE.match(self.phone):
            raise ValidationError({"phone": ["Please provide a valid 10-digit phone number"]})

    @invariant.post
    def exactly_one_default_address_when_addresses_exist(self):
        if not self.addresses:
            return
        defaults = [a for a in self.addresses if a.is_default]
        if len(defaults) != 1:
            raise ValidationError({"addresses": ["Exactly one address must be marked as default"]})

    @classmethod
    def register(cls, name, email, password, phone):
        validate_password(password)
        return cls(
            name=name.strip(),
            email=email.strip().lower(),
            password_hash=hash_password(password),
            phone=phone,
            created_at=datetime.now(UTC),
        )

    # -------------------------------------------------------------------
    # Credentials
    # -------------------------------------------------------------------
    def login(self, password):
        if not self.is_active:
            raise AuthenticationError("Account is deactivated")
        if not verify_password(password, self.password_hash):
            raise AuthenticationError("Invalid email or password")
        self.auth_token = issue_token()
        self.last_login = datetime.now(UTC)
        return self.auth_token

    def logout(self):
        self.auth_token = None

    def change_password(self, current_password, new_password):
        if not verify_password(current_password, self.password_hash):
            raise AuthenticationError("Current password is incorrect")
        validate_password(new_password)
        self.password_hash = hash_password(new_password)
        # Existing sessions end with the old password
        self.auth_token = None

    def update_profile(self, name=None, phone=None):
        if name:
            self.name = name.strip()
        if phone:
            self.phone = phone

    # -------------------------------------------------------------------
    # Address book
    # -------------------------------------------------------------------
    def _find_address(self, address_id):
        address = next((a for a in self.addresses if str(a.id) == str(address_id)), None)
        if address is None:
            raise ValidationError({"address_id": ["Address not found"]})
        return address

    def add_address(self, street, city, state, pincode, address_type=AddressType.HOME.value, is_default=False):
        # First address is always default
        if not self.addresses:
            is_default = True

        with atomic_change(self):
            if is_default:
                for addr in self.addresses:
                    if addr.is_default:
                        addr.is_default = False

            address = Address(
                address_type=address_type or AddressType.HOME.value,
                street=street,
                city=city,
                state=state,
                pincode=pincode,
                is_default=is_default,
            )
            self.add_addresses(address)
        return address

    def update_address(self, address_id, is_default=None, **changes):
        address = self._find_address(address_id)

        with atomic_change(self):
            for field, value in changes.items():
                if value is not None:
                    setattr(address, field, value)
            if is_default:
                for addr in self.addresses:
                    addr.is_default = str(addr.id) == str(address.id)
        return address

    def remove_address(self, address_id):
        address = self._find_address(address_id)
        was_default = address.is_default

        with atomic_change(self):
            self.remove_addresses(address)
            if was_default and self.addresses:
                self.addresses[0].is_default = True

    def shipping_address(self, address_id=None):
        """The chosen address, or the default one when none is chosen."""
        if address_id:
            return next((a for a in self.addresses if str(a.id) == str(address_id)), None)
        return next((a for a in self.addresses if a.is_default), None)
