"""Resolve a bearer token into the account that owns it."""

from dataclasses import dataclass

from partstore.identity.admin import Admin
from partstore.identity.customer import Customer
from partstore.shared.errors import AuthenticationError
from partstore.shared.queries import fetch_one

CUSTOMER = "customer"
ADMIN = "admin"


@dataclass(frozen=True)
class Principal:
    kind: str
    account: object

    @property
    def id(self) -> str:
        return str(self.account.id)

    @property
    def is_admin(self) -> bool:
        return self.kind == ADMIN


def bearer_token(authorization: str | None) -> str | None:
    if authorization and authorization.startswith("Bearer "):
        return authorization.split(" ", 1)[1].strip() or None
    return None


def authenticate(token: str | None) -> Principal:
    """Customers are checked first; tokens are random so the two never collide."""
    if not token:
        raise AuthenticationError("Not authorized, no token")

    customer = fetch_one(Customer, auth_token=token)
    if customer is not None:
        if not customer.is_active:
            raise AuthenticationError("User account is deactivated")
        return Principal(kind=CUSTOMER, account=customer)

    admin = fetch_one(Admin, auth_token=token)
    if admin is not None:
        if not admin.is_active:
            raise AuthenticationError("Admin account is deactivated")
        return Principal(kind=ADMIN, account=admin)

    raise AuthenticationError("Not authorized, token failed")
