"""FastAPI dependencies resolving the bearer token into a principal."""

from fastapi import Depends, Header

from partstore.identity.tokens import Principal, authenticate, bearer_token
from partstore.shared.errors import AuthorizationError


def current_principal(authorization: str | None = Header(default=None, alias="Authorization")) -> Principal:
    return authenticate(bearer_token(authorization))


def current_customer(principal: Principal = Depends(current_principal)) -> Principal:
    if principal.is_admin:
        raise AuthorizationError("This action is only available to customers")
    return principal


def current_admin(principal: Principal = Depends(current_principal)) -> Principal:
    if not principal.is_admin:
        raise AuthorizationError("Admin access required")
    return principal


def current_superadmin(principal: Principal = Depends(current_admin)) -> Principal:
    if not principal.account.is_superadmin:
        raise AuthorizationError("Superadmin access required")
    return principal
