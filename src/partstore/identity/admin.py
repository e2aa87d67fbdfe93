"""Admin aggregate: back-office accounts that receive the admin notification feed."""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, String

from partstore.domain import partstore
from partstore.identity.customer import validate_password
from partstore.identity.security import hash_password, issue_token, verify_password
from partstore.shared.errors import AuthenticationError


class AdminRole(Enum):
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


@partstore.aggregate
class Admin:
    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254, unique=True)
    password_hash: String(required=True, max_length=255)
    role: String(choices=AdminRole, default=AdminRole.ADMIN.value)
    is_active: Boolean(default=True)
    auth_token: String(max_length=128)
    last_login: DateTime()
    created_at: DateTime()

    @classmethod
    def register(cls, name, email, password, role=AdminRole.ADMIN.value):
        validate_password(password)
        return cls(
            name=name.strip(),
            email=email.strip().lower(),
            password_hash=hash_password(password),
            role=role or AdminRole.ADMIN.value,
            created_at=datetime.now(UTC),
        )

    @property
    def is_superadmin(self) -> bool:
        return self.role == AdminRole.SUPERADMIN.value

    def login(self, password):
        if not self.is_active:
            raise AuthenticationError("Admin account is deactivated")
        if not verify_password(password, self.password_hash):
            raise AuthenticationError("Invalid credentials")
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
        self.auth_token = None

    def update_profile(self, name=None):
        if name:
            self.name = name.strip()
