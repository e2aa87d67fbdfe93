"""Admin account commands."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from partstore.domain import partstore
from partstore.identity.admin import Admin, AdminRole
from partstore.shared.errors import AuthenticationError, ConflictError
from partstore.shared.queries import fetch_one

logger = structlog.get_logger(__name__)


@partstore.command(part_of="Admin")
class RegisterAdmin:
    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254)
    password: String(required=True, max_length=128)
    role: String(max_length=20, default=AdminRole.ADMIN.value)


@partstore.command(part_of="Admin")
class LoginAdmin:
    email: String(required=True, max_length=254)
    password: String(required=True, max_length=128)


@partstore.command(part_of="Admin")
class LogoutAdmin:
    admin_id: Identifier(required=True)


@partstore.command(part_of="Admin")
class UpdateAdminProfile:
    admin_id: Identifier(required=True)
    name: String(max_length=100)


@partstore.command(part_of="Admin")
class ChangeAdminPassword:
    admin_id: Identifier(required=True)
    current_password: String(required=True, max_length=128)
    new_password: String(required=True, max_length=128)


@partstore.command_handler(part_of=Admin)
class AdminAccountHandler:
    @handle(RegisterAdmin)
    def register(self, command: RegisterAdmin):
        email = command.email.strip().lower()
        if fetch_one(Admin, email=email) is not None:
            raise ConflictError("Admin already exists with this email", errors={"email": ["Already registered"]})

        admin = Admin.register(command.name, email, command.password, role=command.role)
        current_domain.repository_for(Admin).add(admin)
        logger.info("admin_registered", admin_id=str(admin.id), role=admin.role)
        return str(admin.id)

    @handle(LoginAdmin)
    def login(self, command: LoginAdmin):
        admin = fetch_one(Admin, email=command.email.strip().lower())
        if admin is None:
            raise AuthenticationError("Invalid credentials")

        token = admin.login(command.password)
        current_domain.repository_for(Admin).add(admin)
        return token

    @handle(LogoutAdmin)
    def logout(self, command: LogoutAdmin):
        repo = current_domain.repository_for(Admin)
        admin = repo.get(command.admin_id)
        admin.logout()
        repo.add(admin)

    @handle(UpdateAdminProfile)
    def update_profile(self, command: UpdateAdminProfile):
        repo = current_domain.repository_for(Admin)
        admin = repo.get(command.admin_id)
        admin.update_profile(name=command.name)
        repo.add(admin)

    @handle(ChangeAdminPassword)
    def change_password(self, command: ChangeAdminPassword):
        repo = current_domain.repository_for(Admin)
        admin = repo.get(command.admin_id)
        admin.change_password(command.current_password, command.new_password)
        repo.add(admin)
