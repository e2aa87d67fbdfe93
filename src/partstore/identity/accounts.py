"""Customer account commands: registration, sessions, profile and addresses."""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from partstore.domain import partstore
from partstore.identity.customer import Customer
from partstore.shared.errors import AuthenticationError, ConflictError
from partstore.shared.queries import fetch_one

logger = structlog.get_logger(__name__)


@partstore.command(part_of="Customer")
class RegisterCustomer:
    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254)
    password: String(required=True, max_length=128)
    phone: String(required=True, max_length=10)


@partstore.command(part_of="Customer")
class LoginCustomer:
    email: String(required=True, max_length=254)
    password: String(required=True, max_length=128)


@partstore.command(part_of="Customer")
class LogoutCustomer:
    customer_id: Identifier(required=True)


@partstore.command(part_of="Customer")
class UpdateCustomerProfile:
    customer_id: Identifier(required=True)
    name: String(max_length=100)
    phone: String(max_length=10)


@partstore.command(part_of="Customer")
class ChangeCustomerPassword:
    customer_id: Identifier(required=True)
    current_password: String(required=True, max_length=128)
    new_password: String(required=True, max_length=128)


@partstore.command(part_of="Customer")
class AddAddress:
    customer_id: Identifier(required=True)
    address_type: String(max_length=10)
    street: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    state: String(required=True, max_length=100)
    pincode: String(required=True, max_length=6)
    is_default: Boolean(default=False)


@partstore.command(part_of="Customer")
class UpdateAddress:
    customer_id: Identifier(required=True)
    address_id: Identifier(required=True)
    address_type: String(max_length=10)
    street: String(max_length=255)
    city: String(max_length=100)
    state: String(max_length=100)
    pincode: String(max_length=6)
    is_default: Boolean()


@partstore.command(part_of="Customer")
class RemoveAddress:
    customer_id: Identifier(required=True)
    address_id: Identifier(required=True)


@partstore.command_handler(part_of=Customer)
class CustomerAccountHandler:
    @handle(RegisterCustomer)
    def register(self, command: RegisterCustomer):
        email = command.email.strip().lower()
        if fetch_one(Customer, email=email) is not None:
            raise ConflictError("User already exists with this email", errors={"email": ["Already registered"]})

        customer = Customer.register(
            name=command.name,
            email=email,
            password=command.password,
            phone=command.phone,
        )
        current_domain.repository_for(Customer).add(customer)
        logger.info("customer_registered", customer_id=str(customer.id))
        return str(customer.id)

    @handle(LoginCustomer)
    def login(self, command: LoginCustomer):
        customer = fetch_one(Customer, email=command.email.strip().lower())
        if customer is None:
            raise AuthenticationError("Invalid email or password")

        token = customer.login(command.password)
        current_domain.repository_for(Customer).add(customer)
        return token

    @handle(LogoutCustomer)
    def logout(self, command: LogoutCustomer):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.logout()
        repo.add(customer)

    @handle(UpdateCustomerProfile)
    def update_profile(self, command: UpdateCustomerProfile):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.update_profile(name=command.name, phone=command.phone)
        repo.add(customer)

    @handle(ChangeCustomerPassword)
    def change_password(self, command: ChangeCustomerPassword):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.change_password(command.current_password, command.new_password)
        repo.add(customer)

    @handle(AddAddress)
    def add_address(self, command: AddAddress):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        address = customer.add_address(
            street=command.street,
            city=command.city,
            state=command.state,
            pincode=command.pincode,
            address_type=command.address_type,
            is_default=bool(command.is_default),
        )
        repo.add(customer)
        return str(address.id)

    @handle(UpdateAddress)
    def update_address(self, command: UpdateAddress):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.update_address(
            command.address_id,
            is_default=command.is_default,
            address_type=command.address_type,
            street=command.street,
            city=command.city,
            state=command.state,
            pincode=command.pincode,
        )
        repo.add(customer)

    @handle(RemoveAddress)
    def remove_address(self, command: RemoveAddress):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.remove_address(command.address_id)
        repo.add(customer)
