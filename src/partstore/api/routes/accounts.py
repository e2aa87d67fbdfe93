"""FastAPI routes for customer and admin accounts."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from partstore.api.auth import current_admin, current_customer, current_superadmin
from partstore.api.envelope import ok
from partstore.api.schemas import (
    AddressRequest,
    ChangePasswordRequest,
    LoginRequest,
    RegisterAdminRequest,
    RegisterRequest,
    UpdateAddressRequest,
    UpdateAdminProfileRequest,
    UpdateProfileRequest,
)
from partstore.api.views import admin_view, customer_view
from partstore.identity.accounts import (
    AddAddress,
    ChangeCustomerPassword,
    LoginCustomer,
    LogoutCustomer,
    RegisterCustomer,
    RemoveAddress,
    UpdateAddress,
    UpdateCustomerProfile,
)
from partstore.identity.admin import Admin
from partstore.identity.admins import (
    ChangeAdminPassword,
    LoginAdmin,
    LogoutAdmin,
    RegisterAdmin,
    UpdateAdminProfile,
)
from partstore.identity.customer import Customer
from partstore.identity.tokens import Principal
from partstore.shared.queries import fetch_one

router = APIRouter(prefix="/api/auth", tags=["auth"])
admin_router = APIRouter(prefix="/api/admin/auth", tags=["admin-auth"])


def _customer(customer_id) -> Customer:
    return current_domain.repository_for(Customer).get(customer_id)


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------
@router.post("/register", status_code=201)
async def register(body: RegisterRequest):
    customer_id = current_domain.process(
        RegisterCustomer(name=body.name, email=body.email, password=body.password, phone=body.phone),
        asynchronous=False,
    )
    token = current_domain.process(LoginCustomer(email=body.email, password=body.password), asynchronous=False)
    return ok("User registered successfully", {"user": customer_view(_customer(customer_id)), "token": token})


@router.post("/login")
async def login(body: LoginRequest):
    token = current_domain.process(LoginCustomer(email=body.email, password=body.password), asynchronous=False)
    customer = fetch_one(Customer, auth_token=token)
    return ok("Login successful", {"user": customer_view(customer), "token": token})


@router.post("/logout")
async def logout(principal: Principal = Depends(current_customer)):
    current_domain.process(LogoutCustomer(customer_id=principal.id), asynchronous=False)
    return ok("Logged out successfully")


@router.get("/profile")
async def get_profile(principal: Principal = Depends(current_customer)):
    return ok("Profile retrieved successfully", {"user": customer_view(_customer(principal.id))})


@router.put("/profile")
async def update_profile(body: UpdateProfileRequest, principal: Principal = Depends(current_customer)):
    current_domain.process(
        UpdateCustomerProfile(customer_id=principal.id, name=body.name, phone=body.phone),
        asynchronous=False,
    )
    return ok("Profile updated successfully", {"user": customer_view(_customer(principal.id))})


@router.put("/change-password")
async def change_password(body: ChangePasswordRequest, principal: Principal = Depends(current_customer)):
    current_domain.process(
        ChangeCustomerPassword(
            customer_id=principal.id,
            current_password=body.current_password,
            new_password=body.new_password,
        ),
        asynchronous=False,
    )
    return ok("Password changed successfully, please log in again")


@router.post("/address", status_code=201)
async def add_address(body: AddressRequest, principal: Principal = Depends(current_customer)):
    current_domain.process(AddAddress(customer_id=principal.id, **body.model_dump()), asynchronous=False)
    return ok("Address added successfully", {"addresses": customer_view(_customer(principal.id))["addresses"]})


@router.put("/address/{address_id}")
async def update_address(address_id: str, body: UpdateAddressRequest, principal: Principal = Depends(current_customer)):
    current_domain.process(
        UpdateAddress(customer_id=principal.id, address_id=address_id, **body.model_dump()),
        asynchronous=False,
    )
    return ok("Address updated successfully", {"addresses": customer_view(_customer(principal.id))["addresses"]})


@router.delete("/address/{address_id}")
async def remove_address(address_id: str, principal: Principal = Depends(current_customer)):
    current_domain.process(RemoveAddress(customer_id=principal.id, address_id=address_id), asynchronous=False)
    return ok("Address deleted successfully", {"addresses": customer_view(_customer(principal.id))["addresses"]})


# ---------------------------------------------------------------------------
# Admins
# ---------------------------------------------------------------------------
@admin_router.post("/login")
async def admin_login(body: LoginRequest):
    token = current_domain.process(LoginAdmin(email=body.email, password=body.password), asynchronous=False)
    admin = fetch_one(Admin, auth_token=token)
    return ok("Admin login successful", {"admin": admin_view(admin), "token": token})


@admin_router.post("/logout")
async def admin_logout(principal: Principal = Depends(current_admin)):
    current_domain.process(LogoutAdmin(admin_id=principal.id), asynchronous=False)
    return ok("Logged out successfully")


@admin_router.get("/profile")
async def admin_profile(principal: Principal = Depends(current_admin)):
    return ok("Profile retrieved successfully", {"admin": admin_view(principal.account)})


@admin_router.put("/profile")
async def update_admin_profile(body: UpdateAdminProfileRequest, principal: Principal = Depends(current_admin)):
    current_domain.process(UpdateAdminProfile(admin_id=principal.id, name=body.name), asynchronous=False)
    admin = current_domain.repository_for(Admin).get(principal.id)
    return ok("Profile updated successfully", {"admin": admin_view(admin)})


@admin_router.put("/change-password")
async def change_admin_password(body: ChangePasswordRequest, principal: Principal = Depends(current_admin)):
    current_domain.process(
        ChangeAdminPassword(
            admin_id=principal.id,
            current_password=body.current_password,
            new_password=body.new_password,
        ),
        asynchronous=False,
    )
    return ok("Password changed successfully, please log in again")


@admin_router.post("/register", status_code=201)
async def register_admin(body: RegisterAdminRequest, principal: Principal = Depends(current_superadmin)):
    admin_id = current_domain.process(
        RegisterAdmin(name=body.name, email=body.email, password=body.password, role=body.role),
        asynchronous=False,
    )
    admin = current_domain.repository_for(Admin).get(admin_id)
    return ok("Admin registered successfully", {"admin": admin_view(admin)})
