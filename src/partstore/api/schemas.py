"""Pydantic request schemas for the HTTP API.

These are the external contracts; handlers translate them into Protean
commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------
class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str
    phone: str

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Asha Rao",
                    "email": "asha@example.com",
                    "password": "secret123",
                    "phone": "9876543210",
                }
            ]
        }
    }


class LoginRequest(BaseModel):
    email: str
    password: str


class UpdateProfileRequest(BaseModel):
    name: str | None = None
    phone: str | None = None


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str


class AddressRequest(BaseModel):
    address_type: str | None = None
    street: str
    city: str
    state: str
    pincode: str
    is_default: bool = False


class UpdateAddressRequest(BaseModel):
    address_type: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    is_default: bool | None = None


class RegisterAdminRequest(BaseModel):
    name: str
    email: str
    password: str
    role: str = "admin"


class UpdateAdminProfileRequest(BaseModel):
    name: str | None = None


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
class CompatibleModelSchema(BaseModel):
    model_name: str
    year_from: int | None = None
    year_to: int | None = None
    variant: str | None = None


class ProductRequest(BaseModel):
    name: str
    part_number: str
    description: str
    category: str
    subcategory: str | None = None
    price: float = Field(ge=0)
    discount_price: float | None = Field(default=None, ge=0)
    stock: int = Field(default=0, ge=0)
    low_stock_threshold: int | None = Field(default=None, ge=0)
    compatible_models: list[CompatibleModelSchema] = []
    specifications: dict[str, str] = {}
    tags: list[str] = []
    warranty_period: str | None = None
    manufacturer: str | None = None
    weight: float | None = None


class UpdateProductRequest(BaseModel):
    name: str | None = None
    part_number: str | None = None
    description: str | None = None
    category: str | None = None
    subcategory: str | None = None
    price: float | None = Field(default=None, ge=0)
    discount_price: float | None = Field(default=None, ge=0)
    low_stock_threshold: int | None = Field(default=None, ge=0)
    compatible_models: list[CompatibleModelSchema] | None = None
    specifications: dict[str, str] | None = None
    tags: list[str] | None = None
    warranty_period: str | None = None
    manufacturer: str | None = None
    weight: float | None = None
    is_active: bool | None = None


class StockRequest(BaseModel):
    stock: int


class ImageRequest(BaseModel):
    url: str
    public_id: str | None = None


# ---------------------------------------------------------------------------
# Cart, orders, payments
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = 1


class UpdateCartItemRequest(BaseModel):
    quantity: int


class PlaceOrderRequest(BaseModel):
    payment_method: str
    shipping_address_id: str | None = None
    notes: str | None = None

    model_config = {
        "json_schema_extra": {"examples": [{"payment_method": "COD", "shipping_address_id": None, "notes": None}]}
    }


class CancelOrderRequest(BaseModel):
    reason: str | None = None


class UpdateOrderStatusRequest(BaseModel):
    order_status: str
    note: str | None = None
    tracking_number: str | None = None
    courier_partner: str | None = None
    estimated_delivery: datetime | None = None


class GatewayOrderRequest(BaseModel):
    order_id: str


class VerifyPaymentRequest(BaseModel):
    order_id: str
    gateway_order_id: str
    gateway_payment_id: str
    signature: str


class PaymentFailureRequest(BaseModel):
    order_id: str
    reason: str | None = None


# ---------------------------------------------------------------------------
# Wishlist
# ---------------------------------------------------------------------------
class ToggleWishlistRequest(BaseModel):
    product_id: str
