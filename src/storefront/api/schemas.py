"""Pydantic request/response schemas for the storefront API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

# --- Request Schemas ---


class RegistrationStartRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"email": "ada@example.com", "password": "s3cret-pass"}]}}

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)


class RegistrationCompleteRequest(BaseModel):
    registration_token: str = Field(..., max_length=64)
    otp: str = Field(..., max_length=64)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., max_length=128)


class UpdateProfileRequest(BaseModel):
    username: str | None = Field(None, max_length=150)
    phone: str | None = Field(None, max_length=30)
    address: str | None = Field(None, max_length=2000)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    password: str = Field(..., min_length=6, max_length=128)


class AddToCartRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"product_id": "3f6c...", "quantity": 2}]}}

    product_id: str = Field(..., max_length=255)
    quantity: int = Field(1, ge=1)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(..., ge=1)


class ShippingInfo(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=200)
    address: str = Field(..., min_length=1, max_length=500)
    city: str = Field(..., min_length=1, max_length=100)
    postal_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=30)


class PlaceOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "otp": "042917",
                    "shipping_info": {
                        "full_name": "Ada Lovelace",
                        "address": "12 Gallery Lane",
                        "city": "London",
                        "postal_code": "N1 9GU",
                        "country": "UK",
                        "phone": "+44 20 7946 0000",
                    },
                }
            ]
        }
    }

    otp: str = Field(..., max_length=64)
    shipping_info: ShippingInfo


class CreateProductRequest(BaseModel):
    title: str = Field(..., max_length=255)
    description: str | None = None
    category: str | None = Field(None, max_length=100)
    price: float = Field(..., ge=0)
    image_url: str | None = Field(None, max_length=1000)
    stock_quantity: int = Field(0, ge=0)


class UpdateProductRequest(BaseModel):
    title: str | None = Field(None, max_length=255)
    description: str | None = None
    category: str | None = Field(None, max_length=100)
    price: float | None = Field(None, ge=0)
    image_url: str | None = Field(None, max_length=1000)


class RestockProductRequest(BaseModel):
    stock_quantity: int = Field(..., ge=0)


class AppendOrderStatusRequest(BaseModel):
    status: str = Field(..., max_length=50)
    note: str | None = Field(None, max_length=1000)


class CustomOrderOtpRequest(BaseModel):
    email: EmailStr
    phone: str | None = Field(None, max_length=30)


class CustomerInfoIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    phone: str = Field(..., min_length=1, max_length=30)
    email: EmailStr


class ProductDetailsIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    specifications: str | None = None
    customizations: str | None = None
    expected_price: float = Field(0.0, ge=0)
    attachments: list[str] = Field(default_factory=list)


class CustomOrderAddressIn(BaseModel):
    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    zip: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=1, max_length=100)


class SubmitCustomOrderRequest(BaseModel):
    otp: str = Field(..., max_length=64)
    customer_info: CustomerInfoIn
    product_details: ProductDetailsIn
    shipping_address: CustomOrderAddressIn


class UpdateCustomOrderStatusRequest(BaseModel):
    status: str = Field(..., max_length=50)
    admin_notes: str | None = None
    approved_price: float | None = Field(None, ge=0)
    validation_notes: str | None = None


# --- Response Schemas ---


class StatusResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "ok"}]}}

    status: str = "ok"
    message: str | None = None


class RegistrationStartedResponse(BaseModel):
    registration_token: str
    message: str = "OTP sent successfully"


class UserResponse(BaseModel):
    id: str
    email: str
    username: str | None = None
    phone: str | None = None
    address: str | None = None
    is_admin: bool = False


class LoginResponse(BaseModel):
    token: str
    user: UserResponse


class ProductIdResponse(BaseModel):
    product_id: str


class ProductResponse(BaseModel):
    id: str
    title: str
    description: str | None = None
    category: str | None = None
    price: float
    image_url: str | None = None
    stock_quantity: int
    is_enabled: bool
    is_available: bool


class CartLineResponse(BaseModel):
    id: str
    product_id: str
    title: str
    unit_price: float
    quantity: int
    line_total: float
    image_url: str | None = None
    stock_quantity: int
    is_available: bool


class CartResponse(BaseModel):
    items: list[CartLineResponse]
    total: float


class CartItemIdResponse(BaseModel):
    item_id: str


class OrderIdResponse(BaseModel):
    order_id: str


class OrderItemResponse(BaseModel):
    product_id: str
    title: str
    unit_price: float
    quantity: int
    image_url: str | None = None
    category: str | None = None


class StatusEntryResponse(BaseModel):
    status: str
    note: str | None = None
    changed_at: datetime


class OrderResponse(BaseModel):
    id: str
    order_number: str
    user_id: str
    status: str
    items: list[OrderItemResponse]
    shipping_address: ShippingInfo | None = None
    subtotal: float
    shipping_cost: float
    tax_amount: float
    total_amount: float
    status_history: list[StatusEntryResponse]
    placed_at: datetime | None = None


class DashboardTotals(BaseModel):
    total_orders: int
    total_spent: float
    average_order_value: float
    total_items: int


class DashboardStatsResponse(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "stats": {"total_orders": 3, "total_spent": 150.0, "average_order_value": 50.0, "total_items": 4},
                    "favorite_category": "Painting",
                    "order_frequency": "1.5/month",
                    "loyalty_status": "Silver",
                }
            ]
        }
    }

    stats: DashboardTotals
    favorite_category: str
    order_frequency: str
    loyalty_status: str


class CustomOrderIdResponse(BaseModel):
    custom_order_id: str


class CustomOrderResponse(BaseModel):
    id: str
    order_number: str
    user_id: str
    status: str
    customer_info: dict
    product_details: dict
    shipping_address: dict
    admin_notes: str | None = None
    validation_notes: str | None = None
    approved_price: float | None = None
    approved_by: str | None = None
    status_history: list[StatusEntryResponse]
    created_at: datetime | None = None
