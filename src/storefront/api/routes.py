"""FastAPI endpoints for the storefront.

Thin adapters that translate HTTP requests into domain commands and
workflow calls. No business logic — just schema→command→response translation.
"""

from fastapi import APIRouter, Depends
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.api.auth import current_user, require_admin
from storefront.api.schemas import (
    AddToCartRequest,
    AppendOrderStatusRequest,
    CartItemIdResponse,
    CartLineResponse,
    CartResponse,
    CreateProductRequest,
    CustomOrderIdResponse,
    CustomOrderOtpRequest,
    CustomOrderResponse,
    DashboardStatsResponse,
    DashboardTotals,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    OrderIdResponse,
    OrderItemResponse,
    OrderResponse,
    PlaceOrderRequest,
    ProductIdResponse,
    ProductResponse,
    RegistrationCompleteRequest,
    RegistrationStartedResponse,
    RegistrationStartRequest,
    ResetPasswordRequest,
    RestockProductRequest,
    StatusEntryResponse,
    StatusResponse,
    SubmitCustomOrderRequest,
    UpdateCartItemRequest,
    UpdateCustomOrderStatusRequest,
    UpdateProductRequest,
    UpdateProfileRequest,
    UserResponse,
)
from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity
from storefront.cart.listing import compute_total, list_cart
from storefront.catalogue.management import (
    AddProduct,
    DisableProduct,
    EnableProduct,
    RestockProduct,
    UpdateProductDetails,
)
from storefront.catalogue.product import Product
from storefront.checkout.workflow import place_order, request_checkout_otp
from storefront.custom_order.custom_order import CustomOrder
from storefront.custom_order.review import (
    UpdateCustomOrderStatus,
    custom_order_for_user,
    custom_orders_for_user,
)
from storefront.custom_order.submission import request_custom_order_otp, submit_custom_order
from storefront.identity.authentication import authenticate
from storefront.identity.password_reset import RequestPasswordReset, ResetPassword
from storefront.identity.profile import UpdateProfile
from storefront.identity.registration import CompleteRegistration, StartRegistration
from storefront.identity.tokens import create_access_token
from storefront.identity.user import User
from storefront.order.ledger import order_for_user, orders_for_user
from storefront.order.order import Order
from storefront.order.status import AppendOrderStatus
from storefront.order.summary import customer_summary

auth_router = APIRouter(prefix="/auth", tags=["auth"])
product_router = APIRouter(prefix="/products", tags=["products"])
cart_router = APIRouter(prefix="/cart", tags=["cart"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
custom_order_router = APIRouter(prefix="/custom-orders", tags=["custom-orders"])
user_router = APIRouter(prefix="/users", tags=["users"])
admin_router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# ---------------------------------------------------------------------------
# Serializers
# ---------------------------------------------------------------------------
def _user_response(user) -> UserResponse:
    return UserResponse(
        id=str(user.id),
        email=user.email,
        username=user.username,
        phone=user.phone,
        address=user.address,
        is_admin=bool(user.is_admin),
    )


def _product_response(product) -> ProductResponse:
    return ProductResponse(
        id=str(product.id),
        title=product.title,
        description=product.description,
        category=product.category,
        price=product.price,
        image_url=product.image_url,
        stock_quantity=product.stock_quantity,
        is_enabled=bool(product.is_enabled),
        is_available=bool(product.is_available),
    )


def _order_items(order) -> list[OrderItemResponse]:
    return [
        OrderItemResponse(
            product_id=str(item.product_id),
            title=item.title,
            unit_price=item.unit_price,
            quantity=item.quantity,
            image_url=item.image_url,
            category=item.category,
        )
        for item in order.sorted_items
    ]


def _timeline(entries) -> list[StatusEntryResponse]:
    return [StatusEntryResponse(status=e.status, note=e.note, changed_at=e.changed_at) for e in entries]


def _order_response(order) -> OrderResponse:
    pricing = order.pricing
    return OrderResponse(
        id=str(order.id),
        order_number=order.order_number,
        user_id=str(order.user_id),
        status=order.status,
        items=_order_items(order),
        shipping_address=order.shipping_address.to_dict() if order.shipping_address else None,
        subtotal=pricing.subtotal,
        shipping_cost=pricing.shipping_cost,
        tax_amount=pricing.tax_amount,
        total_amount=pricing.total_amount,
        status_history=_timeline(order.timeline),
        placed_at=order.placed_at,
    )


def _custom_order_response(custom_order) -> CustomOrderResponse:
    product_details = custom_order.product_details.to_dict()
    product_details["attachments"] = custom_order.product_details.attachment_urls
    return CustomOrderResponse(
        id=str(custom_order.id),
        order_number=custom_order.order_number,
        user_id=str(custom_order.user_id),
        status=custom_order.status,
        customer_info=custom_order.customer_info.to_dict(),
        product_details=product_details,
        shipping_address=custom_order.shipping_address.to_dict(),
        admin_notes=custom_order.admin_notes,
        validation_notes=custom_order.validation_notes,
        approved_price=custom_order.approved_price,
        approved_by=str(custom_order.approved_by) if custom_order.approved_by else None,
        status_history=_timeline(custom_order.timeline),
        created_at=custom_order.created_at,
    )


# ---------------------------------------------------------------------------
# Auth & profile
# ---------------------------------------------------------------------------
@auth_router.post("/register/start", response_model=RegistrationStartedResponse)
async def start_registration(body: RegistrationStartRequest) -> RegistrationStartedResponse:
    command = StartRegistration(email=body.email, password=body.password)
    token = current_domain.process(command, asynchronous=False)
    return RegistrationStartedResponse(registration_token=token)


@auth_router.post("/register/complete", status_code=201, response_model=LoginResponse)
async def complete_registration(body: RegistrationCompleteRequest) -> LoginResponse:
    command = CompleteRegistration(token=body.registration_token, code=body.otp)
    user_id = current_domain.process(command, asynchronous=False)
    user = current_domain.repository_for(User).get(user_id)
    token = create_access_token(user.id, user.email, is_admin=user.is_admin)
    return LoginResponse(token=token, user=_user_response(user))


@auth_router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest) -> LoginResponse:
    token, user = authenticate(body.email, body.password)
    return LoginResponse(token=token, user=_user_response(user))


@auth_router.get("/profile", response_model=UserResponse)
async def get_profile(user: dict = Depends(current_user)) -> UserResponse:
    return _user_response(current_domain.repository_for(User).get(user["id"]))


@auth_router.put("/profile", response_model=UserResponse)
async def update_profile(body: UpdateProfileRequest, user: dict = Depends(current_user)) -> UserResponse:
    command = UpdateProfile(
        user_id=user["id"],
        username=body.username,
        phone=body.phone,
        address=body.address,
    )
    current_domain.process(command, asynchronous=False)
    return _user_response(current_domain.repository_for(User).get(user["id"]))


@auth_router.post("/forgot-password", response_model=StatusResponse)
async def forgot_password(body: ForgotPasswordRequest) -> StatusResponse:
    current_domain.process(RequestPasswordReset(email=body.email), asynchronous=False)
    return StatusResponse(message="If an account with that email exists, a password reset link has been sent.")


@auth_router.post("/reset-password/{token}", response_model=StatusResponse)
async def reset_password(token: str, body: ResetPasswordRequest) -> StatusResponse:
    current_domain.process(ResetPassword(token=token, new_password=body.password), asynchronous=False)
    return StatusResponse(message="Password has been reset successfully.")


# ---------------------------------------------------------------------------
# Catalogue (public)
# ---------------------------------------------------------------------------
@product_router.get("", response_model=list[ProductResponse])
async def list_products(search: str | None = None, category: str | None = None) -> list[ProductResponse]:
    products = current_domain.repository_for(Product).search(term=search, category=category)
    return [_product_response(p) for p in products]


@product_router.get("/categories", response_model=list[str])
async def list_categories() -> list[str]:
    return current_domain.repository_for(Product).categories()


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    product = current_domain.repository_for(Product).get(product_id)
    if not product.is_enabled:
        raise ObjectNotFoundError(f"Product {product_id} not found")
    return _product_response(product)


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
@cart_router.get("", response_model=CartResponse)
async def get_cart(user: dict = Depends(current_user)) -> CartResponse:
    lines = list_cart(user["id"])
    return CartResponse(
        items=[
            CartLineResponse(
                id=line.id,
                product_id=line.product_id,
                title=line.title,
                unit_price=float(line.unit_price),
                quantity=line.quantity,
                line_total=float(line.line_total),
                image_url=line.image_url,
                stock_quantity=line.stock_quantity,
                is_available=line.is_available,
            )
            for line in lines
        ],
        total=float(compute_total(lines)),
    )


@cart_router.post("/items", status_code=201, response_model=CartItemIdResponse)
async def add_to_cart(body: AddToCartRequest, user: dict = Depends(current_user)) -> CartItemIdResponse:
    command = AddToCart(user_id=user["id"], product_id=body.product_id, quantity=body.quantity)
    item_id = current_domain.process(command, asynchronous=False)
    return CartItemIdResponse(item_id=item_id)


@cart_router.put("/items/{item_id}", response_model=StatusResponse)
async def update_cart_item(
    item_id: str, body: UpdateCartItemRequest, user: dict = Depends(current_user)
) -> StatusResponse:
    command = UpdateCartQuantity(user_id=user["id"], item_id=item_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/items/{item_id}", response_model=StatusResponse)
async def remove_cart_item(item_id: str, user: dict = Depends(current_user)) -> StatusResponse:
    current_domain.process(RemoveFromCart(user_id=user["id"], item_id=item_id), asynchronous=False)
    return StatusResponse()


@cart_router.delete("", response_model=StatusResponse)
async def clear_cart(user: dict = Depends(current_user)) -> StatusResponse:
    current_domain.process(ClearCart(user_id=user["id"]), asynchronous=False)
    return StatusResponse()


@cart_router.post("/checkout-otp", response_model=StatusResponse)
async def checkout_otp(user: dict = Depends(current_user)) -> StatusResponse:
    request_checkout_otp(user["id"])
    return StatusResponse(message="OTP sent successfully")


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
@order_router.post("/place-order", status_code=201, response_model=OrderIdResponse)
async def place_order_endpoint(body: PlaceOrderRequest, user: dict = Depends(current_user)) -> OrderIdResponse:
    order_id = place_order(user["id"], body.otp, body.shipping_info.model_dump())
    return OrderIdResponse(order_id=order_id)


@order_router.get("", response_model=list[OrderResponse])
async def my_orders(user: dict = Depends(current_user)) -> list[OrderResponse]:
    return [_order_response(o) for o in orders_for_user(user["id"])]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def my_order(order_id: str, user: dict = Depends(current_user)) -> OrderResponse:
    return _order_response(order_for_user(user["id"], order_id))


@order_router.get("/{order_id}/items", response_model=list[OrderItemResponse])
async def my_order_items(order_id: str, user: dict = Depends(current_user)) -> list[OrderItemResponse]:
    return _order_items(order_for_user(user["id"], order_id))


# ---------------------------------------------------------------------------
# Customer dashboard
# ---------------------------------------------------------------------------
@user_router.get("/dashboard-stats", response_model=DashboardStatsResponse)
async def dashboard_stats(user: dict = Depends(current_user)) -> DashboardStatsResponse:
    summary = customer_summary(user["id"])
    return DashboardStatsResponse(
        stats=DashboardTotals(
            total_orders=summary.total_orders,
            total_spent=float(summary.total_spent),
            average_order_value=float(summary.average_order_value),
            total_items=summary.total_items,
        ),
        favorite_category=summary.favorite_category,
        order_frequency=summary.order_frequency,
        loyalty_status=summary.loyalty_status,
    )


# ---------------------------------------------------------------------------
# Custom orders
# ---------------------------------------------------------------------------
@custom_order_router.post("/request-otp", response_model=StatusResponse)
async def custom_order_otp(body: CustomOrderOtpRequest, user: dict = Depends(current_user)) -> StatusResponse:
    request_custom_order_otp(user["id"], body.email)
    return StatusResponse(message="OTP sent successfully")


@custom_order_router.post("/submit", status_code=201, response_model=CustomOrderIdResponse)
async def submit_custom_order_endpoint(
    body: SubmitCustomOrderRequest, user: dict = Depends(current_user)
) -> CustomOrderIdResponse:
    custom_order_id = submit_custom_order(
        user["id"],
        body.otp,
        customer_info=body.customer_info.model_dump(),
        product_details=body.product_details.model_dump(),
        shipping_address=body.shipping_address.model_dump(),
    )
    return CustomOrderIdResponse(custom_order_id=custom_order_id)


@custom_order_router.get("/my-orders", response_model=list[CustomOrderResponse])
async def my_custom_orders(user: dict = Depends(current_user)) -> list[CustomOrderResponse]:
    return [_custom_order_response(o) for o in custom_orders_for_user(user["id"])]


@custom_order_router.get("/{custom_order_id}", response_model=CustomOrderResponse)
async def my_custom_order(custom_order_id: str, user: dict = Depends(current_user)) -> CustomOrderResponse:
    return _custom_order_response(custom_order_for_user(user["id"], custom_order_id))


# ---------------------------------------------------------------------------
# Admin back office
# ---------------------------------------------------------------------------
@admin_router.get("/products", response_model=list[ProductResponse])
async def admin_list_products(search: str | None = None, category: str | None = None) -> list[ProductResponse]:
    products = current_domain.repository_for(Product).search(term=search, category=category, include_disabled=True)
    return [_product_response(p) for p in products]


@admin_router.post("/products", status_code=201, response_model=ProductIdResponse)
async def admin_add_product(body: CreateProductRequest) -> ProductIdResponse:
    command = AddProduct(
        title=body.title,
        description=body.description,
        category=body.category,
        price=body.price,
        image_url=body.image_url,
        stock_quantity=body.stock_quantity,
    )
    product_id = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=product_id)


@admin_router.put("/products/{product_id}", response_model=StatusResponse)
async def admin_update_product(product_id: str, body: UpdateProductRequest) -> StatusResponse:
    command = UpdateProductDetails(product_id=product_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_router.put("/products/{product_id}/stock", response_model=StatusResponse)
async def admin_restock_product(product_id: str, body: RestockProductRequest) -> StatusResponse:
    command = RestockProduct(product_id=product_id, stock_quantity=body.stock_quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_router.put("/products/{product_id}/enable", response_model=StatusResponse)
async def admin_enable_product(product_id: str) -> StatusResponse:
    current_domain.process(EnableProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


@admin_router.put("/products/{product_id}/disable", response_model=StatusResponse)
async def admin_disable_product(product_id: str) -> StatusResponse:
    current_domain.process(DisableProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


@admin_router.get("/orders", response_model=list[OrderResponse])
async def admin_list_orders() -> list[OrderResponse]:
    return [_order_response(o) for o in current_domain.repository_for(Order).find_all()]


@admin_router.get("/orders/{order_id}", response_model=OrderResponse)
async def admin_get_order(order_id: str) -> OrderResponse:
    return _order_response(current_domain.repository_for(Order).get(order_id))


@admin_router.post("/orders/{order_id}/status", response_model=StatusResponse)
async def admin_append_order_status(
    order_id: str, body: AppendOrderStatusRequest, admin: dict = Depends(require_admin)
) -> StatusResponse:
    command = AppendOrderStatus(order_id=order_id, status=body.status, note=body.note, changed_by=admin["id"])
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_router.get("/custom-orders", response_model=list[CustomOrderResponse])
async def admin_list_custom_orders() -> list[CustomOrderResponse]:
    return [_custom_order_response(o) for o in current_domain.repository_for(CustomOrder).find_all()]


@admin_router.get("/custom-orders/{custom_order_id}", response_model=CustomOrderResponse)
async def admin_get_custom_order(custom_order_id: str) -> CustomOrderResponse:
    return _custom_order_response(current_domain.repository_for(CustomOrder).get(custom_order_id))


@admin_router.patch("/custom-orders/{custom_order_id}/status", response_model=StatusResponse)
async def admin_update_custom_order_status(
    custom_order_id: str, body: UpdateCustomOrderStatusRequest, admin: dict = Depends(require_admin)
) -> StatusResponse:
    command = UpdateCustomOrderStatus(
        custom_order_id=custom_order_id,
        status=body.status,
        admin_notes=body.admin_notes,
        approved_price=body.approved_price,
        validation_notes=body.validation_notes,
        changed_by=admin["id"],
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
