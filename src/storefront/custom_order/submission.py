"""Custom order submission — commands, handler and the two-step flow.

The flow mirrors checkout: the submitted details are validated, the code is
verified and committed as used, then the request is recorded in its own unit
of work.
"""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.custom_order.custom_order import CustomerInfo, CustomOrder, DeliveryAddress, ProductRequest
from storefront.domain import storefront
from storefront.shared.errors import InvalidOtp
from storefront.shared.numbering import allocate_number, process_numbered
from storefront.utils.logging import get_logger
from storefront.verification.code import CodePurpose
from storefront.verification.issuer import VerifyCode, issue_code

logger = get_logger(__name__)

CUSTOM_ORDER_NUMBER_PREFIX = "CUST"


def _loads(value):
    return json.loads(value) if isinstance(value, str) else value


def _product_request_fields(product_details: dict) -> dict:
    fields = dict(product_details)
    attachments = fields.get("attachments")
    if isinstance(attachments, list):
        fields["attachments"] = json.dumps(attachments)
    return fields


@storefront.command(part_of="CustomOrder")
class RequestCustomOrderCode:
    user_id = Identifier(required=True)
    email = String(required=True, max_length=254)


@storefront.command(part_of="CustomOrder")
class SubmitCustomOrder:
    user_id = Identifier(required=True)
    customer_info = Text(required=True)  # JSON: name, phone, email
    product_details = Text(required=True)  # JSON: title, description, specifications, ...
    shipping_address = Text(required=True)  # JSON: street, city, state, zip, country


@storefront.command_handler(part_of=CustomOrder)
class CustomOrderSubmissionHandler:
    @handle(RequestCustomOrderCode)
    def request_custom_order_code(self, command):
        otp = issue_code(command.user_id, CodePurpose.CUSTOM_ORDER.value, recipient=command.email)
        return str(otp.id)

    @handle(SubmitCustomOrder)
    def submit_custom_order(self, command):
        product_details = _product_request_fields(_loads(command.product_details))

        repo = current_domain.repository_for(CustomOrder)
        custom_order = CustomOrder.submit(
            user_id=command.user_id,
            order_number=allocate_number(CUSTOM_ORDER_NUMBER_PREFIX, repo.number_taken),
            customer_info=_loads(command.customer_info),
            product_details=product_details,
            shipping_address=_loads(command.shipping_address),
        )
        repo.add(custom_order)

        logger.info(
            "custom_order_submitted",
            custom_order_id=str(custom_order.id),
            order_number=custom_order.order_number,
            user_id=str(command.user_id),
        )
        return str(custom_order.id)


def request_custom_order_otp(user_id, email) -> None:
    current_domain.process(RequestCustomOrderCode(user_id=str(user_id), email=email), asynchronous=False)


def submit_custom_order(user_id, otp, customer_info: dict, product_details: dict, shipping_address: dict, as_of=None):
    """Record a custom order request. Malformed details are rejected before the code is spent."""
    CustomerInfo(**customer_info)
    ProductRequest(**_product_request_fields(product_details))
    DeliveryAddress(**shipping_address)

    verified = current_domain.process(
        VerifyCode(
            user_id=str(user_id),
            purpose=CodePurpose.CUSTOM_ORDER.value,
            code=otp,
            as_of=as_of,
        ),
        asynchronous=False,
    )
    if not verified:
        raise InvalidOtp()

    return process_numbered(
        SubmitCustomOrder,
        user_id=str(user_id),
        customer_info=json.dumps(customer_info),
        product_details=json.dumps(product_details),
        shipping_address=json.dumps(shipping_address),
    )
