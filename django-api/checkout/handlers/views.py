"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors and result statuses to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from django.core.cache import cache
from rest_framework import status
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import AllowAny, BasePermission, IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from checkout import container
from checkout.cache import ORDER_STATUSES_KEY, customer_orders_key
from checkout.conf import checkout_setting
from checkout.domain import (
    AddressId,
    CustomerId,
    OrderId,
    OrderPlaceResult,
    OrderPlaceStatus,
    OrderStatusId,
    StatusUpdateResult,
)
from checkout.domain.errors import DomainError, ErrorCode, InvalidIdError
from checkout.handlers.serializers import (
    CheckoutRequestSerializer,
    DiscountCodeCreateSerializer,
    DiscountCodeSerializer,
    DiscountCodeUpdateSerializer,
    DiscountValidationSerializer,
    OrderDetailsSerializer,
    OrderStatusSerializer,
    OrderStatusUpdateSerializer,
    OrderSummarySerializer,
)

ERROR_STATUS = {
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ORDER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.DISCOUNT_CODE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.DISCOUNT_CODE_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.DISCOUNT_CODE_INVALID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.BASKET_CHANGED: status.HTTP_409_CONFLICT,
    ErrorCode.STOCK_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.DISCOUNT_EXHAUSTED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.REFERENCE_VIOLATION: status.HTTP_409_CONFLICT,
    ErrorCode.STORAGE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

PLACE_STATUS = {
    OrderPlaceStatus.OK: status.HTTP_201_CREATED,
    OrderPlaceStatus.BASKET_INVALID: status.HTTP_409_CONFLICT,
    OrderPlaceStatus.DISCOUNT_INVALID: status.HTTP_400_BAD_REQUEST,
    OrderPlaceStatus.SHIPPING_ADDRESS_INVALID: status.HTTP_403_FORBIDDEN,
    OrderPlaceStatus.REFERENCE_INVALID: status.HTTP_409_CONFLICT,
    OrderPlaceStatus.UNKNOWN_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

PLACE_MESSAGES = {
    OrderPlaceStatus.OK: "Order confirmed",
    OrderPlaceStatus.BASKET_INVALID: "Your basket has changed, please review it",
    OrderPlaceStatus.DISCOUNT_INVALID: "Discount codes cannot be applied",
    OrderPlaceStatus.SHIPPING_ADDRESS_INVALID: "Shipping address does not belong to you",
    OrderPlaceStatus.REFERENCE_INVALID: "Order references changed, please try again",
    OrderPlaceStatus.UNKNOWN_ERROR: "Order could not be placed",
}

STATUS_UPDATE_STATUS = {
    StatusUpdateResult.OK: status.HTTP_200_OK,
    StatusUpdateResult.ORDER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    StatusUpdateResult.STATUS_NOT_FOUND: status.HTTP_400_BAD_REQUEST,
}

STATUS_UPDATE_MESSAGES = {
    StatusUpdateResult.OK: "Order status updated",
    StatusUpdateResult.ORDER_NOT_FOUND: "Order not found",
    StatusUpdateResult.STATUS_NOT_FOUND: "Order status not found",
}


class IsCustomer(BasePermission):
    """Allows access only to authenticated users with a customer profile."""

    def has_permission(self, request, view) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and hasattr(user, "customer"))


def error_response(error: DomainError) -> Response:
    """Map a domain error to a response carrying only its code and message."""
    http_status = ERROR_STATUS.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    message = error.message
    if http_status >= 500:
        message = "Internal error"
    return Response({"code": error.code.value, "message": message}, status=http_status)


def customer_id_for(request: Request) -> CustomerId:
    customer = getattr(request.user, "customer", None)
    if customer is None:
        raise PermissionDenied("A customer account is required")
    return CustomerId(customer.pk)


def checkout_response(result: OrderPlaceResult) -> Response:
    body: dict[str, object] = {
        "status": result.status.value,
        "message": PLACE_MESSAGES[result.status],
    }
    if result.ok:
        body["orderId"] = result.order_id.value
    if result.pruned_product_ids:
        body["removedProductIds"] = [pid.value for pid in result.pruned_product_ids]
    if result.status is OrderPlaceStatus.DISCOUNT_INVALID:
        body["invalidCodes"] = list(result.discounts.invalid)
        body["unresolvedCodes"] = list(result.discounts.unresolved)
        body["stackingPermitted"] = result.discounts.stacking_permitted
    return Response(body, status=PLACE_STATUS[result.status])


class CheckoutView(APIView):
    """Handler for POST /api/orders/checkout"""

    permission_classes = [IsCustomer]

    def post(self, request: Request) -> Response:
        serializer = CheckoutRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        customer_id = customer_id_for(request)

        result = container.checkout_service().place_order(
            customer_id,
            AddressId(serializer.validated_data["shippingId"]),
            serializer.validated_data["discountCodes"],
        )
        return checkout_response(result)


class OrderListView(APIView):
    """Handler for GET /api/orders"""

    permission_classes = [IsCustomer]

    def get(self, request: Request) -> Response:
        customer_id = customer_id_for(request)
        key = customer_orders_key(customer_id.value)
        data = cache.get(key)
        if data is None:
            try:
                orders = container.order_query_service().list_orders(customer_id)
            except DomainError as e:
                return error_response(e)
            data = list(OrderSummarySerializer(orders, many=True).data)
            cache.set(key, data, timeout=checkout_setting("CACHE_TIMEOUT"))
        return Response(data)


class OrderDetailView(APIView):
    """Handler for GET /api/orders/{order_id}"""

    permission_classes = [IsCustomer]

    def get(self, request: Request, order_id: str) -> Response:
        customer_id = customer_id_for(request)
        try:
            details = container.order_query_service().get_order(customer_id, order_id)
        except DomainError as e:
            return error_response(e)
        return Response(OrderDetailsSerializer(details).data)


class LastPurchaseView(APIView):
    """Handler for GET /api/orders/last-purchase/{product_id}"""

    permission_classes = [IsCustomer]

    def get(self, request: Request, product_id: str) -> Response:
        customer_id = customer_id_for(request)
        try:
            purchased_on = container.order_query_service().get_last_purchase_date(
                customer_id, product_id
            )
        except DomainError as e:
            return error_response(e)
        return Response(
            {"lastPurchased": purchased_on.isoformat() if purchased_on else None}
        )


class OrderStatusListView(APIView):
    """Handler for GET /api/orders/status"""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        data = cache.get(ORDER_STATUSES_KEY)
        if data is None:
            try:
                statuses = container.order_status_workflow().list_statuses()
            except DomainError as e:
                return error_response(e)
            data = list(OrderStatusSerializer(statuses, many=True).data)
            cache.set(ORDER_STATUSES_KEY, data, timeout=checkout_setting("CACHE_TIMEOUT"))
        return Response(data)


class OrderStatusUpdateView(APIView):
    """Handler for PUT /api/orders/{order_id}/status"""

    permission_classes = [IsAdminUser]

    def put(self, request: Request, order_id: str) -> Response:
        try:
            parsed_id = OrderId.from_string(order_id)
        except ValueError:
            return error_response(InvalidIdError("order id"))
        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = container.order_status_workflow().update_order_status(
                parsed_id, OrderStatusId(serializer.validated_data["statusId"])
            )
        except DomainError as e:
            return error_response(e)
        return Response(
            {"status": result.value, "message": STATUS_UPDATE_MESSAGES[result]},
            status=STATUS_UPDATE_STATUS[result],
        )


class DiscountCodeListView(APIView):
    """Handler for GET and POST /api/discounts"""

    permission_classes = [IsAdminUser]

    def get(self, request: Request) -> Response:
        try:
            discounts = container.discount_service().list_discount_codes()
        except DomainError as e:
            return error_response(e)
        return Response(DiscountCodeSerializer(discounts, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = DiscountCodeCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            discount = container.discount_service().create_discount_code(
                code=data["code"],
                percent=data["percent"],
                uses=data["uses"],
                active=data["active"],
                stackable=data["stackable"],
            )
        except DomainError as e:
            return error_response(e)
        return Response(DiscountCodeSerializer(discount).data, status=status.HTTP_201_CREATED)


class DiscountCodeDetailView(APIView):
    """Handler for PUT /api/discounts/{discount_code_id}"""

    permission_classes = [IsAdminUser]

    def put(self, request: Request, discount_code_id: str) -> Response:
        serializer = DiscountCodeUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            discount = container.discount_service().update_discount_code(
                discount_code_id,
                percent=data.get("percent"),
                stackable=data.get("stackable"),
                active=data.get("active"),
                remaining_uses=data.get("remainingUses"),
            )
        except DomainError as e:
            return error_response(e)
        return Response(DiscountCodeSerializer(discount).data)


class DiscountCodeValidateView(APIView):
    """Handler for GET /api/discounts/validate?code="""

    permission_classes = [IsCustomer]

    def get(self, request: Request) -> Response:
        code = request.query_params.get("code", "")
        try:
            discount = container.discount_resolver().validate(code)
        except DomainError as e:
            return error_response(e)
        return Response(DiscountValidationSerializer(discount).data)
