from typing import Optional

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer
from apps.api.utils import error_response
from apps.common import get_logger
from .container import build_cart_service
from .mappers import build_cart_dto
from .serializers import (
    AddToCartSerializer,
    CartCountSerializer,
    CartLineReadSerializer,
    CartReadSerializer,
    UpdateQuantitySerializer,
)

logger = get_logger(__name__).bind(component="carts", layer="view")


def _actor_id(request) -> Optional[int]:
    actor_id = getattr(request, "validated_user_id", None)
    if actor_id is not None:
        return int(actor_id)
    user = getattr(request, "user", None)
    if user is not None and getattr(user, "is_authenticated", False) and getattr(user, "id", None):
        return int(user.id)
    return None


class CartView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartView")

    @extend_schema(
        summary="List cart items",
        description="Returns every line in the caller's cart with product display attributes.",
        responses={
            200: CartReadSerializer,
            401: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        actor_id = _actor_id(request)
        items = self.service.get_cart_items(actor_id)
        self.log.debug("Cart listed via API", user_id=actor_id, count=len(items))
        return Response(CartReadSerializer(build_cart_dto(actor_id, items)).data)

    @extend_schema(
        summary="Clear cart",
        description="Removes every line from the caller's cart. Repeating the call has no further effect.",
        responses={
            204: None,
            401: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def delete(self, request):
        actor_id = _actor_id(request)
        self.log.info("Clearing cart via API", user_id=actor_id)
        self.service.clear_cart(actor_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CartCountView(APIView):
    # Badge endpoint: anonymous callers and broken tokens get 0, never an error.
    permission_classes = [AllowAny]
    authentication_classes = []
    service = build_cart_service()
    log = logger.bind(view="CartCountView")

    @extend_schema(
        summary="Count cart items",
        description="Number of distinct lines in the caller's cart; 0 when unauthenticated or on failure.",
        responses={200: CartCountSerializer},
    )
    def get(self, request):
        try:
            count = self.service.count_items(_actor_id(request))
        except Exception as exc:
            self.log.exception("Cart count failed; reporting zero", error=str(exc))
            count = 0
        return Response(CartCountSerializer({"count": count}).data)


class CartItemListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartItemListView")

    @extend_schema(
        summary="Add product to cart",
        description=(
            "Adds a product to the caller's cart. Adding a product that is already in the cart "
            "increases the existing line's quantity instead of creating a second line."
        ),
        request=AddToCartSerializer,
        responses={
            200: CartLineReadSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            401: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        serializer = AddToCartSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        actor_id = _actor_id(request)
        data = serializer.validated_data
        dto = self.service.add_to_cart(actor_id, data["product_id"], data["quantity"])
        self.log.info(
            "Product added via API",
            user_id=actor_id,
            product_id=data["product_id"],
            line_id=dto.id,
            quantity=dto.quantity,
        )
        return Response(CartLineReadSerializer(dto).data, status=status.HTTP_200_OK)


class CartItemDetailView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartItemDetailView")

    @extend_schema(
        summary="Update cart item quantity",
        parameters=[OpenApiParameter("line_id", int, OpenApiParameter.PATH)],
        request=UpdateQuantitySerializer,
        responses={
            200: CartLineReadSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            401: OpenApiResponse(response=ErrorResponseSerializer),
            403: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def put(self, request, line_id: int):
        serializer = UpdateQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        actor_id = _actor_id(request)
        error = self.service.authorize_line_mutation(line_id, actor_id)
        if error:
            code, message, details = error
            return error_response(code, message, details)
        dto = self.service.update_quantity(line_id, serializer.validated_data["quantity"])
        self.log.info("Cart item updated via API", line_id=line_id, user_id=actor_id, quantity=dto.quantity)
        return Response(CartLineReadSerializer(dto).data)

    @extend_schema(
        summary="Remove cart item",
        description="Removes a line from the caller's cart. Removing an id that no longer exists succeeds.",
        parameters=[OpenApiParameter("line_id", int, OpenApiParameter.PATH)],
        responses={
            204: None,
            401: OpenApiResponse(response=ErrorResponseSerializer),
            403: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def delete(self, request, line_id: int):
        actor_id = _actor_id(request)
        error = self.service.authorize_line_mutation(line_id, actor_id, missing_ok=True)
        if error:
            code, message, details = error
            return error_response(code, message, details)
        self.service.remove_item(line_id)
        self.log.info("Cart item removed via API", line_id=line_id, user_id=actor_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
