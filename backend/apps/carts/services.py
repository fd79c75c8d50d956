from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from django.db import IntegrityError, transaction
from rest_framework import status

from apps.api.exceptions import ApplicationError
from apps.common import get_logger
from .dtos import CartLineDTO
from .models import MAX_QUANTITY
from .protocols import (
    CartLineMapperProtocol,
    CartLineRepositoryProtocol,
    ProductRepositoryProtocol,
    UserRepositoryProtocol,
)
from .utils import clamp_quantity

logger = get_logger(__name__).bind(component="carts", layer="service")

ErrorTuple = Tuple[str, str, Optional[Dict[str, Any]]]


class UserNotFoundError(ApplicationError):
    """Raised when the user a cart operation targets does not exist."""

    def __init__(self, user_id):
        super().__init__(
            "NOT_FOUND",
            "User not found",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"userId": str(user_id)},
        )
        self.user_id = user_id


class ProductNotFoundError(ApplicationError):
    """Raised when adding a product the catalog does not know."""

    def __init__(self, product_id):
        super().__init__(
            "NOT_FOUND",
            "Product not found",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"productId": str(product_id)},
        )
        self.product_id = product_id


class CartLineNotFoundError(ApplicationError):
    """Raised when a cart line id does not resolve."""

    def __init__(self, line_id):
        super().__init__(
            "NOT_FOUND",
            "Cart item not found",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"id": str(line_id)},
        )
        self.line_id = line_id


class QuantityLimitError(ApplicationError):
    """Raised when a line's quantity would exceed what the store can hold."""

    def __init__(self, quantity):
        super().__init__(
            "VALIDATION_ERROR",
            f"Quantity cannot exceed {MAX_QUANTITY}",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"quantity": str(quantity)},
        )
        self.quantity = quantity


def _ensure_within_limit(quantity: int) -> int:
    if quantity > MAX_QUANTITY:
        raise QuantityLimitError(quantity)
    return quantity


class CartService:
    """
    Cart rules on top of the cart line store.

    Every mutation is a single read-decide-write step inside one transaction.
    The service keeps no state of its own and can be shared across requests.
    """

    def __init__(
        self,
        lines: CartLineRepositoryProtocol,
        users: UserRepositoryProtocol,
        products: ProductRepositoryProtocol,
        line_mapper: CartLineMapperProtocol,
    ):
        self.lines = lines
        self.users = users
        self.products = products
        self.line_mapper = line_mapper
        self.logger = logger.bind(service="CartService")

    def get_cart_items(self, user_id: Optional[int]) -> List[CartLineDTO]:
        """List a user's lines; an unknown user yields an empty cart, not an error."""
        self.logger.debug("Listing cart items", user_id=user_id)
        if user_id is None or not self.users.get(id=user_id):
            self.logger.info("Cart listing for unknown user; returning empty cart", user_id=user_id)
            return []
        return self.line_mapper.many_to_dto(self.lines.list_for_user(user_id))

    def count_items(self, user_id: Optional[int]) -> int:
        """Number of lines in the cart. Reports 0 instead of raising on any failure."""
        if user_id is None:
            return 0
        try:
            return int(self.lines.count_for_user(user_id))
        except Exception as exc:
            self.logger.exception("Cart count failed; reporting zero", user_id=user_id, error=str(exc))
            return 0

    def add_to_cart(self, user_id: int, product_id: int, quantity: int) -> CartLineDTO:
        self.logger.info(
            "Adding product to cart",
            user_id=user_id,
            product_id=product_id,
            requested=quantity,
        )
        user = self.users.get(id=user_id)
        if not user:
            self.logger.warning("Add to cart failed: user missing", user_id=user_id)
            raise UserNotFoundError(user_id)
        product = self.products.get(id=product_id)
        if not product:
            self.logger.warning(
                "Add to cart failed: product missing", user_id=user_id, product_id=product_id
            )
            raise ProductNotFoundError(product_id)
        amount = _ensure_within_limit(clamp_quantity(quantity))

        with transaction.atomic():
            line = self.lines.get_for_user_product(user_id, product_id, for_update=True)
            if line is None:
                try:
                    with transaction.atomic():
                        line = self.lines.create(user=user, product=product, quantity=amount)
                except IntegrityError:
                    # A concurrent add inserted the line after our read.
                    line = self.lines.get_for_user_product(user_id, product_id, for_update=True)
                    if line is None:
                        raise
                    self.logger.debug(
                        "Cart line created by concurrent request; merging",
                        user_id=user_id,
                        product_id=product_id,
                        line_id=line.id,
                    )
                else:
                    self.logger.info(
                        "Cart line created",
                        user_id=user_id,
                        product_id=product_id,
                        line_id=line.id,
                        quantity=line.quantity,
                    )
                    return self.line_mapper.to_dto(line)
            total = line.quantity + amount
            if total > MAX_QUANTITY:
                self.logger.warning(
                    "Add to cart failed: quantity limit exceeded",
                    user_id=user_id,
                    product_id=product_id,
                    line_id=line.id,
                    current=line.quantity,
                    amount=amount,
                )
                raise QuantityLimitError(total)
            line.quantity = total
            self.lines.save(line)
        self.logger.info(
            "Cart line quantity increased",
            user_id=user_id,
            product_id=product_id,
            line_id=line.id,
            quantity=line.quantity,
        )
        return self.line_mapper.to_dto(line)

    def update_quantity(self, line_id: int, quantity: int) -> CartLineDTO:
        # Ownership is checked by the caller (see authorize_line_mutation).
        self.logger.info("Updating cart line quantity", line_id=line_id, requested=quantity)
        with transaction.atomic():
            line = self.lines.get_by_id(line_id, for_update=True)
            if not line:
                self.logger.warning("Cart line update failed: not found", line_id=line_id)
                raise CartLineNotFoundError(line_id)
            line.quantity = _ensure_within_limit(clamp_quantity(quantity))
            self.lines.save(line)
        return self.line_mapper.to_dto(line)

    def remove_item(self, line_id: int) -> None:
        with transaction.atomic():
            removed = self.lines.delete_by_id(line_id)
        self.logger.info("Cart line removed", line_id=line_id, removed=removed)

    def clear_cart(self, user_id: int) -> None:
        if not self.users.get(id=user_id):
            self.logger.warning("Cart clear failed: user missing", user_id=user_id)
            raise UserNotFoundError(user_id)
        with transaction.atomic():
            removed = self.lines.delete_for_user(user_id)
        self.logger.info("Cart cleared", user_id=user_id, removed=removed)

    def purge_product(self, product_id: int) -> int:
        """Drop a retired product from every cart. Returns the number of lines removed."""
        with transaction.atomic():
            removed = self.lines.delete_for_product(product_id)
        self.logger.info("Product purged from carts", product_id=product_id, removed=removed)
        return removed

    def authorize_line_mutation(
        self,
        line_id: int,
        actor_id: Optional[int],
        *,
        missing_ok: bool = False,
    ) -> Optional[ErrorTuple]:
        """
        Check that ``line_id`` belongs to ``actor_id`` before the boundary mutates it.

        Returns ``None`` when the mutation may proceed, otherwise a
        ``(code, message, details)`` tuple. With ``missing_ok`` an absent line
        is allowed through so idempotent deletes stay silent.
        """
        self.logger.debug(
            "Authorizing cart line mutation",
            line_id=line_id,
            actor_id=actor_id,
            missing_ok=missing_ok,
        )
        if actor_id is None:
            self.logger.warning("Cart line mutation unauthorized", line_id=line_id)
            return ("UNAUTHORIZED", "Authentication required", None)
        line = self.lines.get_by_id(line_id)
        if not line:
            if missing_ok:
                return None
            self.logger.info("Cart line not found", line_id=line_id, actor_id=actor_id)
            return ("NOT_FOUND", "Cart item not found", {"id": str(line_id)})
        if line.user_id != actor_id:
            self.logger.warning(
                "Cart line mutation forbidden",
                line_id=line_id,
                actor_id=actor_id,
                owner_id=line.user_id,
            )
            return (
                "FORBIDDEN",
                "You do not have permission to modify this cart item",
                {"id": str(line_id)},
            )
        return None
