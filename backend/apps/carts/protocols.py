from __future__ import annotations

from typing import Iterable, List, Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from apps.carts.dtos import CartLineDTO
    from apps.carts.models import CartLine
    from apps.catalog.models import Product
    from apps.users.models import User


class CartLineRepositoryProtocol(Protocol):
    def list_for_user(self, user_id: int) -> Iterable["CartLine"]:
        ...

    def get_by_id(self, line_id: int, *, for_update: bool = False) -> Optional["CartLine"]:
        ...

    def get_for_user_product(
        self, user_id: int, product_id: int, *, for_update: bool = False
    ) -> Optional["CartLine"]:
        ...

    def create(self, **data) -> "CartLine":
        ...

    def save(self, line: "CartLine") -> "CartLine":
        ...

    def count_for_user(self, user_id: int) -> int:
        ...

    def delete_by_id(self, line_id: int) -> int:
        ...

    def delete_for_user(self, user_id: int) -> int:
        ...

    def delete_for_product(self, product_id: int) -> int:
        ...


class UserRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional["User"]:
        ...


class ProductRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional["Product"]:
        ...


class CartLineMapperProtocol(Protocol):
    def to_dto(self, line: "CartLine") -> "CartLineDTO":
        ...

    def many_to_dto(self, lines: Iterable["CartLine"]) -> List["CartLineDTO"]:
        ...
