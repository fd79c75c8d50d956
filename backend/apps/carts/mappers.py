from typing import Iterable, List, Optional

from apps.catalog.mappers import ProductMapper
from .dtos import CartDTO, CartLineDTO
from .models import CartLine


class CartLineMapper:
    def __init__(self, product_mapper: Optional[ProductMapper] = None) -> None:
        self.product_mapper = product_mapper or ProductMapper()

    def to_dto(self, line: CartLine) -> CartLineDTO:
        product = getattr(line, "product", None)
        added_at = getattr(line, "added_at", None)
        return CartLineDTO(
            id=line.id,
            user_id=line.user_id,
            product_id=line.product_id,
            quantity=line.quantity,
            added_at=added_at.isoformat() if added_at else None,
            product=self.product_mapper.to_dto(product) if product is not None else None,
        )

    def many_to_dto(self, lines: Iterable[CartLine]) -> List[CartLineDTO]:
        return [self.to_dto(line) for line in lines]


def build_cart_dto(user_id: Optional[int], items: List[CartLineDTO]) -> CartDTO:
    return CartDTO(user_id=user_id, count=len(items), items=list(items))
