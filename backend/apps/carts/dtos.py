from dataclasses import dataclass, field
from typing import List, Optional

from apps.catalog.dtos import ProductDTO


@dataclass
class CartLineDTO:
    id: int
    user_id: int
    product_id: int
    quantity: int
    added_at: Optional[str] = None
    product: Optional[ProductDTO] = None


@dataclass
class CartDTO:
    user_id: Optional[int]
    count: int
    items: List[CartLineDTO] = field(default_factory=list)
