from __future__ import annotations

from apps.catalog.mappers import ProductMapper
from apps.catalog.repositories import ProductRepository
from apps.users.repositories import UserRepository

from .mappers import CartLineMapper
from .repositories import CartLineRepository
from .services import CartService


def build_cart_service() -> CartService:
    return CartService(
        lines=CartLineRepository(),
        users=UserRepository(),
        products=ProductRepository(),
        line_mapper=CartLineMapper(ProductMapper()),
    )
