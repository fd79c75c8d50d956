from .dtos import ProductDTO
from .models import Product


class ProductMapper:
    """Maps catalog rows to the display attributes a cart line renders."""

    @staticmethod
    def to_dto(product: Product) -> ProductDTO:
        return ProductDTO(
            id=product.id,
            title=product.title,
            price=str(product.price),
            image=product.image or "",
        )
