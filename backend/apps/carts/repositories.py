from typing import Optional

from apps.common.repository import GenericRepository
from .models import CartLine


class CartLineRepository(GenericRepository[CartLine]):
    def __init__(self):
        super().__init__(CartLine)

    def _base_queryset(self, for_update: bool = False):
        if for_update:
            # Row lock only; callers must already be inside transaction.atomic().
            return self.model.objects.select_for_update()
        return self.model.objects.select_related("product")

    def list_for_user(self, user_id: int):
        return self._base_queryset().filter(user_id=user_id).order_by("id")

    def get_by_id(self, line_id: int, *, for_update: bool = False) -> Optional[CartLine]:
        return self._base_queryset(for_update).filter(id=line_id).first()

    def get_for_user_product(
        self, user_id: int, product_id: int, *, for_update: bool = False
    ) -> Optional[CartLine]:
        return (
            self._base_queryset(for_update)
            .filter(user_id=user_id, product_id=product_id)
            .first()
        )

    def count_for_user(self, user_id: int) -> int:
        return self.count(user_id=user_id)

    def delete_by_id(self, line_id: int) -> int:
        return self.delete_where(id=line_id)

    def delete_for_user(self, user_id: int) -> int:
        return self.delete_where(user_id=user_id)

    def delete_for_product(self, product_id: int) -> int:
        return self.delete_where(product_id=product_id)
