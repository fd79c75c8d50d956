from django.db import models
from django.utils import timezone

from apps.catalog.models import Product
from apps.users.models import User

MIN_QUANTITY = 1
# Upper bound of PositiveIntegerField on every supported backend.
MAX_QUANTITY = 2147483647


class CartLine(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="cart_lines")
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="cart_lines")
    quantity = models.PositiveIntegerField(default=MIN_QUANTITY)
    added_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "cart_lines"
        constraints = [
            # One line per (user, product); repeat adds merge into it.
            models.UniqueConstraint(
                fields=["user", "product"], name="cart_line_user_product_uniq"
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gte=MIN_QUANTITY),
                name="cart_line_quantity_min_1",
            ),
        ]
        indexes = [
            models.Index(fields=["product"], name="cart_line_product_idx"),
        ]

    def __str__(self):
        return f"CartLine {self.id}: user={self.user_id} product={self.product_id} x{self.quantity}"
