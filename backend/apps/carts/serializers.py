from rest_framework import serializers

from .models import MAX_QUANTITY, MIN_QUANTITY

# Range of the BigAutoField primary keys.
MAX_ID = 2**63 - 1


class ProductSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    title = serializers.CharField()
    price = serializers.CharField()
    image = serializers.CharField(allow_blank=True)


class CartLineReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    user_id = serializers.IntegerField()
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField()
    added_at = serializers.CharField(allow_null=True)
    product = ProductSummarySerializer(allow_null=True)


class CartReadSerializer(serializers.Serializer):
    user_id = serializers.IntegerField(allow_null=True)
    count = serializers.IntegerField()
    items = CartLineReadSerializer(many=True)


class CartCountSerializer(serializers.Serializer):
    count = serializers.IntegerField(min_value=0)


class AddToCartSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1, max_value=MAX_ID)
    quantity = serializers.IntegerField(
        min_value=MIN_QUANTITY, max_value=MAX_QUANTITY, default=MIN_QUANTITY
    )

    def to_internal_value(self, data):
        # Clients written against the camelCase contract send productId.
        if hasattr(data, "get") and data.get("product_id") is None and data.get("productId") is not None:
            data = {**dict(data.items()), "product_id": data.get("productId")}
        return super().to_internal_value(data)


class UpdateQuantitySerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=MIN_QUANTITY, max_value=MAX_QUANTITY)
