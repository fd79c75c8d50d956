import unittest

from apps.carts.models import MAX_QUANTITY
from apps.carts.serializers import AddToCartSerializer, UpdateQuantitySerializer


class AddToCartSerializerTests(unittest.TestCase):
    def test_accepts_snake_case_payload(self):
        serializer = AddToCartSerializer(data={"product_id": 4, "quantity": 3})
        self.assertTrue(serializer.is_valid(), serializer.errors)
        self.assertEqual(dict(serializer.validated_data), {"product_id": 4, "quantity": 3})

    def test_accepts_camel_case_product_id(self):
        serializer = AddToCartSerializer(data={"productId": "4"})
        self.assertTrue(serializer.is_valid(), serializer.errors)
        self.assertEqual(serializer.validated_data["product_id"], 4)

    def test_quantity_defaults_to_one(self):
        serializer = AddToCartSerializer(data={"product_id": 4})
        self.assertTrue(serializer.is_valid(), serializer.errors)
        self.assertEqual(serializer.validated_data["quantity"], 1)

    def test_snake_case_wins_over_alias(self):
        serializer = AddToCartSerializer(data={"product_id": 4, "productId": 9})
        self.assertTrue(serializer.is_valid(), serializer.errors)
        self.assertEqual(serializer.validated_data["product_id"], 4)

    def test_rejects_invalid_values(self):
        for payload, field in [
            ({}, "product_id"),
            ({"product_id": 0}, "product_id"),
            ({"product_id": "abc"}, "product_id"),
            ({"product_id": 1, "quantity": 0}, "quantity"),
            ({"product_id": 1, "quantity": -2}, "quantity"),
            ({"product_id": 1, "quantity": MAX_QUANTITY + 1}, "quantity"),
            ({"product_id": 10**20}, "product_id"),
        ]:
            serializer = AddToCartSerializer(data=payload)
            self.assertFalse(serializer.is_valid(), payload)
            self.assertIn(field, serializer.errors)


class UpdateQuantitySerializerTests(unittest.TestCase):
    def test_requires_quantity(self):
        serializer = UpdateQuantitySerializer(data={})
        self.assertFalse(serializer.is_valid())
        self.assertIn("quantity", serializer.errors)

    def test_rejects_quantity_below_one(self):
        self.assertFalse(UpdateQuantitySerializer(data={"quantity": 0}).is_valid())

    def test_rejects_quantity_above_limit(self):
        serializer = UpdateQuantitySerializer(data={"quantity": MAX_QUANTITY + 1})
        self.assertFalse(serializer.is_valid())
        self.assertIn("quantity", serializer.errors)

    def test_accepts_positive_quantity(self):
        serializer = UpdateQuantitySerializer(data={"quantity": "6"})
        self.assertTrue(serializer.is_valid(), serializer.errors)
        self.assertEqual(serializer.validated_data["quantity"], 6)


if __name__ == "__main__":
    unittest.main()
