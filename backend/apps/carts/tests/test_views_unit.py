import types
import unittest
from unittest.mock import Mock, patch

from rest_framework.test import APIRequestFactory, force_authenticate

from apps.api.validation import validate_request_context
from apps.carts.dtos import CartLineDTO
from apps.carts.services import ProductNotFoundError, UserNotFoundError
from apps.carts.views import (
    CartCountView,
    CartItemDetailView,
    CartItemListView,
    CartView,
)
from apps.catalog.dtos import ProductDTO


def make_line(line_id=1, user_id=7, product_id=10, quantity=2):
    return CartLineDTO(
        id=line_id,
        user_id=user_id,
        product_id=product_id,
        quantity=quantity,
        added_at="2025-01-01T00:00:00+00:00",
        product=ProductDTO(id=product_id, title=f"Product {product_id}", price="10.00", image=""),
    )


class CartViewsUnitTests(unittest.TestCase):
    def setUp(self):
        self.factory = APIRequestFactory()

    def dispatch(self, request, view_cls, **kwargs):
        pre_response = validate_request_context(request, view_cls, kwargs)
        if pre_response is not None:
            return pre_response
        view = view_cls.as_view()
        return view(request, **kwargs)

    def authenticate(self, request, user):
        request.user = user
        force_authenticate(request, user=user)

    @staticmethod
    def _user(user_id):
        return types.SimpleNamespace(
            id=user_id, is_authenticated=True, is_staff=False, is_superuser=False
        )

    @staticmethod
    def _service():
        service = Mock()
        service.authorize_line_mutation.return_value = None
        return service

    def test_list_returns_cart_with_count(self):
        service = self._service()
        service.get_cart_items.return_value = [make_line(), make_line(2, product_id=11)]
        with patch.object(CartView, "service", service):
            request = self.factory.get("/api/cart/")
            self.authenticate(request, self._user(7))
            response = self.dispatch(request, CartView)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["user_id"], 7)
        self.assertEqual(response.data["count"], 2)
        self.assertEqual(response.data["items"][1]["product"]["title"], "Product 11")
        service.get_cart_items.assert_called_once_with(7)

    def test_list_requires_authentication(self):
        service = self._service()
        with patch.object(CartView, "service", service):
            request = self.factory.get("/api/cart/")
            response = self.dispatch(request, CartView)
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data["error"]["code"], "UNAUTHORIZED")
        service.get_cart_items.assert_not_called()

    def test_clear_cart_returns_no_content(self):
        service = self._service()
        with patch.object(CartView, "service", service):
            request = self.factory.delete("/api/cart/")
            self.authenticate(request, self._user(7))
            response = self.dispatch(request, CartView)
        self.assertEqual(response.status_code, 204)
        service.clear_cart.assert_called_once_with(7)

    def test_clear_cart_unknown_user_maps_to_not_found(self):
        service = self._service()
        service.clear_cart.side_effect = UserNotFoundError(7)
        with patch.object(CartView, "service", service):
            request = self.factory.delete("/api/cart/")
            self.authenticate(request, self._user(7))
            response = self.dispatch(request, CartView)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["error"]["message"], "User not found")

    def test_add_accepts_camel_case_product_id(self):
        service = self._service()
        service.add_to_cart.return_value = make_line(product_id=3, quantity=2)
        with patch.object(CartItemListView, "service", service):
            request = self.factory.post(
                "/api/cart/items/", {"productId": 3, "quantity": 2}, format="json"
            )
            self.authenticate(request, self._user(7))
            response = self.dispatch(request, CartItemListView)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["product_id"], 3)
        service.add_to_cart.assert_called_once_with(7, 3, 2)

    def test_add_defaults_quantity_to_one(self):
        service = self._service()
        service.add_to_cart.return_value = make_line(quantity=1)
        with patch.object(CartItemListView, "service", service):
            request = self.factory.post("/api/cart/items/", {"product_id": 10}, format="json")
            self.authenticate(request, self._user(7))
            self.dispatch(request, CartItemListView)
        service.add_to_cart.assert_called_once_with(7, 10, 1)

    def test_add_rejects_non_positive_quantity(self):
        service = self._service()
        with patch.object(CartItemListView, "service", service):
            request = self.factory.post(
                "/api/cart/items/", {"productId": 3, "quantity": 0}, format="json"
            )
            self.authenticate(request, self._user(7))
            response = self.dispatch(request, CartItemListView)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["code"], "VALIDATION_ERROR")
        self.assertIn("quantity", response.data["error"]["details"])
        service.add_to_cart.assert_not_called()

    def test_add_rejects_missing_or_non_positive_product_id(self):
        service = self._service()
        for payload in ({"quantity": 1}, {"productId": 0, "quantity": 1}, {"productId": -5}):
            with patch.object(CartItemListView, "service", service):
                request = self.factory.post("/api/cart/items/", payload, format="json")
                self.authenticate(request, self._user(7))
                response = self.dispatch(request, CartItemListView)
            self.assertEqual(response.status_code, 400)
            self.assertIn("product_id", response.data["error"]["details"])
        service.add_to_cart.assert_not_called()

    def test_add_unknown_product_maps_to_not_found(self):
        service = self._service()
        service.add_to_cart.side_effect = ProductNotFoundError(99)
        with patch.object(CartItemListView, "service", service):
            request = self.factory.post("/api/cart/items/", {"productId": 99}, format="json")
            self.authenticate(request, self._user(7))
            response = self.dispatch(request, CartItemListView)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["error"]["details"], {"productId": "99"})

    def test_update_quantity_checks_ownership_first(self):
        service = self._service()
        service.authorize_line_mutation.return_value = (
            "FORBIDDEN",
            "You do not have permission to modify this cart item",
            {"id": "5"},
        )
        with patch.object(CartItemDetailView, "service", service):
            request = self.factory.put("/api/cart/items/5/", {"quantity": 3}, format="json")
            self.authenticate(request, self._user(7))
            response = self.dispatch(request, CartItemDetailView, line_id=5)
        self.assertEqual(response.status_code, 403)
        service.authorize_line_mutation.assert_called_once_with(5, 7)
        service.update_quantity.assert_not_called()

    def test_update_quantity_success(self):
        service = self._service()
        service.update_quantity.return_value = make_line(line_id=5, quantity=3)
        with patch.object(CartItemDetailView, "service", service):
            request = self.factory.put("/api/cart/items/5/", {"quantity": 3}, format="json")
            self.authenticate(request, self._user(7))
            response = self.dispatch(request, CartItemDetailView, line_id=5)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["quantity"], 3)
        service.update_quantity.assert_called_once_with(5, 3)

    def test_update_quantity_requires_positive_value(self):
        service = self._service()
        with patch.object(CartItemDetailView, "service", service):
            request = self.factory.put("/api/cart/items/5/", {"quantity": -1}, format="json")
            self.authenticate(request, self._user(7))
            response = self.dispatch(request, CartItemDetailView, line_id=5)
        self.assertEqual(response.status_code, 400)
        service.update_quantity.assert_not_called()

    def test_remove_item_missing_is_no_content(self):
        service = self._service()
        with patch.object(CartItemDetailView, "service", service):
            request = self.factory.delete("/api/cart/items/404/")
            self.authenticate(request, self._user(7))
            response = self.dispatch(request, CartItemDetailView, line_id=404)
        self.assertEqual(response.status_code, 204)
        service.authorize_line_mutation.assert_called_once_with(404, 7, missing_ok=True)
        service.remove_item.assert_called_once_with(404)

    def test_count_authenticated_user(self):
        service = self._service()
        service.count_items.return_value = 3
        with patch.object(CartCountView, "service", service):
            request = self.factory.get("/api/cart/count/")
            request.user = self._user(7)
            response = self.dispatch(request, CartCountView)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, {"count": 3})
        service.count_items.assert_called_once_with(7)

    def test_count_anonymous_is_zero(self):
        service = self._service()
        service.count_items.return_value = 0
        with patch.object(CartCountView, "service", service):
            request = self.factory.get("/api/cart/count/")
            response = self.dispatch(request, CartCountView)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, {"count": 0})
        service.count_items.assert_called_once_with(None)

    def test_count_invalid_token_is_zero(self):
        service = self._service()
        service.count_items.return_value = 0
        with patch.object(CartCountView, "service", service):
            request = self.factory.get(
                "/api/cart/count/", HTTP_AUTHORIZATION="Bearer not-a-jwt"
            )
            response = self.dispatch(request, CartCountView)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, {"count": 0})

    def test_count_swallows_service_failure(self):
        service = self._service()
        service.count_items.side_effect = RuntimeError("boom")
        with patch.object(CartCountView, "service", service):
            request = self.factory.get("/api/cart/count/")
            request.user = self._user(7)
            response = self.dispatch(request, CartCountView)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, {"count": 0})


if __name__ == "__main__":
    unittest.main()
