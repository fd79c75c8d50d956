from django.urls import path

from .views import CartCountView, CartItemDetailView, CartItemListView, CartView

urlpatterns = [
    path("", CartView.as_view(), name="api-cart"),
    path("count/", CartCountView.as_view(), name="api-cart-count"),
    path("items/", CartItemListView.as_view(), name="api-cart-items"),
    path("items/<int:line_id>/", CartItemDetailView.as_view(), name="api-cart-item-detail"),
]
