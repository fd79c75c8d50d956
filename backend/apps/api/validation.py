from typing import Any, Optional

from django.http import HttpRequest
from rest_framework.exceptions import AuthenticationFailed as DRFAuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken

from apps.api.utils import error_response
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="validation")

_jwt_authenticator = JWTAuthentication()

# Views that reject unauthenticated callers, keyed by the methods that need a user.
AUTHENTICATED_CART_VIEWS = {
    "CartView": ("GET", "DELETE"),
    "CartItemListView": ("POST",),
    "CartItemDetailView": ("PUT", "DELETE"),
}


def _is_authenticated_user(request: HttpRequest) -> bool:
    user = getattr(request, "user", None)
    if user and getattr(user, "is_authenticated", False) and getattr(user, "id", None):
        return True

    # DRF authenticates lazily inside the view; this runs earlier, so resolve the
    # bearer token here. Token parsing itself stays with simplejwt.
    meta = getattr(request, "META", {}) or {}
    if not meta.get("HTTP_AUTHORIZATION"):
        return False

    try:
        authenticated = _jwt_authenticator.authenticate(request)
    except (InvalidToken, DRFAuthenticationFailed) as exc:
        logger.warning("JWT authentication failed", detail=str(exc))
        return False

    if not authenticated:
        return False

    user, token = authenticated
    if not getattr(user, "is_authenticated", False) or not getattr(user, "id", None):
        return False

    request.user = user
    request.auth = token
    logger.debug("Authenticated user from bearer token", user_id=user.id)
    return True


def _set_validated_user(request: HttpRequest, user_id: Optional[int]) -> None:
    request.validated_user_id = user_id


def _resolve_optional_user(request: HttpRequest) -> None:
    """Best-effort identity for read paths that must never fail."""
    try:
        user_id = int(request.user.id) if _is_authenticated_user(request) else None
    except Exception as exc:
        logger.warning("Optional user resolution failed; continuing anonymously", error=str(exc))
        user_id = None
    _set_validated_user(request, user_id)


def validate_request_context(request: HttpRequest, view_class, view_kwargs) -> Any:
    """
    Performs request level validation for the cart API views.
    Returns a DRF Response when validation fails; otherwise None and
    attaches ``validated_user_id`` to the request instance.
    """
    view_name = getattr(view_class, "__name__", "")
    method = getattr(request, "method", None)

    logger.debug("Running request context validation", view=view_name, method=method)

    if view_name == "CartCountView":
        _resolve_optional_user(request)
        logger.debug(
            "Resolved cart count user",
            user_id=getattr(request, "validated_user_id", None),
        )
        return None

    methods = AUTHENTICATED_CART_VIEWS.get(view_name)
    if methods is None or method not in methods:
        return None

    if not _is_authenticated_user(request):
        logger.warning("Cart request requires authentication", view=view_name, method=method)
        return error_response("UNAUTHORIZED", "Authentication required")

    actor_id = int(request.user.id)
    _set_validated_user(request, actor_id)
    if view_name == "CartItemDetailView":
        logger.debug(
            "Validated cart item request",
            user_id=actor_id,
            line_id=view_kwargs.get("line_id"),
            method=method,
        )
    else:
        logger.debug("Validated cart request", view=view_name, user_id=actor_id, method=method)
    return None
