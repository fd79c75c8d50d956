from django.utils.deprecation import MiddlewareMixin
from rest_framework.renderers import JSONRenderer
from rest_framework.response import Response

from apps.api.validation import validate_request_context
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="middleware")


def _prepare_for_render(response):
    # Responses built here never pass through APIView.finalize_response.
    if isinstance(response, Response) and not getattr(response, "accepted_renderer", None):
        response.accepted_renderer = JSONRenderer()
        response.accepted_media_type = "application/json"
        response.renderer_context = {}
    return response


class RequestValidationMiddleware(MiddlewareMixin):
    """
    Resolves the caller's identity and rejects unauthenticated cart requests
    before the view runs.
    """

    def process_view(self, request, view_func, view_args, view_kwargs):
        view_class = getattr(view_func, "view_class", None)
        if not view_class:
            return None
        response = validate_request_context(request, view_class, view_kwargs)
        if response is not None:
            logger.info(
                "Request blocked by validation",
                view=getattr(view_class, "__name__", str(view_class)),
                method=getattr(request, "method", None),
                status=getattr(response, "status_code", None),
            )
            return _prepare_for_render(response)
        return None
