from django.utils.deprecation import MiddlewareMixin
from rest_framework.renderers import JSONRenderer

from apps.api.validation import VIEW_RULES, validate_request_context
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="middleware")


class RequestValidationMiddleware(MiddlewareMixin):
    """
    Runs authentication, role and query checks for class based API views
    before the view is dispatched. Views without a rule pass straight through.
    """

    def process_view(self, request, view_func, view_args, view_kwargs):
        view_class = getattr(view_func, "view_class", None)
        if view_class is None or view_class.__name__ not in VIEW_RULES:
            return None
        response = validate_request_context(request, view_class, view_kwargs)
        if response is None:
            return None
        logger.info(
            "Request blocked by validation",
            view=view_class.__name__,
            method=request.method,
            status=response.status_code,
            path=request.path,
        )
        # The view never runs, so content negotiation never happens.
        response.accepted_renderer = JSONRenderer()
        response.accepted_media_type = "application/json"
        response.renderer_context = {}
        return response
