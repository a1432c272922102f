# utils/middleware.py

import logging
from utils.context import set_request_context, reset_request_context, get_client_ip

logger = logging.getLogger(__name__)


class AuditContextMiddleware:
    """
    Middleware to capture request context for audit logging.
    The context is always reset when the response (or exception) leaves.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        user = getattr(request, 'user', None)

        token = set_request_context(
            user=user,
            ip_address=get_client_ip(request),
            request_path=request.path,
        )

        try:
            response = self.get_response(request)
        finally:
            reset_request_context(token)

        return response
