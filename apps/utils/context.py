# utils/context.py

"""
Request-scoped audit context.

Holds the user and client IP of the request being served so that
BaseModel.save() can stamp created_by / updated_by without every
service having to pass the request around.
"""

from contextvars import ContextVar
import logging

logger = logging.getLogger(__name__)

_request_context = ContextVar('edutrack_request_context', default=None)


def set_request_context(user=None, ip_address=None, request_path=None):
    """
    Set the audit context for the current request.

    This is called by AuditContextMiddleware at the start of each request.

    Returns:
        Token that can be passed to reset_request_context()
    """
    context = {
        'user': user if user is not None and user.is_authenticated else None,
        'ip_address': ip_address,
        'request_path': request_path or '',
    }
    logger.debug(f"Set request context: user={context['user']}, ip={ip_address}")
    return _request_context.set(context)


def get_request_context():
    """
    Get the current audit context.

    Returns:
        dict with user, ip_address and request_path, or None outside a request
    """
    return _request_context.get()


def reset_request_context(token):
    """Restore the context that was active before set_request_context()."""
    _request_context.reset(token)


def get_client_ip(request):
    """
    Extract the client's IP address from the request.

    Handles X-Forwarded-For header for proxied requests.
    """
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        # X-Forwarded-For can contain multiple IPs, take the first one
        return x_forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


# ============================================================================
# CONTEXT MANAGER
# ============================================================================

class RequestContext:
    """
    Context manager for temporarily setting the audit context.

    Useful for management commands that need to attribute changes.

    Example:
        with RequestContext(user=admin_user):
            record.save()  # created_by_id / updated_by_id are stamped
    """

    def __init__(self, user=None, ip_address=None, request_path=None):
        self.user = user
        self.ip_address = ip_address
        self.request_path = request_path
        self._token = None

    def __enter__(self):
        self._token = set_request_context(
            user=self.user,
            ip_address=self.ip_address,
            request_path=self.request_path,
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        reset_request_context(self._token)
