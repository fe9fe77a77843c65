"""
Permission decorators for settings panel views
"""

import logging
from functools import wraps

from django.core.exceptions import PermissionDenied

logger = logging.getLogger(__name__)

SUPER_ADMIN_ROLE = 'ROLE_SUPER_ADMIN'


def has_super_admin_capability(user) -> bool:
    """
    Check whether a user holds the super administrator capability.

    Only authenticated, active superusers qualify. Anonymous users never do.
    """
    if user is None or not user.is_authenticated:
        return False
    return bool(user.is_active and user.is_superuser)


def deny_access_unless_super_admin(request):
    """
    Raise PermissionDenied unless the current user is a super administrator.

    Views that must run other checks first (e.g. CSRF validation) call this
    directly instead of using the decorator.
    """
    user = getattr(request, 'user', None)
    if not has_super_admin_capability(user):
        username = getattr(user, 'username', '') or 'anonymous'
        logger.info(f"Access denied for {username} on {request.path}: {SUPER_ADMIN_ROLE} required")
        raise PermissionDenied("Super administrator privileges required")


def require_super_admin(view_func):
    """
    Decorator to require super administrator privileges
    """
    @wraps(view_func)
    def _wrapped_view(request, *args, **kwargs):
        deny_access_unless_super_admin(request)
        return view_func(request, *args, **kwargs)
    return _wrapped_view
