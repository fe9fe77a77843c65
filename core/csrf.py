"""
Per-intention CSRF tokens for destructive settings panel actions.

Django's CsrfViewMiddleware protects every POST with one token per session.
Forms that trigger destructive actions additionally post a token bound to an
intention (e.g. ``delete-role``), so a token issued for one action cannot be
replayed against another.
"""

import logging
import warnings

from django.conf import settings
from django.utils.crypto import constant_time_compare, get_random_string, salted_hmac

logger = logging.getLogger(__name__)

SESSION_KEY = '_intention_csrf_secret'
TOKEN_FIELD = 'token'

_KEY_SALT = 'core.csrf.intention'


class RemovedInNextMajorWarning(DeprecationWarning):
    pass


def make_intention_token(secret: str, intention: str) -> str:
    return salted_hmac(f'{_KEY_SALT}.{intention}', secret).hexdigest()


def get_intention_token(request, intention: str) -> str:
    """Return the token for ``intention``, creating the session secret if needed."""
    secret = request.session.get(SESSION_KEY)
    if not secret:
        secret = get_random_string(32)
        request.session[SESSION_KEY] = secret
    return make_intention_token(secret, intention)


def is_intention_token_valid(request, intention: str, token) -> bool:
    if not token:
        return False
    secret = request.session.get(SESSION_KEY)
    if not secret:
        return False
    return constant_time_compare(make_intention_token(secret, intention), str(token))


def allow_missing_token(intention: str, field: str = TOKEN_FIELD) -> bool:
    """
    Legacy mode for forms that post no token at all.

    Emits a deprecation warning and returns whether the request may proceed.
    """
    message = (
        f'Not passing a csrf token with id "{intention}" in field "{field}" is deprecated '
        f'and will be required in the next major version. If you override the adminlist '
        f'delete template make sure to post a csrf token.'
    )
    warnings.warn(message, RemovedInNextMajorWarning, stacklevel=3)
    logger.warning(message)
    return bool(getattr(settings, 'ALLOW_MISSING_CSRF_TOKEN', True))


def check_intention_token(request, intention: str, field: str = TOKEN_FIELD) -> bool:
    """
    Validate the intention token posted in ``field``.

    A request without the field at all goes through the legacy path.
    """
    if field not in request.POST:
        return allow_missing_token(intention, field)
    return is_intention_token_valid(request, intention, request.POST.get(field))
