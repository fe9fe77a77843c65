"""
Flash message helpers.

Messages are looked up by key in a catalog, translated, and have their
``%placeholder%`` parameters substituted before they reach the messages
framework.
"""

from django.conf import settings
from django.contrib import messages
from django.utils.module_loading import import_string
from django.utils.translation import gettext


class FlashTypes:
    SUCCESS = 'success'
    ERROR = 'error'
    WARNING = 'warning'
    INFO = 'info'


FLASH_LEVELS = {
    FlashTypes.SUCCESS: messages.SUCCESS,
    FlashTypes.ERROR: messages.ERROR,
    FlashTypes.WARNING: messages.WARNING,
    FlashTypes.INFO: messages.INFO,
}


class FlashMessageFormatter:
    """Turn a message key and its parameters into a user-facing string"""

    def __init__(self, catalog=None):
        self.catalog = dict(catalog or {})

    def format(self, key, parameters=None):
        # Unknown keys fall back to the key itself
        entry = self.catalog.get(key, key)
        # Lazy entries are translated on str()
        message = gettext(entry) if isinstance(entry, str) else str(entry)
        for placeholder, value in (parameters or {}).items():
            message = message.replace(placeholder, str(value))
        return message


def get_flash_formatter():
    """Build the formatter configured in settings with every registered catalog"""
    catalog = {}
    for path in getattr(settings, 'FLASH_MESSAGE_CATALOGS', []):
        catalog.update(import_string(path))
    formatter_class = import_string(
        getattr(settings, 'FLASH_MESSAGE_FORMATTER', 'core.flash.FlashMessageFormatter')
    )
    return formatter_class(catalog)


def add_flash(request, flash_type, message):
    messages.add_message(request, FLASH_LEVELS[flash_type], message, extra_tags=flash_type)
