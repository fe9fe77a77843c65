from django.utils.translation import gettext_lazy as _

NAMESPACE = 'user_management'

ROLE_FLASH_MESSAGES = {
    f'{NAMESPACE}.roles.add.flash.success.%role%': _("Role '%role%' has been added!"),
    f'{NAMESPACE}.roles.edit.flash.success.%role%': _("Role '%role%' has been edited!"),
    f'{NAMESPACE}.roles.delete.flash.success.%role%': _("Role '%role%' has been deleted!"),
}
