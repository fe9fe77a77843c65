from adminlist.configurator import AbstractAdminListConfigurator, ListField, ListFilter
from .models import Role


class RoleAdminListConfigurator(AbstractAdminListConfigurator):
    """List configuration for roles in the settings panel"""
    model = Role
    fields = (
        ListField('name', 'Role', sortable=True),
    )
    filters = (
        ListFilter('name', 'Role'),
    )
    default_ordering = ('name',)

    index_url_name = 'user_management:settings_roles'
    add_url_name = 'user_management:settings_roles_add'
    edit_url_name = 'user_management:settings_roles_edit'
    delete_url_name = 'user_management:settings_roles_delete'
    url_pk_kwarg = 'role_id'
