"""
Settings views for listing, adding, editing and deleting roles
"""

import logging

from django.shortcuts import render, redirect, get_object_or_404
from django.db import transaction
from django.views.decorators.http import require_http_methods, require_POST, require_safe

from adminlist.adminlist import create_list, delete_csrf_intention
from adminlist.configurator import resolve_index_url
from core.csrf import check_intention_token
from core.decorators import require_super_admin, deny_access_unless_super_admin
from core.flash import FlashTypes, add_flash, get_flash_formatter

from .adminlist import RoleAdminListConfigurator
from .flash_messages import NAMESPACE
from .forms import RoleForm
from .models import Role

logger = logging.getLogger(__name__)

LIST_ROUTE = 'user_management:settings_roles'


def _flash_success(request, action, role):
    formatter = get_flash_formatter()
    message = formatter.format(
        f'{NAMESPACE}.roles.{action}.flash.success.%role%',
        {'%role%': role.name}
    )
    add_flash(request, FlashTypes.SUCCESS, message)


@require_super_admin
@require_safe
def role_list(request):
    """List roles"""
    adminlist = create_list(RoleAdminListConfigurator())
    adminlist.bind_request(request)

    return render(request, 'adminlist/list.html', {'adminlist': adminlist})


@require_super_admin
@require_http_methods(['GET', 'POST'])
def role_add(request):
    """Add a role"""
    role = Role(name='')
    form = RoleForm(instance=role)

    if request.method == 'POST':
        form = RoleForm(request.POST, instance=role)
        if form.is_valid():
            with transaction.atomic():
                role = form.save()

            logger.info(f"Role '{role.name}' created by {request.user.username}")
            _flash_success(request, 'add', role)
            return redirect(LIST_ROUTE)

    return render(request, 'user_management/roles/add.html', {'form': form})


@require_super_admin
@require_http_methods(['GET', 'POST'])
def role_edit(request, role_id):
    """Edit a role"""
    role = get_object_or_404(Role, pk=role_id)
    form = RoleForm(instance=role)

    if request.method == 'POST':
        form = RoleForm(request.POST, instance=role)
        if form.is_valid():
            with transaction.atomic():
                role = form.save()

            logger.info(f"Role {role.pk} renamed to '{role.name}' by {request.user.username}")
            _flash_success(request, 'edit', role)
            return redirect(LIST_ROUTE)

    context = {
        'form': form,
        'role': role,
    }

    return render(request, 'user_management/roles/edit.html', context)


@require_POST
def role_delete(request, role_id):
    """
    Delete a role.

    The csrf token is checked before authorization: a request with a wrong
    token goes back to the list index without touching anything.
    """
    configurator = RoleAdminListConfigurator()
    csrf_id = delete_csrf_intention(configurator)

    if not check_intention_token(request, csrf_id):
        logger.warning(f"Invalid csrf token for '{csrf_id}' on role {role_id}")
        return redirect(resolve_index_url(configurator))

    deny_access_unless_super_admin(request)

    role = Role.objects.filter(pk=role_id).first()
    if role is not None:
        with transaction.atomic():
            role.delete()

        logger.info(f"Role '{role.name}' deleted by {request.user.username}")
        _flash_success(request, 'delete', role)

    return redirect(LIST_ROUTE)
