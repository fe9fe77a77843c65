"""
Admin list configurators describe how a model collection is listed:
which columns are shown, which filters and orderings are allowed, and
which routes the list links to.
"""

from dataclasses import dataclass

from django.db import DEFAULT_DB_ALIAS
from django.urls import reverse
from django.utils.http import urlencode


@dataclass(frozen=True)
class ListField:
    name: str
    header: str
    sortable: bool = False


@dataclass(frozen=True)
class ListFilter:
    name: str
    label: str
    lookup: str = 'icontains'


class AbstractAdminListConfigurator:
    """
    Base configurator bound to a database alias.

    Configurators hold no request state; build a new one per request.
    """
    model = None
    fields = ()
    filters = ()
    per_page = 20
    default_ordering = ('pk',)

    index_url_name = None
    add_url_name = None
    edit_url_name = None
    delete_url_name = None
    url_pk_kwarg = 'pk'

    def __init__(self, using=DEFAULT_DB_ALIAS):
        self.using = using

    def get_entity_name(self):
        return self.model._meta.object_name

    def get_queryset(self):
        return self.model._default_manager.using(self.using).all()

    def get_index_url(self):
        return {'path': self.index_url_name, 'params': {}}

    def get_add_url(self):
        return {'path': self.add_url_name, 'params': {}}

    def get_edit_url(self, item):
        return {'path': self.edit_url_name, 'params': {self.url_pk_kwarg: item.pk}}

    def get_delete_url(self, item):
        return {'path': self.delete_url_name, 'params': {self.url_pk_kwarg: item.pk}}

    def get_field(self, name):
        for field in self.fields:
            if field.name == name:
                return field
        return None

    def get_filter(self, name):
        for list_filter in self.filters:
            if list_filter.name == name:
                return list_filter
        return None

    def get_value(self, item, field):
        return getattr(item, field.name, '')

    def can_add(self):
        return self.add_url_name is not None

    def can_edit(self, item):
        return self.edit_url_name is not None

    def can_delete(self, item):
        return self.delete_url_name is not None


def resolve_url(url_spec, route_params=False):
    """
    Resolve a ``{'path': ..., 'params': ...}`` spec.

    Params go into the route kwargs when ``route_params`` is set, otherwise
    into the query string.
    """
    params = url_spec.get('params') or {}
    if route_params:
        return reverse(url_spec['path'], kwargs=params)
    url = reverse(url_spec['path'])
    if params:
        url = f'{url}?{urlencode(params)}'
    return url


def resolve_index_url(configurator):
    return resolve_url(configurator.get_index_url())
