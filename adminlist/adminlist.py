"""
Request-bound admin list: applies filter, ordering and page parameters
from the query string to a configurator's queryset.
"""

from django.core.paginator import Paginator
from django.utils.http import urlencode
from django.utils.text import slugify

from .configurator import resolve_url

ORDER_ASC = 'ASC'
ORDER_DESC = 'DESC'
FILTER_PREFIX = 'filter_'


def delete_csrf_intention(configurator):
    """CSRF intention for delete actions, e.g. ``delete-role``"""
    return f'delete-{slugify(configurator.get_entity_name())}'


class AdminList:

    def __init__(self, configurator):
        self.configurator = configurator
        self.order_by = None
        self.order_direction = ORDER_ASC
        self.filter_values = {}
        self.page_number = 1
        self._page = None

    def bind_request(self, request):
        params = request.GET

        order_by = params.get('orderBy', '')
        field = self.configurator.get_field(order_by)
        if field is not None and field.sortable:
            self.order_by = field.name
            direction = params.get('orderDirection', ORDER_ASC).upper()
            self.order_direction = ORDER_DESC if direction == ORDER_DESC else ORDER_ASC

        self.filter_values = {}
        for list_filter in self.configurator.filters:
            value = params.get(f'{FILTER_PREFIX}{list_filter.name}', '').strip()
            if value:
                self.filter_values[list_filter.name] = value

        self.page_number = params.get('page', 1)
        self._page = None

    def get_queryset(self):
        queryset = self.configurator.get_queryset()
        for name, value in self.filter_values.items():
            list_filter = self.configurator.get_filter(name)
            queryset = queryset.filter(**{f'{list_filter.name}__{list_filter.lookup}': value})
        if self.order_by:
            prefix = '-' if self.order_direction == ORDER_DESC else ''
            queryset = queryset.order_by(f'{prefix}{self.order_by}')
        else:
            queryset = queryset.order_by(*self.configurator.default_ordering)
        return queryset

    def get_page(self):
        if self._page is None:
            paginator = Paginator(self.get_queryset(), self.configurator.per_page)
            self._page = paginator.get_page(self.page_number)
        return self._page

    def get_columns(self):
        return list(self.configurator.fields)

    def get_rows(self):
        """Rows for the current page with their cell values and action urls"""
        configurator = self.configurator
        rows = []
        for item in self.get_page():
            rows.append({
                'item': item,
                'values': [configurator.get_value(item, field) for field in configurator.fields],
                'edit_url': resolve_url(configurator.get_edit_url(item), route_params=True)
                if configurator.can_edit(item) else None,
                'delete_url': resolve_url(configurator.get_delete_url(item), route_params=True)
                if configurator.can_delete(item) else None,
            })
        return rows

    def get_query_string(self, **overrides):
        """
        Query string carrying the bound filter, order and page state.

        Overrides replace single parameters; an override of None drops it.
        """
        params = {f'{FILTER_PREFIX}{name}': value for name, value in self.filter_values.items()}
        if self.order_by:
            params['orderBy'] = self.order_by
            params['orderDirection'] = self.order_direction
        params['page'] = self.page_number
        for key, value in overrides.items():
            if value is None:
                params.pop(key, None)
            else:
                params[key] = value
        return f'?{urlencode(params)}'

    def get_sort_links(self):
        """Header links per column; sorting restarts at the first page"""
        links = []
        for column in self.configurator.fields:
            url = None
            if column.sortable:
                ascending = self.order_by == column.name and self.order_direction == ORDER_ASC
                url = self.get_query_string(
                    orderBy=column.name,
                    orderDirection=ORDER_DESC if ascending else ORDER_ASC,
                    page=None,
                )
            links.append({'column': column, 'url': url})
        return links

    def get_previous_page_url(self):
        page = self.get_page()
        if not page.has_previous():
            return None
        return self.get_query_string(page=page.previous_page_number())

    def get_next_page_url(self):
        page = self.get_page()
        if not page.has_next():
            return None
        return self.get_query_string(page=page.next_page_number())

    def get_filter_fields(self):
        return [
            {'filter': list_filter, 'value': self.filter_values.get(list_filter.name, '')}
            for list_filter in self.configurator.filters
        ]

    def get_active_filters(self):
        return dict(self.filter_values)

    def get_order_by(self):
        return self.order_by

    def get_order_direction(self):
        return self.order_direction

    def get_add_url(self):
        if not self.configurator.can_add():
            return None
        return resolve_url(self.configurator.get_add_url())

    def get_index_url(self):
        return resolve_url(self.configurator.get_index_url())

    def get_delete_csrf_intention(self):
        return delete_csrf_intention(self.configurator)

    def get_entity_name(self):
        return self.configurator.get_entity_name()


def create_list(configurator):
    return AdminList(configurator)
