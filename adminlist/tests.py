from django.test import RequestFactory, TestCase
from django.urls import reverse

from user_management.adminlist import RoleAdminListConfigurator
from user_management.models import Role
from .adminlist import AdminList, create_list, delete_csrf_intention
from .configurator import resolve_index_url, resolve_url


class AdminListBindingTest(TestCase):
    """Test request binding against the role configurator"""

    def setUp(self):
        self.factory = RequestFactory()
        for name in ["ROLE_ADMIN", "ROLE_EDITOR", "ROLE_WRITER", "ROLE_GUEST"]:
            Role.objects.create(name=name)

    def bind(self, params=None):
        adminlist = create_list(RoleAdminListConfigurator())
        adminlist.bind_request(self.factory.get("/", params or {}))
        return adminlist

    def names(self, adminlist):
        return [role.name for role in adminlist.get_page()]

    def test_default_ordering(self):
        adminlist = self.bind()

        self.assertIsInstance(adminlist, AdminList)
        self.assertEqual(self.names(adminlist), ["ROLE_ADMIN", "ROLE_EDITOR", "ROLE_GUEST", "ROLE_WRITER"])

    def test_order_descending(self):
        adminlist = self.bind({'orderBy': 'name', 'orderDirection': 'desc'})

        self.assertEqual(adminlist.get_order_by(), 'name')
        self.assertEqual(adminlist.get_order_direction(), 'DESC')
        self.assertEqual(self.names(adminlist)[0], "ROLE_WRITER")

    def test_unknown_order_field_is_ignored(self):
        adminlist = self.bind({'orderBy': 'password', 'orderDirection': 'DESC'})

        self.assertIsNone(adminlist.get_order_by())
        self.assertEqual(self.names(adminlist)[0], "ROLE_ADMIN")

    def test_filter_by_name(self):
        adminlist = self.bind({'filter_name': 'edit'})

        self.assertEqual(adminlist.get_active_filters(), {'name': 'edit'})
        self.assertEqual(self.names(adminlist), ["ROLE_EDITOR"])

    def test_blank_filter_is_ignored(self):
        adminlist = self.bind({'filter_name': '   '})

        self.assertEqual(adminlist.get_active_filters(), {})
        self.assertEqual(len(self.names(adminlist)), 4)

    def test_pagination(self):
        configurator = RoleAdminListConfigurator()
        configurator.per_page = 3
        adminlist = create_list(configurator)
        adminlist.bind_request(self.factory.get("/", {'page': 2}))

        page = adminlist.get_page()
        self.assertEqual(page.number, 2)
        self.assertEqual([role.name for role in page], ["ROLE_WRITER"])

    def test_invalid_page_falls_back(self):
        adminlist = self.bind({'page': 'abc'})

        self.assertEqual(adminlist.get_page().number, 1)

    def test_rows_carry_action_urls(self):
        adminlist = self.bind({'filter_name': 'guest'})
        role = Role.objects.get(name="ROLE_GUEST")

        rows = adminlist.get_rows()

        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]['values'], ["ROLE_GUEST"])
        self.assertEqual(
            rows[0]['edit_url'],
            reverse('user_management:settings_roles_edit', kwargs={'role_id': role.pk})
        )
        self.assertEqual(
            rows[0]['delete_url'],
            reverse('user_management:settings_roles_delete', kwargs={'role_id': role.pk})
        )


    def test_query_string_keeps_bound_state(self):
        adminlist = self.bind({'filter_name': 'role', 'orderBy': 'name', 'orderDirection': 'DESC', 'page': '1'})

        self.assertEqual(
            adminlist.get_query_string(page=2),
            '?filter_name=role&orderBy=name&orderDirection=DESC&page=2'
        )
        self.assertEqual(
            adminlist.get_query_string(page=None),
            '?filter_name=role&orderBy=name&orderDirection=DESC'
        )

    def test_sort_link_toggles_direction(self):
        adminlist = self.bind({'filter_name': 'role', 'orderBy': 'name', 'orderDirection': 'ASC'})

        links = adminlist.get_sort_links()

        self.assertEqual(len(links), 1)
        self.assertEqual(links[0]['url'], '?filter_name=role&orderBy=name&orderDirection=DESC')

    def test_page_urls(self):
        configurator = RoleAdminListConfigurator()
        configurator.per_page = 2
        adminlist = create_list(configurator)
        adminlist.bind_request(self.factory.get("/", {'filter_name': 'role', 'page': 1}))

        self.assertIsNone(adminlist.get_previous_page_url())
        self.assertEqual(adminlist.get_next_page_url(), '?filter_name=role&page=2')


class ConfiguratorTest(TestCase):

    def test_entity_name_and_delete_intention(self):
        configurator = RoleAdminListConfigurator()

        self.assertEqual(configurator.get_entity_name(), 'Role')
        self.assertEqual(delete_csrf_intention(configurator), 'delete-role')

    def test_index_url(self):
        configurator = RoleAdminListConfigurator()

        self.assertEqual(configurator.get_index_url(), {'path': 'user_management:settings_roles', 'params': {}})
        self.assertEqual(resolve_index_url(configurator), reverse('user_management:settings_roles'))

    def test_index_params_become_query_string(self):
        url = resolve_url({'path': 'user_management:settings_roles', 'params': {'page': 2}})

        self.assertEqual(url, reverse('user_management:settings_roles') + '?page=2')

    def test_configurator_uses_given_alias(self):
        configurator = RoleAdminListConfigurator(using='default')

        self.assertEqual(configurator.get_queryset().db, 'default')
