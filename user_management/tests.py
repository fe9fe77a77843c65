from io import StringIO

from django.contrib.auth import get_user_model
from django.contrib.messages import get_messages
from django.core.management import call_command
from django.test import TestCase, override_settings
from django.urls import reverse

from core.csrf import SESSION_KEY, RemovedInNextMajorWarning, make_intention_token
from .adminlist import RoleAdminListConfigurator
from .flash_messages import ROLE_FLASH_MESSAGES
from .models import Role

User = get_user_model()

LIST_URL = reverse('user_management:settings_roles')
ADD_URL = reverse('user_management:settings_roles_add')


def edit_url(role_id):
    return reverse('user_management:settings_roles_edit', kwargs={'role_id': role_id})


def delete_url(role_id):
    return reverse('user_management:settings_roles_delete', kwargs={'role_id': role_id})


def flash_messages(response):
    return [str(message) for message in get_messages(response.wsgi_request)]


class RoleViewTestCase(TestCase):
    """Shared fixtures for role settings views"""

    def setUp(self):
        """Set up test data"""
        self.super_admin = User.objects.create_superuser(
            username="admin",
            email="admin@example.com",
            password="testpass123"
        )
        self.editor = User.objects.create_user(
            username="editor",
            email="editor@example.com",
            password="testpass123"
        )
        self.role = Role.objects.create(name="ROLE_EDITOR")

    def login_as_super_admin(self):
        self.client.force_login(self.super_admin)

    def login_as_editor(self):
        self.client.force_login(self.editor)

    def issue_delete_token(self, secret="test-secret"):
        """Store an intention secret in the client session and return the delete token"""
        session = self.client.session
        session[SESSION_KEY] = secret
        session.save()
        return make_intention_token(secret, 'delete-role')


class RoleListViewTest(RoleViewTestCase):

    def test_super_admin_sees_roles(self):
        """Test the list renders every role for a super admin"""
        Role.objects.create(name="ROLE_WRITER")
        self.login_as_super_admin()

        response = self.client.get(LIST_URL)

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'adminlist/list.html')
        self.assertContains(response, "ROLE_EDITOR")
        self.assertContains(response, "ROLE_WRITER")
        self.assertIn('adminlist', response.context)

    def test_list_renders_delete_token(self):
        """Test each row posts an intention token with its delete form"""
        self.login_as_super_admin()

        response = self.client.get(LIST_URL)

        secret = self.client.session[SESSION_KEY]
        self.assertContains(response, make_intention_token(secret, 'delete-role'))
        self.assertContains(response, delete_url(self.role.pk))

    def test_list_applies_request_filters(self):
        """Test filter parameters on the request narrow the list"""
        Role.objects.create(name="ROLE_WRITER")
        self.login_as_super_admin()

        response = self.client.get(LIST_URL, {'filter_name': 'writer'})

        self.assertEqual(response.status_code, 200)
        names = [role.name for role in response.context['adminlist'].get_page()]
        self.assertEqual(names, ["ROLE_WRITER"])

    def test_paging_links_keep_filter_and_order(self):
        """Test the next page link carries the active filter and ordering"""
        for number in range(25):
            Role.objects.create(name=f"ROLE_W{number:02d}")
        Role.objects.create(name="ROLE_OTHER")
        self.login_as_super_admin()

        response = self.client.get(
            LIST_URL, {'filter_name': 'ROLE_W', 'orderBy': 'name', 'orderDirection': 'ASC'}
        )

        self.assertContains(
            response,
            'href="?filter_name=ROLE_W&amp;orderBy=name&amp;orderDirection=ASC&amp;page=2"'
        )

        response = self.client.get(
            LIST_URL, {'filter_name': 'ROLE_W', 'orderBy': 'name', 'orderDirection': 'ASC', 'page': 2}
        )

        names = [role.name for role in response.context['adminlist'].get_page()]
        self.assertEqual(names, [f"ROLE_W{number:02d}" for number in range(20, 25)])
        self.assertContains(
            response,
            'href="?filter_name=ROLE_W&amp;orderBy=name&amp;orderDirection=ASC&amp;page=1"'
        )

    def test_sort_links_keep_filter(self):
        """Test column sort links carry the active filter and restart paging"""
        self.login_as_super_admin()

        response = self.client.get(LIST_URL, {'filter_name': 'EDIT', 'page': 1})

        self.assertContains(
            response,
            'href="?filter_name=EDIT&amp;orderBy=name&amp;orderDirection=ASC"'
        )

    def test_head_allowed_for_super_admin(self):
        """Test HEAD is answered like GET"""
        self.login_as_super_admin()

        response = self.client.head(LIST_URL)

        self.assertEqual(response.status_code, 200)

    def test_regular_user_post_is_denied(self):
        """Test authorization is checked before the request method"""
        self.login_as_editor()

        response = self.client.post(LIST_URL)

        self.assertEqual(response.status_code, 403)

    def test_regular_user_is_denied(self):
        """Test users without super admin capability get 403"""
        self.login_as_editor()

        response = self.client.get(LIST_URL)

        self.assertEqual(response.status_code, 403)

    def test_anonymous_user_is_denied(self):
        """Test anonymous users get 403"""
        response = self.client.get(LIST_URL)

        self.assertEqual(response.status_code, 403)

    def test_post_not_allowed(self):
        """Test list only answers GET"""
        self.login_as_super_admin()

        response = self.client.post(LIST_URL)

        self.assertEqual(response.status_code, 405)


class RoleAddViewTest(RoleViewTestCase):

    def test_get_renders_empty_form(self):
        """Test GET renders the add form"""
        self.login_as_super_admin()

        response = self.client.get(ADD_URL)

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'user_management/roles/add.html')
        self.assertEqual(response.context['form'].instance.name, '')
        self.assertIsNone(response.context['form'].instance.pk)

    def test_valid_submission_creates_role(self):
        """Test a valid submission persists exactly one role and redirects"""
        self.login_as_super_admin()
        count = Role.objects.count()

        response = self.client.post(ADD_URL, {'name': 'ROLE_WRITER'})

        self.assertRedirects(response, LIST_URL)
        self.assertEqual(Role.objects.count(), count + 1)
        self.assertTrue(Role.objects.filter(name='ROLE_WRITER').exists())
        self.assertEqual(flash_messages(response), ["Role 'ROLE_WRITER' has been added!"])

    def test_empty_name_rerenders_form(self):
        """Test an invalid submission shows errors without persisting"""
        self.login_as_super_admin()
        count = Role.objects.count()

        response = self.client.post(ADD_URL, {'name': ''})

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context['form'].errors['name'])
        self.assertEqual(Role.objects.count(), count)
        self.assertEqual(flash_messages(response), [])

    def test_duplicate_name_rerenders_form(self):
        """Test a name already in use is reported as a field error"""
        self.login_as_super_admin()

        response = self.client.post(ADD_URL, {'name': 'ROLE_EDITOR'})

        self.assertEqual(response.status_code, 200)
        self.assertIn('name', response.context['form'].errors)
        self.assertEqual(Role.objects.filter(name='ROLE_EDITOR').count(), 1)

    def test_regular_user_cannot_add(self):
        """Test a denied submission creates nothing"""
        self.login_as_editor()
        count = Role.objects.count()

        response = self.client.post(ADD_URL, {'name': 'ROLE_WRITER'})

        self.assertEqual(response.status_code, 403)
        self.assertEqual(Role.objects.count(), count)


class RoleEditViewTest(RoleViewTestCase):

    def test_get_renders_bound_form(self):
        """Test GET renders the form for the existing role"""
        self.login_as_super_admin()

        response = self.client.get(edit_url(self.role.pk))

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'user_management/roles/edit.html')
        self.assertEqual(response.context['role'], self.role)
        self.assertContains(response, 'value="ROLE_EDITOR"')

    def test_valid_submission_updates_role(self):
        """Test a valid change renames the role and redirects"""
        self.login_as_super_admin()
        count = Role.objects.count()

        response = self.client.post(edit_url(self.role.pk), {'name': 'ROLE_CHIEF_EDITOR'})

        self.assertRedirects(response, LIST_URL)
        self.role.refresh_from_db()
        self.assertEqual(self.role.name, 'ROLE_CHIEF_EDITOR')
        self.assertEqual(Role.objects.count(), count)
        self.assertEqual(flash_messages(response), ["Role 'ROLE_CHIEF_EDITOR' has been edited!"])

    def test_invalid_submission_keeps_role(self):
        """Test an invalid change leaves the stored role untouched"""
        self.login_as_super_admin()

        response = self.client.post(edit_url(self.role.pk), {'name': ''})

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context['form'].errors['name'])
        self.role.refresh_from_db()
        self.assertEqual(self.role.name, 'ROLE_EDITOR')

    def test_missing_role_returns_404(self):
        """Test editing an unknown id is reported as not found"""
        self.login_as_super_admin()

        response = self.client.get(edit_url(self.role.pk + 100))

        self.assertEqual(response.status_code, 404)

    def test_regular_user_cannot_edit(self):
        """Test a denied change leaves the role untouched"""
        self.login_as_editor()

        response = self.client.post(edit_url(self.role.pk), {'name': 'ROLE_HACKED'})

        self.assertEqual(response.status_code, 403)
        self.role.refresh_from_db()
        self.assertEqual(self.role.name, 'ROLE_EDITOR')

    def test_authorization_precedes_lookup(self):
        """Test unknown ids still answer 403 to users without capability"""
        self.login_as_editor()

        response = self.client.get(edit_url(self.role.pk + 100))

        self.assertEqual(response.status_code, 403)


class RoleDeleteViewTest(RoleViewTestCase):

    def test_valid_token_deletes_role(self):
        """Test a correct token removes the role and flashes its name"""
        self.login_as_super_admin()
        token = self.issue_delete_token()

        response = self.client.post(delete_url(self.role.pk), {'token': token})

        self.assertRedirects(response, LIST_URL)
        self.assertFalse(Role.objects.filter(pk=self.role.pk).exists())
        self.assertEqual(flash_messages(response), ["Role 'ROLE_EDITOR' has been deleted!"])

    def test_valid_token_unknown_role_is_noop(self):
        """Test deleting an unknown id redirects without a flash message"""
        self.login_as_super_admin()
        token = self.issue_delete_token()
        count = Role.objects.count()

        response = self.client.post(delete_url(self.role.pk + 100), {'token': token})

        self.assertRedirects(response, LIST_URL)
        self.assertEqual(Role.objects.count(), count)
        self.assertEqual(flash_messages(response), [])

    def test_invalid_token_skips_authorization(self):
        """Test a wrong token redirects to the index before any permission check"""
        self.login_as_editor()
        self.issue_delete_token()

        response = self.client.post(delete_url(self.role.pk), {'token': 'not-the-token'})

        index_url = reverse(RoleAdminListConfigurator().get_index_url()['path'])
        self.assertRedirects(response, index_url, fetch_redirect_response=False)
        self.assertTrue(Role.objects.filter(pk=self.role.pk).exists())
        self.assertEqual(flash_messages(response), [])

    def test_invalid_token_for_super_admin_keeps_role(self):
        """Test a wrong token never deletes, even for a super admin"""
        self.login_as_super_admin()
        self.issue_delete_token()

        response = self.client.post(delete_url(self.role.pk), {'token': ''})

        self.assertRedirects(response, LIST_URL)
        self.assertTrue(Role.objects.filter(pk=self.role.pk).exists())

    def test_token_for_other_intention_is_rejected(self):
        """Test tokens are bound to the delete-role intention"""
        self.login_as_super_admin()
        self.issue_delete_token()
        token = make_intention_token("test-secret", 'delete-user')

        self.client.post(delete_url(self.role.pk), {'token': token})

        self.assertTrue(Role.objects.filter(pk=self.role.pk).exists())

    def test_missing_token_uses_legacy_path(self):
        """Test a request without token field proceeds with a deprecation warning"""
        self.login_as_super_admin()

        with self.assertWarns(RemovedInNextMajorWarning):
            response = self.client.post(delete_url(self.role.pk))

        self.assertRedirects(response, LIST_URL)
        self.assertFalse(Role.objects.filter(pk=self.role.pk).exists())
        self.assertEqual(flash_messages(response), ["Role 'ROLE_EDITOR' has been deleted!"])

    def test_missing_token_unknown_role(self):
        """Test the legacy path with an unknown id redirects without flash"""
        self.login_as_super_admin()

        with self.assertWarns(RemovedInNextMajorWarning):
            response = self.client.post(delete_url(self.role.pk + 100))

        self.assertRedirects(response, LIST_URL)
        self.assertEqual(flash_messages(response), [])

    @override_settings(ALLOW_MISSING_CSRF_TOKEN=False)
    def test_missing_token_rejected_when_legacy_disabled(self):
        """Test a missing token is treated as invalid once legacy mode is off"""
        self.login_as_super_admin()

        with self.assertWarns(RemovedInNextMajorWarning):
            response = self.client.post(delete_url(self.role.pk))

        self.assertRedirects(response, LIST_URL)
        self.assertTrue(Role.objects.filter(pk=self.role.pk).exists())

    def test_valid_token_regular_user_is_denied(self):
        """Test authorization is enforced once the token is accepted"""
        self.login_as_editor()
        token = self.issue_delete_token()

        response = self.client.post(delete_url(self.role.pk), {'token': token})

        self.assertEqual(response.status_code, 403)
        self.assertTrue(Role.objects.filter(pk=self.role.pk).exists())

    def test_get_not_allowed(self):
        """Test delete only answers POST"""
        self.login_as_super_admin()

        response = self.client.get(delete_url(self.role.pk))

        self.assertEqual(response.status_code, 405)
        self.assertTrue(Role.objects.filter(pk=self.role.pk).exists())


class RoleFlashMessagesTest(TestCase):

    def test_catalog_covers_every_action(self):
        """Test every role action has a success message"""
        for action in ('add', 'edit', 'delete'):
            key = f'user_management.roles.{action}.flash.success.%role%'
            self.assertIn(key, ROLE_FLASH_MESSAGES)
            self.assertIn('%role%', str(ROLE_FLASH_MESSAGES[key]))


class SetupDefaultRolesCommandTest(TestCase):

    def test_creates_missing_roles(self):
        """Test the command creates each default role once"""
        Role.objects.create(name="ROLE_ADMIN")
        out = StringIO()

        call_command('setup_default_roles', stdout=out)
        call_command('setup_default_roles', stdout=out)

        self.assertEqual(Role.objects.filter(name="ROLE_ADMIN").count(), 1)
        self.assertTrue(Role.objects.filter(name="ROLE_SUPER_ADMIN").exists())
        self.assertEqual(Role.objects.count(), 4)
        self.assertIn('All default roles already exist', out.getvalue())

    def test_dry_run_creates_nothing(self):
        """Test --dry-run only reports"""
        out = StringIO()

        call_command('setup_default_roles', '--dry-run', stdout=out)

        self.assertEqual(Role.objects.count(), 0)
        self.assertIn('Would create role ROLE_SUPER_ADMIN', out.getvalue())
