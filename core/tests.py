import warnings
from importlib import import_module
from unittest import mock

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.core.exceptions import PermissionDenied
from django.http import HttpResponse
from django.template import Context, Template
from django.test import RequestFactory, TestCase, SimpleTestCase, override_settings
from django.utils.translation import gettext_lazy

from .csrf import (
    SESSION_KEY,
    RemovedInNextMajorWarning,
    check_intention_token,
    get_intention_token,
    is_intention_token_valid,
    make_intention_token,
)
from .decorators import deny_access_unless_super_admin, has_super_admin_capability, require_super_admin
from .flash import FlashMessageFormatter, get_flash_formatter

User = get_user_model()

TEST_CATALOG = {
    'test.items.add.flash.success.%item%': "Item '%item%' has been added!",
}


def dummy_view(request):
    return HttpResponse("ok")


def request_with_session(factory_request):
    engine = import_module(settings.SESSION_ENGINE)
    factory_request.session = engine.SessionStore()
    return factory_request


class SuperAdminDecoratorTest(TestCase):

    def setUp(self):
        self.factory = RequestFactory()
        self.super_admin = User.objects.create_superuser(
            username="admin", email="admin@example.com", password="testpass123"
        )
        self.staff = User.objects.create_user(
            username="staff", email="staff@example.com", password="testpass123", is_staff=True
        )

    def test_capability_requires_superuser(self):
        self.assertTrue(has_super_admin_capability(self.super_admin))
        self.assertFalse(has_super_admin_capability(self.staff))
        self.assertFalse(has_super_admin_capability(AnonymousUser()))
        self.assertFalse(has_super_admin_capability(None))

    def test_inactive_superuser_has_no_capability(self):
        self.super_admin.is_active = False
        self.assertFalse(has_super_admin_capability(self.super_admin))

    def test_decorator_allows_super_admin(self):
        request = self.factory.get("/")
        request.user = self.super_admin

        response = require_super_admin(dummy_view)(request)

        self.assertEqual(response.status_code, 200)

    def test_decorator_denies_other_users(self):
        request = self.factory.get("/")
        request.user = self.staff

        with self.assertRaises(PermissionDenied):
            require_super_admin(dummy_view)(request)

    def test_deny_access_for_anonymous(self):
        request = self.factory.post("/")
        request.user = AnonymousUser()

        with self.assertRaises(PermissionDenied):
            deny_access_unless_super_admin(request)


class IntentionTokenTest(TestCase):

    def setUp(self):
        self.factory = RequestFactory()

    def test_token_is_stable_per_session(self):
        """Test the same session and intention yield the same token"""
        request = request_with_session(self.factory.get("/"))

        first = get_intention_token(request, 'delete-role')
        second = get_intention_token(request, 'delete-role')

        self.assertEqual(first, second)
        self.assertIn(SESSION_KEY, request.session)

    def test_tokens_differ_per_intention(self):
        self.assertNotEqual(
            make_intention_token("secret", 'delete-role'),
            make_intention_token("secret", 'delete-user'),
        )

    def test_valid_and_invalid_tokens(self):
        request = request_with_session(self.factory.get("/"))
        token = get_intention_token(request, 'delete-role')

        self.assertTrue(is_intention_token_valid(request, 'delete-role', token))
        self.assertFalse(is_intention_token_valid(request, 'delete-role', 'bogus'))
        self.assertFalse(is_intention_token_valid(request, 'delete-role', ''))
        self.assertFalse(is_intention_token_valid(request, 'delete-user', token))

    def test_no_session_secret_is_invalid(self):
        """Test a token cannot be valid before any secret was issued"""
        request = request_with_session(self.factory.get("/"))

        self.assertFalse(
            is_intention_token_valid(request, 'delete-role', make_intention_token("", 'delete-role'))
        )

    def test_check_reads_token_field(self):
        good = request_with_session(self.factory.post("/", {'token': make_intention_token("secret", 'delete-role')}))
        good.session[SESSION_KEY] = "secret"
        bad = request_with_session(self.factory.post("/", {'token': 'nope'}))
        bad.session[SESSION_KEY] = "secret"

        self.assertTrue(check_intention_token(good, 'delete-role'))
        self.assertFalse(check_intention_token(bad, 'delete-role'))

    def test_missing_field_warns_and_passes(self):
        request = request_with_session(self.factory.post("/"))

        with self.assertWarns(RemovedInNextMajorWarning):
            self.assertTrue(check_intention_token(request, 'delete-role'))

    @override_settings(ALLOW_MISSING_CSRF_TOKEN=False)
    def test_missing_field_fails_when_legacy_disabled(self):
        request = request_with_session(self.factory.post("/"))

        with warnings.catch_warnings():
            warnings.simplefilter('ignore', RemovedInNextMajorWarning)
            self.assertFalse(check_intention_token(request, 'delete-role'))

    def test_template_tag_renders_token(self):
        request = request_with_session(self.factory.get("/"))
        template = Template("{% load csrf_tags %}{% intention_csrf_token 'delete-role' %}")

        rendered = template.render(Context({'request': request}))

        self.assertEqual(rendered, get_intention_token(request, 'delete-role'))

    def test_template_tag_without_request(self):
        template = Template("{% load csrf_tags %}{% intention_csrf_token 'delete-role' %}")

        self.assertEqual(template.render(Context({})), '')


class FlashMessageFormatterTest(SimpleTestCase):

    def test_substitutes_parameters(self):
        formatter = FlashMessageFormatter(TEST_CATALOG)

        message = formatter.format('test.items.add.flash.success.%item%', {'%item%': 'Widget'})

        self.assertEqual(message, "Item 'Widget' has been added!")

    def test_unknown_key_falls_back_to_key(self):
        formatter = FlashMessageFormatter(TEST_CATALOG)

        message = formatter.format('test.items.remove.flash.success.%item%', {'%item%': 'Widget'})

        self.assertEqual(message, 'test.items.remove.flash.success.Widget')

    def test_no_parameters(self):
        formatter = FlashMessageFormatter({'plain': 'Saved'})

        self.assertEqual(formatter.format('plain'), 'Saved')

    def test_lazy_entry_is_translated_once(self):
        formatter = FlashMessageFormatter({'lazy': gettext_lazy("Role '%role%' has been added!")})

        with mock.patch('core.flash.gettext') as mocked_gettext:
            message = formatter.format('lazy', {'%role%': 'ROLE_EDITOR'})

        mocked_gettext.assert_not_called()
        self.assertEqual(message, "Role 'ROLE_EDITOR' has been added!")

    def test_plain_entry_goes_through_gettext(self):
        formatter = FlashMessageFormatter({'plain': 'Saved'})

        with mock.patch('core.flash.gettext', return_value='Gespeichert') as mocked_gettext:
            message = formatter.format('plain')

        mocked_gettext.assert_called_once_with('Saved')
        self.assertEqual(message, 'Gespeichert')

    @override_settings(
        FLASH_MESSAGE_FORMATTER='core.flash.FlashMessageFormatter',
        FLASH_MESSAGE_CATALOGS=['core.tests.TEST_CATALOG'],
    )
    def test_formatter_built_from_settings(self):
        formatter = get_flash_formatter()

        self.assertIsInstance(formatter, FlashMessageFormatter)
        self.assertEqual(
            formatter.format('test.items.add.flash.success.%item%', {'%item%': 'Gadget'}),
            "Item 'Gadget' has been added!"
        )
