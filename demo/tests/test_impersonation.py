from unittest import mock

from django.contrib.sessions.backends.cache import SessionStore
from django.core.cache import caches
from django.http import HttpResponse
from django.test import RequestFactory, TestCase

from demo.models import Hospital
from django_tenancy.impersonation import TenantImpersonationManager, impersonation
from django_tenancy.middleware import TenantImpersonationMiddleware
from django_tenancy.tenancy import tenancy


class TestTenantImpersonationManager(TestCase):
    def setUp(self):
        caches["default"].clear()
        self.hospital = Hospital.objects.create(name="Acme", slug="acme")

    def test_issue_token_stores_payload(self):
        token = impersonation.issue_token(self.hospital, user_id=12, guard="staff")

        self.assertEqual(len(token), 64)
        payload = caches["default"].get(f"tenancy:impersonation:tenant:{token}")
        self.assertEqual(
            payload["tenant"], {"id": self.hospital.pk, "slug": "acme", "name": "Acme"}
        )
        self.assertEqual(payload["user_id"], 12)
        self.assertEqual(payload["guard"], "staff")
        self.assertIsInstance(payload["issued_at"], int)

    def test_issue_token_for_unknown_tenant(self):
        self.assertIsNone(impersonation.issue_token("missing", user_id=1))

    def test_token_is_single_use(self):
        token = impersonation.issue_token("acme", user_id=12)

        activation = impersonation.apply_token(token)
        self.assertEqual(activation.tenant.id, self.hospital.pk)
        self.assertEqual(activation.user_id, 12)
        self.assertIsNone(activation.guard)

        self.assertIsNone(impersonation.apply_token(token))

    def test_lost_delete_race_yields_nothing(self):
        token = impersonation.issue_token(self.hospital, user_id=12)

        with mock.patch.object(
            TenantImpersonationManager, "cache", new_callable=mock.PropertyMock
        ) as cache:
            cache.return_value.get.return_value = {"tenant": {"id": self.hospital.pk}}
            cache.return_value.delete.return_value = False
            self.assertIsNone(impersonation.consume_token(token))

    def test_expired_or_unknown_token(self):
        self.assertIsNone(impersonation.apply_token("0" * 64))
        self.assertIsNone(impersonation.apply_token(""))

    def test_token_for_deleted_tenant(self):
        token = impersonation.issue_token(self.hospital, user_id=12)
        self.hospital.delete()

        self.assertIsNone(impersonation.apply_token(token))


class TestTenantImpersonationMiddleware(TestCase):
    def setUp(self):
        caches["default"].clear()
        self.factory = RequestFactory()
        self.hospital = Hospital.objects.create(name="Acme", slug="acme")
        self.seen = []
        self.middleware = TenantImpersonationMiddleware(self.view)

    def view(self, request):
        self.seen.append(tenancy.tenant_id())
        return HttpResponse("ok")

    def test_valid_token_stages_principal_and_activates_tenant(self):
        token = impersonation.issue_token(self.hospital, user_id=12, guard="staff")
        request = self.factory.get("/", {"tenant_impersonation": token})
        request.session = SessionStore()

        response = self.middleware(request)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.seen, [self.hospital.pk])
        self.assertEqual(
            request.session["tenancy.impersonation"], {"user_id": 12, "guard": "staff"}
        )
        self.assertIsNone(tenancy.current_tenant())

    def test_reused_token_is_a_passthrough(self):
        token = impersonation.issue_token(self.hospital, user_id=12)

        self.middleware(self.factory.get("/", {"tenant_impersonation": token}))
        request = self.factory.get("/", {"tenant_impersonation": token})
        request.session = SessionStore()
        response = self.middleware(request)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.seen, [self.hospital.pk, None])
        self.assertNotIn("tenancy.impersonation", request.session)

    def test_without_token(self):
        response = self.middleware(self.factory.get("/"))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.seen, [None])

    def test_redemption_errors_degrade_to_passthrough(self):
        with mock.patch.object(
            TenantImpersonationManager, "apply_token", side_effect=ConnectionError("down")
        ):
            response = self.middleware(
                self.factory.get("/", {"tenant_impersonation": "abc"})
            )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.seen, [None])
