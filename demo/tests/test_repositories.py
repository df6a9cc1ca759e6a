from unittest import mock

from django.db import DatabaseError
from django.test import TestCase, override_settings

from demo.models import Hospital, Network
from django_tenancy.models import LandlordDomain, TenantDomain
from django_tenancy.repositories import (
    TenantRepository,
    get_landlord_repository,
    get_tenant_repository,
)
from django_tenancy.signals import tenant_created


def tenant_domains(hospital):
    return set(
        TenantDomain.objects.filter(tenant_id=str(hospital.pk)).values_list(
            "domain", flat=True
        )
    )


class TestDomainLookupSync(TestCase):
    def setUp(self):
        self.repository = get_tenant_repository()

    def test_create_syncs_and_sends_signal(self):
        receiver = mock.Mock()
        tenant_created.connect(receiver)
        self.addCleanup(tenant_created.disconnect, receiver)

        hospital = self.repository.create(
            name="Acme", slug="acme", domains=["Acme.Test", "https://acme.test/", "", "  "]
        )

        self.assertEqual(tenant_domains(hospital), {"acme.test"})
        receiver.assert_called_once()
        self.assertIs(receiver.call_args.kwargs["sender"], Hospital)
        self.assertEqual(receiver.call_args.kwargs["tenant"], hospital)

    def test_update_replaces_old_domains(self):
        hospital = Hospital.objects.create(name="Acme", slug="acme", domains=["old.test"])

        hospital.domains = ["new.test", "www.new.test"]
        hospital.save()

        self.assertEqual(tenant_domains(hospital), {"new.test", "www.new.test"})

    def test_save_without_domain_change_keeps_rows(self):
        hospital = Hospital.objects.create(name="Acme", slug="acme", domains=["acme.test"])

        with mock.patch.object(TenantRepository, "sync_domain_lookup") as sync:
            hospital.name = "Acme Clinic"
            hospital.save()

        sync.assert_not_called()
        self.assertEqual(tenant_domains(hospital), {"acme.test"})

    def test_non_string_domains_are_skipped(self):
        hospital = Hospital.objects.create(
            name="Acme", slug="acme", domains=["acme.test", 5, None, {"a": 1}]
        )
        self.assertEqual(tenant_domains(hospital), {"acme.test"})

    def test_delete_purges_rows(self):
        hospital = Hospital.objects.create(name="Acme", slug="acme", domains=["acme.test"])
        pk = hospital.pk

        hospital.delete()

        self.assertFalse(TenantDomain.objects.filter(tenant_id=str(pk)).exists())

    def test_explicit_sync_is_idempotent(self):
        hospital = Hospital.objects.create(name="Acme", slug="acme", domains=["acme.test"])

        self.repository.sync_domain_lookup(hospital)
        self.repository.sync_domain_lookup(hospital)

        self.assertEqual(TenantDomain.objects.count(), 1)

    @override_settings(
        TENANCY_CONFIG={
            "TENANT_MODEL": "demo.Hospital",
            "DOMAIN_LOOKUP": {"USE_TABLE": False},
        }
    )
    def test_disabled_table_is_never_touched(self):
        hospital = Hospital.objects.create(name="Acme", slug="acme", domains=["acme.test"])
        self.assertFalse(TenantDomain.objects.exists())

        TenantDomain.objects.create(domain="acme.test", tenant_id=str(hospital.pk))
        self.repository.purge_domain_lookup(hospital.pk)

        self.assertTrue(TenantDomain.objects.exists())

    def test_storage_failure_during_sync_is_swallowed(self):
        hospital = Hospital.objects.create(name="Acme", slug="acme", domains=[])
        hospital.domains = ["acme.test"]

        broken = mock.Mock()
        broken.db = "default"
        broken.filter.return_value.delete.side_effect = DatabaseError("no such table")

        with mock.patch.object(TenantRepository, "table", return_value=broken):
            with self.assertLogs("django_tenancy.repositories", level="WARNING"):
                self.repository.sync_domain_lookup(hospital)

        broken.bulk_create.assert_not_called()

    def test_storage_failure_during_purge_is_swallowed(self):
        broken = mock.Mock()
        broken.db = "default"
        broken.filter.return_value.delete.side_effect = DatabaseError("no such table")

        with mock.patch.object(TenantRepository, "table", return_value=broken):
            with self.assertLogs("django_tenancy.repositories", level="WARNING"):
                self.repository.purge_domain_lookup(1)

    def test_duplicate_domain_of_another_tenant_is_logged(self):
        Hospital.objects.create(name="Acme", slug="acme", domains=["shared.test"])

        with self.assertLogs("django_tenancy.repositories", level="WARNING"):
            other = Hospital.objects.create(
                name="Other", slug="other", domains=["shared.test"]
            )

        self.assertEqual(tenant_domains(other), set())


class TestFinders(TestCase):
    def setUp(self):
        self.repository = get_tenant_repository()
        self.hospital = Hospital.objects.create(
            name="Acme", slug="acme", domains=["acme.test"]
        )

    def test_find_by_id(self):
        self.assertEqual(self.repository.find_by_id(self.hospital.pk), self.hospital)
        self.assertEqual(self.repository.find_by_id(str(self.hospital.pk)), self.hospital)
        self.assertIsNone(self.repository.find_by_id("not-a-number"))
        self.assertIsNone(self.repository.find_by_id(None))

    def test_find_by_identifier(self):
        self.assertEqual(self.repository.find_by_identifier("acme"), self.hospital)
        self.assertEqual(self.repository.find_by_identifier(" acme "), self.hospital)
        self.assertEqual(self.repository.find_by_identifier(self.hospital.pk), self.hospital)
        self.assertEqual(
            self.repository.find_by_identifier(str(self.hospital.pk)), self.hospital
        )
        self.assertIsNone(self.repository.find_by_identifier(True))
        self.assertIsNone(self.repository.find_by_identifier(["acme"]))
        self.assertIsNone(self.repository.find_by_identifier("unknown"))

    def test_find_by_domain(self):
        self.assertEqual(self.repository.find_by_domain("ACME.test."), self.hospital)
        self.assertIsNone(self.repository.find_by_domain("unknown.test"))

    def test_all_streams_in_primary_key_order(self):
        second = Hospital.objects.create(name="Second", slug="second")
        self.assertEqual(list(self.repository.all()), [self.hospital, second])


class TestLandlordRepository(TestCase):
    def test_landlord_rows_use_their_own_table(self):
        network = Network.objects.create(
            name="Northwind", slug="northwind", domains=["Northwind.Test"]
        )

        self.assertEqual(
            list(LandlordDomain.objects.values_list("landlord_id", "domain")),
            [(str(network.pk), "northwind.test")],
        )
        self.assertFalse(TenantDomain.objects.exists())
        self.assertEqual(
            get_landlord_repository().find_by_domain("northwind.test"), network
        )
