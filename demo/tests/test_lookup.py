from unittest import mock

from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase, override_settings

from demo.models import Hospital
from django_tenancy.conf import LookupCacheConfig
from django_tenancy.lookup import (
    ContainmentQueryLookup,
    DomainLookupCache,
    DomainResolver,
    IndexTableLookup,
    LookupOutcome,
    LookupResult,
    NormalizedScanLookup,
)
from django_tenancy.models import TenantDomain
from django_tenancy.repositories import get_tenant_repository

BASE_CONFIG = {"TENANT_MODEL": "demo.Hospital", "LANDLORD_MODEL": "demo.Network"}


def stub_strategy(result, name="stub"):
    strategy = mock.Mock()
    strategy.name = name
    strategy.try_resolve.return_value = result
    return strategy


class TestDomainResolverOrdering(SimpleTestCase):
    def test_unnormalizable_domain_never_reaches_a_tier(self):
        strategy = stub_strategy(LookupResult.found(1))
        resolver = DomainResolver([strategy])

        for value in ["", "   ", "https://", None]:
            with self.subTest(value=value):
                self.assertIsNone(resolver.resolve(value))

        strategy.try_resolve.assert_not_called()

    def test_first_found_short_circuits(self):
        first = stub_strategy(LookupResult.not_found(), "first")
        second = stub_strategy(LookupResult.found(7), "second")
        third = stub_strategy(LookupResult.found(9), "third")

        resolver = DomainResolver([first, second, third])

        self.assertEqual(resolver.resolve("HTTPS://Acme.Test/"), 7)
        first.try_resolve.assert_called_once_with("acme.test", "HTTPS://Acme.Test/")
        third.try_resolve.assert_not_called()

    def test_storage_failure_falls_through(self):
        broken = stub_strategy(LookupResult.unavailable(DatabaseError("gone")), "broken")
        working = stub_strategy(LookupResult.found("abc"), "working")

        with self.assertLogs("django_tenancy.lookup.resolver", level="WARNING") as logs:
            self.assertEqual(DomainResolver([broken, working]).resolve("acme.test"), "abc")

        self.assertIn("broken", logs.output[0])

    def test_all_tiers_missing(self):
        resolver = DomainResolver(
            [stub_strategy(LookupResult.not_found()), stub_strategy(LookupResult.not_found())]
        )
        self.assertIsNone(resolver.resolve("acme.test"))


class TestLookupTiers(TestCase):
    def setUp(self):
        self.hospital = Hospital.objects.create(
            name="St Mary's", slug="st-marys", domains=["St-Marys.Example.Test", "stmarys.test"]
        )

    def test_index_table_is_populated_on_create(self):
        self.assertEqual(
            set(TenantDomain.objects.values_list("domain", flat=True)),
            {"st-marys.example.test", "stmarys.test"},
        )

    def test_index_table_hit(self):
        strategy = IndexTableLookup(Hospital, TenantDomain)
        result = strategy.try_resolve("stmarys.test", "stmarys.test")

        self.assertEqual(result.outcome, LookupOutcome.FOUND)
        self.assertEqual(result.owner_id, self.hospital.pk)

    def test_index_table_disabled(self):
        strategy = IndexTableLookup(Hospital, TenantDomain, enabled=False)
        self.assertEqual(
            strategy.try_resolve("stmarys.test", "stmarys.test").outcome,
            LookupOutcome.NOT_FOUND,
        )

    def test_index_row_of_deleted_owner_is_a_miss(self):
        TenantDomain.objects.create(domain="ghost.test", tenant_id="999999")
        strategy = IndexTableLookup(Hospital, TenantDomain)

        self.assertEqual(
            strategy.try_resolve("ghost.test", "ghost.test").outcome,
            LookupOutcome.NOT_FOUND,
        )

    def test_index_row_with_foreign_key_type_is_a_miss(self):
        TenantDomain.objects.create(domain="odd.test", tenant_id="not-a-number")
        strategy = IndexTableLookup(Hospital, TenantDomain)

        self.assertEqual(
            strategy.try_resolve("odd.test", "odd.test").outcome,
            LookupOutcome.NOT_FOUND,
        )

    def test_containment_retries_with_raw_value(self):
        strategy = ContainmentQueryLookup(Hospital)
        with mock.patch.object(
            ContainmentQueryLookup, "_first_containing", side_effect=[None, 5]
        ) as first_containing:
            result = strategy.try_resolve("acme.test", "ACME.test")

        self.assertEqual(result.owner_id, 5)
        self.assertEqual(
            first_containing.call_args_list, [mock.call("acme.test"), mock.call("ACME.test")]
        )

    def test_containment_does_not_retry_identical_raw_value(self):
        strategy = ContainmentQueryLookup(Hospital)
        with mock.patch.object(
            ContainmentQueryLookup, "_first_containing", return_value=None
        ) as first_containing:
            result = strategy.try_resolve("acme.test", "acme.test")

        self.assertEqual(result.outcome, LookupOutcome.NOT_FOUND)
        first_containing.assert_called_once_with("acme.test")

    def test_database_error_is_reported_as_unavailable(self):
        strategy = ContainmentQueryLookup(Hospital)
        with mock.patch.object(
            ContainmentQueryLookup,
            "_first_containing",
            side_effect=DatabaseError("no such table"),
        ):
            result = strategy.try_resolve("acme.test", "acme.test")

        self.assertEqual(result.outcome, LookupOutcome.STORAGE_UNAVAILABLE)
        self.assertIsInstance(result.error, DatabaseError)

    def test_scan_normalizes_stored_domains(self):
        strategy = NormalizedScanLookup(Hospital)
        result = strategy.try_resolve("st-marys.example.test", "ST-MARYS.example.test")

        self.assertEqual(result.owner_id, self.hospital.pk)

    def test_scan_takes_lowest_primary_key_on_duplicates(self):
        Hospital.objects.create(name="Copy", slug="copy", domains=["https://StMarys.test/"])
        strategy = NormalizedScanLookup(Hospital)

        self.assertEqual(
            strategy.try_resolve("stmarys.test", "stmarys.test").owner_id, self.hospital.pk
        )

    @override_settings(
        TENANCY_CONFIG={**BASE_CONFIG, "DOMAIN_LOOKUP": {"USE_TABLE": False}}
    )
    def test_resolution_without_index_table(self):
        TenantDomain.objects.all().delete()

        repository = get_tenant_repository()
        self.assertEqual(
            repository.resolve_id_by_domain("https://ST-MARYS.example.test/"),
            self.hospital.pk,
        )

    def test_resolution_after_index_rows_are_lost(self):
        TenantDomain.objects.all().delete()

        self.assertEqual(
            get_tenant_repository().resolve_id_by_domain("StMarys.Test"), self.hospital.pk
        )

    def test_resolution_never_writes_the_index(self):
        TenantDomain.objects.all().delete()
        get_tenant_repository().resolve_id_by_domain("stmarys.test")

        self.assertFalse(TenantDomain.objects.exists())

    def test_unknown_domain(self):
        self.assertIsNone(get_tenant_repository().resolve_id_by_domain("unknown.test"))


class TestDomainLookupCache(SimpleTestCase):
    def setUp(self):
        self.lookup_cache = DomainLookupCache(
            LookupCacheConfig(enabled=True, ttl_seconds=30, prefix="test:", store="lookups")
        )
        self.lookup_cache.cache.clear()

    def test_found_value_is_stored_with_prefix(self):
        compute = mock.Mock(return_value=4)

        self.assertEqual(self.lookup_cache.remember("acme.test", compute), 4)
        self.assertEqual(self.lookup_cache.remember("acme.test", compute), 4)

        compute.assert_called_once_with()
        self.assertEqual(self.lookup_cache.cache.get("test:acme.test"), 4)

    def test_miss_is_not_stored(self):
        compute = mock.Mock(return_value=None)

        self.assertIsNone(self.lookup_cache.remember("acme.test", compute))
        self.assertIsNone(self.lookup_cache.remember("acme.test", compute))

        self.assertEqual(compute.call_count, 2)
        self.assertNotIn("test:acme.test", self.lookup_cache.cache)

    def test_invalid_cached_value_is_recomputed(self):
        self.lookup_cache.cache.set("test:acme.test", True)
        compute = mock.Mock(return_value="tenant-1")

        self.assertEqual(self.lookup_cache.remember("acme.test", compute), "tenant-1")
        self.assertEqual(self.lookup_cache.cache.get("test:acme.test"), "tenant-1")

    def test_entry_expires_after_ttl(self):
        compute = mock.Mock(side_effect=[1, 2])

        with mock.patch("time.time", return_value=1_000.0):
            self.assertEqual(self.lookup_cache.remember("acme.test", compute), 1)
        with mock.patch("time.time", return_value=1_029.0):
            self.assertEqual(self.lookup_cache.remember("acme.test", compute), 1)
        with mock.patch("time.time", return_value=1_031.0):
            self.assertEqual(self.lookup_cache.remember("acme.test", compute), 2)

        self.assertEqual(compute.call_count, 2)

    def test_cache_failure_falls_back_to_compute(self):
        broken = mock.Mock()
        broken.get.side_effect = ConnectionError("cache down")

        with mock.patch.object(DomainLookupCache, "cache", broken):
            with self.assertLogs("django_tenancy.lookup.cache", level="WARNING"):
                self.assertEqual(self.lookup_cache.remember("acme.test", lambda: 3), 3)

    def test_forget(self):
        self.lookup_cache.remember("acme.test", lambda: 8)
        self.lookup_cache.forget("ACME.test.")

        self.assertNotIn("test:acme.test", self.lookup_cache.cache)


class TestCachedRepositoryResolution(TestCase):
    @override_settings(
        TENANCY_CONFIG={
            **BASE_CONFIG,
            "DOMAIN_LOOKUP": {"CACHE": {"ENABLED": True, "STORE": "lookups"}},
        }
    )
    def test_cache_does_not_change_the_result(self):
        hospital = Hospital.objects.create(name="Acme", slug="acme", domains=["acme.test"])
        repository = get_tenant_repository()
        repository.domain_resolver().cache.cache.clear()

        self.assertEqual(repository.resolve_id_by_domain("ACME.test"), hospital.pk)
        self.assertEqual(repository.resolve_id_by_domain("acme.test"), hospital.pk)
        self.assertIsNone(repository.resolve_id_by_domain("other.test"))
