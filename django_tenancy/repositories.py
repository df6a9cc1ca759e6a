"""
Tenant and landlord directories.

A repository wraps the configured Django model of one scope and answers the
questions the rest of the package asks about it: find a record by id, slug,
identifier or domain, create one, and keep the flat domain lookup table in
step with the record's ``domains`` list.

The lookup table is a secondary index. ``sync_domain_lookup`` rebuilds a
record's rows from scratch (delete then insert) and is not transactional: a
reader may briefly see no rows and fall back to the slower lookup tiers.
Storage failures while syncing are logged and swallowed; the JSON
``domains`` column remains the source of truth.
"""

import logging

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from .conf import Scope, settings
from .lookup import (
    ContainmentQueryLookup,
    DomainLookupCache,
    DomainResolver,
    IndexTableLookup,
    NormalizedScanLookup,
)
from .models import LandlordDomain, TenantDomain
from .normalizer import normalize_domain
from .signals import landlord_created, tenant_created
from .utils import get_model_for_scope

logger = logging.getLogger(__name__)


class DomainLookupRepository:
    scope: Scope
    lookup_model = None
    created_signal = None

    @property
    def config(self):
        return settings.TENANCY.for_scope(self.scope)

    @property
    def model(self):
        return get_model_for_scope(self.scope)

    @property
    def lookup_enabled(self) -> bool:
        return self.config.domain_lookup.use_table

    def query(self):
        return self.model._default_manager.all()

    def table(self):
        manager = self.lookup_model._default_manager
        connection = self.config.domain_lookup.connection
        return manager.using(connection) if connection else manager.all()

    # --- Finders ---

    def find_by_id(self, pk):
        if pk is None or pk == "":
            return None
        try:
            return self.query().filter(pk=pk).first()
        except (ValueError, TypeError, ValidationError):
            return None

    def find_by_slug(self, slug):
        if not isinstance(slug, str) or slug == "":
            return None
        return self.query().filter(slug=slug).first()

    def find_by_identifier(self, identifier):
        """Find by primary key for integers, by slug then primary key for strings."""

        if isinstance(identifier, bool):
            return None
        if isinstance(identifier, int):
            return self.find_by_id(identifier)
        if not isinstance(identifier, str):
            return None

        identifier = identifier.strip()
        return self.find_by_slug(identifier) or self.find_by_id(identifier)

    def resolve_id_by_domain(self, domain):
        return self.domain_resolver().resolve(domain)

    def find_by_domain(self, domain):
        owner_id = self.resolve_id_by_domain(domain)
        if owner_id is None:
            return None
        return self.find_by_id(owner_id)

    def all(self):
        return self.query().order_by("pk").iterator()

    def domain_resolver(self) -> DomainResolver:
        lookup_config = self.config.domain_lookup
        strategies = [
            IndexTableLookup(
                self.model,
                self.lookup_model,
                connection=lookup_config.connection,
                enabled=lookup_config.use_table,
            ),
            ContainmentQueryLookup(self.model),
            NormalizedScanLookup(self.model),
        ]
        cache = (
            DomainLookupCache(lookup_config.cache)
            if lookup_config.cache.enabled
            else None
        )
        return DomainResolver(strategies, cache=cache, label=self.scope.value)

    # --- Writes ---

    def create(self, **attributes):
        record = self.model(**attributes)
        record.save(sync_domain_lookup=False)
        self.sync_domain_lookup(record)
        self.created_signal.send(
            sender=self.model, **{self.scope.value: record}
        )
        return record

    def sync_domain_lookup(self, record) -> None:
        """Replace the lookup rows of ``record`` with its current domains."""

        if not self.lookup_enabled or record.pk is None:
            return

        owner_id = str(record.pk)
        owner_field = self.lookup_model.owner_field
        table = self.table()

        try:
            with transaction.atomic(using=table.db):
                table.filter(**{owner_field: owner_id}).delete()
        except DatabaseError as e:
            logger.warning(
                "Could not clear %s domain lookup rows for %s: %s",
                self.scope.value,
                owner_id,
                e,
            )
            return

        domains = []
        for domain in record.get_domains():
            normalized = normalize_domain(domain)
            if normalized is not None and normalized not in domains:
                domains.append(normalized)

        if not domains:
            return

        rows = [
            self.lookup_model(domain=domain, **{owner_field: owner_id})
            for domain in domains
        ]
        try:
            with transaction.atomic(using=table.db):
                table.bulk_create(rows)
        except DatabaseError as e:
            logger.warning(
                "Could not write %s domain lookup rows for %s: %s",
                self.scope.value,
                owner_id,
                e,
            )

    def purge_domain_lookup(self, pk) -> None:
        if not self.lookup_enabled or pk is None:
            return

        table = self.table()
        try:
            with transaction.atomic(using=table.db):
                table.filter(**{self.lookup_model.owner_field: str(pk)}).delete()
        except DatabaseError as e:
            logger.warning(
                "Could not purge %s domain lookup rows for %s: %s",
                self.scope.value,
                pk,
                e,
            )


class TenantRepository(DomainLookupRepository):
    scope = Scope.TENANT
    lookup_model = TenantDomain
    created_signal = tenant_created


class LandlordRepository(DomainLookupRepository):
    scope = Scope.LANDLORD
    lookup_model = LandlordDomain
    created_signal = landlord_created


def get_tenant_repository() -> TenantRepository:
    return TenantRepository()


def get_landlord_repository() -> LandlordRepository:
    return LandlordRepository()


def get_repository(scope: Scope) -> DomainLookupRepository:
    if Scope(scope) is Scope.TENANT:
        return get_tenant_repository()
    return get_landlord_repository()
