"""
Tenancy service.

``tenancy`` is the entry point used by middlewares, tasks and application
code to resolve, activate and inspect the current tenant and landlord::

    from django_tenancy.tenancy import tenancy

    with tenancy.use_tenant("acme"):
        tenancy.tenant_id()     # pk of the "acme" tenant
        Invoice.objects.filter(tenant_id=tenancy.tenant_id())

    tenancy.tenant_id()         # None again

The service keeps no state of its own; the active contexts live in
:class:`~django_tenancy.tenant_context.TenantContext`. Activating a tenant
also activates its landlord when it has one, and releasing it releases both.
"""

import logging
from contextlib import contextmanager

from .conf import Scope, settings
from .exceptions import (
    InconsistentTenantLandlordContext,
    UnresolvedLandlordContext,
    UnresolvedTenantContext,
)
from .repositories import get_landlord_repository, get_tenant_repository
from .signals import (
    landlord_ended,
    landlord_resolved,
    landlord_resolving,
    tenancy_ended,
    tenant_resolved,
    tenant_resolving,
)
from .tenant_context import ActiveLandlord, ActiveTenant, TenantContext
from .utils import load_resolver

logger = logging.getLogger(__name__)


class Tenancy:
    # --- Current context ---

    def current_tenant(self) -> ActiveTenant | None:
        return TenantContext.get_tenant()

    def current_landlord(self) -> ActiveLandlord | None:
        return TenantContext.get_landlord()

    def tenant_id(self):
        tenant = self.current_tenant()
        return tenant.id if tenant else None

    def landlord_id(self):
        landlord = self.current_landlord()
        return landlord.id if landlord else None

    def scope_id(self, scope: Scope):
        return self.tenant_id() if Scope(scope) is Scope.TENANT else self.landlord_id()

    # --- Lookups ---

    def tenant(self, value) -> ActiveTenant | None:
        """Wrap a tenant instance, id or slug into an :class:`ActiveTenant`."""

        if value is None or isinstance(value, ActiveTenant):
            return value

        repository = get_tenant_repository()
        record = value if isinstance(value, repository.model) else None
        if record is None:
            record = repository.find_by_identifier(value)
        return ActiveTenant(record) if record is not None else None

    def tenant_by_id(self, pk) -> ActiveTenant | None:
        """Like :meth:`tenant`, but ``pk`` is only ever matched as a primary key."""

        if isinstance(pk, ActiveTenant):
            return pk
        record = get_tenant_repository().find_by_id(pk)
        return ActiveTenant(record) if record is not None else None

    def landlord(self, value) -> ActiveLandlord | None:
        if value is None or isinstance(value, ActiveLandlord):
            return value

        repository = get_landlord_repository()
        model = repository.model
        if model is None:
            return None

        record = value if isinstance(value, model) else None
        if record is None:
            record = repository.find_by_identifier(value)
        return ActiveLandlord(record) if record is not None else None

    def landlord_of(self, tenant: ActiveTenant) -> ActiveLandlord | None:
        get_landlord = getattr(tenant.record, "get_landlord", None)
        record = get_landlord() if get_landlord else None
        return ActiveLandlord(record) if record is not None else None

    def assert_landlord_coherent(self, landlord: ActiveLandlord) -> None:
        """Refuse a landlord that does not own the active tenant.

        Skipped when ``CONTEXT.ENFORCE_COHERENCE`` is off, when no tenant is
        active and when the active tenant has no landlord.
        """

        if not settings.TENANCY.context.enforce_coherence:
            return

        tenant = self.current_tenant()
        if tenant is None:
            return

        expected = self.landlord_of(tenant)
        if expected is None or str(expected.id) == str(landlord.id):
            return

        raise InconsistentTenantLandlordContext.for_identifiers(
            tenant.id, expected.id, landlord.id
        )

    # --- Request resolution ---

    def resolve_tenant(self, request) -> ActiveTenant | None:
        """Resolve and activate the tenant of ``request``.

        The tenant stays active until :meth:`forget_current_tenant` is called;
        middlewares do that in a ``finally`` block.
        """

        tenant_resolving.send(sender=self.__class__, request=request)

        record = load_resolver(Scope.TENANT).resolve(request)
        if record is None:
            logger.debug("No tenant resolved for %s", request.path)
            return None

        tenant = ActiveTenant(record)
        TenantContext.push(Scope.TENANT, tenant)

        landlord = self.landlord_of(tenant)
        if landlord is not None:
            TenantContext.push(Scope.LANDLORD, landlord)

        tenant_resolved.send(sender=self.__class__, tenant=tenant, request=request)
        return tenant

    def resolve_landlord(self, request) -> ActiveLandlord | None:
        landlord_resolving.send(sender=self.__class__, request=request)

        if get_landlord_repository().model is None:
            return None

        record = load_resolver(Scope.LANDLORD).resolve(request)
        if record is None:
            logger.debug("No landlord resolved for %s", request.path)
            return None

        landlord = ActiveLandlord(record)
        self.assert_landlord_coherent(landlord)
        TenantContext.push(Scope.LANDLORD, landlord)

        landlord_resolved.send(
            sender=self.__class__, landlord=landlord, request=request
        )
        return landlord

    def forget_current_tenant(self) -> None:
        tenant = self.current_tenant()
        TenantContext.clear(Scope.TENANT)
        if tenant is not None:
            tenancy_ended.send(sender=self.__class__, tenant=tenant)

    def forget_current_landlord(self) -> None:
        landlord = self.current_landlord()
        TenantContext.clear(Scope.LANDLORD)
        if landlord is not None:
            landlord_ended.send(sender=self.__class__, landlord=landlord)

    # --- Scoped activation ---

    @contextmanager
    def use_tenant(self, value):
        """Run the ``with`` block with ``value`` as the current tenant.

        Raises :class:`UnresolvedTenantContext` when ``value`` does not name an
        existing tenant. The previous tenant and landlord are restored on exit,
        also when the block raises.
        """

        tenant = self.tenant(value)
        if tenant is None:
            raise UnresolvedTenantContext.for_identifier(value)

        # a tenant without landlord masks any landlord active outside
        landlord = self.landlord_of(tenant)
        with TenantContext.use_tenant(tenant), TenantContext.use_landlord(landlord):
            yield tenant

    @contextmanager
    def use_landlord(self, value):
        landlord = self.landlord(value)
        if landlord is None:
            raise UnresolvedLandlordContext.for_identifier(value)
        self.assert_landlord_coherent(landlord)

        with TenantContext.use_landlord(landlord):
            yield landlord

    # --- Serialization ---

    def tenant_payload(self) -> dict | None:
        """Serializable description of the current tenant, for queues and caches."""

        tenant = self.current_tenant()
        return tenant.payload() if tenant else None

    def from_tenant_payload(self, payload) -> ActiveTenant | None:
        if not isinstance(payload, dict):
            return None

        tenant = None
        if payload.get("id") is not None:
            tenant = self.tenant_by_id(payload["id"])
        if tenant is None:
            record = get_tenant_repository().find_by_slug(payload.get("slug"))
            tenant = ActiveTenant(record) if record is not None else None
        return tenant


tenancy = Tenancy()
