"""Base tenant, landlord and domain lookup models for django_tenancy.

This module defines the reusable model bases of the package:

- ``BaseTenant``: an abstract representation of a tenant. It carries a
    unique ``slug`` (a DNS label usable in subdomains and URLs) and an
    ordered JSON list of ``domains`` the tenant answers on.

- ``BaseLandlord``: the same shape for the parent scope. A tenant may
    point at its landlord; resolving the tenant then activates both.

- ``TenantDomain`` / ``LandlordDomain``: concrete, flat lookup tables
    mapping a normalized domain to the owning record's id. They are a
    secondary index rebuilt wholesale from the JSON ``domains`` list and are
    never the source of truth.

Notes on integration
--------------------
- ``BaseTenant`` and ``BaseLandlord`` are ``abstract``; concrete projects
    subclass them, add project-specific fields and point
    ``TENANCY_CONFIG["TENANT_MODEL"]`` / ``["LANDLORD_MODEL"]`` at them.
- ``save`` rebuilds the lookup rows when the record is new or its
    ``domains`` changed, and ``delete`` purges them. Code that changes
    ``domains`` without going through ``save`` (``QuerySet.update`` for
    example) must call ``repository.sync_domain_lookup`` itself.
- The repository is imported lazily inside the hooks to avoid a circular
    import between the models and the repositories.
"""

from django.db import models

from .conf import Scope, settings
from .validators import validate_dns_label, validate_domain_list


class TenancyRecord(models.Model):
    """Fields and lifecycle hooks shared by tenants and landlords."""

    tenancy_scope: Scope

    name = models.CharField(max_length=100)
    slug = models.SlugField(
        max_length=63,
        unique=True,
        validators=[validate_dns_label],
        help_text="Must be a valid DNS label (RFC 1034/1035).",
    )
    domains = models.JSONField(
        default=list,
        blank=True,
        validators=[validate_domain_list],
        help_text="Host names this record answers on, in priority order.",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def __str__(self):
        return f"{self.name}({self.slug})"

    def get_domains(self) -> list[str]:
        """Return the stored domains, skipping anything that is not a string."""

        return [domain for domain in (self.domains or []) if isinstance(domain, str)]

    def get_context_payload(self) -> dict:
        """Extra data carried in the serialized context (see ``ActiveTenant.payload``)."""

        return {}

    def save(self, *args, sync_domain_lookup=True, **kwargs):
        """Persist the record and keep the domain lookup table in step.

        The lookup rows are rebuilt when the record is created or when its
        ``domains`` list differs from the stored one. Pass
        ``sync_domain_lookup=False`` when the caller rebuilds them itself.
        """

        adding = self._state.adding
        domains_changed = adding
        if not adding and self.pk is not None:
            stored = (
                type(self)
                ._default_manager.filter(pk=self.pk)
                .values_list("domains", flat=True)
                .first()
            )
            domains_changed = stored != self.domains

        super().save(*args, **kwargs)

        if sync_domain_lookup and domains_changed:
            from .repositories import get_repository

            get_repository(self.tenancy_scope).sync_domain_lookup(self)

    def delete(self, *args, **kwargs):
        """Delete the record and purge its domain lookup rows."""

        from .repositories import get_repository

        pk = self.pk
        result = super().delete(*args, **kwargs)
        get_repository(self.tenancy_scope).purge_domain_lookup(pk)
        return result


class BaseLandlord(TenancyRecord):
    """Abstract landlord model: the scope above tenants (an operator account)."""

    tenancy_scope = Scope.LANDLORD

    class Meta:
        abstract = True


class BaseTenant(TenancyRecord):
    """Abstract tenant model.

    Subclasses that belong to a landlord should expose it through a
    ``landlord`` attribute (usually a nullable ``ForeignKey``) or override
    :meth:`get_landlord`.
    """

    tenancy_scope = Scope.TENANT

    class Meta:
        abstract = True

    def get_landlord(self):
        return getattr(self, "landlord", None)


class DomainLookup(models.Model):
    """One normalized domain pointing at the id of its owner."""

    owner_field: str

    domain = models.CharField(max_length=253, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def __str__(self):
        return f"{self.domain} => {getattr(self, self.owner_field)}"


class TenantDomain(DomainLookup):
    owner_field = "tenant_id"

    # stored as text so integer and string primary keys both fit
    tenant_id = models.CharField(max_length=255, db_index=True)

    class Meta:
        db_table = settings.TENANCY.tenant.domain_lookup.table_name


class LandlordDomain(DomainLookup):
    owner_field = "landlord_id"

    landlord_id = models.CharField(max_length=255, db_index=True)

    class Meta:
        db_table = settings.TENANCY.landlord.domain_lookup.table_name
