"""
Tenant Resolver Base Module

This module defines the interface for request resolution: deciding which
tenant (or landlord) a request belongs to based on request properties.

Resolution Concept:
    Each request is associated with at most one tenant. A resolver examines
    the request and returns the matching tenant record, or ``None``.

    Example: A request to "acme.example.com" should resolve to the "acme" tenant.

Resolution Strategies:
    1. Domain-based (DomainTenantResolver)
       - Full host looked up in the tenant's ``domains`` list
       - Each tenant can bring its own branded domains
       - Hosts listed in ``CENTRAL_DOMAINS`` are never tenant hosts

    2. Subdomain-based (SubdomainTenantResolver)
       - First label of a host with at least three labels is the slug
       - "acme.example.com" -> slug "acme"

    3. Header-based (HeaderTenantResolver)
       - "X-Tenant: acme" (id or slug); useful for APIs

    4. Path-based (PathTenantResolver)
       - "/acme/invoices/" -> "acme" (segment position is configurable)

    5. Session-based (SessionTenantResolver)
       - Identifier stored in the session by an earlier request

    6. Authenticated (AuthenticatedTenantResolver)
       - The user itself, or the record or identifier found under the dotted
         ``RESOLVER.USER_ATTRIBUTE`` path (e.g. "profile.hospital_id")

    7. Chain (ChainTenantResolver)
       - Runs a configured list of resolvers, first hit wins

Resolver Integration:
    The resolver is configured in Django settings:

    ```python
    TENANCY_CONFIG = {
        "TENANT_MODEL": "myapp.Tenant",
        "RESOLVER": {"CLASS": "django_tenancy.resolvers.ChainTenantResolver"},
        "LANDLORD": {
            "RESOLVER": {"CLASS": "django_tenancy.resolvers.HeaderLandlordResolver"},
        },
    }
    ```

    The tenancy service instantiates it per request and calls
    ``resolver.resolve(request)``.

Landlord Resolvers:
    Every resolver has a landlord twin that only differs in its ``scope``
    attribute; the scope selects the model, the repository and the
    ``LANDLORD.RESOLVER`` settings it reads.

Custom Resolver Implementation:
    Implement by subclassing BaseTenantResolver:

    ```python
    from django_tenancy.resolvers.base import BaseTenantResolver

    class ApiKeyTenantResolver(BaseTenantResolver):
        def resolve(self, request):
            key = request.headers.get("X-Api-Key")
            if not key:
                return None
            return self.repository.query().filter(api_key=key).first()
    ```

Error Handling:
    - Tenant not found: return None (the require middleware rejects)
    - Storage errors: domain lookups absorb them and fall through to slower
      lookup tiers; other queries propagate
"""

from django.utils.functional import cached_property

from django_tenancy.conf import Scope, settings


class BaseTenantResolver:
    """
    Base class for request resolvers.

    Subclasses implement :meth:`resolve`. ``scope`` selects which side of
    the hierarchy the resolver works on; :attr:`config` and
    :attr:`repository` follow it.
    """

    scope = Scope.TENANT

    @property
    def config(self):
        return settings.TENANCY.for_scope(self.scope).resolver

    @cached_property
    def repository(self):
        from django_tenancy.repositories import get_repository

        return get_repository(self.scope)

    def resolve(self, request) -> object | None:
        """
        Return the record the request belongs to, or ``None``.

        Args:
            request (HttpRequest): The incoming request.

        Returns:
            A tenant (or landlord) model instance, or None when the request
            does not identify one.
        """
        raise NotImplementedError
