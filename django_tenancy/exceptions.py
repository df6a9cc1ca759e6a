"""
Custom Exception Classes for django-tenancy

This module defines the exceptions raised by django-tenancy. All of them derive
from ``TenancyError`` so callers can catch the whole family at once.

Exceptions in this module:
    - TenantNotResolved / LandlordNotResolved: no context could be resolved
      for a request host. Middlewares turn these into HTTP rejections.
    - UnresolvedTenantContext / UnresolvedLandlordContext: an explicit
      identifier passed to ``tenancy.use_tenant()`` (or ``use_landlord()``)
      did not match any record.
    - UnexpectedMiddlewareResponse: the downstream handler returned something
      that is not an ``HttpResponseBase``.
    - InconsistentTenantLandlordContext: a landlord was activated that does
      not own the active tenant.
    - InvalidTenancyConfiguration: ``TENANCY_CONFIG`` is unusable.
      InvalidTenancyResolver narrows it to a bad resolver class path.

Storage failures are deliberately absent: lookup tiers and domain lookup
synchronization catch ``django.db.DatabaseError`` themselves and never let it
reach request handling code.

Usage:
    from django_tenancy.exceptions import TenantNotResolved

    try:
        context = tenancy.use_tenant("acme")
    except UnresolvedTenantContext:
        logger.warning("Tenant acme not found")
"""

from django.core.exceptions import ImproperlyConfigured


class TenancyError(Exception):
    """Base class for every exception raised by django-tenancy."""


class TenantNotResolved(TenancyError):
    """
    Raised (or rendered as a rejection) when no tenant matches a request.

    The message always names the host that failed to resolve, so that the
    rejection body is useful to whoever misconfigured a DNS record:

        >>> TenantNotResolved.for_host("unknown.example.test").message
        'Unable to resolve tenant for host [unknown.example.test].'
    """

    def __init__(self, message: str, host: str | None = None):
        super().__init__(message)
        self.message = message
        self.host = host

    @classmethod
    def for_host(cls, host: str) -> "TenantNotResolved":
        return cls(f"Unable to resolve tenant for host [{host}].", host=host)


class LandlordNotResolved(TenancyError):
    """Landlord counterpart of :class:`TenantNotResolved`."""

    def __init__(self, message: str, host: str | None = None):
        super().__init__(message)
        self.message = message
        self.host = host

    @classmethod
    def for_host(cls, host: str) -> "LandlordNotResolved":
        return cls(f"Unable to resolve landlord for host [{host}].", host=host)


class UnresolvedTenantContext(TenancyError):
    """
    Raised when a tenant context is explicitly requested but cannot be built.

    This happens when ``tenancy.use_tenant(identifier)`` receives an id or
    slug that does not exist. It is a programming or data error, not a
    request routing miss.
    """

    @classmethod
    def for_identifier(cls, identifier) -> "UnresolvedTenantContext":
        return cls(f"Unable to resolve tenant context for identifier [{identifier}].")


class UnresolvedLandlordContext(TenancyError):
    @classmethod
    def for_identifier(cls, identifier) -> "UnresolvedLandlordContext":
        return cls(
            f"Unable to resolve landlord context for identifier [{identifier}]."
        )


class UnexpectedMiddlewareResponse(TenancyError, TypeError):
    """
    Raised when the next handler in the middleware chain returns a value that
    is not a Django response.

    The middlewares in this package never coerce such a value into a
    response; it signals a broken view or a broken middleware further down
    the chain.
    """

    @classmethod
    def expected_http_response(cls, value=None) -> "UnexpectedMiddlewareResponse":
        return cls(
            f"Expected an HttpResponseBase instance, got {type(value).__name__}."
        )


class InvalidTenancyConfiguration(TenancyError, ImproperlyConfigured):
    """Raised at startup when ``TENANCY_CONFIG`` cannot be used."""

    @classmethod
    def missing_model(cls, key: str) -> "InvalidTenancyConfiguration":
        return cls(
            f"TENANCY_CONFIG must define '{key}'. Example:\n"
            f"TENANCY_CONFIG = {{ '{key}': 'myapp.Tenant' }}"
        )

    @classmethod
    def unknown_model(cls, key: str, path: str) -> "InvalidTenancyConfiguration":
        return cls(
            f"Could not find model '{path}' configured as '{key}'. "
            f"Check your TENANCY_CONFIG in settings.py."
        )


class InvalidTenancyResolver(InvalidTenancyConfiguration):
    """Raised at startup when a configured resolver is not a resolver class."""

    @classmethod
    def for_class(cls, path: str) -> "InvalidTenancyResolver":
        return cls(
            f"Configured tenancy resolver [{path}] must subclass "
            f"django_tenancy.resolvers.BaseTenantResolver."
        )


class InconsistentTenantLandlordContext(TenancyError):
    """
    Raised when a landlord is activated that does not own the active tenant.

    Only checked while ``CONTEXT.ENFORCE_COHERENCE`` is on (the default) and
    the active tenant names a landlord:

        >>> InconsistentTenantLandlordContext.for_identifiers(7, 1, 2).args[0]
        'Tenant context [7] expects landlord [1], got [2].'
    """

    @classmethod
    def for_identifiers(
        cls, tenant_id, expected_landlord_id, actual_landlord_id
    ) -> "InconsistentTenantLandlordContext":
        return cls(
            f"Tenant context [{tenant_id}] expects landlord "
            f"[{expected_landlord_id}], got [{actual_landlord_id}]."
        )
