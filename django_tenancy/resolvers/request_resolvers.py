"""Resolvers reading an explicit identifier from the request."""

from django_tenancy.conf import Scope

from .base import BaseTenantResolver


class HeaderTenantResolver(BaseTenantResolver):
    """Identifier (id or slug) from the ``RESOLVER.HEADER`` request header."""

    def resolve(self, request) -> object | None:
        identifier = request.headers.get(self.config.header)
        if not identifier:
            return None
        return self.repository.find_by_identifier(identifier)


class PathTenantResolver(BaseTenantResolver):
    """Identifier from the ``RESOLVER.PATH_SEGMENT``-th path segment (1-based)."""

    def resolve(self, request) -> object | None:
        segments = [segment for segment in request.path.split("/") if segment]
        position = self.config.path_segment - 1
        if position >= len(segments):
            return None
        return self.repository.find_by_identifier(segments[position])


class SessionTenantResolver(BaseTenantResolver):
    """Identifier stored in the session under ``RESOLVER.SESSION_KEY``.

    The stored value may be an id, a slug or a dict carrying ``id`` and/or
    ``slug`` (the shape of a context payload).
    """

    def resolve(self, request) -> object | None:
        session = getattr(request, "session", None)
        if session is None:
            return None

        value = session.get(self.config.session_key)
        if isinstance(value, dict):
            return self.repository.find_by_id(
                value.get("id")
            ) or self.repository.find_by_slug(value.get("slug"))
        return self.repository.find_by_identifier(value)


class HeaderLandlordResolver(HeaderTenantResolver):
    scope = Scope.LANDLORD


class PathLandlordResolver(PathTenantResolver):
    scope = Scope.LANDLORD


class SessionLandlordResolver(SessionTenantResolver):
    scope = Scope.LANDLORD
