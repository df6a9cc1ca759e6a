from django_tenancy.conf import Scope

from .base import BaseTenantResolver


def _read_attribute(obj, path: str):
    """Follow a dotted ``path`` through attributes and dict keys."""

    value = obj
    for part in path.split("."):
        if value is None:
            return None
        if isinstance(value, dict):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


class AuthenticatedTenantResolver(BaseTenantResolver):
    """
    Resolve from ``request.user``.

    A user that is itself a tenant record is returned as is. Otherwise the
    dotted ``RESOLVER.USER_ATTRIBUTE`` path is read from the user; a record
    found there is returned, and an id or slug is looked up. Anonymous users
    and an unset attribute resolve to nothing.
    """

    def resolve(self, request) -> object | None:
        user = getattr(request, "user", None)
        if user is None:
            return None

        model = self.repository.model
        if model is not None and isinstance(user, model):
            return user
        if not getattr(user, "is_authenticated", False):
            return None

        attribute = self.config.user_attribute
        if not attribute:
            return None

        value = _read_attribute(user, attribute)
        if model is not None and isinstance(value, model):
            return value
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            return None
        return self.repository.find_by_identifier(value)


class AuthenticatedLandlordResolver(AuthenticatedTenantResolver):
    scope = Scope.LANDLORD
