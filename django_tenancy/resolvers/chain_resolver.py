import logging

from django_tenancy.conf import Scope
from django_tenancy.utils import import_from_path

from .base import BaseTenantResolver

logger = logging.getLogger(__name__)


class ChainTenantResolver(BaseTenantResolver):
    """Try each resolver listed in ``RESOLVER.RESOLVERS`` in order."""

    def resolvers(self):
        for path in self.config.resolvers:
            resolver_class = import_from_path(path)
            if issubclass(resolver_class, ChainTenantResolver):
                logger.warning("Skipping nested chain resolver %s", path)
                continue
            yield resolver_class()

    def resolve(self, request) -> object | None:
        for resolver in self.resolvers():
            record = resolver.resolve(request)
            if record is not None:
                return record
        return None


class ChainLandlordResolver(ChainTenantResolver):
    scope = Scope.LANDLORD
