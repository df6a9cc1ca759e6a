from django_tenancy.conf import Scope
from django_tenancy.normalizer import normalize_domain
from django_tenancy.utils import get_request_host

from .base import BaseTenantResolver


class SubdomainTenantResolver(BaseTenantResolver):
    def resolve(self, request) -> object | None:
        host = normalize_domain(get_request_host(request))
        if host is None:
            return None

        labels = host.split(".")
        # "example.com" has no subdomain
        if len(labels) < 3:
            return None
        return self.repository.find_by_slug(labels[0])


class SubdomainLandlordResolver(SubdomainTenantResolver):
    scope = Scope.LANDLORD
