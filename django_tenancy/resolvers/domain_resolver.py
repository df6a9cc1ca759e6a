from django_tenancy.conf import Scope
from django_tenancy.normalizer import normalize_domain
from django_tenancy.utils import get_request_host

from .base import BaseTenantResolver


def is_central_domain(host: str, central_domains) -> bool:
    """True when ``host`` is one of ``central_domains`` or a subdomain of one."""

    for central in central_domains:
        central = normalize_domain(central)
        if central and (host == central or host.endswith(f".{central}")):
            return True
    return False


class DomainTenantResolver(BaseTenantResolver):
    """Match the request host against the domains stored on each tenant."""

    def resolve(self, request) -> object | None:
        host = normalize_domain(get_request_host(request))
        if host is None or is_central_domain(host, self.config.central_domains):
            return None
        return self.repository.find_by_domain(host)


class DomainLandlordResolver(DomainTenantResolver):
    scope = Scope.LANDLORD
