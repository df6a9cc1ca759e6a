from .authenticated_resolver import (
    AuthenticatedLandlordResolver,
    AuthenticatedTenantResolver,
)
from .base import BaseTenantResolver
from .chain_resolver import ChainLandlordResolver, ChainTenantResolver
from .domain_resolver import DomainLandlordResolver, DomainTenantResolver
from .request_resolvers import (
    HeaderLandlordResolver,
    HeaderTenantResolver,
    PathLandlordResolver,
    PathTenantResolver,
    SessionLandlordResolver,
    SessionTenantResolver,
)
from .subdomain_resolver import SubdomainLandlordResolver, SubdomainTenantResolver

__all__ = [
    "AuthenticatedLandlordResolver",
    "AuthenticatedTenantResolver",
    "BaseTenantResolver",
    "ChainLandlordResolver",
    "ChainTenantResolver",
    "DomainLandlordResolver",
    "DomainTenantResolver",
    "HeaderLandlordResolver",
    "HeaderTenantResolver",
    "PathLandlordResolver",
    "PathTenantResolver",
    "SessionLandlordResolver",
    "SessionTenantResolver",
    "SubdomainLandlordResolver",
    "SubdomainTenantResolver",
]
