from .base import BaseLookupStrategy, LookupOutcome, LookupResult
from .cache import DomainLookupCache
from .resolver import DomainResolver
from .strategies import ContainmentQueryLookup, IndexTableLookup, NormalizedScanLookup

__all__ = [
    "BaseLookupStrategy",
    "ContainmentQueryLookup",
    "DomainLookupCache",
    "DomainResolver",
    "IndexTableLookup",
    "LookupOutcome",
    "LookupResult",
    "NormalizedScanLookup",
]
