import logging

from django_tenancy.normalizer import normalize_domain

from .base import LookupOutcome
from .cache import DomainLookupCache

logger = logging.getLogger(__name__)


class DomainResolver:
    """
    Resolve a domain to an owner id through an ordered list of strategies.

    The first strategy that finds an id wins; strategies are never merged or
    re-ranked. A storage failure in one tier is logged and the next tier
    runs, so a broken lookup table degrades to slower lookups instead of
    failing the request. When a cache is given, the whole tier pass for a
    normalized domain sits behind a single cache lookup.

    Resolution is read-only: it never writes the lookup table.
    """

    def __init__(self, strategies, cache: DomainLookupCache | None = None, label="tenant"):
        self.strategies = list(strategies)
        self.cache = cache
        self.label = label

    def resolve(self, raw_domain):
        normalized = normalize_domain(raw_domain)
        if normalized is None:
            return None

        if self.cache is None:
            return self.resolve_uncached(normalized, raw_domain)

        return self.cache.remember(
            normalized, lambda: self.resolve_uncached(normalized, raw_domain)
        )

    def resolve_uncached(self, normalized: str, raw_domain: str):
        for strategy in self.strategies:
            result = strategy.try_resolve(normalized, raw_domain)

            if result.outcome is LookupOutcome.FOUND:
                logger.debug(
                    "Resolved %s %r for domain %s via %s",
                    self.label,
                    result.owner_id,
                    normalized,
                    strategy.name,
                )
                return result.owner_id

            if result.outcome is LookupOutcome.STORAGE_UNAVAILABLE:
                logger.warning(
                    "%s lookup tier %s unavailable for domain %s: %s",
                    self.label.capitalize(),
                    strategy.name,
                    normalized,
                    result.error,
                )
            else:
                logger.debug(
                    "%s lookup tier %s missed domain %s",
                    self.label.capitalize(),
                    strategy.name,
                    normalized,
                )

        return None
