import logging

from django.core.cache import caches

from django_tenancy.conf import LookupCacheConfig
from django_tenancy.constants import constants
from django_tenancy.normalizer import normalize_domain

from .base import is_usable_id

logger = logging.getLogger(__name__)


class DomainLookupCache:
    """
    Memo of ``normalized domain -> owner id`` in a Django cache.

    Only successful resolutions are stored, each with the configured TTL;
    a miss is recomputed on every call. Entries are never authoritative and
    can be dropped at any time. When the cache backend raises, the error is
    logged and the value is computed directly.
    """

    def __init__(self, config: LookupCacheConfig):
        self.config = config

    @property
    def cache(self):
        return caches[self.config.store or constants.DEFAULT_CACHE_ALIAS]

    def key(self, normalized_domain: str) -> str:
        return f"{self.config.prefix}{normalized_domain}"

    def remember(self, normalized_domain: str, compute):
        key = self.key(normalized_domain)
        try:
            cached = self.cache.get(key)
        except Exception as exc:
            logger.warning("Domain lookup cache read failed for %s: %s", key, exc)
            return compute()

        if is_usable_id(cached):
            return cached

        value = compute()
        if not is_usable_id(value):
            return None

        try:
            self.cache.set(key, value, timeout=self.config.ttl_seconds)
        except Exception as exc:
            logger.warning("Domain lookup cache write failed for %s: %s", key, exc)
        return value

    def forget(self, domain: str) -> None:
        normalized = normalize_domain(domain)
        if normalized is None:
            return
        try:
            self.cache.delete(self.key(normalized))
        except Exception as exc:
            logger.warning("Domain lookup cache delete failed for %s: %s", domain, exc)
