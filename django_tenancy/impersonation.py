"""
Single-use impersonation tokens.

A support user is sent to a tenant's host with a token in the query string::

    token = impersonation.issue_token(tenant, user_id=request.user.pk)
    url = f"https://acme.example.test/?{impersonation.query_parameter}={token}"

The token's payload lives in a Django cache for a short TTL. Redeeming it
deletes the entry, and only the caller whose delete actually removed the key
receives the payload, so a token activates at most once even when two
requests race for it.
"""

import logging
import secrets
from dataclasses import dataclass

from django.core.cache import caches
from django.utils import timezone

from .conf import settings
from .constants import constants
from .tenancy import tenancy
from .tenant_context import ActiveTenant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImpersonationActivation:
    tenant: ActiveTenant
    user_id: object
    guard: str | None


class TenantImpersonationManager:
    @property
    def config(self):
        return settings.TENANCY.impersonation

    @property
    def query_parameter(self) -> str:
        return self.config.query_parameter

    @property
    def cache(self):
        return caches[self.config.cache_store or constants.DEFAULT_CACHE_ALIAS]

    def cache_key(self, token: str) -> str:
        return f"{self.config.cache_prefix}{token}"

    def issue_token(self, tenant, user_id, guard=None, ttl_seconds=None) -> str | None:
        """Store an impersonation payload for ``tenant`` and return its token.

        ``tenant`` may be a model instance, an ``ActiveTenant``, an id or a slug.
        Returns ``None`` when it does not name an existing tenant.
        """

        active = tenancy.tenant(tenant)
        if active is None:
            return None

        token = secrets.token_hex(32)
        self.cache.set(
            self.cache_key(token),
            {
                "tenant": active.payload(),
                "user_id": user_id,
                "guard": guard,
                "issued_at": int(timezone.now().timestamp()),
            },
            timeout=ttl_seconds or self.config.ttl_seconds,
        )
        return token

    def consume_token(self, token: str) -> dict | None:
        if not isinstance(token, str) or token == "":
            return None

        key = self.cache_key(token)
        payload = self.cache.get(key)
        if payload is None:
            return None

        if not self.cache.delete(key):
            # another request redeemed it between our get and delete
            return None

        return payload if isinstance(payload, dict) else None

    def apply_token(self, token: str) -> ImpersonationActivation | None:
        payload = self.consume_token(token)
        if payload is None:
            return None

        tenant = tenancy.from_tenant_payload(payload.get("tenant"))
        if tenant is None:
            logger.warning("Impersonation token names a tenant that no longer exists")
            return None

        return ImpersonationActivation(
            tenant=tenant,
            user_id=payload.get("user_id"),
            guard=payload.get("guard"),
        )


impersonation = TenantImpersonationManager()
