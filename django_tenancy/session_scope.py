"""
Session scope binding.

Once a session has been used under a tenant it stays bound to that tenant.
A session cookie carried to another tenant's host is rejected (and, by
default, flushed) instead of being silently reused, which closes the
session-fixation path between tenants sharing a session backend.

States, evaluated against the id of the currently active tenant:

    UNBOUND     no active tenant; any stored binding is removed
    FIRST_BIND  active tenant, nothing stored yet; the id is stored
    VERIFIED    stored id equals the active id
    CORRUPT     stored value is not an id (int or str); handled as MISMATCH
    MISMATCH    stored id belongs to another tenant

Ids are compared as strings so ``5`` and ``"5"`` match.
"""

import enum
import logging
from dataclasses import dataclass

from .conf import Scope, settings

logger = logging.getLogger(__name__)


class ScopeState(enum.Enum):
    UNBOUND = "unbound"
    FIRST_BIND = "first_bind"
    VERIFIED = "verified"
    CORRUPT = "corrupt"
    MISMATCH = "mismatch"


@dataclass(frozen=True)
class ScopeDecision:
    state: ScopeState
    status: int | None = None
    message: str | None = None

    @property
    def allowed(self) -> bool:
        return self.state not in (ScopeState.CORRUPT, ScopeState.MISMATCH)


def _is_id(value) -> bool:
    return not isinstance(value, bool) and isinstance(value, (int, str))


class SessionScopeGuard:
    def __init__(
        self,
        scope_key: str,
        abort_status: int = 403,
        invalidate_on_mismatch: bool = True,
        label: str = "Tenant",
    ):
        self.scope_key = scope_key
        self.abort_status = abort_status
        self.invalidate_on_mismatch = invalidate_on_mismatch
        self.label = label

    @classmethod
    def for_scope(cls, scope: Scope) -> "SessionScopeGuard":
        config = settings.TENANCY
        return cls(
            scope_key=config.for_scope(scope).session_scope_key,
            abort_status=config.session.abort_status,
            invalidate_on_mismatch=config.session.invalidate_on_mismatch,
            label=Scope(scope).value.capitalize(),
        )

    @property
    def message(self) -> str:
        return f"{self.label} session scope mismatch."

    def evaluate(self, session, active_id) -> ScopeState:
        if active_id is None:
            return ScopeState.UNBOUND

        stored = session.get(self.scope_key)
        if stored is None:
            return ScopeState.FIRST_BIND
        if not _is_id(stored):
            return ScopeState.CORRUPT
        if str(stored) == str(active_id):
            return ScopeState.VERIFIED
        return ScopeState.MISMATCH

    def enforce(self, session, active_id) -> ScopeDecision:
        state = self.evaluate(session, active_id)

        if state is ScopeState.UNBOUND:
            session.pop(self.scope_key, None)
        elif state is ScopeState.FIRST_BIND:
            session[self.scope_key] = str(active_id)
        elif state in (ScopeState.CORRUPT, ScopeState.MISMATCH):
            logger.warning(
                "%s session bound to %r used under %r",
                self.label,
                session.get(self.scope_key),
                active_id,
            )
            if self.invalidate_on_mismatch:
                session.flush()
            return ScopeDecision(state, status=self.abort_status, message=self.message)
        return ScopeDecision(state)
