from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

from .conf import Scope


@dataclass(frozen=True)
class ActiveContext:
    """A resolved record wrapped for the current execution context."""

    record: object

    @property
    def id(self):
        return self.record.pk

    @property
    def slug(self):
        return getattr(self.record, "slug", None)

    def payload(self) -> dict:
        extra = {}
        if hasattr(self.record, "get_context_payload"):
            extra = self.record.get_context_payload() or {}
        return {"id": self.id, "slug": self.slug, **extra}


@dataclass(frozen=True)
class ActiveTenant(ActiveContext):
    pass


@dataclass(frozen=True)
class ActiveLandlord(ActiveContext):
    pass


class TenantContext:
    """
    Stacks of active tenants and landlords for the running context.

    Each stack is an immutable tuple held in a ``ContextVar``, so threads and
    asyncio tasks never see each other's entries. ``push`` returns a token that
    restores the previous stack when passed to ``pop``. A ``None`` entry masks
    the entries below it.
    """

    _tenant_stack = ContextVar("tenancy_tenant_stack", default=())
    _landlord_stack = ContextVar("tenancy_landlord_stack", default=())

    @classmethod
    def _var(cls, scope: Scope) -> ContextVar:
        return cls._tenant_stack if Scope(scope) is Scope.TENANT else cls._landlord_stack

    @classmethod
    def push(cls, scope: Scope, context: ActiveContext | None):
        var = cls._var(scope)
        return var.set(var.get() + (context,))

    @classmethod
    def pop(cls, scope: Scope, token) -> None:
        cls._var(scope).reset(token)

    @classmethod
    def get(cls, scope: Scope) -> ActiveContext | None:
        stack = cls._var(scope).get()
        return stack[-1] if stack else None

    @classmethod
    def clear(cls, scope: Scope) -> None:
        cls._var(scope).set(())

    @classmethod
    def clear_all(cls) -> None:
        cls.clear(Scope.TENANT)
        cls.clear(Scope.LANDLORD)

    # --- Tenant ---
    @classmethod
    def get_tenant(cls) -> ActiveTenant | None:
        return cls.get(Scope.TENANT)

    @classmethod
    def get_landlord(cls) -> ActiveLandlord | None:
        return cls.get(Scope.LANDLORD)

    # --- Context managers ---
    @classmethod
    @contextmanager
    def use(cls, scope: Scope, context: ActiveContext | None):
        """Activate ``context`` for the duration of the ``with`` block."""

        token = cls.push(scope, context)
        try:
            yield context
        finally:
            cls.pop(scope, token)

    @classmethod
    def use_tenant(cls, tenant: ActiveTenant):
        return cls.use(Scope.TENANT, tenant)

    @classmethod
    def use_landlord(cls, landlord: ActiveLandlord | None):
        return cls.use(Scope.LANDLORD, landlord)
