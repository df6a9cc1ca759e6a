"""
Domain lookup strategy interface.

A strategy is one way of turning a normalized domain into the id of the
record that owns it. ``DomainResolver`` runs an ordered list of them and
stops at the first hit, so a new tier only has to implement ``lookup``:

    class ReverseProxyHeaderLookup(BaseLookupStrategy):
        name = "proxy-map"

        def lookup(self, normalized, raw):
            return PROXY_MAP.get(normalized)

Every strategy reports a ``LookupResult`` distinguishing a real miss from a
storage failure. The resolver treats both as "try the next tier" but logs
them differently.
"""

import enum
from dataclasses import dataclass

from django.db import DatabaseError, transaction


class LookupOutcome(enum.Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    STORAGE_UNAVAILABLE = "storage_unavailable"


@dataclass(frozen=True)
class LookupResult:
    outcome: LookupOutcome
    owner_id: object = None
    error: Exception | None = None

    @classmethod
    def found(cls, owner_id) -> "LookupResult":
        return cls(LookupOutcome.FOUND, owner_id=owner_id)

    @classmethod
    def not_found(cls) -> "LookupResult":
        return cls(LookupOutcome.NOT_FOUND)

    @classmethod
    def unavailable(cls, error: Exception) -> "LookupResult":
        return cls(LookupOutcome.STORAGE_UNAVAILABLE, error=error)

    @property
    def is_found(self) -> bool:
        return self.outcome is LookupOutcome.FOUND


def is_usable_id(value) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and value != ""


class BaseLookupStrategy:
    """
    One resolution tier over a Django model.

    Subclasses implement :meth:`lookup` and return an owner id or ``None``.
    :meth:`try_resolve` runs it inside a savepoint on the queried database so
    that a failing query (missing table, unsupported JSON lookup, lost
    connection) rolls back cleanly instead of poisoning the caller's
    transaction, and converts ``DatabaseError`` into
    ``LookupResult.unavailable``.
    """

    name = "base"

    def __init__(self, model):
        self.model = model

    def query(self):
        return self.model._default_manager.all()

    @property
    def using(self) -> str:
        return self.query().db

    def lookup(self, normalized: str, raw: str):
        raise NotImplementedError

    def try_resolve(self, normalized: str, raw: str) -> LookupResult:
        try:
            with transaction.atomic(using=self.using):
                owner_id = self.lookup(normalized, raw)
        except DatabaseError as exc:
            return LookupResult.unavailable(exc)

        if not is_usable_id(owner_id):
            return LookupResult.not_found()
        return LookupResult.found(owner_id)
