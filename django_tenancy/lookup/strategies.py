from django.core.exceptions import ValidationError

from django_tenancy.normalizer import normalize_domain

from .base import BaseLookupStrategy, LookupResult


class IndexTableLookup(BaseLookupStrategy):
    """Tier 1: exact match on the flat ``<scope>_domains`` lookup table.

    The id found in the table is checked against the owner table, so a row
    left behind by a deleted record is treated as a miss.
    """

    name = "index-table"

    def __init__(self, model, lookup_model, connection=None, enabled=True):
        super().__init__(model)
        self.lookup_model = lookup_model
        self.connection = connection
        self.enabled = enabled

    def table(self):
        manager = self.lookup_model._default_manager
        return manager.using(self.connection) if self.connection else manager.all()

    @property
    def using(self) -> str:
        return self.table().db

    def try_resolve(self, normalized, raw) -> LookupResult:
        if not self.enabled:
            return LookupResult.not_found()
        return super().try_resolve(normalized, raw)

    def lookup(self, normalized, raw):
        owner_id = (
            self.table()
            .filter(domain=normalized)
            .values_list(self.lookup_model.owner_field, flat=True)
            .first()
        )
        if owner_id in (None, ""):
            return None

        try:
            return self.query().filter(pk=owner_id).values_list("pk", flat=True).first()
        except (ValueError, TypeError, ValidationError):
            # stored id does not fit the owner's primary key type
            return None


class ContainmentQueryLookup(BaseLookupStrategy):
    """Tier 2: JSON containment query on the owner's ``domains`` column.

    Retried with the raw input when it differs from the normalized form, for
    directories that store domains exactly as they were typed. Backends
    without JSON containment support (SQLite) raise ``NotSupportedError``,
    which surfaces as a storage-unavailable result.
    """

    name = "containment-query"

    def _first_containing(self, domain):
        return (
            self.query()
            .filter(domains__contains=[domain])
            .order_by("pk")
            .values_list("pk", flat=True)
            .first()
        )

    def lookup(self, normalized, raw):
        owner_id = self._first_containing(normalized)
        if owner_id is None and raw != normalized:
            owner_id = self._first_containing(raw)
        return owner_id


class NormalizedScanLookup(BaseLookupStrategy):
    """Tier 3: stream every record and normalize each stored domain.

    O(records x domains); only reached when the cheaper tiers miss.
    """

    name = "normalized-scan"
    chunk_size = 500

    def lookup(self, normalized, raw):
        records = self.query().order_by("pk").only("domains")
        for record in records.iterator(chunk_size=self.chunk_size):
            for candidate in record.get_domains():
                if normalize_domain(candidate) == normalized:
                    return record.pk
        return None
