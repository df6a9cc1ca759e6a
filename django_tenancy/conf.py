"""Typed configuration for django_tenancy.

The raw ``TENANCY_CONFIG`` dict from the project settings is read once and
turned into a frozen :class:`TenancyConfig`. Every loosely typed value
(status codes, flags, TTLs) is coerced here, so the rest of the package can
rely on plain ``int``/``bool``/``str`` attributes.

Keys are case-insensitive::

    TENANCY_CONFIG = {
        "TENANT_MODEL": "myapp.Tenant",
        "DOMAIN_LOOKUP": {"CACHE": {"ENABLED": True, "TTL_SECONDS": 120}},
        "SESSION": {"ABORT_STATUS": "403"},
    }

The parsed value is cached on :data:`settings` and dropped again whenever
Django's ``setting_changed`` signal fires for ``TENANCY_CONFIG`` (for example
under ``override_settings`` in tests).
"""

import enum
from dataclasses import dataclass, field

from django.conf import settings as django_settings
from django.core.signals import setting_changed
from django.utils.functional import cached_property
from requests.structures import CaseInsensitiveDict

from .constants import constants


class Scope(str, enum.Enum):
    TENANT = "tenant"
    LANDLORD = "landlord"


def _section(raw, key) -> CaseInsensitiveDict:
    value = raw.get(key) if raw is not None else None
    return CaseInsensitiveDict(value if isinstance(value, dict) else {})


def _string(value, default):
    return value if isinstance(value, str) and value != "" else default


def _optional_string(value):
    return value if isinstance(value, str) and value != "" else None


def _positive_int(value, default: int) -> int:
    # bool is an int subclass; True must not become a one second TTL
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value if value > 0 else default


def _int(value, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(float(value.strip()))
        except (ValueError, OverflowError):
            return default
    return default


def _status(value, default: int) -> int:
    code = _int(value, default)
    return code if 100 <= code <= 599 else default


def _strings(value, default=()) -> tuple:
    if not isinstance(value, (list, tuple)):
        return tuple(default)
    return tuple(item for item in value if isinstance(item, str) and item != "")


@dataclass(frozen=True)
class LookupCacheConfig:
    enabled: bool = False
    ttl_seconds: int = 60
    prefix: str = "tenancy:domain:tenant:"
    store: str | None = None


@dataclass(frozen=True)
class DomainLookupConfig:
    use_table: bool = True
    table_name: str = "tenant_domains"
    connection: str | None = None
    cache: LookupCacheConfig = field(default_factory=LookupCacheConfig)


@dataclass(frozen=True)
class ResolverConfig:
    resolver_class: str = "django_tenancy.resolvers.DomainTenantResolver"
    resolvers: tuple = ()
    header: str = "X-Tenant"
    central_domains: tuple = ()
    path_segment: int = 1
    session_key: str = "tenant"
    user_attribute: str | None = None


@dataclass(frozen=True)
class ScopeConfig:
    scope: Scope
    model: str | None
    resolver: ResolverConfig
    domain_lookup: DomainLookupConfig
    session_scope_key: str


@dataclass(frozen=True)
class HttpConfig:
    abort_status: int = 404


@dataclass(frozen=True)
class SessionConfig:
    abort_status: int = 403
    invalidate_on_mismatch: bool = True


@dataclass(frozen=True)
class ImpersonationConfig:
    query_parameter: str = "tenant_impersonation"
    ttl_seconds: int = 300
    cache_prefix: str = "tenancy:impersonation:tenant:"
    cache_store: str | None = None


@dataclass(frozen=True)
class QueueConfig:
    prefix: str = "tenant"
    delimiter: str = ":"


@dataclass(frozen=True)
class ContextConfig:
    enforce_coherence: bool = True


@dataclass(frozen=True)
class TenancyConfig:
    tenant: ScopeConfig
    landlord: ScopeConfig
    http: HttpConfig
    session: SessionConfig
    impersonation: ImpersonationConfig
    queue: QueueConfig
    context: ContextConfig = field(default_factory=ContextConfig)

    def for_scope(self, scope: Scope) -> ScopeConfig:
        return self.tenant if Scope(scope) is Scope.TENANT else self.landlord

    @classmethod
    def from_dict(cls, raw: dict | None) -> "TenancyConfig":
        raw = CaseInsensitiveDict(raw if isinstance(raw, dict) else {})
        connection = _optional_string(raw.get(constants.CONNECTION))
        table_names = _section(raw, constants.TABLE_NAMES)
        landlord_raw = _section(raw, constants.LANDLORD)

        tenant = _parse_scope(
            Scope.TENANT,
            model=_optional_string(raw.get(constants.TENANT_MODEL)),
            resolver_raw=_section(raw, constants.RESOLVER),
            lookup_raw=_section(raw, constants.DOMAIN_LOOKUP),
            table_name=_string(
                table_names.get("TENANT_DOMAINS"), constants.TENANT_DOMAINS_TABLE
            ),
            connection=connection,
            session_raw=_section(raw, constants.SESSION),
        )
        landlord = _parse_scope(
            Scope.LANDLORD,
            model=_optional_string(raw.get(constants.LANDLORD_MODEL)),
            resolver_raw=_section(landlord_raw, constants.RESOLVER),
            lookup_raw=_section(landlord_raw, constants.DOMAIN_LOOKUP),
            table_name=_string(
                table_names.get("LANDLORD_DOMAINS"), constants.LANDLORD_DOMAINS_TABLE
            ),
            connection=connection,
            session_raw=_section(raw, constants.SESSION),
        )

        http_raw = _section(raw, constants.HTTP)
        session_raw = _section(raw, constants.SESSION)
        impersonation_raw = _section(raw, constants.IMPERSONATION)
        queue_raw = _section(raw, constants.QUEUE)
        context_raw = _section(raw, constants.CONTEXT)

        return cls(
            tenant=tenant,
            landlord=landlord,
            http=HttpConfig(abort_status=_status(http_raw.get("ABORT_STATUS"), 404)),
            session=SessionConfig(
                abort_status=_status(session_raw.get("ABORT_STATUS"), 403),
                invalidate_on_mismatch=bool(
                    session_raw.get("INVALIDATE_ON_MISMATCH", True)
                ),
            ),
            impersonation=ImpersonationConfig(
                query_parameter=_string(
                    impersonation_raw.get("QUERY_PARAMETER"), "tenant_impersonation"
                ),
                ttl_seconds=_positive_int(impersonation_raw.get("TTL_SECONDS"), 300),
                cache_prefix=_string(
                    impersonation_raw.get("CACHE_PREFIX"),
                    "tenancy:impersonation:tenant:",
                ),
                cache_store=_optional_string(impersonation_raw.get("CACHE_STORE")),
            ),
            queue=QueueConfig(
                prefix=_string(queue_raw.get("PREFIX"), "tenant"),
                delimiter=_string(queue_raw.get("DELIMITER"), ":"),
            ),
            context=ContextConfig(
                enforce_coherence=bool(context_raw.get("ENFORCE_COHERENCE", True)),
            ),
        )


_SCOPE_DEFAULTS = {
    Scope.TENANT: {
        "resolver_class": "django_tenancy.resolvers.DomainTenantResolver",
        "resolvers": (
            "django_tenancy.resolvers.DomainTenantResolver",
            "django_tenancy.resolvers.SubdomainTenantResolver",
            "django_tenancy.resolvers.PathTenantResolver",
            "django_tenancy.resolvers.AuthenticatedTenantResolver",
            "django_tenancy.resolvers.SessionTenantResolver",
        ),
        "header": "X-Tenant",
        "session_key": "tenant",
        "cache_prefix": "tenancy:domain:tenant:",
        "session_scope_key": "tenancy.tenant_id",
    },
    Scope.LANDLORD: {
        "resolver_class": "django_tenancy.resolvers.DomainLandlordResolver",
        "resolvers": (
            "django_tenancy.resolvers.DomainLandlordResolver",
            "django_tenancy.resolvers.SubdomainLandlordResolver",
            "django_tenancy.resolvers.PathLandlordResolver",
            "django_tenancy.resolvers.AuthenticatedLandlordResolver",
            "django_tenancy.resolvers.SessionLandlordResolver",
        ),
        "header": "X-Landlord",
        "session_key": "landlord",
        "cache_prefix": "tenancy:domain:landlord:",
        "session_scope_key": "tenancy.landlord_id",
    },
}


def _parse_scope(
    scope, *, model, resolver_raw, lookup_raw, table_name, connection, session_raw
) -> ScopeConfig:
    defaults = _SCOPE_DEFAULTS[scope]
    cache_raw = _section(lookup_raw, constants.CACHE)

    resolver = ResolverConfig(
        resolver_class=_string(resolver_raw.get("CLASS"), defaults["resolver_class"]),
        resolvers=_strings(resolver_raw.get("RESOLVERS"), defaults["resolvers"]),
        header=_string(resolver_raw.get("HEADER"), defaults["header"]),
        central_domains=_strings(resolver_raw.get("CENTRAL_DOMAINS")),
        path_segment=max(_int(resolver_raw.get("PATH_SEGMENT"), 1), 1),
        session_key=_string(resolver_raw.get("SESSION_KEY"), defaults["session_key"]),
        user_attribute=_optional_string(resolver_raw.get("USER_ATTRIBUTE")),
    )
    domain_lookup = DomainLookupConfig(
        use_table=bool(lookup_raw.get("USE_TABLE", True)),
        table_name=table_name,
        connection=connection,
        cache=LookupCacheConfig(
            # only a real boolean True switches caching on
            enabled=cache_raw.get("ENABLED", False) is True,
            ttl_seconds=_positive_int(cache_raw.get("TTL_SECONDS"), 60),
            prefix=_string(cache_raw.get("PREFIX"), defaults["cache_prefix"]),
            store=_optional_string(cache_raw.get("STORE")),
        ),
    )
    scope_key_name = f"{scope.value.upper()}_SCOPE_KEY"
    return ScopeConfig(
        scope=scope,
        model=model,
        resolver=resolver,
        domain_lookup=domain_lookup,
        session_scope_key=_string(
            session_raw.get(scope_key_name), defaults["session_scope_key"]
        ),
    )


class _WrappedSettings:
    def __getattr__(self, item):
        return getattr(django_settings, item)

    def __setattr__(self, key, value):
        if key in self.__dict__:
            raise ValueError("Item assignment is not supported")

        setattr(django_settings, key, value)

    @cached_property
    def TENANCY_CONFIG(self) -> dict:
        return getattr(django_settings, constants.TENANCY_CONFIG, {})

    @cached_property
    def TENANCY(self) -> TenancyConfig:
        return TenancyConfig.from_dict(self.TENANCY_CONFIG)

    def reload(self):
        self.__dict__.pop("TENANCY_CONFIG", None)
        self.__dict__.pop("TENANCY", None)


settings = _WrappedSettings()


def _reload_on_setting_changed(*, setting, **kwargs):
    if setting == constants.TENANCY_CONFIG:
        settings.reload()


setting_changed.connect(_reload_on_setting_changed)
