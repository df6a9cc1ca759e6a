from django.utils.functional import cached_property


class _Constants:
    @cached_property
    def TENANCY_CONFIG(self) -> str:
        return "TENANCY_CONFIG"

    @cached_property
    def TENANT_MODEL(self) -> str:
        return "TENANT_MODEL"

    @cached_property
    def LANDLORD_MODEL(self) -> str:
        return "LANDLORD_MODEL"

    @cached_property
    def CONNECTION(self) -> str:
        return "CONNECTION"

    @cached_property
    def TABLE_NAMES(self) -> str:
        return "TABLE_NAMES"

    @cached_property
    def RESOLVER(self) -> str:
        return "RESOLVER"

    @cached_property
    def LANDLORD(self) -> str:
        return "LANDLORD"

    @cached_property
    def DOMAIN_LOOKUP(self) -> str:
        return "DOMAIN_LOOKUP"

    @cached_property
    def CACHE(self) -> str:
        return "CACHE"

    @cached_property
    def HTTP(self) -> str:
        return "HTTP"

    @cached_property
    def SESSION(self) -> str:
        return "SESSION"

    @cached_property
    def IMPERSONATION(self) -> str:
        return "IMPERSONATION"

    @cached_property
    def QUEUE(self) -> str:
        return "QUEUE"

    @cached_property
    def CONTEXT(self) -> str:
        return "CONTEXT"

    @cached_property
    def DEFAULT_DB_ALIAS(self) -> str:
        return "default"

    @cached_property
    def DEFAULT_CACHE_ALIAS(self) -> str:
        return "default"

    @cached_property
    def TENANT_DOMAINS_TABLE(self) -> str:
        return "tenant_domains"

    @cached_property
    def LANDLORD_DOMAINS_TABLE(self) -> str:
        return "landlord_domains"

    @cached_property
    def IMPERSONATION_SESSION_KEY(self) -> str:
        return "tenancy.impersonation"

    @cached_property
    def TENANT_ID_HEADER(self) -> str:
        return "tenant_id"


constants = _Constants()
