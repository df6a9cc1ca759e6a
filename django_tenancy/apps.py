from django.apps import AppConfig
from django.db.models import Model

from .conf import Scope, settings
from .constants import constants
from .exceptions import InvalidTenancyConfiguration, InvalidTenancyResolver
from .utils import get_landlord_model, get_tenant_model, import_from_path


class DjangoTenancyConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "django_tenancy"

    def ready(self):
        from .models import BaseLandlord, BaseTenant

        config = settings.TENANCY

        if not config.tenant.model:
            raise InvalidTenancyConfiguration.missing_model(constants.TENANT_MODEL)
        self._check_model(
            constants.TENANT_MODEL, config.tenant.model, get_tenant_model, BaseTenant
        )
        self._check_resolvers(Scope.TENANT)

        if config.landlord.model:
            self._check_model(
                constants.LANDLORD_MODEL,
                config.landlord.model,
                get_landlord_model,
                BaseLandlord,
            )
            self._check_resolvers(Scope.LANDLORD)

    @staticmethod
    def _check_model(key, path, loader, base):
        try:
            model = loader()
        except (LookupError, ValueError):
            raise InvalidTenancyConfiguration.unknown_model(key, path)

        if not issubclass(model, Model) or not issubclass(model, base):
            raise InvalidTenancyConfiguration(
                f"{path} must subclass django_tenancy.models.{base.__name__}."
            )

    @staticmethod
    def _check_resolvers(scope):
        from .resolvers import BaseTenantResolver

        resolver = settings.TENANCY.for_scope(scope).resolver
        for path in (resolver.resolver_class, *resolver.resolvers):
            if "." not in path:
                raise InvalidTenancyResolver.for_class(path)
            try:
                resolver_class = import_from_path(path)
            except InvalidTenancyConfiguration as e:
                raise InvalidTenancyResolver.for_class(path) from e
            if not isinstance(resolver_class, type) or not issubclass(
                resolver_class, BaseTenantResolver
            ):
                raise InvalidTenancyResolver.for_class(path)
