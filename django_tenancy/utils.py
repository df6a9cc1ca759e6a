from importlib import import_module

from django.apps import apps
from django.core.exceptions import DisallowedHost
from django.db.models.base import Model
from django.http.request import split_domain_port

from .conf import Scope, settings
from .constants import constants
from .exceptions import InvalidTenancyConfiguration


def get_tenant_model() -> type[Model]:
    path = settings.TENANCY.tenant.model
    if not path:
        raise InvalidTenancyConfiguration.missing_model(constants.TENANT_MODEL)
    return apps.get_model(path)


def get_landlord_model() -> type[Model] | None:
    path = settings.TENANCY.landlord.model
    return apps.get_model(path) if path else None


def get_model_for_scope(scope: Scope) -> type[Model] | None:
    if Scope(scope) is Scope.TENANT:
        return get_tenant_model()
    return get_landlord_model()


def import_from_path(path: str):
    """Import ``package.module.Name`` and return ``Name``."""

    module_name, class_name = path.rsplit(".", 1)
    try:
        module = import_module(module_name)
    except ImportError as e:
        raise InvalidTenancyConfiguration(
            f"Unable to import {path} due to: {e}"
        ) from e

    try:
        return getattr(module, class_name)
    except AttributeError as e:
        raise InvalidTenancyConfiguration(
            f"Module {module_name} has no attribute {class_name}"
        ) from e


def load_resolver(scope: Scope):
    """Instantiate the resolver class configured for ``scope``."""

    return import_from_path(settings.TENANCY.for_scope(scope).resolver.resolver_class)()


def get_request_host(request) -> str:
    """Host of the request without its port; ``""`` when it is missing or disallowed."""

    try:
        host = request.get_host()
    except DisallowedHost:
        host = request.META.get("HTTP_HOST", "")
    domain, _port = split_domain_port(host)
    return domain or host
