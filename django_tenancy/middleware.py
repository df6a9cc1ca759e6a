import logging

from django.http import HttpRequest, JsonResponse
from django.http.response import HttpResponseBase
from django.utils.deprecation import MiddlewareMixin

from .conf import Scope, settings
from .constants import constants
from .exceptions import (
    LandlordNotResolved,
    TenantNotResolved,
    UnexpectedMiddlewareResponse,
)
from .impersonation import impersonation
from .session_scope import SessionScopeGuard
from .tenancy import tenancy
from .utils import get_request_host

logger = logging.getLogger(__name__)


class TenancyMiddleware(MiddlewareMixin):
    """Common plumbing: call the next handler and insist on a real response."""

    sync_capable = True
    async_capable = False

    def call_next(self, request: HttpRequest) -> HttpResponseBase:
        response = self.get_response(request)
        if not isinstance(response, HttpResponseBase):
            raise UnexpectedMiddlewareResponse.expected_http_response(response)
        return response

    @staticmethod
    def reject(message: str, status: int) -> JsonResponse:
        return JsonResponse({"detail": message}, status=status)


class RequireTenantMiddleware(TenancyMiddleware):
    """
    Resolve the tenant of the request or reject it.

    The resolved tenant (and its landlord, when it has one) stays active for
    the rest of the request and is always released afterwards, also when
    resolution itself, a signal receiver or the view raised.
    """

    def __call__(self, request):
        try:
            tenant = tenancy.resolve_tenant(request)
            if tenant is None:
                error = TenantNotResolved.for_host(get_request_host(request))
                return self.reject(error.message, settings.TENANCY.http.abort_status)

            request.tenant = tenant.record
            landlord = tenancy.current_landlord()
            request.landlord = landlord.record if landlord else None
            return self.call_next(request)
        finally:
            tenancy.forget_current_tenant()
            tenancy.forget_current_landlord()


class RequireLandlordMiddleware(TenancyMiddleware):
    def __call__(self, request):
        try:
            landlord = tenancy.resolve_landlord(request)
            if landlord is None:
                error = LandlordNotResolved.for_host(get_request_host(request))
                return self.reject(error.message, settings.TENANCY.http.abort_status)

            request.landlord = landlord.record
            return self.call_next(request)
        finally:
            tenancy.forget_current_tenant()
            tenancy.forget_current_landlord()


class OptionalLandlordMiddleware(TenancyMiddleware):
    """Resolve a landlord when the request names one; never rejects."""

    def __call__(self, request):
        try:
            landlord = tenancy.resolve_landlord(request)
            request.landlord = landlord.record if landlord else None
            return self.call_next(request)
        finally:
            tenancy.forget_current_tenant()
            tenancy.forget_current_landlord()


class SessionScopeMiddleware(TenancyMiddleware):
    """Bind the session to the active scope and reject it under another one.

    Place it after the middleware that resolves the scope, and after
    ``SessionMiddleware``. Requests without a session are passed through.
    """

    scope: Scope

    def __call__(self, request):
        session = getattr(request, "session", None)
        if session is None:
            return self.call_next(request)

        guard = SessionScopeGuard.for_scope(self.scope)
        decision = guard.enforce(session, tenancy.scope_id(self.scope))
        if not decision.allowed:
            return self.reject(decision.message, decision.status)

        return self.call_next(request)


class TenantSessionScopeMiddleware(SessionScopeMiddleware):
    scope = Scope.TENANT


class LandlordSessionScopeMiddleware(SessionScopeMiddleware):
    scope = Scope.LANDLORD


class TenantImpersonationMiddleware(TenancyMiddleware):
    """
    Redeem an impersonation token passed in the query string.

    On success the tenant named by the token is active while the rest of the
    chain runs, and the impersonating principal is staged in the session under
    ``tenancy.impersonation`` for the authentication layer to pick up. Invalid,
    expired or already used tokens leave the request untouched.
    """

    def __call__(self, request):
        token = request.GET.get(impersonation.query_parameter)
        if not token:
            return self.call_next(request)

        try:
            activation = impersonation.apply_token(token)
        except Exception as e:
            logger.warning("Impersonation token could not be redeemed: %s", e)
            activation = None

        if activation is None:
            logger.debug("Ignoring unusable impersonation token")
            return self.call_next(request)

        session = getattr(request, "session", None)
        if session is not None:
            session[constants.IMPERSONATION_SESSION_KEY] = {
                "user_id": activation.user_id,
                "guard": activation.guard,
            }

        with tenancy.use_tenant(activation.tenant):
            return self.call_next(request)
