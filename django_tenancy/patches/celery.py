"""
Celery Task Patch for Tenant Awareness

This module makes Celery tasks run under the tenant that queued them.

Mechanism:
    1. On the producer side ``TenantAwareTask.apply_async`` puts a tenant id
       into the ``tenant_id`` message header. The id comes from an explicit
       ``tenant_id=`` option, or from the tenant active at call time.
    2. On the worker side ``TenantAwareTask.__call__`` reads the header back
       and runs the task body inside ``tenancy.use_tenant(...)``, so the
       tenant (and its landlord) are active for the task and released after.

Usage:
    ```python
    from celery import shared_task
    from django_tenancy.patches.celery import TenantAwareTask

    @shared_task(base=TenantAwareTask)
    def send_invoice(invoice_id):
        tenancy.tenant_id()  # tenant that queued the task
        ...

    # Inside a request handled under tenant "acme":
    send_invoice.delay(42)

    # Explicit tenant:
    send_invoice.apply_async(args=(42,), tenant_id=acme.pk)
    ```

Queues:
    ``tenant_scoped_queue("emails")`` returns ``"tenant:<id>:emails"`` for
    the active tenant (prefix and delimiter come from ``TENANCY_CONFIG["QUEUE"]``),
    for deployments that run dedicated workers per tenant.

Error Handling:
    A header naming a tenant that no longer exists raises
    ``UnresolvedTenantContext`` in the worker; the task fails instead of
    running against the wrong data.
"""

from celery import Celery, Task

from django_tenancy.conf import settings
from django_tenancy.constants import constants
from django_tenancy.exceptions import UnresolvedTenantContext
from django_tenancy.tenancy import tenancy


class TenantAwareTask(Task):
    abstract = True

    def apply_async(
        self,
        args=None,
        kwargs=None,
        task_id=None,
        producer=None,
        link=None,
        link_error=None,
        shadow=None,
        **options,
    ):
        tenant_id = options.pop(constants.TENANT_ID_HEADER, None)
        if tenant_id is None:
            tenant_id = tenancy.tenant_id()

        if tenant_id is not None:
            headers = dict(options.get("headers") or {})
            headers[constants.TENANT_ID_HEADER] = tenant_id
            options["headers"] = headers

        return super().apply_async(
            args=args,
            kwargs=kwargs,
            task_id=task_id,
            producer=producer,
            link=link,
            link_error=link_error,
            shadow=shadow,
            **options,
        )

    def tenant_id_from_request(self):
        headers = getattr(self.request, "headers", None) or {}
        tenant_id = headers.get(constants.TENANT_ID_HEADER)
        if tenant_id is None:
            # protocol 2 merges custom headers into the request itself
            tenant_id = getattr(self.request, constants.TENANT_ID_HEADER, None)
        return tenant_id

    def __call__(self, *args, **kwargs):
        tenant_id = self.tenant_id_from_request()

        if tenant_id is not None:
            # the header carries a primary key, never a slug
            tenant = tenancy.tenant_by_id(tenant_id)
            if tenant is None:
                raise UnresolvedTenantContext.for_identifier(tenant_id)
            with tenancy.use_tenant(tenant):
                return super().__call__(*args, **kwargs)

        return super().__call__(*args, **kwargs)


def tenant_scoped_queue(queue: str, tenant=None) -> str:
    """Prefix ``queue`` with the tenant id; unchanged when there is no tenant.

    ``tenant`` may be a record, an id or a slug and defaults to the active
    tenant. One naming no existing tenant raises ``UnresolvedTenantContext``.
    """

    if tenant is None:
        tenant_id = tenancy.tenant_id()
    else:
        active = tenancy.tenant(tenant)
        if active is None:
            raise UnresolvedTenantContext.for_identifier(tenant)
        tenant_id = active.id

    if tenant_id is None:
        return queue

    config = settings.TENANCY.queue
    return config.delimiter.join([config.prefix, str(tenant_id), queue])


Celery.Task = TenantAwareTask
