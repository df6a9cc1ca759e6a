from celery import shared_task

from django_tenancy.patches.celery import TenantAwareTask
from django_tenancy.tenancy import tenancy

from .models import Patient


@shared_task(base=TenantAwareTask)
def create_patient(name):
    return Patient.objects.create(hospital_id=tenancy.tenant_id(), name=name).pk


@shared_task(base=TenantAwareTask)
def current_hospital():
    tenant = tenancy.current_tenant()
    return tenant.slug if tenant else None
