import logging

from django.dispatch import receiver

from demo.models import Hospital, Network
from django_tenancy.signals import (
    landlord_created,
    tenancy_ended,
    tenant_created,
    tenant_resolved,
)

logger = logging.getLogger(__name__)


@receiver(tenant_created, sender=Hospital)
def hospital_created(sender, tenant, **kwargs):
    logger.info("Hospital %s created", tenant.slug)


@receiver(landlord_created, sender=Network)
def network_created(sender, landlord, **kwargs):
    logger.info("Network %s created", landlord.slug)


@receiver(tenant_resolved)
def hospital_resolved(sender, tenant, request=None, **kwargs):
    logger.debug("Serving hospital %s", tenant.slug)


@receiver(tenancy_ended)
def hospital_released(sender, tenant, **kwargs):
    logger.debug("Released hospital %s", tenant.slug)
