from django.db import models

from django_tenancy.models import BaseLandlord, BaseTenant


class Network(BaseLandlord):
    """A hospital network operating several hospitals."""

    def __str__(self) -> str:
        return self.name


class Hospital(BaseTenant):
    landlord = models.ForeignKey(
        Network,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="hospitals",
    )

    def __str__(self) -> str:
        return self.name

    def get_context_payload(self) -> dict:
        return {"name": self.name}


class Patient(models.Model):
    hospital = models.ForeignKey(
        Hospital, on_delete=models.CASCADE, related_name="patients"
    )
    name = models.CharField(max_length=100)

    def __str__(self):
        return self.name
