from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from django_tenancy.tenancy import tenancy

from .models import Patient
from .tasks import create_patient


@api_view(["GET"])
def hospital_view(request):
    """
    Describe the hospital (tenant) serving this request.
    """
    landlord = tenancy.current_landlord()
    return Response(
        {
            "tenant": tenancy.tenant_payload(),
            "landlord": landlord.payload() if landlord else None,
        },
        status=status.HTTP_200_OK,
    )


@api_view(["GET"])
def patients_view(request):
    """
    List the patients of the current hospital.
    """
    patients = Patient.objects.filter(hospital_id=tenancy.tenant_id()).order_by("pk")
    patients = [{"id": patient.pk, "name": patient.name} for patient in patients]
    return Response(patients, status=status.HTTP_200_OK)


@api_view(["POST"])
def create_patient_view(request):
    name = request.data.get("name")
    if not name:
        return Response(
            {"error": "Name is required"}, status=status.HTTP_400_BAD_REQUEST
        )

    patient = Patient.objects.create(hospital=request.tenant, name=name)
    return Response(
        {"id": patient.pk, "name": patient.name}, status=status.HTTP_201_CREATED
    )


@api_view(["POST"])
def create_patient_async_view(request):
    """
    Create a patient from a background worker running under the same hospital.
    """
    name = request.data.get("name")
    if not name:
        return Response(
            {"error": "Name is required"}, status=status.HTTP_400_BAD_REQUEST
        )

    create_patient.apply_async(kwargs={"name": name}, tenant_id=request.tenant.pk)
    return Response(
        {"detail": "Patient creation has been queued"}, status=status.HTTP_202_ACCEPTED
    )
