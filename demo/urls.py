from django.urls import path

from .views import (
    create_patient_async_view,
    create_patient_view,
    hospital_view,
    patients_view,
)

urlpatterns = [
    path("hospital/", hospital_view, name="hospital-detail"),
    path("patients/", patients_view, name="patient-list"),
    path("patients/create/", create_patient_view, name="patient-create"),
    path(
        "patients/create_async/",
        create_patient_async_view,
        name="patient-create-async",
    ),
]
