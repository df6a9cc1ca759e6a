import django.db.models.deletion
from django.db import migrations, models

import django_tenancy.validators


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Network",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(max_length=100)),
                (
                    "slug",
                    models.SlugField(
                        help_text="Must be a valid DNS label (RFC 1034/1035).",
                        max_length=63,
                        unique=True,
                        validators=[django_tenancy.validators.validate_dns_label],
                    ),
                ),
                (
                    "domains",
                    models.JSONField(
                        blank=True,
                        default=list,
                        help_text="Host names this record answers on, in priority order.",
                        validators=[django_tenancy.validators.validate_domain_list],
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Hospital",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(max_length=100)),
                (
                    "slug",
                    models.SlugField(
                        help_text="Must be a valid DNS label (RFC 1034/1035).",
                        max_length=63,
                        unique=True,
                        validators=[django_tenancy.validators.validate_dns_label],
                    ),
                ),
                (
                    "domains",
                    models.JSONField(
                        blank=True,
                        default=list,
                        help_text="Host names this record answers on, in priority order.",
                        validators=[django_tenancy.validators.validate_domain_list],
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "landlord",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="hospitals",
                        to="demo.network",
                    ),
                ),
            ],
            options={
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Patient",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(max_length=100)),
                (
                    "hospital",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="patients",
                        to="demo.hospital",
                    ),
                ),
            ],
        ),
    ]
