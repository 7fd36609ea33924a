import django.db.models.deletion
from django.db import migrations
from django.db import models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("companies", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="StaffRecord",
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
                (
                    "staff_id",
                    models.CharField(help_text="Company staff number", max_length=50),
                ),
                ("email", models.EmailField(max_length=254)),
                ("first_name", models.CharField(max_length=150)),
                ("last_name", models.CharField(max_length=150)),
                ("department", models.CharField(blank=True, max_length=150)),
                ("position", models.CharField(blank=True, max_length=150)),
                ("phone", models.CharField(blank=True, max_length=50)),
                ("bank_name", models.CharField(blank=True, max_length=200)),
                ("account_number", models.CharField(blank=True, max_length=50)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "company",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="staff_records",
                        to="companies.company",
                    ),
                ),
            ],
            options={
                "verbose_name": "Staff Record",
                "verbose_name_plural": "Staff Records",
                "ordering": ["last_name", "first_name"],
            },
        ),
        migrations.AddConstraint(
            model_name="staffrecord",
            constraint=models.UniqueConstraint(
                fields=("company", "email"), name="uniq_staff_email_per_company"
            ),
        ),
        migrations.AddConstraint(
            model_name="staffrecord",
            constraint=models.UniqueConstraint(
                fields=("company", "staff_id"), name="uniq_staff_id_per_company"
            ),
        ),
    ]
