from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations
from django.db import models


def money(**kwargs):
    return models.DecimalField(
        decimal_places=2, default=Decimal("0.00"), max_digits=14, **kwargs
    )


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("companies", "0001_initial"),
        ("staff", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="PayrollUpload",
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
                ("file_name", models.CharField(max_length=255)),
                (
                    "file",
                    models.FileField(blank=True, upload_to="payroll/uploads/"),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("processing", "Processing"),
                            ("completed", "Completed"),
                        ],
                        default="processing",
                        max_length=20,
                    ),
                ),
                ("total_records", models.PositiveIntegerField(default=0)),
                ("successful", models.PositiveIntegerField(default=0)),
                ("failed", models.PositiveIntegerField(default=0)),
                ("payslips_generated", models.PositiveIntegerField(default=0)),
                ("emails_sent", models.PositiveIntegerField(default=0)),
                ("errors", models.JSONField(blank=True, default=list)),
                ("warnings", models.JSONField(blank=True, default=list)),
                (
                    "failed_records_file",
                    models.FileField(blank=True, upload_to="payroll/failed/"),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "company",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payroll_uploads",
                        to="companies.company",
                    ),
                ),
                (
                    "uploaded_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="payroll_uploads",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Payroll Upload",
                "verbose_name_plural": "Payroll Uploads",
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="Payroll",
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
                ("period_year", models.PositiveIntegerField()),
                ("period_month", models.PositiveSmallIntegerField(help_text="1-12")),
                (
                    "month_label",
                    models.CharField(
                        help_text="Month as written in the uploaded sheet",
                        max_length=20,
                    ),
                ),
                ("period_key", models.CharField(max_length=20)),
                ("gross_pay", money()),
                ("prorated_gross_pay", money()),
                ("basic", money()),
                ("housing", money()),
                ("transport", money()),
                ("dressing", money()),
                ("leave_allowance", money()),
                ("entertainment", money()),
                ("utility", money()),
                ("bonus_kpi", money()),
                ("deductions", money()),
                ("paye", money(help_text="Pay-as-you-earn income tax")),
                ("pension", money()),
                ("medical_contribution", money()),
                ("net_salary", money()),
                ("final_gross", money()),
                (
                    "working_days",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0.00"), max_digits=5
                    ),
                ),
                (
                    "days_worked",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0.00"), max_digits=5
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("PROCESSED", "Processed")],
                        default="PROCESSED",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "company",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payrolls",
                        to="companies.company",
                    ),
                ),
                (
                    "staff",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payrolls",
                        to="staff.staffrecord",
                    ),
                ),
                (
                    "upload",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="payrolls",
                        to="payroll.payrollupload",
                    ),
                ),
                (
                    "uploaded_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="uploaded_payrolls",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Payroll",
                "verbose_name_plural": "Payrolls",
                "ordering": ["-period_year", "-period_month", "staff_id"],
            },
        ),
        migrations.CreateModel(
            name="Payslip",
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
                ("period_year", models.PositiveIntegerField()),
                ("period_month", models.PositiveSmallIntegerField()),
                ("month_label", models.CharField(max_length=20)),
                ("period_key", models.CharField(max_length=20)),
                ("file", models.FileField(upload_to="payslips/")),
                ("file_name", models.CharField(max_length=255)),
                ("gross_pay", money()),
                ("net_pay", money()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "company",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payslips",
                        to="companies.company",
                    ),
                ),
                (
                    "payroll",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payslips",
                        to="payroll.payroll",
                    ),
                ),
                (
                    "staff",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payslips",
                        to="staff.staffrecord",
                    ),
                ),
            ],
            options={
                "verbose_name": "Payslip",
                "verbose_name_plural": "Payslips",
                "ordering": ["-period_year", "-period_month", "-created_at"],
            },
        ),
        migrations.AddConstraint(
            model_name="payroll",
            constraint=models.UniqueConstraint(
                fields=("company", "staff", "period_year", "period_key"),
                name="uniq_payroll_per_staff_period",
            ),
        ),
        migrations.AddConstraint(
            model_name="payslip",
            constraint=models.UniqueConstraint(
                fields=("company", "staff", "period_year", "period_key"),
                name="uniq_payslip_per_staff_period",
            ),
        ),
    ]
