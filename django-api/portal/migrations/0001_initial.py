import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Agency",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("legal_name", models.CharField(max_length=255)),
                ("cnpj", models.CharField(max_length=32)),
                ("cadastur", models.CharField(blank=True, default="", max_length=64)),
                ("address", models.CharField(blank=True, default="", max_length=500)),
                ("responsible_name", models.CharField(blank=True, default="", max_length=255)),
                ("responsible_phone", models.CharField(blank=True, default="", max_length=64)),
                ("instagram", models.CharField(blank=True, default="", max_length=255)),
                ("bank_details", models.TextField(blank=True, default="")),
                ("commission_rate", models.DecimalField(decimal_places=4, default=0, max_digits=5)),
                (
                    "status",
                    models.CharField(
                        choices=[("PENDING", "Pending"), ("APPROVED", "Approved"), ("REJECTED", "Rejected")],
                        default="PENDING",
                        max_length=16,
                    ),
                ),
                ("requested_users", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "verbose_name_plural": "agencies",
                "indexes": [models.Index(fields=["status"], name="portal_agen_status_7c1f0e_idx")],
            },
        ),
        migrations.CreateModel(
            name="Notice",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=255)),
                ("summary", models.CharField(blank=True, default="", max_length=500)),
                ("content", models.TextField(blank=True, default="")),
                ("category", models.CharField(blank=True, default="", max_length=100)),
                (
                    "priority",
                    models.CharField(
                        choices=[("CRITICAL", "Critical"), ("HIGH", "High"), ("MEDIUM", "Medium"), ("LOW", "Low")],
                        default="MEDIUM",
                        max_length=16,
                    ),
                ),
                ("impact", models.CharField(blank=True, default="", max_length=255)),
                ("destination", models.CharField(blank=True, default="", max_length=255)),
                ("affected_scope", models.CharField(blank=True, default="", max_length=255)),
                ("published_at", models.DateTimeField()),
                ("is_pinned", models.BooleanField(default=False)),
                ("requires_confirmation", models.BooleanField(default=False)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-is_pinned", "-published_at"],
            },
        ),
        migrations.CreateModel(
            name="Reservation",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("product_name", models.CharField(max_length=255)),
                ("destination", models.CharField(blank=True, default="", max_length=255)),
                ("agent_name", models.CharField(blank=True, default="", max_length=255)),
                ("agent_email", models.EmailField(max_length=255)),
                ("travel_date", models.DateField()),
                ("adults", models.PositiveIntegerField(default=0)),
                ("children", models.PositiveIntegerField(default=0)),
                ("infants", models.PositiveIntegerField(default=0)),
                ("pax_names", models.TextField(blank=True, default="")),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=10)),
                ("commission_amount", models.DecimalField(decimal_places=2, max_digits=10)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PRE_RESERVATION", "Pre-reservation"),
                            ("CONFIRMED", "Confirmed"),
                            ("CANCELLED", "Cancelled"),
                        ],
                        default="PRE_RESERVATION",
                        max_length=32,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["agent_email"], name="portal_rese_agent_e_3b9d42_idx")],
            },
        ),
        migrations.CreateModel(
            name="Tour",
            fields=[
                ("id", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("destination", models.CharField(blank=True, default="", max_length=255)),
                ("name", models.CharField(blank=True, default="", max_length=255)),
                ("category", models.CharField(blank=True, default="", max_length=255)),
                ("subcategory", models.CharField(blank=True, default="", max_length=255)),
                ("operator", models.CharField(blank=True, default="", max_length=255)),
                ("status", models.CharField(blank=True, default="", max_length=32)),
                ("season_label", models.CharField(blank=True, default="", max_length=255)),
                ("pickup", models.CharField(blank=True, default="", max_length=8)),
                ("return_time", models.CharField(blank=True, default="", max_length=8)),
                ("summer_adult", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("summer_child", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("summer_infant", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("winter_adult", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("winter_child", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("winter_infant", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("eligible_days", models.JSONField(blank=True, default=list)),
                ("tags", models.JSONField(blank=True, default=list)),
                ("duration", models.CharField(blank=True, default="", max_length=64)),
                ("extra_value", models.TextField(blank=True, default="")),
                ("extra_fees", models.TextField(blank=True, default="")),
                ("restrictions", models.TextField(blank=True, default="")),
                ("optionals", models.TextField(blank=True, default="")),
                ("variants", models.TextField(blank=True, default="")),
                ("summary", models.TextField(blank=True, default="")),
                ("observations", models.TextField(blank=True, default="")),
                ("what_to_bring", models.TextField(blank=True, default="")),
                ("media_url", models.URLField(blank=True, default="", max_length=500)),
                ("source_updated_at", models.CharField(blank=True, default="", max_length=64)),
                ("synced_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["destination", "name"],
                "indexes": [models.Index(fields=["destination"], name="portal_tour_destina_5a2e8c_idx")],
            },
        ),
        migrations.CreateModel(
            name="PortalUser",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("email", models.EmailField(max_length=255, unique=True)),
                ("name", models.CharField(blank=True, default="", max_length=255)),
                (
                    "role",
                    models.CharField(
                        choices=[
                            ("ADMIN", "Admin"),
                            ("INTERNAL_SELLER", "Internal seller"),
                            ("PARTNER_AGENCY", "Partner agency"),
                        ],
                        default="PARTNER_AGENCY",
                        max_length=32,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("ACTIVE", "Active"), ("INACTIVE", "Inactive")],
                        default="ACTIVE",
                        max_length=16,
                    ),
                ),
                ("flag_reserva", models.BooleanField(default=False)),
                ("flag_mural", models.BooleanField(default=False)),
                ("flag_exchange", models.BooleanField(default=False)),
                ("allowed_destinations", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "agency",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="users",
                        to="portal.agency",
                    ),
                ),
            ],
            options={
                "ordering": ["email"],
            },
        ),
        migrations.CreateModel(
            name="NoticeReadLog",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("agency_ref", models.CharField(blank=True, default="", max_length=255)),
                ("confirmed_at", models.DateTimeField()),
                (
                    "notice",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="read_logs",
                        to="portal.notice",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="read_logs",
                        to="portal.portaluser",
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(fields=["notice", "-confirmed_at"], name="portal_noti_notice__9e4b1d_idx")
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("user", "notice"), name="unique_read_log_per_user_notice")
                ],
            },
        ),
    ]
