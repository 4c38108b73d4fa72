"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models


class Agency(models.Model):
    """Persistence model for partner agencies."""

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        APPROVED = "APPROVED", "Approved"
        REJECTED = "REJECTED", "Rejected"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    legal_name = models.CharField(max_length=255)
    cnpj = models.CharField(max_length=32)
    cadastur = models.CharField(max_length=64, blank=True, default="")
    address = models.CharField(max_length=500, blank=True, default="")
    responsible_name = models.CharField(max_length=255, blank=True, default="")
    responsible_phone = models.CharField(max_length=64, blank=True, default="")
    instagram = models.CharField(max_length=255, blank=True, default="")
    bank_details = models.TextField(blank=True, default="")
    commission_rate = models.DecimalField(max_digits=5, decimal_places=4, default=0)
    status = models.CharField(
        max_length=16, choices=Status.choices, default=Status.PENDING
    )
    requested_users = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name_plural = "agencies"
        indexes = [
            models.Index(fields=["status"], name="portal_agen_status_7c1f0e_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class PortalUser(models.Model):
    """Persistence model for portal users."""

    class Role(models.TextChoices):
        ADMIN = "ADMIN", "Admin"
        INTERNAL_SELLER = "INTERNAL_SELLER", "Internal seller"
        PARTNER_AGENCY = "PARTNER_AGENCY", "Partner agency"

    class Status(models.TextChoices):
        ACTIVE = "ACTIVE", "Active"
        INACTIVE = "INACTIVE", "Inactive"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(max_length=255, unique=True)
    name = models.CharField(max_length=255, blank=True, default="")
    role = models.CharField(
        max_length=32, choices=Role.choices, default=Role.PARTNER_AGENCY
    )
    status = models.CharField(
        max_length=16, choices=Status.choices, default=Status.ACTIVE
    )
    agency = models.ForeignKey(
        Agency,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="users",
    )
    flag_reserva = models.BooleanField(default=False)
    flag_mural = models.BooleanField(default=False)
    flag_exchange = models.BooleanField(default=False)
    allowed_destinations = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["email"]

    def __str__(self) -> str:
        return self.email


class Tour(models.Model):
    """Catalog product snapshot written by the sync job."""

    id = models.CharField(primary_key=True, max_length=64)
    destination = models.CharField(max_length=255, blank=True, default="")
    name = models.CharField(max_length=255, blank=True, default="")
    category = models.CharField(max_length=255, blank=True, default="")
    subcategory = models.CharField(max_length=255, blank=True, default="")
    operator = models.CharField(max_length=255, blank=True, default="")
    status = models.CharField(max_length=32, blank=True, default="")
    season_label = models.CharField(max_length=255, blank=True, default="")
    pickup = models.CharField(max_length=8, blank=True, default="")
    return_time = models.CharField(max_length=8, blank=True, default="")
    summer_adult = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    summer_child = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    summer_infant = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    winter_adult = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    winter_child = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    winter_infant = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    eligible_days = models.JSONField(default=list, blank=True)
    tags = models.JSONField(default=list, blank=True)
    duration = models.CharField(max_length=64, blank=True, default="")
    extra_value = models.TextField(blank=True, default="")
    extra_fees = models.TextField(blank=True, default="")
    restrictions = models.TextField(blank=True, default="")
    optionals = models.TextField(blank=True, default="")
    variants = models.TextField(blank=True, default="")
    summary = models.TextField(blank=True, default="")
    observations = models.TextField(blank=True, default="")
    what_to_bring = models.TextField(blank=True, default="")
    media_url = models.URLField(max_length=500, blank=True, default="")
    source_updated_at = models.CharField(max_length=64, blank=True, default="")
    synced_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["destination", "name"]
        indexes = [
            models.Index(fields=["destination"], name="portal_tour_destina_5a2e8c_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.destination} - {self.name}"


class Notice(models.Model):
    """Mural bulletin entry."""

    class Priority(models.TextChoices):
        CRITICAL = "CRITICAL", "Critical"
        HIGH = "HIGH", "High"
        MEDIUM = "MEDIUM", "Medium"
        LOW = "LOW", "Low"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    summary = models.CharField(max_length=500, blank=True, default="")
    content = models.TextField(blank=True, default="")
    category = models.CharField(max_length=100, blank=True, default="")
    priority = models.CharField(
        max_length=16, choices=Priority.choices, default=Priority.MEDIUM
    )
    impact = models.CharField(max_length=255, blank=True, default="")
    destination = models.CharField(max_length=255, blank=True, default="")
    affected_scope = models.CharField(max_length=255, blank=True, default="")
    published_at = models.DateTimeField()
    is_pinned = models.BooleanField(default=False)
    requires_confirmation = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-is_pinned", "-published_at"]

    def __str__(self) -> str:
        return self.title


class NoticeReadLog(models.Model):
    """Read receipt; one row per (user, notice)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        PortalUser, on_delete=models.CASCADE, related_name="read_logs"
    )
    notice = models.ForeignKey(
        Notice, on_delete=models.CASCADE, related_name="read_logs"
    )
    agency_ref = models.CharField(max_length=255, blank=True, default="")
    agency_name = models.CharField(max_length=255, blank=True, default="")
    confirmed_at = models.DateTimeField()

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["user", "notice"], name="unique_read_log_per_user_notice"
            ),
        ]
        indexes = [
            models.Index(
                fields=["notice", "-confirmed_at"], name="portal_noti_notice__9e4b1d_idx"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} read {self.notice_id}"


class Reservation(models.Model):
    """Reservation request submitted by an agent."""

    class Status(models.TextChoices):
        PRE_RESERVATION = "PRE_RESERVATION", "Pre-reservation"
        CONFIRMED = "CONFIRMED", "Confirmed"
        CANCELLED = "CANCELLED", "Cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    product_name = models.CharField(max_length=255)
    destination = models.CharField(max_length=255, blank=True, default="")
    agent_name = models.CharField(max_length=255, blank=True, default="")
    agent_email = models.EmailField(max_length=255)
    travel_date = models.DateField()
    adults = models.PositiveIntegerField(default=0)
    children = models.PositiveIntegerField(default=0)
    infants = models.PositiveIntegerField(default=0)
    pax_names = models.TextField(blank=True, default="")
    total_amount = models.DecimalField(max_digits=10, decimal_places=2)
    commission_amount = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(
        max_length=32, choices=Status.choices, default=Status.PRE_RESERVATION
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["agent_email"], name="portal_rese_agent_e_3b9d42_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.product_name} - {self.travel_date}"
