"""Django ORM implementations of the portal stores."""

import logging
from datetime import datetime
from functools import wraps
from uuid import UUID

from django.db import DatabaseError, IntegrityError, transaction

from portal import models
from portal.domain import (
    AgencyId,
    AgencyRecord,
    AgencyStatus,
    CatalogProduct,
    Money,
    Notice,
    NoticeId,
    NoticeReadLog,
    PaxPrices,
    Priority,
    RequestedUser,
    ReservationRecord,
    Role,
    UserId,
    UserRecord,
    UserStatus,
)
from portal.domain.errors import (
    DuplicateEmailError,
    StorageUnavailableError,
    ValidationFailedError,
)
from portal.domain.value_objects import normalize_email
from portal.stores.interfaces import (
    AccessStore,
    CatalogStore,
    NoticeStore,
    ReadLogStore,
    ReservationStore,
)

logger = logging.getLogger(__name__)


def _storage_call(func):
    """Map database failures to StorageUnavailableError."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DatabaseError as exc:
            logger.exception("Storage call %s failed", func.__qualname__)
            raise StorageUnavailableError() from exc

    return wrapper


def _as_uuid(value: str, field: str) -> UUID:
    try:
        return UUID(str(value))
    except ValueError as exc:
        raise ValidationFailedError(f"Invalid {field}", field=field) from exc


def _agency_to_domain(row: models.Agency) -> AgencyRecord:
    return AgencyRecord(
        id=AgencyId(row.id),
        name=row.name,
        legal_name=row.legal_name,
        cnpj=row.cnpj,
        commission_rate=row.commission_rate,
        status=AgencyStatus(row.status),
        cadastur=row.cadastur,
        address=row.address,
        responsible_name=row.responsible_name,
        responsible_phone=row.responsible_phone,
        instagram=row.instagram,
        bank_details=row.bank_details,
        requested_users=tuple(
            RequestedUser(
                name=item.get("name", ""),
                email=item.get("email", ""),
                phone=item.get("phone", ""),
            )
            for item in row.requested_users or []
        ),
        created_at=row.created_at,
    )


def _user_to_domain(row: models.PortalUser) -> UserRecord:
    return UserRecord(
        id=UserId(row.id),
        email=row.email,
        name=row.name,
        role=Role(row.role),
        status=UserStatus(row.status),
        agency_id=AgencyId(row.agency_id) if row.agency_id else None,
        flag_reserva=row.flag_reserva,
        flag_mural=row.flag_mural,
        flag_exchange=row.flag_exchange,
        allowed_destinations=tuple(row.allowed_destinations or ()),
    )


def _tour_to_domain(row: models.Tour) -> CatalogProduct:
    return CatalogProduct(
        id=row.id,
        destination=row.destination,
        name=row.name,
        category=row.category,
        subcategory=row.subcategory,
        operator=row.operator,
        status=row.status,
        season_label=row.season_label,
        pickup=row.pickup,
        return_time=row.return_time,
        summer=PaxPrices(
            adult=Money(row.summer_adult),
            child=Money(row.summer_child),
            infant=Money(row.summer_infant),
        ),
        winter=PaxPrices(
            adult=Money(row.winter_adult),
            child=Money(row.winter_child),
            infant=Money(row.winter_infant),
        ),
        eligible_days=tuple(row.eligible_days or ()),
        tags=tuple(row.tags or ()),
        duration=row.duration,
        extra_value=row.extra_value,
        extra_fees=row.extra_fees,
        restrictions=row.restrictions,
        optionals=row.optionals,
        variants=row.variants,
        summary=row.summary,
        observations=row.observations,
        what_to_bring=row.what_to_bring,
        media_url=row.media_url,
        updated_at=row.source_updated_at,
    )


def _tour_fields(product: CatalogProduct) -> dict:
    return {
        "destination": product.destination,
        "name": product.name,
        "category": product.category,
        "subcategory": product.subcategory,
        "operator": product.operator,
        "status": product.status,
        "season_label": product.season_label,
        "pickup": product.pickup,
        "return_time": product.return_time,
        "summer_adult": product.summer.adult.amount,
        "summer_child": product.summer.child.amount,
        "summer_infant": product.summer.infant.amount,
        "winter_adult": product.winter.adult.amount,
        "winter_child": product.winter.child.amount,
        "winter_infant": product.winter.infant.amount,
        "eligible_days": list(product.eligible_days),
        "tags": list(product.tags),
        "duration": product.duration,
        "extra_value": product.extra_value,
        "extra_fees": product.extra_fees,
        "restrictions": product.restrictions,
        "optionals": product.optionals,
        "variants": product.variants,
        "summary": product.summary,
        "observations": product.observations,
        "what_to_bring": product.what_to_bring,
        "media_url": product.media_url,
        "source_updated_at": product.updated_at,
    }


def _read_log_to_domain(row: models.NoticeReadLog) -> NoticeReadLog:
    return NoticeReadLog(
        user_id=str(row.user_id),
        notice_id=str(row.notice_id),
        confirmed_at=row.confirmed_at,
        user_name=row.user.name or row.user.email,
        agency_id=row.agency_ref or None,
        agency_name=row.agency_name or None,
    )


def _notice_to_domain(row: models.Notice) -> Notice:
    return Notice(
        id=NoticeId(row.id),
        title=row.title,
        content=row.content,
        category=row.category,
        priority=Priority(row.priority),
        published_at=row.published_at,
        summary=row.summary,
        impact=row.impact,
        destination=row.destination,
        affected_scope=row.affected_scope,
        is_pinned=row.is_pinned,
        requires_confirmation=row.requires_confirmation,
        is_active=row.is_active,
    )


class DjangoAccessStore(AccessStore):
    """Database-backed agency and user store."""

    @_storage_call
    def find_user_by_email(self, email: str) -> UserRecord | None:
        row = (
            models.PortalUser.objects.filter(email__iexact=normalize_email(email))
            .select_related("agency")
            .first()
        )
        return _user_to_domain(row) if row else None

    @_storage_call
    def find_user_by_id(self, user_id: UserId) -> UserRecord | None:
        row = models.PortalUser.objects.filter(pk=user_id.value).first()
        return _user_to_domain(row) if row else None

    @_storage_call
    def list_users(self) -> list[UserRecord]:
        return [_user_to_domain(row) for row in models.PortalUser.objects.all()]

    def _user_fields(self, user: UserRecord) -> dict:
        return {
            "email": normalize_email(user.email),
            "name": user.name,
            "role": user.role.value,
            "status": user.status.value,
            "agency_id": user.agency_id.value if user.agency_id else None,
            "flag_reserva": user.flag_reserva,
            "flag_mural": user.flag_mural,
            "flag_exchange": user.flag_exchange,
            "allowed_destinations": list(user.allowed_destinations),
        }

    @_storage_call
    def create_user(self, user: UserRecord) -> UserRecord:
        try:
            with transaction.atomic():
                row = models.PortalUser.objects.create(
                    id=user.id.value, **self._user_fields(user)
                )
        except IntegrityError as exc:
            raise DuplicateEmailError(user.email) from exc
        return _user_to_domain(row)

    @_storage_call
    def update_user(self, user: UserRecord) -> UserRecord:
        try:
            with transaction.atomic():
                models.PortalUser.objects.filter(pk=user.id.value).update(
                    **self._user_fields(user)
                )
        except IntegrityError as exc:
            raise DuplicateEmailError(user.email) from exc
        return _user_to_domain(models.PortalUser.objects.get(pk=user.id.value))

    @_storage_call
    def find_agency_by_id(self, agency_id: AgencyId) -> AgencyRecord | None:
        row = models.Agency.objects.filter(pk=agency_id.value).first()
        return _agency_to_domain(row) if row else None

    @_storage_call
    def list_agencies(self) -> list[AgencyRecord]:
        return [_agency_to_domain(row) for row in models.Agency.objects.all()]

    def _agency_fields(self, agency: AgencyRecord) -> dict:
        return {
            "name": agency.name,
            "legal_name": agency.legal_name,
            "cnpj": agency.cnpj,
            "cadastur": agency.cadastur,
            "address": agency.address,
            "responsible_name": agency.responsible_name,
            "responsible_phone": agency.responsible_phone,
            "instagram": agency.instagram,
            "bank_details": agency.bank_details,
            "commission_rate": agency.commission_rate,
            "status": agency.status.value,
            "requested_users": [
                {"name": u.name, "email": u.email, "phone": u.phone}
                for u in agency.requested_users
            ],
        }

    @_storage_call
    def create_agency(self, agency: AgencyRecord) -> AgencyRecord:
        row = models.Agency.objects.create(
            id=agency.id.value, **self._agency_fields(agency)
        )
        return _agency_to_domain(row)

    @_storage_call
    def update_agency(self, agency: AgencyRecord) -> AgencyRecord:
        models.Agency.objects.filter(pk=agency.id.value).update(
            **self._agency_fields(agency)
        )
        return _agency_to_domain(models.Agency.objects.get(pk=agency.id.value))


class DjangoCatalogStore(CatalogStore):
    """Database-backed catalog populated by the sync job."""

    @_storage_call
    def list_products(self) -> list[CatalogProduct]:
        return [_tour_to_domain(row) for row in models.Tour.objects.all()]

    @_storage_call
    def get_product(self, product_id: str) -> CatalogProduct | None:
        row = models.Tour.objects.filter(pk=product_id).first()
        return _tour_to_domain(row) if row else None

    @_storage_call
    def upsert_products(self, products: list[CatalogProduct]) -> int:
        with transaction.atomic():
            for product in products:
                models.Tour.objects.update_or_create(
                    id=product.id, defaults=_tour_fields(product)
                )
        return len(products)


class DjangoReadLogStore(ReadLogStore):
    """Read receipts backed by a table with a unique (user, notice) constraint."""

    atomic_upsert = True

    @_storage_call
    def find_log(self, user_id: str, notice_id: str) -> NoticeReadLog | None:
        row = (
            models.NoticeReadLog.objects.select_related("user")
            .filter(
                user_id=_as_uuid(user_id, "user_id"),
                notice_id=_as_uuid(notice_id, "notice_id"),
            )
            .first()
        )
        return _read_log_to_domain(row) if row else None

    @_storage_call
    def upsert_log(
        self, user_id: str, notice_id: str, confirmed_at: datetime
    ) -> NoticeReadLog:
        user_pk = _as_uuid(user_id, "user_id")
        notice_pk = _as_uuid(notice_id, "notice_id")
        # The receipt keeps the agency the user belonged to when confirming.
        agency_id, agency_name = (
            models.PortalUser.objects.filter(pk=user_pk)
            .values_list("agency_id", "agency__name")
            .first()
        ) or (None, None)
        defaults = {
            "confirmed_at": confirmed_at,
            "agency_ref": str(agency_id) if agency_id else "",
            "agency_name": agency_name or "",
        }
        try:
            with transaction.atomic():
                row, _ = models.NoticeReadLog.objects.update_or_create(
                    user_id=user_pk, notice_id=notice_pk, defaults=defaults
                )
        except IntegrityError:
            # A concurrent request inserted the pair first; refresh it instead.
            models.NoticeReadLog.objects.filter(
                user_id=user_pk, notice_id=notice_pk
            ).update(**defaults)
            row = models.NoticeReadLog.objects.get(user_id=user_pk, notice_id=notice_pk)
        return self.find_log(str(row.user_id), str(row.notice_id))

    @_storage_call
    def list_logs_by_user(self, user_id: str) -> list[NoticeReadLog]:
        rows = models.NoticeReadLog.objects.select_related("user").filter(
            user_id=_as_uuid(user_id, "user_id")
        )
        return [_read_log_to_domain(row) for row in rows]

    @_storage_call
    def list_logs_by_notice(self, notice_id: str) -> list[NoticeReadLog]:
        rows = (
            models.NoticeReadLog.objects.select_related("user")
            .filter(notice_id=_as_uuid(notice_id, "notice_id"))
            .order_by("-confirmed_at")
        )
        return [_read_log_to_domain(row) for row in rows]


class DjangoNoticeStore(NoticeStore):
    @_storage_call
    def list_active_notices(self) -> list[Notice]:
        return [
            _notice_to_domain(row)
            for row in models.Notice.objects.filter(is_active=True)
        ]

    @_storage_call
    def get_notice(self, notice_id: str) -> Notice | None:
        row = models.Notice.objects.filter(pk=_as_uuid(notice_id, "notice_id")).first()
        return _notice_to_domain(row) if row else None


class DjangoReservationStore(ReservationStore):
    @_storage_call
    def create_reservation(self, record: ReservationRecord) -> str:
        row = models.Reservation.objects.create(
            product_name=record.product_name,
            destination=record.destination,
            agent_name=record.agent_name,
            agent_email=record.agent_email,
            travel_date=record.travel_date,
            adults=record.adults,
            children=record.children,
            infants=record.infants,
            pax_names=record.pax_names,
            total_amount=record.total_amount,
            commission_amount=record.commission_amount,
            status=record.status.value,
        )
        return str(row.id)
