"""Agency onboarding and user access administration."""

import logging
import uuid
from dataclasses import dataclass, replace
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import validate_email

from portal.domain import (
    AgencyId,
    AgencyRecord,
    AgencyStatus,
    CommissionRate,
    RequestedUser,
    Role,
    UserId,
    UserRecord,
    UserStatus,
)
from portal.domain.errors import (
    AgencyNotFoundError,
    InvalidTransitionError,
    UserNotFoundError,
    ValidationFailedError,
)
from portal.domain.value_objects import normalize_email
from portal.stores.interfaces import AccessStore

logger = logging.getLogger(__name__)


def _valid_email(email: str, field: str = "email") -> str:
    normalized = normalize_email(email or "")
    try:
        validate_email(normalized)
    except ValidationError as exc:
        raise ValidationFailedError("Invalid email address", field=field) from exc
    return normalized


def _rate(value: object) -> Decimal:
    try:
        return CommissionRate.parse(value).value
    except ValueError as exc:
        raise ValidationFailedError(
            "Commission rate must be between 0 and 1", field="commission_rate"
        ) from exc


def _agency_id(value: str) -> AgencyId:
    try:
        return AgencyId.from_string(value)
    except ValueError as exc:
        raise ValidationFailedError("Invalid agency id", field="agency_id") from exc


@dataclass(frozen=True)
class AgencyRegistration:
    name: str
    legal_name: str
    cnpj: str
    cadastur: str = ""
    address: str = ""
    responsible_name: str = ""
    responsible_phone: str = ""
    instagram: str = ""
    bank_details: str = ""
    requested_users: tuple[RequestedUser, ...] = ()


@dataclass(frozen=True)
class AccessUpdate:
    """Admin edit of a user. Fields left as None are unchanged."""

    name: str | None = None
    role: Role | None = None
    status: UserStatus | None = None
    agency_id: str | None = None
    flag_reserva: bool | None = None
    flag_mural: bool | None = None
    flag_exchange: bool | None = None
    allowed_destinations: tuple[str, ...] | None = None


class AgencyService:
    """Agency lifecycle: PENDING -> APPROVED | REJECTED."""

    def __init__(self, store: AccessStore) -> None:
        self._store = store

    def _get(self, agency_id: str) -> AgencyRecord:
        agency = self._store.find_agency_by_id(_agency_id(agency_id))
        if agency is None:
            raise AgencyNotFoundError(agency_id)
        return agency

    def list_agencies(self) -> list[AgencyRecord]:
        return self._store.list_agencies()

    def register(self, data: AgencyRegistration) -> AgencyRecord:
        for field in ("name", "legal_name", "cnpj"):
            if not getattr(data, field).strip():
                raise ValidationFailedError(f"Missing {field}", field=field)
        requested = tuple(
            RequestedUser(
                name=u.name.strip(),
                email=_valid_email(u.email, "requested_users"),
                phone=u.phone.strip(),
            )
            for u in data.requested_users
        )
        agency = AgencyRecord(
            id=AgencyId(uuid.uuid4()),
            name=data.name.strip(),
            legal_name=data.legal_name.strip(),
            cnpj=data.cnpj.strip(),
            commission_rate=Decimal("0"),
            status=AgencyStatus.PENDING,
            cadastur=data.cadastur.strip(),
            address=data.address.strip(),
            responsible_name=data.responsible_name.strip(),
            responsible_phone=data.responsible_phone.strip(),
            instagram=data.instagram.strip(),
            bank_details=data.bank_details.strip(),
            requested_users=requested,
        )
        created = self._store.create_agency(agency)
        logger.info("Agency registered", extra={"agency_id": str(created.id)})
        return created

    def approve(
        self, agency_id: str, commission_rate: object
    ) -> tuple[AgencyRecord, list[UserRecord]]:
        """Approve a pending agency and provision its requested users.

        Requested users whose email already exists are skipped. The requested
        list is cleared so it is consumed only once.
        """
        rate = _rate(commission_rate)
        agency = self._get(agency_id)
        if agency.status is not AgencyStatus.PENDING:
            raise InvalidTransitionError(agency.status.value, AgencyStatus.APPROVED.value)

        provisioned = []
        seen = set()
        for requested in agency.requested_users:
            email = normalize_email(requested.email)
            if email in seen or self._store.find_user_by_email(email) is not None:
                continue
            seen.add(email)
            provisioned.append(
                self._store.create_user(
                    UserRecord(
                        id=UserId(uuid.uuid4()),
                        email=email,
                        name=requested.name,
                        role=Role.PARTNER_AGENCY,
                        status=UserStatus.ACTIVE,
                        agency_id=agency.id,
                        flag_mural=True,
                    )
                )
            )

        approved = self._store.update_agency(
            replace(
                agency,
                status=AgencyStatus.APPROVED,
                commission_rate=rate,
                requested_users=(),
            )
        )
        logger.info(
            "Agency approved",
            extra={"agency_id": agency_id, "provisioned": len(provisioned)},
        )
        return approved, provisioned

    def reject(self, agency_id: str) -> AgencyRecord:
        agency = self._get(agency_id)
        if agency.status is not AgencyStatus.PENDING:
            raise InvalidTransitionError(agency.status.value, AgencyStatus.REJECTED.value)
        logger.info("Agency rejected", extra={"agency_id": agency_id})
        return self._store.update_agency(replace(agency, status=AgencyStatus.REJECTED))

    def update_commission(self, agency_id: str, commission_rate: object) -> AgencyRecord:
        rate = _rate(commission_rate)
        agency = self._get(agency_id)
        return self._store.update_agency(replace(agency, commission_rate=rate))


class UserAdminService:
    """Manual user provisioning and access flag edits."""

    def __init__(self, store: AccessStore) -> None:
        self._store = store

    def list_users(self) -> list[UserRecord]:
        return self._store.list_users()

    def _agency_ref(self, agency_id: str | None) -> AgencyId | None:
        if not agency_id:
            return None
        parsed = _agency_id(agency_id)
        if self._store.find_agency_by_id(parsed) is None:
            raise AgencyNotFoundError(agency_id)
        return parsed

    def create_user(
        self,
        email: str,
        name: str = "",
        role: Role = Role.PARTNER_AGENCY,
        agency_id: str | None = None,
        flag_reserva: bool = False,
        flag_mural: bool = False,
        flag_exchange: bool = False,
        allowed_destinations: tuple[str, ...] = (),
    ) -> UserRecord:
        """Raises DuplicateEmailError when the email is already taken."""
        user = UserRecord(
            id=UserId(uuid.uuid4()),
            email=_valid_email(email),
            name=name.strip(),
            role=role,
            status=UserStatus.ACTIVE,
            agency_id=self._agency_ref(agency_id),
            flag_reserva=flag_reserva,
            flag_mural=flag_mural,
            flag_exchange=flag_exchange,
            allowed_destinations=tuple(d.strip() for d in allowed_destinations if d.strip()),
        )
        created = self._store.create_user(user)
        logger.info("User created", extra={"user_id": str(created.id)})
        return created

    def update_access(self, user_id: str, update: AccessUpdate) -> UserRecord:
        try:
            parsed = UserId.from_string(user_id)
        except ValueError as exc:
            raise ValidationFailedError("Invalid user id", field="user_id") from exc
        user = self._store.find_user_by_id(parsed)
        if user is None:
            raise UserNotFoundError(user_id)

        changes = {
            field: value
            for field, value in (
                ("name", update.name),
                ("role", update.role),
                ("status", update.status),
                ("flag_reserva", update.flag_reserva),
                ("flag_mural", update.flag_mural),
                ("flag_exchange", update.flag_exchange),
            )
            if value is not None
        }
        if update.allowed_destinations is not None:
            changes["allowed_destinations"] = tuple(
                d.strip() for d in update.allowed_destinations if d.strip()
            )
        if update.agency_id is not None:
            changes["agency_id"] = self._agency_ref(update.agency_id)

        updated = self._store.update_user(replace(user, **changes))
        logger.info(
            "User access updated",
            extra={"user_id": user_id, "fields": sorted(changes)},
        )
        return updated
