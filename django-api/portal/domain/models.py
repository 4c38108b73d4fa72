"""Domain models representing persisted state and derived views.

These are pure domain objects with no API input rules.
Django ORM models are in portal/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from portal.domain.value_objects import (
    AgencyId,
    AgencyStatus,
    Money,
    NoticeId,
    PaxCount,
    Priority,
    ReservationStatus,
    Role,
    Season,
    UserId,
    UserStatus,
)


@dataclass(frozen=True)
class RequestedUser:
    """A user account asked for at agency registration time."""

    name: str
    email: str
    phone: str = ""


@dataclass(frozen=True)
class AgencyRecord:
    """Domain representation of a partner Agency."""

    id: AgencyId
    name: str
    legal_name: str
    cnpj: str
    commission_rate: Decimal
    status: AgencyStatus
    cadastur: str = ""
    address: str = ""
    responsible_name: str = ""
    responsible_phone: str = ""
    instagram: str = ""
    bank_details: str = ""
    requested_users: tuple[RequestedUser, ...] = ()
    created_at: datetime | None = None


@dataclass(frozen=True)
class UserRecord:
    """Domain representation of a portal User."""

    id: UserId
    email: str
    name: str
    role: Role
    status: UserStatus
    agency_id: AgencyId | None = None
    flag_reserva: bool = False
    flag_mural: bool = False
    flag_exchange: bool = False
    allowed_destinations: tuple[str, ...] = ()


@dataclass(frozen=True)
class UserCapabilities:
    """Effective permissions of an authenticated, active user."""

    id: UserId
    email: str
    name: str
    commission_rate: Decimal
    can_reserve: bool
    can_access_mural: bool
    can_access_exchange: bool
    is_internal: bool
    is_admin: bool
    agency_id: AgencyId | None = None
    agency_name: str | None = None
    allowed_destinations: tuple[str, ...] = ()


@dataclass(frozen=True)
class PaxPrices:
    """Base sale prices per pax category for one season."""

    adult: Money
    child: Money
    infant: Money


@dataclass(frozen=True)
class CatalogProduct:
    """Tour snapshot as written by the catalog sync."""

    id: str
    destination: str
    name: str
    category: str
    summer: PaxPrices
    winter: PaxPrices
    subcategory: str = ""
    operator: str = ""
    status: str = ""
    season_label: str = ""
    pickup: str = ""
    return_time: str = ""
    eligible_days: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    duration: str = ""
    extra_value: str = ""
    extra_fees: str = ""
    restrictions: str = ""
    optionals: str = ""
    variants: str = ""
    summary: str = ""
    observations: str = ""
    what_to_bring: str = ""
    media_url: str = ""
    updated_at: str = ""


@dataclass(frozen=True)
class ProjectedPrices:
    """Sale and net prices per pax category for one season."""

    sale_adult: Decimal
    net_adult: Decimal
    sale_child: Decimal
    net_child: Decimal
    sale_infant: Decimal
    net_infant: Decimal


@dataclass(frozen=True)
class AgencyProduct:
    """Catalog product priced for a specific caller's commission rate."""

    product: CatalogProduct
    summer: ProjectedPrices
    winter: ProjectedPrices

    @property
    def id(self) -> str:
        return self.product.id

    @property
    def destination(self) -> str:
        return self.product.destination

    @property
    def name(self) -> str:
        return self.product.name

    def prices_for(self, season: Season) -> ProjectedPrices:
        return self.summer if season is Season.SUMMER else self.winter


@dataclass(frozen=True)
class CartLineItem:
    """A product selection with season-resolved sale prices."""

    product_id: str
    product_name: str
    sale_adult: Decimal
    sale_child: Decimal
    sale_infant: Decimal
    adults: PaxCount = field(default_factory=lambda: PaxCount(0))
    children: PaxCount = field(default_factory=lambda: PaxCount(0))
    infants: PaxCount = field(default_factory=lambda: PaxCount(0))
    destination: str = ""

    @property
    def subtotal(self) -> Decimal:
        return (
            self.adults.value * self.sale_adult
            + self.children.value * self.sale_child
            + self.infants.value * self.sale_infant
        )


@dataclass(frozen=True)
class CartTotals:
    total: Decimal
    commission: Decimal
    net: Decimal


@dataclass(frozen=True)
class NoticeReadLog:
    """Read receipt for one (user, notice) pair."""

    user_id: str
    notice_id: str
    confirmed_at: datetime
    user_name: str = ""
    agency_id: str | None = None
    agency_name: str | None = None


@dataclass(frozen=True)
class Reader:
    user_name: str
    confirmed_at: datetime
    agency_name: str


@dataclass(frozen=True)
class Notice:
    """Mural bulletin entry."""

    id: NoticeId
    title: str
    content: str
    category: str
    priority: Priority
    published_at: datetime
    summary: str = ""
    impact: str = ""
    destination: str = ""
    affected_scope: str = ""
    is_pinned: bool = False
    requires_confirmation: bool = False
    is_active: bool = True


@dataclass(frozen=True)
class ReservationRecord:
    """Reservation request ready to be persisted."""

    product_name: str
    destination: str
    agent_name: str
    agent_email: str
    travel_date: date
    adults: int
    children: int
    infants: int
    pax_names: str
    total_amount: Decimal
    commission_amount: Decimal
    status: ReservationStatus = ReservationStatus.PRE_RESERVATION
