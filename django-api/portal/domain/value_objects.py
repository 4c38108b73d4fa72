"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Self
from uuid import UUID

CENTS = Decimal("0.01")


def round_currency(value: Decimal) -> Decimal:
    """Round half-up to cents."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def to_decimal(value: object) -> Decimal:
    """Coerce a stored or submitted numeric value into a Decimal."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"Not a number: {value!r}") from exc


class Role(Enum):
    """Role assigned to a portal user."""

    ADMIN = "ADMIN"
    INTERNAL_SELLER = "INTERNAL_SELLER"
    PARTNER_AGENCY = "PARTNER_AGENCY"


class UserStatus(Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class AgencyStatus(Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ReservationStatus(Enum):
    PRE_RESERVATION = "PRE_RESERVATION"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class Season(Enum):
    """Tariff season a price column belongs to."""

    SUMMER = "SUMMER"
    WINTER = "WINTER"


class Priority(Enum):
    """Mural notice priority, ordered by ``rank``."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def rank(self) -> int:
        return {"CRITICAL": 4, "HIGH": 3, "MEDIUM": 2, "LOW": 1}[self.value]


@dataclass(frozen=True)
class EntityId:
    """Unique identifier for a persisted record."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


class UserId(EntityId):
    pass


class AgencyId(EntityId):
    pass


class NoticeId(EntityId):
    pass


@dataclass(frozen=True)
class Money:
    """Price representation with validation."""

    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    @classmethod
    def zero(cls) -> Self:
        return cls(amount=Decimal("0"))

    def __str__(self) -> str:
        return f"{self.amount:.2f}"


@dataclass(frozen=True)
class CommissionRate:
    """Fraction of the sale price kept by the partner agency, in [0, 1]."""

    value: Decimal

    def __post_init__(self) -> None:
        if not Decimal("0") <= self.value <= Decimal("1"):
            raise ValueError("Commission rate must be between 0 and 1")

    @classmethod
    def parse(cls, value: object) -> Self:
        return cls(value=to_decimal(value))


@dataclass(frozen=True)
class PaxCount:
    """Non-negative passenger count."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError("Pax count must be an integer")
        if self.value < 0:
            raise ValueError("Pax count cannot be negative")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def normalize_destination(destination: str) -> str:
    return destination.strip().lower()
