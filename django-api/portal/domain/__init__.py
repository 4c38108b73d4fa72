from portal.domain.models import (
    AgencyProduct,
    AgencyRecord,
    CartLineItem,
    CartTotals,
    CatalogProduct,
    Notice,
    NoticeReadLog,
    PaxPrices,
    ProjectedPrices,
    Reader,
    RequestedUser,
    ReservationRecord,
    UserCapabilities,
    UserRecord,
)
from portal.domain.value_objects import (
    AgencyId,
    AgencyStatus,
    CommissionRate,
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

__all__ = [
    "AgencyProduct",
    "AgencyRecord",
    "CartLineItem",
    "CartTotals",
    "CatalogProduct",
    "Notice",
    "NoticeReadLog",
    "PaxPrices",
    "ProjectedPrices",
    "Reader",
    "RequestedUser",
    "ReservationRecord",
    "UserCapabilities",
    "UserRecord",
    "AgencyId",
    "NoticeId",
    "UserId",
    "AgencyStatus",
    "ReservationStatus",
    "Role",
    "Season",
    "Priority",
    "UserStatus",
    "Money",
    "CommissionRate",
    "PaxCount",
]
