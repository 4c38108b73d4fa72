from portal.services.agencies import AgencyService, UserAdminService
from portal.services.capabilities import CapabilityService
from portal.services.catalog_sync import CatalogSyncService
from portal.services.notices import NoticeService
from portal.services.pricing import PricingService
from portal.services.reservations import ReservationService

__all__ = [
    "AgencyService",
    "CapabilityService",
    "CatalogSyncService",
    "NoticeService",
    "PricingService",
    "ReservationService",
    "UserAdminService",
]
