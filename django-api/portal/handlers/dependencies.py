"""Service construction for handlers.

Stores are thin and stateless, so services are built per request.
"""

from django.conf import settings

from portal.services import (
    AgencyService,
    CapabilityService,
    CatalogSyncService,
    NoticeService,
    PricingService,
    ReservationService,
    UserAdminService,
)
from portal.services.catalog_sync import JsonFileCatalogSource
from portal.stores.django_store import (
    DjangoAccessStore,
    DjangoCatalogStore,
    DjangoNoticeStore,
    DjangoReadLogStore,
    DjangoReservationStore,
)
from portal.stores.record_store import JsonFileReadLogStore


def capability_service() -> CapabilityService:
    return CapabilityService(DjangoAccessStore())


def pricing_service() -> PricingService:
    return PricingService(DjangoCatalogStore(), DjangoAccessStore())


def notice_service() -> NoticeService:
    if settings.PORTAL_READ_LOG_PATH:
        read_logs = JsonFileReadLogStore(settings.PORTAL_READ_LOG_PATH, DjangoAccessStore())
    else:
        read_logs = DjangoReadLogStore()
    return NoticeService(read_logs, DjangoNoticeStore())


def reservation_service() -> ReservationService:
    return ReservationService(DjangoCatalogStore(), DjangoReservationStore())


def agency_service() -> AgencyService:
    return AgencyService(DjangoAccessStore())


def user_admin_service() -> UserAdminService:
    return UserAdminService(DjangoAccessStore())


def catalog_sync_service(path: str | None = None) -> CatalogSyncService:
    source = JsonFileCatalogSource(path or settings.PORTAL_CATALOG_EXPORT_PATH)
    return CatalogSyncService(source, DjangoCatalogStore())
