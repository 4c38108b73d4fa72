from portal.stores.interfaces import (
    AccessStore,
    CatalogStore,
    NoticeStore,
    ReadLogStore,
    ReservationStore,
)

__all__ = [
    "AccessStore",
    "CatalogStore",
    "NoticeStore",
    "ReadLogStore",
    "ReservationStore",
]
