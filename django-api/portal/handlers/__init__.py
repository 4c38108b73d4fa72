from portal.handlers.views import (
    AgencyApproveView,
    AgencyDetailView,
    AgencyListView,
    AgencyRegistrationView,
    AgencyRejectView,
    CartQuoteView,
    CatalogSyncView,
    MeView,
    MuralView,
    NoticeConfirmView,
    NoticeReadersView,
    ReservationCreateView,
    SimulatorView,
    TariffView,
    UserAccessView,
    UserListView,
)

__all__ = [
    "AgencyApproveView",
    "AgencyDetailView",
    "AgencyListView",
    "AgencyRegistrationView",
    "AgencyRejectView",
    "CartQuoteView",
    "CatalogSyncView",
    "MeView",
    "MuralView",
    "NoticeConfirmView",
    "NoticeReadersView",
    "ReservationCreateView",
    "SimulatorView",
    "TariffView",
    "UserAccessView",
    "UserListView",
]
