from django.urls import path

from portal.handlers import (
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

urlpatterns = [
    path("me", MeView.as_view(), name="me"),
    path("tariff", TariffView.as_view(), name="tariff"),
    path("cart/quote", CartQuoteView.as_view(), name="cart-quote"),
    path("reservations", ReservationCreateView.as_view(), name="reservation-create"),
    path("mural", MuralView.as_view(), name="mural"),
    path(
        "mural/<str:notice_id>/confirm",
        NoticeConfirmView.as_view(),
        name="notice-confirm",
    ),
    path(
        "mural/<str:notice_id>/readers",
        NoticeReadersView.as_view(),
        name="notice-readers",
    ),
    path(
        "agencies/register",
        AgencyRegistrationView.as_view(),
        name="agency-register",
    ),
    path("admin/agencies", AgencyListView.as_view(), name="agency-list"),
    path(
        "admin/agencies/<str:agency_id>",
        AgencyDetailView.as_view(),
        name="agency-detail",
    ),
    path(
        "admin/agencies/<str:agency_id>/approve",
        AgencyApproveView.as_view(),
        name="agency-approve",
    ),
    path(
        "admin/agencies/<str:agency_id>/reject",
        AgencyRejectView.as_view(),
        name="agency-reject",
    ),
    path("admin/users", UserListView.as_view(), name="user-list"),
    path("admin/users/<str:user_id>", UserAccessView.as_view(), name="user-access"),
    path(
        "admin/simulator/<str:agency_id>",
        SimulatorView.as_view(),
        name="simulator",
    ),
    path("admin/catalog/sync", CatalogSyncView.as_view(), name="catalog-sync"),
]
