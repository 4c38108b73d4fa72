"""Integration tests for the portal HTTP API.

Run with: pytest tests/test_api.py -v
"""

import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from django.core.management import CommandError, call_command
from rest_framework.test import APIClient

from fakes import InMemoryNoticeStore, InMemoryReadLogStore, build_notice
from portal import models
from portal.handlers import dependencies
from portal.services.notices import NoticeService


def as_user(client: APIClient, email: str) -> APIClient:
    client.credentials(HTTP_X_AUTHENTICATED_EMAIL=email)
    return client


@pytest.fixture
def agency(db):
    return models.Agency.objects.create(
        name="Sol Viagens",
        legal_name="Sol Viagens Ltda",
        cnpj="12.345.678/0001-90",
        commission_rate=Decimal("0.15"),
        status=models.Agency.Status.APPROVED,
    )


@pytest.fixture
def agent(agency):
    return models.PortalUser.objects.create(
        email="agent@sol.com",
        name="Ana",
        agency=agency,
        flag_reserva=True,
        flag_mural=True,
    )


@pytest.fixture
def admin(db):
    return models.PortalUser.objects.create(
        email="admin@portal.com", name="Admin", role=models.PortalUser.Role.ADMIN
    )


@pytest.fixture
def seller(db):
    return models.PortalUser.objects.create(
        email="seller@portal.com",
        name="Seller",
        role=models.PortalUser.Role.INTERNAL_SELLER,
    )


@pytest.fixture
def tour(db):
    return models.Tour.objects.create(
        id="recTOUR0000000001",
        destination="Atacama",
        name="Valle de la Luna",
        summer_adult=Decimal("1000.00"),
        summer_child=Decimal("500.00"),
        winter_adult=Decimal("800.00"),
    )


@pytest.fixture
def notice(db):
    return models.Notice.objects.create(
        title="Route closed",
        priority=models.Notice.Priority.HIGH,
        published_at=datetime(2026, 1, 10, tzinfo=timezone.utc),
        requires_confirmation=True,
    )


@pytest.mark.django_db
class TestMe:
    """Tests for GET /api/me"""

    def test_missing_identity_header(self, api_client):
        """Given no verified email, returns 401."""
        response = api_client.get("/api/me")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHENTICATED"

    def test_unknown_email(self, api_client):
        """Given an email not on the user list, returns 403."""
        response = as_user(api_client, "ghost@nowhere.com").get("/api/me")

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    def test_inactive_user(self, api_client, agent):
        """Given an inactive user, returns 403."""
        agent.status = models.PortalUser.Status.INACTIVE
        agent.save()

        assert as_user(api_client, "agent@sol.com").get("/api/me").status_code == 403

    def test_resolves_capabilities_case_insensitively(self, api_client, agent):
        """Given a differently-cased email, returns the stored user's capabilities."""
        response = as_user(api_client, "AGENT@Sol.com").get("/api/me")

        assert response.status_code == 200
        body = response.json()
        assert body["email"] == "agent@sol.com"
        assert body["commission_rate"] == "0.1500"
        assert body["agency_name"] == "Sol Viagens"
        assert body["can_reserve"] is True
        assert body["can_access_exchange"] is False
        assert body["is_internal"] is False


@pytest.mark.django_db
class TestTariff:
    """Tests for GET /api/tariff"""

    def test_partner_sees_net_prices(self, api_client, agent, tour):
        """Given a partner with a 15% commission, returns net prices."""
        response = as_user(api_client, agent.email).get("/api/tariff")

        assert response.status_code == 200
        body = response.json()
        summer = body["products"][0]["summer"]
        assert summer["sale_adult"] == "1000.00"
        assert summer["net_adult"] == "850.00"
        assert summer["net_child"] == "425.00"
        assert body["agency"]["commission_rate"] == "0.1500"

    def test_internal_seller_sees_sale_prices_only(self, api_client, seller, tour):
        """Given an internal seller, net columns are omitted."""
        response = as_user(api_client, seller.email).get("/api/tariff")

        summer = response.json()["products"][0]["summer"]
        assert summer["sale_adult"] == "1000.00"
        assert "net_adult" not in summer
        assert response.json()["agency"]["is_internal"] is True

    def test_allowed_destinations_filter_catalog(self, api_client, agent, tour):
        """Given an allow-list without the tour destination, returns no products."""
        agent.allowed_destinations = ["Bariloche"]
        agent.save()

        response = as_user(api_client, agent.email).get("/api/tariff")

        assert response.json()["products"] == []


@pytest.mark.django_db
class TestCartQuote:
    """Tests for POST /api/cart/quote"""

    def test_quote_totals(self, api_client, agent, tour):
        """Given a cart, returns server-computed totals."""
        response = as_user(api_client, agent.email).post(
            "/api/cart/quote",
            {"items": [{"product_id": tour.id, "season": "SUMMER", "adults": 2, "children": 1}]},
            format="json",
        )

        assert response.status_code == 200
        assert response.json()["totals"] == {
            "total": "2500.00",
            "commission": "375.00",
            "net": "2125.00",
        }
        assert response.json()["lines"][0]["subtotal"] == "2500.00"

    def test_empty_cart(self, api_client, agent):
        """Given no items, returns zero totals."""
        response = as_user(api_client, agent.email).post(
            "/api/cart/quote", {"items": []}, format="json"
        )

        assert response.json()["totals"] == {
            "total": "0.00",
            "commission": "0.00",
            "net": "0.00",
        }

    def test_unknown_product(self, api_client, agent):
        """Given a product outside the tariff, returns 404."""
        response = as_user(api_client, agent.email).post(
            "/api/cart/quote",
            {"items": [{"product_id": "recMISSING", "season": "SUMMER", "adults": 1}]},
            format="json",
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PRODUCT_NOT_FOUND"

    def test_negative_pax(self, api_client, agent, tour):
        """Given a negative pax count, returns 400."""
        response = as_user(api_client, agent.email).post(
            "/api/cart/quote",
            {"items": [{"product_id": tour.id, "season": "SUMMER", "adults": -1}]},
            format="json",
        )

        assert response.status_code == 400
        assert response.json()["error"]["field"] == "items"

    def test_internal_caller_gets_no_commission_breakdown(self, api_client, seller, tour):
        """Given an internal seller, commission and net are withheld."""
        response = as_user(api_client, seller.email).post(
            "/api/cart/quote",
            {"items": [{"product_id": tour.id, "season": "WINTER", "adults": 1}]},
            format="json",
        )

        totals = response.json()["totals"]
        assert totals["total"] == "800.00"
        assert totals["commission"] is None
        assert totals["net"] is None


@pytest.mark.django_db
class TestReservations:
    """Tests for POST /api/reservations"""

    def payload(self, tour, **overrides):
        data = {
            "product_id": tour.id,
            "season": "SUMMER",
            "travel_date": "2026-12-20",
            "adults": 1,
            "pax_names": "Ana Souza",
        }
        data.update(overrides)
        return data

    def test_creates_pre_reservation(self, api_client, agent, tour):
        """Given a valid request, stores a pre-reservation with server totals."""
        response = as_user(api_client, agent.email).post(
            "/api/reservations",
            self.payload(tour, agent_email="spoof@else.com", total_amount="1.00"),
            format="json",
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "PRE_RESERVATION"
        assert body["total_amount"] == "1000.00"
        assert body["commission_amount"] == "150.00"

        row = models.Reservation.objects.get(pk=body["id"])
        assert row.agent_email == "agent@sol.com"
        assert row.agent_name == "Ana"
        assert row.total_amount == Decimal("1000.00")

    def test_requires_reserve_capability(self, api_client, agent, tour):
        """Given a user without the reservation flag, returns 403."""
        agent.flag_reserva = False
        agent.save()

        response = as_user(api_client, agent.email).post(
            "/api/reservations", self.payload(tour), format="json"
        )

        assert response.status_code == 403
        assert not models.Reservation.objects.exists()

    def test_zero_pax(self, api_client, agent, tour):
        """Given no passengers, returns 400."""
        response = as_user(api_client, agent.email).post(
            "/api/reservations", self.payload(tour, adults=0), format="json"
        )
        assert response.status_code == 400

    def test_invalid_travel_date(self, api_client, agent, tour):
        """Given a malformed date, returns 400 naming the field."""
        response = as_user(api_client, agent.email).post(
            "/api/reservations", self.payload(tour, travel_date="20/12/2026"), format="json"
        )

        assert response.status_code == 400
        assert response.json()["error"]["field"] == "travel_date"


@pytest.mark.django_db
class TestMural:
    """Tests for /api/mural endpoints"""

    def test_requires_mural_capability(self, api_client, agent):
        """Given a user without the mural flag, returns 403."""
        agent.flag_mural = False
        agent.save()

        assert as_user(api_client, agent.email).get("/api/mural").status_code == 403

    def test_lists_notices_and_read_ids(self, api_client, agent, notice):
        """Given a confirmed notice, its id is reported as read."""
        client = as_user(api_client, agent.email)
        before = client.get("/api/mural").json()
        client.post(f"/api/mural/{notice.id}/confirm")
        after = client.get("/api/mural").json()

        assert [item["title"] for item in before["items"]] == ["Route closed"]
        assert before["read_notice_ids"] == []
        assert after["read_notice_ids"] == [str(notice.id)]
        assert after["error"] is None

    def test_confirm_is_idempotent(self, api_client, agent, notice):
        """Given repeated confirmations, keeps a single receipt."""
        client = as_user(api_client, agent.email)

        first = client.post(f"/api/mural/{notice.id}/confirm")
        second = client.post(f"/api/mural/{notice.id}/confirm")

        assert first.status_code == 200
        assert second.status_code == 200
        assert models.NoticeReadLog.objects.filter(notice=notice).count() == 1

    def test_confirm_writes_to_read_log_file_when_configured(
        self, api_client, agent, notice, settings, tmp_path
    ):
        """Given PORTAL_READ_LOG_PATH, receipts go to the record file."""
        settings.PORTAL_READ_LOG_PATH = str(tmp_path / "read_logs.json")
        client = as_user(api_client, agent.email)

        client.post(f"/api/mural/{notice.id}/confirm")
        client.post(f"/api/mural/{notice.id}/confirm")
        mural = client.get("/api/mural").json()

        stored = json.loads((tmp_path / "read_logs.json").read_text(encoding="utf-8"))
        assert len(stored["records"]) == 1
        assert stored["records"][0]["fields"]["Agência"] == [str(agent.agency_id)]
        assert models.NoticeReadLog.objects.count() == 0
        assert mural["read_notice_ids"] == [str(notice.id)]

    def test_confirm_unknown_notice(self, api_client, agent):
        """Given a notice id that does not exist, returns 404."""
        response = as_user(api_client, agent.email).post(
            "/api/mural/00000000-0000-0000-0000-000000000000/confirm"
        )
        assert response.status_code == 404

    def test_confirm_malformed_notice_id(self, api_client, agent):
        """Given a malformed notice id, returns 400."""
        response = as_user(api_client, agent.email).post("/api/mural/abc/confirm")
        assert response.status_code == 400

    def test_mural_storage_failure_degrades(self, api_client, agent, monkeypatch):
        """Given notice storage is down, returns an empty mural with a message."""
        notices = InMemoryNoticeStore([build_notice()])
        notices.failing = True
        monkeypatch.setattr(
            dependencies,
            "notice_service",
            lambda: NoticeService(InMemoryReadLogStore(), notices),
        )

        response = as_user(api_client, agent.email).get("/api/mural")

        assert response.status_code == 200
        assert response.json() == {
            "items": [],
            "read_notice_ids": [],
            "error": "The mural is temporarily unavailable.",
        }

    def test_confirm_storage_failure(self, api_client, agent, monkeypatch):
        """Given read-log storage is down, returns 503."""
        fake_notice = build_notice()
        read_logs = InMemoryReadLogStore()
        read_logs.failing = True
        monkeypatch.setattr(
            dependencies,
            "notice_service",
            lambda: NoticeService(read_logs, InMemoryNoticeStore([fake_notice])),
        )

        response = as_user(api_client, agent.email).post(
            f"/api/mural/{fake_notice.id}/confirm"
        )

        assert response.status_code == 503
        assert response.json()["error"]["message"] == "Acknowledgment storage unavailable"

    def test_readers_scoped_to_own_agency(self, api_client, agent, admin, notice):
        """Given readers from two agencies, partners only see their own."""
        other = models.Agency.objects.create(
            name="Mar Turismo", legal_name="Mar", cnpj="2", status="APPROVED"
        )
        models.PortalUser.objects.create(
            email="bruno@mar.com", name="Bruno", agency=other, flag_mural=True
        )
        as_user(APIClient(), "agent@sol.com").post(f"/api/mural/{notice.id}/confirm")
        as_user(APIClient(), "bruno@mar.com").post(f"/api/mural/{notice.id}/confirm")

        partner_view = as_user(APIClient(), "agent@sol.com").get(
            f"/api/mural/{notice.id}/readers"
        )
        admin_view = as_user(APIClient(), admin.email).get(f"/api/mural/{notice.id}/readers")

        assert [r["user_name"] for r in partner_view.json()["readers"]] == ["Ana"]
        assert partner_view.json()["readers"][0]["agency_name"] == "Sol Viagens"
        assert sorted(r["user_name"] for r in admin_view.json()["readers"]) == ["Ana", "Bruno"]

    def test_readers_for_user_without_agency(self, api_client, seller, agent, notice):
        """Given a non-admin caller with no agency, returns an empty list."""
        as_user(APIClient(), agent.email).post(f"/api/mural/{notice.id}/confirm")

        response = as_user(api_client, seller.email).get(f"/api/mural/{notice.id}/readers")

        assert response.status_code == 200
        assert response.json() == {"readers": []}


@pytest.mark.django_db
class TestAgencyOnboarding:
    """Tests for agency registration and admin approval"""

    def register(self, client, **overrides):
        data = {
            "name": "Lua Viagens",
            "legal_name": "Lua Viagens Ltda",
            "cnpj": "98.765.432/0001-10",
            "requested_users": [
                {"name": "Bia", "email": "Bia@Lua.com"},
                {"name": "Caio", "email": "caio@lua.com", "phone": "+55 21 8888"},
            ],
        }
        data.update(overrides)
        return client.post("/api/agencies/register", data, format="json")

    def test_registration_is_public(self, api_client):
        """Given no identity, registration still succeeds as PENDING."""
        response = self.register(api_client)

        assert response.status_code == 201
        assert response.json()["status"] == "PENDING"
        assert response.json()["commission_rate"] == "0.0000"

    def test_registration_requires_cnpj(self, api_client):
        """Given a blank CNPJ, returns 400 naming the field."""
        response = self.register(api_client, cnpj="")

        assert response.status_code == 400
        assert response.json()["error"]["field"] == "cnpj"

    def test_admin_approval_provisions_users(self, api_client, admin):
        """Given a pending agency, approval creates its requested users."""
        agency_id = self.register(APIClient()).json()["id"]

        response = as_user(api_client, admin.email).post(
            f"/api/admin/agencies/{agency_id}/approve",
            {"commission_rate": "0.12"},
            format="json",
        )

        assert response.status_code == 200
        body = response.json()
        assert body["agency"]["status"] == "APPROVED"
        assert body["agency"]["commission_rate"] == "0.1200"
        assert body["agency"]["requested_users"] == []
        assert sorted(u["email"] for u in body["provisioned_users"]) == [
            "bia@lua.com",
            "caio@lua.com",
        ]
        bia = models.PortalUser.objects.get(email="bia@lua.com")
        assert bia.flag_mural
        assert str(bia.agency_id) == agency_id

        me = as_user(APIClient(), "bia@lua.com").get("/api/me").json()
        assert me["commission_rate"] == "0.1200"
        assert me["can_access_mural"] is True

    def test_second_approval_conflicts(self, api_client, admin):
        """Given an already approved agency, returns 409."""
        agency_id = self.register(APIClient()).json()["id"]
        client = as_user(api_client, admin.email)
        url = f"/api/admin/agencies/{agency_id}/approve"

        client.post(url, {"commission_rate": "0.1"}, format="json")
        response = client.post(url, {"commission_rate": "0.1"}, format="json")

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "INVALID_TRANSITION"

    def test_partner_cannot_approve(self, api_client, agent):
        """Given a non-admin caller, returns 403."""
        agency_id = self.register(APIClient()).json()["id"]

        response = as_user(api_client, agent.email).post(
            f"/api/admin/agencies/{agency_id}/approve",
            {"commission_rate": "0.1"},
            format="json",
        )

        assert response.status_code == 403

    def test_reject(self, api_client, admin):
        """Given a pending agency, rejection marks it REJECTED."""
        agency_id = self.register(APIClient()).json()["id"]

        response = as_user(api_client, admin.email).post(
            f"/api/admin/agencies/{agency_id}/reject"
        )

        assert response.json()["status"] == "REJECTED"

    def test_update_commission_reprices_tariff(self, api_client, admin, agent, agency, tour):
        """Given a new commission rate, the next tariff uses it."""
        response = as_user(api_client, admin.email).patch(
            f"/api/admin/agencies/{agency.id}",
            {"commission_rate": "0.2"},
            format="json",
        )
        tariff = as_user(APIClient(), agent.email).get("/api/tariff").json()

        assert response.json()["commission_rate"] == "0.2000"
        assert tariff["products"][0]["summer"]["net_adult"] == "800.00"

    def test_list_agencies(self, api_client, admin, agency):
        """Returns every agency for admins."""
        response = as_user(api_client, admin.email).get("/api/admin/agencies")
        assert [a["name"] for a in response.json()["agencies"]] == ["Sol Viagens"]


@pytest.mark.django_db
class TestUserAdmin:
    """Tests for /api/admin/users"""

    def test_create_user(self, api_client, admin, agency):
        """Given a new email, creates an active user."""
        response = as_user(api_client, admin.email).post(
            "/api/admin/users",
            {"email": "new@sol.com", "name": "New", "agency_id": str(agency.id)},
            format="json",
        )

        assert response.status_code == 201
        assert response.json()["status"] == "ACTIVE"
        assert response.json()["agency_id"] == str(agency.id)

    def test_duplicate_email(self, api_client, admin, agent):
        """Given an existing email in another case, returns 409."""
        response = as_user(api_client, admin.email).post(
            "/api/admin/users", {"email": "Agent@Sol.com"}, format="json"
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_EMAIL"

    def test_access_changes_apply_on_next_request(self, api_client, admin, agent):
        """Given a flag change, the user's next request reflects it."""
        as_user(api_client, admin.email).patch(
            f"/api/admin/users/{agent.id}",
            {"flag_exchange": True, "allowed_destinations": ["Atacama"]},
            format="json",
        )

        me = as_user(APIClient(), agent.email).get("/api/me").json()
        assert me["can_access_exchange"] is True

    def test_deactivation_revokes_access(self, api_client, admin, agent):
        """Given a deactivated user, their next request is refused."""
        as_user(api_client, admin.email).patch(
            f"/api/admin/users/{agent.id}", {"status": "INACTIVE"}, format="json"
        )

        assert as_user(APIClient(), agent.email).get("/api/me").status_code == 403

    def test_list_users(self, api_client, admin, agent):
        """Returns users ordered by email."""
        response = as_user(api_client, admin.email).get("/api/admin/users")
        emails = [u["email"] for u in response.json()["users"]]
        assert emails == ["admin@portal.com", "agent@sol.com"]


@pytest.mark.django_db
class TestSimulator:
    """Tests for GET /api/admin/simulator/{agency_id}"""

    def test_prices_catalog_at_agency_rate(self, api_client, admin, agency, tour):
        """Given an agency, returns the catalog at its commission rate."""
        response = as_user(api_client, admin.email).get(f"/api/admin/simulator/{agency.id}")

        assert response.json()["commission_rate"] == "0.1500"
        assert response.json()["products"][0]["summer"]["net_adult"] == "850.00"

    def test_unknown_agency(self, api_client, admin):
        """Given an unknown agency, returns 404."""
        response = as_user(api_client, admin.email).get(
            "/api/admin/simulator/00000000-0000-0000-0000-000000000000"
        )
        assert response.status_code == 404


def write_export(path, price=450):
    path.write_text(
        json.dumps(
            [
                {
                    "id": "recTOUR0000000002",
                    "fields": {
                        "Destino": ["Uyuni"],
                        "Serviço": "Salar de Uyuni",
                        "VER26 ADU": price,
                    },
                }
            ]
        ),
        encoding="utf-8",
    )
    return path


@pytest.mark.django_db
class TestCatalogSync:
    """Tests for catalog synchronization"""

    def test_admin_endpoint_syncs_configured_export(self, api_client, admin, settings, tmp_path):
        """Given a configured export, upserts its tours."""
        settings.PORTAL_CATALOG_EXPORT_PATH = str(write_export(tmp_path / "tours.json"))

        response = as_user(api_client, admin.email).post("/api/admin/catalog/sync")

        assert response.json() == {"count": 1}
        assert models.Tour.objects.get(pk="recTOUR0000000002").summer_adult == Decimal("450.00")

    def test_missing_export_is_unavailable(self, api_client, admin, settings, tmp_path):
        """Given an unreadable export, returns 503."""
        settings.PORTAL_CATALOG_EXPORT_PATH = str(tmp_path / "missing.json")

        response = as_user(api_client, admin.email).post("/api/admin/catalog/sync")

        assert response.status_code == 503

    def test_management_command(self, tmp_path):
        """Given --file, the command upserts and can be re-run."""
        export = write_export(tmp_path / "tours.json")
        call_command("sync_tours", file=str(export))
        call_command("sync_tours", file=str(write_export(export, price=500)))

        tour = models.Tour.objects.get(pk="recTOUR0000000002")
        assert tour.summer_adult == Decimal("500.00")
        assert models.Tour.objects.count() == 1

    def test_management_command_unreadable_file(self, tmp_path):
        with pytest.raises(CommandError):
            call_command("sync_tours", file=str(tmp_path / "missing.json"))
