"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from portal.domain import RequestedUser, Role, Season, UserCapabilities, UserStatus
from portal.domain.errors import (
    DomainError,
    ErrorCode,
    ProductNotFoundError,
    StorageUnavailableError,
    UnauthorizedError,
    ValidationFailedError,
)
from portal.handlers import dependencies
from portal.handlers.authentication import identity_email
from portal.handlers.serializers import (
    AgencyProductSerializer,
    AgencyRegistrationSerializer,
    AgencySerializer,
    CapabilitiesSerializer,
    CartLineSerializer,
    CartQuoteInputSerializer,
    CartTotalsSerializer,
    CommissionInputSerializer,
    NoticeSerializer,
    ReaderSerializer,
    ReadLogSerializer,
    ReservationInputSerializer,
    UserAccessSerializer,
    UserCreateSerializer,
    UserSerializer,
)
from portal.services.agencies import AccessUpdate, AgencyRegistration
from portal.services.cart import aggregate, line_item_for
from portal.services.reservations import ReservationRequest

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorCode.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorCode.STORAGE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.AGENCY_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.PRODUCT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.NOTICE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_EMAIL: status.HTTP_409_CONFLICT,
}


def error_response(exc: DomainError) -> Response:
    body = {"code": exc.code.value, "message": exc.message}
    field = getattr(exc, "field", None)
    if field:
        body["field"] = field
    return Response({"error": body}, status=ERROR_STATUS[exc.code])


def validated(serializer_class, data) -> dict:
    serializer = serializer_class(data=data)
    if not serializer.is_valid():
        field = next(iter(serializer.errors), None)
        raise ValidationFailedError("Invalid request", field=field)
    return serializer.validated_data


class PortalView(APIView):
    """Base view: resolves the caller and maps domain errors."""

    def handle_exception(self, exc):
        if isinstance(exc, DomainError):
            return error_response(exc)
        return super().handle_exception(exc)

    def caller(self, request: Request) -> UserCapabilities:
        return dependencies.capability_service().require(identity_email(request))

    def admin(self, request: Request) -> UserCapabilities:
        capabilities = self.caller(request)
        if not capabilities.is_admin:
            raise UnauthorizedError("Admin access required")
        return capabilities


class MeView(PortalView):
    """Handler for GET /api/me"""

    def get(self, request: Request) -> Response:
        return Response(CapabilitiesSerializer(self.caller(request)).data)


class TariffView(PortalView):
    """Handler for GET /api/tariff"""

    def get(self, request: Request) -> Response:
        capabilities = self.caller(request)
        products = dependencies.pricing_service().tariff_for(capabilities)
        context = {"hide_net": capabilities.is_internal}
        return Response(
            {
                "agency": {
                    "agent_name": capabilities.name or capabilities.email,
                    "agency_name": capabilities.agency_name,
                    "commission_rate": str(capabilities.commission_rate),
                    "can_reserve": capabilities.can_reserve,
                    "is_internal": capabilities.is_internal,
                },
                "products": AgencyProductSerializer(
                    products, many=True, context=context
                ).data,
            }
        )


class CartQuoteView(PortalView):
    """Handler for POST /api/cart/quote"""

    def post(self, request: Request) -> Response:
        capabilities = self.caller(request)
        data = validated(CartQuoteInputSerializer, request.data)

        visible = {
            p.id: p for p in dependencies.pricing_service().tariff_for(capabilities)
        }
        lines = []
        for item in data["items"]:
            product = visible.get(item["product_id"])
            if product is None:
                raise ProductNotFoundError(item["product_id"])
            lines.append(
                line_item_for(
                    product,
                    Season(item["season"]),
                    adults=item["adults"],
                    children=item["children"],
                    infants=item["infants"],
                )
            )
        totals = aggregate(lines, capabilities.commission_rate)
        context = {"hide_net": capabilities.is_internal}
        return Response(
            {
                "lines": CartLineSerializer(lines, many=True).data,
                "totals": CartTotalsSerializer(totals, context=context).data,
            }
        )


class ReservationCreateView(PortalView):
    """Handler for POST /api/reservations"""

    def post(self, request: Request) -> Response:
        capabilities = self.caller(request)
        data = validated(ReservationInputSerializer, request.data)
        submitted = dependencies.reservation_service().submit(
            capabilities,
            ReservationRequest(
                product_id=data["product_id"],
                season=Season(data["season"]),
                travel_date=data["travel_date"],
                adults=data["adults"],
                children=data["children"],
                infants=data["infants"],
                pax_names=data["pax_names"],
            ),
        )
        return Response(
            {
                "id": submitted.id,
                "status": submitted.record.status.value,
                "total_amount": f"{submitted.totals.total:.2f}",
                "commission_amount": f"{submitted.totals.commission:.2f}",
            },
            status=status.HTTP_201_CREATED,
        )


class MuralView(PortalView):
    """Handler for GET /api/mural"""

    def get(self, request: Request) -> Response:
        capabilities = self.caller(request)
        if not capabilities.can_access_mural:
            raise UnauthorizedError("Mural access is not enabled for this user")

        service = dependencies.notice_service()
        try:
            notices = service.list_mural()
            read_logs = service.read_logs_for(str(capabilities.id))
        except StorageUnavailableError:
            logger.exception("Mural fetch failed")
            return Response(
                {
                    "items": [],
                    "read_notice_ids": [],
                    "error": "The mural is temporarily unavailable.",
                }
            )
        return Response(
            {
                "items": NoticeSerializer(notices, many=True).data,
                "read_notice_ids": [log.notice_id for log in read_logs],
                "error": None,
            }
        )


class NoticeConfirmView(PortalView):
    """Handler for POST /api/mural/{notice_id}/confirm"""

    def post(self, request: Request, notice_id: str) -> Response:
        capabilities = self.caller(request)
        if not capabilities.can_access_mural:
            raise UnauthorizedError("Mural access is not enabled for this user")
        log = dependencies.notice_service().confirm(str(capabilities.id), notice_id)
        return Response(ReadLogSerializer(log).data)


class NoticeReadersView(PortalView):
    """Handler for GET /api/mural/{notice_id}/readers"""

    def get(self, request: Request, notice_id: str) -> Response:
        capabilities = self.caller(request)
        if not capabilities.can_access_mural:
            raise UnauthorizedError("Mural access is not enabled for this user")
        readers = dependencies.notice_service().readers_of(
            notice_id,
            is_admin=capabilities.is_admin,
            scope_agency_id=str(capabilities.agency_id) if capabilities.agency_id else None,
            scope_agency_name=capabilities.agency_name,
        )
        return Response({"readers": ReaderSerializer(readers, many=True).data})


class AgencyRegistrationView(PortalView):
    """Handler for POST /api/agencies/register (public)"""

    authentication_classes = []

    def post(self, request: Request) -> Response:
        data = validated(AgencyRegistrationSerializer, request.data)
        requested = tuple(
            RequestedUser(name=u["name"], email=u["email"], phone=u["phone"])
            for u in data.pop("requested_users")
        )
        agency = dependencies.agency_service().register(
            AgencyRegistration(requested_users=requested, **data)
        )
        return Response(AgencySerializer(agency).data, status=status.HTTP_201_CREATED)


class AgencyListView(PortalView):
    """Handler for GET /api/admin/agencies"""

    def get(self, request: Request) -> Response:
        self.admin(request)
        agencies = dependencies.agency_service().list_agencies()
        return Response({"agencies": AgencySerializer(agencies, many=True).data})


class AgencyDetailView(PortalView):
    """Handler for PATCH /api/admin/agencies/{agency_id}"""

    def patch(self, request: Request, agency_id: str) -> Response:
        self.admin(request)
        data = validated(CommissionInputSerializer, request.data)
        agency = dependencies.agency_service().update_commission(
            agency_id, data["commission_rate"]
        )
        return Response(AgencySerializer(agency).data)


class AgencyApproveView(PortalView):
    """Handler for POST /api/admin/agencies/{agency_id}/approve"""

    def post(self, request: Request, agency_id: str) -> Response:
        self.admin(request)
        data = validated(CommissionInputSerializer, request.data)
        agency, users = dependencies.agency_service().approve(
            agency_id, data["commission_rate"]
        )
        return Response(
            {
                "agency": AgencySerializer(agency).data,
                "provisioned_users": UserSerializer(users, many=True).data,
            }
        )


class AgencyRejectView(PortalView):
    """Handler for POST /api/admin/agencies/{agency_id}/reject"""

    def post(self, request: Request, agency_id: str) -> Response:
        self.admin(request)
        agency = dependencies.agency_service().reject(agency_id)
        return Response(AgencySerializer(agency).data)


class UserListView(PortalView):
    """Handler for GET/POST /api/admin/users"""

    def get(self, request: Request) -> Response:
        self.admin(request)
        users = dependencies.user_admin_service().list_users()
        return Response({"users": UserSerializer(users, many=True).data})

    def post(self, request: Request) -> Response:
        self.admin(request)
        data = validated(UserCreateSerializer, request.data)
        user = dependencies.user_admin_service().create_user(
            email=data["email"],
            name=data["name"],
            role=Role(data["role"]),
            agency_id=data["agency_id"],
            flag_reserva=data["flag_reserva"],
            flag_mural=data["flag_mural"],
            flag_exchange=data["flag_exchange"],
            allowed_destinations=tuple(data["allowed_destinations"]),
        )
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


class UserAccessView(PortalView):
    """Handler for PATCH /api/admin/users/{user_id}"""

    def patch(self, request: Request, user_id: str) -> Response:
        self.admin(request)
        data = validated(UserAccessSerializer, request.data)
        update = AccessUpdate(
            name=data.get("name"),
            role=Role(data["role"]) if "role" in data else None,
            status=UserStatus(data["status"]) if "status" in data else None,
            agency_id=data.get("agency_id"),
            flag_reserva=data.get("flag_reserva"),
            flag_mural=data.get("flag_mural"),
            flag_exchange=data.get("flag_exchange"),
            allowed_destinations=(
                tuple(data["allowed_destinations"])
                if "allowed_destinations" in data
                else None
            ),
        )
        user = dependencies.user_admin_service().update_access(user_id, update)
        return Response(UserSerializer(user).data)


class SimulatorView(PortalView):
    """Handler for GET /api/admin/simulator/{agency_id}"""

    def get(self, request: Request, agency_id: str) -> Response:
        self.admin(request)
        rate, products = dependencies.pricing_service().simulate_for_agency(agency_id)
        return Response(
            {
                "commission_rate": str(rate),
                "products": AgencyProductSerializer(products, many=True).data,
            }
        )


class CatalogSyncView(PortalView):
    """Handler for POST /api/admin/catalog/sync"""

    def post(self, request: Request) -> Response:
        self.admin(request)
        count = dependencies.catalog_sync_service().sync()
        return Response({"count": count})
