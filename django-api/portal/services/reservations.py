"""Reservation intake: validate, price, and store a reservation request."""

import logging
from dataclasses import dataclass
from datetime import date

from portal.domain import (
    CartTotals,
    ReservationRecord,
    ReservationStatus,
    Season,
    UserCapabilities,
)
from portal.domain.errors import (
    ProductNotFoundError,
    UnauthorizedError,
    ValidationFailedError,
)
from portal.services.cart import aggregate, line_item_for
from portal.services.pricing import filter_by_destinations, project
from portal.stores.interfaces import CatalogStore, ReservationStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReservationRequest:
    """What the client may supply. Agent identity is never part of it."""

    product_id: str
    season: Season
    travel_date: date
    adults: int = 0
    children: int = 0
    infants: int = 0
    pax_names: str = ""


@dataclass(frozen=True)
class SubmittedReservation:
    id: str
    record: ReservationRecord
    totals: CartTotals


class ReservationService:
    def __init__(self, catalog: CatalogStore, reservations: ReservationStore) -> None:
        self._catalog = catalog
        self._reservations = reservations

    def _validate(self, request: ReservationRequest) -> None:
        if not request.product_id or not request.product_id.strip():
            raise ValidationFailedError("Missing product_id", field="product_id")
        for field in ("adults", "children", "infants"):
            value = getattr(request, field)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValidationFailedError(
                    f"{field} must be a non-negative integer", field=field
                )
        if request.adults + request.children + request.infants == 0:
            raise ValidationFailedError("Select at least one passenger", field="adults")

    def submit(
        self, capabilities: UserCapabilities, request: ReservationRequest
    ) -> SubmittedReservation:
        """Store a pre-reservation on behalf of the caller.

        Raises:
            UnauthorizedError: If the caller cannot reserve.
            ValidationFailedError: If the request is malformed.
            ProductNotFoundError: If the product is unknown or outside the
                caller's destinations.
        """
        if not capabilities.can_reserve:
            raise UnauthorizedError("Reservations are not enabled for this user")
        self._validate(request)

        product = self._catalog.get_product(request.product_id.strip())
        if product is None or not filter_by_destinations(
            [product], capabilities.allowed_destinations
        ):
            raise ProductNotFoundError(request.product_id)

        rate = capabilities.commission_rate
        item = line_item_for(
            project(product, rate),
            request.season,
            adults=request.adults,
            children=request.children,
            infants=request.infants,
        )
        totals = aggregate([item], rate)

        record = ReservationRecord(
            product_name=product.name,
            destination=product.destination,
            agent_name=capabilities.name or capabilities.email,
            agent_email=capabilities.email,
            travel_date=request.travel_date,
            adults=request.adults,
            children=request.children,
            infants=request.infants,
            pax_names=request.pax_names.strip(),
            total_amount=totals.total,
            commission_amount=totals.commission,
            status=ReservationStatus.PRE_RESERVATION,
        )
        reservation_id = self._reservations.create_reservation(record)
        logger.info(
            "Reservation submitted",
            extra={"reservation_id": reservation_id, "product_id": product.id},
        )
        return SubmittedReservation(id=reservation_id, record=record, totals=totals)
