"""Tariff pricing: net price derivation and per-caller product projection."""

import logging
from decimal import Decimal
from typing import Iterable

from portal.domain import (
    AgencyId,
    AgencyProduct,
    CatalogProduct,
    PaxPrices,
    ProjectedPrices,
    UserCapabilities,
)
from portal.domain.errors import AgencyNotFoundError, ValidationFailedError
from portal.domain.value_objects import normalize_destination, round_currency
from portal.stores.interfaces import AccessStore, CatalogStore

logger = logging.getLogger(__name__)


def net_price(sale_price: Decimal, commission_rate: Decimal) -> Decimal:
    """Amount the agency owes for one pax: sale reduced by its commission.

    Rounded half-up to cents. A zero rate returns the sale price untouched.
    """
    if commission_rate == 0:
        return sale_price
    return round_currency(sale_price * (Decimal("1") - commission_rate))


def _project_season(prices: PaxPrices, commission_rate: Decimal) -> ProjectedPrices:
    return ProjectedPrices(
        sale_adult=prices.adult.amount,
        net_adult=net_price(prices.adult.amount, commission_rate),
        sale_child=prices.child.amount,
        net_child=net_price(prices.child.amount, commission_rate),
        sale_infant=prices.infant.amount,
        net_infant=net_price(prices.infant.amount, commission_rate),
    )


def project(product: CatalogProduct, commission_rate: Decimal) -> AgencyProduct:
    """Price a catalog product for a caller's commission rate."""
    return AgencyProduct(
        product=product,
        summer=_project_season(product.summer, commission_rate),
        winter=_project_season(product.winter, commission_rate),
    )


def filter_by_destinations(
    products: Iterable[CatalogProduct], allowed_destinations: Iterable[str]
) -> list[CatalogProduct]:
    """Keep products whose destination is in the allow-list.

    An empty allow-list means every destination is visible.
    """
    allowed = {normalize_destination(d) for d in allowed_destinations if d.strip()}
    if not allowed:
        return list(products)
    return [p for p in products if normalize_destination(p.destination) in allowed]


class PricingService:
    """Builds the priced tariff shown to a caller."""

    def __init__(self, catalog: CatalogStore, access: AccessStore) -> None:
        self._catalog = catalog
        self._access = access

    def tariff_for(self, capabilities: UserCapabilities) -> list[AgencyProduct]:
        """Return the catalog visible to the caller, priced at their rate."""
        visible = filter_by_destinations(
            self._catalog.list_products(), capabilities.allowed_destinations
        )
        products = [project(p, capabilities.commission_rate) for p in visible]
        products.sort(key=lambda p: (p.destination.lower(), p.name.lower()))
        logger.debug(
            "Tariff built",
            extra={"user_id": str(capabilities.id), "count": len(products)},
        )
        return products

    def simulate_for_agency(self, agency_id: str) -> tuple[Decimal, list[AgencyProduct]]:
        """Price the whole catalog at a given agency's rate.

        Raises:
            ValidationFailedError: If the agency_id is not a valid UUID.
            AgencyNotFoundError: If the agency does not exist.
        """
        try:
            parsed = AgencyId.from_string(agency_id)
        except ValueError as exc:
            raise ValidationFailedError("Invalid agency id", field="agency_id") from exc
        agency = self._access.find_agency_by_id(parsed)
        if agency is None:
            raise AgencyNotFoundError(agency_id)
        rate = agency.commission_rate
        return rate, [project(p, rate) for p in self._catalog.list_products()]
