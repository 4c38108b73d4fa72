"""Cart aggregation for booking simulations and reservations."""

from decimal import Decimal
from typing import Iterable

from portal.domain import AgencyProduct, CartLineItem, CartTotals, PaxCount, Season
from portal.domain.value_objects import round_currency


def aggregate(line_items: Iterable[CartLineItem], commission_rate: Decimal) -> CartTotals:
    """Sum sale amounts and derive commission and net.

    Commission and net are each rounded to cents where they are derived;
    the total is not rounded, so commission + net may differ from it by a cent.
    """
    items = list(line_items)
    if not items:
        zero = Decimal("0")
        return CartTotals(total=zero, commission=zero, net=zero)

    total = sum((item.subtotal for item in items), Decimal("0"))
    commission = round_currency(total * commission_rate)
    net = round_currency(total - commission)
    return CartTotals(total=total, commission=commission, net=net)


def line_item_for(
    product: AgencyProduct,
    season: Season,
    adults: int = 0,
    children: int = 0,
    infants: int = 0,
) -> CartLineItem:
    """Build a line item from the sale prices of the chosen season."""
    prices = product.prices_for(season)
    return CartLineItem(
        product_id=product.id,
        product_name=product.name,
        destination=product.destination,
        sale_adult=prices.sale_adult,
        sale_child=prices.sale_child,
        sale_infant=prices.sale_infant,
        adults=PaxCount(adults),
        children=PaxCount(children),
        infants=PaxCount(infants),
    )
