# storefront/domain/pricing.py
"""
Kalkulator cen: czyste funkcje, bez I/O.

Wszystkie kwoty jako Decimal zaokraglone do groszy. Rabat nigdy nie
przekracza sumy czesciowej + dostawy, wiec total nie bywa ujemny.
"""
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Iterable, Mapping, Optional

from pydantic import BaseModel

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")


class DeliveryZone(str, Enum):
    WEST = "west"
    INTERIOR = "interior"


DELIVERY_FEES = {
    DeliveryZone.WEST: Decimal("20.00"),
    DeliveryZone.INTERIOR: Decimal("70.00"),
}


class PriceSummary(BaseModel):
    subtotal: Decimal
    delivery_fee: Decimal
    discount_percent: int
    discount: Decimal
    total: Decimal


def _money(value) -> Decimal:
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def line_total(line) -> Decimal:
    unit = line.sale_price if line.sale_price is not None else line.price
    return _money(unit * line.quantity)


def subtotal(lines: Iterable) -> Decimal:
    return _money(sum((line_total(line) for line in lines), ZERO))


def delivery_fee(zone: Optional[DeliveryZone]) -> Decimal:
    if zone is None:
        return ZERO
    return DELIVERY_FEES[DeliveryZone(zone)]


def discount_amount(sub: Decimal, discount_percent: int) -> Decimal:
    return _money(Decimal(sub) * Decimal(discount_percent) / Decimal(100))


def grand_total(sub: Decimal, fee: Decimal, discount: Decimal) -> Decimal:
    discount = min(discount, sub + fee)
    return _money(sub + fee - discount)


def summarize(lines: Iterable, zone: Optional[DeliveryZone], discount_percent: int = 0) -> PriceSummary:
    sub = subtotal(lines)
    fee = delivery_fee(zone)
    discount = min(discount_amount(sub, discount_percent), sub + fee)

    return PriceSummary(
        subtotal=sub,
        delivery_fee=fee,
        discount_percent=discount_percent,
        discount=discount,
        total=grand_total(sub, fee, discount),
    )


def lookup_discount(code: Optional[str], codes: Mapping[str, int]) -> Optional[int]:
    """Procent rabatu dla kodu albo None. Kody porownywane bez wielkosci liter."""
    if not code:
        return None
    return codes.get(code.strip().lower())
