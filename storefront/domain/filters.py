# storefront/domain/filters.py
"""Filtry po stronie klienta: lista zamowien w panelu admina i produkty kategorii."""
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

ALL_STATUSES = "all"


def _same_day(created_at, day: date) -> bool:
    if isinstance(created_at, datetime):
        return created_at.date() == day
    return created_at == day


def filter_orders(
    orders: Iterable,
    search_text: str = "",
    status: Optional[str] = ALL_STATUSES,
    day: Optional[date] = None,
) -> List:
    """
    Wszystkie warunki musza byc spelnione:
    - fragment tekstu w imieniu albo mailu (bez wielkosci liter)
    - status rowny albo "all"
    - ten sam dzien kalendarzowy utworzenia albo brak daty
    """
    needle = (search_text or "").lower()
    status = status or ALL_STATUSES

    def matches(order) -> bool:
        matches_search = needle in order.full_name.lower() or needle in order.email.lower()
        order_status = getattr(order.status, "value", order.status)
        matches_status = status == ALL_STATUSES or order_status == status
        matches_date = day is None or _same_day(order.created_at, day)
        return matches_search and matches_status and matches_date

    return [order for order in orders if matches(order)]


def status_counts(orders: Iterable) -> dict:
    counts = {"delivered": 0, "shipped": 0}
    for order in orders:
        value = getattr(order.status, "value", order.status)
        if value in counts:
            counts[value] += 1
    return counts


def filter_products(
    products: Iterable,
    search_term: str = "",
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
    sizes: Sequence[str] = (),
    colors: Sequence[str] = (),
) -> List:
    needle = (search_term or "").lower()

    def matches(product) -> bool:
        if needle not in product.name.lower():
            return False
        if min_price is not None and product.price < min_price:
            return False
        if max_price is not None and product.price > max_price:
            return False
        if sizes and not any(size in (product.sizes or []) for size in sizes):
            return False
        if colors:
            names = {c["name"] for c in (product.colors or [])}
            if not any(color in names for color in colors):
                return False
        return True

    return [p for p in products if matches(p)]
