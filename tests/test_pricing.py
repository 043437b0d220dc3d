"""Tests for the pricing calculator."""

from decimal import Decimal

import pytest

from conftest import make_line
from storefront.domain import pricing
from storefront.domain.pricing import DeliveryZone


def test_line_total_uses_sale_price():
    assert pricing.line_total(make_line(price=Decimal("100"), sale_price=Decimal("80"), quantity=2)) == Decimal("160.00")


def test_line_total_without_sale_price():
    assert pricing.line_total(make_line(sale_price=None, quantity=3)) == Decimal("300.00")


def test_subtotal_ignores_list_price_when_on_sale():
    a = [make_line(price=Decimal("100"), sale_price=Decimal("80"))]
    b = [make_line(price=Decimal("999"), sale_price=Decimal("80"))]
    assert pricing.subtotal(a) == pricing.subtotal(b) == Decimal("160.00")


def test_subtotal_sums_lines():
    lines = [make_line(quantity=1), make_line(color="gold", sale_price=None, quantity=2)]
    assert pricing.subtotal(lines) == Decimal("280.00")


def test_subtotal_empty():
    assert pricing.subtotal([]) == Decimal("0.00")


@pytest.mark.parametrize("zone,fee", [
    (None, Decimal("0")),
    (DeliveryZone.WEST, Decimal("20")),
    (DeliveryZone.INTERIOR, Decimal("70")),
    ("interior", Decimal("70")),
])
def test_delivery_fee(zone, fee):
    assert pricing.delivery_fee(zone) == fee


def test_checkout_scenario():
    summary = pricing.summarize([make_line()], DeliveryZone.WEST, 10)
    assert summary.subtotal == Decimal("160.00")
    assert summary.delivery_fee == Decimal("20.00")
    assert summary.discount == Decimal("16.00")
    assert summary.total == Decimal("164.00")


@pytest.mark.parametrize("zone", [None, DeliveryZone.WEST, DeliveryZone.INTERIOR])
@pytest.mark.parametrize("percent", [0, 10, 25, 100])
def test_total_is_subtotal_plus_fee_minus_discount(zone, percent):
    s = pricing.summarize([make_line(quantity=3)], zone, percent)
    assert s.total == s.subtotal + s.delivery_fee - s.discount
    assert s.total >= 0


def test_discount_never_exceeds_subtotal_plus_fee():
    assert pricing.grand_total(Decimal("10"), Decimal("0"), Decimal("50")) == Decimal("0.00")


def test_discount_amount_rounds_to_cents():
    assert pricing.discount_amount(Decimal("33.33"), 10) == Decimal("3.33")


class TestDiscountLookup:
    codes = {"welcome": 10}

    def test_case_insensitive(self):
        assert pricing.lookup_discount("WELCOME", self.codes) == 10
        assert pricing.lookup_discount(" Welcome ", self.codes) == 10

    def test_unknown(self):
        assert pricing.lookup_discount("free", self.codes) is None

    def test_empty(self):
        assert pricing.lookup_discount("", self.codes) is None
        assert pricing.lookup_discount(None, self.codes) is None
