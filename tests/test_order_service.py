"""Tests for order submission."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.exc import OperationalError

from conftest import FakeNotificationService, make_line
from storefront.data.models import OrderModel
from storefront.domain.errors import (
    OrderNotFound,
    OrderPersistenceError,
    OrderValidationError,
    SubmissionInProgress,
)
from storefront.domain.pricing import DeliveryZone
from storefront.repos.order_repo import OrderRepo
from storefront.services.order_service import (
    OrderService,
    expected_arrival_label,
    generate_tracking_number,
)
from storefront.services.tracking_service import OrderTrackingService


@pytest.fixture
def service(db, cart_store, lock_service, notifications):
    return OrderService(db, cart_store, lock_service, notifications)


@pytest.fixture
def cart(cart_store):
    cart_store.add("s1", make_line())
    return cart_store.get("s1")


def order_count(db):
    return db.query(OrderModel).count()


class TestValidation:
    def test_empty_cart_rejected_before_persistence(self, db, service, shipping, lock_service):
        with pytest.raises(OrderValidationError) as exc:
            service.submit("s1", [], shipping, DeliveryZone.WEST)
        assert "cart" in exc.value.errors
        assert order_count(db) == 0
        assert lock_service.held == {}

    @pytest.mark.parametrize("email", ["a@b", "no-at.example.com", "a b@c.de", ""])
    def test_malformed_email(self, db, service, shipping, cart, email):
        bad = shipping.model_copy(update={"email": email})
        with pytest.raises(OrderValidationError) as exc:
            service.submit("s1", cart, bad, DeliveryZone.WEST)
        assert "email" in exc.value.errors
        assert order_count(db) == 0

    @pytest.mark.parametrize("field", ["full_name", "address", "phone"])
    def test_blank_required_field(self, service, shipping, cart, field):
        bad = shipping.model_copy(update={field: "   "})
        with pytest.raises(OrderValidationError) as exc:
            service.submit("s1", cart, bad, DeliveryZone.WEST)
        assert field in exc.value.errors

    def test_zone_required(self, db, service, shipping, cart):
        with pytest.raises(OrderValidationError) as exc:
            service.submit("s1", cart, shipping, None)
        assert "zone" in exc.value.errors
        assert order_count(db) == 0

    def test_validation_error_is_value_error(self, service, shipping):
        with pytest.raises(ValueError):
            service.submit("s1", [], shipping, DeliveryZone.WEST)


class TestSubmit:
    def test_creates_pending_order_and_clears_cart(self, db, service, shipping, cart, cart_store):
        result = service.submit("s1", cart, shipping, DeliveryZone.WEST, 10)

        assert cart_store.get("s1") == []
        assert result.notification_queued is True
        assert result.replayed is False

        view = OrderTrackingService(db).load(result.order_id)
        order = view["order"]
        assert order["status"] == "pending"
        assert order["subtotal"] == Decimal("160.00")
        assert order["delivery_fee"] == Decimal("20.00")
        assert order["discount"] == Decimal("16.00")
        assert order["total"] == Decimal("164.00")
        assert order["payment_method"] == "Cash on Delivery"
        assert order["tracking_number"] == result.tracking_number

    def test_snapshot_items_use_charged_price(self, db, service, shipping, cart):
        result = service.submit("s1", cart, shipping, DeliveryZone.WEST)
        item = service.get_order(result.order_id)["items"][0]
        assert item["price"] == Decimal("80.00")
        assert item["quantity"] == 2
        assert item["color"] == "red"
        assert item["size"] == "M"
        assert item["image"] == "/img/ring-red.jpg"

    def test_expected_arrival_is_seven_days_out(self, db, service, shipping, cart):
        result = service.submit("s1", cart, shipping, DeliveryZone.WEST)
        order = db.get(OrderModel, result.order_id)
        assert order.expected_arrival == expected_arrival_label(order.created_at)

    def test_notification_gets_order_payload(self, service, shipping, cart, notifications):
        result = service.submit("s1", cart, shipping, DeliveryZone.INTERIOR)
        payload, email = notifications.sent[0]
        assert email == "layla@example.com"
        assert payload["id"] == result.order_id
        assert payload["delivery_fee"] == "70.00"
        assert payload["items"][0]["name"] == "Silver ring"

    def test_notification_failure_keeps_order(self, db, cart_store, lock_service, shipping, cart):
        svc = OrderService(db, cart_store, lock_service, FakeNotificationService(fail=True))
        result = svc.submit("s1", cart, shipping, DeliveryZone.WEST)

        assert result.notification_queued is False
        assert order_count(db) == 1
        assert cart_store.get("s1") == []

    def test_later_cart_changes_do_not_affect_submission(self, service, shipping, cart, cart_store):
        snapshot = cart_store.get("s1")
        cart_store.add("s1", make_line(color="gold"))
        result = service.submit("s1", snapshot, shipping, DeliveryZone.WEST)
        assert len(service.get_order(result.order_id)["items"]) == 1

    def test_lock_released_after_success(self, service, shipping, cart, lock_service):
        service.submit("s1", cart, shipping, DeliveryZone.WEST)
        assert lock_service.held == {}
        assert lock_service.released == ["s1"]


class TestFailures:
    def test_submission_in_progress(self, db, service, shipping, cart, lock_service, cart_store):
        lock_service.held["s1"] = "other-request"
        with pytest.raises(SubmissionInProgress):
            service.submit("s1", cart, shipping, DeliveryZone.WEST)
        assert order_count(db) == 0
        assert len(cart_store.get("s1")) == 1

    def test_persistence_failure_keeps_cart(self, db, service, shipping, cart, cart_store, lock_service, notifications, monkeypatch):
        def boom(self, order):
            raise OperationalError("INSERT INTO orders", {}, Exception("db down"))

        monkeypatch.setattr(OrderRepo, "create_order", boom)

        with pytest.raises(OrderPersistenceError):
            service.submit("s1", cart, shipping, DeliveryZone.WEST)

        assert len(cart_store.get("s1")) == 1
        assert notifications.sent == []
        assert lock_service.held == {}


class TestIdempotency:
    def test_same_key_returns_same_order(self, db, service, shipping, cart, cart_store, notifications):
        first = service.submit("s1", cart, shipping, DeliveryZone.WEST, idempotency_key="k-1")
        # cart was cleared by the first submission
        second = service.submit("s1", cart_store.get("s1"), shipping, DeliveryZone.WEST, idempotency_key="k-1")

        assert second.order_id == first.order_id
        assert second.replayed is True
        assert order_count(db) == 1
        assert len(notifications.sent) == 1

    def test_different_keys_create_two_orders(self, db, service, shipping, cart):
        service.submit("s1", cart, shipping, DeliveryZone.WEST, idempotency_key="k-1")
        service.submit("s1", cart, shipping, DeliveryZone.WEST, idempotency_key="k-2")
        assert order_count(db) == 2

    def test_replay_from_another_session_keeps_that_cart(self, db, service, shipping, cart, cart_store):
        first = service.submit("s1", cart, shipping, DeliveryZone.WEST, idempotency_key="k-1")
        cart_store.add("s2", make_line(color="gold"))

        replay = service.submit("s2", cart_store.get("s2"), shipping, DeliveryZone.WEST, idempotency_key="k-1")

        assert replay.order_id == first.order_id
        assert replay.replayed is True
        assert len(cart_store.get("s2")) == 1

    def test_order_remembers_its_session(self, db, service, shipping, cart):
        result = service.submit("s1", cart, shipping, DeliveryZone.WEST)
        assert db.get(OrderModel, result.order_id).session_id == "s1"

    def test_lock_release_failure_keeps_order(self, db, service, shipping, cart, lock_service, monkeypatch):
        def down(session_id, token):
            raise RedisConnectionError("redis down")

        monkeypatch.setattr(lock_service, "release_checkout_lock", down)
        result = service.submit("s1", cart, shipping, DeliveryZone.WEST)
        assert order_count(db) == 1
        assert result.replayed is False


def test_get_order_not_found(service):
    with pytest.raises(OrderNotFound):
        service.get_order("missing")


def test_tracking_number_format():
    number = generate_tracking_number()
    assert number.startswith("TK-")
    assert len(number) == 11
    assert number[3:].isalnum() and number[3:] == number[3:].upper()


def test_expected_arrival_label():
    created = datetime(2026, 10, 19, 23, 30, tzinfo=timezone.utc)
    assert expected_arrival_label(created) == date(2026, 10, 26).isoformat()
