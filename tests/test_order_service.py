"""Checkout: cart -> order transition."""
import threading
from decimal import Decimal

import pytest
from sqlalchemy import delete, select, func, update

from conftest import DELIVERY, make_cart, make_gift_box, make_product, make_user
from gifty.data.database import SessionLocal
from gifty.data.models import CartModel, OrderModel
from gifty.domain.errors import (
    CheckoutInProgressError,
    ConcurrencyError,
    EmptyCartError,
    InvalidDeliveryInfoError,
    InvalidStatusError,
    NotFoundError,
    ProductUnavailableError,
)
from gifty.repos.cart_repo import CartRepo
from gifty.repos.product_repo import ProductRepo
from gifty.services.cart_service import CartService
from gifty.services.order_service import OrderService, missing_delivery_fields


@pytest.fixture
def service(db, lock_service, notifications):
    return OrderService(db, lock_service=lock_service, notification_service=notifications)


def order_count(db):
    return db.execute(select(func.count(OrderModel.id))).scalar_one()


class TestPlaceOrder:
    def test_total_is_lines_plus_box_price(self, db, service):
        user = make_user(db)
        a = make_product(db, "A", "10.00")
        b = make_product(db, "B", "5.50")
        box = make_gift_box(db, base_price="3.00")
        make_cart(db, user, [(a, 2), (b, 1)], gift_box=box)

        order = service.place_order(user.id, DELIVERY)

        assert order.total_price == Decimal("28.50")
        assert order.gift_box_id == box.id
        assert order.status == "pending"
        assert [(i.name, i.price, i.quantity) for i in order.items] == [
            ("A", Decimal("10.00"), 2),
            ("B", Decimal("5.50"), 1),
        ]

    def test_total_without_box(self, db, service):
        user = make_user(db)
        a = make_product(db, "A", "19.99")
        make_cart(db, user, [(a, 3)])

        order = service.place_order(user.id, DELIVERY)

        assert order.total_price == Decimal("59.97")
        assert order.gift_box_id is None

    def test_delivery_is_stored(self, db, service):
        user = make_user(db)
        make_cart(db, user, [(make_product(db), 1)])

        order = service.place_order(user.id, {**DELIVERY, "date": "2026-12-24"})

        assert order.delivery == {**DELIVERY, "date": "2026-12-24"}

    def test_cart_is_deleted(self, db, service):
        user = make_user(db)
        box = make_gift_box(db)
        make_cart(db, user, [(make_product(db), 1)], gift_box=box)

        service.place_order(user.id, DELIVERY)

        assert CartRepo(db).get_cart_by_user(user.id) is None
        view = CartService(db).get_cart(user.id)
        assert view["items"] == []
        assert view["gift_box"] is None

    def test_snapshot_survives_catalog_changes(self, db, service):
        user = make_user(db)
        a = make_product(db, "A", "10.00")
        make_cart(db, user, [(a, 1)])
        order = service.place_order(user.id, DELIVERY)

        a.price = Decimal("20.00")
        a.name = "A renamed"
        db.commit()

        db.expire_all()
        reread = service.get_order(order.id)
        assert reread.items[0].price == Decimal("10.00")
        assert reread.items[0].name == "A"
        assert reread.total_price == Decimal("10.00")

    def test_no_cart_is_rejected(self, db, service):
        user = make_user(db)

        with pytest.raises(EmptyCartError):
            service.place_order(user.id, DELIVERY)
        assert order_count(db) == 0

    def test_deleted_owner_is_rejected(self, db, service):
        user = make_user(db)
        make_cart(db, user, [(make_product(db), 1)])
        user_id = user.id
        db.delete(user)
        db.commit()

        with pytest.raises(NotFoundError):
            service.place_order(user_id, DELIVERY)
        assert order_count(db) == 0

    def test_cart_without_items_is_rejected(self, db, service):
        user = make_user(db)
        make_cart(db, user, [], gift_box=make_gift_box(db))

        with pytest.raises(EmptyCartError):
            service.place_order(user.id, DELIVERY)
        assert order_count(db) == 0
        assert CartRepo(db).get_cart_by_user(user.id) is not None

    def test_invalid_delivery_leaves_cart_untouched(self, db, service):
        user = make_user(db)
        a = make_product(db, "A")
        make_cart(db, user, [(a, 2)])

        with pytest.raises(InvalidDeliveryInfoError) as exc:
            service.place_order(user.id, {**DELIVERY, "name": ""})

        assert exc.value.missing_fields == ["name"]
        assert "name" in str(exc.value)
        assert order_count(db) == 0
        cart = CartRepo(db).get_cart_by_user(user.id)
        assert [(i.product_id, i.quantity) for i in cart.items] == [(a.id, 2)]

    def test_empty_cart_is_checked_before_delivery(self, db, service):
        user = make_user(db)

        with pytest.raises(EmptyCartError):
            service.place_order(user.id, None)

    def test_missing_product_is_rejected(self, db, service):
        user = make_user(db)
        a = make_product(db, "A")
        gone = make_product(db, "Gone")
        make_cart(db, user, [(a, 1), (gone, 1)])
        gone_id = gone.id
        db.delete(gone)
        db.commit()

        with pytest.raises(ProductUnavailableError) as exc:
            service.place_order(user.id, DELIVERY)

        assert exc.value.product_ids == [gone_id]
        assert order_count(db) == 0
        assert len(CartRepo(db).get_cart_by_user(user.id).items) == 2

    def test_inactive_product_is_rejected(self, db, service):
        user = make_user(db)
        hidden = make_product(db, "Hidden", is_active=False)
        make_cart(db, user, [(hidden, 1)])

        with pytest.raises(ProductUnavailableError):
            service.place_order(user.id, DELIVERY)
        assert order_count(db) == 0

    def test_deleted_gift_box_counts_as_no_box(self, db, service):
        user = make_user(db)
        a = make_product(db, "A", "10.00")
        box = make_gift_box(db, base_price="3.00")
        make_cart(db, user, [(a, 1)], gift_box=box)
        db.delete(box)
        db.commit()

        order = service.place_order(user.id, DELIVERY)

        assert order.total_price == Decimal("10.00")
        assert order.gift_box_id is None

    def test_second_checkout_sees_empty_cart(self, db, service):
        user = make_user(db)
        make_cart(db, user, [(make_product(db), 1)])

        service.place_order(user.id, DELIVERY)
        with pytest.raises(EmptyCartError):
            service.place_order(user.id, DELIVERY)

        assert order_count(db) == 1

    def test_notification_is_sent(self, db, service, notifications):
        user = make_user(db)
        make_cart(db, user, [(make_product(db), 1)])

        order = service.place_order(user.id, DELIVERY)

        assert notifications.placed == [(user.id, order.id)]

    def test_no_notification_on_failure(self, db, service, notifications):
        user = make_user(db)

        with pytest.raises(EmptyCartError):
            service.place_order(user.id, DELIVERY)
        assert notifications.placed == []

    def test_lock_is_released_after_failure(self, db, service, redis_client):
        user = make_user(db)

        with pytest.raises(EmptyCartError):
            service.place_order(user.id, DELIVERY)
        assert redis_client.get(f"checkout:{user.id}:lock") is None


class TestCheckoutSerialization:
    def test_busy_lock_gives_up(self, db, service, redis_client):
        user = make_user(db)
        make_cart(db, user, [(make_product(db), 1)])
        redis_client.set(f"checkout:{user.id}:lock", "someone-else")

        with pytest.raises(CheckoutInProgressError):
            service.place_order(user.id, DELIVERY)

        assert order_count(db) == 0
        assert CartRepo(db).get_cart_by_user(user.id) is not None
        # the other holder's lock is left alone
        assert redis_client.get(f"checkout:{user.id}:lock") == "someone-else"

    def test_waits_for_lock_to_be_released(self, db, service, redis_client):
        user = make_user(db)
        make_cart(db, user, [(make_product(db), 1)])
        key = f"checkout:{user.id}:lock"
        redis_client.set(key, "someone-else")

        timer = threading.Timer(0.02, lambda: redis_client.delete(key))
        timer.start()
        try:
            order = service.place_order(user.id, DELIVERY)
        finally:
            timer.cancel()

        assert order.id is not None
        assert redis_client.get(key) is None

    def test_concurrent_checkouts_create_one_order(self, db, lock_service, notifications):
        user = make_user(db)
        make_cart(db, user, [(make_product(db), 1)])
        barrier = threading.Barrier(2)
        outcomes = []

        def checkout():
            session = SessionLocal()
            try:
                svc = OrderService(session, lock_service=lock_service, notification_service=notifications)
                barrier.wait()
                svc.place_order(user.id, DELIVERY)
                outcomes.append("ok")
            except EmptyCartError:
                outcomes.append("empty")
            finally:
                session.close()

        threads = [threading.Thread(target=checkout) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(outcomes) == ["empty", "ok"]
        assert order_count(db) == 1

    def _touch_cart_while_pricing(self, monkeypatch, change):
        """Runs `change` in a second session right after checkout reads the cart."""
        real = ProductRepo.get_products_by_ids

        def get_products_by_ids(repo, product_ids):
            other = SessionLocal()
            try:
                change(other)
                other.commit()
            finally:
                other.close()
            return real(repo, product_ids)

        monkeypatch.setattr(ProductRepo, "get_products_by_ids", get_products_by_ids)

    def test_cart_changed_during_checkout(self, db, service, monkeypatch):
        user = make_user(db)
        a = make_product(db, "A")
        cart = make_cart(db, user, [(a, 1)])
        self._touch_cart_while_pricing(
            monkeypatch,
            lambda other: other.execute(
                update(CartModel).where(CartModel.id == cart.id).values(version=CartModel.version + 1)
            ),
        )

        with pytest.raises(ConcurrencyError) as exc:
            service.place_order(user.id, DELIVERY)

        assert not isinstance(exc.value, CheckoutInProgressError)
        assert order_count(db) == 0
        current = CartRepo(db).get_cart_by_user(user.id)
        assert [(i.product_id, i.quantity) for i in current.items] == [(a.id, 1)]

    def test_cart_deleted_during_checkout(self, db, service, monkeypatch):
        user = make_user(db)
        cart = make_cart(db, user, [(make_product(db), 1)])
        self._touch_cart_while_pricing(
            monkeypatch,
            lambda other: other.execute(delete(CartModel).where(CartModel.id == cart.id)),
        )

        with pytest.raises(EmptyCartError):
            service.place_order(user.id, DELIVERY)

        assert order_count(db) == 0

    def test_stale_cart_version_blocks_delete(self, db):
        user = make_user(db)
        cart = make_cart(db, user, [(make_product(db), 1)])
        repo = CartRepo(db)

        # someone else bumps the version behind our back
        db.execute(
            update(CartModel)
            .where(CartModel.id == cart.id)
            .values(version=CartModel.version + 1)
            .execution_options(synchronize_session=False)
        )
        db.commit()

        assert repo.delete_cart_if_version(cart) == 0
        db.rollback()
        assert repo.get_cart_by_user(user.id) is not None


class TestOrderQueries:
    def test_own_orders_newest_first(self, db, service):
        user = make_user(db)
        other = make_user(db, name="Bob", email="bob@example.com")
        product = make_product(db)

        make_cart(db, user, [(product, 1)])
        first = service.place_order(user.id, DELIVERY)
        make_cart(db, user, [(product, 2)])
        second = service.place_order(user.id, DELIVERY)
        make_cart(db, other, [(product, 1)])
        service.place_order(other.id, DELIVERY)

        orders = service.list_own_orders(user.id)

        assert [o.id for o in orders] == [second.id, first.id]

    def test_all_orders_include_every_owner(self, db, service):
        product = make_product(db)
        for n in range(3):
            user = make_user(db, name=f"U{n}", email=f"u{n}@example.com")
            make_cart(db, user, [(product, 1)])
            service.place_order(user.id, DELIVERY)

        orders = service.list_all_orders()

        assert len(orders) == 3
        assert {o.user.email for o in orders} == {"u0@example.com", "u1@example.com", "u2@example.com"}

    def test_get_missing_order(self, service):
        with pytest.raises(NotFoundError):
            service.get_order(999)


class TestStatusTransitions:
    def _order(self, db, service):
        user = make_user(db)
        make_cart(db, user, [(make_product(db), 1)])
        return service.place_order(user.id, DELIVERY)

    def test_pending_to_delivered_directly(self, db, service):
        order = self._order(db, service)

        updated = service.update_status(order.id, "delivered")

        assert updated.status == "delivered"
        db.expire_all()
        assert service.get_order(order.id).status == "delivered"

    def test_backwards_transition_is_allowed(self, db, service):
        order = self._order(db, service)
        service.update_status(order.id, "shipped")

        assert service.update_status(order.id, "pending").status == "pending"

    def test_unknown_status(self, db, service):
        order = self._order(db, service)

        with pytest.raises(InvalidStatusError):
            service.update_status(order.id, "lost")

    def test_missing_order(self, service):
        with pytest.raises(NotFoundError):
            service.update_status(42, "shipped")

    def test_status_change_does_not_touch_lines(self, db, service):
        order = self._order(db, service)
        before = [(i.name, i.price, i.quantity) for i in order.items]

        updated = service.update_status(order.id, "preparing")

        assert [(i.name, i.price, i.quantity) for i in updated.items] == before
        assert updated.total_price == order.total_price

    def test_status_notification(self, db, service, notifications):
        order = self._order(db, service)

        service.update_status(order.id, "shipped")

        assert notifications.status_changes == [(order.user_id, order.id, "shipped")]


@pytest.mark.parametrize(
    "delivery, missing",
    [
        (None, ["name", "phone", "city", "address"]),
        ({}, ["name", "phone", "city", "address"]),
        (DELIVERY, []),
        ({**DELIVERY, "phone": "   "}, ["phone"]),
        ({**DELIVERY, "city": None, "address": ""}, ["city", "address"]),
        ({"name": "X", "phone": "1", "city": "C", "address": "A", "date": ""}, []),
    ],
)
def test_missing_delivery_fields(delivery, missing):
    assert missing_delivery_fields(delivery) == missing
