"""Tests for the cart and order service layer."""

import uuid
from dataclasses import replace
from datetime import timedelta
from decimal import Decimal

import pytest
from django.db import DatabaseError
from django.utils import timezone

from storefront.catalog.loader import Catalog
from storefront.core.auth import AuthContext
from storefront.core.exceptions import (
    CartNotFound,
    CheckoutIncomplete,
    EmptyCart,
    ItemNotFound,
    ItemNotInCart,
    OrderNotFound,
    Unauthorized,
)
from storefront.store import services
from storefront.store.models import Cart, CartItem, Order, OrderItem


def cart_quantities(user):
    return {
        line.product_id: line.quantity
        for line in CartItem.objects.filter(cart__user=user)
    }


@pytest.mark.django_db
class TestAddItem:
    def test_creates_cart_lazily(self, auth, user):
        assert not Cart.objects.filter(user=user).exists()

        cart = services.add_item(auth, 1)

        assert cart.user_id == user.pk
        line = cart.items.get()
        assert line.product_id == 1
        assert line.quantity == 1

    def test_copies_catalog_snapshot(self, auth):
        cart = services.add_item(auth, 7)

        line = cart.items.get()
        assert line.name == "Test Beans"
        assert line.price == Decimal("12.50")
        assert line.image == "/static/test/beans.jpg"
        assert line.category == "coffee"

    def test_repeated_adds_count_up(self, auth, user):
        for _ in range(5):
            services.add_item(auth, 1)

        assert cart_quantities(user) == {1: 5}

    def test_keeps_insertion_order(self, auth):
        services.add_item(auth, 7)
        services.add_item(auth, 1)
        services.add_item(auth, 7)

        lines = services.get_cart_lines(auth)
        assert [line.product_id for line in lines] == [7, 1]

    def test_unknown_product(self, auth, user):
        with pytest.raises(ItemNotFound):
            services.add_item(auth, 999)

        assert not Cart.objects.filter(user=user).exists()

    def test_requires_shopper(self):
        with pytest.raises(Unauthorized):
            services.add_item(AuthContext.anonymous(), 1)

    def test_price_is_snapshot(self, auth, user, catalog):
        services.add_item(auth, 1)
        repriced = Catalog(
            item_list=tuple(replace(item, price=Decimal("99.00")) for item in catalog.items()),
            category_list=catalog.categories(),
        )

        services.add_item(auth, 1, catalog=repriced)

        line = CartItem.objects.get(cart__user=user)
        assert line.quantity == 2
        assert line.price == Decimal("9.99")


@pytest.mark.django_db
class TestUpdateItem:
    def test_increment(self, auth, user):
        services.add_item(auth, 1)

        services.update_item(auth, 1, services.INCREMENT)

        assert cart_quantities(user) == {1: 2}

    def test_decrement(self, auth, user):
        services.add_item(auth, 1)
        services.add_item(auth, 1)

        services.update_item(auth, 1, services.DECREMENT)

        assert cart_quantities(user) == {1: 1}

    def test_decrement_at_one_is_noop(self, auth, user):
        services.add_item(auth, 1)

        services.update_item(auth, 1, services.DECREMENT)
        services.update_item(auth, 1, services.DECREMENT)

        assert cart_quantities(user) == {1: 1}

    def test_no_cart(self, auth):
        with pytest.raises(CartNotFound):
            services.update_item(auth, 1, services.INCREMENT)

    def test_product_not_in_cart(self, auth):
        services.add_item(auth, 1)

        with pytest.raises(ItemNotInCart):
            services.update_item(auth, 2, services.INCREMENT)

    def test_invalid_action(self, auth):
        services.add_item(auth, 1)

        with pytest.raises(ValueError, match="Invalid action"):
            services.update_item(auth, 1, "remove")


@pytest.mark.django_db
class TestCheckout:
    def test_places_order_and_empties_cart(self, auth, user):
        services.add_item(auth, 1)
        services.add_item(auth, 1)

        order = services.checkout(auth)

        assert order.sub_total == Decimal("19.98")
        assert Order.objects.filter(user=user).count() == 1
        items = list(order.items.all())
        assert [(i.product_id, i.quantity, i.price) for i in items] == [(1, 2, Decimal("9.99"))]
        assert cart_quantities(user) == {}
        # The cart document itself stays
        assert Cart.objects.filter(user=user).exists()

    def test_sub_total_over_several_lines(self, auth):
        services.add_item(auth, 1)
        services.add_item(auth, 2)
        services.add_item(auth, 7)
        services.add_item(auth, 7)

        order = services.checkout(auth)

        assert order.sub_total == Decimal("9.99") + Decimal("25.00") + Decimal("25.00")

    def test_order_items_match_cart_snapshot(self, auth):
        services.add_item(auth, 7)
        services.add_item(auth, 2)
        before = [
            (line.product_id, line.name, line.price, line.image, line.category, line.quantity)
            for line in services.get_cart_lines(auth)
        ]

        order = services.checkout(auth)

        after = [
            (item.product_id, item.name, item.price, item.image, item.category, item.quantity)
            for item in order.items.all()
        ]
        assert after == before

    def test_sub_total_ignores_catalog_changes(self, auth, catalog, monkeypatch):
        services.add_item(auth, 1)
        services.add_item(auth, 1)
        repriced = Catalog(
            item_list=tuple(replace(item, price=Decimal("1.00")) for item in catalog.items()),
            category_list=catalog.categories(),
        )
        monkeypatch.setattr(services, "get_catalog", lambda: repriced)

        order = services.checkout(auth)

        assert order.sub_total == Decimal("19.98")

    def test_no_cart(self, auth):
        with pytest.raises(EmptyCart):
            services.checkout(auth)

        assert Order.objects.count() == 0

    def test_empty_cart(self, auth, user):
        services.add_item(auth, 1)
        services.checkout(auth)

        with pytest.raises(EmptyCart):
            services.checkout(auth)

        assert Order.objects.filter(user=user).count() == 1

    def test_order_failure_leaves_cart_alone(self, auth, user, monkeypatch):
        services.add_item(auth, 1)

        def fail(*args, **kwargs):
            raise DatabaseError("disk full")

        monkeypatch.setattr(OrderItem.objects, "bulk_create", fail)

        with pytest.raises(DatabaseError):
            services.checkout(auth)

        assert Order.objects.count() == 0
        assert cart_quantities(user) == {1: 1}

    def test_cart_clear_failure_is_reported(self, auth, user, monkeypatch):
        services.add_item(auth, 1)

        class BrokenCartItems:
            class objects:
                @staticmethod
                def filter(*args, **kwargs):
                    raise DatabaseError("connection lost")

        monkeypatch.setattr(services, "CartItem", BrokenCartItems)

        with pytest.raises(CheckoutIncomplete) as excinfo:
            services.checkout(auth)

        order = Order.objects.get(user=user)
        assert excinfo.value.order_id == order.pk
        assert cart_quantities(user) == {1: 1}

    def test_cart_is_empty_once_order_is_placed(self, auth, user, monkeypatch):
        services.add_item(auth, 1)
        services.add_item(auth, 2)
        place_order_log = services.logger.info
        second_attempts = []

        def checkout_again(*args, **kwargs):
            place_order_log(*args, **kwargs)
            if second_attempts:
                return
            try:
                services.checkout(auth)
            except EmptyCart as e:
                second_attempts.append(e)
            else:
                second_attempts.append(None)

        monkeypatch.setattr(services.logger, "info", checkout_again)

        services.checkout(auth)

        assert isinstance(second_attempts[0], EmptyCart)
        assert Order.objects.filter(user=user).count() == 1
        assert cart_quantities(user) == {}


@pytest.mark.django_db
class TestOrderHistory:
    def test_list_orders_oldest_first(self, auth):
        services.add_item(auth, 1)
        first = services.checkout(auth)
        Order.objects.filter(pk=first.pk).update(created_at=timezone.now() - timedelta(days=1))
        services.add_item(auth, 2)
        second = services.checkout(auth)

        assert [order.pk for order in services.list_orders(auth)] == [first.pk, second.pk]

    def test_list_orders_only_own(self, auth, other_auth):
        services.add_item(other_auth, 1)
        services.checkout(other_auth)

        assert services.list_orders(auth) == []

    def test_get_order(self, auth):
        services.add_item(auth, 1)
        order = services.checkout(auth)

        assert services.get_order(auth, order.pk) == order
        assert services.get_order(auth, str(order.pk)) == order

    def test_other_users_order_looks_missing(self, auth, other_auth):
        services.add_item(other_auth, 1)
        order = services.checkout(other_auth)

        with pytest.raises(OrderNotFound) as foreign:
            services.get_order(auth, order.pk)
        with pytest.raises(OrderNotFound) as missing:
            services.get_order(auth, uuid.uuid4())

        assert foreign.value.message == missing.value.message
        assert foreign.value.status_code == missing.value.status_code

    def test_malformed_order_id(self, auth):
        with pytest.raises(OrderNotFound):
            services.get_order(auth, "not-an-order")


@pytest.mark.django_db
class TestReorder:
    def test_merges_quantities_by_product(self, auth, user):
        services.add_item(auth, 7)
        services.add_item(auth, 7)
        order = services.checkout(auth)
        for _ in range(3):
            services.add_item(auth, 7)

        services.reorder(auth, order.pk)

        assert cart_quantities(user) == {7: 5}

    def test_appends_missing_lines(self, auth, user):
        services.add_item(auth, 7)
        services.add_item(auth, 2)
        order = services.checkout(auth)
        services.add_item(auth, 1)

        services.reorder(auth, order.pk)

        assert cart_quantities(user) == {1: 1, 7: 1, 2: 1}
        reordered = CartItem.objects.get(cart__user=user, product_id=7)
        assert reordered.category == "coffee"
        assert reordered.price == Decimal("12.50")

    def test_creates_cart_when_missing(self, auth, user):
        services.add_item(auth, 1)
        order = services.checkout(auth)
        Cart.objects.filter(user=user).delete()

        services.reorder(auth, order.pk)

        assert cart_quantities(user) == {1: 1}

    def test_leaves_order_untouched(self, auth):
        services.add_item(auth, 1)
        order = services.checkout(auth)

        services.reorder(auth, order.pk)
        services.reorder(auth, order.pk)

        assert Order.objects.count() == 1
        item = OrderItem.objects.get(order=order)
        assert item.quantity == 1

    def test_other_users_order(self, auth, other_auth, user):
        services.add_item(other_auth, 1)
        order = services.checkout(other_auth)

        with pytest.raises(OrderNotFound):
            services.reorder(auth, order.pk)

        assert not Cart.objects.filter(user=user).exists()


def test_calculate_subtotal_rounds_to_cents():
    lines = [
        CartItem(price=Decimal("0.10"), quantity=3),
        CartItem(price=Decimal("9.99"), quantity=2),
    ]

    assert services.calculate_subtotal(lines) == Decimal("20.28")


def test_calculate_subtotal_empty():
    assert services.calculate_subtotal([]) == Decimal("0.00")
