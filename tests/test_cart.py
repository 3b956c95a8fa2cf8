from decimal import Decimal

import pytest
from pydantic import ValidationError

from drinkshop.domain.cart import Cart, new_item_id
from drinkshop.domain.schemas import LineItem

from conftest import make_item, make_voucher


class TestLineItem:

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            make_item(-1)

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError):
            make_item(1000, 0)

    def test_items_are_frozen(self):
        item = make_item(1000)
        with pytest.raises(ValidationError):
            item.quantity = 5

    def test_id_contains_product(self):
        assert new_item_id("42").startswith("42-")
        assert new_item_id("42") != new_item_id("42")


class TestMutators:

    def test_mutators_return_new_snapshot(self):
        empty = Cart()
        item = make_item(45000, 2)

        cart = empty.add_item(item)

        assert empty.items == ()
        assert cart.items == (item,)

    def test_add_keeps_insertion_order(self):
        a, b, c = make_item(1000), make_item(2000), make_item(3000)
        cart = Cart().add_item(a).add_item(b).add_item(c)
        assert [i.id for i in cart.items] == [a.id, b.id, c.id]

    def test_same_product_twice_creates_two_lines(self):
        first = make_item(45000, 1, product_id="10", size="L", ice=50, sugar=70)
        second = make_item(45000, 1, product_id="10", size="L", ice=50, sugar=70)

        cart = Cart().add_item(first).add_item(second)

        assert len(cart.items) == 2
        assert cart.total_items() == 2

    def test_merge_identical_drink_options(self):
        first = make_item(45000, 1, product_id="10", size="L", ice=50, sugar=70)
        same = make_item(45000, 2, product_id="10", size="L", ice=50, sugar=70)
        other_size = make_item(45000, 1, product_id="10", size="S", ice=50, sugar=70)

        cart = (
            Cart()
            .add_item(first, merge_identical=True)
            .add_item(same, merge_identical=True)
            .add_item(other_size, merge_identical=True)
        )

        assert len(cart.items) == 2
        assert cart.items[0].id == first.id
        assert cart.items[0].quantity == 3

    def test_merge_non_drink_ignores_options(self):
        a = make_item(25000, 1, product_id="11", is_drink=False, size="S")
        b = make_item(25000, 1, product_id="11", is_drink=False, size="L")

        cart = Cart().add_item(a, merge_identical=True).add_item(b, merge_identical=True)

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2

    def test_remove_item(self):
        a, b = make_item(1000), make_item(2000)
        cart = Cart().add_item(a).add_item(b).remove_item(a.id)
        assert cart.get_item(a.id) is None
        assert cart.items == (b,)

    def test_remove_unknown_item_is_noop(self):
        cart = Cart().add_item(make_item(1000))
        assert cart.remove_item("nope") == cart

    def test_set_quantity(self):
        item = make_item(45000, 1)
        cart = Cart().add_item(item).set_quantity(item.id, 4)
        assert cart.get_item(item.id).quantity == 4
        assert cart.subtotal() == Decimal("180000")

    @pytest.mark.parametrize("quantity", [0, -1, -10])
    def test_set_quantity_non_positive_removes(self, quantity):
        item = make_item(45000, 2)
        cart = Cart().add_item(item).set_quantity(item.id, quantity)
        assert cart.get_item(item.id) is None
        assert cart.items == ()

    def test_clear_drops_items_and_voucher(self):
        cart = (
            Cart()
            .add_item(make_item(1000))
            .select_voucher(make_voucher("percent", discount=10))
            .clear()
        )
        assert cart.items == ()
        assert cart.selected_voucher is None

    def test_clear_voucher(self):
        cart = Cart().select_voucher(make_voucher("fixed", discount=1000)).clear_voucher()
        assert cart.selected_voucher is None


class TestDerived:

    def test_invalid_voucher_stays_selected(self):
        item = make_item(45000, 3)
        voucher = make_voucher("fixed", discount=15000, min_order=100000)
        cart = Cart().add_item(item).select_voucher(voucher)

        assert cart.is_voucher_valid()

        cart = cart.set_quantity(item.id, 2)

        assert cart.selected_voucher == voucher
        assert not cart.is_voucher_valid()
        assert cart.checkout_blocked()
        assert cart.discount_amount() == Decimal("0")

    def test_validity_recovers_when_cart_grows(self):
        voucher = make_voucher("shipping", min_order=100000)
        cart = Cart().add_item(make_item(45000, 2)).select_voucher(voucher)
        assert cart.checkout_blocked()

        cart = cart.add_item(make_item(25000))

        assert not cart.checkout_blocked()
        assert cart.shipping_fee() == Decimal("0")

    def test_summary_matches_accessors(self):
        cart = (
            Cart()
            .add_item(make_item(45000, 2))
            .select_voucher(make_voucher("percent", discount=10, max_discount=5000))
        )
        summary = cart.summary()

        assert summary.subtotal == cart.subtotal()
        assert summary.discount_amount == cart.discount_amount()
        assert summary.shipping_fee == cart.shipping_fee()
        assert summary.total == cart.total_price()
        assert summary.total_items == 2

    def test_roundtrip_through_json(self):
        cart = (
            Cart()
            .add_item(make_item(45000, 2, product_id="10", size="L"))
            .select_voucher(make_voucher("percent", discount=10, max_discount=5000))
        )
        restored = Cart.model_validate_json(cart.model_dump_json())

        assert restored == cart
        assert isinstance(restored.items[0], LineItem)
