"""Tests for the in-memory coupon store."""

from datetime import timedelta

import pytest

from coupon_management.errors import DuplicateCouponCode
from coupon_management.models import CouponType


class TestSave:
    def test_assigns_id(self, store, cart_wise_coupon):
        saved = store.save(cart_wise_coupon)
        assert saved.id == 1
        assert saved.code == "CART10"
        assert cart_wise_coupon.id is None

    def test_ids_shared_across_types(self, store, cart_wise_coupon, product_wise_coupon, bxgy_coupon):
        ids = [store.save(c).id for c in (cart_wise_coupon, product_wise_coupon, bxgy_coupon)]
        assert ids == [1, 2, 3]

    def test_default_type_per_variant(self, store, cart_wise_coupon, product_wise_coupon, bxgy_coupon):
        assert store.save(cart_wise_coupon).type == CouponType.CART_WISE
        assert store.save(product_wise_coupon).type == CouponType.PRODUCT_WISE
        assert store.save(bxgy_coupon).type == CouponType.BXGY

    def test_duplicate_code_rejected_across_types(self, store, cart_wise_coupon, product_wise_coupon):
        store.save(cart_wise_coupon)
        product_wise_coupon.code = cart_wise_coupon.code
        with pytest.raises(DuplicateCouponCode):
            store.save(product_wise_coupon)

    def test_resave_keeps_id(self, store, cart_wise_coupon):
        saved = store.save(cart_wise_coupon)
        saved.description = "updated"
        assert store.find_by_id(CouponType.CART_WISE, saved.id).description == "10% off orders over 100"

        resaved = store.save(saved)
        assert resaved.id == saved.id
        assert store.find_by_id(CouponType.CART_WISE, saved.id).description == "updated"

    def test_unissued_id_replaced(self, store, cart_wise_coupon, product_wise_coupon, bxgy_coupon):
        store.save(cart_wise_coupon)
        bxgy = store.save(bxgy_coupon.model_copy(update={"id": 2}))
        product = store.save(product_wise_coupon)

        assert bxgy.id != product.id
        assert store.find_any(bxgy.id).type == CouponType.BXGY
        assert store.find_any(product.id).type == CouponType.PRODUCT_WISE

    def test_id_of_other_type_replaced(self, store, cart_wise_coupon, bxgy_coupon):
        cart_wise = store.save(cart_wise_coupon)
        bxgy = store.save(bxgy_coupon.model_copy(update={"id": cart_wise.id}))

        assert bxgy.id != cart_wise.id
        assert store.find_by_id(CouponType.BXGY, cart_wise.id) is None
        assert store.find_any(cart_wise.id).type == CouponType.CART_WISE


class TestFind:
    def test_find_by_id_scoped_to_type(self, store, cart_wise_coupon):
        saved = store.save(cart_wise_coupon)
        assert store.find_by_id(CouponType.CART_WISE, saved.id) == saved
        assert store.find_by_id(CouponType.BXGY, saved.id) is None

    def test_find_any(self, store, cart_wise_coupon, bxgy_coupon):
        store.save(cart_wise_coupon)
        saved = store.save(bxgy_coupon)
        assert store.find_any(saved.id) == saved
        assert store.find_any(99) is None

    def test_find_by_code(self, store, product_wise_coupon):
        saved = store.save(product_wise_coupon)
        assert store.find_by_code("PROD15") == saved
        assert store.find_by_code("NOPE") is None

    def test_reads_return_copies(self, store, cart_wise_coupon):
        saved = store.save(cart_wise_coupon)
        saved.isActive = False
        store.find_any(saved.id).isActive = False
        store.find_all(CouponType.CART_WISE)[0].isActive = False
        store.find_by_code("CART10").isActive = False

        assert store.find_by_id(CouponType.CART_WISE, saved.id).isActive is True

    def test_find_all(self, store, cart_wise_coupon, product_wise_coupon):
        store.save(cart_wise_coupon)
        store.save(product_wise_coupon)
        assert [c.code for c in store.find_all(CouponType.CART_WISE)] == ["CART10"]
        assert store.find_all(CouponType.BXGY) == []

    def test_find_all_active(self, store, cart_wise_coupon, today):
        active = store.save(cart_wise_coupon)
        store.save(cart_wise_coupon.model_copy(update={"code": "OFF", "isActive": False}))
        store.save(cart_wise_coupon.model_copy(update={"code": "OLD", "expirationDate": today - timedelta(days=1)}))
        store.save(cart_wise_coupon.model_copy(update={"code": "TODAY", "expirationDate": today}))

        assert store.find_all_active(CouponType.CART_WISE, today) == [active]

    def test_clear(self, store, cart_wise_coupon):
        store.save(cart_wise_coupon)
        store.clear()
        assert store.find_all(CouponType.CART_WISE) == []
        assert store.save(cart_wise_coupon).id == 1
