"""Shared test fixtures for all test modules."""

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from coupon_management.main import app
from coupon_management.models import BxGyCoupon, CartWiseCoupon, ProductWiseCoupon
from coupon_management.storage import CouponStore, get_store

TODAY = date(2026, 1, 15)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def store():
    """Fresh in-memory store for each test."""
    return CouponStore()


@pytest.fixture
def client(store):
    """Test client wired to the per-test store."""
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def cart_wise_coupon():
    return CartWiseCoupon(
        code="CART10",
        expirationDate=TODAY + timedelta(days=30),
        description="10% off orders over 100",
        threshold=100.0,
        discountPercentage=10.0,
    )


@pytest.fixture
def product_wise_coupon():
    return ProductWiseCoupon(
        code="PROD15",
        expirationDate=TODAY + timedelta(days=30),
        description="15% off on Product 1001",
        productId=1001,
        discountPercentage=15.0,
    )


@pytest.fixture
def bxgy_coupon():
    return BxGyCoupon(
        code="BUY2GET1",
        expirationDate=TODAY + timedelta(days=30),
        description="Buy 2 get 1 free on selected items",
        buyProducts={201: 2, 202: 1},
        getProducts={301: 1},
        repetitionLimit=2,
    )
